# File: studyquest_app/config.py
# MỤC ĐÍCH: Cấu hình ứng dụng đọc từ biến môi trường (.env được nạp bởi python-dotenv).

import os

from dotenv import load_dotenv

# Thư mục gốc của dự án (chứa studyquest_app/)
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

load_dotenv(os.path.join(BASE_DIR, '.env'))

# File database SQLite mặc định cho môi trường phát triển
DATABASE_PATH = os.path.join(BASE_DIR, "database", "studyquest.db")


class Config:
    """
    Lớp cấu hình cho ứng dụng Flask.
    """
    # Khóa bí mật để ký session cookie và bearer token
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a_very_secret_key_for_studyquest'

    # Postgres khi triển khai thật, SQLite khi phát triển
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Nhà cung cấp LLM: 'gemini' hoặc 'huggingface'
    AI_PROVIDER = os.environ.get('AI_PROVIDER', 'gemini')
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY')
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.0-flash-lite-001')
    HUGGINGFACE_API_KEY = os.environ.get('HUGGINGFACE_API_KEY')
    HUGGINGFACE_MODEL = os.environ.get('HUGGINGFACE_MODEL', 'google/gemma-7b-it')
    AI_MAX_OUTPUT_TOKENS = int(os.environ.get('AI_MAX_OUTPUT_TOKENS', 4096))

    # Thời hạn của bearer token (giây)
    AUTH_TOKEN_MAX_AGE = int(os.environ.get('AUTH_TOKEN_MAX_AGE', 7 * 24 * 3600))

    # Quiz
    QUIZ_CANDIDATE_POOL = int(os.environ.get('QUIZ_CANDIDATE_POOL', 50))

    # Nội dung nguồn được lưu kèm câu hỏi (số ký tự đầu tiên)
    SOURCE_CONTENT_PREVIEW_CHARS = 1000

    # Giới hạn kích thước file tải lên (PDF)
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_TO_FILE = os.environ.get('LOG_TO_FILE', 'true').lower() == 'true'

    # Đảm bảo thư mục database tồn tại khi ứng dụng khởi chạy
    db_dir = os.path.dirname(DATABASE_PATH)
    if not os.path.exists(db_dir):
        os.makedirs(db_dir)
