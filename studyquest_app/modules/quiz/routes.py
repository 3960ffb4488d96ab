from flask import jsonify
from flask_login import current_user, login_required

from studyquest_app.core.error_handlers import handle_api_errors
from studyquest_app.utils.request_utils import load_json
from . import quiz_bp
from .schemas import CompleteQuizSchema, StartQuizSchema, SubmitAnswerSchema
from .services.session_service import QuizSessionService


@quiz_bp.route('/start-quiz', methods=['POST'])
@login_required
@handle_api_errors('Failed to start quiz')
def start_quiz():
    """Chọn câu hỏi thích ứng và mở một phiên quiz mới."""
    data = load_json(StartQuizSchema())
    result = QuizSessionService.start_quiz(
        current_user.user_id,
        data['subject'],
        question_count=data['question_count'],
        preferred_difficulty=data['preferred_difficulty'],
    )
    return jsonify(result)


@quiz_bp.route('/submit-answer', methods=['POST'])
@login_required
@handle_api_errors('Failed to submit answer')
def submit_answer():
    """Chấm một câu trả lời và trả về phản hồi của AI."""
    data = load_json(SubmitAnswerSchema())
    result = QuizSessionService.submit_answer(
        current_user.user_id,
        data['quiz_session_id'],
        data['question_id'],
        data['user_answer'],
        time_taken=data['time_taken'],
    )
    return jsonify(result)


@quiz_bp.route('/complete-quiz', methods=['POST'])
@login_required
@handle_api_errors('Failed to complete quiz')
def complete_quiz():
    """Kết thúc phiên quiz, phân tích kết quả và cộng điểm."""
    data = load_json(CompleteQuizSchema())
    result = QuizSessionService.complete_quiz(current_user.user_id, data['quiz_session_id'])
    return jsonify(result)
