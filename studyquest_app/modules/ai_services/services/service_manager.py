# File: studyquest_app/modules/ai_services/services/service_manager.py
# MỤC ĐÍCH: Quản lý và cung cấp instance của AI client dựa trên cấu hình ứng dụng.

import threading

from flask import current_app

from ..engines.gemini_client import GeminiClient
from ..engines.huggingface_client import HuggingFaceClient

PROVIDERS = {
    'gemini': (GeminiClient, 'GEMINI_API_KEY', 'GEMINI_MODEL'),
    'huggingface': (HuggingFaceClient, 'HUGGINGFACE_API_KEY', 'HUGGINGFACE_MODEL'),
}


class AIServiceManager:
    _lock = threading.Lock()
    _current_signature = None
    _service_instance = None

    @classmethod
    def get_service(cls):
        """
        Mô tả: Factory method trả về client của nhà cung cấp được cấu hình (AI_PROVIDER).
        Instance được tái sử dụng cho tới khi cấu hình thay đổi.
        Raises:
            ValueError: nhà cung cấp không hợp lệ hoặc thiếu API key.
        """
        config = current_app.config
        provider = (config.get('AI_PROVIDER') or 'gemini').lower()
        if provider not in PROVIDERS:
            raise ValueError(f"AI_PROVIDER không hợp lệ: '{provider}'")

        client_class, key_name, model_name = PROVIDERS[provider]
        signature = (provider, config.get(key_name), config.get(model_name))

        with cls._lock:
            if cls._service_instance is None or cls._current_signature != signature:
                current_app.logger.info(
                    f"AIServiceManager: Khởi tạo client '{provider}' với model '{signature[2]}'."
                )
                cls._service_instance = client_class(
                    config.get(key_name),
                    model_name=config.get(model_name),
                    max_output_tokens=config.get('AI_MAX_OUTPUT_TOKENS', 4096),
                )
                cls._current_signature = signature

        return cls._service_instance

    @classmethod
    def reset(cls):
        """Drop the cached client (used when configuration changes at runtime)."""
        with cls._lock:
            cls._service_instance = None
            cls._current_signature = None
