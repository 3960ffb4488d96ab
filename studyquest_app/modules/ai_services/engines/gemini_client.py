# File: studyquest_app/modules/ai_services/engines/gemini_client.py
# MỤC ĐÍCH: Client gọi Gemini API (google-generativeai). Một lần gọi cho mỗi yêu cầu, không retry.

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from flask import current_app


class GeminiClient:
    """
    Mô tả: Client gửi prompt đến Gemini API và trả về tuple (success, text).
    """
    provider = 'gemini'

    def __init__(self, api_key, model_name='gemini-2.0-flash-lite-001', max_output_tokens=4096):
        """
        Args:
            api_key (str): Gemini API key.
            model_name (str): Tên model Gemini cần dùng.
            max_output_tokens (int): Giới hạn token đầu ra.
        """
        if not api_key:
            raise ValueError("GEMINI_API_KEY chưa được cấu hình.")

        self.api_key = api_key
        self.model_name = model_name
        self.max_output_tokens = max_output_tokens
        current_app.logger.info(f"Gemini Client đã được khởi tạo với model '{self.model_name}'.")

    def generate_content(self, prompt, item_info="N/A", system_instruction=None,
                         temperature=None, json_mode=False):
        """
        Mô tả: Gửi một prompt đến Gemini API.
        Returns:
            tuple(bool, str): (True, text) khi thành công, (False, thông báo lỗi) khi thất bại.
        """
        generation_config = {'max_output_tokens': self.max_output_tokens}
        if temperature is not None:
            generation_config['temperature'] = temperature
        if json_mode:
            generation_config['response_mime_type'] = 'application/json'

        current_app.logger.info(
            f"GeminiClient: Gửi yêu cầu '{item_info}' tới model '{self.model_name}' "
            f"(temperature={temperature})"
        )

        try:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(
                self.model_name,
                system_instruction=system_instruction,
                generation_config=generation_config,
            )
            response = model.generate_content(prompt)

            if response.parts:
                return True, response.text

            feedback = response.prompt_feedback
            error_msg = f"AI không thể tạo nội dung. Phản hồi: {feedback}"
            current_app.logger.warning(f"GeminiClient: Phản hồi trống cho '{item_info}'. {error_msg}")
            return False, error_msg

        except google_exceptions.PermissionDenied as e:
            current_app.logger.error(f"GeminiClient: API key bị từ chối (PermissionDenied): {e}")
            return False, "Gemini API key bị từ chối."

        except google_exceptions.ResourceExhausted as e:
            current_app.logger.warning(f"GeminiClient: Hết hạn mức (429): {e}")
            return False, "Hết hạn mức Quota (ResourceExhausted)."

        except google_exceptions.GoogleAPIError as e:
            current_app.logger.error(f"GeminiClient: Lỗi Google API: {e}")
            return False, f"Lỗi Google API: {e}"

        except Exception as e:
            current_app.logger.error(f"GeminiClient: Lỗi call API: {e}", exc_info=True)
            return False, f"Lỗi không xác định: {e}"
