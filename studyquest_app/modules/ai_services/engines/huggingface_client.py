# File: studyquest_app/modules/ai_services/engines/huggingface_client.py
# MỤC ĐÍCH: Client kết nối với Hugging Face Inference API (chat completion).

from flask import current_app
from huggingface_hub import InferenceClient


class HuggingFaceClient:
    """
    Mô tả: Client gửi yêu cầu đến Hugging Face Inference API, cùng giao diện với GeminiClient.
    """
    provider = 'huggingface'

    def __init__(self, api_key, model_name='google/gemma-7b-it', max_output_tokens=4096):
        if not api_key:
            raise ValueError("HUGGINGFACE_API_KEY chưa được cấu hình.")

        self.api_key = api_key
        self.model_name = model_name
        self.max_output_tokens = max_output_tokens
        current_app.logger.info(f"HuggingFace Client đã được khởi tạo với model '{self.model_name}'.")

    def generate_content(self, prompt, item_info="N/A", system_instruction=None,
                         temperature=None, json_mode=False):
        """
        Mô tả: Gửi prompt dạng chat và trả về tuple (success, text).
        ``json_mode`` chỉ được thể hiện qua prompt vì không phải model nào cũng hỗ trợ response_format.
        """
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        current_app.logger.info(
            f"HuggingFaceClient: Gửi yêu cầu '{item_info}' tới model '{self.model_name}'"
        )

        try:
            client = InferenceClient(model=self.model_name, token=self.api_key)
            chat_response = client.chat_completion(
                messages,
                max_tokens=self.max_output_tokens,
                temperature=temperature if temperature is not None else 0.7,
            )
            if chat_response.choices and chat_response.choices[0].message:
                content = chat_response.choices[0].message.content
                if content:
                    return True, content

            current_app.logger.warning(f"HuggingFaceClient: Phản hồi trống cho '{item_info}'.")
            return False, "AI trả về phản hồi trống."

        except Exception as e:
            error_str = str(e)
            if "401" in error_str or "Unauthorized" in error_str:
                current_app.logger.error("HuggingFaceClient: API key không hợp lệ (401).")
            elif "429" in error_str:
                current_app.logger.warning("HuggingFaceClient: Rate limit (429).")
            else:
                current_app.logger.error(f"HuggingFaceClient: Lỗi gọi HF API: {e}", exc_info=True)
            return False, f"Lỗi gọi HF API: {error_str}"
