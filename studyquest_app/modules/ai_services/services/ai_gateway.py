"""
AI Gateway - Unified entry point for all AI interactions.
"""
import json
from typing import Optional, Type, TypeVar

from flask import current_app
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from studyquest_app.core.error_handlers import UpstreamGenerationError
from studyquest_app.core.signals import ai_token_used
from ..logics.prompt_manager import JSON_INSTRUCTIONS
from ..logics.response_parser import ResponseParser
from .service_manager import AIServiceManager

SchemaT = TypeVar('SchemaT', bound=BaseModel)


class AIGateway:
    """
    Unified AI Service Gateway.

    Responsibilities:
    1. Attach the output schema to the prompt
    2. Dispatch to the configured client (via AIServiceManager)
    3. Parse and validate the response (via ResponseParser and pydantic)
    4. Audit token usage (via signals)

    Every failure surfaces as UpstreamGenerationError; nothing is retried.
    """

    @staticmethod
    def _estimate_tokens(text: str) -> int:
        """Rough estimation of tokens (char/4)."""
        if not text:
            return 0
        return len(text) // 4

    @staticmethod
    def generate_structured(
        schema: Type[SchemaT],
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        feature: str,
        user_id: Optional[int] = None,
    ) -> SchemaT:
        """
        Ask the model for a JSON document and validate it against ``schema``.
        """
        prompt = user_prompt + JSON_INSTRUCTIONS.format(
            schema=json.dumps(schema.model_json_schema())
        )

        try:
            client = AIServiceManager.get_service()
        except ValueError as e:
            current_app.logger.error(f"AIGateway: Không thể khởi tạo AI client cho '{feature}': {e}")
            raise UpstreamGenerationError(str(e), feature=feature) from e

        success, raw_result = client.generate_content(
            prompt,
            item_info=feature,
            system_instruction=system_prompt,
            temperature=temperature,
            json_mode=True,
        )
        if not success:
            raise UpstreamGenerationError(raw_result or 'AI generation failed', feature=feature)

        payload = ResponseParser.extract_json(raw_result)
        if payload is None:
            current_app.logger.warning(
                f"AIGateway: '{feature}' trả về dữ liệu không phải JSON: {raw_result[:200]!r}"
            )
            raise UpstreamGenerationError('AI response was not valid JSON', feature=feature)

        try:
            result = schema.model_validate(payload)
        except SchemaValidationError as e:
            current_app.logger.warning(
                f"AIGateway: '{feature}' không khớp schema {schema.__name__}: {e.error_count()} lỗi"
            )
            raise UpstreamGenerationError('AI response did not match the expected schema', feature=feature) from e

        ai_token_used.send(
            None,
            user_id=user_id,
            feature=feature,
            provider=getattr(client, 'provider', 'unknown'),
            model=getattr(client, 'model_name', 'unknown'),
            input_tokens=AIGateway._estimate_tokens(system_prompt + prompt),
            output_tokens=AIGateway._estimate_tokens(raw_result),
        )

        return result
