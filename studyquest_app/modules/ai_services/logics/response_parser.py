"""
Response Parser - Pure functions to clean and parse AI outputs.
"""
import json
import re
from typing import Any, Dict, Optional


class ResponseParser:
    """Utility to clean and structure AI responses."""

    @staticmethod
    def clean_markdown(text: str) -> str:
        """
        Remove markdown code fences from text.
        Example: ```json ... ``` -> ...
        """
        if not text:
            return ""

        # ^```\w*\s*  -> opening fence with optional language tag
        # \s*```$     -> closing fence
        cleaned = re.sub(r'^```\w*\s*', '', text.strip())
        cleaned = re.sub(r'\s*```$', '', cleaned)
        return cleaned.strip()

    @staticmethod
    def extract_json(text: str) -> Optional[Dict[str, Any]]:
        """
        Attempt to extract a JSON object from text.
        Text might be wrapped in ```json ... ```, surrounded by prose, or raw JSON.
        Returns None when no JSON object can be recovered.
        """
        if not text:
            return None

        candidates = [text, ResponseParser.clean_markdown(text)]

        start = text.find('{')
        end = text.rfind('}')
        if start != -1 and end > start:
            candidates.append(text[start:end + 1])

        for candidate in candidates:
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            # Top-level arrays are not accepted: every schema is an object
            if isinstance(parsed, dict):
                return parsed

        return None
