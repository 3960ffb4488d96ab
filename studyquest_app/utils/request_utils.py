"""Helpers for reading and validating request payloads with marshmallow."""
from typing import Any, Dict, Mapping, Optional

from flask import request
from marshmallow import Schema
from marshmallow import ValidationError as SchemaValidationError

from ..core.error_handlers import ValidationError


def load_payload(schema: Schema, data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Validate ``data`` with ``schema``; errors become a 400 ValidationError."""
    if data is None:
        raise ValidationError('Request body must be a JSON object')
    try:
        return schema.load(data)
    except SchemaValidationError as e:
        raise ValidationError('Invalid request payload', errors=e.messages) from e


def load_json(schema: Schema) -> Dict[str, Any]:
    """Validate the JSON body of the current request."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = None
    return load_payload(schema, data)


def load_form(schema: Schema) -> Dict[str, Any]:
    """Validate the form fields of a multipart request."""
    return load_payload(schema, request.form.to_dict())
