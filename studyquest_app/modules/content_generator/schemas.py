from marshmallow import EXCLUDE, Schema, fields, validate

DIFFICULTIES = ('easy', 'medium', 'hard')
QUESTION_TYPES = ('mcq', 'true_false', 'conceptual', 'application', 'mixed')

# --- Base Schemas ---

class GenerationRequestBase(Schema):
    """Base schema for all generation requests."""

    class Meta:
        unknown = EXCLUDE

    subject = fields.Str(required=True, validate=validate.Length(min=1, max=120))
    difficulty = fields.Str(load_default='medium', validate=validate.OneOf(DIFFICULTIES))

# --- Specific Schemas ---

class GenerateQuestionsSchema(GenerationRequestBase):
    content = fields.Str(required=True, validate=validate.Length(min=1))
    question_type = fields.Str(
        data_key='questionType', load_default='mixed', validate=validate.OneOf(QUESTION_TYPES)
    )
    count = fields.Int(load_default=5, validate=validate.Range(min=1, max=20))


class DocumentUploadSchema(GenerationRequestBase):
    # Multipart form fields arrive as strings; marshmallow casts them
    question_count = fields.Int(
        data_key='questionCount', load_default=10, validate=validate.Range(min=1, max=50)
    )


class SummarizeNotesSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    content = fields.Str(required=True, validate=validate.Length(min=1))
    subject = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=120))
