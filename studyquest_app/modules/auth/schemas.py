from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema


class SignupSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.Str(required=True, validate=validate.Length(min=3, max=80))
    email = fields.Email(required=True, validate=validate.Length(max=120))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6, max=128))
    display_name = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=120))


class LoginSchema(Schema):
    """Accepts either ``username`` or ``email`` as the login identifier."""

    class Meta:
        unknown = EXCLUDE

    username = fields.Str(load_default=None)
    email = fields.Str(load_default=None)
    password = fields.Str(required=True, load_only=True)

    @validates_schema
    def require_identifier(self, data, **kwargs):
        if not (data.get('username') or data.get('email')):
            raise ValidationError('username or email is required', field_name='username')
