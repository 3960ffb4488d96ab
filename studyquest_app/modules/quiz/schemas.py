from marshmallow import EXCLUDE, Schema, fields, validate

DIFFICULTIES = ('easy', 'medium', 'hard')


class QuizRequestBase(Schema):
    class Meta:
        unknown = EXCLUDE


class StartQuizSchema(QuizRequestBase):
    subject = fields.Str(required=True, validate=validate.Length(min=1, max=120))
    question_count = fields.Int(
        data_key='questionCount', load_default=10, validate=validate.Range(min=1, max=50)
    )
    preferred_difficulty = fields.Str(
        data_key='preferredDifficulty', load_default='medium', validate=validate.OneOf(DIFFICULTIES)
    )


class SubmitAnswerSchema(QuizRequestBase):
    quiz_session_id = fields.Int(required=True, strict=False)
    question_id = fields.Int(required=True, strict=False)
    user_answer = fields.Str(required=True)
    time_taken = fields.Float(load_default=0, allow_none=True, validate=validate.Range(min=0))


class CompleteQuizSchema(QuizRequestBase):
    quiz_session_id = fields.Int(required=True, strict=False)
