from flask import jsonify, request
from flask_login import current_user, login_required

from studyquest_app.core.error_handlers import ValidationError, handle_api_errors
from studyquest_app.utils.request_utils import load_form, load_json
from . import content_generator_bp
from .schemas import DocumentUploadSchema, GenerateQuestionsSchema, SummarizeNotesSchema
from .services.generator_service import ContentGeneratorService


@content_generator_bp.route('/generate-questions', methods=['POST'])
@login_required
@handle_api_errors('Failed to generate questions')
def generate_questions():
    """Sinh câu hỏi từ nội dung văn bản và lưu vào ngân hàng câu hỏi."""
    data = load_json(GenerateQuestionsSchema())
    result = ContentGeneratorService.generate_questions(
        current_user.user_id,
        data['content'],
        data['subject'],
        difficulty=data['difficulty'],
        question_type=data['question_type'],
        count=data['count'],
    )
    return jsonify(result)


@content_generator_bp.route('/generate-from-pdf', methods=['POST'])
@login_required
@handle_api_errors('Failed to process PDF')
def generate_from_pdf():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise ValidationError('No file provided')

    data = load_form(DocumentUploadSchema())
    result = ContentGeneratorService.generate_from_document(
        current_user.user_id,
        upload,
        data['subject'],
        difficulty=data['difficulty'],
        question_count=data['question_count'],
    )
    return jsonify(result)


@content_generator_bp.route('/summarize-notes', methods=['POST'])
@login_required
@handle_api_errors('Failed to summarize notes')
def summarize_notes():
    data = load_json(SummarizeNotesSchema())
    result = ContentGeneratorService.summarize_notes(
        current_user.user_id, data['content'], subject=data['subject']
    )
    return jsonify(result)
