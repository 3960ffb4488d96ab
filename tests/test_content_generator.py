"""
Tests for question generation, document upload and note summaries.
"""

import io
from unittest.mock import patch

import pytest

from studyquest_app.models import NoteSummary, Question, QuestionBank
from studyquest_app.modules.content_generator.services.document_service import (
    MAX_DOCUMENT_CHARS,
    DocumentService,
)

GENERATED = {
    'questions': [
        {
            'question': 'What is the powerhouse of the cell?',
            'type': 'mcq',
            'difficulty': 'easy',
            'options': ['Nucleus', 'Mitochondria', 'Ribosome', 'Golgi'],
            'correct_answer': 'Mitochondria',
            'explanation': 'Mitochondria produce ATP.',
            'topic': 'Cells',
            'keywords': ['ATP'],
        },
        {
            'question': 'DNA is double stranded.',
            'type': 'true_false',
            'difficulty': 'easy',
            'options': ['True', 'False'],
            'correct_answer': True,
            'topic': 'Genetics',
        },
        {
            'question': 'Explain osmosis.',
            'type': 'conceptual',
            'difficulty': 'hard',
            'correct_answer': 'Diffusion of water across a membrane',
        },
    ]
}

EXTRACTED = {
    'title': 'Cell Biology Notes',
    'key_concepts': ['Organelles', 'Membranes'],
    'summary': 'An overview of cell structure.',
    'content': 'Cells contain organelles...',
}

SUMMARY = {
    'title': 'Photosynthesis',
    'key_concepts': [
        {'concept': 'Chlorophyll', 'definition': 'Green pigment', 'importance': 'HIGH'},
    ],
    'summary': 'Plants turn light into chemical energy.',
    'study_tips': ['Draw the cycle'],
    'potential_exam_topics': ['Calvin cycle'],
    'difficulty_areas': ['Light reactions'],
}


class TestGenerateQuestions:

    def test_questions_are_saved(self, client, headers, fake_ai, user):
        fake_ai.responses['question_generation'] = GENERATED
        content = 'Cells are the basic unit of life. ' * 100

        response = client.post('/api/generate-questions', json={
            'content': content,
            'subject': 'Biology',
            'difficulty': 'easy',
            'questionType': 'mixed',
            'count': 3,
        }, headers=headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['saved_count'] == 3
        assert [q['type'] for q in data['questions']] == ['mcq', 'true_false', 'conceptual']
        assert fake_ai.calls[0]['temperature'] == 0.7

        rows = Question.query.order_by(Question.question_id).all()
        assert len(rows) == 3
        assert all(row.creator_user_id == user.user_id for row in rows)
        assert all(row.source_type == Question.SOURCE_TEXT for row in rows)
        assert rows[0].source_content == content[:1000]

    def test_options_only_kept_for_mcq(self, client, headers, fake_ai):
        fake_ai.responses['question_generation'] = GENERATED

        client.post('/api/generate-questions', json={'content': 'x', 'subject': 'Biology'}, headers=headers)

        rows = Question.query.order_by(Question.question_id).all()
        assert rows[0].options == ['Nucleus', 'Mitochondria', 'Ribosome', 'Golgi']
        assert rows[1].options is None
        assert rows[1].correct_answer == 'True'
        assert rows[2].options is None

    def test_generation_failure_saves_nothing(self, client, headers, fake_ai):
        fake_ai.responses['question_generation'] = {'questions': [{'question': 'incomplete'}]}

        response = client.post('/api/generate-questions', json={'content': 'x', 'subject': 'Biology'}, headers=headers)

        assert response.status_code == 500
        assert response.get_json() == {
            'success': False,
            'message': 'Failed to generate questions',
            'code': 'SERVER_ERROR',
        }
        assert Question.query.count() == 0

    def test_missing_content_is_400(self, client, headers, fake_ai):
        response = client.post('/api/generate-questions', json={'subject': 'Biology'}, headers=headers)

        assert response.status_code == 400
        assert fake_ai.calls == []


class TestGenerateFromDocument:

    def _upload(self, client, headers, filename, payload, **form):
        data = {'subject': 'Biology', 'difficulty': 'medium', 'questionCount': '3'}
        data.update(form)
        if filename is not None:
            data['file'] = (io.BytesIO(payload), filename)
        return client.post('/api/generate-from-pdf', data=data, headers=headers)

    def test_missing_file_is_400(self, client, headers, fake_ai):
        response = self._upload(client, headers, None, b'')

        assert response.status_code == 400
        assert response.get_json()['message'] == 'No file provided'
        assert fake_ai.calls == []

    def test_text_document_builds_question_bank(self, client, headers, fake_ai, user):
        fake_ai.responses.update({'document_extraction': EXTRACTED, 'question_bank': GENERATED})

        response = self._upload(client, headers, 'notes.txt', b'Cells contain organelles.')

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['saved_count'] == 3
        assert data['extracted_content']['title'] == 'Cell Biology Notes'
        assert fake_ai.features() == ['document_extraction', 'question_bank']

        bank = QuestionBank.query.one()
        assert data['question_bank_id'] == bank.bank_id
        assert bank.question_count == 3
        assert bank.source_file == 'notes.txt'

        rows = Question.query.all()
        assert all(row.source_type == Question.SOURCE_PDF for row in rows)
        assert all(row.source_content == 'Cell Biology Notes' for row in rows)

    def test_pdf_text_is_extracted(self, client, headers, fake_ai):
        fake_ai.responses.update({'document_extraction': EXTRACTED, 'question_bank': GENERATED})

        with patch.object(DocumentService, '_extract_pdf_text', return_value='Mitosis and meiosis.') as extract:
            response = self._upload(client, headers, 'lecture.pdf', b'%PDF-1.4 fake')

        assert response.status_code == 200
        extract.assert_called_once()
        assert 'Mitosis and meiosis.' in fake_ai.calls[0]['prompt']

    def test_unreadable_pdf_is_400(self, client, headers, fake_ai):
        response = self._upload(client, headers, 'broken.pdf', b'%PDF-1.4 this is not really a pdf')

        assert response.status_code == 400
        assert fake_ai.calls == []

    def test_unsupported_file_type_is_400(self, client, headers, fake_ai):
        response = self._upload(client, headers, 'image.png', b'\x89PNG\r\n')

        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    def test_extraction_failure_is_generic_500(self, client, headers, fake_ai):
        fake_ai.responses['document_extraction'] = 'garbage'

        response = self._upload(client, headers, 'notes.txt', b'Cells contain organelles.')

        assert response.status_code == 500
        assert response.get_json()['message'] == 'Failed to process PDF'
        assert QuestionBank.query.count() == 0


class TestDocumentService:

    class _Upload:
        def __init__(self, filename, payload, mimetype=''):
            self.filename = filename
            self.mimetype = mimetype
            self._payload = payload

        def read(self):
            return self._payload

    def test_long_documents_are_truncated(self, app):
        upload = self._Upload('long.txt', b'a' * (MAX_DOCUMENT_CHARS + 10))
        assert len(DocumentService.extract_text(upload)) == MAX_DOCUMENT_CHARS

    def test_empty_file_is_rejected(self, app):
        from studyquest_app.core.error_handlers import ValidationError

        with pytest.raises(ValidationError):
            DocumentService.extract_text(self._Upload('empty.txt', b''))


class TestSummarizeNotes:

    def test_summary_is_saved(self, client, headers, fake_ai, user):
        fake_ai.responses['note_summary'] = SUMMARY

        response = client.post('/api/summarize-notes', json={
            'content': 'Photosynthesis converts light energy...',
            'subject': 'Biology',
        }, headers=headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['summary']['key_concepts'][0]['importance'] == 'high'
        assert fake_ai.calls[0]['temperature'] == 0.3

        note = NoteSummary.query.one()
        assert data['summary_id'] == note.summary_id
        assert note.user_id == user.user_id
        assert note.study_tips == ['Draw the cycle']

    def test_summary_failure(self, client, headers, fake_ai):
        fake_ai.responses['note_summary'] = {'title': 'No summary field'}

        response = client.post('/api/summarize-notes', json={'content': 'x'}, headers=headers)

        assert response.status_code == 500
        assert response.get_json()['message'] == 'Failed to summarize notes'
        assert NoteSummary.query.count() == 0
