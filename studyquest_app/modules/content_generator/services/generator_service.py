"""
Content Generator Service
Generate questions from pasted text or uploaded documents and summarise notes.
"""
import os
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from studyquest_app.core.error_handlers import PersistenceError
from studyquest_app.core.signals import content_generated
from studyquest_app.db_instance import db
from studyquest_app.models import NoteSummary, Question, QuestionBank
from studyquest_app.modules.ai_services import AIGateway
from studyquest_app.modules.ai_services.logics.prompt_manager import PromptManager
from studyquest_app.modules.ai_services.schemas import (
    ExtractedDocument,
    GeneratedQuestion,
    GeneratedQuestionSet,
    NoteSummaryResult,
)
from .document_service import DocumentService

QUESTION_TEMPERATURE = 0.7
EXTRACTION_TEMPERATURE = 0.2
QUESTION_BANK_TEMPERATURE = 0.8
SUMMARY_TEMPERATURE = 0.3


class ContentGeneratorService:

    @staticmethod
    def _build_question(
        user_id: int, subject: str, generated: GeneratedQuestion, source_content: str, source_type: str
    ) -> Question:
        is_mcq = generated.type == Question.TYPE_MCQ
        return Question(
            creator_user_id=user_id,
            subject=subject,
            topic=generated.topic,
            question_text=generated.question,
            question_type=generated.type,
            difficulty=generated.difficulty,
            options=(generated.options or []) if is_mcq else None,
            correct_answer=generated.correct_answer,
            explanation=generated.explanation,
            keywords=generated.keywords,
            source_content=source_content,
            source_type=source_type,
        )

    @staticmethod
    def _save_questions(
        user_id: int, subject: str, generated: List[GeneratedQuestion], source_content: str, source_type: str
    ) -> List[Question]:
        rows = [
            ContentGeneratorService._build_question(user_id, subject, item, source_content, source_type)
            for item in generated
        ]
        db.session.add_all(rows)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f'Failed to save questions: {e}', entity='question') from e
        return rows

    @staticmethod
    def generate_questions(
        user_id: int,
        content: str,
        subject: str,
        difficulty: str = 'medium',
        question_type: str = 'mixed',
        count: int = 5,
    ) -> Dict[str, Any]:
        system_prompt, user_prompt = PromptManager.build_question_generation_prompt(
            content, subject, difficulty, question_type, count
        )
        result = AIGateway.generate_structured(
            GeneratedQuestionSet,
            system_prompt,
            user_prompt,
            temperature=QUESTION_TEMPERATURE,
            feature='question_generation',
            user_id=user_id,
        )

        preview_chars = current_app.config.get('SOURCE_CONTENT_PREVIEW_CHARS', 1000)
        saved = ContentGeneratorService._save_questions(
            user_id, subject, result.questions, content[:preview_chars], Question.SOURCE_TEXT
        )

        content_generated.send(
            None, user_id=user_id, content_type='questions', subject=subject, items_count=len(saved)
        )
        return {
            'questions': [question.to_dict() for question in saved],
            'saved_count': len(saved),
        }

    @staticmethod
    def _record_question_bank(
        user_id: int, subject: str, document: ExtractedDocument, count: int, filename: str
    ):
        """Best effort: a failure here does not undo the saved questions."""
        bank = QuestionBank(
            user_id=user_id,
            name=document.title,
            subject=subject,
            description=document.summary,
            question_count=count,
            source_file=filename,
        )
        db.session.add(bank)
        try:
            db.session.commit()
            return bank.bank_id
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"ContentGenerator: Không thể tạo question bank cho user {user_id}: {e}")
            return None

    @staticmethod
    def generate_from_document(
        user_id: int, file_storage, subject: str, difficulty: str = 'medium', question_count: int = 10
    ) -> Dict[str, Any]:
        filename = os.path.basename(file_storage.filename or 'document')
        text = DocumentService.extract_text(file_storage)

        system_prompt, user_prompt = PromptManager.build_document_extraction_prompt(text, filename)
        document = AIGateway.generate_structured(
            ExtractedDocument,
            system_prompt,
            user_prompt,
            temperature=EXTRACTION_TEMPERATURE,
            feature='document_extraction',
            user_id=user_id,
        )

        system_prompt, user_prompt = PromptManager.build_question_bank_prompt(
            document.model_dump(), subject, difficulty, question_count
        )
        bank = AIGateway.generate_structured(
            GeneratedQuestionSet,
            system_prompt,
            user_prompt,
            temperature=QUESTION_BANK_TEMPERATURE,
            feature='question_bank',
            user_id=user_id,
        )

        saved = ContentGeneratorService._save_questions(
            user_id, subject, bank.questions, document.title, Question.SOURCE_PDF
        )
        bank_id = ContentGeneratorService._record_question_bank(
            user_id, subject, document, len(saved), filename
        )

        content_generated.send(
            None, user_id=user_id, content_type='question_bank', subject=subject, items_count=len(saved)
        )
        return {
            'success': True,
            'extracted_content': {
                'title': document.title,
                'key_concepts': document.key_concepts,
                'summary': document.summary,
            },
            'questions': [question.to_dict() for question in saved],
            'question_bank_id': bank_id,
            'saved_count': len(saved),
        }

    @staticmethod
    def summarize_notes(user_id: int, content: str, subject: str = None) -> Dict[str, Any]:
        system_prompt, user_prompt = PromptManager.build_note_summary_prompt(content, subject)
        result = AIGateway.generate_structured(
            NoteSummaryResult,
            system_prompt,
            user_prompt,
            temperature=SUMMARY_TEMPERATURE,
            feature='note_summary',
            user_id=user_id,
        )
        summary = result.model_dump()

        note = NoteSummary(
            user_id=user_id,
            subject=subject,
            title=result.title,
            original_content=content,
            summary=result.summary,
            key_concepts=summary['key_concepts'],
            study_tips=result.study_tips,
            potential_exam_topics=result.potential_exam_topics,
            difficulty_areas=result.difficulty_areas,
        )
        db.session.add(note)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f'Failed to save note summary: {e}', entity='note_summary') from e

        content_generated.send(
            None, user_id=user_id, content_type='note_summary', subject=subject, items_count=1
        )
        return {
            'success': True,
            'summary': summary,
            'summary_id': note.summary_id,
        }
