"""
Quiz Session Service
====================
Start, answer and complete adaptive quiz sessions.

A session moves from 'active' to 'completed' exactly once; answers can only be
attached while it is active.
"""
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from studyquest_app.core.error_handlers import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    SessionClosedError,
)
from studyquest_app.core.signals import answer_submitted, quiz_completed
from studyquest_app.db_instance import db
from studyquest_app.models import Question, QuizAnswer, QuizSession
from studyquest_app.modules.ai_services import AIGateway
from studyquest_app.modules.ai_services.logics.prompt_manager import PromptManager
from studyquest_app.modules.ai_services.schemas import AnswerFeedback, QuestionSelection, QuizAnalysis
from studyquest_app.modules.gamification import interface as gamification
from studyquest_app.utils.time_utils import utcnow
from ..logics.grading import average_time, is_answer_correct, points_for, score_percentage, total_points
from ..logics.selection_logic import resolve_selection

SELECTION_TEMPERATURE = 0.3
FEEDBACK_TEMPERATURE = 0.4
ANALYSIS_TEMPERATURE = 0.3


class QuizSessionService:
    """Adaptive quiz lifecycle."""

    @staticmethod
    def _get_owned_session(user_id: int, quiz_session_id: int) -> QuizSession:
        session = QuizSession.query.filter_by(session_id=quiz_session_id, user_id=user_id).first()
        if session is None:
            raise NotFoundError('Quiz session not found', resource='quiz_session')
        return session

    @staticmethod
    def _commit(entity: str) -> None:
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f'Failed to save {entity}: {e}', entity=entity) from e

    # ------------------------------------------------------------------
    # Start
    # ------------------------------------------------------------------
    @staticmethod
    def start_quiz(
        user_id: int, subject: str, question_count: int = 10, preferred_difficulty: str = 'medium'
    ) -> Dict[str, Any]:
        progress = gamification.get_user_progress(user_id, subject)

        pool_size = current_app.config.get('QUIZ_CANDIDATE_POOL', 50)
        candidates = (
            Question.query.filter_by(subject=subject)
            .order_by(Question.question_id)
            .limit(pool_size)
            .all()
        )
        if not candidates:
            raise NotFoundError('No questions available for this subject', resource='questions')

        system_prompt, user_prompt = PromptManager.build_quiz_selection_prompt(
            subject,
            question_count,
            preferred_difficulty,
            progress,
            [
                {
                    'id': q.question_id,
                    'difficulty': q.difficulty,
                    'type': q.question_type,
                    'topic': q.topic,
                    'question': q.question_text,
                }
                for q in candidates
            ],
        )
        selection = AIGateway.generate_structured(
            QuestionSelection,
            system_prompt,
            user_prompt,
            temperature=SELECTION_TEMPERATURE,
            feature='quiz_selection',
            user_id=user_id,
        )

        chosen, picked_ids = resolve_selection(
            candidates, [item.id for item in selection.selected_questions], question_count
        )
        reasoning = []
        for item in selection.selected_questions:
            if item.id in picked_ids and item.reasoning and item.reasoning not in reasoning:
                reasoning.append(item.reasoning)

        session = QuizSession(
            user_id=user_id,
            subject=subject,
            question_count=question_count,
            question_ids=[q.question_id for q in chosen],
            status=QuizSession.STATUS_ACTIVE,
            adaptive_difficulty=preferred_difficulty,
        )
        db.session.add(session)
        QuizSessionService._commit('quiz_session')

        current_app.logger.info(
            f"Quiz session {session.session_id} started: user={user_id} subject={subject} "
            f"questions={len(chosen)}/{question_count} (model picked {len(picked_ids)})"
        )

        return {
            'quiz_session_id': session.session_id,
            'questions': [q.to_quiz_dict(index) for index, q in enumerate(chosen, start=1)],
            'total_questions': len(chosen),
            'adaptive_reasoning': reasoning,
        }

    # ------------------------------------------------------------------
    # Submit answer
    # ------------------------------------------------------------------
    @staticmethod
    def submit_answer(
        user_id: int,
        quiz_session_id: int,
        question_id: int,
        user_answer: str,
        time_taken: Optional[float] = 0,
    ) -> Dict[str, Any]:
        time_taken = time_taken or 0
        session = QuizSessionService._get_owned_session(user_id, quiz_session_id)
        if not session.is_active:
            raise SessionClosedError(session_id=session.session_id)

        question = db.session.get(Question, question_id)
        if question is None:
            raise NotFoundError('Question not found', resource='question')

        already_answered = QuizAnswer.query.filter_by(
            quiz_session_id=session.session_id, question_id=question.question_id
        ).first()
        if already_answered is not None:
            raise ConflictError('Question already answered in this session', code='ALREADY_ANSWERED')

        is_correct = is_answer_correct(user_answer, question.correct_answer)

        system_prompt, user_prompt = PromptManager.build_answer_feedback_prompt(
            question.to_dict(), user_answer, time_taken, is_correct
        )
        feedback = AIGateway.generate_structured(
            AnswerFeedback,
            system_prompt,
            user_prompt,
            temperature=FEEDBACK_TEMPERATURE,
            feature='answer_feedback',
            user_id=user_id,
        )

        answer = QuizAnswer(
            quiz_session_id=session.session_id,
            question_id=question.question_id,
            user_answer=user_answer,
            is_correct=is_correct,
            time_taken=time_taken,
            ai_feedback=feedback.feedback,
            learning_tips=feedback.learning_tips,
            difficulty_adjustment=feedback.difficulty_adjustment,
        )
        db.session.add(answer)
        try:
            db.session.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent submission of the same question
            db.session.rollback()
            raise ConflictError('Question already answered in this session', code='ALREADY_ANSWERED') from e
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f'Failed to save quiz answer: {e}', entity='quiz_answer') from e

        answer_submitted.send(
            None,
            user_id=user_id,
            quiz_session_id=session.session_id,
            question_id=question.question_id,
            subject=session.subject,
            topic=question.topic,
            is_correct=is_correct,
            difficulty=question.difficulty,
            time_taken=time_taken,
        )

        return {
            'is_correct': is_correct,
            'correct_answer': question.correct_answer,
            'explanation': question.explanation,
            'ai_feedback': feedback.feedback,
            'learning_tips': feedback.learning_tips,
            'difficulty_adjustment': feedback.difficulty_adjustment,
            'confidence_level': feedback.confidence_level,
            'related_concepts': feedback.related_concepts,
            'points_earned': points_for(question.difficulty, is_correct),
        }

    # ------------------------------------------------------------------
    # Complete
    # ------------------------------------------------------------------
    @staticmethod
    def _summarize(answers: List[QuizAnswer]) -> Dict[str, Any]:
        correct = sum(1 for answer in answers if answer.is_correct)
        total = len(answers)
        detailed = []
        for answer in answers:
            question = answer.question
            detailed.append({
                'question': question.question_text,
                'user_answer': answer.user_answer,
                'correct_answer': question.correct_answer,
                'is_correct': answer.is_correct,
                'explanation': question.explanation,
                'ai_feedback': answer.ai_feedback,
                'learning_tips': answer.learning_tips or [],
                'time_taken': answer.time_taken or 0,
                'topic': question.topic,
                'difficulty': question.difficulty,
            })
        return {
            'score': score_percentage(correct, total),
            'correct_answers': correct,
            'total_questions': total,
            'average_time': average_time([answer.time_taken for answer in answers]),
            'points_earned': total_points(
                (answer.question.difficulty, answer.is_correct) for answer in answers
            ),
            'detailed_results': detailed,
        }

    @staticmethod
    def _stored_result(session: QuizSession, summary: Dict[str, Any]) -> Dict[str, Any]:
        """Result of a session finalised earlier. No side effects are repeated."""
        analysis = session.analysis or {
            'overall_performance': session.ai_analysis,
            'study_recommendations': session.recommendations or [],
        }
        return {
            'quiz_completed': True,
            'already_completed': True,
            'quiz_session_id': session.session_id,
            'score': session.score if session.score is not None else summary['score'],
            'correct_answers': summary['correct_answers'],
            'total_questions': summary['total_questions'],
            'points_earned': session.points_earned or 0,
            'average_time': summary['average_time'],
            'analysis': analysis,
            'new_achievements': [],
            'detailed_results': summary['detailed_results'],
        }

    @staticmethod
    def complete_quiz(user_id: int, quiz_session_id: int) -> Dict[str, Any]:
        session = QuizSessionService._get_owned_session(user_id, quiz_session_id)
        answers = (
            QuizAnswer.query.filter_by(quiz_session_id=session.session_id)
            .order_by(QuizAnswer.answer_id)
            .all()
        )
        summary = QuizSessionService._summarize(answers)

        if not session.is_active:
            current_app.logger.info(f"Quiz session {session.session_id} already completed; returning stored result.")
            return QuizSessionService._stored_result(session, summary)

        system_prompt, user_prompt = PromptManager.build_quiz_analysis_prompt(
            session.subject,
            summary['score'],
            summary['correct_answers'],
            summary['total_questions'],
            summary['average_time'],
            [
                {
                    'topic': row['topic'],
                    'difficulty': row['difficulty'],
                    'is_correct': row['is_correct'],
                    'time_taken': row['time_taken'],
                    'user_answer': row['user_answer'],
                    'correct_answer': row['correct_answer'],
                }
                for row in summary['detailed_results']
            ],
        )
        analysis = AIGateway.generate_structured(
            QuizAnalysis,
            system_prompt,
            user_prompt,
            temperature=ANALYSIS_TEMPERATURE,
            feature='quiz_analysis',
            user_id=user_id,
        ).model_dump()

        # Only the request that flips 'active' -> 'completed' runs the side effects
        try:
            result = db.session.execute(
                update(QuizSession)
                .where(
                    QuizSession.session_id == session.session_id,
                    QuizSession.status == QuizSession.STATUS_ACTIVE,
                )
                .values(
                    status=QuizSession.STATUS_COMPLETED,
                    score=summary['score'],
                    points_earned=summary['points_earned'],
                    completed_at=utcnow(),
                    ai_analysis=analysis['overall_performance'],
                    recommendations=analysis['study_recommendations'],
                    analysis=analysis,
                )
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError(f'Failed to complete quiz session: {e}', entity='quiz_session') from e

        db.session.refresh(session)
        if result.rowcount == 0:
            current_app.logger.warning(
                f"Quiz session {session.session_id} was completed concurrently; skipping side effects."
            )
            return QuizSessionService._stored_result(session, summary)

        quiz_completed.send(
            None,
            user_id=user_id,
            quiz_session_id=session.session_id,
            subject=session.subject,
            score=summary['score'],
            points_earned=summary['points_earned'],
        )

        gamification.award_quiz_points(
            user_id, session.subject, summary['points_earned'], summary['score'], session.session_id
        )
        new_achievements = gamification.check_achievements(user_id, summary['score'], session.subject)

        return {
            'quiz_completed': True,
            'already_completed': False,
            'quiz_session_id': session.session_id,
            'score': summary['score'],
            'correct_answers': summary['correct_answers'],
            'total_questions': summary['total_questions'],
            'points_earned': summary['points_earned'],
            'average_time': summary['average_time'],
            'analysis': analysis,
            'new_achievements': new_achievements,
            'detailed_results': summary['detailed_results'],
        }
