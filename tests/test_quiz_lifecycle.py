"""
Tests for the adaptive quiz lifecycle: start, submit answer, complete.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import update

from studyquest_app import db
from studyquest_app.models import PointsLog, QuizAnswer, QuizSession, User, UserAchievement, UserProgress
from studyquest_app.modules.ai_services import AIGateway
from studyquest_app.modules.ai_services.schemas import QuizAnalysis
from studyquest_app.modules.gamification.services.achievement_service import AchievementService
from studyquest_app.modules.gamification.services.points_service import PointsService
from studyquest_app.modules.gamification.services.progress_service import ProgressService

from conftest import auth_headers

FEEDBACK = {
    'feedback': 'Nice reasoning.',
    'learning_tips': ['Review organelles'],
    'difficulty_adjustment': 'Same',
    'confidence_level': 'high',
    'related_concepts': ['ATP'],
}

ANALYSIS = {
    'overall_performance': 'Solid grasp of the basics.',
    'strengths': ['Cells'],
    'areas_for_improvement': ['Genetics'],
    'study_recommendations': ['Practice Punnett squares'],
    'next_difficulty_level': 'medium',
    'mastery_level': 'intermediate',
    'time_management_feedback': 'Good pace.',
}


@pytest.fixture
def biology_questions(make_question):
    difficulties = ['easy'] * 4 + ['medium'] * 3 + ['hard'] * 3
    return [
        make_question('Biology', difficulty, correct_answer='A', topic=f'Topic {index}')
        for index, difficulty in enumerate(difficulties)
    ]


@pytest.fixture
def quiz_ai(fake_ai, biology_questions):
    fake_ai.responses.update({
        'quiz_selection': {
            'selected_questions': [
                {'id': q.question_id, 'reasoning': 'Balanced difficulty'} for q in biology_questions
            ]
        },
        'answer_feedback': FEEDBACK,
        'quiz_analysis': ANALYSIS,
    })
    return fake_ai


def start(client, headers, **payload):
    body = {'subject': 'Biology', 'questionCount': 10, 'preferredDifficulty': 'medium'}
    body.update(payload)
    return client.post('/api/start-quiz', json=body, headers=headers)


def submit(client, headers, session_id, question_id, answer, time_taken=12):
    return client.post('/api/submit-answer', json={
        'quiz_session_id': session_id,
        'question_id': question_id,
        'user_answer': answer,
        'time_taken': time_taken,
    }, headers=headers)


def complete(client, headers, session_id):
    return client.post('/api/complete-quiz', json={'quiz_session_id': session_id}, headers=headers)


class TestStartQuiz:

    def test_start_returns_questions_without_answers(self, client, headers, quiz_ai, biology_questions):
        response = start(client, headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['total_questions'] == 10
        assert data['adaptive_reasoning'] == ['Balanced difficulty']
        assert [q['question_number'] for q in data['questions']] == list(range(1, 11))
        assert all('correct_answer' not in q for q in data['questions'])

        session = db.session.get(QuizSession, data['quiz_session_id'])
        assert session.status == QuizSession.STATUS_ACTIVE
        assert session.adaptive_difficulty == 'medium'
        assert session.question_ids == [q.question_id for q in biology_questions]

    def test_no_questions_for_subject_is_404(self, client, headers, fake_ai):
        response = start(client, headers, subject='Astronomy')

        assert response.status_code == 404
        assert QuizSession.query.count() == 0
        assert fake_ai.calls == []

    def test_total_is_capped_by_available_questions(self, client, headers, fake_ai, make_question):
        question = make_question('Chemistry', 'easy')
        fake_ai.responses['quiz_selection'] = {'selected_questions': [{'id': question.question_id}]}

        data = start(client, headers, subject='Chemistry', questionCount=5).get_json()

        assert data['total_questions'] == 1

    def test_unknown_model_ids_are_topped_up(self, client, headers, fake_ai, biology_questions):
        fake_ai.responses['quiz_selection'] = {'selected_questions': [{'id': 9999, 'reasoning': 'made up'}]}

        data = start(client, headers, questionCount=3).get_json()

        assert [q['id'] for q in data['questions']] == [q.question_id for q in biology_questions[:3]]
        assert data['adaptive_reasoning'] == []

    def test_selection_failure_is_generic_500(self, client, headers, fake_ai, biology_questions):
        fake_ai.responses['quiz_selection'] = 'not json'

        response = start(client, headers)

        assert response.status_code == 500
        assert response.get_json()['message'] == 'Failed to start quiz'
        assert QuizSession.query.count() == 0

    def test_invalid_payload_is_400(self, client, headers, fake_ai):
        response = client.post('/api/start-quiz', json={'questionCount': 0}, headers=headers)

        assert response.status_code == 400
        data = response.get_json()
        assert data['code'] == 'VALIDATION_ERROR'
        assert 'subject' in data['details']['errors']

    def test_requires_authentication(self, client, fake_ai):
        response = start(client, {})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'UNAUTHORIZED'


class TestSubmitAnswer:

    def test_correct_answer(self, client, headers, quiz_ai, biology_questions, user):
        session_id = start(client, headers).get_json()['quiz_session_id']
        hard = biology_questions[-1]

        response = submit(client, headers, session_id, hard.question_id, '  a ')

        assert response.status_code == 200
        data = response.get_json()
        assert data['is_correct'] is True
        assert data['points_earned'] == 30
        assert data['ai_feedback'] == 'Nice reasoning.'
        assert data['difficulty_adjustment'] == 'same'

        progress = UserProgress.query.filter_by(user_id=user.user_id, subject='Biology').one()
        assert progress.total_questions_answered == 1
        assert progress.correct_answers == 1
        assert progress.current_streak == 1
        # Points are credited only at completion
        assert progress.total_points == 0

    def test_incorrect_answer(self, client, headers, quiz_ai, biology_questions, user):
        session_id = start(client, headers).get_json()['quiz_session_id']
        question = biology_questions[0]

        data = submit(client, headers, session_id, question.question_id, 'B').get_json()

        assert data['is_correct'] is False
        assert data['points_earned'] == 0
        assert data['correct_answer'] == 'A'
        progress = UserProgress.query.filter_by(user_id=user.user_id, subject='Biology').one()
        assert progress.weak_topics == [question.topic]

    def test_duplicate_answer_is_409(self, client, headers, quiz_ai, biology_questions):
        session_id = start(client, headers).get_json()['quiz_session_id']
        question_id = biology_questions[0].question_id
        submit(client, headers, session_id, question_id, 'A')

        response = submit(client, headers, session_id, question_id, 'B')

        assert response.status_code == 409
        assert response.get_json()['code'] == 'ALREADY_ANSWERED'
        assert QuizAnswer.query.count() == 1

    def test_unknown_session_is_404(self, client, headers, quiz_ai, biology_questions):
        response = submit(client, headers, 12345, biology_questions[0].question_id, 'A')
        assert response.status_code == 404

    def test_someone_elses_session_is_404(self, client, quiz_ai, biology_questions, make_user):
        owner = make_user('owner')
        session = QuizSession(user_id=owner.user_id, subject='Biology', question_count=1, question_ids=[])
        db.session.add(session)
        db.session.commit()
        intruder = make_user('intruder')

        response = submit(client, auth_headers(intruder), session.session_id, biology_questions[0].question_id, 'A')

        assert response.status_code == 404

    def test_unknown_question_is_404(self, client, headers, quiz_ai, biology_questions):
        session_id = start(client, headers).get_json()['quiz_session_id']
        response = submit(client, headers, session_id, 9999, 'A')
        assert response.status_code == 404

    def test_feedback_failure_stores_nothing(self, client, headers, quiz_ai, biology_questions):
        session_id = start(client, headers).get_json()['quiz_session_id']
        quiz_ai.responses['answer_feedback'] = {'learning_tips': []}

        response = submit(client, headers, session_id, biology_questions[0].question_id, 'A')

        assert response.status_code == 500
        assert response.get_json()['message'] == 'Failed to submit answer'
        assert QuizAnswer.query.count() == 0

    def test_progress_failure_keeps_answer(self, client, headers, quiz_ai, biology_questions, user):
        session_id = start(client, headers).get_json()['quiz_session_id']

        with patch.object(ProgressService, 'record_answer', side_effect=RuntimeError('progress table locked')):
            response = submit(client, headers, session_id, biology_questions[0].question_id, 'A')

        assert response.status_code == 200
        assert response.get_json()['is_correct'] is True
        answer = QuizAnswer.query.one()
        assert answer.quiz_session_id == session_id
        assert answer.is_correct is True
        assert UserProgress.query.filter_by(user_id=user.user_id).count() == 0


class TestCompleteQuiz:

    def _answer_biology(self, client, headers, session_id, questions):
        # 4 easy right, 2 medium right + 1 wrong, 1 hard right + 2 wrong
        correct = {0, 1, 2, 3, 4, 5, 7}
        for index, question in enumerate(questions):
            answer = 'A' if index in correct else 'B'
            assert submit(client, headers, session_id, question.question_id, answer, time_taken=10).status_code == 200

    def test_biology_scenario(self, client, headers, quiz_ai, biology_questions, user):
        session_id = start(client, headers).get_json()['quiz_session_id']
        self._answer_biology(client, headers, session_id, biology_questions)

        response = complete(client, headers, session_id)

        assert response.status_code == 200
        data = response.get_json()
        assert data['quiz_completed'] is True
        assert data['already_completed'] is False
        assert data['score'] == 70
        assert data['correct_answers'] == 7
        assert data['total_questions'] == 10
        assert data['points_earned'] == 110
        assert data['average_time'] == 10
        assert data['analysis']['overall_performance'] == 'Solid grasp of the basics.'
        assert len(data['detailed_results']) == 10
        assert [a['key'] for a in data['new_achievements']] == ['first_quiz']

        session = db.session.get(QuizSession, session_id)
        assert session.status == QuizSession.STATUS_COMPLETED
        assert session.score == 70
        assert session.completed_at is not None
        assert session.recommendations == ['Practice Punnett squares']

        progress = UserProgress.query.filter_by(user_id=user.user_id, subject='Biology').one()
        assert progress.quizzes_taken == 1
        assert progress.average_score == 70
        assert progress.total_questions_answered == 10
        assert progress.correct_answers == 7

        quiz_points = PointsLog.query.filter_by(
            user_id=user.user_id, source=PointsLog.SOURCE_QUIZ_COMPLETION
        ).one()
        assert quiz_points.points == 110
        assert quiz_points.quiz_session_id == session_id
        # 110 for the quiz plus the first_quiz reward
        assert db.session.get(User, user.user_id).total_points == 120

    def test_double_completion_is_not_double_counted(self, client, headers, quiz_ai, biology_questions, user):
        session_id = start(client, headers).get_json()['quiz_session_id']
        self._answer_biology(client, headers, session_id, biology_questions)
        complete(client, headers, session_id)
        calls_before = len(quiz_ai.calls)

        response = complete(client, headers, session_id)

        assert response.status_code == 200
        data = response.get_json()
        assert data['already_completed'] is True
        assert data['score'] == 70
        assert data['points_earned'] == 110
        assert data['new_achievements'] == []
        assert len(quiz_ai.calls) == calls_before

        assert PointsLog.query.filter_by(source=PointsLog.SOURCE_QUIZ_COMPLETION).count() == 1
        assert UserAchievement.query.filter_by(user_id=user.user_id).count() == 1
        progress = UserProgress.query.filter_by(user_id=user.user_id, subject='Biology').one()
        assert progress.quizzes_taken == 1

    def test_answers_after_completion_are_rejected(self, client, headers, quiz_ai, biology_questions):
        session_id = start(client, headers).get_json()['quiz_session_id']
        submit(client, headers, session_id, biology_questions[0].question_id, 'A')
        complete(client, headers, session_id)

        response = submit(client, headers, session_id, biology_questions[1].question_id, 'A')

        assert response.status_code == 409
        assert response.get_json()['code'] == 'SESSION_CLOSED'

    def test_perfect_score_unlocks_achievement(self, client, headers, quiz_ai, biology_questions):
        session_id = start(client, headers).get_json()['quiz_session_id']
        submit(client, headers, session_id, biology_questions[0].question_id, 'A')

        data = complete(client, headers, session_id).get_json()

        assert data['score'] == 100
        assert {a['key'] for a in data['new_achievements']} == {'first_quiz', 'perfect_score'}

    def test_empty_quiz_scores_zero(self, client, headers, quiz_ai, biology_questions):
        session_id = start(client, headers).get_json()['quiz_session_id']

        data = complete(client, headers, session_id).get_json()

        assert data['score'] == 0
        assert data['points_earned'] == 0
        assert data['total_questions'] == 0

    def test_analysis_failure_leaves_session_active(self, client, headers, quiz_ai, biology_questions):
        session_id = start(client, headers).get_json()['quiz_session_id']
        quiz_ai.responses['quiz_analysis'] = 'oops'

        response = complete(client, headers, session_id)

        assert response.status_code == 500
        assert response.get_json()['message'] == 'Failed to complete quiz'
        assert db.session.get(QuizSession, session_id).status == QuizSession.STATUS_ACTIVE
        assert PointsLog.query.count() == 0

    def test_concurrent_completion_runs_side_effects_once(self, client, headers, quiz_ai, biology_questions, user):
        session_id = start(client, headers).get_json()['quiz_session_id']
        submit(client, headers, session_id, biology_questions[0].question_id, 'A')
        progress = UserProgress.query.filter_by(user_id=user.user_id, subject='Biology').one()
        quizzes_before = progress.quizzes_taken

        def finished_by_other_request(schema, *args, **kwargs):
            # The session was read as active; another request completes it during analysis
            db.session.execute(
                update(QuizSession)
                .where(QuizSession.session_id == session_id)
                .values(status=QuizSession.STATUS_COMPLETED, score=100, points_earned=10)
                .execution_options(synchronize_session=False)
            )
            return QuizAnalysis.model_validate(ANALYSIS)

        with patch.object(AIGateway, 'generate_structured', side_effect=finished_by_other_request) as analysis:
            response = complete(client, headers, session_id)

        analysis.assert_called_once()
        assert response.status_code == 200
        data = response.get_json()
        assert data['already_completed'] is True
        assert data['new_achievements'] == []
        assert data['score'] == 100
        assert PointsLog.query.count() == 0
        assert UserAchievement.query.filter_by(user_id=user.user_id).count() == 0
        progress = UserProgress.query.filter_by(user_id=user.user_id, subject='Biology').one()
        assert progress.quizzes_taken == quizzes_before
        assert db.session.get(User, user.user_id).total_points == 0

    def test_gamification_failure_still_completes(self, client, headers, quiz_ai, biology_questions, user):
        session_id = start(client, headers).get_json()['quiz_session_id']
        submit(client, headers, session_id, biology_questions[0].question_id, 'A')

        with patch.object(PointsService, 'award_quiz_points', side_effect=RuntimeError('ledger offline')), \
                patch.object(AchievementService, 'check_achievements', side_effect=RuntimeError('catalogue offline')):
            response = complete(client, headers, session_id)

        assert response.status_code == 200
        data = response.get_json()
        assert data['quiz_completed'] is True
        assert data['already_completed'] is False
        assert data['score'] == 100
        assert data['new_achievements'] == []
        assert db.session.get(QuizSession, session_id).status == QuizSession.STATUS_COMPLETED
        assert PointsLog.query.count() == 0
