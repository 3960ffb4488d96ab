import json
import os
import sys
from unittest.mock import patch

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from studyquest_app import create_app, db
from studyquest_app.config import Config
from studyquest_app.models import Question, User
from studyquest_app.modules.ai_services import AIServiceManager
from studyquest_app.modules.auth.services import AuthService


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    AI_PROVIDER = 'gemini'
    GEMINI_API_KEY = 'test-key'
    LOG_TO_FILE = False
    LOG_LEVEL = 'WARNING'


class FakeAIClient:
    """Stands in for a provider client; answers are looked up by feature name."""

    provider = 'fake'
    model_name = 'fake-model'

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def generate_content(self, prompt, item_info="N/A", system_instruction=None,
                         temperature=None, json_mode=False):
        self.calls.append({
            'feature': item_info,
            'prompt': prompt,
            'system_instruction': system_instruction,
            'temperature': temperature,
        })
        response = self.responses.get(item_info)
        if response is None:
            return False, f"No fake response for '{item_info}'"
        if callable(response):
            response = response(prompt)
        if isinstance(response, str):
            return True, response
        return True, json.dumps(response)

    def features(self):
        return [call['feature'] for call in self.calls]


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
    AIServiceManager.reset()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_ai(app):
    fake = FakeAIClient()
    with patch.object(AIServiceManager, 'get_service', return_value=fake):
        yield fake


@pytest.fixture
def make_user(app):
    def _make_user(username='student', email=None, password='password123', display_name=None):
        user = User(username=username, email=email or f'{username}@example.com', display_name=display_name)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user('alice', display_name='Alice')


def auth_headers(user):
    return {'Authorization': f'Bearer {AuthService.generate_token(user)}'}


@pytest.fixture
def headers(user):
    return auth_headers(user)


@pytest.fixture
def make_question(app):
    def _make_question(subject='Biology', difficulty='medium', correct_answer='A', topic='Cells', **kwargs):
        question = Question(
            subject=subject,
            topic=topic,
            question_text=kwargs.pop('question_text', f'{topic} question ({difficulty})'),
            question_type=kwargs.pop('question_type', Question.TYPE_MCQ),
            difficulty=difficulty,
            options=kwargs.pop('options', ['A', 'B', 'C', 'D']),
            correct_answer=correct_answer,
            explanation=kwargs.pop('explanation', 'Because.'),
            keywords=kwargs.pop('keywords', []),
            **kwargs,
        )
        db.session.add(question)
        db.session.commit()
        return question

    return _make_question
