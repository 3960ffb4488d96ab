"""
Tests for the language model gateway.

Tests cover:
- JSON extraction from raw, fenced and chatty responses
- Schema validation and normalisation of model output
- Failure mapping to UpstreamGenerationError
- Provider selection in AIServiceManager
"""

import inspect
from unittest.mock import MagicMock, patch

import pytest
from google.api_core import exceptions as google_exceptions
from pydantic import BaseModel

from studyquest_app.core.error_handlers import UpstreamGenerationError
from studyquest_app.core.signals import ai_token_used
from studyquest_app.modules.ai_services import AIGateway, AIServiceManager
from studyquest_app.modules.ai_services.engines.gemini_client import GeminiClient
from studyquest_app.modules.ai_services.engines.huggingface_client import HuggingFaceClient
from studyquest_app.modules.ai_services.logics.response_parser import ResponseParser
from studyquest_app.modules.ai_services import schemas
from studyquest_app.modules.ai_services.schemas import GeneratedQuestion, GeneratedQuestionSet, QuizAnalysis


class TestResponseParser:

    def test_raw_json(self):
        assert ResponseParser.extract_json('{"a": 1}') == {'a': 1}

    def test_fenced_json(self):
        assert ResponseParser.extract_json('```json\n{"a": 1}\n```') == {'a': 1}

    def test_json_surrounded_by_prose(self):
        text = 'Sure! Here you go: {"a": {"b": 2}} Hope this helps.'
        assert ResponseParser.extract_json(text) == {'a': {'b': 2}}

    def test_arrays_and_garbage_are_rejected(self):
        assert ResponseParser.extract_json('[1, 2]') is None
        assert ResponseParser.extract_json('not json at all') is None
        assert ResponseParser.extract_json('') is None


class TestSchemas:

    def test_generated_question_normalisation(self):
        question = GeneratedQuestion.model_validate({
            'question': 'Water boils at 100C at sea level.',
            'type': 'True_False',
            'difficulty': 'EASY',
            'correct_answer': True,
        })
        assert question.type == 'true_false'
        assert question.difficulty == 'easy'
        assert question.correct_answer == 'True'
        assert question.topic == 'General'

    def test_options_mapping_becomes_list(self):
        question = GeneratedQuestion.model_validate({
            'question': 'Pick one',
            'type': 'mcq',
            'difficulty': 'medium',
            'options': {'A': 'x', 'B': 'y'},
            'correct_answer': 'x',
        })
        assert question.options == ['x', 'y']

    def test_every_schema_ignores_extra_fields(self):
        models = [
            obj for _, obj in inspect.getmembers(schemas, inspect.isclass)
            if issubclass(obj, BaseModel) and obj is not BaseModel
        ]

        assert len(models) == 9
        for model in models:
            assert model.model_config.get('extra') == 'ignore', model.__name__


class TestAIGateway:

    def test_valid_response_is_validated(self, app, fake_ai):
        fake_ai.responses['quiz_analysis'] = {
            'overall_performance': 'Good work',
            'mastery_level': 'Intermediate',
            'unexpected_field': 'ignored',
        }
        result = AIGateway.generate_structured(QuizAnalysis, 'system', 'user', 0.3, 'quiz_analysis')

        assert isinstance(result, QuizAnalysis)
        assert result.mastery_level == 'intermediate'
        assert fake_ai.calls[0]['temperature'] == 0.3
        assert fake_ai.calls[0]['system_instruction'] == 'system'

    def test_prompt_carries_the_schema(self, app, fake_ai):
        fake_ai.responses['question_generation'] = {'questions': []}
        AIGateway.generate_structured(GeneratedQuestionSet, 'system', 'user', 0.7, 'question_generation')
        assert '"questions"' in fake_ai.calls[0]['prompt']

    def test_non_json_response_fails(self, app, fake_ai):
        fake_ai.responses['quiz_analysis'] = 'I cannot help with that.'
        with pytest.raises(UpstreamGenerationError) as excinfo:
            AIGateway.generate_structured(QuizAnalysis, 'system', 'user', 0.3, 'quiz_analysis')
        assert excinfo.value.status_code == 500
        assert excinfo.value.details == {'feature': 'quiz_analysis'}

    def test_schema_mismatch_fails(self, app, fake_ai):
        fake_ai.responses['quiz_analysis'] = {'strengths': ['none']}
        with pytest.raises(UpstreamGenerationError):
            AIGateway.generate_structured(QuizAnalysis, 'system', 'user', 0.3, 'quiz_analysis')

    def test_client_failure_fails(self, app, fake_ai):
        with pytest.raises(UpstreamGenerationError):
            AIGateway.generate_structured(QuizAnalysis, 'system', 'user', 0.3, 'quiz_analysis')

    def test_token_usage_is_signalled(self, app, fake_ai):
        fake_ai.responses['quiz_analysis'] = {'overall_performance': 'ok'}
        received = []

        def listener(sender, **kwargs):
            received.append(kwargs)

        with ai_token_used.connected_to(listener):
            AIGateway.generate_structured(QuizAnalysis, 'system', 'user', 0.3, 'quiz_analysis', user_id=7)

        assert received[0]['user_id'] == 7
        assert received[0]['feature'] == 'quiz_analysis'
        assert received[0]['provider'] == 'fake'


class TestAIServiceManager:

    def test_gemini_is_default(self, app):
        AIServiceManager.reset()
        service = AIServiceManager.get_service()
        assert isinstance(service, GeminiClient)
        assert service.model_name == app.config['GEMINI_MODEL']

    def test_client_is_reused_until_config_changes(self, app):
        AIServiceManager.reset()
        first = AIServiceManager.get_service()
        assert AIServiceManager.get_service() is first

        app.config['GEMINI_MODEL'] = 'gemini-other'
        assert AIServiceManager.get_service() is not first

    def test_missing_key_surfaces_as_upstream_error(self, app):
        AIServiceManager.reset()
        app.config['GEMINI_API_KEY'] = None
        with pytest.raises(UpstreamGenerationError):
            AIGateway.generate_structured(QuizAnalysis, 'system', 'user', 0.3, 'quiz_analysis')

    def test_unknown_provider(self, app):
        AIServiceManager.reset()
        app.config['AI_PROVIDER'] = 'carrier-pigeon'
        with pytest.raises(ValueError):
            AIServiceManager.get_service()

    def test_huggingface_provider(self, app):
        AIServiceManager.reset()
        app.config.update(AI_PROVIDER='huggingface', HUGGINGFACE_API_KEY='hf-test')
        service = AIServiceManager.get_service()
        assert isinstance(service, HuggingFaceClient)
        assert service.model_name == app.config['HUGGINGFACE_MODEL']


class TestGeminiClient:

    @patch('studyquest_app.modules.ai_services.engines.gemini_client.genai')
    def test_json_mode_and_success(self, genai, app):
        response = MagicMock(parts=['part'], text='{"ok": true}')
        genai.GenerativeModel.return_value.generate_content.return_value = response

        client = GeminiClient('key', model_name='gemini-test', max_output_tokens=128)
        success, text = client.generate_content('prompt', system_instruction='sys', temperature=0.3, json_mode=True)

        assert success is True
        assert text == '{"ok": true}'
        _, kwargs = genai.GenerativeModel.call_args
        assert kwargs['system_instruction'] == 'sys'
        assert kwargs['generation_config'] == {
            'max_output_tokens': 128,
            'temperature': 0.3,
            'response_mime_type': 'application/json',
        }

    @patch('studyquest_app.modules.ai_services.engines.gemini_client.genai')
    def test_api_errors_become_failures(self, genai, app):
        genai.GenerativeModel.return_value.generate_content.side_effect = google_exceptions.ResourceExhausted('quota')

        success, message = GeminiClient('key').generate_content('prompt')

        assert success is False
        assert 'ResourceExhausted' in message

    def test_missing_key(self, app):
        with pytest.raises(ValueError):
            GeminiClient(None)
