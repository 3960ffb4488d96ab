"""Pydantic schemas for the JSON documents the language model must return."""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Difficulty = Literal['easy', 'medium', 'hard']
QuestionType = Literal['mcq', 'true_false', 'conceptual', 'application']


def _as_text(value: Any) -> Any:
    # Models often answer true/false questions with JSON booleans or numbers.
    if isinstance(value, bool):
        return 'True' if value else 'False'
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


class SelectedQuestion(BaseModel):
    id: int
    reasoning: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class QuestionSelection(BaseModel):
    selected_questions: List[SelectedQuestion] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class AnswerFeedback(BaseModel):
    is_correct: Optional[bool] = None
    feedback: str
    learning_tips: List[str] = Field(default_factory=list)
    difficulty_adjustment: Literal['easier', 'same', 'harder'] = 'same'
    confidence_level: Literal['low', 'medium', 'high'] = 'medium'
    related_concepts: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator('difficulty_adjustment', 'confidence_level', mode='before')
    @classmethod
    def normalize_choice(cls, value):
        return _lower(value)


class QuizAnalysis(BaseModel):
    overall_performance: str
    strengths: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)
    study_recommendations: List[str] = Field(default_factory=list)
    next_difficulty_level: Difficulty = 'medium'
    mastery_level: Literal['beginner', 'intermediate', 'advanced'] = 'beginner'
    time_management_feedback: str = ''

    model_config = ConfigDict(extra="ignore")

    @field_validator('next_difficulty_level', 'mastery_level', mode='before')
    @classmethod
    def normalize_choice(cls, value):
        return _lower(value)


class GeneratedQuestion(BaseModel):
    question: str
    type: QuestionType
    difficulty: Difficulty
    options: Optional[List[str]] = None
    correct_answer: str
    explanation: str = ''
    topic: str = 'General'
    keywords: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator('type', 'difficulty', mode='before')
    @classmethod
    def normalize_choice(cls, value):
        return _lower(value)

    @field_validator('correct_answer', mode='before')
    @classmethod
    def answer_as_text(cls, value):
        return _as_text(value)

    @field_validator('options', mode='before')
    @classmethod
    def options_as_list(cls, value):
        # {"A": "...", "B": "..."} is a common variation
        if isinstance(value, dict):
            return [str(option) for option in value.values()]
        return value


class GeneratedQuestionSet(BaseModel):
    questions: List[GeneratedQuestion] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class ExtractedDocument(BaseModel):
    title: str
    key_concepts: List[str] = Field(default_factory=list)
    summary: str = ''
    content: str

    model_config = ConfigDict(extra="ignore")


class KeyConcept(BaseModel):
    concept: str
    definition: str
    importance: Literal['high', 'medium', 'low'] = 'medium'

    model_config = ConfigDict(extra="ignore")

    @field_validator('importance', mode='before')
    @classmethod
    def normalize_choice(cls, value):
        return _lower(value)


class NoteSummaryResult(BaseModel):
    title: str
    key_concepts: List[KeyConcept] = Field(default_factory=list)
    summary: str
    study_tips: List[str] = Field(default_factory=list)
    potential_exam_topics: List[str] = Field(default_factory=list)
    difficulty_areas: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
