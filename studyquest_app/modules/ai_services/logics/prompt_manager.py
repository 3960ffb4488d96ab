"""
Prompt Manager - Builds the system and user prompts for every AI feature.

Contains pure functions only: no database and no external API calls.
Callers pass plain dictionaries so the prompts can be unit-tested directly.
"""
from typing import Any, Dict, List, Optional, Tuple

from studyquest_app.utils.math_utils import round_half_up

# --- SYSTEM PROMPTS ---

QUIZ_SELECTION_SYSTEM_PROMPT = (
    "You are an adaptive learning system. Select {count} questions that will optimally "
    "challenge the user based on their performance history and learning needs.\n\n"
    "Selection criteria:\n"
    "- Balance question types and difficulties\n"
    "- Consider the user's past performance and weak areas\n"
    "- Increase difficulty progressively if the user is performing well\n"
    "- Include review questions for concepts they have struggled with\n"
    "- Keep the quiz varied and engaging\n"
    "Only select ids that appear in the candidate list."
)

ANSWER_FEEDBACK_SYSTEM_PROMPT = (
    "You are an intelligent tutoring system giving personalised feedback.\n\n"
    "Provide:\n"
    "- A clear explanation of why the answer is correct or incorrect\n"
    "- Specific learning tips to improve understanding\n"
    "- A difficulty adjustment suggestion based on this answer\n"
    "- An assessment of the student's confidence level\n"
    "- Related concepts worth reviewing"
)

QUIZ_ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert educational analyst reviewing a finished quiz.\n\n"
    "Provide:\n"
    "- A detailed performance assessment\n"
    "- Specific strengths and weaknesses\n"
    "- Actionable study recommendations\n"
    "- The difficulty level the student should attempt next\n"
    "- Feedback on time management"
)

QUESTION_GENERATION_SYSTEM_PROMPT = (
    "You are an expert educator who writes high-quality study questions.\n\n"
    "Guidelines:\n"
    "- mcq questions have exactly four options and correct_answer is the full text of one option\n"
    "- true_false questions use 'True' or 'False' as correct_answer\n"
    "- conceptual and application questions have a short model answer as correct_answer\n"
    "- Every question has a clear explanation, a topic and a few keywords\n"
    "- Questions must be answerable from the provided content"
)

DOCUMENT_EXTRACTION_SYSTEM_PROMPT = (
    "You are an expert at reading study material. Structure the document into a title, "
    "its key concepts, a short summary and the cleaned educational content. "
    "Drop headers, footers, page numbers and other layout noise."
)

QUESTION_BANK_SYSTEM_PROMPT = (
    "You are an expert educator building a comprehensive question bank from study material.\n\n"
    "Target distribution:\n"
    "- Question types: 40% mcq, 20% true_false, 25% conceptual, 15% application\n"
    "- Difficulty: 30% easy, 50% medium, 20% hard (centred on the requested difficulty)\n\n"
    "Cover every key concept. mcq questions have exactly four options and correct_answer is "
    "the full text of one option; true_false questions use 'True' or 'False'."
)

NOTE_SUMMARY_SYSTEM_PROMPT = (
    "You are an expert study assistant. Summarise the student's notes so they can revise "
    "efficiently: identify the key concepts with definitions and importance, write a concise "
    "summary, give study tips, list likely exam topics and point out difficult areas."
)

JSON_INSTRUCTIONS = (
    "\n\nRespond with a single JSON object only, no prose and no markdown fences. "
    "The object must conform to this JSON schema:\n{schema}"
)

QUESTION_PREVIEW_CHARS = 100


class PromptManager:
    """Consolidated builders for every AI prompt. Each returns (system, user)."""

    @staticmethod
    def _join(items: Optional[List[str]], fallback: str) -> str:
        return ", ".join(items) if items else fallback

    @staticmethod
    def build_quiz_selection_prompt(
        subject: str,
        count: int,
        preferred_difficulty: str,
        progress: Optional[Dict[str, Any]],
        candidates: List[Dict[str, Any]],
    ) -> Tuple[str, str]:
        """
        Describe the user's history and the numbered candidate list.

        ``candidates`` are dicts with id, difficulty, type, topic and question.
        """
        progress = progress or {}
        average = progress.get('average_score')
        history = (
            f"- Average Score: {round_half_up(average) if average else 'No history'}\n"
            f"- Weak Topics: {PromptManager._join(progress.get('weak_topics'), 'Unknown')}\n"
            f"- Strong Topics: {PromptManager._join(progress.get('strong_topics'), 'Unknown')}\n"
            f"- Preferred Difficulty: {preferred_difficulty}"
        )

        lines = []
        for index, candidate in enumerate(candidates, start=1):
            text = candidate['question'] or ''
            if len(text) > QUESTION_PREVIEW_CHARS:
                text = text[:QUESTION_PREVIEW_CHARS] + '...'
            lines.append(
                f"{index}. (id={candidate['id']}) [{candidate['difficulty']}] "
                f"[{candidate['type']}] {candidate.get('topic') or 'General'}: {text}"
            )

        user_prompt = (
            f"Select {count} optimal questions for a {subject} quiz.\n\n"
            f"User Performance History:\n{history}\n\n"
            f"Available Questions:\n" + "\n".join(lines) + "\n\n"
            "Select questions that help the user learn effectively while keeping an "
            "appropriate challenge level. Return each selected id with a short reasoning."
        )
        return QUIZ_SELECTION_SYSTEM_PROMPT.format(count=count), user_prompt

    @staticmethod
    def build_answer_feedback_prompt(
        question: Dict[str, Any], user_answer: str, time_taken: float, is_correct: bool
    ) -> Tuple[str, str]:
        options = question.get('options')
        options_line = f"Options: {', '.join(options)}\n" if options else ""
        verdict = "answered correctly" if is_correct else "answered incorrectly"
        user_prompt = (
            "Provide feedback for this quiz question:\n\n"
            f"Question: {question['question']}\n"
            f"Type: {question['type']}\n"
            f"Difficulty: {question['difficulty']}\n"
            f"Topic: {question.get('topic') or 'General'}\n"
            f"{options_line}\n"
            f"Correct Answer: {question['correct_answer']}\n"
            f"User Answer: {user_answer}\n"
            f"Time Taken: {time_taken} seconds\n"
            f"Explanation: {question.get('explanation') or ''}\n\n"
            f"The user {verdict}. Provide constructive feedback to help them learn."
        )
        return ANSWER_FEEDBACK_SYSTEM_PROMPT, user_prompt

    @staticmethod
    def build_quiz_analysis_prompt(
        subject: str,
        score: int,
        correct_answers: int,
        total_questions: int,
        average_time: float,
        transcript: List[Dict[str, Any]],
    ) -> Tuple[str, str]:
        """``transcript`` holds topic, difficulty, is_correct, time_taken, user_answer, correct_answer."""
        blocks = []
        for index, row in enumerate(transcript, start=1):
            blocks.append(
                f"{index}. {row.get('topic') or 'Unknown Topic'} ({row.get('difficulty') or 'Unknown'})\n"
                f"   - Correct: {'Yes' if row['is_correct'] else 'No'}\n"
                f"   - Time: {row.get('time_taken') or 0}s\n"
                f"   - User Answer: {row.get('user_answer')}\n"
                f"   - Correct Answer: {row.get('correct_answer') or 'Unknown'}"
            )
        performance = "\n".join(blocks) if blocks else "No questions were answered."
        user_prompt = (
            "Analyze this quiz performance:\n\n"
            f"Subject: {subject}\n"
            f"Score: {score}% ({correct_answers}/{total_questions})\n"
            f"Average Time per Question: {average_time:.1f} seconds\n\n"
            f"Question Performance:\n{performance}\n\n"
            "Give a comprehensive analysis with actionable recommendations."
        )
        return QUIZ_ANALYSIS_SYSTEM_PROMPT, user_prompt

    @staticmethod
    def build_question_generation_prompt(
        content: str, subject: str, difficulty: str, question_type: str, count: int
    ) -> Tuple[str, str]:
        if question_type == 'mixed':
            type_line = "a mix of mcq, true_false, conceptual and application questions"
        else:
            type_line = f"{question_type} questions"
        user_prompt = (
            f"Generate {count} {difficulty} {type_line} about {subject or 'the material'} "
            "from the following content:\n\n"
            f"{content}\n\n"
            f"Set every question's difficulty to '{difficulty}'."
        )
        return QUESTION_GENERATION_SYSTEM_PROMPT, user_prompt

    @staticmethod
    def build_document_extraction_prompt(text: str, filename: str) -> Tuple[str, str]:
        user_prompt = (
            f"Extract and structure the educational content of the document '{filename}':\n\n"
            f"{text}"
        )
        return DOCUMENT_EXTRACTION_SYSTEM_PROMPT, user_prompt

    @staticmethod
    def build_question_bank_prompt(
        document: Dict[str, Any], subject: str, difficulty: str, count: int
    ) -> Tuple[str, str]:
        user_prompt = (
            f"Create {count} questions for a {subject} question bank.\n\n"
            f"Title: {document['title']}\n"
            f"Key Concepts: {PromptManager._join(document.get('key_concepts'), 'None listed')}\n"
            f"Summary: {document.get('summary') or ''}\n"
            f"Requested Difficulty: {difficulty}\n\n"
            f"Content:\n{document['content']}"
        )
        return QUESTION_BANK_SYSTEM_PROMPT, user_prompt

    @staticmethod
    def build_note_summary_prompt(content: str, subject: Optional[str]) -> Tuple[str, str]:
        subject_line = f" for {subject}" if subject else ""
        user_prompt = f"Summarise these study notes{subject_line}:\n\n{content}"
        return NOTE_SUMMARY_SYSTEM_PROMPT, user_prompt
