"""Tests for the Quiz Generator Agent."""

import json
from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage

from mindmate.agents.quiz_generator import (
    FAILURE_MESSAGE,
    generate_advanced_quiz,
    generate_quiz,
)
from mindmate.config.settings import Settings
from mindmate.errors import UpstreamParseError, UpstreamServiceError, ValidationError
from mindmate.models.quiz import QuestionType


class TestGenerateQuiz:
    """Test generate_quiz."""

    def test_returns_questions(self, settings: Settings, fake_llm, questions_reply: str):
        """Test that multiple-choice questions are parsed from the reply."""
        questions = generate_quiz("Notes", settings, fake_llm(questions_reply))

        assert len(questions) == 3
        assert all(q.type == QuestionType.MULTIPLE_CHOICE for q in questions)
        assert questions[2].correct_answer == 2

    def test_empty_question_list(self, settings: Settings, fake_llm):
        """Test that an empty list is returned for the caller to handle."""
        assert generate_quiz("Notes", settings, fake_llm('{"questions": []}')) == []

    def test_out_of_range_answer_fails(self, settings: Settings, fake_llm):
        """Test that an invalid option index fails schema validation."""
        reply = json.dumps(
            {"questions": [{"question": "Q?", "options": ["a", "b"], "correctAnswer": 5}]}
        )

        with pytest.raises(UpstreamParseError) as exc_info:
            generate_quiz("Notes", settings, fake_llm(reply))

        assert exc_info.value.message == FAILURE_MESSAGE

    def test_upstream_failure(self, settings: Settings):
        """Test that a failing model call is reported with its status."""
        error = Exception("Service unavailable")
        error.status_code = 503
        llm = MagicMock()
        llm.invoke.side_effect = error

        with pytest.raises(UpstreamServiceError) as exc_info:
            generate_quiz("Notes", settings, lambda *args, **kwargs: llm)

        assert exc_info.value.status_code == 503

    def test_requires_text(self, settings: Settings, fake_llm):
        """Test that missing text is rejected."""
        with pytest.raises(ValidationError):
            generate_quiz("", settings, fake_llm("unused"))


class TestGenerateAdvancedQuiz:
    """Test generate_advanced_quiz."""

    def test_parses_mixed_types(self, settings: Settings, fake_llm):
        """Test that each question type is parsed with its answer shape."""
        reply = json.dumps(
            {
                "questions": [
                    {
                        "type": "multiple-choice",
                        "question": "Which organelle?",
                        "options": ["Nucleus", "Chloroplast", "Ribosome", "Vacuole"],
                        "correctAnswer": 1,
                        "explanation": "Chloroplasts do photosynthesis",
                    },
                    {
                        "type": "true-false",
                        "question": "Plants need light.",
                        "correctAnswer": True,
                        "explanation": "Light drives the reaction",
                    },
                    {
                        "type": "fill-blank",
                        "question": "Plants release ___.",
                        "correctAnswer": "oxygen",
                        "explanation": "Oxygen is a by-product",
                    },
                ]
            }
        )

        questions = generate_advanced_quiz("Notes", settings=settings, make_llm=fake_llm(reply))

        assert [q.type for q in questions] == [
            QuestionType.MULTIPLE_CHOICE,
            QuestionType.TRUE_FALSE,
            QuestionType.FILL_BLANK,
        ]
        assert questions[1].correct_answer is True
        assert questions[2].correct_answer == "oxygen"

    def test_requested_types_are_in_prompt(self, settings: Settings):
        """Test that the requested question types reach the system prompt."""
        llm = MagicMock()
        llm.invoke.return_value = AIMessage(content='{"questions": []}')

        generate_advanced_quiz(
            "Notes",
            [QuestionType.TRUE_FALSE, QuestionType.FILL_BLANK],
            settings,
            lambda *args, **kwargs: llm,
        )

        system_message = llm.invoke.call_args[0][0][0]
        assert "true-false, fill-blank" in system_message.content

    def test_wrong_answer_shape_fails(self, settings: Settings, fake_llm):
        """Test that a true/false question with a string answer fails."""
        reply = json.dumps(
            {"questions": [{"type": "true-false", "question": "Q", "correctAnswer": "true"}]}
        )

        with pytest.raises(UpstreamParseError):
            generate_advanced_quiz("Notes", settings=settings, make_llm=fake_llm(reply))
