"""Pydantic models for quiz data structures."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Answer = int | bool | str


class QuestionType(str, Enum):
    """Kinds of quiz questions."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    FILL_BLANK = "fill-blank"


class QuestionDifficulty(str, Enum):
    """Difficulty levels for flashcards."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Question(BaseModel):
    """A single quiz question. Immutable once generated."""

    type: QuestionType = Field(
        default=QuestionType.MULTIPLE_CHOICE,
        description="Question kind",
    )
    question: str = Field(..., min_length=1, description="The question text")
    options: tuple[str, ...] | None = Field(
        None,
        description="Answer options (multiple-choice only)",
    )
    correct_answer: Answer = Field(
        ...,
        description="Option index, boolean or expected word depending on type",
    )
    explanation: str = Field(
        default="",
        description="Explanation of the correct answer",
    )

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "type": "multiple-choice",
                "question": "What is the capital of France?",
                "options": ["London", "Paris", "Berlin", "Madrid"],
                "correctAnswer": 1,
                "explanation": "Paris has been the capital of France since 987 AD.",
            }
        },
    )

    @model_validator(mode="after")
    def check_answer_matches_type(self) -> "Question":
        """Ensure the correct answer has the shape the question type needs."""
        if self.type == QuestionType.MULTIPLE_CHOICE:
            if not self.options or len(self.options) < 2:
                raise ValueError("Multiple-choice questions need at least two options")
            if isinstance(self.correct_answer, bool) or not isinstance(
                self.correct_answer, int
            ):
                raise ValueError("correctAnswer must be an option index")
            if not 0 <= self.correct_answer < len(self.options):
                raise ValueError("correctAnswer is out of range")
        elif self.type == QuestionType.TRUE_FALSE:
            if not isinstance(self.correct_answer, bool):
                raise ValueError("correctAnswer must be true or false")
        else:
            if not isinstance(self.correct_answer, str) or not self.correct_answer.strip():
                raise ValueError("correctAnswer must be a non-empty string")
        return self

    def is_correct(self, answer: Answer | None) -> bool:
        """Check a committed answer. A missing answer is never correct."""
        if answer is None:
            return False
        if self.type == QuestionType.FILL_BLANK:
            return (
                isinstance(answer, str)
                and answer.strip().casefold() == self.correct_answer.strip().casefold()
            )
        # bool is a subclass of int, so compare exact types
        return type(answer) is type(self.correct_answer) and answer == self.correct_answer


class QuestionList(BaseModel):
    """List of questions returned by the quiz generators."""

    questions: list[Question] = Field(
        ...,
        description="List of generated questions",
    )


class QuizHistoryEntry(BaseModel):
    """Summary of a completed quiz session."""

    timestamp: datetime = Field(default_factory=datetime.now)
    score: int = Field(..., ge=0)
    total: int = Field(..., ge=1)
    percentage: int = Field(..., ge=0, le=100)

    model_config = ConfigDict(frozen=True)
