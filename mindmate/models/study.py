"""Pydantic models for summaries, flashcards, papers and tutor chat."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .quiz import QuestionDifficulty


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Flashcard(CamelModel):
    """A question/answer card with a difficulty tag."""

    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    difficulty: QuestionDifficulty = Field(default=QuestionDifficulty.MEDIUM)

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v):
        """Models sometimes capitalise the difficulty."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class FlashcardList(CamelModel):
    """Flashcards returned by the flashcard generator."""

    flashcards: list[Flashcard]


class SummaryReply(CamelModel):
    """Shape the model must return for a summary request."""

    summary: str = Field(..., min_length=1)
    key_points: list[str] = Field(default_factory=list)


class SummaryResult(CamelModel):
    """Summary plus the statistics derived from it."""

    summary: str
    key_points: list[str] = Field(default_factory=list)
    original_length: int = Field(..., ge=0)
    summary_length: int = Field(..., ge=0)
    compression_rate: int
    estimated_read_time: int = Field(..., ge=0)


class Paper(CamelModel):
    """An arXiv paper with an AI-written summary and citation."""

    id: str
    title: str
    authors: list[str] = Field(default_factory=list)
    published: int | None = None
    abstract: str = ""
    ai_summary: str = ""
    citation: str = ""
    url: str = ""


class PaperSearchResult(CamelModel):
    papers: list[Paper] = Field(default_factory=list)
    message: str | None = None


class ChatTurn(CamelModel):
    """One prior turn of a tutor conversation."""

    role: Literal["user", "assistant"]
    content: str


class TutorReply(CamelModel):
    response: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ExtractedText(CamelModel):
    """Plain text pulled out of an uploaded document."""

    text: str
    file_name: str
    file_type: str
