"""Data models for MindMate."""

from .quiz import (
    Answer,
    Question,
    QuestionDifficulty,
    QuestionList,
    QuestionType,
    QuizHistoryEntry,
)
from .study import (
    CamelModel,
    ChatTurn,
    ExtractedText,
    Flashcard,
    FlashcardList,
    Paper,
    PaperSearchResult,
    SummaryReply,
    SummaryResult,
    TutorReply,
)

__all__ = [
    "Answer",
    "Question",
    "QuestionDifficulty",
    "QuestionList",
    "QuestionType",
    "QuizHistoryEntry",
    "CamelModel",
    "ChatTurn",
    "ExtractedText",
    "Flashcard",
    "FlashcardList",
    "Paper",
    "PaperSearchResult",
    "SummaryReply",
    "SummaryResult",
    "TutorReply",
]
