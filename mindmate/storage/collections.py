"""Flashcard and quiz-history collections persisted in a key-value store."""

import logging

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from mindmate.models.quiz import QuizHistoryEntry
from mindmate.models.study import Flashcard
from mindmate.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

FLASHCARDS_KEY = "mindmate-flashcards"
HISTORY_KEY = "mindmate-quiz-history"
DEFAULT_HISTORY_LIMIT = 10

_flashcards_adapter = TypeAdapter(list[Flashcard])
_history_adapter = TypeAdapter(list[QuizHistoryEntry])


class FlashcardStore:
    """The most recently generated flashcards."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> list[Flashcard]:
        raw = self.store.get(FLASHCARDS_KEY)
        if not raw:
            return []
        try:
            return _flashcards_adapter.validate_json(raw)
        except SchemaError as e:
            logger.error("Failed to load flashcards: %s", e)
            return []

    def save(self, flashcards: list[Flashcard]) -> None:
        """Replace the whole collection."""
        self.store.set(
            FLASHCARDS_KEY, _flashcards_adapter.dump_json(flashcards, by_alias=True).decode()
        )

    def clear(self) -> None:
        self.store.delete(FLASHCARDS_KEY)


class QuizHistoryStore:
    """Completed quiz results, newest first, capped at ``limit`` entries."""

    def __init__(self, store: KeyValueStore, limit: int = DEFAULT_HISTORY_LIMIT):
        self.store = store
        self.limit = limit

    def load(self) -> list[QuizHistoryEntry]:
        raw = self.store.get(HISTORY_KEY)
        if not raw:
            return []
        try:
            return _history_adapter.validate_json(raw)
        except SchemaError as e:
            logger.error("Failed to load quiz history: %s", e)
            return []

    def add(self, entry: QuizHistoryEntry) -> list[QuizHistoryEntry]:
        """
        Prepend an entry and drop the oldest beyond the limit.

        Args:
            entry: Result of a completed session

        Returns:
            The persisted history
        """
        history = [entry, *self.load()][: self.limit]
        self.store.set(HISTORY_KEY, _history_adapter.dump_json(history).decode())
        logger.info(
            "Saved quiz result %d/%d (%d%%)", entry.score, entry.total, entry.percentage
        )
        return history

    def clear(self) -> None:
        self.store.delete(HISTORY_KEY)
