"""Per-client persistence."""

from .collections import FlashcardStore, QuizHistoryStore
from .kv import KeyValueStore, MemoryStore, ScopedStore, SQLiteStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "ScopedStore",
    "FlashcardStore",
    "QuizHistoryStore",
]
