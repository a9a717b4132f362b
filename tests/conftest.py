"""Shared test fixtures and configuration for pytest."""

import json
from datetime import datetime
from typing import Any

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models import FakeListChatModel

from mindmate.api.app import create_app
from mindmate.api.dependencies import get_chat_model_factory
from mindmate.config.settings import Settings
from mindmate.models.quiz import Question, QuestionDifficulty, QuestionType, QuizHistoryEntry
from mindmate.models.study import Flashcard, SummaryResult
from mindmate.storage.collections import QuizHistoryStore
from mindmate.storage.kv import MemoryStore


class RecordingChatModelFactory:
    """
    Chat model factory that hands out fake models with canned replies.

    Each call records the keyword arguments it was built with, so tests can
    check temperatures and token limits per request kind.
    """

    def __init__(self, responses: list[str]):
        self.responses = responses
        self.calls: list[dict[str, Any]] = []

    def __call__(self, settings: Settings, **kwargs: Any) -> FakeListChatModel:
        self.calls.append(kwargs)
        return FakeListChatModel(responses=self.responses)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Create Settings with a configured key and temporary directories."""
    return Settings(
        LLM_PROVIDER="openai",
        OPENAI_API_KEY="test-key",
        DATA_DIR=str(tmp_path / "data"),
        LOG_DIR=str(tmp_path / "log"),
        DEFAULT_OUTPUT_DIR=str(tmp_path / "output"),
    )


@pytest.fixture
def settings_without_key(tmp_path) -> Settings:
    """Create Settings with no provider credential."""
    return Settings(
        LLM_PROVIDER="openai",
        OPENAI_API_KEY=None,
        DATA_DIR=str(tmp_path / "data"),
        LOG_DIR=str(tmp_path / "log"),
    )


@pytest.fixture
def fake_llm():
    """Build a recording factory replying with the given responses."""

    def _make(*responses: str) -> RecordingChatModelFactory:
        return RecordingChatModelFactory(list(responses))

    return _make


@pytest.fixture
def sample_question() -> Question:
    """Create a sample multiple-choice Question for testing."""
    return Question(
        type=QuestionType.MULTIPLE_CHOICE,
        question="What is the capital of France?",
        options=("London", "Paris", "Berlin", "Madrid"),
        correct_answer=1,
        explanation="Paris is the capital and largest city of France.",
    )


@pytest.fixture
def sample_questions() -> list[Question]:
    """Create one question of each type for testing."""
    return [
        Question(
            type=QuestionType.MULTIPLE_CHOICE,
            question="What is 2 + 2?",
            options=("3", "4", "5", "6"),
            correct_answer=1,
            explanation="Basic addition: 2 + 2 = 4",
        ),
        Question(
            type=QuestionType.TRUE_FALSE,
            question="Light travels faster than sound.",
            correct_answer=True,
            explanation="Light is about 880,000 times faster than sound in air.",
        ),
        Question(
            type=QuestionType.FILL_BLANK,
            question="George ___ wrote '1984'.",
            correct_answer="Orwell",
            explanation="George Orwell wrote the dystopian novel '1984' in 1949.",
        ),
    ]


@pytest.fixture
def sample_flashcards() -> list[Flashcard]:
    """Create sample flashcards for testing."""
    return [
        Flashcard(
            question="What is photosynthesis?",
            answer="Conversion of light energy into chemical energy",
            difficulty=QuestionDifficulty.EASY,
        ),
        Flashcard(
            question="Where does the Calvin cycle take place?",
            answer="In the stroma of the chloroplast",
            difficulty=QuestionDifficulty.HARD,
        ),
    ]


@pytest.fixture
def sample_summary() -> SummaryResult:
    """Create a sample SummaryResult for testing."""
    return SummaryResult(
        summary="Plants turn light into chemical energy.",
        key_points=["Light reactions make ATP", "The Calvin cycle fixes carbon"],
        original_length=400,
        summary_length=39,
        compression_rate=90,
        estimated_read_time=1,
    )


@pytest.fixture
def sample_history() -> list[QuizHistoryEntry]:
    """Create sample quiz history, newest first."""
    return [
        QuizHistoryEntry(timestamp=datetime(2024, 1, 2, 9, 30), score=8, total=10, percentage=80),
        QuizHistoryEntry(timestamp=datetime(2024, 1, 1, 12, 0), score=3, total=3, percentage=100),
    ]


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def history_store(memory_store: MemoryStore) -> QuizHistoryStore:
    return QuizHistoryStore(memory_store.scoped("client-1"), limit=10)


@pytest.fixture
def questions_reply() -> str:
    """A model reply with three multiple-choice questions."""
    return json.dumps(
        {
            "questions": [
                {
                    "question": f"Question {i}?",
                    "options": ["A", "B", "C", "D"],
                    "correctAnswer": i % 4,
                    "explanation": f"Because {i}",
                }
                for i in range(3)
            ]
        }
    )


@pytest.fixture
def make_client(settings: Settings, memory_store: MemoryStore):
    """
    Build a TestClient for an app using an in-memory store.

    Args passed to the returned function:
        make_llm: Optional chat model factory replacing the real providers
        app_settings: Optional settings replacing the default fixture
    """
    clients = []

    def _make(make_llm=None, app_settings: Settings | None = None) -> TestClient:
        app = create_app(app_settings or settings, store=memory_store)
        if make_llm is not None:
            app.dependency_overrides[get_chat_model_factory] = lambda: make_llm
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
