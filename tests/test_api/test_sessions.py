"""Tests for the per-client quiz session manager."""

from datetime import timedelta

import pytest

from mindmate.api.sessions import QuizSessionManager
from mindmate.errors import SessionNotFoundError
from mindmate.graph import SessionStatus, advance, load_questions, select_answer
from mindmate.storage.collections import QuizHistoryStore


@pytest.fixture
def manager() -> QuizSessionManager:
    return QuizSessionManager(time_limit=20, timeout_minutes=120)


class TestQuizSessionManager:
    """Test QuizSessionManager."""

    def test_begin_creates_loading_session(self, manager: QuizSessionManager):
        """Test that a new session waits for questions with the configured limit."""
        state = manager.begin("client-1")

        assert state.status == SessionStatus.LOADING
        assert state.time_limit == 20
        assert manager.get("client-1") == state

    def test_begin_replaces_existing(self, manager, sample_questions, history_store):
        """Test that starting again drops the previous session."""
        manager.begin("client-1")
        manager.apply("client-1", load_questions, sample_questions, history=history_store)

        assert manager.begin("client-1").status == SessionStatus.LOADING

    def test_require_without_session(self, manager: QuizSessionManager):
        """Test that a missing session is a 404 error."""
        with pytest.raises(SessionNotFoundError) as exc_info:
            manager.require("nobody")

        assert exc_info.value.status_code == 404

    def test_apply_stores_new_state(self, manager, sample_questions, history_store):
        """Test that transitions are applied and kept."""
        manager.begin("client-1")
        manager.apply("client-1", load_questions, sample_questions, history=history_store)
        manager.apply("client-1", select_answer, 1, history=history_store)

        state = manager.apply("client-1", advance, history=history_store)

        assert state.position == 1
        assert manager.require("client-1") == state

    def test_stale_position_is_ignored(self, manager, sample_questions, history_store):
        """Test that an event for another position leaves the session unchanged."""
        manager.begin("client-1")
        before = manager.apply("client-1", load_questions, sample_questions, history=history_store)

        after = manager.apply("client-1", advance, history=history_store, expected_position=2)

        assert after == before

    def test_completion_is_persisted(self, manager, sample_questions, history_store: QuizHistoryStore):
        """Test that finishing the quiz writes history through the manager."""
        manager.begin("client-1")
        manager.apply("client-1", load_questions, sample_questions, history=history_store)
        for value in (1, True, "Orwell"):
            manager.apply("client-1", select_answer, value, history=history_store)
            state = manager.apply("client-1", advance, history=history_store)

        assert state.status == SessionStatus.COMPLETED
        assert state.result_saved
        assert len(history_store.load()) == 1

    def test_sessions_expire(self, manager: QuizSessionManager):
        """Test that idle sessions are dropped."""
        manager.begin("client-1")
        manager._sessions["client-1"].touched_at -= timedelta(minutes=121)

        assert manager.get("client-1") is None

    def test_begin_drops_abandoned_sessions(self, manager: QuizSessionManager):
        """Test that idle sessions of clients that never return are removed."""
        for n in range(100):
            manager.begin(f"gone-{n}")
            manager._sessions[f"gone-{n}"].touched_at -= timedelta(hours=5)

        manager.begin("fresh")

        assert list(manager._sessions) == ["fresh"]

    def test_apply_drops_abandoned_sessions(self, manager, sample_questions, history_store):
        """Test that a transition for one client clears other idle sessions."""
        manager.begin("gone")
        manager.begin("client-1")
        manager._sessions["gone"].touched_at -= timedelta(hours=5)

        manager.apply("client-1", load_questions, sample_questions, history=history_store)

        assert list(manager._sessions) == ["client-1"]

    def test_discard(self, manager: QuizSessionManager):
        """Test that discard removes the session."""
        manager.begin("client-1")

        assert manager.discard("client-1") is True
        assert manager.discard("client-1") is False
        assert manager.get("client-1") is None
