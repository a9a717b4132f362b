"""In-memory quiz sessions, one per browser client."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from mindmate.errors import SessionNotFoundError
from mindmate.graph.session import persist_result
from mindmate.graph.state import QuizSession, create_initial_state
from mindmate.storage.collections import QuizHistoryStore

logger = logging.getLogger(__name__)

NO_SESSION_MESSAGE = "No active quiz. Please start a new quiz."

Transition = Callable[..., QuizSession]


@dataclass
class _Entry:
    state: QuizSession
    touched_at: datetime


class QuizSessionManager:
    """
    Holds the live quiz session of each client and applies transitions.

    Transitions are serialized by a lock, and every transition is followed
    by ``persist_result`` so a completed session reaches history once.
    """

    def __init__(self, time_limit: int = 30, timeout_minutes: int = 120):
        self.time_limit = time_limit
        self.timeout = timedelta(minutes=timeout_minutes)
        self._sessions: dict[str, _Entry] = {}
        self._lock = threading.RLock()

    def _is_expired(self, entry: _Entry, now: datetime) -> bool:
        return now - entry.touched_at > self.timeout

    def _sweep_expired(self, now: datetime) -> None:
        # Expired sessions are dropped without saving anything
        expired = [
            client_id
            for client_id, entry in self._sessions.items()
            if self._is_expired(entry, now)
        ]
        for client_id in expired:
            del self._sessions[client_id]
        if expired:
            logger.info("Dropped %d expired quiz sessions", len(expired))

    def begin(self, client_id: str) -> QuizSession:
        """Replace any existing session with a fresh one in the loading state."""
        with self._lock:
            now = datetime.now()
            self._sweep_expired(now)
            state = create_initial_state(self.time_limit)
            self._sessions[client_id] = _Entry(state, now)
            logger.info("New quiz session for client %s", client_id)
            return state

    def get(self, client_id: str) -> QuizSession | None:
        with self._lock:
            entry = self._sessions.get(client_id)
            if entry is None:
                return None
            if self._is_expired(entry, datetime.now()):
                del self._sessions[client_id]
                logger.info("Quiz session for client %s expired", client_id)
                return None
            return entry.state

    def require(self, client_id: str) -> QuizSession:
        state = self.get(client_id)
        if state is None:
            raise SessionNotFoundError(NO_SESSION_MESSAGE)
        return state

    def apply(
        self,
        client_id: str,
        transition: Transition,
        *args: Any,
        history: QuizHistoryStore,
        expected_position: int | None = None,
    ) -> QuizSession:
        """
        Apply a transition to the client's session.

        Args:
            client_id: Browser client
            transition: Function from (state, *args) to the next state
            *args: Event payload
            history: Where completed results are saved
            expected_position: Position the client saw; a mismatch means the
                event is stale and the session is returned unchanged

        Returns:
            The session after the transition
        """
        with self._lock:
            self._sweep_expired(datetime.now())
            state = self.require(client_id)
            if expected_position is not None and expected_position != state.position:
                logger.info(
                    "Ignoring stale %s for client %s (position %d, expected %d)",
                    transition.__name__,
                    client_id,
                    state.position,
                    expected_position,
                )
                return state

            new_state = persist_result(transition(state, *args), history)
            self._sessions[client_id] = _Entry(new_state, datetime.now())
            if new_state.status != state.status:
                logger.info(
                    "Quiz session for client %s: %s -> %s",
                    client_id,
                    state.status.value,
                    new_state.status.value,
                )
            return new_state

    def discard(self, client_id: str) -> bool:
        """Drop the client's session. Nothing is persisted."""
        with self._lock:
            return self._sessions.pop(client_id, None) is not None
