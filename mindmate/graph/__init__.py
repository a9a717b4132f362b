"""Quiz session state machine."""

from .session import (
    advance,
    is_timer_running,
    load_failed,
    load_questions,
    persist_result,
    retreat,
    retry,
    select_answer,
    tick,
)
from .state import QuizSession, SessionStatus, create_initial_state

__all__ = [
    "QuizSession",
    "SessionStatus",
    "create_initial_state",
    "load_questions",
    "load_failed",
    "select_answer",
    "advance",
    "retreat",
    "retry",
    "tick",
    "is_timer_running",
    "persist_result",
]
