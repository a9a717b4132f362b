"""Quiz session state."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from mindmate.models.quiz import Answer, Question, QuizHistoryEntry

DEFAULT_TIME_LIMIT = 30


class SessionStatus(str, Enum):
    """Lifecycle of a quiz session."""

    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERROR = "error"


class QuizSession(BaseModel):
    """
    Immutable snapshot of a quiz session.

    Every transition in ``mindmate.graph.session`` returns a new snapshot
    instead of mutating this one.
    """

    status: SessionStatus = SessionStatus.LOADING
    questions: tuple[Question, ...] = ()
    position: int = Field(default=0, ge=0)
    answers: tuple[Answer | None, ...] = ()
    selected: Answer | None = None
    score: int = Field(default=0, ge=0)
    time_limit: int = Field(default=DEFAULT_TIME_LIMIT, ge=1)
    time_left: int = Field(default=DEFAULT_TIME_LIMIT, ge=0)
    error: str | None = None
    result: QuizHistoryEntry | None = None
    result_saved: bool = False

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @computed_field
    @property
    def total(self) -> int:
        """Number of questions in the session."""
        return len(self.questions)

    @property
    def current_question(self) -> Question | None:
        if not self.questions:
            return None
        return self.questions[self.position]

    @property
    def is_last_question(self) -> bool:
        return self.position >= len(self.questions) - 1


def create_initial_state(time_limit: int = DEFAULT_TIME_LIMIT) -> QuizSession:
    """
    Create a session waiting for its questions.

    Args:
        time_limit: Seconds allowed per question

    Returns:
        QuizSession in the loading state
    """
    return QuizSession(time_limit=time_limit, time_left=time_limit)
