"""Quiz session transitions.

Each function takes the current session snapshot (plus the event payload)
and returns the next snapshot. Events that do not apply to the current
status return the session unchanged.
"""

from collections.abc import Sequence
from datetime import datetime

from mindmate.graph.state import QuizSession, SessionStatus
from mindmate.models.quiz import Answer, Question, QuizHistoryEntry
from mindmate.storage.collections import QuizHistoryStore
from mindmate.utils import round_half_up

NO_QUESTIONS_MESSAGE = "No questions were generated. Please try again."


def load_questions(state: QuizSession, questions: Sequence[Question]) -> QuizSession:
    """
    Loading -> InProgress once questions arrive.

    An empty question list moves the session to Error instead.
    """
    if state.status != SessionStatus.LOADING:
        return state
    if not questions:
        return load_failed(state, NO_QUESTIONS_MESSAGE)

    return state.model_copy(
        update={
            "status": SessionStatus.IN_PROGRESS,
            "questions": tuple(questions),
            "position": 0,
            "answers": (None,) * len(questions),
            "selected": None,
            "score": 0,
            "time_left": state.time_limit,
            "error": None,
        }
    )


def load_failed(state: QuizSession, message: str) -> QuizSession:
    """Loading -> Error."""
    if state.status != SessionStatus.LOADING:
        return state
    return state.model_copy(update={"status": SessionStatus.ERROR, "error": message})


def select_answer(state: QuizSession, answer: Answer | None) -> QuizSession:
    """Record a tentative answer for the current question."""
    if state.status != SessionStatus.IN_PROGRESS:
        return state
    return state.model_copy(update={"selected": answer})


def score_answers(questions: Sequence[Question], answers: Sequence[Answer | None]) -> int:
    """Count committed answers that match their question."""
    return sum(1 for q, a in zip(questions, answers) if q.is_correct(a))


def percentage(score: int, total: int) -> int:
    return round_half_up(score / total * 100)


def advance(state: QuizSession, now: datetime | None = None) -> QuizSession:
    """
    Commit the tentative answer and move on.

    Moves to the next question with a fresh timer, or to Completed when the
    current question is the last one.

    Args:
        state: Current session
        now: Completion time (defaults to now)

    Returns:
        The next session snapshot
    """
    if state.status != SessionStatus.IN_PROGRESS:
        return state

    answers = list(state.answers)
    answers[state.position] = state.selected
    score = score_answers(state.questions, answers)

    if not state.is_last_question:
        return state.model_copy(
            update={
                "answers": tuple(answers),
                "score": score,
                "position": state.position + 1,
                "selected": None,
                "time_left": state.time_limit,
            }
        )

    total = len(state.questions)
    result = QuizHistoryEntry(
        timestamp=now or datetime.now(),
        score=score,
        total=total,
        percentage=percentage(score, total),
    )
    return state.model_copy(
        update={
            "status": SessionStatus.COMPLETED,
            "answers": tuple(answers),
            "score": score,
            "result": result,
            "result_saved": False,
        }
    )


def retreat(state: QuizSession) -> QuizSession:
    """Go back one question, restoring its committed answer as the selection."""
    if state.status != SessionStatus.IN_PROGRESS or state.position == 0:
        return state

    position = state.position - 1
    return state.model_copy(
        update={
            "position": position,
            "selected": state.answers[position],
            "time_left": state.time_limit,
        }
    )


def retry(state: QuizSession) -> QuizSession:
    """Completed -> InProgress with the same questions and a clean slate."""
    if state.status != SessionStatus.COMPLETED:
        return state

    return state.model_copy(
        update={
            "status": SessionStatus.IN_PROGRESS,
            "position": 0,
            "answers": (None,) * len(state.questions),
            "selected": None,
            "score": 0,
            "time_left": state.time_limit,
            "result": None,
            "result_saved": False,
        }
    )


def tick(state: QuizSession) -> QuizSession:
    """
    One second of the question timer.

    The timer only runs while the session is in progress; when it reaches
    zero the current answer (or no answer) is committed via ``advance``.
    """
    if not is_timer_running(state):
        return state

    time_left = state.time_left - 1
    if time_left <= 0:
        return advance(state.model_copy(update={"time_left": 0}))
    return state.model_copy(update={"time_left": time_left})


def is_timer_running(state: QuizSession) -> bool:
    return state.status == SessionStatus.IN_PROGRESS


def persist_result(state: QuizSession, history: QuizHistoryStore) -> QuizSession:
    """
    Save a completed session's result to history exactly once.

    Args:
        state: Current session
        history: Quiz history collection

    Returns:
        The session marked as saved (unchanged if nothing was saved)
    """
    if state.status != SessionStatus.COMPLETED or state.result is None or state.result_saved:
        return state

    history.add(state.result)
    return state.model_copy(update={"result_saved": True})
