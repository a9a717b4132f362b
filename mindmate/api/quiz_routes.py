"""Quiz session endpoints: start, answer, navigate, and history."""

import logging

from fastapi import APIRouter, Depends

from mindmate.agents import ChatModelFactory, generate_advanced_quiz, generate_quiz
from mindmate.agents.llm import require_text
from mindmate.api.dependencies import (
    get_app_settings,
    get_chat_model_factory,
    get_client_id,
    get_history_store,
    get_session_manager,
)
from mindmate.api.schemas import AdvancedQuizIn, HistoryOut, SelectAnswerIn, TransitionIn
from mindmate.api.sessions import QuizSessionManager
from mindmate.config.settings import Settings
from mindmate.errors import MindmateError, UpstreamParseError
from mindmate.graph import (
    SessionStatus,
    advance,
    load_failed,
    load_questions,
    retreat,
    retry,
    select_answer,
    tick,
)
from mindmate.graph.state import QuizSession
from mindmate.storage.collections import QuizHistoryStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


@router.post("/start", response_model=QuizSession)
def start_quiz(
    payload: AdvancedQuizIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
    history: QuizHistoryStore = Depends(get_history_store),
):
    """
    Generate questions for the submitted text and open a new session.

    The plain generator is used unless question types are given. A failed
    generation leaves the session in the error state and the error is
    returned to the client.
    """
    # A rejected request leaves any running session untouched
    require_text(payload.text)
    sessions.begin(client_id)

    try:
        if payload.question_types:
            questions = generate_advanced_quiz(
                payload.text, payload.question_types, settings, make_llm
            )
        else:
            questions = generate_quiz(payload.text, settings, make_llm)
    except MindmateError as e:
        sessions.apply(client_id, load_failed, e.message, history=history)
        raise

    state = sessions.apply(client_id, load_questions, questions, history=history)
    if state.status == SessionStatus.ERROR:
        raise UpstreamParseError(state.error)

    logger.info("Quiz started for client %s with %d questions", client_id, state.total)
    return state


@router.get("", response_model=QuizSession)
def current_quiz(
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
):
    return sessions.require(client_id)


@router.post("/select", response_model=QuizSession)
def select(
    payload: SelectAnswerIn,
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
    history: QuizHistoryStore = Depends(get_history_store),
):
    return sessions.apply(
        client_id,
        select_answer,
        payload.answer,
        history=history,
        expected_position=payload.position,
    )


@router.post("/next", response_model=QuizSession)
def next_question(
    payload: TransitionIn | None = None,
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
    history: QuizHistoryStore = Depends(get_history_store),
):
    position = payload.position if payload else None
    return sessions.apply(client_id, advance, history=history, expected_position=position)


@router.post("/prev", response_model=QuizSession)
def previous_question(
    payload: TransitionIn | None = None,
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
    history: QuizHistoryStore = Depends(get_history_store),
):
    position = payload.position if payload else None
    return sessions.apply(client_id, retreat, history=history, expected_position=position)


@router.post("/tick", response_model=QuizSession)
def tick_timer(
    payload: TransitionIn | None = None,
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
    history: QuizHistoryStore = Depends(get_history_store),
):
    position = payload.position if payload else None
    return sessions.apply(client_id, tick, history=history, expected_position=position)


@router.post("/retry", response_model=QuizSession)
def retry_quiz(
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
    history: QuizHistoryStore = Depends(get_history_store),
):
    return sessions.apply(client_id, retry, history=history)


@router.post("/discard")
def discard_quiz(
    client_id: str = Depends(get_client_id),
    sessions: QuizSessionManager = Depends(get_session_manager),
):
    """Drop the session when the user leaves the quiz page."""
    return {"discarded": sessions.discard(client_id)}


@router.get("/history", response_model=HistoryOut)
def quiz_history(history: QuizHistoryStore = Depends(get_history_store)):
    return {"items": history.load()}


@router.delete("/history")
def clear_history(history: QuizHistoryStore = Depends(get_history_store)):
    history.clear()
    return {"status": "cleared"}
