"""FastAPI dependencies."""

from fastapi import Depends, Request

from mindmate.agents.llm import ChatModelFactory, build_chat_model
from mindmate.api.sessions import QuizSessionManager
from mindmate.config.settings import Settings
from mindmate.storage.collections import FlashcardStore, QuizHistoryStore
from mindmate.storage.kv import KeyValueStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_chat_model_factory() -> ChatModelFactory:
    return build_chat_model


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store


def get_session_manager(request: Request) -> QuizSessionManager:
    return request.app.state.sessions


def get_client_id(request: Request) -> str:
    """Client ID assigned by the client cookie middleware."""
    return request.state.client_id


def get_client_store(
    client_id: str = Depends(get_client_id),
    store: KeyValueStore = Depends(get_store),
) -> KeyValueStore:
    return store.scoped(client_id)


def get_flashcard_store(
    client_store: KeyValueStore = Depends(get_client_store),
) -> FlashcardStore:
    return FlashcardStore(client_store)


def get_history_store(
    client_store: KeyValueStore = Depends(get_client_store),
    settings: Settings = Depends(get_app_settings),
) -> QuizHistoryStore:
    return QuizHistoryStore(client_store, limit=settings.history_limit)
