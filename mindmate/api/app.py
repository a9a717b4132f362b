"""FastAPI application factory."""

import logging
import os
import uuid
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from rich.logging import RichHandler

from mindmate import __version__
from mindmate.api.quiz_routes import router as quiz_router
from mindmate.api.routes import router
from mindmate.api.sessions import QuizSessionManager
from mindmate.config.settings import Settings, get_settings
from mindmate.errors import MindmateError
from mindmate.storage.kv import KeyValueStore, SQLiteStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# --- Logging Setup ---
def setup_logging(settings: Settings) -> None:
    package_logger = logging.getLogger("mindmate")
    package_logger.setLevel(settings.log_level.upper())

    os.makedirs(settings.log_dir, exist_ok=True)
    log_path = os.path.abspath(os.path.join(settings.log_dir, settings.log_file))

    # create_app may run more than once per process (tests, reload)
    for handler in package_logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == log_path:
            break
    else:
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(file_handler)

    # Also configure root logger to see logs from other libraries
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "MindMate %s starting (provider=%s, model=%s, api key configured=%s)",
        __version__,
        settings.llm_provider,
        settings.model_name,
        settings.api_key_configured(),
    )
    yield
    logger.info("MindMate shutting down")


# --- Client Cookie ---
CLIENT_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


async def assign_client_id(request: Request, call_next):
    """Identify the browser by cookie, issuing a new ID on its first request."""
    settings: Settings = request.app.state.settings
    client_id = request.cookies.get(settings.session_cookie_name)
    is_new = not client_id
    if is_new:
        client_id = str(uuid.uuid4())
        logger.info("New client %s", client_id)

    request.state.client_id = client_id
    response = await call_next(request)

    # Error responses get the cookie as well
    if is_new:
        response.set_cookie(
            key=settings.session_cookie_name,
            value=client_id,
            httponly=True,
            samesite="lax",
            max_age=CLIENT_COOKIE_MAX_AGE,
        )
    return response


# --- Error Handlers ---
async def handle_mindmate_error(request: Request, exc: MindmateError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning("%s %s invalid request: %s", request.method, request.url.path, details)
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


# --- App Factory ---
def create_app(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
) -> FastAPI:
    """
    Build the MindMate web application.

    Args:
        settings: Application settings (defaults to environment settings)
        store: Persistence backend (defaults to the SQLite database in data_dir)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="MindMate",
        version=__version__,
        description="AI study companion: summaries, flashcards, quizzes and research",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store if store is not None else SQLiteStore(str(settings.db_path))
    app.state.sessions = QuizSessionManager(
        time_limit=settings.question_time_limit,
        timeout_minutes=settings.session_timeout_minutes,
    )

    app.add_exception_handler(MindmateError, handle_mindmate_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.middleware("http")(assign_client_id)

    app.include_router(router)
    app.include_router(quiz_router)

    return app
