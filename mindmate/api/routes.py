"""Page routes and the study request endpoints."""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from mindmate.agents import (
    ChatModelFactory,
    generate_advanced_quiz,
    generate_flashcards,
    generate_quiz,
    search_papers,
    summarize_abstract,
    summarize_text,
    tutor_reply,
)
from mindmate.api.dependencies import (
    get_app_settings,
    get_chat_model_factory,
    get_flashcard_store,
    get_history_store,
)
from mindmate.api.schemas import (
    AbstractIn,
    AdvancedQuizIn,
    FlashcardsOut,
    PaperSummaryOut,
    QueryIn,
    QuestionsOut,
    QuizExportIn,
    StudyPackExportIn,
    TextIn,
    TutorChatIn,
)
from mindmate.config.settings import Settings
from mindmate.errors import ValidationError
from mindmate.export import DOCX_MEDIA_TYPE, build_quiz_document, build_study_pack, document_bytes
from mindmate.extraction import extract_text
from mindmate.models.study import ExtractedText, PaperSearchResult, SummaryResult, TutorReply
from mindmate.storage.collections import FlashcardStore, QuizHistoryStore

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()


# -----------------------------------------------------------------------------
# Pages
# -----------------------------------------------------------------------------
@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/quiz", response_class=HTMLResponse)
def quiz_page(request: Request):
    return templates.TemplateResponse(request, "quiz.html", {})


@router.get("/api/health")
def health(settings: Settings = Depends(get_app_settings)):
    return {
        "status": "ok",
        "provider": settings.llm_provider,
        "apiKeyConfigured": settings.api_key_configured(),
    }


# -----------------------------------------------------------------------------
# Study requests
# -----------------------------------------------------------------------------
@router.post("/api/summarize", response_model=SummaryResult)
def summarize(
    payload: TextIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
):
    return summarize_text(payload.text, settings, make_llm)


@router.post("/api/generate-flashcards", response_model=FlashcardsOut)
def flashcards(
    payload: TextIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
    store: FlashcardStore = Depends(get_flashcard_store),
):
    cards = generate_flashcards(payload.text, settings, make_llm)
    store.save(cards)
    return {"flashcards": cards}


@router.post("/api/generate-quiz", response_model=QuestionsOut)
def quiz(
    payload: TextIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
):
    return {"questions": generate_quiz(payload.text, settings, make_llm)}


@router.post("/api/generate-advanced-quiz", response_model=QuestionsOut)
def advanced_quiz(
    payload: AdvancedQuizIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
):
    questions = generate_advanced_quiz(
        payload.text, payload.question_types, settings, make_llm
    )
    return {"questions": questions}


@router.post("/api/summarize-paper", response_model=PaperSummaryOut)
def summarize_paper(
    payload: AbstractIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
):
    return {"ai_summary": summarize_abstract(payload.abstract, settings, make_llm)}


@router.post(
    "/api/search-papers",
    response_model=PaperSearchResult,
    response_model_exclude_none=True,
)
def papers(
    payload: QueryIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
):
    return search_papers(payload.query, settings, make_llm)


@router.post("/api/tutor-chat", response_model=TutorReply)
def tutor_chat(
    payload: TutorChatIn,
    settings: Settings = Depends(get_app_settings),
    make_llm: ChatModelFactory = Depends(get_chat_model_factory),
):
    return tutor_reply(
        payload.message,
        payload.context,
        payload.conversation_history,
        settings,
        make_llm,
    )


@router.post("/api/extract-text", response_model=ExtractedText)
async def upload(
    file: UploadFile | None = File(None),
    settings: Settings = Depends(get_app_settings),
):
    if file is None:
        raise ValidationError("No file provided")

    limit = settings.max_upload_bytes
    # Never buffer more than one byte past the limit
    if file.size is not None and file.size > limit:
        raise _upload_too_large(file.filename, file.size, limit)
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise _upload_too_large(file.filename, len(data), limit)

    return extract_text(data, file.filename or "")


def _upload_too_large(filename: str | None, size: int, limit: int) -> ValidationError:
    logger.warning("Rejected upload %s of at least %d bytes", filename, size)
    return ValidationError(f"File is too large. The limit is {limit // (1024 * 1024)} MB.")


# -----------------------------------------------------------------------------
# Saved flashcards
# -----------------------------------------------------------------------------
@router.get("/api/flashcards", response_model=FlashcardsOut)
def saved_flashcards(store: FlashcardStore = Depends(get_flashcard_store)):
    return {"flashcards": store.load()}


@router.delete("/api/flashcards")
def clear_flashcards(store: FlashcardStore = Depends(get_flashcard_store)):
    store.clear()
    return {"status": "cleared"}


# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------
def _docx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/api/export")
def export_study_pack(
    payload: StudyPackExportIn,
    flashcard_store: FlashcardStore = Depends(get_flashcard_store),
    history_store: QuizHistoryStore = Depends(get_history_store),
):
    cards = payload.flashcards if payload.flashcards is not None else flashcard_store.load()
    history = history_store.load() if payload.include_history else []

    logger.info("Exporting study pack with %d flashcards and %d results", len(cards), len(history))
    doc = build_study_pack(payload.summary, cards, history, title=payload.title)
    return _docx_response(document_bytes(doc), "mindmate-study-pack.docx")


@router.post("/api/export-quiz")
def export_quiz(payload: QuizExportIn):
    doc = build_quiz_document(
        payload.questions, title=payload.title, include_answers=payload.include_answers
    )
    return _docx_response(document_bytes(doc), "mindmate-quiz.docx")
