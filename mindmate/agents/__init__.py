"""AI agents behind each study request kind."""

from .flashcards import generate_flashcards
from .llm import ChatModelFactory, build_chat_model
from .quiz_generator import generate_advanced_quiz, generate_quiz
from .research import search_papers, summarize_abstract
from .summarizer import summarize_text
from .tutor import tutor_reply

__all__ = [
    "ChatModelFactory",
    "build_chat_model",
    "summarize_text",
    "generate_flashcards",
    "generate_quiz",
    "generate_advanced_quiz",
    "summarize_abstract",
    "search_papers",
    "tutor_reply",
]
