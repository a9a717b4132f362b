"""Flashcard Agent - Turns study text into question/answer cards."""

from mindmate.agents.llm import (
    ChatModelFactory,
    build_chat_model,
    generate_structured,
    require_text,
)
from mindmate.config.settings import Settings, get_settings
from mindmate.models.study import Flashcard, FlashcardList

SYSTEM_PROMPT = """You are a helpful study assistant that creates flashcards for learning.
Generate 8-12 high-quality flashcards from the provided text. Each flashcard should have:
- A clear question on the front
- A concise answer on the back
- A difficulty level (easy, medium, or hard)

Return your response in the following JSON format:
{
  "flashcards": [
    {
      "question": "What is...",
      "answer": "The answer is...",
      "difficulty": "easy"
    }
  ]
}"""

FAILURE_MESSAGE = "Failed to generate flashcards. Please try again."


def generate_flashcards(
    text: str,
    settings: Settings | None = None,
    make_llm: ChatModelFactory = build_chat_model,
) -> list[Flashcard]:
    """
    Flashcard Agent: Generate flashcards from study text.

    Args:
        text: Study material
        settings: Application settings (defaults to the cached settings)
        make_llm: Chat model factory

    Returns:
        List of flashcards
    """
    require_text(text)
    settings = settings or get_settings()

    reply = generate_structured(
        settings,
        make_llm,
        kind="flashcards",
        system_prompt=SYSTEM_PROMPT,
        user_content=text,
        schema=FlashcardList,
        failure_message=FAILURE_MESSAGE,
        temperature=settings.default_temperature,
    )
    return reply.flashcards
