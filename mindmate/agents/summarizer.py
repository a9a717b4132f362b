"""Summarizer Agent - Condenses study text into a summary and key points."""

import logging

from mindmate.agents.llm import (
    ChatModelFactory,
    build_chat_model,
    generate_structured,
    require_text,
)
from mindmate.config.settings import Settings, get_settings
from mindmate.models.study import SummaryReply, SummaryResult
from mindmate.utils import compression_rate, estimated_read_time

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful study assistant. Your task is to:
1. Create a concise summary of the provided text
2. Extract key points as a bulleted list (3-7 points)

Return your response in the following JSON format:
{
  "summary": "A concise summary of the text",
  "keyPoints": ["Point 1", "Point 2", "Point 3"]
}"""

FAILURE_MESSAGE = "Failed to summarize text. Please try again."


def summarize_text(
    text: str,
    settings: Settings | None = None,
    make_llm: ChatModelFactory = build_chat_model,
) -> SummaryResult:
    """
    Summarizer Agent: Summarize text and compute reading statistics.

    Args:
        text: Study material to summarize
        settings: Application settings (defaults to the cached settings)
        make_llm: Chat model factory

    Returns:
        SummaryResult with the summary, key points and derived statistics
    """
    require_text(text)
    settings = settings or get_settings()

    reply = generate_structured(
        settings,
        make_llm,
        kind="summarize",
        system_prompt=SYSTEM_PROMPT,
        user_content=text,
        schema=SummaryReply,
        failure_message=FAILURE_MESSAGE,
        temperature=settings.default_temperature,
    )

    return build_summary_result(text, reply)


def build_summary_result(text: str, reply: SummaryReply) -> SummaryResult:
    """
    Derive compression rate and reading time from a summary reply.

    Args:
        text: The original text
        reply: Parsed model reply

    Returns:
        SummaryResult ready to return to the client
    """
    original_length = len(text)
    summary_length = len(reply.summary)

    result = SummaryResult(
        summary=reply.summary,
        key_points=reply.key_points,
        original_length=original_length,
        summary_length=summary_length,
        compression_rate=compression_rate(original_length, summary_length),
        estimated_read_time=estimated_read_time(reply.summary),
    )
    logger.info(
        "Summarized %d chars into %d (%d%% shorter)",
        original_length,
        summary_length,
        result.compression_rate,
    )
    return result
