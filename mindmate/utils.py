"""Small text and number helpers."""

import math
import re

WORDS_PER_MINUTE = 200

_WHITESPACE_RE = re.compile(r"\s+")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (like Math.round)."""
    return math.floor(value + 0.5)


def word_count(text: str) -> int:
    """Count the pieces left after splitting on runs of whitespace."""
    return len(_WHITESPACE_RE.split(text))


def compression_rate(original_length: int, summary_length: int) -> int:
    """Percentage by which the summary is shorter than the original."""
    return round_half_up((original_length - summary_length) / original_length * 100)


def estimated_read_time(summary: str) -> int:
    """Minutes needed to read the summary at 200 words per minute."""
    return math.ceil(word_count(summary) / WORDS_PER_MINUTE)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ``` block that some models wrap JSON in."""
    content = content.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
        if content.rstrip().endswith("```"):
            content = content.rstrip()[:-3]
    return content.strip()
