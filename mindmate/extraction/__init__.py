"""Text extraction from uploaded documents."""

from .text_extractor import SUPPORTED_TYPES, extract_text

__all__ = ["SUPPORTED_TYPES", "extract_text"]
