"""Plain-text extraction from uploaded PDF, DOCX and TXT files."""

import io
import logging
from pathlib import PurePath

import docx
from PyPDF2 import PdfReader

from mindmate.errors import (
    DocumentParseError,
    EmptyDocumentError,
    UnsupportedFileTypeError,
)
from mindmate.models.study import ExtractedText

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = ("pdf", "docx", "txt")


def file_type_of(filename: str) -> str:
    """Lower-case extension without the dot ('' when there is none)."""
    return PurePath(filename or "").suffix.lstrip(".").lower()


def _pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except Exception as e:
        logger.error("PDF parsing error: %s", e)
        raise DocumentParseError(
            "Failed to parse PDF file. Please ensure it contains readable text."
        ) from e


def _docx_text(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as e:
        logger.error("DOCX parsing error: %s", e)
        raise DocumentParseError("Failed to parse DOCX file.") from e
    return "\n".join(p.text for p in document.paragraphs)


def _txt_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


_EXTRACTORS = {
    "pdf": _pdf_text,
    "docx": _docx_text,
    "txt": _txt_text,
}


def extract_text(data: bytes, filename: str) -> ExtractedText:
    """
    Extract plain text from an uploaded document.

    Args:
        data: Raw file contents
        filename: Original file name; its extension selects the parser

    Returns:
        ExtractedText with the trimmed text, file name and type

    Raises:
        UnsupportedFileTypeError: Extension is not pdf, docx or txt
        DocumentParseError: The parser could not read the file
        EmptyDocumentError: The file contained no text
    """
    file_type = file_type_of(filename)
    extractor = _EXTRACTORS.get(file_type)
    if extractor is None:
        raise UnsupportedFileTypeError(
            "Unsupported file type. Please upload PDF, DOCX, or TXT files."
        )

    text = extractor(data).strip()
    if not text:
        raise EmptyDocumentError("No text could be extracted from the file.")

    logger.info("Extracted %d characters from %s", len(text), filename)
    return ExtractedText(text=text, file_name=filename, file_type=file_type)
