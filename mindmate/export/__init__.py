"""Export functionality for study documents."""

from .docx_generator import (
    DOCX_MEDIA_TYPE,
    build_quiz_document,
    build_study_pack,
    document_bytes,
    export_quiz_to_docx,
    export_quiz_with_separate_answers,
    export_study_pack,
)

__all__ = [
    "DOCX_MEDIA_TYPE",
    "build_quiz_document",
    "build_study_pack",
    "document_bytes",
    "export_quiz_to_docx",
    "export_quiz_with_separate_answers",
    "export_study_pack",
]
