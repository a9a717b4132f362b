"""DOCX document generator for study packs and quizzes."""

import io
from datetime import datetime
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, RGBColor

from mindmate.models.quiz import Question, QuestionDifficulty, QuestionType, QuizHistoryEntry
from mindmate.models.study import Flashcard, SummaryResult

DOCX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)

OPTION_LABELS = "ABCDEFGHIJ"

DIFFICULTY_COLORS = {
    QuestionDifficulty.EASY: RGBColor(0, 128, 0),
    QuestionDifficulty.MEDIUM: RGBColor(255, 140, 0),
    QuestionDifficulty.HARD: RGBColor(255, 0, 0),
}


def ensure_output_directory(output_dir: str = "output") -> Path:
    """
    Ensure the output directory exists.

    Args:
        output_dir: Directory path to create

    Returns:
        Path object for the output directory
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def generate_timestamped_filename(base_name: str, extension: str = "docx") -> str:
    """
    Generate a filename with timestamp.

    Args:
        base_name: Base name for the file
        extension: File extension (without dot)

    Returns:
        Filename with timestamp
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # Clean the base name to remove any path components
    base_name = Path(base_name).stem
    return f"{base_name}_{timestamp}.{extension}"


def resolve_output_path(output_path: str, use_output_dir: bool, output_dir: str) -> str:
    """Place the file under ``output_dir`` with a timestamp when requested."""
    if not use_output_dir:
        return output_path
    return str(ensure_output_directory(output_dir) / generate_timestamped_filename(output_path))


def setup_document_styles(doc: Document) -> None:
    """
    Set up document-wide styles.

    Args:
        doc: Document to configure
    """
    font = doc.styles["Normal"].font
    font.name = "Calibri"
    font.size = Pt(11)

    for section in doc.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)


def add_title(doc: Document, title: str) -> None:
    heading = doc.add_heading(title, level=0)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

    date_para = doc.add_paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    date_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    date_para.runs[0].font.size = Pt(9)
    date_para.runs[0].font.color.rgb = RGBColor(128, 128, 128)


def add_section_heading(doc: Document, text: str, level: int = 1) -> None:
    heading = doc.add_heading(text, level=level)
    heading.runs[0].font.color.rgb = RGBColor(0, 51, 102)


def add_bold_header_row(table, labels: list[str]) -> None:
    cells = table.rows[0].cells
    for cell, label in zip(cells, labels):
        cell.text = label
        for paragraph in cell.paragraphs:
            for run in paragraph.runs:
                run.bold = True


def add_summary_section(doc: Document, summary: SummaryResult) -> None:
    """
    Add the summary, its statistics and the key points.

    Args:
        doc: Document to add to
        summary: Summary result
    """
    add_section_heading(doc, "Summary")
    doc.add_paragraph(summary.summary)

    stats = doc.add_paragraph()
    stats.add_run(f"Compression: {summary.compression_rate}%").italic = True
    stats.add_run("  |  ")
    stats.add_run(f"Read time: {summary.estimated_read_time} min").italic = True

    if summary.key_points:
        add_section_heading(doc, "Key Points", level=2)
        for point in summary.key_points:
            doc.add_paragraph(point, style="List Bullet")


def add_flashcards_table(doc: Document, flashcards: list[Flashcard]) -> None:
    """
    Add flashcards as a question / answer / difficulty table.

    Args:
        doc: Document to add to
        flashcards: Cards to list
    """
    add_section_heading(doc, "Flashcards")

    table = doc.add_table(rows=1, cols=4)
    table.style = "Light Grid Accent 1"
    add_bold_header_row(table, ["#", "Question", "Answer", "Difficulty"])

    for i, card in enumerate(flashcards, 1):
        row_cells = table.add_row().cells
        row_cells[0].text = str(i)
        row_cells[1].text = card.question
        row_cells[2].text = card.answer
        difficulty_run = row_cells[3].paragraphs[0].add_run(card.difficulty.value.capitalize())
        difficulty_run.font.color.rgb = DIFFICULTY_COLORS[card.difficulty]

    doc.add_paragraph()


def add_history_table(doc: Document, history: list[QuizHistoryEntry]) -> None:
    """
    Add past quiz results, newest first.

    Args:
        doc: Document to add to
        history: Quiz history entries
    """
    add_section_heading(doc, "Quiz History")

    table = doc.add_table(rows=1, cols=3)
    table.style = "Light Grid Accent 1"
    add_bold_header_row(table, ["Date", "Score", "Percentage"])

    for entry in history:
        row_cells = table.add_row().cells
        row_cells[0].text = entry.timestamp.strftime("%Y-%m-%d %H:%M")
        row_cells[1].text = f"{entry.score}/{entry.total}"
        row_cells[2].text = f"{entry.percentage}%"

    doc.add_paragraph()


def build_study_pack(
    summary: SummaryResult | None = None,
    flashcards: list[Flashcard] | None = None,
    history: list[QuizHistoryEntry] | None = None,
    title: str = "MindMate Study Pack",
) -> Document:
    """
    Build a study pack document from whatever sections are available.

    Args:
        summary: Optional summary result
        flashcards: Optional flashcards
        history: Optional quiz history
        title: Document title

    Returns:
        The python-docx Document
    """
    doc = Document()
    setup_document_styles(doc)
    add_title(doc, title)

    if summary:
        add_summary_section(doc, summary)
    if flashcards:
        add_flashcards_table(doc, flashcards)
    if history:
        add_history_table(doc, history)

    if not (summary or flashcards or history):
        doc.add_paragraph("Nothing to export yet.")

    return doc


def format_answer(question: Question) -> str:
    """Human-readable correct answer."""
    if question.type == QuestionType.MULTIPLE_CHOICE:
        index = question.correct_answer
        return f"{OPTION_LABELS[index]} - {question.options[index]}"
    if question.type == QuestionType.TRUE_FALSE:
        return "True" if question.correct_answer else "False"
    return str(question.correct_answer)


def add_question_to_document(
    doc: Document, number: int, question: Question, include_answers: bool = False
) -> None:
    """
    Add a question with its options and, optionally, the answer.

    Args:
        doc: Document to add to
        number: Question number shown to the reader
        question: Question to add
        include_answers: If True, highlights the answer and adds the explanation
    """
    q_para = doc.add_paragraph()
    q_run = q_para.add_run(f"Q{number}. ")
    q_run.bold = True
    q_run.font.size = Pt(12)
    q_para.add_run(question.question)

    if question.type == QuestionType.MULTIPLE_CHOICE:
        for i, option in enumerate(question.options):
            opt_para = doc.add_paragraph(f"   {OPTION_LABELS[i]}. {option}")
            opt_para.paragraph_format.left_indent = Inches(0.5)

            if include_answers and i == question.correct_answer:
                opt_para.runs[0].bold = True
                opt_para.runs[0].font.color.rgb = RGBColor(0, 128, 0)
                opt_para.add_run(" ✓").font.color.rgb = RGBColor(0, 128, 0)
    elif question.type == QuestionType.TRUE_FALSE:
        tf_para = doc.add_paragraph("   True / False")
        tf_para.paragraph_format.left_indent = Inches(0.5)
    else:
        blank_para = doc.add_paragraph("   Answer: ____________")
        blank_para.paragraph_format.left_indent = Inches(0.5)

    if include_answers:
        ans_para = doc.add_paragraph()
        ans_para.paragraph_format.left_indent = Inches(0.5)
        ans_para.add_run(f"Answer: {format_answer(question)}").bold = True

        if question.explanation:
            exp_para = doc.add_paragraph()
            exp_para.paragraph_format.left_indent = Inches(0.5)
            exp_run = exp_para.add_run(f"Explanation: {question.explanation}")
            exp_run.italic = True
            exp_run.font.size = Pt(10)
            exp_run.font.color.rgb = RGBColor(64, 64, 64)

    doc.add_paragraph()


def add_answer_key(doc: Document, questions: list[Question]) -> None:
    """
    Add an answer key table.

    Args:
        doc: Document to add to
        questions: Questions in quiz order
    """
    header = doc.add_heading("Answer Key", level=1)
    header.alignment = WD_ALIGN_PARAGRAPH.CENTER
    header.runs[0].font.color.rgb = RGBColor(0, 51, 102)

    table = doc.add_table(rows=1, cols=3)
    table.style = "Light Grid Accent 1"
    add_bold_header_row(table, ["Q#", "Answer", "Explanation"])

    for i, question in enumerate(questions, 1):
        row_cells = table.add_row().cells
        row_cells[0].text = str(i)
        row_cells[1].text = format_answer(question)
        row_cells[2].text = question.explanation or "N/A"


def build_quiz_document(
    questions: list[Question], title: str = "MindMate Quiz", include_answers: bool = False
) -> Document:
    """
    Build a printable quiz.

    Args:
        questions: Questions in quiz order
        title: Document title
        include_answers: If True, answers are shown inline and an answer key is appended

    Returns:
        The python-docx Document
    """
    doc = Document()
    setup_document_styles(doc)
    add_title(doc, title)

    info_para = doc.add_paragraph()
    info_para.add_run(f"Total Questions: {len(questions)}").bold = True
    info_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    doc.add_page_break()

    for i, question in enumerate(questions, 1):
        add_question_to_document(doc, i, question, include_answers)

    if include_answers:
        doc.add_page_break()
        add_answer_key(doc, questions)

    return doc


def build_answer_key_document(questions: list[Question], title: str = "MindMate Quiz") -> Document:
    doc = Document()
    setup_document_styles(doc)
    add_title(doc, f"{title} - Answer Key")
    add_answer_key(doc, questions)
    return doc


def document_bytes(doc: Document) -> bytes:
    """Serialize a document for an HTTP download."""
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def export_study_pack(
    output_path: str,
    summary: SummaryResult | None = None,
    flashcards: list[Flashcard] | None = None,
    history: list[QuizHistoryEntry] | None = None,
    use_output_dir: bool = True,
    output_dir: str = "output",
) -> str:
    """
    Export a study pack to a DOCX file.

    Args:
        output_path: File path, or base name when use_output_dir is True
        summary: Optional summary result
        flashcards: Optional flashcards
        history: Optional quiz history
        use_output_dir: If True, saves to output directory with timestamp
        output_dir: Directory to save files in

    Returns:
        Path to the created DOCX file
    """
    output_path = resolve_output_path(output_path, use_output_dir, output_dir)
    build_study_pack(summary, flashcards, history).save(output_path)
    return output_path


def export_quiz_to_docx(
    questions: list[Question],
    output_path: str,
    include_answers: bool = False,
    use_output_dir: bool = True,
    output_dir: str = "output",
) -> str:
    """
    Export quiz questions to a DOCX file.

    Args:
        questions: Questions in quiz order
        output_path: File path, or base name when use_output_dir is True
        include_answers: If True, includes correct answers and explanations
        use_output_dir: If True, saves to output directory with timestamp
        output_dir: Directory to save files in

    Returns:
        Path to the created DOCX file
    """
    output_path = resolve_output_path(output_path, use_output_dir, output_dir)
    build_quiz_document(questions, include_answers=include_answers).save(output_path)
    return output_path


def export_quiz_with_separate_answers(
    questions: list[Question], base_path: str, output_dir: str = "output"
) -> tuple[str, str]:
    """
    Export quiz with questions and answers in separate files.

    Args:
        questions: Questions in quiz order
        base_path: Base path for output files (without extension)
        output_dir: Directory to save files in

    Returns:
        Tuple of (questions_path, answers_path)
    """
    output_path = ensure_output_directory(output_dir)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base_name = Path(base_path).name

    questions_path = str(output_path / f"{base_name}_questions_{timestamp}.docx")
    answers_path = str(output_path / f"{base_name}_answers_{timestamp}.docx")

    build_quiz_document(questions, include_answers=False).save(questions_path)
    build_answer_key_document(questions).save(answers_path)

    return questions_path, answers_path
