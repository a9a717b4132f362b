"""Typer CLI application for running and operating MindMate."""

from pathlib import Path
from typing import List, Optional

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from mindmate import __version__
from mindmate.agents import generate_advanced_quiz, generate_quiz
from mindmate.config.settings import get_settings
from mindmate.errors import MindmateError
from mindmate.export import (
    export_quiz_to_docx,
    export_quiz_with_separate_answers,
    export_study_pack,
)
from mindmate.extraction import extract_text
from mindmate.models.quiz import Question, QuestionType
from mindmate.storage.collections import FlashcardStore, QuizHistoryStore
from mindmate.storage.kv import SQLiteStore

app = typer.Typer(
    name="mindmate",
    help="AI study companion: summaries, flashcards, quizzes and research",
    add_completion=False,
)

console = Console()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on", min=1, max=65535),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """
    Run the MindMate web application.

    Example:
        mindmate serve --port 8000
    """
    settings = get_settings()
    if not settings.api_key_configured():
        console.print(
            f"[yellow]Warning:[/yellow] no API key configured for provider "
            f"'{settings.llm_provider}'. AI requests will fail until one is set."
        )

    console.print(f"\n[cyan]Starting MindMate on http://{host}:{port}[/cyan]")
    uvicorn.run(
        "mindmate.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def quiz(
    source: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Study material (PDF, DOCX or TXT)",
    ),
    question_types: Optional[List[QuestionType]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Question types for an advanced quiz (can specify multiple times)",
        case_sensitive=False,
    ),
    output: str = typer.Option(
        "quiz",
        "--output",
        "-o",
        help="Output file name (without extension)",
    ),
    separate_answers: bool = typer.Option(
        True,
        "--separate-answers/--include-answers",
        help="Write a separate answer key file vs include answers in the quiz",
    ),
) -> None:
    """
    Generate a quiz from a study document and export it to DOCX.

    Example:
        mindmate quiz notes.pdf -t multiple-choice -t fill-blank -o biology
    """
    settings = get_settings()

    try:
        extracted = extract_text(source.read_bytes(), source.name)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Generating quiz...", total=None)
            if question_types:
                questions = generate_advanced_quiz(extracted.text, question_types, settings)
            else:
                questions = generate_quiz(extracted.text, settings)
            progress.update(task, description="[green]Quiz generation complete!")

    except MindmateError as e:
        console.print(f"\n[red]Error:[/red] {e.message}", style="bold")
        raise typer.Exit(code=1)

    display_questions(questions)

    if separate_answers:
        questions_file, answers_file = export_quiz_with_separate_answers(
            questions, output, output_dir=settings.default_output_dir
        )
        console.print("\n[green]✓[/green] Quiz exported successfully!")
        console.print(f"  Questions: {questions_file}")
        console.print(f"  Answers:   {answers_file}")
    else:
        output_file = export_quiz_to_docx(
            questions,
            output,
            include_answers=True,
            output_dir=settings.default_output_dir,
        )
        console.print(f"\n[green]✓[/green] Quiz exported to: {output_file}")


@app.command()
def export(
    client: str = typer.Option(
        ...,
        "--client",
        "-c",
        help="Client ID (the value of the browser's session cookie)",
    ),
    output: str = typer.Option(
        "study_pack",
        "--output",
        "-o",
        help="Output file name (without extension)",
    ),
    include_history: bool = typer.Option(
        True,
        "--history/--no-history",
        help="Include the client's quiz history",
    ),
) -> None:
    """
    Export a client's saved flashcards and quiz history to DOCX.

    Example:
        mindmate export -c 3f2a... -o my_pack
    """
    settings = get_settings()
    if not settings.db_path.exists():
        console.print(f"[red]Error:[/red] no database at {settings.db_path}", style="bold")
        raise typer.Exit(code=1)

    client_store = SQLiteStore(str(settings.db_path)).scoped(client)
    flashcards = FlashcardStore(client_store).load()
    history = (
        QuizHistoryStore(client_store, limit=settings.history_limit).load()
        if include_history
        else []
    )

    if not flashcards and not history:
        console.print(f"[yellow]Nothing saved for client {client}.[/yellow]")
        raise typer.Exit(code=1)

    output_file = export_study_pack(
        output,
        flashcards=flashcards,
        history=history,
        output_dir=settings.default_output_dir,
    )
    console.print(
        f"\n[green]✓[/green] Exported {len(flashcards)} flashcards and "
        f"{len(history)} quiz results to: {output_file}"
    )


@app.command()
def info() -> None:
    """Display information about MindMate and its configuration."""
    settings = get_settings()
    key_status = "[green]yes[/green]" if settings.api_key_configured() else "[red]no[/red]"
    info_text = f"""
[bold cyan]MindMate[/bold cyan]
Version: {__version__}

[bold]Features:[/bold]
  • Text summaries with key points and reading stats
  • Flashcard generation
  • Timed quizzes with history
  • Advanced quizzes (multiple choice, true/false, fill in the blank)
  • arXiv paper search with AI summaries
  • AI tutor chat
  • DOCX export

[bold]Provider:[/bold] {settings.llm_provider}
[bold]Model:[/bold] {settings.model_name}
[bold]API key configured:[/bold] {key_status}
[bold]Storage:[/bold] {settings.db_path}
    """
    console.print(Panel(info_text, title="MindMate Info", border_style="cyan"))


def display_questions(questions: list[Question]) -> None:
    """Display a summary of the generated questions."""
    table = Table(title="Generated Questions", border_style="green")
    table.add_column("#", style="cyan")
    table.add_column("Type", style="white")
    table.add_column("Question", style="white")

    for i, question in enumerate(questions, 1):
        table.add_row(str(i), question.type.value, question.question)

    console.print()
    console.print(table)


@app.callback()
def callback() -> None:
    """
    MindMate - AI study companion.
    """
    pass


if __name__ == "__main__":
    app()
