"""Tests for the Typer CLI."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from mindmate.cli.app import app
from mindmate.config.settings import Settings
from mindmate.storage.collections import FlashcardStore, QuizHistoryStore
from mindmate.storage.kv import SQLiteStore

runner = CliRunner()


@pytest.fixture
def cli_settings(settings: Settings):
    """Point the CLI at the temporary settings."""
    with patch("mindmate.cli.app.get_settings", return_value=settings):
        yield settings


class TestInfo:
    """Test the info command."""

    def test_shows_configuration(self, cli_settings: Settings):
        """Test that provider and model are displayed."""
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "MindMate" in result.output
        assert "gpt-4o-mini" in result.output


class TestExport:
    """Test the export command."""

    def test_exports_saved_data(self, cli_settings: Settings, sample_flashcards, sample_history):
        """Test that a client's flashcards and history are written to DOCX."""
        client_store = SQLiteStore(str(cli_settings.db_path)).scoped("client-1")
        FlashcardStore(client_store).save(sample_flashcards)
        history = QuizHistoryStore(client_store)
        for entry in reversed(sample_history):
            history.add(entry)

        result = runner.invoke(app, ["export", "--client", "client-1", "-o", "pack"])

        assert result.exit_code == 0
        assert "Exported 2 flashcards and 2 quiz results" in result.output

    def test_unknown_client(self, cli_settings: Settings):
        """Test that a client with nothing saved fails."""
        SQLiteStore(str(cli_settings.db_path))

        result = runner.invoke(app, ["export", "--client", "nobody"])

        assert result.exit_code == 1

    def test_missing_database(self, cli_settings: Settings):
        """Test that a missing database fails."""
        result = runner.invoke(app, ["export", "--client", "client-1"])

        assert result.exit_code == 1


class TestQuiz:
    """Test the quiz command."""

    def test_generates_quiz_files(self, cli_settings: Settings, sample_questions, tmp_path):
        """Test that the quiz and its answer key are written."""
        source = tmp_path / "notes.txt"
        source.write_text("Photosynthesis notes")

        with patch("mindmate.cli.app.generate_quiz", return_value=sample_questions) as generate:
            result = runner.invoke(app, ["quiz", str(source), "-o", "bio"])

        assert result.exit_code == 0
        generate.assert_called_once_with("Photosynthesis notes", cli_settings)
        assert "Questions:" in result.output
        assert "Answers:" in result.output

    def test_advanced_quiz_types(self, cli_settings: Settings, sample_questions, tmp_path):
        """Test that --type selects the advanced generator."""
        source = tmp_path / "notes.txt"
        source.write_text("Photosynthesis notes")

        with patch(
            "mindmate.cli.app.generate_advanced_quiz", return_value=sample_questions
        ) as generate:
            result = runner.invoke(
                app, ["quiz", str(source), "-t", "true-false", "--include-answers"]
            )

        assert result.exit_code == 0
        assert generate.call_args[0][1] == ["true-false"]
        assert "Quiz exported to:" in result.output

    def test_unsupported_file(self, cli_settings: Settings, tmp_path):
        """Test that extraction errors are reported."""
        source = tmp_path / "slides.pptx"
        source.write_bytes(b"data")

        result = runner.invoke(app, ["quiz", str(source)])

        assert result.exit_code == 1
        assert "Unsupported file type" in result.output
