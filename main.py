"""Main entry point for the MindMate CLI."""

from mindmate.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
