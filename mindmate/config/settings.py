"""Application settings and configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file if present
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM Provider
    llm_provider: Literal["openai", "anthropic", "bedrock"] = Field(
        default="openai",
        description="Which chat model provider to use",
        validation_alias="LLM_PROVIDER",
    )
    model_name: str = Field(
        default="gpt-4o-mini",
        description="Model to use (OpenAI model, Anthropic model or Bedrock model ID)",
        validation_alias="MODEL_NAME",
    )

    # Credentials
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
        validation_alias="OPENAI_API_KEY",
    )
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key",
        validation_alias="ANTHROPIC_API_KEY",
    )
    aws_api_key_id: str | None = Field(
        default=None,
        description="AWS API key ID",
        validation_alias="AWS_ACCESS_KEY_ID",
    )
    aws_api_key_secret: str | None = Field(
        default=None,
        description="AWS API key",
        validation_alias="AWS_SECRET_ACCESS_KEY",
    )
    aws_default_region: str = Field(
        default="us-east-1",
        description="AWS API region",
        validation_alias="AWS_DEFAULT_REGION",
    )

    # Generation Settings
    default_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Temperature for summaries, flashcards, quizzes and chat",
        validation_alias="DEFAULT_TEMPERATURE",
    )
    paper_summary_temperature: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Temperature for paper abstract summaries",
        validation_alias="PAPER_SUMMARY_TEMPERATURE",
    )
    paper_summary_max_tokens: int = Field(
        default=200,
        ge=1,
        description="Token cap for paper abstract summaries",
        validation_alias="PAPER_SUMMARY_MAX_TOKENS",
    )
    chat_max_tokens: int = Field(
        default=500,
        ge=1,
        description="Token cap for tutor replies",
        validation_alias="CHAT_MAX_TOKENS",
    )
    request_timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="Timeout in seconds for outbound requests",
        validation_alias="REQUEST_TIMEOUT",
    )

    # Research
    arxiv_api_url: str = Field(
        default="http://export.arxiv.org/api/query",
        description="arXiv query endpoint",
        validation_alias="ARXIV_API_URL",
    )
    arxiv_max_results: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of papers returned per search",
        validation_alias="ARXIV_MAX_RESULTS",
    )

    # Quiz Settings
    question_time_limit: int = Field(
        default=30,
        ge=1,
        description="Seconds allowed per quiz question",
        validation_alias="QUESTION_TIME_LIMIT",
    )
    history_limit: int = Field(
        default=10,
        ge=1,
        description="Number of quiz results kept in history",
        validation_alias="HISTORY_LIMIT",
    )
    session_cookie_name: str = Field(
        default="mindmate_client",
        description="Cookie identifying a browser client",
        validation_alias="SESSION_COOKIE_NAME",
    )
    session_timeout_minutes: int = Field(
        default=120,
        ge=1,
        description="Idle minutes before a quiz session is dropped",
        validation_alias="SESSION_TIMEOUT_MINUTES",
    )

    # Storage / Uploads
    data_dir: str = Field(
        default="data",
        description="Directory holding the client storage database",
        validation_alias="DATA_DIR",
    )
    db_file: str = Field(
        default="mindmate.db",
        description="SQLite file name for client storage",
        validation_alias="DB_FILE",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Largest accepted upload",
        validation_alias="MAX_UPLOAD_BYTES",
    )

    # Logging
    log_dir: str = Field(
        default="log",
        description="Directory for the rotating log file",
        validation_alias="LOG_DIR",
    )
    log_file: str = Field(
        default="mindmate.log",
        validation_alias="LOG_FILE",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
    )

    # Output Settings
    default_output_dir: str = Field(
        default="output",
        description="Default directory for exported documents",
        validation_alias="DEFAULT_OUTPUT_DIR",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def db_path(self) -> Path:
        """Full path of the SQLite storage file."""
        return Path(self.data_dir) / self.db_file

    def api_key_configured(self) -> bool:
        """Whether the credential for the selected provider is present."""
        if self.llm_provider == "openai":
            return bool(self.openai_api_key)
        if self.llm_provider == "anthropic":
            return bool(self.anthropic_api_key)
        return bool(self.aws_api_key_id and self.aws_api_key_secret)


# This is loaded the first time and then cached for further use by other modules
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
