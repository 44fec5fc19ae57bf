"""Configuration module for the Calendar Assistant.

This module handles all application configuration using pydantic-settings.
Values come from environment variables and an optional ``.env`` file.
"""

import logging
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# .env values must be in os.environ before any Settings() is built
load_dotenv()

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Runtime configuration for the API, the model clients and the database.

    Every field can be overridden by an environment variable of the same name
    (case-insensitive).
    """

    # Application settings
    environment: str = "development"
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root log level for the application.")

    # Database settings
    database_url: str = Field(
        default="sqlite:///./data/calendar_assistant.db",
        description="SQLite database connection URL (relative path allowed).",
    )

    # LLM settings
    llm_provider: str = Field(default="openai", description="LLM provider ('openai' or 'ollama')")
    openai_api_key: str | None = Field(default=None, description="API Key for OpenAI (if used)")
    openai_model: str = Field(default="gpt-3.5-turbo", description="Default OpenAI chat model")
    ollama_base_url: str = Field(default="http://localhost:11434", description="Base URL for the Ollama API server.")
    default_model: str = Field(default="llama3.1:latest", description="Default Ollama model to use.")
    llm_temperature: float = Field(default=0.7, description="Sampling temperature for assistant replies.")
    llm_max_tokens: int = Field(default=600, description="Maximum tokens in an assistant reply.", gt=0)

    # Assistant behaviour
    chat_history_limit: int = Field(default=50, description="Number of prior chat messages sent to the model.", ge=0)

    # API Server Configuration (for uvicorn)
    api_host: str = Field(default="0.0.0.0", description="Host for the FastAPI server.")
    api_port: int = Field(default=8000, description="Port for the FastAPI server.")
    api_reload: bool = Field(default=False, description="Enable auto-reload for the FastAPI server (development).")
    api_log_level: str = Field(default="info", description="Log level for the FastAPI server.")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra='ignore'
    )

    @property
    def database_path(self) -> str:
        """Filesystem path extracted from ``database_url``.

        Raises:
            ValueError: If the URL is not a ``sqlite:///`` URL.
        """
        if not self.database_url.startswith("sqlite:///"):
            raise ValueError(f"Invalid database_url format: {self.database_url}. Expected 'sqlite:///path/to/db.sqlite'")
        return self.database_url[len("sqlite:///"):]


def get_settings() -> Settings:
    """Builds settings from the current environment."""
    return Settings()
