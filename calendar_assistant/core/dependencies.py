"""Dependencies module for the Calendar Assistant.

This module defines FastAPI dependencies used throughout the application.
"""

import logging
import sqlite3
from pathlib import Path

from fastapi import Depends, HTTPException, status

from calendar_assistant.core.config import Settings, get_settings
from calendar_assistant.database import crud
from calendar_assistant.database.store import SQLiteDataStore
from calendar_assistant.features.assistant_service import AssistantService
from calendar_assistant.interfaces.data_store_interface import DataStoreInterface
from calendar_assistant.interfaces.llm_interface import LLMInterface
from calendar_assistant.llms.ollama_client import OllamaClient
from calendar_assistant.llms.openai_client import OpenAIClient

logger = logging.getLogger(__name__)

# --- Singleton instances (cached per application lifecycle) ---
_db_connection: sqlite3.Connection | None = None
_llm_service: LLMInterface | None = None


# --- Database Dependency ---

def get_db(settings: Settings = Depends(get_settings)) -> sqlite3.Connection:
    """Provides the singleton database connection instance.

    The connection is opened (and tables created) on first use.
    """
    global _db_connection
    if _db_connection is None:
        db_path = Path(settings.database_path).resolve()
        crud.initialize_database(db_path)
        _db_connection = crud.connect(db_path)
        logger.info(f"Database connection established at {db_path}.")
    return _db_connection


def close_db() -> None:
    """Closes the singleton connection, if open."""
    global _db_connection
    if _db_connection is not None:
        _db_connection.close()
        _db_connection = None
        logger.info("Database connection closed.")


# --- Service Dependencies ---

def build_llm_service(settings: Settings) -> LLMInterface:
    """Creates the LLM client selected by ``settings.llm_provider``.

    Raises:
        ValueError: For an unknown provider or missing provider configuration.
    """
    provider = settings.llm_provider.lower()
    if provider == "openai":
        return OpenAIClient(settings=settings)
    if provider == "ollama":
        return OllamaClient(settings=settings)
    raise ValueError(f"Unknown llm_provider '{settings.llm_provider}'. Expected 'openai' or 'ollama'.")


def get_llm_service(settings: Settings = Depends(get_settings)) -> LLMInterface:
    """Provides the singleton LLMInterface instance, using injected settings."""
    global _llm_service
    if _llm_service is None:
        try:
            _llm_service = build_llm_service(settings)
        except ValueError as e:
            logger.error(f"LLM service is not available: {e}")
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
        logger.info(f"Created {type(_llm_service).__name__} singleton instance.")
    return _llm_service


def get_data_store(db: sqlite3.Connection = Depends(get_db)) -> DataStoreInterface:
    """Provides the data store the directive engine writes to."""
    return SQLiteDataStore(db)


def get_assistant_service(
    db: sqlite3.Connection = Depends(get_db),
    llm: LLMInterface = Depends(get_llm_service),
    store: DataStoreInterface = Depends(get_data_store),
    settings: Settings = Depends(get_settings),
) -> AssistantService:
    """Provides an AssistantService bound to the current connection and model."""
    return AssistantService(conn=db, llm=llm, store=store, settings=settings)


def reset_singletons() -> None:
    """Resets service singletons that depend on configurable settings."""
    global _llm_service
    if _llm_service is not None:
        logger.info("Resetting LLM service singleton.")
        _llm_service = None
    close_db()
