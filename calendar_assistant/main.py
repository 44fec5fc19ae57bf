"""Main FastAPI application module for the Calendar Assistant.

Wires the chat, events, tasks and notes routers into one app and
initializes the SQLite database on startup.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from calendar_assistant.core.config import Settings, get_settings
from calendar_assistant.core.dependencies import reset_singletons
from calendar_assistant.core.logging_config import configure_logging, get_logging_config
from calendar_assistant.database.crud import initialize_database
from calendar_assistant.api.routers import chat as chat_router
from calendar_assistant.api.routers import events as events_router
from calendar_assistant.api.routers import notes as notes_router
from calendar_assistant.api.routers import tasks as tasks_router

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Calendar Assistant API...")
    try:
        settings = get_settings()
        db_path = Path(settings.database_path).resolve()
        logger.info(f"Ensuring database exists and is initialized at: {db_path}")
        initialize_database(db_path)
    except Exception as e:
        logger.error(f"Failed to initialize database on startup: {e}", exc_info=True)
        raise

    yield

    # Shutdown
    logger.info("Shutting down Calendar Assistant API...")
    reset_singletons()
    logger.info("Shutdown complete.")


app = FastAPI(
    title="Calendar Assistant API",
    description="Conversational assistant that manages a calendar, a task list and notes.",
    version="0.1.0",
    debug=get_settings().debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router.router)
app.include_router(events_router.router)
app.include_router(tasks_router.router)
app.include_router(notes_router.router)


@app.get("/health", response_model=Dict[str, Any])
async def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Health check endpoint to verify the API is running."""
    return {
        "status": "healthy",
        "version": app.version,
        "environment": settings.environment,
        "llm_provider": settings.llm_provider,
    }


@app.get("/")
async def root() -> Dict[str, str]:
    """Root endpoint that returns basic API information."""
    return {
        "message": "Welcome to the Calendar Assistant API",
        "version": app.version,
    }


if __name__ == "__main__":
    settings = get_settings()
    logger.info(f"Starting Uvicorn server on {settings.api_host}:{settings.api_port} with reload={settings.api_reload}")
    uvicorn.run(
        "calendar_assistant.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_config=get_logging_config(settings.log_level),
        log_level=settings.api_log_level.lower()
    )
