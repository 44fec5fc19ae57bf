"""SQLite-backed implementation of the DataStoreInterface.

The CRUD layer is synchronous; each operation is pushed to a worker thread
with ``run_in_threadpool`` so the directive engine can await it.
"""

import logging
import sqlite3
from typing import Any, Dict, Type, TypeVar

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError

from calendar_assistant.database import crud
from calendar_assistant.database.models import (
    CalendarEvent,
    CalendarEventCreate,
    Note,
    NoteCreate,
    Task,
    TaskCreate,
)
from calendar_assistant.interfaces.data_store_interface import DataStoreInterface

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def summarize_validation_error(error: ValidationError) -> str:
    """Collapses a pydantic ValidationError into one readable line."""
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        message = err.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _validated(model: Type[ModelT], payload: Dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ValueError(summarize_validation_error(e)) from e


async def _run(func, *args):
    try:
        return await run_in_threadpool(func, *args)
    except ValidationError as e:
        raise ValueError(summarize_validation_error(e)) from e


class SQLiteDataStore(DataStoreInterface):
    """Executes directive mutations against the local SQLite database."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    async def create_event(self, payload: Dict[str, Any]) -> CalendarEvent:
        event = _validated(CalendarEventCreate, payload)
        return await _run(crud.create_event, self.conn, event)

    async def update_event(self, event_id: str, updates: Dict[str, Any]) -> None:
        await _run(crud.update_event, self.conn, event_id, updates)

    async def delete_event(self, event_id: str) -> None:
        await _run(crud.delete_event, self.conn, event_id)

    async def create_task(self, payload: Dict[str, Any]) -> Task:
        task = _validated(TaskCreate, payload)
        return await _run(crud.create_task, self.conn, task)

    async def update_task(self, task_id: str, updates: Dict[str, Any]) -> None:
        await _run(crud.update_task, self.conn, task_id, updates)

    async def delete_task(self, task_id: str) -> None:
        await _run(crud.delete_task, self.conn, task_id)

    async def create_note(self, payload: Dict[str, Any]) -> Note:
        note = _validated(NoteCreate, payload)
        return await _run(crud.create_note, self.conn, note)

    async def update_note(self, note_id: str, updates: Dict[str, Any]) -> None:
        await _run(crud.update_note, self.conn, note_id, updates)

    async def delete_note(self, note_id: str) -> None:
        await _run(crud.delete_note, self.conn, note_id)
