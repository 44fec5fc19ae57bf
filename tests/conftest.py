"""Shared fixtures for the test suite."""

import sqlite3
from typing import Any, Dict, List, Tuple

import pytest

from calendar_assistant.database import crud
from calendar_assistant.database.models import CalendarEvent, Note, Task


@pytest.fixture
def db_conn() -> sqlite3.Connection:
    """An in-memory database with all tables created."""
    conn = crud.connect(":memory:")
    crud.create_tables(conn)
    yield conn
    conn.close()


class RecordingStore:
    """Data store stub that records every call and hands out predictable ids.

    Set ``fail_on`` to a method name (or a set of names) to make those calls raise.
    """

    def __init__(self, fail_on=(), error_message: str = "database unavailable"):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.fail_on = {fail_on} if isinstance(fail_on, str) else set(fail_on)
        self.error_message = error_message
        self._counter = 0

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise RuntimeError(self.error_message)

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    async def create_event(self, payload: Dict[str, Any]) -> CalendarEvent:
        self._record("create_event", payload)
        return CalendarEvent(id=self._next_id("event"), **payload)

    async def update_event(self, event_id: str, updates: Dict[str, Any]) -> None:
        self._record("update_event", event_id, updates)

    async def delete_event(self, event_id: str) -> None:
        self._record("delete_event", event_id)

    async def create_task(self, payload: Dict[str, Any]) -> Task:
        self._record("create_task", payload)
        return Task(id=self._next_id("task"), **payload)

    async def update_task(self, task_id: str, updates: Dict[str, Any]) -> None:
        self._record("update_task", task_id, updates)

    async def delete_task(self, task_id: str) -> None:
        self._record("delete_task", task_id)

    async def create_note(self, payload: Dict[str, Any]) -> Note:
        self._record("create_note", payload)
        return Note(id=self._next_id("note"), **payload)

    async def update_note(self, note_id: str, updates: Dict[str, Any]) -> None:
        self._record("update_note", note_id, updates)

    async def delete_note(self, note_id: str) -> None:
        self._record("delete_note", note_id)

    @property
    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def make_store():
    """Factory for RecordingStore instances with custom failure behaviour."""
    return RecordingStore


@pytest.fixture
def recording_store(make_store) -> RecordingStore:
    return make_store()
