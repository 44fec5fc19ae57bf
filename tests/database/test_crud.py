"""Tests for the SQLite CRUD layer, run against an in-memory database."""

import pytest
from pydantic import ValidationError

from calendar_assistant.database import crud
from calendar_assistant.database.models import (
    CalendarEventCreate,
    ChatMessage,
    NoteCreate,
    Priority,
    TaskCreate,
)


def make_event(**overrides) -> CalendarEventCreate:
    values = {"title": "Dentist", "date": "2024-03-05", "start_time": "10:00", "end_time": "11:00"}
    values.update(overrides)
    return CalendarEventCreate(**values)


# --- Events ---

def test_create_and_get_event(db_conn):
    created = crud.create_event(db_conn, make_event())

    fetched = crud.get_event(db_conn, created.id)

    assert fetched is not None
    assert fetched.title == "Dentist"
    assert fetched.color == "#3b82f6"
    assert fetched.created_at is not None


def test_get_event_missing_returns_none(db_conn):
    assert crud.get_event(db_conn, "nope") is None


def test_list_events_ordered_by_date_then_start(db_conn):
    crud.create_event(db_conn, make_event(title="Late", date="2024-03-06", start_time="08:00", end_time="09:00"))
    crud.create_event(db_conn, make_event(title="Afternoon", start_time="14:00", end_time="15:00"))
    crud.create_event(db_conn, make_event(title="Morning", start_time="08:30", end_time="09:00"))

    titles = [e.title for e in crud.list_events(db_conn)]

    assert titles == ["Morning", "Afternoon", "Late"]


def test_event_start_must_precede_end():
    with pytest.raises(ValidationError):
        make_event(start_time="11:00", end_time="11:00")


def test_event_rejects_bad_date():
    with pytest.raises(ValidationError):
        make_event(date="05/03/2024")


def test_update_event_merges_fields(db_conn):
    created = crud.create_event(db_conn, make_event())

    updated = crud.update_event(db_conn, created.id, {"start_time": "10:30", "color": "#ef4444", "id": "hijack"})

    assert updated.id == created.id
    assert updated.start_time == "10:30"
    assert updated.end_time == "11:00"
    assert updated.color == "#ef4444"


def test_update_event_cannot_invert_times(db_conn):
    created = crud.create_event(db_conn, make_event())

    with pytest.raises(ValidationError):
        crud.update_event(db_conn, created.id, {"end_time": "09:00"})

    assert crud.get_event(db_conn, created.id).end_time == "11:00"


def test_update_event_without_updatable_fields(db_conn):
    created = crud.create_event(db_conn, make_event())

    with pytest.raises(ValueError, match="No updatable fields given for event"):
        crud.update_event(db_conn, created.id, {"nonsense": 1})


def test_update_and_delete_unknown_event(db_conn):
    with pytest.raises(crud.RecordNotFoundError, match="Event 'ghost' not found"):
        crud.update_event(db_conn, "ghost", {"title": "x"})
    with pytest.raises(crud.RecordNotFoundError):
        crud.delete_event(db_conn, "ghost")


def test_delete_event(db_conn):
    created = crud.create_event(db_conn, make_event())

    crud.delete_event(db_conn, created.id)

    assert crud.get_event(db_conn, created.id) is None


# --- Tasks ---

def test_create_task_defaults(db_conn):
    task = crud.create_task(db_conn, TaskCreate(text="Buy milk"))

    assert task.priority == "medium"
    assert task.completed is False
    assert task.due_date is None


def test_list_tasks_newest_first(db_conn):
    crud.create_task(db_conn, TaskCreate(text="first"))
    crud.create_task(db_conn, TaskCreate(text="second"))

    assert [t.text for t in crud.list_tasks(db_conn)] == ["second", "first"]


def test_update_task_completion_and_priority(db_conn):
    task = crud.create_task(db_conn, TaskCreate(text="File taxes", priority=Priority.LOW, due_date="2024-04-15"))

    updated = crud.update_task(db_conn, task.id, {"completed": True, "priority": "high"})

    assert updated.completed is True
    assert updated.priority == "high"
    assert updated.due_date == "2024-04-15"


def test_update_task_rejects_unknown_priority(db_conn):
    task = crud.create_task(db_conn, TaskCreate(text="File taxes"))

    with pytest.raises(ValidationError):
        crud.update_task(db_conn, task.id, {"priority": "urgent"})


def test_delete_unknown_task(db_conn):
    with pytest.raises(crud.RecordNotFoundError, match="Task 'missing' not found"):
        crud.delete_task(db_conn, "missing")


# --- Notes ---

def test_note_lifecycle(db_conn):
    note = crud.create_note(db_conn, NoteCreate(title="Ideas", content="Learn Rust"))

    crud.update_note(db_conn, note.id, {"content": "Learn Python"})
    assert crud.get_note(db_conn, note.id).content == "Learn Python"

    crud.delete_note(db_conn, note.id)
    assert crud.list_notes(db_conn) == []


# --- Chat ---

def test_chat_history_is_chronological_and_limited(db_conn):
    session = crud.create_chat_session(db_conn, "Planning")
    for i in range(5):
        role = "user" if i % 2 == 0 else "assistant"
        crud.add_chat_message(db_conn, session.id, ChatMessage(role=role, content=f"message {i}"))

    history = crud.get_chat_history(db_conn, session.id, limit=3)

    assert [m.content for m in history] == ["message 2", "message 3", "message 4"]
    assert crud.get_chat_history(db_conn, session.id, limit=0) == []


def test_chat_history_without_limit_returns_whole_session(db_conn):
    session = crud.create_chat_session(db_conn, "Long")
    for i in range(60):
        crud.add_chat_message(db_conn, session.id, ChatMessage(role="user", content=f"message {i}"))

    history = crud.get_chat_history(db_conn, session.id, limit=None)

    assert len(history) == 60
    assert history[0].content == "message 0"
    assert history[-1].content == "message 59"


def test_touch_chat_session_counts_messages(db_conn):
    session = crud.create_chat_session(db_conn, "")
    crud.add_chat_message(db_conn, session.id, ChatMessage(role="user", content="hi"))
    crud.add_chat_message(db_conn, session.id, ChatMessage(role="assistant", content="hello"))

    crud.touch_chat_session(db_conn, session.id)

    stored = crud.get_chat_session(db_conn, session.id)
    assert stored.title == "New Chat"
    assert stored.message_count == 2


def test_delete_chat_session_removes_messages(db_conn):
    session = crud.create_chat_session(db_conn, "Temp")
    crud.add_chat_message(db_conn, session.id, ChatMessage(role="user", content="hi"))

    crud.delete_chat_session(db_conn, session.id)

    assert crud.get_chat_session(db_conn, session.id) is None
    assert crud.get_chat_history(db_conn, session.id) == []
    with pytest.raises(crud.RecordNotFoundError):
        crud.delete_chat_session(db_conn, session.id)


def test_initialize_database_creates_file(tmp_path):
    db_path = tmp_path / "nested" / "assistant.db"

    crud.initialize_database(db_path)

    conn = crud.connect(db_path)
    try:
        tables = {row["name"] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert {"events", "todos", "notes", "chat_sessions", "chat_messages"} <= tables
