"""CRUD (Create, Read, Update, Delete) operations for the database.

This module contains functions for interacting with the database tables.
Every function takes an open ``sqlite3.Connection`` whose ``row_factory`` is
``sqlite3.Row`` (see :func:`connect`).
"""

import sqlite3
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from calendar_assistant.database.schema import ALL_TABLES
from calendar_assistant.database.models import (
    CalendarEvent,
    CalendarEventCreate,
    ChatMessage,
    ChatSession,
    Note,
    NoteCreate,
    Priority,
    Task,
    TaskCreate,
)

logger = logging.getLogger(__name__)

# Columns an update is allowed to touch, per table
EVENT_UPDATE_FIELDS = ("title", "date", "start_time", "end_time", "color")
TASK_UPDATE_FIELDS = ("text", "priority", "due_date", "completed")
NOTE_UPDATE_FIELDS = ("title", "content")


class RecordNotFoundError(LookupError):
    """Raised when an update or delete targets an id that does not exist."""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Opens a connection configured the way the CRUD functions expect.

    Args:
        db_path: Path to the SQLite file, or ":memory:".

    Returns:
        A connection usable across threads with ``sqlite3.Row`` rows.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(conn: sqlite3.Connection) -> None:
    """Creates all tables on an open connection if they don't exist."""
    with conn:
        cursor = conn.cursor()
        for table_sql in ALL_TABLES:
            cursor.execute(table_sql)


def initialize_database(db_path: str | Path) -> None:
    """Initializes the database by creating tables if they don't exist.

    Args:
        db_path: The path to the SQLite database file.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        conn = sqlite3.connect(str(db_path))
        try:
            create_tables(conn)
            logger.info(f"Database tables initialized successfully at {db_path}.")
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.error(f"Error initializing database tables at {db_path}: {e}", exc_info=True)
        raise


# --- Generic helpers ---

def _insert(conn: sqlite3.Connection, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
    row = {"id": _new_id(), **values, "created_at": _now_iso(), "updated_at": _now_iso()}
    columns = ", ".join(row)
    placeholders = ", ".join("?" for _ in row)
    try:
        with conn:
            conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", tuple(row.values()))
        logger.debug(f"Inserted row {row['id']} into {table}")
        return row
    except sqlite3.Error as e:
        logger.error(f"Error inserting into {table}: {e}", exc_info=True)
        raise


def _fetch_one(conn: sqlite3.Connection, table: str, record_id: str) -> Optional[Dict[str, Any]]:
    try:
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,)).fetchone()
    except sqlite3.Error as e:
        logger.error(f"Error retrieving {table} row {record_id}: {e}", exc_info=True)
        raise
    return dict(row) if row else None


def _fetch_all(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> List[Dict[str, Any]]:
    try:
        return [dict(row) for row in conn.execute(sql, tuple(params)).fetchall()]
    except sqlite3.Error as e:
        logger.error(f"Error running query '{sql}': {e}", exc_info=True)
        raise


def _filter_updates(updates: Dict[str, Any], allowed: Iterable[str], label: str) -> Dict[str, Any]:
    allowed = set(allowed)
    filtered = {k: v for k, v in (updates or {}).items() if k in allowed}
    ignored = set(updates or {}) - allowed
    if ignored:
        logger.debug(f"Ignoring non-updatable {label} fields: {sorted(ignored)}")
    if not filtered:
        raise ValueError(f"No updatable fields given for {label}")
    return filtered


def _write_update(conn: sqlite3.Connection, table: str, record_id: str, values: Dict[str, Any]) -> None:
    values = {**values, "updated_at": _now_iso()}
    assignments = ", ".join(f"{column} = ?" for column in values)
    try:
        with conn:
            conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                (*values.values(), record_id),
            )
    except sqlite3.Error as e:
        logger.error(f"Error updating {table} row {record_id}: {e}", exc_info=True)
        raise


def _delete(conn: sqlite3.Connection, table: str, record_id: str, label: str) -> None:
    try:
        with conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
    except sqlite3.Error as e:
        logger.error(f"Error deleting {table} row {record_id}: {e}", exc_info=True)
        raise
    if cursor.rowcount == 0:
        raise RecordNotFoundError(f"{label} '{record_id}' not found")
    logger.info(f"Deleted {label.lower()} {record_id}")


# === Events ===

def create_event(conn: sqlite3.Connection, event: CalendarEventCreate) -> CalendarEvent:
    """Creates a new calendar event.

    Args:
        conn: An active sqlite3 database connection.
        event: The validated event data.

    Returns:
        The stored event, including its generated id.

    Raises:
        sqlite3.Error: For database errors during insertion.
    """
    row = _insert(conn, "events", event.model_dump())
    logger.info(f"Created event '{event.title}' on {event.date} with id {row['id']}")
    return CalendarEvent.model_validate(row)


def get_event(conn: sqlite3.Connection, event_id: str) -> Optional[CalendarEvent]:
    """Retrieves an event by id, or None if it does not exist."""
    row = _fetch_one(conn, "events", event_id)
    return CalendarEvent.model_validate(row) if row else None


def list_events(conn: sqlite3.Connection) -> List[CalendarEvent]:
    """Returns all events ordered by date, then start time."""
    rows = _fetch_all(conn, "SELECT * FROM events ORDER BY date ASC, start_time ASC")
    return [CalendarEvent.model_validate(row) for row in rows]


def update_event(conn: sqlite3.Connection, event_id: str, updates: Dict[str, Any]) -> CalendarEvent:
    """Applies a partial update to an event.

    The merged event is validated again, so an update cannot leave an event
    whose start time is not before its end time.

    Raises:
        RecordNotFoundError: If no event has this id.
        ValueError: If no updatable field is given or the merged event is invalid.
    """
    current = get_event(conn, event_id)
    if current is None:
        raise RecordNotFoundError(f"Event '{event_id}' not found")
    changes = _filter_updates(updates, EVENT_UPDATE_FIELDS, "event")
    merged = CalendarEventCreate.model_validate({**current.model_dump(include=set(EVENT_UPDATE_FIELDS)), **changes})
    _write_update(conn, "events", event_id, merged.model_dump())
    logger.info(f"Updated event {event_id}: {sorted(changes)}")
    return get_event(conn, event_id)


def delete_event(conn: sqlite3.Connection, event_id: str) -> None:
    """Deletes an event.

    Raises:
        RecordNotFoundError: If no event has this id.
    """
    _delete(conn, "events", event_id, "Event")


# === Tasks ===

def _task_values(task: TaskCreate) -> Dict[str, Any]:
    values = task.model_dump()
    values["priority"] = Priority(task.priority).value
    return values


def create_task(conn: sqlite3.Connection, task: TaskCreate) -> Task:
    """Creates a new task in the ``todos`` table."""
    row = _insert(conn, "todos", _task_values(task))
    logger.info(f"Created task '{task.text}' with id {row['id']}")
    return Task.model_validate(row)


def get_task(conn: sqlite3.Connection, task_id: str) -> Optional[Task]:
    """Retrieves a task by id, or None if it does not exist."""
    row = _fetch_one(conn, "todos", task_id)
    return Task.model_validate(row) if row else None


def list_tasks(conn: sqlite3.Connection) -> List[Task]:
    """Returns all tasks, newest first."""
    rows = _fetch_all(conn, "SELECT * FROM todos ORDER BY created_at DESC, rowid DESC")
    return [Task.model_validate(row) for row in rows]


def update_task(conn: sqlite3.Connection, task_id: str, updates: Dict[str, Any]) -> Task:
    """Applies a partial update to a task.

    Raises:
        RecordNotFoundError: If no task has this id.
        ValueError: If no updatable field is given or the merged task is invalid.
    """
    current = get_task(conn, task_id)
    if current is None:
        raise RecordNotFoundError(f"Task '{task_id}' not found")
    changes = _filter_updates(updates, TASK_UPDATE_FIELDS, "task")
    merged = TaskCreate.model_validate({**current.model_dump(include=set(TASK_UPDATE_FIELDS)), **changes})
    _write_update(conn, "todos", task_id, _task_values(merged))
    logger.info(f"Updated task {task_id}: {sorted(changes)}")
    return get_task(conn, task_id)


def delete_task(conn: sqlite3.Connection, task_id: str) -> None:
    """Deletes a task.

    Raises:
        RecordNotFoundError: If no task has this id.
    """
    _delete(conn, "todos", task_id, "Task")


# === Notes ===

def create_note(conn: sqlite3.Connection, note: NoteCreate) -> Note:
    """Creates a new note."""
    row = _insert(conn, "notes", note.model_dump())
    logger.info(f"Created note '{note.title}' with id {row['id']}")
    return Note.model_validate(row)


def get_note(conn: sqlite3.Connection, note_id: str) -> Optional[Note]:
    """Retrieves a note by id, or None if it does not exist."""
    row = _fetch_one(conn, "notes", note_id)
    return Note.model_validate(row) if row else None


def list_notes(conn: sqlite3.Connection) -> List[Note]:
    """Returns all notes, most recently updated first."""
    rows = _fetch_all(conn, "SELECT * FROM notes ORDER BY updated_at DESC, rowid DESC")
    return [Note.model_validate(row) for row in rows]


def update_note(conn: sqlite3.Connection, note_id: str, updates: Dict[str, Any]) -> Note:
    """Applies a partial update to a note.

    Raises:
        RecordNotFoundError: If no note has this id.
        ValueError: If no updatable field is given or the merged note is invalid.
    """
    current = get_note(conn, note_id)
    if current is None:
        raise RecordNotFoundError(f"Note '{note_id}' not found")
    changes = _filter_updates(updates, NOTE_UPDATE_FIELDS, "note")
    merged = NoteCreate.model_validate({**current.model_dump(include=set(NOTE_UPDATE_FIELDS)), **changes})
    _write_update(conn, "notes", note_id, merged.model_dump())
    logger.info(f"Updated note {note_id}: {sorted(changes)}")
    return get_note(conn, note_id)


def delete_note(conn: sqlite3.Connection, note_id: str) -> None:
    """Deletes a note.

    Raises:
        RecordNotFoundError: If no note has this id.
    """
    _delete(conn, "notes", note_id, "Note")


# === Chat sessions and messages ===

def create_chat_session(conn: sqlite3.Connection, title: str) -> ChatSession:
    """Creates an empty chat session."""
    row = _insert(conn, "chat_sessions", {"title": title or "New Chat", "message_count": 0})
    logger.info(f"Created chat session {row['id']}")
    return ChatSession.model_validate(row)


def get_chat_session(conn: sqlite3.Connection, session_id: str) -> Optional[ChatSession]:
    """Retrieves a chat session by id, or None if it does not exist."""
    row = _fetch_one(conn, "chat_sessions", session_id)
    return ChatSession.model_validate(row) if row else None


def list_chat_sessions(conn: sqlite3.Connection) -> List[ChatSession]:
    """Returns all chat sessions, most recently updated first."""
    rows = _fetch_all(conn, "SELECT * FROM chat_sessions ORDER BY updated_at DESC, rowid DESC")
    return [ChatSession.model_validate(row) for row in rows]


def touch_chat_session(conn: sqlite3.Connection, session_id: str) -> None:
    """Refreshes a session's message count and ``updated_at`` timestamp."""
    count = conn.execute(
        "SELECT COUNT(*) FROM chat_messages WHERE session_id = ?", (session_id,)
    ).fetchone()[0]
    _write_update(conn, "chat_sessions", session_id, {"message_count": count})


def delete_chat_session(conn: sqlite3.Connection, session_id: str) -> None:
    """Deletes a chat session and all of its messages.

    Raises:
        RecordNotFoundError: If no session has this id.
    """
    try:
        with conn:
            conn.execute("DELETE FROM chat_messages WHERE session_id = ?", (session_id,))
    except sqlite3.Error as e:
        logger.error(f"Error deleting messages for session {session_id}: {e}", exc_info=True)
        raise
    _delete(conn, "chat_sessions", session_id, "Chat session")


def add_chat_message(conn: sqlite3.Connection, session_id: str, message: ChatMessage) -> Optional[int]:
    """Adds a chat message to the database.

    Args:
        conn: An active sqlite3 database connection.
        session_id: The unique identifier for the chat session.
        message: The ChatMessage object containing role and content.

    Returns:
        The ID of the inserted chat message, or None if insertion failed.

    Raises:
        sqlite3.Error: For database errors during insertion.
    """
    sql = """INSERT INTO chat_messages (session_id, role, content, timestamp)
             VALUES (?, ?, ?, ?)"""

    try:
        with conn:
            cursor = conn.cursor()
            cursor.execute(sql, (session_id, message.role, message.content, _now_iso()))
            message_id = cursor.lastrowid
            if message_id is not None:
                logger.debug(f"Added chat message ID {message_id} for session {session_id}")
                return message_id
            else:
                logger.error(f"Failed to get lastrowid after inserting chat message for session {session_id}")
                return None
    except sqlite3.Error as e:
        logger.error(f"Error adding chat message for session {session_id}: {e}", exc_info=True)
        raise


def get_chat_history(conn: sqlite3.Connection, session_id: str, limit: Optional[int] = 50) -> List[ChatMessage]:
    """Returns the last ``limit`` messages of a session in chronological order.

    ``limit=None`` returns the whole session.
    """
    if limit is None:
        rows = _fetch_all(
            conn,
            "SELECT role, content FROM chat_messages WHERE session_id = ? ORDER BY id ASC",
            (session_id,),
        )
        return [ChatMessage(**row) for row in rows]
    if limit <= 0:
        return []
    rows = _fetch_all(
        conn,
        """SELECT role, content FROM (
               SELECT id, role, content FROM chat_messages
               WHERE session_id = ? ORDER BY id DESC LIMIT ?
           ) ORDER BY id ASC""",
        (session_id, limit),
    )
    return [ChatMessage(**row) for row in rows]
