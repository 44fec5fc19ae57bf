"""Pydantic models representing database objects.

These models are used for data validation and structuring when interacting
with the database CRUD operations.
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_EVENT_COLOR = "#3b82f6"


def parse_clock_time(value: str) -> time:
    """Parses 'HH:MM' or 'HH:MM:SS' into a ``time``.

    Raises:
        ValueError: If the string matches neither format.
    """
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time '{value}', expected HH:MM")


def _check_iso_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")
    return value


class Priority(str, Enum):
    """Task priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# === Calendar Events ===

class CalendarEventCreate(BaseModel):
    """Model for creating a new calendar event.

    The date is kept as an ISO string and the times as 'HH:MM' strings, which is
    how they are stored and how the assistant emits them.
    """
    title: str = Field(..., min_length=1)
    date: str = Field(..., description="Calendar date, YYYY-MM-DD.")
    start_time: str = Field(..., description="Start time, 24-hour HH:MM.")
    end_time: str = Field(..., description="End time, 24-hour HH:MM.")
    color: str = Field(default=DEFAULT_EVENT_COLOR, description="Display color, e.g. '#3b82f6'.")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _check_iso_date(v)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        parse_clock_time(v)
        return v

    @model_validator(mode="after")
    def start_before_end(self):
        if parse_clock_time(self.start_time) >= parse_clock_time(self.end_time):
            raise ValueError(f"start_time {self.start_time} must be before end_time {self.end_time}")
        return self


class CalendarEvent(CalendarEventCreate):
    """Model representing an event retrieved from the database."""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# === Tasks ===

class TaskCreate(BaseModel):
    """Model for creating a new task (a row in the ``todos`` table)."""
    text: str = Field(..., min_length=1)
    priority: Priority = Priority.MEDIUM
    due_date: Optional[str] = Field(default=None, description="Optional due date, YYYY-MM-DD.")
    completed: bool = False

    @field_validator("due_date")
    @classmethod
    def validate_due_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_iso_date(v)


class Task(TaskCreate):
    """Model representing a task retrieved from the database."""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


# === Notes ===

class NoteCreate(BaseModel):
    """Model for creating a new note."""
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class Note(NoteCreate):
    """Model representing a note retrieved from the database."""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# === Chat ===

class ChatMessage(BaseModel):
    """Model representing a single message in a chat conversation.

    Used for interacting with LLM chat endpoints and for stored history.
    """
    role: str = Field(..., description="The role of the message sender (e.g., 'user', 'assistant', 'system').")
    content: str = Field(..., description="The content of the message.")


class ChatSession(BaseModel):
    """A stored conversation with the assistant."""
    id: str
    title: str
    message_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
