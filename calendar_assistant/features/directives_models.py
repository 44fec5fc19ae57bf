"""Pydantic models for the assistant directive feature.

A directive is one line of assistant output such as
``CREATE_TASK: {"text": "Buy milk", "priority": "high"}``. Each kind has its
own payload model with an explicit list of required wire fields.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from calendar_assistant.database.models import DEFAULT_EVENT_COLOR, Priority


class DirectiveKind(str, Enum):
    """The nine recognised directive kinds."""
    CREATE_EVENT = "create_event"
    UPDATE_EVENT = "update_event"
    DELETE_EVENT = "delete_event"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    CREATE_NOTE = "create_note"
    UPDATE_NOTE = "update_note"
    DELETE_NOTE = "delete_note"

    @property
    def prefix(self) -> str:
        """The keyword that starts a directive line, e.g. 'CREATE_EVENT:'."""
        return f"{self.value.upper()}:"

    @property
    def verb(self) -> str:
        return self.value.split("_", 1)[0]

    @property
    def entity(self) -> str:
        return self.value.split("_", 1)[1]


class DirectivePayload(BaseModel):
    """Base class for decoded directive payloads.

    Unknown fields are ignored and numeric identifiers are accepted as strings.
    """
    required_fields: ClassVar[Tuple[str, ...]] = ()
    missing_message: ClassVar[str] = "Missing required fields."

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


# --- Events ---

class CreateEventDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("title", "date", "start_time", "end_time")
    missing_message: ClassVar[str] = "Missing required fields for event creation."

    title: str
    date: str
    start_time: str
    end_time: str
    color: str = DEFAULT_EVENT_COLOR

    @field_validator("color", mode="before")
    @classmethod
    def default_color(cls, v: Any) -> Any:
        return v or DEFAULT_EVENT_COLOR


class UpdateEventDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("eventId",)
    missing_message: ClassVar[str] = "Missing eventId for update."

    event_id: str = Field(..., alias="eventId")
    updates: Dict[str, Any] = Field(default_factory=dict)


class DeleteEventDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("eventId",)
    missing_message: ClassVar[str] = "Missing eventId for deletion."

    event_id: str = Field(..., alias="eventId")


# --- Tasks ---

class CreateTaskDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("text",)
    missing_message: ClassVar[str] = "Missing task description."

    text: str
    priority: Priority = Priority.MEDIUM
    due_date: Optional[str] = None

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, v: Any) -> Any:
        # Absent or unrecognised priorities fall back to medium
        if isinstance(v, str) and v.strip().lower() in {p.value for p in Priority}:
            return v.strip().lower()
        return Priority.MEDIUM

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date(cls, v: Any) -> Any:
        return v or None


class UpdateTaskDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("taskId",)
    missing_message: ClassVar[str] = "Missing taskId for update."

    task_id: str = Field(..., alias="taskId")
    updates: Dict[str, Any] = Field(default_factory=dict)


class DeleteTaskDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("taskId",)
    missing_message: ClassVar[str] = "Missing taskId for deletion."

    task_id: str = Field(..., alias="taskId")


# --- Notes ---

class CreateNoteDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("title", "content")
    missing_message: ClassVar[str] = "Missing title or content for note creation."

    title: str
    content: str


class UpdateNoteDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("noteId",)
    missing_message: ClassVar[str] = "Missing noteId for update."

    note_id: str = Field(..., alias="noteId")
    updates: Dict[str, Any] = Field(default_factory=dict)


class DeleteNoteDirective(DirectivePayload):
    required_fields: ClassVar[Tuple[str, ...]] = ("noteId",)
    missing_message: ClassVar[str] = "Missing noteId for deletion."

    note_id: str = Field(..., alias="noteId")


PAYLOAD_MODELS: Dict[DirectiveKind, type[DirectivePayload]] = {
    DirectiveKind.CREATE_EVENT: CreateEventDirective,
    DirectiveKind.UPDATE_EVENT: UpdateEventDirective,
    DirectiveKind.DELETE_EVENT: DeleteEventDirective,
    DirectiveKind.CREATE_TASK: CreateTaskDirective,
    DirectiveKind.UPDATE_TASK: UpdateTaskDirective,
    DirectiveKind.DELETE_TASK: DeleteTaskDirective,
    DirectiveKind.CREATE_NOTE: CreateNoteDirective,
    DirectiveKind.UPDATE_NOTE: UpdateNoteDirective,
    DirectiveKind.DELETE_NOTE: DeleteNoteDirective,
}


# --- Results ---

class ActionRecord(BaseModel):
    """Outcome of one directive line, in the order the lines appeared."""
    kind: DirectiveKind
    success: bool
    reference: Optional[str] = Field(default=None, description="Id of the created or affected entity.")
    entity: Optional[Dict[str, Any]] = Field(default=None, description="The created entity, for create directives.")
    updates: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class DirectiveResult(BaseModel):
    """Cleaned assistant response plus the log of actions taken."""
    response: str
    actions: List[ActionRecord] = Field(default_factory=list)
    error: Optional[str] = Field(default=None, description="Set only when the whole response could not be processed.")
