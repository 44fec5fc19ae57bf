"""Service layer for assistant directives.

Scans assistant output for directive lines (``CREATE_EVENT: {...}`` and
friends), validates and executes each one against a data store, and rewrites
the response so every directive line becomes a one-line outcome summary.

Every failure is local to its line: a bad payload, a missing field or a
failing store call is reported in place and processing moves on.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from calendar_assistant.features.directives_models import (
    PAYLOAD_MODELS,
    ActionRecord,
    CreateEventDirective,
    CreateNoteDirective,
    CreateTaskDirective,
    DeleteEventDirective,
    DeleteNoteDirective,
    DeleteTaskDirective,
    DirectiveKind,
    DirectivePayload,
    DirectiveResult,
    UpdateEventDirective,
    UpdateNoteDirective,
    UpdateTaskDirective,
)
from calendar_assistant.interfaces.data_store_interface import DataStoreInterface

logger = logging.getLogger(__name__)

PROCESSING_ERROR_MESSAGE = "I encountered an error while processing your request. Please try again."
SUCCESS_MARK = "✅"
FAILURE_MARK = "❌"


class DirectiveError(Exception):
    """Base class for errors local to a single directive line."""


class DirectiveParseError(DirectiveError):
    """The text after the directive prefix is not a JSON object."""


class DirectiveValidationError(DirectiveError):
    """The payload parsed but lacks a required field or has a bad value."""


def match_directive(line: str) -> Optional[Tuple[DirectiveKind, str]]:
    """Checks whether a line is a directive.

    Args:
        line: One line of assistant output.

    Returns:
        ``(kind, raw_payload)`` if the trimmed line starts with a directive
        prefix, otherwise None.
    """
    stripped = line.strip()
    for kind in DirectiveKind:
        if stripped.startswith(kind.prefix):
            return kind, stripped[len(kind.prefix):].strip()
    return None


def contains_directive(text: str) -> bool:
    """True if any line of ``text`` is a directive line."""
    return any(match_directive(line) for line in text.split("\n"))


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def decode_directive(kind: DirectiveKind, raw_payload: str) -> DirectivePayload:
    """Decodes the payload of a directive line into its typed model.

    Raises:
        DirectiveParseError: If the payload is not a JSON object.
        DirectiveValidationError: If a required field is missing or blank, or
            a field has a value of the wrong type.
    """
    try:
        data = json.loads(raw_payload)
    except json.JSONDecodeError as e:
        raise DirectiveParseError(f"Invalid directive payload ({e.msg})") from e
    if not isinstance(data, dict):
        raise DirectiveParseError("Invalid directive payload (expected a JSON object)")

    model = PAYLOAD_MODELS[kind]
    if any(_is_blank(data.get(field)) for field in model.required_fields):
        raise DirectiveValidationError(model.missing_message)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise DirectiveValidationError(
            f"Invalid {kind.entity} {kind.verb} payload: {field} {first.get('msg', 'invalid value')}".rstrip()
        ) from e


def _error_text(error: BaseException) -> str:
    return str(error) or "Unknown error"


def _one_line(value: Any) -> str:
    """Collapses all whitespace runs, newlines included, into single spaces."""
    return " ".join(str(value).split())


class DirectiveEngine:
    """Executes the directives found in an assistant response.

    Directives run one at a time in the order they appear. The engine keeps no
    state between calls and never reads data back from the store.
    """

    def __init__(self, store: DataStoreInterface):
        """Initializes the engine.

        Args:
            store: The data-access collaborator that performs the mutations.
        """
        self.store = store
        self._handlers = {
            DirectiveKind.CREATE_EVENT: self._create_event,
            DirectiveKind.UPDATE_EVENT: self._update_event,
            DirectiveKind.DELETE_EVENT: self._delete_event,
            DirectiveKind.CREATE_TASK: self._create_task,
            DirectiveKind.UPDATE_TASK: self._update_task,
            DirectiveKind.DELETE_TASK: self._delete_task,
            DirectiveKind.CREATE_NOTE: self._create_note,
            DirectiveKind.UPDATE_NOTE: self._update_note,
            DirectiveKind.DELETE_NOTE: self._delete_note,
        }

    async def execute(self, text: str) -> DirectiveResult:
        """Processes a full assistant response.

        Args:
            text: The model's reply.

        Returns:
            The cleaned response and the ordered action log. If the text holds
            no directive it is returned unchanged with an empty log. Only a
            failure of the scan itself (e.g. ``text`` is not a string) yields
            the generic apology with ``error`` set.
        """
        try:
            if not contains_directive(text):
                return DirectiveResult(response=text)

            output_lines: List[str] = []
            actions: List[ActionRecord] = []
            for line in text.split("\n"):
                match = match_directive(line)
                if match is None:
                    output_lines.append(line.strip())
                    continue
                summary, record = await self._process(*match)
                output_lines.append(summary)
                actions.append(record)

            logger.info(
                f"Processed {len(actions)} directive(s): "
                f"{sum(1 for a in actions if a.success)} succeeded, {sum(1 for a in actions if not a.success)} failed."
            )
            return DirectiveResult(response="\n".join(output_lines).strip(), actions=actions)
        except Exception as e:
            logger.error(f"Error processing assistant response: {e}", exc_info=True)
            return DirectiveResult(response=PROCESSING_ERROR_MESSAGE, error=_error_text(e))

    async def _process(self, kind: DirectiveKind, raw_payload: str) -> Tuple[str, ActionRecord]:
        logger.debug(f"Found {kind.prefix} directive with payload: {raw_payload}")
        try:
            directive = decode_directive(kind, raw_payload)
        except DirectiveParseError as e:
            logger.warning(f"Could not parse {kind.prefix} payload '{raw_payload}': {e}")
            return self._failure(kind, f"Failed to {kind.verb} {kind.entity}: {e}")
        except DirectiveValidationError as e:
            logger.warning(f"Rejected {kind.prefix} directive: {e}")
            return self._failure(kind, str(e))

        try:
            summary, record = await self._handlers[kind](directive)
        except Exception as e:
            logger.warning(f"Store call for {kind.prefix} directive failed: {e}", exc_info=True)
            return self._failure(kind, f"Failed to {kind.verb} {kind.entity}: {_error_text(e)}")

        logger.info(f"Executed {kind.prefix} directive (reference={record.reference})")
        return f"{SUCCESS_MARK} {summary}", record

    @staticmethod
    def _failure(kind: DirectiveKind, reason: str) -> Tuple[str, ActionRecord]:
        reason = _one_line(reason)
        return f"{FAILURE_MARK} {reason}", ActionRecord(kind=kind, success=False, error=reason)

    # --- Events ---

    async def _create_event(self, directive: CreateEventDirective) -> Tuple[str, ActionRecord]:
        event = await self.store.create_event(directive.model_dump())
        summary = (
            f'Created event: "{_one_line(directive.title)}" on {_one_line(directive.date)} '
            f"from {_one_line(directive.start_time)} to {_one_line(directive.end_time)}"
        )
        return summary, ActionRecord(
            kind=DirectiveKind.CREATE_EVENT,
            success=True,
            reference=_reference(event),
            entity=_entity_dict(event),
        )

    async def _update_event(self, directive: UpdateEventDirective) -> Tuple[str, ActionRecord]:
        await self.store.update_event(directive.event_id, directive.updates)
        return "Updated event", ActionRecord(
            kind=DirectiveKind.UPDATE_EVENT, success=True, reference=directive.event_id, updates=directive.updates
        )

    async def _delete_event(self, directive: DeleteEventDirective) -> Tuple[str, ActionRecord]:
        await self.store.delete_event(directive.event_id)
        return "Deleted event", ActionRecord(kind=DirectiveKind.DELETE_EVENT, success=True, reference=directive.event_id)

    # --- Tasks ---

    async def _create_task(self, directive: CreateTaskDirective) -> Tuple[str, ActionRecord]:
        payload = directive.model_dump(mode="json", exclude_none=True)
        task = await self.store.create_task(payload)
        summary = f'Created task: "{_one_line(directive.text)}" with {directive.priority.value} priority'
        return summary, ActionRecord(
            kind=DirectiveKind.CREATE_TASK,
            success=True,
            reference=_reference(task),
            entity=_entity_dict(task),
        )

    async def _update_task(self, directive: UpdateTaskDirective) -> Tuple[str, ActionRecord]:
        await self.store.update_task(directive.task_id, directive.updates)
        return "Updated task", ActionRecord(
            kind=DirectiveKind.UPDATE_TASK, success=True, reference=directive.task_id, updates=directive.updates
        )

    async def _delete_task(self, directive: DeleteTaskDirective) -> Tuple[str, ActionRecord]:
        await self.store.delete_task(directive.task_id)
        return "Deleted task", ActionRecord(kind=DirectiveKind.DELETE_TASK, success=True, reference=directive.task_id)

    # --- Notes ---

    async def _create_note(self, directive: CreateNoteDirective) -> Tuple[str, ActionRecord]:
        note = await self.store.create_note(directive.model_dump())
        return f'Created note: "{_one_line(directive.title)}"', ActionRecord(
            kind=DirectiveKind.CREATE_NOTE,
            success=True,
            reference=_reference(note),
            entity=_entity_dict(note),
        )

    async def _update_note(self, directive: UpdateNoteDirective) -> Tuple[str, ActionRecord]:
        await self.store.update_note(directive.note_id, directive.updates)
        return "Updated note", ActionRecord(
            kind=DirectiveKind.UPDATE_NOTE, success=True, reference=directive.note_id, updates=directive.updates
        )

    async def _delete_note(self, directive: DeleteNoteDirective) -> Tuple[str, ActionRecord]:
        await self.store.delete_note(directive.note_id)
        return "Deleted note", ActionRecord(kind=DirectiveKind.DELETE_NOTE, success=True, reference=directive.note_id)


def _reference(entity: Any) -> Optional[str]:
    """Extracts the id of an entity returned by a create call."""
    if isinstance(entity, dict):
        value = entity.get("id")
    else:
        value = getattr(entity, "id", None)
    return None if value is None else str(value)


def _entity_dict(entity: Any) -> Optional[Dict[str, Any]]:
    """Serialises whatever the store returned for a create call."""
    if isinstance(entity, BaseModel):
        return entity.model_dump(mode="json")
    if isinstance(entity, dict):
        return dict(entity)
    return None
