"""Interface definition for the data-access collaborator used by the directive engine.
"""

from typing import Any, Dict, Protocol, runtime_checkable

from calendar_assistant.database.models import CalendarEvent, Note, Task


@runtime_checkable
class DataStoreInterface(Protocol):
    """The nine mutations the directive engine may request.

    Every operation is asynchronous and may raise; the exception message is
    shown to the user verbatim. Create operations receive the raw payload
    decoded from a directive and return the stored entity. Update and delete
    operations return nothing.
    """

    async def create_event(self, payload: Dict[str, Any]) -> CalendarEvent:
        ...

    async def update_event(self, event_id: str, updates: Dict[str, Any]) -> None:
        ...

    async def delete_event(self, event_id: str) -> None:
        ...

    async def create_task(self, payload: Dict[str, Any]) -> Task:
        ...

    async def update_task(self, task_id: str, updates: Dict[str, Any]) -> None:
        ...

    async def delete_task(self, task_id: str) -> None:
        ...

    async def create_note(self, payload: Dict[str, Any]) -> Note:
        ...

    async def update_note(self, note_id: str, updates: Dict[str, Any]) -> None:
        ...

    async def delete_note(self, note_id: str) -> None:
        ...
