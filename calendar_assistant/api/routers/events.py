"""API endpoints for calendar events.
"""

import logging
import sqlite3
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from calendar_assistant.core.dependencies import get_db
from calendar_assistant.database import crud
from calendar_assistant.database.models import CalendarEvent, CalendarEventCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/events", tags=["Events"])


@router.get("", response_model=List[CalendarEvent])
def list_events(db: sqlite3.Connection = Depends(get_db)):
    """Lists events ordered by date and start time."""
    return crud.list_events(db)


@router.post("", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
def create_event(event: CalendarEventCreate, db: sqlite3.Connection = Depends(get_db)):
    return crud.create_event(db, event)


@router.patch("/{event_id}", response_model=CalendarEvent)
def update_event(event_id: str, updates: Dict[str, Any] = Body(...), db: sqlite3.Connection = Depends(get_db)):
    """Applies a partial update; the result must still be a valid event."""
    try:
        return crud.update_event(db, event_id, updates)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, db: sqlite3.Connection = Depends(get_db)):
    try:
        crud.delete_event(db, event_id)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
