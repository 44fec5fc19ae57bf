"""API endpoints for notes.
"""

import logging
import sqlite3
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from calendar_assistant.core.dependencies import get_db
from calendar_assistant.database import crud
from calendar_assistant.database.models import Note, NoteCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notes", tags=["Notes"])


@router.get("", response_model=List[Note])
def list_notes(db: sqlite3.Connection = Depends(get_db)):
    return crud.list_notes(db)


@router.post("", response_model=Note, status_code=status.HTTP_201_CREATED)
def create_note(note: NoteCreate, db: sqlite3.Connection = Depends(get_db)):
    return crud.create_note(db, note)


@router.patch("/{note_id}", response_model=Note)
def update_note(note_id: str, updates: Dict[str, Any] = Body(...), db: sqlite3.Connection = Depends(get_db)):
    try:
        return crud.update_note(db, note_id, updates)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(note_id: str, db: sqlite3.Connection = Depends(get_db)):
    try:
        crud.delete_note(db, note_id)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
