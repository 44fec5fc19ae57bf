"""API endpoints for the task list.
"""

import logging
import sqlite3
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from calendar_assistant.core.dependencies import get_db
from calendar_assistant.database import crud
from calendar_assistant.database.models import Task, TaskCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.get("", response_model=List[Task])
def list_tasks(db: sqlite3.Connection = Depends(get_db)):
    """Lists tasks, newest first."""
    return crud.list_tasks(db)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: sqlite3.Connection = Depends(get_db)):
    return crud.create_task(db, task)


@router.patch("/{task_id}", response_model=Task)
def update_task(task_id: str, updates: Dict[str, Any] = Body(...), db: sqlite3.Connection = Depends(get_db)):
    """Applies a partial update, e.g. ``{"completed": true}`` or a new priority."""
    try:
        return crud.update_task(db, task_id, updates)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, db: sqlite3.Connection = Depends(get_db)):
    try:
        crud.delete_task(db, task_id)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
