"""API endpoints for talking to the assistant and browsing chat sessions.
"""

import logging
import sqlite3
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from calendar_assistant.api.models import ChatRequest, ChatResponse, DateReferenceResponse
from calendar_assistant.core.dependencies import get_assistant_service, get_db
from calendar_assistant.database import crud
from calendar_assistant.database.models import ChatMessage, ChatSession
from calendar_assistant.features.assistant_service import AssistantService
from calendar_assistant.features.date_resolver import build_date_reference

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/chat",
    tags=["Chat"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    assistant: AssistantService = Depends(get_assistant_service),
):
    """Sends a message to the assistant and applies any directives in its reply."""
    logger.info(f"Received chat message for session {request.session_id or '<new>'}: '{request.message[:50]}...'")
    try:
        turn = await assistant.handle_message(request.message, session_id=request.session_id)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing chat message: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to get AI response")
    return ChatResponse(session_id=turn.session_id, response=turn.response, actions=turn.actions)


@router.get("/dates", response_model=DateReferenceResponse)
def get_reference_dates():
    """Returns the relative dates the assistant prompt is built with."""
    return DateReferenceResponse(**build_date_reference(datetime.now()))


@router.get("/sessions", response_model=List[ChatSession])
def list_sessions(db: sqlite3.Connection = Depends(get_db)):
    """Lists chat sessions, most recent first."""
    return crud.list_chat_sessions(db)


@router.get("/sessions/{session_id}/messages", response_model=List[ChatMessage])
def get_session_messages(session_id: str, db: sqlite3.Connection = Depends(get_db)):
    """Returns the messages of one chat session in order."""
    if crud.get_chat_session(db, session_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Chat session '{session_id}' not found")
    return crud.get_chat_history(db, session_id, limit=None)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, db: sqlite3.Connection = Depends(get_db)):
    """Deletes a chat session and its messages."""
    try:
        crud.delete_chat_session(db, session_id)
    except crud.RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
