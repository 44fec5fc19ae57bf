"""Pydantic models for API request and response bodies.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from calendar_assistant.features.directives_models import ActionRecord


class ChatRequest(BaseModel):
    """Request model for sending a message to the assistant."""
    message: str = Field(..., min_length=1, description="The user's message.")
    session_id: Optional[str] = Field(None, description="Existing chat session; omit to start a new one.")


class ChatResponse(BaseModel):
    """The assistant's cleaned reply and the actions it performed."""
    session_id: str
    response: str = Field(..., description="Assistant reply with directive lines replaced by outcome summaries.")
    actions: List[ActionRecord] = Field(default_factory=list)


class DateReferenceResponse(BaseModel):
    """Relative dates resolved against the server's current date."""
    today: str
    tomorrow: str
    day_after_tomorrow: str
    next_monday: str
    next_friday: str
    next_week: str
