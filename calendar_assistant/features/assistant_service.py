"""Service that runs one turn of the assistant conversation.

user message -> system prompt (with resolved dates and current data) -> model
-> directive engine -> stored, cleaned reply.
"""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from calendar_assistant.core.config import Settings, get_settings
from calendar_assistant.database import crud
from calendar_assistant.database.models import ChatMessage
from calendar_assistant.database.store import SQLiteDataStore
from calendar_assistant.features.directives_models import ActionRecord
from calendar_assistant.features.directives_service import DirectiveEngine
from calendar_assistant.features.prompts import build_system_prompt
from calendar_assistant.interfaces.data_store_interface import DataStoreInterface
from calendar_assistant.interfaces.llm_interface import LLMInterface

logger = logging.getLogger(__name__)

MODEL_UNAVAILABLE_MESSAGE = "I'm having trouble connecting right now. Please try again in a moment."
SESSION_TITLE_LENGTH = 50


class ChatTurn(BaseModel):
    """Result of one user message."""
    session_id: str
    response: str
    actions: List[ActionRecord] = Field(default_factory=list)


class AssistantService:
    """Orchestrates a chat turn: prompt -> generate -> execute directives -> store.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        llm: LLMInterface,
        store: Optional[DataStoreInterface] = None,
        settings: Optional[Settings] = None,
    ):
        """Initializes the AssistantService.

        Args:
            conn: Connection used for chat history and the prompt's data lists.
            llm: An instance conforming to LLMInterface.
            store: Data store for directive mutations (defaults to SQLite on ``conn``).
            settings: Application settings (defaults to ``get_settings()``).
        """
        self.conn = conn
        self.llm = llm
        self.settings = settings or get_settings()
        self.engine = DirectiveEngine(store or SQLiteDataStore(conn))

    async def handle_message(
        self,
        message: str,
        session_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ChatTurn:
        """Handles one user message.

        Args:
            message: The user's message.
            session_id: Existing chat session, or None to start a new one.
            now: Reference moment for relative dates (defaults to local now).

        Returns:
            The session id, the cleaned assistant reply and the action log.

        Raises:
            crud.RecordNotFoundError: If ``session_id`` does not exist.
        """
        now = now or datetime.now()
        session_id = await self._ensure_session(message, session_id)

        history = await run_in_threadpool(
            crud.get_chat_history, self.conn, session_id, self.settings.chat_history_limit
        )
        await run_in_threadpool(crud.add_chat_message, self.conn, session_id, ChatMessage(role="user", content=message))

        reply = await self._generate_reply(message, history, now)
        if reply is None:
            response, actions = MODEL_UNAVAILABLE_MESSAGE, []
        else:
            result = await self.engine.execute(reply)
            response, actions = result.response, result.actions

        await run_in_threadpool(
            crud.add_chat_message, self.conn, session_id, ChatMessage(role="assistant", content=response)
        )
        await run_in_threadpool(crud.touch_chat_session, self.conn, session_id)
        logger.info(f"Completed chat turn for session {session_id} with {len(actions)} action(s).")
        return ChatTurn(session_id=session_id, response=response, actions=actions)

    async def _ensure_session(self, message: str, session_id: Optional[str]) -> str:
        if session_id is None:
            title = message.strip()[:SESSION_TITLE_LENGTH] or "New Chat"
            session = await run_in_threadpool(crud.create_chat_session, self.conn, title)
            return session.id
        session = await run_in_threadpool(crud.get_chat_session, self.conn, session_id)
        if session is None:
            raise crud.RecordNotFoundError(f"Chat session '{session_id}' not found")
        return session.id

    async def _generate_reply(self, message: str, history: List[ChatMessage], now: datetime) -> Optional[str]:
        """Asks the model for a reply; None if the model call failed."""
        events = await run_in_threadpool(crud.list_events, self.conn)
        tasks = await run_in_threadpool(crud.list_tasks, self.conn)
        notes = await run_in_threadpool(crud.list_notes, self.conn)
        system_prompt = build_system_prompt(now, events=events, tasks=tasks, notes=notes)

        messages = [
            ChatMessage(role="system", content=system_prompt),
            *history,
            ChatMessage(role="user", content=message),
        ]
        try:
            reply = await run_in_threadpool(self.llm.chat, messages)
        except Exception as e:
            logger.error(f"Error getting assistant reply: {e}", exc_info=True)
            return None
        logger.debug(f"Raw assistant reply:\n{reply.content}")
        return reply.content
