"""Implementation of the LLMInterface using a local Ollama server.
"""

import logging
from typing import Any, List

import ollama

from calendar_assistant.core.config import Settings
from calendar_assistant.database.models import ChatMessage
from calendar_assistant.interfaces.llm_interface import LLMInterface

logger = logging.getLogger(__name__)


class OllamaClient(LLMInterface):
    """Connects to an Ollama instance for self-hosted assistant replies.

    Implements the LLMInterface protocol.
    """

    def __init__(self, settings: Settings):
        self.client = ollama.Client(host=settings.ollama_base_url)
        self.default_model = settings.default_model
        self.options = {"temperature": settings.llm_temperature, "num_predict": settings.llm_max_tokens}
        logger.info(f"Ollama client initialized for host: {settings.ollama_base_url}")

    def chat(self, messages: List[ChatMessage], model: str | None = None, **kwargs: Any) -> ChatMessage:
        """Generates a chat response using the Ollama /api/chat endpoint.

        Raises:
            ollama.ResponseError: If the Ollama API returns an error.
        """
        target_model = model or self.default_model
        options = {**self.options, **kwargs.get("options", {})}
        try:
            response = self.client.chat(
                model=target_model,
                messages=[msg.model_dump() for msg in messages],
                options=options,
                stream=False,
            )
        except ollama.ResponseError as e:
            logger.error(f"Ollama API error during chat: {e.status_code} - {e.error}")
            raise
        content = (response.get('message') or {}).get('content', '').strip()
        logger.debug(f"Generated chat response with '{target_model}' (first 50 chars): '{content[:50]}...'")
        return ChatMessage(role="assistant", content=content)
