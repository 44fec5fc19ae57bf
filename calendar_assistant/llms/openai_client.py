"""Implementation of the LLMInterface using the OpenAI Chat Completions API.
"""

import logging
from typing import Any, List

from openai import APIConnectionError, APITimeoutError, InternalServerError, OpenAI, OpenAIError, RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from calendar_assistant.core.config import Settings
from calendar_assistant.database.models import ChatMessage
from calendar_assistant.interfaces.llm_interface import LLMInterface

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = "I apologize, but I couldn't process your request."

# Transient API failures are retried before the error reaches the caller
RETRY_MAX_ATTEMPTS = 3
RETRY_WAIT_MULTIPLIER = 0.5
RETRY_WAIT_MIN = 0.5
RETRY_WAIT_MAX = 4
TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError)


class OpenAIClient(LLMInterface):
    """Calls a hosted OpenAI chat model.

    Implements the LLMInterface protocol.
    """

    def __init__(self, settings: Settings):
        """Initializes the OpenAI client.

        Args:
            settings: The application settings containing OpenAI configuration.

        Raises:
            ValueError: If no OpenAI API key is configured.
        """
        if not settings.openai_api_key:
            raise ValueError("OpenAI API key is not configured (set OPENAI_API_KEY).")
        self.client = OpenAI(api_key=settings.openai_api_key, max_retries=0)
        self.default_model = settings.openai_model
        self.temperature = settings.llm_temperature
        self.max_tokens = settings.llm_max_tokens
        logger.info(f"OpenAI client initialized with model: {self.default_model}")

    def chat(self, messages: List[ChatMessage], model: str | None = None, **kwargs: Any) -> ChatMessage:
        """Generates a chat response.

        Args:
            messages: A list of ChatMessage Pydantic models.
            model: The model to use (defaults to settings.openai_model).
            **kwargs: ``temperature`` and ``max_tokens`` overrides.

        Returns:
            A ChatMessage representing the assistant's response.

        Raises:
            openai.OpenAIError: If the OpenAI API returns an error.
        """
        target_model = model or self.default_model
        message_dicts = [msg.model_dump() for msg in messages]
        try:
            logger.debug(f"Generating chat response with model '{target_model}'. History length: {len(message_dicts)}")
            completion = self._create_completion(
                model=target_model,
                messages=message_dicts,
                temperature=kwargs.get("temperature", self.temperature),
                max_tokens=kwargs.get("max_tokens", self.max_tokens),
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API error during chat: {e}", exc_info=True)
            raise

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            logger.warning("OpenAI returned an empty completion.")
            content = EMPTY_REPLY_FALLBACK
        logger.debug(f"Generated chat response (first 50 chars): '{content[:50]}...'")
        return ChatMessage(role="assistant", content=content.strip())

    @retry(
        stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=RETRY_WAIT_MULTIPLIER, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True
    )
    def _create_completion(self, **params: Any):
        """Calls the Chat Completions endpoint with retry logic."""
        return self.client.chat.completions.create(**params)
