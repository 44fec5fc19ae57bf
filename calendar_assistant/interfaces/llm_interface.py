"""Protocol for the chat model that writes the assistant's replies.
"""

from typing import Protocol, List, Any, runtime_checkable

from calendar_assistant.database.models import ChatMessage

@runtime_checkable
class LLMInterface(Protocol):
    """Anything that can turn a message list into one assistant message.

    OpenAIClient and OllamaClient both satisfy it; tests use a MagicMock.
    """

    def chat(self, messages: List[ChatMessage], model: str | None = None, **kwargs: Any) -> ChatMessage:
        """Produces the next assistant message.

        Args:
            messages: System prompt first, then prior turns, then the new user message.
            model: Overrides the client's configured model.
            **kwargs: Backend-specific sampling options.

        Returns:
            The reply, with role "assistant".
        """
        ...
