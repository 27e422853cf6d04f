"""Abstract base class for chat completion services.

Defines the interface the host framework calls into.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from ..models import ChatHistory, ChatMessageContent


class ChatCompletionService(ABC):
    """Base interface for chat completion services."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier, e.g. 'yandex_ai'."""
        ...

    @property
    @abstractmethod
    def attributes(self) -> dict[str, Any]:
        """Read-only service attributes such as the model id."""
        ...

    @abstractmethod
    async def get_chat_message_contents(
        self,
        chat_history: ChatHistory,
        settings: Any = None,
    ) -> list[ChatMessageContent]:
        """Complete the chat history.

        Args:
            chat_history: Conversation to complete. Implementations may append
                the reply to it.
            settings: Execution settings, in any shape the service accepts.

        Returns:
            One message per completion alternative.

        Raises:
            LLMError: A subclass describing the failed stage.
        """
        ...

    @abstractmethod
    def supports(self, feature: str) -> bool:
        """Check if the service supports a capability.

        Args:
            feature: Feature name. Known values:
                - 'vision': Image inputs
                - 'system_message': Dedicated system role
                - 'response_format': Structured output hints
                - 'reasoning': Reasoning options
                - 'streaming': Streaming responses

        Returns:
            True if the feature is supported.
        """
        ...

    async def get_streaming_chat_message_contents(
        self,
        chat_history: ChatHistory,
        settings: Any = None,
    ) -> AsyncIterator[ChatMessageContent]:
        """Stream completion chunks.

        Raises:
            NotImplementedError: If streaming is not supported.
        """
        raise NotImplementedError("Streaming not supported by this provider")
        # Make this an async generator
        yield  # pragma: no cover
