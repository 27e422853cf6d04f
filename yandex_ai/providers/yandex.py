"""Yandex AI chat completion service.

Public entry point for running chat completions against Yandex AI
Foundation Models. Wraps ``YandexAIClient`` and manages the default
httpx transport.
"""

import os
from typing import Any

import httpx
from dotenv import load_dotenv

from ..client import PROVIDER_NAME, YandexAIClient
from ..models import ChatHistory, ChatMessageContent
from .base import ChatCompletionService


class YandexAIChatCompletionService(ChatCompletionService):
    """Yandex AI completion service.

    Supports:
    - Text and image-URL message content
    - Structured output hints via response_format
    - Reasoning options

    Streaming is not implemented.

    Configuration (env vars, used by ``from_env``):
    - YANDEX_AI_API_KEY: API key (required)
    - YANDEX_AI_FOLDER_ID: Cloud folder id (required)
    - YANDEX_AI_MODEL: Model name (default: "yandexgpt/latest")
    - YANDEX_AI_ENDPOINT: Base URL override (optional)
    - YANDEX_AI_TIMEOUT_SECONDS: Transport timeout (default: 60)
    """

    SUPPORTED_FEATURES = {
        "vision",
        "system_message",
        "response_format",
        "reasoning",
    }

    DEFAULT_MODEL = "yandexgpt/latest"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        model_id: str,
        api_key: str,
        folder_id: str,
        endpoint: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the service.

        Args:
            model_id: Model name, e.g. "yandexgpt/latest".
            api_key: Yandex AI API key.
            folder_id: Cloud folder that owns the model.
            endpoint: Base URL override.
            http_client: Shared transport. When omitted, the service creates
                its own and closes it in ``aclose``.
            timeout: Timeout for the transport the service creates itself.

        Raises:
            ValueError: If model_id or api_key is blank.
        """
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._client = YandexAIClient(
            model_id=model_id,
            http_client=self._http_client,
            api_key=api_key,
            folder_id=folder_id,
            endpoint=endpoint,
        )
        self._attributes: dict[str, Any] = {"model_id": model_id}

    @classmethod
    def from_env(cls, http_client: httpx.AsyncClient | None = None) -> "YandexAIChatCompletionService":
        """Create a service from environment variables (and a .env file).

        Raises:
            ValueError: If a required variable is missing.
        """
        load_dotenv()

        api_key = os.environ.get("YANDEX_AI_API_KEY")
        if not api_key:
            raise ValueError(
                "Yandex AI API key not configured. Set YANDEX_AI_API_KEY environment variable."
            )

        folder_id = os.environ.get("YANDEX_AI_FOLDER_ID")
        if not folder_id:
            raise ValueError(
                "Yandex AI folder not configured. Set YANDEX_AI_FOLDER_ID environment variable."
            )

        return cls(
            model_id=os.environ.get("YANDEX_AI_MODEL", cls.DEFAULT_MODEL),
            api_key=api_key,
            folder_id=folder_id,
            endpoint=os.environ.get("YANDEX_AI_ENDPOINT") or None,
            http_client=http_client,
            timeout=float(os.environ.get("YANDEX_AI_TIMEOUT_SECONDS", cls.DEFAULT_TIMEOUT)),
        )

    @property
    def name(self) -> str:
        """Provider identifier."""
        return PROVIDER_NAME

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    @property
    def client(self) -> YandexAIClient:
        return self._client

    def supports(self, feature: str) -> bool:
        """Check if feature is supported."""
        return feature in self.SUPPORTED_FEATURES

    async def get_chat_message_contents(
        self,
        chat_history: ChatHistory,
        settings: Any = None,
    ) -> list[ChatMessageContent]:
        """Send the chat history to Yandex AI.

        When exactly one alternative comes back it is also appended to
        ``chat_history``. Do not mutate the same history from elsewhere
        while the call is running.
        """
        return await self._client.get_chat_message_contents(chat_history, settings)

    async def aclose(self) -> None:
        """Close the transport if this service created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "YandexAIChatCompletionService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
