"""Pytest fixtures for testing."""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from yandex_ai.models import ChatHistory

Handler = Callable[[httpx.Request], Any]


def _completion_body(
    *texts: str,
    status: str = "ALTERNATIVE_STATUS_FINAL",
    usage: dict[str, Any] | None = None,
    model_version: str = "23.10.2024",
) -> dict[str, Any]:
    """Build a completion response body with one alternative per text."""
    if usage is None:
        usage = {"inputTextTokens": "12", "completionTokens": "34", "totalTokens": "46"}
    return {
        "result": {
            "modelVersion": model_version,
            "usage": usage,
            "alternatives": [
                {"message": {"role": "assistant", "text": text}, "status": status}
                for text in texts
            ],
        }
    }


@pytest.fixture
def completion_body() -> Callable[..., dict[str, Any]]:
    """Builder for completion response bodies."""
    return _completion_body


@pytest.fixture
def chat_history() -> ChatHistory:
    """A one-message conversation: user says "Hi"."""
    history = ChatHistory()
    history.add_user_message("Hi")
    return history


@pytest_asyncio.fixture
async def make_http_client() -> AsyncGenerator[Callable[..., httpx.AsyncClient], None]:
    """Factory for httpx clients backed by a MockTransport handler."""
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, **kwargs: Any) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
