"""Yandex AI chat completion adapter.

This package runs vendor-neutral chat histories against the Yandex AI
Foundation Models completion API and normalizes the responses back into
vendor-neutral chat messages.
"""

from .client import YandexAIClient
from .errors import (
    EmptyResultError,
    FrozenSettingsError,
    InvalidConversationError,
    InvalidRoleError,
    LLMError,
    MissingAlternativesError,
    RequestError,
    SettingsDeserializationError,
    UnexpectedResponseError,
    UnsupportedContentError,
)
from .models import (
    AuthorRole,
    ChatHistory,
    ChatMessageContent,
    ImageContent,
    KernelContent,
    PromptExecutionSettings,
    TextContent,
)
from .providers import ChatCompletionService, YandexAIChatCompletionService
from .settings import ReasoningMode, YandexAIPromptExecutionSettings
from .version import __version__

__all__ = [
    "YandexAIChatCompletionService",
    "YandexAIClient",
    "ChatCompletionService",
    "YandexAIPromptExecutionSettings",
    "ReasoningMode",
    "PromptExecutionSettings",
    "ChatHistory",
    "ChatMessageContent",
    "AuthorRole",
    "KernelContent",
    "TextContent",
    "ImageContent",
    "LLMError",
    "InvalidConversationError",
    "InvalidRoleError",
    "UnsupportedContentError",
    "FrozenSettingsError",
    "SettingsDeserializationError",
    "RequestError",
    "UnexpectedResponseError",
    "EmptyResultError",
    "MissingAlternativesError",
    "__version__",
]
