"""Chat completion service implementations.

This package contains the service interface and the Yandex AI implementation.
"""

from .base import ChatCompletionService
from .yandex import YandexAIChatCompletionService

__all__ = [
    "ChatCompletionService",
    "YandexAIChatCompletionService",
]
