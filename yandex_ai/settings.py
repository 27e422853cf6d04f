"""Yandex AI execution settings.

Strongly-typed generation settings for the completion API and the
normalizer that turns arbitrary settings into them.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import SettingsDeserializationError
from .models import PromptExecutionSettings

DEFAULT_API_VERSION = "v1"
DEFAULT_TEMPERATURE = 0.7


class ReasoningMode(str, Enum):
    """Reasoning modes accepted in completion options."""

    UNSPECIFIED = "REASONING_MODE_UNSPECIFIED"
    DISABLED = "DISABLED"
    ENABLED_HIDDEN = "ENABLED_HIDDEN"


class YandexAIPromptExecutionSettings(PromptExecutionSettings):
    """Execution settings for the Yandex AI completion API.

    Numeric fields accept numeric strings, since some callers round-trip
    settings through encodings that stringify numbers.
    """

    model_config = ConfigDict(extra="ignore")

    api_version: str = DEFAULT_API_VERSION
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int | None = None
    response_format: Any = None
    stop: list[str] | tuple[str, ...] | None = None
    reasoning_mode: ReasoningMode | None = None

    def freeze(self) -> None:
        if self.is_frozen:
            return
        if self.stop is not None:
            self.stop = tuple(self.stop)
        super().freeze()

    def clone(self) -> "YandexAIPromptExecutionSettings":
        """Return an unfrozen copy.

        The stop list is copied by value; ``response_format`` is shared.
        """
        return YandexAIPromptExecutionSettings(
            service_id=self.service_id,
            model_id=self.model_id,
            extension_data=dict(self.extension_data) if self.extension_data is not None else None,
            api_version=self.api_version,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format=self.response_format,
            stop=list(self.stop) if self.stop is not None else None,
            reasoning_mode=self.reasoning_mode,
        )

    @classmethod
    def from_execution_settings(cls, settings: Any = None) -> "YandexAIPromptExecutionSettings":
        """Normalize arbitrary execution settings into Yandex AI settings.

        Args:
            settings: None, an instance of this class, any other pydantic
                settings model, or a plain mapping.

        Returns:
            Default settings for None, the same instance for this class,
            otherwise a re-decoded copy. Extension data is flattened into
            the top level before decoding.

        Raises:
            SettingsDeserializationError: If the settings are not an object
                or do not decode into this shape.
        """
        if settings is None:
            return cls()

        if isinstance(settings, cls):
            return settings

        payload = _to_payload(settings)
        if payload is None:
            raise SettingsDeserializationError(
                f"Cannot convert {type(settings).__name__} into Yandex AI execution settings"
            )

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise SettingsDeserializationError(
                f"Invalid Yandex AI execution settings: {e}"
            ) from e


def _to_payload(settings: Any) -> dict[str, Any] | None:
    """Flatten settings into a plain dict, or None if they are not an object."""
    if isinstance(settings, BaseModel):
        payload = settings.model_dump(exclude={"extension_data"})
        extension_data = getattr(settings, "extension_data", None)
        if extension_data:
            payload.update(extension_data)
        # Extra fields of permissive models are kept by model_dump already.
        return payload

    if isinstance(settings, Mapping):
        payload = dict(settings)
        extension_data = payload.pop("extension_data", None)
        if isinstance(extension_data, Mapping):
            payload.update(extension_data)
        return payload

    return None
