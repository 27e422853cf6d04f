"""Yandex AI wire models.

Request and response shapes of the Foundation Models completion API.
Field names are snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from .models import AuthorRole
from .settings import DEFAULT_TEMPERATURE, ReasoningMode


class WireModel(BaseModel):
    """Base for camelCase wire models."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AlternativeStatus(str, Enum):
    """Completion reason reported for each alternative.

    Carried through as opaque metadata; the adapter never branches on it.
    """

    UNSPECIFIED = "ALTERNATIVE_STATUS_UNSPECIFIED"
    PARTIAL = "ALTERNATIVE_STATUS_PARTIAL"
    TRUNCATED_FINAL = "ALTERNATIVE_STATUS_TRUNCATED_FINAL"
    FINAL = "ALTERNATIVE_STATUS_FINAL"
    CONTENT_FILTER = "ALTERNATIVE_STATUS_CONTENT_FILTER"
    TOOL_CALLS = "ALTERNATIVE_STATUS_TOOL_CALLS"


# Content chunks

class TextChunk(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageUrlChunk(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: str


ContentChunk = Annotated[Union[TextChunk, ImageUrlChunk], Field(discriminator="type")]


class YandexAIChatMessage(BaseModel):
    """A message as sent to and returned by the API.

    ``text`` is a bare string for single-text messages, otherwise an
    ordered list of content chunks. ``role`` may be None (unspecified).
    Unset fields are left out of the serialized form.
    """

    role: str | None = None
    text: str | list[ContentChunk] | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _validate_role(cls, value: Any) -> str | None:
        role = AuthorRole.parse(value)
        return role.value if role is not None else None

    @model_serializer(mode="wrap")
    def _omit_unset(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


# Request

class ReasoningOptions(WireModel):
    mode: ReasoningMode


class ChatCompletionRequestCompletionOptions(WireModel):
    """Generation options sent with each request."""

    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int | None = None
    response_format: Any = None
    stream: bool = False
    reasoning_options: ReasoningOptions | None = None

    @model_serializer(mode="wrap")
    def _omit_reasoning(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.reasoning_options is None:
            data.pop("reasoningOptions", None)
            data.pop("reasoning_options", None)
        return data


class ChatCompletionRequest(WireModel):
    """Full completion request body."""

    model_uri: str
    completion_options: ChatCompletionRequestCompletionOptions = Field(
        default_factory=ChatCompletionRequestCompletionOptions
    )
    messages: list[YandexAIChatMessage] = Field(default_factory=list)
    stop: list[str] | None = None

    @model_serializer(mode="wrap")
    def _omit_stop(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.stop is None:
            data.pop("stop", None)
        return data

    def add_message(self, message: YandexAIChatMessage) -> None:
        self.messages.append(message)

    def to_json_bytes(self) -> bytes:
        """Serialize to the UTF-8 JSON body sent over the wire."""
        return self.model_dump_json(by_alias=True).encode("utf-8")


# Response

class YandexAIUsage(WireModel):
    """Token usage. Counts arrive as numeric strings and parse to int."""

    input_text_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ChatCompletionAlternative(WireModel):
    message: YandexAIChatMessage | None = None
    status: str | None = None


class ChatCompletionResponses(WireModel):
    model_version: str | None = None
    usage: YandexAIUsage | None = None
    alternatives: list[ChatCompletionAlternative] | None = None


class ChatCompletionResponseResult(WireModel):
    """Top-level response envelope."""

    result: ChatCompletionResponses | None = None
