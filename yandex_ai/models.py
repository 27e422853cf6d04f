"""Generic chat data models.

Vendor-neutral chat history, message content and execution settings.
These are the host-side types the adapter reads from and appends to;
nothing in here knows about the Yandex wire format.
"""

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from .errors import FrozenSettingsError, InvalidRoleError, SettingsDeserializationError


class AuthorRole(str, Enum):
    """Role of a message author."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"

    @classmethod
    def parse(cls, value: "AuthorRole | str | None") -> "AuthorRole | None":
        """Parse a role string, case-sensitively.

        ``None`` means "unspecified" and is returned as is.

        Raises:
            InvalidRoleError: If the value is not one of the known roles.
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str) and value in cls._value2member_map_:
            return cls(value)
        raise InvalidRoleError(
            f"Role must be one of: system, user, assistant or tool. {value!r} is an invalid role.",
            role=value,
        )


class KernelContent(BaseModel):
    """Base class for one item of message content."""

    inner_content: Any = None
    metadata: dict[str, Any] | None = None


class TextContent(KernelContent):
    """Plain text content."""

    text: str


class ImageContent(KernelContent):
    """Image content, either referenced by an absolute URI or carried inline."""

    uri: str | None = None
    data: bytes | None = None
    mime_type: str | None = None

    @field_validator("uri")
    @classmethod
    def _require_absolute_uri(cls, value: str | None) -> str | None:
        if value is not None and not urlsplit(value).scheme:
            raise ValueError(f"Image URI must be absolute: {value!r}")
        return value


class ChatMessageContent(BaseModel):
    """A single message in the chat history.

    ``content`` may be passed as a shortcut for a single leading
    ``TextContent`` item.
    """

    role: AuthorRole
    items: list[KernelContent] = Field(default_factory=list)
    model_id: str | None = None
    inner_content: Any = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _content_shortcut(cls, data: Any) -> Any:
        if isinstance(data, dict) and "content" in data:
            data = dict(data)
            content = data.pop("content")
            if content is not None:
                data["items"] = [TextContent(text=content), *data.get("items", [])]
        return data

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> AuthorRole:
        role = AuthorRole.parse(value)
        if role is None:
            raise InvalidRoleError("Chat message role is required", role=value)
        return role

    @property
    def content(self) -> str | None:
        """Combined text of all text items, or None if there are none."""
        texts = [item.text for item in self.items if isinstance(item, TextContent)]
        if not texts:
            return None
        return "".join(texts)


class ChatHistory:
    """Ordered, mutable list of chat messages owned by the caller.

    Not safe for concurrent mutation: callers must serialize access to
    a given history, including while a completion call is in flight.
    """

    def __init__(
        self,
        messages: Iterable[ChatMessageContent] | None = None,
        system_message: str | None = None,
    ):
        self.messages: list[ChatMessageContent] = []
        if system_message is not None:
            self.add_system_message(system_message)
        if messages is not None:
            self.messages.extend(messages)

    def add_message(self, message: ChatMessageContent) -> None:
        self.messages.append(message)

    def add_system_message(self, content: str) -> None:
        self.add_message(ChatMessageContent(role=AuthorRole.SYSTEM, content=content))

    def add_user_message(self, content: str | list[KernelContent]) -> None:
        if isinstance(content, str):
            self.add_message(ChatMessageContent(role=AuthorRole.USER, content=content))
        else:
            self.add_message(ChatMessageContent(role=AuthorRole.USER, items=list(content)))

    def add_assistant_message(self, content: str) -> None:
        self.add_message(ChatMessageContent(role=AuthorRole.ASSISTANT, content=content))

    def __len__(self) -> int:
        return len(self.messages)

    def __getitem__(self, index: int) -> ChatMessageContent:
        return self.messages[index]

    def __iter__(self) -> Iterator[ChatMessageContent]:
        return iter(self.messages)

    def __repr__(self) -> str:
        return f"ChatHistory(messages={self.messages!r})"


class PromptExecutionSettings(BaseModel):
    """Vendor-neutral execution settings.

    Provider-specific values travel in ``extension_data``. Writes are
    validated like construction; an invalid value raises
    ``SettingsDeserializationError`` and leaves the field unchanged. Once
    frozen, any attribute write raises ``FrozenSettingsError``.
    """

    model_config = ConfigDict(validate_assignment=True)

    service_id: str | None = None
    model_id: str | None = None
    extension_data: dict[str, Any] | None = None

    _frozen: bool = PrivateAttr(default=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
            return

        if self.is_frozen:
            raise FrozenSettingsError(
                f"Cannot set '{name}': settings are frozen",
                attribute=name,
            )
        try:
            super().__setattr__(name, value)
        except ValidationError as e:
            raise SettingsDeserializationError(
                f"Invalid value for '{name}': {e}"
            ) from e

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the settings immutable. Calling it twice is a no-op."""
        self._frozen = True

    def clone(self) -> "PromptExecutionSettings":
        """Return an unfrozen copy."""
        return type(self)(
            service_id=self.service_id,
            model_id=self.model_id,
            extension_data=dict(self.extension_data) if self.extension_data is not None else None,
        )
