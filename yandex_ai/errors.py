"""Yandex AI adapter error hierarchy.

Custom exceptions for chat completion calls with provider context.
Every stage of a call raises exactly one of these types to its caller.
"""


class LLMError(Exception):
    """Base exception for chat completion operations."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.request_id = request_id

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.provider:
            parts.append(f"provider={self.provider}")
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        return " ".join(parts)


class InvalidConversationError(LLMError):
    """Chat history is empty or starts with a role other than system/user.

    Raised before any network activity.
    """

    pass


class InvalidRoleError(LLMError):
    """Message role is not one of system, user, assistant or tool."""

    def __init__(self, message: str, role: object = None, provider: str | None = None):
        super().__init__(message, provider)
        self.role = role


class UnsupportedContentError(LLMError):
    """Message content item cannot be projected onto the wire format.

    Only text and image references (by URI) are supported.
    """

    def __init__(
        self,
        message: str,
        content_type: str | None = None,
        provider: str | None = None,
    ):
        super().__init__(message, provider)
        self.content_type = content_type


class FrozenSettingsError(LLMError):
    """Write attempted on a frozen settings object."""

    def __init__(self, message: str, attribute: str | None = None):
        super().__init__(message)
        self.attribute = attribute


class SettingsDeserializationError(LLMError):
    """Execution settings could not be re-encoded into provider settings."""

    pass


class RequestError(LLMError):
    """Transport-level failure: connection, DNS, timeout or non-2xx status.

    The original transport exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        provider: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message, provider, request_id)
        self.status_code = status_code
        self.response_body = response_body


class UnexpectedResponseError(LLMError):
    """Response body did not parse into the expected shape.

    Always carries the raw body for diagnosis.
    """

    def __init__(
        self,
        message: str,
        response_body: str,
        provider: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message, provider, request_id)
        self.response_body = response_body


class EmptyResultError(UnexpectedResponseError):
    """Response parsed, but its ``result`` object is missing or null."""

    pass


class MissingAlternativesError(LLMError):
    """Response result has no ``alternatives`` field."""

    pass
