"""Low-level Yandex AI completion client.

Builds the provider request from a chat history, sends it over an
injected httpx client and normalizes the response into chat messages.

A call runs strictly in order: validate, build, send, parse, normalize.
Any failure ends the call with a typed error and leaves the chat history
untouched. Task cancellation while waiting on the network propagates as
``asyncio.CancelledError``, also without touching the history.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .errors import (
    EmptyResultError,
    InvalidConversationError,
    MissingAlternativesError,
    RequestError,
    UnexpectedResponseError,
    UnsupportedContentError,
)
from .models import AuthorRole, ChatHistory, ChatMessageContent, ImageContent, TextContent
from .settings import YandexAIPromptExecutionSettings
from .version import __version__
from .wire import (
    ChatCompletionAlternative,
    ChatCompletionRequest,
    ChatCompletionRequestCompletionOptions,
    ChatCompletionResponseResult,
    ChatCompletionResponses,
    ImageUrlChunk,
    ReasoningOptions,
    TextChunk,
    YandexAIChatMessage,
    YandexAIUsage,
)

logger = logging.getLogger(__name__)

PROVIDER_NAME = "yandex_ai"
DEFAULT_ENDPOINT = "https://llm.api.cloud.yandex.net/foundationModels"
COMPLETION_PATH = "completion"

USER_AGENT = f"yandex-ai-chat/{__version__}"
CLIENT_VERSION_HEADER = "X-Client-Version"
FOLDER_ID_HEADER = "x-folder-id"
REQUEST_ID_HEADER = "x-request-id"


class YandexAIClient:
    """Yandex AI Foundation Models completion client.

    The injected ``httpx.AsyncClient`` is the only shared state and may be
    used by many calls at once. Retries, timeouts and connection reuse
    belong to that client; this class performs exactly one request per call.
    """

    def __init__(
        self,
        model_id: str,
        http_client: httpx.AsyncClient,
        api_key: str,
        folder_id: str,
        endpoint: str | None = None,
    ):
        """Initialize the client.

        Args:
            model_id: Model name, e.g. "yandexgpt/latest".
            http_client: Transport used for every request.
            api_key: API key sent as a bearer token.
            folder_id: Cloud folder that owns the model.
            endpoint: Base URL override. Defaults to the http client's
                base_url when it has one, else the public endpoint.

        Raises:
            ValueError: If model_id or api_key is blank.
        """
        if not model_id or not model_id.strip():
            raise ValueError("model_id must be a non-empty string")
        if not api_key or not api_key.strip():
            raise ValueError("api_key must be a non-empty string")

        self._model_id = model_id
        self._http_client = http_client
        self._api_key = api_key
        self._folder_id = folder_id
        self._endpoint = endpoint or str(http_client.base_url) or None

    @property
    def model_id(self) -> str:
        return self._model_id

    async def get_chat_message_contents(
        self,
        chat_history: ChatHistory,
        settings: Any = None,
    ) -> list[ChatMessageContent]:
        """Run one completion over the chat history.

        Args:
            chat_history: Conversation to complete. When the response holds
                exactly one alternative, it is appended to this history.
            settings: Any execution settings accepted by
                ``YandexAIPromptExecutionSettings.from_execution_settings``.

        Returns:
            One message per alternative, in provider order.

        Raises:
            InvalidConversationError: History is empty or badly ordered.
            UnsupportedContentError: A message holds unmappable content.
            SettingsDeserializationError: Settings could not be normalized.
            RequestError: Transport failure or non-2xx status.
            UnexpectedResponseError: Body did not parse (EmptyResultError
                when the result object is null).
            MissingAlternativesError: Result has no alternatives.
        """
        self.validate_chat_history(chat_history)
        execution_settings = YandexAIPromptExecutionSettings.from_execution_settings(settings)
        model_id = execution_settings.model_id or self._model_id
        endpoint = self.get_endpoint(execution_settings, COMPLETION_PATH)

        request = self.create_chat_completion_request(
            model_id, self._folder_id, chat_history, execution_settings, stream=False
        )

        body, request_id = await self.send_request(request, endpoint, stream=False)
        response = self.deserialize_response(body, request_id)

        if response.result is None:
            raise EmptyResultError(
                "Chat completions not found",
                response_body=body,
                provider=PROVIDER_NAME,
                request_id=request_id,
            )

        self._log_usage(response.result.usage)

        return self.normalize_response(model_id, response.result, chat_history, request_id)

    @staticmethod
    def validate_chat_history(chat_history: ChatHistory) -> None:
        """Check that the history is non-empty and starts with system or user.

        Raises:
            InvalidConversationError: If either condition does not hold.
        """
        if chat_history is None or len(chat_history) == 0:
            raise InvalidConversationError(
                "Chat history must contain at least one message",
                provider=PROVIDER_NAME,
            )

        first_role = chat_history[0].role
        if first_role not in (AuthorRole.SYSTEM, AuthorRole.USER):
            raise InvalidConversationError(
                "The first message in chat history must have either the system or user role",
                provider=PROVIDER_NAME,
            )

    def get_endpoint(self, settings: YandexAIPromptExecutionSettings, path: str) -> str:
        """Join endpoint, API version and path with single slashes."""
        base = (self._endpoint or DEFAULT_ENDPOINT).rstrip("/")
        return f"{base}/{settings.api_version.strip('/')}/{path.lstrip('/')}"

    def create_chat_completion_request(
        self,
        model_id: str,
        folder_id: str,
        chat_history: ChatHistory,
        settings: YandexAIPromptExecutionSettings,
        stream: bool = False,
    ) -> ChatCompletionRequest:
        """Convert a chat history and settings into the provider request.

        The history is validated first. The stop list is copied into the
        request, so later changes to the settings do not reach it.
        """
        self.validate_chat_history(chat_history)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "ChatHistory: %r, Settings: %r",
                chat_history,
                settings,
                extra={"provider": PROVIDER_NAME, "model": model_id},
            )

        messages: list[YandexAIChatMessage] = []
        for message in chat_history:
            messages.extend(self.to_yandex_chat_messages(message))

        reasoning_options = None
        if settings.reasoning_mode is not None:
            reasoning_options = ReasoningOptions(mode=settings.reasoning_mode)

        return ChatCompletionRequest(
            model_uri=f"gpt://{folder_id}/{model_id}",
            completion_options=ChatCompletionRequestCompletionOptions(
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
                response_format=settings.response_format,
                stream=stream,
                reasoning_options=reasoning_options,
            ),
            messages=messages,
            stop=settings.stop,
        )

    @staticmethod
    def to_yandex_chat_messages(message: ChatMessageContent) -> list[YandexAIChatMessage]:
        """Map one chat message to its wire messages.

        Assistant messages are sent as their combined text; structured tool
        calls are not decomposed. A single text item is flattened into a bare
        string. Anything else becomes an ordered list of content chunks.

        Raises:
            UnsupportedContentError: For items other than non-empty text or
                an image with a URI.
        """
        role = message.role.value

        if message.role == AuthorRole.ASSISTANT:
            return [YandexAIChatMessage(role=role, text=message.content or "")]

        if len(message.items) == 1 and isinstance(message.items[0], TextContent):
            return [YandexAIChatMessage(role=role, text=message.items[0].text)]

        chunks: list[TextChunk | ImageUrlChunk] = []
        for item in message.items:
            if isinstance(item, TextContent) and item.text:
                chunks.append(TextChunk(text=item.text))
            elif isinstance(item, ImageContent) and item.uri is not None:
                chunks.append(ImageUrlChunk(image_url=item.uri))
            else:
                raise UnsupportedContentError(
                    "Invalid message content, only text and image url are supported.",
                    content_type=type(item).__name__,
                    provider=PROVIDER_NAME,
                )

        return [YandexAIChatMessage(role=role, text=chunks)]

    def create_headers(self, stream: bool = False) -> dict[str, str]:
        """Headers for a completion request."""
        return {
            "User-Agent": USER_AGENT,
            CLIENT_VERSION_HEADER: __version__,
            "Accept": "text/event-stream" if stream else "application/json",
            "Authorization": f"Bearer {self._api_key}",
            FOLDER_ID_HEADER: self._folder_id,
            "Content-Type": "application/json; charset=utf-8",
        }

    async def send_request(
        self,
        request: ChatCompletionRequest,
        endpoint: str,
        stream: bool = False,
    ) -> tuple[str, str | None]:
        """POST the request and return the raw body and request id.

        Raises:
            RequestError: On any transport failure or non-2xx status.
        """
        try:
            response = await self._http_client.post(
                endpoint,
                content=request.to_json_bytes(),
                headers=self.create_headers(stream),
            )
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            request_id = e.response.headers.get(REQUEST_ID_HEADER)
            logger.warning(
                "Yandex AI request failed with status %d",
                e.response.status_code,
                extra={
                    "provider": PROVIDER_NAME,
                    "status_code": e.response.status_code,
                    "request_id": request_id,
                },
            )
            raise RequestError(
                f"Yandex AI request failed with status {e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
                response_body=e.response.text,
                provider=PROVIDER_NAME,
                request_id=request_id,
            ) from e

        except httpx.InvalidURL as e:
            logger.warning(
                "Invalid Yandex AI endpoint %s: %s",
                endpoint,
                str(e),
                extra={"provider": PROVIDER_NAME, "error_type": type(e).__name__},
            )
            raise RequestError(
                f"Invalid Yandex AI endpoint {endpoint!r}: {e}",
                provider=PROVIDER_NAME,
            ) from e

        except httpx.HTTPError as e:
            logger.warning(
                "Yandex AI request failed: %s",
                str(e),
                extra={"provider": PROVIDER_NAME, "error_type": type(e).__name__},
            )
            raise RequestError(
                f"Failed to send request to Yandex AI: {e}",
                provider=PROVIDER_NAME,
            ) from e

        return response.text, response.headers.get(REQUEST_ID_HEADER)

    @staticmethod
    def deserialize_response(body: str, request_id: str | None = None) -> ChatCompletionResponseResult:
        """Parse the raw body.

        Raises:
            UnexpectedResponseError: If the body is not the expected JSON
                shape (including a bare ``null``). The body is attached.
        """
        try:
            return ChatCompletionResponseResult.model_validate_json(body)
        except ValidationError as e:
            logger.warning(
                "Unexpected response from Yandex AI",
                extra={"provider": PROVIDER_NAME, "request_id": request_id, "response_body": body},
            )
            raise UnexpectedResponseError(
                "Unexpected response from model",
                response_body=body,
                provider=PROVIDER_NAME,
                request_id=request_id,
            ) from e

    def normalize_response(
        self,
        model_id: str,
        response: ChatCompletionResponses,
        chat_history: ChatHistory,
        request_id: str | None = None,
    ) -> list[ChatMessageContent]:
        """Normalize every alternative and continue the transcript.

        When the response holds exactly one alternative, its message is
        appended to ``chat_history``. With any other count the history is
        left unchanged and all messages are only returned.
        """
        contents = self.to_chat_message_contents(model_id, response, request_id)

        if len(contents) == 1:
            chat_history.add_message(contents[0])

        return contents

    @staticmethod
    def to_chat_message_contents(
        model_id: str,
        response: ChatCompletionResponses,
        request_id: str | None = None,
    ) -> list[ChatMessageContent]:
        """One message per alternative, in provider order.

        Raises:
            MissingAlternativesError: If the result has no alternatives field.
            UnexpectedResponseError: If an alternative has no message.
        """
        if response.alternatives is None:
            raise MissingAlternativesError(
                "Cannot get alternatives from json.",
                provider=PROVIDER_NAME,
                request_id=request_id,
            )

        return [
            _to_chat_message_content(model_id, response, alternative, request_id)
            for alternative in response.alternatives
        ]

    def _log_usage(self, usage: YandexAIUsage | None) -> None:
        if (
            usage is None
            or usage.input_text_tokens is None
            or usage.completion_tokens is None
            or usage.total_tokens is None
        ):
            logger.debug("Usage information unavailable", extra={"provider": PROVIDER_NAME})
            return

        logger.info(
            "Prompt tokens: %d. Completion tokens: %d. Total tokens: %d",
            usage.input_text_tokens,
            usage.completion_tokens,
            usage.total_tokens,
            extra={
                "provider": PROVIDER_NAME,
                "prompt_tokens": usage.input_text_tokens,
                "completion_tokens": usage.completion_tokens,
                "total_tokens": usage.total_tokens,
            },
        )


def _to_chat_message_content(
    model_id: str,
    response: ChatCompletionResponses,
    alternative: ChatCompletionAlternative,
    request_id: str | None,
) -> ChatMessageContent:
    message = alternative.message
    if message is None:
        raise UnexpectedResponseError(
            "Alternative has no message",
            response_body=alternative.model_dump_json(by_alias=True),
            provider=PROVIDER_NAME,
            request_id=request_id,
        )

    if isinstance(message.text, list):
        text = "".join(chunk.text for chunk in message.text if isinstance(chunk, TextChunk))
    else:
        text = message.text

    return ChatMessageContent(
        role=message.role or AuthorRole.ASSISTANT,
        content=text,
        model_id=model_id,
        inner_content=alternative,
        metadata={
            "usage": response.usage,
            "status": alternative.status,
            "model_version": response.model_version,
            "request_id": request_id,
        },
    )
