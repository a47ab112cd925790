"""
Base Provider Adapter Interface

This module defines the abstract base class for all upstream adapters and the
error types they raise. Every adapter translates the shared chat contract
(role-tagged messages plus a GenerationConfig) to and from one upstream wire
format.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from ..config.model_keywords import (
    KeywordGroup,
    get_always_include_keywords,
    get_non_chat_keywords,
    matches_keywords,
)
from ..models.conversation_types import ChatMessage
from ..models.generation import GenerationConfig, ModelInfo, NormalizedResponse, ProviderType, StreamFragment
from ..observability.logging import ProviderLogger


class ChatBridgeError(Exception):
    """Root of every error raised by the SDK."""


class ProviderError(ChatBridgeError):
    """
    Uniform upstream failure.

    Raised for non-success HTTP statuses, transport failures, malformed or
    empty payloads and streams that end without a completion signal.

    Attributes:
        message: Error message
        provider: Provider id
        status_code: HTTP status code if known
        retry_after: Seconds the upstream asked to wait, if given
        is_retryable: Informational; the SDK never retries on its own
        original_error: The wrapped exception, if any
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.retry_after = retry_after
        self.is_retryable = False  # Set by the error mapper
        self.original_error = original_error


class UnsupportedOperationError(ChatBridgeError):
    """Raised when an adapter has no implementation for an operation (e.g. streaming)."""

    def __init__(self, provider: str, operation: str, message: Optional[str] = None):
        super().__init__(message or f"{provider} does not support {operation}")
        self.provider = provider
        self.operation = operation


class ConfigurationError(ChatBridgeError):
    """Raised before any network call when a request cannot be configured."""

    def __init__(self, message: str, provider: Optional[str] = None, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.provider = provider
        self.errors = list(errors or [])


def to_plain_dict(obj: Any) -> Dict[str, Any]:
    """Convert an SDK response object (pydantic model or mapping) into a plain dict."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    if hasattr(obj, "model_dump"):
        dumped = obj.model_dump()
        if isinstance(dumped, dict):
            return dumped
    if hasattr(obj, "to_dict"):
        dumped = obj.to_dict()
        if isinstance(dumped, dict):
            return dumped
    raise TypeError(f"Cannot convert {type(obj).__name__} to a dict")


async def close_quietly(resource: Any) -> None:
    """Close an upstream stream or response, awaiting the close when it is async."""
    close = getattr(resource, "aclose", None) or getattr(resource, "close", None)
    if close is None:
        return
    result = close()
    if inspect.isawaitable(result):
        await result


class ProviderAdapter(ABC):
    """
    Abstract base class for upstream adapters.

    The adapter is responsible for:
    - Translating messages and config to the upstream request shape
    - Making the network call
    - Translating the response or stream back to the shared models
    - Wrapping upstream failures into ProviderError

    Adapters are stateless: credentials and endpoints arrive with every
    GenerationConfig, so a single instance serves concurrent requests.
    """

    provider_id: ProviderType
    supports_streaming: bool = True

    # Family name used to look up model keyword data
    keyword_family: str = ""

    def __init__(self):
        self.logger = ProviderLogger(self.provider_id.value)

    @abstractmethod
    async def chat(self, messages: List[ChatMessage], config: GenerationConfig) -> NormalizedResponse:
        """
        One blocking round trip.

        Raises:
            ProviderError: On any HTTP failure or malformed/empty payload
        """

    @abstractmethod
    def stream_chat(
        self, messages: List[ChatMessage], config: GenerationConfig
    ) -> AsyncGenerator[StreamFragment, None]:
        """
        Incremental round trip.

        Yields one fragment per upstream increment; the last one has
        ``done=True``. Closing the generator early releases the upstream call.
        """

    async def test_connection(self, config: GenerationConfig) -> bool:
        """
        Cheapest authenticated call; must not depend on config.model.

        Returns False instead of raising when the check fails.
        """
        try:
            await self._check_connection(config)
            return True
        except Exception as e:
            self.logger.warning(
                "Connection test failed",
                error_type=type(e).__name__,
                error_msg=str(e),
            )
            return False

    @abstractmethod
    async def _check_connection(self, config: GenerationConfig) -> None:
        """Raise if the upstream rejects the credentials or is unreachable."""

    @abstractmethod
    async def get_available_models(self, config: GenerationConfig) -> List[ModelInfo]:
        """Conversational models exposed by the upstream, sorted by id."""

    def get_provider_name(self) -> str:
        return self.provider_id.value

    async def _call_with_parameter_retry(
        self,
        call: Callable[[Dict[str, Any]], Awaitable[Any]],
        payload: Dict[str, Any],
        request_id: Optional[str] = None,
    ) -> Any:
        """
        Run ``call(payload)``, retrying once without a rejected parameter.

        Only an upstream error naming exactly one field that is present in the
        payload triggers the retry. Everything else propagates unchanged, as
        does a failure of the retry itself.
        """
        from .errors import ErrorMapper

        try:
            return await call(payload)
        except Exception as e:
            param = ErrorMapper.unsupported_parameter(e)
            if not param or param not in payload:
                raise
            self.logger.warning(
                "Upstream rejected parameter; retrying without it",
                model=payload.get("model"),
                request_id=request_id,
                param=param,
            )
            retry_payload = {key: value for key, value in payload.items() if key != param}
            return await call(retry_payload)

    def _require_content(self, content: Optional[str], model: Optional[str]) -> str:
        """An empty completion is always an error, never a success value."""
        if not content or not content.strip():
            raise ProviderError(
                f"Empty response from {self.provider_id.value} model {model}",
                provider=self.provider_id.value,
            )
        return content

    def _filter_models(self, models: Sequence[Tuple[str, str]]) -> List[ModelInfo]:
        """
        Drop non-conversational models and sort the rest.

        Args:
            models: (id, display name) pairs as listed by the upstream

        Raises:
            ProviderError: If the upstream listed nothing (403) or nothing survives filtering (404)
        """
        if not models:
            raise ProviderError(
                f"No models returned by {self.provider_id.value}; check API key permissions",
                provider=self.provider_id.value,
                status_code=403,
            )

        excluded: List[KeywordGroup] = get_non_chat_keywords(self.keyword_family)
        always: List[KeywordGroup] = get_always_include_keywords(self.keyword_family)
        kept = {}
        for model_id, display_name in models:
            if matches_keywords(model_id, always) or not matches_keywords(model_id, excluded):
                kept[model_id] = ModelInfo(id=model_id, display_name=display_name or model_id)

        if not kept:
            raise ProviderError(
                f"No chat models available from {self.provider_id.value}",
                provider=self.provider_id.value,
                status_code=404,
            )
        return [kept[model_id] for model_id in sorted(kept)]
