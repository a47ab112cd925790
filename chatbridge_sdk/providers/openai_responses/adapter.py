from typing import Any, AsyncGenerator, Dict, List, Optional

from openai import AsyncOpenAI

from ..base import ChatBridgeError, ProviderAdapter, ProviderError, UnsupportedOperationError, to_plain_dict
from ..errors import ErrorMapper
from ..openai.parsers import extract_model_entries
from ...config.constants import DEFAULT_BASE_URLS
from ...core.normalization.usage import normalize_usage
from ...models.conversation_types import ChatMessage
from ...models.generation import GenerationConfig, ModelInfo, NormalizedResponse, ProviderType, StreamFragment
from ...thinking.openai import OpenAIResponsesThinkingAdapter
from .parsers import extract_error_message, extract_text_from_responses_api, parse_created_at

PENDING_STATUSES = ("queued", "in_progress")


class OpenAIResponsesProvider(ProviderAdapter):
    """
    OpenAI Responses API provider.

    Blocking only: ``stream_chat`` raises UnsupportedOperationError so the
    caller can pick its own fallback. Stored responses can be chained with
    ``previous_response_id`` and fetched or deleted later.
    """

    provider_id = ProviderType.OPENAI_RESPONSES
    supports_streaming = False
    keyword_family = "openai"

    def __init__(self, thinking_adapter: Optional[OpenAIResponsesThinkingAdapter] = None):
        super().__init__()
        self.thinking_adapter = thinking_adapter or OpenAIResponsesThinkingAdapter()

    def _create_client(self, config: GenerationConfig) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url or DEFAULT_BASE_URLS["openai"],
            max_retries=0,
        )

    def _map_error(self, error: Exception) -> ChatBridgeError:
        return ErrorMapper.map_openai_error(error, self.provider_id.value)

    def _check_status(self, raw: Dict[str, Any]) -> None:
        status = raw.get("status")
        if status in PENDING_STATUSES:
            raise ProviderError(
                f"Response {raw.get('id')} is not complete (status: {status}); "
                "background responses are not supported",
                provider=self.provider_id.value,
            )
        if status == "failed":
            raise ProviderError(
                f"Response failed: {extract_error_message(raw)}",
                provider=self.provider_id.value,
            )

    def _to_response(self, raw: Dict[str, Any], config_model: Optional[str], request_id: str) -> NormalizedResponse:
        self._check_status(raw)
        content = self._require_content(extract_text_from_responses_api(raw), config_model)

        usage = normalize_usage(raw.get("usage"), self.provider_id.value)
        if usage:
            self.logger.log_usage(usage, config_model, request_id)

        return NormalizedResponse(
            content=content,
            model=raw.get("model") or config_model or "",
            provider=self.provider_id.value,
            usage=usage,
            thinking=self.thinking_adapter.extract_thinking(raw),
            response_id=raw.get("id"),
            created_at=parse_created_at(raw),
            finish_reason=raw.get("status"),
        )

    async def chat(self, messages: List[ChatMessage], config: GenerationConfig) -> NormalizedResponse:
        """Create a response and wait for it to complete."""
        with self.logger.track_request("chat", config.model) as request_info:
            try:
                context = self.thinking_adapter.prepare_context_with_thinking(messages)
                payload = self.thinking_adapter.build_thinking_request(context, config)

                async with self._create_client(config) as client:
                    response = await self._call_with_parameter_retry(
                        lambda p: client.responses.create(**p),
                        payload,
                        request_info['request_id'],
                    )
                return self._to_response(to_plain_dict(response), config.model, request_info['request_id'])
            except Exception as e:
                raise self._map_error(e)

    async def stream_chat(
        self, messages: List[ChatMessage], config: GenerationConfig
    ) -> AsyncGenerator[StreamFragment, None]:
        """Not available; raised on first iteration, before any network call."""
        raise UnsupportedOperationError(
            self.provider_id.value,
            "stream_chat",
            "Streaming is not supported by the Responses API adapter; use chat instead",
        )
        yield  # pragma: no cover

    async def retrieve_response(self, response_id: str, config: GenerationConfig) -> NormalizedResponse:
        """Fetch a stored response by id."""
        with self.logger.track_request("retrieve_response", config.model) as request_info:
            try:
                async with self._create_client(config) as client:
                    response = await client.responses.retrieve(response_id)
                return self._to_response(to_plain_dict(response), config.model, request_info['request_id'])
            except Exception as e:
                raise self._map_error(e)

    async def delete_response(self, response_id: str, config: GenerationConfig) -> bool:
        """Delete a stored response by id."""
        with self.logger.track_request("delete_response", config.model):
            try:
                async with self._create_client(config) as client:
                    await client.responses.delete(response_id)
                return True
            except Exception as e:
                raise self._map_error(e)

    async def _list_model_entries(self, config: GenerationConfig):
        async with self._create_client(config) as client:
            page = await client.models.list()
        return extract_model_entries(page)

    async def _check_connection(self, config: GenerationConfig) -> None:
        try:
            await self._list_model_entries(config)
        except Exception as e:
            raise self._map_error(e)

    async def get_available_models(self, config: GenerationConfig) -> List[ModelInfo]:
        """Same catalog as Chat Completions; the Responses API shares the model list."""
        with self.logger.track_request("get_available_models", None):
            try:
                return self._filter_models(await self._list_model_entries(config))
            except Exception as e:
                raise self._map_error(e)
