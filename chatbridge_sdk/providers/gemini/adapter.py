from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx

from ..base import ChatBridgeError, ProviderAdapter, ProviderError
from ..errors import ErrorMapper
from ..http import HTTPProviderMixin, TimeoutTypes, check_response, parse_json_body
from ..urls import endpoint_url
from ...core.normalization.usage import normalize_usage
from ...models.conversation_types import ChatMessage
from ...models.generation import GenerationConfig, ModelInfo, NormalizedResponse, ProviderType, StreamFragment
from ...models.thinking import StreamThinkingChunk
from ...streaming import StreamAdapter, iter_sse_json, iterate_fragments
from ...thinking.gemini import GeminiThinkingAdapter
from .parsers import (
    extract_block_reason,
    extract_finish_reason,
    extract_model_entries,
    extract_text_from_generate_response,
    raise_for_error_event,
)

MODELS_PAGE_SIZE = 1000


class GeminiProvider(HTTPProviderMixin, ProviderAdapter):
    """Google generate-content provider over plain HTTP."""

    provider_id = ProviderType.GEMINI
    keyword_family = "gemini"

    def __init__(
        self,
        thinking_adapter: Optional[GeminiThinkingAdapter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: TimeoutTypes = None,
    ):
        super().__init__()
        self._init_http(transport, timeout)
        self.thinking_adapter = thinking_adapter or GeminiThinkingAdapter()

    def _headers(self, config: GenerationConfig) -> Dict[str, str]:
        return {"x-goog-api-key": config.api_key or "", "Content-Type": "application/json"}

    def _map_error(self, error: Exception) -> ChatBridgeError:
        return ErrorMapper.map_http_error(error, self.provider_id.value)

    def _check_body(self, raw: Dict[str, Any]) -> None:
        raise_for_error_event(raw)
        block_reason = extract_block_reason(raw)
        if block_reason:
            raise ProviderError(
                f"Prompt blocked by Gemini: {block_reason}",
                provider=self.provider_id.value,
            )

    def _build_payload(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        context = self.thinking_adapter.prepare_context_with_thinking(messages)
        return self.thinking_adapter.build_thinking_request(context, config)

    async def chat(self, messages: List[ChatMessage], config: GenerationConfig) -> NormalizedResponse:
        """Generate a completion through generateContent."""
        with self.logger.track_request("chat", config.model) as request_info:
            try:
                payload = self._build_payload(messages, config)
                url = endpoint_url("gemini", "generate", config.base_url, model=config.model)

                async with self._create_http_client() as client:
                    response = await client.post(url, json=payload, headers=self._headers(config))
                    await check_response(response)
                    raw = parse_json_body(response, self.provider_id.value)

                self._check_body(raw)
                content = self._require_content(extract_text_from_generate_response(raw), config.model)

                usage = normalize_usage(raw.get("usageMetadata"), self.provider_id.value)
                if usage:
                    self.logger.log_usage(usage, config.model, request_info['request_id'])

                return NormalizedResponse(
                    content=content,
                    model=raw.get("modelVersion") or config.model,
                    provider=self.provider_id.value,
                    usage=usage,
                    thinking=self.thinking_adapter.extract_thinking(raw),
                    response_id=raw.get("responseId"),
                    finish_reason=extract_finish_reason(raw),
                )
            except Exception as e:
                raise self._map_error(e)

    def _decode_chunk(self, raw: Dict[str, Any]) -> StreamThinkingChunk:
        self._check_body(raw)
        return self.thinking_adapter.extract_stream_thinking(raw)

    async def stream_chat(
        self, messages: List[ChatMessage], config: GenerationConfig
    ) -> AsyncGenerator[StreamFragment, None]:
        """Stream through streamGenerateContent with server-sent events."""
        with self.logger.track_request("stream_chat", config.model) as request_info:
            adapter = StreamAdapter(self.provider_id.value, config.model)
            try:
                payload = self._build_payload(messages, config)
                url = endpoint_url("gemini", "stream", config.base_url, model=config.model)

                async with self._create_http_client() as client:
                    async with client.stream("POST", url, json=payload, headers=self._headers(config)) as response:
                        await check_response(response)
                        async for fragment in iterate_fragments(
                            iter_sse_json(response.aiter_lines(), self.provider_id.value),
                            self._decode_chunk,
                            adapter,
                        ):
                            if fragment.usage:
                                self.logger.log_usage(fragment.usage, config.model, request_info['request_id'])
                            yield fragment
            except Exception as e:
                raise self._map_error(e)
            finally:
                self.logger.log_streaming_metrics(adapter.get_metrics(), config.model, request_info['request_id'])

    async def _list_model_entries(self, config: GenerationConfig):
        url = endpoint_url("gemini", "models", config.base_url)
        async with self._create_http_client() as client:
            response = await client.get(
                url, params={"pageSize": MODELS_PAGE_SIZE}, headers=self._headers(config)
            )
            await check_response(response)
            raw = parse_json_body(response, self.provider_id.value)
        return extract_model_entries(raw)

    async def _check_connection(self, config: GenerationConfig) -> None:
        try:
            await self._list_model_entries(config)
        except Exception as e:
            raise self._map_error(e)

    async def get_available_models(self, config: GenerationConfig) -> List[ModelInfo]:
        """List Gemini chat models."""
        with self.logger.track_request("get_available_models", None):
            try:
                return self._filter_models(await self._list_model_entries(config))
            except Exception as e:
                raise self._map_error(e)
