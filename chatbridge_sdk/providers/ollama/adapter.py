from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx

from ..base import ChatBridgeError, ProviderAdapter
from ..errors import ErrorMapper
from ..http import HTTPProviderMixin, TimeoutTypes, check_response, parse_json_body
from ..urls import endpoint_url
from ...core.normalization.usage import normalize_usage
from ...models.conversation_types import ChatMessage
from ...models.generation import GenerationConfig, ModelInfo, NormalizedResponse, ProviderType, StreamFragment
from ...models.thinking import StreamThinkingChunk
from ...streaming import StreamAdapter, iter_ndjson, iterate_fragments
from ...thinking.ollama import OllamaThinkingAdapter
from .parsers import extract_model_entries, extract_text_from_chat_response, raise_for_error_body


class OllamaProvider(HTTPProviderMixin, ProviderAdapter):
    """Local Ollama runtime over its native REST API. No credential is sent."""

    provider_id = ProviderType.OLLAMA
    keyword_family = "ollama"

    def __init__(
        self,
        thinking_adapter: Optional[OllamaThinkingAdapter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: TimeoutTypes = None,
    ):
        super().__init__()
        self._init_http(transport, timeout)
        self.thinking_adapter = thinking_adapter or OllamaThinkingAdapter()

    def _map_error(self, error: Exception) -> ChatBridgeError:
        return ErrorMapper.map_http_error(error, self.provider_id.value)

    def _build_payload(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        context = self.thinking_adapter.prepare_context_with_thinking(messages)
        return self.thinking_adapter.build_thinking_request(context, config)

    async def chat(self, messages: List[ChatMessage], config: GenerationConfig) -> NormalizedResponse:
        """Generate a completion through ``/api/chat``."""
        with self.logger.track_request("chat", config.model) as request_info:
            try:
                payload = self._build_payload(messages, config)
                url = endpoint_url("ollama", "chat", config.base_url)

                async with self._create_http_client() as client:
                    response = await client.post(url, json=payload)
                    await check_response(response)
                    raw = parse_json_body(response, self.provider_id.value)

                raise_for_error_body(raw)
                content = self._require_content(extract_text_from_chat_response(raw), config.model)

                usage = normalize_usage(raw, self.provider_id.value)
                if usage:
                    self.logger.log_usage(usage, config.model, request_info['request_id'])

                return NormalizedResponse(
                    content=content,
                    model=raw.get("model") or config.model,
                    provider=self.provider_id.value,
                    usage=usage,
                    thinking=self.thinking_adapter.extract_thinking(raw),
                    finish_reason=raw.get("done_reason"),
                )
            except Exception as e:
                raise self._map_error(e)

    def _decode_chunk(self, raw: Dict[str, Any]) -> StreamThinkingChunk:
        raise_for_error_body(raw)
        return self.thinking_adapter.extract_stream_thinking(raw)

    async def stream_chat(
        self, messages: List[ChatMessage], config: GenerationConfig
    ) -> AsyncGenerator[StreamFragment, None]:
        """Stream ``/api/chat`` as newline-delimited JSON."""
        with self.logger.track_request("stream_chat", config.model) as request_info:
            adapter = StreamAdapter(self.provider_id.value, config.model)
            try:
                payload = self._build_payload(messages, config)
                payload["stream"] = True
                url = endpoint_url("ollama", "chat", config.base_url)

                async with self._create_http_client() as client:
                    async with client.stream("POST", url, json=payload) as response:
                        await check_response(response)
                        async for fragment in iterate_fragments(
                            iter_ndjson(response.aiter_lines(), self.provider_id.value),
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
        url = endpoint_url("ollama", "models", config.base_url)
        async with self._create_http_client() as client:
            response = await client.get(url)
            await check_response(response)
            raw = parse_json_body(response, self.provider_id.value)
        return extract_model_entries(raw)

    async def _check_connection(self, config: GenerationConfig) -> None:
        try:
            await self._list_model_entries(config)
        except Exception as e:
            raise self._map_error(e)

    async def get_available_models(self, config: GenerationConfig) -> List[ModelInfo]:
        """List locally installed chat models."""
        with self.logger.track_request("get_available_models", None):
            try:
                return self._filter_models(await self._list_model_entries(config))
            except Exception as e:
                raise self._map_error(e)
