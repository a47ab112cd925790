from typing import AsyncGenerator, List, Optional

from openai import AsyncOpenAI

from ..base import ChatBridgeError, ProviderAdapter, close_quietly, to_plain_dict
from ..errors import ErrorMapper
from ...config.constants import DEFAULT_BASE_URLS
from ...core.normalization.usage import normalize_usage
from ...models.conversation_types import ChatMessage
from ...models.generation import GenerationConfig, ModelInfo, NormalizedResponse, ProviderType, StreamFragment
from ...streaming import StreamAdapter, iterate_fragments
from ...thinking.base import ThinkingAdapter
from ...thinking.openai import OpenAIThinkingAdapter
from .parsers import extract_finish_reason, extract_model_entries, extract_text_from_chat_completion
from .streaming import iter_chunk_dicts


class OpenAIProvider(ProviderAdapter):
    """OpenAI Chat Completions provider."""

    provider_id = ProviderType.OPENAI
    keyword_family = "openai"

    def __init__(self, thinking_adapter: Optional[ThinkingAdapter] = None):
        super().__init__()
        self.thinking_adapter = thinking_adapter or OpenAIThinkingAdapter()

    def _create_client(self, config: GenerationConfig) -> AsyncOpenAI:
        # SDK retries are disabled; the only local retry is the parameter retry
        return AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url or DEFAULT_BASE_URLS[self.keyword_family],
            max_retries=0,
        )

    def _map_error(self, error: Exception) -> ChatBridgeError:
        return ErrorMapper.map_openai_error(error, self.provider_id.value)

    async def chat(self, messages: List[ChatMessage], config: GenerationConfig) -> NormalizedResponse:
        """Generate a completion through Chat Completions."""
        with self.logger.track_request("chat", config.model) as request_info:
            try:
                context = self.thinking_adapter.prepare_context_with_thinking(messages)
                payload = self.thinking_adapter.build_thinking_request(context, config)

                async with self._create_client(config) as client:
                    response = await self._call_with_parameter_retry(
                        lambda p: client.chat.completions.create(**p),
                        payload,
                        request_info['request_id'],
                    )

                raw = to_plain_dict(response)
                content = self._require_content(extract_text_from_chat_completion(raw), config.model)

                usage = normalize_usage(raw.get("usage"), self.provider_id.value)
                if usage:
                    self.logger.log_usage(usage, config.model, request_info['request_id'])

                return NormalizedResponse(
                    content=content,
                    model=raw.get("model") or config.model,
                    provider=self.provider_id.value,
                    usage=usage,
                    thinking=self.thinking_adapter.extract_thinking(raw),
                    response_id=raw.get("id"),
                    finish_reason=extract_finish_reason(raw),
                )
            except Exception as e:
                raise self._map_error(e)

    async def stream_chat(
        self, messages: List[ChatMessage], config: GenerationConfig
    ) -> AsyncGenerator[StreamFragment, None]:
        """Stream a completion through Chat Completions, one fragment per delta."""
        with self.logger.track_request("stream_chat", config.model) as request_info:
            adapter = StreamAdapter(self.provider_id.value, config.model)
            try:
                context = self.thinking_adapter.prepare_context_with_thinking(messages)
                payload = self.thinking_adapter.build_thinking_request(context, config)
                payload["stream"] = True

                async with self._create_client(config) as client:
                    stream = await self._call_with_parameter_retry(
                        lambda p: client.chat.completions.create(**p),
                        payload,
                        request_info['request_id'],
                    )
                    try:
                        async for fragment in iterate_fragments(
                            iter_chunk_dicts(stream), self.thinking_adapter.extract_stream_thinking, adapter
                        ):
                            if fragment.usage:
                                self.logger.log_usage(fragment.usage, config.model, request_info['request_id'])
                            yield fragment
                    finally:
                        await close_quietly(stream)
            except Exception as e:
                raise self._map_error(e)
            finally:
                self.logger.log_streaming_metrics(adapter.get_metrics(), config.model, request_info['request_id'])

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
        """List chat-capable models."""
        with self.logger.track_request("get_available_models", None):
            try:
                return self._filter_models(await self._list_model_entries(config))
            except Exception as e:
                raise self._map_error(e)
