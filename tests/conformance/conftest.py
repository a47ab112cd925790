"""Shared fixtures for conformance tests.

Each harness builds one provider adapter wired to canned native payloads, so
the same behavioural checks run against every upstream wire format.
"""

from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock

import httpx
import pytest

from chatbridge_sdk.models.generation import GenerationConfig
from chatbridge_sdk.providers.anthropic.adapter import AnthropicProvider
from chatbridge_sdk.providers.base import ProviderAdapter
from chatbridge_sdk.providers.gemini.adapter import GeminiProvider
from chatbridge_sdk.providers.ollama.adapter import OllamaProvider
from chatbridge_sdk.providers.openai.adapter import OpenAIProvider
from chatbridge_sdk.providers.openai_responses.adapter import OpenAIResponsesProvider
from chatbridge_sdk.providers.xai.adapter import XAIProvider
from tests.helpers.streaming_mocks import (
    MockEventStream,
    TrackingByteStream,
    create_anthropic_stream,
    create_interrupted_openai_stream,
    create_openai_stream,
    gemini_sse_lines,
    make_sdk_client,
    ollama_ndjson_lines,
)


class Harness:
    """Builds an adapter that answers with canned native payloads."""

    name = ""
    model = ""

    @property
    def config(self) -> GenerationConfig:
        return GenerationConfig(api_key="test-key", model=self.model)

    @property
    def streams(self) -> bool:
        return True

    def native_response(self, text: str, thinking: Optional[str]) -> Dict[str, Any]:
        raise NotImplementedError

    def blocking(self, text: str = "Test response", thinking: Optional[str] = None) -> ProviderAdapter:
        raise NotImplementedError

    def streaming(self, chunks: List[str], complete: bool = True) -> Tuple[ProviderAdapter, Any]:
        """Adapter plus the upstream stream object, whose ``closed`` flag can be checked."""
        raise NotImplementedError


class SDKHarness(Harness):
    """Adapters built on an SDK client; the client factory is replaced by a mock."""

    provider_class = OpenAIProvider
    create_path = ("chat", "completions", "create")

    def _with_client(self, result) -> ProviderAdapter:
        provider = self.provider_class()
        client = make_sdk_client()
        target = client
        for attribute in self.create_path[:-1]:
            target = getattr(target, attribute)
        setattr(target, self.create_path[-1], AsyncMock(return_value=result))
        provider._create_client = lambda config: client
        return provider

    def blocking(self, text="Test response", thinking=None):
        return self._with_client(self.native_response(text, thinking))

    def streaming(self, chunks, complete=True):
        stream = self.native_stream(chunks, complete)
        return self._with_client(stream), stream

    def native_stream(self, chunks: List[str], complete: bool) -> MockEventStream:
        raise NotImplementedError


class OpenAIHarness(SDKHarness):
    name = "openai"
    model = "gpt-4o"

    def native_response(self, text, thinking):
        message = {"role": "assistant", "content": text}
        if thinking:
            message["reasoning_content"] = thinking
        return {
            "id": "chatcmpl-1",
            "model": self.model,
            "choices": [{"index": 0, "message": message, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        }

    def native_stream(self, chunks, complete):
        if complete:
            return create_openai_stream(chunks, model=self.model)
        return create_interrupted_openai_stream(chunks)


class XAIHarness(OpenAIHarness):
    name = "xai"
    model = "grok-3"
    provider_class = XAIProvider


class ClaudeHarness(SDKHarness):
    name = "claude"
    model = "claude-3-5-sonnet-20241022"
    provider_class = AnthropicProvider
    create_path = ("messages", "create")

    def native_response(self, text, thinking):
        content = []
        if thinking:
            content.append({"type": "thinking", "thinking": thinking, "signature": "sig"})
        content.append({"type": "text", "text": text})
        return {
            "id": "msg_1",
            "model": self.model,
            "content": content,
            "stop_reason": "end_turn",
            "usage": {"input_tokens": 10, "output_tokens": 5},
        }

    def native_stream(self, chunks, complete):
        stream = create_anthropic_stream(chunks)
        if not complete:
            stream = MockEventStream(stream.events[:-2])
        return stream


class ResponsesHarness(SDKHarness):
    name = "openai-responses"
    model = "gpt-4o"
    provider_class = OpenAIResponsesProvider
    create_path = ("responses", "create")

    @property
    def streams(self):
        return False

    def native_response(self, text, thinking):
        output = []
        if thinking:
            output.append({"id": "rs_1", "type": "reasoning", "summary": [{"type": "summary_text", "text": thinking}]})
        output.append({"id": "msg_1", "type": "message", "role": "assistant",
                       "content": [{"type": "output_text", "text": text}]})
        return {
            "id": "resp_1",
            "status": "completed",
            "model": self.model,
            "output": output,
            "usage": {"input_tokens": 10, "output_tokens": 5, "total_tokens": 15},
        }


class HTTPHarness(Harness):
    """Adapters built on httpx; requests are answered by a MockTransport."""

    provider_class = GeminiProvider

    def _with_response(self, response: httpx.Response) -> ProviderAdapter:
        return self.provider_class(transport=httpx.MockTransport(lambda request: response))

    def blocking(self, text="Test response", thinking=None):
        return self._with_response(httpx.Response(200, json=self.native_response(text, thinking)))

    def streaming(self, chunks, complete=True):
        body = TrackingByteStream(self.native_lines(chunks, complete))
        return self._with_response(httpx.Response(200, stream=body)), body

    def native_lines(self, chunks: List[str], complete: bool) -> List[str]:
        raise NotImplementedError


class GeminiHarness(HTTPHarness):
    name = "gemini"
    model = "gemini-2.0-flash"

    def native_response(self, text, thinking):
        parts = [{"text": thinking, "thought": True}] if thinking else []
        parts.append({"text": text})
        return {
            "candidates": [{"content": {"role": "model", "parts": parts}, "finishReason": "STOP"}],
            "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5, "totalTokenCount": 15},
        }

    def native_lines(self, chunks, complete):
        return gemini_sse_lines(chunks, finish_reason="STOP" if complete else None)


class OllamaHarness(HTTPHarness):
    name = "ollama"
    model = "llama3.3"
    provider_class = OllamaProvider

    @property
    def config(self):
        return GenerationConfig(model=self.model)

    def native_response(self, text, thinking):
        message = {"role": "assistant", "content": text}
        if thinking:
            message["thinking"] = thinking
        return {"model": self.model, "message": message, "done": True, "done_reason": "stop",
                "prompt_eval_count": 10, "eval_count": 5}

    def native_lines(self, chunks, complete):
        return ollama_ndjson_lines(chunks, done=complete, model=self.model)


HARNESSES = [OpenAIHarness, ResponsesHarness, ClaudeHarness, GeminiHarness, OllamaHarness, XAIHarness]


@pytest.fixture(params=HARNESSES, ids=lambda harness: harness.name)
def harness(request) -> Harness:
    return request.param()


@pytest.fixture(params=[h for h in HARNESSES if h().streams], ids=lambda harness: harness.name)
def streaming_harness(request) -> Harness:
    return request.param()
