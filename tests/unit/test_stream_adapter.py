"""Tests for the stream adapter and the line-framed decoders."""

import pytest

from chatbridge_sdk.models.thinking import StreamThinkingChunk
from chatbridge_sdk.models.usage import TokenUsage
from chatbridge_sdk.providers.base import ProviderError
from chatbridge_sdk.streaming import StreamAdapter, iter_ndjson, iter_sse_json, iterate_fragments


async def async_iter(items):
    for item in items:
        yield item


def passthrough(raw):
    return StreamThinkingChunk(**raw)


class TestStreamAdapter:

    def test_empty_chunk_skipped(self):
        adapter = StreamAdapter("openai", "gpt-4o")
        assert adapter.to_fragment(StreamThinkingChunk()) is None
        assert adapter.get_metrics()["chunks"] == 0

    def test_fragment_fields(self):
        adapter = StreamAdapter("claude", "claude-opus-4")
        fragment = adapter.to_fragment(StreamThinkingChunk(thinking="t", content="c"))

        assert fragment.content == "c"
        assert fragment.thinking.content == "t"
        assert fragment.model == "claude-opus-4"
        assert fragment.provider == "claude"
        assert adapter.get_metrics()["total_chars"] == 2

    def test_signature_only_chunk_kept(self):
        adapter = StreamAdapter("claude", "claude-opus-4")
        fragment = adapter.to_fragment(StreamThinkingChunk(signature="sig"))

        assert fragment.content == ""
        assert fragment.thinking.content == ""
        assert fragment.thinking.signature == "sig"
        assert fragment.done is False

    def test_data_after_done_rejected(self):
        adapter = StreamAdapter("openai")
        adapter.to_fragment(StreamThinkingChunk(done=True))
        assert adapter.completed

        with pytest.raises(ProviderError, match="after completion"):
            adapter.to_fragment(StreamThinkingChunk(content="late"))

    def test_ensure_completed(self):
        with pytest.raises(ProviderError, match="ended before completion"):
            StreamAdapter("gemini").ensure_completed()


class TestIterateFragments:

    @pytest.mark.asyncio
    async def test_stops_after_done(self):
        chunks = [{"content": "a"}, {}, {"content": "b", "done": True}, {"content": "ignored"}]
        adapter = StreamAdapter("ollama", "llama3.3")

        fragments = [f async for f in iterate_fragments(async_iter(chunks), passthrough, adapter)]

        assert [f.content for f in fragments] == ["a", "b"]
        assert [f.done for f in fragments] == [False, True]

    @pytest.mark.asyncio
    async def test_usage_on_terminal_fragment(self):
        usage = TokenUsage(prompt_tokens=1, completion_tokens=2, total_tokens=3)
        chunks = [{"content": "a"}, {"done": True, "usage": usage}]

        fragments = [f async for f in iterate_fragments(async_iter(chunks), passthrough, StreamAdapter("x"))]

        assert fragments[-1].usage == usage
        assert fragments[0].usage is None

    @pytest.mark.asyncio
    async def test_exhausted_without_done(self):
        with pytest.raises(ProviderError):
            async for _ in iterate_fragments(async_iter([{"content": "a"}]), passthrough, StreamAdapter("x")):
                pass

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        with pytest.raises(ProviderError):
            async for _ in iterate_fragments(async_iter([]), passthrough, StreamAdapter("x")):
                pass


class TestLineDecoders:

    @pytest.mark.asyncio
    async def test_sse(self):
        lines = [": keep-alive", "event: message", 'data: {"a": 1}', "", "data:", 'data:{"b": 2}', "data: [DONE]",
                 'data: {"c": 3}']
        assert [e async for e in iter_sse_json(async_iter(lines), "gemini")] == [{"a": 1}, {"b": 2}]

    @pytest.mark.asyncio
    async def test_sse_non_object(self):
        with pytest.raises(ProviderError, match="Unexpected stream event"):
            async for _ in iter_sse_json(async_iter(["data: [1, 2]"]), "gemini"):
                pass

    @pytest.mark.asyncio
    async def test_ndjson(self):
        lines = ['{"a": 1}', "   ", '{"b": 2}']
        assert [e async for e in iter_ndjson(async_iter(lines), "ollama")] == [{"a": 1}, {"b": 2}]

    @pytest.mark.asyncio
    async def test_ndjson_malformed(self):
        with pytest.raises(ProviderError, match="Malformed stream event from ollama"):
            async for _ in iter_ndjson(async_iter(["{oops"]), "ollama"):
                pass
