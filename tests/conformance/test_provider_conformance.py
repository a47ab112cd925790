"""Behaviour every provider adapter shares, whatever its wire format."""

import pytest

from chatbridge_sdk.models.conversation_types import ChatMessage, MessageRole
from chatbridge_sdk.models.generation import NormalizedResponse, StreamFragment
from chatbridge_sdk.providers.base import ProviderError, UnsupportedOperationError

MESSAGES = [ChatMessage(role=MessageRole.USER, content="What is 2+2?")]


class TestBlockingConformance:

    @pytest.mark.asyncio
    async def test_normalized_response(self, harness):
        response = await harness.blocking("4").chat(MESSAGES, harness.config)

        assert isinstance(response, NormalizedResponse)
        assert response.content == "4"
        assert response.provider == harness.name
        assert response.model
        assert response.usage.prompt_tokens == 10
        assert response.usage.completion_tokens == 5
        assert response.usage.total_tokens == 15

    @pytest.mark.asyncio
    async def test_no_reasoning_means_none(self, harness):
        response = await harness.blocking("4").chat(MESSAGES, harness.config)
        assert response.thinking is None

    @pytest.mark.asyncio
    async def test_reasoning_separated_from_answer(self, harness):
        response = await harness.blocking("4", thinking="compute 2+2").chat(MESSAGES, harness.config)

        assert response.content == "4"
        assert response.thinking is not None
        assert response.thinking.content == "compute 2+2"
        assert "compute" not in response.content

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n"])
    async def test_empty_answer_is_error(self, harness, text):
        with pytest.raises(ProviderError) as exc_info:
            await harness.blocking(text).chat(MESSAGES, harness.config)

        assert exc_info.value.provider == harness.name


class TestStreamingConformance:

    @pytest.mark.asyncio
    async def test_exactly_one_terminal_fragment(self, streaming_harness):
        provider, upstream = streaming_harness.streaming(["Hel", "lo", "!"])

        fragments = [f async for f in provider.stream_chat(MESSAGES, streaming_harness.config)]

        assert all(isinstance(f, StreamFragment) for f in fragments)
        assert "".join(f.content for f in fragments) == "Hello!"
        assert [f.done for f in fragments].count(True) == 1
        assert fragments[-1].done is True
        assert all(f.provider == streaming_harness.name for f in fragments)
        assert upstream.closed

    @pytest.mark.asyncio
    async def test_fragments_in_arrival_order(self, streaming_harness):
        chunks = [f"w{i} " for i in range(8)]
        provider, _ = streaming_harness.streaming(chunks)

        contents = [f.content async for f in provider.stream_chat(MESSAGES, streaming_harness.config) if f.content]

        assert contents == chunks

    @pytest.mark.asyncio
    async def test_abnormal_close_raises(self, streaming_harness):
        provider, upstream = streaming_harness.streaming(["Hel", "lo"], complete=False)

        received = []
        with pytest.raises(ProviderError):
            async for fragment in provider.stream_chat(MESSAGES, streaming_harness.config):
                received.append(fragment)

        assert not any(f.done for f in received)
        assert upstream.closed

    @pytest.mark.asyncio
    async def test_early_close_releases_upstream(self, streaming_harness):
        provider, upstream = streaming_harness.streaming(["a", "b", "c", "d"])

        stream = provider.stream_chat(MESSAGES, streaming_harness.config)
        first = await stream.__anext__()
        await stream.aclose()

        assert first.content == "a"
        assert upstream.closed


@pytest.mark.asyncio
async def test_non_streaming_adapter_refuses(harness):
    if harness.streams:
        pytest.skip("adapter streams")
    provider = harness.blocking()

    assert provider.supports_streaming is False
    with pytest.raises(UnsupportedOperationError):
        async for _ in provider.stream_chat(MESSAGES, harness.config):
            pass
