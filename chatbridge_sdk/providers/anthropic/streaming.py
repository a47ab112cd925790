from __future__ import annotations

from typing import Any, Dict

from ...models.thinking import StreamThinkingChunk
from ...models.usage import TokenUsage
from ...thinking.base import ThinkingAdapter
from ...thinking.utils import safe_get


class MessagesStreamDecoder:
    """Decode Messages API stream events for one stream.

    Input tokens arrive on ``message_start`` and output tokens on
    ``message_delta``; the decoder merges them into the usage reported with
    the terminal fragment.
    """

    def __init__(self, thinking_adapter: ThinkingAdapter):
        self.thinking_adapter = thinking_adapter
        self.input_tokens = 0

    def __call__(self, event: Dict[str, Any]) -> StreamThinkingChunk:
        if event.get("type") == "message_start":
            self.input_tokens = int(safe_get(event, "message", "usage", "input_tokens") or 0)

        decoded = self.thinking_adapter.extract_stream_thinking(event)
        if decoded.usage is not None and self.input_tokens and not decoded.usage.prompt_tokens:
            completion_tokens = decoded.usage.completion_tokens
            decoded = decoded.model_copy(update={
                "usage": TokenUsage(
                    prompt_tokens=self.input_tokens,
                    completion_tokens=completion_tokens,
                    total_tokens=self.input_tokens + completion_tokens,
                )
            })
        return decoded
