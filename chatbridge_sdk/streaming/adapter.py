from __future__ import annotations

import time
from typing import Any, AsyncGenerator, AsyncIterator, Callable, Dict, Optional

from ..models.generation import StreamFragment
from ..models.thinking import StreamThinkingChunk, ThinkingDelta
from ..providers.base import ProviderError


class StreamAdapter:
    """Turns decoded upstream chunks into StreamFragments for one stream.

    Tracks streaming metrics and enforces the fragment sequence rules: at
    most one terminal fragment, and an error when the upstream closes
    without a completion signal.
    """

    def __init__(self, provider: str, model: Optional[str] = None):
        """Initialize StreamAdapter.

        Args:
            provider: Provider id reported on every fragment
            model: Model id reported on every fragment
        """
        self.provider = provider
        self.model = model or ""
        self._chunk_count = 0
        self._total_chars = 0
        self._start_time: Optional[float] = None
        self._stream_completed = False

    def start_stream(self) -> None:
        self._start_time = time.time()

    @property
    def completed(self) -> bool:
        return self._stream_completed

    def to_fragment(self, decoded: StreamThinkingChunk) -> Optional[StreamFragment]:
        """Build the fragment for one decoded chunk.

        Returns None for chunks that carry no text, no reasoning, no signature
        and no completion signal (role headers, keep-alives, lifecycle events).
        """
        if self._stream_completed:
            raise ProviderError(
                f"{self.provider} stream produced data after completion", provider=self.provider
            )

        content = decoded.content or ""
        thinking = decoded.thinking or ""
        signature = decoded.signature
        if not content and not thinking and not signature and not decoded.done:
            return None

        self._chunk_count += 1
        self._total_chars += len(content) + len(thinking)
        if decoded.done:
            self._stream_completed = True

        return StreamFragment(
            content=content,
            done=decoded.done,
            model=self.model,
            provider=self.provider,
            thinking=(
                ThinkingDelta(content=thinking, done=decoded.done, signature=signature)
                if thinking or signature else None
            ),
            usage=decoded.usage,
        )

    def ensure_completed(self) -> None:
        """Raise if the upstream closed before signalling completion."""
        if not self._stream_completed:
            raise ProviderError(
                f"{self.provider} stream ended before completion", provider=self.provider
            )

    def get_metrics(self) -> Dict[str, Any]:
        duration = time.time() - self._start_time if self._start_time else 0.0
        return {
            "chunks": self._chunk_count,
            "total_chars": self._total_chars,
            "duration_seconds": duration,
            "chunks_per_second": self._chunk_count / duration if duration > 0 else 0,
        }


async def iterate_fragments(
    chunks: AsyncIterator[Dict[str, Any]],
    decode: Callable[[Dict[str, Any]], StreamThinkingChunk],
    adapter: StreamAdapter,
) -> AsyncGenerator[StreamFragment, None]:
    """Yield one fragment per meaningful upstream chunk, in arrival order.

    Stops right after the terminal fragment; raises ProviderError when the
    chunk source is exhausted first.
    """
    adapter.start_stream()
    async for raw in chunks:
        fragment = adapter.to_fragment(decode(raw))
        if fragment is None:
            continue
        yield fragment
        if fragment.done:
            return
    adapter.ensure_completed()
