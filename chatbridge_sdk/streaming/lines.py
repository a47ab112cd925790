"""Decoders for line-framed HTTP streams (SSE and NDJSON)."""

from __future__ import annotations

import json
from typing import Any, AsyncGenerator, AsyncIterator, Dict

from ..providers.base import ProviderError

SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"


def _parse_json(text: str, provider: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProviderError(
            f"Malformed stream event from {provider}: {text[:200]}",
            provider=provider,
            original_error=e,
        ) from e
    if not isinstance(data, dict):
        raise ProviderError(f"Unexpected stream event from {provider}: {text[:200]}", provider=provider)
    return data


async def iter_sse_json(lines: AsyncIterator[str], provider: str) -> AsyncGenerator[Dict[str, Any], None]:
    """Parse ``data:`` records of a server-sent event stream as JSON objects.

    Comment, event and blank lines are skipped. The ``[DONE]`` sentinel ends
    the iteration.
    """
    async for line in lines:
        line = line.strip()
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        payload = line[len(SSE_DATA_PREFIX):].strip()
        if not payload:
            continue
        if payload == SSE_DONE_SENTINEL:
            return
        yield _parse_json(payload, provider)


async def iter_ndjson(lines: AsyncIterator[str], provider: str) -> AsyncGenerator[Dict[str, Any], None]:
    """Parse newline-delimited JSON records."""
    async for line in lines:
        line = line.strip()
        if line:
            yield _parse_json(line, provider)
