from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

from ..base import to_plain_dict


async def iter_chunk_dicts(stream: Any) -> AsyncGenerator[Dict[str, Any], None]:
    """Iterate an SDK event stream (Chat Completions or Messages) as plain dicts.

    The caller owns the stream and closes it.
    """
    async for chunk in stream:
        yield to_plain_dict(chunk)
