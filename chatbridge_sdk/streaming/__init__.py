"""Streaming layer for incremental responses.

This layer handles:
- Turning decoded upstream chunks into StreamFragments
- Enforcing the single terminal fragment and abnormal-close errors
- Line-framed stream decoding (SSE and NDJSON)
- Streaming metrics
"""

from .adapter import StreamAdapter, iterate_fragments
from .lines import iter_ndjson, iter_sse_json

__all__ = [
    "StreamAdapter",
    "iterate_fragments",
    "iter_ndjson",
    "iter_sse_json",
]
