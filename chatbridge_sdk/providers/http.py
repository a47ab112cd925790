"""
Shared httpx plumbing for the raw-HTTP adapters (Gemini, Ollama).

Adapters open one AsyncClient per call; tests inject an
``httpx.MockTransport`` through the adapter constructor.
"""

from typing import Any, Dict, Optional, Union

import httpx

from .base import ProviderError

# No client-side timeout unless the caller configures one
TimeoutTypes = Union[None, float, httpx.Timeout]


class HTTPProviderMixin:
    """Client construction and response checking for httpx-based adapters."""

    def _init_http(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: TimeoutTypes = None,
    ) -> None:
        self._transport = transport
        self._timeout = timeout

    def _create_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)


async def check_response(response: httpx.Response) -> None:
    """Raise httpx.HTTPStatusError for error statuses, with the body loaded for the message."""
    if response.is_error:
        await response.aread()
        response.raise_for_status()


def parse_json_body(response: httpx.Response, provider: str) -> Dict[str, Any]:
    """Decode a JSON object body or raise ProviderError for malformed payloads."""
    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(
            f"Malformed response from {provider}: {response.text[:200]}",
            provider=provider,
            status_code=response.status_code,
            original_error=e,
        ) from e
    if not isinstance(data, dict):
        raise ProviderError(
            f"Unexpected response from {provider}: expected a JSON object",
            provider=provider,
            status_code=response.status_code,
        )
    return data
