"""Endpoint helpers for the raw-HTTP adapters."""

from typing import Optional

from ..config.constants import DEFAULT_BASE_URLS

# Path templates per family, relative to the base URL
ENDPOINTS = {
    "gemini": {
        "generate": "/v1beta/models/{model}:generateContent",
        "stream": "/v1beta/models/{model}:streamGenerateContent?alt=sse",
        "models": "/v1beta/models",
    },
    "ollama": {
        "chat": "/api/chat",
        "models": "/api/tags",
    },
}


def build_api_url(base_url: str, endpoint: str) -> str:
    """Join a base URL and an endpoint path with exactly one slash between them."""
    base = base_url.rstrip("/")
    if not endpoint.startswith("/"):
        endpoint = "/" + endpoint
    return base + endpoint


def resolve_base_url(family: str, base_url: Optional[str]) -> str:
    """The configured endpoint override, or the family default."""
    return base_url or DEFAULT_BASE_URLS[family]


def endpoint_url(family: str, name: str, base_url: Optional[str] = None, **params: str) -> str:
    """Full URL of a named family endpoint, e.g. ``endpoint_url("gemini", "generate", model="gemini-pro")``."""
    path = ENDPOINTS[family][name].format(**params)
    return build_api_url(resolve_base_url(family, base_url), path)
