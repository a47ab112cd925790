"""
Provider Adapters Layer

This layer contains all upstream-specific implementations. Each adapter
translates between the SDK's normalized chat contract and one upstream's
wire format. Concrete adapters are looked up by provider id through
``providers.registry``.
"""

from .base import (
    ChatBridgeError,
    ConfigurationError,
    ProviderAdapter,
    ProviderError,
    UnsupportedOperationError,
)
from .errors import ErrorMapper

__all__ = [
    "ChatBridgeError",
    "ConfigurationError",
    "ErrorMapper",
    "ProviderAdapter",
    "ProviderError",
    "UnsupportedOperationError",
]
