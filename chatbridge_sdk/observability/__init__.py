"""Observability layer.

This layer handles structured logging for provider adapters: request
timing, token usage and streaming metrics.
"""

from .logging import ProviderLogger

__all__ = [
    "ProviderLogger",
]
