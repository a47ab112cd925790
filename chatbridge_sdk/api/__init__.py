"""
Public API Layer

This layer contains the public-facing API of the ChatBridge SDK.
All user-facing classes should be exposed through this layer.
"""

from .client import ChatBridgeClient

__all__ = ["ChatBridgeClient"]
