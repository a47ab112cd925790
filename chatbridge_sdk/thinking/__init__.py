"""Reasoning-trace support, one adapter per reasoning-capable upstream.

Family adapters and the registry are imported from their modules
(``thinking.registry.get_thinking_adapter``); this package only exposes the
base class so that payload modules can import the utilities cheaply.
"""

from .base import ThinkingAdapter

__all__ = ["ThinkingAdapter"]
