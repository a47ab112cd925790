"""Normalization layer for standardizing provider interfaces.

This layer handles:
- Parameter normalization across providers
- Usage data normalization
"""

from .params import format_messages, normalize_params, role_value
from .usage import normalize_usage

__all__ = ["format_messages", "normalize_params", "normalize_usage", "role_value"]
