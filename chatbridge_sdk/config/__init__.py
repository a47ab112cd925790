"""Configuration module for ChatBridge SDK."""

from .constants import *
from .model_keywords import (
    get_always_include_keywords,
    get_non_chat_keywords,
    get_reasoning_keywords,
    load_model_keywords,
    matches_keywords,
    reload_model_keywords,
)

__all__ = [
    "load_model_keywords",
    "reload_model_keywords",
    "get_reasoning_keywords",
    "get_non_chat_keywords",
    "get_always_include_keywords",
    "matches_keywords",
]
