"""Data models shared by every adapter."""

from .conversation_types import ChatMessage, MessageRole
from .generation import (
    GenerationConfig,
    ModelInfo,
    NormalizedResponse,
    ProviderType,
    StreamFragment,
    ValidationResult,
)
from .thinking import (
    ReasoningEffort,
    ReasoningMode,
    ReasoningTrace,
    ReasoningValidation,
    StreamThinkingChunk,
    ThinkingDelta,
)
from .usage import TokenUsage

__all__ = [
    # Conversation models
    "ChatMessage",
    "MessageRole",

    # Request / response models
    "ProviderType",
    "GenerationConfig",
    "NormalizedResponse",
    "StreamFragment",
    "ModelInfo",
    "ValidationResult",
    "TokenUsage",

    # Reasoning models
    "ReasoningEffort",
    "ReasoningMode",
    "ReasoningTrace",
    "ReasoningValidation",
    "StreamThinkingChunk",
    "ThinkingDelta",
]
