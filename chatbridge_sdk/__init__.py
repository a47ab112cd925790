"""
ChatBridge SDK - one chat contract over many LLM backends.

This package provides a unified interface for:
- OpenAI (Chat Completions and the Responses API)
- Anthropic (Claude models)
- Google (Gemini models)
- xAI (Grok models)
- Ollama (local models)

Features:
- Normalized requests, responses and streams across all providers
- Reasoning-trace extraction for thinking-capable models
- Per-user and environment configuration resolution with validation
"""

__version__ = "0.1.0"

from .api.client import ChatBridgeClient
from .core.routing import (
    ConfigLookupResult,
    ConfigResolver,
    EnvironmentConfigLoader,
    InMemoryUserConfigStore,
    StoredProviderConfig,
    resolve_provider,
)
from .models.conversation_types import ChatMessage, MessageRole
from .models.generation import (
    GenerationConfig,
    ModelInfo,
    NormalizedResponse,
    ProviderType,
    StreamFragment,
    ValidationResult,
)
from .models.thinking import ReasoningEffort, ReasoningTrace
from .models.usage import TokenUsage
from .providers.base import (
    ChatBridgeError,
    ConfigurationError,
    ProviderError,
    UnsupportedOperationError,
)

__all__ = [
    # Main client
    "ChatBridgeClient",

    # Configuration
    "ConfigResolver",
    "ConfigLookupResult",
    "EnvironmentConfigLoader",
    "InMemoryUserConfigStore",
    "StoredProviderConfig",
    "resolve_provider",

    # Models
    "ProviderType",
    "ChatMessage",
    "MessageRole",
    "GenerationConfig",
    "NormalizedResponse",
    "StreamFragment",
    "ModelInfo",
    "ValidationResult",
    "TokenUsage",
    "ReasoningEffort",
    "ReasoningTrace",

    # Errors
    "ChatBridgeError",
    "ConfigurationError",
    "ProviderError",
    "UnsupportedOperationError",
]
