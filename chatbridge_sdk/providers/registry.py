"""Registration table mapping provider ids to adapter classes."""

from typing import Dict, Type

from ..models.generation import ProviderType
from .anthropic.adapter import AnthropicProvider
from .base import ProviderAdapter
from .gemini.adapter import GeminiProvider
from .ollama.adapter import OllamaProvider
from .openai.adapter import OpenAIProvider
from .openai_responses.adapter import OpenAIResponsesProvider
from .xai.adapter import XAIProvider

PROVIDER_ADAPTERS: Dict[ProviderType, Type[ProviderAdapter]] = {
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.OPENAI_RESPONSES: OpenAIResponsesProvider,
    ProviderType.CLAUDE: AnthropicProvider,
    ProviderType.GEMINI: GeminiProvider,
    ProviderType.OLLAMA: OllamaProvider,
    ProviderType.XAI: XAIProvider,
}


def create_default_providers() -> Dict[ProviderType, ProviderAdapter]:
    """One adapter instance per provider id. Adapters are stateless, so instances can be shared."""
    return {provider: adapter_class() for provider, adapter_class in PROVIDER_ADAPTERS.items()}
