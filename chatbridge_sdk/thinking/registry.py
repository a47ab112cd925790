"""Registration table mapping provider ids to thinking adapters."""

from typing import Dict, Type

from ..models.generation import ProviderType
from .base import ThinkingAdapter
from .claude import ClaudeThinkingAdapter
from .gemini import GeminiThinkingAdapter
from .grok import GrokThinkingAdapter
from .ollama import OllamaThinkingAdapter
from .openai import OpenAIResponsesThinkingAdapter, OpenAIThinkingAdapter

THINKING_ADAPTERS: Dict[ProviderType, Type[ThinkingAdapter]] = {
    ProviderType.OPENAI: OpenAIThinkingAdapter,
    ProviderType.OPENAI_RESPONSES: OpenAIResponsesThinkingAdapter,
    ProviderType.CLAUDE: ClaudeThinkingAdapter,
    ProviderType.GEMINI: GeminiThinkingAdapter,
    ProviderType.OLLAMA: OllamaThinkingAdapter,
    ProviderType.XAI: GrokThinkingAdapter,
}


def get_thinking_adapter(provider) -> ThinkingAdapter:
    """
    Fresh thinking adapter for a provider id.

    Raises:
        ValueError: If the id is not a known provider
    """
    return THINKING_ADAPTERS[ProviderType(provider)]()


def has_thinking_adapter(provider) -> bool:
    try:
        return ProviderType(provider) in THINKING_ADAPTERS
    except ValueError:
        return False
