from typing import Optional

from ...models.generation import ProviderType
from ...thinking.grok import GrokThinkingAdapter
from ..openai.adapter import OpenAIProvider


class XAIProvider(OpenAIProvider):
    """
    xAI Grok provider.

    The upstream speaks the Chat Completions wire format at api.x.ai, so the
    OpenAI client is reused; request shape (``max_tokens``), reasoning
    controls and model filtering differ and come from the Grok thinking
    adapter and the ``xai`` keyword data.
    """

    provider_id = ProviderType.XAI
    keyword_family = "xai"

    def __init__(self, thinking_adapter: Optional[GrokThinkingAdapter] = None):
        super().__init__(thinking_adapter or GrokThinkingAdapter())
