"""
Base Thinking Adapter Interface

Thinking adapters form a hierarchy parallel to the provider adapters. Each
one owns the reasoning-specific subset of one upstream's wire format: which
models reason, which request controls turn reasoning on, and where the
reasoning trace hides in responses and stream chunks.

All methods are pure transformations of plain dicts and shared models; the
network call stays in the provider adapter.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..config.model_keywords import get_reasoning_keywords, matches_keywords
from ..models.conversation_types import ChatMessage, MessageRole
from ..models.generation import GenerationConfig
from ..models.thinking import ReasoningTrace, ReasoningValidation, StreamThinkingChunk


class ThinkingAdapter(ABC):
    """
    Abstract base class for reasoning extraction and request building.

    Subclasses set ``keyword_family`` to select the reasoning-model keyword
    list from ``config.model_keywords``.
    """

    keyword_family: str = ""

    def supports_thinking(self, model_id: Optional[str]) -> bool:
        """
        Conservative keyword match against the family's reasoning models.

        Unknown or empty model ids return False.
        """
        return matches_keywords(model_id or "", get_reasoning_keywords(self.keyword_family))

    def build_thinking_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        """
        The family's native request, extended with reasoning controls.

        Reasoning controls are only added when the model supports reasoning,
        whatever the config asks for.
        """
        request = self.build_base_request(messages, config)
        if not self.supports_thinking(config.model):
            return request
        return self.apply_thinking_controls(request, config)

    @abstractmethod
    def build_base_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        """The family's native request without reasoning controls."""

    @abstractmethod
    def apply_thinking_controls(self, request: Dict[str, Any], config: GenerationConfig) -> Dict[str, Any]:
        """Add reasoning controls to a request for a reasoning-capable model."""

    @abstractmethod
    def extract_thinking(self, native_response: Dict[str, Any]) -> Optional[ReasoningTrace]:
        """Reasoning trace of a complete response, or None if there is none."""

    @abstractmethod
    def extract_stream_thinking(self, native_chunk: Dict[str, Any]) -> StreamThinkingChunk:
        """Split one stream chunk into reasoning increment, answer increment and done flag."""

    @abstractmethod
    def validate_reasoning_config(self, config: GenerationConfig) -> ReasoningValidation:
        """Warnings about risky reasoning settings. Never fails."""

    def prepare_context_with_thinking(self, messages: List[ChatMessage]) -> List[ChatMessage]:
        """
        Strip reasoning payloads from assistant turns before replay.

        Families that accept replayed reasoning override this.
        """
        prepared = []
        for message in messages:
            if message.role == MessageRole.ASSISTANT and message.thinking is not None:
                message = message.model_copy(update={"thinking": None})
            prepared.append(message)
        return prepared
