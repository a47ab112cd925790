"""Reasoning support for local models served by Ollama."""

from typing import Any, Dict, List, Optional

from ..config.constants import OLLAMA_MIN_REASONING_CONTEXT
from ..core.normalization.usage import normalize_usage
from ..models.conversation_types import ChatMessage
from ..models.generation import GenerationConfig
from ..models.thinking import ReasoningTrace, ReasoningValidation, StreamThinkingChunk
from ..providers.ollama.payloads import build_chat_payload
from .base import ThinkingAdapter
from .utils import normalize_trace, safe_get


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


class OllamaThinkingAdapter(ThinkingAdapter):
    """
    Local reasoning models (DeepSeek-R1, Qwen and Llama reasoning variants).

    Reasoning is switched on with the ``think`` flag; the trace comes back as
    ``message.thinking`` or, for DeepSeek-style models, ``reasoning_content``.
    """

    keyword_family = "ollama"

    def build_base_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        return build_chat_payload(messages, config)

    def apply_thinking_controls(self, request: Dict[str, Any], config: GenerationConfig) -> Dict[str, Any]:
        if config.enable_thinking:
            request["think"] = True
        return request

    def extract_thinking(self, native_response: Dict[str, Any]) -> Optional[ReasoningTrace]:
        tokens = safe_get(native_response, "usage", "reasoning_tokens")
        candidates = (
            (safe_get(native_response, "message", "reasoning_content"), "ollama_reasoning_content"),
            (safe_get(native_response, "message", "thinking"), "ollama_thinking"),
            (native_response.get("reasoning_content"), "ollama_root_reasoning_content"),
        )
        for content, source in candidates:
            if isinstance(content, str) and content.strip():
                return normalize_trace(content, tokens=tokens, type=source)
        return None

    def extract_stream_thinking(self, native_chunk: Dict[str, Any]) -> StreamThinkingChunk:
        message = native_chunk.get("message") or {}
        thinking = _text(message.get("thinking")) or _text(message.get("reasoning_content"))
        done = bool(native_chunk.get("done"))
        return StreamThinkingChunk(
            thinking=thinking,
            content=_text(message.get("content")),
            done=done,
            usage=normalize_usage(native_chunk, "ollama") if done else None,
        )

    def validate_reasoning_config(self, config: GenerationConfig) -> ReasoningValidation:
        warnings = []
        if not self.supports_thinking(config.model):
            return ReasoningValidation(warnings=warnings)

        if not config.enable_thinking:
            warnings.append(
                f"Model {config.model} supports reasoning but enable_thinking is not set"
            )
        if config.num_predict is None and config.max_tokens is None:
            warnings.append("No token limit set; reasoning models may generate very long output")
        if config.num_ctx is not None and config.num_ctx < OLLAMA_MIN_REASONING_CONTEXT:
            warnings.append(
                f"num_ctx {config.num_ctx} may be too small for reasoning models. "
                f"Consider using at least {OLLAMA_MIN_REASONING_CONTEXT}."
            )
        return ReasoningValidation(warnings=warnings)
