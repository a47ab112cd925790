"""Reasoning support for xAI Grok models (OpenAI-compatible wire format)."""

from typing import Any, Dict, List, Optional

from ..config.constants import GROK_MAX_OUTPUT_TOKENS
from ..core.normalization.usage import normalize_usage
from ..models.conversation_types import ChatMessage
from ..models.generation import GenerationConfig
from ..models.thinking import ReasoningMode, ReasoningTrace, ReasoningValidation, StreamThinkingChunk
from ..providers.openai.payloads import build_chat_payload
from .base import ThinkingAdapter
from .utils import VALID_EFFORTS, is_valid_reasoning_effort, normalize_trace, safe_get

VALID_MODES = frozenset(mode.value for mode in ReasoningMode)


class GrokThinkingAdapter(ThinkingAdapter):
    """
    Grok 3+ models.

    Unlike OpenAI reasoning models, Grok keeps sampling parameters; reasoning
    is controlled with ``reasoning_effort`` and ``reasoning_mode``.
    """

    keyword_family = "xai"

    def build_base_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        return build_chat_payload(messages, config, max_tokens_field="max_tokens")

    def apply_thinking_controls(self, request: Dict[str, Any], config: GenerationConfig) -> Dict[str, Any]:
        if config.reasoning_effort:
            request["reasoning_effort"] = config.reasoning_effort
        if config.reasoning_mode:
            request["reasoning_mode"] = config.reasoning_mode
        return request

    def extract_thinking(self, native_response: Dict[str, Any]) -> Optional[ReasoningTrace]:
        message = safe_get(native_response, "choices", 0, "message") or {}
        reasoning = message.get("reasoning_content")
        if isinstance(reasoning, str) and reasoning.strip():
            tokens = safe_get(native_response, "usage", "reasoning_tokens")
            if tokens is None:
                tokens = safe_get(native_response, "usage", "completion_tokens_details", "reasoning_tokens")
            return normalize_trace(
                reasoning,
                tokens=tokens,
                effort=message.get("reasoning_effort"),
                reasoning_mode=native_response.get("reasoning_mode"),
            )

        root = native_response.get("reasoning_content")
        if isinstance(root, str) and root.strip():
            return normalize_trace(root, reasoning_mode=native_response.get("reasoning_mode"))
        return None

    def extract_stream_thinking(self, native_chunk: Dict[str, Any]) -> StreamThinkingChunk:
        delta = safe_get(native_chunk, "choices", 0, "delta") or {}
        thinking = delta.get("reasoning_content")
        content = delta.get("content")
        return StreamThinkingChunk(
            thinking=thinking if isinstance(thinking, str) and thinking else None,
            content=content if isinstance(content, str) and content else None,
            done=bool(safe_get(native_chunk, "choices", 0, "finish_reason")),
            usage=normalize_usage(native_chunk.get("usage"), "xai"),
        )

    def validate_reasoning_config(self, config: GenerationConfig) -> ReasoningValidation:
        warnings = []
        if config.reasoning_effort is not None and not is_valid_reasoning_effort(config.reasoning_effort):
            warnings.append(
                f"Invalid reasoning_effort: {config.reasoning_effort}. "
                f"Valid values: {', '.join(sorted(VALID_EFFORTS))}"
            )
        if config.reasoning_mode is not None and config.reasoning_mode not in VALID_MODES:
            warnings.append(
                f"Invalid reasoning_mode: {config.reasoning_mode}. "
                f"Valid values: {', '.join(sorted(VALID_MODES))}"
            )
        if config.max_tokens is not None and config.max_tokens > GROK_MAX_OUTPUT_TOKENS:
            warnings.append(
                f"max_tokens {config.max_tokens} exceeds the Grok limit of {GROK_MAX_OUTPUT_TOKENS}"
            )
        if config.reasoning_mode == ReasoningMode.DISABLED.value and config.enable_thinking:
            warnings.append(
                'reasoning_mode is set to "disabled", which will turn off thinking chain functionality'
            )
        return ReasoningValidation(warnings=warnings)
