"""Reasoning support for Gemini thinking models."""

from typing import Any, Dict, List, Optional

from ..config.constants import GEMINI_MAX_OUTPUT_TOKENS, GEMINI_UNSPECIFIED_FINISH_REASON
from ..core.normalization.usage import normalize_usage
from ..models.conversation_types import ChatMessage
from ..models.generation import GenerationConfig
from ..models.thinking import ReasoningTrace, ReasoningValidation, StreamThinkingChunk
from ..providers.gemini.payloads import build_generate_payload
from .base import ThinkingAdapter
from .utils import join_parts, normalize_trace, safe_get


def _parts(raw: Dict[str, Any]) -> List[Dict[str, Any]]:
    parts = safe_get(raw, "candidates", 0, "content", "parts") or []
    return [part for part in parts if isinstance(part, dict)]


class GeminiThinkingAdapter(ThinkingAdapter):
    """
    Gemini thinking models.

    Reasoning parts are ordinary content parts flagged ``thought: true``; the
    continuation signature rides on a part as ``thoughtSignature``.
    """

    keyword_family = "gemini"

    def build_base_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        return build_generate_payload(messages, config)

    def apply_thinking_controls(self, request: Dict[str, Any], config: GenerationConfig) -> Dict[str, Any]:
        thinking_config: Dict[str, Any] = {}
        if config.thinking_budget is not None:
            thinking_config["thinkingBudget"] = config.thinking_budget

        include_thoughts = config.include_thoughts
        if include_thoughts is None and config.enable_thinking:
            include_thoughts = True
        if include_thoughts is not None:
            thinking_config["includeThoughts"] = include_thoughts

        if thinking_config:
            request.setdefault("generationConfig", {})["thinkingConfig"] = thinking_config
        return request

    def extract_thinking(self, native_response: Dict[str, Any]) -> Optional[ReasoningTrace]:
        parts = _parts(native_response)
        thoughts = [part.get("text") for part in parts if part.get("thought")]
        content = join_parts(thoughts)
        if content is None:
            return None

        signature = next(
            (part["thoughtSignature"] for part in parts if part.get("thoughtSignature")), None
        ) or safe_get(native_response, "thoughtSignatures", 0)
        return normalize_trace(
            content,
            tokens=safe_get(native_response, "usageMetadata", "thoughtsTokenCount"),
            signature=signature,
        )

    def extract_stream_thinking(self, native_chunk: Dict[str, Any]) -> StreamThinkingChunk:
        thinking, content = [], []
        signature = None
        for part in _parts(native_chunk):
            signature = part.get("thoughtSignature") or signature
            text = part.get("text")
            if not isinstance(text, str) or not text:
                continue
            (thinking if part.get("thought") else content).append(text)

        finish_reason = safe_get(native_chunk, "candidates", 0, "finishReason")
        done = bool(finish_reason) and finish_reason != GEMINI_UNSPECIFIED_FINISH_REASON
        return StreamThinkingChunk(
            thinking="".join(thinking) or None,
            content="".join(content) or None,
            signature=signature,
            done=done,
            usage=normalize_usage(native_chunk.get("usageMetadata"), "gemini") if done else None,
        )

    def validate_reasoning_config(self, config: GenerationConfig) -> ReasoningValidation:
        warnings = []
        if config.thinking_budget == 0:
            warnings.append("thinking_budget is 0, which disables thinking")
        if config.include_thoughts is False and config.enable_thinking:
            warnings.append("include_thoughts is false; the reasoning trace will not be returned")
        if config.max_tokens is None:
            warnings.append("max_tokens is not set; thinking may use most of the output budget")
        elif config.max_tokens > GEMINI_MAX_OUTPUT_TOKENS:
            warnings.append(
                f"max_tokens {config.max_tokens} exceeds the Gemini limit of {GEMINI_MAX_OUTPUT_TOKENS}"
            )
        return ReasoningValidation(warnings=warnings)
