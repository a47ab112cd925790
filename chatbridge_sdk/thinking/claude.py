"""Reasoning support for Claude extended thinking."""

from typing import Any, Dict, List, Optional

from ..config.constants import (
    CLAUDE_DEFAULT_THINKING_BUDGET,
    CLAUDE_MAX_OUTPUT_TOKENS,
    CLAUDE_MIN_THINKING_BUDGET,
)
from ..core.normalization.usage import normalize_usage
from ..models.conversation_types import ChatMessage
from ..models.generation import GenerationConfig
from ..models.thinking import ReasoningTrace, ReasoningValidation, StreamThinkingChunk
from ..providers.anthropic.payloads import THINKING_REJECTED_FIELDS, build_messages_payload
from .base import ThinkingAdapter
from .utils import join_parts, normalize_trace, safe_get

# Messages API stop events
STOP_EVENT_TYPES = ("message_stop",)


class ClaudeThinkingAdapter(ThinkingAdapter):
    """
    Claude 3.7 and Claude 4 models.

    Thinking blocks carry a signature that must be replayed verbatim on the
    next turn, so this family keeps reasoning in the replayed context.
    """

    keyword_family = "claude"

    def resolve_budget(self, config: GenerationConfig) -> int:
        """Budget in tokens: default when unset or dynamic, raised to the floor when too small."""
        budget = config.thinking_budget
        if budget is None or budget == -1:
            return CLAUDE_DEFAULT_THINKING_BUDGET
        return max(budget, CLAUDE_MIN_THINKING_BUDGET)

    def build_base_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        return build_messages_payload(messages, config)

    def apply_thinking_controls(self, request: Dict[str, Any], config: GenerationConfig) -> Dict[str, Any]:
        if not config.enable_thinking or config.thinking_budget == 0:
            return request

        budget = self.resolve_budget(config)
        request = {key: value for key, value in request.items() if key not in THINKING_REJECTED_FIELDS}
        request["thinking"] = {"type": "enabled", "budget_tokens": budget}
        if request.get("max_tokens", 0) <= budget:
            request["max_tokens"] = budget + (config.max_tokens or CLAUDE_DEFAULT_THINKING_BUDGET)
        return request

    def extract_thinking(self, native_response: Dict[str, Any]) -> Optional[ReasoningTrace]:
        blocks = [
            block for block in native_response.get("content") or []
            if isinstance(block, dict) and block.get("type") == "thinking"
        ]
        if not blocks:
            return None

        signatures = [block.get("signature") for block in blocks if block.get("signature")]
        redacted = sum(
            1 for block in native_response.get("content") or []
            if isinstance(block, dict) and block.get("type") == "redacted_thinking"
        )
        return normalize_trace(
            join_parts(block.get("thinking") for block in blocks),
            signature=signatures[-1] if signatures else None,
            redacted_blocks=redacted or None,
        )

    def extract_stream_thinking(self, native_chunk: Dict[str, Any]) -> StreamThinkingChunk:
        event_type = native_chunk.get("type")

        if event_type == "content_block_delta":
            delta = native_chunk.get("delta") or {}
            delta_type = delta.get("type")
            if delta_type == "thinking_delta":
                return StreamThinkingChunk(thinking=delta.get("thinking") or None)
            if delta_type == "text_delta":
                return StreamThinkingChunk(content=delta.get("text") or None)
            if delta_type == "signature_delta":
                return StreamThinkingChunk(signature=delta.get("signature") or None)
            return StreamThinkingChunk()

        if event_type == "message_delta":
            stop_reason = safe_get(native_chunk, "delta", "stop_reason")
            return StreamThinkingChunk(
                done=bool(stop_reason),
                usage=normalize_usage(native_chunk.get("usage"), "claude"),
            )

        return StreamThinkingChunk(done=event_type in STOP_EVENT_TYPES)

    def prepare_context_with_thinking(self, messages: List[ChatMessage]) -> List[ChatMessage]:
        # Replayed thinking blocks (with signatures) are accepted as-is
        return list(messages)

    def validate_reasoning_config(self, config: GenerationConfig) -> ReasoningValidation:
        warnings = []
        budget = config.thinking_budget

        if budget == 0:
            warnings.append("thinking_budget is 0, which disables extended thinking")
        elif budget is not None and budget < 0 and budget != -1:
            warnings.append(f"thinking_budget {budget} is negative; the default budget will be used")
        elif budget is not None and 0 < budget < CLAUDE_MIN_THINKING_BUDGET:
            warnings.append(
                f"thinking_budget {budget} is below the minimum of {CLAUDE_MIN_THINKING_BUDGET}; "
                f"it will be raised to {CLAUDE_MIN_THINKING_BUDGET}"
            )

        if config.max_tokens is None:
            warnings.append("max_tokens is not set; the thinking budget may consume the whole output")
        elif config.max_tokens > CLAUDE_MAX_OUTPUT_TOKENS:
            warnings.append(
                f"max_tokens {config.max_tokens} exceeds the Claude limit of {CLAUDE_MAX_OUTPUT_TOKENS}"
            )

        if config.temperature is not None and config.top_p is not None:
            warnings.append("Setting both temperature and top_p is not recommended for Claude models")
        return ReasoningValidation(warnings=warnings)
