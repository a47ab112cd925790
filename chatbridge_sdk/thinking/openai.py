"""Reasoning support for OpenAI Chat Completions and Responses API models."""

from typing import Any, Dict, List, Optional

from ..config.constants import OPENAI_MAX_REASONING_TOKENS
from ..config.model_keywords import get_research_keywords, matches_keywords
from ..core.normalization.usage import normalize_usage
from ..models.conversation_types import ChatMessage
from ..models.generation import GenerationConfig
from ..models.thinking import ReasoningTrace, ReasoningValidation, StreamThinkingChunk
from ..providers.openai.payloads import build_chat_payload, strip_reasoning_rejected_fields
from ..providers.openai_responses.payloads import build_responses_payload
from .base import ThinkingAdapter
from .utils import VALID_EFFORTS, is_valid_reasoning_effort, join_parts, normalize_trace, safe_get


def _reasoning_item_text(item: Dict[str, Any]) -> Optional[str]:
    """Text of one ``output[type=reasoning]`` item: its content, else its summary."""
    content = join_parts(
        part.get("text") for part in item.get("content") or [] if isinstance(part, dict)
    )
    if content:
        return content
    return join_parts(
        part.get("text") for part in item.get("summary") or [] if isinstance(part, dict)
    )


class OpenAIThinkingAdapter(ThinkingAdapter):
    """
    o-series and gpt-5 models.

    Reasoning models reject sampling parameters, so those are dropped from
    the request; ``reasoning_effort`` is forwarded when valid.
    """

    keyword_family = "openai"
    provider_name = "openai"
    max_tokens_field = "max_completion_tokens"

    def build_base_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        return build_chat_payload(messages, config, self.max_tokens_field)

    def apply_thinking_controls(self, request: Dict[str, Any], config: GenerationConfig) -> Dict[str, Any]:
        request = strip_reasoning_rejected_fields(request)
        if is_valid_reasoning_effort(config.reasoning_effort):
            request["reasoning_effort"] = config.reasoning_effort
        return request

    def extract_thinking(self, native_response: Dict[str, Any]) -> Optional[ReasoningTrace]:
        effort = safe_get(native_response, "reasoning", "effort")

        # 1. Dedicated root field
        root = native_response.get("reasoning_content")
        if isinstance(root, str) and root.strip():
            return normalize_trace(root, effort=effort)

        # 2. Reasoning output items (Responses API)
        items = [
            item for item in native_response.get("output") or []
            if isinstance(item, dict) and item.get("type") == "reasoning"
        ]
        if items:
            content = join_parts(_reasoning_item_text(item) for item in items)
            summary = join_parts(
                part.get("text")
                for item in items
                for part in item.get("summary") or []
                if isinstance(part, dict)
            )
            trace = normalize_trace(
                content,
                tokens=safe_get(native_response, "usage", "output_tokens_details", "reasoning_tokens"),
                effort=effort,
                summary=summary if summary != content else None,
                reasoning_item_ids=[item.get("id") for item in items if item.get("id")] or None,
            )
            if trace is not None:
                return trace

        # 3. Message field (Chat Completions)
        message_reasoning = safe_get(native_response, "choices", 0, "message", "reasoning_content")
        if isinstance(message_reasoning, str) and message_reasoning.strip():
            return normalize_trace(
                message_reasoning,
                tokens=safe_get(native_response, "usage", "completion_tokens_details", "reasoning_tokens"),
                effort=effort,
            )
        return None

    def extract_stream_thinking(self, native_chunk: Dict[str, Any]) -> StreamThinkingChunk:
        delta = safe_get(native_chunk, "choices", 0, "delta") or {}
        thinking = delta.get("reasoning_content")
        content = delta.get("content")
        return StreamThinkingChunk(
            thinking=thinking if isinstance(thinking, str) and thinking else None,
            content=content if isinstance(content, str) and content else None,
            done=bool(safe_get(native_chunk, "choices", 0, "finish_reason")),
            usage=normalize_usage(native_chunk.get("usage"), self.provider_name),
        )

    def validate_reasoning_config(self, config: GenerationConfig) -> ReasoningValidation:
        warnings = []
        reasoning_model = self.supports_thinking(config.model)

        if reasoning_model and config.temperature is not None:
            warnings.append(
                f"Model {config.model} does not support temperature parameter. It will be ignored."
            )
        if config.reasoning_effort is not None and not is_valid_reasoning_effort(config.reasoning_effort):
            warnings.append(
                f"Invalid reasoning_effort: {config.reasoning_effort}. "
                f"Valid values: {', '.join(sorted(VALID_EFFORTS))}"
            )
        if config.max_tokens is not None and config.max_tokens > OPENAI_MAX_REASONING_TOKENS:
            warnings.append(
                f"max_tokens {config.max_tokens} exceeds {OPENAI_MAX_REASONING_TOKENS}; "
                "reasoning models may reject or truncate the request"
            )
        if config.reasoning_effort is not None and not reasoning_model:
            warnings.append(
                f"Model {config.model} does not support reasoning; reasoning_effort will be ignored"
            )
        return ReasoningValidation(warnings=warnings)


class OpenAIResponsesThinkingAdapter(OpenAIThinkingAdapter):
    """Responses API variant: typed input parts and a ``reasoning`` request object."""

    provider_name = "openai-responses"

    def uses_typed_parts(self, model_id: Optional[str]) -> bool:
        return self.supports_thinking(model_id) or matches_keywords(
            model_id or "", get_research_keywords(self.keyword_family)
        )

    def build_base_request(self, messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
        return build_responses_payload(messages, config, typed_parts=self.uses_typed_parts(config.model))

    def apply_thinking_controls(self, request: Dict[str, Any], config: GenerationConfig) -> Dict[str, Any]:
        request = strip_reasoning_rejected_fields(request)
        reasoning: Dict[str, Any] = {"summary": "auto"}
        if is_valid_reasoning_effort(config.reasoning_effort):
            reasoning["effort"] = config.reasoning_effort
        request["reasoning"] = reasoning
        return request
