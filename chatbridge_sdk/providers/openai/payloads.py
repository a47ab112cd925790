from typing import Any, Dict, List

from ...config.constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from ...core.normalization.params import format_messages, normalize_params
from ...models.conversation_types import ChatMessage
from ...models.generation import GenerationConfig

# Sampling fields reasoning models reject outright
REASONING_REJECTED_FIELDS = ("temperature", "top_p", "frequency_penalty", "presence_penalty")


def build_chat_payload(
    messages: List[ChatMessage],
    config: GenerationConfig,
    max_tokens_field: str = "max_completion_tokens",
) -> Dict[str, Any]:
    """Build a Chat Completions request body.

    Roles pass through verbatim. The output bound goes under
    ``max_tokens_field``, which differs between OpenAI and compatible
    upstreams.
    """
    field_map = {
        "temperature": "temperature",
        "top_p": "top_p",
        "frequency_penalty": "frequency_penalty",
        "presence_penalty": "presence_penalty",
        "stop": "stop",
        "max_tokens": max_tokens_field,
    }
    payload: Dict[str, Any] = {
        "model": config.model,
        "messages": format_messages(messages),
    }
    payload.update(
        normalize_params(
            config,
            field_map,
            defaults={"temperature": DEFAULT_TEMPERATURE, max_tokens_field: DEFAULT_MAX_TOKENS},
        )
    )
    payload["stream"] = False
    return payload


def strip_reasoning_rejected_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if key not in REASONING_REJECTED_FIELDS}
