from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ...config.constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from ...core.normalization.params import normalize_params
from ...models.conversation_types import ChatMessage, MessageRole
from ...models.generation import GenerationConfig

# Sampling fields the Messages API rejects while extended thinking is on
THINKING_REJECTED_FIELDS = ("temperature", "top_p", "top_k")


def split_system_message(messages: List[ChatMessage]) -> Tuple[Optional[str], List[ChatMessage]]:
    """Pull the single leading system message into a side channel.

    Only a system message at position 0 is extracted. Later system messages
    stay in place and are sent as user turns, since the Messages API has no
    inline system role.
    """
    if messages and messages[0].role == MessageRole.SYSTEM:
        return messages[0].content, list(messages[1:])
    return None, list(messages)


def format_message(message: ChatMessage) -> Dict[str, Any]:
    """One Messages API turn.

    Assistant turns that carry a signed reasoning trace are replayed as a
    thinking block followed by a text block, which keeps reasoning continuity
    across turns.
    """
    if message.role == MessageRole.ASSISTANT:
        trace = message.thinking
        if trace is not None and trace.signature:
            return {
                "role": "assistant",
                "content": [
                    {"type": "thinking", "thinking": trace.content, "signature": trace.signature},
                    {"type": "text", "text": message.content},
                ],
            }
        return {"role": "assistant", "content": message.content}
    return {"role": "user", "content": message.content}


def build_messages_payload(messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
    """Build a Messages API request body. ``max_tokens`` is always present."""
    system, rest = split_system_message(messages)
    payload: Dict[str, Any] = {
        "model": config.model,
        "max_tokens": config.max_tokens or DEFAULT_MAX_TOKENS,
        "messages": [format_message(msg) for msg in rest],
    }
    if system:
        payload["system"] = system
    payload.update(
        normalize_params(
            config,
            {"temperature": "temperature", "top_p": "top_p", "top_k": "top_k", "stop": "stop_sequences"},
            defaults={"temperature": DEFAULT_TEMPERATURE},
        )
    )
    return payload
