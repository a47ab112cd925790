from typing import Any, Dict, List

from ...config.constants import DEFAULT_RESPONSES_MAX_OUTPUT_TOKENS
from ...core.normalization.params import role_value
from ...models.conversation_types import ChatMessage, MessageRole
from ...models.generation import GenerationConfig


def format_responses_input(messages: List[ChatMessage], typed_parts: bool = False) -> List[Dict[str, Any]]:
    """Messages as Responses API input items.

    With ``typed_parts`` (research and reasoning models) content is wrapped
    as a single typed part: ``output_text`` for assistant turns and
    ``input_text`` for everything else.
    """
    items = []
    for msg in messages:
        role = role_value(msg)
        if typed_parts:
            part_type = "output_text" if msg.role == MessageRole.ASSISTANT else "input_text"
            content: Any = [{"type": part_type, "text": msg.content}]
        else:
            content = msg.content
        items.append({"role": role, "content": content})
    return items


def build_responses_payload(
    messages: List[ChatMessage],
    config: GenerationConfig,
    typed_parts: bool = False,
) -> Dict[str, Any]:
    """Build a Responses API request body.

    Background mode is always off: the adapter only supports the blocking
    path and cannot poll for queued responses.
    """
    payload: Dict[str, Any] = {
        "model": config.model,
        "input": format_responses_input(messages, typed_parts),
        "max_output_tokens": config.max_tokens or DEFAULT_RESPONSES_MAX_OUTPUT_TOKENS,
        "store": True if config.store is None else config.store,
        "background": False,
    }
    if config.previous_response_id:
        payload["previous_response_id"] = config.previous_response_id
    if config.temperature is not None:
        payload["temperature"] = config.temperature
    if config.top_p is not None:
        payload["top_p"] = config.top_p
    return payload
