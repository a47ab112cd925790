"""
Parameter normalization helpers.

Shared pieces of request building: plain role/content message lists and
copying the tunables an upstream understands out of a GenerationConfig.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ...models.conversation_types import ChatMessage
from ...models.generation import GenerationConfig


def role_value(message: ChatMessage) -> str:
    role = message.role
    return role.value if hasattr(role, "value") else str(role)


def format_messages(messages: Iterable[ChatMessage]) -> List[Dict[str, str]]:
    """Role-verbatim message list in chronological order."""
    return [{"role": role_value(msg), "content": msg.content} for msg in messages]


def normalize_params(
    config: GenerationConfig,
    field_map: Mapping[str, str],
    defaults: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Copy tunables from config into upstream field names.

    Args:
        config: The request configuration
        field_map: Config attribute -> upstream field name
        defaults: Upstream field -> value used when the config leaves it unset

    Returns:
        Dict of upstream fields; unset tunables without a default are omitted
    """
    params: Dict[str, Any] = {}
    for attribute, field in field_map.items():
        value = getattr(config, attribute, None)
        if value is None and defaults and field in defaults:
            value = defaults[field]
        if value is not None:
            params[field] = value
    return params
