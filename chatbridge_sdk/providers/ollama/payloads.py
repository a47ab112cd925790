from typing import Any, Dict, List

from ...config.constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from ...core.normalization.params import format_messages, normalize_params
from ...models.conversation_types import ChatMessage
from ...models.generation import GenerationConfig

OPTION_FIELD_MAP = {
    "temperature": "temperature",
    "top_p": "top_p",
    "top_k": "top_k",
    "num_ctx": "num_ctx",
    "repeat_penalty": "repeat_penalty",
    "stop": "stop",
}


def build_options(config: GenerationConfig) -> Dict[str, Any]:
    """Runtime ``options``; ``num_predict`` wins over ``max_tokens``."""
    options = normalize_params(config, OPTION_FIELD_MAP, defaults={"temperature": DEFAULT_TEMPERATURE})
    num_predict = config.num_predict if config.num_predict is not None else config.max_tokens
    options["num_predict"] = num_predict if num_predict is not None else DEFAULT_MAX_TOKENS
    return options


def build_chat_payload(messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
    """Build an ``/api/chat`` request body with roles passed through verbatim."""
    return {
        "model": config.model,
        "messages": format_messages(messages),
        "stream": False,
        "options": build_options(config),
    }
