from typing import Any, Dict, List, Optional

from ...config.constants import DEFAULT_TEMPERATURE
from ...core.normalization.params import normalize_params
from ...models.conversation_types import ChatMessage, MessageRole
from ...models.generation import GenerationConfig

# generate-content has no system or assistant role; system turns travel as user turns in place
ROLE_TO_GEMINI = {
    MessageRole.USER: "user",
    MessageRole.ASSISTANT: "model",
    MessageRole.SYSTEM: "user",
}

GENERATION_FIELD_MAP = {
    "temperature": "temperature",
    "top_p": "topP",
    "top_k": "topK",
    "max_tokens": "maxOutputTokens",
    "stop": "stopSequences",
}


def to_gemini_role(role: MessageRole) -> str:
    return ROLE_TO_GEMINI[MessageRole(role)]


def format_contents(messages: List[ChatMessage], thought_signature: Optional[str] = None) -> List[Dict[str, Any]]:
    """Messages as generate-content ``contents``.

    A continuation signature is attached, unchanged, to the first part of the
    last ``model`` turn.
    """
    contents = [
        {"role": to_gemini_role(msg.role), "parts": [{"text": msg.content}]}
        for msg in messages
    ]
    if thought_signature:
        for content in reversed(contents):
            if content["role"] == "model":
                content["parts"][0]["thoughtSignature"] = thought_signature
                break
    return contents


def build_generate_payload(messages: List[ChatMessage], config: GenerationConfig) -> Dict[str, Any]:
    """Build a generate-content request body."""
    return {
        "contents": format_contents(messages, config.thought_signature),
        "generationConfig": normalize_params(
            config, GENERATION_FIELD_MAP, defaults={"temperature": DEFAULT_TEMPERATURE}
        ),
    }
