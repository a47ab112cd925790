from typing import Any, Dict, List, Optional, Tuple

from ..base import ProviderError
from ...thinking.utils import safe_get


def extract_text_from_chat_response(raw: Dict[str, Any]) -> Optional[str]:
    content = safe_get(raw, "message", "content")
    return content if isinstance(content, str) else None


def raise_for_error_body(raw: Dict[str, Any]) -> None:
    """Ollama reports failures inside 200 responses and stream lines as ``{"error": ...}``."""
    error = raw.get("error")
    if error:
        raise ProviderError(f"Ollama error: {error}", provider="ollama")


def extract_model_entries(raw: Dict[str, Any]) -> List[Tuple[str, str]]:
    """(id, display name) pairs from ``/api/tags``."""
    entries = []
    for item in raw.get("models") or []:
        name = (item.get("name") or item.get("model")) if isinstance(item, dict) else None
        if name:
            entries.append((name, name))
    return entries
