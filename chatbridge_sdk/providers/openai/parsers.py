from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ...thinking.utils import safe_get


def extract_text_from_chat_completion(raw: Dict[str, Any]) -> Optional[str]:
    """Answer text of the first choice of a Chat Completions response."""
    content = safe_get(raw, "choices", 0, "message", "content")
    return content if isinstance(content, str) else None


def extract_finish_reason(raw: Dict[str, Any]) -> Optional[str]:
    return safe_get(raw, "choices", 0, "finish_reason")


def extract_model_entries(page: Any) -> List[Tuple[str, str]]:
    """(id, display name) pairs from a models.list() result.

    OpenAI-style listings carry no display name, so the id doubles as one.
    """
    data = getattr(page, "data", None)
    if data is None and isinstance(page, dict):
        data = page.get("data")
    entries = []
    for item in data or []:
        model_id = item.get("id") if isinstance(item, dict) else getattr(item, "id", None)
        if model_id:
            entries.append((model_id, model_id))
    return entries
