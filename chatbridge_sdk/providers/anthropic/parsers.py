from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple


def extract_text_from_messages_response(raw: Dict[str, Any]) -> Optional[str]:
    """Concatenated text blocks of a messages.create response."""
    text_content = ""
    for block in raw.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text":
            text_content += block.get("text") or ""
    return text_content or None


def extract_model_entries(page: Any) -> List[Tuple[str, str]]:
    """(id, display name) pairs from models.list(); display_name when present."""
    data = getattr(page, "data", None)
    if data is None and isinstance(page, dict):
        data = page.get("data")
    entries = []
    for item in data or []:
        if isinstance(item, dict):
            model_id, display_name = item.get("id"), item.get("display_name")
        else:
            model_id, display_name = getattr(item, "id", None), getattr(item, "display_name", None)
        if model_id:
            entries.append((model_id, display_name if isinstance(display_name, str) else model_id))
    return entries
