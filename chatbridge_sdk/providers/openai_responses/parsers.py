from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ...thinking.utils import safe_get

TEXT_PART_TYPES = ("output_text", "text")


def extract_text_from_responses_api(raw: Dict[str, Any]) -> Optional[str]:
    """Answer text of a Responses API response.

    Tries ``output_text`` first, then joins the text parts of every
    ``message`` output item in order. Returns None if nothing is found.
    """
    output_text = raw.get("output_text")
    if isinstance(output_text, str) and output_text.strip():
        return output_text

    parts = []
    for item in raw.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        for part in item.get("content") or []:
            if isinstance(part, dict) and part.get("type") in TEXT_PART_TYPES:
                parts.append(part.get("text"))
    text = "".join(part for part in parts if isinstance(part, str))
    return text if text.strip() else None


def extract_error_message(raw: Dict[str, Any]) -> str:
    return safe_get(raw, "error", "message") or "unknown error"


def parse_created_at(raw: Dict[str, Any]) -> Optional[datetime]:
    created_at = raw.get("created_at")
    if isinstance(created_at, (int, float)):
        return datetime.fromtimestamp(created_at, tz=timezone.utc)
    return None
