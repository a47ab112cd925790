from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..errors import ErrorMapper
from ...thinking.utils import safe_get

MODEL_NAME_PREFIX = "models/"


def raise_for_error_event(raw: Dict[str, Any]) -> None:
    """Gemini reports failures after the headers are sent as an ``{"error": {code, message}}`` event."""
    error = raw.get("error")
    if error:
        raise ErrorMapper.map_error_event(error, "gemini")


def candidate_parts(raw: Dict[str, Any]) -> List[Dict[str, Any]]:
    parts = safe_get(raw, "candidates", 0, "content", "parts") or []
    return [part for part in parts if isinstance(part, dict)]


def extract_text_from_generate_response(raw: Dict[str, Any]) -> Optional[str]:
    """Joined text of the non-thought parts of the first candidate."""
    text = "".join(
        part.get("text") or "" for part in candidate_parts(raw) if not part.get("thought")
    )
    return text or None


def extract_block_reason(raw: Dict[str, Any]) -> Optional[str]:
    return safe_get(raw, "promptFeedback", "blockReason")


def extract_finish_reason(raw: Dict[str, Any]) -> Optional[str]:
    return safe_get(raw, "candidates", 0, "finishReason")


def extract_model_entries(raw: Dict[str, Any]) -> List[Tuple[str, str]]:
    """(id, display name) pairs for Gemini models, with the ``models/`` prefix stripped."""
    entries = []
    for item in raw.get("models") or []:
        name = item.get("name") if isinstance(item, dict) else None
        if not name or "models/gemini" not in name:
            continue
        model_id = name[len(MODEL_NAME_PREFIX):] if name.startswith(MODEL_NAME_PREFIX) else name
        entries.append((model_id, item.get("displayName") or model_id))
    return entries
