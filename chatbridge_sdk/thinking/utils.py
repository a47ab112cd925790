"""Helpers shared by the thinking adapters."""

from typing import Any, Iterable, Optional

from ..models.thinking import ReasoningEffort, ReasoningTrace

VALID_EFFORTS = frozenset(effort.value for effort in ReasoningEffort)


def safe_get(data: Any, *path: Any) -> Any:
    """
    Walk nested dicts/lists without raising.

    ``safe_get(raw, "choices", 0, "message", "content")`` returns None as soon
    as a key is missing, an index is out of range or a level has the wrong type.
    """
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, (list, tuple)) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if current is None:
            return None
    return current


def join_parts(parts: Iterable[Optional[str]]) -> Optional[str]:
    """Newline-join non-empty parts in order; None when nothing remains."""
    kept = [part for part in parts if isinstance(part, str) and part.strip()]
    if not kept:
        return None
    return "\n".join(kept)


def is_valid_reasoning_effort(effort: Any) -> bool:
    if isinstance(effort, ReasoningEffort):
        return True
    return isinstance(effort, str) and effort.lower() in VALID_EFFORTS


def has_thinking_content(trace: Optional[ReasoningTrace]) -> bool:
    return bool(trace is not None and trace.content and trace.content.strip())


def normalize_trace(
    content: Optional[str],
    tokens: Optional[int] = None,
    effort: Any = None,
    summary: Optional[str] = None,
    signature: Optional[str] = None,
    **provider_data: Any,
) -> Optional[ReasoningTrace]:
    """
    Build a ReasoningTrace, or None when there is no reasoning text.

    Effort values outside the known levels are dropped rather than rejected.
    """
    if not content or not content.strip():
        return None
    if not is_valid_reasoning_effort(effort):
        effort = None
    elif isinstance(effort, str):
        effort = effort.lower()
    return ReasoningTrace(
        content=content,
        tokens=tokens if isinstance(tokens, int) else None,
        effort=effort,
        summary=summary or None,
        signature=signature or None,
        provider_data={key: value for key, value in provider_data.items() if value is not None},
    )
