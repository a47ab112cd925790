"""
Usage normalization module.

This module provides functions to normalize usage data from different providers
into a consistent TokenUsage. All adapters use these functions so that usage
reporting is the same whatever the upstream.
"""

from typing import Any, Dict, Optional

from ...models.usage import TokenUsage


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_usage(usage_data: Optional[Dict[str, Any]], provider: str) -> Optional[TokenUsage]:
    """
    Normalize raw upstream usage into a TokenUsage.

    Field names per family:
        openai/xai/openai-responses: prompt_tokens/completion_tokens or
            input_tokens/output_tokens, reasoning tokens under *_tokens_details
        claude: input_tokens/output_tokens
        gemini: usageMetadata promptTokenCount/candidatesTokenCount/thoughtsTokenCount
        ollama: prompt_eval_count/eval_count

    Args:
        usage_data: Raw usage mapping from the upstream (optional)
        provider: Provider id for field mapping

    Returns:
        TokenUsage, or None when the upstream reported nothing
    """
    if not usage_data:
        return None

    reasoning_tokens = None

    if provider in ("openai", "openai-responses", "xai"):
        prompt_tokens = _int(usage_data.get("prompt_tokens", usage_data.get("input_tokens")))
        completion_tokens = _int(usage_data.get("completion_tokens", usage_data.get("output_tokens")))
        total_tokens = _int(usage_data.get("total_tokens"))

        details = usage_data.get("completion_tokens_details") or usage_data.get("output_tokens_details")
        if isinstance(details, dict):
            reasoning_tokens = _optional_int(details.get("reasoning_tokens"))
        if reasoning_tokens is None:
            reasoning_tokens = _optional_int(usage_data.get("reasoning_tokens"))

    elif provider == "claude":
        prompt_tokens = _int(usage_data.get("input_tokens"))
        completion_tokens = _int(usage_data.get("output_tokens"))
        total_tokens = 0

    elif provider == "gemini":
        prompt_tokens = _int(usage_data.get("promptTokenCount"))
        completion_tokens = _int(usage_data.get("candidatesTokenCount"))
        total_tokens = _int(usage_data.get("totalTokenCount"))
        reasoning_tokens = _optional_int(usage_data.get("thoughtsTokenCount"))

    elif provider == "ollama":
        # Only the final record of a response carries counts
        if "prompt_eval_count" not in usage_data and "eval_count" not in usage_data:
            return None
        prompt_tokens = _int(usage_data.get("prompt_eval_count"))
        completion_tokens = _int(usage_data.get("eval_count"))
        total_tokens = 0

    else:
        prompt_tokens = _int(usage_data.get("prompt_tokens", usage_data.get("input_tokens")))
        completion_tokens = _int(usage_data.get("completion_tokens", usage_data.get("output_tokens")))
        total_tokens = _int(usage_data.get("total_tokens"))

    if not total_tokens:
        total_tokens = prompt_tokens + completion_tokens

    return TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=total_tokens,
        reasoning_tokens=reasoning_tokens,
    )
