"""
Model classification keywords.

Several upstreams give no machine-readable way to tell reasoning models from
plain ones, or chat models from embedding/audio/image models, so adapters
classify model ids by substring. The keyword lists live here as data and can
be replaced per provider without touching adapter code.

Each entry is either a single keyword or a list of keywords that must all
match the (lower-cased) model id. A keyword matches anywhere in the id unless
it starts with ``^``, which anchors it to the start of the id.

Priority order for overrides:
1. CHATBRIDGE_MODEL_KEYWORDS_JSON environment variable (JSON string)
2. CHATBRIDGE_MODEL_KEYWORDS_FILE environment variable (path to JSON file)

Overrides are read on first use and cached; reload_model_keywords() rereads them.

Override shape mirrors DEFAULT_MODEL_KEYWORDS; a provider list given in an
override replaces the default list for that provider and section.
"""

import copy
import json
import logging
import os
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

from .constants import MODEL_KEYWORDS_FILE_ENV_VAR, MODEL_KEYWORDS_JSON_ENV_VAR

logger = logging.getLogger(__name__)

KeywordGroup = Tuple[str, ...]

# Keywords starting with this marker only match at the start of a model id
PREFIX_ANCHOR = "^"

DEFAULT_MODEL_KEYWORDS: Dict[str, Dict[str, List[Union[str, List[str]]]]] = {
    # Models that expose a separate reasoning trace
    "reasoning": {
        "openai": ["^o1", "o1-preview", "o1-mini", "^o3", "o3-mini", "^o4", "o4-mini", "gpt-5"],
        "claude": [
            "claude-3-7",
            "claude-3.7",
            "claude-sonnet-4",
            "claude-opus-4",
            "claude-4",
            "opus-4",
        ],
        "gemini": [
            "gemini-2.0-flash-thinking",
            "gemini-2-flash-thinking",
            ["gemini-2.5", "thinking"],
            "thinking-exp",
        ],
        "xai": ["grok-3", "grok-4", "grok-5", "think"],
        "ollama": [
            "deepseek-r1",
            "deepseek-reasoner",
            ["qwen", "think"],
            ["qwen", "reason"],
            ["llama", "reason"],
            "reasoning",
            "think",
            "cot",
            "r1",
        ],
    },
    # Research models take typed input parts on the Responses API
    "research": {
        "openai": ["research"],
    },
    # Non-conversational model classes hidden from model listings
    "non_chat": {
        "openai": [
            "whisper",
            "omni",
            "tts",
            "realtime",
            "audio",
            "transcribe",
            "search",
            "dall-e",
            "babbage",
            "codex",
            "gpt-image",
            "instruct",
            "davinci-002",
            "embedding",
            "moderation",
        ],
        "xai": ["image", "embed"],
        "claude": [],
        "gemini": ["embedding", "tts"],
        "ollama": ["embed"],
    },
    # Ids kept in listings even when a non_chat keyword also matches
    "always_include": {
        "openai": ["research"],
    },
}


def _read_overrides() -> Dict[str, Any]:
    json_str = os.getenv(MODEL_KEYWORDS_JSON_ENV_VAR)
    if json_str:
        try:
            overrides = json.loads(json_str)
            logger.info(f"Loaded model keyword overrides from {MODEL_KEYWORDS_JSON_ENV_VAR}")
            return overrides
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse {MODEL_KEYWORDS_JSON_ENV_VAR}: {e}")

    file_path = os.getenv(MODEL_KEYWORDS_FILE_ENV_VAR)
    if file_path:
        try:
            with open(file_path, 'r') as f:
                overrides = json.load(f)
            logger.info(f"Loaded model keyword overrides from {file_path}")
            return overrides
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load model keyword overrides from {file_path}: {e}")

    return {}


def _merged_keywords() -> Dict[str, Dict[str, List[Union[str, List[str]]]]]:
    keywords = copy.deepcopy(DEFAULT_MODEL_KEYWORDS)
    overrides = _read_overrides()
    if not isinstance(overrides, dict):
        logger.warning("Ignoring model keyword overrides: expected a JSON object")
        return keywords

    for section, providers in overrides.items():
        if not isinstance(providers, dict):
            logger.warning(f"Ignoring model keyword override section {section!r}: expected an object")
            continue
        target = keywords.setdefault(section, {})
        for provider, entries in providers.items():
            if isinstance(entries, list):
                target[provider] = entries
    return keywords


@lru_cache(maxsize=1)
def _cached_keywords() -> Dict[str, Dict[str, List[Union[str, List[str]]]]]:
    return _merged_keywords()


def load_model_keywords() -> Dict[str, Dict[str, List[Union[str, List[str]]]]]:
    """
    Return the keyword table with any overrides applied.

    Overrides are read once per process; call reload_model_keywords() after
    changing the environment variables or the override file.

    Returns:
        Dict mapping section -> provider -> keyword entries
    """
    return copy.deepcopy(_cached_keywords())


def reload_model_keywords() -> None:
    """Forget the cached table; the next lookup reads the overrides again."""
    _cached_keywords.cache_clear()
    _keyword_groups.cache_clear()


def _as_groups(entries: Iterable[Union[str, Sequence[str]]]) -> List[KeywordGroup]:
    groups = []
    for entry in entries:
        if isinstance(entry, str):
            groups.append((entry.lower(),))
        else:
            group = tuple(str(part).lower() for part in entry if part)
            if group:
                groups.append(group)
    return groups


@lru_cache(maxsize=None)
def _keyword_groups(section: str, provider: str) -> Tuple[KeywordGroup, ...]:
    return tuple(_as_groups(_cached_keywords().get(section, {}).get(provider, [])))


def _section(section: str, provider: str) -> List[KeywordGroup]:
    return list(_keyword_groups(section, provider))


def get_reasoning_keywords(provider: str) -> List[KeywordGroup]:
    """Keyword groups identifying reasoning-capable models for a provider family."""
    return _section("reasoning", provider)


def get_research_keywords(provider: str) -> List[KeywordGroup]:
    return _section("research", provider)


def get_non_chat_keywords(provider: str) -> List[KeywordGroup]:
    """Keyword groups identifying non-conversational models for a provider family."""
    return _section("non_chat", provider)


def get_always_include_keywords(provider: str) -> List[KeywordGroup]:
    return _section("always_include", provider)


def _part_matches(part: str, model_id: str) -> bool:
    if part.startswith(PREFIX_ANCHOR):
        return model_id.startswith(part[len(PREFIX_ANCHOR):])
    return part in model_id


def matches_keywords(model_id: str, groups: Iterable[KeywordGroup]) -> bool:
    """True if every keyword of at least one group matches the model id.

    A keyword starting with ``^`` must match at the start of the id; any other
    keyword may occur anywhere in it.
    """
    if not model_id:
        return False
    lowered = model_id.lower()
    return any(all(_part_matches(part, lowered) for part in group) for group in groups)
