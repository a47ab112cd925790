"""Reasoning trace types shared by provider and thinking adapters."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .usage import TokenUsage


class ReasoningEffort(str, Enum):
    """Effort levels accepted by reasoning-capable upstreams."""
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReasoningMode(str, Enum):
    """Reasoning modes (xAI)."""
    ENABLED = "enabled"
    AUTO = "auto"
    DISABLED = "disabled"


class ReasoningTrace(BaseModel):
    """
    Intermediate reasoning emitted by a thinking-capable model.

    ``signature`` is provider-opaque: it is threaded back into a later request
    of the same conversation verbatim and never interpreted.
    """
    content: str = Field(..., description="Reasoning text")
    tokens: Optional[int] = Field(None, description="Reasoning tokens reported by the upstream")
    effort: Optional[ReasoningEffort] = Field(None, description="Effort level used for the request")
    summary: Optional[str] = Field(None, description="Reasoning summary when provided separately")
    signature: Optional[str] = Field(None, description="Opaque continuation signature")
    provider_data: Dict[str, Any] = Field(default_factory=dict)


class ThinkingDelta(BaseModel):
    """Reasoning increment attached to a stream fragment."""
    content: str
    done: bool = False
    signature: Optional[str] = Field(None, description="Opaque continuation signature, when it arrives in this chunk")


class StreamThinkingChunk(BaseModel):
    """Decoded view of one native stream chunk."""
    thinking: Optional[str] = None
    content: Optional[str] = None
    signature: Optional[str] = None
    done: bool = False
    usage: Optional[TokenUsage] = None


class ReasoningValidation(BaseModel):
    """Result of a reasoning config check. Never blocks a request."""
    valid: bool = True
    warnings: List[str] = Field(default_factory=list)
