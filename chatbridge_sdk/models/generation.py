from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .thinking import ReasoningTrace, ThinkingDelta
from .usage import TokenUsage


class ProviderType(str, Enum):
    """Supported provider ids. The set is closed."""
    OPENAI = "openai"
    OPENAI_RESPONSES = "openai-responses"
    CLAUDE = "claude"
    GEMINI = "gemini"
    OLLAMA = "ollama"
    XAI = "xai"


class GenerationConfig(BaseModel):
    """
    Generation configuration for a single request.

    Carries the credential, the optional endpoint override, the model id and an
    open set of tunables. Adapters read the fields they understand and ignore
    the rest; unknown keyword arguments are kept as extras.
    """
    model_config = ConfigDict(extra="allow")

    provider: Optional[ProviderType] = Field(None, description="Provider id")
    api_key: Optional[str] = Field(None, description="Provider credential")
    base_url: Optional[str] = Field(None, description="Endpoint override")
    model: Optional[str] = Field(None, description="Model identifier")

    # Sampling and limits
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0, description="Sampling temperature")
    top_p: Optional[float] = Field(None, ge=0.0, le=1.0, description="Nucleus sampling parameter")
    top_k: Optional[int] = Field(None, ge=0, description="Top-k sampling")
    frequency_penalty: Optional[float] = Field(None, ge=-2.0, le=2.0)
    presence_penalty: Optional[float] = Field(None, ge=-2.0, le=2.0)
    stop: Optional[List[str]] = Field(None, description="Stop sequences")
    max_tokens: Optional[int] = Field(None, ge=1, description="Maximum output tokens")

    # Local-runtime knobs (Ollama)
    num_predict: Optional[int] = Field(None, description="Output bound, overrides max_tokens")
    num_ctx: Optional[int] = Field(None, ge=1, description="Context window size")
    repeat_penalty: Optional[float] = Field(None, description="Repeat penalty")

    # Response-mode knobs
    use_responses_api: Optional[bool] = Field(None, description="Route OpenAI requests to the Responses API")
    previous_response_id: Optional[str] = Field(None, description="Chain onto a stored response")
    store: Optional[bool] = Field(None, description="Ask the upstream to store the response")

    # Reasoning knobs
    enable_thinking: Optional[bool] = Field(None, description="Request a reasoning trace")
    reasoning_effort: Optional[str] = Field(None, description="minimal, low, medium or high")
    thinking_budget: Optional[int] = Field(None, description="Reasoning token budget; -1 dynamic, 0 off")
    include_thoughts: Optional[bool] = Field(None, description="Include reasoning in the output")
    thought_signature: Optional[str] = Field(None, description="Opaque continuation signature")
    reasoning_mode: Optional[str] = Field(None, description="enabled, auto or disabled")

    @field_validator("stop", mode="before")
    @classmethod
    def validate_stop(cls, v: Union[str, List[str], None]):
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("reasoning_effort", "reasoning_mode", mode="before")
    @classmethod
    def validate_lowercase(cls, v):
        if isinstance(v, Enum):
            v = v.value
        return v.lower() if isinstance(v, str) else v


class NormalizedResponse(BaseModel):
    """Single completion, normalized across providers."""
    content: str
    model: str
    provider: str
    usage: Optional[TokenUsage] = None
    thinking: Optional[ReasoningTrace] = None
    response_id: Optional[str] = None
    created_at: Optional[datetime] = None
    finish_reason: Optional[str] = None


class StreamFragment(BaseModel):
    """One incremental unit of a streamed response."""
    content: str = ""
    done: bool = False
    model: str
    provider: str
    thinking: Optional[ThinkingDelta] = None
    usage: Optional[TokenUsage] = None


class ModelInfo(BaseModel):
    """Conversational model exposed by an upstream."""
    id: str
    display_name: str


class ValidationResult(BaseModel):
    """Outcome of a configuration check. Errors block the call, warnings do not."""
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
