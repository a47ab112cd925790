from typing import Optional

from pydantic import BaseModel, Field


class TokenUsage(BaseModel):
    """Normalized token accounting across providers."""
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    reasoning_tokens: Optional[int] = Field(None, ge=0, description="Tokens spent on reasoning, when reported")
