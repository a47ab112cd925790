from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .thinking import ReasoningTrace


class MessageRole(str, Enum):
    """Conversation turn roles."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """
    Role-tagged message in chronological order.

    Assistant turns may carry the reasoning trace produced when they were
    generated; thinking adapters decide whether it is replayed upstream.
    """
    role: MessageRole
    content: str
    thinking: Optional[ReasoningTrace] = None
