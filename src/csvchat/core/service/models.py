"""Domain models shared by the chat pipeline and its callers."""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single message in the conversation. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(description="Message sender role")
    content: str = Field(description="Message content")
    timestamp: int = Field(
        default=0, description="Creation time in epoch milliseconds"
    )


@dataclass
class ChatContext:
    """Per-request input to the chat service."""

    csv_content: str
    question: str
    history: list[ChatMessage] = field(default_factory=list)
