"""Pydantic models for the chat API."""

from pydantic import BaseModel, ConfigDict, Field

from csvchat.core.service.models import ChatContext, ChatMessage


class ChatRequest(BaseModel):
    """Request body for the chat endpoint.

    ``csvContent`` and ``question`` may be absent here; the service
    rejects them with a 400 so clients get the same error shape either way.
    """

    model_config = ConfigDict(populate_by_name=True)

    csv_content: str | None = Field(
        default=None, alias="csvContent", description="Raw CSV text"
    )
    question: str | None = Field(default=None, description="User question")
    history: list[ChatMessage] = Field(
        default_factory=list,
        description="Previous conversation messages, oldest first",
    )

    def to_context(self) -> ChatContext:
        return ChatContext(
            csv_content=self.csv_content or "",
            question=self.question or "",
            history=list(self.history),
        )


class ChatSuccess(BaseModel):
    """Successful answer."""

    text: str = Field(description="Markdown answer, possibly with chart blocks")


class ChatFailure(BaseModel):
    """Failed request; the message is safe to display."""

    error: str = Field(description="User-facing error message")


ChatResponse = ChatSuccess | ChatFailure
