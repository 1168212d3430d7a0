"""Chat API endpoint implementation."""

from fastapi import APIRouter

from .deps import ChatServiceDep
from .models import ChatFailure, ChatRequest, ChatSuccess

router = APIRouter(prefix="/api/v1", tags=["chat"])
health_router = APIRouter(tags=["health"])


@router.post(
    "/chat",
    response_model=ChatSuccess,
    responses={
        400: {"model": ChatFailure},
        429: {"model": ChatFailure},
        500: {"model": ChatFailure},
    },
)
async def chat(chat_request: ChatRequest, chat_service: ChatServiceDep) -> ChatSuccess:
    """Answer one question about the uploaded CSV.

    Failures are rendered by the handlers in ``csvchat.api.exceptions``
    as ``{"error": ...}`` with status 400, 429 or 500.
    """
    text = await chat_service.answer(chat_request.to_context())
    return ChatSuccess(text=text)


@health_router.get("/health", include_in_schema=False)
async def health() -> dict[str, str]:
    return {"status": "ok"}
