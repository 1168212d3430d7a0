"""API client for the csvchat chat endpoint."""

import logging
import time

import httpx
from pydantic import BaseModel

from csvchat.core.service.models import ROLE_ASSISTANT, ROLE_USER, ChatMessage

from .config import CLIConfig

logger = logging.getLogger(__name__)


class ChatReply(BaseModel):
    """Outcome of one request: exactly one of ``text`` / ``error`` is set."""

    text: str | None = None
    error: str | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.text is not None


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChatAPIClient:
    """Client holding one CSV upload and its conversation.

    History lives only in this object and disappears with it.
    """

    def __init__(
        self,
        config: CLIConfig,
        csv_content: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.csv_content = csv_content
        self.history: list[ChatMessage] = []
        self.client = httpx.AsyncClient(
            timeout=config.timeout_seconds, transport=transport
        )

    async def ask(self, question: str) -> ChatReply:
        """Send *question* with the CSV and the history so far.

        The user message joins the history either way; the assistant
        reply only on success.
        """
        payload = {
            "csvContent": self.csv_content,
            "question": question,
            "history": [m.model_dump() for m in self.history],
        }
        self.history.append(
            ChatMessage(role=ROLE_USER, content=question, timestamp=_now_ms())
        )

        url = self.config.chat_url
        logger.debug("POST %s (history=%d)", url, len(payload["history"]))

        try:
            response = await self.client.post(url, json=payload)
        except httpx.TimeoutException:
            return ChatReply(error="Request timed out.")
        except httpx.ConnectError as e:
            return ChatReply(error=f"Connection error: {e}")
        except httpx.HTTPError as e:
            logger.debug("Request failed", exc_info=True)
            return ChatReply(error=f"Request failed: {e}")

        logger.debug("Response status: %s", response.status_code)
        try:
            body = response.json()
        except ValueError:
            return ChatReply(
                error=f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            return ChatReply(
                error=f"HTTP {response.status_code}: unexpected response body",
                status_code=response.status_code,
            )

        if response.status_code != 200 or not isinstance(body.get("text"), str):
            return ChatReply(
                error=str(body.get("error") or f"HTTP {response.status_code}"),
                status_code=response.status_code,
            )

        text = body["text"]
        self.history.append(
            ChatMessage(role=ROLE_ASSISTANT, content=text, timestamp=_now_ms())
        )
        return ChatReply(text=text, status_code=response.status_code)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
