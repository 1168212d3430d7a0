"""TextGenerator: prompt in, plain text out.

Wraps any langchain ``BaseChatModel`` so the pipeline sees the provider
as a single ``generate(prompt)`` coroutine.  Safety settings are bound
into the model when it is built (see ``build_chat_model``).  Errors from
the model propagate unchanged; classification happens in the service.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage

from csvchat.core.service.metrics import (
    LLM_CALL_DURATION_SECONDS,
    LLM_CALLS_IN_FLIGHT,
)
from csvchat.infra.telemetry import ATTR_LLM_MODEL, SPAN_LLM_GENERATE, tracer

logger = logging.getLogger(__name__)


def message_text(message: BaseMessage) -> str:
    """Return the plain text of *message*.

    Content is either a string or a list of parts; text parts are
    concatenated and everything else (images, tool calls) is skipped.
    """
    content: Any = message.content
    if isinstance(content, str):
        return content

    parts: list[str] = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts)


class TextGenerator:
    """Single-shot text generation against a chat model."""

    def __init__(self, llm: BaseChatModel, model_name: str) -> None:
        self._llm = llm
        self.model_name = model_name

    async def generate(self, prompt: str) -> str:
        """Send *prompt* as one user message and return the reply text."""
        start = time.monotonic()
        with tracer.start_as_current_span(SPAN_LLM_GENERATE) as span:
            span.set_attribute(ATTR_LLM_MODEL, self.model_name)
            LLM_CALLS_IN_FLIGHT.labels(model_name=self.model_name).inc()
            try:
                message = await self._llm.ainvoke([HumanMessage(content=prompt)])
            finally:
                LLM_CALLS_IN_FLIGHT.labels(model_name=self.model_name).dec()
                LLM_CALL_DURATION_SECONDS.labels(
                    model_name=self.model_name
                ).observe(time.monotonic() - start)

        text = message_text(message)
        logger.debug(
            "Provider returned %d chars in %.2fs",
            len(text),
            time.monotonic() - start,
        )
        return text
