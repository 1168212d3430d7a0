"""CSV question answering service.

``CsvChatService.answer`` is the one pipeline boundary:

    validate -> summarize -> compose -> generate -> normalize -> budget

Whatever goes wrong leaves as a ``ChatError`` with a user-safe message.
"""

import logging

from csvchat.configs.config import AppConfig
from csvchat.core.csv_summary import summarize_csv
from csvchat.core.llm.provider import TextGenerator
from csvchat.infra.telemetry import (
    ATTR_CSV_CHARS,
    ATTR_ERROR_CODE,
    ATTR_HISTORY_LEN,
    ATTR_PROMPT_CHARS,
    ATTR_RESPONSE_TOKENS,
    SPAN_CHAT_PIPELINE,
    SPAN_CSV_SUMMARIZE,
    tracer,
)

from .errors import ChatError, InputValidationError, classify_provider_error
from .metrics import RESPONSE_ESTIMATED_TOKENS, observe_chat
from .models import ChatContext
from .prompt import SYSTEM_PROMPT, build_prompt
from .response import enforce_token_budget, normalize_response

logger = logging.getLogger(__name__)


class CsvChatService:
    """Answers one question about one CSV upload per call."""

    chat_service_name = "csv_chat"

    def __init__(self, generator: TextGenerator, config: AppConfig) -> None:
        self._generator = generator
        self._max_history = config.chat.max_conversation_length
        self._max_response_tokens = config.chat.max_response_tokens
        self._system_prompt = config.prompt.system_prompt or SYSTEM_PROMPT

    @observe_chat
    async def answer(self, ctx: ChatContext) -> str:
        """Return the normalized answer text for *ctx*.

        Raises:
            ChatError: one of ``InputValidationError``, ``ProviderQuotaError``,
                ``ResponseTooLongError`` or ``UnclassifiedError``.
        """
        if not ctx.csv_content or not ctx.question:
            raise InputValidationError()

        with tracer.start_as_current_span(SPAN_CHAT_PIPELINE) as span:
            span.set_attribute(ATTR_CSV_CHARS, len(ctx.csv_content))
            span.set_attribute(ATTR_HISTORY_LEN, len(ctx.history))
            try:
                text = await self._run(ctx, span)
            except ChatError as exc:
                span.set_attribute(ATTR_ERROR_CODE, exc.code)
                logger.warning("Chat request rejected (%s)", exc.code)
                raise
            except Exception as exc:
                error = classify_provider_error(exc)
                span.set_attribute(ATTR_ERROR_CODE, error.code)
                logger.error(
                    "Chat pipeline failed (%s): %s", error.code, exc, exc_info=True
                )
                raise error from exc
        return text

    async def _run(self, ctx: ChatContext, span) -> str:
        with tracer.start_as_current_span(SPAN_CSV_SUMMARIZE):
            summary = summarize_csv(ctx.csv_content)

        prompt = build_prompt(
            self._system_prompt,
            summary,
            ctx.history,
            ctx.question,
            self._max_history,
        )
        span.set_attribute(ATTR_PROMPT_CHARS, len(prompt))

        raw = await self._generator.generate(prompt)
        text = normalize_response(raw)

        tokens = enforce_token_budget(text, self._max_response_tokens)
        RESPONSE_ESTIMATED_TOKENS.observe(tokens)
        span.set_attribute(ATTR_RESPONSE_TOKENS, tokens)
        return text
