"""Tests for the CsvChatService pipeline."""

import pytest

from csvchat.core.service.chat import CsvChatService
from csvchat.core.service.errors import (
    CODE_INPUT_TOO_LONG,
    CODE_MISSING_FIELDS,
    CODE_RESPONSE_TOO_LONG,
    InputValidationError,
    ProviderQuotaError,
    ResponseTooLongError,
    UnclassifiedError,
)
from csvchat.core.service.models import ChatContext, ChatMessage
from csvchat.core.service.prompt import SYSTEM_PROMPT
from csvchat.core.service.response import FOLLOW_UP_SECTION


class QuotaError(Exception):
    status_code = 429


@pytest.fixture
def service(spy_generator, app_config) -> CsvChatService:
    return CsvChatService(spy_generator, app_config)


class TestCsvChatService:
    @pytest.mark.asyncio
    async def test_answer_returns_provider_text(self, service, spy_generator, sales_csv):
        text = await service.answer(ChatContext(sales_csv, "Which month peaked?"))

        assert text.startswith("# Revenue by Month")
        assert len(spy_generator.calls) == 1

        prompt = spy_generator.calls[0]
        assert prompt.startswith(SYSTEM_PROMPT)
        assert "- **Total Records:** `4`" in prompt
        assert "Current Question: Which month peaked?" in prompt

    @pytest.mark.asyncio
    async def test_answer_is_normalized(self, service, spy_generator, sales_csv):
        spy_generator.reply = "April was best."

        text = await service.answer(ChatContext(sales_csv, "Best month?"))

        assert text.startswith("# Analysis\n\nApril was best.")
        assert text.endswith(FOLLOW_UP_SECTION)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "csv_content, question",
        [("", "Q?"), ("a,b\n1,2", ""), ("", "")],
    )
    async def test_missing_fields_skip_provider(
        self, service, spy_generator, csv_content, question
    ):
        with pytest.raises(InputValidationError) as exc_info:
            await service.answer(ChatContext(csv_content, question))

        assert exc_info.value.code == CODE_MISSING_FIELDS
        assert spy_generator.calls == []

    @pytest.mark.asyncio
    async def test_whitespace_csv_uses_empty_marker(self, service, spy_generator):
        await service.answer(ChatContext("   \n", "Anything?"))

        assert "Empty CSV file" in spy_generator.calls[0]

    @pytest.mark.asyncio
    async def test_history_is_truncated(self, spy_generator, app_config, sales_csv):
        app_config.chat.max_conversation_length = 2
        service = CsvChatService(spy_generator, app_config)
        history = [
            ChatMessage(role="user", content=f"turn {i}", timestamp=i)
            for i in range(5)
        ]

        await service.answer(ChatContext(sales_csv, "Q?", history))

        prompt = spy_generator.calls[0]
        assert "turn 2" not in prompt
        assert "turn 3" in prompt
        assert "turn 4" in prompt

    @pytest.mark.asyncio
    async def test_configured_system_prompt(self, spy_generator, app_config, sales_csv):
        app_config.prompt.system_prompt = "You are terse."
        service = CsvChatService(spy_generator, app_config)

        await service.answer(ChatContext(sales_csv, "Q?"))

        assert spy_generator.calls[0].startswith("You are terse.\n\n")

    @pytest.mark.asyncio
    async def test_quota_error(self, service, spy_generator, sales_csv):
        spy_generator.error = QuotaError("quota")

        with pytest.raises(ProviderQuotaError) as exc_info:
            await service.answer(ChatContext(sales_csv, "Q?"))

        assert isinstance(exc_info.value.__cause__, QuotaError)

    @pytest.mark.asyncio
    async def test_length_error_from_provider(self, service, spy_generator, sales_csv):
        spy_generator.error = ValueError("prompt exceeds the token limit")

        with pytest.raises(ResponseTooLongError) as exc_info:
            await service.answer(ChatContext(sales_csv, "Q?"))

        assert exc_info.value.code == CODE_INPUT_TOO_LONG

    @pytest.mark.asyncio
    async def test_unknown_provider_error(self, service, spy_generator, sales_csv):
        spy_generator.error = RuntimeError("socket closed")

        with pytest.raises(UnclassifiedError):
            await service.answer(ChatContext(sales_csv, "Q?"))

    @pytest.mark.asyncio
    async def test_over_budget_response(self, service, spy_generator, sales_csv):
        spy_generator.reply = "# Long\n\n" + "data " * 1500

        with pytest.raises(ResponseTooLongError) as exc_info:
            await service.answer(ChatContext(sales_csv, "Q?"))

        assert exc_info.value.code == CODE_RESPONSE_TOO_LONG
