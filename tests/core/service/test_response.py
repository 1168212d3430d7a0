"""Tests for response normalization and the token budget."""

import pytest

from csvchat.core.service.errors import CODE_RESPONSE_TOO_LONG, ResponseTooLongError
from csvchat.core.service.response import (
    DEFAULT_HEADING,
    FOLLOW_UP_SECTION,
    enforce_token_budget,
    normalize_response,
)
from csvchat.infra.tokens import estimate_tokens


class TestNormalizeResponse:
    def test_adds_heading_and_follow_up(self):
        text = normalize_response("  Revenue grew 10%.  ")

        assert text == (
            f"{DEFAULT_HEADING}\n\nRevenue grew 10%.\n\n{FOLLOW_UP_SECTION}"
        )

    def test_keeps_existing_heading(self):
        text = normalize_response("## Totals\n\nSum is 5.")
        assert text.startswith("## Totals")
        assert DEFAULT_HEADING not in text

    def test_existing_follow_up_not_duplicated(self):
        original = "# Totals\n\nSum is 5.\n\n### Next Steps\n- Look at Q2"
        assert normalize_response(original) == original

    def test_follow_up_marker_is_case_insensitive(self):
        original = "# T\n\nSee FOLLOW-UP ideas below."
        assert normalize_response(original) == original

    def test_idempotent(self):
        once = normalize_response("plain answer")
        assert normalize_response(once) == once


class TestTokenBudget:
    def test_estimate(self):
        assert estimate_tokens("") == 0
        assert estimate_tokens("one two three") == 5
        assert estimate_tokens("  spaced\n\tout  words ") == 5

    def test_within_budget_returns_estimate(self):
        assert enforce_token_budget("a b c d", 6) == 6

    def test_over_budget_raises(self):
        with pytest.raises(ResponseTooLongError) as exc_info:
            enforce_token_budget("word " * 1400, 2048)

        assert exc_info.value.code == CODE_RESPONSE_TOO_LONG
        assert exc_info.value.status_code == 400
