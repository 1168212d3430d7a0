"""HTTP tests for the chat endpoint, using an in-process TestClient."""

import pytest
from fastapi.testclient import TestClient

from csvchat.app import app
from csvchat.core.llm import get_text_generator
from csvchat.core.service.errors import (
    MSG_INPUT_TOO_LONG,
    MSG_INVALID_BODY,
    MSG_MISSING_FIELDS,
    MSG_PROCESSING_ERROR,
    MSG_QUOTA_EXCEEDED,
    MSG_RESPONSE_TOO_LONG,
)

CHAT_URL = "/api/v1/chat"


class RateLimited(Exception):
    status_code = 429


@pytest.fixture
def client(spy_generator):
    app.dependency_overrides[get_text_generator] = lambda: spy_generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestChatEndpoint:
    def test_success(self, client, spy_generator, sales_csv):
        response = client.post(
            CHAT_URL,
            json={"csvContent": sales_csv, "question": "Best month?", "history": []},
        )

        assert response.status_code == 200
        assert response.json() == {"text": spy_generator.reply}

    def test_history_reaches_prompt(self, client, spy_generator, sales_csv):
        history = [
            {"role": "user", "content": "Which region?", "timestamp": 1700000000000},
            {"role": "assistant", "content": "North leads.", "timestamp": 1700000001000},
        ]

        response = client.post(
            CHAT_URL,
            json={"csvContent": sales_csv, "question": "And South?", "history": history},
        )

        assert response.status_code == 200
        prompt = spy_generator.calls[0]
        assert "👤 **User**:\nWhich region?" in prompt
        assert "🤖 **Assistant**:\nNorth leads." in prompt

    def test_history_is_optional(self, client, sales_csv):
        response = client.post(
            CHAT_URL, json={"csvContent": sales_csv, "question": "Q?"}
        )
        assert response.status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {"question": "Q?"},
            {"csvContent": "a,b\n1,2"},
            {"csvContent": "", "question": "Q?"},
            {"csvContent": "a,b\n1,2", "question": None},
            {},
        ],
    )
    def test_missing_fields(self, client, spy_generator, body):
        response = client.post(CHAT_URL, json=body)

        assert response.status_code == 400
        assert response.json() == {"error": MSG_MISSING_FIELDS}
        assert spy_generator.calls == []

    def test_malformed_body(self, client, spy_generator):
        response = client.post(
            CHAT_URL,
            json={
                "csvContent": "a,b",
                "question": "Q?",
                "history": [{"role": "system", "content": "x"}],
            },
        )

        assert response.status_code == 400
        assert response.json() == {"error": MSG_INVALID_BODY}
        assert spy_generator.calls == []

    def test_quota_exceeded(self, client, spy_generator, sales_csv):
        spy_generator.error = RateLimited("Too Many Requests")

        response = client.post(
            CHAT_URL, json={"csvContent": sales_csv, "question": "Q?"}
        )

        assert response.status_code == 429
        assert response.json() == {"error": MSG_QUOTA_EXCEEDED}

    def test_input_too_long(self, client, spy_generator, sales_csv):
        spy_generator.error = ValueError("input exceeds the context length")

        response = client.post(
            CHAT_URL, json={"csvContent": sales_csv, "question": "Q?"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": MSG_INPUT_TOO_LONG}

    def test_response_too_long(self, client, spy_generator, sales_csv):
        spy_generator.reply = "# Huge\n\n" + "value " * 2000

        response = client.post(
            CHAT_URL, json={"csvContent": sales_csv, "question": "Q?"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": MSG_RESPONSE_TOO_LONG}

    def test_provider_details_not_leaked(self, client, spy_generator, sales_csv):
        spy_generator.error = RuntimeError("internal host db-7 refused")

        response = client.post(
            CHAT_URL, json={"csvContent": sales_csv, "question": "Q?"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": MSG_PROCESSING_ERROR}
        assert "db-7" not in response.text


class TestOperationalEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_metrics_exposed(self, client, sales_csv):
        client.post(CHAT_URL, json={"csvContent": sales_csv, "question": "Q?"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "csvchat_chat_requests_total" in response.text
