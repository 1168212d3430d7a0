"""Shared fixtures.

The API key is set before ``csvchat.app`` is imported anywhere, since the
module-level app validates configuration in its lifespan.
"""

import os

os.environ.setdefault("CSVCHAT_LLM__API_KEY", "test-key")
os.environ.setdefault("CSVCHAT_LOGGING__JSON_OUTPUT", "false")

import pytest  # noqa: E402

from csvchat.configs.config import AppConfig  # noqa: E402
from csvchat.core.service.models import ChatMessage  # noqa: E402

SALES_CSV = (
    "month,region,revenue\n"
    "Jan,North,1200\n"
    "Feb,North,1350\n"
    "Mar,South,990\n"
    "Apr,South,1420\n"
)

ANSWER = (
    "# Revenue by Month\n\n"
    "April had the highest revenue (1420).\n\n"
    "### Suggested Follow-up Questions\n"
    "- How does North compare to South?"
)


class SpyGenerator:
    """Stands in for ``TextGenerator``: records prompts, replies or raises."""

    model_name = "spy"

    def __init__(self, reply: str = ANSWER, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def sales_csv() -> str:
    return SALES_CSV


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(llm={"api_key": "test-key"})


@pytest.fixture
def spy_generator() -> SpyGenerator:
    return SpyGenerator()


@pytest.fixture
def history() -> list[ChatMessage]:
    return [
        ChatMessage(role="user", content="Which region sells most?", timestamp=1),
        ChatMessage(role="assistant", content="# Regions\n\nNorth.", timestamp=2),
    ]
