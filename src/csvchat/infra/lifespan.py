"""Application lifespan and app-state dependencies.

The lifespan reads the configuration once, validates it and parks it on
``app.state``.  Request handlers never re-read config from disk; they get
the validated instance through ``get_config``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from csvchat.configs.config import (
    AppConfig,
    get_app_config,
    validate_startup_config,
)

logger = logging.getLogger(__name__)


def get_config(request: Request) -> AppConfig:
    """Dependency: the configuration validated at startup."""
    return request.app.state.config


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Validate configuration before the first request is accepted.

    A missing API key aborts startup with ``MissingAPIKeyError``.
    """
    config = validate_startup_config(get_app_config())
    app.state.config = config
    logger.info(
        "csvchat ready (provider=%s, model=%s, max_history=%d, "
        "max_response_tokens=%d)",
        config.llm.provider,
        config.llm.model_name,
        config.chat.max_conversation_length,
        config.chat.max_response_tokens,
    )
    yield
    logger.info("Shutting down csvchat")
