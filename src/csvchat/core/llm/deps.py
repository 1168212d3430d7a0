"""Chat model factory and FastAPI dependency."""

import logging
from typing import Annotated, Any

from fastapi import Depends
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from csvchat.configs.config import AppConfig
from csvchat.configs.system import PROVIDER_OPENAI, LLMConfig
from csvchat.infra.lifespan import get_config

from .provider import TextGenerator
from .safety import to_google_safety_settings

logger = logging.getLogger(__name__)


def build_chat_model(config: LLMConfig) -> BaseChatModel:
    """Create the langchain chat model selected by ``config.provider``."""
    timeout = (
        config.model_timeout.total_seconds()
        if config.model_timeout is not None
        else None
    )

    if config.provider == PROVIDER_OPENAI:
        if config.safety_settings:
            logger.warning(
                "Safety settings are not supported by the OpenAI-compatible "
                "provider and will be ignored (model=%s)",
                config.model_name,
            )
        return ChatOpenAI(
            base_url=config.endpoint,
            api_key=config.api_key,
            model=config.model_name,
            temperature=config.temperature,
            top_p=config.top_p,
            timeout=timeout,
            max_retries=config.max_retries,
        )

    kwargs: dict[str, Any] = {}
    if config.top_p is not None:
        kwargs["top_p"] = config.top_p
    if timeout is not None:
        kwargs["timeout"] = timeout

    return ChatGoogleGenerativeAI(
        model=config.model_name,
        google_api_key=config.api_key,
        temperature=config.temperature,
        max_retries=config.max_retries,
        safety_settings=to_google_safety_settings(config.safety_settings),
        **kwargs,
    )


def get_text_generator(
    config: Annotated[AppConfig, Depends(get_config)],
) -> TextGenerator:
    """Build a ``TextGenerator`` for the current request."""
    return TextGenerator(
        build_chat_model(config.llm), model_name=config.llm.model_name
    )
