"""FastAPI dependency factory for the chat service."""

from typing import Annotated

from fastapi import Depends

from csvchat.configs.config import AppConfig
from csvchat.core.llm import TextGenerator, get_text_generator
from csvchat.infra.lifespan import get_config

from .chat import CsvChatService


def get_chat_service(
    generator: Annotated[TextGenerator, Depends(get_text_generator)],
    config: Annotated[AppConfig, Depends(get_config)],
) -> CsvChatService:
    """Create a chat service per request from the validated config."""
    return CsvChatService(generator, config)
