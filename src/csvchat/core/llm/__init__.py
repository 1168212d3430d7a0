"""Text-generation provider adapter built on langchain chat models."""

from .deps import build_chat_model, get_text_generator  # noqa: F401
from .provider import TextGenerator  # noqa: F401
