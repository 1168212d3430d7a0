"""Centralized FastAPI dependency type aliases.

Providers behind these aliases can be overridden in tests via
``app.dependency_overrides[get_xxx] = ...``; the HTTP tests replace
``get_text_generator``.
"""

from typing import Annotated

from fastapi import Depends

from csvchat.core.service.chat import CsvChatService
from csvchat.core.service.deps import get_chat_service

ChatServiceDep = Annotated[CsvChatService, Depends(get_chat_service)]
