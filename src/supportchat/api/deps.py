"""Centralized FastAPI dependency type aliases.

Each ``*Dep`` alias wraps a single ``get_*`` factory, which tests can
replace via ``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from supportchat.core.service import ConversationService, get_conversation_service

ConversationServiceDep = Annotated[
    ConversationService, Depends(get_conversation_service)
]
