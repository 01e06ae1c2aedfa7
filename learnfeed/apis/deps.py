from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from learnfeed.core.errors import ValidationError
from learnfeed.core.logging import bind_user
from learnfeed.core.repository import ItemRepository
from learnfeed.modules.content.service import ContentService
from learnfeed.modules.learning.manager import SessionManager


async def current_user_id(
    x_user_id: Optional[str] = Header(default=None),
) -> str:
    """Resolve the calling user from the ``X-User-Id`` header.

    Authentication happens upstream; this service only scopes data by the id
    it is given.
    """
    if not x_user_id or not x_user_id.strip():
        raise ValidationError("Missing X-User-Id header")
    user_id = x_user_id.strip()
    bind_user(user_id)
    return user_id


def get_repository(request: Request) -> ItemRepository:
    return request.app.state.repository


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service


CurrentUserId = Annotated[str, Depends(current_user_id)]
Repository = Annotated[ItemRepository, Depends(get_repository)]
Sessions = Annotated[SessionManager, Depends(get_session_manager)]
Content = Annotated[ContentService, Depends(get_content_service)]
