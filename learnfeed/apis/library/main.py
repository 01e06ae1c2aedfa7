from __future__ import annotations

from fastapi import APIRouter

from learnfeed.core.config import settings
from learnfeed.apis.deps import CurrentUserId, Repository
from learnfeed.modules.learning.models import Book, Video


router = APIRouter()


@router.get(
    f"/{settings.app.version}/library/books",
    response_model=list[Book],
    tags=["library"],
)
async def list_books(user_id: CurrentUserId, repository: Repository) -> list[Book]:
    return await repository.get_books_by_user(user_id)


@router.get(
    f"/{settings.app.version}/library/videos",
    response_model=list[Video],
    tags=["library"],
)
async def list_videos(user_id: CurrentUserId, repository: Repository) -> list[Video]:
    return await repository.get_videos_by_user(user_id)
