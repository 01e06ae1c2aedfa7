from __future__ import annotations

from fastapi import APIRouter, status

from learnfeed.core.config import settings
from learnfeed.apis.deps import CurrentUserId, Repository, Sessions
from learnfeed.modules.learning.progress import level_progress
from .schemas import LibraryCounts, ProfileStats


router = APIRouter()


@router.get(
    f"/{settings.app.version}/profile/stats",
    response_model=ProfileStats,
    status_code=status.HTTP_200_OK,
    tags=["profile"],
)
async def get_stats(
    user_id: CurrentUserId, repository: Repository, manager: Sessions
) -> ProfileStats:
    """XP, streak and level from the live session plus library totals."""
    session = manager.get(user_id)
    xp = session.xp if session else 0
    streak = session.streak if session else 0

    library = LibraryCounts(
        books=len(await repository.get_books_by_user(user_id)),
        videos=len(await repository.get_videos_by_user(user_id)),
        questions=len(await repository.get_questions_by_user(user_id)),
        flashcards=len(await repository.get_flashcards_by_user(user_id)),
    )
    return ProfileStats(
        user_id=user_id,
        xp=xp,
        streak=streak,
        level=level_progress(xp, settings.learning.xp_per_level),
        library=library,
    )
