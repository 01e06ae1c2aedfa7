from __future__ import annotations

from fastapi import APIRouter, status

from learnfeed.core.config import settings
from learnfeed.core.errors import LearnfeedError
from learnfeed.core.logging import get_logger
from learnfeed.apis.deps import Content, CurrentUserId
from .schemas import (
    AddBookRequest,
    AddBookResponse,
    AddVideoRequest,
    AddVideoResponse,
    PlaceholderFlags,
)


router = APIRouter()

logger = get_logger(__name__)


@router.post(
    f"/{settings.app.version}/content/books",
    response_model=AddBookResponse,
    status_code=status.HTTP_200_OK,
    tags=["content"],
)
async def add_book(
    req: AddBookRequest, user_id: CurrentUserId, service: Content
) -> AddBookResponse:
    try:
        added = await service.add_book(
            user_id=user_id, title=req.title, author=req.author, topic=req.topic
        )
    except LearnfeedError:
        raise
    except Exception as e:
        logger.exception("Error processing book", extra={"user_id": user_id})
        raise LearnfeedError(
            "Failed to process book", details={"reason": str(e)}
        ) from e

    return AddBookResponse(
        book=added.book,
        metadata=added.content.metadata,
        questions=added.questions,
        flashcards=added.flashcards,
        placeholders=PlaceholderFlags(
            questions=added.content.questions_fallback,
            flashcards=added.content.flashcards_fallback,
            metadata=added.content.metadata_fallback,
        ),
    )


@router.post(
    f"/{settings.app.version}/content/videos",
    response_model=AddVideoResponse,
    status_code=status.HTTP_200_OK,
    tags=["content"],
)
async def add_video(
    req: AddVideoRequest, user_id: CurrentUserId, service: Content
) -> AddVideoResponse:
    try:
        added = await service.add_video(
            user_id=user_id, url=req.url, video_id=req.video_id, topic=req.topic
        )
    except LearnfeedError:
        raise
    except Exception as e:
        logger.exception("Error processing video", extra={"user_id": user_id})
        raise LearnfeedError(
            "Failed to process video", details={"reason": str(e)}
        ) from e

    return AddVideoResponse(
        video=added.video,
        questions=added.questions,
        flashcards=added.flashcards,
        placeholders=PlaceholderFlags(
            questions=added.content.questions_fallback,
            flashcards=added.content.flashcards_fallback,
        ),
    )
