"""Adds books and videos to a user's library.

Generation never fails the request: unusable model output has already been
replaced by placeholders by the time it reaches this service. The content
record's item totals are taken from the items actually stored, and the
record is saved together with its items in one repository call.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from learnfeed.core.config import settings
from learnfeed.core.errors import ValidationError
from learnfeed.core.logging import get_logger
from learnfeed.core.repository import ItemRepository
from learnfeed.modules.content import generator, video as video_meta
from learnfeed.modules.content.models import (
    BookContent,
    GeneratedContent,
    VideoContent,
)
from learnfeed.modules.learning.models import (
    Book,
    ContentType,
    Flashcard,
    Question,
    Video,
)

logger = get_logger(__name__)

COVER_URL = (
    "https://images.unsplash.com/photo-1544716278-ca5e3f4abd8c"
    "?w=300&h=400&fit=crop&q=80&auto=format&sig={sig}"
)


@dataclass
class AddedBook:
    book: Book
    questions: list[Question]
    flashcards: list[Flashcard]
    content: BookContent


@dataclass
class AddedVideo:
    video: Video
    questions: list[Question]
    flashcards: list[Flashcard]
    content: VideoContent


def _require(**fields: Optional[str]) -> dict[str, str]:
    missing = [name for name, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})
    return {name: value.strip() for name, value in fields.items()}  # type: ignore[union-attr]


def _materialize(
    content: GeneratedContent,
    *,
    user_id: str,
    content_type: ContentType,
    content_id: str,
    title: str,
    author: str,
    topic: str,
) -> tuple[list[Question], list[Flashcard]]:
    common = dict(
        user_id=user_id,
        content_type=content_type,
        content_id=content_id,
        content_title=title,
        content_author=author,
        topic=topic,
    )
    questions = [Question(**common, **q.model_dump()) for q in content.questions]
    flashcards = [Flashcard(**common, **f.model_dump()) for f in content.flashcards]
    return questions, flashcards


class ContentService:
    def __init__(self, repository: ItemRepository) -> None:
        self.repository = repository

    async def add_book(
        self, *, user_id: str, title: str, author: str, topic: str
    ) -> AddedBook:
        fields = _require(title=title, author=author, topic=topic)
        title, author, topic = fields["title"], fields["author"], fields["topic"]
        logger.info("Processing book %r by %s", title, author, extra={"user_id": user_id})

        content = await generator.generate_for_book(title, author, topic)

        book = Book(
            title=title,
            author=author,
            topic=topic,
            description=content.metadata.description,
            cover_url=COVER_URL.format(sig=random.random()),
            user_id=user_id,
        )
        questions, flashcards = _materialize(
            content,
            user_id=user_id,
            content_type=ContentType.BOOK,
            content_id=book.id,
            title=title,
            author=author,
            topic=topic,
        )
        book.total_questions = len(questions)
        book.total_flashcards = len(flashcards)

        await self.repository.save_book(book, questions, flashcards)
        return AddedBook(
            book=book, questions=questions, flashcards=flashcards, content=content
        )

    async def add_video(
        self, *, user_id: str, url: str, video_id: str, topic: str
    ) -> AddedVideo:
        fields = _require(url=url, video_id=video_id, topic=topic)
        url, video_id, topic = fields["url"], fields["video_id"], fields["topic"]
        logger.info("Processing video %s", video_id, extra={"user_id": user_id})

        meta = await video_meta.fetch_video_metadata(video_id)
        item_count = video_meta.item_count_for_duration(
            meta.duration, settings.learning.seconds_per_video_item
        )
        transcript = video_meta.simulated_transcript(meta.title, topic)
        content = await generator.generate_for_video(transcript, topic, item_count)

        video = Video(
            title=meta.title,
            author=meta.author,
            topic=topic,
            video_id=video_id,
            url=url,
            thumbnail_url=meta.thumbnail_url,
            duration=meta.duration,
            user_id=user_id,
        )
        questions, flashcards = _materialize(
            content,
            user_id=user_id,
            content_type=ContentType.VIDEO,
            content_id=video.id,
            title=meta.title,
            author=meta.author,
            topic=topic,
        )
        video.total_questions = len(questions)
        video.total_flashcards = len(flashcards)

        await self.repository.save_video(video, questions, flashcards)
        return AddedVideo(
            video=video, questions=questions, flashcards=flashcards, content=content
        )
