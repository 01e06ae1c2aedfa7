"""SQL-backed item repository for books, videos, questions and flashcards."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from sqlalchemy import select, text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from learnfeed.core.db.base import session_scope
from learnfeed.core.db.schemas.content import (
    Book as DBBook,
    Flashcard as DBFlashcard,
    Question as DBQuestion,
    Video as DBVideo,
)
from learnfeed.core.errors import RepositoryUnavailable
from learnfeed.modules.learning.models import Book, Flashcard, Question, Video


def book_to_record(book: Book) -> DBBook:
    return DBBook(**book.model_dump())


def video_to_record(video: Video) -> DBVideo:
    return DBVideo(**video.model_dump())


def question_to_record(q: Question) -> DBQuestion:
    return DBQuestion(
        id=q.id,
        user_id=q.user_id,
        content_type=q.content_type.value,
        content_id=q.content_id,
        content_title=q.content_title,
        content_author=q.content_author,
        topic=q.topic,
        question_type=q.question_type.value,
        question_text=q.question_text,
        options=list(q.options),
        correct_answer=q.correct_answer,
        explanation=q.explanation,
        created_at=q.created_at,
    )


def flashcard_to_record(f: Flashcard) -> DBFlashcard:
    return DBFlashcard(
        id=f.id,
        user_id=f.user_id,
        content_type=f.content_type.value,
        content_id=f.content_id,
        content_title=f.content_title,
        content_author=f.content_author,
        topic=f.topic,
        front_text=f.front_text,
        back_text=f.back_text,
        created_at=f.created_at,
    )


class SqlItemRepository:
    """Item repository over an async SQLAlchemy session factory.

    Connection-level failures are reported as ``RepositoryUnavailable``;
    anything else (constraint violations and the like) propagates as is.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with session_scope(self.session_maker) as session:
                yield session
        except (OperationalError, InterfaceError, OSError) as e:
            raise RepositoryUnavailable(f"Database unavailable: {e}") from e

    async def ping(self) -> None:
        async with self._session() as session:
            await session.execute(text("SELECT 1"))

    # Books / videos -----------------------------------------------------
    async def add_book(self, book: Book) -> Book:
        async with self._session() as session:
            session.add(book_to_record(book))
        return book

    async def add_video(self, video: Video) -> Video:
        async with self._session() as session:
            session.add(video_to_record(video))
        return video

    async def get_books_by_user(self, user_id: str) -> list[Book]:
        async with self._session() as session:
            rows = await session.execute(
                select(DBBook)
                .where(DBBook.user_id == user_id)
                .order_by(DBBook.created_at.desc())
            )
            return [
                Book.model_validate(r, from_attributes=True)
                for r in rows.scalars().all()
            ]

    async def get_videos_by_user(self, user_id: str) -> list[Video]:
        async with self._session() as session:
            rows = await session.execute(
                select(DBVideo)
                .where(DBVideo.user_id == user_id)
                .order_by(DBVideo.created_at.desc())
            )
            return [
                Video.model_validate(r, from_attributes=True)
                for r in rows.scalars().all()
            ]

    # Learning items -----------------------------------------------------
    async def add_questions(self, questions: Sequence[Question]) -> list[Question]:
        async with self._session() as session:
            session.add_all([question_to_record(q) for q in questions])
        return list(questions)

    async def add_flashcards(self, flashcards: Sequence[Flashcard]) -> list[Flashcard]:
        async with self._session() as session:
            session.add_all([flashcard_to_record(f) for f in flashcards])
        return list(flashcards)

    # Record plus items, one transaction -------------------------------
    async def save_book(
        self, book: Book, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Book:
        async with self._session() as session:
            session.add(book_to_record(book))
            session.add_all([question_to_record(q) for q in questions])
            session.add_all([flashcard_to_record(f) for f in flashcards])
        return book

    async def save_video(
        self, video: Video, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Video:
        async with self._session() as session:
            session.add(video_to_record(video))
            session.add_all([question_to_record(q) for q in questions])
            session.add_all([flashcard_to_record(f) for f in flashcards])
        return video

    async def get_questions_by_user(self, user_id: str) -> list[Question]:
        async with self._session() as session:
            rows = await session.execute(
                select(DBQuestion)
                .where(DBQuestion.user_id == user_id)
                .order_by(DBQuestion.created_at.desc())
            )
            return [
                Question.model_validate(r, from_attributes=True)
                for r in rows.scalars().all()
            ]

    async def get_flashcards_by_user(self, user_id: str) -> list[Flashcard]:
        async with self._session() as session:
            rows = await session.execute(
                select(DBFlashcard)
                .where(DBFlashcard.user_id == user_id)
                .order_by(DBFlashcard.created_at.desc())
            )
            return [
                Flashcard.model_validate(r, from_attributes=True)
                for r in rows.scalars().all()
            ]
