"""
Tests for SqlItemRepository over an in-process SQLite database.

Runs the real ORM models, converters and queries through the async engine
with aiosqlite, so column sets, JSON options and ordering are exercised.
SQLite returns naive timestamps, so ``created_at`` is compared by order only.
"""

from typing import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from learnfeed.core.db.base import Base, build_session_maker
from learnfeed.core.db_services import SqlItemRepository
from learnfeed.core.errors import RepositoryUnavailable
from learnfeed.modules.learning.models import Question
from tests.factories import make_book, make_flashcard, make_question, make_video


@pytest_asyncio.fixture
async def sql_repo() -> AsyncIterator[SqlItemRepository]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield SqlItemRepository(build_session_maker(engine))
    finally:
        await engine.dispose()


def _fields(model) -> dict:
    return model.model_dump(exclude={"created_at"})


class TestRoundTrip:
    @pytest.mark.asyncio
    async def test_books_and_videos(self, sql_repo):
        old, new = make_book("u1", title="Old", minutes=0), make_book("u1", title="New", minutes=5)
        video = make_video("u1")
        await sql_repo.add_book(old)
        await sql_repo.add_book(new)
        await sql_repo.add_book(make_book("u2"))
        await sql_repo.add_video(video)

        books = await sql_repo.get_books_by_user("u1")
        videos = await sql_repo.get_videos_by_user("u1")

        assert [b.title for b in books] == ["New", "Old"]
        assert _fields(books[0]) == _fields(new)
        assert [_fields(v) for v in videos] == [_fields(video)]

    @pytest.mark.asyncio
    async def test_questions_keep_options_and_type_tag(self, sql_repo):
        first = make_question("u1", text="first", minutes=1)
        second = make_question(
            "u1", text="second", options=["Yes", "No"], correct="No", minutes=2
        )
        await sql_repo.add_questions([first, second, make_question("u2")])

        stored = await sql_repo.get_questions_by_user("u1")

        assert [q.question_text for q in stored] == ["second", "first"]
        assert stored[0].type == "question"
        assert stored[0].options == ["Yes", "No"]
        assert [_fields(q) for q in stored] == [_fields(second), _fields(first)]

    @pytest.mark.asyncio
    async def test_flashcards(self, sql_repo):
        card = make_flashcard("u1", front="t", back="b")
        await sql_repo.add_flashcards([card])

        stored = await sql_repo.get_flashcards_by_user("u1")

        assert [_fields(f) for f in stored] == [_fields(card)]
        assert stored[0].type == "flashcard"
        assert await sql_repo.get_flashcards_by_user("u2") == []


class TestSaveWithItems:
    @pytest.mark.asyncio
    async def test_save_book_writes_record_and_items(self, sql_repo):
        book = make_book("u1")
        q = make_question("u1", content_id=book.id)
        f = make_flashcard("u1", content_id=book.id)

        await sql_repo.save_book(book, [q], [f])

        assert [b.id for b in await sql_repo.get_books_by_user("u1")] == [book.id]
        assert [i.content_id for i in await sql_repo.get_questions_by_user("u1")] == [book.id]
        assert len(await sql_repo.get_flashcards_by_user("u1")) == 1

    @pytest.mark.asyncio
    async def test_failed_item_insert_rolls_back_record(self, sql_repo):
        taken = make_question("u1")
        await sql_repo.add_questions([taken])
        video = make_video("u1")
        clash = Question(**{**taken.model_dump(), "content_id": video.id})

        with pytest.raises(IntegrityError):
            await sql_repo.save_video(video, [clash], [make_flashcard("u1")])

        assert await sql_repo.get_videos_by_user("u1") == []
        assert await sql_repo.get_flashcards_by_user("u1") == []
        assert len(await sql_repo.get_questions_by_user("u1")) == 1


@pytest.mark.asyncio
async def test_unreachable_database_is_repository_unavailable(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'db.sqlite'}"
    )
    repo = SqlItemRepository(build_session_maker(engine))
    try:
        with pytest.raises(RepositoryUnavailable):
            await repo.ping()
    finally:
        await engine.dispose()
