"""
Unit tests for item storage and storage-mode selection.

The persistent store is stood in for by AsyncMocks; only the switch to
in-memory storage and the startup check are exercised here.
"""

import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from learnfeed.core.errors import RepositoryUnavailable
from learnfeed.core.repository import (
    FallbackItemRepository,
    StorageMode,
    check_storage,
    resolve_repository,
)
from tests.factories import make_flashcard, make_question


def _down_primary() -> MagicMock:
    primary = MagicMock()
    err = RepositoryUnavailable("connection refused")
    for name in (
        "ping",
        "add_questions",
        "add_flashcards",
        "get_questions_by_user",
        "get_flashcards_by_user",
    ):
        setattr(primary, name, AsyncMock(side_effect=err))
    return primary


class TestInMemoryItemRepository:
    @pytest.mark.asyncio
    async def test_lists_newest_first(self, memory_repo):
        old = make_question("u1", text="old", minutes=0)
        new = make_question("u1", text="new", minutes=5)
        await memory_repo.add_questions([old, new])

        assert [q.question_text for q in await memory_repo.get_questions_by_user("u1")] == [
            "new",
            "old",
        ]

    @pytest.mark.asyncio
    async def test_scoped_by_user(self, memory_repo):
        await memory_repo.add_flashcards([make_flashcard("u1"), make_flashcard("u2")])

        assert len(await memory_repo.get_flashcards_by_user("u1")) == 1
        assert await memory_repo.get_flashcards_by_user("u3") == []

    @pytest.mark.asyncio
    async def test_clear(self, memory_repo):
        await memory_repo.add_questions([make_question("u1")])
        memory_repo.clear()
        assert await memory_repo.get_questions_by_user("u1") == []


class TestFallbackItemRepository:
    def test_without_primary_is_in_memory(self):
        assert FallbackItemRepository(None).mode is StorageMode.IN_MEMORY

    @pytest.mark.asyncio
    async def test_serves_from_primary_while_up(self):
        primary = MagicMock()
        primary.get_questions_by_user = AsyncMock(return_value=[make_question("u1")])
        repo = FallbackItemRepository(primary)

        assert len(await repo.get_questions_by_user("u1")) == 1
        assert repo.mode is StorageMode.PERSISTENT

    @pytest.mark.asyncio
    async def test_switches_to_memory_and_logs(self, caplog):
        primary = _down_primary()
        repo = FallbackItemRepository(primary)

        with caplog.at_level(logging.WARNING, logger="learnfeed.core.repository"):
            await repo.add_questions([make_question("u1")])

        assert repo.mode is StorageMode.IN_MEMORY
        assert "persistent -> in_memory" in caplog.text
        assert len(await repo.get_questions_by_user("u1")) == 1
        # Once switched, the primary is not retried
        primary.get_questions_by_user.assert_not_awaited()


class TestProbe:
    @pytest.mark.asyncio
    async def test_storage_check_outcomes(self):
        up = MagicMock(ping=AsyncMock(return_value=None))

        assert await check_storage(None) is StorageMode.IN_MEMORY
        assert await check_storage(up) is StorageMode.PERSISTENT
        assert await check_storage(_down_primary()) is StorageMode.IN_MEMORY

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "storage_mode, configured",
        [("in_memory", True), ("auto", False)],
    )
    async def test_resolve_without_database(self, storage_mode, configured):
        settings = SimpleNamespace(
            app=SimpleNamespace(storage_mode=storage_mode),
            postgres=SimpleNamespace(is_configured=configured),
        )

        repo, engine = await resolve_repository(settings)

        assert repo.mode is StorageMode.IN_MEMORY
        assert engine is None
