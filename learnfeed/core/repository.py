"""Item repository contract, in-memory store and storage-mode selection.

The storage mode is resolved once at startup by probing the database. If
the persistent store later becomes unreachable, ``FallbackItemRepository``
logs the transition and serves the rest of the process from memory. Data
written while in memory is not copied back when the database returns.

``save_book``/``save_video`` write a content record together with its items
in one transaction, so a switch can never split a record from its items.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from learnfeed.core.config import Settings
from learnfeed.core.errors import RepositoryUnavailable
from learnfeed.core.logging import get_logger
from learnfeed.modules.learning.models import Book, Flashcard, Question, Video

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = get_logger(__name__)


class StorageMode(str, Enum):
    PERSISTENT = "persistent"
    IN_MEMORY = "in_memory"


class ItemRepository(Protocol):
    async def ping(self) -> None: ...

    async def add_book(self, book: Book) -> Book: ...

    async def add_video(self, video: Video) -> Video: ...

    async def add_questions(self, questions: Sequence[Question]) -> list[Question]: ...

    async def add_flashcards(self, flashcards: Sequence[Flashcard]) -> list[Flashcard]: ...

    async def get_books_by_user(self, user_id: str) -> list[Book]: ...

    async def get_videos_by_user(self, user_id: str) -> list[Video]: ...

    async def get_questions_by_user(self, user_id: str) -> list[Question]: ...

    async def get_flashcards_by_user(self, user_id: str) -> list[Flashcard]: ...

    async def save_book(
        self, book: Book, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Book: ...

    async def save_video(
        self, video: Video, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Video: ...


def _newest_first(rows):
    return sorted(rows, key=lambda r: r.created_at, reverse=True)


class InMemoryItemRepository:
    """Process-local store. Lists are filtered per user, newest first."""

    def __init__(self) -> None:
        self.books: list[Book] = []
        self.videos: list[Video] = []
        self.questions: list[Question] = []
        self.flashcards: list[Flashcard] = []

    async def ping(self) -> None:
        return None

    async def add_book(self, book: Book) -> Book:
        self.books.append(book)
        return book

    async def add_video(self, video: Video) -> Video:
        self.videos.append(video)
        return video

    async def add_questions(self, questions: Sequence[Question]) -> list[Question]:
        self.questions.extend(questions)
        return list(questions)

    async def add_flashcards(self, flashcards: Sequence[Flashcard]) -> list[Flashcard]:
        self.flashcards.extend(flashcards)
        return list(flashcards)

    async def get_books_by_user(self, user_id: str) -> list[Book]:
        return _newest_first(b for b in self.books if b.user_id == user_id)

    async def get_videos_by_user(self, user_id: str) -> list[Video]:
        return _newest_first(v for v in self.videos if v.user_id == user_id)

    async def get_questions_by_user(self, user_id: str) -> list[Question]:
        return _newest_first(q for q in self.questions if q.user_id == user_id)

    async def get_flashcards_by_user(self, user_id: str) -> list[Flashcard]:
        return _newest_first(f for f in self.flashcards if f.user_id == user_id)

    async def save_book(
        self, book: Book, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Book:
        self.questions.extend(questions)
        self.flashcards.extend(flashcards)
        self.books.append(book)
        return book

    async def save_video(
        self, video: Video, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Video:
        self.questions.extend(questions)
        self.flashcards.extend(flashcards)
        self.videos.append(video)
        return video

    def clear(self) -> None:
        self.books.clear()
        self.videos.clear()
        self.questions.clear()
        self.flashcards.clear()


class FallbackItemRepository:
    """Serves from the persistent store until it fails, then from memory."""

    def __init__(
        self,
        primary: Optional[ItemRepository],
        *,
        mode: StorageMode = StorageMode.PERSISTENT,
        memory: Optional[InMemoryItemRepository] = None,
    ) -> None:
        self.primary = primary
        self.memory = memory or InMemoryItemRepository()
        self.mode = mode if primary is not None else StorageMode.IN_MEMORY

    def _switch_to_memory(self, operation: str, error: RepositoryUnavailable) -> None:
        logger.warning(
            "Storage mode changed persistent -> in_memory during %s: %s. "
            "Data written from now on is not persisted.",
            operation,
            error.message,
            extra={"storage_mode": StorageMode.IN_MEMORY.value},
        )
        self.mode = StorageMode.IN_MEMORY

    async def _call(self, operation: str, *args):
        if self.mode is StorageMode.PERSISTENT and self.primary is not None:
            try:
                return await getattr(self.primary, operation)(*args)
            except RepositoryUnavailable as e:
                self._switch_to_memory(operation, e)
        return await getattr(self.memory, operation)(*args)

    async def ping(self) -> None:
        await self._call("ping")

    async def add_book(self, book: Book) -> Book:
        return await self._call("add_book", book)

    async def add_video(self, video: Video) -> Video:
        return await self._call("add_video", video)

    async def add_questions(self, questions: Sequence[Question]) -> list[Question]:
        return await self._call("add_questions", questions)

    async def add_flashcards(self, flashcards: Sequence[Flashcard]) -> list[Flashcard]:
        return await self._call("add_flashcards", flashcards)

    async def get_books_by_user(self, user_id: str) -> list[Book]:
        return await self._call("get_books_by_user", user_id)

    async def get_videos_by_user(self, user_id: str) -> list[Video]:
        return await self._call("get_videos_by_user", user_id)

    async def get_questions_by_user(self, user_id: str) -> list[Question]:
        return await self._call("get_questions_by_user", user_id)

    async def get_flashcards_by_user(self, user_id: str) -> list[Flashcard]:
        return await self._call("get_flashcards_by_user", user_id)

    async def save_book(
        self, book: Book, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Book:
        return await self._call("save_book", book, questions, flashcards)

    async def save_video(
        self, video: Video, questions: Sequence[Question], flashcards: Sequence[Flashcard]
    ) -> Video:
        return await self._call("save_video", video, questions, flashcards)


async def check_storage(primary: Optional[ItemRepository]) -> StorageMode:
    """Capability check: one round-trip to the persistent store."""
    if primary is None:
        return StorageMode.IN_MEMORY
    try:
        await primary.ping()
    except RepositoryUnavailable as e:
        logger.warning(
            "Database not available, using in-memory storage: %s",
            e.message,
            extra={"storage_mode": StorageMode.IN_MEMORY.value},
        )
        return StorageMode.IN_MEMORY
    logger.info(
        "Database available, using persistent storage",
        extra={"storage_mode": StorageMode.PERSISTENT.value},
    )
    return StorageMode.PERSISTENT


async def resolve_repository(
    settings: Settings,
) -> tuple[FallbackItemRepository, Optional["AsyncEngine"]]:
    """Build the repository for this process and the engine backing it, if any.

    The engine is returned so the caller can dispose of it at shutdown.
    """
    if settings.app.storage_mode == StorageMode.IN_MEMORY.value:
        logger.info("In-memory storage forced by STORAGE_MODE")
        return FallbackItemRepository(None), None
    if not settings.postgres.is_configured:
        logger.info("POSTGRES_HOST not set, using in-memory storage")
        return FallbackItemRepository(None), None

    from learnfeed.core.db.base import build_engine, build_session_maker
    from learnfeed.core.db_services import SqlItemRepository

    engine = build_engine(str(settings.postgres.connection_string))
    primary = SqlItemRepository(build_session_maker(engine))
    mode = await check_storage(primary)
    if mode is StorageMode.IN_MEMORY:
        await engine.dispose()
        return FallbackItemRepository(None), None
    return FallbackItemRepository(primary, mode=mode), engine
