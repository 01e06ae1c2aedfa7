from __future__ import annotations

from pydantic import BaseModel

from learnfeed.modules.learning.progress import LevelProgress


class LibraryCounts(BaseModel):
    books: int = 0
    videos: int = 0
    questions: int = 0
    flashcards: int = 0


class ProfileStats(BaseModel):
    user_id: str
    xp: int
    streak: int
    level: LevelProgress
    library: LibraryCounts
