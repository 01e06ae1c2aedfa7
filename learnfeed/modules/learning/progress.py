"""Level math for the profile view."""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_XP_PER_LEVEL = 100


class LevelProgress(BaseModel):
    xp: int
    level: int
    xp_into_level: int
    xp_to_next_level: int


def level_progress(xp: int, xp_per_level: int = DEFAULT_XP_PER_LEVEL) -> LevelProgress:
    """Levels start at 1 and advance every ``xp_per_level`` points."""
    xp = max(0, int(xp))
    per_level = max(1, int(xp_per_level))
    into = xp % per_level
    return LevelProgress(
        xp=xp,
        level=xp // per_level + 1,
        xp_into_level=into,
        xp_to_next_level=per_level - into,
    )
