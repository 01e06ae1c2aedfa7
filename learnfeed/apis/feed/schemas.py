from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from learnfeed.modules.learning.models import AnswerOutcome, LearningItem, Rating
from learnfeed.modules.learning.session import SessionStatus


class OpenFeedRequest(BaseModel):
    xp: int = Field(0, ge=0, description="XP carried over from earlier sessions")


class AnswerRequest(BaseModel):
    """Exactly one of ``answer`` (questions) or ``rating`` (flashcards)."""

    answer: Optional[str] = None
    rating: Optional[Rating] = None


class FeedState(BaseModel):
    status: SessionStatus
    position: int
    size: int
    streak: int
    xp: int
    current: Optional[LearningItem] = None
    upcoming: list[LearningItem] = Field(default_factory=list)


class AnswerResponse(BaseModel):
    outcome: AnswerOutcome
    state: FeedState


class EndFeedResponse(BaseModel):
    ended: bool
