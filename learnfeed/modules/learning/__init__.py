"""Learning feed module exports."""

from .models import (
    AnswerOutcome,
    Book,
    ContentType,
    Flashcard,
    LearningItem,
    Question,
    QuestionType,
    Rating,
    Video,
)
from .session import SessionEngine, SessionState, SessionStatus
from .manager import SessionManager

__all__ = [
    "AnswerOutcome",
    "Book",
    "ContentType",
    "Flashcard",
    "LearningItem",
    "Question",
    "QuestionType",
    "Rating",
    "Video",
    "SessionEngine",
    "SessionState",
    "SessionStatus",
    "SessionManager",
]
