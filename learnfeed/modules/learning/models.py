"""Pydantic models for the learning feed.

Questions and flashcards share the owning-content metadata and are told apart
by the ``type`` tag, which is what the feed and the API discriminate on.
Ids follow ``<prefix>_<unix-ms>_<random>`` and are assigned when a record is
built, so items coming from the generator get theirs before storage.
"""

from __future__ import annotations

import random
import string
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

_ID_ALPHABET = string.digits + string.ascii_lowercase

MIN_OPTIONS = 2


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def option_problems(options: list[str], correct_answer: str) -> list[str]:
    """Problems with an option list: too short, or the answer not matching exactly one option."""
    problems: list[str] = []
    if len(options) < MIN_OPTIONS:
        problems.append(f"needs at least {MIN_OPTIONS} options, got {len(options)}")
    matches = options.count(correct_answer)
    if matches == 0:
        problems.append("correct_answer is not one of the options")
    elif matches > 1:
        problems.append("correct_answer appears more than once in options")
    return problems


class ContentType(str, Enum):
    BOOK = "book"
    VIDEO = "video"


class QuestionType(str, Enum):
    MCQ = "mcq"
    TRUE_FALSE = "true_false"
    MATCH_PAIRS = "match_pairs"
    ARRANGE_STEPS = "arrange_steps"
    IMAGE_BASED = "image_based"


class Rating(str, Enum):
    """Self-reported recall difficulty for a flashcard."""

    EASY = "easy"
    HARD = "hard"


class _ItemBase(BaseModel):
    content_type: ContentType
    content_id: str
    content_title: str
    content_author: str
    topic: str
    user_id: str
    created_at: datetime = Field(default_factory=_now_utc)


class Question(_ItemBase):
    type: Literal["question"] = "question"
    id: str = Field(default_factory=lambda: new_id("q"))
    question_type: QuestionType = QuestionType.MCQ
    question_text: str
    options: list[str]
    correct_answer: str
    explanation: str = ""

    @model_validator(mode="after")
    def _answer_is_one_option(self) -> "Question":
        problems = option_problems(self.options, self.correct_answer)
        if problems:
            raise ValueError("; ".join(problems))
        return self


class Flashcard(_ItemBase):
    type: Literal["flashcard"] = "flashcard"
    id: str = Field(default_factory=lambda: new_id("f"))
    front_text: str
    back_text: str


LearningItem = Annotated[Union[Question, Flashcard], Field(discriminator="type")]


class Book(BaseModel):
    id: str = Field(default_factory=lambda: new_id("book"))
    title: str
    author: str
    topic: str
    description: str = ""
    cover_url: str = ""
    total_questions: int = 0
    total_flashcards: int = 0
    user_id: str
    created_at: datetime = Field(default_factory=_now_utc)


class Video(BaseModel):
    id: str = Field(default_factory=lambda: new_id("video"))
    title: str
    author: str
    topic: str
    video_id: str
    url: str
    thumbnail_url: str = ""
    duration: int = 0  # seconds
    total_questions: int = 0
    total_flashcards: int = 0
    user_id: str
    created_at: datetime = Field(default_factory=_now_utc)


class AnswerOutcome(BaseModel):
    """Result of scoring one answer or rating."""

    item_id: str
    is_correct: bool
    streak_after: int
    xp_after: int
    position: int
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None
