"""Pydantic models for generator output.

These are the shapes the language model is asked to return. They are kept
loose (no length constraints) so structured output stays simple; the
checks that decide whether a batch is admitted live in ``fallback.py``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from learnfeed.modules.learning.models import QuestionType


class GeneratedQuestion(BaseModel):
    question_type: QuestionType = QuestionType.MCQ
    question_text: str
    options: list[str] = Field(default_factory=list)
    correct_answer: str
    explanation: str = ""


class GeneratedFlashcard(BaseModel):
    front_text: str
    back_text: str


class QuestionBatch(BaseModel):
    """Structured output for question generation."""

    questions: list[GeneratedQuestion] = Field(default_factory=list)


class FlashcardBatch(BaseModel):
    """Structured output for flashcard generation."""

    flashcards: list[GeneratedFlashcard] = Field(default_factory=list)


class BookMetadata(BaseModel):
    description: str
    themes: list[str] = Field(default_factory=list)
    audience: str = ""
    takeaways: list[str] = Field(default_factory=list)


class GeneratedContent(BaseModel):
    questions: list[GeneratedQuestion] = Field(default_factory=list)
    flashcards: list[GeneratedFlashcard] = Field(default_factory=list)
    # True when the part was replaced by placeholder content
    questions_fallback: bool = False
    flashcards_fallback: bool = False


class BookContent(GeneratedContent):
    metadata: BookMetadata
    metadata_fallback: bool = False


class VideoContent(GeneratedContent):
    item_count: int
