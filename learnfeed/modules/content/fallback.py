"""Batch validation and deterministic placeholder content.

A generated batch is admitted whole or not at all. Questions need at least
two options, the correct answer matching exactly one of them and some
question text; flashcards need text on both sides. Extra items beyond the
requested count are trimmed, a short batch is rejected. A rejected batch
is swapped for a placeholder batch of the requested size so stored counts
always match what the content record claims.
"""

from __future__ import annotations

from typing import Sequence

from learnfeed.core.errors import UpstreamGenerationError
from learnfeed.modules.content.models import (
    BookMetadata,
    GeneratedFlashcard,
    GeneratedQuestion,
)
from learnfeed.modules.learning.models import QuestionType, option_problems


# Validation ----------------------------------------------------------------
def question_problems(q: GeneratedQuestion) -> list[str]:
    problems: list[str] = []
    if not q.question_text.strip():
        problems.append("empty question_text")
    problems.extend(option_problems(q.options, q.correct_answer))
    return problems


def flashcard_problems(card: GeneratedFlashcard) -> list[str]:
    problems: list[str] = []
    if not card.front_text.strip():
        problems.append("empty front_text")
    if not card.back_text.strip():
        problems.append("empty back_text")
    return problems


def _check_count(kind: str, got: int, expected: int) -> None:
    if got < expected:
        raise UpstreamGenerationError(
            f"Generator returned {got} {kind}, expected {expected}",
            details={"kind": kind, "got": got, "expected": expected},
        )


def validate_questions(
    questions: Sequence[GeneratedQuestion], expected: int
) -> list[GeneratedQuestion]:
    """Return the first ``expected`` questions or raise for the whole batch."""
    _check_count("questions", len(questions), expected)
    batch = list(questions[:expected])
    for idx, q in enumerate(batch):
        problems = question_problems(q)
        if problems:
            raise UpstreamGenerationError(
                f"Question {idx + 1} is malformed: {'; '.join(problems)}",
                details={"kind": "questions", "index": idx, "problems": problems},
            )
    return batch


def validate_flashcards(
    flashcards: Sequence[GeneratedFlashcard], expected: int
) -> list[GeneratedFlashcard]:
    _check_count("flashcards", len(flashcards), expected)
    batch = list(flashcards[:expected])
    for idx, card in enumerate(batch):
        problems = flashcard_problems(card)
        if problems:
            raise UpstreamGenerationError(
                f"Flashcard {idx + 1} is malformed: {'; '.join(problems)}",
                details={"kind": "flashcards", "index": idx, "problems": problems},
            )
    return batch


# Placeholders --------------------------------------------------------------
def book_placeholder_metadata(title: str, author: str) -> BookMetadata:
    return BookMetadata(
        description=f"A comprehensive guide exploring the key concepts from {title} by {author}.",
        themes=["Personal Development", "Self-Improvement"],
        audience="General readers interested in personal growth",
        takeaways=["Key insights and practical applications"],
    )


def book_placeholder_questions(
    title: str, author: str, count: int
) -> list[GeneratedQuestion]:
    return [
        GeneratedQuestion(
            question_type=QuestionType.MCQ,
            question_text=f"What is a key concept from {title}? (Question {i + 1})",
            options=["Option A", "Option B", "Option C", "Option D"],
            correct_answer="Option A",
            explanation=f"This relates to the main themes discussed in {title} by {author}.",
        )
        for i in range(count)
    ]


def book_placeholder_flashcards(
    title: str, author: str, topic: str, count: int
) -> list[GeneratedFlashcard]:
    return [
        GeneratedFlashcard(
            front_text=f"Key concept {i + 1} from {title}?",
            back_text=(
                f"This is an important insight from {title} by {author} "
                f"that relates to {topic}."
            ),
        )
        for i in range(count)
    ]


def video_placeholder_questions(topic: str, count: int) -> list[GeneratedQuestion]:
    return [
        GeneratedQuestion(
            question_type=QuestionType.MCQ,
            question_text=f"What is a key takeaway from this video? (Question {i + 1})",
            options=["Key insight A", "Key insight B", "Key insight C", "Key insight D"],
            correct_answer="Key insight A",
            explanation=f"This relates to the main concepts discussed in the video about {topic}.",
        )
        for i in range(count)
    ]


def video_placeholder_flashcards(topic: str, count: int) -> list[GeneratedFlashcard]:
    return [
        GeneratedFlashcard(
            front_text=f"Key concept {i + 1} from this video?",
            back_text=(
                f"This is an important insight from the video about {topic} "
                "that provides practical value and actionable advice."
            ),
        )
        for i in range(count)
    ]
