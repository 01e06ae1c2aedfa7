"""
Unit tests for question and flashcard generation.

The language-model call is replaced with a fake keyed on the requested
output type, so these run offline.
"""

from unittest.mock import AsyncMock

import pytest

from learnfeed.core.errors import UpstreamGenerationError
from learnfeed.modules.content import generator
from learnfeed.modules.content.models import (
    BookMetadata,
    FlashcardBatch,
    GeneratedFlashcard,
    GeneratedQuestion,
    QuestionBatch,
)


def _questions(n: int, correct: str = "A") -> QuestionBatch:
    return QuestionBatch(
        questions=[
            GeneratedQuestion(
                question_text=f"Q{i}?", options=["A", "B", "C", "D"], correct_answer=correct
            )
            for i in range(n)
        ]
    )


def _flashcards(n: int) -> FlashcardBatch:
    return FlashcardBatch(
        flashcards=[
            GeneratedFlashcard(front_text=f"F{i}", back_text=f"B{i}") for i in range(n)
        ]
    )


def fake_agent(**outputs):
    """Build a ``_run_agent`` stand-in; values may be outputs or exceptions."""
    by_type = {
        BookMetadata: outputs.get("metadata"),
        QuestionBatch: outputs.get("questions"),
        FlashcardBatch: outputs.get("flashcards"),
    }

    async def _run(output_type, system_prompt, instruction):
        result = by_type[output_type]
        if isinstance(result, Exception):
            raise result
        return result

    return AsyncMock(side_effect=_run)


@pytest.fixture
def use_agent(monkeypatch):
    def _install(**outputs):
        fake = fake_agent(**outputs)
        monkeypatch.setattr(generator, "_run_agent", fake)
        return fake

    return _install


class TestGenerateForBook:
    @pytest.mark.asyncio
    async def test_valid_output_is_admitted(self, use_agent):
        use_agent(
            metadata=BookMetadata(description="About habits"),
            questions=_questions(20),
            flashcards=_flashcards(20),
        )

        content = await generator.generate_for_book("Atomic Habits", "James Clear", "habits")

        assert content.metadata.description == "About habits"
        assert len(content.questions) == 20
        assert len(content.flashcards) == 20
        assert not (
            content.questions_fallback
            or content.flashcards_fallback
            or content.metadata_fallback
        )

    @pytest.mark.asyncio
    async def test_invalid_questions_are_replaced_whole(self, use_agent):
        use_agent(
            metadata=BookMetadata(description="About habits"),
            questions=_questions(20, correct="Z"),
            flashcards=_flashcards(20),
        )

        content = await generator.generate_for_book("Atomic Habits", "James Clear", "habits")

        assert content.questions_fallback is True
        assert len(content.questions) == 20
        assert all(q.correct_answer == "Option A" for q in content.questions)
        assert content.flashcards_fallback is False

    @pytest.mark.asyncio
    async def test_provider_failure_uses_placeholders_everywhere(self, use_agent):
        use_agent(
            metadata=ValueError("invalid JSON"),
            questions=ValueError("invalid JSON"),
            flashcards=UpstreamGenerationError("no API key"),
        )

        content = await generator.generate_for_book("Deep Work", "Cal Newport", "focus")

        assert content.metadata_fallback and content.questions_fallback
        assert content.flashcards_fallback
        assert len(content.questions) == 20
        assert len(content.flashcards) == 20
        assert "Deep Work" in content.metadata.description

    @pytest.mark.asyncio
    async def test_short_batch_falls_back_and_extra_is_trimmed(self, use_agent):
        use_agent(
            metadata=BookMetadata(description="d"),
            questions=_questions(3),
            flashcards=_flashcards(9),
        )

        content = await generator.generate_for_book("T", "A", "t", count=5)

        assert content.questions_fallback is True
        assert len(content.questions) == 5
        assert content.flashcards_fallback is False
        assert [f.front_text for f in content.flashcards] == [f"F{i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_instruction_carries_requested_count(self, use_agent):
        fake = use_agent(
            metadata=BookMetadata(description="d"),
            questions=_questions(4),
            flashcards=_flashcards(4),
        )

        await generator.generate_for_book("T", "A", "t", count=4)

        instructions = [call.args[2] for call in fake.await_args_list]
        assert any("N: 4" in text for text in instructions)


class TestGenerateForVideo:
    @pytest.mark.asyncio
    async def test_item_count_drives_batch_size(self, use_agent):
        use_agent(questions=_questions(3), flashcards=_flashcards(3))

        content = await generator.generate_for_video("transcript", "focus", 3)

        assert content.item_count == 3
        assert len(content.questions) == len(content.flashcards) == 3
        assert not content.questions_fallback

    @pytest.mark.asyncio
    async def test_failure_uses_video_placeholders(self, use_agent):
        use_agent(questions=RuntimeError("timeout"), flashcards=RuntimeError("timeout"))

        content = await generator.generate_for_video("transcript", "focus", 0)

        assert content.item_count == 1
        assert content.questions[0].correct_answer == "Key insight A"
        assert content.flashcards_fallback is True


class TestModelSelection:
    def test_missing_key_is_an_upstream_error(self, monkeypatch):
        monkeypatch.setattr(generator.settings.llm, "provider", "deepseek")
        monkeypatch.setattr(generator.settings.llm, "deepseek_api_key", None)
        with pytest.raises(UpstreamGenerationError):
            generator._build_model_by_settings()
