"""Question and flashcard generation with pydantic-ai.

Provides:
- async generate_for_book(title, author, topic) -> BookContent
- async generate_for_video(transcript, topic, item_count) -> VideoContent

Every model call is validated; a call that fails or returns an unusable
batch is replaced by deterministic placeholder content, so these functions
never raise for upstream problems. Provider imports are kept lazy to avoid
import-time errors when credentials are missing.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel
from pydantic_ai import Agent

from learnfeed.core.config import settings
from learnfeed.core.errors import UpstreamGenerationError
from learnfeed.core.logging import get_logger
from learnfeed.modules.content.fallback import (
    book_placeholder_flashcards,
    book_placeholder_metadata,
    book_placeholder_questions,
    validate_flashcards,
    validate_questions,
    video_placeholder_flashcards,
    video_placeholder_questions,
)
from learnfeed.modules.content.models import (
    BookContent,
    BookMetadata,
    FlashcardBatch,
    QuestionBatch,
    VideoContent,
)

logger = get_logger(__name__)

T = TypeVar("T")
OutT = TypeVar("OutT", bound=BaseModel)


def _build_deepseek_model():
    """DeepSeek through its OpenAI-compatible endpoint (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.llm.deepseek_api_key:
        raise UpstreamGenerationError(
            "DeepSeek API key not configured. Set DEEPSEEK_API_KEY in your environment."
        )
    provider = OpenAIProvider(
        api_key=settings.llm.deepseek_api_key,
        base_url=settings.llm.deepseek_base_url,
    )
    return OpenAIChatModel(settings.llm.deepseek_model, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.llm.openrouter_api_key:
        raise UpstreamGenerationError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )
    provider = OpenAIProvider(
        api_key=settings.llm.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.llm.openrouter_model, provider=provider)


def _build_google_model():
    """Build Google Gemini model for pydantic-ai (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    if not settings.llm.gemini_api_key:
        raise UpstreamGenerationError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )
    provider = GoogleProvider(api_key=settings.llm.gemini_api_key)
    return GoogleModel(settings.llm.gemini_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.llm.provider or "deepseek").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    if provider == "google":
        return _build_google_model()
    return _build_deepseek_model()


async def _run_agent(
    output_type: type[OutT], system_prompt: str, instruction: str
) -> OutT:
    model = _build_model_by_settings()
    agent: Agent[None, OutT] = Agent[None, OutT](
        model=model,
        output_type=output_type,
        system_prompt=system_prompt,
        retries=settings.llm.retries,
    )
    res = await agent.run(instruction)
    return res.output


QUESTIONS_SYSTEM_PROMPT = (
    "You are an expert quiz author. Generate MULTIPLE-CHOICE questions that test "
    "understanding of key concepts. Return a JSON object that validates as "
    "QuestionBatch: {questions}. Each question has: {question_type, question_text, "
    "options, correct_answer, explanation}. Rules: "
    "- Create exactly N questions (provided in the instruction). "
    '- question_type is "mcq". '
    "- Each question has EXACTLY 4 concise options (plain text). "
    "- correct_answer is copied character for character from one of the options. "
    "- explanation is one or two sentences. "
    "- Avoid markdown; do not include code fences."
)

FLASHCARDS_SYSTEM_PROMPT = (
    "You are an expert educator who crafts flashcards for spaced repetition. "
    "Return a JSON object that validates as FlashcardBatch: {flashcards}. Each "
    "flashcard has: {front_text, back_text}. Rules: "
    "- Create exactly N flashcards (provided in the instruction). "
    "- front_text is a clear question or key term. "
    "- back_text is a concise but complete answer or explanation. "
    "- Plain text only, no markdown."
)

METADATA_SYSTEM_PROMPT = (
    "You are a book expert. Return a JSON object that validates as BookMetadata: "
    "{description, themes, audience, takeaways}. The description is 2-3 sentences; "
    "themes and takeaways are short lists of plain strings."
)


def _book_questions_instruction(title: str, author: str, n: int) -> str:
    return (
        f'Based on the book "{title}" by {author}, create N multiple-choice questions. '
        "Focus on practical applications, key insights, and important concepts from the book.\n\n"
        f"N: {int(n)}"
    )


def _book_flashcards_instruction(title: str, author: str, n: int) -> str:
    return (
        f'Based on the book "{title}" by {author}, create N flashcards. '
        "Focus on key concepts, definitions, frameworks, and actionable insights.\n\n"
        f"N: {int(n)}"
    )


def _book_metadata_instruction(title: str, author: str, topic: str) -> str:
    return (
        f'For the book "{title}" by {author} (topic: {topic}), provide a brief description, '
        "key themes and concepts, the target audience and the main takeaways."
    )


def _video_questions_instruction(transcript: str, topic: str, n: int) -> str:
    return (
        f'Based on this video transcript about {topic}:\n\n"{transcript}"\n\n'
        "Create N multiple-choice questions that test understanding of the key concepts. "
        "Focus on practical applications and key insights from the video.\n\n"
        f"N: {int(n)}"
    )


def _video_flashcards_instruction(transcript: str, topic: str, n: int) -> str:
    return (
        f'Based on this video transcript about {topic}:\n\n"{transcript}"\n\n'
        "Create N flashcards. Focus on key concepts, definitions, and actionable "
        "insights from the video.\n\n"
        f"N: {int(n)}"
    )


async def _generate_or_fallback(
    kind: str,
    call: Callable[[], Any],
    validate: Callable[[Any], T],
    fallback: Callable[[], T],
) -> tuple[T, bool]:
    """Run ``call`` and ``validate``; on any failure return ``fallback()``.

    Returns the content and whether the fallback was used.
    """
    try:
        raw = await call()
        return validate(raw), False
    except UpstreamGenerationError as e:
        logger.warning("Discarding generated %s: %s", kind, e.message)
    except Exception as e:  # noqa: BLE001
        # Provider, network and output-parsing errors all end up here
        err = UpstreamGenerationError(f"{kind} generation failed: {e}")
        logger.warning("%s", err.message, exc_info=e)
    return fallback(), True


async def generate_for_book(
    title: str, author: str, topic: str, *, count: Optional[int] = None
) -> BookContent:
    n = max(1, int(count or settings.learning.book_item_count))

    metadata, metadata_fallback = await _generate_or_fallback(
        "book metadata",
        lambda: _run_agent(
            BookMetadata,
            METADATA_SYSTEM_PROMPT,
            _book_metadata_instruction(title, author, topic),
        ),
        lambda out: out,
        lambda: book_placeholder_metadata(title, author),
    )
    questions, questions_fallback = await _generate_or_fallback(
        "questions",
        lambda: _run_agent(
            QuestionBatch,
            QUESTIONS_SYSTEM_PROMPT,
            _book_questions_instruction(title, author, n),
        ),
        lambda out: validate_questions(out.questions, n),
        lambda: book_placeholder_questions(title, author, n),
    )
    flashcards, flashcards_fallback = await _generate_or_fallback(
        "flashcards",
        lambda: _run_agent(
            FlashcardBatch,
            FLASHCARDS_SYSTEM_PROMPT,
            _book_flashcards_instruction(title, author, n),
        ),
        lambda out: validate_flashcards(out.flashcards, n),
        lambda: book_placeholder_flashcards(title, author, topic, n),
    )
    return BookContent(
        metadata=metadata,
        metadata_fallback=metadata_fallback,
        questions=questions,
        questions_fallback=questions_fallback,
        flashcards=flashcards,
        flashcards_fallback=flashcards_fallback,
    )


async def generate_for_video(transcript: str, topic: str, item_count: int) -> VideoContent:
    n = max(1, int(item_count))

    questions, questions_fallback = await _generate_or_fallback(
        "questions",
        lambda: _run_agent(
            QuestionBatch,
            QUESTIONS_SYSTEM_PROMPT,
            _video_questions_instruction(transcript, topic, n),
        ),
        lambda out: validate_questions(out.questions, n),
        lambda: video_placeholder_questions(topic, n),
    )
    flashcards, flashcards_fallback = await _generate_or_fallback(
        "flashcards",
        lambda: _run_agent(
            FlashcardBatch,
            FLASHCARDS_SYSTEM_PROMPT,
            _video_flashcards_instruction(transcript, topic, n),
        ),
        lambda out: validate_flashcards(out.flashcards, n),
        lambda: video_placeholder_flashcards(topic, n),
    )
    return VideoContent(
        item_count=n,
        questions=questions,
        questions_fallback=questions_fallback,
        flashcards=flashcards,
        flashcards_fallback=flashcards_fallback,
    )
