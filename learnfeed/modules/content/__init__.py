"""Content generation module exports."""

from .models import (
    BookContent,
    BookMetadata,
    GeneratedFlashcard,
    GeneratedQuestion,
    VideoContent,
)
from .generator import generate_for_book, generate_for_video
from .service import AddedBook, AddedVideo, ContentService

__all__ = [
    "BookContent",
    "BookMetadata",
    "GeneratedFlashcard",
    "GeneratedQuestion",
    "VideoContent",
    "generate_for_book",
    "generate_for_video",
    "AddedBook",
    "AddedVideo",
    "ContentService",
]
