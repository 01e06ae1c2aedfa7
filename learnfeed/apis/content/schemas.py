from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from learnfeed.modules.content.models import BookMetadata
from learnfeed.modules.learning.models import Book, Flashcard, Question, Video


class AddBookRequest(BaseModel):
    # Optional here so a missing field is reported as 400 by the service
    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    topic: Optional[str] = Field(None, description="Free-form category tag")


class AddVideoRequest(BaseModel):
    url: Optional[str] = Field(None, description="Video URL")
    video_id: Optional[str] = Field(None, description="YouTube video id")
    topic: Optional[str] = Field(None, description="Free-form category tag")


class PlaceholderFlags(BaseModel):
    questions: bool = False
    flashcards: bool = False
    metadata: bool = False


class AddBookResponse(BaseModel):
    success: bool = True
    book: Book
    metadata: BookMetadata
    questions: list[Question] = Field(default_factory=list)
    flashcards: list[Flashcard] = Field(default_factory=list)
    placeholders: PlaceholderFlags = Field(default_factory=PlaceholderFlags)


class AddVideoResponse(BaseModel):
    success: bool = True
    video: Video
    questions: list[Question] = Field(default_factory=list)
    flashcards: list[Flashcard] = Field(default_factory=list)
    placeholders: PlaceholderFlags = Field(default_factory=PlaceholderFlags)
