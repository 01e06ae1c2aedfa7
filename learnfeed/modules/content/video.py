"""Video metadata helpers.

Metadata comes from the YouTube Data API when a key is configured and falls
back to fixed defaults otherwise. Transcripts are not fetched: generation
works from a short simulated transcript built from the title and topic.
"""

from __future__ import annotations

import re
from typing import Optional

import httpx
from pydantic import BaseModel

from learnfeed.core.config import settings
from learnfeed.core.logging import get_logger

logger = get_logger(__name__)

YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


class VideoMetadata(BaseModel):
    title: str = "YouTube Video"
    author: str = "Unknown Creator"
    duration: int = 600  # seconds
    thumbnail_url: str = ""
    description: str = "Educational video content"


def default_thumbnail(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def default_metadata(video_id: str) -> VideoMetadata:
    return VideoMetadata(
        duration=settings.learning.default_video_duration,
        thumbnail_url=default_thumbnail(video_id),
    )


def parse_iso8601_duration(value: str) -> int:
    """Parse a YouTube ``PT#H#M#S`` duration into seconds (0 if unparseable)."""
    match = _DURATION_RE.search(value or "")
    if not match:
        return 0
    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def item_count_for_duration(duration_seconds: int, seconds_per_item: int = 180) -> int:
    """One question and one flashcard per ``seconds_per_item``, at least one."""
    return max(1, int(duration_seconds) // max(1, int(seconds_per_item)))


def simulated_transcript(title: str, topic: str) -> str:
    return (
        f'This is a simulated transcript for the video "{title}". '
        f"The video covers important concepts related to {topic}. Key points include "
        "practical strategies, actionable insights, and expert advice. The content is "
        "designed to help viewers understand complex topics through clear explanations "
        "and real-world examples. Throughout the video, the presenter shares valuable "
        "tips and techniques that can be applied immediately."
    )


def _metadata_from_item(item: dict, fallback: VideoMetadata) -> VideoMetadata:
    snippet = item.get("snippet") or {}
    details = item.get("contentDetails") or {}
    thumbs = snippet.get("thumbnails") or {}
    thumb = (thumbs.get("maxres") or thumbs.get("high") or {}).get("url")
    return VideoMetadata(
        title=snippet.get("title") or fallback.title,
        author=snippet.get("channelTitle") or fallback.author,
        duration=parse_iso8601_duration(details.get("duration", "")),
        thumbnail_url=thumb or fallback.thumbnail_url,
        description=snippet.get("description") or fallback.description,
    )


async def fetch_video_metadata(
    video_id: str,
    *,
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> VideoMetadata:
    """Look up title, channel, duration and thumbnail for ``video_id``.

    Any HTTP or payload problem is logged and answered with defaults; the
    video can still be added without metadata.
    """
    fallback = default_metadata(video_id)
    key = api_key or settings.learning.youtube_api_key
    if not key:
        return fallback

    params = {"id": video_id, "key": key, "part": "snippet,contentDetails"}
    try:
        if client is None:
            async with httpx.AsyncClient(
                timeout=settings.learning.youtube_timeout_seconds
            ) as own_client:
                response = await own_client.get(YOUTUBE_VIDEOS_URL, params=params)
        else:
            response = await client.get(YOUTUBE_VIDEOS_URL, params=params)
        response.raise_for_status()
        items = response.json().get("items") or []
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to fetch video metadata for %s: %s", video_id, e)
        return fallback

    if not items:
        logger.info("No YouTube metadata found for %s; using defaults", video_id)
        return fallback
    return _metadata_from_item(items[0], fallback)
