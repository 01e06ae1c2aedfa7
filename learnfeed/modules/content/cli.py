from __future__ import annotations

import argparse
import asyncio
import json

from learnfeed.core.config import settings
from learnfeed.modules.content import video as video_meta
from learnfeed.modules.content.generator import generate_for_book, generate_for_video


async def _video_content(args: argparse.Namespace):
    meta = await video_meta.fetch_video_metadata(args.video_id)
    duration = args.duration or meta.duration
    count = video_meta.item_count_for_duration(
        duration, settings.learning.seconds_per_video_item
    )
    transcript = video_meta.simulated_transcript(meta.title, args.topic)
    return await generate_for_video(transcript, args.topic, count)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="learnfeed-gen", description="Question and flashcard generator CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    b = sub.add_parser("book", help="Generate questions and flashcards for a book")
    b.add_argument("--title", required=True)
    b.add_argument("--author", required=True)
    b.add_argument("--topic", required=True)
    b.add_argument("--count", type=int, default=None, help="Items per kind")

    v = sub.add_parser("video", help="Generate questions and flashcards for a video")
    v.add_argument("--video-id", required=True)
    v.add_argument("--topic", required=True)
    v.add_argument(
        "--duration", type=int, default=None, help="Override duration in seconds"
    )

    args = parser.parse_args(argv)
    if args.cmd == "book":
        result = asyncio.run(
            generate_for_book(args.title, args.author, args.topic, count=args.count)
        )
        print(json.dumps(result.model_dump(mode="json"), indent=2))
        return 0
    if args.cmd == "video":
        result = asyncio.run(_video_content(args))
        print(json.dumps(result.model_dump(mode="json"), indent=2))
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
