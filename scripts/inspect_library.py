"""Quick DB inspector for stored learning content.

Prints table counts, the users with the most items and a few recent
questions, to sanity-check what the generators have been writing.

Usage:
  python scripts/inspect_library.py [--user USER_ID]
"""

from __future__ import annotations

import argparse
import asyncio

from sqlalchemy import func, select

from learnfeed.core.config import settings
from learnfeed.core.db.base import build_engine, build_session_maker, session_scope
from learnfeed.core.db.schemas.content import Book, Flashcard, Question, Video


async def main(user_id: str | None = None) -> int:
    if not settings.postgres.is_configured:
        print("POSTGRES_HOST is not set; nothing to inspect.")
        return 1

    engine = build_engine(str(settings.postgres.connection_string))
    try:
        async with session_scope(build_session_maker(engine)) as session:
            print("Library DB summary:")
            for model in (Book, Video, Question, Flashcard):
                q = select(func.count(model.id))
                if user_id:
                    q = q.where(model.user_id == user_id)
                count = (await session.execute(q)).scalar() or 0
                print(f"- {model.__tablename__}: {count}")

            top = (
                await session.execute(
                    select(Question.user_id, func.count(Question.id))
                    .group_by(Question.user_id)
                    .order_by(func.count(Question.id).desc())
                    .limit(5)
                )
            ).all()
            if top:
                print("\nUsers by question count:")
                for uid, n in top:
                    print(f"- {uid}: {n}")

            recent_q = select(Question).order_by(Question.created_at.desc()).limit(5)
            if user_id:
                recent_q = recent_q.where(Question.user_id == user_id)
            recent = (await session.execute(recent_q)).scalars().all()
            if not recent:
                print("\n- No questions found.")
                return 0

            print("\nRecent questions:")
            for q in recent:
                ok = "ok" if q.correct_answer in (q.options or []) else "BAD ANSWER"
                print(f"- [{q.content_title}] {q.question_text} ({ok})")
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--user", default=None, help="Limit output to one user")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.user)))
