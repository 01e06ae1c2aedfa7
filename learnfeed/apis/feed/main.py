from __future__ import annotations

from typing import Optional

from fastapi import APIRouter

from learnfeed.core.config import settings
from learnfeed.core.errors import EmptyFeed, ValidationError
from learnfeed.apis.deps import CurrentUserId, Sessions
from learnfeed.modules.learning.manager import SessionManager
from learnfeed.modules.learning.models import LearningItem
from learnfeed.modules.learning.session import SessionState, SessionStatus
from .schemas import (
    AnswerRequest,
    AnswerResponse,
    EndFeedResponse,
    FeedState,
    OpenFeedRequest,
)


router = APIRouter()

PREFIX = f"/{settings.app.version}/feed"


def _state(manager: SessionManager, session: SessionState) -> FeedState:
    engine = manager.engine
    current = None
    if session.status is SessionStatus.READY:
        current = engine.current_item(session)
    return FeedState(
        status=session.status,
        position=session.position,
        size=len(session.queue),
        streak=session.streak,
        xp=session.xp,
        current=current,
        upcoming=engine.upcoming(session),
    )


async def _open_quietly(
    manager: SessionManager, user_id: str, *, xp: Optional[int] = None, shuffle: bool = False
) -> SessionState:
    # An empty feed is a state to render, not an error, on open/shuffle
    try:
        if shuffle:
            return await manager.shuffle(user_id)
        if xp is not None:
            return await manager.open(user_id, xp=xp)
        return await manager.get_or_open(user_id)
    except EmptyFeed:
        return manager.sessions[user_id]


@router.post(PREFIX, response_model=FeedState, tags=["feed"])
async def open_feed(
    user_id: CurrentUserId, manager: Sessions, req: Optional[OpenFeedRequest] = None
) -> FeedState:
    # Without a body the running session is kept; an explicit xp starts over
    xp = req.xp if req else None
    session = await _open_quietly(manager, user_id, xp=xp)
    return _state(manager, session)


@router.get(PREFIX, response_model=FeedState, tags=["feed"])
async def get_feed(user_id: CurrentUserId, manager: Sessions) -> FeedState:
    session = await _open_quietly(manager, user_id)
    return _state(manager, session)


@router.post(f"{PREFIX}/shuffle", response_model=FeedState, tags=["feed"])
async def shuffle_feed(user_id: CurrentUserId, manager: Sessions) -> FeedState:
    session = await _open_quietly(manager, user_id, shuffle=True)
    return _state(manager, session)


@router.get(f"{PREFIX}/current", response_model=LearningItem, tags=["feed"])
async def current_item(user_id: CurrentUserId, manager: Sessions) -> LearningItem:
    session = await _open_quietly(manager, user_id)
    return manager.engine.current_item(session)


@router.post(f"{PREFIX}/answer", response_model=AnswerResponse, tags=["feed"])
async def submit_answer(
    req: AnswerRequest, user_id: CurrentUserId, manager: Sessions
) -> AnswerResponse:
    if (req.answer is None) == (req.rating is None):
        raise ValidationError("Provide exactly one of 'answer' or 'rating'")
    session = await _open_quietly(manager, user_id)
    response = req.answer if req.answer is not None else req.rating
    outcome = manager.engine.submit_answer(session, response)
    return AnswerResponse(outcome=outcome, state=_state(manager, session))


@router.post(f"{PREFIX}/advance", response_model=FeedState, tags=["feed"])
async def advance_feed(user_id: CurrentUserId, manager: Sessions) -> FeedState:
    session = await _open_quietly(manager, user_id)
    manager.engine.advance(session)
    return _state(manager, session)


@router.delete(PREFIX, response_model=EndFeedResponse, tags=["feed"])
async def end_feed(user_id: CurrentUserId, manager: Sessions) -> EndFeedResponse:
    return EndFeedResponse(ended=manager.end(user_id))
