import random
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learnfeed.core.config import settings
from learnfeed.core.logging import get_logger, setup_logging
from learnfeed.core.repository import (
    ItemRepository,
    StorageMode,
    resolve_repository,
)
from learnfeed.apis.errors import register_exception_handlers
from learnfeed.apis.content.main import router as content_router
from learnfeed.apis.feed.main import router as feed_router
from learnfeed.apis.library.main import router as library_router
from learnfeed.apis.profile.main import router as profile_router
from learnfeed.modules.content.service import ContentService
from learnfeed.modules.learning.manager import SessionManager
from learnfeed.modules.learning.session import SessionEngine

logger = get_logger(__name__)


def install_services(
    app: FastAPI, repository: ItemRepository, rng: Optional[random.Random] = None
) -> None:
    engine = SessionEngine(
        repository, xp_per_correct=settings.learning.xp_per_correct, rng=rng
    )
    app.state.repository = repository
    app.state.session_manager = SessionManager(engine)
    app.state.content_service = ContentService(repository)


def create_app(
    *,
    repository: Optional[ItemRepository] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.app.log_level)
        db_engine = None
        if getattr(app.state, "repository", None) is None:
            repo, db_engine = await resolve_repository(settings)
            install_services(app, repo, rng)
        logger.info(
            "Started %s %s",
            settings.app.name,
            settings.app.version,
            extra={"storage_mode": _storage_mode(app).value},
        )
        try:
            yield
        finally:
            if db_engine is not None:
                await db_engine.dispose()

    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    if repository is not None:
        install_services(app, repository, rng)

    app.include_router(content_router)
    app.include_router(library_router)
    app.include_router(feed_router)
    app.include_router(profile_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
            "storage_mode": _storage_mode(app).value,
        }

    return app


def _storage_mode(app: FastAPI) -> StorageMode:
    repo = getattr(app.state, "repository", None)
    return getattr(repo, "mode", StorageMode.IN_MEMORY)


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "learnfeed.main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        print(f"An error occurred when starting the server: {e}.")
