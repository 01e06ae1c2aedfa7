"""
Shared Test Fixtures and Configuration

Settings are read once at import time, so the test environment is pinned
here before anything from ``learnfeed`` is imported.
"""

import os

os.environ["MODE"] = "test"
os.environ["STORAGE_MODE"] = "in_memory"
os.environ["YOUTUBE_API_KEY"] = ""
os.environ.pop("POSTGRES_HOST", None)

import random
from typing import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from learnfeed.core.errors import UpstreamGenerationError
from learnfeed.core.repository import FallbackItemRepository, InMemoryItemRepository
from learnfeed.main import create_app
from learnfeed.modules.learning.session import SessionEngine


# ============================================================================
# Repositories and engine
# ============================================================================


@pytest.fixture
def memory_repo() -> InMemoryItemRepository:
    return InMemoryItemRepository()


@pytest.fixture
def engine(memory_repo: InMemoryItemRepository) -> SessionEngine:
    """Engine over an empty in-memory repository with a seeded shuffle."""
    return SessionEngine(memory_repo, xp_per_correct=10, rng=random.Random(7))


# ============================================================================
# Generator stubs
# ============================================================================


@pytest.fixture
def offline_generator(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Make every language-model call fail so placeholders are used."""
    fake = AsyncMock(side_effect=UpstreamGenerationError("model offline"))
    monkeypatch.setattr("learnfeed.modules.content.generator._run_agent", fake)
    return fake


# ============================================================================
# API client
# ============================================================================


@pytest.fixture
def api_repo() -> FallbackItemRepository:
    return FallbackItemRepository(None)


@pytest.fixture
def client(
    api_repo: FallbackItemRepository, offline_generator: AsyncMock
) -> Generator[TestClient, None, None]:
    app = create_app(repository=api_repo, rng=random.Random(0))
    with TestClient(app) as test_client:
        yield test_client
