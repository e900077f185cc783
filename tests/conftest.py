"""
Pytest configuration and fixtures for testing.

Provides fixtures for:
- A fresh in-memory store per test, seeded with two teams
- The FastAPI app wired to that store, and an async HTTP client
- Authorization headers for coaches and players
- Workflow instances for tests that bypass HTTP
"""

import os
from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ["JWT_SECRET"] = "test-secret-key-do-not-use-in-production"
os.environ["STORE_BACKEND"] = "memory"

from playbook.app import create_app
from playbook.store import MemoryStore
from playbook.utils.events import EventSink
from playbook.workflows import (
    ContentLifecycle,
    LessonWorkflow,
    ProgramWorkflow,
    RosterOnboardingWorkflow,
)
from tests.utils import FakeClock, auth_headers, seed_world


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> MemoryStore:
    """Fresh memory store for each test."""
    return MemoryStore(clock=clock)


@pytest.fixture
def world(store) -> Dict[str, str]:
    """Ids of the seeded teams, members and content."""
    return seed_world(store)


@pytest.fixture
def events(store) -> EventSink:
    return EventSink(store)


@pytest.fixture
def app(store, world):
    return create_app(store=store)


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def coach_headers(world) -> Dict[str, str]:
    return auth_headers(world["coach_id"])


@pytest.fixture
def coach_2_headers(world) -> Dict[str, str]:
    return auth_headers(world["coach_2_id"])


@pytest.fixture
def player_headers(world) -> Dict[str, str]:
    return auth_headers(world["player_id"])


@pytest.fixture
def player_2_headers(world) -> Dict[str, str]:
    return auth_headers(world["player_2_id"])


@pytest.fixture
def inactive_player_headers(world) -> Dict[str, str]:
    return auth_headers(world["inactive_player_id"])


@pytest.fixture
def other_coach_headers(world) -> Dict[str, str]:
    return auth_headers(world["other_coach_id"])


@pytest.fixture
def other_player_headers(world) -> Dict[str, str]:
    return auth_headers(world["other_player_id"])


@pytest.fixture
def lessons(store, events, clock) -> LessonWorkflow:
    return LessonWorkflow(store, events, clock=clock)


@pytest.fixture
def programs(store, events, clock) -> ProgramWorkflow:
    return ProgramWorkflow(store, events, clock=clock)


@pytest.fixture
def roster(store, events, clock) -> RosterOnboardingWorkflow:
    return RosterOnboardingWorkflow(store, events, clock=clock)


@pytest.fixture
def content(store, events, clock) -> ContentLifecycle:
    return ContentLifecycle(store, events, clock=clock)
