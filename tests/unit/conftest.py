"""Shared fixtures for unit tests."""

from datetime import date
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.profile import ExperienceEntry, Profile


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.posts = AsyncMock()
        self.users = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def profile(user_id: UUID) -> Profile:
    """A profile with a single experience entry."""
    return Profile(
        user_id=user_id,
        status="Developer",
        skills=["Python"],
        social={"twitter": "https://twitter.com/dev"},
        experience=[
            ExperienceEntry(title="Engineer", company="Acme", from_date=date(2020, 1, 1))
        ],
    )
