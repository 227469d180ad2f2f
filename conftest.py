# type: ignore
"""Shared fixtures: a controllable clock and an in-memory backed service."""
from datetime import datetime, timedelta, timezone

import pytest

from member_directory.repositories.memory_repository import InMemoryMemberStore
from member_directory.services.member_service import MemberService


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 2, 10, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryMemberStore()


@pytest.fixture
def service(store, clock):
    return MemberService(store, clock=clock)
