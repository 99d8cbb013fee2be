from __future__ import annotations

from datetime import datetime, timedelta, timezone
import random

import pytest

from study_room.core.models import Room
from study_room.core.room_manager import RoomManager
from study_room.core.services.room_store import InMemoryRoomStore


class FakeClock:
    """Settable wall clock so timer behavior can be simulated."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryRoomStore:
    return InMemoryRoomStore()


@pytest.fixture
def manager(store: InMemoryRoomStore, clock: FakeClock) -> RoomManager:
    return RoomManager(store, clock=clock, rng=random.Random(7))


@pytest.fixture
def room_code(manager: RoomManager) -> str:
    created = manager.create_room("H", "Hana", "Biology")
    return created["room"]["roomCode"]


@pytest.fixture
def abc_room(store: InMemoryRoomStore, manager: RoomManager, clock: FakeClock) -> str:
    """Room ABC123 hosted by H with P1 and P2 joined but not ready."""
    room = Room(
        room_code="ABC123",
        host_id="H",
        host_name="Hana",
        room_name="Finals prep",
        created_at=clock.now,
        expires_at=clock.now + timedelta(hours=24),
    )
    assert store.insert_room("ABC123", room)
    manager.join_room("ABC123", "H", "Hana")
    manager.join_room("ABC123", "P1", "Pia")
    manager.join_room("ABC123", "P2", "Paul")
    return "ABC123"


def sample_questions():
    from study_room.core.models import QuizQuestion

    return [
        QuizQuestion(question="2 + 2?", options=["3", "4", "5"], correct_answer=1, explanation="Basic sum."),
        QuizQuestion(question="Capital of France?", options=["Paris", "Rome"], correct_answer=0),
        QuizQuestion(question="H2O is?", options=["Salt", "Water", "Air", "Fire"], correct_answer=1),
    ]


@pytest.fixture
def questions():
    return sample_questions()
