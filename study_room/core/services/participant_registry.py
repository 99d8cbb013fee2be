"""Service for join/leave and ready-state tracking inside a room."""

from __future__ import annotations

from datetime import datetime

from study_room.constants.room_constants import DEFAULT_ROOM_CAPACITY, MIN_SESSION_PARTICIPANTS
from study_room.core.errors import (
    InsufficientParticipants,
    NotAParticipant,
    ParticipantsNotReady,
    RoomFull,
)
from study_room.core.models import Participant, Room


class ParticipantRegistry:
    """Manages the participant list of a room document."""

    def __init__(self, capacity: int = DEFAULT_ROOM_CAPACITY) -> None:
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def join(self, room: Room, user_id: str, username: str, now: datetime) -> tuple[Participant, bool]:
        """Register a participant. Returns the entry and whether it was newly added."""
        existing = room.find_participant(user_id)
        if existing is not None:
            return existing, False
        if len(room.participants) >= self._capacity:
            raise RoomFull(f"Room is full ({self._capacity} participants)")
        entry = Participant(
            user_id=user_id,
            username=username,
            ready=room.is_host(user_id),
            joined_at=now,
        )
        room.participants.append(entry)
        return entry, True

    def leave(self, room: Room, user_id: str) -> Participant:
        entry = self.require_participant(room, user_id)
        room.participants = [p for p in room.participants if p.user_id != user_id]
        return entry

    def toggle_ready(self, room: Room, user_id: str) -> bool:
        entry = self.require_participant(room, user_id)
        if room.is_host(user_id):
            # The host is always counted as ready.
            entry.ready = True
            return True
        entry.ready = not entry.ready
        return entry.ready

    def require_participant(self, room: Room, user_id: str) -> Participant:
        entry = room.find_participant(user_id)
        if entry is None:
            raise NotAParticipant()
        return entry

    def non_host_participants(self, room: Room) -> list[Participant]:
        return [p for p in room.participants if not room.is_host(p.user_id)]

    def ready_counts(self, room: Room) -> tuple[int, int]:
        """Return (ready, total) over non-host participants."""
        others = self.non_host_participants(room)
        return sum(1 for p in others if p.ready), len(others)

    def ensure_session_ready(self, room: Room) -> None:
        if len(room.participants) < MIN_SESSION_PARTICIPANTS or not self.non_host_participants(room):
            raise InsufficientParticipants()
        ready, total = self.ready_counts(room)
        if ready < total:
            raise ParticipantsNotReady(f"{ready} of {total} participant(s) ready")
