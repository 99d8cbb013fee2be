"""Keyed document storage for rooms with per-room write serialization."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass
import logging
import random
from threading import Lock

from study_room.constants.room_constants import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH
from study_room.core.errors import RoomNotFound, VersionConflict
from study_room.core.models import Room

logger = logging.getLogger(__name__)


def normalize_room_code(code: str) -> str:
    return code.strip().upper()


def generate_room_code(rng: random.Random | None = None) -> str:
    chooser = rng or random
    return "".join(chooser.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


@dataclass(slots=True)
class StoredRoom:
    room: Room
    version: int


class RoomStore(ABC):
    """Persistence collaborator: load and compare-and-save whole room documents."""

    def __init__(self) -> None:
        self._locks_guard = Lock()
        self._room_locks: dict[str, Lock] = {}

    @abstractmethod
    def load_room(self, code: str) -> StoredRoom:
        """Return a private copy of the room, raising RoomNotFound if absent."""

    @abstractmethod
    def save_room(self, code: str, room: Room, expected_version: int) -> int:
        """Persist ``room`` if the stored version still matches; return the new version."""

    @abstractmethod
    def insert_room(self, code: str, room: Room) -> bool:
        """Store a new room; return False if the code is already taken."""

    @abstractmethod
    def delete_room(self, code: str) -> None:
        ...

    @abstractmethod
    def room_exists(self, code: str) -> bool:
        ...

    @abstractmethod
    def room_codes(self) -> list[str]:
        ...

    def room_lock(self, code: str) -> Lock:
        with self._locks_guard:
            lock = self._room_locks.get(code)
            if lock is None:
                lock = Lock()
                self._room_locks[code] = lock
            return lock

    def forget_lock(self, code: str) -> None:
        with self._locks_guard:
            self._room_locks.pop(code, None)

    @contextmanager
    def locked_room(self, code: str) -> Iterator[StoredRoom]:
        """Hold the room lock while working on a loaded copy.

        A code with no stored room leaves no lock behind.
        """
        code = normalize_room_code(code)
        with self.room_lock(code):
            try:
                stored = self.load_room(code)
            except RoomNotFound:
                self.forget_lock(code)
                raise
            yield stored

    @contextmanager
    def transaction(self, code: str) -> Iterator[Room]:
        """Read-modify-write one room under its lock.

        The yielded room is a working copy. It is saved when the block exits
        normally and discarded when the block raises.
        """
        code = normalize_room_code(code)
        with self.locked_room(code) as stored:
            yield stored.room
            self.save_room(code, stored.room, stored.version)


class InMemoryRoomStore(RoomStore):
    """Dict-backed store; every read and write goes through a deep copy."""

    def __init__(self) -> None:
        super().__init__()
        self._guard = Lock()
        self._documents: dict[str, StoredRoom] = {}

    def load_room(self, code: str) -> StoredRoom:
        code = normalize_room_code(code)
        with self._guard:
            stored = self._documents.get(code)
            if stored is None:
                raise RoomNotFound()
            return StoredRoom(room=deepcopy(stored.room), version=stored.version)

    def save_room(self, code: str, room: Room, expected_version: int) -> int:
        code = normalize_room_code(code)
        with self._guard:
            stored = self._documents.get(code)
            if stored is None:
                raise RoomNotFound()
            if stored.version != expected_version:
                logger.warning(
                    "Version conflict on room %s: expected %s, stored %s",
                    code,
                    expected_version,
                    stored.version,
                )
                raise VersionConflict()
            new_version = stored.version + 1
            self._documents[code] = StoredRoom(room=deepcopy(room), version=new_version)
            return new_version

    def insert_room(self, code: str, room: Room) -> bool:
        code = normalize_room_code(code)
        with self._guard:
            if code in self._documents:
                return False
            self._documents[code] = StoredRoom(room=deepcopy(room), version=1)
            return True

    def delete_room(self, code: str) -> None:
        code = normalize_room_code(code)
        with self._guard:
            self._documents.pop(code, None)
        self.forget_lock(code)

    def room_exists(self, code: str) -> bool:
        with self._guard:
            return normalize_room_code(code) in self._documents

    def room_codes(self) -> list[str]:
        with self._guard:
            return list(self._documents)
