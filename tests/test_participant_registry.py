import pytest

from study_room.core.errors import (
    InsufficientParticipants,
    NotAParticipant,
    ParticipantsNotReady,
    RoomFull,
    RoomNotFound,
)
from study_room.core.room_manager import RoomManager


def _participant_ids(manager, code):
    return [p["userId"] for p in manager.get_room_snapshot(code)["participants"]]


def test_create_room_registers_host_as_ready(manager, room_code):
    snapshot = manager.get_room_snapshot(room_code)
    assert snapshot["hostId"] == "H"
    assert snapshot["participants"] == [
        {"userId": "H", "username": "Hana", "ready": True, "joinedAt": snapshot["createdAt"]}
    ]
    assert snapshot["roomName"] == "Biology"


def test_join_twice_keeps_one_entry(manager, room_code):
    first = manager.join_room(room_code, "P1", "Pia")
    second = manager.join_room(room_code, "P1", "Pia")
    assert first["message"] == "Joined room successfully"
    assert second["message"] == "Already in room"
    assert _participant_ids(manager, room_code).count("P1") == 1


def test_join_accepts_lowercase_code(manager, room_code):
    manager.join_room(room_code.lower(), "P1", "Pia")
    assert "P1" in _participant_ids(manager, room_code)


def test_join_unknown_room(manager):
    with pytest.raises(RoomNotFound):
        manager.join_room("ZZZZZZ", "P1", "Pia")


def test_join_full_room(store, clock):
    small = RoomManager(store, clock=clock, capacity=2)
    code = small.create_room("H", "Hana")["room"]["roomCode"]
    small.join_room(code, "P1", "Pia")
    with pytest.raises(RoomFull):
        small.join_room(code, "P2", "Paul")


def test_toggle_ready_flips_and_counts(manager, abc_room):
    result = manager.toggle_ready(abc_room, "P1")
    assert result == {"success": True, "ready": True, "readyCount": 1, "participantCount": 2}
    assert manager.toggle_ready(abc_room, "P1")["ready"] is False


def test_toggle_ready_for_host_stays_ready(manager, abc_room):
    assert manager.toggle_ready(abc_room, "H")["ready"] is True
    assert manager.toggle_ready(abc_room, "H")["ready"] is True


def test_toggle_ready_requires_membership(manager, abc_room):
    with pytest.raises(NotAParticipant):
        manager.toggle_ready(abc_room, "stranger")


def test_start_session_without_other_participants(manager, room_code):
    with pytest.raises(InsufficientParticipants):
        manager.start_session(room_code, "H", 1500)


@pytest.mark.parametrize("ready_users", [[], ["P1"], ["P2"]])
def test_start_session_needs_every_participant_ready(manager, abc_room, ready_users):
    for user_id in ready_users:
        manager.toggle_ready(abc_room, user_id)
    with pytest.raises(ParticipantsNotReady):
        manager.start_session(abc_room, "H", 1500)
    assert manager.get_room_snapshot(abc_room)["studyTimer"]["isRunning"] is False


def test_start_session_succeeds_when_all_ready(manager, abc_room):
    manager.toggle_ready(abc_room, "P1")
    manager.toggle_ready(abc_room, "P2")
    assert manager.start_session(abc_room, "H", 1500)["studyTimer"]["isRunning"] is True


def test_participant_leaves(manager, abc_room):
    result = manager.leave_room(abc_room, "P2")
    assert result["roomClosed"] is False
    assert _participant_ids(manager, abc_room) == ["H", "P1"]


def test_leave_requires_membership(manager, abc_room):
    with pytest.raises(NotAParticipant):
        manager.leave_room(abc_room, "stranger")


def test_host_leaving_closes_room(manager, abc_room):
    assert manager.leave_room(abc_room, "H")["roomClosed"] is True
    with pytest.raises(RoomNotFound):
        manager.get_room_snapshot(abc_room)
    with pytest.raises(RoomNotFound):
        manager.join_room(abc_room, "P3", "Pat")


def test_room_expires_after_ttl(manager, room_code, clock):
    clock.advance(24 * 3600)
    with pytest.raises(RoomNotFound):
        manager.get_room_snapshot(room_code)


def test_create_room_purges_expired_rooms(manager, room_code, store, clock):
    clock.advance(25 * 3600)
    manager.create_room("H2", "Ivo")
    assert not store.room_exists(room_code)


def test_delete_room_is_host_only(manager, abc_room, store):
    from study_room.core.errors import NotAuthorized

    with pytest.raises(NotAuthorized):
        manager.delete_room(abc_room, "P1")
    manager.delete_room(abc_room, "H")
    assert not store.room_exists(abc_room)
