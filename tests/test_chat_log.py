import pytest

from study_room.core.errors import InvalidRequest, NotAParticipant
from study_room.core.room_manager import RoomManager


def test_messages_keep_arrival_order(manager, abc_room, clock):
    manager.send_chat_message(abc_room, "P1", "hi")
    clock.advance(1)
    manager.send_chat_message(abc_room, "H", "  welcome  ")
    messages = manager.get_room_snapshot(abc_room)["chatMessages"]
    assert [(m["userId"], m["message"]) for m in messages] == [("P1", "hi"), ("H", "welcome")]
    assert messages[0]["timestamp"] < messages[1]["timestamp"]


def test_only_participants_may_chat(manager, abc_room):
    with pytest.raises(NotAParticipant):
        manager.send_chat_message(abc_room, "stranger", "hello?")


def test_blank_messages_are_rejected(manager, abc_room):
    with pytest.raises(InvalidRequest):
        manager.send_chat_message(abc_room, "P1", "   ")
    assert manager.get_room_snapshot(abc_room)["chatMessages"] == []


def test_history_is_capped(store, clock):
    manager = RoomManager(store, clock=clock, chat_history_limit=3)
    code = manager.create_room("H", "Hana")["room"]["roomCode"]
    for n in range(5):
        manager.send_chat_message(code, "H", f"m{n}")
    messages = manager.get_room_snapshot(code)["chatMessages"]
    assert [m["message"] for m in messages] == ["m2", "m3", "m4"]
