from datetime import timedelta
from threading import Event

import pytest

from study_room.client.room_api import InProcessRoomApi
from study_room.client.sync_adapter import (
    RoomSyncClient,
    SnapshotPoller,
    build_room_view,
    countdown_at,
)
from study_room.core.errors import RoomNotFound


def _client(manager, code, user_id="P3", username="Pat", clock=None):
    kwargs = {"clock": clock} if clock is not None else {}
    return RoomSyncClient(InProcessRoomApi(manager), code, user_id, username, **kwargs)


def test_poll_auto_joins_unknown_user(manager, abc_room):
    view = _client(manager, abc_room).poll_once()
    assert view is not None
    assert "P3" in [user_id for user_id, _, _ in view.participants]
    assert view.participant_count == 4
    assert view.is_host is False


def test_poll_does_not_rejoin_members(manager, abc_room, store):
    version = store.load_room(abc_room).version
    view = _client(manager, abc_room, "P1", "Pia").poll_once()
    assert view.participant_count == 3
    assert store.load_room(abc_room).version == version


def test_failed_poll_keeps_previous_view(manager, abc_room):
    client = _client(manager, abc_room, "P1", "Pia")
    first = client.poll_once()
    manager.leave_room(abc_room, "H")

    again = client.poll_once()
    assert again is first
    assert client.last_error == RoomNotFound.default_message


def test_poll_self_heals_after_missed_updates(manager, abc_room):
    client = _client(manager, abc_room, "P1", "Pia")
    client.poll_once()
    for n in range(3):
        manager.send_chat_message(abc_room, "H", f"update {n}")
    view = client.poll_once()
    assert [line.message for line in view.chat] == ["update 0", "update 1", "update 2"]
    assert client.last_error is None


def test_readiness_summary(manager, abc_room):
    client = _client(manager, abc_room, "H", "Hana")
    assert client.poll_once().all_ready is False
    manager.toggle_ready(abc_room, "P1")
    manager.toggle_ready(abc_room, "P2")
    view = client.poll_once()
    assert view.all_ready is True
    assert view.ready_count == 3
    assert view.is_host is True


def test_quiz_view_tracks_own_answer(manager, abc_room, questions):
    manager.start_quiz(abc_room, "H", questions)
    client = _client(manager, abc_room, "P1", "Pia")
    assert client.poll_once().quiz.has_answered is False

    manager.submit_quiz_answer(abc_room, "P1", 0, 1)
    manager.submit_quiz_answer(abc_room, "P2", 0, 0)
    quiz = client.poll_once().quiz
    assert quiz.has_answered is True
    assert quiz.my_answer == 1
    assert quiz.my_answer_correct is True
    assert quiz.my_score == 1
    assert quiz.answered_count == 2
    assert quiz.leaderboard == (("Pia", 1), ("Paul", 0))

    manager.next_quiz_question(abc_room, "H")
    quiz = client.poll_once().quiz
    assert quiz.has_answered is False
    assert quiz.question == questions[1].question
    assert quiz.options == tuple(questions[1].options)


def test_document_view_generating_flag(manager, abc_room):
    manager.share_file(abc_room, "H", "f1", "cells.md", "md", "Biology", "# Cells")
    manager.set_document(abc_room, "H", "f1", "reviewer")
    client = _client(manager, abc_room, "P1", "Pia")
    document = client.poll_once().document
    assert document.file_name == "cells.md"
    assert document.generating is True

    manager.set_reviewer_content(abc_room, "H", "Summary", ["ATP"])
    document = client.poll_once().document
    assert document.generating is False
    assert document.key_points == ("ATP",)


def test_countdown_smoothing_between_polls(manager, abc_room, clock):
    manager.toggle_ready(abc_room, "P1")
    manager.toggle_ready(abc_room, "P2")
    manager.start_session(abc_room, "H", 30)
    clock.advance(5)
    view = _client(manager, abc_room, "P1", "Pia", clock=clock).poll_once()
    assert view.timer.time_remaining == 25

    fetched = view.timer.anchored_at
    assert countdown_at(view, fetched) == 25
    assert countdown_at(view, fetched + timedelta(seconds=3.5)) == 22
    assert countdown_at(view, fetched + timedelta(seconds=300)) == 0
    assert countdown_at(view, fetched - timedelta(seconds=10)) == 25


def test_session_complete_after_expiry(manager, abc_room, clock):
    manager.toggle_ready(abc_room, "P1")
    manager.toggle_ready(abc_room, "P2")
    manager.start_session(abc_room, "H", 30)
    clock.advance(31)
    view = _client(manager, abc_room, "P1", "Pia", clock=clock).poll_once()
    assert view.timer.is_running is False
    assert view.timer.session_complete is True


def test_build_room_view_is_immutable(manager, abc_room, clock):
    view = build_room_view(manager.get_room_snapshot(abc_room), "P1", clock())
    with pytest.raises(AttributeError):
        view.room_code = "OTHER1"


def test_snapshot_poller_delivers_views(manager, abc_room):
    received = []
    delivered = Event()

    def on_view(view):
        received.append(view)
        delivered.set()

    poller = SnapshotPoller(_client(manager, abc_room, "P1", "Pia"), on_view, interval_ms=10)
    poller.start()
    try:
        assert delivered.wait(2)
    finally:
        poller.stop(timeout=2)
    assert received[0].room_code == abc_room
    assert poller.is_running is False
