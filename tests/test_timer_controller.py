from datetime import datetime, timedelta, timezone

import pytest

from study_room.core.errors import (
    InsufficientParticipants,
    InvalidRequest,
    InvalidTimerAction,
    NotAuthorized,
)
from study_room.core.models import StudyTimer, TimerAction
from study_room.core.services.timer_controller import TimerController

T0 = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


@pytest.fixture
def controller():
    return TimerController()


def test_remaining_is_monotonic_and_never_negative(controller):
    timer = controller.apply(StudyTimer(), TimerAction.START, T0, 90)
    samples = [controller.remaining(timer, at(s)) for s in (0, 0.4, 1, 30.9, 89, 90, 91, 500)]
    assert samples == sorted(samples, reverse=True)
    assert samples[0] == 90
    assert min(samples) == 0


def test_pause_resume_round_trip(controller):
    timer = controller.apply(StudyTimer(), TimerAction.START, T0, 60)
    controller.apply(timer, TimerAction.PAUSE, at(10))
    assert timer.time_remaining == 50
    assert not timer.is_running

    controller.apply(timer, TimerAction.RESUME, at(10))
    assert controller.remaining(timer, at(60)) == 0
    assert controller.remaining(timer, at(75)) == 0
    # Nothing changes until someone reads or mutates.
    assert timer.is_running

    settled = controller.settled(timer, at(60))
    assert settled.is_running is False
    assert settled.time_remaining == 0
    assert timer.is_running


def test_paused_time_does_not_count(controller):
    timer = controller.apply(StudyTimer(), TimerAction.START, T0, 60)
    controller.apply(timer, TimerAction.PAUSE, at(20))
    controller.apply(timer, TimerAction.RESUME, at(320))
    assert controller.remaining(timer, at(330)) == 30


def test_settle_persists_expiry(controller):
    timer = controller.apply(StudyTimer(), TimerAction.START, T0, 5)
    assert controller.settle(timer, at(4)) is False
    assert controller.settle(timer, at(5)) is True
    assert timer == StudyTimer(is_running=False, duration=5, started_at=None, time_remaining=0)


def test_pause_requires_running_timer(controller):
    with pytest.raises(InvalidTimerAction):
        controller.apply(StudyTimer(), TimerAction.PAUSE, T0)


def test_resume_rejects_running_or_finished_timer(controller):
    timer = controller.apply(StudyTimer(), TimerAction.START, T0, 30)
    with pytest.raises(InvalidTimerAction):
        controller.apply(timer, TimerAction.RESUME, at(1))
    with pytest.raises(InvalidTimerAction):
        controller.apply(timer, TimerAction.RESUME, at(31))


def test_reset_restores_full_duration(controller):
    timer = controller.apply(StudyTimer(), TimerAction.START, T0, 120)
    controller.apply(timer, TimerAction.RESET, at(40))
    assert timer == StudyTimer(is_running=False, duration=120, started_at=None, time_remaining=120)


def test_resume_after_reset_is_rejected(controller):
    timer = controller.apply(StudyTimer(), TimerAction.RESET, T0, 60)
    assert timer.is_paused is False
    with pytest.raises(InvalidTimerAction):
        controller.apply(timer, TimerAction.RESUME, at(1))

    started = controller.apply(StudyTimer(), TimerAction.START, T0, 60)
    controller.apply(started, TimerAction.PAUSE, at(10))
    controller.apply(started, TimerAction.RESET, at(11))
    with pytest.raises(InvalidTimerAction):
        controller.apply(started, TimerAction.RESUME, at(12))
    assert started.is_running is False


def test_start_defaults_duration(controller):
    timer = controller.apply(StudyTimer(), TimerAction.START, T0)
    assert timer.duration == 1500


@pytest.mark.parametrize("duration", [0, -5, True, 1.5])
def test_start_rejects_bad_duration(controller, duration):
    with pytest.raises(InvalidRequest):
        controller.apply(StudyTimer(), TimerAction.START, T0, duration)


def _ready_room(manager, code):
    manager.toggle_ready(code, "P1")
    manager.toggle_ready(code, "P2")


def test_snapshot_reads_never_write(manager, abc_room, store, clock):
    _ready_room(manager, abc_room)
    manager.start_session(abc_room, "H", 60)
    version = store.load_room(abc_room).version

    clock.advance(61)
    timer = manager.get_room_snapshot(abc_room)["studyTimer"]
    assert timer["isRunning"] is False
    assert timer["timeRemaining"] == 0
    assert store.load_room(abc_room).version == version
    assert store.load_room(abc_room).room.study_timer.is_running is True

    manager.send_chat_message(abc_room, "P1", "done!")
    assert store.load_room(abc_room).room.study_timer.is_running is False


def test_control_timer_is_host_only(manager, abc_room):
    _ready_room(manager, abc_room)
    with pytest.raises(NotAuthorized):
        manager.control_timer(abc_room, "P1", "start", 60)


def test_control_timer_pause_and_resume_through_manager(manager, abc_room, clock):
    _ready_room(manager, abc_room)
    manager.start_session(abc_room, "H", 60)
    clock.advance(10)
    paused = manager.control_timer(abc_room, "H", "pause")["studyTimer"]
    assert paused == {"isRunning": False, "isPaused": True, "duration": 60, "startedAt": None, "timeRemaining": 50}
    clock.advance(100)
    manager.control_timer(abc_room, "H", "resume")
    clock.advance(20)
    assert manager.remaining_seconds(abc_room) == 30


def test_unknown_timer_action(manager, abc_room):
    with pytest.raises(InvalidRequest):
        manager.control_timer(abc_room, "H", "rewind")


def test_reset_then_resume_cannot_bypass_ready_gate(manager, room_code):
    with pytest.raises(InsufficientParticipants):
        manager.start_session(room_code, "H", 60)
    manager.control_timer(room_code, "H", "reset", 60)
    with pytest.raises(InvalidTimerAction):
        manager.control_timer(room_code, "H", "resume")
    timer = manager.get_room_snapshot(room_code)["studyTimer"]
    assert (timer["isRunning"], timer["isPaused"], timer["timeRemaining"]) == (False, False, 60)
