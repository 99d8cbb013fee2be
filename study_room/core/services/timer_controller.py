"""Service for the shared study countdown.

The timer is never ticked on the server. Running time is derived from the
``started_at`` anchor on every read::

    remaining = max(0, time_remaining - floor(now - started_at))   # running
    remaining = time_remaining                                       # otherwise

A running timer whose computed remaining time reaches zero is reported as
idle. Reads only report that; the settled state is written by the next
mutation of the room.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
import math

from study_room.constants.room_constants import DEFAULT_STUDY_DURATION_SECONDS
from study_room.core.errors import InvalidRequest, InvalidTimerAction
from study_room.core.models import StudyTimer, TimerAction


def elapsed_seconds(started_at: datetime, now: datetime) -> int:
    return max(0, math.floor((now - started_at).total_seconds()))


class TimerController:
    """Applies host timer actions to a room's ``StudyTimer``."""

    def remaining(self, timer: StudyTimer, now: datetime) -> int:
        if timer.is_running and timer.started_at is not None:
            return max(0, timer.time_remaining - elapsed_seconds(timer.started_at, now))
        return max(0, timer.time_remaining)

    def is_expired(self, timer: StudyTimer, now: datetime) -> bool:
        return timer.is_running and self.remaining(timer, now) == 0

    def settled(self, timer: StudyTimer, now: datetime) -> StudyTimer:
        """Return the timer as it reads at ``now`` without touching the original."""
        if self.is_expired(timer, now):
            return replace(timer, is_running=False, is_paused=False, started_at=None, time_remaining=0)
        if timer.is_running:
            return replace(timer, time_remaining=self.remaining(timer, now))
        return replace(timer)

    def settle(self, timer: StudyTimer, now: datetime) -> bool:
        """Persist expiry into ``timer``. Returns True if it just expired."""
        if not self.is_expired(timer, now):
            return False
        timer.is_running = False
        timer.is_paused = False
        timer.started_at = None
        timer.time_remaining = 0
        return True

    def apply(
        self,
        timer: StudyTimer,
        action: TimerAction,
        now: datetime,
        duration: int | None = None,
    ) -> StudyTimer:
        self.settle(timer, now)
        if action is TimerAction.START:
            self._start(timer, now, duration)
        elif action is TimerAction.PAUSE:
            self._pause(timer, now)
        elif action is TimerAction.RESUME:
            self._resume(timer, now)
        elif action is TimerAction.RESET:
            self._reset(timer, duration)
        return timer

    def _start(self, timer: StudyTimer, now: datetime, duration: int | None) -> None:
        seconds = self._resolve_duration(timer, duration)
        timer.duration = seconds
        timer.time_remaining = seconds
        timer.started_at = now
        timer.is_running = True
        timer.is_paused = False

    def _pause(self, timer: StudyTimer, now: datetime) -> None:
        if not timer.is_running or timer.started_at is None:
            raise InvalidTimerAction("Timer is not running")
        timer.time_remaining = self.remaining(timer, now)
        timer.is_running = False
        timer.is_paused = True
        timer.started_at = None

    def _resume(self, timer: StudyTimer, now: datetime) -> None:
        if timer.is_running:
            raise InvalidTimerAction("Timer is already running")
        if not timer.is_paused or timer.time_remaining <= 0:
            raise InvalidTimerAction("Only a paused timer can be resumed; start the session instead")
        timer.started_at = now
        timer.is_running = True
        timer.is_paused = False

    def _reset(self, timer: StudyTimer, duration: int | None) -> None:
        seconds = self._resolve_duration(timer, duration)
        timer.duration = seconds
        timer.time_remaining = seconds
        timer.started_at = None
        timer.is_running = False
        timer.is_paused = False

    @staticmethod
    def _resolve_duration(timer: StudyTimer, duration: int | None) -> int:
        if duration is None:
            return timer.duration or DEFAULT_STUDY_DURATION_SECONDS
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise InvalidRequest("Duration must be a whole number of seconds.")
        if duration <= 0:
            raise InvalidRequest("Duration must be a positive number of seconds.")
        return duration
