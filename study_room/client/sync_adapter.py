"""Poll-driven client state.

Each poll fetches the whole room snapshot and rebuilds a fresh, immutable
``RoomView`` from it. Nothing is carried over from the previous view except
when a fetch fails, in which case the last good view stays on screen until the
next successful poll replaces it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
import logging
import math
from threading import Event, Thread
from typing import Any

import httpx

from study_room.client.room_api import RoomApi
from study_room.constants.sync_constants import ROOM_POLL_INTERVAL_MS
from study_room.core.errors import RoomError
from study_room.core.models import utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class TimerView:
    is_running: bool
    is_paused: bool
    duration: int
    time_remaining: int
    anchored_at: datetime

    @property
    def session_complete(self) -> bool:
        return not self.is_running and self.duration > 0 and self.time_remaining == 0


@dataclass(frozen=True)
class QuizView:
    status: str
    is_active: bool
    current_question_index: int
    total_questions: int
    question: str | None
    options: tuple[str, ...]
    has_answered: bool
    answered_count: int
    my_answer: int | None
    my_answer_correct: bool | None
    my_score: int
    leaderboard: tuple[tuple[str, int], ...]


@dataclass(frozen=True)
class DocumentView:
    file_id: str
    file_name: str | None
    file_type: str | None
    view_mode: str
    content: str | None
    reviewer_text: str | None
    key_points: tuple[str, ...]

    @property
    def generating(self) -> bool:
        """Reviewer mode was chosen but the host has not pushed the text yet."""
        return self.view_mode == "reviewer" and self.reviewer_text is None


@dataclass(frozen=True)
class ChatLine:
    username: str
    message: str
    timestamp: str | None


@dataclass(frozen=True)
class RoomView:
    room_code: str
    room_name: str
    host_id: str
    is_host: bool
    participants: tuple[tuple[str, str, bool], ...]
    ready_count: int
    participant_count: int
    all_ready: bool
    timer: TimerView
    quiz: QuizView
    document: DocumentView | None
    shared_files: tuple[tuple[str, str], ...]
    scroll_position: int
    chat: tuple[ChatLine, ...]


def build_room_view(snapshot: dict[str, Any], user_id: str, fetched_at: datetime) -> RoomView:
    """Derive everything the UI shows from one snapshot."""
    host_id = snapshot["hostId"]
    participants = snapshot.get("participants", [])
    others = [p for p in participants if p["userId"] != host_id]
    ready_count = sum(1 for p in participants if p.get("ready") or p["userId"] == host_id)

    return RoomView(
        room_code=snapshot["roomCode"],
        room_name=snapshot.get("roomName", ""),
        host_id=host_id,
        is_host=host_id == user_id,
        participants=tuple(
            (p["userId"], p["username"], bool(p.get("ready")) or p["userId"] == host_id)
            for p in participants
        ),
        ready_count=ready_count,
        participant_count=len(participants),
        all_ready=bool(others) and all(p.get("ready") for p in others),
        timer=_timer_view(snapshot.get("studyTimer") or {}, fetched_at),
        quiz=_quiz_view(snapshot.get("quiz") or {}, participants, user_id),
        document=_document_view(snapshot),
        shared_files=tuple((f["fileId"], f["fileName"]) for f in snapshot.get("sharedFiles", [])),
        scroll_position=snapshot.get("scrollPosition", 0),
        chat=tuple(
            ChatLine(m["username"], m["message"], m.get("timestamp"))
            for m in snapshot.get("chatMessages", [])
        ),
    )


def _timer_view(timer: dict[str, Any], fetched_at: datetime) -> TimerView:
    return TimerView(
        is_running=bool(timer.get("isRunning")),
        is_paused=bool(timer.get("isPaused")),
        duration=int(timer.get("duration") or 0),
        time_remaining=max(0, int(timer.get("timeRemaining") or 0)),
        anchored_at=fetched_at,
    )


def _quiz_view(quiz: dict[str, Any], participants: list[dict[str, Any]], user_id: str) -> QuizView:
    questions = quiz.get("questions", [])
    index = quiz.get("currentQuestionIndex", 0)
    current = questions[index] if 0 <= index < len(questions) else None
    answers = quiz.get("participantAnswers", [])
    mine = next((entry for entry in answers if entry["userId"] == user_id), None)
    my_answer = None
    if mine is not None:
        my_answer = next((a for a in mine["answers"] if a["questionIndex"] == index), None)

    join_order = {p["userId"]: position for position, p in enumerate(participants)}
    ranked = sorted(
        enumerate(answers),
        key=lambda item: (-item[1]["score"], join_order.get(item[1]["userId"], len(join_order)), item[0]),
    )
    return QuizView(
        status=quiz.get("status", "waiting"),
        is_active=bool(quiz.get("isActive")),
        current_question_index=index,
        total_questions=len(questions),
        question=current["question"] if current else None,
        options=tuple(current["options"]) if current else (),
        has_answered=my_answer is not None,
        answered_count=sum(1 for entry in answers if any(a["questionIndex"] == index for a in entry["answers"])),
        my_answer=my_answer["selectedAnswer"] if my_answer else None,
        my_answer_correct=my_answer["isCorrect"] if my_answer else None,
        my_score=mine["score"] if mine else 0,
        leaderboard=tuple((entry["username"], entry["score"]) for _, entry in ranked),
    )


def _document_view(snapshot: dict[str, Any]) -> DocumentView | None:
    document = snapshot.get("currentDocument")
    if not document:
        return None
    shared = next(
        (f for f in snapshot.get("sharedFiles", []) if f["fileId"] == document["fileId"]),
        None,
    )
    reviewer = document.get("reviewerContent")
    return DocumentView(
        file_id=document["fileId"],
        file_name=shared["fileName"] if shared else None,
        file_type=shared["fileType"] if shared else None,
        view_mode=document.get("viewMode", "raw"),
        content=shared["fileContent"] if shared else None,
        reviewer_text=reviewer["text"] if reviewer else None,
        key_points=tuple(reviewer.get("keyPoints", [])) if reviewer else (),
    )


def countdown_at(view: RoomView, now: datetime) -> int:
    """Smoothed countdown between polls; never exceeds the polled value."""
    timer = view.timer
    if not timer.is_running:
        return timer.time_remaining
    elapsed = max(0, math.floor((now - timer.anchored_at).total_seconds()))
    return max(0, timer.time_remaining - elapsed)


class RoomSyncClient:
    """Runs poll cycles against one room for one user."""

    def __init__(self, api: RoomApi, room_code: str, user_id: str, username: str, clock: Clock = utc_now):
        self._api = api
        self.room_code = room_code
        self.user_id = user_id
        self.username = username
        self._clock = clock
        self.view: RoomView | None = None
        self.last_error: str | None = None

    def poll_once(self) -> RoomView | None:
        """Fetch, auto-join if needed, and rebuild the view.

        Returns the new view, or the previous one if the fetch failed.
        """
        try:
            snapshot = self._api.get_snapshot(self.room_code)
            if not self._is_member(snapshot):
                logger.info("%s not in room %s; joining", self.user_id, self.room_code)
                self._api.join(self.room_code, self.user_id, self.username)
                snapshot = self._api.get_snapshot(self.room_code)
        except (RoomError, httpx.HTTPError) as exc:
            self.last_error = str(exc)
            logger.warning("Poll of room %s failed: %s", self.room_code, exc)
            return self.view
        self.last_error = None
        self.view = build_room_view(snapshot, self.user_id, self._clock())
        return self.view

    def _is_member(self, snapshot: dict[str, Any]) -> bool:
        if snapshot.get("hostId") == self.user_id:
            return True
        return any(p["userId"] == self.user_id for p in snapshot.get("participants", []))


class SnapshotPoller:
    """Background thread that polls on a fixed interval and reports each view."""

    def __init__(
        self,
        client: RoomSyncClient,
        on_view: Callable[[RoomView | None], None],
        interval_ms: int = ROOM_POLL_INTERVAL_MS,
    ) -> None:
        self._client = client
        self._on_view = on_view
        self._interval = interval_ms / 1000
        self._stop = Event()
        self._thread = Thread(target=self._run, name="RoomSnapshotPoller", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def _run(self) -> None:
        while not self._stop.is_set():
            self._on_view(self._client.poll_once())
            self._stop.wait(self._interval)
