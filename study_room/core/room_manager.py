"""Business logic facade shared by the HTTP server and the host console."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
import logging
import random
from typing import Any

from study_room.constants.room_constants import (
    CHAT_HISTORY_LIMIT,
    DEFAULT_ROOM_CAPACITY,
    DEFAULT_ROOM_NAME,
    ROOM_TTL_HOURS,
)
from study_room.core.errors import (
    InvalidRequest,
    NotAuthorized,
    RoomError,
    RoomNotFound,
)
from study_room.core.models import (
    LeaderboardRow,
    Participant,
    QuizQuestion,
    Room,
    TimerAction,
    ViewMode,
    utc_now,
)
from study_room.core.services.chat_log import ChatLog
from study_room.core.services.document_broadcast import DocumentBroadcast
from study_room.core.services.participant_registry import ParticipantRegistry
from study_room.core.services.quiz_orchestrator import QuizOrchestrator
from study_room.core.services.room_store import (
    InMemoryRoomStore,
    RoomStore,
    generate_room_code,
    normalize_room_code,
)
from study_room.core.services.timer_controller import TimerController
from study_room.core.snapshot import (
    answers_to_dict,
    chat_message_to_dict,
    document_to_dict,
    leaderboard_to_list,
    note_to_dict,
    participant_to_dict,
    quiz_to_dict,
    room_to_snapshot,
    shared_file_to_dict,
    timer_to_dict,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class RoomManager:
    """Facade for room services: Store, Registry, Timer, Documents, Quiz and Chat.

    Every mutation runs as one read-modify-write of a single room document
    under that room's lock. A ``RoomError`` raised inside the transaction
    discards the working copy, so rejected requests never change the room.
    """

    def __init__(
        self,
        store: RoomStore | None = None,
        *,
        clock: Clock = utc_now,
        capacity: int = DEFAULT_ROOM_CAPACITY,
        chat_history_limit: int = CHAT_HISTORY_LIMIT,
        room_ttl: timedelta = timedelta(hours=ROOM_TTL_HOURS),
        rng: random.Random | None = None,
    ) -> None:
        self._store = store or InMemoryRoomStore()
        self._clock = clock
        self._room_ttl = room_ttl
        self._rng = rng

        # Services
        self._registry = ParticipantRegistry(capacity=capacity)
        self._timer = TimerController()
        self._documents = DocumentBroadcast()
        self._quiz = QuizOrchestrator()
        self._chat = ChatLog(limit=chat_history_limit)

    # --- Plumbing ---

    def now(self) -> datetime:
        return self._clock()

    def _require_live(self, room: Room, now: datetime) -> None:
        if not room.is_active or (room.expires_at is not None and room.expires_at <= now):
            raise RoomNotFound()

    def _require_host(self, room: Room, caller_id: str, action: str = "do that") -> None:
        if not room.is_host(caller_id):
            raise NotAuthorized(f"Only the host can {action}")

    def _require_participant(self, room: Room, user_id: str) -> Participant:
        return self._registry.require_participant(room, user_id)

    @contextmanager
    def _transaction(self, code: str, operation: str, caller_id: str) -> Iterator[tuple[Room, datetime]]:
        code = normalize_room_code(code)
        now = self._clock()
        try:
            with self._store.transaction(code) as room:
                self._require_live(room, now)
                if self._timer.settle(room.study_timer, now):
                    logger.info("Study timer in room %s ran out", code)
                yield room, now
        except RoomError as exc:
            logger.warning("%s by %s in room %s rejected: %s", operation, caller_id, code, exc.code)
            raise
        logger.info("%s by %s in room %s", operation, caller_id, code)

    def _load_live_room(self, code: str) -> tuple[Room, datetime]:
        now = self._clock()
        room = self._store.load_room(normalize_room_code(code)).room
        self._require_live(room, now)
        return room, now

    # --- Room lifecycle ---

    def create_room(self, user_id: str, username: str, room_name: str | None = None) -> dict[str, Any]:
        self.purge_expired_rooms()
        now = self._clock()
        name = (room_name or "").strip() or DEFAULT_ROOM_NAME
        while True:
            code = generate_room_code(self._rng)
            room = Room(
                room_code=code,
                host_id=user_id,
                host_name=username,
                room_name=name,
                participants=[Participant(user_id=user_id, username=username, ready=True, joined_at=now)],
                created_at=now,
                expires_at=now + self._room_ttl,
            )
            if self._store.insert_room(code, room):
                break
            logger.debug("Room code %s already taken, regenerating", code)
        logger.info("Room %s created by %s", code, user_id)
        return {
            "success": True,
            "message": "Room created",
            "room": room_to_snapshot(room, self._timer.settled(room.study_timer, now)),
        }

    def delete_room(self, code: str, user_id: str) -> dict[str, Any]:
        code = normalize_room_code(code)
        with self._store.locked_room(code) as stored:
            room = stored.room
            self._require_live(room, self._clock())
            self._require_host(room, user_id, "delete the room")
            self._store.delete_room(code)
        logger.info("Room %s deleted by %s", code, user_id)
        return {"success": True, "message": "Room closed successfully"}

    def purge_expired_rooms(self) -> list[str]:
        """Delete inactive or expired room documents; returns the purged codes."""
        now = self._clock()
        purged: list[str] = []
        for code in self._store.room_codes():
            try:
                with self._store.locked_room(code) as stored:
                    room = stored.room
                    expired = room.expires_at is not None and room.expires_at <= now
                    if room.is_active and not expired:
                        continue
                    self._store.delete_room(code)
            except RoomNotFound:
                continue
            purged.append(code)
        if purged:
            logger.info("Purged %d expired room(s)", len(purged))
        return purged

    def get_room_snapshot(self, code: str) -> dict[str, Any]:
        """Return the full room as clients see it at this instant. Never writes."""
        room, now = self._load_live_room(code)
        return room_to_snapshot(room, self._timer.settled(room.study_timer, now))

    def get_room(self, code: str) -> Room:
        """Return a private copy of the live room document."""
        room, _ = self._load_live_room(code)
        return room

    # --- Participant Registry ---

    def join_room(self, code: str, user_id: str, username: str) -> dict[str, Any]:
        with self._transaction(code, "join", user_id) as (room, now):
            entry, added = self._registry.join(room, user_id, username, now)
            snapshot = room_to_snapshot(room, self._timer.settled(room.study_timer, now))
        return {
            "success": True,
            "message": "Joined room successfully" if added else "Already in room",
            "participant": participant_to_dict(entry),
            "room": snapshot,
        }

    def leave_room(self, code: str, user_id: str) -> dict[str, Any]:
        with self._transaction(code, "leave", user_id) as (room, _):
            self._registry.leave(room, user_id)
            host_left = room.is_host(user_id)
            if host_left:
                room.is_active = False
        if host_left:
            return {"success": True, "message": "Room closed (host left)", "roomClosed": True}
        return {"success": True, "message": "Left room successfully", "roomClosed": False}

    def toggle_ready(self, code: str, user_id: str) -> dict[str, Any]:
        with self._transaction(code, "toggle-ready", user_id) as (room, _):
            ready = self._registry.toggle_ready(room, user_id)
            ready_count, total = self._registry.ready_counts(room)
        return {
            "success": True,
            "ready": ready,
            "readyCount": ready_count,
            "participantCount": total,
        }

    # --- Timer Controller ---

    def start_session(self, code: str, user_id: str, duration: int | None = None) -> dict[str, Any]:
        return self.control_timer(code, user_id, TimerAction.START, duration)

    def control_timer(
        self,
        code: str,
        user_id: str,
        action: TimerAction | str,
        duration: int | None = None,
    ) -> dict[str, Any]:
        try:
            timer_action = TimerAction(action)
        except ValueError as exc:
            raise InvalidRequest(f"Unknown timer action: {action}") from exc
        with self._transaction(code, f"timer-{timer_action.value}", user_id) as (room, now):
            self._require_host(room, user_id, "control the timer")
            if timer_action is TimerAction.START:
                self._registry.ensure_session_ready(room)
            self._timer.apply(room.study_timer, timer_action, now, duration)
            timer = timer_to_dict(self._timer.settled(room.study_timer, now))
        return {"success": True, "studyTimer": timer}

    def remaining_seconds(self, code: str) -> int:
        room, now = self._load_live_room(code)
        return self._timer.remaining(room.study_timer, now)

    # --- Document Broadcast ---

    def share_file(
        self,
        code: str,
        user_id: str,
        file_id: str,
        file_name: str,
        file_type: str,
        subject: str,
        file_content: str,
    ) -> dict[str, Any]:
        with self._transaction(code, "share-file", user_id) as (room, now):
            sharer = self._require_participant(room, user_id)
            shared = self._documents.share_file(
                room, sharer, file_id, file_name, file_type, subject, file_content, now
            )
        return {
            "success": True,
            "message": "File shared successfully",
            "sharedFile": shared_file_to_dict(shared),
        }

    def remove_shared_file(self, code: str, user_id: str, file_id: str) -> dict[str, Any]:
        with self._transaction(code, "remove-file", user_id) as (room, _):
            self._documents.remove_shared_file(room, user_id, file_id)
            document = document_to_dict(room.current_document)
        return {
            "success": True,
            "message": "Shared file removed successfully",
            "currentDocument": document,
        }

    def set_document(
        self,
        code: str,
        user_id: str,
        file_id: str,
        view_mode: ViewMode | str = ViewMode.RAW,
    ) -> dict[str, Any]:
        try:
            mode = ViewMode(view_mode)
        except ValueError as exc:
            raise InvalidRequest(f"Unknown view mode: {view_mode}") from exc
        with self._transaction(code, "set-document", user_id) as (room, _):
            self._require_host(room, user_id, "set the main document")
            document = self._documents.set_document(room, file_id, mode)
            payload = document_to_dict(document)
        return {"success": True, "message": "Document set successfully", "currentDocument": payload}

    def set_reviewer_content(
        self,
        code: str,
        user_id: str,
        text: str,
        key_points: list[str] | None = None,
    ) -> dict[str, Any]:
        with self._transaction(code, "set-reviewer", user_id) as (room, _):
            self._require_host(room, user_id, "set reviewer content")
            document = self._documents.set_reviewer_content(room, text, key_points or [])
            payload = document_to_dict(document)
        return {"success": True, "message": "Reviewer content set successfully", "currentDocument": payload}

    def clear_document(self, code: str, user_id: str) -> dict[str, Any]:
        with self._transaction(code, "clear-document", user_id) as (room, _):
            self._require_host(room, user_id, "clear the main document")
            self._documents.clear_document(room)
        return {"success": True, "message": "Document cleared successfully", "currentDocument": None}

    def set_scroll_position(self, code: str, user_id: str, position: int) -> dict[str, Any]:
        with self._transaction(code, "scroll", user_id) as (room, _):
            self._require_host(room, user_id, "move the shared view")
            value = self._documents.set_scroll_position(room, position)
        return {"success": True, "scrollPosition": value}

    def add_shared_note(self, code: str, user_id: str, note: str, position: int = 0) -> dict[str, Any]:
        with self._transaction(code, "add-note", user_id) as (room, now):
            author = self._require_participant(room, user_id)
            entry = self._documents.add_note(room, author, note, position, now)
        return {"success": True, "note": note_to_dict(entry)}

    # --- Chat Log ---

    def send_chat_message(self, code: str, user_id: str, text: str) -> dict[str, Any]:
        with self._transaction(code, "chat", user_id) as (room, now):
            author = self._require_participant(room, user_id)
            message = self._chat.post(room, author, text, now)
        return {"success": True, "chatMessage": chat_message_to_dict(message)}

    # --- Quiz Orchestrator ---

    def start_quiz(
        self,
        code: str,
        user_id: str,
        questions: list[QuizQuestion],
        subject: str | None = None,
        test_type: str | None = None,
    ) -> dict[str, Any]:
        with self._transaction(code, "quiz-start", user_id) as (room, now):
            self._require_host(room, user_id, "start a quiz")
            quiz = self._quiz.start(room, questions, subject, test_type, now)
            payload = quiz_to_dict(quiz)
        return {"success": True, "message": "Quiz started", "quiz": payload}

    def submit_quiz_answer(
        self,
        code: str,
        user_id: str,
        question_index: int,
        selected_answer: int,
        time_taken: float = 0.0,
    ) -> dict[str, Any]:
        with self._transaction(code, "quiz-answer", user_id) as (room, _):
            self._quiz.require_in_progress(room.quiz)
            participant = self._require_participant(room, user_id)
            answer, entry = self._quiz.submit_answer(
                room, participant, question_index, selected_answer, time_taken
            )
            question = room.quiz.questions[question_index]
            participant_answers = answers_to_dict(entry)
        return {
            "success": True,
            "isCorrect": answer.is_correct,
            "correctAnswer": question.correct_answer,
            "explanation": question.explanation,
            "score": entry.score,
            "participantAnswers": participant_answers,
        }

    def next_quiz_question(self, code: str, user_id: str) -> dict[str, Any]:
        with self._transaction(code, "quiz-next", user_id) as (room, _):
            self._require_host(room, user_id, "control the quiz")
            index = self._quiz.next_question(room)
        return {"success": True, "currentQuestionIndex": index}

    def end_quiz(self, code: str, user_id: str) -> dict[str, Any]:
        with self._transaction(code, "quiz-end", user_id) as (room, now):
            self._require_host(room, user_id, "end the quiz")
            quiz = self._quiz.end(room, now)
            payload = quiz_to_dict(quiz)
            board = self._quiz.leaderboard(quiz, room.participants)
        return {
            "success": True,
            "message": "Quiz ended",
            "quiz": payload,
            "leaderboard": leaderboard_to_list(board),
        }

    def get_leaderboard(self, code: str) -> list[LeaderboardRow]:
        room, _ = self._load_live_room(code)
        return self._quiz.leaderboard(room.quiz, room.participants)
