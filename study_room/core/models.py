"""Domain models for the study room engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ViewMode(str, Enum):
    RAW = "raw"
    REVIEWER = "reviewer"


class QuizStatus(str, Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TimerAction(str, Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    RESET = "reset"


@dataclass(slots=True)
class Participant:
    """A user registered in a room. The host entry always counts as ready."""

    user_id: str
    username: str
    ready: bool = False
    joined_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class StudyTimer:
    """Shared countdown anchored on wall-clock time.

    ``time_remaining`` holds the remaining seconds at the ``started_at`` anchor
    while running, and the frozen value while paused or idle.
    """

    is_running: bool = False
    is_paused: bool = False
    duration: int = 0
    started_at: datetime | None = None
    time_remaining: int = 0


@dataclass(slots=True)
class SharedBy:
    user_id: str
    username: str


@dataclass(slots=True)
class SharedFile:
    """A file blob handed to the room by a participant."""

    file_id: str
    file_name: str
    file_type: str
    subject: str
    file_content: str
    shared_by: SharedBy
    shared_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class ReviewerContent:
    text: str
    key_points: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CurrentDocument:
    """The artifact the host is broadcasting to every participant."""

    file_id: str
    view_mode: ViewMode = ViewMode.RAW
    reviewer_content: ReviewerContent | None = None


@dataclass(slots=True)
class SharedNote:
    user_id: str
    username: str
    note: str
    position: int = 0
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class ChatMessage:
    user_id: str
    username: str
    message: str
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice question; ``correct_answer`` indexes ``options``."""

    question: str
    options: list[str]
    correct_answer: int
    explanation: str = ""


@dataclass(slots=True)
class QuizAnswer:
    question_index: int
    selected_answer: int
    time_taken: float
    is_correct: bool


@dataclass(slots=True)
class ParticipantAnswers:
    user_id: str
    username: str
    score: int = 0
    answers: list[QuizAnswer] = field(default_factory=list)

    def answer_for(self, question_index: int) -> QuizAnswer | None:
        return next((a for a in self.answers if a.question_index == question_index), None)


@dataclass(slots=True)
class Quiz:
    is_active: bool = False
    status: QuizStatus = QuizStatus.WAITING
    questions: list[QuizQuestion] = field(default_factory=list)
    current_question_index: int = 0
    participant_answers: list[ParticipantAnswers] = field(default_factory=list)
    subject: str | None = None
    test_type: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


@dataclass(slots=True)
class LeaderboardRow:
    """Immutable ranking entry returned to consumers."""

    rank: int
    user_id: str
    username: str
    score: int
    answered: int


@dataclass(slots=True)
class Room:
    """Root aggregate holding all session state for one room code."""

    room_code: str
    host_id: str
    host_name: str
    room_name: str
    participants: list[Participant] = field(default_factory=list)
    study_timer: StudyTimer = field(default_factory=StudyTimer)
    current_document: CurrentDocument | None = None
    shared_files: list[SharedFile] = field(default_factory=list)
    scroll_position: int = 0
    shared_notes: list[SharedNote] = field(default_factory=list)
    chat_messages: list[ChatMessage] = field(default_factory=list)
    quiz: Quiz = field(default_factory=Quiz)
    is_active: bool = True
    created_at: datetime = field(default_factory=utc_now)
    expires_at: datetime | None = None

    def find_participant(self, user_id: str) -> Participant | None:
        return next((p for p in self.participants if p.user_id == user_id), None)

    def find_shared_file(self, file_id: str) -> SharedFile | None:
        return next((f for f in self.shared_files if f.file_id == file_id), None)

    def is_host(self, user_id: str) -> bool:
        return self.host_id == user_id
