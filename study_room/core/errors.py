"""Recoverable errors raised by room mutations.

Every error rejects a single request and leaves the stored room untouched.
``status_code`` is the HTTP status the server answers with; ``code`` is the
stable identifier clients can branch on.
"""

from __future__ import annotations


class RoomError(RuntimeError):
    code: str = "room_error"
    status_code: int = 400
    default_message: str = "Request rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RoomNotFound(RoomError):
    code = "room_not_found"
    status_code = 404
    default_message = "Room not found or has expired"


class RoomFull(RoomError):
    code = "room_full"
    status_code = 409
    default_message = "Room is full"


class NotAParticipant(RoomError):
    code = "not_a_participant"
    status_code = 403
    default_message = "You are not a participant in this room"


class NotAuthorized(RoomError):
    code = "not_authorized"
    status_code = 403
    default_message = "Only the host can do that"


class InsufficientParticipants(RoomError):
    code = "insufficient_participants"
    status_code = 400
    default_message = (
        "Please wait for at least one more person to join before starting the timer. "
        "This is a collaborative study session!"
    )


class ParticipantsNotReady(RoomError):
    code = "participants_not_ready"
    status_code = 400
    default_message = "Every participant must be ready before the session starts"


class InvalidTimerAction(RoomError):
    code = "invalid_timer_action"
    status_code = 409
    default_message = "Timer cannot do that in its current state"


class AlreadyActive(RoomError):
    code = "already_active"
    status_code = 409
    default_message = "A quiz is already in progress"


class QuizNotActive(RoomError):
    code = "quiz_not_active"
    status_code = 409
    default_message = "Quiz is not active"


class StaleQuestion(RoomError):
    code = "stale_question"
    status_code = 409
    default_message = "The host has already moved past that question"


class DuplicateAnswer(RoomError):
    code = "duplicate_answer"
    status_code = 409
    default_message = "You have already answered this question"


class AtLastQuestion(RoomError):
    code = "at_last_question"
    status_code = 409
    default_message = "Already on the last question"


class VersionConflict(RoomError):
    code = "version_conflict"
    status_code = 409
    default_message = "Room changed concurrently; re-read and retry"


class SharedFileNotFound(RoomError):
    code = "shared_file_not_found"
    status_code = 404
    default_message = "File not found in shared files"


class FileAlreadyShared(RoomError):
    code = "file_already_shared"
    status_code = 409
    default_message = "This file is already shared in this room"


class NoCurrentDocument(RoomError):
    code = "no_current_document"
    status_code = 400
    default_message = "No document is currently set"


class InvalidRequest(RoomError):
    code = "invalid_request"
    status_code = 422
    default_message = "Invalid request"


def error_for_code(code: str | None, message: str | None = None) -> RoomError:
    """Rebuild the typed error a server response names by ``code``."""
    for error_type in _all_error_types(RoomError):
        if error_type.code == code:
            return error_type(message)
    return RoomError(message)


def _all_error_types(base: type[RoomError]) -> list[type[RoomError]]:
    found: list[type[RoomError]] = []
    for subclass in base.__subclasses__():
        found.append(subclass)
        found.extend(_all_error_types(subclass))
    return found
