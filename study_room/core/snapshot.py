"""Serialization of a room document into the JSON snapshot clients poll."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from study_room.core.models import (
    ChatMessage,
    CurrentDocument,
    LeaderboardRow,
    Participant,
    ParticipantAnswers,
    Quiz,
    QuizQuestion,
    QuizStatus,
    Room,
    SharedFile,
    SharedNote,
    StudyTimer,
)


def iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def participant_to_dict(participant: Participant) -> dict[str, Any]:
    return {
        "userId": participant.user_id,
        "username": participant.username,
        "ready": participant.ready,
        "joinedAt": iso(participant.joined_at),
    }


def timer_to_dict(timer: StudyTimer) -> dict[str, Any]:
    return {
        "isRunning": timer.is_running,
        "isPaused": timer.is_paused,
        "duration": timer.duration,
        "startedAt": iso(timer.started_at),
        "timeRemaining": timer.time_remaining,
    }


def shared_file_to_dict(shared: SharedFile) -> dict[str, Any]:
    return {
        "fileId": shared.file_id,
        "fileName": shared.file_name,
        "fileType": shared.file_type,
        "subject": shared.subject,
        "fileContent": shared.file_content,
        "sharedBy": {"userId": shared.shared_by.user_id, "username": shared.shared_by.username},
        "sharedAt": iso(shared.shared_at),
    }


def document_to_dict(document: CurrentDocument | None) -> dict[str, Any] | None:
    if document is None:
        return None
    reviewer = document.reviewer_content
    return {
        "fileId": document.file_id,
        "viewMode": document.view_mode.value,
        "reviewerContent": (
            {"text": reviewer.text, "keyPoints": list(reviewer.key_points)}
            if reviewer is not None
            else None
        ),
    }


def note_to_dict(note: SharedNote) -> dict[str, Any]:
    return {
        "userId": note.user_id,
        "username": note.username,
        "note": note.note,
        "position": note.position,
        "timestamp": iso(note.timestamp),
    }


def chat_message_to_dict(message: ChatMessage) -> dict[str, Any]:
    return {
        "userId": message.user_id,
        "username": message.username,
        "message": message.message,
        "timestamp": iso(message.timestamp),
    }


def answers_to_dict(entry: ParticipantAnswers) -> dict[str, Any]:
    return {
        "userId": entry.user_id,
        "username": entry.username,
        "score": entry.score,
        "answers": [
            {
                "questionIndex": answer.question_index,
                "selectedAnswer": answer.selected_answer,
                "timeTaken": answer.time_taken,
                "isCorrect": answer.is_correct,
            }
            for answer in entry.answers
        ],
    }


def _question_to_dict(question: QuizQuestion, revealed: bool) -> dict[str, Any]:
    return {
        "question": question.question,
        "options": list(question.options),
        "correctAnswer": question.correct_answer if revealed else None,
        "explanation": question.explanation if revealed else None,
    }


def quiz_to_dict(quiz: Quiz) -> dict[str, Any]:
    """Serialize the quiz.

    While the quiz is in progress, answers of the current and later questions
    are withheld. They appear once the host moves past them or ends the quiz.
    """
    in_progress = quiz.status is QuizStatus.IN_PROGRESS
    return {
        "isActive": quiz.is_active,
        "status": quiz.status.value,
        "questions": [
            _question_to_dict(q, not in_progress or index < quiz.current_question_index)
            for index, q in enumerate(quiz.questions)
        ],
        "currentQuestionIndex": quiz.current_question_index,
        "participantAnswers": [answers_to_dict(entry) for entry in quiz.participant_answers],
        "subject": quiz.subject,
        "testType": quiz.test_type,
        "startedAt": iso(quiz.started_at),
        "completedAt": iso(quiz.completed_at),
    }


def leaderboard_to_list(rows: list[LeaderboardRow]) -> list[dict[str, Any]]:
    return [
        {
            "rank": row.rank,
            "userId": row.user_id,
            "username": row.username,
            "score": row.score,
            "answered": row.answered,
        }
        for row in rows
    ]


def room_to_snapshot(room: Room, timer: StudyTimer) -> dict[str, Any]:
    """Serialize ``room`` with ``timer`` already settled for the read time."""
    return {
        "roomCode": room.room_code,
        "roomName": room.room_name,
        "hostId": room.host_id,
        "hostName": room.host_name,
        "participants": [participant_to_dict(p) for p in room.participants],
        "studyTimer": timer_to_dict(timer),
        "currentDocument": document_to_dict(room.current_document),
        "sharedFiles": [shared_file_to_dict(f) for f in room.shared_files],
        "scrollPosition": room.scroll_position,
        "sharedNotes": [note_to_dict(n) for n in room.shared_notes],
        "chatMessages": [chat_message_to_dict(m) for m in room.chat_messages],
        "quiz": quiz_to_dict(room.quiz),
        "isActive": room.is_active,
        "createdAt": iso(room.created_at),
        "expiresAt": iso(room.expires_at),
    }
