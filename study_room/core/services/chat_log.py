"""Service for the room's ordered chat history."""

from __future__ import annotations

from datetime import datetime

from study_room.constants.room_constants import CHAT_HISTORY_LIMIT
from study_room.core.errors import InvalidRequest
from study_room.core.models import ChatMessage, Participant, Room


class ChatLog:
    """Appends messages in arrival order and keeps only the newest ``limit``."""

    def __init__(self, limit: int = CHAT_HISTORY_LIMIT) -> None:
        self._limit = limit

    def post(self, room: Room, author: Participant, text: str, now: datetime) -> ChatMessage:
        cleaned = text.strip()
        if not cleaned:
            raise InvalidRequest("Message text is required")
        message = ChatMessage(
            user_id=author.user_id,
            username=author.username,
            message=cleaned,
            timestamp=now,
        )
        room.chat_messages.append(message)
        if len(room.chat_messages) > self._limit:
            room.chat_messages = room.chat_messages[-self._limit:]
        return message
