"""Transports a sync client uses to read and join rooms."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Protocol

import httpx

from study_room.constants.sync_constants import HTTP_TIMEOUT_SECONDS
from study_room.core.errors import InvalidRequest, RoomError, error_for_code
from study_room.core.room_manager import RoomManager

logger = logging.getLogger(__name__)


class RoomApi(Protocol):
    """The two calls a poll cycle needs."""

    def get_snapshot(self, room_code: str) -> dict[str, Any]:
        ...

    def join(self, room_code: str, user_id: str, username: str) -> dict[str, Any]:
        ...


@dataclass
class InProcessRoomApi:
    """Talks to a ``RoomManager`` living in the same process (host console)."""

    manager: RoomManager

    def get_snapshot(self, room_code: str) -> dict[str, Any]:
        return self.manager.get_room_snapshot(room_code)

    def join(self, room_code: str, user_id: str, username: str) -> dict[str, Any]:
        return self.manager.join_room(room_code, user_id, username)


@dataclass
class HttpRoomApi:
    """Client for the room HTTP API.

    Failed calls raise the same ``RoomError`` subclass the server raised, so
    callers handle remote and in-process rooms alike.
    """

    base_url: str = ""
    http: httpx.Client | None = None
    timeout: float = HTTP_TIMEOUT_SECONDS
    _owns_client: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.http is None:
            self.http = httpx.Client(base_url=self.base_url, timeout=self.timeout)
            self._owns_client = True

    def close(self) -> None:
        if self._owns_client and self.http is not None:
            self.http.close()

    def get_snapshot(self, room_code: str) -> dict[str, Any]:
        return self._request("GET", f"/rooms/{room_code}")["room"]

    def join(self, room_code: str, user_id: str, username: str) -> dict[str, Any]:
        return self._request(
            "POST", f"/rooms/{room_code}/join", json={"userId": user_id, "username": username}
        )

    def leave(self, room_code: str, user_id: str) -> dict[str, Any]:
        return self._request("POST", f"/rooms/{room_code}/leave", json={"userId": user_id})

    def toggle_ready(self, room_code: str, user_id: str) -> dict[str, Any]:
        return self._request("POST", f"/rooms/{room_code}/ready", json={"userId": user_id})

    def send_chat_message(self, room_code: str, user_id: str, message: str) -> dict[str, Any]:
        return self._request(
            "POST", f"/rooms/{room_code}/chat", json={"userId": user_id, "message": message}
        )

    def submit_quiz_answer(
        self,
        room_code: str,
        user_id: str,
        question_index: int,
        selected_answer: int,
        time_taken: float = 0.0,
    ) -> dict[str, Any]:
        return self._request(
            "POST",
            f"/rooms/{room_code}/quiz/answer",
            json={
                "userId": user_id,
                "questionIndex": question_index,
                "selectedAnswer": selected_answer,
                "timeTaken": time_taken,
            },
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if self.http is None:
            raise RuntimeError("HttpRoomApi has no HTTP client")
        response = self.http.request(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.is_success:
            return body
        if response.status_code == 422 and "detail" in body:
            raise InvalidRequest(str(body["detail"]))
        logger.debug("%s %s failed with %s: %s", method, path, response.status_code, body)
        if "error" in body:
            raise error_for_code(body.get("error"), body.get("message"))
        raise RoomError(f"HTTP {response.status_code} from {path}")
