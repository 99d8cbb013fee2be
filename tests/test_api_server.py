import pytest
from fastapi.testclient import TestClient

from study_room.client.room_api import HttpRoomApi
from study_room.client.sync_adapter import RoomSyncClient
from study_room.core.errors import DuplicateAnswer, InvalidRequest, RoomNotFound
from study_room.server.api_server import create_api_app

QUESTIONS = [
    {"question": "2 + 2?", "options": ["3", "4"], "correctAnswer": 1, "explanation": "Sum."},
    {"question": "3 + 3?", "options": ["6", "7"], "correctAnswer": 0},
]


class TestRoomApi:
    """End-to-end flows through the HTTP surface."""

    @pytest.fixture(autouse=True)
    def _client(self, manager, abc_room):
        self.manager = manager
        self.code = abc_room
        self.client = TestClient(create_api_app(manager))

    def test_health(self):
        assert self.client.get("/health").json() == {"status": "ok"}

    def test_create_and_read_room(self):
        response = self.client.post("/rooms", json={"userId": "X", "username": "Xia", "roomName": "Chem"})
        assert response.status_code == 201
        code = response.json()["room"]["roomCode"]

        room = self.client.get(f"/rooms/{code}").json()["room"]
        assert room["hostId"] == "X"
        assert room["roomName"] == "Chem"
        assert room["studyTimer"] == {
            "isRunning": False,
            "isPaused": False,
            "duration": 0,
            "startedAt": None,
            "timeRemaining": 0,
        }

    def test_unknown_room_is_404(self):
        response = self.client.get("/rooms/NOPE00")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": RoomNotFound.default_message,
            "error": "room_not_found",
        }

    def test_ready_gating_and_session_start(self):
        blocked = self.client.post(f"/rooms/{self.code}/session", json={"userId": "H", "duration": 1500})
        assert blocked.status_code == 400
        assert blocked.json()["error"] == "participants_not_ready"

        for user_id in ("P1", "P2"):
            assert self.client.post(f"/rooms/{self.code}/ready", json={"userId": user_id}).json()["ready"]

        started = self.client.post(f"/rooms/{self.code}/session", json={"userId": "H", "duration": 1500})
        assert started.status_code == 200
        timer = started.json()["studyTimer"]
        assert (timer["isRunning"], timer["duration"], timer["timeRemaining"]) == (True, 1500, 1500)

        paused = self.client.post(f"/rooms/{self.code}/timer", json={"userId": "H", "action": "pause"})
        assert paused.json()["studyTimer"]["isRunning"] is False

    def test_host_only_actions_are_403(self):
        response = self.client.post(f"/rooms/{self.code}/timer", json={"userId": "P1", "action": "reset"})
        assert response.status_code == 403
        assert response.json()["error"] == "not_authorized"

    def test_validation_errors_are_422(self):
        response = self.client.post(f"/rooms/{self.code}/timer", json={"userId": "H", "action": "rewind"})
        assert response.status_code == 422
        missing_user = self.client.post(f"/rooms/{self.code}/ready", json={})
        assert missing_user.status_code == 422

    def test_quiz_flow(self):
        started = self.client.post(
            f"/rooms/{self.code}/quiz/start",
            json={"userId": "H", "questions": QUESTIONS, "subject": "Math", "testType": "multiple-choice"},
        )
        assert started.status_code == 200
        assert started.json()["quiz"]["status"] == "in-progress"

        answer = {"userId": "P1", "questionIndex": 0, "selectedAnswer": 1, "timeTaken": 2.5}
        first = self.client.post(f"/rooms/{self.code}/quiz/answer", json=answer)
        assert first.json()["isCorrect"] is True
        assert first.json()["explanation"] == "Sum."

        duplicate = self.client.post(f"/rooms/{self.code}/quiz/answer", json=answer)
        assert duplicate.status_code == 409
        assert duplicate.json()["error"] == "duplicate_answer"

        nxt = self.client.post(f"/rooms/{self.code}/quiz/next", json={"userId": "H"})
        assert nxt.json()["currentQuestionIndex"] == 1

        stale = self.client.post(f"/rooms/{self.code}/quiz/answer", json={**answer, "userId": "P2"})
        assert stale.json()["error"] == "stale_question"

        ended = self.client.post(f"/rooms/{self.code}/quiz/end", json={"userId": "H"})
        assert ended.json()["quiz"]["status"] == "completed"

        board = self.client.get(f"/rooms/{self.code}/quiz/leaderboard").json()["leaderboard"]
        assert [(row["userId"], row["score"], row["rank"]) for row in board] == [("P1", 1, 1)]

    def test_document_flow(self):
        shared = self.client.post(
            f"/rooms/{self.code}/files",
            json={
                "userId": "P1",
                "fileId": "f1",
                "fileName": "cells.md",
                "fileType": "md",
                "subject": "Biology",
                "fileContent": "# Cells",
            },
        )
        assert shared.status_code == 201

        self.client.post(f"/rooms/{self.code}/document", json={"userId": "H", "fileId": "f1"})
        page = self.client.get(f"/rooms/{self.code}/document")
        assert page.status_code == 200
        assert "<h1>Cells</h1>" in page.text

        reviewer = self.client.post(
            f"/rooms/{self.code}/document/reviewer",
            json={"userId": "H", "text": "Summary", "keyPoints": ["ATP"]},
        )
        assert reviewer.json()["currentDocument"]["reviewerContent"]["keyPoints"] == ["ATP"]

        removed = self.client.delete(f"/rooms/{self.code}/files/f1", params={"userId": "P2"})
        assert removed.status_code == 403
        removed = self.client.delete(f"/rooms/{self.code}/files/f1", params={"userId": "P1"})
        assert removed.json()["currentDocument"] is None

    def test_chat_notes_and_scroll(self):
        chat = self.client.post(f"/rooms/{self.code}/chat", json={"userId": "P2", "message": "hello"})
        assert chat.status_code == 201
        note = self.client.post(f"/rooms/{self.code}/notes", json={"userId": "P1", "note": "p. 4", "position": 4})
        assert note.json()["note"]["position"] == 4
        scroll = self.client.post(f"/rooms/{self.code}/scroll", json={"userId": "H", "scrollPosition": 80})
        assert scroll.json()["scrollPosition"] == 80

        room = self.client.get(f"/rooms/{self.code}").json()["room"]
        assert room["chatMessages"][0]["message"] == "hello"
        assert room["scrollPosition"] == 80

    def test_leave_and_delete(self):
        left = self.client.post(f"/rooms/{self.code}/leave", json={"userId": "P2"})
        assert left.json()["roomClosed"] is False
        forbidden = self.client.delete(f"/rooms/{self.code}", params={"userId": "P1"})
        assert forbidden.status_code == 403
        deleted = self.client.delete(f"/rooms/{self.code}", params={"userId": "H"})
        assert deleted.json()["success"] is True
        assert self.client.get(f"/rooms/{self.code}").status_code == 404

    def test_http_transport_raises_typed_errors(self):
        api = HttpRoomApi(http=self.client)
        with pytest.raises(RoomNotFound):
            api.get_snapshot("NOPE00")
        with pytest.raises(InvalidRequest):
            api.send_chat_message(self.code, "P1", "")

        self.client.post(f"/rooms/{self.code}/quiz/start", json={"userId": "H", "questions": QUESTIONS})
        api.submit_quiz_answer(self.code, "P1", 0, 1)
        with pytest.raises(DuplicateAnswer):
            api.submit_quiz_answer(self.code, "P1", 0, 1)

    def test_http_transport_participant_calls(self):
        api = HttpRoomApi(http=self.client)
        assert api.toggle_ready(self.code, "P1")["ready"] is True
        assert api.toggle_ready(self.code, "P1")["ready"] is False
        sent = api.send_chat_message(self.code, "P2", "see you at 3")
        assert sent["chatMessage"]["message"] == "see you at 3"
        assert api.leave(self.code, "P2")["roomClosed"] is False

        room = api.get_snapshot(self.code)
        assert [p["userId"] for p in room["participants"]] == ["H", "P1"]
        assert room["chatMessages"][-1]["username"] == "Paul"

    def test_close_only_closes_owned_client(self):
        borrowed = HttpRoomApi(http=self.client)
        borrowed.close()
        assert self.client.is_closed is False
        assert self.client.get("/health").status_code == 200

        owned = HttpRoomApi(base_url="http://localhost")
        assert owned.http is not None and owned.http.is_closed is False
        owned.close()
        assert owned.http.is_closed is True

    def test_transport_without_client_fails_loudly(self):
        api = HttpRoomApi(http=self.client)
        api.http = None
        with pytest.raises(RuntimeError):
            api.get_snapshot(self.code)

    def test_sync_client_over_http_auto_joins(self):
        client = RoomSyncClient(HttpRoomApi(http=self.client), self.code, "P9", "Nia")
        view = client.poll_once()
        assert client.last_error is None
        assert ("P9", "Nia", False) in view.participants
