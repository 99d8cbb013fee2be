"""FastAPI server that exposes the room operations to polling clients."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
import uvicorn

from study_room.constants.about import APP_NAME, APP_VERSION
from study_room.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from study_room.core.document_renderer import renderer
from study_room.core.errors import RoomError
from study_room.core.room_manager import RoomManager
from study_room.core.snapshot import leaderboard_to_list
from study_room.server.schemas import (
    AnswerPayload,
    CallerPayload,
    ChatPayload,
    CreateRoomPayload,
    JoinPayload,
    NotePayload,
    ReviewerPayload,
    ScrollPayload,
    SetDocumentPayload,
    ShareFilePayload,
    StartQuizPayload,
    StartSessionPayload,
    TimerPayload,
)

logger = logging.getLogger(__name__)


def _get_room_manager_dependency(room_manager: RoomManager):
    def dependency() -> RoomManager:
        return room_manager

    return dependency


def create_api_app(room_manager: RoomManager) -> FastAPI:
    """Create a FastAPI application wired to the provided room manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_room_manager_dependency(room_manager)

    @app.exception_handler(RoomError)
    async def handle_room_error(request: Request, exc: RoomError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message, "error": exc.code},
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/rooms", status_code=201)
    def create_room(
        payload: CreateRoomPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.create_room(payload.user_id, payload.username, payload.room_name)

    @app.get("/rooms/{room_code}")
    def get_room(room_code: str, manager: RoomManager = Depends(manager_dep)) -> dict[str, object]:
        return {"success": True, "room": manager.get_room_snapshot(room_code)}

    @app.delete("/rooms/{room_code}")
    def delete_room(
        room_code: str,
        user_id: str = Query(alias="userId", min_length=1),
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.delete_room(room_code, user_id)

    # --- Participants ---

    @app.post("/rooms/{room_code}/join")
    def join_room(
        room_code: str,
        payload: JoinPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.join_room(room_code, payload.user_id, payload.username)

    @app.post("/rooms/{room_code}/leave")
    def leave_room(
        room_code: str,
        payload: CallerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.leave_room(room_code, payload.user_id)

    @app.post("/rooms/{room_code}/ready")
    def toggle_ready(
        room_code: str,
        payload: CallerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.toggle_ready(room_code, payload.user_id)

    # --- Timer ---

    @app.post("/rooms/{room_code}/session")
    def start_session(
        room_code: str,
        payload: StartSessionPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.start_session(room_code, payload.user_id, payload.duration)

    @app.post("/rooms/{room_code}/timer")
    def control_timer(
        room_code: str,
        payload: TimerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.control_timer(room_code, payload.user_id, payload.action, payload.duration)

    # --- Documents ---

    @app.post("/rooms/{room_code}/files", status_code=201)
    def share_file(
        room_code: str,
        payload: ShareFilePayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.share_file(
            room_code,
            payload.user_id,
            payload.file_id,
            payload.file_name,
            payload.file_type,
            payload.subject,
            payload.file_content,
        )

    @app.delete("/rooms/{room_code}/files/{file_id}")
    def remove_shared_file(
        room_code: str,
        file_id: str,
        user_id: str = Query(alias="userId", min_length=1),
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.remove_shared_file(room_code, user_id, file_id)

    @app.post("/rooms/{room_code}/document")
    def set_document(
        room_code: str,
        payload: SetDocumentPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.set_document(room_code, payload.user_id, payload.file_id, payload.view_mode)

    @app.post("/rooms/{room_code}/document/reviewer")
    def set_reviewer_content(
        room_code: str,
        payload: ReviewerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.set_reviewer_content(room_code, payload.user_id, payload.text, payload.key_points)

    @app.post("/rooms/{room_code}/document/clear")
    def clear_document(
        room_code: str,
        payload: CallerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.clear_document(room_code, payload.user_id)

    @app.get("/rooms/{room_code}/document", response_class=HTMLResponse)
    def render_document(room_code: str, manager: RoomManager = Depends(manager_dep)) -> str:
        room = manager.get_room(room_code)
        return renderer.render_room_document(room)

    @app.post("/rooms/{room_code}/scroll")
    def set_scroll_position(
        room_code: str,
        payload: ScrollPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.set_scroll_position(room_code, payload.user_id, payload.scroll_position)

    @app.post("/rooms/{room_code}/notes", status_code=201)
    def add_shared_note(
        room_code: str,
        payload: NotePayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.add_shared_note(room_code, payload.user_id, payload.note, payload.position)

    # --- Chat ---

    @app.post("/rooms/{room_code}/chat", status_code=201)
    def send_chat_message(
        room_code: str,
        payload: ChatPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.send_chat_message(room_code, payload.user_id, payload.message)

    # --- Quiz ---

    @app.post("/rooms/{room_code}/quiz/start")
    def start_quiz(
        room_code: str,
        payload: StartQuizPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        questions = [question.to_model() for question in payload.questions]
        return manager.start_quiz(room_code, payload.user_id, questions, payload.subject, payload.test_type)

    @app.post("/rooms/{room_code}/quiz/answer")
    def submit_quiz_answer(
        room_code: str,
        payload: AnswerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.submit_quiz_answer(
            room_code,
            payload.user_id,
            payload.question_index,
            payload.selected_answer,
            payload.time_taken,
        )

    @app.post("/rooms/{room_code}/quiz/next")
    def next_quiz_question(
        room_code: str,
        payload: CallerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.next_quiz_question(room_code, payload.user_id)

    @app.post("/rooms/{room_code}/quiz/end")
    def end_quiz(
        room_code: str,
        payload: CallerPayload,
        manager: RoomManager = Depends(manager_dep),
    ) -> dict[str, object]:
        return manager.end_quiz(room_code, payload.user_id)

    @app.get("/rooms/{room_code}/quiz/leaderboard")
    def get_leaderboard(room_code: str, manager: RoomManager = Depends(manager_dep)) -> dict[str, object]:
        return {"success": True, "leaderboard": leaderboard_to_list(manager.get_leaderboard(room_code))}

    return app


def start_api_server(
    room_manager: RoomManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(room_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="RoomApiServer", daemon=True)
    thread.start()
    logger.info("Room API listening on %s:%s", host, port)
    return thread


def run_api_server(
    room_manager: RoomManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground (headless mode)."""
    uvicorn.run(create_api_app(room_manager), host=host, port=port, log_level="info")
