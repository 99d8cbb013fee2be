"""Application entry point for Study Room."""

from __future__ import annotations

from datetime import timedelta
import logging
import socket
import sys

from study_room.core.room_manager import RoomManager
from study_room.server.api_server import run_api_server, start_api_server
from study_room.settings import AppSettings, get_settings
from study_room.utils.logging_config import configure_logging


def _determine_server_url(port: int) -> str:
    """Best-effort determination of the local IP participants connect to."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def build_room_manager(settings: AppSettings) -> RoomManager:
    return RoomManager(
        capacity=settings.room_capacity,
        chat_history_limit=settings.chat_history_limit,
        room_ttl=timedelta(hours=settings.room_ttl_hours),
    )


def main() -> None:
    """Initialize logging, open the host room, start the API and the console."""
    settings = get_settings()
    logger = configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.info("Starting Study Room...")

    room_manager = build_room_manager(settings)
    created = room_manager.create_room(settings.host_user_id, settings.host_username, settings.room_name)
    room_code = created["room"]["roomCode"]
    server_url = _determine_server_url(settings.port)
    logger.info("Room %s open; participants connect to %s", room_code, server_url)

    if settings.headless:
        run_api_server(room_manager, host=settings.host, port=settings.port)
        return

    from PySide6.QtWidgets import QApplication

    from study_room.ui.host_main_window import HostMainWindow

    start_api_server(room_manager, host=settings.host, port=settings.port)
    app = QApplication(sys.argv)
    window = HostMainWindow(
        room_manager=room_manager,
        room_code=room_code,
        host_id=settings.host_user_id,
        host_name=settings.host_username,
        server_url=server_url,
    )
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
