"""Qt main window for the room host."""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
import uuid

from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from study_room.client.room_api import InProcessRoomApi
from study_room.client.sync_adapter import RoomSyncClient, RoomView, countdown_at
from study_room.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from study_room.constants.sync_constants import COUNTDOWN_TICK_INTERVAL_MS, ROOM_POLL_INTERVAL_MS
from study_room.constants.ui_constants import (
    ABOUT_BUTTON,
    HELP_BUTTON,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    NO_QUIZ_LOADED_MESSAGE,
    ROOM_CODE_TEMPLATE,
    SERVER_URL_TEMPLATE,
    SHARE_DIALOG_TITLE,
    SHARE_FILE_BUTTON,
    SHARE_FILE_FILTER,
    WINDOW_TITLE,
)
from study_room.core.document_renderer import renderer
from study_room.core.errors import RoomError
from study_room.core.models import utc_now
from study_room.core.question_importer import (
    ImportedQuestions,
    QuestionImportError,
    load_questions_from_file,
)
from study_room.core.room_manager import RoomManager
from study_room.styling.styles import Styles
from study_room.ui.components.chat_panel import ChatPanel
from study_room.ui.components.document_panel import DocumentPanel
from study_room.ui.components.participants_panel import ParticipantsPanel
from study_room.ui.components.quiz_panel import QuizPanel
from study_room.ui.components.timer_panel import TimerPanel
from study_room.ui.dialog_helpers import (
    ask_reviewer_text,
    confirm_close_room,
    confirm_replace_quiz,
    show_error,
    show_info,
    show_warning,
)

logger = logging.getLogger(__name__)


class HostMainWindow(QMainWindow):
    """Host console: polls the room like any client and issues host actions."""

    def __init__(
        self,
        room_manager: RoomManager,
        room_code: str,
        host_id: str,
        host_name: str,
        server_url: str,
    ) -> None:
        super().__init__()
        self.setWindowTitle(f"{WINDOW_TITLE} - {room_code}")

        self.room_manager = room_manager
        self.room_code = room_code
        self.host_id = host_id
        self.host_name = host_name
        self.server_url = server_url

        self.sync_client = RoomSyncClient(InProcessRoomApi(room_manager), room_code, host_id, host_name)
        self._view: RoomView | None = None
        self._imported: ImportedQuestions | None = None
        self._room_closed = False

        self._build_ui()
        self._configure_timers()
        self.setStyleSheet(Styles.get_main_window_style())
        self._refresh_state()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        header_row = QHBoxLayout()
        self.room_label = QLabel(ROOM_CODE_TEMPLATE.format(code=self.room_code), self)
        self.room_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.room_label)

        self.url_label = QLabel(SERVER_URL_TEMPLATE.format(url=self.server_url), self)
        self.url_label.setWordWrap(True)
        header_row.addWidget(self.url_label, stretch=1)

        self.share_button = QPushButton(SHARE_FILE_BUTTON, self)
        self.share_button.clicked.connect(self._handle_share_file)
        header_row.addWidget(self.share_button)

        self.about_button = QPushButton(ABOUT_BUTTON, self)
        self.about_button.clicked.connect(self._handle_about)
        header_row.addWidget(self.about_button)

        self.help_button = QPushButton(HELP_BUTTON, self)
        self.help_button.clicked.connect(lambda: show_info(self, f"{APP_NAME} Help", HELP_TEXT))
        header_row.addWidget(self.help_button)
        root_layout.addLayout(header_row)

        self.error_label = QLabel("", self)
        self.error_label.setVisible(False)
        root_layout.addWidget(self.error_label)

        top_row = QHBoxLayout()
        self.participants_panel = ParticipantsPanel(self)
        top_row.addWidget(self.participants_panel, stretch=1)

        self.timer_panel = TimerPanel(
            on_start=self._handle_start_session,
            on_action=self._handle_timer_action,
            parent=self,
        )
        top_row.addWidget(self.timer_panel, stretch=1)

        self.quiz_panel = QuizPanel(
            on_import=self._handle_import_questions,
            on_start=self._handle_start_quiz,
            on_next=lambda: self._run_action(
                "Next question", lambda: self.room_manager.next_quiz_question(self.room_code, self.host_id)
            ),
            on_end=lambda: self._run_action(
                "End quiz", lambda: self.room_manager.end_quiz(self.room_code, self.host_id)
            ),
            parent=self,
        )
        top_row.addWidget(self.quiz_panel, stretch=2)
        root_layout.addLayout(top_row, stretch=1)

        bottom_row = QHBoxLayout()
        self.document_panel = DocumentPanel(
            on_show=self._handle_show_document,
            on_set_reviewer=self._handle_set_reviewer,
            on_clear=lambda: self._run_action(
                "Clear document", lambda: self.room_manager.clear_document(self.room_code, self.host_id)
            ),
            on_remove=self._handle_remove_file,
            parent=self,
        )
        bottom_row.addWidget(self.document_panel, stretch=3)

        self.chat_panel = ChatPanel(on_send=self._handle_send_chat, parent=self)
        bottom_row.addWidget(self.chat_panel, stretch=1)
        root_layout.addLayout(bottom_row, stretch=2)

    def _configure_timers(self) -> None:
        self.poll_timer = QTimer(self)
        self.poll_timer.setInterval(ROOM_POLL_INTERVAL_MS)
        self.poll_timer.timeout.connect(self._refresh_state)
        self.poll_timer.start()

        self.countdown_timer = QTimer(self)
        self.countdown_timer.setInterval(COUNTDOWN_TICK_INTERVAL_MS)
        self.countdown_timer.timeout.connect(self._tick_countdown)
        self.countdown_timer.start()

    # --- Polling ---

    def _refresh_state(self) -> None:
        view = self.sync_client.poll_once()
        error = self.sync_client.last_error
        self.error_label.setText(f"Last refresh failed: {error}" if error else "")
        self.error_label.setVisible(bool(error))
        if view is None:
            return
        self._view = view
        self.participants_panel.refresh(view)
        self.quiz_panel.refresh(view.quiz)
        self.chat_panel.refresh(view.chat)
        self.document_panel.refresh(view, self._document_html())
        self._tick_countdown()

    def _tick_countdown(self) -> None:
        if self._view is None:
            return
        remaining = countdown_at(self._view, utc_now())
        self.timer_panel.show_timer(self._view.timer, remaining, self._view.all_ready)

    def _document_html(self) -> str:
        try:
            room = self.room_manager.get_room(self.room_code)
        except RoomError as exc:
            return f"<p><em>{exc.message}</em></p>"
        return renderer.wrap_with_mathjax(renderer.render_room_document(room), title=room.room_name)

    def _run_action(self, title: str, action: Callable[[], object]) -> bool:
        """Run a room mutation; failures are shown and the view is re-polled."""
        try:
            action()
        except RoomError as exc:
            show_error(self, f"{title} failed", exc.message)
            self._refresh_state()
            return False
        self._refresh_state()
        return True

    # --- Timer ---

    def _handle_start_session(self, duration: int) -> None:
        self._run_action(
            "Start session",
            lambda: self.room_manager.start_session(self.room_code, self.host_id, duration),
        )

    def _handle_timer_action(self, action: str) -> None:
        self._run_action(
            f"Timer {action}",
            lambda: self.room_manager.control_timer(self.room_code, self.host_id, action),
        )

    # --- Quiz ---

    def _handle_import_questions(self) -> None:
        if self._imported is not None and not confirm_replace_quiz(self):
            return
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return
        try:
            imported = load_questions_from_file(Path(file_path))
        except (OSError, QuestionImportError) as exc:
            show_error(self, "Import failed", str(exc))
            return
        self._imported = imported
        self.quiz_panel.set_loaded_questions(imported.source_path.name, len(imported.questions))
        self._refresh_state()

    def _handle_start_quiz(self) -> None:
        if self._imported is None:
            show_warning(self, "No quiz", NO_QUIZ_LOADED_MESSAGE)
            return
        imported = self._imported
        self._run_action(
            "Start quiz",
            lambda: self.room_manager.start_quiz(
                self.room_code, self.host_id, imported.questions, imported.subject, "multiple-choice"
            ),
        )

    # --- Documents ---

    def _handle_share_file(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            SHARE_DIALOG_TITLE,
            str(Path.home()),
            SHARE_FILE_FILTER,
        )
        if not file_path:
            return
        path = Path(file_path)
        file_type = path.suffix.lstrip(".").lower()
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            show_error(self, "Share failed", str(exc))
            return
        self._run_action(
            "Share file",
            lambda: self.room_manager.share_file(
                self.room_code,
                self.host_id,
                uuid.uuid4().hex,
                path.name,
                file_type,
                path.stem,
                content,
            ),
        )

    def _handle_show_document(self, file_id: str, view_mode: str) -> None:
        self._run_action(
            "Set document",
            lambda: self.room_manager.set_document(self.room_code, self.host_id, file_id, view_mode),
        )

    def _handle_set_reviewer(self) -> None:
        entered = ask_reviewer_text(self)
        if entered is None:
            return
        text, key_points = entered
        self._run_action(
            "Reviewer notes",
            lambda: self.room_manager.set_reviewer_content(self.room_code, self.host_id, text, key_points),
        )

    def _handle_remove_file(self, file_id: str) -> None:
        self._run_action(
            "Remove file",
            lambda: self.room_manager.remove_shared_file(self.room_code, self.host_id, file_id),
        )

    # --- Chat ---

    def _handle_send_chat(self, text: str) -> bool:
        return self._run_action(
            "Send message",
            lambda: self.room_manager.send_chat_message(self.room_code, self.host_id, text),
        )

    def _handle_about(self) -> None:
        details = f"{APP_NAME} v{APP_VERSION}\nLicense: {APP_LICENSE}\n\n{APP_ABOUT_TEXT}"
        show_info(self, f"About {APP_NAME}", details)

    def closeEvent(self, event: QCloseEvent) -> None:
        if not self._room_closed:
            if not confirm_close_room(self):
                event.ignore()
                return
            try:
                self.room_manager.leave_room(self.room_code, self.host_id)
            except RoomError as exc:
                logger.warning("Closing room %s failed: %s", self.room_code, exc.message)
            self._room_closed = True
        self.poll_timer.stop()
        self.countdown_timer.stop()
        super().closeEvent(event)
