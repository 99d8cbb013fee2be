"""Component for the shared study countdown."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from study_room.client.sync_adapter import TimerView
from study_room.constants.room_constants import DEFAULT_STUDY_DURATION_SECONDS
from study_room.constants.ui_constants import (
    PAUSE_BUTTON,
    RESET_BUTTON,
    RESUME_BUTTON,
    SESSION_COMPLETE_TEXT,
    START_SESSION_BUTTON,
    TIMER_IDLE_TEXT,
)
from study_room.styling.styles import Styles


def format_countdown(seconds: int) -> str:
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class TimerPanel(QGroupBox):
    """Host controls for starting, pausing, resuming and resetting the timer."""

    def __init__(
        self,
        on_start: Callable[[int], None],
        on_action: Callable[[str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__("Study Timer", parent)
        self.on_start = on_start
        self.on_action = on_action

        layout = QVBoxLayout()
        self.setLayout(layout)

        self.countdown_label = QLabel(format_countdown(DEFAULT_STUDY_DURATION_SECONDS), self)
        self.countdown_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.countdown_label)

        self.status_label = QLabel(TIMER_IDLE_TEXT, self)
        self.status_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.status_label)

        start_row = QHBoxLayout()
        self.duration_input = QSpinBox(self)
        self.duration_input.setRange(1, 240)
        self.duration_input.setValue(DEFAULT_STUDY_DURATION_SECONDS // 60)
        self.duration_input.setSuffix(" min")
        start_row.addWidget(self.duration_input)

        self.start_button = QPushButton(START_SESSION_BUTTON, self)
        self.start_button.clicked.connect(self._handle_start)
        start_row.addWidget(self.start_button)
        layout.addLayout(start_row)

        control_row = QHBoxLayout()
        self.pause_button = QPushButton(PAUSE_BUTTON, self)
        self.pause_button.clicked.connect(lambda: self.on_action("pause"))
        control_row.addWidget(self.pause_button)

        self.resume_button = QPushButton(RESUME_BUTTON, self)
        self.resume_button.clicked.connect(lambda: self.on_action("resume"))
        control_row.addWidget(self.resume_button)

        self.reset_button = QPushButton(RESET_BUTTON, self)
        self.reset_button.clicked.connect(lambda: self.on_action("reset"))
        control_row.addWidget(self.reset_button)
        layout.addLayout(control_row)

    def _handle_start(self) -> None:
        self.on_start(self.duration_input.value() * 60)

    def show_timer(self, timer: TimerView, remaining: int, can_start: bool) -> None:
        complete = timer.session_complete
        self.countdown_label.setText(format_countdown(remaining))
        self.countdown_label.setStyleSheet(Styles.get_countdown_style(timer.is_running, complete))
        if complete:
            self.status_label.setText(SESSION_COMPLETE_TEXT)
        elif timer.is_running:
            self.status_label.setText("Running")
        elif timer.is_paused:
            self.status_label.setText("Paused")
        else:
            self.status_label.setText(TIMER_IDLE_TEXT)

        self.start_button.setEnabled(can_start and not timer.is_running)
        self.pause_button.setEnabled(timer.is_running)
        self.resume_button.setEnabled(timer.is_paused and timer.time_remaining > 0)
        self.reset_button.setEnabled(timer.duration > 0)
