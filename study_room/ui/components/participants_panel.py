"""Component listing room participants and their readiness."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QGroupBox, QLabel, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from study_room.client.sync_adapter import RoomView
from study_room.constants.ui_constants import EMPTY_PARTICIPANTS, READY_COUNT_TEMPLATE
from study_room.styling.styles import Styles


class ParticipantsPanel(QGroupBox):
    """Shows who is in the room and who has pressed Ready."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__("Participants", parent)
        self._snapshot: tuple[tuple[str, str, bool], ...] = ()

        layout = QVBoxLayout()
        self.setLayout(layout)

        self.ready_label = QLabel(READY_COUNT_TEMPLATE.format(ready=0, total=0), self)
        layout.addWidget(self.ready_label)

        self.participant_list = QListWidget(self)
        self.participant_list.setAlternatingRowColors(True)
        layout.addWidget(self.participant_list, stretch=1)

        self.empty_label = QLabel(EMPTY_PARTICIPANTS, self)
        self.empty_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.empty_label)

    def refresh(self, view: RoomView) -> None:
        self.ready_label.setText(
            READY_COUNT_TEMPLATE.format(ready=view.ready_count, total=view.participant_count)
        )
        if view.participants == self._snapshot:
            return
        self._snapshot = view.participants
        self.participant_list.clear()
        for user_id, username, ready in view.participants:
            suffix = " (host)" if user_id == view.host_id else ("  ready" if ready else "  not ready")
            item = QListWidgetItem(f"{username}{suffix}", self.participant_list)
            item.setForeground(QColor(Styles.get_ready_color(ready)))
        self.empty_label.setVisible(view.participant_count <= 1)
