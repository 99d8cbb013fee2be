"""Component for the room chat."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from study_room.client.sync_adapter import ChatLine
from study_room.constants.ui_constants import CHAT_PLACEHOLDER, SEND_CHAT_BUTTON


class ChatPanel(QGroupBox):
    def __init__(self, on_send: Callable[[str], bool], parent: QWidget | None = None) -> None:
        super().__init__("Chat", parent)
        self.on_send = on_send
        self._lines: tuple[ChatLine, ...] = ()

        layout = QVBoxLayout()
        self.setLayout(layout)

        self.message_list = QListWidget(self)
        self.message_list.setWordWrap(True)
        layout.addWidget(self.message_list, stretch=1)

        entry_row = QHBoxLayout()
        self.message_input = QLineEdit(self)
        self.message_input.setPlaceholderText(CHAT_PLACEHOLDER)
        self.message_input.returnPressed.connect(self._handle_send)
        entry_row.addWidget(self.message_input, stretch=1)

        self.send_button = QPushButton(SEND_CHAT_BUTTON, self)
        self.send_button.clicked.connect(self._handle_send)
        entry_row.addWidget(self.send_button)
        layout.addLayout(entry_row)

    def _handle_send(self) -> None:
        text = self.message_input.text().strip()
        if not text:
            return
        if self.on_send(text):
            self.message_input.clear()

    def refresh(self, lines: tuple[ChatLine, ...]) -> None:
        if lines == self._lines:
            return
        self._lines = lines
        self.message_list.clear()
        for line in lines:
            self.message_list.addItem(f"{line.username}: {line.message}")
        self.message_list.scrollToBottom()
