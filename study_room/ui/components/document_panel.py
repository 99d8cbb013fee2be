"""Component for broadcasting a shared document to the room."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from PySide6.QtCore import Qt

from study_room.client.sync_adapter import RoomView
from study_room.constants.ui_constants import (
    CLEAR_DOCUMENT_BUTTON,
    NO_DOCUMENT_TEXT,
    REMOVE_FILE_BUTTON,
    SET_REVIEWER_BUTTON,
    SHOW_RAW_BUTTON,
    SHOW_REVIEWER_BUTTON,
)


class DocumentPanel(QGroupBox):
    """Shared files on the left, the broadcast document preview on the right."""

    def __init__(
        self,
        on_show: Callable[[str, str], None],
        on_set_reviewer: Callable[[], None],
        on_clear: Callable[[], None],
        on_remove: Callable[[str], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__("Document", parent)
        self.on_show = on_show
        self.on_remove = on_remove
        self._files: tuple[tuple[str, str], ...] = ()
        self._last_html: str | None = None

        layout = QHBoxLayout()
        self.setLayout(layout)

        files_column = QVBoxLayout()
        self.file_list = QListWidget(self)
        files_column.addWidget(self.file_list, stretch=1)

        self.raw_button = QPushButton(SHOW_RAW_BUTTON, self)
        self.raw_button.clicked.connect(lambda: self._show_selected("raw"))
        files_column.addWidget(self.raw_button)

        self.reviewer_button = QPushButton(SHOW_REVIEWER_BUTTON, self)
        self.reviewer_button.clicked.connect(lambda: self._show_selected("reviewer"))
        files_column.addWidget(self.reviewer_button)

        self.set_reviewer_button = QPushButton(SET_REVIEWER_BUTTON, self)
        self.set_reviewer_button.clicked.connect(on_set_reviewer)
        files_column.addWidget(self.set_reviewer_button)

        self.clear_button = QPushButton(CLEAR_DOCUMENT_BUTTON, self)
        self.clear_button.clicked.connect(on_clear)
        files_column.addWidget(self.clear_button)

        self.remove_button = QPushButton(REMOVE_FILE_BUTTON, self)
        self.remove_button.clicked.connect(self._remove_selected)
        files_column.addWidget(self.remove_button)
        layout.addLayout(files_column, stretch=1)

        preview_column = QVBoxLayout()
        self.current_label = QLabel(NO_DOCUMENT_TEXT, self)
        preview_column.addWidget(self.current_label)
        self.preview_view = QWebEngineView(self)
        preview_column.addWidget(self.preview_view, stretch=1)
        layout.addLayout(preview_column, stretch=3)

    def _selected_file_id(self) -> str | None:
        item = self.file_list.currentItem()
        if item is None:
            return None
        return item.data(Qt.UserRole)

    def _show_selected(self, view_mode: str) -> None:
        file_id = self._selected_file_id()
        if file_id is not None:
            self.on_show(file_id, view_mode)

    def _remove_selected(self) -> None:
        file_id = self._selected_file_id()
        if file_id is not None:
            self.on_remove(file_id)

    def refresh(self, view: RoomView, document_html: str) -> None:
        if view.shared_files != self._files:
            self._files = view.shared_files
            self.file_list.clear()
            for file_id, file_name in view.shared_files:
                item = QListWidgetItem(file_name, self.file_list)
                item.setData(Qt.UserRole, file_id)

        document = view.document
        if document is None:
            self.current_label.setText(NO_DOCUMENT_TEXT)
        else:
            name = document.file_name or document.file_id
            suffix = " (generating reviewer)" if document.generating else ""
            self.current_label.setText(f"Broadcasting {name} [{document.view_mode}]{suffix}")
        self.set_reviewer_button.setEnabled(document is not None)
        self.clear_button.setEnabled(document is not None)

        if document_html != self._last_html:
            self._last_html = document_html
            self.preview_view.setHtml(document_html)
