"""Helper functions for common dialog patterns in the host console."""

from __future__ import annotations

from PySide6.QtWidgets import QInputDialog, QMessageBox, QWidget


def confirm_close_room(parent: QWidget) -> bool:
    """Ask before closing the room for everyone.

    Returns:
        True if the host confirmed, False otherwise
    """
    reply = QMessageBox.question(
        parent,
        "Close Room",
        "Closing the console ends the room for every participant. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def confirm_replace_quiz(parent: QWidget) -> bool:
    """Show confirmation dialog for replacing imported questions."""
    reply = QMessageBox.question(
        parent,
        "Confirm Import",
        "Importing will replace the questions already loaded. Continue?",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def ask_reviewer_text(parent: QWidget) -> tuple[str, list[str]] | None:
    """Prompt for reviewer notes; key points are the lines starting with '-'.

    Returns:
        (text, key_points), or None if cancelled or empty
    """
    raw, accepted = QInputDialog.getMultiLineText(
        parent,
        "Reviewer Notes",
        "Reviewer text (lines starting with '-' become key points):",
    )
    if not accepted or not raw.strip():
        return None
    text_lines: list[str] = []
    key_points: list[str] = []
    for line in raw.splitlines():
        stripped = line.strip()
        if stripped.startswith("-"):
            key_points.append(stripped.lstrip("-").strip())
        else:
            text_lines.append(line)
    text = "\n".join(text_lines).strip() or "\n".join(key_points)
    return text, key_points


def show_error(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.critical(parent, title, message)


def show_info(parent: QWidget, title: str, message: str) -> None:
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    msg_box.exec()


def show_warning(parent: QWidget, title: str, message: str) -> None:
    QMessageBox.warning(parent, title, message)
