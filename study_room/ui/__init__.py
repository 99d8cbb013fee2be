"""Qt UI components for the host console."""

from .dialog_helpers import (
    ask_reviewer_text,
    confirm_close_room,
    confirm_replace_quiz,
    show_error,
    show_info,
    show_warning,
)
from .host_main_window import HostMainWindow

__all__ = [
    "HostMainWindow",
    "ask_reviewer_text",
    "confirm_close_room",
    "confirm_replace_quiz",
    "show_error",
    "show_info",
    "show_warning",
]
