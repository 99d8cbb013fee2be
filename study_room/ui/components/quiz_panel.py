"""Component for running a live quiz from the host console."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from study_room.client.sync_adapter import QuizView
from study_room.constants.ui_constants import (
    END_QUIZ_BUTTON,
    IMPORT_QUIZ_BUTTON,
    NEXT_QUESTION_BUTTON,
    NO_QUIZ_LOADED_MESSAGE,
    START_QUIZ_BUTTON,
)


class QuizPanel(QGroupBox):
    """Import questions, drive the quiz forward and watch the leaderboard."""

    def __init__(
        self,
        on_import: Callable[[], None],
        on_start: Callable[[], None],
        on_next: Callable[[], None],
        on_end: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__("Quiz", parent)
        self._loaded_count = 0

        layout = QVBoxLayout()
        self.setLayout(layout)

        self.source_label = QLabel(NO_QUIZ_LOADED_MESSAGE, self)
        self.source_label.setWordWrap(True)
        layout.addWidget(self.source_label)

        button_row = QHBoxLayout()
        self.import_button = QPushButton(IMPORT_QUIZ_BUTTON, self)
        self.import_button.clicked.connect(on_import)
        button_row.addWidget(self.import_button)

        self.start_button = QPushButton(START_QUIZ_BUTTON, self)
        self.start_button.clicked.connect(on_start)
        button_row.addWidget(self.start_button)

        self.next_button = QPushButton(NEXT_QUESTION_BUTTON, self)
        self.next_button.clicked.connect(on_next)
        button_row.addWidget(self.next_button)

        self.end_button = QPushButton(END_QUIZ_BUTTON, self)
        self.end_button.clicked.connect(on_end)
        button_row.addWidget(self.end_button)
        layout.addLayout(button_row)

        self.progress_label = QLabel("", self)
        layout.addWidget(self.progress_label)

        self.question_label = QLabel("", self)
        self.question_label.setWordWrap(True)
        layout.addWidget(self.question_label)

        layout.addWidget(QLabel("Leaderboard", self))
        self.leaderboard_list = QListWidget(self)
        layout.addWidget(self.leaderboard_list, stretch=1)

    def set_loaded_questions(self, source_name: str, count: int) -> None:
        self._loaded_count = count
        self.source_label.setText(f"Loaded {count} question(s) from {source_name}.")

    def refresh(self, quiz: QuizView) -> None:
        in_progress = quiz.status == "in-progress"
        self.import_button.setEnabled(not in_progress)
        self.start_button.setEnabled(not in_progress and self._loaded_count > 0)
        self.next_button.setEnabled(
            in_progress and quiz.current_question_index < quiz.total_questions - 1
        )
        self.end_button.setEnabled(in_progress)

        if quiz.total_questions == 0:
            self.progress_label.setText("")
            self.question_label.setText("")
        else:
            state = "finished" if quiz.status == "completed" else f"{quiz.answered_count} answered"
            self.progress_label.setText(
                f"Question {quiz.current_question_index + 1} of {quiz.total_questions} ({state})"
            )
            lettered = [f"{chr(ord('A') + i)}. {text}" for i, text in enumerate(quiz.options)]
            self.question_label.setText("\n".join([quiz.question or "", *lettered]))

        self.leaderboard_list.clear()
        for rank, (username, score) in enumerate(quiz.leaderboard, start=1):
            self.leaderboard_list.addItem(f"{rank}. {username}: {score}")
