"""Request payload schemas for the room API (camelCase on the wire)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from study_room.core.models import QuizQuestion


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CallerPayload(CamelModel):
    """Every mutation names its caller; authorization is checked per request."""

    user_id: str = Field(min_length=1)


class CreateRoomPayload(CallerPayload):
    username: str = Field(min_length=1)
    room_name: str | None = None


class JoinPayload(CallerPayload):
    username: str = Field(min_length=1)


class StartSessionPayload(CallerPayload):
    duration: int | None = Field(default=None, gt=0)


class TimerPayload(CallerPayload):
    action: Literal["start", "pause", "resume", "reset"]
    duration: int | None = Field(default=None, gt=0)


class ShareFilePayload(CallerPayload):
    file_id: str = Field(min_length=1)
    file_name: str = Field(min_length=1)
    file_type: Literal["docx", "txt", "md"]
    subject: str
    file_content: str


class SetDocumentPayload(CallerPayload):
    file_id: str = Field(min_length=1)
    view_mode: Literal["raw", "reviewer"] = "raw"


class ReviewerPayload(CallerPayload):
    text: str = Field(min_length=1)
    key_points: list[str] = Field(default_factory=list)


class ScrollPayload(CallerPayload):
    scroll_position: int = Field(ge=0)


class NotePayload(CallerPayload):
    note: str = Field(min_length=1)
    position: int = 0


class ChatPayload(CallerPayload):
    message: str = Field(min_length=1)


class QuestionPayload(CamelModel):
    question: str
    options: list[str]
    correct_answer: int
    explanation: str = ""

    def to_model(self) -> QuizQuestion:
        return QuizQuestion(
            question=self.question,
            options=list(self.options),
            correct_answer=self.correct_answer,
            explanation=self.explanation,
        )


class StartQuizPayload(CallerPayload):
    questions: list[QuestionPayload] = Field(min_length=1)
    subject: str | None = None
    test_type: str | None = None


class AnswerPayload(CallerPayload):
    question_index: int = Field(ge=0)
    selected_answer: int
    time_taken: float = 0.0
