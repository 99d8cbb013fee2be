"""Service driving the live quiz embedded in a room."""

from __future__ import annotations

from datetime import datetime

from study_room.constants.room_constants import MIN_QUESTION_OPTIONS
from study_room.core.errors import (
    AlreadyActive,
    AtLastQuestion,
    DuplicateAnswer,
    InvalidRequest,
    QuizNotActive,
    StaleQuestion,
)
from study_room.core.models import (
    LeaderboardRow,
    Participant,
    ParticipantAnswers,
    Quiz,
    QuizAnswer,
    QuizQuestion,
    QuizStatus,
    Room,
)


class QuizOrchestrator:
    """State machine for question sequencing, answer recording and scoring.

    Inactive -> in-progress -> completed; a new quiz replaces a completed one.
    The question index only moves through ``next_question``.
    """

    def start(
        self,
        room: Room,
        questions: list[QuizQuestion],
        subject: str | None,
        test_type: str | None,
        now: datetime,
    ) -> Quiz:
        if self.is_in_progress(room.quiz):
            raise AlreadyActive()
        prepared = [self._prepare_question(q, idx) for idx, q in enumerate(questions)]
        if not prepared:
            raise InvalidRequest("Quiz must contain at least one question.")
        room.quiz = Quiz(
            is_active=True,
            status=QuizStatus.IN_PROGRESS,
            questions=prepared,
            current_question_index=0,
            participant_answers=[],
            subject=subject,
            test_type=test_type,
            started_at=now,
        )
        return room.quiz

    def submit_answer(
        self,
        room: Room,
        participant: Participant,
        question_index: int,
        selected_answer: int,
        time_taken: float,
    ) -> tuple[QuizAnswer, ParticipantAnswers]:
        quiz = self.require_in_progress(room.quiz)
        if question_index != quiz.current_question_index:
            raise StaleQuestion(
                f"Question {question_index} is closed; current question is {quiz.current_question_index}"
            )
        entry = self._entry_for(quiz, participant.user_id)
        if entry is not None and entry.answer_for(question_index) is not None:
            raise DuplicateAnswer()

        question = quiz.questions[question_index]
        answer = QuizAnswer(
            question_index=question_index,
            selected_answer=selected_answer,
            time_taken=max(0.0, float(time_taken)),
            is_correct=selected_answer == question.correct_answer,
        )
        if entry is None:
            entry = ParticipantAnswers(user_id=participant.user_id, username=participant.username)
            quiz.participant_answers.append(entry)
        entry.answers.append(answer)
        if answer.is_correct:
            entry.score += 1
        return answer, entry

    def next_question(self, room: Room) -> int:
        quiz = self.require_in_progress(room.quiz)
        if quiz.current_question_index >= len(quiz.questions) - 1:
            raise AtLastQuestion()
        quiz.current_question_index += 1
        return quiz.current_question_index

    def end(self, room: Room, now: datetime) -> Quiz:
        quiz = self.require_in_progress(room.quiz)
        quiz.status = QuizStatus.COMPLETED
        quiz.is_active = False
        quiz.completed_at = now
        return quiz

    def leaderboard(self, quiz: Quiz, participants: list[Participant]) -> list[LeaderboardRow]:
        """Rank by score descending; ties keep room join order."""
        join_order = {p.user_id: idx for idx, p in enumerate(participants)}
        fallback = len(join_order)
        ordered = sorted(
            enumerate(quiz.participant_answers),
            key=lambda item: (
                -item[1].score,
                join_order.get(item[1].user_id, fallback),
                item[0],
            ),
        )
        return [
            LeaderboardRow(
                rank=rank,
                user_id=entry.user_id,
                username=entry.username,
                score=entry.score,
                answered=len(entry.answers),
            )
            for rank, (_, entry) in enumerate(ordered, start=1)
        ]

    @staticmethod
    def is_in_progress(quiz: Quiz) -> bool:
        return quiz.is_active and quiz.status is QuizStatus.IN_PROGRESS

    def require_in_progress(self, quiz: Quiz) -> Quiz:
        if not self.is_in_progress(quiz):
            raise QuizNotActive()
        return quiz

    @staticmethod
    def _entry_for(quiz: Quiz, user_id: str) -> ParticipantAnswers | None:
        return next((pa for pa in quiz.participant_answers if pa.user_id == user_id), None)

    @staticmethod
    def _prepare_question(question: QuizQuestion, index: int) -> QuizQuestion:
        """Validate and normalize a question before the quiz freezes it."""
        text = question.question.strip()
        if not text:
            raise InvalidRequest(f"Question {index + 1} has no text.")
        options = [option.strip() for option in question.options]
        if len(options) < MIN_QUESTION_OPTIONS:
            raise InvalidRequest(f"Question {index + 1} needs at least {MIN_QUESTION_OPTIONS} options.")
        if any(not option for option in options):
            raise InvalidRequest(f"Question {index + 1} has an empty option.")
        if not 0 <= question.correct_answer < len(options):
            raise InvalidRequest(f"Question {index + 1} has an out-of-range correct answer.")
        return QuizQuestion(
            question=text,
            options=options,
            correct_answer=question.correct_answer,
            explanation=question.explanation.strip(),
        )
