from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog

from quizroom.quiz.errors import (
    InvalidAnswerIndexError,
    OptionsDecodeError,
    QuizNotFoundError,
    RemoteOperationError,
    UnknownQuestionError,
)
from quizroom.quiz.ports import CatalogService, PersistenceService
from quizroom.quiz.scoring import score_answers
from quizroom.quiz.types import Attempt, Grade, Question, Quiz, SessionStatus, Subject

logger = structlog.get_logger("quizroom.quiz.session")


class QuizSession:
    """One student's attempt at one quiz, from question load to scored completion.

    Remote calls never raise to the caller: failures are stored in ``error``
    and the operation returns ``None`` (or an empty list). Instances are not
    safe for concurrent use; await each call before issuing the next.
    """

    def __init__(self, *, catalog: CatalogService, persistence: PersistenceService) -> None:
        self._catalog = catalog
        self._persistence = persistence

        self._quizzes: list[Quiz] = []
        self._current_quiz: Quiz | None = None
        self._current_questions: tuple[Question, ...] = ()
        self._current_attempt: Attempt | None = None
        self._current_question_index: int = 0
        self._selected_answer: int | None = None
        self._answers: dict[UUID, int] = {}
        self._is_loading: bool = False
        self._error: str | None = None

    @property
    def quizzes(self) -> list[Quiz]:
        return list(self._quizzes)

    @property
    def current_quiz(self) -> Quiz | None:
        return self._current_quiz

    @property
    def current_questions(self) -> tuple[Question, ...]:
        return self._current_questions

    @property
    def current_attempt(self) -> Attempt | None:
        return self._current_attempt

    @property
    def current_question_index(self) -> int:
        return self._current_question_index

    @property
    def selected_answer(self) -> int | None:
        return self._selected_answer

    @property
    def answers(self) -> dict[UUID, int]:
        return dict(self._answers)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def status(self) -> SessionStatus:
        if self._current_attempt is not None:
            if self._current_attempt.is_completed:
                return SessionStatus.COMPLETED
            return SessionStatus.IN_PROGRESS
        if self._current_quiz is not None:
            return SessionStatus.LOADED
        return SessionStatus.IDLE

    @property
    def current_question(self) -> Question | None:
        if not self._current_questions:
            return None
        return self._current_questions[self._current_question_index]

    @property
    def is_last_question(self) -> bool:
        return self._current_question_index >= len(self._current_questions) - 1

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    def clear_error(self) -> None:
        self._error = None

    def _record_error(self, event: str, exc: Exception, **fields: object) -> None:
        self._error = str(exc)
        logger.warning(event, error=self._error, **fields)

    async def fetch_quizzes(
        self,
        grade: Grade | None = None,
        subject: Subject | None = None,
    ) -> list[Quiz]:
        self._is_loading = True
        self._error = None
        try:
            quizzes = await self._catalog.list_quizzes(grade=grade, subject=subject)
        except RemoteOperationError as exc:
            self._record_error(
                "quiz_list_failed",
                exc,
                grade=grade.value if grade is not None else None,
                subject=subject.value if subject is not None else None,
            )
            return []
        finally:
            self._is_loading = False

        self._quizzes = list(quizzes)
        return self.quizzes

    async def load_quiz(self, quiz_id: UUID) -> Quiz | None:
        self._is_loading = True
        self._error = None
        try:
            quiz = await self._catalog.fetch_quiz_by_id(quiz_id)
            if quiz is None:
                raise QuizNotFoundError(f"quiz {quiz_id} not found")
            questions = await self._catalog.fetch_questions_by_quiz(quiz_id)
        except (RemoteOperationError, OptionsDecodeError) as exc:
            self._record_error("quiz_load_failed", exc, quiz_id=str(quiz_id))
            return None
        finally:
            self._is_loading = False

        self._current_quiz = quiz
        self._current_questions = tuple(sorted(questions, key=lambda question: question.order_index))
        logger.info(
            "quiz_loaded",
            quiz_id=str(quiz_id),
            questions=len(self._current_questions),
        )
        return quiz

    async def start_attempt(self, quiz_id: UUID, user_id: UUID) -> UUID | None:
        try:
            attempt = await self._persistence.create_attempt(
                user_id=user_id,
                quiz_id=quiz_id,
                total_questions=len(self._current_questions),
            )
        except RemoteOperationError as exc:
            self._record_error(
                "attempt_start_failed",
                exc,
                quiz_id=str(quiz_id),
                user_id=str(user_id),
            )
            return None

        self._current_attempt = attempt
        self._current_question_index = 0
        self._selected_answer = None
        self._answers = {}
        logger.info(
            "attempt_started",
            attempt_id=str(attempt.id),
            quiz_id=str(quiz_id),
            user_id=str(user_id),
            total_questions=attempt.total_questions,
        )
        return attempt.id

    def _find_question(self, question_id: UUID) -> Question | None:
        return next(
            (question for question in self._current_questions if question.id == question_id),
            None,
        )

    def submit_answer(self, question_id: UUID, option_index: int) -> None:
        question = self._find_question(question_id)
        if question is None:
            raise UnknownQuestionError(f"question {question_id} is not part of the loaded quiz")
        if not 0 <= option_index < len(question.options):
            raise InvalidAnswerIndexError(
                question_id=question_id,
                option_index=option_index,
                option_count=len(question.options),
            )

        self._answers[question_id] = option_index
        self._selected_answer = option_index

    def _move_to(self, index: int) -> None:
        self._current_question_index = index
        question = self._current_questions[index]
        self._selected_answer = self._answers.get(question.id)

    def next_question(self) -> None:
        if self._current_question_index < len(self._current_questions) - 1:
            self._move_to(self._current_question_index + 1)

    def previous_question(self) -> None:
        if self._current_question_index > 0:
            self._move_to(self._current_question_index - 1)

    def elapsed_seconds(self, now_utc: datetime | None = None) -> int | None:
        if self._current_attempt is None:
            return None
        now_utc = now_utc or datetime.now(timezone.utc)
        elapsed = (now_utc - self._current_attempt.started_at).total_seconds()
        return max(0, int(elapsed))

    def is_time_expired(self, now_utc: datetime | None = None) -> bool:
        if self._current_quiz is None:
            return False
        elapsed = self.elapsed_seconds(now_utc)
        if elapsed is None:
            return False
        return elapsed >= self._current_quiz.time_limit_minutes * 60

    async def complete_quiz(
        self,
        attempt_id: UUID,
        time_taken_seconds: int | None = None,
        *,
        now_utc: datetime | None = None,
    ) -> Attempt | None:
        completed_at = now_utc or datetime.now(timezone.utc)
        result = score_answers(self._current_questions, dict(self._answers))

        if (
            time_taken_seconds is None
            and self._current_attempt is not None
            and self._current_attempt.id == attempt_id
        ):
            time_taken_seconds = self.elapsed_seconds(completed_at)

        try:
            attempt = await self._persistence.complete_attempt(
                attempt_id=attempt_id,
                responses=result.responses,
                score=result.score,
                correct_answers=result.correct_answers,
                time_taken_seconds=time_taken_seconds,
                completed_at=completed_at,
            )
        except RemoteOperationError as exc:
            self._record_error("attempt_complete_failed", exc, attempt_id=str(attempt_id))
            return None

        self._current_attempt = attempt
        logger.info(
            "attempt_completed",
            attempt_id=str(attempt_id),
            score=result.score,
            max_score=result.max_score,
            correct_answers=result.correct_answers,
            total_questions=len(result.responses),
            time_taken_seconds=time_taken_seconds,
        )
        return attempt

    def reset_quiz(self) -> None:
        self._current_quiz = None
        self._current_questions = ()
        self._current_attempt = None
        self._current_question_index = 0
        self._selected_answer = None
        self._answers = {}
