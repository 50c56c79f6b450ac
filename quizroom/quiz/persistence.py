from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import SQLAlchemyError

from quizroom.db.models.question_responses import QuestionResponse as QuestionResponseRecord
from quizroom.db.models.quiz_attempts import QuizAttempt as QuizAttemptRecord
from quizroom.db.repo.question_responses_repo import QuestionResponsesRepo
from quizroom.db.repo.quiz_attempts_repo import QuizAttemptsRepo
from quizroom.quiz.errors import AttemptNotFoundError, RemoteOperationError
from quizroom.quiz.types import Attempt, Response, ResponseDraft, Subject

logger = structlog.get_logger("quizroom.quiz.persistence")


class _SessionFactory(Protocol):
    def begin(self): ...


def to_attempt(record: QuizAttemptRecord) -> Attempt:
    return Attempt(
        id=record.id,
        user_id=record.user_id,
        quiz_id=record.quiz_id,
        score=record.score,
        total_questions=record.total_questions,
        correct_answers=record.correct_answers,
        time_taken_seconds=record.time_taken_seconds,
        started_at=record.started_at,
        completed_at=record.completed_at,
    )


def to_response(record: QuestionResponseRecord) -> Response:
    return Response(
        id=record.id,
        attempt_id=record.attempt_id,
        question_id=record.question_id,
        selected_answer=record.selected_answer,
        is_correct=record.is_correct,
        answered_at=record.answered_at,
    )


class SqlPersistenceService:
    def __init__(self, *, session_factory: _SessionFactory) -> None:
        self._session_factory = session_factory

    async def create_attempt(
        self,
        *,
        user_id: UUID,
        quiz_id: UUID,
        total_questions: int,
    ) -> Attempt:
        try:
            async with self._session_factory.begin() as session:
                record = await QuizAttemptsRepo.create(
                    session,
                    attempt=QuizAttemptRecord(
                        id=uuid4(),
                        user_id=user_id,
                        quiz_id=quiz_id,
                        score=0,
                        total_questions=total_questions,
                        correct_answers=0,
                        started_at=datetime.now(timezone.utc),
                    ),
                )
                return to_attempt(record)
        except SQLAlchemyError as exc:
            logger.warning(
                "attempt_create_failed",
                user_id=str(user_id),
                quiz_id=str(quiz_id),
                error=str(exc),
            )
            raise RemoteOperationError(f"failed to create attempt for quiz {quiz_id}") from exc

    async def create_response(
        self,
        *,
        attempt_id: UUID,
        question_id: UUID,
        selected_answer: int | None,
        is_correct: bool,
    ) -> Response:
        try:
            async with self._session_factory.begin() as session:
                record = await QuestionResponsesRepo.upsert(
                    session,
                    attempt_id=attempt_id,
                    question_id=question_id,
                    selected_answer=selected_answer,
                    is_correct=is_correct,
                    answered_at=datetime.now(timezone.utc),
                )
                return to_response(record)
        except SQLAlchemyError as exc:
            logger.warning(
                "response_create_failed",
                attempt_id=str(attempt_id),
                question_id=str(question_id),
                error=str(exc),
            )
            raise RemoteOperationError(f"failed to store response for question {question_id}") from exc

    async def update_attempt(
        self,
        *,
        attempt_id: UUID,
        score: int,
        correct_answers: int,
        time_taken_seconds: int | None,
        completed_at: datetime,
    ) -> Attempt:
        try:
            async with self._session_factory.begin() as session:
                record = await QuizAttemptsRepo.get_by_id_for_update(session, attempt_id)
                if record is None:
                    raise AttemptNotFoundError(f"attempt {attempt_id} not found")
                record.score = score
                record.correct_answers = correct_answers
                record.time_taken_seconds = time_taken_seconds
                record.completed_at = completed_at
                await session.flush()
                return to_attempt(record)
        except SQLAlchemyError as exc:
            logger.warning("attempt_update_failed", attempt_id=str(attempt_id), error=str(exc))
            raise RemoteOperationError(f"failed to update attempt {attempt_id}") from exc

    async def complete_attempt(
        self,
        *,
        attempt_id: UUID,
        responses: Sequence[ResponseDraft],
        score: int,
        correct_answers: int,
        time_taken_seconds: int | None,
        completed_at: datetime,
    ) -> Attempt:
        """Write all responses and the final attempt totals in one transaction.

        Responses are upserted on (attempt_id, question_id), so replaying a
        completion for the same attempt overwrites instead of duplicating.
        """
        try:
            async with self._session_factory.begin() as session:
                record = await QuizAttemptsRepo.get_by_id_for_update(session, attempt_id)
                if record is None:
                    raise AttemptNotFoundError(f"attempt {attempt_id} not found")
                for response in responses:
                    await QuestionResponsesRepo.upsert(
                        session,
                        attempt_id=attempt_id,
                        question_id=response.question_id,
                        selected_answer=response.selected_answer,
                        is_correct=response.is_correct,
                        answered_at=completed_at,
                    )
                record.score = score
                record.correct_answers = correct_answers
                record.time_taken_seconds = time_taken_seconds
                record.completed_at = completed_at
                await session.flush()
                return to_attempt(record)
        except SQLAlchemyError as exc:
            logger.warning(
                "attempt_complete_failed",
                attempt_id=str(attempt_id),
                responses=len(responses),
                error=str(exc),
            )
            raise RemoteOperationError(f"failed to complete attempt {attempt_id}") from exc

    async def list_completed_attempts(self, *, user_id: UUID) -> list[tuple[Attempt, Subject]]:
        try:
            async with self._session_factory.begin() as session:
                rows = await QuizAttemptsRepo.list_completed_for_user(session, user_id=user_id)
                return [(to_attempt(record), Subject(subject)) for record, subject in rows]
        except SQLAlchemyError as exc:
            logger.warning("attempt_history_failed", user_id=str(user_id), error=str(exc))
            raise RemoteOperationError(f"failed to list attempts for user {user_id}") from exc

    async def list_all_completed_attempts(self) -> list[tuple[Attempt, Subject]]:
        try:
            async with self._session_factory.begin() as session:
                rows = await QuizAttemptsRepo.list_completed(session)
                return [(to_attempt(record), Subject(subject)) for record, subject in rows]
        except SQLAlchemyError as exc:
            logger.warning("attempt_class_history_failed", error=str(exc))
            raise RemoteOperationError("failed to list completed attempts") from exc

    async def list_responses(self, *, attempt_id: UUID) -> list[Response]:
        try:
            async with self._session_factory.begin() as session:
                records = await QuestionResponsesRepo.list_for_attempt(session, attempt_id=attempt_id)
                return [to_response(record) for record in records]
        except SQLAlchemyError as exc:
            logger.warning("attempt_responses_failed", attempt_id=str(attempt_id), error=str(exc))
            raise RemoteOperationError(f"failed to list responses for attempt {attempt_id}") from exc
