from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import SQLAlchemyError

from quizroom.db.models.questions import Question as QuestionRecord
from quizroom.db.models.quizzes import Quiz as QuizRecord
from quizroom.db.repo.questions_repo import QuestionsRepo
from quizroom.db.repo.quizzes_repo import QuizzesRepo
from quizroom.quiz.authoring import DEFAULT_QUESTION_POINTS, question_points, validate_quiz_draft
from quizroom.quiz.errors import QuizNotFoundError, RemoteOperationError
from quizroom.quiz.options import normalize_options
from quizroom.quiz.types import Difficulty, Grade, Question, Quiz, QuizDraft, Subject

logger = structlog.get_logger("quizroom.quiz.catalog")

DEFAULT_TIME_LIMIT_MINUTES = 10


class _SessionFactory(Protocol):
    def begin(self): ...


def to_quiz(record: QuizRecord, *, default_time_limit_minutes: int = DEFAULT_TIME_LIMIT_MINUTES) -> Quiz:
    return Quiz(
        id=record.id,
        title=record.title,
        description=record.description,
        subject=Subject(record.subject),
        grade=Grade(record.grade),
        time_limit_minutes=record.time_limit_minutes or default_time_limit_minutes,
        is_active=bool(record.is_active),
        created_at=record.created_at,
    )


def to_question(record: QuestionRecord) -> Question:
    return Question(
        id=record.id,
        quiz_id=record.quiz_id,
        text=record.question_text,
        image_url=record.question_image_url,
        options=normalize_options(record.options),
        correct_answer=record.correct_answer,
        points=record.points if record.points is not None else DEFAULT_QUESTION_POINTS,
        order_index=record.order_index,
        difficulty=Difficulty(record.difficulty) if record.difficulty else None,
    )


def question_rows(draft: QuizDraft) -> list[dict[str, Any]]:
    return [
        {
            "question_text": question.text.strip(),
            "question_image_url": question.image_url,
            "options": list(question.options),
            "correct_answer": question.correct_answer,
            "points": question_points(question),
            "difficulty": question.difficulty.value if question.difficulty is not None else None,
        }
        for question in draft.questions
    ]


class SqlCatalogService:
    def __init__(
        self,
        *,
        session_factory: _SessionFactory,
        default_time_limit_minutes: int = DEFAULT_TIME_LIMIT_MINUTES,
    ) -> None:
        self._session_factory = session_factory
        self._default_time_limit_minutes = default_time_limit_minutes

    async def fetch_quiz_by_id(self, quiz_id: UUID) -> Quiz | None:
        try:
            async with self._session_factory.begin() as session:
                record = await QuizzesRepo.get_by_id(session, quiz_id)
                if record is None:
                    return None
                return to_quiz(record, default_time_limit_minutes=self._default_time_limit_minutes)
        except SQLAlchemyError as exc:
            logger.warning("catalog_fetch_quiz_failed", quiz_id=str(quiz_id), error=str(exc))
            raise RemoteOperationError(f"failed to fetch quiz {quiz_id}") from exc

    async def fetch_questions_by_quiz(self, quiz_id: UUID) -> list[Question]:
        try:
            async with self._session_factory.begin() as session:
                records = await QuestionsRepo.list_for_quiz(session, quiz_id=quiz_id)
                return [to_question(record) for record in records]
        except SQLAlchemyError as exc:
            logger.warning("catalog_fetch_questions_failed", quiz_id=str(quiz_id), error=str(exc))
            raise RemoteOperationError(f"failed to fetch questions for quiz {quiz_id}") from exc

    async def list_quizzes(
        self,
        *,
        grade: Grade | None = None,
        subject: Subject | None = None,
    ) -> list[Quiz]:
        try:
            async with self._session_factory.begin() as session:
                records = await QuizzesRepo.list_active(
                    session,
                    grade=grade.value if grade is not None else None,
                    subject=subject.value if subject is not None else None,
                )
                return [
                    to_quiz(record, default_time_limit_minutes=self._default_time_limit_minutes)
                    for record in records
                ]
        except SQLAlchemyError as exc:
            logger.warning("catalog_list_quizzes_failed", error=str(exc))
            raise RemoteOperationError("failed to list quizzes") from exc

    def _apply_draft(self, record: QuizRecord, draft: QuizDraft, *, now_utc: datetime) -> None:
        record.title = draft.title.strip()
        record.description = draft.description
        record.subject = draft.subject.value
        record.grade = draft.grade.value
        record.time_limit_minutes = draft.time_limit_minutes or self._default_time_limit_minutes
        record.is_active = draft.is_active
        record.updated_at = now_utc

    async def create_quiz(self, draft: QuizDraft, *, created_by: UUID | None = None) -> Quiz:
        validate_quiz_draft(draft)
        now_utc = datetime.now(timezone.utc)
        try:
            async with self._session_factory.begin() as session:
                record = QuizRecord(id=uuid4(), created_by=created_by, created_at=now_utc)
                self._apply_draft(record, draft, now_utc=now_utc)
                await QuizzesRepo.create(session, quiz=record)
                await QuestionsRepo.replace_for_quiz(
                    session,
                    quiz_id=record.id,
                    rows=question_rows(draft),
                    now_utc=now_utc,
                )
                quiz = to_quiz(record, default_time_limit_minutes=self._default_time_limit_minutes)
        except SQLAlchemyError as exc:
            logger.warning("catalog_create_quiz_failed", title=draft.title, error=str(exc))
            raise RemoteOperationError("failed to create quiz") from exc

        logger.info("quiz_created", quiz_id=str(quiz.id), questions=len(draft.questions))
        return quiz

    async def update_quiz(self, quiz_id: UUID, draft: QuizDraft) -> Quiz:
        """Overwrite quiz metadata and replace its question list.

        Questions take their order from their position in the draft.
        """
        validate_quiz_draft(draft)
        now_utc = datetime.now(timezone.utc)
        try:
            async with self._session_factory.begin() as session:
                record = await QuizzesRepo.get_by_id_for_update(session, quiz_id)
                if record is None:
                    raise QuizNotFoundError(f"quiz {quiz_id} not found")
                self._apply_draft(record, draft, now_utc=now_utc)
                await QuestionsRepo.replace_for_quiz(
                    session,
                    quiz_id=quiz_id,
                    rows=question_rows(draft),
                    now_utc=now_utc,
                )
                quiz = to_quiz(record, default_time_limit_minutes=self._default_time_limit_minutes)
        except SQLAlchemyError as exc:
            logger.warning("catalog_update_quiz_failed", quiz_id=str(quiz_id), error=str(exc))
            raise RemoteOperationError(f"failed to update quiz {quiz_id}") from exc

        logger.info("quiz_updated", quiz_id=str(quiz_id), questions=len(draft.questions))
        return quiz

    async def delete_quiz(self, quiz_id: UUID) -> bool:
        try:
            async with self._session_factory.begin() as session:
                deleted = await QuizzesRepo.delete_by_id(session, quiz_id)
        except SQLAlchemyError as exc:
            logger.warning("catalog_delete_quiz_failed", quiz_id=str(quiz_id), error=str(exc))
            raise RemoteOperationError(f"failed to delete quiz {quiz_id}") from exc

        if deleted:
            logger.info("quiz_deleted", quiz_id=str(quiz_id))
        return deleted
