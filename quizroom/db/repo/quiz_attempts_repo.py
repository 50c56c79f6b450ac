from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizroom.db.models.quiz_attempts import QuizAttempt
from quizroom.db.models.quizzes import Quiz


class QuizAttemptsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, attempt: QuizAttempt) -> QuizAttempt:
        session.add(attempt)
        await session.flush()
        return attempt

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, attempt_id: UUID) -> QuizAttempt | None:
        stmt = select(QuizAttempt).where(QuizAttempt.id == attempt_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_completed_for_user(
        session: AsyncSession,
        *,
        user_id: UUID,
    ) -> list[tuple[QuizAttempt, str]]:
        stmt = (
            select(QuizAttempt, Quiz.subject)
            .join(Quiz, QuizAttempt.quiz_id == Quiz.id)
            .where(
                QuizAttempt.user_id == user_id,
                QuizAttempt.completed_at.is_not(None),
            )
            .order_by(QuizAttempt.completed_at.desc())
        )
        result = await session.execute(stmt)
        return [(attempt, subject) for attempt, subject in result.all()]

    @staticmethod
    async def list_completed(session: AsyncSession) -> list[tuple[QuizAttempt, str]]:
        stmt = (
            select(QuizAttempt, Quiz.subject)
            .join(Quiz, QuizAttempt.quiz_id == Quiz.id)
            .where(QuizAttempt.completed_at.is_not(None))
            .order_by(QuizAttempt.completed_at.asc())
        )
        result = await session.execute(stmt)
        return [(attempt, subject) for attempt, subject in result.all()]
