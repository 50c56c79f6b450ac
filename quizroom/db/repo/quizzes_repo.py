from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from quizroom.db.models.quizzes import Quiz


class QuizzesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, quiz_id: UUID) -> Quiz | None:
        return await session.get(Quiz, quiz_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, quiz_id: UUID) -> Quiz | None:
        stmt = select(Quiz).where(Quiz.id == quiz_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_active(
        session: AsyncSession,
        *,
        grade: str | None = None,
        subject: str | None = None,
    ) -> list[Quiz]:
        stmt = select(Quiz).where(Quiz.is_active.is_(True)).order_by(Quiz.created_at.desc())
        if grade:
            stmt = stmt.where(Quiz.grade == grade)
        if subject:
            stmt = stmt.where(Quiz.subject == subject)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, quiz: Quiz) -> Quiz:
        session.add(quiz)
        await session.flush()
        return quiz

    @staticmethod
    async def delete_by_id(session: AsyncSession, quiz_id: UUID) -> bool:
        result = await session.execute(delete(Quiz).where(Quiz.id == quiz_id))
        return bool(result.rowcount)
