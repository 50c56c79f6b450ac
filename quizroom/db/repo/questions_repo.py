from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizroom.db.models.questions import Question


class QuestionsRepo:
    @staticmethod
    async def list_for_quiz(session: AsyncSession, *, quiz_id: UUID) -> list[Question]:
        stmt = (
            select(Question)
            .where(Question.quiz_id == quiz_id)
            .order_by(Question.order_index.asc(), Question.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def replace_for_quiz(
        session: AsyncSession,
        *,
        quiz_id: UUID,
        rows: Sequence[Mapping[str, Any]],
        now_utc: datetime,
    ) -> list[Question]:
        """Make the quiz hold exactly ``rows``, in order.

        Existing question rows are reused by position so their ids stay
        stable; surplus rows are deleted along with their responses.
        """
        existing = await QuestionsRepo.list_for_quiz(session, quiz_id=quiz_id)
        records: list[Question] = []
        for order_index, values in enumerate(rows):
            if order_index < len(existing):
                record = existing[order_index]
            else:
                record = Question(id=uuid4(), quiz_id=quiz_id, created_at=now_utc)
                session.add(record)
            for column, value in values.items():
                setattr(record, column, value)
            record.order_index = order_index
            records.append(record)

        for surplus in existing[len(rows) :]:
            await session.delete(surplus)
        await session.flush()
        return records
