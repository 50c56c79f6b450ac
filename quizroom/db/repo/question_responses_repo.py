from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from quizroom.db.models.question_responses import QuestionResponse
from quizroom.db.models.questions import Question


class QuestionResponsesRepo:
    @staticmethod
    async def upsert(
        session: AsyncSession,
        *,
        attempt_id: UUID,
        question_id: UUID,
        selected_answer: int | None,
        is_correct: bool,
        answered_at: datetime,
    ) -> QuestionResponse:
        stmt = (
            pg_insert(QuestionResponse)
            .values(
                id=uuid4(),
                attempt_id=attempt_id,
                question_id=question_id,
                selected_answer=selected_answer,
                is_correct=is_correct,
                answered_at=answered_at,
            )
            .on_conflict_do_update(
                constraint="uq_question_responses_attempt_question",
                set_={
                    "selected_answer": selected_answer,
                    "is_correct": is_correct,
                    "answered_at": answered_at,
                },
            )
            .returning(QuestionResponse)
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def list_for_attempt(session: AsyncSession, *, attempt_id: UUID) -> list[QuestionResponse]:
        stmt = (
            select(QuestionResponse)
            .join(Question, QuestionResponse.question_id == Question.id)
            .where(QuestionResponse.attempt_id == attempt_id)
            .order_by(Question.order_index.asc(), Question.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
