from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, SmallInteger, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from quizroom.db.models.base import Base


class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("correct_answer >= 0", name="ck_questions_correct_answer_non_negative"),
        CheckConstraint("points IS NULL OR points >= 0", name="ck_questions_points_non_negative"),
        CheckConstraint(
            "difficulty IS NULL OR difficulty IN ('easy','medium','hard')",
            name="ck_questions_difficulty",
        ),
        Index("idx_questions_quiz_order", "quiz_id", "order_index"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    quiz_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Older rows hold a JSON-encoded string instead of a native array.
    options: Mapped[Any] = mapped_column(JSONB, nullable=False, server_default=text("'[]'::jsonb"))
    correct_answer: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    points: Mapped[int | None] = mapped_column(Integer, nullable=True, server_default=text("1"))
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    difficulty: Mapped[str | None] = mapped_column(String(8), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
