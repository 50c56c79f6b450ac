from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from quizroom.db.models.base import Base


class Quiz(Base):
    __tablename__ = "quizzes"
    __table_args__ = (
        CheckConstraint(
            "subject IN ('math','science','logic')",
            name="ck_quizzes_subject",
        ),
        CheckConstraint("grade IN ('4','5','6')", name="ck_quizzes_grade"),
        CheckConstraint("time_limit_minutes IS NULL OR time_limit_minutes > 0", name="ck_quizzes_time_limit_positive"),
        Index("idx_quizzes_active_created", "is_active", "created_at"),
        Index("idx_quizzes_grade_subject", "grade", "subject"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    subject: Mapped[str] = mapped_column(String(16), nullable=False)
    grade: Mapped[str] = mapped_column(String(2), nullable=False)
    time_limit_minutes: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        server_default=text("10"),
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    created_by: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
