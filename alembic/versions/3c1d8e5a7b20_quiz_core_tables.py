"""quiz_core_tables

Revision ID: 3c1d8e5a7b20
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "3c1d8e5a7b20"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "quizzes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("subject", sa.String(16), nullable=False),
        sa.Column("grade", sa.String(2), nullable=False),
        sa.Column("time_limit_minutes", sa.Integer(), nullable=True, server_default=sa.text("10")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("subject IN ('math','science','logic')", name="ck_quizzes_subject"),
        sa.CheckConstraint("grade IN ('4','5','6')", name="ck_quizzes_grade"),
        sa.CheckConstraint("time_limit_minutes IS NULL OR time_limit_minutes > 0", name="ck_quizzes_time_limit_positive"),
    )
    op.create_index("idx_quizzes_active_created", "quizzes", ["is_active", "created_at"])
    op.create_index("idx_quizzes_grade_subject", "quizzes", ["grade", "subject"])

    op.create_table(
        "questions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("quiz_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_image_url", sa.Text(), nullable=True),
        sa.Column(
            "options",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("correct_answer", sa.SmallInteger(), nullable=False),
        sa.Column("points", sa.Integer(), nullable=True, server_default=sa.text("1")),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("difficulty", sa.String(8), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("correct_answer >= 0", name="ck_questions_correct_answer_non_negative"),
        sa.CheckConstraint("points IS NULL OR points >= 0", name="ck_questions_points_non_negative"),
        sa.CheckConstraint(
            "difficulty IS NULL OR difficulty IN ('easy','medium','hard')",
            name="ck_questions_difficulty",
        ),
        sa.ForeignKeyConstraint(["quiz_id"], ["quizzes.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_questions_quiz_order", "questions", ["quiz_id", "order_index"])

    op.create_table(
        "quiz_attempts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("quiz_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("correct_answers", sa.Integer(), nullable=False),
        sa.Column("time_taken_seconds", sa.Integer(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("score >= 0", name="ck_quiz_attempts_score_non_negative"),
        sa.CheckConstraint("total_questions >= 0", name="ck_quiz_attempts_total_non_negative"),
        sa.CheckConstraint(
            "correct_answers >= 0 AND correct_answers <= total_questions",
            name="ck_quiz_attempts_correct_range",
        ),
        sa.CheckConstraint(
            "time_taken_seconds IS NULL OR time_taken_seconds >= 0",
            name="ck_quiz_attempts_time_taken_non_negative",
        ),
        sa.ForeignKeyConstraint(["quiz_id"], ["quizzes.id"]),
    )
    op.create_index("idx_attempts_user_started", "quiz_attempts", ["user_id", "started_at"])
    op.create_index("idx_attempts_quiz", "quiz_attempts", ["quiz_id"])
    op.create_index("idx_attempts_user_completed", "quiz_attempts", ["user_id", "completed_at"])

    op.create_table(
        "question_responses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("attempt_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("question_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("selected_answer", sa.SmallInteger(), nullable=True),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "selected_answer IS NULL OR selected_answer >= 0",
            name="ck_question_responses_selected_non_negative",
        ),
        sa.CheckConstraint(
            "selected_answer IS NOT NULL OR is_correct = false",
            name="ck_question_responses_unanswered_incorrect",
        ),
        sa.ForeignKeyConstraint(["attempt_id"], ["quiz_attempts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["question_id"], ["questions.id"]),
        sa.UniqueConstraint("attempt_id", "question_id", name="uq_question_responses_attempt_question"),
    )
    op.create_index("idx_responses_question", "question_responses", ["question_id"])


def downgrade() -> None:
    op.drop_index("idx_responses_question", table_name="question_responses")
    op.drop_table("question_responses")

    op.drop_index("idx_attempts_user_completed", table_name="quiz_attempts")
    op.drop_index("idx_attempts_quiz", table_name="quiz_attempts")
    op.drop_index("idx_attempts_user_started", table_name="quiz_attempts")
    op.drop_table("quiz_attempts")

    op.drop_index("idx_questions_quiz_order", table_name="questions")
    op.drop_table("questions")

    op.drop_index("idx_quizzes_grade_subject", table_name="quizzes")
    op.drop_index("idx_quizzes_active_created", table_name="quizzes")
    op.drop_table("quizzes")
