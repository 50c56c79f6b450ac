"""quiz_authoring_cascades

Revision ID: 7e2b4c9d1f03
Revises: 3c1d8e5a7b20
Create Date: 2026-10-20 10:00:00.000000
"""
from collections.abc import Sequence

from alembic import op

revision: str = "7e2b4c9d1f03"
down_revision: str | None = "3c1d8e5a7b20"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.drop_constraint("quiz_attempts_quiz_id_fkey", "quiz_attempts", type_="foreignkey")
    op.create_foreign_key(
        "quiz_attempts_quiz_id_fkey",
        "quiz_attempts",
        "quizzes",
        ["quiz_id"],
        ["id"],
        ondelete="CASCADE",
    )

    op.drop_constraint("question_responses_question_id_fkey", "question_responses", type_="foreignkey")
    op.create_foreign_key(
        "question_responses_question_id_fkey",
        "question_responses",
        "questions",
        ["question_id"],
        ["id"],
        ondelete="CASCADE",
    )


def downgrade() -> None:
    op.drop_constraint("question_responses_question_id_fkey", "question_responses", type_="foreignkey")
    op.create_foreign_key(
        "question_responses_question_id_fkey",
        "question_responses",
        "questions",
        ["question_id"],
        ["id"],
    )

    op.drop_constraint("quiz_attempts_quiz_id_fkey", "quiz_attempts", type_="foreignkey")
    op.create_foreign_key(
        "quiz_attempts_quiz_id_fkey",
        "quiz_attempts",
        "quizzes",
        ["quiz_id"],
        ["id"],
    )
