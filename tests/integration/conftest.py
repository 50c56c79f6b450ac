from __future__ import annotations

import pytest
from sqlalchemy import text

from quizroom.core.integration_db_safety import assess_integration_db_safety
from quizroom.db import models  # noqa: F401
from quizroom.db.models.base import Base
from quizroom.db.session import engine

TRUNCATE_TABLES = (
    "question_responses",
    "quiz_attempts",
    "questions",
    "quizzes",
)

TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(TRUNCATE_TABLES)} RESTART IDENTITY CASCADE"


@pytest.fixture(autouse=True)
def guard_integration_db_target() -> None:
    result = assess_integration_db_safety(str(engine.url))
    if not result.is_safe:
        pytest.skip(f"Refusing destructive integration setup: {result.reason}")


@pytest.fixture(autouse=True)
async def cleanup_db(guard_integration_db_target) -> None:  # noqa: ANN001
    # Dispose pooled connections between tests to avoid cross-event-loop asyncpg reuse.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()
