from __future__ import annotations

from quizroom.core.config import get_settings
from quizroom.db.session import SessionLocal
from quizroom.quiz.catalog import SqlCatalogService
from quizroom.quiz.persistence import SqlPersistenceService
from quizroom.quiz.ports import CatalogService, PersistenceService


def get_catalog() -> CatalogService:
    return SqlCatalogService(
        session_factory=SessionLocal,
        default_time_limit_minutes=get_settings().default_time_limit_minutes,
    )


def get_persistence() -> PersistenceService:
    return SqlPersistenceService(session_factory=SessionLocal)
