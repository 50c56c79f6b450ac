from __future__ import annotations

from datetime import date

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from quizroom.api.deps import get_persistence
from quizroom.core.config import get_settings
from quizroom.quiz.errors import RemoteOperationError
from quizroom.quiz.ports import PersistenceService
from quizroom.quiz.stats import build_class_analytics
from quizroom.quiz.types import SUBJECTS, Subject

router = APIRouter(tags=["analytics"])
logger = structlog.get_logger(__name__)


class SubjectPerformanceResponse(BaseModel):
    subject: Subject
    subject_label: str
    average_score: int = Field(ge=0)
    total_attempts: int = Field(ge=0)
    student_count: int = Field(ge=0)


class DailyScoreResponse(BaseModel):
    day: date
    average_score: int = Field(ge=0)
    attempts: int = Field(ge=0)


class ClassAnalyticsResponse(BaseModel):
    total_students: int = Field(ge=0)
    total_attempts: int = Field(ge=0)
    class_average: int = Field(ge=0)
    window_days: int = Field(ge=1)
    subjects: list[SubjectPerformanceResponse]
    daily: list[DailyScoreResponse]


@router.get("/analytics/class", response_model=ClassAnalyticsResponse)
async def get_class_analytics(
    persistence: PersistenceService = Depends(get_persistence),
) -> ClassAnalyticsResponse:
    try:
        completed = await persistence.list_all_completed_attempts()
    except RemoteOperationError as exc:
        logger.warning("class_analytics_unavailable", error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_ANALYTICS_UNAVAILABLE"}) from exc

    window_days = get_settings().analytics_window_days
    analytics = build_class_analytics(completed, window_days=window_days)
    return ClassAnalyticsResponse(
        total_students=analytics.total_students,
        total_attempts=analytics.total_attempts,
        class_average=analytics.class_average,
        window_days=window_days,
        subjects=[
            SubjectPerformanceResponse(
                subject=item.subject,
                subject_label=SUBJECTS[item.subject],
                average_score=item.average_score,
                total_attempts=item.total_attempts,
                student_count=item.student_count,
            )
            for item in analytics.subjects
        ],
        daily=[
            DailyScoreResponse(day=item.day, average_score=item.average_score, attempts=item.attempts)
            for item in analytics.daily
        ],
    )
