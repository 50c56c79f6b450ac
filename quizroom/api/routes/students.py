from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from quizroom.api.deps import get_persistence
from quizroom.core.config import get_settings
from quizroom.quiz.errors import RemoteOperationError
from quizroom.quiz.ports import PersistenceService
from quizroom.quiz.stats import build_student_stats

router = APIRouter(tags=["students"])
logger = structlog.get_logger(__name__)


class AttemptSummaryResponse(BaseModel):
    id: UUID
    quiz_id: UUID
    score: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    total_questions: int = Field(ge=0)
    time_taken_seconds: int | None = None
    started_at: datetime
    completed_at: datetime | None = None


class StudentProgressResponse(BaseModel):
    user_id: UUID
    total_quizzes: int = Field(ge=0)
    total_points: int = Field(ge=0)
    average_score: int = Field(ge=0)
    subject_progress: dict[str, int]
    recent_attempts: list[AttemptSummaryResponse]


@router.get("/students/{user_id}/progress", response_model=StudentProgressResponse)
async def get_student_progress(
    user_id: UUID,
    persistence: PersistenceService = Depends(get_persistence),
) -> StudentProgressResponse:
    try:
        completed = await persistence.list_completed_attempts(user_id=user_id)
    except RemoteOperationError as exc:
        logger.warning("student_progress_unavailable", user_id=str(user_id), error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_PROGRESS_UNAVAILABLE"}) from exc

    stats = build_student_stats(completed, recent_limit=get_settings().recent_attempts_limit)
    return StudentProgressResponse(
        user_id=user_id,
        total_quizzes=stats.total_quizzes,
        total_points=stats.total_points,
        average_score=stats.average_score,
        subject_progress={subject.value: score for subject, score in stats.subject_progress.items()},
        recent_attempts=[
            AttemptSummaryResponse(
                id=attempt.id,
                quiz_id=attempt.quiz_id,
                score=attempt.score,
                correct_answers=attempt.correct_answers,
                total_questions=attempt.total_questions,
                time_taken_seconds=attempt.time_taken_seconds,
                started_at=attempt.started_at,
                completed_at=attempt.completed_at,
            )
            for attempt in stats.recent_attempts
        ],
    )
