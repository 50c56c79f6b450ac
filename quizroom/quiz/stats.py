from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from uuid import UUID

from quizroom.quiz.types import (
    Attempt,
    ClassAnalytics,
    DailyScore,
    StudentStats,
    Subject,
    SubjectPerformance,
)

DEFAULT_RECENT_ATTEMPTS_LIMIT = 5
DEFAULT_ANALYTICS_WINDOW_DAYS = 30


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean_rounded(scores: Sequence[int]) -> int:
    if not scores:
        return 0
    return _round_half_up(sum(scores) / len(scores))


def build_student_stats(
    completed_attempts: Sequence[tuple[Attempt, Subject]],
    *,
    recent_limit: int = DEFAULT_RECENT_ATTEMPTS_LIMIT,
) -> StudentStats:
    """Summarize a student's completed attempts.

    Attempts without a completion timestamp are ignored. Averages are over
    raw attempt scores and round half up.
    """
    completed = [(attempt, subject) for attempt, subject in completed_attempts if attempt.is_completed]
    scores = [attempt.score for attempt, _ in completed]

    scores_by_subject: dict[Subject, list[int]] = {subject: [] for subject in Subject}
    for attempt, subject in completed:
        scores_by_subject[subject].append(attempt.score)

    recent = sorted(
        (attempt for attempt, _ in completed),
        key=lambda attempt: attempt.completed_at,
        reverse=True,
    )[: max(0, recent_limit)]

    return StudentStats(
        total_quizzes=len(completed),
        total_points=sum(scores),
        average_score=_mean_rounded(scores),
        subject_progress={
            subject: _mean_rounded(subject_scores)
            for subject, subject_scores in scores_by_subject.items()
        },
        recent_attempts=tuple(recent),
    )


def build_class_analytics(
    completed_attempts: Sequence[tuple[Attempt, Subject]],
    *,
    now_utc: datetime | None = None,
    window_days: int = DEFAULT_ANALYTICS_WINDOW_DAYS,
) -> ClassAnalytics:
    """Aggregate completed attempts across all students.

    Totals and subject figures cover every completed attempt; the daily
    series only covers attempts completed within ``window_days`` of
    ``now_utc``, bucketed by UTC calendar day. Subjects without attempts
    are left out.
    """
    now_utc = now_utc or datetime.now(timezone.utc)
    window_start = now_utc - timedelta(days=window_days)
    completed = [(attempt, subject) for attempt, subject in completed_attempts if attempt.is_completed]

    scores_by_subject: dict[Subject, list[int]] = defaultdict(list)
    students_by_subject: dict[Subject, set[UUID]] = defaultdict(set)
    scores_by_day: dict[date, list[int]] = defaultdict(list)
    for attempt, subject in completed:
        scores_by_subject[subject].append(attempt.score)
        students_by_subject[subject].add(attempt.user_id)
        if attempt.completed_at >= window_start:
            scores_by_day[attempt.completed_at.astimezone(timezone.utc).date()].append(attempt.score)

    subjects = tuple(
        SubjectPerformance(
            subject=subject,
            average_score=_mean_rounded(scores_by_subject[subject]),
            total_attempts=len(scores_by_subject[subject]),
            student_count=len(students_by_subject[subject]),
        )
        for subject in Subject
        if scores_by_subject.get(subject)
    )
    daily = tuple(
        DailyScore(day=day, average_score=_mean_rounded(scores), attempts=len(scores))
        for day, scores in sorted(scores_by_day.items())
    )
    scores = [attempt.score for attempt, _ in completed]
    return ClassAnalytics(
        total_students=len({attempt.user_id for attempt, _ in completed}),
        total_attempts=len(completed),
        class_average=_mean_rounded(scores),
        subjects=subjects,
        daily=daily,
    )
