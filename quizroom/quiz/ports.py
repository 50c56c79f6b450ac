from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from quizroom.quiz.types import Attempt, Grade, Question, Quiz, QuizDraft, Response, ResponseDraft, Subject


class CatalogService(Protocol):
    async def fetch_quiz_by_id(self, quiz_id: UUID) -> Quiz | None: ...

    async def fetch_questions_by_quiz(self, quiz_id: UUID) -> list[Question]: ...

    async def list_quizzes(
        self,
        *,
        grade: Grade | None = None,
        subject: Subject | None = None,
    ) -> list[Quiz]: ...

    async def create_quiz(self, draft: QuizDraft, *, created_by: UUID | None = None) -> Quiz: ...

    async def update_quiz(self, quiz_id: UUID, draft: QuizDraft) -> Quiz: ...

    async def delete_quiz(self, quiz_id: UUID) -> bool: ...


class PersistenceService(Protocol):
    async def create_attempt(
        self,
        *,
        user_id: UUID,
        quiz_id: UUID,
        total_questions: int,
    ) -> Attempt: ...

    async def create_response(
        self,
        *,
        attempt_id: UUID,
        question_id: UUID,
        selected_answer: int | None,
        is_correct: bool,
    ) -> Response: ...

    async def update_attempt(
        self,
        *,
        attempt_id: UUID,
        score: int,
        correct_answers: int,
        time_taken_seconds: int | None,
        completed_at: datetime,
    ) -> Attempt: ...

    async def complete_attempt(
        self,
        *,
        attempt_id: UUID,
        responses: Sequence[ResponseDraft],
        score: int,
        correct_answers: int,
        time_taken_seconds: int | None,
        completed_at: datetime,
    ) -> Attempt: ...

    async def list_completed_attempts(self, *, user_id: UUID) -> list[tuple[Attempt, Subject]]: ...

    async def list_all_completed_attempts(self) -> list[tuple[Attempt, Subject]]: ...

    async def list_responses(self, *, attempt_id: UUID) -> list[Response]: ...
