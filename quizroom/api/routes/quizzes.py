from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from quizroom.api.deps import get_catalog
from quizroom.quiz.errors import OptionsDecodeError, QuizNotFoundError, QuizValidationError, RemoteOperationError
from quizroom.quiz.ports import CatalogService
from quizroom.quiz.types import (
    GRADES,
    SUBJECTS,
    Difficulty,
    Grade,
    Question,
    QuestionDraft,
    Quiz,
    QuizDraft,
    Subject,
)

router = APIRouter(tags=["quizzes"])
logger = structlog.get_logger(__name__)


class QuizSummaryResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    subject: Subject
    subject_label: str
    grade: Grade
    grade_label: str
    time_limit_minutes: int = Field(ge=1)


class QuestionView(BaseModel):
    id: UUID
    text: str
    image_url: str | None = None
    options: list[str]
    points: int = Field(ge=0)
    order_index: int
    difficulty: str | None = None


class QuizDetailResponse(QuizSummaryResponse):
    questions: list[QuestionView]
    max_score: int = Field(ge=0)


class AuthoringQuestionView(QuestionView):
    correct_answer: int = Field(ge=0)


class QuizAuthoringResponse(QuizSummaryResponse):
    is_active: bool
    questions: list[AuthoringQuestionView]
    max_score: int = Field(ge=0)


class QuestionWriteRequest(BaseModel):
    text: str
    options: list[str]
    correct_answer: int
    points: int | None = None
    image_url: str | None = None
    difficulty: Difficulty | None = None


class QuizWriteRequest(BaseModel):
    title: str
    description: str | None = None
    subject: Subject
    grade: Grade
    time_limit_minutes: int | None = None
    is_active: bool = True
    questions: list[QuestionWriteRequest]

    def to_draft(self) -> QuizDraft:
        return QuizDraft(
            title=self.title,
            description=self.description,
            subject=self.subject,
            grade=self.grade,
            time_limit_minutes=self.time_limit_minutes,
            is_active=self.is_active,
            questions=tuple(
                QuestionDraft(
                    text=question.text,
                    options=tuple(question.options),
                    correct_answer=question.correct_answer,
                    points=question.points,
                    image_url=question.image_url,
                    difficulty=question.difficulty,
                )
                for question in self.questions
            ),
        )


class QuizCreateRequest(QuizWriteRequest):
    created_by: UUID | None = None


def _as_summary(quiz: Quiz) -> QuizSummaryResponse:
    return QuizSummaryResponse(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        subject=quiz.subject,
        subject_label=SUBJECTS[quiz.subject],
        grade=quiz.grade,
        grade_label=GRADES[quiz.grade],
        time_limit_minutes=quiz.time_limit_minutes,
    )


def _as_question(question: Question) -> QuestionView:
    return QuestionView(
        id=question.id,
        text=question.text,
        image_url=question.image_url,
        options=list(question.options),
        points=question.points,
        order_index=question.order_index,
        difficulty=question.difficulty.value if question.difficulty is not None else None,
    )


@router.get("/quizzes", response_model=list[QuizSummaryResponse])
async def list_quizzes(
    grade: Grade | None = Query(default=None),
    subject: Subject | None = Query(default=None),
    catalog: CatalogService = Depends(get_catalog),
) -> list[QuizSummaryResponse]:
    try:
        quizzes = await catalog.list_quizzes(grade=grade, subject=subject)
    except RemoteOperationError as exc:
        logger.warning("quizzes_list_unavailable", error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_CATALOG_UNAVAILABLE"}) from exc
    return [_as_summary(quiz) for quiz in quizzes]


@router.get("/quizzes/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(
    quiz_id: UUID,
    catalog: CatalogService = Depends(get_catalog),
) -> QuizDetailResponse:
    try:
        quiz = await catalog.fetch_quiz_by_id(quiz_id)
        if quiz is None or not quiz.is_active:
            raise HTTPException(status_code=404, detail={"code": "E_QUIZ_NOT_FOUND"})
        questions = await catalog.fetch_questions_by_quiz(quiz_id)
    except (RemoteOperationError, OptionsDecodeError) as exc:
        logger.warning("quiz_detail_unavailable", quiz_id=str(quiz_id), error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_CATALOG_UNAVAILABLE"}) from exc

    ordered = sorted(questions, key=lambda question: question.order_index)
    summary = _as_summary(quiz)
    return QuizDetailResponse(
        **summary.model_dump(),
        questions=[_as_question(question) for question in ordered],
        max_score=sum(question.points for question in ordered),
    )


def _as_authoring(quiz: Quiz, questions: list[Question]) -> QuizAuthoringResponse:
    ordered = sorted(questions, key=lambda question: question.order_index)
    return QuizAuthoringResponse(
        **_as_summary(quiz).model_dump(),
        is_active=quiz.is_active,
        questions=[
            AuthoringQuestionView(
                **_as_question(question).model_dump(),
                correct_answer=question.correct_answer,
            )
            for question in ordered
        ],
        max_score=sum(question.points for question in ordered),
    )


def _invalid_quiz(exc: QuizValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"code": "E_QUIZ_INVALID", "reason": str(exc)})


@router.get("/quizzes/{quiz_id}/authoring", response_model=QuizAuthoringResponse)
async def get_quiz_for_authoring(
    quiz_id: UUID,
    catalog: CatalogService = Depends(get_catalog),
) -> QuizAuthoringResponse:
    try:
        quiz = await catalog.fetch_quiz_by_id(quiz_id)
        if quiz is None:
            raise HTTPException(status_code=404, detail={"code": "E_QUIZ_NOT_FOUND"})
        questions = await catalog.fetch_questions_by_quiz(quiz_id)
    except (RemoteOperationError, OptionsDecodeError) as exc:
        logger.warning("quiz_authoring_unavailable", quiz_id=str(quiz_id), error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_CATALOG_UNAVAILABLE"}) from exc
    return _as_authoring(quiz, questions)


@router.post("/quizzes", response_model=QuizAuthoringResponse, status_code=201)
async def create_quiz(
    payload: QuizCreateRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> QuizAuthoringResponse:
    try:
        quiz = await catalog.create_quiz(payload.to_draft(), created_by=payload.created_by)
        questions = await catalog.fetch_questions_by_quiz(quiz.id)
    except QuizValidationError as exc:
        raise _invalid_quiz(exc) from exc
    except (RemoteOperationError, OptionsDecodeError) as exc:
        logger.warning("quiz_create_unavailable", error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_CATALOG_UNAVAILABLE"}) from exc
    return _as_authoring(quiz, questions)


@router.put("/quizzes/{quiz_id}", response_model=QuizAuthoringResponse)
async def update_quiz(
    quiz_id: UUID,
    payload: QuizWriteRequest,
    catalog: CatalogService = Depends(get_catalog),
) -> QuizAuthoringResponse:
    try:
        quiz = await catalog.update_quiz(quiz_id, payload.to_draft())
        questions = await catalog.fetch_questions_by_quiz(quiz_id)
    except QuizValidationError as exc:
        raise _invalid_quiz(exc) from exc
    except QuizNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_QUIZ_NOT_FOUND"}) from exc
    except (RemoteOperationError, OptionsDecodeError) as exc:
        logger.warning("quiz_update_unavailable", quiz_id=str(quiz_id), error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_CATALOG_UNAVAILABLE"}) from exc
    return _as_authoring(quiz, questions)


@router.delete("/quizzes/{quiz_id}", status_code=204, response_class=Response)
async def delete_quiz(
    quiz_id: UUID,
    catalog: CatalogService = Depends(get_catalog),
) -> Response:
    try:
        deleted = await catalog.delete_quiz(quiz_id)
    except RemoteOperationError as exc:
        logger.warning("quiz_delete_unavailable", quiz_id=str(quiz_id), error=str(exc))
        raise HTTPException(status_code=503, detail={"code": "E_CATALOG_UNAVAILABLE"}) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail={"code": "E_QUIZ_NOT_FOUND"})
    return Response(status_code=204)
