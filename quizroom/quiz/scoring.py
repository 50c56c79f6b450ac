from __future__ import annotations

from collections.abc import Mapping, Sequence
from uuid import UUID

from quizroom.quiz.types import Question, ResponseDraft, ScoreResult


def is_answer_correct(question: Question, selected_answer: int | None) -> bool:
    return selected_answer is not None and selected_answer == question.correct_answer


def score_answers(
    questions: Sequence[Question],
    answers: Mapping[UUID, int],
) -> ScoreResult:
    """Score recorded answers against the question list.

    Every question yields exactly one response draft, answered or not, in
    question order. Unanswered questions are incorrect and earn nothing.
    """
    responses: list[ResponseDraft] = []
    correct_answers = 0
    score = 0
    max_score = 0
    for question in questions:
        selected_answer = answers.get(question.id)
        is_correct = is_answer_correct(question, selected_answer)
        max_score += question.points
        if is_correct:
            correct_answers += 1
            score += question.points
        responses.append(
            ResponseDraft(
                question_id=question.id,
                selected_answer=selected_answer,
                is_correct=is_correct,
            )
        )
    return ScoreResult(
        responses=tuple(responses),
        correct_answers=correct_answers,
        score=score,
        max_score=max_score,
    )
