from __future__ import annotations

from quizroom.quiz.errors import QuizValidationError
from quizroom.quiz.types import Difficulty, QuestionDraft, QuizDraft

DEFAULT_QUESTION_POINTS = 1
MIN_OPTIONS_PER_QUESTION = 2
DIFFICULTY_POINTS: dict[Difficulty, int] = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 15,
    Difficulty.HARD: 20,
}


def question_points(question: QuestionDraft) -> int:
    if question.points is not None:
        return question.points
    if question.difficulty is not None:
        return DIFFICULTY_POINTS[question.difficulty]
    return DEFAULT_QUESTION_POINTS


def _validate_question(question: QuestionDraft, position: int) -> None:
    if not question.text.strip():
        raise QuizValidationError("question text is required", question_position=position)
    if len(question.options) < MIN_OPTIONS_PER_QUESTION:
        raise QuizValidationError(
            f"at least {MIN_OPTIONS_PER_QUESTION} options are required",
            question_position=position,
        )
    if any(not option.strip() for option in question.options):
        raise QuizValidationError("options must not be blank", question_position=position)
    if not 0 <= question.correct_answer < len(question.options):
        raise QuizValidationError("correct answer is out of range", question_position=position)
    if question.points is not None and question.points < 0:
        raise QuizValidationError("points must not be negative", question_position=position)


def validate_quiz_draft(draft: QuizDraft) -> None:
    """Reject drafts that could not be taken as a quiz.

    Question positions in error messages are 1-based, matching how an
    editor lists them.
    """
    if not draft.title.strip():
        raise QuizValidationError("title is required")
    if draft.time_limit_minutes is not None and draft.time_limit_minutes < 1:
        raise QuizValidationError("time limit must be at least one minute")
    if not draft.questions:
        raise QuizValidationError("at least one question is required")
    for position, question in enumerate(draft.questions, start=1):
        _validate_question(question, position)
