from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from quizroom.quiz.errors import OptionsDecodeError, RemoteOperationError
from quizroom.quiz.session import QuizSession
from quizroom.quiz.types import Grade, SessionStatus, Subject

from tests.quiz.session_fixtures import (
    STARTED_AT,
    FakeCatalog,
    FakePersistence,
    make_question,
    make_quiz,
)

UTC = timezone.utc


def _build(points: tuple[int, ...] = (1, 1, 2)):
    quiz = make_quiz()
    # Stored out of order on purpose; the session orders by order_index.
    questions = [
        make_question(quiz.id, order_index=index, correct_answer=index % 4, points=value)
        for index, value in reversed(list(enumerate(points)))
    ]
    catalog = FakeCatalog([quiz], questions)
    persistence = FakePersistence()
    session = QuizSession(catalog=catalog, persistence=persistence)
    return session, quiz, catalog, persistence


@pytest.mark.asyncio
async def test_load_quiz_orders_questions_and_moves_to_loaded() -> None:
    session, quiz, _, _ = _build()

    loaded = await session.load_quiz(quiz.id)

    assert loaded == quiz
    assert session.current_quiz == quiz
    assert [question.order_index for question in session.current_questions] == [0, 1, 2]
    assert session.status is SessionStatus.LOADED
    assert session.is_loading is False
    assert session.error is None


@pytest.mark.asyncio
async def test_load_quiz_missing_quiz_records_error_and_keeps_state() -> None:
    session, quiz, _, _ = _build()
    await session.load_quiz(quiz.id)

    result = await session.load_quiz(uuid4())

    assert result is None
    assert session.error is not None and "not found" in session.error
    assert session.current_quiz == quiz
    assert len(session.current_questions) == 3
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_load_quiz_remote_failure_records_message() -> None:
    session, quiz, catalog, _ = _build()
    catalog.fail_with = RemoteOperationError("catalog offline")

    assert await session.load_quiz(quiz.id) is None
    assert session.error == "catalog offline"
    assert session.status is SessionStatus.IDLE


@pytest.mark.asyncio
async def test_load_quiz_leaves_answers_untouched() -> None:
    session, quiz, _, _ = _build()
    await session.load_quiz(quiz.id)
    await session.start_attempt(quiz.id, uuid4())
    first = session.current_questions[0]
    session.submit_answer(first.id, 0)

    await session.load_quiz(quiz.id)

    assert session.answers == {first.id: 0}
    assert session.status is SessionStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_start_attempt_uses_loaded_question_count_and_resets_transient_state() -> None:
    session, quiz, _, persistence = _build()
    await session.load_quiz(quiz.id)
    user_id = uuid4()

    attempt_id = await session.start_attempt(quiz.id, user_id)

    assert attempt_id is not None
    attempt = persistence.attempts[attempt_id]
    assert attempt.total_questions == 3
    assert attempt.score == 0
    assert attempt.correct_answers == 0
    assert attempt.user_id == user_id
    assert session.current_attempt == attempt
    assert session.current_question_index == 0
    assert session.answers == {}
    assert session.status is SessionStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_start_attempt_failure_returns_none_and_keeps_attempt() -> None:
    session, quiz, _, persistence = _build()
    await session.load_quiz(quiz.id)
    first_attempt_id = await session.start_attempt(quiz.id, uuid4())
    persistence.fail_create_with = RemoteOperationError("insert rejected")

    assert await session.start_attempt(quiz.id, uuid4()) is None
    assert session.error == "insert rejected"
    assert session.current_attempt is not None
    assert session.current_attempt.id == first_attempt_id


@pytest.mark.asyncio
async def test_complete_quiz_scores_mixed_answers() -> None:
    session, quiz, _, _ = _build(points=(1, 1, 2))
    await session.load_quiz(quiz.id)
    attempt_id = await session.start_attempt(quiz.id, uuid4())
    q1, q2, _ = session.current_questions
    session.submit_answer(q1.id, q1.correct_answer)
    session.submit_answer(q2.id, (q2.correct_answer + 1) % 4)

    attempt = await session.complete_quiz(attempt_id, 95)

    assert attempt is not None
    assert attempt.correct_answers == 1
    assert attempt.score == 1
    assert attempt.time_taken_seconds == 95
    assert attempt.completed_at is not None
    assert session.status is SessionStatus.COMPLETED


@pytest.mark.asyncio
async def test_complete_quiz_writes_one_response_per_question() -> None:
    session, quiz, _, persistence = _build(points=(1, 2, 3, 4, 5))
    await session.load_quiz(quiz.id)
    attempt_id = await session.start_attempt(quiz.id, uuid4())
    answered = session.current_questions[:2]
    for question in answered:
        session.submit_answer(question.id, question.correct_answer)

    await session.complete_quiz(attempt_id, 30)

    call = persistence.complete_calls[-1]
    responses = call["responses"]
    assert len(responses) == 5
    unanswered = [draft for draft in responses if draft.selected_answer is None]
    assert len(unanswered) == 3
    assert all(draft.is_correct is False for draft in unanswered)
    assert call["score"] == 3
    assert len(persistence.responses) == 5


@pytest.mark.asyncio
async def test_complete_quiz_failure_returns_none_and_keeps_in_progress() -> None:
    session, quiz, _, persistence = _build()
    await session.load_quiz(quiz.id)
    attempt_id = await session.start_attempt(quiz.id, uuid4())
    persistence.fail_complete_with = RemoteOperationError("transaction aborted")

    assert await session.complete_quiz(attempt_id, 12) is None
    assert session.error == "transaction aborted"
    assert session.status is SessionStatus.IN_PROGRESS
    assert persistence.responses == {}


@pytest.mark.asyncio
async def test_complete_quiz_retry_does_not_duplicate_responses() -> None:
    session, quiz, _, persistence = _build()
    await session.load_quiz(quiz.id)
    attempt_id = await session.start_attempt(quiz.id, uuid4())

    await session.complete_quiz(attempt_id, 10)
    await session.complete_quiz(attempt_id, 10)

    assert len(persistence.responses) == 3


@pytest.mark.asyncio
async def test_complete_quiz_derives_time_taken_from_attempt_start() -> None:
    session, quiz, _, persistence = _build()
    await session.load_quiz(quiz.id)
    attempt_id = await session.start_attempt(quiz.id, uuid4())

    attempt = await session.complete_quiz(attempt_id, now_utc=STARTED_AT + timedelta(seconds=75))

    assert attempt is not None
    assert attempt.time_taken_seconds == 75
    assert persistence.complete_calls[-1]["completed_at"] == STARTED_AT + timedelta(seconds=75)


@pytest.mark.asyncio
async def test_time_limit_expiry_follows_quiz_time_limit() -> None:
    session, quiz, _, _ = _build()
    await session.load_quiz(quiz.id)
    assert session.is_time_expired(STARTED_AT) is False

    await session.start_attempt(quiz.id, uuid4())

    assert session.elapsed_seconds(STARTED_AT + timedelta(minutes=3)) == 180
    assert session.is_time_expired(STARTED_AT + timedelta(minutes=9, seconds=59)) is False
    assert session.is_time_expired(STARTED_AT + timedelta(minutes=10)) is True
    assert session.elapsed_seconds(datetime(2026, 10, 19, 8, 0, tzinfo=UTC)) == 0


@pytest.mark.asyncio
async def test_fetch_quizzes_filters_and_stores_result() -> None:
    math_quiz = make_quiz(subject=Subject.MATH, grade=Grade.GRADE_4)
    logic_quiz = make_quiz(subject=Subject.LOGIC, grade=Grade.GRADE_6)
    catalog = FakeCatalog([math_quiz, logic_quiz])
    session = QuizSession(catalog=catalog, persistence=FakePersistence())

    quizzes = await session.fetch_quizzes(grade=Grade.GRADE_6)

    assert quizzes == [logic_quiz]
    assert session.quizzes == [logic_quiz]
    assert catalog.list_calls == [{"grade": Grade.GRADE_6, "subject": None}]


@pytest.mark.asyncio
async def test_fetch_quizzes_failure_returns_empty_list() -> None:
    catalog = FakeCatalog([make_quiz()])
    catalog.fail_with = RemoteOperationError("catalog offline")
    session = QuizSession(catalog=catalog, persistence=FakePersistence())

    assert await session.fetch_quizzes() == []
    assert session.error == "catalog offline"
    session.clear_error()
    assert session.error is None


class _AnswerDuringWritePersistence(FakePersistence):
    """Submits another answer on the session while the completion write is in flight."""

    def __init__(self) -> None:
        super().__init__()
        self.session: QuizSession | None = None
        self.late_answer: tuple | None = None

    async def complete_attempt(self, **kwargs):  # noqa: ANN003
        if self.session is not None and self.late_answer is not None:
            self.session.submit_answer(*self.late_answer)
        return await super().complete_attempt(**kwargs)


@pytest.mark.asyncio
async def test_complete_quiz_scores_answers_as_of_the_call() -> None:
    quiz = make_quiz()
    questions = [
        make_question(quiz.id, order_index=index, correct_answer=index % 4, points=value)
        for index, value in enumerate((1, 1, 2))
    ]
    persistence = _AnswerDuringWritePersistence()
    session = QuizSession(catalog=FakeCatalog([quiz], questions), persistence=persistence)
    persistence.session = session
    await session.load_quiz(quiz.id)
    attempt_id = await session.start_attempt(quiz.id, uuid4())
    q1, _, q3 = session.current_questions
    session.submit_answer(q1.id, q1.correct_answer)
    persistence.late_answer = (q3.id, q3.correct_answer)

    attempt = await session.complete_quiz(attempt_id, 20)

    assert attempt is not None
    assert attempt.score == 1
    assert attempt.correct_answers == 1
    written = {draft.question_id: draft for draft in persistence.complete_calls[-1]["responses"]}
    assert written[q3.id].selected_answer is None
    assert written[q3.id].is_correct is False
    # The late answer still lands in memory; it just is not part of this completion.
    assert session.answers[q3.id] == q3.correct_answer


@pytest.mark.asyncio
async def test_load_quiz_records_undecodable_options() -> None:
    session, quiz, catalog, _ = _build()
    catalog.fail_with = OptionsDecodeError("options are not valid UTF-8: invalid start byte")

    assert await session.load_quiz(quiz.id) is None
    assert session.error == "options are not valid UTF-8: invalid start byte"
    assert session.status is SessionStatus.IDLE
    assert session.is_loading is False
