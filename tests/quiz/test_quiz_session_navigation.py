from __future__ import annotations

from uuid import uuid4

import pytest

from quizroom.quiz.errors import InvalidAnswerIndexError, UnknownQuestionError
from quizroom.quiz.session import QuizSession
from quizroom.quiz.types import SessionStatus

from tests.quiz.session_fixtures import FakeCatalog, FakePersistence, make_question, make_quiz


async def _started_session(question_count: int = 3) -> tuple[QuizSession, list]:
    quiz = make_quiz()
    questions = [make_question(quiz.id, order_index=index) for index in range(question_count)]
    session = QuizSession(catalog=FakeCatalog([quiz], questions), persistence=FakePersistence())
    await session.load_quiz(quiz.id)
    await session.start_attempt(quiz.id, uuid4())
    return session, questions


@pytest.mark.asyncio
async def test_submit_answer_overwrites_previous_choice() -> None:
    session, questions = await _started_session()
    q1 = questions[0]

    session.submit_answer(q1.id, 2)
    session.submit_answer(q1.id, 0)

    assert session.answers[q1.id] == 0
    assert session.selected_answer == 0
    assert session.answered_count == 1


@pytest.mark.asyncio
async def test_submit_answer_rejects_out_of_range_option() -> None:
    session, questions = await _started_session()

    with pytest.raises(InvalidAnswerIndexError) as exc_info:
        session.submit_answer(questions[0].id, 4)
    with pytest.raises(InvalidAnswerIndexError):
        session.submit_answer(questions[0].id, -1)

    assert exc_info.value.option_count == 4
    assert session.answers == {}
    assert session.selected_answer is None


@pytest.mark.asyncio
async def test_submit_answer_rejects_question_outside_loaded_quiz() -> None:
    session, _ = await _started_session()

    with pytest.raises(UnknownQuestionError):
        session.submit_answer(uuid4(), 0)


@pytest.mark.asyncio
async def test_previous_question_at_first_index_is_noop() -> None:
    session, _ = await _started_session()

    session.previous_question()

    assert session.current_question_index == 0


@pytest.mark.asyncio
async def test_next_question_at_last_index_is_noop() -> None:
    session, questions = await _started_session()

    for _ in range(len(questions) + 2):
        session.next_question()

    assert session.current_question_index == len(questions) - 1
    assert session.is_last_question is True
    assert session.current_question == questions[-1]


@pytest.mark.asyncio
async def test_navigation_restores_selected_answer_per_question() -> None:
    session, questions = await _started_session()

    session.submit_answer(questions[0].id, 3)
    session.next_question()
    assert session.selected_answer is None

    session.submit_answer(questions[1].id, 1)
    session.previous_question()
    assert session.current_question_index == 0
    assert session.selected_answer == 3

    session.next_question()
    assert session.selected_answer == 1


def test_navigation_before_loading_is_inert() -> None:
    session = QuizSession(catalog=FakeCatalog(), persistence=FakePersistence())

    session.next_question()
    session.previous_question()

    assert session.current_question_index == 0
    assert session.current_question is None
    assert session.status is SessionStatus.IDLE


@pytest.mark.asyncio
async def test_reset_quiz_clears_everything() -> None:
    session, questions = await _started_session()
    session.submit_answer(questions[0].id, 1)
    session.next_question()

    session.reset_quiz()

    assert session.current_quiz is None
    assert session.current_questions == ()
    assert session.current_attempt is None
    assert session.current_question_index == 0
    assert session.selected_answer is None
    assert session.answers == {}
    assert session.status is SessionStatus.IDLE
