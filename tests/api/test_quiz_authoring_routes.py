from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from quizroom.api.deps import get_catalog
from quizroom.main import app
from quizroom.quiz.errors import RemoteOperationError

from tests.quiz.session_fixtures import FakeCatalog, make_question, make_quiz


@pytest.fixture
def catalog():
    fake = FakeCatalog()
    app.dependency_overrides[get_catalog] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "title": "Times tables",
        "description": "Quick multiplication",
        "subject": "math",
        "grade": "4",
        "questions": [
            {"text": "3 x 4?", "options": ["7", "12", "34"], "correct_answer": 1},
            {"text": "6 x 7?", "options": ["42", "36"], "correct_answer": 0, "difficulty": "hard"},
        ],
    }
    payload.update(overrides)
    return payload


def test_create_quiz_returns_questions_with_answers(catalog: FakeCatalog) -> None:
    author_id = uuid4()
    client = TestClient(app)

    response = client.post("/quizzes", json=_payload(created_by=str(author_id)))

    assert response.status_code == 201
    payload = response.json()
    assert payload["title"] == "Times tables"
    assert payload["is_active"] is True
    assert payload["time_limit_minutes"] == 10
    assert [item["text"] for item in payload["questions"]] == ["3 x 4?", "6 x 7?"]
    assert [item["order_index"] for item in payload["questions"]] == [0, 1]
    assert [item["correct_answer"] for item in payload["questions"]] == [1, 0]
    assert [item["points"] for item in payload["questions"]] == [1, 20]
    assert payload["max_score"] == 21
    assert catalog.created_by == {next(iter(catalog.quizzes)): author_id}


def test_create_quiz_rejects_out_of_range_answer(catalog: FakeCatalog) -> None:
    client = TestClient(app)
    body = _payload(questions=[{"text": "1 + 1?", "options": ["2", "3"], "correct_answer": 5}])

    response = client.post("/quizzes", json=body)

    assert response.status_code == 422
    assert response.json()["detail"] == {
        "code": "E_QUIZ_INVALID",
        "reason": "question 1: correct answer is out of range",
    }
    assert catalog.quizzes == {}


def test_create_quiz_requires_at_least_one_question(catalog: FakeCatalog) -> None:
    client = TestClient(app)

    response = client.post("/quizzes", json=_payload(questions=[]))

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "E_QUIZ_INVALID"


def test_update_quiz_replaces_question_list(catalog: FakeCatalog) -> None:
    quiz = make_quiz()
    catalog.quizzes = {quiz.id: quiz}
    catalog.questions = [make_question(quiz.id, order_index=index) for index in range(3)]
    client = TestClient(app)

    body = _payload(
        title="Times tables v2",
        is_active=False,
        questions=[{"text": "9 x 9?", "options": ["81", "99"], "correct_answer": 0, "points": 3}],
    )
    response = client.put(f"/quizzes/{quiz.id}", json=body)

    assert response.status_code == 200
    payload = response.json()
    assert payload["title"] == "Times tables v2"
    assert payload["is_active"] is False
    assert [item["text"] for item in payload["questions"]] == ["9 x 9?"]
    assert payload["max_score"] == 3

    # Deactivated quizzes disappear from the public detail view.
    assert client.get(f"/quizzes/{quiz.id}").status_code == 404
    authoring = client.get(f"/quizzes/{quiz.id}/authoring")
    assert authoring.status_code == 200
    assert authoring.json()["questions"][0]["correct_answer"] == 0


def test_update_quiz_returns_404_for_unknown_quiz(catalog: FakeCatalog) -> None:
    client = TestClient(app)

    response = client.put(f"/quizzes/{uuid4()}", json=_payload())

    assert response.status_code == 404
    assert response.json()["detail"] == {"code": "E_QUIZ_NOT_FOUND"}


def test_delete_quiz_removes_quiz_and_questions(catalog: FakeCatalog) -> None:
    quiz = make_quiz()
    catalog.quizzes = {quiz.id: quiz}
    catalog.questions = [make_question(quiz.id, order_index=0)]
    client = TestClient(app)

    response = client.delete(f"/quizzes/{quiz.id}")

    assert response.status_code == 204
    assert catalog.quizzes == {}
    assert catalog.questions == []
    assert client.delete(f"/quizzes/{quiz.id}").status_code == 404


def test_authoring_routes_return_503_when_catalog_fails(catalog: FakeCatalog) -> None:
    catalog.fail_with = RemoteOperationError("catalog offline")
    client = TestClient(app)

    assert client.post("/quizzes", json=_payload()).status_code == 503
    assert client.put(f"/quizzes/{uuid4()}", json=_payload()).status_code == 503
    response = client.delete(f"/quizzes/{uuid4()}")
    assert response.status_code == 503
    assert response.json()["detail"] == {"code": "E_CATALOG_UNAVAILABLE"}
