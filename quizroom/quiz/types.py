from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class Subject(str, Enum):
    MATH = "math"
    SCIENCE = "science"
    LOGIC = "logic"


class Grade(str, Enum):
    GRADE_4 = "4"
    GRADE_5 = "5"
    GRADE_6 = "6"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionStatus(str, Enum):
    IDLE = "IDLE"
    LOADED = "LOADED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


SUBJECTS: dict[Subject, str] = {
    Subject.MATH: "Math",
    Subject.SCIENCE: "Science",
    Subject.LOGIC: "Logic",
}

GRADES: dict[Grade, str] = {
    Grade.GRADE_4: "Grade 4",
    Grade.GRADE_5: "Grade 5",
    Grade.GRADE_6: "Grade 6",
}


@dataclass(frozen=True, slots=True)
class Quiz:
    id: UUID
    title: str
    subject: Subject
    grade: Grade
    time_limit_minutes: int
    is_active: bool
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Question:
    id: UUID
    quiz_id: UUID
    text: str
    options: tuple[str, ...]
    correct_answer: int
    points: int
    order_index: int
    image_url: str | None = None
    difficulty: Difficulty | None = None


@dataclass(slots=True)
class Attempt:
    id: UUID
    user_id: UUID
    quiz_id: UUID
    score: int
    total_questions: int
    correct_answers: int
    started_at: datetime
    time_taken_seconds: int | None = None
    completed_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


@dataclass(frozen=True, slots=True)
class ResponseDraft:
    question_id: UUID
    selected_answer: int | None
    is_correct: bool


@dataclass(frozen=True, slots=True)
class Response:
    id: UUID
    attempt_id: UUID
    question_id: UUID
    selected_answer: int | None
    is_correct: bool
    answered_at: datetime


@dataclass(frozen=True, slots=True)
class ScoreResult:
    responses: tuple[ResponseDraft, ...]
    correct_answers: int
    score: int
    max_score: int


@dataclass(frozen=True, slots=True)
class QuestionDraft:
    text: str
    options: tuple[str, ...]
    correct_answer: int
    points: int | None = None
    image_url: str | None = None
    difficulty: Difficulty | None = None


@dataclass(frozen=True, slots=True)
class QuizDraft:
    title: str
    subject: Subject
    grade: Grade
    questions: tuple[QuestionDraft, ...]
    description: str | None = None
    time_limit_minutes: int | None = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class StudentStats:
    total_quizzes: int
    total_points: int
    average_score: int
    subject_progress: dict[Subject, int]
    recent_attempts: tuple[Attempt, ...]


@dataclass(frozen=True, slots=True)
class SubjectPerformance:
    subject: Subject
    average_score: int
    total_attempts: int
    student_count: int


@dataclass(frozen=True, slots=True)
class DailyScore:
    day: date
    average_score: int
    attempts: int


@dataclass(frozen=True, slots=True)
class ClassAnalytics:
    total_students: int
    total_attempts: int
    class_average: int
    subjects: tuple[SubjectPerformance, ...]
    daily: tuple[DailyScore, ...]
