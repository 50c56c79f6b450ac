from quizroom.db.models.question_responses import QuestionResponse
from quizroom.db.models.questions import Question
from quizroom.db.models.quiz_attempts import QuizAttempt
from quizroom.db.models.quizzes import Quiz

__all__ = [
    "Question",
    "QuestionResponse",
    "Quiz",
    "QuizAttempt",
]
