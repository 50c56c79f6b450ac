from quizroom.db.repo.question_responses_repo import QuestionResponsesRepo
from quizroom.db.repo.questions_repo import QuestionsRepo
from quizroom.db.repo.quiz_attempts_repo import QuizAttemptsRepo
from quizroom.db.repo.quizzes_repo import QuizzesRepo

__all__ = [
    "QuestionResponsesRepo",
    "QuestionsRepo",
    "QuizAttemptsRepo",
    "QuizzesRepo",
]
