class QuizroomError(Exception):
    pass


class RemoteOperationError(QuizroomError):
    pass


class QuizNotFoundError(RemoteOperationError):
    pass


class AttemptNotFoundError(RemoteOperationError):
    pass


class OptionsDecodeError(QuizroomError):
    pass


class QuizSessionError(QuizroomError):
    pass


class UnknownQuestionError(QuizSessionError):
    pass


class InvalidAnswerIndexError(QuizSessionError):
    def __init__(self, *, question_id: object, option_index: int, option_count: int) -> None:
        super().__init__(
            f"option index {option_index} is out of range for question {question_id} "
            f"with {option_count} options"
        )
        self.question_id = question_id
        self.option_index = option_index
        self.option_count = option_count


class QuizValidationError(QuizroomError):
    def __init__(self, reason: str, *, question_position: int | None = None) -> None:
        message = reason if question_position is None else f"question {question_position}: {reason}"
        super().__init__(message)
        self.reason = reason
        self.question_position = question_position
