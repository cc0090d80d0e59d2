class GameSessionError(Exception):
    code = "E_GAME_SESSION"


class ContentUnavailableError(GameSessionError):
    code = "E_CONTENT_UNAVAILABLE"


class NoActiveSessionError(GameSessionError):
    code = "E_NO_ACTIVE_SESSION"


class NoCurrentQuestionError(GameSessionError):
    code = "E_NO_CURRENT_QUESTION"


class InvalidQuestionCountError(GameSessionError):
    code = "E_INVALID_QUESTION_COUNT"
