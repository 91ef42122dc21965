from babyfoot.core.errors import ConflictError, NotFoundError


class GameNotFoundError(NotFoundError):
    code = "E_GAME_NOT_FOUND"


class GameNotInProgressError(ConflictError):
    code = "E_GAME_NOT_IN_PROGRESS"


class InvalidScorerError(ConflictError):
    code = "E_INVALID_SCORER"


class InvalidGoalError(ConflictError):
    code = "E_INVALID_GOAL"


class NothingToRetractError(ConflictError):
    code = "E_NOTHING_TO_RETRACT"


class InvalidGameSetupError(ConflictError):
    code = "E_INVALID_GAME_SETUP"
