from babyfoot.core.errors import ConflictError, NotFoundError, UnauthorizedError


class TournamentNotFoundError(NotFoundError):
    code = "E_TOURNAMENT_NOT_FOUND"


class TournamentAccessError(UnauthorizedError):
    code = "E_TOURNAMENT_FORBIDDEN"


class TournamentClosedError(ConflictError):
    code = "E_TOURNAMENT_CLOSED"


class TournamentExpiredError(ConflictError):
    code = "E_TOURNAMENT_EXPIRED"


class TournamentFullError(ConflictError):
    code = "E_TOURNAMENT_FULL"


class TournamentNotStartedError(ConflictError):
    code = "E_TOURNAMENT_NOT_STARTED"


class InvalidTournamentModeError(ConflictError):
    code = "E_INVALID_TOURNAMENT_MODE"


class InvalidTournamentTeamsError(ConflictError):
    code = "E_INVALID_TOURNAMENT_TEAMS"


class HostRemovalError(ConflictError):
    code = "E_CANNOT_REMOVE_HOST"


class MatchNotFoundError(NotFoundError):
    code = "E_MATCH_NOT_FOUND"


class MatchAlreadyCompleteError(ConflictError):
    code = "E_MATCH_ALREADY_COMPLETE"


class MatchNotActiveError(ConflictError):
    code = "E_MATCH_NOT_ACTIVE"


class MatchInProgressError(ConflictError):
    code = "E_MATCH_IN_PROGRESS"


class InvalidMatchResultError(ConflictError):
    code = "E_INVALID_MATCH_RESULT"


class DrawNotAllowedError(ConflictError):
    code = "E_DRAW_NOT_ALLOWED"


class MatchGameNotFinishedError(ConflictError):
    code = "E_MATCH_GAME_NOT_FINISHED"
