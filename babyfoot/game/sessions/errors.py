from babyfoot.core.errors import ConflictError, NotFoundError, UnauthorizedError


class SessionNotFoundError(NotFoundError):
    code = "E_SESSION_NOT_FOUND"


class SessionFullError(ConflictError):
    code = "E_SESSION_FULL"


class SessionExpiredError(ConflictError):
    code = "E_SESSION_EXPIRED"


class SessionClosedError(ConflictError):
    code = "E_SESSION_CLOSED"


class SessionNotReadyError(ConflictError):
    code = "E_SESSION_NOT_READY"


class SessionAccessError(UnauthorizedError):
    code = "E_SESSION_FORBIDDEN"
