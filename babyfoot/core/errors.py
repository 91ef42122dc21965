"""Failure kinds shared by every babyfoot component.

Each concrete error subclasses exactly one kind so callers (HTTP layer, bot,
CLI) can map failures without knowing every specific class. ``code`` is a
stable identifier suitable for client-side localisation.
"""


class BabyfootError(Exception):
    code = "E_BABYFOOT"


class NotFoundError(BabyfootError):
    code = "E_NOT_FOUND"


class ConflictError(BabyfootError):
    code = "E_CONFLICT"


class UnauthorizedError(BabyfootError):
    code = "E_FORBIDDEN"


class StoreUnavailableError(BabyfootError):
    code = "E_STORE_UNAVAILABLE"


class ConcurrentModificationError(ConflictError):
    code = "E_CONCURRENT_MODIFICATION"
