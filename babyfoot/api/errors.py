from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from babyfoot.core.errors import (
    BabyfootError,
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
)

logger = structlog.get_logger(__name__)

_STATUS_BY_KIND: tuple[tuple[type[BabyfootError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for_error(exc: BabyfootError) -> int:
    for kind, status_code in _STATUS_BY_KIND:
        if isinstance(exc, kind):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def babyfoot_error_handler(request: Request, exc: BabyfootError) -> JSONResponse:
    status_code = status_for_error(exc)
    if status_code >= 500:
        logger.warning("api_request_failed", path=request.url.path, code=exc.code, error=str(exc))
    return JSONResponse(status_code=status_code, content={"detail": {"code": exc.code}})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BabyfootError, babyfoot_error_handler)
