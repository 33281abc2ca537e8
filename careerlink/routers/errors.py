from __future__ import annotations

import logging

from fastapi import HTTPException, status

from careerlink.services.errors import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)


logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (TransientStoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def to_http_exception(exc: DomainError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if status_code >= 500:
        logger.error("request.failed code=%s message=%s", exc.code, exc.message, exc_info=exc)
    return HTTPException(status_code=status_code, detail={"code": exc.code, "message": exc.message})
