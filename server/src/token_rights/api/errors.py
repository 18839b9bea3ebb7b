"""Translate registry failures into HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from token_rights.exceptions import (
    AllowanceExceededError,
    ArithmeticUnderflowError,
    AuthorizationError,
    InsufficientBalanceError,
    ItemExistsError,
    ItemNotFoundError,
    RegistryError,
    ValidityError,
)

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins
_STATUS_BY_ERROR: list[tuple[type[RegistryError], int]] = [
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ItemNotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidityError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ItemExistsError, status.HTTP_409_CONFLICT),
    (AllowanceExceededError, status.HTTP_409_CONFLICT),
    (ArithmeticUnderflowError, status.HTTP_409_CONFLICT),
    (InsufficientBalanceError, status.HTTP_409_CONFLICT),
]


def status_for(exc: RegistryError) -> int:
    """HTTP status code for a registry failure."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """FastAPI exception handler for RegistryError."""
    code = status_for(exc)
    logger.info(f"{request.method} {request.url.path} failed ({code}): {exc}")
    return JSONResponse(
        status_code=code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )
