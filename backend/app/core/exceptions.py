"""Ledger exceptions and their HTTP rendering.

The ledger raises these synchronously; routers let them propagate and the
handler registered in ``app.main`` turns them into a consistent JSON body.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base exception for ledger errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(self.message)


class NotFoundError(LedgerError):
    """Unknown invoice or payment id."""

    def __init__(self, resource: str, identifier: object):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
        )


class InvalidInputError(LedgerError):
    """Malformed or out-of-range input."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INVALID_INPUT",
        )


class ConflictError(LedgerError):
    """Operation is valid in shape but not in the invoice's current state."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
        )


class PermissionDeniedError(LedgerError):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="PERMISSION_DENIED",
        )


def create_error_response(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": error_code, "message": message}},
    )


async def ledger_exception_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Render a LedgerError as ``{"error": {"code", "message"}}``."""
    logger.info(
        "%s %s -> %s: %s",
        request.method,
        request.url.path,
        exc.error_code,
        exc.message,
    )
    return create_error_response(exc.status_code, exc.error_code, exc.message)
