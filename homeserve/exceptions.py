# homeserve/exceptions.py
"""
Booking domain errors.

Services raise these; the API layer turns them into HTTP responses through
``to_http_exception`` (see ``register_exception_handlers`` below).
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DomainException(Exception):
    """Base class for errors raised by the booking services."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationError(DomainException):
    """Malformed or missing input. Raised before anything is written."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundOrForbidden(DomainException):
    """The record does not exist or the caller does not own it.

    Both cases share one message so a caller cannot probe for records
    belonging to somebody else.
    """

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Booking not found", **kwargs) -> None:
        super().__init__(message, **kwargs)


class InvalidTransition(DomainException):
    """The booking is not in the status the operation requires."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        **kwargs,
    ) -> None:
        details = kwargs.pop("details", None) or {}
        if current_status is not None:
            details["current_status"] = current_status
        super().__init__(message, details=details, **kwargs)
        self.current_status = current_status


class DependencyUnavailable(DomainException):
    """The provider cannot take bookings right now (unverified or unavailable)."""

    status_code = status.HTTP_400_BAD_REQUEST


class Internal(DomainException):
    """Unexpected failure. Only a generic message reaches the client."""

    def __init__(self, message: str = "Internal server error", **kwargs) -> None:
        super().__init__(message, **kwargs)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if isinstance(exc, Internal):
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        http_exc = exc.to_http_exception()
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": {"message": "Internal server error", "code": "Internal", "details": {}}},
        )


__all__ = [
    "register_exception_handlers",
    "DomainException",
    "ValidationError",
    "NotFoundOrForbidden",
    "InvalidTransition",
    "DependencyUnavailable",
    "Internal",
]
