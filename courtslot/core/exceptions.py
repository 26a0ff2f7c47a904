# courtslot/core/exceptions.py
"""
Domain-specific exceptions for the booking engine.

Services raise these with business-focused messages. Each class carries
the HTTP status it maps to; routes and the app-level handler turn them
into responses with ``to_http_exception()``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

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

    def to_detail(self) -> Dict[str, Any]:
        """Response body payload: message, machine-readable code and context."""
        return {"message": self.message, "code": self.code, "details": self.details}

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.to_detail())


class ValidationException(DomainException):
    """Malformed slots, blank cancel reason and other rejected input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Missing court, player, booking or slot, or one outside the caller's facility."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    status_code = status.HTTP_409_CONFLICT


class BookingConflictException(ConflictException):
    """Requested slots overlap active slots on the same court."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code="BOOKING_CONFLICT",
            details=details,
        )


class ServiceException(DomainException):
    """A service could not complete because the database failed."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message or "An error occurred processing your request", **kwargs)


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Wraps data access failures such as connection issues, query failures
    or constraint violations.
    """
