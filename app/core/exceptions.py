"""Custom application exceptions."""

from datetime import date
from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: Any = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Malformed or out-of-range input."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found (or deactivated) exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(AppException):
    """Referential conflict, e.g. deleting equipment that is still rented."""

    def __init__(self, detail: str = "Resource is still referenced") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class CapacityExceeded(AppException):
    """Admission rejected: a day in the requested range has no room left.

    Carries the first violating day and what was left on it so the caller
    can retry with a smaller quantity or different dates.
    """

    def __init__(
        self,
        resource: str,
        resource_id: str,
        day: date,
        used: int,
        remaining: int,
        requested: int,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.day = day
        self.used = used
        self.remaining = remaining
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": f"Not enough {resource} capacity on {day.isoformat()}",
                "resource": resource,
                "resource_id": resource_id,
                "date": day.isoformat(),
                "used": used,
                "remaining": remaining,
                "requested": requested,
            },
        )
