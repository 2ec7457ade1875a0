"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    CapacityExceeded,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.security import create_access_token, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "CapacityExceeded",
    "ConflictError",
    "NotFoundError",
    "ValidationError",
    "create_access_token",
    "verify_token",
]
