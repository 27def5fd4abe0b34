"""Domain services."""

from skillmap.domain.services.users import (
    UserConflictError,
    UserNotFoundError,
    UserService,
    UserServiceError,
)

__all__ = [
    "UserConflictError",
    "UserNotFoundError",
    "UserService",
    "UserServiceError",
]
