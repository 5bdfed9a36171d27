"""
Middleware Package

Provides FastAPI middleware and the service exception hierarchy.

Usage:
    from app.middleware import setup_error_handling, ServiceError

    setup_error_handling(app, debug=settings.DEBUG)
"""

from app.middleware.error_handling import (
    ErrorHandlingMiddleware,
    InvalidGoalError,
    NotFoundError,
    ServiceError,
    StorageError,
    setup_error_handling,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "InvalidGoalError",
    "NotFoundError",
    "ServiceError",
    "StorageError",
    "setup_error_handling",
]
