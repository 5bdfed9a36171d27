"""
Enhanced Error Handling Middleware

Provides consistent, informative error responses across the API.

Features:
- Standardized error response format
- Correlation IDs for log tracking
- Sanitized responses (hides internal details in production)
- Custom exception classes for different error types

Usage:
    from app.middleware.error_handling import setup_error_handling, ServiceError

    # Configure the app
    setup_error_handling(app, debug=settings.DEBUG)

    # Raise custom exceptions
    raise NotFoundError(f"Goal {goal_id} not found")

How Exception Interception Works:
    ServiceError subclasses raised inside route handlers are turned into
    JSON responses by a FastAPI exception handler registered in
    setup_error_handling(). Anything else that escapes the app is caught by
    ErrorHandlingMiddleware (a Starlette BaseHTTPMiddleware), whose
    dispatch() wraps call_next(request) in a try/except block.

    Exception handling hierarchy:
        - HTTPException: Re-raised for FastAPI's built-in handler
        - ServiceError: Custom exceptions → structured JSON response
        - Exception: Catch-all for unexpected errors → sanitized response
"""

import logging
import traceback
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Error Response Schema
# =============================================================================


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error: str  # Error code (e.g., "internal_server_error")
    message: str  # Human-readable message
    error_id: str  # For log correlation
    details: Optional[dict] = None  # Additional context (sanitized)
    timestamp: datetime


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - HTTP status code
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Session store unavailable", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: int = None,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class InvalidGoalError(ServiceError):
    """
    Invalid goal definition.

    Raised by the progress engine when a goal has a non-positive target or
    an unknown type/period. Callers decide whether to skip the goal or
    surface the error.
    """

    status_code = 422
    error_code = "invalid_goal"


class NotFoundError(ServiceError):
    """
    Resource not found error.

    Raised when a requested session or goal doesn't exist.
    """

    status_code = 404
    error_code = "not_found"


class StorageError(ServiceError):
    """
    Storage backend error.

    Raised when the session/goal store cannot be reached or returns
    unreadable data.
    """

    status_code = 503
    error_code = "storage_error"


# =============================================================================
# Error Handling Middleware
# =============================================================================


def _error_content(error_id: str, error: ServiceError, debug: bool) -> dict:
    return ErrorResponse(
        error=error.error_code,
        message=error.message,
        error_id=error_id,
        details=error.details if debug else None,
        timestamp=datetime.now(timezone.utc),
    ).model_dump(mode="json")


def _log_service_error(error_id: str, error: ServiceError, request: Request) -> None:
    logger.error(
        f"[{error_id}] {error.error_code}: {error.message}",
        extra={
            "error_id": error_id,
            "error_code": error.error_code,
            "path": request.url.path,
            "method": request.method,
            "details": error.details,
        },
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches unhandled exceptions
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details in production
    """

    def __init__(self, app, debug: bool = False):
        """
        Initialize middleware.

        Args:
            app: FastAPI/Starlette application
            debug: Whether to include stack traces in responses
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            response = await call_next(request)
            return response

        except HTTPException:
            # Let FastAPI handle HTTP exceptions
            raise

        except ServiceError as e:
            _log_service_error(error_id, e, request)
            return JSONResponse(
                status_code=e.status_code,
                content=_error_content(error_id, e, self.debug),
            )

        except Exception as e:
            # Log full traceback for unexpected errors
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )

            content = {
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "error_id": error_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

            if self.debug:
                content["details"] = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }

            return JSONResponse(status_code=500, content=content)


# =============================================================================
# Setup Function
# =============================================================================


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include error details in responses
    """

    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        error_id = str(uuid4())[:8]
        _log_service_error(error_id, exc, request)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_content(error_id, exc, debug),
        )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")


# =============================================================================
# Helper Functions
# =============================================================================


def handle_endpoint_errors(
    operation: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator for route handlers that logs failures under an operation name.

    HTTPException and ServiceError pass through unchanged. Any other
    exception is logged and re-raised as a ServiceError so the client gets
    the standard error body.

    Usage:
        @router.get("/insights")
        @handle_endpoint_errors("Get insights")
        async def get_insights(...):
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except (HTTPException, ServiceError):
                raise
            except Exception as e:
                logger.exception(f"{operation} failed: {type(e).__name__}: {e}")
                raise ServiceError(
                    f"{operation} failed",
                    details={"exception": type(e).__name__},
                ) from e

        return wrapper

    return decorator
