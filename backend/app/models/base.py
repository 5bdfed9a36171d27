"""
Strict Base Model for API Request/Response Validation

This module provides base classes with strict validation settings to harden
the API contract between backend and frontend.

MOTIVATION:
    Parameter mismatches between frontend and backend are a common source of bugs.
    By enforcing strict validation:
    - Unknown fields are rejected with 422 (extra="forbid")
    - Type mismatches fail fast with clear error messages

Usage:
    # For request bodies (strictest validation)
    class GoalCreate(StrictRequest):
        name: str
        target: float

    # For response bodies (allows extra fields from storage)
    class GoalResponse(StrictResponse):
        id: str
        name: str

Architecture:
    API Request → StrictRequest (extra="forbid") → Route Handler
    Stored record → StrictResponse (extra="ignore") → API Response
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive datetimes are interpreted as UTC; aware ones are converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StrictRequest(BaseModel):
    """
    Base model for API request bodies with strict validation.

    Rejects any fields not explicitly declared in the model, catching
    frontend typos and mismatches at request time rather than runtime.

    Features:
        - extra="forbid": Unknown fields raise 422 Unprocessable Entity
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings

    Example:
        >>> class GoalCreate(StrictRequest):
        ...     name: str
        ...     target: float
        >>>
        >>> GoalCreate(name="Weekly", target=5)  # OK
        >>> GoalCreate(name="Weekly", goal=5)  # Raises ValidationError
    """

    model_config = ConfigDict(
        extra="forbid",  # Reject unknown fields
        validate_default=True,  # Validate defaults
        str_strip_whitespace=True,  # Clean string inputs
        from_attributes=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for API response bodies.

    More lenient than StrictRequest to allow flexibility in response data.
    Still enforces type validation but allows extra fields.
    """

    model_config = ConfigDict(
        extra="ignore",  # Allow extra fields in responses
        validate_default=True,
        from_attributes=True,
    )


# =============================================================================
# Common Response Patterns
# =============================================================================


class SuccessResponse(StrictResponse):
    """
    Simple success response for operations without complex output.

    Example usage:
        @router.delete("/goals/{goal_id}", response_model=SuccessResponse)
        async def delete_goal(goal_id: str):
            # ... delete logic
            return SuccessResponse(message="Goal deleted")
    """

    success: bool = True
    message: str
