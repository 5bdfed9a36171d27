"""
FastAPI Dependencies

Common dependencies for user identification, repositories, and services.

Repositories are injected per request; the record store behind them is a
process-wide singleton chosen by settings.STORAGE_BACKEND. Tests override
get_store and get_now (via app.dependency_overrides) for an isolated store
and a fixed clock.
"""

from datetime import datetime, timezone

from fastapi import Depends, Header, HTTPException, status

from app.services.goals.repository import GoalRepository
from app.services.goals.service import GoalsService
from app.services.sessions import SessionRepository
from app.services.storage import RecordStore, get_record_store


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> str:
    """
    Identify the user whose records a request operates on.

    Authentication happens upstream; this service only needs the user id
    the caller was authenticated as.

    Raises:
        HTTPException: 401 if the X-User-Id header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user id. Provide X-User-Id header.",
        )
    return x_user_id.strip()


def get_store() -> RecordStore:
    """Record store used by the repositories."""
    return get_record_store()


def get_session_repository(
    store: RecordStore = Depends(get_store),
) -> SessionRepository:
    """Get the session repository."""
    return SessionRepository(store)


def get_goal_repository(
    store: RecordStore = Depends(get_store),
) -> GoalRepository:
    """Get the goal repository."""
    return GoalRepository(store)


def get_goals_service(
    goals: GoalRepository = Depends(get_goal_repository),
    sessions: SessionRepository = Depends(get_session_repository),
) -> GoalsService:
    """Get the goals service."""
    return GoalsService(goals, sessions)


def get_now() -> datetime:
    """Reference instant for progress and analytics computations."""
    return datetime.now(timezone.utc)


# Dependency that can be used in routers
CurrentUserId = Depends(get_current_user_id)
