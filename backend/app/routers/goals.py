"""
Goals API Router

Endpoints for study goals, their progress, and reminders.

Endpoints:
- GET /api/goals - List goals (newest first)
- POST /api/goals - Create a goal
- GET /api/goals/progress - Active goals with progress
- GET /api/goals/reminders - Reminders currently due
- PATCH /api/goals/{goal_id} - Update a goal
- POST /api/goals/{goal_id}/toggle - Toggle active status
- DELETE /api/goals/{goal_id} - Delete a goal
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from app.dependencies import (
    CurrentUserId,
    get_goal_repository,
    get_goals_service,
    get_now,
)
from app.middleware.error_handling import handle_endpoint_errors
from app.models.base import SuccessResponse
from app.models.goals import (
    Goal,
    GoalCreate,
    GoalUpdate,
    GoalWithProgress,
    Reminder,
)
from app.services.goals.repository import GoalRepository
from app.services.goals.service import GoalsService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=list[Goal])
@handle_endpoint_errors("List goals")
async def list_goals(
    user_id: str = CurrentUserId,
    repo: GoalRepository = Depends(get_goal_repository),
) -> list[Goal]:
    """List all of the user's goals, active or not."""
    return await repo.list_goals(user_id)


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
@handle_endpoint_errors("Create goal")
async def create_goal(
    request: GoalCreate,
    user_id: str = CurrentUserId,
    repo: GoalRepository = Depends(get_goal_repository),
) -> Goal:
    """Create a goal. Omitted fields use the configured defaults."""
    return await repo.create_goal(user_id, request)


@router.get("/progress", response_model=list[GoalWithProgress])
@handle_endpoint_errors("Get goal progress")
async def get_goals_progress(
    user_id: str = CurrentUserId,
    now: datetime = Depends(get_now),
    service: GoalsService = Depends(get_goals_service),
) -> list[GoalWithProgress]:
    """
    Active goals with progress for their current period.

    Invalid goals are left out of the listing.
    """
    return await service.goals_with_progress(user_id, now)


@router.get("/reminders", response_model=list[Reminder])
@handle_endpoint_errors("Check goal reminders")
async def get_goal_reminders(
    dismissed: list[str] = Query(
        [], description="Goal ids whose reminders were dismissed"
    ),
    user_id: str = CurrentUserId,
    now: datetime = Depends(get_now),
    service: GoalsService = Depends(get_goals_service),
) -> list[Reminder]:
    """Reminders currently due, excluding dismissed goals."""
    return await service.check_reminders(user_id, now, dismissed=frozenset(dismissed))


@router.patch("/{goal_id}", response_model=Goal)
@handle_endpoint_errors("Update goal")
async def update_goal(
    goal_id: str,
    update: GoalUpdate,
    user_id: str = CurrentUserId,
    repo: GoalRepository = Depends(get_goal_repository),
) -> Goal:
    """Partially update a goal."""
    return await repo.update_goal(user_id, goal_id, update)


@router.post("/{goal_id}/toggle", response_model=Goal)
@handle_endpoint_errors("Toggle goal")
async def toggle_goal(
    goal_id: str,
    user_id: str = CurrentUserId,
    repo: GoalRepository = Depends(get_goal_repository),
) -> Goal:
    """Toggle a goal between active and inactive."""
    return await repo.toggle_goal_active(user_id, goal_id)


@router.delete("/{goal_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete goal")
async def delete_goal(
    goal_id: str,
    user_id: str = CurrentUserId,
    repo: GoalRepository = Depends(get_goal_repository),
) -> SuccessResponse:
    """Delete a goal."""
    await repo.delete_goal(user_id, goal_id)
    return SuccessResponse(message=f"Goal {goal_id} deleted")
