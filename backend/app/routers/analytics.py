"""
Analytics API Router

Endpoints for descriptive learning analytics over a user's sessions.

Endpoints:
- GET /api/analytics/insights - Aggregate learning insights
- GET /api/analytics/streak - Practice streak summary
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from app.dependencies import CurrentUserId, get_now, get_session_repository
from app.middleware.error_handling import handle_endpoint_errors
from app.models.analytics import Insights, StreakSummary
from app.services.analytics import compute_insights
from app.services.goals.streak import summarize_streak
from app.services.sessions import SessionRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/analytics", tags=["analytics"])


# ===========================================
# Insight Endpoints
# ===========================================


@router.get("/insights", response_model=Insights)
@handle_endpoint_errors("Get insights")
async def get_insights(
    user_id: str = CurrentUserId,
    now: datetime = Depends(get_now),
    repo: SessionRepository = Depends(get_session_repository),
) -> Insights:
    """
    Get learning insights.

    Returns:
    - Most frequent confusion category
    - Strongest area and growth opportunity
    - Focus concepts and recent wins
    - Study momentum and learning trend
    """
    sessions = await repo.list_sessions(user_id)
    return compute_insights(sessions, now)


# ===========================================
# Streak Endpoints
# ===========================================


@router.get("/streak", response_model=StreakSummary)
@handle_endpoint_errors("Get streak")
async def get_streak(
    user_id: str = CurrentUserId,
    now: datetime = Depends(get_now),
    repo: SessionRepository = Depends(get_session_repository),
) -> StreakSummary:
    """
    Get practice streak information.

    Returns current and longest streaks, practice days this week and
    month, and milestones reached.
    """
    sessions = await repo.list_sessions(user_id)
    return summarize_streak(sessions, now)
