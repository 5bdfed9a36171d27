"""Pydantic models for the application."""

from app.models.analytics import (
    CategoryMastery,
    ConceptMastery,
    ConfusionFrequency,
    Insights,
    StreakSummary,
    StudyMomentum,
    TrendInsight,
)
from app.models.base import StrictRequest, StrictResponse, SuccessResponse
from app.models.goals import (
    Goal,
    GoalCreate,
    GoalProgress,
    GoalUpdate,
    GoalWithProgress,
    Reminder,
)
from app.models.sessions import (
    SessionCreate,
    SessionProgressUpdate,
    SessionSyncRequest,
    SessionSyncResponse,
    StudySession,
)

__all__ = [
    "CategoryMastery",
    "ConceptMastery",
    "ConfusionFrequency",
    "Goal",
    "GoalCreate",
    "GoalProgress",
    "GoalUpdate",
    "GoalWithProgress",
    "Insights",
    "Reminder",
    "SessionCreate",
    "SessionProgressUpdate",
    "SessionSyncRequest",
    "SessionSyncResponse",
    "StreakSummary",
    "StrictRequest",
    "StrictResponse",
    "StudyMomentum",
    "StudySession",
    "SuccessResponse",
    "TrendInsight",
]
