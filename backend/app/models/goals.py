"""
Goal Tracking Models (Pydantic)

Schemas for user study goals, their derived progress, and reminders.

Data flows:
    API Request → GoalCreate/GoalUpdate → GoalsService → GoalRepository
    GoalRepository → Goal → progress engine → GoalProgress / Reminder

GoalProgress and Reminder are derived values: they are computed fresh from a
goal and a session snapshot on every query and are never stored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.enums.goals import GoalPeriod, GoalType, ReminderSeverity
from app.models.base import StrictRequest, ensure_utc


def _normalize_datetime(value: Any) -> Any:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


class Goal(BaseModel):
    """
    A stored study goal.

    target is unconstrained on stored goals. The progress engine rejects
    invalid goals with InvalidGoalError; request models require target > 0.
    """

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    id: str
    name: str = "Study Goal"
    type: GoalType = GoalType.SESSION_COUNT
    target: float = 5
    period: GoalPeriod = GoalPeriod.WEEKLY
    start_date: Optional[datetime] = Field(None, description="Period anchor")
    is_active: bool = True
    reminder_enabled: bool = True
    reminder_time: str = "09:00"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_date", "created_at", "updated_at", mode="after")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _normalize_datetime(value)


class GoalCreate(StrictRequest):
    """
    Request to create a goal.

    Omitted fields fall back to the configured goal defaults
    (config/default.yaml, goals.defaults).
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[GoalType] = None
    target: Optional[float] = Field(None, gt=0)
    period: Optional[GoalPeriod] = None
    start_date: Optional[datetime] = None
    reminder_enabled: Optional[bool] = None
    reminder_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")


class GoalUpdate(StrictRequest):
    """Partial update of a goal. Only supplied fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[GoalType] = None
    target: Optional[float] = Field(None, gt=0)
    period: Optional[GoalPeriod] = None
    start_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    reminder_enabled: Optional[bool] = None
    reminder_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")


class GoalProgress(BaseModel):
    """
    Progress of a goal over its active period.

    period_start/period_end bound the window sessions were counted in
    (end exclusive). For day_streak goals the window is informational only;
    the streak is computed over all sessions.
    """

    current: int = 0
    target: float
    percentage: int = Field(0, ge=0, le=100)
    is_completed: bool = False
    days_remaining: int = Field(0, ge=0)
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None

    @property
    def remaining(self) -> float:
        """Amount still needed to reach the target (never negative)."""
        return max(0.0, self.target - self.current)


class GoalWithProgress(Goal):
    """An active goal together with its freshly computed progress."""

    progress: GoalProgress


class Reminder(BaseModel):
    """
    A reminder to show for a goal.

    Dismissal state is owned by the caller, keyed by goal_id.
    """

    goal_id: str
    goal_name: str
    severity: ReminderSeverity
    title: str
    message: str
    progress: GoalProgress
