"""
Goal Progress Engine

Computes a goal's progress over its active period from a snapshot of study
sessions. Every function here is pure: the caller passes the session
snapshot and the reference instant (`now`), and nothing is cached between
calls.

Period windows (UTC, end exclusive):
- daily: the calendar day containing the reference instant
- weekly: Monday 00:00 to the following Monday 00:00
- monthly: the 1st of the month to the 1st of the next month

Periods roll forward with `now`, so goals never expire. A goal's start_date
anchors its first period: if it lies in the future the first period is the
one containing start_date, and if it falls inside the current period the
window starts at start_date (sessions before the goal existed don't count).

Usage:
    from app.services.goals.progress import compute_progress

    progress = compute_progress(goal, sessions, now=datetime.now(timezone.utc))
"""

import math
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.enums.goals import GoalPeriod, GoalType
from app.middleware.error_handling import InvalidGoalError
from app.models.base import ensure_utc
from app.models.goals import Goal, GoalProgress
from app.models.sessions import StudySession
from app.services.goals.streak import compute_streak

SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


# =============================================================================
# Validation
# =============================================================================


def validate_goal(goal: Goal) -> Goal:
    """
    Check the invariants the engine relies on.

    Raises:
        InvalidGoalError: target <= 0, or unknown type/period.
    """
    try:
        GoalType(goal.type)
        GoalPeriod(goal.period)
    except ValueError as e:
        raise InvalidGoalError(
            f"Goal {goal.id} has an unknown type or period",
            details={"type": str(goal.type), "period": str(goal.period)},
        ) from e

    if not goal.target > 0:
        raise InvalidGoalError(
            f"Goal {goal.id} target must be positive",
            details={"target": goal.target},
        )

    return goal


def coerce_goal(data: Union[Goal, Mapping[str, Any]]) -> Goal:
    """
    Build a validated Goal from a stored record.

    Raises:
        InvalidGoalError: The record doesn't describe a valid goal.
    """
    if isinstance(data, Goal):
        return validate_goal(data)

    try:
        goal = Goal.model_validate(dict(data))
    except PydanticValidationError as e:
        raise InvalidGoalError(
            f"Goal {data.get('id', '<unknown>')} is malformed",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e

    return validate_goal(goal)


# =============================================================================
# Period Windows
# =============================================================================


def _calendar_start(period: GoalPeriod, reference: datetime) -> datetime:
    day = reference.replace(hour=0, minute=0, second=0, microsecond=0)

    if period == GoalPeriod.DAILY:
        return day
    if period == GoalPeriod.WEEKLY:
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def _calendar_end(period: GoalPeriod, start: datetime) -> datetime:
    if period == GoalPeriod.DAILY:
        return start + timedelta(days=1)
    if period == GoalPeriod.WEEKLY:
        return start + timedelta(days=7)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1, day=1)
    return start.replace(month=start.month + 1, day=1)


def period_window(
    period: GoalPeriod,
    now: datetime,
    start_date: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """
    Active [start, end) window for a goal period.

    Args:
        period: Goal period.
        now: Reference instant.
        start_date: Goal's period anchor, if any.

    Returns:
        tuple[datetime, datetime]: UTC window start (inclusive) and end (exclusive).
    """
    period = GoalPeriod(period)
    now = ensure_utc(now)
    reference = now

    if start_date is not None:
        start_date = ensure_utc(start_date)
        if start_date > now:
            reference = start_date

    start = _calendar_start(period, reference)
    end = _calendar_end(period, start)

    if start_date is not None and start < start_date < end:
        start = start_date

    return start, end


# =============================================================================
# Progress
# =============================================================================


def _aggregate(
    goal_type: GoalType,
    in_period: list[StudySession],
    all_sessions: list[StudySession],
    now: datetime,
) -> int:
    if goal_type == GoalType.SESSION_COUNT:
        return sum(1 for s in in_period if s.analysis_complete)

    if goal_type == GoalType.TIME_MINUTES:
        return sum(s.time_spent for s in in_period)

    if goal_type == GoalType.AVERAGE_MASTERY:
        scores = [s.mastery_score for s in in_period if s.mastery_score is not None]
        return round_half_up(sum(scores) / len(scores)) if scores else 0

    # Streaks ignore the period window
    return compute_streak(all_sessions, now)


def compute_progress(
    goal: Goal,
    sessions: Iterable[StudySession],
    now: datetime,
) -> GoalProgress:
    """
    Compute a goal's progress for its active period.

    Args:
        goal: Goal definition.
        sessions: Full session snapshot for the goal's owner.
        now: Reference instant.

    Returns:
        GoalProgress with current, percentage (capped at 100), completion,
        days remaining, and the window used.

    Raises:
        InvalidGoalError: The goal violates target > 0 or has an unknown type/period.
    """
    validate_goal(goal)
    now = ensure_utc(now)
    all_sessions = list(sessions)

    start, end = period_window(goal.period, now, goal.start_date)
    in_period = [
        s for s in all_sessions if s.timestamp is not None and start <= s.timestamp < end
    ]

    current = _aggregate(GoalType(goal.type), in_period, all_sessions, now)
    target = goal.target
    percentage = min(100, round_half_up(current / target * 100))
    days_remaining = max(0, math.ceil((end - now).total_seconds() / SECONDS_PER_DAY))

    return GoalProgress(
        current=current,
        target=target,
        percentage=percentage,
        is_completed=current >= target,
        days_remaining=days_remaining,
        period_start=start,
        period_end=end,
    )
