"""
Goal Tracking Enums

Defines goal types, goal periods, and reminder severities used by the
goal progress engine and the reminder policy.
"""

from enum import Enum


class GoalType(str, Enum):
    """
    Which aggregate of study sessions a goal measures.

    - SESSION_COUNT: completed (analyzed) sessions in the period
    - TIME_MINUTES: minutes studied in the period
    - AVERAGE_MASTERY: mean mastery score of sessions in the period
    - DAY_STREAK: current consecutive-day streak (ignores the period)
    """

    SESSION_COUNT = "session_count"
    TIME_MINUTES = "time_minutes"
    AVERAGE_MASTERY = "average_mastery"
    DAY_STREAK = "day_streak"

    @property
    def unit(self) -> str:
        """Unit label used in reminder messages."""
        return _GOAL_UNITS[self]


_GOAL_UNITS = {
    GoalType.SESSION_COUNT: "sessions",
    GoalType.TIME_MINUTES: "minutes",
    GoalType.AVERAGE_MASTERY: "mastery points",
    GoalType.DAY_STREAK: "streak days",
}


class GoalPeriod(str, Enum):
    """
    Recurring period a goal is measured over (UTC calendar boundaries).
    """

    DAILY = "daily"  # Calendar day
    WEEKLY = "weekly"  # Monday 00:00 to next Monday 00:00
    MONTHLY = "monthly"  # 1st of month to 1st of next month


class ReminderSeverity(str, Enum):
    """
    Severity of a goal reminder, from most to least pressing.
    """

    URGENT = "urgent"  # Last day of the period
    WARNING = "warning"  # One day left
    INFO = "info"  # Behind pace with a few days left
    SUCCESS = "success"  # Goal reached
