"""
Centralized enum definitions for the application.

All enums are organized by domain:
- goals.py: Goal types, goal periods, reminder severities
- analytics.py: Learning trend directions

Usage:
    from app.enums import GoalType, GoalPeriod, ReminderSeverity

    # Or import from specific module
    from app.enums.analytics import LearningTrend
"""

from app.enums.goals import (
    GoalType,
    GoalPeriod,
    ReminderSeverity,
)
from app.enums.analytics import (
    LearningTrend,
)

__all__ = [
    # Goals
    "GoalType",
    "GoalPeriod",
    "ReminderSeverity",
    # Analytics
    "LearningTrend",
]
