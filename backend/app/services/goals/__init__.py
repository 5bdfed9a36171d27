"""
Goal Tracking Services

Goal progress, streaks, and reminders over a learner's study sessions.

Modules:
- progress: period windows and goal progress (pure)
- streak: current/longest streak and streak summary (pure)
- reminders: reminder policy and messages (pure)
- repository: goal storage
- service: goal orchestration for one user

Usage:
    from app.services.goals import (
        compute_progress,
        compute_streak,
        should_remind,
        reminder_message,
        GoalsService,
    )
"""

from app.services.goals.progress import (
    coerce_goal,
    compute_progress,
    period_window,
    validate_goal,
)
from app.services.goals.streak import (
    compute_longest_streak,
    compute_streak,
    summarize_streak,
)
from app.services.goals.reminders import reminder_message, should_remind
from app.services.goals.repository import GoalRepository
from app.services.goals.service import GoalsService

__all__ = [
    # Progress
    "coerce_goal",
    "compute_progress",
    "period_window",
    "validate_goal",
    # Streaks
    "compute_longest_streak",
    "compute_streak",
    "summarize_streak",
    # Reminders
    "reminder_message",
    "should_remind",
    # Orchestration
    "GoalRepository",
    "GoalsService",
]
