"""
Goals Service

Orchestrates the goal repository, the session repository, and the pure
progress/reminder engine for one user.

Responsibilities:
- Goal CRUD (delegated to GoalRepository)
- Active goals with freshly computed progress
- Reminder checks across all active goals

Invalid goals (non-positive target, unknown type/period) are skipped with a
warning so one bad goal never hides the others.

Usage:
    from app.services.goals.service import GoalsService

    service = GoalsService(goal_repo, session_repo)
    goals = await service.goals_with_progress(user_id, now)
    reminders = await service.check_reminders(user_id, now, dismissed={"goal-1"})
"""

import logging
from datetime import datetime
from typing import AbstractSet, Iterable

from app.middleware.error_handling import InvalidGoalError
from app.models.goals import Goal, GoalWithProgress, Reminder
from app.models.sessions import StudySession
from app.services.goals.progress import compute_progress
from app.services.goals.reminders import reminder_message, should_remind
from app.services.goals.repository import GoalRepository
from app.services.sessions import SessionRepository

logger = logging.getLogger(__name__)


def build_goals_with_progress(
    goals: Iterable[Goal],
    sessions: list[StudySession],
    now: datetime,
) -> list[GoalWithProgress]:
    """Attach progress to every active goal, skipping invalid ones."""
    results = []
    for goal in goals:
        if not goal.is_active:
            continue
        try:
            progress = compute_progress(goal, sessions, now)
        except InvalidGoalError as e:
            logger.warning(f"Skipping invalid goal {goal.id}: {e.message}")
            continue
        results.append(GoalWithProgress(**goal.model_dump(), progress=progress))
    return results


def build_reminders(
    goals: Iterable[Goal],
    sessions: list[StudySession],
    now: datetime,
    dismissed: AbstractSet[str] = frozenset(),
) -> list[Reminder]:
    """
    Reminders due for active, reminder-enabled goals not already dismissed.
    """
    reminders = []
    for goal in goals:
        if not goal.is_active or not goal.reminder_enabled or goal.id in dismissed:
            continue
        try:
            progress = compute_progress(goal, sessions, now)
        except InvalidGoalError as e:
            logger.warning(f"Skipping reminder check for invalid goal {goal.id}: {e.message}")
            continue

        if should_remind(goal, progress):
            reminder = reminder_message(goal, progress)
            if reminder is not None:
                reminders.append(reminder)

    return reminders


class GoalsService:
    """
    Goal operations for a single request.

    Each query re-reads the session snapshot, so progress always reflects
    the latest session mutations.
    """

    def __init__(self, goals: GoalRepository, sessions: SessionRepository):
        self.goals = goals
        self.sessions = sessions

    async def goals_with_progress(self, user_id: str, now: datetime) -> list[GoalWithProgress]:
        """Active goals with their current progress."""
        goals = await self.goals.list_goals(user_id)
        sessions = await self.sessions.list_sessions(user_id)
        return build_goals_with_progress(goals, sessions, now)

    async def check_reminders(
        self,
        user_id: str,
        now: datetime,
        dismissed: AbstractSet[str] = frozenset(),
    ) -> list[Reminder]:
        """Reminders currently due for the user's goals."""
        goals = await self.goals.list_goals(user_id)
        sessions = await self.sessions.list_sessions(user_id)
        reminders = build_reminders(goals, sessions, now, dismissed)
        if reminders:
            logger.info(f"{len(reminders)} goal reminders due for user {user_id}")
        return reminders
