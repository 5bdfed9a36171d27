"""
Goal Repository

Stores user study goals: create, list (newest first), get, update, delete,
and toggle active. Goals never auto-expire; their periods roll forward with
the current time when progress is computed.

Creation defaults come from config/default.yaml (goals.defaults), falling
back to a weekly five-session goal with reminders enabled.
"""

import logging
import random
import string
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from app.config import yaml_config
from app.middleware.error_handling import NotFoundError
from app.models.goals import Goal, GoalCreate, GoalUpdate
from app.services.goals.progress import coerce_goal
from app.services.storage import RecordStore

logger = logging.getLogger(__name__)

GOALS_KIND = "goals"

_ID_ALPHABET = string.digits + string.ascii_lowercase

FALLBACK_GOAL_DEFAULTS: dict[str, Any] = {
    "name": "Study Goal",
    "type": "session_count",
    "target": 5,
    "period": "weekly",
    "reminder_enabled": True,
    "reminder_time": "09:00",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def goal_defaults() -> dict[str, Any]:
    """Goal creation defaults, configured values overriding the fallbacks."""
    configured = yaml_config.get("goals", {}).get("defaults", {}) or {}
    return {**FALLBACK_GOAL_DEFAULTS, **configured}


def generate_goal_id(now: datetime) -> str:
    """Goal id: "goal-", epoch milliseconds, and 6 random base36 characters."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return f"goal-{int(now.timestamp() * 1000)}-{suffix}"


class GoalRepository:
    """
    Per-user goal collection on top of a RecordStore.

    Args:
        store: Storage backend.
        clock: Source of the current time (injectable for tests).
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self.clock = clock

    async def list_goals(self, user_id: str) -> list[Goal]:
        """
        All of a user's goals, newest first.

        Stored records that no longer parse (e.g. an unknown goal type) are
        skipped with a warning.
        """
        records = await self.store.get_all(GOALS_KIND, user_id)
        goals = []
        for record in records.values():
            try:
                goals.append(Goal.model_validate(record))
            except PydanticValidationError as e:
                logger.warning(f"Skipping unreadable goal {record.get('id')} for user {user_id}: {e}")

        return sorted(
            goals,
            key=lambda g: g.created_at.timestamp() if g.created_at else float("-inf"),
            reverse=True,
        )

    async def get_goal(self, user_id: str, goal_id: str) -> Goal:
        """
        Get one goal.

        Raises:
            NotFoundError: No goal with this id.
            InvalidGoalError: The stored record is not a valid goal.
        """
        record = await self.store.get(GOALS_KIND, user_id, goal_id)
        if record is None:
            raise NotFoundError(f"Goal {goal_id} not found")
        return coerce_goal(record)

    async def create_goal(self, user_id: str, request: GoalCreate) -> Goal:
        """Create a goal, filling omitted fields from the configured defaults."""
        now = self.clock()
        data = {
            **goal_defaults(),
            **request.model_dump(exclude_none=True),
        }
        data.setdefault("start_date", now)
        goal = Goal.model_validate(
            {
                **data,
                "id": generate_goal_id(now),
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
        )

        await self.store.put(GOALS_KIND, user_id, goal.id, goal.model_dump(mode="json"))
        logger.info(f"Goal created: {goal.id} ({goal.type.value}, target={goal.target}) for user {user_id}")
        return goal

    async def update_goal(self, user_id: str, goal_id: str, update: GoalUpdate) -> Goal:
        """
        Apply a partial update.

        Raises:
            NotFoundError: No goal with this id.
        """
        goal = await self.get_goal(user_id, goal_id)
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        updated = Goal.model_validate(
            {**goal.model_dump(), **changes, "updated_at": self.clock()}
        )

        await self.store.put(GOALS_KIND, user_id, goal_id, updated.model_dump(mode="json"))
        logger.info(f"Goal updated: {goal_id} ({', '.join(sorted(changes)) or 'no changes'})")
        return updated

    async def delete_goal(self, user_id: str, goal_id: str) -> None:
        """
        Delete a goal.

        Raises:
            NotFoundError: No goal with this id.
        """
        if not await self.store.delete(GOALS_KIND, user_id, goal_id):
            raise NotFoundError(f"Goal {goal_id} not found")
        logger.info(f"Goal deleted: {goal_id}")

    async def toggle_goal_active(self, user_id: str, goal_id: str) -> Goal:
        """Flip a goal between active and inactive."""
        goal = await self.get_goal(user_id, goal_id)
        return await self.update_goal(user_id, goal_id, GoalUpdate(is_active=not goal.is_active))
