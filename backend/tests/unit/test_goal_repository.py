"""
Unit Tests for the Goal Repository.

Tests goal CRUD on top of the in-memory record store:
- Creation defaults (config/default.yaml with built-in fallbacks)
- Partial updates and active toggling
- Ordering and not-found handling
"""

from datetime import timedelta
from unittest.mock import patch

import pytest

from app.enums.goals import GoalPeriod, GoalType
from app.middleware.error_handling import InvalidGoalError, NotFoundError
from app.models.goals import GoalCreate, GoalUpdate
from app.services.goals.repository import (
    FALLBACK_GOAL_DEFAULTS,
    GOALS_KIND,
    GoalRepository,
    goal_defaults,
)


@pytest.fixture
def repo(memory_store, now) -> GoalRepository:
    """Goal repository over a fresh store with a fixed clock."""
    return GoalRepository(memory_store, clock=lambda: now)


class TestGoalDefaults:
    """Tests for goal_defaults."""

    def test_configured_values_override_fallbacks(self) -> None:
        """YAML defaults take precedence over built-in ones."""
        config = {"goals": {"defaults": {"target": 10, "period": "daily"}}}

        with patch("app.services.goals.repository.yaml_config", config):
            defaults = goal_defaults()

        assert defaults["target"] == 10
        assert defaults["period"] == "daily"
        assert defaults["type"] == FALLBACK_GOAL_DEFAULTS["type"]

    def test_missing_config_uses_fallbacks(self) -> None:
        """No goals section means the built-in defaults."""
        with patch("app.services.goals.repository.yaml_config", {}):
            assert goal_defaults() == FALLBACK_GOAL_DEFAULTS


class TestCreateGoal:
    """Tests for GoalRepository.create_goal."""

    @pytest.mark.asyncio
    async def test_defaults_applied(self, repo, now) -> None:
        """An empty request creates the default weekly session goal."""
        with patch("app.services.goals.repository.yaml_config", {}):
            goal = await repo.create_goal("u", GoalCreate())

        assert goal.id.startswith("goal-")
        assert goal.name == "Study Goal"
        assert goal.type == GoalType.SESSION_COUNT
        assert goal.target == 5
        assert goal.period == GoalPeriod.WEEKLY
        assert goal.is_active is True
        assert goal.reminder_enabled is True
        assert goal.start_date == now
        assert goal.created_at == now

    @pytest.mark.asyncio
    async def test_request_fields_win(self, repo, now) -> None:
        """Supplied fields override the defaults."""
        start = now - timedelta(days=3)

        goal = await repo.create_goal(
            "u",
            GoalCreate(
                name="Read daily",
                type=GoalType.TIME_MINUTES,
                target=30,
                period=GoalPeriod.DAILY,
                start_date=start,
                reminder_enabled=False,
            ),
        )

        assert goal.name == "Read daily"
        assert goal.type == GoalType.TIME_MINUTES
        assert goal.target == 30
        assert goal.start_date == start
        assert goal.reminder_enabled is False

    @pytest.mark.asyncio
    async def test_persisted(self, repo, memory_store) -> None:
        """Created goals are stored under the user."""
        goal = await repo.create_goal("u", GoalCreate(target=3))

        stored = await memory_store.get(GOALS_KIND, "u", goal.id)

        assert stored["target"] == 3
        assert [g.id for g in await repo.list_goals("u")] == [goal.id]


class TestListGoals:
    """Tests for GoalRepository.list_goals."""

    @pytest.mark.asyncio
    async def test_newest_first(self, memory_store, now) -> None:
        """Goals are ordered by creation time, newest first."""
        older = GoalRepository(memory_store, clock=lambda: now - timedelta(days=2))
        newer = GoalRepository(memory_store, clock=lambda: now)

        first = await older.create_goal("u", GoalCreate(name="first"))
        second = await newer.create_goal("u", GoalCreate(name="second"))

        assert [g.id for g in await newer.list_goals("u")] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_unreadable_goal_skipped(self, repo, memory_store) -> None:
        """Stored goals with an unknown type are skipped."""
        await memory_store.put(GOALS_KIND, "u", "bad", {"id": "bad", "type": "pages_read"})
        goal = await repo.create_goal("u", GoalCreate())

        assert [g.id for g in await repo.list_goals("u")] == [goal.id]


class TestUpdateGoal:
    """Tests for update, toggle, and delete."""

    @pytest.mark.asyncio
    async def test_partial_update(self, repo, memory_store, now) -> None:
        """Only supplied fields change, and updated_at moves forward."""
        goal = await repo.create_goal("u", GoalCreate(name="Weekly", target=5))
        later = GoalRepository(memory_store, clock=lambda: now + timedelta(hours=1))

        updated = await later.update_goal("u", goal.id, GoalUpdate(target=8))

        assert updated.target == 8
        assert updated.name == "Weekly"
        assert updated.created_at == now
        assert updated.updated_at == now + timedelta(hours=1)

    @pytest.mark.asyncio
    async def test_toggle_active(self, repo) -> None:
        """Toggling flips is_active each time."""
        goal = await repo.create_goal("u", GoalCreate())

        assert (await repo.toggle_goal_active("u", goal.id)).is_active is False
        assert (await repo.toggle_goal_active("u", goal.id)).is_active is True

    @pytest.mark.asyncio
    async def test_delete(self, repo) -> None:
        """Deleted goals can no longer be fetched."""
        goal = await repo.create_goal("u", GoalCreate())

        await repo.delete_goal("u", goal.id)

        with pytest.raises(NotFoundError):
            await repo.get_goal("u", goal.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "record",
        [
            pytest.param({"id": "bad", "type": "pages_read"}, id="unknown_type"),
            pytest.param({"id": "bad", "target": 0}, id="zero_target"),
        ],
    )
    async def test_unreadable_goal_is_invalid(self, repo, memory_store, record: dict) -> None:
        """Stored records that aren't valid goals raise InvalidGoalError."""
        await memory_store.put(GOALS_KIND, "u", "bad", record)

        with pytest.raises(InvalidGoalError):
            await repo.get_goal("u", "bad")
        with pytest.raises(InvalidGoalError):
            await repo.toggle_goal_active("u", "bad")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["update", "toggle", "delete"])
    async def test_missing_goal_raises(self, repo, operation: str) -> None:
        """Operations on unknown goals raise NotFoundError."""
        with pytest.raises(NotFoundError):
            if operation == "update":
                await repo.update_goal("u", "nope", GoalUpdate(target=2))
            elif operation == "toggle":
                await repo.toggle_goal_active("u", "nope")
            else:
                await repo.delete_goal("u", "nope")
