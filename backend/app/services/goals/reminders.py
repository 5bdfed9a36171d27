"""
Goal Reminder Policy

Decides whether a goal needs a reminder and builds the reminder shown to the
learner. Both functions are pure; showing reminders and remembering which
ones were dismissed is up to the caller.

Reminder rules (goal not completed, reminders enabled), any of:
- last day of the period and progress < 100%
- at most one day left and progress < 80%
- at most two days left and progress < 50%

Message severity, first match wins:
- completed → success
- days_remaining <= 0 → urgent
- days_remaining <= 1 → warning
- percentage < 50 and days_remaining <= 3 → info
"""

from typing import Optional

from app.enums.goals import GoalType, ReminderSeverity
from app.models.goals import Goal, GoalProgress, Reminder


def should_remind(goal: Goal, progress: GoalProgress) -> bool:
    """Whether a reminder is due for this goal."""
    if progress.is_completed or not goal.reminder_enabled:
        return False

    days, percentage = progress.days_remaining, progress.percentage

    if days <= 0 and percentage < 100:
        return True
    if days <= 1 and percentage < 80:
        return True
    if days <= 2 and percentage < 50:
        return True

    return False


def format_amount(value: float) -> str:
    """Render an amount without a trailing .0 for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def reminder_message(goal: Goal, progress: GoalProgress) -> Optional[Reminder]:
    """
    Build the reminder for a goal, or None when nothing needs saying.

    Messages name the remaining amount (target - current) and the unit of
    the goal type.
    """
    remaining = format_amount(progress.remaining)
    unit = GoalType(goal.type).unit
    days = progress.days_remaining

    if progress.is_completed:
        severity = ReminderSeverity.SUCCESS
        title = "Goal Completed!"
        message = f"You've achieved \"{goal.name}\"!"
    elif days <= 0:
        severity = ReminderSeverity.URGENT
        title = "Last Day!"
        message = f"Today is the last day to complete {remaining} more {unit}!"
    elif days <= 1:
        severity = ReminderSeverity.WARNING
        title = "Almost There!"
        message = f"Only {days} day left! You need {remaining} more {unit}."
    elif progress.percentage < 50 and days <= 3:
        severity = ReminderSeverity.INFO
        title = "Keep Going!"
        message = f"{days} days left. Complete {remaining} more {unit} to reach your goal!"
    else:
        return None

    return Reminder(
        goal_id=goal.id,
        goal_name=goal.name,
        severity=severity,
        title=title,
        message=message,
        progress=progress,
    )
