"""
Streak Tracking

Computes study streaks from a snapshot of study sessions.

Responsibilities:
- Calculate the current streak (anchored at today or yesterday)
- Calculate the longest streak ever achieved
- Summarize streak milestones and recent activity counts

Timezone policy:
    A session's day is its timestamp's UTC calendar date, and "today" is
    now's UTC date. The same policy is used for goal period windows.

Usage:
    from app.services.goals.streak import compute_streak, summarize_streak

    streak = compute_streak(sessions, now)
    summary = summarize_streak(sessions, now)
"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from app.config import settings
from app.models.analytics import StreakSummary
from app.models.sessions import StudySession


def session_day(timestamp: datetime) -> date:
    """UTC calendar date of a timestamp."""
    return timestamp.astimezone(timezone.utc).date()


def practice_dates(sessions: Iterable[StudySession]) -> list[date]:
    """
    Distinct dates with at least one completed session.

    Only sessions with analysis_complete and a timestamp count.

    Returns:
        list[date]: Unique dates in descending order (most recent first).
    """
    dates = {
        session_day(s.timestamp)
        for s in sessions
        if s.analysis_complete and s.timestamp is not None
    }
    return sorted(dates, reverse=True)


def _current_streak(dates: set[date], today: date) -> tuple[int, Optional[date]]:
    """
    Count consecutive practice days from today (or yesterday).

    The streak remains valid if the user studied yesterday but hasn't
    studied yet today.

    Returns:
        tuple[int, Optional[date]]: (streak_count, streak_start_date)
    """
    yesterday = today - timedelta(days=1)
    if today in dates:
        check = today
    elif yesterday in dates:
        check = yesterday
    else:
        return 0, None

    streak = 0
    streak_start = None
    while check in dates:
        streak += 1
        streak_start = check
        check -= timedelta(days=1)

    return streak, streak_start


def compute_streak(sessions: Iterable[StudySession], now: datetime) -> int:
    """
    Current run of consecutive days containing a completed session.

    Args:
        sessions: Session snapshot (not modified).
        now: Reference instant; today is its UTC date.

    Returns:
        int: 0 if neither today nor yesterday has a completed session,
        otherwise the number of consecutive days ending at the later of the two.
    """
    dates = set(practice_dates(sessions))
    streak, _ = _current_streak(dates, session_day(now))
    return streak


def compute_longest_streak(dates: Iterable[date]) -> int:
    """
    Calculate the longest practice streak ever achieved.

    Args:
        dates: Practice dates in any order (duplicates allowed).

    Returns:
        int: Length of the longest consecutive run.
    """
    sorted_dates = sorted(set(dates))
    if not sorted_dates:
        return 0

    longest = 1
    current = 1

    for i in range(1, len(sorted_dates)):
        if sorted_dates[i] == sorted_dates[i - 1] + timedelta(days=1):
            current += 1
            longest = max(longest, current)
        else:
            current = 1

    return longest


def count_days_in_period(dates: Iterable[date], today: date, days: int) -> int:
    """
    Count unique practice days within the last `days` days (inclusive of today).
    """
    cutoff = today - timedelta(days=days - 1)
    return len({d for d in dates if cutoff <= d <= today})


def summarize_streak(sessions: Iterable[StudySession], now: datetime) -> StreakSummary:
    """
    Build a detailed streak summary for gamification views.

    Milestones come from settings.STREAK_MILESTONES.
    """
    dates = practice_dates(sessions)
    milestones = sorted(settings.STREAK_MILESTONES)

    if not dates:
        return StreakSummary(next_milestone=milestones[0] if milestones else None)

    today = session_day(now)
    current, streak_start = _current_streak(set(dates), today)
    longest = compute_longest_streak(dates)

    return StreakSummary(
        current_streak=current,
        longest_streak=longest,
        streak_start=streak_start,
        last_practice=dates[0],
        is_active_today=dates[0] == today,
        days_this_week=count_days_in_period(dates, today, 7),
        days_this_month=count_days_in_period(dates, today, 30),
        milestones_reached=[m for m in milestones if longest >= m],
        next_milestone=next((m for m in milestones if m > current), None),
    )
