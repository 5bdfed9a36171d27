"""
Study Insights

Descriptive analytics over a learner's study sessions. No model calls:
everything here is counting, averaging, and ranking over the session
snapshot the caller passes in.

Valid sessions:
    Every aggregate except study momentum only considers sessions whose
    analysis is complete, that have a mastery score, and whose confusion
    type is present and not "unknown" (case-insensitive).

Tie-breaking:
    Categories and concepts are kept in first-encountered order. When two
    share the top (or bottom) value, the first one encountered wins. Callers
    should not rely on tie order for correctness.

Usage:
    from app.services.analytics.insights import compute_insights

    insights = compute_insights(sessions, now=datetime.now(timezone.utc))
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Iterable, Optional

from app.config import settings
from app.enums.analytics import LearningTrend
from app.models.analytics import (
    CategoryMastery,
    ConceptMastery,
    ConfusionFrequency,
    Insights,
    StudyMomentum,
    TrendInsight,
)
from app.models.base import ensure_utc
from app.models.sessions import StudySession
from app.services.goals.progress import round_half_up

logger = logging.getLogger(__name__)

NO_DATA = "No data yet"
UNKNOWN = "Unknown"


# =============================================================================
# Formatting Helpers
# =============================================================================


def format_confusion_type(category: Optional[str]) -> str:
    """
    Convert a snake_case or camelCase category key to Title Case.

    Example:
        >>> format_confusion_type("missing_prerequisite")
        'Missing Prerequisite'
        >>> format_confusion_type("conceptGap")
        'Concept Gap'
    """
    if not category or category.lower() == "unknown":
        return UNKNOWN

    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", category.replace("_", " "))
    return " ".join(word.capitalize() for word in spaced.split())


def format_time(minutes: float) -> str:
    """
    Render a duration in minutes for display.

    Example:
        >>> format_time(65)
        '1h 5m'
        >>> format_time(0)
        '0 minutes'
    """
    if not minutes or minutes <= 0:
        return "0 minutes"

    hours = int(minutes // 60)
    mins = round_half_up(minutes % 60)
    if hours > 0:
        return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
    return f"{max(mins, 1)} minutes"


def concept_name(session: StudySession) -> str:
    """
    Derive an opaque concept key for a session.

    The first CONCEPT_NAME_MAX_LENGTH characters of the selected text
    (with "..." when truncated), else the source document name.
    """
    text = session.full_selected_text
    if text:
        limit = settings.CONCEPT_NAME_MAX_LENGTH
        name = text[:limit].strip()
        return f"{name}..." if len(text) > limit else name
    return session.pdf_name or "Unknown Concept"


# =============================================================================
# Filters
# =============================================================================


def is_valid_session(session: StudySession) -> bool:
    """Whether a session counts toward mastery/category insights."""
    category = (session.confusion_type or "").strip()
    return (
        session.analysis_complete
        and session.mastery_score is not None
        and bool(category)
        and category.lower() != "unknown"
    )


# =============================================================================
# Aggregates
# =============================================================================


def category_counts(sessions: list[StudySession]) -> dict[str, int]:
    """Frequency of each confusion type, in first-encountered order."""
    counts: dict[str, int] = {}
    for s in sessions:
        counts[s.confusion_type] = counts.get(s.confusion_type, 0) + 1
    return counts


def category_mastery(sessions: list[StudySession]) -> dict[str, int]:
    """Rounded mean mastery per confusion type, in first-encountered order."""
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for s in sessions:
        totals[s.confusion_type] = totals.get(s.confusion_type, 0.0) + s.mastery_score
        counts[s.confusion_type] = counts.get(s.confusion_type, 0) + 1
    return {key: round_half_up(totals[key] / counts[key]) for key in totals}


def concept_mastery(sessions: list[StudySession]) -> list[ConceptMastery]:
    """Mean mastery and attempt count per concept, in first-encountered order."""
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for s in sessions:
        name = concept_name(s)
        totals[name] = totals.get(name, 0.0) + s.mastery_score
        counts[name] = counts.get(name, 0) + 1
    return [
        ConceptMastery(
            concept=name,
            mastery=round_half_up(totals[name] / counts[name]),
            attempts=counts[name],
        )
        for name in totals
    ]


def study_momentum(sessions: list[StudySession], now: datetime) -> StudyMomentum:
    """
    Minutes studied in the trailing window and overall.

    Uses every session, valid or not. Sessions without a timestamp only
    count toward the overall total.
    """
    cutoff = ensure_utc(now) - timedelta(days=settings.ANALYTICS_MOMENTUM_DAYS)
    week_time = sum(
        s.time_spent for s in sessions if s.timestamp is not None and s.timestamp >= cutoff
    )
    total_time = sum(s.time_spent for s in sessions)

    if week_time > 0:
        message = (
            f"You've invested {format_time(week_time)} of focused study in the past "
            "week. That consistency is paying off."
        )
    elif total_time > 0:
        message = (
            f"You've logged {format_time(total_time)} of focused study overall. "
            "Every session builds momentum."
        )
    else:
        message = "Start your first session!"

    return StudyMomentum(week_time=week_time, total_time=total_time, message=message)


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def learning_trend(sessions: list[StudySession]) -> TrendInsight:
    """
    Compare the mean mastery of the most recent sessions with the ones before.

    Sessions are ordered newest first (missing timestamps last). The recent
    window is the first ANALYTICS_TREND_WINDOW sessions and the previous
    window the next ANALYTICS_TREND_WINDOW; if either is empty the trend is
    steady.
    """
    window = settings.ANALYTICS_TREND_WINDOW
    threshold = settings.ANALYTICS_TREND_THRESHOLD

    ordered = sorted(
        sessions,
        key=lambda s: (s.timestamp is not None, s.timestamp.timestamp() if s.timestamp else 0.0),
        reverse=True,
    )
    recent = [s.mastery_score for s in ordered[:window]]
    previous = [s.mastery_score for s in ordered[window : window * 2]]

    trend = LearningTrend.STEADY
    recent_avg = previous_avg = None
    if recent and previous:
        recent_avg = _mean(recent)
        previous_avg = _mean(previous)
        if recent_avg > previous_avg + threshold:
            trend = LearningTrend.UP
        elif recent_avg < previous_avg - threshold:
            trend = LearningTrend.DOWN

    messages = {
        LearningTrend.UP: (
            "Your mastery is trending upward. Keep riding that wave with another "
            "focused session!"
        ),
        LearningTrend.DOWN: (
            "Mastery dipped slightly recently. Revisiting earlier wins can help you "
            "bounce back quickly."
        ),
        LearningTrend.STEADY: (
            "Your learning pace is steady. A small stretch goal could help unlock "
            "the next breakthrough."
        ),
    }

    return TrendInsight(
        trend=trend,
        recent_average=recent_avg,
        previous_average=previous_avg,
        message=messages[trend],
    )


# =============================================================================
# Insights
# =============================================================================


def empty_insights(sessions: Optional[list[StudySession]] = None, now: Optional[datetime] = None) -> Insights:
    """
    Placeholder insights for a history with no valid sessions.

    Study momentum is still reported when sessions and now are given.
    """
    sessions = sessions or []
    momentum = (
        study_momentum(sessions, now)
        if now is not None and sessions
        else StudyMomentum(message="Start your first session!")
    )

    return Insights(
        most_frequent_confusion=ConfusionFrequency(
            type=NO_DATA, percentage=0, message="Start studying to see patterns!"
        ),
        strongest_area=CategoryMastery(
            type=NO_DATA, mastery=0, message="Complete sessions to discover your strengths!"
        ),
        growth_opportunity=CategoryMastery(
            type=NO_DATA, mastery=0, message="Keep learning to identify growth areas!"
        ),
        study_momentum=momentum,
        learning_trend=TrendInsight(
            trend=LearningTrend.STEADY,
            message="Build momentum with consistent practice!",
        ),
        total_session_count=len(sessions),
    )


def compute_insights(sessions: Iterable[StudySession], now: datetime) -> Insights:
    """
    Compute descriptive insights over a session snapshot.

    Args:
        sessions: All of the user's sessions (not modified).
        now: Reference instant for the momentum window.

    Returns:
        Insights; empty_insights() placeholders when no session is valid.
    """
    all_sessions = list(sessions)
    valid = [s for s in all_sessions if is_valid_session(s)]

    logger.debug(f"Computing insights: {len(all_sessions)} sessions, {len(valid)} valid")

    if not valid:
        return empty_insights(all_sessions, now)

    counts = category_counts(valid)
    means = category_mastery(valid)

    # max()/min() return the first extreme encountered, which is the tie-break
    most_frequent = max(counts, key=counts.get)
    strongest = max(means, key=means.get)
    weakest = min(means, key=means.get)
    frequency = round_half_up(counts[most_frequent] / len(valid) * 100)

    concepts = concept_mastery(valid)
    top = settings.ANALYTICS_TOP_CONCEPTS
    # Stable sorts (reverse=True included) keep ties in first-encountered order
    focus = sorted(concepts, key=lambda c: c.mastery)[:top]
    wins = sorted(concepts, key=lambda c: c.mastery, reverse=True)[:top]

    most_label = format_confusion_type(most_frequent)
    strong_label = format_confusion_type(strongest)
    weak_label = format_confusion_type(weakest)

    return Insights(
        most_frequent_confusion=ConfusionFrequency(
            category=most_frequent,
            type=most_label,
            percentage=frequency,
            message=(
                f"{most_label} shows up in {frequency}% of your sessions. A quick "
                "refresher on the foundations could unlock a breakthrough."
            ),
        ),
        strongest_area=CategoryMastery(
            category=strongest,
            type=strong_label,
            mastery=means[strongest],
            message=(
                f"{strong_label} mastery averages {means[strongest]}%, a strong "
                "foundation to build on. Consider exploring advanced topics here!"
            ),
        ),
        growth_opportunity=CategoryMastery(
            category=weakest,
            type=weak_label,
            mastery=means[weakest],
            message=(
                f"{weak_label} sits at about {means[weakest]}% mastery. A little "
                "targeted practice will level this up quickly."
            ),
        ),
        focus_concepts=focus,
        recent_wins=wins,
        study_momentum=study_momentum(all_sessions, now),
        learning_trend=learning_trend(valid),
        category_mastery=means,
        category_counts=counts,
        valid_session_count=len(valid),
        total_session_count=len(all_sessions),
    )
