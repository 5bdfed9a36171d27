"""
Analytics API Models (Pydantic)

Response schemas for descriptive study analytics:
- Insights over the analyzed session history
- Practice streak summary
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from app.enums.analytics import LearningTrend


class ConfusionFrequency(BaseModel):
    """
    The most frequent confusion category.

    category is the raw key; type is its display form.
    """

    category: Optional[str] = None
    type: str
    percentage: int = Field(0, ge=0, le=100)
    message: str


class CategoryMastery(BaseModel):
    """A confusion category with its mean mastery (strongest/weakest area)."""

    category: Optional[str] = None
    type: str
    mastery: int = 0
    message: str


class ConceptMastery(BaseModel):
    """Mean mastery for one concept (derived from the selected text)."""

    concept: str
    mastery: int
    attempts: int


class StudyMomentum(BaseModel):
    """Minutes studied in the trailing window and overall."""

    week_time: int = 0
    total_time: int = 0
    message: str


class TrendInsight(BaseModel):
    """Recent-vs-previous mastery comparison."""

    trend: LearningTrend = LearningTrend.STEADY
    recent_average: Optional[float] = None
    previous_average: Optional[float] = None
    message: str


class Insights(BaseModel):
    """
    Descriptive analytics over a user's sessions.

    All aggregates except study_momentum consider only valid sessions
    (analysis complete, mastery present, known confusion type).
    """

    most_frequent_confusion: ConfusionFrequency
    strongest_area: CategoryMastery
    growth_opportunity: CategoryMastery
    focus_concepts: list[ConceptMastery] = Field(default_factory=list)
    recent_wins: list[ConceptMastery] = Field(default_factory=list)
    study_momentum: StudyMomentum
    learning_trend: TrendInsight
    category_mastery: dict[str, int] = Field(default_factory=dict)
    category_counts: dict[str, int] = Field(default_factory=dict)
    valid_session_count: int = 0
    total_session_count: int = 0


class StreakSummary(BaseModel):
    """
    Detailed study streak information.

    current_streak is anchored at today or yesterday (UTC); a streak stays
    alive until a full calendar day passes without a completed session.
    """

    current_streak: int = 0
    longest_streak: int = 0
    streak_start: Optional[date] = None
    last_practice: Optional[date] = None
    is_active_today: bool = False
    days_this_week: int = 0
    days_this_month: int = 0
    milestones_reached: list[int] = Field(default_factory=list)
    next_milestone: Optional[int] = None
