"""
Study Session Models (Pydantic)

A study session is one learner interaction: selecting confusing text in a
PDF, answering diagnostic questions, and (optionally) walking through the
generated remediation path. Sessions are created before the remote analysis
runs and are mutated in place as analysis results and progress arrive.

Malformed field policy:
    Session records come from an external store that may hold partially
    written or hand-edited data. StudySession never rejects such a record;
    instead it normalizes bad fields:

    - timestamp: missing/unparseable → None (excluded from any time-windowed
      aggregate and from streaks, still counted in all-time totals)
    - mastery_score: non-numeric or outside 0-100 → None (treated as "not
      analyzed")
    - time_spent, completed_steps, total_steps: non-numeric/negative → 0
    - confusion_type: non-string → None; surrounding whitespace is stripped

Timezone policy:
    All timestamps are normalized to timezone-aware UTC. Naive values are
    interpreted as UTC; numeric values are epoch milliseconds.
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.base import StrictRequest, ensure_utc


def _coerce_number(value: Any) -> Optional[float]:
    """Return value as a finite float, or None when it isn't numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _coerce_count(value: Any) -> int:
    number = _coerce_number(value)
    if number is None or number < 0:
        return 0
    return int(number)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a session timestamp into an aware UTC datetime.

    Accepts datetimes, ISO-8601 strings (including a trailing "Z"), and epoch
    milliseconds. Anything else yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


class StudySession(BaseModel):
    """
    A stored study session record.

    Lenient on input (see module docstring): unknown fields are ignored and
    malformed values are normalized rather than rejected.
    """

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    id: str
    timestamp: Optional[datetime] = None

    # Source selection
    pdf_name: str = ""
    selected_text: str = Field("", description="First 100 characters of the selection")
    full_selected_text: str = ""

    # Analysis results
    confusion_type: Optional[str] = None
    mastery_score: Optional[float] = Field(None, description="0-100, set once analyzed")
    analysis_complete: bool = False
    diagnostic_summary: str = ""
    overall_accuracy: float = 0.0
    overall_confidence: float = 0.0
    level_scores: list[Any] = Field(default_factory=list)
    specific_gaps: list[Any] = Field(default_factory=list)
    secondary_types: list[Any] = Field(default_factory=list)
    analysis_result: Optional[dict[str, Any]] = Field(
        None, description="Opaque analysis payload (mind map, repair path)"
    )

    # Progress through the remediation path
    time_spent: int = Field(0, description="Accumulated minutes")
    completed_steps: int = 0
    total_steps: int = 0

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @field_validator("mastery_score", mode="before")
    @classmethod
    def _parse_mastery(cls, value: Any) -> Optional[float]:
        score = _coerce_number(value)
        if score is None or not 0 <= score <= 100:
            return None
        return score

    @field_validator("time_spent", "completed_steps", "total_steps", mode="before")
    @classmethod
    def _parse_counts(cls, value: Any) -> int:
        return _coerce_count(value)

    @field_validator("overall_accuracy", "overall_confidence", mode="before")
    @classmethod
    def _parse_ratio(cls, value: Any) -> float:
        return _coerce_number(value) or 0.0

    @field_validator("confusion_type", mode="before")
    @classmethod
    def _parse_confusion_type(cls, value: Any) -> Optional[str]:
        return value.strip() if isinstance(value, str) else None

    @field_validator("pdf_name", "selected_text", "full_selected_text", "diagnostic_summary", mode="before")
    @classmethod
    def _parse_text(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("level_scores", "specific_gaps", "secondary_types", mode="before")
    @classmethod
    def _parse_list(cls, value: Any) -> list[Any]:
        return value if isinstance(value, list) else []

    @field_validator("analysis_complete", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> bool:
        return value is True


# ===========================================
# Request Models
# ===========================================


class SessionCreate(StrictRequest):
    """
    Request to record a new study session (or overwrite one with the same id).

    Sessions are usually created before analysis with only the selection and
    source document; analysis fields arrive later via a progress update.
    """

    id: Optional[str] = Field(None, description="Client-assigned id; generated if absent")
    pdf_name: str = ""
    full_selected_text: str = ""
    confusion_type: Optional[str] = None
    mastery_score: Optional[float] = Field(None, ge=0, le=100)
    time_spent: int = Field(0, ge=0)
    total_steps: int = Field(0, ge=0)
    completed_steps: int = Field(0, ge=0)
    analysis_complete: bool = False
    diagnostic_summary: str = ""
    analysis_result: Optional[dict[str, Any]] = None


class SessionProgressUpdate(StrictRequest):
    """
    Request to record progress on a session.

    time_spent is an increment in minutes and is added to the stored total.
    Supplying analysis_result marks the session's analysis as complete.
    """

    completed_steps: Optional[int] = Field(None, ge=0)
    total_steps: Optional[int] = Field(None, ge=0)
    time_spent: Optional[int] = Field(None, ge=0, description="Minutes to add")
    confusion_type: Optional[str] = None
    mastery_score: Optional[float] = Field(None, ge=0, le=100)
    analysis_complete: Optional[bool] = None
    diagnostic_summary: Optional[str] = None
    analysis_result: Optional[dict[str, Any]] = None


class SessionSyncRequest(StrictRequest):
    """
    Remote session records to merge into the local collection.

    Records are raw mappings; they are parsed leniently and records
    without an id are skipped.
    """

    sessions: list[dict[str, Any]] = Field(default_factory=list)


class SessionSyncResponse(BaseModel):
    """Result of merging remote records."""

    merged: int
    total: int
