"""Descriptive study analytics (insights over the session history)."""

from app.services.analytics.insights import (
    compute_insights,
    empty_insights,
    format_confusion_type,
    format_time,
)

__all__ = [
    "compute_insights",
    "empty_insights",
    "format_confusion_type",
    "format_time",
]
