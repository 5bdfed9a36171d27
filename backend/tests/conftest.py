"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Generator, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root BEFORE any fixtures run
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

# Settings are read at import time; keep unit tests off a real Redis
os.environ["STORAGE_BACKEND"] = "memory"

from app.models.sessions import StudySession  # noqa: E402
from app.services.storage import InMemoryRecordStore  # noqa: E402

# Wednesday; the surrounding week runs Mon 2026-10-12 to Mon 2026-10-19
FIXED_NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Set up test environment variables before any tests run.

    This ensures tests run with predictable configuration, overriding
    any values from .env files to ensure test isolation.
    """
    original_env = os.environ.copy()

    test_env = {
        "STORAGE_BACKEND": "memory",
        "REDIS_URL": os.environ.get("REDIS_URL", "redis://localhost:6379/1"),
        "DEBUG": "true",
    }
    os.environ.update(test_env)

    yield

    os.environ.clear()
    os.environ.update(original_env)


# ============================================================================
# Time and Session Data
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant (Wednesday 2026-10-14 12:00 UTC)."""
    return FIXED_NOW


def make_session(
    session_id: str,
    timestamp: Optional[datetime] = None,
    days_ago: Optional[float] = None,
    confusion_type: Optional[str] = "foundation",
    mastery_score: Optional[float] = 80,
    analysis_complete: bool = True,
    time_spent: int = 0,
    text: str = "",
    pdf_name: str = "notes.pdf",
    **extra: Any,
) -> StudySession:
    """
    Create a StudySession for testing.

    Args:
        session_id: Session id.
        timestamp: Explicit timestamp; takes precedence over days_ago.
        days_ago: Days before FIXED_NOW for the timestamp.
        confusion_type: Confusion category key.
        mastery_score: Mastery 0-100, or None when not analyzed.
        analysis_complete: Whether analysis finished.
        time_spent: Minutes spent.
        text: Full selected text (concept key source).
        pdf_name: Source document name.

    Returns:
        StudySession with the given fields.
    """
    if timestamp is None and days_ago is not None:
        timestamp = FIXED_NOW - timedelta(days=days_ago)
    return StudySession(
        id=session_id,
        timestamp=timestamp,
        confusion_type=confusion_type,
        mastery_score=mastery_score,
        analysis_complete=analysis_complete,
        time_spent=time_spent,
        full_selected_text=text,
        pdf_name=pdf_name,
        **extra,
    )


@pytest.fixture
def session_factory():
    """Expose make_session as a fixture."""
    return make_session


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    """A fresh in-memory record store per test."""
    return InMemoryRecordStore()


@pytest.fixture
def mock_redis() -> MagicMock:
    """
    Create a mock Redis client for unit testing.

    This allows testing Redis-dependent code without a real Redis server.
    """
    mock = MagicMock()
    mock.ping = AsyncMock(return_value=True)
    mock.hgetall = AsyncMock(return_value={})
    mock.hget = AsyncMock(return_value=None)
    mock.hset = AsyncMock(return_value=1)
    mock.hdel = AsyncMock(return_value=1)
    return mock
