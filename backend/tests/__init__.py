"""
Study Assistant Test Suite

Test Structure:
    tests/
    ├── conftest.py                      # Shared fixtures and configuration
    └── unit/                            # Unit tests (isolated, no external dependencies)
        ├── test_goal_progress.py        # Goal progress engine
        ├── test_streak.py               # Streak calculator
        ├── test_reminders.py            # Reminder policy
        ├── test_insights.py             # Analytics aggregator
        ├── test_session_repository.py  # Session store semantics
        ├── test_goal_repository.py      # Goal CRUD
        ├── test_goals_service.py        # Progress/reminder orchestration
        ├── test_storage.py              # Record store backends
        ├── test_redis.py                # Redis utilities (mocked)
        ├── test_config.py               # Configuration loading
        └── test_api.py                  # HTTP endpoints (TestClient)

Running Tests:
    # Run all tests
    pytest backend/tests/ -v

    # Run with coverage
    pytest backend/tests/ --cov=app --cov-report=html
"""
