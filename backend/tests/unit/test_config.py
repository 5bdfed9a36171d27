"""
Unit Tests for Configuration Management

Tests the Settings class and YAML configuration loading.
These tests verify:
- Environment variable loading
- Default value handling
- Property computation (uses_redis)
- YAML configuration parsing
"""

import os
from unittest.mock import patch

import pytest

from app.config import Settings, get_settings, load_yaml_config, settings


class TestSettings:
    """Test suite for the Settings Pydantic model."""

    def test_default_values(self) -> None:
        """Settings should have sensible defaults when env vars are not set."""
        with patch.dict(os.environ, {}, clear=True):
            test_settings = Settings(_env_file=None)

            assert test_settings.APP_NAME == "Study Assistant"
            assert test_settings.DEBUG is False
            assert test_settings.STORAGE_BACKEND == "memory"
            assert test_settings.REDIS_URL == "redis://localhost:6379/0"
            assert test_settings.ANALYTICS_TREND_THRESHOLD == 5.0
            assert test_settings.ANALYTICS_TREND_WINDOW == 3
            assert test_settings.ANALYTICS_TOP_CONCEPTS == 3
            assert test_settings.STREAK_MILESTONES == [3, 7, 14, 30, 60, 100]

    def test_env_variable_override(self) -> None:
        """Environment variables should override default values."""
        env_overrides = {
            "APP_NAME": "Custom App",
            "DEBUG": "true",
            "STORAGE_BACKEND": "redis",
            "REDIS_URL": "redis://custom-redis:6380/5",
            "ANALYTICS_TREND_THRESHOLD": "7.5",
            "STREAK_MILESTONES": "[5, 10]",
        }

        with patch.dict(os.environ, env_overrides, clear=True):
            test_settings = Settings(_env_file=None)

            assert test_settings.APP_NAME == "Custom App"
            assert test_settings.DEBUG is True
            assert test_settings.REDIS_URL == "redis://custom-redis:6380/5"
            assert test_settings.ANALYTICS_TREND_THRESHOLD == 7.5
            assert test_settings.STREAK_MILESTONES == [5, 10]

    @pytest.mark.parametrize(
        "backend,expected",
        [
            pytest.param("memory", False, id="memory"),
            pytest.param("redis", True, id="redis"),
            pytest.param("Redis", True, id="case_insensitive"),
        ],
    )
    def test_uses_redis(self, backend: str, expected: bool) -> None:
        """uses_redis follows STORAGE_BACKEND."""
        assert Settings(_env_file=None, STORAGE_BACKEND=backend).uses_redis is expected


class TestYamlConfigLoading:
    """Test suite for YAML configuration loading."""

    def test_load_yaml_config_returns_dict(self) -> None:
        """load_yaml_config should return a dictionary."""
        load_yaml_config.cache_clear()
        config = load_yaml_config()

        assert isinstance(config, dict)

    def test_yaml_config_has_expected_sections(self) -> None:
        """YAML config should contain the redis and goals sections."""
        load_yaml_config.cache_clear()
        config = load_yaml_config()

        if config:
            for section in ["redis", "goals"]:
                assert section in config, f"Missing section: {section}"

    def test_yaml_goal_defaults_are_valid(self) -> None:
        """Configured goal defaults should describe a valid goal."""
        from app.enums.goals import GoalPeriod, GoalType

        load_yaml_config.cache_clear()
        config = load_yaml_config()

        if config and "goals" in config:
            defaults = config["goals"]["defaults"]

            assert GoalType(defaults["type"])
            assert GoalPeriod(defaults["period"])
            assert defaults["target"] > 0

    def test_yaml_config_redis_settings(self) -> None:
        """Redis settings should define a key prefix."""
        load_yaml_config.cache_clear()
        config = load_yaml_config()

        if config and "redis" in config:
            assert isinstance(config["redis"]["key_prefix"], str)
            assert config["redis"]["key_prefix"]


class TestSettingsCaching:
    """Test suite for settings caching behavior."""

    def test_get_settings_returns_same_instance(self) -> None:
        """get_settings should return cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_settings_singleton_is_cached(self) -> None:
        """The module-level settings should be a cached instance."""
        assert settings is get_settings()
