"""Pytest configuration and fixtures for fieldrules tests."""

import pytest

from fieldrules import Settings, get_settings, new_engine
from fieldrules.config import ValidationMode
from fieldrules.validation import RuleRegistry


@pytest.fixture
def settings():
    """Settings built from defaults only."""
    return Settings(_env_file=None)


@pytest.fixture
def engine(settings):
    """Collect-all engine with the built-in rules."""
    return new_engine(settings=settings)


@pytest.fixture
def fail_fast_engine(settings):
    """Engine that stops at the first failure."""
    return new_engine(settings=settings, mode=ValidationMode.FAIL_FAST)


@pytest.fixture
def registry():
    """Fresh registry with the built-in rules."""
    return RuleRegistry()


@pytest.fixture
def fresh_settings_cache():
    """Clear the cached settings before and after the test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
