"""Tests for settings and logging configuration."""

import io
import json
import logging
from dataclasses import dataclass

import pytest
import structlog

from fieldrules import Settings, ValidationMode, configure_logging, field, get_settings, new_engine
from fieldrules.logging import LoggerRegistry, get_shared_processors


@dataclass
class Account:
    name: str = field(default="", rules="required, min=3")


@pytest.fixture
def restore_logging():
    """Undo configure_logging() so other tests see the default setup."""
    yield
    structlog.reset_defaults()
    library_logger = logging.getLogger("fieldrules")
    library_logger.handlers = []
    library_logger.setLevel(logging.NOTSET)
    library_logger.propagate = True


class TestSettings:
    def test_defaults(self, settings):
        assert settings.VALIDATION_MODE is ValidationMode.COLLECT_ALL
        assert settings.MAX_ERRORS == 0
        assert settings.TAG_KEY == "rules"
        assert settings.SCHEMA_EXTRA_KEY == "x-rules"
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_JSON is False

    def test_environment_overrides(self, monkeypatch, fresh_settings_cache):
        monkeypatch.setenv("FIELDRULES_VALIDATION_MODE", "fail_fast")
        monkeypatch.setenv("FIELDRULES_MAX_ERRORS", "5")
        settings = get_settings()
        assert settings.VALIDATION_MODE is ValidationMode.FAIL_FAST
        assert settings.MAX_ERRORS == 5

    def test_settings_are_cached(self, fresh_settings_cache):
        assert get_settings() is get_settings()

    def test_engine_uses_settings_mode(self):
        engine = new_engine(settings=Settings(_env_file=None, VALIDATION_MODE="fail_fast"))
        assert engine.mode is ValidationMode.FAIL_FAST

    def test_explicit_mode_wins(self):
        settings = Settings(_env_file=None, VALIDATION_MODE="fail_fast")
        engine = new_engine(settings=settings, mode=ValidationMode.COLLECT_ALL)
        assert engine.mode is ValidationMode.COLLECT_ALL


class TestLogging:
    def test_shared_processors_add_library_name(self):
        processors = get_shared_processors()
        library_info = processors[-1]
        assert library_info(None, "info", {"event": "x"}) == {"event": "x", "library": "fieldrules"}

    def test_component_loggers_are_reused(self):
        assert LoggerRegistry.get("compiler") is LoggerRegistry.get("compiler")

    def test_configure_logging_sets_library_level(self, restore_logging):
        configure_logging(level="WARNING", json_logs=False)
        library_logger = logging.getLogger("fieldrules")
        assert library_logger.level == logging.WARNING
        assert len(library_logger.handlers) == 1
        assert not library_logger.propagate

    def test_json_events_for_compilation(self, restore_logging):
        buffer = io.StringIO()
        configure_logging(level="DEBUG", json_logs=True, stream=buffer)
        engine = new_engine(settings=Settings(_env_file=None))
        engine.validate(Account(name="ab"))

        lines = [line for line in buffer.getvalue().splitlines() if line.strip()]
        events = [json.loads(line) for line in lines]
        compiled = [e for e in events if e["event"] == "record_compiled"]
        validated = [e for e in events if e["event"] == "record_validated"]
        assert compiled[0]["record"] == "Account"
        assert compiled[0]["library"] == "fieldrules"
        assert compiled[0]["logger"] == "fieldrules.compiler"
        assert validated[0]["failures"] == 1
