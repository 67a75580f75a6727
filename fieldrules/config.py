from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidationMode(str, Enum):
    """Validation accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Validation
    VALIDATION_MODE: ValidationMode = ValidationMode.COLLECT_ALL
    MAX_ERRORS: int = 0  # 0 = unlimited

    # Directive lookup
    TAG_KEY: str = "rules"  # dataclasses.field(metadata={TAG_KEY: ...})
    SCHEMA_EXTRA_KEY: str = "x-rules"  # pydantic Field(json_schema_extra={SCHEMA_EXTRA_KEY: ...})

    model_config = SettingsConfigDict(env_prefix="FIELDRULES_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
