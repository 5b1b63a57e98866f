import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Ranking settings"""

    # One working day
    default_budget_minutes: int = Field(
        default=480, description="Budget used when a request does not give one"
    )
    log_level: str = Field(default="INFO", description="Logging level for taskrank")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = SettingsConfigDict(
        env_prefix="TASKRANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured level to the taskrank logger tree."""
    logging.getLogger("taskrank").setLevel(level or get_settings().log_level)
