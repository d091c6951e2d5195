"""
Configuration settings for the bike garage.

Uses Pydantic Settings to load environment variables for logging, the registry
read discipline, and the simulated job delays of the task group runner.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ReadMode = Literal["guarded", "naive"]

MUTATION_WORKERS = 2


def check_speed_deltas(deltas: List[int]) -> List[int]:
    """Require one distinct delta per mutation worker."""
    if len(deltas) != MUTATION_WORKERS or len(set(deltas)) != len(deltas):
        raise ValueError(
            f"speed deltas must be exactly {MUTATION_WORKERS} distinct integers, got {deltas}"
        )
    return deltas


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Registry
    read_mode: ReadMode = Field("guarded", alias="GARAGE_READ_MODE")
    speed_deltas: List[int] = Field(default_factory=lambda: [5, 10], alias="GARAGE_DELTAS")

    # Long-running jobs (milliseconds)
    load_delay_ms: int = Field(3000, alias="LOAD_DELAY_MS")
    average_delay_ms: int = Field(1500, alias="AVERAGE_DELAY_MS")
    report_delay_ms: int = Field(2500, alias="REPORT_DELAY_MS")
    cancel_after_ms: int = Field(2000, alias="CANCEL_AFTER_MS")
    enable_report_job: bool = Field(False, alias="ENABLE_REPORT_JOB")

    # Bike state machine (milliseconds)
    ride_delay_ms: int = Field(1000, alias="RIDE_DELAY_MS")
    stop_delay_ms: int = Field(500, alias="STOP_DELAY_MS")
    service_delay_ms: int = Field(1500, alias="SERVICE_DELAY_MS")

    @field_validator("speed_deltas")
    @classmethod
    def validate_speed_deltas(cls, value: List[int]) -> List[int]:
        return check_speed_deltas(value)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["MUTATION_WORKERS", "ReadMode", "Settings", "check_speed_deltas", "get_settings"]
