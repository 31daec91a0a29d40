from __future__ import annotations

import os
from typing import FrozenSet, Optional


def env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable"""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def _env_list(key: str, default: str) -> list[str]:
    raw = os.getenv(key, default)
    return [part.strip() for part in raw.split(",") if part.strip()]


class Settings:
    def __init__(self) -> None:
        # DB_URL wins, DATABASE_URL kept for hosted environments that only set that one.
        self.DB_URL: str = os.getenv("DB_URL") or os.getenv("DATABASE_URL") or "sqlite:///./fieldops.db"
        self.DB_ECHO: bool = env_bool("DB_ECHO", False)

        self.API_TOKEN: Optional[str] = os.getenv("API_TOKEN") or None

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text").lower()

        self.MAINTENANCE_JOB_TYPES: FrozenSet[str] = frozenset(
            value.casefold() for value in _env_list("MAINTENANCE_JOB_TYPES", "Service")
        )
        self.FOLLOW_UP_STATUS: str = os.getenv("FOLLOW_UP_STATUS", "new")

        self.LABOUR_PRESET_NAME: str = os.getenv("LABOUR_PRESET_NAME", "Labour")
        self.DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "AUD")

    def is_maintenance_type(self, job_type: Optional[str]) -> bool:
        if not job_type:
            return False
        return job_type.strip().casefold() in self.MAINTENANCE_JOB_TYPES


settings = Settings()
