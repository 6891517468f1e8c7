from __future__ import annotations

import math
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VARSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    initial_count: int = Field(
        default=0,
        ge=0,
        description="Number of observations already absorbed before streaming",
    )

    initial_mean: float = Field(
        default=0.0,
        description="Mean of the observations already absorbed",
    )

    initial_sum_sq_dev: float = Field(
        default=0.0,
        ge=0.0,
        description="Sum of squared deviations of the observations already absorbed",
    )

    @field_validator("initial_mean", "initial_sum_sq_dev")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("must be a finite number")
        return v

    @model_validator(mode="after")
    def validate_initial_state(self) -> Settings:
        if self.initial_count < 2 and self.initial_sum_sq_dev > 0:
            raise ValueError("initial_sum_sq_dev must be 0 when initial_count is below 2")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
