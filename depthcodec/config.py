"""Runtime configuration for the depth codec service."""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central place for codec parameters; defaults are listed only here."""

    png_level: int = Field(default=9, ge=0, le=9, validation_alias="DEPTH_CODEC_PNG_LEVEL")
    depth_max: float = Field(default=10.0, validation_alias="DEPTH_CODEC_DEPTH_MAX")
    # Not meters at the default: with depth_quantization >= depth_max the value is
    # the depth at which one code spans roughly one meter (legacy convention).
    depth_quantization: float = Field(default=100.0, validation_alias="DEPTH_CODEC_DEPTH_QUANTIZATION")
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"], validation_alias="DEPTH_CODEC_CORS_ORIGINS")
    profile_timing: bool = Field(default=False, validation_alias="DEPTH_CODEC_PROFILE_TIMING")
    log_level: str = Field(default="WARNING", validation_alias="DEPTH_CODEC_LOG_LEVEL")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a singleton settings object."""

    return Settings()
