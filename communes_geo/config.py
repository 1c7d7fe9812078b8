"""
Central configuration loaded from environment variables with sensible defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class DatasetConfig:
    path: str = os.getenv("COMMUNES_DB_PATH", "data/communes.json")
    # Last write wins on duplicate codes unless this is set
    reject_duplicates: bool = os.getenv("COMMUNES_REJECT_DUPLICATES", "false").lower() == "true"


@dataclass(frozen=True)
class SearchConfig:
    # Name matches below this WRatio score (0..1) are dropped
    min_text_score: float = float(os.getenv("COMMUNES_MIN_TEXT_SCORE", "0.8"))
    # 0 = no cap on ranked name hits
    max_text_results: int = int(os.getenv("COMMUNES_MAX_TEXT_RESULTS", "0"))


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))
    max_results: int = int(os.getenv("API_MAX_RESULTS", "100"))


@dataclass(frozen=True)
class Settings:
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
