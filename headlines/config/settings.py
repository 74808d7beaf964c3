"""Application settings with environment variable support."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path


# Compute base_dir at module level
_BASE_DIR = Path(__file__).parent.parent.parent.resolve()


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HEADLINES_",  # HEADLINES_WORKER_POOL_SIZE, etc.
    )

    # Paths
    base_dir: Path = _BASE_DIR
    feeds_config_path: Path = _BASE_DIR / "config" / "feeds.json"

    # Worker pool
    worker_pool_size: int = 2

    # Fetching
    fetch_timeout_seconds: int = 30
    user_agent: str = "HeadlineAggregator/1.0"

    # Consumer defaults
    default_policy: str = "best_effort_reported"
    log_level: str = "INFO"

    @field_validator("worker_pool_size")
    @classmethod
    def _pool_size_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("worker_pool_size must be >= 1")
        return value


settings = Settings()
