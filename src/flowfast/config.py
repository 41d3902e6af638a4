"""Configuration settings for the FlowFast coaching app."""

from pathlib import Path
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


# Path calculations:
# __file__ = src/flowfast/config.py
# .parent.parent.parent = project root
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # OpenAI-compatible plan generator
    openai_api_key: str = ""
    llm_base_url: Optional[str] = None
    llm_model: str = "gpt-4o-mini"

    # Plan generation retry policy: attempt, fixed backoff, then fallback
    plan_max_retries: int = 2
    plan_retry_delay_seconds: float = 1.0
    plan_timeout_seconds: float = 60.0

    # Player defaults
    pre_countdown_seconds: int = 3
    rest_between_sets_seconds: int = 30

    # Storage
    data_dir: Path = PROJECT_ROOT / "data"
    history_db_path: Optional[Path] = None
    local_cache_path: Optional[Path] = None

    def model_post_init(self, __context) -> None:
        """Set default storage paths after initialization."""
        if self.history_db_path is None:
            self.history_db_path = self.data_dir / "flowfast.db"
        if self.local_cache_path is None:
            self.local_cache_path = self.data_dir / "local_cache.json"

    class Config:
        env_prefix = "FLOWFAST_"
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
