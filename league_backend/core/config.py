from typing import List, Optional
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./league.db"
    BACKUP_DIR: str = "./backups"
    BACKUP_CRON_HOUR: Optional[int] = None
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # rapidfuzz score a CSV team name must beat to match an existing team
    TEAM_MATCH_THRESHOLD: int = 85

    # Season label stored on generated round reports
    REPORT_SEASON: str = "2025/26"

    # Go up two levels from core/config.py → project root
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        extra="ignore",
    )

settings = Settings()
