"""Application configuration loaded from environment variables and .env file."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./pet_saves.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 주기 작업 (초)
    DECAY_INTERVAL_SECONDS: float = 60.0
    AUTOSAVE_INTERVAL_SECONDS: float = Field(60.0, ge=10.0)

    # 수동 저장 슬롯 수 (자동 저장 슬롯 -1 별도)
    SAVE_SLOT_COUNT: int = 3

    # 지정 시 고정 시드 RNG 사용 (재현용)
    RANDOM_SEED: Optional[int] = None


settings = Settings()
