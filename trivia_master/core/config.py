from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    trivia_api_url: str = Field(default="https://opentdb.com/api.php", alias="TRIVIA_API_URL")
    trivia_api_timeout_seconds: float = Field(default=10.0, gt=0, alias="TRIVIA_API_TIMEOUT_SECONDS")
    default_question_count: int = Field(default=10, ge=1, le=50, alias="DEFAULT_QUESTION_COUNT")
    leaderboard_limit: int = Field(default=10, ge=1, alias="LEADERBOARD_LIMIT")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
