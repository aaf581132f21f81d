from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized runtime configuration loaded from environment variables.
    """

    CRM_API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    SESSION_STORE_PATH: str | None = None
    API_PREFIX: str = "/api"
    APP_NAME: str = "CRM Dashboard"
    ALLOWED_ORIGINS: list[str] = ["*"]
    SHARE_APPLY_TEXT: str = "Click here to apply now! "
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
