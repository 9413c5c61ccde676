"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "hireflow"

    # DeepSeek AI (OpenAI-compatible) - mock interviews
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    deepseek_model: str = "deepseek-chat"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Notifications: exactly one channel is active
    notification_channel: Literal["in_app", "email"] = "in_app"

    # SendGrid (only used when notification_channel == "email")
    sendgrid_api_key: str = ""
    sendgrid_from_email: str = ""
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    email_timeout_seconds: float = 10.0

    # Uploads
    upload_dir: str = "public/uploads"
    public_base_url: str = "http://localhost:8000"
    max_upload_mb: int = 5

    # App
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    log_json: bool = False
    debug: bool = True

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
