"""Runtime settings for the explorer scripts and the relay app."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PUBLICATIONS_SOURCE = "data/nasa_bioscience.json"
DEFAULT_SPEECH_API_URL = "https://api.openai.com/v1/audio/speech"
DEFAULT_CHAT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_HTTP_TIMEOUT_S = 30.0
DEFAULT_PAGE_SIZE = 20


class Settings(BaseSettings):
    """Settings loaded from environment variables and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", frozen=True)

    # Data
    publications_source: str = DEFAULT_PUBLICATIONS_SOURCE

    # Upstream APIs
    openai_api_key: Optional[str] = None
    speech_api_url: str = DEFAULT_SPEECH_API_URL
    chat_api_url: str = DEFAULT_CHAT_API_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    http_timeout_s: float = Field(default=DEFAULT_HTTP_TIMEOUT_S, gt=0)

    # App
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    log_level: str = "INFO"

    @field_validator("openai_api_key")
    @classmethod
    def _blank_key_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
