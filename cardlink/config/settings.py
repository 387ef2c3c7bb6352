from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cardlink.constants import (
    DEFAULT_CACHE_MAX_ITEMS,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_FETCH_MAX_RETRIES,
    DEFAULT_FETCH_RETRY_DELAY_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    fetch_timeout_seconds: float = Field(
        DEFAULT_FETCH_TIMEOUT_SECONDS, validation_alias="FETCH_TIMEOUT_SECONDS"
    )
    # Additional attempts after the first one; total attempts = fetch_max_retries + 1.
    fetch_max_retries: int = Field(DEFAULT_FETCH_MAX_RETRIES, validation_alias="FETCH_MAX_RETRIES")
    fetch_retry_delay_seconds: float = Field(
        DEFAULT_FETCH_RETRY_DELAY_SECONDS, validation_alias="FETCH_RETRY_DELAY_SECONDS"
    )
    fetch_user_agent: str = Field("", validation_alias="FETCH_USER_AGENT")
    fetch_max_redirects: int = Field(10, validation_alias="FETCH_MAX_REDIRECTS")

    cache_ttl_seconds: float = Field(DEFAULT_CACHE_TTL_SECONDS, validation_alias="CACHE_TTL_SECONDS")
    cache_max_items: int = Field(DEFAULT_CACHE_MAX_ITEMS, validation_alias="CACHE_MAX_ITEMS")
    enable_cache: bool = Field(True, validation_alias="ENABLE_CACHE")

    download_images: bool = Field(True, validation_alias="DOWNLOAD_IMAGES")
    prefer_local_images: bool = Field(True, validation_alias="PREFER_LOCAL_IMAGES")
    indent_level: int = Field(0, validation_alias="INDENT_LEVEL")
