from __future__ import annotations

from pydantic import BaseModel, Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseModel):
    snapshot_key: str = "marketsync:snapshot"
    ttl_seconds: int = 5
    refresh_lock_key: str = "marketsync:refresh-lock"
    refresh_lock_seconds: int = 30


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MARKETSYNC_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )
    massive_api_key: str | None = None
    massive_base_url: str = "https://api.massive.com"
    request_timeout_seconds: float = 10.0


class SynchronizerSettings(BaseModel):
    endpoint_url: str = "http://localhost:5000/api/market-data"
    refresh_interval_ms: int = Field(default=5000, gt=0)
    enabled: bool = True
    request_timeout_seconds: float | None = None
    drop_superseded_responses: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MARKETSYNC_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "MARKETSYNC_REDIS_URL"),
    )
    refresh_queue_name: str = Field(
        default="market-refresh",
        validation_alias=AliasChoices("REFRESH_QUEUE_NAME", "MARKETSYNC_REFRESH_QUEUE_NAME"),
    )
    log_level: str = "INFO"

    cache: CacheSettings = Field(default_factory=CacheSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    synchronizer: SynchronizerSettings = Field(default_factory=SynchronizerSettings)


settings = Settings()
