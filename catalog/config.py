"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Remote document store (Atlas Data API style endpoint)
    mongo_url: str | None = None
    mongo_api_key: str | None = None
    mongo_cluster: str = "Cluster0"
    mongo_db_name: str = "saraswati_db"

    # Local fallback store
    fallback_backend: Literal["file", "memory", "redis"] = "file"
    fallback_dir: str = ".catalog_storage"
    redis_url: str | None = None
    storage_key_prefix: str = "saraswati"
    storage_schema_version: str = "v3"
    storage_capacity_bytes: int | None = None
    reject_duplicate_ids: bool = False

    # Simulated network latency on the fallback path (milliseconds)
    fallback_latency_ms: int = 300

    # Accounts
    password_hash_iterations: int = 260_000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
