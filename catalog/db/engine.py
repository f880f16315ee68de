"""Catalog database factory and FastAPI dependency."""

from collections.abc import Sequence
from functools import lru_cache

import httpx

from catalog.config import Settings, get_settings
from catalog.db.base import Document, StoragePort
from catalog.db.collection import CatalogDatabase, Collection
from catalog.db.fallback import LocalFallbackStore
from catalog.db.remote import RemoteConfig, RemoteStoreConnector
from catalog.db.storage import FileStorage, InMemoryStorage, RedisStorage
from catalog.utils.metrics import PrometheusStoreMetrics, StoreMetrics

# Seed manuscripts for an empty local collection (none as of the v3 storage key).
INITIAL_MANUSCRIPTS: Sequence[Document] = ()


def create_storage_from_settings(settings: Settings) -> StoragePort:
    """Create the fallback storage medium selected by settings.

    Raises:
        ValueError: If the redis backend is selected without REDIS_URL.
    """
    if settings.fallback_backend == "memory":
        return InMemoryStorage(capacity_bytes=settings.storage_capacity_bytes)

    if settings.fallback_backend == "redis":
        if not settings.redis_url:
            raise ValueError(
                "REDIS_URL must be set when FALLBACK_BACKEND=redis. "
                "Please configure the redis_url setting."
            )
        return RedisStorage.from_url(settings.redis_url)

    return FileStorage(settings.fallback_dir)


def create_database(
    settings: Settings,
    *,
    storage: StoragePort | None = None,
    client: httpx.AsyncClient | None = None,
    metrics: StoreMetrics | None = None,
    manuscript_bootstrap: Sequence[Document] = INITIAL_MANUSCRIPTS,
) -> CatalogDatabase:
    """Build the users and manuscripts collections.

    Args:
        settings: Application settings
        storage: Fallback storage override (defaults to the configured backend)
        client: Optional httpx client shared by the connectors
        metrics: Metrics sink (no-op when omitted)
        manuscript_bootstrap: Seed data for the manuscripts collection

    Returns:
        CatalogDatabase with both collections wired remote-first
    """
    storage = storage if storage is not None else create_storage_from_settings(settings)
    remote_config = RemoteConfig.from_settings(settings)

    def collection(name: str, bootstrap: Sequence[Document] = ()) -> Collection:
        fallback = LocalFallbackStore(
            storage,
            name,
            bootstrap=bootstrap,
            schema_version=settings.storage_schema_version,
            key_prefix=settings.storage_key_prefix,
            latency_ms=settings.fallback_latency_ms,
            reject_duplicate_ids=settings.reject_duplicate_ids,
        )
        return Collection(name, RemoteStoreConnector(remote_config, name, client), fallback, metrics)

    return CatalogDatabase(
        users=collection("users"),
        manuscripts=collection("manuscripts", manuscript_bootstrap),
        storage=storage,
        remote_enabled=remote_config.enabled,
    )


@lru_cache
def get_database() -> CatalogDatabase:
    """FastAPI dependency: process-wide database built from settings."""
    return create_database(get_settings(), metrics=PrometheusStoreMetrics())
