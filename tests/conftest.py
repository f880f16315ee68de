"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable

import httpx
import pytest

from catalog.config import Settings
from catalog.db.collection import CatalogDatabase, Collection
from catalog.db.engine import create_database
from catalog.db.fallback import LocalFallbackStore
from catalog.db.remote import RemoteConfig, RemoteStoreConnector
from catalog.db.storage import InMemoryStorage

REMOTE_URL = "https://data.example.test/app/data-abc/endpoint/data/v1"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    """Settings with no remote store, in-memory fallback and no latency."""
    return Settings(
        _env_file=None,
        mongo_url=None,
        mongo_api_key=None,
        fallback_backend="memory",
        fallback_latency_ms=0,
        password_hash_iterations=1000,
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    """Unbounded in-memory storage."""
    return InMemoryStorage()


@pytest.fixture
def local_db(settings: Settings, storage: InMemoryStorage) -> CatalogDatabase:
    """Database with the remote connector disabled."""
    return create_database(settings, storage=storage)


@pytest.fixture
def remote_factory() -> Callable[[str, Handler], RemoteStoreConnector]:
    """Factory for connectors talking to an httpx mock transport."""

    def make(collection: str, handler: Handler) -> RemoteStoreConnector:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return RemoteStoreConnector(
            RemoteConfig(base_url=REMOTE_URL, api_key="secret-key"), collection, client
        )

    return make


@pytest.fixture
def local_collection_factory() -> Callable[..., Collection]:
    """Factory for collections whose remote connector is disabled."""

    def make(
        name: str, storage: InMemoryStorage, bootstrap: list[dict] | None = None
    ) -> Collection:
        return Collection(
            name,
            RemoteStoreConnector(RemoteConfig(base_url=None, api_key=None), name),
            LocalFallbackStore(storage, name, bootstrap=bootstrap, latency_ms=0),
        )

    return make
