"""Remote document store connector (Atlas Data API style HTTP endpoint).

Every failure mode is converted into a typed RemoteResult; nothing raises
to the caller. A non-usable result is the signal for the collection facade
to fall back to the local store.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from catalog.config import Settings
from catalog.db.base import Document, Filter

logger = logging.getLogger(__name__)


class RemoteOutcome(str, Enum):
    """Outcome of a remote round trip."""

    OK = "ok"
    UNAVAILABLE = "unavailable"  # not configured, or transport failure
    ERROR = "error"  # endpoint answered but not usably


@dataclass
class RemoteResult:
    """Typed result of a connector call."""

    outcome: RemoteOutcome
    documents: list[Document] = field(default_factory=list)
    reason: str | None = None

    @property
    def usable(self) -> bool:
        return self.outcome is RemoteOutcome.OK

    @classmethod
    def ok(cls, documents: list[Document] | None = None) -> "RemoteResult":
        return cls(RemoteOutcome.OK, documents or [])

    @classmethod
    def unavailable(cls, reason: str) -> "RemoteResult":
        return cls(RemoteOutcome.UNAVAILABLE, reason=reason)

    @classmethod
    def error(cls, reason: str) -> "RemoteResult":
        return cls(RemoteOutcome.ERROR, reason=reason)


@dataclass(frozen=True)
class RemoteConfig:
    """Connection settings for the remote document store."""

    base_url: str | None
    api_key: str | None
    data_source: str = "Cluster0"
    database: str = "saraswati_db"

    @property
    def enabled(self) -> bool:
        return bool(self.base_url and self.api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RemoteConfig":
        return cls(
            base_url=settings.mongo_url,
            api_key=settings.mongo_api_key,
            data_source=settings.mongo_cluster,
            database=settings.mongo_db_name,
        )


def normalize_id(document: Document) -> Document:
    """Copy the store-assigned ``_id`` into ``id`` when ``id`` is missing."""
    if document.get("id"):
        return document

    raw = document.get("_id")
    if isinstance(raw, dict) and "$oid" in raw:
        raw = raw["$oid"]
    if raw is None:
        return document

    return {**document, "id": str(raw)}


class RemoteStoreConnector:
    """One HTTP round trip per logical operation against a single collection."""

    def __init__(
        self,
        config: RemoteConfig,
        collection: str,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize connector.

        Args:
            config: Endpoint, credential and namespace
            collection: Remote collection (table) name
            client: Optional httpx client (for testing with mocks)
        """
        self._config = config
        self._collection = collection
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    async def find(self, filter: Filter) -> RemoteResult:
        """Query matching documents; ids are normalized."""
        result, data = await self._request("find", {"filter": dict(filter)})
        if not result.usable:
            return result

        documents = data.get("documents")
        if not isinstance(documents, list) or not all(isinstance(d, dict) for d in documents):
            return self._miss("find", RemoteResult.error("malformed_documents"))

        return RemoteResult.ok([normalize_id(doc) for doc in documents])

    async def insert(self, document: Document) -> RemoteResult:
        """Create one document."""
        result, _ = await self._request("insertOne", {"document": document})
        return result

    async def update(self, filter: Filter, fields: Document) -> RemoteResult:
        """Field-merge patch of the first matching document."""
        result, _ = await self._request(
            "updateOne", {"filter": dict(filter), "update": {"$set": fields}}
        )
        return result

    async def delete(self, filter: Filter) -> RemoteResult:
        """Delete the first matching document."""
        result, _ = await self._request("deleteOne", {"filter": dict(filter)})
        return result

    async def _request(self, action: str, payload: dict[str, Any]) -> tuple[RemoteResult, dict]:
        if not self._config.enabled:
            return RemoteResult.unavailable("not_configured"), {}

        base_url = (self._config.base_url or "").rstrip("/")
        url = f"{base_url}/action/{action}"
        body = {
            "dataSource": self._config.data_source,
            "database": self._config.database,
            "collection": self._collection,
            **payload,
        }
        headers = {"Content-Type": "application/json", "api-key": self._config.api_key or ""}

        client = self._client
        close_client = False
        if client is None:
            client = httpx.AsyncClient()
            close_client = True

        try:
            response = await client.post(url, json=body, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._miss(action, RemoteResult.unavailable(type(e).__name__)), {}
        except Exception as e:
            logger.exception(f"Unexpected error calling remote store action {action}")
            return self._miss(action, RemoteResult.unavailable(type(e).__name__)), {}
        finally:
            if close_client:
                await client.aclose()

        if not response.is_success:
            return self._miss(action, RemoteResult.error(f"http_{response.status_code}")), {}

        try:
            data = response.json()
        except ValueError:
            return self._miss(action, RemoteResult.error("invalid_json")), {}

        if not isinstance(data, dict):
            return self._miss(action, RemoteResult.error("unexpected_body")), {}

        return RemoteResult.ok(), data

    def _miss(self, action: str, result: RemoteResult) -> RemoteResult:
        logger.warning(
            f"Remote store {action} on {self._collection}: {result.outcome.value}",
            extra={
                "structured": {
                    "collection": self._collection,
                    "action": action,
                    "outcome": result.outcome.value,
                    "reason": result.reason,
                }
            },
        )
        return result
