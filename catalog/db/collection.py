"""Collection facade: remote first, local fallback.

Each call makes a fresh decision (no retries, no breaker):

    ATTEMPT_REMOTE -> usable result -> DONE
                   -> unavailable/error -> ATTEMPT_LOCAL -> DONE
"""

import logging
from dataclasses import dataclass

from catalog.db.base import Document, Filter, StoragePort, WriteResult
from catalog.db.fallback import LocalFallbackStore
from catalog.db.remote import RemoteResult, RemoteStoreConnector
from catalog.utils.metrics import StoreMetrics

logger = logging.getLogger(__name__)


class Collection:
    """Single entry point for one named collection."""

    def __init__(
        self,
        name: str,
        remote: RemoteStoreConnector,
        fallback: LocalFallbackStore,
        metrics: StoreMetrics | None = None,
    ) -> None:
        self.name = name
        self._remote = remote
        self._fallback = fallback
        self._metrics = metrics or StoreMetrics()

    async def find(self, filter: Filter | None = None) -> list[Document]:
        """Return all entities matching the equality filter ({} or None matches all)."""
        result = await self._remote.find(filter or {})
        if result.usable:
            self._metrics.record_operation(self.name, "find", "remote")
            return result.documents

        self._fell_back("find", result)
        return await self._fallback.find(filter)

    async def find_one(self, filter: Filter) -> Document | None:
        """First matching entity, or None."""
        results = await self.find(filter)
        return results[0] if results else None

    async def insert(self, document: Document) -> WriteResult:
        """Insert a document.

        The caller guarantees that ``document["id"]`` is unique in the
        collection; the store does not check it unless the fallback store
        was built with ``reject_duplicate_ids``.
        """
        result = await self._remote.insert(document)
        if result.usable:
            self._metrics.record_operation(self.name, "insert", "remote")
            return WriteResult.OK

        self._fell_back("insert", result)
        return self._local_write("insert", await self._fallback.insert(document))

    async def update(self, filter: Filter, fields: Document) -> WriteResult:
        """Overwrite only the given fields on the first matching entity."""
        result = await self._remote.update(filter, fields)
        if result.usable:
            self._metrics.record_operation(self.name, "update", "remote")
            return WriteResult.OK

        self._fell_back("update", result)
        return self._local_write("update", await self._fallback.update(filter, fields))

    async def delete(self, filter: Filter) -> WriteResult:
        """Delete matching entities (first match remotely, every match locally)."""
        result = await self._remote.delete(filter)
        if result.usable:
            self._metrics.record_operation(self.name, "delete", "remote")
            return WriteResult.OK

        self._fell_back("delete", result)
        return self._local_write("delete", await self._fallback.delete(filter))

    def _fell_back(self, operation: str, result: RemoteResult) -> None:
        self._metrics.record_operation(self.name, operation, "local")
        self._metrics.inc_fallback(self.name, operation, result.reason or result.outcome.value)
        logger.debug(
            f"{self.name}.{operation} served by local fallback ({result.reason})",
            extra={"structured": {"collection": self.name, "operation": operation}},
        )

    def _local_write(self, operation: str, outcome: WriteResult) -> WriteResult:
        if not outcome:
            self._metrics.inc_write_failure(self.name, operation, outcome.value)
        return outcome


@dataclass
class CatalogDatabase:
    """The managed collections and the storage medium behind their fallback."""

    users: Collection
    manuscripts: Collection
    storage: StoragePort
    remote_enabled: bool = False

