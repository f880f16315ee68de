"""Local fallback store: one JSON array per collection behind a storage port."""

import asyncio
import json
import logging
from collections.abc import Sequence

from catalog.db.base import Document, Filter, StoragePort, WriteResult, apply_filter, matches

logger = logging.getLogger(__name__)


def make_storage_key(collection: str, schema_version: str = "v3", prefix: str = "saraswati") -> str:
    """Create the storage key for a collection.

    The schema version is part of the key so blobs written in an older
    format are never read back as the current one.
    """
    return f"{prefix}_{schema_version}_{collection}"


class LocalFallbackStore:
    """Durable collection store used whenever the remote connector is unavailable.

    Every operation reads the whole persisted array and, for writes, rewrites
    it in full. All operations wait a fixed simulated latency first.
    """

    def __init__(
        self,
        storage: StoragePort,
        collection: str,
        *,
        bootstrap: Sequence[Document] | None = None,
        schema_version: str = "v3",
        key_prefix: str = "saraswati",
        latency_ms: int = 300,
        reject_duplicate_ids: bool = False,
    ) -> None:
        """Initialize store.

        Args:
            storage: Persistence medium
            collection: Collection name
            bootstrap: Seed entities written once into an empty collection
            schema_version: Version tag embedded in the storage key
            key_prefix: Application prefix of the storage key
            latency_ms: Simulated latency before each operation
            reject_duplicate_ids: Refuse inserting an ``id`` already stored
        """
        self._storage = storage
        self._collection = collection
        self._bootstrap = [dict(doc) for doc in bootstrap or []]
        self._latency_ms = latency_ms
        self._reject_duplicate_ids = reject_duplicate_ids
        self.key = make_storage_key(collection, schema_version, key_prefix)

    async def find(self, filter: Filter | None = None) -> list[Document]:
        """Return matching entities in stored order, seeding an empty collection once."""
        await self._delay()

        raw = await self._storage.read(self.key)
        if self._bootstrap and _is_empty(raw):
            seeded = json.dumps(self._bootstrap).encode("utf-8")
            if not await self._storage.write(self.key, seeded):
                logger.warning(f"Could not persist bootstrap data for {self._collection}")
            raw = seeded

        return apply_filter(self._decode(raw), filter)

    async def insert(self, document: Document) -> WriteResult:
        """Append a document. The caller guarantees identifier uniqueness."""
        await self._delay()

        items = await self._load()
        new_id = document.get("id")
        if (
            self._reject_duplicate_ids
            and new_id is not None
            and any(item.get("id") == new_id for item in items)
        ):
            logger.info(f"Rejected duplicate id {new_id!r} in {self._collection}")
            return WriteResult.CONFLICT

        items.append(dict(document))
        return await self._save(items, "insert")

    async def update(self, filter: Filter, fields: Document) -> WriteResult:
        """Shallow-merge fields onto the first matching entity."""
        await self._delay()

        items = await self._load()
        for index, item in enumerate(items):
            if matches(item, filter):
                items[index] = {**item, **fields}
                return await self._save(items, "update")

        return WriteResult.NOT_FOUND

    async def delete(self, filter: Filter) -> WriteResult:
        """Remove every matching entity."""
        await self._delay()

        items = await self._load()
        remaining = [item for item in items if not matches(item, filter)]
        if len(remaining) == len(items):
            return WriteResult.NOT_FOUND

        return await self._save(remaining, "delete")

    async def _delay(self) -> None:
        if self._latency_ms > 0:
            await asyncio.sleep(self._latency_ms / 1000)

    async def _load(self) -> list[Document]:
        return self._decode(await self._storage.read(self.key))

    async def _save(self, items: list[Document], operation: str) -> WriteResult:
        data = json.dumps(items).encode("utf-8")
        if await self._storage.write(self.key, data):
            return WriteResult.OK

        logger.error(
            f"Local storage full: {operation} on {self._collection} not saved",
            extra={
                "structured": {
                    "collection": self._collection,
                    "operation": operation,
                    "bytes": len(data),
                }
            },
        )
        return WriteResult.STORAGE_FULL

    def _decode(self, raw: bytes | None) -> list[Document]:
        """Parse the persisted array; anything malformed reads as empty."""
        if raw is None:
            return []

        try:
            items = json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding unparseable local data for {self._collection}")
            return []

        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            logger.warning(f"Discarding malformed local data for {self._collection}")
            return []

        return items


def _is_empty(raw: bytes | None) -> bool:
    """True for an absent blob or one holding an empty array."""
    if raw is None:
        return True
    try:
        return json.loads(raw) == []
    except ValueError:
        return False
