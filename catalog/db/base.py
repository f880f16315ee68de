"""Shared store types: documents, equality filters, write outcomes and the storage port."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol

Document = dict[str, Any]
Filter = Mapping[str, Any]


class WriteResult(str, Enum):
    """Outcome of a store write.

    Truthy only for OK, so callers can treat it as the success boolean while
    the UI layer can still tell a full store apart from a missing entity.
    """

    OK = "ok"
    NOT_FOUND = "not_found"
    STORAGE_FULL = "storage_full"
    CONFLICT = "conflict"

    def __bool__(self) -> bool:
        return self is WriteResult.OK


def matches(entity: Mapping[str, Any], filter: Filter | None) -> bool:
    """Return True if every filter field exists on the entity with an equal value.

    An empty (or missing) filter matches every entity.
    """
    if not filter:
        return True
    return all(key in entity and _equal(entity[key], value) for key, value in filter.items())


def _equal(left: Any, right: Any) -> bool:
    """Strict equality: booleans never equal the numbers 0 and 1."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def apply_filter(entities: list[Document], filter: Filter | None) -> list[Document]:
    """Matching subsequence, original order preserved."""
    return [entity for entity in entities if matches(entity, filter)]


class StoragePort(Protocol):
    """Key/value persistence medium backing the local fallback store."""

    async def read(self, key: str) -> bytes | None:
        """Read the blob stored under key.

        Returns:
            Stored bytes, or None if the key is absent or unreadable
        """
        ...

    async def write(self, key: str, data: bytes) -> bool:
        """Replace the blob stored under key.

        Returns:
            True on success, False if the medium rejected the write
            (capacity exceeded, I/O failure)
        """
        ...
