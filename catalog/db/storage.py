"""Storage port implementations: in-memory, file-backed and Redis-backed."""

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path

import redis
import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


class InMemoryStorage:
    """In-memory implementation of StoragePort.

    An optional byte capacity shared by all keys emulates a browser storage
    quota: a write that would push the total past it is rejected.
    """

    def __init__(self, capacity_bytes: int | None = None) -> None:
        self._blobs: dict[str, bytes] = {}
        self._capacity_bytes = capacity_bytes

    @property
    def used_bytes(self) -> int:
        return sum(len(blob) for blob in self._blobs.values())

    async def read(self, key: str) -> bytes | None:
        """Read blob by key."""
        return self._blobs.get(key)

    async def write(self, key: str, data: bytes) -> bool:
        """Write blob, enforcing the capacity if one is set."""
        if self._capacity_bytes is not None:
            others = self.used_bytes - len(self._blobs.get(key, b""))
            if others + len(data) > self._capacity_bytes:
                logger.warning(
                    "In-memory storage capacity exceeded",
                    extra={
                        "structured": {
                            "key": key,
                            "requested_bytes": len(data),
                            "capacity_bytes": self._capacity_bytes,
                        }
                    },
                )
                return False

        self._blobs[key] = data
        return True


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileStorage:
    """File-backed implementation of StoragePort.

    One file per key under ``root``. Writes go to a temp file in the same
    directory and are moved into place, so readers never see a torn blob.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def path_for(self, key: str) -> Path:
        return self._root / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    async def read(self, key: str) -> bytes | None:
        """Read blob from disk."""
        return await asyncio.to_thread(self._read_sync, key)

    async def write(self, key: str, data: bytes) -> bool:
        """Atomically replace blob on disk."""
        return await asyncio.to_thread(self._write_sync, key, data)

    def _read_sync(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"File storage read failed for {path}: {type(e).__name__}")
            return None

    def _write_sync(self, key: str, data: bytes) -> bool:
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=self._root, prefix=f".{path.stem}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
            return True
        except OSError as e:
            logger.error(
                f"File storage write failed for {path}",
                extra={"structured": {"key": key, "error": type(e).__name__, "errno": e.errno}},
            )
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            return False


class RedisStorage:
    """Redis-backed implementation of StoragePort using plain GET/SET."""

    def __init__(self, redis_client: aioredis.Redis) -> None:
        """Initialize storage.

        Args:
            redis_client: Async Redis client (bytes responses, no decoding)
        """
        self._redis = redis_client

    @classmethod
    def from_url(cls, url: str) -> "RedisStorage":
        return cls(aioredis.from_url(url, decode_responses=False))

    async def read(self, key: str) -> bytes | None:
        """GET blob; connection or server errors read as absent."""
        try:
            value = await self._redis.get(key)
        except redis.RedisError as e:
            logger.warning(f"Redis storage read failed for {key}: {type(e).__name__}")
            return None
        if value is None:
            return None
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    async def write(self, key: str, data: bytes) -> bool:
        """SET blob; an OOM or connection error rejects the write."""
        try:
            await self._redis.set(key, data)
        except redis.RedisError as e:
            logger.error(
                f"Redis storage write failed for {key}",
                extra={"structured": {"key": key, "error": type(e).__name__}},
            )
            return False
        return True
