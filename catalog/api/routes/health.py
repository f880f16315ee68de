"""Health check endpoints.

- Reports whether the remote document store is configured
- Checks the local fallback storage round-trips a marker blob
"""

import time
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response

from catalog.db.collection import CatalogDatabase
from catalog.db.engine import get_database

router = APIRouter()

HEALTH_KEY = "healthz"


async def check_remote(db: CatalogDatabase) -> tuple[bool, str]:
    """Report remote store configuration.

    An unconfigured remote is not a failure: the fallback serves everything.

    Returns:
        (is_ok, status_message)
    """
    return (True, "configured" if db.remote_enabled else "not_configured")


async def check_fallback(db: CatalogDatabase) -> tuple[bool, str]:
    """Check the fallback storage medium accepts a write and reads it back.

    Returns:
        (is_ok, status_message)
    """
    marker = str(time.time_ns()).encode("utf-8")
    try:
        if not await db.storage.write(HEALTH_KEY, marker):
            return (False, "error: write_failed")
        if await db.storage.read(HEALTH_KEY) != marker:
            return (False, "error: read_failed")
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    db: Annotated[CatalogDatabase, Depends(get_database)],
) -> dict[str, Any] | Response:
    """Component health.

    Returns:
        200 with component status if the fallback store is usable
        503 otherwise
    """
    remote_ok, remote_status = await check_remote(db)
    fallback_ok, fallback_status = await check_fallback(db)

    core_ok = remote_ok and fallback_ok

    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "remote": remote_status,
            "fallback": fallback_status,
        },
    }

    if not core_ok:
        import json

        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
