"""FastAPI dependencies and write-outcome mapping."""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from catalog.accounts import AccountService
from catalog.config import get_settings
from catalog.db.base import WriteResult
from catalog.db.collection import CatalogDatabase
from catalog.db.engine import get_database
from catalog.db.repositories import ManuscriptRepository, UserRepository

STORAGE_FULL_DETAIL = (
    "Storage limit reached: local storage is full. "
    "Delete some items to save more manuscripts."
)


def get_manuscript_repository(
    db: Annotated[CatalogDatabase, Depends(get_database)],
) -> ManuscriptRepository:
    """Manuscript repository bound to the process database."""
    return ManuscriptRepository(db.manuscripts)


def get_account_service(
    db: Annotated[CatalogDatabase, Depends(get_database)],
) -> AccountService:
    """Account service bound to the process database."""
    return AccountService(
        UserRepository(db.users), hash_iterations=get_settings().password_hash_iterations
    )


def raise_for_write(outcome: WriteResult, entity: str) -> None:
    """Map a failed write to an HTTP error.

    Raises:
        HTTPException: 404 not found, 409 conflict, 507 storage full
    """
    if outcome is WriteResult.OK:
        return
    if outcome is WriteResult.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")
    if outcome is WriteResult.CONFLICT:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"{entity} already exists")
    raise HTTPException(
        status_code=status.HTTP_507_INSUFFICIENT_STORAGE, detail=STORAGE_FULL_DETAIL
    )
