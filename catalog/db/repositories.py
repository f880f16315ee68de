"""Typed repositories over the catalog collections."""

import logging

from pydantic import ValidationError

from catalog.db.base import Document, WriteResult
from catalog.db.collection import Collection
from catalog.models.manuscript import Manuscript, ManuscriptEdit
from catalog.models.user import User

logger = logging.getLogger(__name__)


def _parse_all(model: type, documents: list[Document], collection: str) -> list:
    """Validate stored documents, skipping ones that no longer fit the model."""
    parsed = []
    for doc in documents:
        try:
            parsed.append(model.model_validate(doc))
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed {collection} document {doc.get('id')!r}: "
                f"{e.error_count()} validation error(s)"
            )
    return parsed


class ManuscriptRepository:
    """Manuscript catalog operations."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    async def list_manuscripts(
        self,
        *,
        category: str | None = None,
        language: str | None = None,
        period: str | None = None,
        search: str | None = None,
    ) -> list[Manuscript]:
        """List manuscripts in stored order.

        Args:
            category: Exact category match (pushed down to the store)
            language: Exact language match (pushed down to the store)
            period: Substring of the period label, e.g. "Medieval"
            search: Case-insensitive substring of title or summary

        Returns:
            Matching manuscripts
        """
        filter: Document = {}
        if category:
            filter["category"] = category
        if language:
            filter["language"] = language

        manuscripts = _parse_all(Manuscript, await self._collection.find(filter), "manuscripts")

        if period:
            manuscripts = [m for m in manuscripts if period in m.period]
        if search:
            needle = search.lower()
            manuscripts = [
                m
                for m in manuscripts
                if needle in m.title.lower() or needle in m.summary.lower()
            ]
        return manuscripts

    async def get(self, manuscript_id: str) -> Manuscript | None:
        """Get manuscript by id."""
        doc = await self._collection.find_one({"id": manuscript_id})
        if doc is None:
            return None
        parsed = _parse_all(Manuscript, [doc], "manuscripts")
        return parsed[0] if parsed else None

    async def add(self, manuscript: Manuscript) -> WriteResult:
        """Insert a manuscript (caller-minted id)."""
        return await self._collection.insert(manuscript.to_document())

    async def edit(self, manuscript_id: str, changes: ManuscriptEdit) -> WriteResult:
        """Apply a field-merge patch of the fields set on ``changes``."""
        fields = changes.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not fields:
            return WriteResult.OK if await self.get(manuscript_id) else WriteResult.NOT_FOUND
        return await self._collection.update({"id": manuscript_id}, fields)

    async def remove(self, manuscript_id: str) -> WriteResult:
        """Delete manuscript by id."""
        return await self._collection.delete({"id": manuscript_id})


class UserRepository:
    """User account storage."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    async def get(self, user_id: str) -> User | None:
        """Get user by id."""
        doc = await self._collection.find_one({"id": user_id})
        if doc is None:
            return None
        parsed = _parse_all(User, [doc], "users")
        return parsed[0] if parsed else None

    async def find_by_contact(self, contact: str) -> User | None:
        """Find user by email (contains "@") or phone number."""
        field = "email" if "@" in contact else "phoneNumber"
        doc = await self._collection.find_one({field: contact})
        if doc is None:
            return None
        parsed = _parse_all(User, [doc], "users")
        return parsed[0] if parsed else None

    async def add(self, user: User) -> WriteResult:
        """Insert a user (caller-minted id)."""
        return await self._collection.insert(user.to_document())

    async def set_password(self, user_id: str, password_token: str) -> WriteResult:
        """Replace the stored password token."""
        return await self._collection.update({"id": user_id}, {"password": password_token})
