"""Manuscript endpoints - list, get, ingest, edit, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from catalog.api.deps import get_manuscript_repository, raise_for_write
from catalog.db.repositories import ManuscriptRepository
from catalog.ingestion import ManuscriptAnalysis, ingest_manuscript
from catalog.models.common import CamelModel, Category, Language, Period
from catalog.models.manuscript import Manuscript, ManuscriptEdit

router = APIRouter(prefix="/manuscripts", tags=["manuscripts"])


class CreateManuscriptRequest(ManuscriptAnalysis):
    """Request body for POST /manuscripts: an analysis plus the image payload."""

    category: Category
    image_url: str
    uploaded_by: str | None = None


class ManuscriptListResponse(CamelModel):
    """Response for GET /manuscripts."""

    manuscripts: list[Manuscript]


@router.get("", response_model=ManuscriptListResponse, response_model_by_alias=True)
async def list_manuscripts(
    repo: Annotated[ManuscriptRepository, Depends(get_manuscript_repository)],
    category: Annotated[Category | None, Query()] = None,
    language: Annotated[Language | None, Query()] = None,
    period: Annotated[Period | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
) -> ManuscriptListResponse:
    """List manuscripts with optional filters.

    Args:
        repo: Manuscript repository
        category: Exact category
        language: Exact original language
        period: Period, matched as a substring of the stored label
        search: Free text over title and summary

    Returns:
        Matching manuscripts in catalog order
    """
    manuscripts = await repo.list_manuscripts(
        category=category.value if category else None,
        language=language.value if language else None,
        period=period.value if period else None,
        search=search,
    )
    return ManuscriptListResponse(manuscripts=manuscripts)


@router.get("/{manuscript_id}", response_model=Manuscript, response_model_by_alias=True)
async def get_manuscript(
    manuscript_id: str,
    repo: Annotated[ManuscriptRepository, Depends(get_manuscript_repository)],
) -> Manuscript:
    """Get a single manuscript."""
    manuscript = await repo.get(manuscript_id)
    if manuscript is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Manuscript not found")
    return manuscript


@router.post(
    "",
    response_model=Manuscript,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_manuscript(
    request: CreateManuscriptRequest,
    repo: Annotated[ManuscriptRepository, Depends(get_manuscript_repository)],
) -> Manuscript:
    """Ingest a manuscript from a completed analysis.

    Returns:
        Created manuscript (201), or 507 when local storage is full
    """
    analysis = ManuscriptAnalysis.model_validate(
        request.model_dump(exclude={"image_url", "uploaded_by"}, mode="json")
    )
    outcome, manuscript = await ingest_manuscript(
        repo, analysis, request.image_url, uploaded_by=request.uploaded_by
    )
    raise_for_write(outcome, "Manuscript")
    return manuscript


@router.patch("/{manuscript_id}", response_model=Manuscript, response_model_by_alias=True)
async def edit_manuscript(
    manuscript_id: str,
    changes: ManuscriptEdit,
    repo: Annotated[ManuscriptRepository, Depends(get_manuscript_repository)],
) -> Manuscript:
    """Edit title, summary, transcription or translation."""
    raise_for_write(await repo.edit(manuscript_id, changes), "Manuscript")

    manuscript = await repo.get(manuscript_id)
    if manuscript is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Manuscript not found")
    return manuscript


@router.delete("/{manuscript_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_manuscript(
    manuscript_id: str,
    repo: Annotated[ManuscriptRepository, Depends(get_manuscript_repository)],
) -> Response:
    """Delete a manuscript."""
    raise_for_write(await repo.remove(manuscript_id), "Manuscript")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
