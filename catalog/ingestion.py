"""Manuscript ingestion: turn an AI analysis of a scanned page into a catalog entry.

The vision/description call itself is an external collaborator behind the
ManuscriptAnalyzer protocol; this module only mints identity and persists.
"""

import logging
import time
import uuid
from typing import Protocol

from pydantic import Field

from catalog.db.base import WriteResult
from catalog.db.repositories import ManuscriptRepository
from catalog.models.common import TARGET_LANGUAGES, CamelModel
from catalog.models.manuscript import Manuscript

logger = logging.getLogger(__name__)

ANONYMOUS_CONTRIBUTOR = "Anonymous Scholar"


class ManuscriptAnalysis(CamelModel):
    """Structured result of the AI analysis step."""

    title: str = Field(..., min_length=1)
    summary: str
    category: str
    language: str
    period: str
    transcription: str | None = None
    translation: str | None = None
    ocr_confidence: float | None = None


class ManuscriptAnalyzer(Protocol):
    """Protocol for the external image analysis service."""

    async def analyze(
        self, image_base64: str, mime_type: str, target_language: str = "English"
    ) -> ManuscriptAnalysis | None:
        """Analyze a manuscript image.

        Args:
            image_base64: Pre-processed image bytes, base64 encoded
            mime_type: Image MIME type
            target_language: Language for title, summary and translation

        Returns:
            Analysis, or None if the service returned nothing
        """
        ...


def build_manuscript(
    analysis: ManuscriptAnalysis,
    image_url: str,
    *,
    uploaded_by: str | None = None,
    now_ms: int | None = None,
) -> Manuscript:
    """Mint id and timestamp and combine the analysis with the image payload."""
    return Manuscript(
        id=str(uuid.uuid4()),
        title=analysis.title,
        summary=analysis.summary,
        image_url=image_url,
        category=analysis.category,
        language=analysis.language,
        period=analysis.period,
        date_added=now_ms if now_ms is not None else int(time.time() * 1000),
        transcription=analysis.transcription,
        translation=analysis.translation,
        ocr_confidence=analysis.ocr_confidence,
        uploaded_by=uploaded_by or ANONYMOUS_CONTRIBUTOR,
    )


async def ingest_manuscript(
    repository: ManuscriptRepository,
    analysis: ManuscriptAnalysis,
    image_url: str,
    *,
    uploaded_by: str | None = None,
) -> tuple[WriteResult, Manuscript]:
    """Create and store a manuscript from a completed analysis."""
    manuscript = build_manuscript(analysis, image_url, uploaded_by=uploaded_by)
    outcome = await repository.add(manuscript)

    if outcome:
        logger.info(f"Ingested manuscript {manuscript.id}: {manuscript.title}")
    else:
        logger.warning(f"Ingestion of {manuscript.title!r} not saved: {outcome.value}")

    return outcome, manuscript


async def analyze_and_ingest(
    analyzer: ManuscriptAnalyzer,
    repository: ManuscriptRepository,
    *,
    image_base64: str,
    mime_type: str,
    target_language: str = "English",
    uploaded_by: str | None = None,
) -> tuple[WriteResult, Manuscript] | None:
    """Run the analyzer on an image and ingest the result.

    The stored image payload is the image itself as a data URI.

    Returns:
        (outcome, manuscript), or None if the analyzer produced nothing

    Raises:
        ValueError: If the target language is not supported
    """
    if target_language not in TARGET_LANGUAGES:
        raise ValueError(f"Unsupported target language: {target_language}")

    analysis = await analyzer.analyze(image_base64, mime_type, target_language)
    if analysis is None:
        return None

    image_url = f"data:{mime_type};base64,{image_base64}"
    return await ingest_manuscript(repository, analysis, image_url, uploaded_by=uploaded_by)
