"""Manuscript domain models."""

from pydantic import Field

from catalog.models.common import CamelModel


class Manuscript(CamelModel):
    """A digitized manuscript record.

    Category, language and period are kept as plain strings: values coming
    back from the analysis step are stored as returned.
    """

    id: str
    title: str
    summary: str
    image_url: str  # remote URL or data: URI
    category: str
    language: str
    period: str
    date_added: int  # epoch milliseconds
    transcription: str | None = None
    translation: str | None = None
    ocr_confidence: float | None = None  # 0-100, not range-checked
    uploaded_by: str | None = None


class ManuscriptEdit(CamelModel):
    """Editable subset of a manuscript (field-merge patch)."""

    title: str | None = Field(None, min_length=1)
    summary: str | None = None
    transcription: str | None = None
    translation: str | None = None
