"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model persisted with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Dump to the stored document shape (camelCase, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Category(str, Enum):
    """Manuscript subject category."""

    philosophy = "Philosophy"
    science = "Science"
    literature = "Literature"
    history = "History"
    religion = "Religion"
    art = "Art"


class Language(str, Enum):
    """Original language of a manuscript."""

    sanskrit = "Sanskrit"
    latin = "Latin"
    greek = "Greek"
    persian = "Persian"
    japanese = "Japanese"
    chinese = "Chinese"
    arabic = "Arabic"
    english = "English"
    portuguese = "Portuguese"


class Period(str, Enum):
    """Historical period."""

    ancient = "Ancient"
    medieval = "Medieval"
    renaissance = "Renaissance"
    early_modern = "Early Modern"
    modern = "Modern"


# Languages the analysis step may translate into
TARGET_LANGUAGES: tuple[str, ...] = (
    "English",
    "Kannada",
    "Hindi",
    "Tamil",
    "Telugu",
    "Malayalam",
    "Bengali",
    "Marathi",
    "Gujarati",
    "Sanskrit",
    "Spanish",
    "French",
    "German",
    "Japanese",
    "Chinese",
    "Arabic",
)
