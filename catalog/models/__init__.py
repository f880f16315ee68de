"""Models package - re-exports for convenience."""

from catalog.models.common import TARGET_LANGUAGES, CamelModel, Category, Language, Period
from catalog.models.manuscript import Manuscript, ManuscriptEdit
from catalog.models.user import User

__all__ = [
    # Common
    "CamelModel",
    "Category",
    "Language",
    "Period",
    "TARGET_LANGUAGES",
    # Entities
    "Manuscript",
    "ManuscriptEdit",
    "User",
]
