"""Domain layer - catalog records, name criteria and request errors.

No dependencies on infrastructure: nothing here knows about storage,
transport or observability.
"""

from catalog_api.domain.criteria import MatchKind, NameCriteria, resolve_name_criteria
from catalog_api.domain.errors import (
    ApiError,
    InvalidActionError,
    MissingQueryError,
    RecordNotFoundError,
    VersionNotFoundError,
)
from catalog_api.domain.model import INTERNAL_ID_FIELD, Asset, Library


__all__ = [
    "INTERNAL_ID_FIELD",
    "ApiError",
    "Asset",
    "InvalidActionError",
    "Library",
    "MatchKind",
    "MissingQueryError",
    "NameCriteria",
    "RecordNotFoundError",
    "VersionNotFoundError",
    "resolve_name_criteria",
]
