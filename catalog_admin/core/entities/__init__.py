"""
Business entities representing core domain concepts.

Exports:
- CatalogKind: Movie / Series discriminant
- CatalogDraft: Submission ready to be persisted
- CatalogItem: Item decoded from a stored document
- Season, SeasonEpisode: Nested seasons of a Series
- AppendedEpisode: Flat episode appended by the admin console
- UserRecord: Read-only user mirrored from the users collection
"""

from catalog_admin.core.entities.catalog import (
    AppendedEpisode,
    CatalogDraft,
    CatalogItem,
    CatalogKind,
    Season,
    SeasonEpisode,
)
from catalog_admin.core.entities.user import UserRecord

__all__ = [
    "AppendedEpisode",
    "CatalogDraft",
    "CatalogItem",
    "CatalogKind",
    "Season",
    "SeasonEpisode",
    "UserRecord",
]
