"""
Catalog entities.

Entities representing the titles managed by the admin console: a catalog
item is either a Movie (single release with a download URL) or a Series
(ordered seasons of episodes). Two shapes coexist:

- CatalogDraft: what the submission wizard hands over before persistence
- CatalogItem: what a stored document decodes to on the read path
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class CatalogKind(str, Enum):
    """Discriminant of the two catalog variants.

    Values:
        MOVIE: Single release, carries downloadUrl and fill
        SERIES: Multi-season title, carries seriesData
    """

    MOVIE = "movie"
    SERIES = "series"


@dataclass(frozen=True)
class SeasonEpisode:
    """
    Episode nested under a Season of a Series.

    Persisted as {episode, episodeTitle, downloadLink}: the in-memory
    field is `title`, the stored field is `episodeTitle`.

    Attributes:
        episode: Episode label (not necessarily numeric)
        title: Episode title
        download_link: Download URL of the episode
    """

    episode: str
    title: str
    download_link: str

    @property
    def episode_title(self) -> str:
        """Title under its persisted name."""
        return self.title


@dataclass(frozen=True)
class Season:
    """
    A finalized season: a label and its episodes in insertion order.

    Attributes:
        season: Season label (not necessarily numeric-sortable)
        episodes: Episodes in the order they were added
    """

    season: str
    episodes: tuple[SeasonEpisode, ...] = ()


@dataclass(frozen=True)
class AppendedEpisode:
    """
    Flat episode appended by the admin console onto a document's top-level
    `episodes` list, independently of `seriesData`.
    """

    title: str
    season: str
    episode: str
    download_link: str


@dataclass(frozen=True)
class CatalogDraft:
    """
    Fully accumulated submission, ready to be encoded and persisted.

    Movie fields (download_url, fill) are ignored for a Series and
    series_data is ignored for a Movie.
    """

    kind: CatalogKind
    title: str = ""
    trailer_url: str = ""
    poster_url: str = ""
    banner_url: str = ""
    synopsis: str = ""
    release_date: str = ""
    categories: tuple[str, ...] = ()
    download_url: str = ""
    fill: bool = False
    series_data: tuple[Season, ...] = ()


@dataclass
class CatalogItem:
    """
    Catalog item decoded from a stored document.

    Attributes:
        id: Store-assigned document ID
        kind: Movie or Series (inferred when the document has no `kind`)
        title: Title, empty string if missing
        trailer_url / poster_url / banner_url: Asset URLs
        synopsis: Plot summary
        release_date: Release date as stored (YYYY-MM-DD)
        categories: Genres, insertion order, no duplicates
        created_at: Creation timestamp, None if absent or unreadable
        download_url: Movie download URL (None for a Series)
        fill: Movie banner display mode (None for a Series)
        series_data: Seasons built at creation time
        appended_episodes: Flat episodes appended by the admin console
        accepts_episodes: The document carries a top-level `episodes` list
        version: Store version the item was decoded from
    """

    id: str
    kind: CatalogKind
    title: str = ""
    trailer_url: str = ""
    poster_url: str = ""
    banner_url: str = ""
    synopsis: str = ""
    release_date: str = ""
    categories: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    download_url: Optional[str] = None
    fill: Optional[bool] = None
    series_data: tuple[Season, ...] = ()
    appended_episodes: tuple[AppendedEpisode, ...] = ()
    accepts_episodes: bool = False
    version: int = 0

    @property
    def is_series(self) -> bool:
        return self.kind is CatalogKind.SERIES

    @property
    def has_mixed_episode_sources(self) -> bool:
        """True when both seriesData and flat appended episodes are present."""
        return bool(self.series_data) and bool(self.appended_episodes)

    @property
    def episode_count(self) -> int:
        """Total number of episodes across both representations."""
        nested = sum(len(season.episodes) for season in self.series_data)
        return nested + len(self.appended_episodes)
