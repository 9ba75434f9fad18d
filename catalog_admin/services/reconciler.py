"""
Reconciliation entre les deux formes de soumission et le schema persiste.

Le CatalogReconciler est l'unique point de passage entre :
- une soumission Film (downloadUrl + fill) ou Serie (seriesData)
- le document persiste dans la collection `movies`

Encodage (ecriture) : valide la soumission puis produit exactement un
document. Les champs de variante sont mutuellement exclusifs : un Film ne
porte jamais seriesData, une Serie ne porte jamais downloadUrl ni fill.

Decodage (lecture) : total et deterministe. Les documents historiques sans
champ `kind` sont classes par inference ; aucun document ne provoque
d'erreur de decodage.
"""

from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional

from loguru import logger

from catalog_admin.core.entities.catalog import (
    AppendedEpisode,
    CatalogDraft,
    CatalogItem,
    CatalogKind,
    Season,
    SeasonEpisode,
)
from catalog_admin.core.exceptions import ValidationFailure
from catalog_admin.core.value_objects.documents import StoredDocument


def normalize_categories(categories: Iterable[Any]) -> tuple[str, ...]:
    """
    Nettoie une liste de categories.

    Supprime les espaces, ignore les valeurs vides et les doublons (test
    sensible a la casse) en conservant l'ordre de premiere insertion.
    """
    seen: list[str] = []
    for category in categories:
        if not isinstance(category, str):
            continue
        value = category.strip()
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _dict_entries(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


class CatalogReconciler:
    """
    Encode les soumissions et decode les documents du catalogue.

    Sans etat : une instance unique est partagee par toute l'application.

    Example:
        reconciler = CatalogReconciler()
        document = reconciler.encode(draft)
        item = reconciler.decode(stored_document)
    """

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def missing_fields(self, draft: CatalogDraft) -> list[str]:
        """
        Liste les champs requis absents ou invalides d'une soumission.

        Champs communs : title, releaseDate (date ISO), synopsis.
        Film : downloadUrl. Serie : au moins une saison non vide.
        """
        missing = []
        if not draft.title.strip():
            missing.append("title")
        if not draft.release_date.strip():
            missing.append("releaseDate")
        else:
            try:
                date.fromisoformat(draft.release_date.strip())
            except ValueError:
                missing.append("releaseDate")
        if not draft.synopsis.strip():
            missing.append("synopsis")

        if draft.kind is CatalogKind.MOVIE:
            if not draft.download_url.strip():
                missing.append("downloadUrl")
        elif not any(season.episodes for season in draft.series_data):
            missing.append("seriesData")
        return missing

    def validate(self, draft: CatalogDraft) -> None:
        """Leve ValidationFailure si la soumission est incomplete."""
        missing = self.missing_fields(draft)
        if missing:
            raise ValidationFailure(missing)

    # ------------------------------------------------------------------
    # Encodage
    # ------------------------------------------------------------------

    def encode(
        self, draft: CatalogDraft, created_at: Optional[datetime] = None
    ) -> dict[str, Any]:
        """
        Construit le document persiste d'une soumission.

        Args:
            draft: Soumission accumulee par l'assistant
            created_at: Horodatage de creation (defaut: maintenant, UTC)

        Returns:
            Le document a inserer dans la collection

        Raises:
            ValidationFailure: Si un champ requis manque
        """
        self.validate(draft)
        timestamp = created_at or datetime.now(timezone.utc)

        document: dict[str, Any] = {
            "kind": draft.kind.value,
            "title": draft.title.strip(),
            "trailerUrl": draft.trailer_url.strip(),
            "posterUrl": draft.poster_url.strip(),
            "bannerUrl": draft.banner_url.strip(),
            "synopsis": draft.synopsis.strip(),
            "releaseDate": draft.release_date.strip(),
            "categories": list(normalize_categories(draft.categories)),
            "createdAt": timestamp.isoformat(),
        }

        if draft.kind is CatalogKind.MOVIE:
            document["downloadUrl"] = draft.download_url.strip()
            document["fill"] = bool(draft.fill)
        else:
            # Les saisons vides sont ignorees, l'ordre de finalisation est conserve
            document["seriesData"] = [
                self._encode_season(season)
                for season in draft.series_data
                if season.episodes
            ]
        return document

    @staticmethod
    def _encode_season(season: Season) -> dict[str, Any]:
        return {
            "season": season.season,
            "episodes": [
                {
                    "episode": episode.episode,
                    "episodeTitle": episode.title,
                    "downloadLink": episode.download_link,
                }
                for episode in season.episodes
            ],
        }

    @staticmethod
    def encode_appended_episode(episode: AppendedEpisode) -> dict[str, str]:
        """Forme plate ajoutee a la liste `episodes` par la console."""
        return {
            "title": episode.title,
            "season": episode.season,
            "episode": episode.episode,
            "downloadLink": episode.download_link,
        }

    # ------------------------------------------------------------------
    # Decodage
    # ------------------------------------------------------------------

    @staticmethod
    def infer_kind(data: dict[str, Any]) -> CatalogKind:
        """
        Determine la variante d'un document brut.

        Une liste `episodes` ou `seriesData` non vide, ou un `kind` explicite
        a "series", designe une Serie ; tout le reste est un Film.
        """
        for field_name in ("episodes", "seriesData"):
            value = data.get(field_name)
            if isinstance(value, list) and value:
                return CatalogKind.SERIES
        if data.get("kind") == CatalogKind.SERIES.value:
            return CatalogKind.SERIES
        return CatalogKind.MOVIE

    def decode(self, document: StoredDocument) -> CatalogItem:
        """Decode un document stocke en CatalogItem. Ne leve jamais."""
        data = document.data if isinstance(document.data, dict) else {}
        kind = self.infer_kind(data)
        categories = data.get("categories")

        item = CatalogItem(
            id=document.id,
            kind=kind,
            title=_text(data.get("title")),
            trailer_url=_text(data.get("trailerUrl")),
            poster_url=_text(data.get("posterUrl")),
            banner_url=_text(data.get("bannerUrl")),
            synopsis=_text(data.get("synopsis")),
            release_date=_text(data.get("releaseDate")),
            categories=normalize_categories(categories) if isinstance(categories, list) else (),
            created_at=_parse_timestamp(data.get("createdAt")),
            series_data=self._decode_series_data(data.get("seriesData")),
            appended_episodes=self._decode_appended(data.get("episodes")),
            accepts_episodes=isinstance(data.get("episodes"), list),
            version=document.version,
        )

        if kind is CatalogKind.MOVIE:
            item.download_url = _text(data.get("downloadUrl"))
            # Seul un booleen JSON compte : "false" ou 1 ne valent pas True
            fill = data.get("fill")
            item.fill = fill if isinstance(fill, bool) else False

        if item.has_mixed_episode_sources:
            # Deux representations d'episodes coexistent : seriesData (creation)
            # et episodes (ajouts console). Elles ne sont pas fusionnees.
            logger.debug(
                f"Document {document.id}: {len(item.series_data)} saison(s) et "
                f"{len(item.appended_episodes)} episode(s) ajoute(s) coexistent"
            )
        return item

    @staticmethod
    def _decode_series_data(value: Any) -> tuple[Season, ...]:
        seasons = []
        for entry in _dict_entries(value):
            episodes = tuple(
                SeasonEpisode(
                    episode=_text(raw.get("episode")),
                    title=_text(raw.get("episodeTitle", raw.get("title"))),
                    download_link=_text(raw.get("downloadLink")),
                )
                for raw in _dict_entries(entry.get("episodes"))
            )
            seasons.append(Season(season=_text(entry.get("season")), episodes=episodes))
        return tuple(seasons)

    @staticmethod
    def _decode_appended(value: Any) -> tuple[AppendedEpisode, ...]:
        return tuple(
            AppendedEpisode(
                title=_text(raw.get("title")),
                season=_text(raw.get("season")),
                episode=_text(raw.get("episode")),
                download_link=_text(raw.get("downloadLink")),
            )
            for raw in _dict_entries(value)
        )
