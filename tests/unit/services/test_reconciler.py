"""
Tests pour CatalogReconciler - encodage des soumissions et decodage des documents.

Tests couvrant:
- Exclusivite des champs de variante (Film / Serie)
- Renommage title -> episodeTitle a l'encodage
- Validation des champs requis avant toute ecriture
- Inference de la variante pour les documents sans `kind`
- Decodage total des documents malformes
"""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from catalog_admin.core.entities.catalog import (
    AppendedEpisode,
    CatalogKind,
    Season,
    SeasonEpisode,
)
from catalog_admin.core.exceptions import ValidationFailure
from catalog_admin.core.value_objects.documents import StoredDocument
from catalog_admin.services.reconciler import CatalogReconciler, normalize_categories


def _doc(data, doc_id="d1", version=1) -> StoredDocument:
    return StoredDocument(id=doc_id, data=data, version=version)


# ============================================================================
# Encodage
# ============================================================================


class TestEncodeMovie:
    """Encodage d'une soumission Film."""

    def test_movie_never_carries_series_data(self, reconciler, movie_draft):
        document = reconciler.encode(movie_draft)
        assert "seriesData" not in document
        assert document["downloadUrl"] == "https://x/d"
        assert document["fill"] is False
        assert document["kind"] == "movie"

    def test_movie_ignores_series_data_from_draft(self, reconciler, movie_draft):
        draft = replace(
            movie_draft,
            series_data=(Season("1", (SeasonEpisode("1", "Pilot", "https://x/e1"),)),),
        )
        assert "seriesData" not in reconciler.encode(draft)

    def test_common_fields(self, reconciler, movie_draft):
        created = datetime(2024, 5, 2, 10, 0, tzinfo=timezone.utc)
        document = reconciler.encode(movie_draft, created_at=created)
        assert document["title"] == "Nocturne"
        assert document["releaseDate"] == "2024-05-01"
        assert document["synopsis"] == "..."
        assert document["categories"] == ["Thriller"]
        assert document["createdAt"] == created.isoformat()
        for name in ("trailerUrl", "posterUrl", "bannerUrl"):
            assert document[name] == ""


class TestEncodeSeries:
    """Encodage d'une soumission Serie."""

    def test_series_never_carries_movie_fields(self, reconciler, series_draft):
        draft = replace(series_draft, download_url="https://x/d", fill=True)
        document = reconciler.encode(draft)
        assert "downloadUrl" not in document
        assert "fill" not in document
        assert document["kind"] == "series"

    def test_episode_title_is_renamed(self, reconciler, series_draft):
        """Le champ title d'un episode est persiste sous episodeTitle."""
        document = reconciler.encode(series_draft)
        assert document["seriesData"] == [
            {
                "season": "1",
                "episodes": [
                    {"episode": "1", "episodeTitle": "Pilot", "downloadLink": "https://x/e1"}
                ],
            }
        ]

    def test_season_order_is_preserved(self, reconciler, series_draft):
        seasons = (
            Season("2", (SeasonEpisode("1", "Retour", "https://x/s2e1"),)),
            Season("1", (SeasonEpisode("1", "Pilot", "https://x/s1e1"),)),
        )
        document = reconciler.encode(replace(series_draft, series_data=seasons))
        assert [s["season"] for s in document["seriesData"]] == ["2", "1"]


class TestValidation:
    """Validation avant persistance."""

    @pytest.mark.parametrize(
        "field_name, persisted",
        [("title", "title"), ("release_date", "releaseDate"), ("synopsis", "synopsis")],
    )
    def test_missing_common_field_blocks_encode(
        self, reconciler, movie_draft, field_name, persisted
    ):
        draft = replace(movie_draft, **{field_name: "   "})
        with pytest.raises(ValidationFailure) as exc_info:
            reconciler.encode(draft)
        assert persisted in exc_info.value.fields

    def test_movie_requires_download_url(self, reconciler, movie_draft):
        with pytest.raises(ValidationFailure) as exc_info:
            reconciler.encode(replace(movie_draft, download_url=""))
        assert exc_info.value.fields == ("downloadUrl",)

    def test_series_requires_a_season_with_episodes(self, reconciler, series_draft):
        with pytest.raises(ValidationFailure) as exc_info:
            reconciler.encode(replace(series_draft, series_data=(Season("1"),)))
        assert exc_info.value.fields == ("seriesData",)

    def test_release_date_must_be_iso(self, reconciler, movie_draft):
        with pytest.raises(ValidationFailure) as exc_info:
            reconciler.encode(replace(movie_draft, release_date="01/05/2024"))
        assert "releaseDate" in exc_info.value.fields

    def test_all_missing_fields_are_reported(self, reconciler, movie_draft):
        draft = replace(movie_draft, title="", synopsis="", download_url="")
        assert reconciler.missing_fields(draft) == ["title", "synopsis", "downloadUrl"]


class TestNormalizeCategories:
    """Nettoyage des categories."""

    def test_duplicates_removed_keeping_first_insertion(self):
        assert normalize_categories(["Drame", "Action", "Drame"]) == ("Drame", "Action")

    def test_membership_is_case_sensitive(self):
        assert normalize_categories(["drame", "Drame"]) == ("drame", "Drame")

    def test_blank_and_non_string_values_dropped(self):
        assert normalize_categories(["  Thriller ", "", "   ", 42]) == ("Thriller",)


# ============================================================================
# Decodage
# ============================================================================


class TestInferKind:
    """Inference de la variante."""

    @pytest.mark.parametrize(
        "data",
        [
            {"episodes": [{"title": "Storm"}]},
            {"seriesData": [{"season": "1", "episodes": []}]},
            {"episodes": ["valeur inattendue"]},
            {"kind": "movie", "episodes": [{"title": "Storm"}]},
        ],
    )
    def test_non_empty_episode_list_means_series(self, data):
        assert CatalogReconciler.infer_kind(data) is CatalogKind.SERIES

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"episodes": []},
            {"seriesData": []},
            {"episodes": None, "seriesData": "oops"},
            {"series": True},
        ],
    )
    def test_without_episodes_means_movie(self, data):
        assert CatalogReconciler.infer_kind(data) is CatalogKind.MOVIE

    def test_explicit_series_kind(self):
        assert CatalogReconciler.infer_kind({"kind": "series"}) is CatalogKind.SERIES


class TestDecode:
    """Decodage des documents stockes."""

    def test_decode_encoded_series(self, reconciler, series_draft):
        item = reconciler.decode(_doc(reconciler.encode(series_draft)))
        assert item.kind is CatalogKind.SERIES
        assert item.series_data[0].episodes[0].episode_title == "Pilot"
        assert item.download_url is None
        assert item.fill is None

    def test_decode_legacy_movie_without_kind(self, reconciler):
        data = {
            "title": "Vieux film",
            "downloadUrl": "https://x/old",
            "fill": True,
            "series": False,
            "categories": ["Action", "Action"],
            "createdAt": "2023-01-01T12:00:00+00:00",
        }
        item = reconciler.decode(_doc(data, version=4))
        assert item.kind is CatalogKind.MOVIE
        assert item.download_url == "https://x/old"
        assert item.fill is True
        assert item.categories == ("Action",)
        assert item.created_at == datetime(2023, 1, 1, 12, tzinfo=timezone.utc)
        assert item.version == 4
        assert not item.accepts_episodes

    @pytest.mark.parametrize("raw", ["false", "true", 1, None])
    def test_non_boolean_fill_decodes_false(self, reconciler, raw):
        data = {"title": "Vieux film", "downloadUrl": "https://x/old", "fill": raw}
        item = reconciler.decode(_doc(data))
        assert item.kind is CatalogKind.MOVIE
        assert item.fill is False

    def test_decode_admin_appended_episodes(self, reconciler):
        data = {
            "title": "Ancienne serie",
            "episodes": [
                {"title": "Storm", "season": "1", "episode": "3", "downloadLink": "https://x/e3"}
            ],
        }
        item = reconciler.decode(_doc(data))
        assert item.kind is CatalogKind.SERIES
        assert item.accepts_episodes
        assert item.appended_episodes == (
            AppendedEpisode(title="Storm", season="1", episode="3", download_link="https://x/e3"),
        )

    def test_empty_episode_list_accepts_episodes_but_stays_movie(self, reconciler):
        item = reconciler.decode(_doc({"title": "X", "episodes": []}))
        assert item.kind is CatalogKind.MOVIE
        assert item.accepts_episodes

    def test_both_representations_are_kept_apart(self, reconciler, series_draft):
        data = reconciler.encode(series_draft)
        data["episodes"] = [
            {"title": "Bonus", "season": "1", "episode": "2", "downloadLink": "https://x/b"}
        ]
        item = reconciler.decode(_doc(data))
        assert item.has_mixed_episode_sources
        assert len(item.series_data[0].episodes) == 1
        assert len(item.appended_episodes) == 1

    def test_episode_title_falls_back_to_title(self, reconciler):
        data = {"seriesData": [{"season": "1", "episodes": [{"episode": "1", "title": "Ancien"}]}]}
        item = reconciler.decode(_doc(data))
        assert item.series_data[0].episodes[0].title == "Ancien"

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"title": None, "categories": "Drame", "createdAt": "hier"},
            {"seriesData": [None, 3, {"season": 2, "episodes": [None]}]},
            {"episodes": [1, 2, 3]},
            {"createdAt": 1700000000},
        ],
    )
    def test_decode_never_raises(self, reconciler, data):
        item = reconciler.decode(_doc(data))
        assert item.kind in (CatalogKind.MOVIE, CatalogKind.SERIES)
        assert item.id == "d1"

    def test_malformed_entries_are_skipped(self, reconciler):
        data = {"seriesData": [None, {"season": 2, "episodes": [None, {"episode": 1}]}]}
        item = reconciler.decode(_doc(data))
        assert len(item.series_data) == 1
        assert item.series_data[0].season == "2"
        assert item.series_data[0].episodes[0].episode == "1"
