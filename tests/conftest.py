"""
Fixtures pytest partagees pour les tests de la console catalogue.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec base SQLite temporaire
- Document store reel sur cette base
- Soumissions types (film, serie)
"""

from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy import Engine

from catalog_admin.config import Settings
from catalog_admin.core.entities.catalog import (
    CatalogDraft,
    CatalogKind,
    Season,
    SeasonEpisode,
)
from catalog_admin.infrastructure.persistence.database import create_db_engine, init_db
from catalog_admin.infrastructure.persistence.document_store import SQLModelDocumentStore
from catalog_admin.services.mutations import CatalogMutationGateway
from catalog_admin.services.reconciler import CatalogReconciler


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler la base et les logs de chaque test.
    """
    return Settings(
        _env_file=None,  # Ignorer le fichier .env pour les tests
        database_url=f"sqlite:///{tmp_path}/test.db",
        log_file=tmp_path / "test.log",
        append_max_attempts=5,
    )


@pytest.fixture
def engine(test_settings: Settings) -> Iterator[Engine]:
    """Engine SQLite avec les tables creees."""
    db_engine = create_db_engine(test_settings.database_url)
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def store(engine: Engine) -> SQLModelDocumentStore:
    """Document store reel sur la base temporaire."""
    return SQLModelDocumentStore(engine)


@pytest.fixture
def reconciler() -> CatalogReconciler:
    return CatalogReconciler()


@pytest.fixture
def gateway(
    store: SQLModelDocumentStore, reconciler: CatalogReconciler, test_settings: Settings
) -> CatalogMutationGateway:
    """Passerelle de mutation branchee sur le store de test."""
    return CatalogMutationGateway(
        store,
        reconciler,
        collection=test_settings.catalog_collection,
        append_max_attempts=test_settings.append_max_attempts,
    )


@pytest.fixture
def movie_draft() -> CatalogDraft:
    """Soumission d'un film type."""
    return CatalogDraft(
        kind=CatalogKind.MOVIE,
        title="Nocturne",
        release_date="2024-05-01",
        synopsis="...",
        categories=("Thriller",),
        download_url="https://x/d",
        fill=False,
    )


@pytest.fixture
def series_draft() -> CatalogDraft:
    """Soumission d'une serie avec une saison finalisee."""
    return CatalogDraft(
        kind=CatalogKind.SERIES,
        title="Harbor Lights",
        release_date="2023-09-14",
        synopsis="Un port, une disparition.",
        categories=("Drame", "Mystere"),
        series_data=(
            Season(
                season="1",
                episodes=(SeasonEpisode(episode="1", title="Pilot", download_link="https://x/e1"),),
            ),
        ),
    )
