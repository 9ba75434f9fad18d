"""
Configuration de la base de donnees du document store.

Ce module fournit :
- Engine SQLAlchemy configure pour un acces depuis les threads de l'executor
- Fonction d'initialisation des tables

La base de donnees est configuree via CATALOG_DATABASE_URL (defaut: sqlite:///catalog.db).
"""

from pathlib import Path

from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine


def _is_memory_url(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///") or ":memory:" in database_url


def create_db_engine(database_url: str) -> Engine:
    """
    Cree l'engine pour l'URL donnee.

    Pour SQLite, le repertoire parent du fichier est cree si necessaire et
    l'engine accepte les connexions depuis plusieurs threads. Une base en
    memoire partage une connexion unique (StaticPool) pour que toutes les
    sessions voient les memes tables.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False)

    if _is_memory_url(database_url):
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    db_path = Path(database_url.replace("sqlite:///", "", 1))
    db_path.parent.mkdir(exist_ok=True, parents=True)
    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    """
    Initialise la base de donnees en creant toutes les tables.

    Cette fonction importe les modeles pour enregistrer leurs metadonnees
    dans SQLModel.metadata, puis cree les tables correspondantes si elles
    n'existent pas deja.

    Doit etre appelee une fois au demarrage de l'application.
    """
    # L'import est fait ici pour eviter les imports circulaires
    from catalog_admin.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
