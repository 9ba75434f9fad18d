"""
Point d'entrée CLI de la console catalogue.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    add_episode,
    add_movie,
    add_series,
    bulk_delete,
    delete,
    list_items,
    overview,
    show,
    watch,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="catalog-admin",
    help="Console d'administration du catalogue de films et series",
)
container = Container()

# Consultation
app.command()(overview)
# Note: "list" masquerait le builtin, la fonction s'appelle list_items
app.command(name="list")(list_items)
app.command()(show)
app.command()(watch)

# Mutations
app.command()(delete)
app.command(name="bulk-delete")(bulk_delete)
app.command(name="add-episode")(add_episode)
app.command(name="add-movie")(add_movie)
app.command(name="add-series")(add_series)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Collection catalogue : {config.catalog_collection}")
    typer.echo(f"Collection utilisateurs : {config.users_collection}")
    typer.echo(f"Tentatives d'ajout d'episode : {config.append_max_attempts}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Catalog Admin v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de la console catalogue", version=__version__)

    app()


if __name__ == "__main__":
    main()
