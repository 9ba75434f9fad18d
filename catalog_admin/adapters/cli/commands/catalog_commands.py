"""
Commandes CLI de consultation et de maintenance du catalogue
(overview, list, show, delete, bulk-delete, add-episode, watch).
"""

import asyncio
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.prompt import Confirm

from catalog_admin.adapters.cli.display import (
    render_item_detail,
    render_items_table,
    render_overview,
)
from catalog_admin.adapters.cli.helpers import (
    console,
    exit_on_failure,
    open_admin_console,
    with_container,
)
from catalog_admin.core.entities.catalog import AppendedEpisode
from catalog_admin.core.ports.document_store import DocumentStoreError


def overview() -> None:
    """Affiche le nombre d'utilisateurs et d'items du catalogue."""
    asyncio.run(_overview_async())


@with_container()
async def _overview_async(container) -> None:
    async with open_admin_console(container) as admin:
        console.print(render_overview(admin.overview()))


def list_items(
    search: Annotated[
        str,
        typer.Option("--search", "-s", help="Filtre sur le titre (insensible a la casse)"),
    ] = "",
) -> None:
    """Liste les items du catalogue."""
    asyncio.run(_list_items_async(search))


@with_container()
async def _list_items_async(container, search: str) -> None:
    async with open_admin_console(container) as admin:
        items = admin.search(search)
        if not items:
            console.print("[yellow]Aucun item.[/yellow]")
            return
        console.print(render_items_table(items))


def show(
    item_id: Annotated[str, typer.Argument(help="ID de l'item")],
) -> None:
    """Affiche le detail d'un item."""
    asyncio.run(_show_async(item_id))


@with_container()
async def _show_async(container, item_id: str) -> None:
    async with open_admin_console(container) as admin:
        item = admin.catalog.get(item_id)
        if item is None:
            console.print(f"[red]Item introuvable: {item_id}[/red]")
            raise typer.Exit(1)
        console.print(render_item_detail(item))


def delete(
    item_id: Annotated[str, typer.Argument(help="ID de l'item a supprimer")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Ne pas demander de confirmation")
    ] = False,
) -> None:
    """Supprime un item du catalogue."""
    if not yes and not Confirm.ask(f"Supprimer l'item {item_id} ?", console=console):
        raise typer.Exit(0)
    asyncio.run(_delete_async(item_id))


@with_container()
async def _delete_async(container, item_id: str) -> None:
    async with open_admin_console(container) as admin:
        exit_on_failure(await admin.delete_item(item_id))


def bulk_delete(
    item_ids: Annotated[list[str], typer.Argument(help="IDs des items a supprimer")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Ne pas demander de confirmation")
    ] = False,
) -> None:
    """
    Supprime plusieurs items en parallele.

    Un echec partiel n'annule pas les suppressions reussies.
    """
    if not yes and not Confirm.ask(
        f"Supprimer {len(item_ids)} item(s) ?", console=console
    ):
        raise typer.Exit(0)
    asyncio.run(_bulk_delete_async(item_ids))


@with_container()
async def _bulk_delete_async(container, item_ids: list[str]) -> None:
    async with open_admin_console(container) as admin:
        for item_id in item_ids:
            admin.select(item_id)
        exit_on_failure(await admin.delete_selected())


def add_episode(
    item_id: Annotated[str, typer.Argument(help="ID de la serie")],
    title: Annotated[str, typer.Option("--title", "-t", help="Titre de l'episode")],
    season: Annotated[str, typer.Option("--season", "-s", help="Saison")],
    episode: Annotated[str, typer.Option("--episode", "-e", help="Episode")],
    link: Annotated[str, typer.Option("--link", "-l", help="Lien de telechargement")],
) -> None:
    """Ajoute un episode a une serie existante."""
    new_episode = AppendedEpisode(
        title=title, season=season, episode=episode, download_link=link
    )
    asyncio.run(_add_episode_async(item_id, new_episode))


@with_container()
async def _add_episode_async(container, item_id: str, new_episode: AppendedEpisode) -> None:
    async with open_admin_console(container) as admin:
        exit_on_failure(await admin.add_episode(item_id, new_episode))


def watch(
    max_updates: Annotated[
        Optional[int],
        typer.Option("--max-updates", "-n", help="Arreter apres N snapshots"),
    ] = None,
) -> None:
    """Affiche les compteurs a chaque nouveau snapshot (Ctrl-C pour quitter)."""
    try:
        asyncio.run(_watch_async(max_updates))
    except KeyboardInterrupt:
        console.print("[dim]Surveillance arretee.[/dim]")


@with_container()
async def _watch_async(container, max_updates: Optional[int]) -> None:
    config = container.config()
    store = container.document_store()

    async with open_admin_console(container) as admin:
        console.print(render_overview(admin.overview()))
        shown = 1
        seen = (admin.catalog.handle.generation, admin.users.generation)

        while max_updates is None or shown < max_updates:
            await asyncio.sleep(config.watch_interval_seconds)
            for collection in (config.catalog_collection, config.users_collection):
                try:
                    await store.refresh(collection)
                except DocumentStoreError as exc:
                    logger.warning(f"Relecture impossible de {collection}: {exc}")

            current = (admin.catalog.handle.generation, admin.users.generation)
            if current != seen:
                seen = current
                shown += 1
                console.print(render_overview(admin.overview()))
