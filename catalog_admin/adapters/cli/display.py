"""
Affichage Rich des items du catalogue.
"""

from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from catalog_admin.core.entities.catalog import CatalogItem
from catalog_admin.services.admin_console import OverviewCounts, kind_label


def render_overview(counts: OverviewCounts) -> Panel:
    """Panneau des compteurs de la vue d'ensemble."""
    return Panel(
        f"[bold blue]Utilisateurs :[/bold blue] {counts.users}\n"
        f"[bold green]Items :[/bold green] {counts.items}",
        title="Vue d'ensemble",
        expand=False,
    )


def render_items_table(items: list[CatalogItem]) -> Table:
    """Tableau des items : un item par ligne."""
    table = Table(title=f"Catalogue ({len(items)})")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Titre", style="bold")
    table.add_column("Type")
    table.add_column("Sortie")
    table.add_column("Categories")
    table.add_column("Episodes", justify="right")

    for item in items:
        table.add_row(
            item.id,
            item.title or "[dim](sans titre)[/dim]",
            kind_label(item.kind),
            item.release_date,
            ", ".join(item.categories),
            str(item.episode_count) if item.is_series else "-",
        )
    return table


def render_item_detail(item: CatalogItem) -> Tree:
    """Arborescence detaillee d'un item (saisons et episodes ajoutes)."""
    tree = Tree(f"[bold]{item.title}[/bold] [dim]({kind_label(item.kind)}, {item.id})[/dim]")
    tree.add(f"Sortie : {item.release_date}")
    tree.add(f"Categories : {', '.join(item.categories) or '-'}")
    tree.add(f"Synopsis : {item.synopsis}")
    tree.add(f"Bande-annonce : {item.trailer_url or '-'}")
    tree.add(f"Affiche : {item.poster_url or '-'}")
    tree.add(f"Banniere : {item.banner_url or '-'}")

    if not item.is_series:
        tree.add(f"Telechargement : {item.download_url or '-'}")
        tree.add(f"Remplissage : {'oui' if item.fill else 'non'}")

    for season in item.series_data:
        branch = tree.add(f"[cyan]Saison {season.season}[/cyan]")
        for episode in season.episodes:
            branch.add(f"E{episode.episode} - {episode.title} [dim]{episode.download_link}[/dim]")

    if item.appended_episodes:
        branch = tree.add("[magenta]Episodes ajoutes[/magenta]")
        for episode in item.appended_episodes:
            branch.add(
                f"S{episode.season}:E{episode.episode} - {episode.title} "
                f"[dim]{episode.download_link}[/dim]"
            )
    return tree
