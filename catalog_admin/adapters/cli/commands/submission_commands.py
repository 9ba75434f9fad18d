"""
Commandes CLI de soumission (add-movie, add-series).

Les deux commandes passent par le SubmissionWizard : les champs communs sont
fournis en options, les saisons d'une serie sont saisies interactivement.
"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.prompt import Confirm, Prompt

from catalog_admin.adapters.cli.helpers import (
    console,
    exit_on_failure,
    open_admin_console,
    with_container,
)
from catalog_admin.core.exceptions import ValidationFailure
from catalog_admin.services.wizard import (
    AddCategory,
    AddEpisode,
    Advance,
    FinalizeSeason,
    SetField,
    SetSeasonLabel,
    SubmissionWizard,
    ToggleFill,
    ToggleSeries,
)

TitleOption = Annotated[str, typer.Option("--title", "-t", help="Titre")]
ReleaseDateOption = Annotated[
    str, typer.Option("--release-date", "-r", help="Date de sortie (AAAA-MM-JJ)")
]
SynopsisOption = Annotated[str, typer.Option("--synopsis", help="Synopsis")]
CategoryOption = Annotated[
    Optional[list[str]],
    typer.Option("--category", "-c", help="Categorie (option repetable)"),
]
TrailerOption = Annotated[str, typer.Option("--trailer-url", help="URL de la bande-annonce")]
PosterOption = Annotated[str, typer.Option("--poster-url", help="URL de l'affiche")]
BannerOption = Annotated[str, typer.Option("--banner-url", help="URL de la banniere")]


def _common_wizard(
    title: str,
    release_date: str,
    synopsis: str,
    categories: Optional[list[str]],
    trailer_url: str,
    poster_url: str,
    banner_url: str,
) -> SubmissionWizard:
    """Assistant pre-rempli avec les champs de l'etape 0."""
    wizard = SubmissionWizard()
    for name, value in (
        ("title", title),
        ("release_date", release_date),
        ("synopsis", synopsis),
        ("trailer_url", trailer_url),
        ("poster_url", poster_url),
        ("banner_url", banner_url),
    ):
        wizard.dispatch(SetField(name, value))
    for category in categories or []:
        wizard.dispatch(AddCategory(category))
    return wizard


def add_movie(
    title: TitleOption,
    release_date: ReleaseDateOption,
    synopsis: SynopsisOption,
    download_url: Annotated[
        str, typer.Option("--download-url", "-d", help="URL de telechargement")
    ],
    category: CategoryOption = None,
    trailer_url: TrailerOption = "",
    poster_url: PosterOption = "",
    banner_url: BannerOption = "",
    fill: Annotated[
        bool, typer.Option("--fill", help="Banniere en mode remplissage")
    ] = False,
) -> None:
    """Ajoute un film au catalogue."""
    wizard = _common_wizard(
        title, release_date, synopsis, category, trailer_url, poster_url, banner_url
    )
    wizard.dispatch(SetField("download_url", download_url))
    if fill:
        wizard.dispatch(ToggleFill())
    asyncio.run(_submit_async(wizard))


def add_series(
    title: TitleOption,
    release_date: ReleaseDateOption,
    synopsis: SynopsisOption,
    category: CategoryOption = None,
    trailer_url: TrailerOption = "",
    poster_url: PosterOption = "",
    banner_url: BannerOption = "",
) -> None:
    """
    Ajoute une serie au catalogue.

    Les saisons et episodes sont saisis interactivement ; un numero
    d'episode vide termine la saison en cours.
    """
    wizard = _common_wizard(
        title, release_date, synopsis, category, trailer_url, poster_url, banner_url
    )
    wizard.dispatch(ToggleSeries())
    wizard.dispatch(Advance())
    _collect_seasons(wizard)
    asyncio.run(_submit_async(wizard))


def _collect_seasons(wizard: SubmissionWizard) -> None:
    """Boucle interactive de saisie des saisons."""
    while True:
        next_label = str(len(wizard.state.series_data) + 1)
        wizard.dispatch(SetSeasonLabel(Prompt.ask("Saison", default=next_label, console=console)))

        while True:
            episode = Prompt.ask(
                "Episode (vide pour terminer la saison)", default="", console=console
            )
            if not episode.strip():
                break
            episode_title = Prompt.ask("Titre de l'episode", console=console)
            link = Prompt.ask("Lien de telechargement", console=console)
            try:
                wizard.dispatch(AddEpisode(episode, episode_title, link))
            except ValidationFailure as exc:
                console.print(f"[red]{exc}[/red]")

        wizard.dispatch(FinalizeSeason())
        count = len(wizard.state.series_data)
        console.print(f"[cyan]{count} saison(s) finalisee(s)[/cyan]")
        if not Confirm.ask("Ajouter une autre saison ?", default=False, console=console):
            break


@with_container()
async def _submit_async(container, wizard: SubmissionWizard) -> None:
    async with open_admin_console(container) as admin:
        result = await admin.submit(wizard)
        if result.ok:
            console.print(f"[dim]ID: {result.item_id}[/dim]")
        exit_on_failure(result)
