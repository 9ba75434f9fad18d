"""
Assistant de soumission d'un item du catalogue.

L'etat de l'assistant est une valeur immutable (WizardState) transformee par
des actions discretes (dataclasses) via reduce(). Les etapes sont :

    COLLECTING_COMMON -> COLLECTING_SERIES_DETAIL -> SUBMITTED   (serie)
    COLLECTING_COMMON -> SUBMITTED                               (film)

A l'etape serie, les episodes s'accumulent dans une liste de travail propre
a la saison en cours ; FinalizeSeason scelle cette liste en Season, l'ajoute
a series_data et repart d'une liste vide. Le retour arriere conserve toutes
les donnees deja saisies.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from catalog_admin.core.entities.catalog import (
    CatalogDraft,
    CatalogKind,
    Season,
    SeasonEpisode,
)
from catalog_admin.core.exceptions import ValidationFailure
from catalog_admin.services.reconciler import normalize_categories


class WizardTransitionError(Exception):
    """Action impossible dans l'etape courante de l'assistant."""


class WizardStep(int, Enum):
    """Étapes de l'assistant."""

    COLLECTING_COMMON = 0
    COLLECTING_SERIES_DETAIL = 1
    SUBMITTED = 2


# Champs texte modifiables via SetField
TEXT_FIELDS = frozenset(
    {
        "title",
        "release_date",
        "synopsis",
        "trailer_url",
        "poster_url",
        "banner_url",
        "download_url",
    }
)


@dataclass(frozen=True)
class WizardState:
    """État complet de l'assistant."""

    step: WizardStep = WizardStep.COLLECTING_COMMON
    is_series: bool = False

    # Étape 0 : champs communs (+ downloadUrl pour un film)
    title: str = ""
    release_date: str = ""
    synopsis: str = ""
    categories: tuple[str, ...] = ()
    trailer_url: str = ""
    poster_url: str = ""
    banner_url: str = ""
    download_url: str = ""
    fill: bool = False

    # Étape 1 : saison en cours et saisons finalisees
    season_label: str = ""
    working_episodes: tuple[SeasonEpisode, ...] = ()
    series_data: tuple[Season, ...] = ()

    @property
    def kind(self) -> CatalogKind:
        return CatalogKind.SERIES if self.is_series else CatalogKind.MOVIE


# ----------------------------------------------------------------------------
# Actions
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class SetField:
    name: str
    value: str


@dataclass(frozen=True)
class ToggleSeries:
    pass


@dataclass(frozen=True)
class ToggleFill:
    pass


@dataclass(frozen=True)
class AddCategory:
    name: str


@dataclass(frozen=True)
class RemoveCategory:
    name: str


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class SetSeasonLabel:
    label: str


@dataclass(frozen=True)
class AddEpisode:
    episode: str
    title: str
    download_link: str


@dataclass(frozen=True)
class RemoveEpisode:
    index: int


@dataclass(frozen=True)
class FinalizeSeason:
    pass


@dataclass(frozen=True)
class MarkSubmitted:
    pass


@dataclass(frozen=True)
class Reset:
    pass


WizardAction = Union[
    SetField,
    ToggleSeries,
    ToggleFill,
    AddCategory,
    RemoveCategory,
    Advance,
    GoBack,
    SetSeasonLabel,
    AddEpisode,
    RemoveEpisode,
    FinalizeSeason,
    MarkSubmitted,
    Reset,
]


# ----------------------------------------------------------------------------
# Transitions
# ----------------------------------------------------------------------------


def finalize_season(state: WizardState) -> WizardState:
    """
    Scelle la liste de travail en Season et l'ajoute a series_data.

    Sans episode en cours, l'etat est retourne tel quel. Une saison sans
    libelle recoit le numero d'ordre suivant ("1", "2", ...).
    """
    if not state.working_episodes:
        return state
    label = state.season_label.strip() or str(len(state.series_data) + 1)
    season = Season(season=label, episodes=state.working_episodes)
    return replace(
        state,
        series_data=state.series_data + (season,),
        working_episodes=(),
        season_label="",
    )


def _require_step(state: WizardState, *steps: WizardStep, action: object) -> None:
    if state.step not in steps:
        raise WizardTransitionError(
            f"{type(action).__name__} impossible a l'etape {state.step.name}"
        )


def reduce(state: WizardState, action: WizardAction) -> WizardState:
    """
    Applique une action a l'etat et retourne le nouvel etat.

    Raises:
        WizardTransitionError: Action impossible dans l'etape courante
        ValidationFailure: Episode incomplet (AddEpisode)
    """
    if isinstance(action, Reset):
        return WizardState()

    editing = (WizardStep.COLLECTING_COMMON, WizardStep.COLLECTING_SERIES_DETAIL)

    if isinstance(action, SetField):
        _require_step(state, *editing, action=action)
        if action.name not in TEXT_FIELDS:
            raise WizardTransitionError(f"Champ inconnu: {action.name}")
        return replace(state, **{action.name: action.value})

    if isinstance(action, ToggleSeries):
        _require_step(state, WizardStep.COLLECTING_COMMON, action=action)
        return replace(state, is_series=not state.is_series)

    if isinstance(action, ToggleFill):
        _require_step(state, *editing, action=action)
        return replace(state, fill=not state.fill)

    if isinstance(action, AddCategory):
        _require_step(state, *editing, action=action)
        return replace(
            state, categories=normalize_categories(state.categories + (action.name,))
        )

    if isinstance(action, RemoveCategory):
        _require_step(state, *editing, action=action)
        return replace(
            state, categories=tuple(c for c in state.categories if c != action.name)
        )

    if isinstance(action, Advance):
        _require_step(state, WizardStep.COLLECTING_COMMON, action=action)
        if not state.is_series:
            raise WizardTransitionError("Un film se soumet directement depuis l'etape 0")
        return replace(state, step=WizardStep.COLLECTING_SERIES_DETAIL)

    if isinstance(action, GoBack):
        _require_step(state, *editing, action=action)
        if state.step is WizardStep.COLLECTING_COMMON:
            return state
        return replace(state, step=WizardStep.COLLECTING_COMMON)

    if isinstance(action, SetSeasonLabel):
        _require_step(state, WizardStep.COLLECTING_SERIES_DETAIL, action=action)
        return replace(state, season_label=action.label.strip())

    if isinstance(action, AddEpisode):
        _require_step(state, WizardStep.COLLECTING_SERIES_DETAIL, action=action)
        episode = SeasonEpisode(
            episode=action.episode.strip(),
            title=action.title.strip(),
            download_link=action.download_link.strip(),
        )
        missing = [
            name
            for name, value in (
                ("episode", episode.episode),
                ("title", episode.title),
                ("downloadLink", episode.download_link),
            )
            if not value
        ]
        if missing:
            raise ValidationFailure(missing)
        return replace(state, working_episodes=state.working_episodes + (episode,))

    if isinstance(action, RemoveEpisode):
        _require_step(state, WizardStep.COLLECTING_SERIES_DETAIL, action=action)
        if not 0 <= action.index < len(state.working_episodes):
            return state
        episodes = list(state.working_episodes)
        del episodes[action.index]
        return replace(state, working_episodes=tuple(episodes))

    if isinstance(action, FinalizeSeason):
        _require_step(state, WizardStep.COLLECTING_SERIES_DETAIL, action=action)
        return finalize_season(state)

    if isinstance(action, MarkSubmitted):
        expected = (
            WizardStep.COLLECTING_SERIES_DETAIL
            if state.is_series
            else WizardStep.COLLECTING_COMMON
        )
        _require_step(state, expected, action=action)
        sealed = finalize_season(state) if state.is_series else state
        return replace(sealed, step=WizardStep.SUBMITTED)

    raise WizardTransitionError(f"Action inconnue: {action!r}")


def build_draft(state: WizardState) -> CatalogDraft:
    """
    Construit la soumission a partir de l'etat de l'assistant.

    Pour une serie, les episodes en cours sont d'abord scelles en saison.
    La validation des champs requis est faite par le CatalogReconciler.
    """
    if state.is_series:
        sealed = finalize_season(state)
        return CatalogDraft(
            kind=CatalogKind.SERIES,
            title=state.title,
            trailer_url=state.trailer_url,
            poster_url=state.poster_url,
            banner_url=state.banner_url,
            synopsis=state.synopsis,
            release_date=state.release_date,
            categories=state.categories,
            series_data=sealed.series_data,
        )
    return CatalogDraft(
        kind=CatalogKind.MOVIE,
        title=state.title,
        trailer_url=state.trailer_url,
        poster_url=state.poster_url,
        banner_url=state.banner_url,
        synopsis=state.synopsis,
        release_date=state.release_date,
        categories=state.categories,
        download_url=state.download_url,
        fill=state.fill,
    )


class SubmissionWizard:
    """
    Assistant de soumission avec etat courant.

    Example:
        wizard = SubmissionWizard()
        wizard.dispatch(SetField("title", "Nocturne"))
        wizard.dispatch(ToggleSeries())
        wizard.dispatch(Advance())
        wizard.dispatch(AddEpisode("1", "Pilot", "https://x/e1"))
        draft = wizard.build_draft()
    """

    def __init__(self, state: WizardState | None = None) -> None:
        self.state = state or WizardState()

    @property
    def step(self) -> WizardStep:
        return self.state.step

    @property
    def is_submitted(self) -> bool:
        return self.state.step is WizardStep.SUBMITTED

    def dispatch(self, action: WizardAction) -> WizardState:
        """Applique une action ; l'etat reste inchange si elle echoue."""
        self.state = reduce(self.state, action)
        return self.state

    def build_draft(self) -> CatalogDraft:
        return build_draft(self.state)
