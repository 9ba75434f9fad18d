"""
Service de la console d'administration.

Rassemble les miroirs (catalogue, utilisateurs), la passerelle de mutation et
l'assistant de soumission derriere des actions utilisateur. Chaque action
retourne un ActionResult : les echecs sont journalises et transformes en
message, aucun n'interrompt la console.

Responsabilites:
- Compteurs de la vue d'ensemble (utilisateurs, items)
- Recherche par titre et selection pour la suppression groupee
- Soumission d'un film ou d'une serie depuis l'assistant
- Suppression simple et groupee, ajout d'episode
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from loguru import logger

from catalog_admin.config import Settings
from catalog_admin.core.entities.catalog import AppendedEpisode, CatalogItem, CatalogKind
from catalog_admin.core.entities.user import UserRecord
from catalog_admin.core.exceptions import StoreCallFailure, ValidationFailure
from catalog_admin.core.ports.document_store import IDocumentStore
from catalog_admin.services.mirror import CatalogReadModel, MirrorHandle, SubscriptionMirror
from catalog_admin.services.mutations import CatalogMutationGateway
from catalog_admin.services.reconciler import CatalogReconciler
from catalog_admin.services.wizard import (
    MarkSubmitted,
    SubmissionWizard,
    WizardStep,
    WizardTransitionError,
    reduce,
)


@dataclass(frozen=True)
class OverviewCounts:
    """Compteurs de la vue d'ensemble."""

    users: int
    items: int


@dataclass
class ActionResult:
    """Résultat d'une action utilisateur."""

    ok: bool
    message: str
    item_id: Optional[str] = None
    failed_ids: list[str] = field(default_factory=list)


class AdminConsole:
    """
    Console d'administration du catalogue.

    Les lectures passent par les miroirs ; les ecritures par la passerelle.
    Apres une ecriture, seul le prochain snapshot du miroir fait foi.
    """

    def __init__(
        self,
        mutations: CatalogMutationGateway,
        catalog: CatalogReadModel,
        users: MirrorHandle,
    ) -> None:
        self._mutations = mutations
        self.catalog = catalog
        self.users = users
        self._selected: list[str] = []

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def overview(self) -> OverviewCounts:
        return OverviewCounts(users=self.users.count, items=self.catalog.count)

    def search(self, query: str = "") -> list[CatalogItem]:
        return self.catalog.search(query)

    def list_users(self) -> list[UserRecord]:
        """Utilisateurs du dernier snapshot (attributs opaques, lecture seule)."""
        return [UserRecord(id=doc.id, attributes=dict(doc.data)) for doc in self.users.documents]

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selected(self) -> tuple[str, ...]:
        return tuple(self._selected)

    def select(self, item_id: str) -> None:
        if item_id not in self._selected:
            self._selected.append(item_id)

    def deselect(self, item_id: str) -> None:
        if item_id in self._selected:
            self._selected.remove(item_id)

    def select_all(self, query: str = "") -> None:
        """Selectionne tous les items visibles pour la recherche donnee."""
        self._selected = [item.id for item in self.search(query)]

    def clear_selection(self) -> None:
        self._selected = []

    # ------------------------------------------------------------------
    # Ecriture
    # ------------------------------------------------------------------

    async def submit(self, wizard: SubmissionWizard) -> ActionResult:
        """
        Persiste la soumission de l'assistant.

        La transition vers SUBMITTED est verifiee avant tout appel au store ;
        l'assistant n'y passe qu'apres l'insertion reussie.
        """
        state = wizard.state
        label = "Serie" if state.is_series else "Film"
        try:
            submitted = reduce(state, MarkSubmitted())
        except WizardTransitionError:
            if state.step is WizardStep.SUBMITTED:
                return ActionResult(ok=False, message="Soumission deja effectuee.")
            return ActionResult(
                ok=False,
                message="Revenez a l'etape des saisons pour soumettre la serie.",
            )

        try:
            item_id = await self._mutations.create_from_draft(wizard.build_draft())
        except ValidationFailure as exc:
            return ActionResult(ok=False, message=str(exc))
        except StoreCallFailure:
            target = "de la serie" if state.is_series else "du film"
            return ActionResult(ok=False, message=f"Echec de l'ajout {target}.")
        wizard.state = submitted
        return ActionResult(ok=True, message=f"{label} ajoute avec succes !", item_id=item_id)

    async def delete_item(self, item_id: str) -> ActionResult:
        try:
            existed = await self._mutations.delete(item_id)
        except StoreCallFailure:
            return ActionResult(ok=False, message="Echec de la suppression.", item_id=item_id)
        self.deselect(item_id)
        if not existed:
            return ActionResult(ok=True, message="Item deja supprime.", item_id=item_id)
        return ActionResult(ok=True, message="Item supprime avec succes !", item_id=item_id)

    async def delete_selected(self) -> ActionResult:
        """
        Supprime tous les items selectionnes.

        Un echec partiel n'est pas distingue d'un echec total dans le message ;
        les IDs en echec restent selectionnes pour permettre une relance.
        """
        if not self._selected:
            return ActionResult(ok=False, message="Aucun item selectionne.")

        report = await self._mutations.bulk_delete(self._selected)
        self._selected = report.failed_ids
        if not report.ok:
            return ActionResult(
                ok=False,
                message="Echec de la suppression des items selectionnes.",
                failed_ids=report.failed_ids,
            )
        return ActionResult(ok=True, message="Items selectionnes supprimes avec succes !")

    async def add_episode(self, item_id: str, episode: AppendedEpisode) -> ActionResult:
        try:
            await self._mutations.append_episode(item_id, episode)
        except ValidationFailure as exc:
            return ActionResult(ok=False, message=str(exc), item_id=item_id)
        except StoreCallFailure:
            return ActionResult(
                ok=False, message="Echec de l'ajout de l'episode.", item_id=item_id
            )
        return ActionResult(ok=True, message="Episode ajoute avec succes !", item_id=item_id)


@asynccontextmanager
async def open_console(
    store: IDocumentStore,
    settings: Settings,
    reconciler: Optional[CatalogReconciler] = None,
    mutations: Optional[CatalogMutationGateway] = None,
) -> AsyncIterator[AdminConsole]:
    """
    Ouvre les deux miroirs et fournit une AdminConsole.

    Les miroirs sont fermes a la sortie du bloc, y compris sur exception.
    """
    reconciler = reconciler or CatalogReconciler()
    if mutations is None:
        mutations = CatalogMutationGateway(
            store,
            reconciler,
            collection=settings.catalog_collection,
            append_max_attempts=settings.append_max_attempts,
        )
    async with SubscriptionMirror(store) as mirror:
        catalog = await mirror.open(settings.catalog_collection)
        users = await mirror.open(settings.users_collection)
        read_model = CatalogReadModel(catalog, reconciler)
        logger.debug(
            f"Console ouverte: {read_model.count} item(s), {users.count} utilisateur(s)"
        )
        yield AdminConsole(mutations, read_model, users)


def kind_label(kind: CatalogKind) -> str:
    """Libelle affiche pour une variante."""
    return "Serie" if kind is CatalogKind.SERIES else "Film"
