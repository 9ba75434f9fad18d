"""
Miroirs locaux des collections distantes.

Un MirrorHandle garde une copie locale d'une collection, remplacee en bloc a
chaque snapshot pousse par le store : il n'y a jamais de fusion de mises a
jour partielles. Deux miroirs (catalogue, utilisateurs) ne sont pas correles :
l'un peut avoir n'importe quelle avance ou retard sur l'autre.

Le miroir ne relance rien : si le canal de notification tombe, il reste fige
sur son dernier snapshot jusqu'a ce que le store reprenne ses envois.

Usage:
    async with SubscriptionMirror(store) as mirror:
        catalog = await mirror.open("movies")
        print(catalog.count)
    # tous les handles ouverts sont fermes ici, y compris sur exception
"""

import asyncio
from typing import Optional

from loguru import logger

from catalog_admin.core.entities.catalog import CatalogItem
from catalog_admin.core.ports.document_store import IDocumentStore, Subscription
from catalog_admin.core.value_objects.documents import DocumentSnapshot, StoredDocument
from catalog_admin.services.reconciler import CatalogReconciler


class MirrorHandle:
    """
    Reflet local et vivant d'une collection.

    Attributes:
        collection: Nom de la collection refletee
        generation: Nombre de snapshots recus depuis l'ouverture
    """

    def __init__(self, collection: str) -> None:
        self.collection = collection
        self.generation = 0
        self._snapshot = DocumentSnapshot(collection=collection)
        self._subscription: Optional[Subscription] = None
        self._changed = asyncio.Event()

    @property
    def snapshot(self) -> DocumentSnapshot:
        return self._snapshot

    @property
    def documents(self) -> tuple[StoredDocument, ...]:
        return self._snapshot.documents

    @property
    def count(self) -> int:
        return len(self._snapshot)

    @property
    def is_open(self) -> bool:
        return self._subscription is not None and not self._subscription.closed

    def replace(self, snapshot: DocumentSnapshot) -> None:
        """Remplace integralement l'etat local par un nouveau snapshot."""
        self._snapshot = snapshot
        self.generation += 1
        logger.debug(
            f"Snapshot {self.generation} recu pour {self.collection} "
            f"({len(snapshot)} documents)"
        )
        # Reveille les attentes en cours puis arme un nouvel evenement
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    async def wait_for_update(
        self, after_generation: Optional[int] = None, timeout: Optional[float] = None
    ) -> DocumentSnapshot:
        """
        Attend un snapshot plus recent que after_generation.

        Args:
            after_generation: Generation de reference (defaut: generation courante)
            timeout: Delai maximum en secondes (None = illimite)

        Returns:
            Le snapshot courant une fois la generation depassee

        Raises:
            TimeoutError: Si aucun snapshot n'arrive dans le delai
        """
        target = self.generation if after_generation is None else after_generation

        async def _wait() -> None:
            while self.generation <= target:
                await self._changed.wait()

        await asyncio.wait_for(_wait(), timeout)
        return self._snapshot

    def _attach(self, subscription: Subscription) -> None:
        self._subscription = subscription

    def _detach(self) -> None:
        if self._subscription is not None:
            self._subscription.close()


class SubscriptionMirror:
    """
    Ouvre et ferme les miroirs de collections.

    Chaque handle ouvert doit etre ferme : utilise comme context manager
    asynchrone, le SubscriptionMirror ferme a la sortie tous les handles
    encore ouverts.
    """

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store
        self._handles: list[MirrorHandle] = []

    @property
    def handles(self) -> tuple[MirrorHandle, ...]:
        return tuple(self._handles)

    async def open(self, collection: str) -> MirrorHandle:
        """Ouvre un miroir ; le premier snapshot est deja applique au retour."""
        handle = MirrorHandle(collection)
        subscription = await self._store.subscribe(collection, handle.replace)
        handle._attach(subscription)
        self._handles.append(handle)
        logger.debug(f"Miroir ouvert sur {collection}")
        return handle

    def close(self, handle: MirrorHandle) -> None:
        """Detache un miroir. Sans effet s'il est deja ferme."""
        handle._detach()
        if handle in self._handles:
            self._handles.remove(handle)
            logger.debug(f"Miroir ferme sur {handle.collection}")

    def close_all(self) -> None:
        for handle in list(self._handles):
            self.close(handle)

    async def __aenter__(self) -> "SubscriptionMirror":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close_all()


class CatalogReadModel:
    """
    Vue decodee du miroir du catalogue.

    Les items sont decodes via le CatalogReconciler et mis en cache pour la
    generation courante du miroir.
    """

    def __init__(self, handle: MirrorHandle, reconciler: CatalogReconciler) -> None:
        self.handle = handle
        self._reconciler = reconciler
        self._cache_generation = -1
        self._items: tuple[CatalogItem, ...] = ()

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        if self._cache_generation != self.handle.generation:
            self._items = tuple(
                self._reconciler.decode(doc) for doc in self.handle.documents
            )
            self._cache_generation = self.handle.generation
        return self._items

    @property
    def count(self) -> int:
        return self.handle.count

    def get(self, item_id: str) -> Optional[CatalogItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def search(self, query: str = "") -> list[CatalogItem]:
        """Filtre les items dont le titre contient query (insensible a la casse)."""
        needle = query.strip().lower()
        if not needle:
            return list(self.items)
        return [item for item in self.items if needle in item.title.lower()]
