"""
Passerelle de mutation du catalogue.

Operations d'ecriture sur la collection du catalogue :
- create : insertion atomique d'un document complet
- delete : suppression d'un document par ID
- bulk_delete : suppressions concurrentes et independantes, sans rollback
- append_episode : ajout d'un episode a la liste plate `episodes`

L'ajout d'episode est une lecture-modification-ecriture. Pour ne pas perdre
d'ajouts concurrents, l'ecriture est conditionnee a la version lue
(compare-and-swap) et relancee avec backoff en cas de conflit.

Les erreurs du store sont journalisees puis remontees en StoreCallFailure.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Iterable

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from catalog_admin.core.entities.catalog import AppendedEpisode, CatalogDraft, CatalogItem
from catalog_admin.core.exceptions import (
    PartialBulkFailure,
    StoreCallFailure,
    ValidationFailure,
)
from catalog_admin.core.ports.document_store import (
    DocumentNotFoundError,
    DocumentStoreError,
    IDocumentStore,
    VersionConflictError,
)
from catalog_admin.logging_config import operation_logger
from catalog_admin.services.reconciler import CatalogReconciler


def retry_on_conflict(max_attempts: int = 5, max_wait: float = 0.5):
    """
    Decorateur relancant une coroutine sur VersionConflictError.

    Le jitter de wait_random_exponential evite que deux ecrivains en conflit
    se relancent au meme instant.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type(VersionConflictError),
        wait=wait_random_exponential(multiplier=0.02, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


@dataclass
class BulkDeleteReport:
    """
    Resultat d'une suppression groupee.

    Attributes:
        deleted: IDs supprimes par le store
        missing: IDs deja absents (pas une erreur)
        failed: IDs en echec avec l'erreur correspondante
    """

    deleted: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    failed: dict[str, BaseException] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def failed_ids(self) -> list[str]:
        return list(self.failed)

    def raise_for_failures(self) -> None:
        """Leve PartialBulkFailure si au moins une suppression a echoue."""
        if self.failed:
            raise PartialBulkFailure(self.failed_ids, self.deleted + self.missing)


class CatalogMutationGateway:
    """
    Ecritures sur la collection du catalogue.

    Example:
        gateway = CatalogMutationGateway(store, CatalogReconciler())
        item_id = await gateway.create_from_draft(draft)
        report = await gateway.bulk_delete([a, b, c])
        item = await gateway.append_episode(item_id, episode)
    """

    def __init__(
        self,
        store: IDocumentStore,
        reconciler: CatalogReconciler,
        collection: str = "movies",
        append_max_attempts: int = 5,
    ) -> None:
        """
        Initialise la passerelle.

        Args:
            store: Document store cible
            reconciler: Encodage/decodage des documents du catalogue
            collection: Collection du catalogue
            append_max_attempts: Tentatives maximum d'un ajout d'episode en conflit
        """
        self._store = store
        self._reconciler = reconciler
        self.collection = collection
        self._append_max_attempts = append_max_attempts

    async def create(self, document: dict[str, Any]) -> str:
        """
        Insere un document complet. Retourne l'ID attribue par le store.

        Raises:
            StoreCallFailure: Si le store rejette l'insertion
        """
        log = operation_logger(self.collection, "create")
        try:
            stored = await self._store.add(self.collection, document)
        except DocumentStoreError as exc:
            log.error(f"Erreur lors de l'ajout de '{document.get('title', '')}': {exc}")
            raise StoreCallFailure("create") from exc
        log.info(f"Item ajoute: {stored.id} ({document.get('title', '')})")
        return stored.id

    async def create_from_draft(self, draft: CatalogDraft) -> str:
        """Encode une soumission (validation comprise) puis l'insere."""
        return await self.create(self._reconciler.encode(draft))

    async def delete(self, item_id: str) -> bool:
        """
        Supprime un item. Retourne False si le store ne le connaissait pas.

        Raises:
            StoreCallFailure: Si le store rejette la suppression
        """
        log = operation_logger(self.collection, "delete")
        try:
            existed = await self._store.delete(self.collection, item_id)
        except DocumentStoreError as exc:
            log.error(f"Erreur lors de la suppression de {item_id}: {exc}")
            raise StoreCallFailure("delete", item_id) from exc
        if existed:
            log.info(f"Item supprime: {item_id}")
        else:
            log.info(f"Item deja absent: {item_id}")
        return existed

    async def bulk_delete(self, item_ids: Iterable[str]) -> BulkDeleteReport:
        """
        Lance une suppression par ID, toutes en parallele.

        Le retour signifie seulement que chaque appel au store a abouti ou
        echoue : les suppressions reussies ne sont jamais annulees.
        """
        ids = list(dict.fromkeys(item_ids))
        results = await asyncio.gather(
            *(self._store.delete(self.collection, item_id) for item_id in ids),
            return_exceptions=True,
        )

        report = BulkDeleteReport()
        for item_id, result in zip(ids, results):
            if isinstance(result, BaseException):
                report.failed[item_id] = result
            elif result:
                report.deleted.append(item_id)
            else:
                report.missing.append(item_id)

        log = operation_logger(self.collection, "bulk_delete")
        if report.failed:
            log.warning(
                f"Suppression groupee partielle: {len(report.deleted)} supprime(s), "
                f"{len(report.failed)} en echec ({', '.join(report.failed_ids)})"
            )
        else:
            log.info(f"Suppression groupee: {len(report.deleted)} supprime(s)")
        return report

    async def append_episode(
        self, item_id: str, episode: AppendedEpisode
    ) -> CatalogItem:
        """
        Ajoute un episode a la liste plate `episodes` d'un item.

        La liste ecrite est toujours l'ancienne liste plus un element.

        Raises:
            ValidationFailure: Si l'item n'accepte pas d'episodes ou si
                l'episode est incomplet
            StoreCallFailure: Si l'item est introuvable, si le store rejette
                l'ecriture ou si les conflits persistent
        """
        missing = [
            name
            for name, value in (
                ("title", episode.title),
                ("season", episode.season),
                ("episode", episode.episode),
                ("downloadLink", episode.download_link),
            )
            if not value.strip()
        ]
        if missing:
            raise ValidationFailure(missing)

        entry = self._reconciler.encode_appended_episode(episode)
        log = operation_logger(self.collection, "append_episode")

        @retry_on_conflict(max_attempts=self._append_max_attempts)
        async def _do_append() -> CatalogItem:
            current = await self._store.get(self.collection, item_id)
            if current is None:
                raise DocumentNotFoundError(self.collection, item_id)

            item = self._reconciler.decode(current)
            if not (item.is_series or item.accepts_episodes):
                raise ValidationFailure(
                    ["episodes"], f"L'item {item_id} est un film : ajout d'episode refuse"
                )

            episodes = current.data.get("episodes")
            episodes = list(episodes) if isinstance(episodes, list) else []
            episodes.append(entry)

            try:
                updated = await self._store.update(
                    self.collection,
                    item_id,
                    {"episodes": episodes},
                    expected_version=current.version,
                )
            except VersionConflictError:
                log.warning(f"Conflit de version sur {item_id}, nouvelle tentative")
                raise
            return self._reconciler.decode(updated)

        try:
            item = await _do_append()
        except DocumentStoreError as exc:
            log.error(f"Erreur lors de l'ajout d'episode a {item_id}: {exc}")
            raise StoreCallFailure("append_episode", item_id) from exc

        log.info(
            f"Episode ajoute a {item_id}: S{episode.season}E{episode.episode} "
            f"({len(item.appended_episodes)} episode(s))"
        )
        return item
