"""
Implementation SQLModel du document store.

Implemente l'interface IDocumentStore au-dessus d'une base SQL (SQLite par
defaut). Les operations bloquantes s'executent dans l'executor par defaut
via run_in_executor : chaque appel est donc un point de suspension de la
boucle asyncio, comme un aller-retour reseau vers un store heberge.

Les abonnes d'une collection recoivent le contenu complet de la collection
apres chaque ecriture (pas de diff incremental).
"""

import asyncio
import json
import threading
import uuid
from functools import partial
from typing import Any, Callable, Optional, TypeVar

from loguru import logger
from sqlalchemy import Engine, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from catalog_admin.core.ports.document_store import (
    DocumentNotFoundError,
    DocumentStoreError,
    IDocumentStore,
    SnapshotListener,
    Subscription,
    VersionConflictError,
)
from catalog_admin.core.value_objects.documents import DocumentSnapshot, StoredDocument
from catalog_admin.infrastructure.persistence.models import DocumentModel, utcnow
from catalog_admin.logging_config import operation_logger

T = TypeVar("T")


def _dumps(collection: str, data: dict[str, Any]) -> str:
    try:
        return json.dumps(data)
    except (TypeError, ValueError) as exc:
        raise DocumentStoreError(f"Document non serialisable pour {collection}: {exc}") from exc


def _new_document_id() -> str:
    return uuid.uuid4().hex[:20]


class SQLModelDocumentStore(IDocumentStore):
    """
    Document store persistant via SQLModel.

    Un verrou serialise l'acces a la base : les coroutines appelantes
    s'entrelacent librement entre deux allers-retours, mais deux requetes SQL
    ne s'executent jamais en meme temps sur la meme connexion.

    Example:
        store = SQLModelDocumentStore(engine)
        doc = await store.add("movies", {"title": "Nocturne"})
        subscription = await store.subscribe("movies", print)
        subscription.close()
    """

    def __init__(self, engine: Engine) -> None:
        """
        Initialise le store avec un engine dont les tables existent.

        Args:
            engine: Engine SQLAlchemy (voir init_db)
        """
        self._engine = engine
        self._lock = threading.Lock()
        self._listeners: dict[str, list[SnapshotListener]] = {}
        self._fingerprints: dict[str, tuple[tuple[str, int], ...]] = {}

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self._guarded, func, *args))

    def _guarded(self, func: Callable[..., T], *args: Any) -> T:
        with self._lock:
            try:
                return func(*args)
            except SQLAlchemyError as exc:
                raise DocumentStoreError(str(exc)) from exc

    @staticmethod
    def _to_document(model: DocumentModel) -> StoredDocument:
        return StoredDocument(
            id=model.id,
            data=model.data,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    # ------------------------------------------------------------------
    # Operations synchrones (executees dans l'executor)
    # ------------------------------------------------------------------

    def _get_sync(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        with Session(self._engine) as session:
            model = session.get(DocumentModel, (collection, doc_id))
            if model:
                return self._to_document(model)
            return None

    def _list_sync(self, collection: str) -> DocumentSnapshot:
        statement = (
            select(DocumentModel)
            .where(DocumentModel.collection == collection)
            .order_by(DocumentModel.created_at, DocumentModel.id)
        )
        with Session(self._engine) as session:
            models = session.exec(statement).all()
            documents = tuple(self._to_document(model) for model in models)
        return DocumentSnapshot(collection=collection, documents=documents, read_at=utcnow())

    def _add_sync(self, collection: str, data: dict[str, Any]) -> StoredDocument:
        model = DocumentModel(
            collection=collection,
            id=_new_document_id(),
            data_json=_dumps(collection, data),
        )
        with Session(self._engine) as session:
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_document(model)

    def _update_sync(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        expected_version: Optional[int],
    ) -> StoredDocument:
        with Session(self._engine) as session:
            model = session.get(DocumentModel, (collection, doc_id))
            if model is None:
                raise DocumentNotFoundError(collection, doc_id)

            current = model.version
            if expected_version is not None and current != expected_version:
                raise VersionConflictError(collection, doc_id, expected_version, current)

            data = {**model.data, **fields}
            created_at = model.created_at
            now = utcnow()

            # Ecriture conditionnelle sur la version lue : protege aussi des
            # ecritures d'un autre processus sur la meme base
            result = session.connection().execute(
                update(DocumentModel)
                .where(
                    DocumentModel.collection == collection,
                    DocumentModel.id == doc_id,
                    DocumentModel.version == current,
                )
                .values(data_json=_dumps(collection, data), version=current + 1, updated_at=now)
            )
            if result.rowcount != 1:
                session.rollback()
                raise VersionConflictError(collection, doc_id, current)
            session.commit()

        return StoredDocument(
            id=doc_id,
            data=data,
            version=current + 1,
            created_at=created_at,
            updated_at=now,
        )

    def _delete_sync(self, collection: str, doc_id: str) -> bool:
        with Session(self._engine) as session:
            model = session.get(DocumentModel, (collection, doc_id))
            if model is None:
                return False
            session.delete(model)
            session.commit()
            return True

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _unsubscribe(self, collection: str, listener: SnapshotListener) -> None:
        listeners = self._listeners.get(collection, [])
        if listener in listeners:
            listeners.remove(listener)
        if not listeners:
            self._listeners.pop(collection, None)
            self._fingerprints.pop(collection, None)
        logger.debug(f"Abonnement ferme sur {collection}")

    def _deliver(self, snapshot: DocumentSnapshot) -> None:
        self._fingerprints[snapshot.collection] = snapshot.fingerprint
        for listener in list(self._listeners.get(snapshot.collection, ())):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Listener en erreur sur {snapshot.collection}")

    async def _publish(self, collection: str) -> None:
        """Pousse le contenu complet de la collection a ses abonnes."""
        if not self._listeners.get(collection):
            return
        try:
            snapshot = await self.list_documents(collection)
        except DocumentStoreError as exc:
            # Pas de relance : les miroirs restent sur leur dernier snapshot
            logger.warning(f"Snapshot indisponible pour {collection}: {exc}")
            return
        self._deliver(snapshot)

    # ------------------------------------------------------------------
    # IDocumentStore
    # ------------------------------------------------------------------

    async def subscribe(
        self, collection: str, listener: SnapshotListener
    ) -> Subscription:
        """Abonne un listener et lui livre immediatement le snapshot courant."""
        snapshot = await self.list_documents(collection)
        self._listeners.setdefault(collection, []).append(listener)
        self._fingerprints[collection] = snapshot.fingerprint
        operation_logger(collection, "subscribe").debug(
            f"Abonnement ouvert ({len(snapshot)} documents)"
        )
        listener(snapshot)
        return Subscription(collection, partial(self._unsubscribe, collection, listener))

    async def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        """Recupere un document par son ID."""
        return await self._run(self._get_sync, collection, doc_id)

    async def list_documents(self, collection: str) -> DocumentSnapshot:
        """Lit le contenu complet d'une collection."""
        return await self._run(self._list_sync, collection)

    async def add(self, collection: str, data: dict[str, Any]) -> StoredDocument:
        """Insere un document et notifie les abonnes."""
        document = await self._run(self._add_sync, collection, data)
        operation_logger(collection, "add").debug(f"Document ajoute: {document.id}")
        await self._publish(collection)
        return document

    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> StoredDocument:
        """Fusionne des champs dans un document et notifie les abonnes."""
        document = await self._run(
            self._update_sync, collection, doc_id, fields, expected_version
        )
        operation_logger(collection, "update").debug(
            f"Document mis a jour: {doc_id} (v{document.version})"
        )
        await self._publish(collection)
        return document

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Supprime un document et notifie les abonnes s'il existait."""
        existed = await self._run(self._delete_sync, collection, doc_id)
        if existed:
            operation_logger(collection, "delete").debug(f"Document supprime: {doc_id}")
            await self._publish(collection)
        return existed

    async def refresh(self, collection: str) -> bool:
        """Publie un snapshot si la collection a change depuis le dernier envoi."""
        if not self._listeners.get(collection):
            return False
        snapshot = await self.list_documents(collection)
        if snapshot.fingerprint == self._fingerprints.get(collection):
            return False
        self._deliver(snapshot)
        return True
