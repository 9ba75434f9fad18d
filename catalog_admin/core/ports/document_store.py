"""
Interface port pour le document store.

Le document store est un collaborateur externe opaque : il stocke des
documents JSON par collection et pousse le contenu complet d'une collection
a ses abonnes apres chaque changement. Son propre modele de replication
et de coherence ne fait pas partie du domaine.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from catalog_admin.core.value_objects.documents import DocumentSnapshot, StoredDocument

# Callback recevant chaque snapshot complet d'une collection
SnapshotListener = Callable[[DocumentSnapshot], None]


class DocumentStoreError(Exception):
    """Erreur remontee par le document store (rejet ou panne d'acces)."""


class DocumentNotFoundError(DocumentStoreError):
    """Le document cible n'existe pas dans la collection."""

    def __init__(self, collection: str, doc_id: str) -> None:
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document introuvable: {collection}/{doc_id}")


class VersionConflictError(DocumentStoreError):
    """
    Exception levee quand une ecriture conditionnelle trouve une autre version.

    Attributes:
        expected: Version attendue par l'appelant
        actual: Version trouvee dans le store (None si inconnue)
    """

    def __init__(
        self, collection: str, doc_id: str, expected: int, actual: Optional[int] = None
    ) -> None:
        self.collection = collection
        self.doc_id = doc_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Conflit de version sur {collection}/{doc_id}: "
            f"attendue {expected}, trouvee {actual}"
        )


class Subscription:
    """
    Abonnement actif a une collection.

    close() detache l'abonne : le store cesse de lui pousser des snapshots.
    Appeler close() plusieurs fois est sans effet.
    """

    def __init__(self, collection: str, on_close: Callable[[], None]) -> None:
        self.collection = collection
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._on_close()


class IDocumentStore(ABC):
    """
    Interface du document store.

    Toutes les operations sont des coroutines : chaque appel est un aller-retour
    unique avec le store et constitue un point de suspension.
    """

    @abstractmethod
    async def subscribe(
        self, collection: str, listener: SnapshotListener
    ) -> Subscription:
        """
        Abonne un listener a une collection.

        Le snapshot courant est livre immediatement, puis un snapshot complet
        apres chaque changement de la collection.
        """
        ...

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[StoredDocument]:
        """Recupere un document par son ID, None s'il n'existe pas."""
        ...

    @abstractmethod
    async def list_documents(self, collection: str) -> DocumentSnapshot:
        """Lit le contenu complet d'une collection."""
        ...

    @abstractmethod
    async def add(self, collection: str, data: dict[str, Any]) -> StoredDocument:
        """Insere un document ; le store attribue l'identifiant."""
        ...

    @abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> StoredDocument:
        """
        Fusionne des champs de premier niveau dans un document existant.

        Args :
            collection : Nom de la collection
            doc_id : ID du document
            fields : Champs a remplacer
            expected_version : Si fourni, l'ecriture n'a lieu que si la version
                courante est egale (compare-and-swap)

        Raises :
            DocumentNotFoundError : Le document n'existe pas
            VersionConflictError : La version ne correspond pas
        """
        ...

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        """Supprime un document. Retourne True si un document existait."""
        ...

    @abstractmethod
    async def refresh(self, collection: str) -> bool:
        """
        Relit la collection et pousse un snapshot si son contenu a change.

        Retourne True si un snapshot a ete publie.
        """
        ...
