"""
Objets valeur pour les documents du document store.

Un StoredDocument est la forme brute d'un document tel que le store le
restitue ; un DocumentSnapshot est le contenu complet d'une collection a un
instant donne. Un snapshot remplace integralement le precedent : il n'y a
jamais de fusion partielle.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class StoredDocument:
    """
    Document brut d'une collection.

    Attributs :
        id : Identifiant attribue par le store
        data : Champs du document (types JSON)
        version : Version geree par le store, incrementee a chaque ecriture
        created_at : Date d'insertion cote store
        updated_at : Date de derniere ecriture cote store
    """

    id: str
    data: dict[str, Any] = field(default_factory=dict)
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DocumentSnapshot:
    """
    Contenu complet d'une collection au moment de la lecture.

    Attributs :
        collection : Nom de la collection
        documents : Documents dans l'ordre d'insertion
        read_at : Instant de lecture
    """

    collection: str
    documents: tuple[StoredDocument, ...] = ()
    read_at: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def ids(self) -> tuple[str, ...]:
        """Identifiants des documents, dans l'ordre du snapshot."""
        return tuple(doc.id for doc in self.documents)

    @property
    def fingerprint(self) -> tuple[tuple[str, int], ...]:
        """Empreinte (id, version) permettant de detecter un changement."""
        return tuple((doc.id, doc.version) for doc in self.documents)

    def get(self, doc_id: str) -> Optional[StoredDocument]:
        """Retourne le document d'ID donne, ou None."""
        for doc in self.documents:
            if doc.id == doc_id:
                return doc
        return None
