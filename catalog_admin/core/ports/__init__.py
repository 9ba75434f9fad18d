"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Port document store :
- IDocumentStore : Collections de documents avec abonnement aux snapshots
- Subscription : Abonnement actif, a fermer par l'appelant
- DocumentStoreError, DocumentNotFoundError, VersionConflictError : Erreurs du store
"""

from catalog_admin.core.ports.document_store import (
    DocumentNotFoundError,
    DocumentStoreError,
    IDocumentStore,
    SnapshotListener,
    Subscription,
    VersionConflictError,
)

__all__ = [
    "DocumentNotFoundError",
    "DocumentStoreError",
    "IDocumentStore",
    "SnapshotListener",
    "Subscription",
    "VersionConflictError",
]
