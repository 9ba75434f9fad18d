"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- StoredDocument : Document brut restitue par le document store
- DocumentSnapshot : Contenu complet d'une collection a un instant donne
"""

from catalog_admin.core.value_objects.documents import (
    DocumentSnapshot,
    StoredDocument,
)

__all__ = [
    "DocumentSnapshot",
    "StoredDocument",
]
