"""
Exceptions du domaine catalogue.

Taxonomie des echecs d'une action utilisateur :
- ValidationFailure : champ requis manquant, bloque avant tout appel au store
- StoreCallFailure : appel create/delete/update rejete ou en echec reseau
- PartialBulkFailure : une partie seulement des suppressions groupees a echoue

Aucune de ces erreurs n'est fatale au processus : chacune est limitee a
l'action qui l'a declenchee.
"""

from typing import Iterable, Optional


class CatalogError(Exception):
    """Classe de base des erreurs du catalogue."""


class ValidationFailure(CatalogError):
    """
    Exception levee quand une soumission est incomplete ou invalide.

    Attributes:
        fields: Noms des champs manquants ou invalides
    """

    def __init__(self, fields: Iterable[str], message: Optional[str] = None) -> None:
        self.fields = tuple(fields)
        if message is None:
            message = f"Champs requis manquants ou invalides: {', '.join(self.fields)}"
        super().__init__(message)


class StoreCallFailure(CatalogError):
    """
    Exception levee quand un appel au document store echoue.

    Attributes:
        operation: Operation tentee (create, delete, append_episode)
        document_id: Document concerne, None pour une creation
    """

    def __init__(self, operation: str, document_id: Optional[str] = None) -> None:
        self.operation = operation
        self.document_id = document_id
        target = f" ({document_id})" if document_id else ""
        super().__init__(f"Echec de l'appel au store: {operation}{target}")


class PartialBulkFailure(CatalogError):
    """
    Exception levee quand une suppression groupee n'a pas entierement abouti.

    Les suppressions reussies ne sont pas annulees : seul le prochain
    snapshot du miroir donne l'etat reel de la collection.

    Attributes:
        failed_ids: IDs dont la suppression a echoue
        succeeded_ids: IDs effectivement traites par le store
    """

    def __init__(
        self, failed_ids: Iterable[str], succeeded_ids: Iterable[str] = ()
    ) -> None:
        self.failed_ids = tuple(failed_ids)
        self.succeeded_ids = tuple(succeeded_ids)
        super().__init__(
            f"{len(self.failed_ids)} suppression(s) en echec: {', '.join(self.failed_ids)}"
        )
