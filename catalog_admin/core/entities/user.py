"""
Entité utilisateur.

Les utilisateurs sont geres par le systeme d'identite externe : la console
ne fait que refleter la collection `users` pour en afficher le nombre.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UserRecord:
    """
    Utilisateur reflete depuis la collection `users` (lecture seule).

    Attributs :
        id : Identifiant du document
        attributes : Attributs opaques du document
    """

    id: str
    attributes: dict[str, Any] = field(default_factory=dict)
