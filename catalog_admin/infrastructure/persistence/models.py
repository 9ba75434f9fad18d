"""
Modeles SQLModel du document store.

Une seule table `documents` heberge toutes les collections : chaque ligne est
un document JSON identifie par (collection, id). La colonne `version` est
incrementee a chaque ecriture et sert aux ecritures conditionnelles.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Instant courant en UTC."""
    return datetime.now(timezone.utc)


class DocumentModel(SQLModel, table=True):
    """
    Modele representant un document d'une collection.

    Le champ data_json stocke le document serialise en JSON.
    """

    __tablename__ = "documents"

    collection: str = Field(primary_key=True)
    id: str = Field(primary_key=True)
    data_json: str = Field(default="{}")  # JSON: {"title": "...", ...}
    version: int = Field(default=1)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def data(self) -> dict[str, Any]:
        """Retourne le document deserialise."""
        if self.data_json:
            return json.loads(self.data_json)
        return {}
