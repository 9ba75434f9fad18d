"""
Persistance du document store via SQLModel.

- database : Creation de l'engine et initialisation des tables
- models : Modele SQLModel de la table documents
- document_store : Implementation de IDocumentStore
"""

from catalog_admin.infrastructure.persistence.database import create_db_engine, init_db
from catalog_admin.infrastructure.persistence.document_store import SQLModelDocumentStore

__all__ = [
    "SQLModelDocumentStore",
    "create_db_engine",
    "init_db",
]
