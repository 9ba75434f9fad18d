"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI :
configuration, engine et document store, reconciliation et mutations.
"""

from dependency_injector import containers, providers

from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.document_store import SQLModelDocumentStore
from .services.mutations import CatalogMutationGateway
from .services.reconciler import CatalogReconciler


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables une fois
        store = container.document_store()
        gateway = container.mutation_gateway()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Engine partage par toutes les sessions du store
    engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db, engine=engine)

    # Document store - Singleton : il porte les abonnements en cours
    document_store = providers.Singleton(SQLModelDocumentStore, engine=engine)

    # Reconciliation (stateless - Singleton)
    reconciler = providers.Singleton(CatalogReconciler)

    mutation_gateway = providers.Factory(
        CatalogMutationGateway,
        store=document_store,
        reconciler=reconciler,
        collection=config.provided.catalog_collection,
        append_max_attempts=config.provided.append_max_attempts,
    )
