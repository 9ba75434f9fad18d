"""
Catalog Admin - Console d'administration d'un catalogue de films et series.

Ce package fournit la synchronisation et les mutations du catalogue :
miroirs temps reel des collections distantes, reconciliation des deux formes
de soumission (Film / Serie) en un schema persiste unique, et operations
de creation, suppression et ajout d'episodes.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, objets valeur, exceptions)
- services/ : Couche application (miroirs, reconciliation, mutations, assistant)
- adapters/ : Couche interface (CLI)
- infrastructure/ : Persistance (document store SQLModel)
"""

__version__ = "0.1.0"
