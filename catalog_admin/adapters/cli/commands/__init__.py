"""Sous-package CLI commands - re-exporte les commandes publiques."""

from catalog_admin.adapters.cli.commands.catalog_commands import (
    add_episode,
    bulk_delete,
    delete,
    list_items,
    overview,
    show,
    watch,
)
from catalog_admin.adapters.cli.commands.submission_commands import (
    add_movie,
    add_series,
)

__all__ = [
    # catalogue
    "add_episode",
    "bulk_delete",
    "delete",
    "list_items",
    "overview",
    "show",
    "watch",
    # soumission
    "add_movie",
    "add_series",
]
