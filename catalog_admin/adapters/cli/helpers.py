"""
Utilitaires partages pour les commandes CLI de la console catalogue.

Ce module fournit :
- console : instance Rich Console partagee
- with_container : decorateur injectant un container initialise
- open_admin_console : ouvre une AdminConsole a partir du container
- exit_on_failure : affiche le message d'un ActionResult et sort en erreur
"""

from contextlib import asynccontextmanager
from functools import wraps
from typing import AsyncIterator

import typer
from rich.console import Console

from catalog_admin.container import Container
from catalog_admin.services.admin_console import ActionResult, AdminConsole, open_console

console = Console()


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), cree les tables du document store.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            if requires_db:
                container.database.init()
            return await func(container, *args, **kwargs)
        return wrapper
    return decorator


@asynccontextmanager
async def open_admin_console(container: Container) -> AsyncIterator[AdminConsole]:
    """Ouvre les miroirs du catalogue et des utilisateurs via le container."""
    async with open_console(
        container.document_store(),
        container.config(),
        reconciler=container.reconciler(),
        mutations=container.mutation_gateway(),
    ) as admin:
        yield admin


def exit_on_failure(result: ActionResult) -> None:
    """Affiche le resultat d'une action ; sort avec le code 1 en cas d'echec."""
    if result.ok:
        console.print(f"[green]{result.message}[/green]")
        return
    console.print(f"[red]{result.message}[/red]")
    if result.failed_ids:
        console.print(f"[red]En echec: {', '.join(result.failed_ids)}[/red]")
    raise typer.Exit(1)
