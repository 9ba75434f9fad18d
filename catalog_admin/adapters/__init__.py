"""
Couche adaptateurs (interfaces utilisateur).

- cli/ : Console en ligne de commande (Typer + Rich)
"""
