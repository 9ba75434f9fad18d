"""Interface en ligne de commande de la console catalogue."""
