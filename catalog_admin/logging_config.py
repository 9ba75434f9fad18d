"""
Configuration du logging de la console catalogue via loguru.

Chaque message porte un contexte `collection` / `operation` (valeur "-" hors
operation). La passerelle de mutation et le document store le renseignent via
operation_logger ; il apparait en console et dans chaque enregistrement JSON.
"""

import sys
from pathlib import Path

from loguru import logger

DEFAULT_CONTEXT = {"collection": "-", "operation": "-"}

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[collection]}/{extra[operation]}</magenta> | "
    "<level>{message}</level>"
)


def operation_logger(collection: str, operation: str):
    """Logger lie a une operation sur une collection."""
    return logger.bind(collection=collection, operation=operation)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/catalog_admin.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de la console catalogue.

    Args :
        log_level : Niveau minimum pour la sortie console
        log_file : Fichier JSON recevant tous les niveaux, snapshots compris
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conserves
    """
    logger.remove()
    logger.configure(extra=DEFAULT_CONTEXT)

    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug(f"Logging configure: {log_file} (rotation {rotation_size})")
