"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe CATALOG_,
et peut optionnellement être fournie via un fichier .env.

Les noms de collections font partie du contrat avec le document store :
ils ne devraient etre modifies que pour pointer vers un autre environnement.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de catalog_admin/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe CATALOG_.
    Exemple : CATALOG_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Document store
    database_url: str = Field(default="sqlite:///catalog.db")
    catalog_collection: str = Field(default="movies", min_length=1)
    users_collection: str = Field(default="users", min_length=1)

    # Mutations
    append_max_attempts: int = Field(default=5, ge=1)

    # Surveillance des snapshots (commande watch)
    watch_interval_seconds: float = Field(default=2.0, gt=0)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/catalog_admin.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Normalise le niveau de log en majuscules."""
        return str(v).upper()
