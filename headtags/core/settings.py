"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default

HEAD_PLACEHOLDER = "<!-- {{HEADTAGS:PLACEHOLDER:HEAD_ADDITIONAL}} -->"


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "headtags"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True

    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False

    # Collecte des éléments head
    HEADTAGS_ENABLED: bool = True
    HEADTAGS_PLACEHOLDER: str = HEAD_PLACEHOLDER
    # Classes de réponse (chemin pointé) jamais modifiées par l'injection
    HEADTAGS_SKIP_RESPONSE_CLASSES: list[str] = [
        "starlette.responses.FileResponse",
        "starlette.responses.StreamingResponse",
    ]

    # Cache des éléments head par fragment (invalidé par tags, TTL découplé du fragment)
    FRAGMENT_CACHE_KEY_PREFIX: str = "headtags_fragment_"
    FRAGMENT_CACHE_LIFETIME: int = 3600 * 24 * 30

    # Cache page entière (optionnel)
    PAGE_CACHE_ENABLED: bool = False
    PAGE_CACHE_KEY_PREFIX: str = "headtags_page_"
    PAGE_CACHE_LIFETIME: int = 3600 * 24 * 30

    # Cache de contenu des fragments (pipeline de rendu hôte)
    CONTENT_CACHE_KEY_PREFIX: str = "fragment_html_"


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
