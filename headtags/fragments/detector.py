"""
Détection du statut de cache des fragments.

Évalue à la demande (jamais mémorisé) si un fragment est cacheable et si son contenu est déjà en
cache: certains fragments ne fixent leur durée de vie qu'au moment du rendu. Toute erreur est
journalisée et traduite en `False`.
"""

from __future__ import annotations

import structlog

from headtags.domain.fragment import fragment_name, lifetime_is_cacheable
from headtags.infra.content_cache import ContentCache


class FragmentCacheDetector:
    """Service de détection du statut de cache d'un fragment."""

    def __init__(self, content_cache: ContentCache) -> None:
        self.content_cache = content_cache
        self._log = structlog.get_logger(__name__).bind(component="fragment_cache_detector")

    def is_cacheable(self, fragment) -> bool:
        """Vrai si le fragment déclare une durée de vie de cache non nulle."""
        try:
            return lifetime_is_cacheable(fragment.get_cache_lifetime())
        except Exception as exc:
            self._log.warning(
                "fragment_cacheability_check_failed",
                fragment=fragment_name(fragment),
                error=str(exc),
            )
            return False

    def is_cached(self, fragment) -> bool:
        """Vrai si le fragment est cacheable et que son contenu existe sous sa propre clé."""
        if not self.is_cacheable(fragment):
            return False
        try:
            return self.content_cache.load(fragment.get_cache_key()) is not None
        except Exception as exc:
            self._log.debug(
                "fragment_cached_check_failed",
                fragment=fragment_name(fragment),
                error=str(exc),
            )
            return False
