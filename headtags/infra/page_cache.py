"""
Stratégies de cache page entière pour le gestionnaire d'éléments head.

`NullCacheStrategy` désactive le cache (défaut). `PageHeadElementCacheStrategy` persiste
l'ensemble des éléments d'une page sous une clé dérivée de l'identifiant de page/requête.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping

import structlog

from headtags.domain.elements import HeadElement
from headtags.domain.serializer import HeadElementSerializer
from headtags.infra.cache_store import TaggedCacheStore

PAGE_CACHE_TAGS = ["headtags_page"]


class HeadElementCacheStrategy:
    """Contrat des stratégies de cache page entière."""

    enabled: bool = False

    def load(self) -> dict[str, HeadElement]:
        raise NotImplementedError

    def save(self, elements: Mapping[str, HeadElement]) -> bool:
        raise NotImplementedError

    def clear(self) -> bool:
        raise NotImplementedError

    def get_cache_key(self) -> str:
        raise NotImplementedError

    def get_cache_tags(self) -> list[str]:
        return []


class NullCacheStrategy(HeadElementCacheStrategy):
    """Stratégie nulle: toutes les opérations réussissent sans rien faire."""

    def load(self) -> dict[str, HeadElement]:
        return {}

    def save(self, elements: Mapping[str, HeadElement]) -> bool:
        return True

    def clear(self) -> bool:
        return True

    def get_cache_key(self) -> str:
        return "null_cache_strategy"


def page_identifier(method: str, url: str) -> str:
    """Identifiant de page stable dérivé de la méthode et de l'URL complète."""
    return hashlib.sha256(f"{method.upper()} {url}".encode()).hexdigest()[:32]


class PageHeadElementCacheStrategy(HeadElementCacheStrategy):
    """Cache des éléments d'une page entière, chargé une seule fois par requête."""

    def __init__(
        self,
        store: TaggedCacheStore,
        serializer: HeadElementSerializer,
        identifier: str,
        lifetime: int = 3600 * 24 * 30,
        key_prefix: str = "headtags_page_",
        enabled: bool = True,
    ) -> None:
        self.store = store
        self.serializer = serializer
        self.identifier = identifier
        self.lifetime = lifetime
        self.key_prefix = key_prefix
        self.enabled = enabled
        self._loaded = False
        self._cached: dict[str, HeadElement] = {}
        self._log = structlog.get_logger(__name__).bind(component="page_head_cache")

    def get_cache_key(self) -> str:
        return f"{self.key_prefix}{self.identifier}"

    def get_cache_tags(self) -> list[str]:
        return list(PAGE_CACHE_TAGS)

    def load(self) -> dict[str, HeadElement]:
        if not self.enabled or self._loaded:
            return dict(self._cached)
        key = self.get_cache_key()
        try:
            raw = self.store.load(key)
            if raw:
                self._cached = self.serializer.unserialize(json.loads(raw))
                self._log.debug(
                    "page_head_elements_loaded", cache_key=key, elements_count=len(self._cached)
                )
        except Exception as exc:
            self._log.error("page_head_elements_load_failed", cache_key=key, error=str(exc))
        self._loaded = True
        return dict(self._cached)

    def save(self, elements: Mapping[str, HeadElement]) -> bool:
        if not self.enabled:
            return False
        key = self.get_cache_key()
        try:
            payload = json.dumps(self.serializer.serialize(elements)).encode("utf-8")
            ok = self.store.save(payload, key, self.get_cache_tags(), self.lifetime)
        except Exception as exc:
            self._log.error("page_head_elements_save_failed", cache_key=key, error=str(exc))
            return False
        if ok:
            self._cached = dict(elements)
            self._loaded = True
            self._log.debug("page_head_elements_saved", cache_key=key, elements_count=len(elements))
        return ok

    def clear(self) -> bool:
        if not self.enabled:
            return False
        key = self.get_cache_key()
        try:
            ok = self.store.remove(key)
        except Exception as exc:
            self._log.error("page_head_elements_clear_failed", cache_key=key, error=str(exc))
            return False
        self._cached = {}
        self._loaded = False
        return ok
