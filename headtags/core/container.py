"""
Conteneur d'injection de dépendances et configuration application.

Instancie une fois par process les composants partagés (settings, registres de fabriques et de
stratégies, sérialiseur, store de cache, caches de fragments, détecteur) et expose un singleton
`container`. Les registres sont en lecture seule une fois le démarrage terminé; les objets propres
à une requête (gestionnaire, tracker, hooks) sont construits par `new_request_scope`.
"""

from __future__ import annotations

from dataclasses import dataclass

from headtags.config.flags import ff_page_cache_enabled
from headtags.core.settings import get_settings
from headtags.domain.factories import default_factory_registry
from headtags.domain.manager import HeadTagManager
from headtags.domain.serializer import HeadElementSerializer
from headtags.domain.strategies import default_strategy_registry
from headtags.fragments.detector import FragmentCacheDetector
from headtags.fragments.hooks import FragmentHooks
from headtags.fragments.tracker import HeadElementTracker
from headtags.infra.cache_store import build_cache_store
from headtags.infra.content_cache import ContentCache
from headtags.infra.fragment_cache import FragmentHeadElementCache
from headtags.infra.page_cache import (
    HeadElementCacheStrategy,
    NullCacheStrategy,
    PageHeadElementCacheStrategy,
)


@dataclass
class RequestScope:
    """Objets propres au rendu d'une page."""

    manager: HeadTagManager
    tracker: HeadElementTracker
    hooks: FragmentHooks


class Container:
    def __init__(self, settings=None, store=None):
        self.settings = settings or get_settings()
        self.factory_registry = default_factory_registry()
        self.strategy_registry = default_strategy_registry()
        self.serializer = HeadElementSerializer(self.factory_registry, self.strategy_registry)
        if store is None:
            store, self.storage_backend = build_cache_store(
                self.settings.REDIS_URL, getattr(self.settings, "REQUIRE_REDIS", False)
            )
        else:
            self.storage_backend = type(store).__name__
        self.cache_store = store
        self.content_cache = ContentCache(store, self.settings.CONTENT_CACHE_KEY_PREFIX)
        self.fragment_cache = FragmentHeadElementCache(
            store,
            self.serializer,
            key_prefix=self.settings.FRAGMENT_CACHE_KEY_PREFIX,
            lifetime=self.settings.FRAGMENT_CACHE_LIFETIME,
        )
        self.detector = FragmentCacheDetector(self.content_cache)

    def page_cache_strategy(self, page_id: str | None) -> HeadElementCacheStrategy:
        if not page_id or not ff_page_cache_enabled():
            return NullCacheStrategy()
        return PageHeadElementCacheStrategy(
            self.cache_store,
            self.serializer,
            page_id,
            lifetime=self.settings.PAGE_CACHE_LIFETIME,
            key_prefix=self.settings.PAGE_CACHE_KEY_PREFIX,
        )

    def new_request_scope(self, page_id: str | None = None) -> RequestScope:
        """Construit gestionnaire, tracker et hooks pour une requête."""
        manager = HeadTagManager(self.factory_registry, self.page_cache_strategy(page_id))
        tracker = HeadElementTracker(manager, self.serializer)
        hooks = FragmentHooks(manager, tracker, self.detector, self.fragment_cache)
        return RequestScope(manager=manager, tracker=tracker, hooks=hooks)


container = Container()
