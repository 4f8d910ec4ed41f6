"""Cache du contenu HTML des fragments (côté pipeline de rendu hôte).

Les entrées sont stockées sous `CONTENT_CACHE_KEY_PREFIX + clé de cache du fragment`, avec les
tags du fragment, pour que l'invalidation par tag touche à la fois le contenu et les éléments
head associés.
"""

from __future__ import annotations

from collections.abc import Iterable

from headtags.infra.cache_store import TaggedCacheStore


class ContentCache:
    """Cache du HTML rendu des fragments."""

    def __init__(self, store: TaggedCacheStore, key_prefix: str = "fragment_html_"):
        self.store = store
        self.key_prefix = key_prefix

    def _key(self, cache_key: str) -> str:
        return f"{self.key_prefix}{cache_key}"

    def load(self, cache_key: str) -> str | None:
        raw = self.store.load(self._key(cache_key))
        return raw.decode("utf-8") if raw is not None else None

    def save(
        self, html: str, cache_key: str, tags: Iterable[str] = (), lifetime: int | None = None
    ) -> bool:
        return self.store.save(html.encode("utf-8"), self._key(cache_key), tags, lifetime)

    def remove(self, cache_key: str) -> bool:
        return self.store.remove(self._key(cache_key))
