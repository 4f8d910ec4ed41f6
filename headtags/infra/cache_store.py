"""
Stores de cache clé/valeur avec tags d'invalidation.

Ce module fournit une implémentation Redis (entrées `SET ... EX`, index de tags dans des sets
`tag:{name}`) et une implémentation en mémoire adaptée aux tests et au développement. Les valeurs
sont des blobs opaques (bytes).
"""

from __future__ import annotations

import time
from collections.abc import Iterable

import redis


class TaggedCacheStore:
    """Contrat commun des stores de cache taggés."""

    def load(self, key: str) -> bytes | None:
        raise NotImplementedError

    def save(
        self, data: bytes, key: str, tags: Iterable[str] = (), lifetime: int | None = None
    ) -> bool:
        raise NotImplementedError

    def remove(self, key: str) -> bool:
        raise NotImplementedError

    def clean(self, tags: Iterable[str]) -> int:
        """Supprime toutes les entrées portant au moins un des tags; renvoie le nombre supprimé."""
        raise NotImplementedError


class InMemoryCacheStore(TaggedCacheStore):
    """Store en mémoire avec expiration paresseuse (utilisé pour dev/tests)."""

    def __init__(self) -> None:
        self._vals: dict[str, bytes] = {}
        self._exp: dict[str, float] = {}
        self._tags: dict[str, set[str]] = {}

    def _purge_if_expired(self, key: str) -> None:
        exp = self._exp.get(key)
        if exp is not None and exp <= time.time():
            self._drop(key)

    def _drop(self, key: str) -> bool:
        existed = self._vals.pop(key, None) is not None
        self._exp.pop(key, None)
        for keys in self._tags.values():
            keys.discard(key)
        return existed

    def load(self, key: str) -> bytes | None:
        self._purge_if_expired(key)
        return self._vals.get(key)

    def save(
        self, data: bytes, key: str, tags: Iterable[str] = (), lifetime: int | None = None
    ) -> bool:
        self._vals[key] = data
        if lifetime:
            self._exp[key] = time.time() + int(lifetime)
        else:
            self._exp.pop(key, None)
        for tag in tags:
            self._tags.setdefault(tag, set()).add(key)
        return True

    def remove(self, key: str) -> bool:
        return self._drop(key)

    def clean(self, tags: Iterable[str]) -> int:
        keys: set[str] = set()
        for tag in tags:
            keys |= self._tags.pop(tag, set())
        return sum(1 for key in keys if self._drop(key))


class RedisCacheStore(TaggedCacheStore):
    """Store adossé à Redis (clé: valeur brute, tags: sets `tag:{name}`)."""

    TAG_PREFIX = "tag:"

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        """Crée un client Redis à partir de l'URL fournie (ou utilise le client injecté)."""
        if client is None:
            client = redis.Redis.from_url(url)
            client.ping()
        self.client = client

    def load(self, key: str) -> bytes | None:
        raw = self.client.get(key)
        if raw is None:
            return None
        return raw.encode("utf-8") if isinstance(raw, str) else raw

    def save(
        self, data: bytes, key: str, tags: Iterable[str] = (), lifetime: int | None = None
    ) -> bool:
        pipe = self.client.pipeline()
        if lifetime:
            pipe.set(key, data, ex=int(lifetime))
        else:
            pipe.set(key, data)
        for tag in tags:
            pipe.sadd(f"{self.TAG_PREFIX}{tag}", key)
        results = pipe.execute()
        return bool(results[0]) if results else False

    def remove(self, key: str) -> bool:
        return bool(self.client.delete(key))

    def clean(self, tags: Iterable[str]) -> int:
        removed = 0
        for tag in tags:
            tag_key = f"{self.TAG_PREFIX}{tag}"
            members = self.client.smembers(tag_key) or set()
            keys = [m.decode("utf-8") if isinstance(m, bytes) else m for m in members]
            if keys:
                removed += int(self.client.delete(*keys))
            self.client.delete(tag_key)
        return removed


def build_cache_store(url: str | None, require_redis: bool = False) -> tuple[TaggedCacheStore, str]:
    """Construit le store (Redis si possible) et renvoie aussi le nom du backend retenu."""
    if url:
        try:
            return RedisCacheStore(url), "redis"
        except Exception as err:
            if require_redis:
                raise RuntimeError("Redis required but unavailable") from err
            return InMemoryCacheStore(), "memory-fallback"
    if require_redis:
        raise RuntimeError("Redis required but REDIS_URL not set")
    return InMemoryCacheStore(), "memory"
