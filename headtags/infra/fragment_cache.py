"""
Cache des éléments head propres à un fragment.

La clé est dérivée de la clé de cache du fragment lui-même et les tags reprennent ceux du
fragment: invalider le fragment invalide aussi ses éléments head. La durée de vie est fixe et
découplée de celle du fragment; l'invalidation passe par les tags partagés.

Toutes les opérations échouent « fermé »: elles journalisent et renvoient `False`/`{}` sans
jamais propager d'exception.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

import structlog

from headtags.app.metrics import FRAGMENT_HEAD_CACHE_OPS
from headtags.domain.elements import HeadElement
from headtags.domain.fragment import fragment_name
from headtags.domain.serializer import HeadElementSerializer
from headtags.infra.cache_store import TaggedCacheStore

CACHE_KEY_PREFIX = "headtags_fragment_"
CACHE_TAGS = ["headtags_fragment"]
CACHE_LIFETIME = 3600 * 24 * 30  # 30 jours


class FragmentHeadElementCache:
    """Persistance des éléments head introduits par un fragment."""

    def __init__(
        self,
        store: TaggedCacheStore,
        serializer: HeadElementSerializer,
        key_prefix: str = CACHE_KEY_PREFIX,
        lifetime: int = CACHE_LIFETIME,
    ) -> None:
        self.store = store
        self.serializer = serializer
        self.key_prefix = key_prefix
        self.lifetime = lifetime
        self._log = structlog.get_logger(__name__).bind(component="fragment_head_cache")

    def cache_key_for(self, fragment) -> str:
        """Clé `{prefix}{md5(clé de cache du fragment)}`."""
        fragment_key = str(fragment.get_cache_key())
        return f"{self.key_prefix}{hashlib.md5(fragment_key.encode('utf-8')).hexdigest()}"

    def cache_tags_for(self, fragment) -> list[str]:
        tags = list(CACHE_TAGS)
        for tag in fragment.get_cache_tags() or []:
            if tag not in tags:
                tags.append(str(tag))
        return tags

    def save(self, fragment, elements: Mapping[str, Any]) -> bool:
        """Persiste les éléments (déjà sérialisés ou vivants); no-op réussi si vide."""
        if not elements:
            FRAGMENT_HEAD_CACHE_OPS.labels(op="save", result="skipped").inc()
            return True
        name = fragment_name(fragment)
        try:
            key = self.cache_key_for(fragment)
            payload = json.dumps(self._as_serialized(elements)).encode("utf-8")
            ok = self.store.save(payload, key, self.cache_tags_for(fragment), self.lifetime)
        except Exception as exc:
            FRAGMENT_HEAD_CACHE_OPS.labels(op="save", result="error").inc()
            self._log.error("fragment_head_cache_save_failed", fragment=name, error=str(exc))
            return False
        FRAGMENT_HEAD_CACHE_OPS.labels(op="save", result="ok" if ok else "error").inc()
        if ok:
            self._log.debug(
                "fragment_head_cache_saved",
                fragment=name,
                elements_count=len(elements),
                cache_key=key,
            )
        return ok

    def load(self, fragment) -> dict[str, HeadElement]:
        """Charge et reconstruit les éléments du fragment (`{}` si absent ou en erreur)."""
        name = fragment_name(fragment)
        try:
            key = self.cache_key_for(fragment)
            raw = self.store.load(key)
            if not raw:
                FRAGMENT_HEAD_CACHE_OPS.labels(op="load", result="empty").inc()
                return {}
            elements = self.serializer.unserialize(json.loads(raw))
        except Exception as exc:
            FRAGMENT_HEAD_CACHE_OPS.labels(op="load", result="error").inc()
            self._log.error("fragment_head_cache_load_failed", fragment=name, error=str(exc))
            return {}
        FRAGMENT_HEAD_CACHE_OPS.labels(op="load", result="ok").inc()
        self._log.debug(
            "fragment_head_cache_loaded",
            fragment=name,
            elements_count=len(elements),
            cache_key=key,
        )
        return elements

    def clear(self, fragment) -> bool:
        name = fragment_name(fragment)
        try:
            key = self.cache_key_for(fragment)
            ok = self.store.remove(key)
        except Exception as exc:
            FRAGMENT_HEAD_CACHE_OPS.labels(op="clear", result="error").inc()
            self._log.error("fragment_head_cache_clear_failed", fragment=name, error=str(exc))
            return False
        FRAGMENT_HEAD_CACHE_OPS.labels(op="clear", result="ok" if ok else "empty").inc()
        if ok:
            self._log.debug("fragment_head_cache_cleared", fragment=name, cache_key=key)
        return ok

    def flush(self, tags: list[str] | None = None) -> int:
        """Supprime les entrées portant les tags donnés (toutes les entrées fragment par défaut)."""
        try:
            return self.store.clean(tags or CACHE_TAGS)
        except Exception as exc:
            self._log.error("fragment_head_cache_flush_failed", tags=tags, error=str(exc))
            return 0

    def _as_serialized(self, elements: Mapping[str, Any]) -> dict[str, Any]:
        live = {k: v for k, v in elements.items() if isinstance(v, HeadElement)}
        if not live:
            return dict(elements)
        serialized = self.serializer.serialize(live)
        return {
            k: serialized[k] if k in live else v
            for k, v in elements.items()
            if k in serialized or k not in live
        }
