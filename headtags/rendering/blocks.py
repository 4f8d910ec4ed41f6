"""
Pipeline de rendu hôte minimal: blocs imbriqués et cache de contenu.

Un `Block` est un fragment de page nommé, éventuellement cacheable, qui peut déclarer des
éléments head et contenir des blocs enfants. `BlockRenderer` rend l'arbre en encadrant chaque bloc
par les hooks de suivi; un bloc servi depuis le cache de contenu n'exécute ni sa déclaration
d'éléments head ni ses enfants.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from headtags.domain.fragment import CacheLifetime
from headtags.domain.manager import HeadTagManager
from headtags.fragments.detector import FragmentCacheDetector
from headtags.fragments.hooks import FragmentHooks
from headtags.infra.content_cache import ContentCache

HeadDeclaration = Callable[[HeadTagManager], None]


class Block:
    """Fragment de page avec clé, durée de vie et tags de cache publics."""

    def __init__(
        self,
        name_in_layout: str | None,
        template: str = "{children}",
        children: list[Block] | None = None,
        head: HeadDeclaration | None = None,
        cache_key: str | None = None,
        cache_lifetime: CacheLifetime = None,
        cache_tags: list[str] | None = None,
    ) -> None:
        self.name_in_layout = name_in_layout
        self.template = template
        self.children = list(children or [])
        self.head = head
        self._cache_key = cache_key
        self.cache_lifetime = cache_lifetime
        self._cache_tags = list(cache_tags or [])

    def get_cache_key(self) -> str:
        return self._cache_key or f"block_{self.name_in_layout}"

    def get_cache_lifetime(self) -> CacheLifetime:
        return self.cache_lifetime

    def get_cache_tags(self) -> list[str]:
        return list(self._cache_tags)

    def declare_head(self, manager: HeadTagManager) -> None:
        if self.head is not None:
            self.head(manager)

    def to_html(self, children_html: str) -> str:
        html = self.template.replace("{name}", self.name_in_layout or "")
        return html.replace("{children}", children_html)

    def __repr__(self) -> str:
        return f"Block({self.name_in_layout!r})"


class BlockRenderer:
    """Rend un arbre de blocs en déclenchant les hooks avant/après pour chacun."""

    def __init__(
        self,
        manager: HeadTagManager,
        hooks: FragmentHooks,
        content_cache: ContentCache,
        detector: FragmentCacheDetector,
    ) -> None:
        self.manager = manager
        self.hooks = hooks
        self.content_cache = content_cache
        self.detector = detector
        self._log = structlog.get_logger(__name__).bind(component="block_renderer")

    def render(self, block: Block) -> str:
        with self.hooks.track_fragment(block):
            if self.detector.is_cached(block):
                html = self.content_cache.load(block.get_cache_key())
                if html is not None:
                    self._log.debug("block_content_cache_hit", block=block.name_in_layout)
                    return html
            block.declare_head(self.manager)
            children_html = "".join(self.render(child) for child in block.children)
            html = block.to_html(children_html)
            if self.detector.is_cacheable(block):
                lifetime = block.get_cache_lifetime()
                self.content_cache.save(
                    html,
                    block.get_cache_key(),
                    block.get_cache_tags(),
                    lifetime if isinstance(lifetime, int) and not isinstance(lifetime, bool) else None,
                )
            return html
