"""
Gestionnaire des éléments head d'une page.

Collection ordonnée et indexée par clé des éléments actifs: l'ordre d'insertion définit l'ordre de
rendu, une clé existante est remplacée sur place. Une instance vit le temps d'une requête.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from headtags.domain.elements import HeadElement
from headtags.domain.errors import UnknownElementTypeError
from headtags.domain.factories import HeadElementFactoryRegistry
from headtags.infra.page_cache import HeadElementCacheStrategy, NullCacheStrategy


class HeadTagManager:
    """Collecte les éléments head produits pendant l'assemblage d'une page et les rend une fois."""

    def __init__(
        self,
        factory_registry: HeadElementFactoryRegistry,
        cache_strategy: HeadElementCacheStrategy | None = None,
    ) -> None:
        self.factory_registry = factory_registry
        self.cache_strategy = cache_strategy or NullCacheStrategy()
        self._elements: dict[str, HeadElement] = {}
        self._loaded = False
        self._modified = False

    # -- collection --------------------------------------------------------

    def add(self, element: HeadElement, key: str) -> HeadTagManager:
        """Ajoute (ou remplace sur place) l'élément sous `key`."""
        self._ensure_loaded()
        self._elements[key] = element
        self._modified = True
        return self

    def remove(self, key: str) -> HeadTagManager:
        self._ensure_loaded()
        if key in self._elements:
            del self._elements[key]
            self._modified = True
        return self

    def has(self, key: str) -> bool:
        self._ensure_loaded()
        return key in self._elements

    def get(self, key: str) -> HeadElement | None:
        self._ensure_loaded()
        return self._elements.get(key)

    def get_all(self) -> dict[str, HeadElement]:
        """Instantané ordonné de la collection."""
        self._ensure_loaded()
        return dict(self._elements)

    def keys(self) -> list[str]:
        self._ensure_loaded()
        return list(self._elements)

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._elements)

    def clear(self) -> HeadTagManager:
        """Vide la collection et le cache page associé."""
        self._elements = {}
        self._loaded = True
        self._modified = True
        self.cache_strategy.clear()
        return self

    # -- construction ------------------------------------------------------

    def create_element(
        self, element_type: str, data: dict[str, Any] | None = None, key: str | None = None
    ) -> HeadElement:
        """Construit un élément via sa fabrique et l'ajoute; type inconnu = erreur d'usage."""
        self._ensure_loaded()
        data = data or {}
        factory = self.factory_registry.get_factory_by_type(element_type)
        if factory is None:
            raise UnknownElementTypeError(element_type)
        element = factory.create(data)
        if key is None:
            key = self.generate_element_key(element_type, data)
        self.add(element, key)
        return element

    @staticmethod
    def generate_element_key(element_type: str, data: dict[str, Any]) -> str:
        """Clé déterministe `{type}_{md5}`: deux déclarations identiques donnent la même clé."""
        payload = json.dumps(
            {"type": element_type, "data": data}, sort_keys=True, separators=(",", ":")
        )
        return f"{element_type}_{hashlib.md5(payload.encode('utf-8')).hexdigest()}"

    def add_meta(self, attributes: dict[str, str], key: str | None = None) -> HeadTagManager:
        self.create_element("meta", {"attributes": attributes}, key)
        return self

    def add_meta_name(self, name: str, content: str, key: str | None = None) -> HeadTagManager:
        return self.add_meta({"name": name, "content": content}, key)

    def add_meta_property(
        self, prop: str, content: str, key: str | None = None
    ) -> HeadTagManager:
        return self.add_meta({"property": prop, "content": content}, key)

    def add_charset(self, charset: str = "UTF-8") -> HeadTagManager:
        return self.add_meta({"charset": charset}, "charset")

    def add_link(self, attributes: dict[str, str], key: str | None = None) -> HeadTagManager:
        self.create_element("link", {"attributes": attributes}, key)
        return self

    def add_stylesheet(
        self, href: str, attributes: dict[str, str] | None = None, key: str | None = None
    ) -> HeadTagManager:
        return self.add_link({"rel": "stylesheet", "href": href, **(attributes or {})}, key)

    def add_script(
        self,
        attributes: dict[str, str],
        content: str | None = None,
        key: str | None = None,
    ) -> HeadTagManager:
        self.create_element("script", {"attributes": attributes, "content": content}, key)
        return self

    def add_external_script(
        self, src: str, attributes: dict[str, str] | None = None, key: str | None = None
    ) -> HeadTagManager:
        return self.add_script({"src": src, **(attributes or {})}, None, key)

    def add_inline_script(
        self, content: str, attributes: dict[str, str] | None = None, key: str | None = None
    ) -> HeadTagManager:
        return self.add_script(dict(attributes or {}), content, key)

    def add_inline_style(
        self, content: str, attributes: dict[str, str] | None = None, key: str | None = None
    ) -> HeadTagManager:
        self.create_element(
            "style", {"attributes": dict(attributes or {}), "content": content}, key
        )
        return self

    # -- rendu -------------------------------------------------------------

    def render(self) -> str:
        """Concatène le rendu de chaque élément, un par ligne, dans l'ordre de la collection."""
        self._ensure_loaded()
        self._save_if_modified()
        return "".join(f"{element.render()}\n" for element in self._elements.values())

    def get_rendered_elements(self) -> dict[str, str]:
        self._ensure_loaded()
        self._save_if_modified()
        return {key: element.render() for key, element in self._elements.items()}

    # -- cache page entière ------------------------------------------------

    def save_to_cache(self) -> HeadTagManager:
        self._ensure_loaded()
        self.cache_strategy.save(self._elements)
        self._modified = False
        return self

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        cached = self.cache_strategy.load()
        if cached:
            self._elements = dict(cached)
        self._loaded = True

    def _save_if_modified(self) -> None:
        if self._modified:
            self.save_to_cache()
