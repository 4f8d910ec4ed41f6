"""
Fabriques d'éléments head et registre associé.

Le registre résout une fabrique dans les deux sens: par type court (`meta`, `link`, ...) pour la
construction de page, et par identité de classe pour la reconstruction d'éléments sérialisés.
Il est peuplé une fois au démarrage du process puis utilisé en lecture seule.
"""

from __future__ import annotations

from typing import Any

from headtags.domain.elements import (
    HeadElement,
    LinkElement,
    MetaElement,
    ScriptElement,
    StyleElement,
    class_path,
)


class HeadElementFactory:
    """Fabrique de base: construit un élément à partir de `{"attributes": ..., "content": ...}`."""

    element_class: type[HeadElement] = HeadElement

    @property
    def element_type(self) -> str:
        return self.element_class.element_type

    @property
    def element_class_name(self) -> str:
        return class_path(self.element_class)

    def create(self, data: dict[str, Any] | None = None) -> HeadElement:
        data = data or {}
        return self.element_class(dict(data.get("attributes") or {}))


class _ContentElementFactory(HeadElementFactory):
    def create(self, data: dict[str, Any] | None = None) -> HeadElement:
        data = data or {}
        return self.element_class(  # type: ignore[call-arg]
            dict(data.get("attributes") or {}), data.get("content")
        )


class MetaElementFactory(HeadElementFactory):
    element_class = MetaElement


class LinkElementFactory(HeadElementFactory):
    element_class = LinkElement


class ScriptElementFactory(_ContentElementFactory):
    element_class = ScriptElement


class StyleElementFactory(_ContentElementFactory):
    element_class = StyleElement


class HeadElementFactoryRegistry:
    """Registre des fabriques indexées par type court et par chemin de classe."""

    def __init__(self, factories: list[HeadElementFactory] | None = None):
        self._by_type: dict[str, HeadElementFactory] = {}
        self._by_class_name: dict[str, HeadElementFactory] = {}
        self._class_to_type: dict[str, str] = {}
        for factory in factories or []:
            self.register_factory(factory)

    def register_factory(self, factory: HeadElementFactory) -> None:
        element_type = factory.element_type
        class_name = factory.element_class_name
        self._by_type[element_type] = factory
        self._by_class_name[class_name] = factory
        self._class_to_type[class_name] = element_type

    def get_factory_by_type(self, element_type: str) -> HeadElementFactory | None:
        return self._by_type.get(element_type)

    def get_factory_by_class_name(self, class_name: str) -> HeadElementFactory | None:
        return self._by_class_name.get(class_name)

    def get_element_type_by_class_name(self, class_name: str) -> str | None:
        return self._class_to_type.get(class_name)

    def get_all_element_types(self) -> list[str]:
        return list(self._by_type)

    def has_factory_for_type(self, element_type: str) -> bool:
        return element_type in self._by_type

    def has_factory_for_class_name(self, class_name: str) -> bool:
        return class_name in self._by_class_name

    def get_all_factories(self) -> list[HeadElementFactory]:
        return list(self._by_type.values())

    def clear(self) -> HeadElementFactoryRegistry:
        self._by_type.clear()
        self._by_class_name.clear()
        self._class_to_type.clear()
        return self


def default_factory_registry() -> HeadElementFactoryRegistry:
    """Registre pré-rempli avec les quatre types d'éléments standards."""
    return HeadElementFactoryRegistry(
        [
            MetaElementFactory(),
            LinkElementFactory(),
            ScriptElementFactory(),
            StyleElementFactory(),
        ]
    )
