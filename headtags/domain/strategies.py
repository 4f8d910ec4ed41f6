"""Stratégies de sérialisation par type d'élément head.

Chaque stratégie sait convertir un type d'élément en dictionnaire simple
`{type, short_type, attributes[, content]}`. Le registre choisit la stratégie par classe exacte,
puis par sondage `can_handle` dans l'ordre de priorité, en mémorisant le résultat par classe.
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

DEFAULT_PRIORITY = 100


class SerializationStrategy:
    """Stratégie de base: type, type court et attributs."""

    element_class: type[HeadElement] = HeadElement
    priority: int = DEFAULT_PRIORITY

    @property
    def element_type(self) -> str:
        return self.element_class.element_type

    @property
    def element_class_name(self) -> str:
        return class_path(self.element_class)

    def can_handle(self, element: HeadElement) -> bool:
        return isinstance(element, self.element_class)

    def serialize(self, element: HeadElement, key: str) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": class_path(type(element)),
            "short_type": self.element_type,
            "attributes": element.attributes,
        }
        data.update(self.additional_data(element))
        return data

    def additional_data(self, element: HeadElement) -> dict[str, Any]:
        """Données propres au type, à surcharger dans les sous-classes."""
        return {}


class MetaSerializationStrategy(SerializationStrategy):
    element_class = MetaElement


class LinkSerializationStrategy(SerializationStrategy):
    element_class = LinkElement


class ScriptSerializationStrategy(SerializationStrategy):
    element_class = ScriptElement

    def additional_data(self, element: HeadElement) -> dict[str, Any]:
        return {"content": element.content}


class StyleSerializationStrategy(SerializationStrategy):
    element_class = StyleElement

    def additional_data(self, element: HeadElement) -> dict[str, Any]:
        return {"content": element.content}


class SerializationStrategyRegistry:
    """Registre des stratégies, triées par priorité décroissante."""

    def __init__(self, strategies: list[SerializationStrategy] | None = None):
        self._by_type: dict[str, SerializationStrategy] = {}
        self._by_class_name: dict[str, SerializationStrategy] = {}
        self._all: list[SerializationStrategy] = []
        for strategy in strategies or []:
            self.register_strategy(strategy)

    def register_strategy(self, strategy: SerializationStrategy) -> None:
        self._by_type[strategy.element_type] = strategy
        self._by_class_name[strategy.element_class_name] = strategy
        self._all.append(strategy)
        # stable sort keeps registration order among equal priorities
        self._all.sort(key=lambda s: s.priority, reverse=True)

    def get_strategy_for_element(self, element: HeadElement) -> SerializationStrategy | None:
        class_name = class_path(type(element))
        strategy = self._by_class_name.get(class_name)
        if strategy is not None:
            return strategy
        for candidate in self._all:
            if candidate.can_handle(element):
                self._by_class_name[class_name] = candidate
                return candidate
        return None

    def get_strategy_by_type(self, element_type: str) -> SerializationStrategy | None:
        return self._by_type.get(element_type)

    def get_strategy_by_class_name(self, class_name: str) -> SerializationStrategy | None:
        return self._by_class_name.get(class_name)

    def get_all_strategies(self) -> list[SerializationStrategy]:
        return list(self._all)

    def has_strategy_for_type(self, element_type: str) -> bool:
        return element_type in self._by_type

    def clear(self) -> None:
        self._by_type.clear()
        self._by_class_name.clear()
        self._all.clear()


def default_strategy_registry() -> SerializationStrategyRegistry:
    return SerializationStrategyRegistry(
        [
            MetaSerializationStrategy(),
            LinkSerializationStrategy(),
            ScriptSerializationStrategy(),
            StyleSerializationStrategy(),
        ]
    )
