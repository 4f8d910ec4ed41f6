"""
Sérialiseur des éléments head.

Convertit des éléments vivants en dictionnaires étiquetés par type (et inversement) afin qu'ils
puissent être reconstruits dans une autre requête ou un autre process. Un élément en échec est
journalisé puis ignoré: le lot n'est jamais interrompu.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from headtags.app.metrics import SERIALIZER_ITEM_FAILURES
from headtags.domain.elements import HeadElement, class_path
from headtags.domain.factories import HeadElementFactoryRegistry
from headtags.domain.strategies import SerializationStrategyRegistry

SerializedElement = dict[str, Any]


class HeadElementSerializer:
    """Sérialiseur basé sur le registre de fabriques et le registre de stratégies."""

    def __init__(
        self,
        factory_registry: HeadElementFactoryRegistry,
        strategy_registry: SerializationStrategyRegistry,
    ) -> None:
        self.factory_registry = factory_registry
        self.strategy_registry = strategy_registry
        self._log = structlog.get_logger(__name__).bind(component="head_element_serializer")

    def serialize(self, elements: Mapping[str, HeadElement]) -> dict[str, SerializedElement]:
        """Sérialise chaque élément avec sa stratégie, ou le repli générique si aucune ne convient."""
        result: dict[str, SerializedElement] = {}
        for key, element in elements.items():
            try:
                strategy = self.strategy_registry.get_strategy_for_element(element)
                if strategy is not None:
                    result[key] = strategy.serialize(element, str(key))
                else:
                    result[key] = self._fallback_serialize(element)
            except Exception as exc:
                SERIALIZER_ITEM_FAILURES.labels(direction="serialize").inc()
                self._log.warning(
                    "head_element_serialize_failed",
                    key=key,
                    element_class=type(element).__name__,
                    error=str(exc),
                )
        return result

    def unserialize(self, data: Mapping[str, SerializedElement]) -> dict[str, HeadElement]:
        """Reconstruit les éléments; une entrée irrésoluble est ignorée et journalisée."""
        elements: dict[str, HeadElement] = {}
        for key, element_data in data.items():
            try:
                element = self._recreate(element_data)
            except Exception as exc:
                SERIALIZER_ITEM_FAILURES.labels(direction="unserialize").inc()
                self._log.warning(
                    "head_element_unserialize_failed",
                    key=key,
                    element_data=element_data,
                    error=str(exc),
                )
                continue
            if element is None:
                SERIALIZER_ITEM_FAILURES.labels(direction="unserialize").inc()
                self._log.warning(
                    "head_element_type_unresolved", key=key, element_data=element_data
                )
                continue
            elements[str(key)] = element
        return elements

    def _recreate(self, element_data: SerializedElement) -> HeadElement | None:
        full_type = element_data.get("type")
        short_type = element_data.get("short_type")
        if not full_type and not short_type:
            return None

        factory = None
        if full_type:
            factory = self.factory_registry.get_factory_by_class_name(full_type)
            if factory is None:
                # données anciennes: `type` contenait directement le type court
                factory = self.factory_registry.get_factory_by_type(full_type)
        if factory is None and short_type:
            factory = self.factory_registry.get_factory_by_type(short_type)
        if factory is None:
            return None

        factory_data: dict[str, Any] = {"attributes": dict(element_data.get("attributes") or {})}
        content = element_data.get("content")
        if content is not None:
            factory_data["content"] = content
        return factory.create(factory_data)

    def _fallback_serialize(self, element: HeadElement) -> SerializedElement:
        name = class_path(type(element))
        return {
            "type": name,
            "short_type": self.factory_registry.get_element_type_by_class_name(name) or "unknown",
            "attributes": element.attributes,
            "content": None,
        }
