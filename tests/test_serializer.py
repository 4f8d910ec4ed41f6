"""Tests du sérialiseur d'éléments head et du registre de stratégies."""

from unittest.mock import Mock

from structlog.testing import capture_logs

from headtags.domain.elements import (
    HeadElement,
    LinkElement,
    MetaElement,
    ScriptElement,
    StyleElement,
    class_path,
)
from headtags.domain.factories import default_factory_registry
from headtags.domain.serializer import HeadElementSerializer
from headtags.domain.strategies import (
    MetaSerializationStrategy,
    ScriptSerializationStrategy,
    SerializationStrategy,
    SerializationStrategyRegistry,
    default_strategy_registry,
)


class PreloadLink(LinkElement):
    """Sous-classe sans stratégie dédiée: résolue par sondage `can_handle`."""


class CanonicalElement(HeadElement):
    """Type inconnu des stratégies et des fabriques."""

    tag = "link"
    element_type = "canonical"

    def render(self) -> str:
        return f"<link{self.attributes_to_string()}>"


def _serializer() -> HeadElementSerializer:
    return HeadElementSerializer(default_factory_registry(), default_strategy_registry())


class TestStrategyRegistry:
    """Tests pour SerializationStrategyRegistry."""

    def test_exact_class_lookup(self) -> None:
        registry = default_strategy_registry()
        strategy = registry.get_strategy_for_element(ScriptElement())
        assert isinstance(strategy, ScriptSerializationStrategy)
        assert registry.get_strategy_by_type("script") is strategy

    def test_probe_fallback_is_memoized(self) -> None:
        """Une sous-classe est résolue par sondage puis mémorisée par classe."""
        registry = default_strategy_registry()
        element = PreloadLink({"rel": "preload"})
        assert registry.get_strategy_by_class_name(class_path(PreloadLink)) is None
        strategy = registry.get_strategy_for_element(element)
        assert strategy is not None and strategy.element_type == "link"
        assert registry.get_strategy_by_class_name(class_path(PreloadLink)) is strategy

    def test_no_strategy_for_unknown_type(self) -> None:
        registry = default_strategy_registry()
        assert registry.get_strategy_for_element(CanonicalElement()) is None

    def test_priority_order(self) -> None:
        """Les stratégies sont sondées par priorité décroissante."""

        class CatchAll(SerializationStrategy):
            priority = 500

            def can_handle(self, element) -> bool:
                return True

        low = MetaSerializationStrategy()
        high = CatchAll()
        registry = SerializationStrategyRegistry([low, high])
        assert registry.get_all_strategies() == [high, low]
        assert registry.get_strategy_for_element(CanonicalElement()) is high

    def test_has_and_clear(self) -> None:
        registry = default_strategy_registry()
        assert registry.has_strategy_for_type("style")
        registry.clear()
        assert not registry.has_strategy_for_type("style")
        assert registry.get_all_strategies() == []


class TestHeadElementSerializer:
    """Tests pour HeadElementSerializer."""

    def test_serialize_shape(self) -> None:
        data = _serializer().serialize({"s": ScriptElement({"src": "/a.js"})})
        assert data == {
            "s": {
                "type": class_path(ScriptElement),
                "short_type": "script",
                "attributes": {"src": "/a.js"},
                "content": None,
            }
        }

    def test_meta_has_no_content_key(self) -> None:
        data = _serializer().serialize({"m": MetaElement({"name": "a"})})
        assert "content" not in data["m"]
        assert data["m"]["short_type"] == "meta"

    def test_round_trip_each_kind(self) -> None:
        """Sérialiser puis désérialiser reconstruit un élément au rendu identique."""
        serializer = _serializer()
        elements = {
            "meta": MetaElement({"property": "og:title", "content": "Hello"}),
            "link": LinkElement({"rel": "canonical", "href": "https://example.test/"}),
            "script": ScriptElement({"type": "module"}, "import './a.js';"),
            "style": StyleElement({}, ".a { color: red; }"),
        }
        restored = serializer.unserialize(serializer.serialize(elements))
        assert list(restored) == list(elements)
        for key, element in elements.items():
            assert restored[key] == element
            assert restored[key].render() == element.render()
        assert serializer.serialize(restored) == serializer.serialize(elements)

    def test_subclass_round_trips_through_short_type(self) -> None:
        """Une sous-classe inconnue des fabriques est reconstruite via son type court."""
        serializer = _serializer()
        data = serializer.serialize({"p": PreloadLink({"rel": "preload", "href": "/f.woff2"})})
        assert data["p"]["type"] == class_path(PreloadLink)
        restored = serializer.unserialize(data)
        assert isinstance(restored["p"], LinkElement)
        assert restored["p"].render() == '<link rel="preload" href="/f.woff2">'

    def test_fallback_serialization(self) -> None:
        data = _serializer().serialize({"c": CanonicalElement({"rel": "canonical"})})
        assert data["c"] == {
            "type": class_path(CanonicalElement),
            "short_type": "unknown",
            "attributes": {"rel": "canonical"},
            "content": None,
        }

    def test_failing_element_is_dropped(self) -> None:
        """Un élément en échec est ignoré, le reste du lot est sérialisé."""
        broken = MetaElement({"name": "bad"})
        strategies = Mock()
        strategies.get_strategy_for_element.side_effect = [RuntimeError("boom"), MetaSerializationStrategy()]
        with capture_logs() as logs:
            serializer = HeadElementSerializer(default_factory_registry(), strategies)
            data = serializer.serialize({"bad": broken, "good": MetaElement({"name": "a"})})
        assert list(data) == ["good"]
        assert any(e["event"] == "head_element_serialize_failed" for e in logs)

    def test_backward_compatible_short_type(self) -> None:
        """Des données sans identité de classe sont résolues par type court."""
        restored = _serializer().unserialize(
            {
                "a": {"type": "meta", "attributes": {"name": "x"}},
                "b": {"short_type": "style", "attributes": {}, "content": "p{}"},
                "c": {"type": "old.module.Script", "short_type": "script", "attributes": {"src": "/s.js"}},
            }
        )
        assert restored["a"].render() == '<meta name="x">'
        assert restored["b"].render() == "<style>p{}</style>"
        assert restored["c"].render() == '<script src="/s.js"></script>'

    def test_unresolvable_entries_are_omitted(self) -> None:
        with capture_logs() as logs:
            restored = _serializer().unserialize(
                {
                    "x": {"type": "nope.Nope", "short_type": "unknown", "attributes": {}},
                    "y": {"attributes": {}},
                    "z": "not-a-dict",
                    "ok": {"type": class_path(MetaElement), "attributes": {"charset": "UTF-8"}},
                }
            )
        assert list(restored) == ["ok"]
        events = [e["event"] for e in logs]
        assert events.count("head_element_type_unresolved") == 2
        assert "head_element_unserialize_failed" in events
