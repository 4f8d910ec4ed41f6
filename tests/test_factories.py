"""Tests des fabriques d'éléments et de leur registre."""

from headtags.domain.elements import MetaElement, ScriptElement, StyleElement, class_path
from headtags.domain.factories import (
    HeadElementFactoryRegistry,
    MetaElementFactory,
    ScriptElementFactory,
    default_factory_registry,
)


def test_default_registry_knows_the_four_kinds() -> None:
    registry = default_factory_registry()
    assert registry.get_all_element_types() == ["meta", "link", "script", "style"]
    assert len(registry.get_all_factories()) == 4


def test_resolution_in_both_directions() -> None:
    """Le registre résout par type court et par chemin de classe."""
    registry = default_factory_registry()
    by_type = registry.get_factory_by_type("script")
    by_class = registry.get_factory_by_class_name(class_path(ScriptElement))
    assert by_type is by_class
    assert registry.get_element_type_by_class_name(class_path(StyleElement)) == "style"
    assert registry.has_factory_for_type("meta")
    assert registry.has_factory_for_class_name(class_path(MetaElement))


def test_unknown_lookups_return_none() -> None:
    registry = default_factory_registry()
    assert registry.get_factory_by_type("base") is None
    assert registry.get_factory_by_class_name("nope.Nope") is None
    assert registry.get_element_type_by_class_name("nope.Nope") is None
    assert not registry.has_factory_for_type("base")


def test_register_and_clear() -> None:
    registry = HeadElementFactoryRegistry()
    registry.register_factory(MetaElementFactory())
    assert registry.get_all_element_types() == ["meta"]
    assert registry.clear() is registry
    assert registry.get_all_element_types() == []
    assert registry.get_factory_by_class_name(class_path(MetaElement)) is None


def test_factory_create() -> None:
    """Les fabriques construisent attributs et contenu à partir des données."""
    meta = MetaElementFactory().create({"attributes": {"name": "a", "content": "b"}})
    script = ScriptElementFactory().create({"attributes": {"type": "module"}, "content": "x()"})
    assert isinstance(meta, MetaElement)
    assert meta.attributes == {"name": "a", "content": "b"}
    assert script.content == "x()"
    assert ScriptElementFactory().create().render() == "<script></script>"
