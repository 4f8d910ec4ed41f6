"""Tests des éléments head et de leur rendu."""

from headtags.domain.elements import (
    LinkElement,
    MetaElement,
    ScriptElement,
    StyleElement,
    class_path,
)


def test_meta_renders_attributes_in_order() -> None:
    """Le rendu meta respecte l'ordre d'insertion des attributs."""
    meta = MetaElement({"name": "description", "content": "x"})
    assert meta.render() == '<meta name="description" content="x">'


def test_link_render() -> None:
    link = LinkElement({"rel": "stylesheet", "href": "/a.css"})
    assert link.render() == '<link rel="stylesheet" href="/a.css">'


def test_attribute_values_are_escaped() -> None:
    """Les guillemets et chevrons sont échappés dans les attributs."""
    meta = MetaElement({"content": 'a "quoted" <b> & c'})
    assert meta.render() == '<meta content="a &quot;quoted&quot; &lt;b&gt; &amp; c">'


def test_script_with_and_without_content() -> None:
    external = ScriptElement({"src": "/app.js", "defer": "defer"})
    inline = ScriptElement({}, "console.log('<ok>');")
    assert external.render() == '<script src="/app.js" defer="defer"></script>'
    # le contenu inline n'est pas échappé
    assert inline.render() == "<script>console.log('<ok>');</script>"


def test_style_render() -> None:
    style = StyleElement({"media": "print"}, "body { color: red; }")
    assert style.render() == '<style media="print">body { color: red; }</style>'
    assert StyleElement().render() == "<style></style>"


def test_attribute_mutators() -> None:
    """Les mutateurs d'attributs servent à la construction et se chaînent."""
    meta = MetaElement()
    meta.set_attribute("name", "robots").set_attributes({"content": "noindex"})
    assert meta.get_attribute("name") == "robots"
    assert meta.has_attribute("content")
    assert meta.get_attribute("missing", "dflt") == "dflt"
    meta.remove_attribute("content").remove_attribute("missing")
    assert meta.attributes == {"name": "robots"}


def test_attributes_property_is_a_copy() -> None:
    meta = MetaElement({"name": "a"})
    attrs = meta.attributes
    attrs["name"] = "changed"
    assert meta.get_attribute("name") == "a"


def test_set_content_on_script() -> None:
    script = ScriptElement().set_content("x = 1")
    assert script.content == "x = 1"
    assert MetaElement().content is None


def test_equality_by_kind_attributes_and_content() -> None:
    assert MetaElement({"a": "1"}) == MetaElement({"a": "1"})
    assert MetaElement({"a": "1"}) != LinkElement({"a": "1"})
    assert ScriptElement({}, "a") != ScriptElement({}, "b")
    assert len({StyleElement({}, "a"), StyleElement({}, "a")}) == 1


def test_class_path() -> None:
    assert class_path(MetaElement) == "headtags.domain.elements.MetaElement"
