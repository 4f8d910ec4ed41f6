"""
Éléments du head HTML (meta, link, script, style).

Chaque élément porte un sac d'attributs ordonné et, pour script/style, un contenu optionnel.
Le rendu est une fonction pure du type, des attributs et du contenu.
"""

from __future__ import annotations

from html import escape


class HeadElement:
    """
    Élément du head avec attributs communs.

    Les mutateurs (`set_attribute`, `set_attributes`, `remove_attribute`) ne servent qu'à la
    construction; une fois ajouté au gestionnaire, l'élément est traité comme immuable.
    """

    tag: str = ""
    element_type: str = ""

    def __init__(self, attributes: dict[str, str] | None = None):
        self._attributes: dict[str, str] = {}
        if attributes:
            self.set_attributes(attributes)

    def set_attribute(self, name: str, value: str) -> HeadElement:
        """Définit un attribut et renvoie l'élément."""
        self._attributes[str(name)] = str(value)
        return self

    def set_attributes(self, attributes: dict[str, str]) -> HeadElement:
        """Définit plusieurs attributs d'un coup, dans l'ordre donné."""
        for name, value in attributes.items():
            self.set_attribute(name, value)
        return self

    def get_attribute(self, name: str, default: str | None = None) -> str | None:
        return self._attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def remove_attribute(self, name: str) -> HeadElement:
        self._attributes.pop(name, None)
        return self

    @property
    def attributes(self) -> dict[str, str]:
        """Copie des attributs (ordre d'insertion)."""
        return dict(self._attributes)

    @property
    def content(self) -> str | None:
        return None

    def attributes_to_string(self) -> str:
        """Convertit les attributs en chaîne HTML échappée (` name="value"`)."""
        return "".join(
            f' {escape(name, quote=True)}="{escape(value, quote=True)}"'
            for name, value in self._attributes.items()
        )

    def render(self) -> str:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeadElement):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._attributes == other._attributes
            and self.content == other.content
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, tuple(self._attributes.items()), self.content))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.render()!r})"


class _VoidElement(HeadElement):
    def render(self) -> str:
        return f"<{self.tag}{self.attributes_to_string()}>"


class _ContentElement(HeadElement):
    def __init__(self, attributes: dict[str, str] | None = None, content: str | None = None):
        super().__init__(attributes)
        self._content = content

    @property
    def content(self) -> str | None:
        return self._content

    def set_content(self, content: str) -> _ContentElement:
        self._content = content
        return self

    def render(self) -> str:
        # Content is emitted raw: inline CSS/JS must not be entity-escaped.
        return f"<{self.tag}{self.attributes_to_string()}>{self._content or ''}</{self.tag}>"


class MetaElement(_VoidElement):
    """Balise `<meta>`."""

    tag = "meta"
    element_type = "meta"


class LinkElement(_VoidElement):
    """Balise `<link>`."""

    tag = "link"
    element_type = "link"


class ScriptElement(_ContentElement):
    """Balise `<script>` externe (attribut `src`) ou inline (contenu)."""

    tag = "script"
    element_type = "script"


class StyleElement(_ContentElement):
    """Balise `<style>` avec CSS inline."""

    tag = "style"
    element_type = "style"


def class_path(cls: type) -> str:
    """Identité complète d'une classe, utilisée comme `type` dans les données sérialisées."""
    return f"{cls.__module__}.{cls.__qualname__}"
