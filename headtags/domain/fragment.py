"""Interface des fragments de page exposée par le pipeline de rendu hôte.

Convention de durée de vie retenue: `None` signifie « cache désactivé », `False`, `0` ou une
valeur négative « ne pas mettre en cache », un entier strictement positif (ou une chaîne
numérique) rend le fragment cacheable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

CacheLifetime = int | bool | str | None


@runtime_checkable
class Fragment(Protocol):
    """Unité de sortie cacheable (bloc) telle que vue par le suivi des éléments head."""

    name_in_layout: str | None

    def get_cache_key(self) -> str: ...

    def get_cache_lifetime(self) -> CacheLifetime: ...

    def get_cache_tags(self) -> list[str]: ...


def lifetime_is_cacheable(lifetime: CacheLifetime) -> bool:
    """Indique si une durée de vie déclarée autorise le cache."""
    if lifetime is None or lifetime is False:
        return False
    if lifetime is True:
        return True
    return int(lifetime) > 0


def fragment_name(fragment: object) -> str | None:
    """Nom stable du fragment, ou None s'il est absent/illisible."""
    try:
        name = getattr(fragment, "name_in_layout", None)
    except Exception:
        return None
    return str(name) if name else None
