"""Erreurs métier de la collecte des éléments head.

Seules les erreurs d'usage (programmation) sont levées jusqu'à l'appelant. Les échecs de cache
ou de sérialisation sont absorbés à la frontière de chaque composant et journalisés.
"""

from __future__ import annotations


class HeadTagsError(Exception):
    """Base error for the head tags package."""


class UnknownElementTypeError(HeadTagsError, ValueError):
    """Raised when page code asks for an element kind with no registered factory."""

    def __init__(self, element_type: str) -> None:
        super().__init__(f"No factory found for element type: {element_type}")
        self.element_type = element_type
