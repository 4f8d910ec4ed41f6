"""
Suivi des éléments head ajoutés pendant le rendu d'un fragment.

Une pile de cadres (un par fragment en cours de rendu) photographie les clés du gestionnaire au
début du rendu; à la fin, la différence donne les éléments introduits par le fragment. Les cadres
sont retrouvés du sommet vers la base (LIFO), ce qui rend le suivi correct pour des fragments
imbriqués. La pile est propre à une requête: aucun verrou n'est nécessaire.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from headtags.domain.manager import HeadTagManager
from headtags.domain.serializer import HeadElementSerializer, SerializedElement


@dataclass
class TrackingFrame:
    """État d'un fragment avant son rendu."""

    fragment_id: str
    level: int
    elements_before: frozenset[str]
    # keys already reported by nested fragments stopped inside this frame
    claimed: set[str] = field(default_factory=set)


class HeadElementTracker:
    """Service de suivi des changements d'éléments head pendant le rendu des fragments."""

    def __init__(self, manager: HeadTagManager, serializer: HeadElementSerializer) -> None:
        self.manager = manager
        self.serializer = serializer
        self._stack: list[TrackingFrame] = []
        self._log = structlog.get_logger(__name__).bind(component="head_element_tracker")

    def start_tracking(self, fragment_id: str | None) -> None:
        if not fragment_id:
            return
        frame = TrackingFrame(
            fragment_id=fragment_id,
            level=len(self._stack),
            elements_before=frozenset(self.manager.keys()),
        )
        self._stack.append(frame)
        self._log.debug(
            "head_tracking_started",
            fragment=fragment_id,
            level=frame.level,
            initial_elements_count=len(frame.elements_before),
        )

    def stop_tracking_and_get_new_elements(
        self, fragment_id: str | None, include_nested: bool = False
    ) -> dict[str, SerializedElement]:
        """Renvoie, sérialisés, les éléments apparus depuis le début du suivi du fragment.

        Par défaut les éléments déjà revendiqués par un fragment imbriqué sont exclus; avec
        `include_nested=True` la différence complète depuis le début du cadre est renvoyée.
        """
        index = self._find(fragment_id)
        if index is None:
            return {}
        frame = self._stack[index]
        try:
            current = self.manager.get_all()
            new_keys = [key for key in current if key not in frame.elements_before]
            for outer in self._stack[:index]:
                outer.claimed.update(new_keys)
            if not include_nested:
                new_keys = [key for key in new_keys if key not in frame.claimed]
            if not new_keys:
                self._log.debug("head_tracking_stopped", fragment=fragment_id, new_elements_count=0)
                return {}
            serialized = self.serializer.serialize({key: current[key] for key in new_keys})
        except Exception as exc:
            self._log.error(
                "head_tracking_delta_failed", fragment=fragment_id, error=str(exc)
            )
            return {}
        self._log.debug(
            "head_tracking_stopped", fragment=fragment_id, new_elements_count=len(serialized)
        )
        return serialized

    def clear_tracking(self, fragment_id: str | None) -> None:
        index = self._find(fragment_id)
        if index is not None:
            del self._stack[index]

    def get_current_tracking_block(self) -> str | None:
        return self._stack[-1].fragment_id if self._stack else None

    def is_being_tracked(self, fragment_id: str | None) -> bool:
        return self._find(fragment_id) is not None

    def tracking_level(self) -> int:
        return len(self._stack)

    def _find(self, fragment_id: str | None) -> int | None:
        if not fragment_id:
            return None
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].fragment_id == fragment_id:
                return index
        return None
