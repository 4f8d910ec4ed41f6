"""
Hooks avant/après rendu d'un fragment.

Orchestration appelée par le pipeline de rendu hôte autour de chaque fragment:

- avant: démarre le suivi pour tout fragment nommé (sauf si la collecte est désactivée);
- après: calcule les éléments introduits; si le fragment est cacheable, les persiste (fragment
  exécuté) ou rejoue ceux du cache (fragment servi depuis le cache). Le cadre de suivi est
  toujours libéré.

Aucune erreur liée aux éléments head ne doit interrompre le rendu de la page.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from headtags.app.metrics import FRAGMENT_HEAD_RESTORED
from headtags.config.flags import ff_headtags_enabled
from headtags.domain.fragment import Fragment, fragment_name
from headtags.domain.manager import HeadTagManager
from headtags.fragments.detector import FragmentCacheDetector
from headtags.fragments.tracker import HeadElementTracker
from headtags.infra.fragment_cache import FragmentHeadElementCache


class FragmentHooks:
    """Relie détecteur, tracker et cache d'éléments par fragment pour une requête."""

    def __init__(
        self,
        manager: HeadTagManager,
        tracker: HeadElementTracker,
        detector: FragmentCacheDetector,
        fragment_cache: FragmentHeadElementCache,
        enabled: bool | None = None,
    ) -> None:
        self.manager = manager
        self.tracker = tracker
        self.detector = detector
        self.fragment_cache = fragment_cache
        self._enabled = enabled
        self._log = structlog.get_logger(__name__).bind(component="fragment_hooks")

    @property
    def enabled(self) -> bool:
        if self._enabled is not None:
            return self._enabled
        return ff_headtags_enabled()

    def on_before_fragment_render(self, fragment: Fragment) -> None:
        name = fragment_name(fragment)
        if not name or not self.enabled:
            return
        try:
            self.tracker.start_tracking(name)
        except Exception as exc:
            self._log.error("fragment_before_hook_failed", fragment=name, error=str(exc))

    def on_after_fragment_render(self, fragment: Fragment) -> None:
        name = fragment_name(fragment)
        if not name or not self.tracker.is_being_tracked(name):
            return
        try:
            new_elements = self.tracker.stop_tracking_and_get_new_elements(
                name, include_nested=True
            )
            # cacheability is final only once the fragment has rendered
            if self.detector.is_cacheable(fragment):
                if new_elements:
                    self.fragment_cache.save(fragment, new_elements)
                    self._log.debug(
                        "fragment_head_elements_stored",
                        fragment=name,
                        elements_count=len(new_elements),
                        tracking_level=self.tracker.tracking_level(),
                    )
                elif self.detector.is_cached(fragment):
                    restored = self.restore(fragment)
                    self._log.debug(
                        "fragment_head_elements_restored", fragment=name, elements_count=restored
                    )
        except Exception as exc:
            self._log.error("fragment_after_hook_failed", fragment=name, error=str(exc))
        finally:
            self.tracker.clear_tracking(name)

    def abort(self, fragment: Fragment) -> None:
        """Libère le cadre d'un fragment dont le rendu a échoué, sans rien persister."""
        self.tracker.clear_tracking(fragment_name(fragment))

    def restore(self, fragment: Fragment) -> int:
        """Rejoue dans le gestionnaire les éléments mis en cache pour le fragment."""
        elements = self.fragment_cache.load(fragment)
        for key, element in elements.items():
            self.manager.add(element, key)
        if elements:
            FRAGMENT_HEAD_RESTORED.inc(len(elements))
        return len(elements)

    @contextmanager
    def track_fragment(self, fragment: Fragment) -> Iterator[None]:
        """Encadre le rendu d'un fragment par les deux hooks, y compris en cas d'exception."""
        self.on_before_fragment_render(fragment)
        try:
            yield
        except BaseException:
            self.abort(fragment)
            raise
        self.on_after_fragment_render(fragment)
