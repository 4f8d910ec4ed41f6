"""Configuration de test pour pytest avec gestion des chemins et fixtures partagées.

Ce module ajoute la racine du projet au sys.path, neutralise la configuration Redis de
l'environnement et fournit les composants head tags construits sur un store en mémoire.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from headtags...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Les tests n'utilisent jamais de Redis réel
os.environ.pop("REDIS_URL", None)
os.environ["REQUIRE_REDIS"] = "false"

from headtags.core.container import Container  # noqa: E402
from headtags.core.settings import Settings  # noqa: E402
from headtags.infra.cache_store import InMemoryCacheStore  # noqa: E402


class FakeFragment:
    """Fragment minimal exposant les accesseurs de cache publics."""

    def __init__(self, name, cache_key=None, lifetime=3600, tags=None):
        self.name_in_layout = name
        self.cache_key = cache_key or f"key_{name}"
        self.lifetime = lifetime
        self.tags = list(tags or [])

    def get_cache_key(self):
        return self.cache_key

    def get_cache_lifetime(self):
        return self.lifetime

    def get_cache_tags(self):
        return self.tags


@pytest.fixture(autouse=True)
def clean_flags(monkeypatch):
    """Retire les flags d'environnement pouvant fausser les tests."""
    for key in (
        "FF_HEADTAGS_ENABLED",
        "HEADTAGS_ENABLED",
        "FF_HEADTAGS_PAGE_CACHE",
        "PAGE_CACHE_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def store():
    return InMemoryCacheStore()


@pytest.fixture
def container(store):
    """Conteneur isolé adossé à un store en mémoire."""
    return Container(settings=Settings(), store=store)


@pytest.fixture
def serializer(container):
    return container.serializer


@pytest.fixture
def scope(container):
    return container.new_request_scope()


@pytest.fixture
def manager(scope):
    return scope.manager


@pytest.fixture
def make_fragment():
    return FakeFragment
