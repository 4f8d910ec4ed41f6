"""
Endpoint de santé de la collecte des éléments head.

Expose `/health`: état de la collecte (feature flag), backend du cache d'éléments par fragment et
activation du cache page entière.
"""

from fastapi import APIRouter

from headtags.config.flags import ff_headtags_enabled, ff_page_cache_enabled
from headtags.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Indique si la collecte est active et quel store porte les caches d'éléments head."""
    return {
        "status": "ok",
        "headtags_enabled": ff_headtags_enabled(),
        "page_cache_enabled": ff_page_cache_enabled(),
        "storage": container.storage_backend,
        "fragment_cache_prefix": container.fragment_cache.key_prefix,
    }
