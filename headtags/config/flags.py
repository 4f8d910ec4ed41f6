"""Feature flags de la collecte des éléments head.

Defaults: ON for collection, OFF for the whole-page cache. Values can be toggled via environment
variables or settings.

Env vars (truthy if in {"1","true","yes","on"}, case-insensitive):
- FF_HEADTAGS_ENABLED | HEADTAGS_ENABLED
- FF_HEADTAGS_PAGE_CACHE | PAGE_CACHE_ENABLED
"""

from __future__ import annotations

import os

from headtags.core.settings import get_settings

_TRUE = {"1", "true", "yes", "on"}


def _get_bool(*env_keys: str, fallback_setting: str | None = None, default: bool = False) -> bool:
    """Read a boolean from env or settings.

    Args:
        env_keys: Environment variable names to try in order.
        fallback_setting: Optional attribute name on settings.
        default: Default value if not found.
    Returns:
        bool: Effective flag value.
    """
    for k in env_keys:
        v = os.getenv(k)
        if v is not None:
            return str(v).strip().lower() in _TRUE
    if fallback_setting:
        try:
            val = getattr(get_settings(), fallback_setting)
            if isinstance(val, bool):
                return val
            if val is not None:
                return str(val).strip().lower() in _TRUE
        except Exception:
            pass
    return default


def ff_headtags_enabled() -> bool:
    """Return whether head element collection is enabled (default ON)."""
    return _get_bool(
        "FF_HEADTAGS_ENABLED",
        "HEADTAGS_ENABLED",
        fallback_setting="HEADTAGS_ENABLED",
        default=True,
    )


def ff_page_cache_enabled() -> bool:
    """Return whether the whole-page head element cache is enabled (default OFF)."""
    return _get_bool(
        "FF_HEADTAGS_PAGE_CACHE",
        "PAGE_CACHE_ENABLED",
        fallback_setting="PAGE_CACHE_ENABLED",
        default=False,
    )
