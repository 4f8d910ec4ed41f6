"""
Purge du cache des éléments head par fragment.

Supprime les entrées portant les tags donnés (par exemple les tags d'un produit dont le contenu a
changé) ou, sans argument, toutes les entrées du cache d'éléments par fragment.
"""

from __future__ import annotations

import argparse

from headtags.core.container import container
from headtags.infra.fragment_cache import CACHE_TAGS


def main(argv: list[str] | None = None) -> int:
    """
    Point d'entrée principal de la purge.

    Returns:
        int: Nombre d'entrées supprimées.
    """
    parser = argparse.ArgumentParser(description="Flush fragment head-element cache entries")
    parser.add_argument(
        "--tag",
        action="append",
        dest="tags",
        default=None,
        help="Cache tag to clean (repeatable); defaults to every fragment entry",
    )
    args = parser.parse_args(argv)

    tags = args.tags or list(CACHE_TAGS)
    removed = container.fragment_cache.flush(tags)
    print(f"flushed tags={','.join(tags)} removed={removed} storage={container.storage_backend}")
    return removed


if __name__ == "__main__":  # pragma: no cover - script entry
    main()
