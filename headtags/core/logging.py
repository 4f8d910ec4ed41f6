"""Configuration de logging basée sur structlog.

Objectif du module
------------------
- Logs lisibles en console en développement (`APP_DEBUG=true`), JSON une ligne par événement
  sinon.
- Les variables de contexte structlog (ex: identifiant de page) sont fusionnées dans chaque
  événement.
"""

import logging
import sys

import structlog


def setup_logging(debug: bool = True):
    """Configure structlog pour les composants head tags."""
    level = logging.DEBUG if debug else logging.INFO
    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
