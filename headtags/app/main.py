"""
Application principale FastAPI.

Ce module assemble les composants de démonstration de la collecte d'éléments head : middlewares,
routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (portée de requête, métriques)
- Monter les routers (santé, pages, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from headtags.api.routes_health import router as health_router
from headtags.api.routes_pages import router as pages_router
from headtags.app.metrics import PrometheusMiddleware, metrics_router
from headtags.core.container import container
from headtags.core.logging import setup_logging
from headtags.middlewares.request_scope import RequestScopeMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ouvre une portée head tags par requête
    - Publie les routes de santé, de pages et de métriques
    """
    settings = container.settings
    setup_logging(settings.APP_DEBUG)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestScopeMiddleware, container=container)
    app.include_router(health_router)
    app.include_router(pages_router)
    app.include_router(metrics_router)
    return app


app = create_app()
