"""Middleware Starlette qui ouvre une portée de rendu par requête.

Chaque requête reçoit son propre gestionnaire d'éléments head, son tracker et ses hooks, liés à
une `ContextVar`: la pile de suivi n'est jamais partagée entre requêtes concurrentes.
"""

from __future__ import annotations

from collections.abc import Callable
from contextvars import ContextVar

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from headtags.core.container import Container, RequestScope
from headtags.infra.page_cache import page_identifier

_current_scope: ContextVar[RequestScope | None] = ContextVar("headtags_scope", default=None)


def get_request_scope() -> RequestScope | None:
    """Portée de la requête courante, ou None hors requête."""
    return _current_scope.get()


class RequestScopeMiddleware(BaseHTTPMiddleware):
    """Crée et publie la portée head tags de chaque requête HTTP."""

    def __init__(self, app: ASGIApp, container: Container | None = None) -> None:
        """Initialise le middleware.

        Args:
            app: Application ASGI à wrapper.
            container: Conteneur de dépendances (singleton global par défaut).
        """
        super().__init__(app)
        if container is None:
            from headtags.core.container import container as default_container  # noqa: PLC0415

            container = default_container
        self.container = container

    async def dispatch(self, request, call_next: Callable):
        page_id = page_identifier(request.method, str(request.url))
        scope = self.container.new_request_scope(page_id)
        request.state.headtags = scope
        token = _current_scope.set(scope)
        try:
            with structlog.contextvars.bound_contextvars(page_id=page_id):
                return await call_next(request)
        finally:
            _current_scope.reset(token)
