"""Injection des éléments head collectés dans la réponse HTML sortante.

Le marqueur `HEADTAGS_PLACEHOLDER` est remplacé une seule fois par `HeadTagManager.render()`,
au dernier moment avant l'envoi. La réponse est laissée intacte si sa classe est exclue, si elle
n'est pas un document HTML, si le marqueur est absent ou s'il n'y a rien à injecter.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import Response

from headtags.app.metrics import HEAD_INJECTIONS
from headtags.core.settings import HEAD_PLACEHOLDER, get_settings
from headtags.domain.elements import class_path
from headtags.domain.manager import HeadTagManager
from headtags.middlewares.request_scope import get_request_scope

HTML_DOCTYPE_PATTERN = b"<!DOCTYPE html"
HTML_TAG_PATTERN = b"<html"

log = structlog.get_logger(__name__)


class HeadInjector:
    """Remplace le marqueur head d'une réponse par le rendu du gestionnaire."""

    def __init__(
        self,
        placeholder: str = HEAD_PLACEHOLDER,
        skip_classes: list[str] | None = None,
    ) -> None:
        self.placeholder = placeholder.encode("utf-8")
        self.skip_classes = list(skip_classes or [])

    def should_skip(self, response: Response) -> bool:
        return self.is_class_skipped(response) or not self.is_html_response(response)

    def is_class_skipped(self, response: Response) -> bool:
        for cls in type(response).__mro__:
            if class_path(cls) in self.skip_classes:
                log.debug(
                    "head_injection_skipped_class",
                    response_class=type(response).__name__,
                    skip_class=class_path(cls),
                )
                return True
        return False

    def is_html_response(self, response: Response) -> bool:
        body = getattr(response, "body", None)
        if not body:
            log.debug("head_injection_skipped_empty")
            return False
        is_html = HTML_DOCTYPE_PATTERN in body or HTML_TAG_PATTERN in body
        if not is_html:
            log.debug("head_injection_skipped_non_html")
        return is_html

    def process(self, response: Response, manager: HeadTagManager) -> Response:
        """Injecte les éléments dans la réponse; toute erreur est journalisée, jamais propagée."""
        if self.should_skip(response):
            HEAD_INJECTIONS.labels(result="skipped").inc()
            return response
        try:
            body = bytes(response.body)
            if self.placeholder not in body:
                log.debug("head_placeholder_not_found")
                HEAD_INJECTIONS.labels(result="skipped").inc()
                return response
            head = manager.render()
            if not head:
                log.debug("head_injection_nothing_to_inject")
                HEAD_INJECTIONS.labels(result="skipped").inc()
                return response
            charset = getattr(response, "charset", None) or "utf-8"
            updated = body.replace(self.placeholder, head.encode(charset), 1)
            response.body = updated
            response.headers["content-length"] = str(len(updated))
        except Exception as exc:
            HEAD_INJECTIONS.labels(result="error").inc()
            log.error("head_injection_failed", error=str(exc), exc_info=True)
            return response
        HEAD_INJECTIONS.labels(result="injected").inc()
        log.debug("head_injected", tags_count=head.count("<") - head.count("</"))
        return response


def build_injector() -> HeadInjector:
    settings = get_settings()
    return HeadInjector(
        placeholder=settings.HEADTAGS_PLACEHOLDER,
        skip_classes=settings.HEADTAGS_SKIP_RESPONSE_CLASSES,
    )


class HeadTagsRoute(APIRoute):
    """Route FastAPI qui injecte les éléments head dans la réponse produite par l'endpoint.

    S'utilise via `APIRouter(route_class=HeadTagsRoute)`; nécessite `RequestScopeMiddleware`.
    """

    injector: HeadInjector | None = None

    def get_route_handler(self) -> Callable:
        original_handler = super().get_route_handler()
        injector = self.injector or build_injector()

        async def handler(request: Request) -> Response:
            response = await original_handler(request)
            scope = get_request_scope()
            if scope is None:
                return response
            return injector.process(response, scope.manager)

        return handler
