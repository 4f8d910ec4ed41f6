"""
Métriques Prometheus pour la collecte des éléments head.

Ce module définit les compteurs du cache d'éléments par fragment, de la sérialisation et de
l'injection dans les réponses HTML, ainsi que l'endpoint `/metrics`.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Cache des éléments head par fragment
# op: save | load | clear ; result: ok | empty | skipped | error
FRAGMENT_HEAD_CACHE_OPS = Counter(
    "headtags_fragment_cache_ops_total",
    "Fragment head-element cache operations",
    ["op", "result"],
)
FRAGMENT_HEAD_RESTORED = Counter(
    "headtags_fragment_elements_restored_total",
    "Head elements replayed from the fragment cache",
)
# direction: serialize | unserialize
SERIALIZER_ITEM_FAILURES = Counter(
    "headtags_serializer_item_failures_total",
    "Head elements dropped during (un)serialization",
    ["direction"],
)
# result: injected | skipped | error
HEAD_INJECTIONS = Counter(
    "headtags_injections_total",
    "Head placeholder substitutions in outgoing responses",
    ["result"],
)


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Collecte les métriques de comptage des requêtes et de latence par route.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = request.scope.get("path", "unknown")
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
