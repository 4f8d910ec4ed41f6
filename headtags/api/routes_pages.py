"""
Pages de démonstration assemblées à partir de blocs imbriqués et cacheables.

Chaque bloc déclare ses propres éléments head; le marqueur placé dans `<head>` est remplacé par
l'ensemble collecté au moment de l'envoi de la réponse.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from headtags.core.container import container
from headtags.core.settings import get_settings
from headtags.middlewares.head_injection import HeadTagsRoute
from headtags.middlewares.request_scope import get_request_scope
from headtags.rendering.blocks import Block, BlockRenderer

router = APIRouter(prefix="/pages", tags=["pages"], route_class=HeadTagsRoute)


def build_layout(slug: str) -> Block:
    """Arbre de blocs d'une page produit."""
    placeholder = get_settings().HEADTAGS_PLACEHOLDER
    header = Block(
        "header",
        template="<header>{children}</header>",
        head=lambda m: m.add_charset().add_stylesheet("/static/site.css"),
        cache_lifetime=3600,
        cache_tags=["layout"],
    )
    reviews = Block(
        f"product.{slug}.reviews",
        template="<section class='reviews'></section>",
        head=lambda m: m.add_external_script("/static/reviews.js", {"defer": "defer"}),
        cache_lifetime=600,
        cache_tags=[f"product_{slug}"],
    )
    product = Block(
        f"product.{slug}",
        template="<main><h1>" + slug + "</h1>{children}</main>",
        children=[reviews],
        head=lambda m: (
            m.add_meta_name("description", f"Product {slug}", key="meta_description").add_meta_property(
                "og:title", slug
            )
        ),
        cache_lifetime=3600,
        cache_tags=[f"product_{slug}"],
    )
    footer = Block(
        "footer",
        template="<footer></footer>",
        head=lambda m: m.add_inline_script("window.dataLayer = window.dataLayer || [];"),
    )
    return Block(
        "root",
        template=(
            "<!DOCTYPE html><html><head><title>" + slug + "</title>" + placeholder + "</head>"
            "<body>{children}</body></html>"
        ),
        children=[header, product, footer],
    )


@router.get("/{slug}", response_class=HTMLResponse)
async def page(slug: str):
    """Rend la page produit `slug`."""
    scope = get_request_scope() or container.new_request_scope()
    renderer = BlockRenderer(scope.manager, scope.hooks, container.content_cache, container.detector)
    return HTMLResponse(renderer.render(build_layout(slug)))
