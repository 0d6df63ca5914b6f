"""Public site serving — GET /, /{slug}, /robots.txt, /sitemap.xml."""

from __future__ import annotations

import hashlib
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from backend.config import settings
from backend.services.site_renderer import RenderedPage, SiteRenderer, get_site_renderer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public"])


def _html_response(rendered: RenderedPage) -> Response:
    """
    Wrap a composed document.

    Cache headers:
    - Cache-Control: from PUBLIC_CACHE_CONTROL (default no-cache)
    - ETag: MD5 of the HTML content for conditional requests
    """
    body = rendered.html.encode("utf-8")
    etag = f'"{hashlib.md5(body, usedforsecurity=False).hexdigest()}"'

    return Response(
        content=body,
        status_code=rendered.status_code,
        media_type="text/html; charset=utf-8",
        headers={
            "Cache-Control": settings.PUBLIC_CACHE_CONTROL,
            "ETag": etag,
            "X-Content-Type-Options": "nosniff",
        },
    )


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt(renderer: SiteRenderer = Depends(get_site_renderer)) -> Response:
    """robots.txt built from the site settings."""
    text = await renderer.robots_txt()
    return PlainTextResponse(content=text, headers={"X-Content-Type-Options": "nosniff"})


@router.get("/sitemap.xml")
async def sitemap_xml(renderer: SiteRenderer = Depends(get_site_renderer)) -> Response:
    """sitemap.xml listing every published page."""
    xml = await renderer.sitemap_xml()
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"X-Content-Type-Options": "nosniff"},
    )


@router.get("/", response_class=HTMLResponse)
async def serve_homepage(renderer: SiteRenderer = Depends(get_site_renderer)) -> Response:
    """Serve the page whose slug is the configured homepage slug."""
    try:
        rendered = await renderer.render_path(None)
    except Exception:
        logger.exception("Failed to render homepage")
        raise
    return _html_response(rendered)


@router.get("/{slug:path}", response_class=HTMLResponse)
async def serve_page(slug: str, renderer: SiteRenderer = Depends(get_site_renderer)) -> Response:
    """
    Serve a published page by slug.

    Returns the composed 404 document with status 404 if the slug is reserved,
    nested, or does not name a published page.
    """
    try:
        rendered = await renderer.render_path(slug)
    except Exception:
        logger.exception("Failed to render page for slug=%s", slug)
        raise
    return _html_response(rendered)
