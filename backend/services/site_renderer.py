"""
Public site rendering — loads rows, builds the render context, calls the kernel.

Routing policy:
  /          → the published page whose slug is the homepage slug
  /{slug}    → the published, non-template page with exactly that slug
  reserved slugs and nested paths never resolve
  no match   → the composed 404 document with status 404 (never a redirect)

Database errors propagate to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.config import settings
from backend.models.page import Page
from backend.repos.page_repo import PageRepo
from backend.repos.settings_repo import SettingsRepo
from pagepress.kernel.composer import compose_404, compose_page
from pagepress.kernel.seo import build_robots_txt, build_sitemap_xml
from pagepress.kernel.types import (
    NotFoundRenderContext,
    PageRenderContext,
    PageSettings,
    SiteSettings,
    Template,
    TemplateLibrary,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedPage:
    html: str
    status_code: int = 200


class SiteRenderer:
    """Request orchestration for the public site. Holds no per-request state."""

    def __init__(self, pages: PageRepo | None = None, site_settings: SettingsRepo | None = None):
        self.pages = pages or PageRepo()
        self.settings = site_settings or SettingsRepo()

    async def load_site_settings(self) -> SiteSettings:
        values = await self.settings.get_site_settings()
        return SiteSettings.from_map(values, homepage_slug=settings.DEFAULT_HOMEPAGE_SLUG)

    async def render_path(self, slug: str | None) -> RenderedPage:
        """
        Render the page at `slug`, or the homepage when `slug` is None.

        Returns:
            RenderedPage with status 200, or the 404 document with status 404
        """
        site = await self.load_site_settings()
        if slug is None:
            slug = site.homepage_slug

        if not slug or "/" in slug or slug in settings.RESERVED_SLUGS:
            logger.debug("render_path: %r is not a page path", slug)
            return await self.render_not_found(site)

        page = await self.pages.get_published_by_slug(slug)
        if page is None:
            return await self.render_not_found(site)

        context = await self._page_context(page, site)
        return RenderedPage(html=compose_page(context))

    async def render_not_found(self, site: SiteSettings | None = None) -> RenderedPage:
        if site is None:
            site = await self.load_site_settings()
        templates = TemplateLibrary.of(
            *[await self._system_template(kind) for kind in ("notfound", "header", "footer")]
        )
        html = compose_404(NotFoundRenderContext(site_settings=site, templates=templates))
        return RenderedPage(html=html, status_code=404)

    async def robots_txt(self) -> str:
        site = await self.load_site_settings()
        return build_robots_txt(site, admin_path=settings.ADMIN_PATH)

    async def sitemap_xml(self) -> str:
        site = await self.load_site_settings()
        if not site.url:
            return build_sitemap_xml(site, [])
        pages = await self.pages.list_published_pages()
        return build_sitemap_xml(site, [page.to_sitemap_entry() for page in pages])

    async def _page_context(self, page: Page, site: SiteSettings) -> PageRenderContext:
        row = await self.settings.get_page_settings(page.id)
        page_settings = PageSettings.from_json(row.settings if row else None)

        templates = []
        if not page_settings.disable_header:
            templates.append(await self._frame_template(page.header_template_id, "header"))
        if not page_settings.disable_footer:
            templates.append(await self._frame_template(page.footer_template_id, "footer"))

        return PageRenderContext(
            page=page.to_record(),
            page_settings=page_settings,
            site_settings=site,
            templates=TemplateLibrary.of(*templates),
        )

    async def _frame_template(self, template_id: str | None, template_type: str) -> Template | None:
        """The page's own template if it exists, else the published system one."""
        if template_id:
            template = await self.pages.get_template(template_id)
            if template is not None:
                return template.to_template()
            logger.debug("page %s template %s missing, falling back to system", template_type, template_id)
        return await self._system_template(template_type)

    async def _system_template(self, template_type: str) -> Template | None:
        template = await self.pages.get_system_template(template_type)
        return template.to_template() if template else None


# Singleton instance
site_renderer = SiteRenderer()


def get_site_renderer() -> SiteRenderer:
    """FastAPI dependency for the shared renderer."""
    return site_renderer
