"""
PagePress Kernel — the pure renderer.

Five components, leaves first:
  sanitizer    : escaping + allowlist sanitization policies
  styles       : (element id, style layers) → CSS rules
  components   : one renderer per component kind
  walker       : (node id, document) → RenderedFragment (html, css rules)
  composer     : render context → full HTML document (page, 404)

Plus seo (robots.txt, sitemap.xml) and breakpoints (the shared
responsive-value cascade). No IO anywhere in this package.
"""

from pagepress.kernel.breakpoints import resolve, resolve_styling
from pagepress.kernel.composer import compose_404, compose_page, resolve_template
from pagepress.kernel.sanitizer import (
    RICH_CONTENT,
    TRUSTED_HEAD,
    escape_attribute,
    escape_html,
    sanitize,
)
from pagepress.kernel.seo import build_robots_txt, build_sitemap_xml
from pagepress.kernel.styles import compile_element_css
from pagepress.kernel.types import (
    Document,
    NotFoundRenderContext,
    PageRecord,
    PageRenderContext,
    PageSettings,
    RenderedFragment,
    SiteSettings,
    SitemapEntry,
    Template,
    TemplateLibrary,
)
from pagepress.kernel.walker import render_document, render_node

__all__ = [
    "sanitize",
    "escape_html",
    "escape_attribute",
    "RICH_CONTENT",
    "TRUSTED_HEAD",
    "compile_element_css",
    "resolve",
    "resolve_styling",
    "render_node",
    "render_document",
    "compose_page",
    "compose_404",
    "resolve_template",
    "build_robots_txt",
    "build_sitemap_xml",
    "Document",
    "RenderedFragment",
    "Template",
    "TemplateLibrary",
    "PageRecord",
    "PageSettings",
    "SiteSettings",
    "SitemapEntry",
    "PageRenderContext",
    "NotFoundRenderContext",
]
