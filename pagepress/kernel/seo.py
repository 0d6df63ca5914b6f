"""
PagePress Kernel — robots.txt, sitemap.xml and canonical URLs

Pure text builders. The caller supplies site settings and the page list;
nothing here reads the clock, so output depends only on its inputs.
"""

from __future__ import annotations

from datetime import date, datetime
from xml.sax.saxutils import escape as _xml_escape

from pagepress.kernel.types import SiteSettings, SitemapEntry

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def base_url(site_url: str) -> str:
    """The configured site URL without its trailing slash, or ""."""
    return (site_url or "").strip().rstrip("/")


def page_url(site_url: str, slug: str, homepage_slug: str) -> str:
    """Public URL of a page. The homepage maps to the bare base URL."""
    base = base_url(site_url)
    if not base:
        return ""
    if slug == homepage_slug:
        return base
    return f"{base}/{slug}"


def canonical_url(site_url: str, slug: str, homepage_slug: str) -> str:
    """Canonical link target. The homepage maps to the site root, with its slash."""
    base = base_url(site_url)
    if not base:
        return ""
    return f"{base}/" if slug == homepage_slug else f"{base}/{slug}"


def escape_xml(value: str) -> str:
    return _xml_escape(value, _XML_ENTITIES)


def build_robots_txt(site: SiteSettings, admin_path: str = "/admin/") -> str:
    lines = ["User-agent: *", "Allow: /", "", f"Disallow: {admin_path}"]
    base = base_url(site.url)
    if base:
        lines += ["", f"Sitemap: {base}/sitemap.xml"]
    return "\n".join(lines) + "\n"


def _lastmod(updated_at: datetime | date | None) -> str | None:
    if isinstance(updated_at, datetime):
        return updated_at.date().isoformat()
    if isinstance(updated_at, date):
        return updated_at.isoformat()
    return None


def build_sitemap_xml(site: SiteSettings, entries: list[SitemapEntry]) -> str:
    """
    One <url> per published, non-template page, in the order given.

    With no site URL configured there is nothing absolute to list and the
    urlset is empty.
    """
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', f'<urlset xmlns="{SITEMAP_NAMESPACE}">']

    if base_url(site.url):
        for entry in entries:
            if not entry.published or entry.page_type != "page":
                continue
            lines.append("  <url>")
            lines.append(f"    <loc>{escape_xml(page_url(site.url, entry.slug, site.homepage_slug))}</loc>")
            lastmod = _lastmod(entry.updated_at)
            if lastmod:
                lines.append(f"    <lastmod>{lastmod}</lastmod>")
            lines.append("  </url>")

    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
