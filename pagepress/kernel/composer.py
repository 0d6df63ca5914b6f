"""
PagePress Kernel — Document Composer

Pure functions: render context → complete HTML document.

    compose_page(PageRenderContext)     → published page
    compose_404(NotFoundRenderContext)  → not-found page

Header and footer templates are resolved through the fallback chain
(page-specific template id → published system template → omitted) and
rendered through the walker into the same element-id namespace as the page
body. Stylesheet order:

    base reset → page → header → footer → page custom CSS
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import chevron

from pagepress.kernel.sanitizer import (
    TRUSTED_FOOTER,
    TRUSTED_HEAD,
    embed_script,
    escape_attribute,
    escape_html,
    safe_url,
    sanitize,
    strip_css,
)
from pagepress.kernel.seo import canonical_url
from pagepress.kernel.types import (
    NotFoundRenderContext,
    PageRenderContext,
    RenderedFragment,
    Template,
    TemplateLibrary,
)
from pagepress.kernel.walker import ElementNamespace, render_document

logger = logging.getLogger(__name__)

BASE_CSS = """/* PagePress Base Styles */
*, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }
html { -webkit-text-size-adjust: 100%; tab-size: 4; font-feature-settings: normal; }
body { font-family: system-ui, -apple-system, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif; line-height: 1.6; color: #0f172a; }
img, video { max-width: 100%; height: auto; display: block; }
a { color: inherit; }
h1, h2, h3, h4, h5, h6 { line-height: 1.2; }
ul, ol { list-style-position: inside; }
hr { border: none; }
.pp-btn-icon { display: inline-flex; align-items: center; }
.pp-btn-icon-before { margin-right: 0.5em; }
.pp-btn-icon-after { margin-left: 0.5em; }"""

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
{{#head_tags}}
  {{{.}}}
{{/head_tags}}
  <style>
{{{css}}}
  </style>
{{#head_code}}
  {{{.}}}
{{/head_code}}
</head>
<body{{{body_attributes}}}>
{{#body_parts}}
  {{{.}}}
{{/body_parts}}
</body>
</html>
"""

NOT_FOUND_BODY_TEMPLATE = """<div class="pp-404" style="display:flex;flex-direction:column;align-items:center;justify-content:center;min-height:60vh;text-align:center;padding:2rem;">
<h1 style="font-size:4rem;font-weight:800;color:#1e293b;">404</h1>
<p style="font-size:1.25rem;color:#64748b;margin-top:1rem;">{{message}}</p>
<a href="{{home_url}}" style="margin-top:2rem;padding:0.75rem 1.5rem;background:#3b82f6;color:#fff;border-radius:0.375rem;text-decoration:none;font-weight:500;">Go Home</a>
</div>"""

NOT_FOUND_MESSAGE = "The page you're looking for doesn't exist."


@dataclass(frozen=True)
class _Frame:
    """Header and footer rendered around one body."""

    header: RenderedFragment
    footer: RenderedFragment


def resolve_template(library: TemplateLibrary, template_id: str | None, template_type: str) -> Template | None:
    """
    Page-specific template by id, else the published system template of
    `template_type`, else None.
    """
    if template_id:
        template = library.get(template_id)
        if template is not None:
            return template
        logger.debug("resolve_template: %s template %s not found, trying system template", template_type, template_id)
    return library.published_system(template_type)


def _render_template(template: Template | None, namespace: ElementNamespace) -> RenderedFragment:
    if template is None:
        return RenderedFragment()
    return render_document(template.document, namespace)


def _stylesheet(*parts: str) -> str:
    return "\n".join(part for part in parts if part)


def _meta(name: str, content: str) -> str:
    return f'<meta name="{name}" content="{escape_attribute(content)}">'


def _og(prop: str, content: str) -> str:
    return f'<meta property="{prop}" content="{escape_attribute(content)}">'


def _render_document(css: str, head_tags: list[str], head_code: list[str], body_parts: list[str], body_class: str) -> str:
    return chevron.render(
        DOCUMENT_TEMPLATE,
        {
            "head_tags": head_tags,
            "css": css,
            "head_code": [code for code in head_code if code],
            "body_attributes": f' class="{escape_attribute(body_class)}"' if body_class.strip() else "",
            "body_parts": [part for part in body_parts if part],
        },
    )


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------


def compose_page(context: PageRenderContext) -> str:
    """
    Compose one published page. Pure; deterministic for a given context.
    """
    page = context.page
    page_settings = context.page_settings
    site = context.site_settings

    namespace = ElementNamespace()
    body = render_document(page.content, namespace)

    header_template = None
    if not page_settings.disable_header:
        header_template = resolve_template(context.templates, page.header_template_id, "header")
    footer_template = None
    if not page_settings.disable_footer:
        footer_template = resolve_template(context.templates, page.footer_template_id, "footer")

    frame = _Frame(
        header=_render_template(header_template, namespace),
        footer=_render_template(footer_template, namespace),
    )

    css = _stylesheet(BASE_CSS, body.css, frame.header.css, frame.footer.css, strip_css(page_settings.custom_css))

    return _render_document(
        css=css,
        head_tags=build_head_tags(context),
        head_code=[sanitize(site.head_code, TRUSTED_HEAD), embed_script(page_settings.js_head)],
        body_parts=[
            frame.header.html,
            f"<main>{body.html}</main>",
            frame.footer.html,
            sanitize(site.footer_code, TRUSTED_FOOTER),
            embed_script(page_settings.js_body),
        ],
        body_class=page_settings.custom_body_class,
    )


def page_title(context: PageRenderContext) -> str:
    return context.page_settings.meta_title or context.page.title or context.site_settings.title


def build_head_tags(context: PageRenderContext) -> list[str]:
    """
    charset, viewport, title, description, canonical, favicon,
    Open Graph, robots, twitter card. Values are escaped.
    """
    page_settings = context.page_settings
    site = context.site_settings

    title = page_title(context)
    description = page_settings.meta_description or site.description
    canonical = canonical_url(site.url, context.page.slug, site.homepage_slug)

    tags = [
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>{escape_html(title)}</title>",
    ]
    if description:
        tags.append(_meta("description", description))
    if canonical:
        tags.append(f'<link rel="canonical" href="{escape_attribute(canonical)}">')
    favicon = safe_url(site.favicon_url, fallback="")
    if favicon:
        tags.append(f'<link rel="icon" href="{escape_attribute(favicon)}">')

    tags.append(_og("og:title", page_settings.og_title or title))
    og_description = page_settings.og_description or description
    if og_description:
        tags.append(_og("og:description", og_description))
    og_image = safe_url(page_settings.og_image, fallback="")
    if og_image:
        tags.append(_og("og:image", og_image))
    if canonical:
        tags.append(_og("og:url", canonical))
    tags.append(_og("og:type", "website"))
    tags.append(_og("og:site_name", site.title))

    directives = [d for d, on in (("noindex", page_settings.no_index), ("nofollow", page_settings.no_follow)) if on]
    if directives:
        tags.append(_meta("robots", ", ".join(directives)))

    tags.append(_meta("twitter:card", "summary_large_image"))
    return tags


# ---------------------------------------------------------------------------
# 404
# ---------------------------------------------------------------------------


def compose_404(context: NotFoundRenderContext) -> str:
    """
    The not-found document: published "notfound" template body, or a default
    message with a link home. Header and footer come from the published
    system templates only.
    """
    site = context.site_settings
    library = context.templates

    namespace = ElementNamespace()
    notfound = _render_template(library.published_system("notfound"), namespace)
    frame = _Frame(
        header=_render_template(library.published_system("header"), namespace),
        footer=_render_template(library.published_system("footer"), namespace),
    )

    body_html = notfound.html or chevron.render(
        NOT_FOUND_BODY_TEMPLATE, {"message": NOT_FOUND_MESSAGE, "home_url": "/"}
    )

    head_tags = [
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>404 - {escape_html(site.title)}</title>",
    ]
    favicon = safe_url(site.favicon_url, fallback="")
    if favicon:
        head_tags.append(f'<link rel="icon" href="{escape_attribute(favicon)}">')
    head_tags.append(_meta("robots", "noindex, nofollow"))

    return _render_document(
        css=_stylesheet(BASE_CSS, notfound.css, frame.header.css, frame.footer.css),
        head_tags=head_tags,
        head_code=[],
        body_parts=[frame.header.html, f"<main>{body_html}</main>", frame.footer.html],
        body_class="",
    )
