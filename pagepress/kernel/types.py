"""
PagePress Kernel — Shared Types

Data classes used across the walker, style compiler, components, and composer.
These are the contracts that bind the kernel together.

Documents arrive as the editor's serialized node map (node id → node). A node
may use the editor's native keys (type.resolvedName, nodes, linkedNodes, parent)
or the IR names (typeTag, childIds, namedSlotChildIds, parentId).

Every constructor here is tolerant: malformed fields collapse to empty values,
never exceptions. Older-schema documents simply lack newer fields.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

ROOT_ID = "ROOT"

DEFAULT_SITE_TITLE = "My PagePress Site"
DEFAULT_HOMEPAGE_SLUG = "home"


# ---------------------------------------------------------------------------
# Document IR
# ---------------------------------------------------------------------------


def _first_present(d: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in d:
            return d[key]
    return None


def _type_tag(d: dict[str, Any]) -> str:
    tag = d.get("typeTag")
    if tag is None:
        raw = d.get("type")
        tag = raw.get("resolvedName") if isinstance(raw, dict) else raw
    return tag if isinstance(tag, str) else ""


@dataclass
class Node:
    """One element of a page or template document."""

    id: str
    type_tag: str
    props: dict[str, Any] = field(default_factory=dict)
    child_ids: list[str] = field(default_factory=list)
    slot_child_ids: dict[str, str] = field(default_factory=dict)
    hidden: bool = False
    parent_id: str | None = None

    @classmethod
    def from_dict(cls, node_id: str, d: dict[str, Any]) -> Node:
        props = d.get("props")
        children = _first_present(d, "childIds", "children", "nodes")
        slots = _first_present(d, "namedSlotChildIds", "linkedNodes", "slots")
        parent = _first_present(d, "parentId", "parent")

        return cls(
            id=node_id,
            type_tag=_type_tag(d),
            props=props if isinstance(props, dict) else {},
            child_ids=[c for c in children if isinstance(c, str)] if isinstance(children, list) else [],
            slot_child_ids=(
                {k: v for k, v in slots.items() if isinstance(k, str) and isinstance(v, str)}
                if isinstance(slots, dict)
                else {}
            ),
            hidden=d.get("hidden") is True,
            parent_id=parent if isinstance(parent, str) else None,
        )


@dataclass
class Document:
    """
    A node map with exactly one ROOT node (when well-formed).

    Dangling references, a missing ROOT, and cyclic parentage are all
    representable here; the walker is responsible for degrading gracefully.
    """

    nodes: dict[str, Node] = field(default_factory=dict)

    @classmethod
    def from_json(cls, content_json: Any) -> Document:
        if isinstance(content_json, (str, bytes)):
            try:
                content_json = json.loads(content_json)
            except ValueError:
                return cls()
        if not isinstance(content_json, dict):
            return cls()

        nodes = {
            node_id: Node.from_dict(node_id, raw)
            for node_id, raw in content_json.items()
            if isinstance(node_id, str) and isinstance(raw, dict)
        }
        return cls(nodes=nodes)

    def get(self, node_id: str) -> Node | None:
        return self.nodes.get(node_id)

    @property
    def root(self) -> Node | None:
        return self.nodes.get(ROOT_ID)


@dataclass(frozen=True)
class RenderedFragment:
    """
    Output of one walk: HTML plus the CSS rules collected on the way.

    Returned by value and merged by the caller. Never shared between renders.
    """

    html: str = ""
    css_rules: tuple[str, ...] = ()

    @property
    def css(self) -> str:
        return "\n".join(self.css_rules)

    @classmethod
    def join(cls, fragments: list[RenderedFragment]) -> RenderedFragment:
        rules: list[str] = []
        for fragment in fragments:
            rules.extend(fragment.css_rules)
        return cls(html="".join(f.html for f in fragments), css_rules=tuple(rules))


# ---------------------------------------------------------------------------
# Templates, pages and settings
# ---------------------------------------------------------------------------


@dataclass
class Template:
    """A reusable document with a role: header, footer, notfound, or custom."""

    id: str
    template_type: str
    document: Document = field(default_factory=Document)
    published: bool = False
    title: str = ""


@dataclass
class TemplateLibrary:
    """
    The templates one request may compose with.

    Uniqueness of published system templates is enforced upstream; this
    class assumes zero or one per type and takes the first published match.
    """

    templates: dict[str, Template] = field(default_factory=dict)

    @classmethod
    def of(cls, *templates: Template | None) -> TemplateLibrary:
        return cls(templates={t.id: t for t in templates if t is not None})

    def get(self, template_id: str | None) -> Template | None:
        if not template_id:
            return None
        return self.templates.get(template_id)

    def published_system(self, template_type: str) -> Template | None:
        for template in self.templates.values():
            if template.template_type == template_type and template.published:
                return template
        return None


@dataclass
class PageRecord:
    """The subset of a page row the composer reads."""

    id: str
    title: str
    slug: str
    content: Document = field(default_factory=Document)
    header_template_id: str | None = None
    footer_template_id: str | None = None
    updated_at: datetime | None = None


@dataclass
class PageSettings:
    """Per-page SEO, social, and custom-code settings."""

    meta_title: str = ""
    meta_description: str = ""
    no_index: bool = False
    no_follow: bool = False
    og_title: str = ""
    og_description: str = ""
    og_image: str = ""
    custom_css: str = ""
    js_head: str = ""
    js_body: str = ""
    disable_header: bool = False
    disable_footer: bool = False
    custom_body_class: str = ""

    @classmethod
    def from_json(cls, settings: Any) -> PageSettings:
        if not isinstance(settings, dict):
            return cls()
        seo = _as_dict(settings.get("seo"))
        social = _as_dict(settings.get("social"))
        custom_code = _as_dict(settings.get("customCode"))

        return cls(
            meta_title=_as_text(seo.get("metaTitle")),
            meta_description=_as_text(seo.get("metaDescription")),
            no_index=seo.get("noIndex") is True,
            no_follow=seo.get("noFollow") is True,
            og_title=_as_text(social.get("ogTitle")),
            og_description=_as_text(social.get("ogDescription")),
            og_image=_as_text(social.get("ogImage")),
            custom_css=_as_text(custom_code.get("css")),
            js_head=_as_text(custom_code.get("jsHead")),
            js_body=_as_text(custom_code.get("jsBody")),
            disable_header=settings.get("disableHeader") is True,
            disable_footer=settings.get("disableFooter") is True,
            custom_body_class=_as_text(settings.get("customBodyClass")),
        )


@dataclass
class SiteSettings:
    """Site-wide settings, read from the flat key → JSON value store."""

    title: str = DEFAULT_SITE_TITLE
    description: str = ""
    url: str = ""
    favicon_url: str = ""
    head_code: str = ""
    footer_code: str = ""
    homepage_slug: str = DEFAULT_HOMEPAGE_SLUG

    @classmethod
    def from_map(cls, values: dict[str, Any], homepage_slug: str = DEFAULT_HOMEPAGE_SLUG) -> SiteSettings:
        def text(key: str) -> str:
            value = values.get(key)
            if value is None:
                return ""
            return value if isinstance(value, str) else str(value)

        return cls(
            title=text("siteTitle") or DEFAULT_SITE_TITLE,
            description=text("siteDescription"),
            url=text("siteUrl"),
            favicon_url=text("faviconUrl"),
            head_code=text("customHeadCode"),
            footer_code=text("customFooterCode"),
            homepage_slug=text("homepageSlug") or homepage_slug,
        )


@dataclass
class PageRenderContext:
    """Everything one page render needs. Built fresh per request."""

    page: PageRecord
    page_settings: PageSettings = field(default_factory=PageSettings)
    site_settings: SiteSettings = field(default_factory=SiteSettings)
    templates: TemplateLibrary = field(default_factory=TemplateLibrary)


@dataclass
class NotFoundRenderContext:
    """Everything the 404 document needs."""

    site_settings: SiteSettings = field(default_factory=SiteSettings)
    templates: TemplateLibrary = field(default_factory=TemplateLibrary)


@dataclass
class SitemapEntry:
    slug: str
    updated_at: datetime | date | None = None
    published: bool = True
    page_type: str = "page"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""
