"""
PagePress Kernel — Node Renderers

One pure function per component kind:
    (props, pre-rendered children HTML, element id) → HTML fragment

Renderers are registered against ComponentKind in COMPONENT_RENDERERS.
Every renderer tolerates any prop being absent and falls back to the
editor's defaults. Text is escaped; rich content is sanitized; URL props
pass the scheme allowlist.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import StrEnum
from typing import Any
from urllib.parse import urlencode

from pagepress.kernel.sanitizer import (
    DENIED_ATTRIBUTES,
    HTML_BLOCK,
    RICH_CONTENT,
    escape_attribute,
    escape_html,
    safe_url,
    sanitize,
    strip_css,
)
from pagepress.kernel.styles import clean_css_value


class ComponentKind(StrEnum):
    CONTAINER = "Container"
    DIV = "Div"
    SECTION = "Section"
    ROW = "Row"
    COLUMN = "Column"
    TEXT = "Text"
    HEADING = "Heading"
    IMAGE = "Image"
    BUTTON = "Button"
    LINK = "Link"
    DIVIDER = "Divider"
    SPACER = "Spacer"
    ICON = "Icon"
    ICON_BOX = "IconBox"
    VIDEO = "Video"
    HTML_BLOCK = "HTMLBlock"
    LIST = "List"


# Kinds whose output contains their children. Children of any other kind are
# not part of the published page.
CONTAINER_KINDS: frozenset[ComponentKind] = frozenset(
    {
        ComponentKind.CONTAINER,
        ComponentKind.DIV,
        ComponentKind.SECTION,
        ComponentKind.ROW,
        ComponentKind.COLUMN,
        ComponentKind.ICON_BOX,
    }
)

ComponentRenderer = Callable[[dict[str, Any], str, str], str]

COMPONENT_RENDERERS: dict[ComponentKind, ComponentRenderer] = {}

CONTAINER_TAGS: frozenset[str] = frozenset(
    {"div", "section", "article", "aside", "header", "footer", "main", "nav", "figure", "address"}
)

LINK_TARGETS: frozenset[str] = frozenset({"_self", "_blank", "_parent", "_top"})

DEFAULT_LIST_ITEMS: tuple[str, ...] = ("Item 1", "Item 2", "Item 3")

_ATTRIBUTE_NAME_RE = re.compile(r"^[A-Za-z_:][A-Za-z0-9_.:-]*$")
_URL_ATTRIBUTES = {"href", "src", "action", "poster", "xlink:href", "background", "cite"}

_YOUTUBE_ID_RES = (
    re.compile(r"youtube\.com/watch\?(?:.*&)?v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/embed/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]{11})"),
)
_VIMEO_ID_RE = re.compile(r"vimeo\.com/(?:video/)?(\d+)")

_PLACEHOLDER_STYLE = "display:flex;align-items:center;justify-content:center;min-height:{height}px;color:#94a3b8;"
_EMBED_STYLE = "width:100%;aspect-ratio:16/9;"


def component(*kinds: ComponentKind) -> Callable[[ComponentRenderer], ComponentRenderer]:
    """Register a renderer for one or more component kinds."""

    def register(fn: ComponentRenderer) -> ComponentRenderer:
        for kind in kinds:
            COMPONENT_RENDERERS[kind] = fn
        return fn

    return register


def component_kind(type_tag: str) -> ComponentKind | None:
    try:
        return ComponentKind(type_tag)
    except ValueError:
        return None


def renders_children(type_tag: str) -> bool:
    """Unknown kinds render their children in a generic wrapper."""
    kind = component_kind(type_tag)
    return kind is None or kind in CONTAINER_KINDS


def render_component(type_tag: str, props: dict[str, Any], children: str, element_id: str) -> str:
    """Dispatch to the registered renderer; unknown kinds degrade to render_unknown."""
    kind = component_kind(type_tag)
    if kind is None:
        return render_unknown(props, children, element_id)
    return COMPONENT_RENDERERS[kind](props, children, element_id)


def render_unknown(props: dict[str, Any], children: str, element_id: str) -> str:
    if not children:
        return ""
    return f"<div{build_attributes(props, element_id)}>{children}</div>"


# ---------------------------------------------------------------------------
# Attribute helpers
# ---------------------------------------------------------------------------


def build_attributes(props: dict[str, Any], element_id: str) -> str:
    """
    The id attribute plus the author's custom attributes, with a leading space.

    Custom attributes named id, on*, or anything that is not a valid
    attribute name are dropped. URL-valued ones pass safe_url().
    """
    parts = [f'id="{escape_attribute(element_id)}"'] if element_id else []

    metadata = props.get("metadata")
    custom = metadata.get("customAttributes") if isinstance(metadata, dict) else None
    for attr in custom if isinstance(custom, list) else []:
        if not isinstance(attr, dict):
            continue
        name, value = attr.get("name"), attr.get("value")
        if not isinstance(name, str) or not _ATTRIBUTE_NAME_RE.match(name):
            continue
        lowered = name.lower()
        if lowered == "id" or lowered.startswith("on") or lowered in DENIED_ATTRIBUTES:
            continue
        value = "" if value is None else str(value)
        if lowered in _URL_ATTRIBUTES:
            value = safe_url(value)
        parts.append(f'{name}="{escape_attribute(value)}"')

    return f" {' '.join(parts)}" if parts else ""


def _text(props: dict[str, Any], key: str, default: str = "") -> str:
    value = props.get(key)
    if value is None or isinstance(value, (dict, list)):
        return default
    text = str(value)
    return text if text else default


def _int(props: dict[str, Any], key: str, default: int) -> int:
    value = props.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return default


def _target(props: dict[str, Any], key: str) -> str:
    target = _text(props, key, "_self")
    return target if target in LINK_TARGETS else "_self"


def _anchor_attributes(href: str, target: str) -> str:
    rel = ' rel="noopener noreferrer"' if target == "_blank" else ""
    return f' href="{escape_attribute(href)}" target="{target}"{rel}'


def _media_url(props: dict[str, Any], key: str) -> str:
    """A media URL, or "" when unset or on a disallowed scheme."""
    return safe_url(props.get(key), fallback="")


def _placeholder(attrs: str, label: str, height: int) -> str:
    return f'<div{attrs}><span style="{_PLACEHOLDER_STYLE.format(height=height)}">{label}</span></div>'


def _svg_icon(name: str, size: int, color: Any, attrs: str = "") -> str:
    color = clean_css_value(color) or "currentColor"
    style = f"display:inline-flex;width:{size}px;height:{size}px;color:{color}"
    return (
        f'<span{attrs} role="img" aria-label="{escape_attribute(name)}" style="{escape_attribute(style)}">'
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24" '
        'fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
        '<circle cx="12" cy="12" r="10"/></svg></span>'
    )


# ---------------------------------------------------------------------------
# Structural
# ---------------------------------------------------------------------------


@component(ComponentKind.CONTAINER, ComponentKind.DIV)
def render_container(props: dict[str, Any], children: str, element_id: str) -> str:
    tag = _text(props, "htmlTag", "div").lower()
    if tag not in CONTAINER_TAGS:
        tag = "div"
    return f"<{tag}{build_attributes(props, element_id)}>{children}</{tag}>"


@component(ComponentKind.SECTION)
def render_section(props: dict[str, Any], children: str, element_id: str) -> str:
    return f"<section{build_attributes(props, element_id)}>{children}</section>"


@component(ComponentKind.ROW, ComponentKind.COLUMN)
def render_row(props: dict[str, Any], children: str, element_id: str) -> str:
    return f"<div{build_attributes(props, element_id)}>{children}</div>"


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


@component(ComponentKind.TEXT)
def render_text(props: dict[str, Any], children: str, element_id: str) -> str:
    """Rich HTML content when present, else the plain text in a paragraph."""
    html_content = _text(props, "htmlContent")
    if html_content:
        content = sanitize(html_content, RICH_CONTENT)
    else:
        content = f"<p>{escape_html(_text(props, 'text'))}</p>"
    return f"<div{build_attributes(props, element_id)}>{content}</div>"


@component(ComponentKind.HEADING)
def render_heading(props: dict[str, Any], children: str, element_id: str) -> str:
    level = max(1, min(6, _int(props, "level", 2)))
    tag = f"h{level}"

    html_content = _text(props, "htmlContent")
    if html_content:
        content = sanitize(html_content, RICH_CONTENT)
    else:
        content = escape_html(_text(props, "text", "Heading"))

    link_url = _text(props, "linkUrl")
    if link_url:
        content = f"<a{_anchor_attributes(safe_url(link_url), _target(props, 'linkTarget'))}>{content}</a>"

    return f"<{tag}{build_attributes(props, element_id)}>{content}</{tag}>"


@component(ComponentKind.LIST)
def render_list(props: dict[str, Any], children: str, element_id: str) -> str:
    tag = "ol" if props.get("listType") == "ol" else "ul"
    items = props.get("items")
    if not isinstance(items, list):
        items = list(DEFAULT_LIST_ITEMS)
    body = "".join(f"<li>{escape_html(item)}</li>" for item in items if not isinstance(item, (dict, list)))
    return f"<{tag}{build_attributes(props, element_id)}>{body}</{tag}>"


# ---------------------------------------------------------------------------
# Links and buttons
# ---------------------------------------------------------------------------


@component(ComponentKind.BUTTON)
def render_button(props: dict[str, Any], children: str, element_id: str) -> str:
    """An anchor when href is set, else <button type="button">."""
    content = escape_html(_text(props, "text", "Button"))
    icon_before = _text(props, "iconBefore")
    icon_after = _text(props, "iconAfter")
    if icon_before:
        content = f'<span class="pp-btn-icon pp-btn-icon-before">{escape_html(icon_before)}</span>{content}'
    if icon_after:
        content = f'{content}<span class="pp-btn-icon pp-btn-icon-after">{escape_html(icon_after)}</span>'

    attrs = build_attributes(props, element_id)
    href = _text(props, "href")
    if href:
        return f"<a{attrs}{_anchor_attributes(safe_url(href), _target(props, 'target'))}>{content}</a>"
    return f'<button{attrs} type="button">{content}</button>'


@component(ComponentKind.LINK)
def render_link(props: dict[str, Any], children: str, element_id: str) -> str:
    href = safe_url(_text(props, "href", "#"))
    text = escape_html(_text(props, "text", "Link"))
    return f"<a{build_attributes(props, element_id)}{_anchor_attributes(href, _target(props, 'target'))}>{text}</a>"


# ---------------------------------------------------------------------------
# Decorative
# ---------------------------------------------------------------------------


@component(ComponentKind.DIVIDER)
def render_divider(props: dict[str, Any], children: str, element_id: str) -> str:
    return f"<hr{build_attributes(props, element_id)}>"


@component(ComponentKind.SPACER)
def render_spacer(props: dict[str, Any], children: str, element_id: str) -> str:
    return f'<div{build_attributes(props, element_id)} aria-hidden="true"></div>'


@component(ComponentKind.ICON)
def render_icon(props: dict[str, Any], children: str, element_id: str) -> str:
    name = _text(props, "name", "star")
    size = _int(props, "size", 24)
    return _svg_icon(name, size, props.get("color"), build_attributes(props, element_id))


@component(ComponentKind.ICON_BOX)
def render_icon_box(props: dict[str, Any], children: str, element_id: str) -> str:
    parts = [_svg_icon(_text(props, "iconName", "star"), _int(props, "iconSize", 32), props.get("iconColor"))]
    heading = _text(props, "heading")
    if heading:
        parts.append(f"<h3>{escape_html(heading)}</h3>")
    description = _text(props, "description")
    if description:
        parts.append(f"<p>{escape_html(description)}</p>")
    parts.append(children)
    return f"<div{build_attributes(props, element_id)}>{''.join(parts)}</div>"


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------


@component(ComponentKind.IMAGE)
def render_image(props: dict[str, Any], children: str, element_id: str) -> str:
    attrs = build_attributes(props, element_id)
    src = _media_url(props, "src")
    if not src:
        return _placeholder(attrs, "No image set", 100)
    alt = escape_attribute(_text(props, "alt"))
    return f'<img{attrs} src="{escape_attribute(src)}" alt="{alt}" loading="lazy" decoding="async">'


def extract_youtube_id(url: str) -> str | None:
    for pattern in _YOUTUBE_ID_RES:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def extract_vimeo_id(url: str) -> str | None:
    match = _VIMEO_ID_RE.search(url)
    return match.group(1) if match else None


def _embed(attrs: str, src: str) -> str:
    return (
        f'<div{attrs}><iframe src="{escape_attribute(src)}" frameborder="0" allowfullscreen '
        f'allow="autoplay; encrypted-media" loading="lazy" style="{_EMBED_STYLE}" title="Video"></iframe></div>'
    )


@component(ComponentKind.VIDEO)
def render_video(props: dict[str, Any], children: str, element_id: str) -> str:
    """
    Three cases, in order:
      YouTube URL → youtube.com/embed iframe
      Vimeo URL   → player.vimeo.com iframe
      otherwise   → native <video><source>
    A platform URL whose id cannot be extracted falls through to native video.
    """
    attrs = build_attributes(props, element_id)
    src = _media_url(props, "src")
    if not src:
        return _placeholder(attrs, "No video set", 200)

    video_type = _text(props, "videoType", "url")
    autoplay = props.get("autoplay") is True
    loop = props.get("loop") is True
    muted = props.get("muted") is True

    if video_type == "youtube" or "youtube.com" in src or "youtu.be" in src:
        video_id = extract_youtube_id(src)
        if video_id:
            params = {k: "1" for k, on in (("autoplay", autoplay), ("loop", loop), ("mute", muted)) if on}
            query = f"?{urlencode(params)}" if params else ""
            return _embed(attrs, f"https://www.youtube.com/embed/{video_id}{query}")

    if video_type == "vimeo" or "vimeo.com" in src:
        vimeo_id = extract_vimeo_id(src)
        if vimeo_id:
            params = {k: "1" for k, on in (("autoplay", autoplay), ("loop", loop), ("muted", muted)) if on}
            query = f"?{urlencode(params)}" if params else ""
            return _embed(attrs, f"https://player.vimeo.com/video/{vimeo_id}{query}")

    flags = []
    if props.get("controls") is not False:
        flags.append("controls")
    if autoplay:
        flags.append("autoplay")
    if loop:
        flags.append("loop")
    if muted:
        flags.append("muted")
    flags.append("playsinline")
    poster = _media_url(props, "posterImage")
    if poster:
        flags.append(f'poster="{escape_attribute(poster)}"')

    return (
        f'<div{attrs}><video {" ".join(flags)} style="width:100%;">'
        f'<source src="{escape_attribute(src)}">Your browser does not support video.</video></div>'
    )


# ---------------------------------------------------------------------------
# Raw HTML
# ---------------------------------------------------------------------------


@component(ComponentKind.HTML_BLOCK)
def render_html_block(props: dict[str, Any], children: str, element_id: str) -> str:
    """
    Author-supplied HTML and CSS.

    Tag filtering is widened to HTML_BLOCK_TAGS and attributes are open,
    but event handlers, scripts, disallowed URL schemes and iframe hosts
    are still removed.
    """
    content = ""
    css = _text(props, "css")
    if css.strip():
        content += f"<style>{strip_css(css)}</style>"
    html = _text(props, "html")
    if html:
        content += sanitize(html, HTML_BLOCK)
    return f"<div{build_attributes(props, element_id)}>{content}</div>"
