"""
PagePress Kernel — Escaping and HTML sanitization

Policies:
  RICH_CONTENT   : rich text and heading bodies from the editor
  HTML_BLOCK     : HTML block bodies: tag filtering widened to all layout,
                   form and media tags; attributes open except event handlers and id
  TRUSTED_HEAD   : admin-authored site head code (script/style/link/meta/noscript)
  TRUSTED_FOOTER : admin-authored site footer code (script/noscript/div)

The trusted policies pass scripts through. They are only fed from site
settings, which only administrators can edit.

sanitize() is total: it never raises. A parser failure fails closed and
returns the empty string.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from html import escape as _html_escape
from typing import Any
from urllib.parse import urlsplit

import bleach
from bleach.css_sanitizer import CSSSanitizer

logger = logging.getLogger(__name__)

SAFE_URL_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto", "tel"})

IFRAME_HOSTS: frozenset[str] = frozenset(
    {
        "www.youtube.com",
        "youtube.com",
        "www.youtube-nocookie.com",
        "player.vimeo.com",
        "vimeo.com",
    }
)

# Never allowed, under any policy
DENIED_ATTRIBUTES: frozenset[str] = frozenset({"srcdoc", "formaction"})

# Author content must not claim an element id; the walker owns those
CONTENT_DENIED_ATTRIBUTES: frozenset[str] = DENIED_ATTRIBUTES | {"id"}

RICH_TAGS: frozenset[str] = frozenset(
    {
        # text
        "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn", "em", "i",
        "kbd", "mark", "q", "s", "samp", "small", "span", "strong", "sub", "sup", "time",
        "u", "var", "wbr", "p", "pre", "blockquote", "hr",
        "h1", "h2", "h3", "h4", "h5", "h6",
        # lists
        "ul", "ol", "li", "dl", "dt", "dd",
        # layout
        "div", "section", "article", "aside", "nav", "header", "footer", "main",
        "address", "figure", "figcaption", "details", "summary",
        # tables
        "table", "caption", "colgroup", "col", "thead", "tbody", "tfoot", "tr", "th", "td",
        # media
        "img", "picture", "video", "audio", "source", "track", "iframe",
        "svg", "path", "circle", "rect", "line", "polyline", "polygon", "g", "defs", "use", "symbol",
    }
)  # fmt: skip

HTML_BLOCK_TAGS: frozenset[str] = RICH_TAGS | frozenset(
    {
        "form", "fieldset", "legend", "label", "input", "button", "select", "option",
        "optgroup", "textarea", "output", "progress", "meter",
        "canvas", "map", "area", "ruby", "rt", "rp", "ins", "del", "hgroup", "dialog",
        "ellipse", "text", "tspan", "lineargradient", "radialgradient", "stop", "clippath", "mask",
    }
)  # fmt: skip

GLOBAL_ATTRIBUTES: frozenset[str] = frozenset(
    {"class", "style", "role", "title", "lang", "dir", "loading", "decoding"}
)

TAG_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "target", "rel", "name"}),
    "img": frozenset({"src", "alt", "width", "height", "srcset", "sizes"}),
    "video": frozenset({"src", "poster", "autoplay", "muted", "loop", "playsinline", "controls", "width", "height"}),
    "audio": frozenset({"src", "autoplay", "muted", "loop", "controls"}),
    "source": frozenset({"src", "type", "srcset", "media", "sizes"}),
    "track": frozenset({"src", "kind", "srclang", "label", "default"}),
    "iframe": frozenset({"src", "width", "height", "frameborder", "allowfullscreen", "allow"}),
    "svg": frozenset({"xmlns", "viewbox", "width", "height", "fill", "stroke", "stroke-width"}),
    "path": frozenset({"d", "fill", "stroke", "stroke-width", "stroke-linecap", "stroke-linejoin"}),
    "circle": frozenset({"cx", "cy", "r", "fill", "stroke", "stroke-width"}),
    "rect": frozenset({"x", "y", "width", "height", "rx", "ry", "fill", "stroke", "stroke-width"}),
    "line": frozenset({"x1", "y1", "x2", "y2", "stroke", "stroke-width"}),
    "polyline": frozenset({"points", "fill", "stroke", "stroke-width"}),
    "polygon": frozenset({"points", "fill", "stroke", "stroke-width"}),
    "ol": frozenset({"start", "reversed", "type"}),
    "td": frozenset({"colspan", "rowspan", "headers"}),
    "th": frozenset({"colspan", "rowspan", "headers", "scope"}),
    "col": frozenset({"span"}),
    "colgroup": frozenset({"span"}),
    "time": frozenset({"datetime"}),
    "data": frozenset({"value"}),
    "blockquote": frozenset({"cite"}),
    "q": frozenset({"cite"}),
    "details": frozenset({"open"}),
}

_CSS_SANITIZER = CSSSanitizer()

_SCRIPT_OR_STYLE_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_RAW_TEXT_RE = re.compile(r"(<(script|style)\b[^>]*>)(.*?)(</\2\s*>)", re.IGNORECASE | re.DOTALL)
_EMPTY_RAW_TEXT_RE = re.compile(r"(<(script|style)\b[^>]*>)(</\2>)", re.IGNORECASE)
_SCRIPT_CLOSE_RE = re.compile(r"</(?=script)", re.IGNORECASE)
_URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")

_CSS_STRIP_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"expression\s*\(", re.IGNORECASE), ""),
    (re.compile(r"javascript\s*:", re.IGNORECASE), ""),
    (re.compile(r"url\s*\(\s*[\"']?\s*javascript", re.IGNORECASE), "url("),
    (re.compile(r"-moz-binding", re.IGNORECASE), ""),
    (re.compile(r"@import", re.IGNORECASE), ""),
    (re.compile(r"</(?=style)", re.IGNORECASE), r"<\\/"),
)


@dataclass(frozen=True)
class SanitizePolicy:
    """An allowlist of tags, attributes and URL schemes."""

    name: str
    tags: frozenset[str]
    tag_attributes: dict[str, frozenset[str]] = field(default_factory=dict)
    global_attributes: frozenset[str] = GLOBAL_ATTRIBUTES
    denied_attributes: frozenset[str] = DENIED_ATTRIBUTES
    allow_all_attributes: bool = False
    protocols: frozenset[str] = SAFE_URL_SCHEMES
    drop_script_content: bool = True

    def allows_attribute(self, tag: str, name: str, value: str) -> bool:
        lowered = name.lower()
        if lowered.startswith("on") or lowered in self.denied_attributes:
            return False
        if tag == "iframe" and lowered == "src":
            return is_allowed_iframe_src(value)
        if self.allow_all_attributes:
            return True
        if lowered in self.global_attributes or lowered.startswith(("data-", "aria-")):
            return True
        return lowered in self.tag_attributes.get(tag, frozenset())


RICH_CONTENT = SanitizePolicy(
    name="rich_content",
    tags=RICH_TAGS,
    tag_attributes=TAG_ATTRIBUTES,
    denied_attributes=CONTENT_DENIED_ATTRIBUTES,
)

HTML_BLOCK = SanitizePolicy(
    name="html_block",
    tags=HTML_BLOCK_TAGS,
    denied_attributes=CONTENT_DENIED_ATTRIBUTES,
    allow_all_attributes=True,
)

TRUSTED_HEAD = SanitizePolicy(
    name="trusted_head",
    tags=frozenset({"script", "style", "link", "meta", "noscript"}),
    allow_all_attributes=True,
    drop_script_content=False,
)

TRUSTED_FOOTER = SanitizePolicy(
    name="trusted_footer",
    tags=frozenset({"script", "noscript", "div"}),
    allow_all_attributes=True,
    drop_script_content=False,
)


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


def escape_html(value: Any) -> str:
    """HTML-escape text content. Escapes & < > " and '."""
    if value is None:
        return ""
    return _html_escape(str(value), quote=True)


def escape_attribute(value: Any) -> str:
    """Escape a value for a double-quoted attribute."""
    return escape_html(value).replace("`", "&#96;")


def safe_url(url: Any, fallback: str = "#") -> str:
    """
    Return `url` if its scheme is allowlisted (or it is relative), else `fallback`.

    Control characters and whitespace are ignored when reading the scheme,
    as browsers do.
    """
    if not isinstance(url, str):
        return fallback
    candidate = url.strip()
    if not candidate:
        return fallback
    try:
        scheme = urlsplit(_URL_NOISE_RE.sub("", candidate)).scheme.lower()
    except ValueError:
        return fallback
    if scheme and scheme not in SAFE_URL_SCHEMES:
        return fallback
    return candidate


def is_allowed_iframe_src(src: str) -> bool:
    try:
        parts = urlsplit(src.strip())
    except ValueError:
        return False
    return parts.scheme in ("http", "https", "") and (parts.hostname or "") in IFRAME_HOSTS


# ---------------------------------------------------------------------------
# Sanitization
# ---------------------------------------------------------------------------


def sanitize(raw_html: Any, policy: SanitizePolicy = RICH_CONTENT) -> str:
    """
    Clean untrusted HTML against `policy`.

    Disallowed tags are stripped (their text kept), disallowed attributes
    and URL schemes are dropped, comments are removed.
    """
    if raw_html is None:
        return ""
    text = raw_html if isinstance(raw_html, str) else str(raw_html)
    if not text.strip():
        return ""

    raw_bodies: dict[str, list[str]] = {"script": [], "style": []}
    if policy.drop_script_content:
        text = _SCRIPT_OR_STYLE_RE.sub("", text)
    else:
        # Script and style bodies are raw text: the parser would entity-escape them
        text = _lift_raw_text(text, raw_bodies)

    # Cleaner instances are not thread-safe; build one per call
    cleaner = bleach.Cleaner(
        tags=policy.tags,
        attributes=policy.allows_attribute,
        protocols=policy.protocols,
        strip=True,
        strip_comments=True,
        css_sanitizer=_CSS_SANITIZER,
    )
    try:
        cleaned = cleaner.clean(text)
    except Exception:
        logger.warning("sanitize: %s policy could not parse input, dropping %d chars", policy.name, len(text))
        return ""

    if not policy.drop_script_content:
        cleaned = _restore_raw_text(cleaned, raw_bodies)

    return cleaned


def _lift_raw_text(text: str, bodies: dict[str, list[str]]) -> str:
    """Empty every <script>/<style> element, collecting its body by tag in document order."""

    def lift(match: re.Match[str]) -> str:
        bodies[match.group(2).lower()].append(match.group(3))
        return match.group(1) + match.group(4)

    return _RAW_TEXT_RE.sub(lift, text)


def _restore_raw_text(cleaned: str, bodies: dict[str, list[str]]) -> str:
    """Refill the empty <script>/<style> elements that survived cleaning, in order."""
    pending = {tag: iter(items) for tag, items in bodies.items()}

    def restore(match: re.Match[str]) -> str:
        tag = match.group(2).lower()
        body = next(pending[tag], "")
        body = _SCRIPT_CLOSE_RE.sub(r"<\\/", body) if tag == "script" else strip_css(body)
        return match.group(1) + body + match.group(3)

    return _EMPTY_RAW_TEXT_RE.sub(restore, cleaned)


def strip_css(css: Any) -> str:
    """
    Light strip for raw CSS: expression(), javascript: URIs, @import,
    -moz-binding, and any sequence that would close a <style> element.
    """
    if not isinstance(css, str):
        return ""
    for pattern, replacement in _CSS_STRIP_PATTERNS:
        css = pattern.sub(replacement, css)
    return css


def embed_script(code: Any) -> str:
    """Wrap page-authored script code in a <script> element it cannot close early."""
    if not isinstance(code, str) or not code.strip():
        return ""
    body = _SCRIPT_CLOSE_RE.sub(r"<\\/", code)
    return f"<script>{body}</script>"
