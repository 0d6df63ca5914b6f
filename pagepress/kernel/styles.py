"""
PagePress Kernel — Style Compiler

Pure function: (element id, style layers) → list of CSS rules.

Layers, in emission order:
  1. base rule      #id { ... }           advancedStyling, else the legacy flat props
  2. pseudo-states  #id:hover { ... }     pseudoStateStyling
  3. breakpoints    @media (...) { ... }  breakpointStyling (+ nested pseudoStates),
                                          plus responsive legacy props
  4. custom CSS     verbatim, %root% → #id

advancedStyling and legacy props never mix: any advancedStyling key
switches the node off the legacy path entirely.

Every value interpolated into a declaration passes clean_css_value(); a value
that could escape its declaration or its <style> element is dropped.
"""

from __future__ import annotations

import re
from typing import Any

from pagepress.kernel.breakpoints import BREAKPOINT_CHAIN, BREAKPOINTS, NARROWER_BREAKPOINTS, resolve
from pagepress.kernel.sanitizer import strip_css

Declarations = dict[str, str]

PSEUDO_SELECTORS: dict[str, str] = {
    "hover": ":hover",
    "active": ":active",
    "focus": ":focus",
    "focus-within": ":focus-within",
    "focus-visible": ":focus-visible",
    "visited": ":visited",
    "disabled": ":disabled",
    "first-child": ":first-child",
    "last-child": ":last-child",
    "before": "::before",
    "after": "::after",
}

SIDES: tuple[str, ...] = ("top", "right", "bottom", "left")

_UNITLESS_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_ZERO_RE = re.compile(r"^0(px|%|em|rem|vh|vw|pt|cm|mm|in)?$", re.IGNORECASE)
_PROPERTY_RE = re.compile(r"^-?[a-z][a-z0-9-]*$")
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")
_UNSAFE_VALUE_RE = re.compile(r"[{}<>;\\]|expression\s*\(|javascript\s*:|@import|-moz-binding", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def fmt(value: Any) -> str:
    """Format a JSON scalar the way it reads in CSS (2.0 → "2")."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_zero_value(value: Any) -> bool:
    text = fmt(value).strip()
    return text in ("", "0") or bool(_ZERO_RE.match(text))


def ensure_unit(value: Any) -> str:
    """Bare numbers get px; anything else passes through trimmed."""
    text = fmt(value).strip()
    if _UNITLESS_NUMBER_RE.match(text):
        return f"{text}px"
    return text


def clean_css_value(value: Any) -> str | None:
    """A declaration value that cannot break out of its rule, or None."""
    text = fmt(value).strip()
    if not text or _UNSAFE_VALUE_RE.search(text):
        return None
    return text


def kebab_case(name: str) -> str:
    return _CAMEL_RE.sub("-", name).lower()


# ---------------------------------------------------------------------------
# advancedStyling → declarations
# ---------------------------------------------------------------------------


def _layout_css(layout: dict[str, Any]) -> Declarations:
    css: Declarations = {}

    if layout.get("display"):
        css["display"] = fmt(layout["display"])

    pos = _mapping(layout.get("position"))
    if pos.get("position") and pos["position"] != "static":
        css["position"] = fmt(pos["position"])
    for side in SIDES:
        if pos.get(side):
            css[side] = fmt(pos[side])
    if pos.get("zIndex") is not None:
        css["z-index"] = fmt(pos["zIndex"])

    dim = _mapping(layout.get("dimensions"))
    for key, prop in (("width", "width"), ("height", "height")):
        if dim.get(key) and dim[key] != "auto":
            css[prop] = ensure_unit(dim[key])
    for key, prop in (
        ("minWidth", "min-width"),
        ("maxWidth", "max-width"),
        ("minHeight", "min-height"),
        ("maxHeight", "max-height"),
    ):
        if dim.get(key):
            css[prop] = ensure_unit(dim[key])

    for box in ("margin", "padding"):
        spacing = _mapping(layout.get(box))
        for side in SIDES:
            value = spacing.get(side)
            if value and not is_zero_value(value):
                css[f"{box}-{side}"] = ensure_unit(value)

    if layout.get("overflow") and layout["overflow"] != "visible":
        css["overflow"] = fmt(layout["overflow"])
    if layout.get("overflowX"):
        css["overflow-x"] = fmt(layout["overflowX"])
    if layout.get("overflowY"):
        css["overflow-y"] = fmt(layout["overflowY"])

    flex = _mapping(layout.get("flex"))
    if layout.get("display") == "flex" and flex:
        for key, prop in (
            ("direction", "flex-direction"),
            ("wrap", "flex-wrap"),
            ("justifyContent", "justify-content"),
            ("alignItems", "align-items"),
            ("alignContent", "align-content"),
            ("gap", "gap"),
            ("rowGap", "row-gap"),
            ("columnGap", "column-gap"),
        ):
            if flex.get(key):
                css[prop] = fmt(flex[key])

    item = _mapping(layout.get("flexItem"))
    if item.get("order") not in (None, 0):
        css["order"] = fmt(item["order"])
    if item.get("flexGrow") not in (None, 0):
        css["flex-grow"] = fmt(item["flexGrow"])
    if item.get("flexShrink") not in (None, 1):
        css["flex-shrink"] = fmt(item["flexShrink"])
    if item.get("flexBasis") and item["flexBasis"] != "auto":
        css["flex-basis"] = fmt(item["flexBasis"])
    if item.get("alignSelf") and item["alignSelf"] != "auto":
        css["align-self"] = fmt(item["alignSelf"])

    return css


def _gradient_css(gradient: dict[str, Any]) -> str:
    stops = ", ".join(
        f"{fmt(stop.get('color'))} {fmt(stop.get('position', 0))}%"
        for stop in gradient.get("stops") or []
        if isinstance(stop, dict)
    )
    if gradient.get("type") == "linear":
        return f"linear-gradient({fmt(gradient.get('angle') or 180)}deg, {stops})"
    return f"radial-gradient({fmt(gradient.get('shape') or 'circle')}, {stops})"


def _background_css(background: dict[str, Any]) -> Declarations:
    css: Declarations = {}
    kind = background.get("type")

    if kind == "color" and background.get("color"):
        css["background-color"] = fmt(background["color"])

    gradient = _mapping(background.get("gradient"))
    if kind == "gradient" and gradient:
        css["background"] = _gradient_css(gradient)

    image = _mapping(background.get("image"))
    if kind == "image" and image.get("url") and '"' not in fmt(image["url"]):
        css["background-image"] = f'url("{fmt(image["url"])}")'
        size = fmt(image.get("size") or "cover")
        if size == "custom":
            css["background-size"] = f"{fmt(image.get('customWidth') or 'auto')} {fmt(image.get('customHeight') or 'auto')}"
        else:
            css["background-size"] = size
        position = fmt(image.get("position") or "center")
        if position == "custom":
            css["background-position"] = f"{fmt(image.get('customX') or '50%')} {fmt(image.get('customY') or '50%')}"
        else:
            css["background-position"] = position.replace("-", " ", 1)
        if image.get("repeat"):
            css["background-repeat"] = fmt(image["repeat"])
        if image.get("attachment"):
            css["background-attachment"] = fmt(image["attachment"])

    return css


def _border_css(border: dict[str, Any]) -> Declarations:
    css: Declarations = {}

    for side in SIDES:
        edge = _mapping(border.get(side))
        width = _number(edge.get("width"))
        style = fmt(edge.get("style") or "solid")
        if width and width > 0 and style != "none":
            css[f"border-{side}"] = f"{fmt(width)}px {style} {fmt(edge.get('color') or 'currentColor')}"

    radius = _mapping(border.get("radius"))
    if radius:
        corners = [fmt(radius.get(k) or "0") for k in ("topLeft", "topRight", "bottomRight", "bottomLeft")]
        if any(c != "0" for c in corners):
            css["border-radius"] = " ".join(ensure_unit(c) if c != "0" else "0" for c in corners)

    return css


def _typography_css(typography: dict[str, Any]) -> Declarations:
    css: Declarations = {}
    t = typography

    if t.get("fontFamily"):
        css["font-family"] = fmt(t["fontFamily"])
    if t.get("fontSize"):
        css["font-size"] = ensure_unit(t["fontSize"])
    if t.get("fontWeight"):
        css["font-weight"] = fmt(t["fontWeight"])
    if t.get("fontStyle") and t["fontStyle"] != "normal":
        css["font-style"] = fmt(t["fontStyle"])
    if t.get("lineHeight"):
        css["line-height"] = fmt(t["lineHeight"])
    if t.get("letterSpacing") and fmt(t["letterSpacing"]) != "0":
        css["letter-spacing"] = fmt(t["letterSpacing"])
    if t.get("wordSpacing") and fmt(t["wordSpacing"]) != "0":
        css["word-spacing"] = fmt(t["wordSpacing"])
    if t.get("textAlign"):
        css["text-align"] = fmt(t["textAlign"])
    if t.get("textTransform") and t["textTransform"] != "none":
        css["text-transform"] = fmt(t["textTransform"])
    if t.get("textDecoration") and t["textDecoration"] != "none":
        decoration = fmt(t["textDecoration"])
        if t.get("textDecorationStyle"):
            decoration += f" {fmt(t['textDecorationStyle'])}"
        if t.get("textDecorationColor"):
            decoration += f" {fmt(t['textDecorationColor'])}"
        css["text-decoration"] = decoration
    if t.get("color"):
        css["color"] = fmt(t["color"])

    shadows = [s for s in t.get("textShadow") or [] if isinstance(s, dict)]
    if shadows:
        css["text-shadow"] = ", ".join(
            f"{fmt(s.get('x', 0))}px {fmt(s.get('y', 0))}px {fmt(s.get('blur', 0))}px {fmt(s.get('color') or '#000')}"
            for s in shadows
        )

    return css


def _transform_css(transform: dict[str, Any]) -> Declarations:
    parts: list[str] = []
    t = transform

    for axis in ("X", "Y", "Z"):
        value = t.get(f"translate{axis}")
        if value and fmt(value) != "0":
            parts.append(f"translate{axis}({fmt(value)})")
    for axis in ("X", "Y", "Z"):
        value = _number(t.get(f"rotate{axis}"))
        if value:
            parts.append(f"rotate{axis}({fmt(value)}deg)")
    for axis in ("X", "Y"):
        value = _number(t.get(f"scale{axis}"))
        if value is not None and value != 1:
            parts.append(f"scale{axis}({fmt(value)})")
    for axis in ("X", "Y"):
        value = _number(t.get(f"skew{axis}"))
        if value:
            parts.append(f"skew{axis}({fmt(value)}deg)")
    if t.get("perspective") and t["perspective"] != "none":
        parts.append(f"perspective({fmt(t['perspective'])})")

    if not parts:
        return {}

    origin_x = t.get("originXCustom") if t.get("originX") == "custom" else t.get("originX")
    origin_y = t.get("originYCustom") if t.get("originY") == "custom" else t.get("originY")
    return {
        "transform": " ".join(parts),
        "transform-origin": f"{fmt(origin_x or 'center')} {fmt(origin_y or 'center')}",
    }


def _transition_css(transition: dict[str, Any]) -> Declarations:
    if not transition.get("enabled"):
        return {}
    if transition.get("property") == "custom":
        prop = transition.get("customProperty") or "all"
    else:
        prop = transition.get("property") or "all"
    timing = fmt(transition.get("timingFunction") or "ease")
    bezier = transition.get("cubicBezier")
    if timing == "cubic-bezier" and isinstance(bezier, list) and len(bezier) == 4:
        timing = f"cubic-bezier({', '.join(fmt(v) for v in bezier)})"
    duration = fmt(transition.get("duration") or 300)
    delay = fmt(transition.get("delay") or 0)
    return {"transition": f"{fmt(prop)} {duration}ms {timing} {delay}ms"}


def _filter_parts(f: dict[str, Any], keys: tuple[str, ...]) -> list[str]:
    parts: list[str] = []
    for key in keys:
        value = _number(f.get(key))
        if value is None:
            continue
        if key == "blur" and value > 0:
            parts.append(f"blur({fmt(value)}px)")
        elif key in ("brightness", "contrast", "saturate") and value != 100:
            parts.append(f"{key}({fmt(value)}%)")
        elif key in ("grayscale", "invert", "sepia") and value > 0:
            parts.append(f"{key}({fmt(value)}%)")
        elif key == "hueRotate" and value != 0:
            parts.append(f"hue-rotate({fmt(value)}deg)")
        elif key == "opacity" and value < 100:
            parts.append(f"opacity({fmt(value)}%)")
    return parts


def _filter_css(f: dict[str, Any]) -> Declarations:
    parts = _filter_parts(
        f, ("blur", "brightness", "contrast", "grayscale", "saturate", "hueRotate", "invert", "sepia", "opacity")
    )
    return {"filter": " ".join(parts)} if parts else {}


def _backdrop_filter_css(f: dict[str, Any]) -> Declarations:
    if not f.get("enabled"):
        return {}
    parts = _filter_parts(f, ("blur", "brightness", "contrast", "grayscale", "saturate"))
    if not parts:
        return {}
    value = " ".join(parts)
    return {"backdrop-filter": value, "-webkit-backdrop-filter": value}


def _box_shadow_css(shadows: list[Any]) -> Declarations:
    items = [s for s in shadows if isinstance(s, dict)]
    if not items:
        return {}
    return {
        "box-shadow": ", ".join(
            f"{'inset ' if s.get('inset') else ''}{fmt(s.get('x', 0))}px {fmt(s.get('y', 0))}px "
            f"{fmt(s.get('blur', 0))}px {fmt(s.get('spread', 0))}px {fmt(s.get('color') or '#000')}"
            for s in items
        )
    }


_GROUPS = {
    "layout": _layout_css,
    "background": _background_css,
    "border": _border_css,
    "typography": _typography_css,
    "transform": _transform_css,
    "transition": _transition_css,
    "filter": _filter_css,
    "backdropFilter": _backdrop_filter_css,
}

_NON_PROPERTY_KEYS = {*_GROUPS, "boxShadow", "pseudoStates"}


def has_styling(styling: Any) -> bool:
    return isinstance(styling, dict) and len(styling) > 0


def styling_to_declarations(styling: Any) -> Declarations:
    """
    Map one advancedStyling bag to CSS declarations.

    Grouped settings are emitted first in a fixed order. Any other key with
    a scalar value is a direct CSS property: {"backgroundColor": "red"}
    becomes background-color: red.
    """
    if not isinstance(styling, dict):
        return {}
    css: Declarations = {}

    for key, generate in _GROUPS.items():
        group = styling.get(key)
        if isinstance(group, dict):
            css.update(generate(group))
    if isinstance(styling.get("boxShadow"), list):
        css.update(_box_shadow_css(styling["boxShadow"]))

    for key, value in styling.items():
        if key in _NON_PROPERTY_KEYS or isinstance(value, (bool, dict, list)) or value is None:
            continue
        prop = kebab_case(key)
        if _PROPERTY_RE.match(prop):
            css[prop] = fmt(value)

    return css


# ---------------------------------------------------------------------------
# Legacy flat props → declarations
# ---------------------------------------------------------------------------

_FLEX_DIRECTIONS = {"row": "row", "column": "column", "row-reverse": "row-reverse", "column-reverse": "column-reverse"}
_JUSTIFY = {
    "start": "flex-start",
    "center": "center",
    "end": "flex-end",
    "between": "space-between",
    "around": "space-around",
    "evenly": "space-evenly",
}
_ROW_JUSTIFY = {k: v for k, v in _JUSTIFY.items() if k != "evenly"}
_ALIGN = {"start": "flex-start", "center": "center", "end": "flex-end", "stretch": "stretch", "baseline": "baseline"}
_FONT_WEIGHTS = {"normal": "400", "medium": "500", "semibold": "600", "bold": "700"}
_BUTTON_PADDING = {"sm": "8px 16px", "md": "10px 20px", "lg": "14px 28px"}


def legacy_declarations(props: dict[str, Any], type_tag: str, breakpoint: str = "desktop") -> Declarations:
    """
    Map the legacy flat props of one node to declarations at one breakpoint.

    Any prop may be a responsive value; it is read through resolve().
    """

    def prop(name: str) -> Any:
        return resolve(props.get(name), breakpoint)

    css: Declarations = {}

    for box in ("padding", "margin"):
        shared = prop(box)
        for side in SIDES:
            value = prop(f"{box}{side.capitalize()}")
            value = shared if value is None else value
            if value:
                css[f"{box}-{side}"] = ensure_unit(value)

    if prop("backgroundColor") and prop("backgroundColor") != "transparent":
        css["background-color"] = fmt(prop("backgroundColor"))
    if prop("borderRadius"):
        css["border-radius"] = ensure_unit(prop("borderRadius"))
    border_width = _number(prop("borderWidth"))
    if border_width and border_width > 0:
        css["border"] = f"{fmt(border_width)}px solid {fmt(prop('borderColor') or '#e5e7eb')}"
    if prop("minHeight"):
        css["min-height"] = ensure_unit(prop("minHeight"))

    if type_tag in ("Container", "Div", "Section"):
        if prop("gap"):
            css["gap"] = ensure_unit(prop("gap"))
        display = fmt(prop("display") or "flex")
        css["display"] = display
        if display == "flex":
            if prop("flexDirection"):
                css["flex-direction"] = _FLEX_DIRECTIONS.get(fmt(prop("flexDirection")), "column")
            if prop("justifyContent"):
                css["justify-content"] = _JUSTIFY.get(fmt(prop("justifyContent")), "flex-start")
            if prop("alignItems"):
                css["align-items"] = _ALIGN.get(fmt(prop("alignItems")), "stretch")
        if prop("width") == "full":
            css["width"] = "100%"
        elif prop("width") == "fit":
            css["width"] = "fit-content"

    if type_tag == "Section":
        if prop("contentWidth") == "full":
            css["width"] = "100%"
        elif prop("contentWidth") == "boxed":
            css["max-width"] = ensure_unit(prop("maxWidth") or 1280)

    if type_tag == "Row":
        css["display"] = "flex"
        if prop("gap"):
            css["gap"] = ensure_unit(prop("gap"))
        if prop("justifyContent"):
            css["justify-content"] = _ROW_JUSTIFY.get(fmt(prop("justifyContent")), "flex-start")
        if prop("alignItems"):
            css["align-items"] = fmt(prop("alignItems"))
        if prop("wrap") is not False:
            css["flex-wrap"] = "wrap"

    if type_tag == "Column":
        css["display"] = "flex"
        css["flex-direction"] = "column"
        if prop("width"):
            css["width"] = fmt(prop("width"))
        if prop("flexGrow"):
            css["flex-grow"] = fmt(prop("flexGrow"))
        if prop("flexBasis"):
            css["flex-basis"] = fmt(prop("flexBasis"))

    if type_tag in ("Text", "Heading"):
        if prop("fontSize"):
            css["font-size"] = ensure_unit(prop("fontSize"))
        if prop("color"):
            css["color"] = fmt(prop("color"))
        if prop("lineHeight"):
            css["line-height"] = fmt(prop("lineHeight"))
        if prop("letterSpacing"):
            css["letter-spacing"] = ensure_unit(prop("letterSpacing"))
        if prop("fontWeight"):
            css["font-weight"] = _FONT_WEIGHTS.get(fmt(prop("fontWeight")), "400")
        if prop("textAlign"):
            css["text-align"] = fmt(prop("textAlign"))

    if type_tag == "Image":
        if prop("objectFit"):
            css["object-fit"] = fmt(prop("objectFit"))
        width, height = prop("width"), prop("height")
        if width == "full":
            css["width"] = "100%"
        elif _number(width) is not None and not isinstance(width, str):
            css["width"] = f"{fmt(width)}px"
        if _number(height) is not None and not isinstance(height, str):
            css["height"] = f"{fmt(height)}px"

    if type_tag == "Button":
        css["display"] = "inline-flex"
        css["align-items"] = "center"
        css["justify-content"] = "center"
        css["cursor"] = "pointer"
        css["text-decoration"] = "none"
        if prop("fullWidth"):
            css["width"] = "100%"
        if prop("textColor"):
            css["color"] = fmt(prop("textColor"))
        if prop("backgroundColor"):
            css["background-color"] = fmt(prop("backgroundColor"))
        css["padding"] = _BUTTON_PADDING.get(fmt(prop("size") or "md"), "10px 20px")

    if type_tag == "Divider":
        css["border"] = "none"
        css["width"] = f"{fmt(prop('width') or 100)}%"
        css["border-top"] = (
            f"{fmt(prop('thickness') or 1)}px {fmt(prop('style') or 'solid')} {fmt(prop('color') or '#e5e7eb')}"
        )

    if type_tag == "Spacer":
        css["height"] = ensure_unit(prop("height") or 40)

    return css


def _reset_value(prop: str) -> str:
    return "0" if prop.startswith(("padding-", "margin-")) else "initial"


def legacy_declarations_by_breakpoint(props: dict[str, Any], type_tag: str) -> dict[str, Declarations]:
    """
    Desktop declarations in full; each narrower tier only what changed
    relative to the next-wider tier. A declaration that a narrower tier
    drops (its value resolved to 0, "" or false) is reset there.
    """
    result: dict[str, Declarations] = {}
    previous: Declarations = {}
    for tier in BREAKPOINT_CHAIN:
        current = legacy_declarations(props, type_tag, tier)
        if tier == "desktop":
            result[tier] = current
        else:
            changed = {k: v for k, v in current.items() if previous.get(k) != v}
            for key in previous:
                if key not in current:
                    changed[key] = _reset_value(key)
            if changed:
                result[tier] = changed
        previous = current
    return result


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def declaration_block(css: Declarations) -> str:
    parts = []
    for prop, value in css.items():
        cleaned = clean_css_value(value)
        if cleaned is not None and _PROPERTY_RE.match(prop):
            parts.append(f"{prop}: {cleaned};")
    return " ".join(parts)


def css_rule(selector: str, css: Declarations) -> str:
    """One rule, or "" when no declaration survives cleaning."""
    block = declaration_block(css)
    return f"{selector} {{ {block} }}" if block else ""


def _pseudo_rules(selector: str, pseudo_states: Any) -> list[str]:
    rules: list[str] = []
    for state, styling in _mapping(pseudo_states).items():
        pseudo = PSEUDO_SELECTORS.get(state)
        if pseudo is None or not isinstance(styling, dict):
            continue
        rule = css_rule(f"{selector}{pseudo}", styling_to_declarations(styling))
        if rule:
            rules.append(rule)
    return rules


def compile_element_rules(
    element_id: str,
    advanced_styling: dict[str, Any] | None = None,
    pseudo_state_styling: dict[str, Any] | None = None,
    breakpoint_styling: dict[str, Any] | None = None,
    custom_css: str | None = None,
    *,
    legacy: dict[str, Declarations] | None = None,
) -> list[str]:
    """
    Compile every style layer of one element into an ordered list of rules.

    `legacy` is the per-breakpoint output of legacy_declarations_by_breakpoint;
    it is ignored whenever advanced_styling has any key.
    """
    selector = f"#{element_id}"
    rules: list[str] = []

    if has_styling(advanced_styling):
        legacy = {}
        base = styling_to_declarations(advanced_styling)
    else:
        legacy = legacy or {}
        base = legacy.get("desktop", {})

    base_rule = css_rule(selector, base)
    if base_rule:
        rules.append(base_rule)

    rules.extend(_pseudo_rules(selector, pseudo_state_styling))

    breakpoints = _mapping(breakpoint_styling)
    for tier in NARROWER_BREAKPOINTS:
        entry = _mapping(breakpoints.get(tier))
        css = dict(legacy.get(tier, {}))
        css.update(styling_to_declarations(entry))

        inner = [css_rule(selector, css), *_pseudo_rules(selector, entry.get("pseudoStates"))]
        inner = [rule for rule in inner if rule]
        if inner:
            rules.append(f"@media {BREAKPOINTS[tier].media_query} {{ {' '.join(inner)} }}")

    if isinstance(custom_css, str) and custom_css.strip():
        rules.append(strip_css(custom_css.replace("%root%", selector)))

    return rules


def compile_element_css(
    element_id: str,
    advanced_styling: dict[str, Any] | None = None,
    pseudo_state_styling: dict[str, Any] | None = None,
    breakpoint_styling: dict[str, Any] | None = None,
    custom_css: str | None = None,
) -> str:
    """The element's stylesheet as text, or "" when it has no styling."""
    return "\n".join(
        compile_element_rules(element_id, advanced_styling, pseudo_state_styling, breakpoint_styling, custom_css)
    )


def compile_node_rules(element_id: str, type_tag: str, props: dict[str, Any]) -> list[str]:
    """Read a node's style layers out of its props and compile them."""
    metadata = _mapping(props.get("metadata"))
    advanced = props.get("advancedStyling")
    legacy = None if has_styling(advanced) else legacy_declarations_by_breakpoint(props, type_tag)

    return compile_element_rules(
        element_id,
        advanced if isinstance(advanced, dict) else None,
        _mapping(props.get("pseudoStateStyling")),
        _mapping(props.get("breakpointStyling")),
        metadata.get("customCSS") if isinstance(metadata.get("customCSS"), str) else None,
        legacy=legacy,
    )
