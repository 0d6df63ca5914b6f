"""
PagePress Kernel — Responsive breakpoints

The one breakpoint cascade shared by the published-page style compiler and
the editor preview. Values inherit down the chain:

    desktop → tablet → mobile → mobilePortrait

A narrower tier that defines nothing shows the nearest wider tier's value.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

BREAKPOINT_CHAIN: tuple[str, ...] = ("desktop", "tablet", "mobile", "mobilePortrait")

# Tiers that compile to @media blocks, widest first
NARROWER_BREAKPOINTS: tuple[str, ...] = BREAKPOINT_CHAIN[1:]


@dataclass(frozen=True)
class Breakpoint:
    id: str
    max_width: int | None

    @property
    def media_query(self) -> str:
        if self.max_width is None:
            return "all"
        return f"(max-width: {self.max_width}px)"


BREAKPOINTS: dict[str, Breakpoint] = {
    "desktop": Breakpoint("desktop", None),
    "tablet": Breakpoint("tablet", 992),
    "mobile": Breakpoint("mobile", 768),
    "mobilePortrait": Breakpoint("mobilePortrait", 479),
}


def is_responsive_value(value: Any) -> bool:
    """A responsive value is a mapping keyed by breakpoint with a desktop entry."""
    return isinstance(value, dict) and value.get("desktop") is not None


def resolve(value: Any, breakpoint: str = "desktop") -> Any:
    """
    Resolve a possibly-responsive value for one breakpoint.

    Walks the chain from `breakpoint` back toward desktop and returns the
    first defined value. JSON null counts as undefined. Plain values are
    returned unchanged; unknown breakpoints resolve as desktop.
    """
    if not is_responsive_value(value):
        return value

    try:
        start = BREAKPOINT_CHAIN.index(breakpoint)
    except ValueError:
        start = 0

    for tier in reversed(BREAKPOINT_CHAIN[: start + 1]):
        tier_value = value.get(tier)
        if tier_value is not None:
            return tier_value

    return value["desktop"]


def resolve_styling(
    advanced_styling: dict[str, Any] | None,
    breakpoint_styling: dict[str, Any] | None,
    breakpoint: str = "desktop",
) -> dict[str, Any]:
    """
    Effective advanced styling at one breakpoint, as the preview shows it.

    Deep-merges each tier's breakpoint entry over the base styling, widest
    first, stopping at `breakpoint`. Nested pseudo-state overrides are not
    part of the merged result.
    """
    merged: dict[str, Any] = copy.deepcopy(advanced_styling) if isinstance(advanced_styling, dict) else {}
    if not isinstance(breakpoint_styling, dict):
        return merged

    try:
        stop = BREAKPOINT_CHAIN.index(breakpoint)
    except ValueError:
        stop = 0

    for tier in BREAKPOINT_CHAIN[1 : stop + 1]:
        entry = breakpoint_styling.get(tier)
        if isinstance(entry, dict):
            _deep_merge(merged, {k: v for k, v in entry.items() if k != "pseudoStates"})

    return merged


def _deep_merge(target: dict[str, Any], overlay: dict[str, Any]) -> None:
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
