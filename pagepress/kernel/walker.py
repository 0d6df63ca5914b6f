"""
PagePress Kernel — Tree Walker

Pure function: (node id, document) → RenderedFragment(html, css_rules)

For each node:
  1. missing node       → empty
  2. hidden             → empty (no descendants, no CSS)
  3. claim element id   → compile the node's CSS
  4. render children    → ordinary children in order, then named slots
  5. dispatch on type   → components.render_component

Fragments are returned by value and merged by the caller. The only state
shared across one walk is the visited set (termination on cyclic or
repeated references) and the ElementNamespace (id uniqueness across the
page, header and footer of one composed document).
"""

from __future__ import annotations

import logging
import re
from typing import Any

from pagepress.kernel.components import render_component, renders_children
from pagepress.kernel.styles import compile_node_rules
from pagepress.kernel.types import ROOT_ID, Document, Node, RenderedFragment

logger = logging.getLogger(__name__)

ELEMENT_ID_PREFIX = "pp-"

# Descendants nested deeper than this are dropped
MAX_DEPTH = 100

_EMPTY = RenderedFragment()
_INVALID_ID_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]")


class ElementNamespace:
    """
    The set of element ids already used in one composed document.

    claim() returns the candidate itself the first time, then
    candidate-2, candidate-3, ... for later collisions.
    """

    def __init__(self) -> None:
        self._claimed: set[str] = set()

    def claim(self, candidate: str) -> str:
        element_id = candidate
        suffix = 2
        while element_id in self._claimed:
            element_id = f"{candidate}-{suffix}"
            suffix += 1
        self._claimed.add(element_id)
        return element_id

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._claimed


def element_identity(node_id: str, props: dict[str, Any]) -> str:
    """
    Authored metadata.elementId if usable, else pp-<node id>.

    Both are reduced to [A-Za-z0-9_-]. An authored id that does not start
    with a letter or underscore gets the pp- prefix.
    """
    metadata = props.get("metadata")
    authored = metadata.get("elementId") if isinstance(metadata, dict) else None
    if isinstance(authored, str):
        cleaned = _INVALID_ID_CHARS_RE.sub("", authored)
        if cleaned:
            if cleaned[0].isalpha() or cleaned[0] == "_":
                return cleaned
            return f"{ELEMENT_ID_PREFIX}{cleaned}"

    derived = _INVALID_ID_CHARS_RE.sub("", node_id)
    return f"{ELEMENT_ID_PREFIX}{derived or 'node'}"


def render_document(document: Document, namespace: ElementNamespace | None = None) -> RenderedFragment:
    """
    Render ROOT's children. ROOT itself produces no markup.
    A document without ROOT renders as empty.
    """
    root = document.root
    if root is None:
        if document.nodes:
            logger.warning("render_document: no %s node among %d nodes", ROOT_ID, len(document.nodes))
        return _EMPTY

    if namespace is None:
        namespace = ElementNamespace()
    visited = {ROOT_ID}
    return _render_children(root, document, namespace, visited, depth=1)


def render_node(
    node_id: str,
    document: Document,
    namespace: ElementNamespace | None = None,
    visited: set[str] | None = None,
    depth: int = 0,
) -> RenderedFragment:
    """Render one node and its descendants."""
    if namespace is None:
        namespace = ElementNamespace()
    if visited is None:
        visited = set()

    if node_id in visited:
        logger.warning("render_node: %s reached twice in one walk, skipping", node_id)
        return _EMPTY
    if depth > MAX_DEPTH:
        logger.warning("render_node: tree deeper than %d at %s, truncating", MAX_DEPTH, node_id)
        return _EMPTY

    node = document.get(node_id)
    if node is None:
        logger.warning("render_node: dangling reference to %s", node_id)
        return _EMPTY
    visited.add(node_id)

    if node.hidden or not node.type_tag:
        return _EMPTY

    element_id = namespace.claim(element_identity(node.id, node.props))
    rules = compile_node_rules(element_id, node.type_tag, node.props)

    children = _EMPTY
    if renders_children(node.type_tag):
        children = _render_children(node, document, namespace, visited, depth + 1)

    html = render_component(node.type_tag, node.props, children.html, element_id)
    if not html:
        return _EMPTY

    return RenderedFragment(html=html, css_rules=(*rules, *children.css_rules))


def _render_children(
    node: Node,
    document: Document,
    namespace: ElementNamespace,
    visited: set[str],
    depth: int,
) -> RenderedFragment:
    child_ids = [*node.child_ids, *node.slot_child_ids.values()]
    return RenderedFragment.join(
        [render_node(child_id, document, namespace, visited, depth) for child_id in child_ids]
    )
