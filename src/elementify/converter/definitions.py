"""Collect link, image and footnote definitions ahead of the main pass.

Reference-style links and footnotes may point forward in the document, so
every ``definition`` and ``footnoteDefinition`` node is gathered before any
element is built.
"""

from __future__ import annotations

from typing import Any


def collect_definitions(
    root: dict[str, Any],
) -> tuple[dict[str, dict[str, Any]], list[dict[str, Any]]]:
    """Walk *root* depth-first and gather its definitions.

    Returns
    -------
    tuple[dict, list]
        ``(definitions, footnote_definitions)``.  *definitions* maps each
        identifier to its ``definition`` or ``footnoteDefinition`` node
        (the first one wins on a duplicate).  *footnote_definitions* lists
        the footnote definitions in document order.
    """
    definitions: dict[str, dict[str, Any]] = {}
    footnotes: list[dict[str, Any]] = []

    stack: list[dict[str, Any]] = [root]
    while stack:
        node = stack.pop()
        kind = node.get("type")
        if kind in ("definition", "footnoteDefinition"):
            identifier = node.get("identifier")
            if identifier is not None:
                definitions.setdefault(identifier, node)
            if kind == "footnoteDefinition":
                footnotes.append(node)

        children = node.get("children")
        if isinstance(children, list):
            stack.extend(
                child for child in reversed(children) if isinstance(child, dict)
            )

    return definitions, footnotes


def prefix_footnote_label(node: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a footnote definition labelled with its identifier.

    When the definition holds exactly one paragraph, a text node
    ``"[<identifier>]: "`` is put in front of that paragraph's children.
    Any other shape is returned unchanged.
    """
    children = node.get("children")
    if not isinstance(children, list) or len(children) != 1:
        return node
    paragraph = children[0]
    if not isinstance(paragraph, dict) or paragraph.get("type") != "paragraph":
        return node

    label = {"type": "text", "value": f"[{node.get('identifier')}]: "}
    prefixed = {
        **paragraph,
        "children": [label, *(paragraph.get("children") or [])],
    }
    return {**node, "children": [prefixed]}
