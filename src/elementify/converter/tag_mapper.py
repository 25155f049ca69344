"""Map AST node kinds to output tag names."""

from __future__ import annotations

from typing import Any

_STATIC_TAGS: dict[str, str] = {
    "break": "br",
    "delete": "del",
    "emphasis": "em",
    "footnoteReference": "a",
    "image": "img",
    "imageReference": "img",
    "inlineCode": "code",
    "link": "a",
    "linkReference": "a",
    "listItem": "li",
    "paragraph": "p",
    "root": "div",
    "tableHeader": "thead",
    "tableBody": "tbody",
    "tableFooter": "tfoot",
    "tableRow": "tr",
    "tableCell": "td",
    "tableHeaderCell": "th",
    "thematicBreak": "hr",
    "code": "pre",
}

NON_RENDERING_KINDS: frozenset[str] = frozenset({
    "definition",
    "footnoteDefinition",
    "yaml",
    "toml",
    "frontmatter",
})
"""Kinds that never produce an element of their own."""


def tag_for(node: dict[str, Any], root_tag: str = "div") -> str | None:
    """Return the tag for *node*, or ``None`` if it renders nothing.

    Unknown kinds use the kind name itself as the tag, so parser extensions
    keep working without a mapping entry.
    """
    kind = node.get("type", "")

    if kind in NON_RENDERING_KINDS:
        return None
    if kind == "heading":
        return f"h{node.get('depth', 1)}"
    if kind == "list":
        return "ol" if node.get("ordered") else "ul"
    if kind == "root":
        return root_tag
    return _STATIC_TAGS.get(kind, kind or None)
