"""Derive the props each node kind needs beyond its key.

Reference kinds (``linkReference``, ``imageReference``,
``footnoteReference``) resolve through the document's definition table.
An identifier with no definition raises :class:`ElementifyReferenceError`.

``None`` values are left out of the result: an image without alt text has
no ``alt`` prop at all, rather than an empty one.
"""

from __future__ import annotations

from typing import Any

from elementify.errors import ElementifyReferenceError


def resolve_definition(
    definitions: dict[str, dict[str, Any]],
    node: dict[str, Any],
) -> dict[str, Any]:
    """Look up the definition a reference node points at."""
    identifier = node.get("identifier")
    definition = definitions.get(identifier) if identifier is not None else None
    if definition is None:
        raise ElementifyReferenceError(
            message=f"No definition found for {node.get('type')} '{identifier}'.",
            context={"identifier": identifier, "kind": node.get("type")},
        )
    return definition


def derive_props(
    node: dict[str, Any],
    definitions: dict[str, dict[str, Any]],
) -> dict[str, Any]:
    """Return the structural props computed for *node*.

    These win over override props on a key collision.
    """
    kind = node.get("type")
    props: dict[str, Any]

    if kind == "footnoteReference":
        resolve_definition(definitions, node)
        props = {"href": f"#{node.get('identifier')}"}

    elif kind == "image":
        props = {"title": node.get("title"), "alt": node.get("alt"), "src": node.get("url")}

    elif kind == "imageReference":
        definition = resolve_definition(definitions, node)
        props = {
            "title": definition.get("title"),
            "alt": node.get("alt"),
            "src": definition.get("url"),
        }

    elif kind == "link":
        props = {"title": node.get("title"), "href": node.get("url")}

    elif kind == "linkReference":
        definition = resolve_definition(definitions, node)
        props = {"title": definition.get("title"), "href": definition.get("url")}

    elif kind == "list":
        props = {"start": node.get("start")}

    elif kind in ("tableCell", "tableHeaderCell"):
        align = node.get("align")
        props = {"style": {"textAlign": align}} if align else {}

    else:
        props = {}

    return {k: v for k, v in props.items() if v is not None}
