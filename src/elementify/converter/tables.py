"""Table restructuring: flat markdown rows to header/body groups.

The parser hands over a table as a flat list of rows, the first of which is
the header::

    {
        "type": "table",
        "align": ["left", None],
        "children": [
            {"type": "tableRow", "children": [<tableCell>, <tableCell>]},   # header
            {"type": "tableRow", "children": [<tableCell>, <tableCell>]},   # body
            ...
        ]
    }

An element tree needs explicit groups, so :func:`restructure_table` returns::

    {
        "type": "table",
        "children": [
            {"type": "tableHeader", "children": [
                {"type": "tableRow", "children": [<tableHeaderCell>, ...]}]},
            {"type": "tableBody", "children": [<tableRow>, ...]},
        ]
    }

Every cell carries ``align`` taken from the table's per-column alignment by
position.  The input token is left untouched.
"""

from __future__ import annotations

from typing import Any

_CELL_KINDS: frozenset[str] = frozenset({"tableCell", "tableHeaderCell"})


def restructure_table(token: dict[str, Any]) -> dict[str, Any]:
    """Build the grouped form of a flat table token.

    Parameters
    ----------
    token:
        A ``table`` node whose children are ``tableRow`` nodes, optionally
        followed by ``tableFooter`` nodes.

    Returns
    -------
    dict
        A new ``table`` node with children ``[tableHeader, tableBody,
        *tableFooter]``.  The header group is omitted for a table without
        rows.
    """
    aligns = token.get("align") or []
    header: dict[str, Any] | None = None
    body: dict[str, Any] = {"type": "tableBody", "children": []}
    footers: list[dict[str, Any]] = []

    for index, child in enumerate(token.get("children") or []):
        child_type = child.get("type")
        if index == 0:
            header = _build_header(align_cells(child, aligns))
        elif child_type == "tableRow":
            body["children"].append(align_cells(child, aligns))
        elif child_type == "tableFooter":
            footers.append(_build_footer(align_cells(child, aligns)))

    children: list[dict[str, Any]] = []
    if header is not None:
        children.append(header)
    children.append(body)
    children.extend(footers)

    result = {k: v for k, v in token.items() if k != "children"}
    result["children"] = children
    return result


def align_cells(node: dict[str, Any], aligns: list[str | None]) -> dict[str, Any]:
    """Return a copy of *node* whose cells carry positional alignment.

    A cell at position ``i`` among its siblings gets ``aligns[i]``, or
    ``None`` past the end of *aligns*.  Non-cell children are walked with
    the same rule; anything nested inside a cell inherits that cell's
    alignment.
    """
    children = node.get("children")
    if not isinstance(children, list) or not children:
        return node

    aligned: list[dict[str, Any]] = []
    for index, child in enumerate(children):
        if child.get("type") in _CELL_KINDS:
            align = aligns[index] if index < len(aligns) else None
            aligned.append(_set_cell_align(child, align))
        else:
            aligned.append(align_cells(child, aligns))
    return {**node, "children": aligned}


def _set_cell_align(cell: dict[str, Any], align: str | None) -> dict[str, Any]:
    """Copy *cell* with ``align`` set, propagating into nested cells."""
    result = {**cell, "align": align}
    children = cell.get("children")
    if isinstance(children, list) and children:
        result["children"] = [
            _set_cell_align(c, align) if c.get("type") in _CELL_KINDS
            else _inherit_align(c, align)
            for c in children
        ]
    return result


def _inherit_align(node: dict[str, Any], align: str | None) -> dict[str, Any]:
    children = node.get("children")
    if not isinstance(children, list) or not children:
        return node
    return {
        **node,
        "children": [
            _set_cell_align(c, align) if c.get("type") in _CELL_KINDS
            else _inherit_align(c, align)
            for c in children
        ],
    }


def _build_header(row: dict[str, Any]) -> dict[str, Any]:
    """Wrap the first row in a header group and retype its cells."""
    cells = [
        {**cell, "type": "tableHeaderCell"} if cell.get("type") == "tableCell" else cell
        for cell in row.get("children") or []
    ]
    return {
        "type": "tableHeader",
        "children": [{**row, "type": "tableRow", "children": cells}],
    }


def _build_footer(footer: dict[str, Any]) -> dict[str, Any]:
    """Wrap a footer's cells in a single row."""
    return {
        "type": "tableFooter",
        "children": [{"type": "tableRow", "children": list(footer.get("children") or [])}],
    }
