"""Parse Markdown and normalize to mdast-shaped node dicts.

This module wraps mistune v3's AST output and rewrites the raw token stream
into the node vocabulary used by the rest of the converter pipeline, so a
tree parsed here is interchangeable with one produced by another mdast
parser.

Block nodes:
    root, paragraph, heading, blockquote, list, listItem, code,
    thematicBreak, table, tableRow, tableCell, math, definition,
    footnoteDefinition

Inline nodes:
    text, emphasis, strong, delete, inlineCode, break, link,
    linkReference, image, imageReference, footnoteReference, html,
    inlineMath

mistune resolves reference links while parsing and drops the definitions,
so ``definition`` nodes are rebuilt from the parser environment and
appended to the root.  Footnote keys come back upper-cased; the label as
written is recovered from the source text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import mistune
from mistune.util import unikey

from elementify.converter.html import split_markup

# ---------------------------------------------------------------------------
# Parser options
# ---------------------------------------------------------------------------

DEFAULT_PARSER_OPTIONS: dict[str, Any] = {
    "position": False,
    "footnotes": True,
}
"""Injected into the caller's parser options when the keys are absent."""

_GFM_PLUGINS: tuple[str, ...] = ("strikethrough", "table", "task_lists", "url")

# ---------------------------------------------------------------------------
# Mistune-to-mdast type mapping
# ---------------------------------------------------------------------------

_CONTAINER_TYPE_MAP: dict[str, str] = {
    "paragraph": "paragraph",
    "block_quote": "blockquote",
    "emphasis": "emphasis",
    "strong": "strong",
    "strikethrough": "delete",
}

_VALUE_TYPE_MAP: dict[str, str] = {
    "codespan": "inlineCode",
    "inline_html": "html",
    "block_math": "math",
    "inline_math": "inlineMath",
}

# Types that should be silently skipped during normalization
_SKIP_TYPES: frozenset[str] = frozenset({
    "blank_line",
})

_FOOTNOTE_LABEL_RE = re.compile(r"\[\^((?:[^\\\[\]\s]|\\.){1,500})\]")


@dataclass
class _ParseContext:
    """Per-document state shared by the normalization helpers."""

    env: dict[str, Any]
    footnote_labels: dict[str, str] = field(default_factory=dict)
    emitted_footnotes: set[str] = field(default_factory=set)

    def footnote_identifier(self, key: str) -> str:
        return self.footnote_labels.get(key, key.lower())


class ASTNormalizer:
    """Parse Markdown and normalize to an mdast-shaped ``root`` node.

    Parameters
    ----------
    options:
        Parser options.  Recognised keys are ``gfm`` (strikethrough, tables,
        task lists and bare URLs, default ``True``), ``footnotes`` (default
        ``True``), ``plugins`` (extra mistune plugin names), ``hard_wrap``
        and ``position``.  mistune does not track source positions, so
        ``position`` is accepted and has no effect.  Unknown keys are
        ignored.
    """

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        opts = {**DEFAULT_PARSER_OPTIONS, **(options or {})}
        plugins: list[str] = []
        if opts.get("gfm", True):
            plugins.extend(_GFM_PLUGINS)
        if opts.get("footnotes"):
            plugins.append("footnotes")
        for name in opts.get("plugins") or ():
            if name not in plugins:
                plugins.append(name)

        self.options = opts
        self.plugins = plugins
        self._md = mistune.create_markdown(
            renderer="ast",
            hard_wrap=bool(opts.get("hard_wrap", False)),
            plugins=plugins,
        )

    def parse(self, markdown: str) -> dict[str, Any]:
        """Parse *markdown* and return the normalized ``root`` node."""
        tokens, state = self._md.parse(markdown)
        if isinstance(tokens, str):
            tokens = []

        ctx = _ParseContext(env=state.env, footnote_labels=_scan_footnote_labels(markdown))
        children = self._normalize_tokens(tokens, ctx)
        children.extend(self._late_footnotes(ctx))
        children.extend(_definitions_from_env(state.env))
        return {"type": "root", "children": children}

    # ── Token walking ──────────────────────────────────────────────────

    def _normalize_tokens(self, tokens: list[dict], ctx: _ParseContext) -> list[dict]:
        """Normalize a token list, splicing expansions and merging text."""
        result: list[dict] = []
        for token in tokens:
            for node in self._normalize_token(token, ctx):
                if (
                    node["type"] == "text"
                    and result
                    and result[-1]["type"] == "text"
                ):
                    result[-1] = {"type": "text", "value": result[-1]["value"] + node["value"]}
                else:
                    result.append(node)
        return result

    def _normalize_token(self, token: dict, ctx: _ParseContext) -> list[dict]:
        """Normalize a single token into zero or more nodes."""
        raw_type = token.get("type", "")
        attrs = token.get("attrs") or {}

        if raw_type in _SKIP_TYPES:
            return []

        # Tight list items wrap their text in block_text; unwrap it
        if raw_type == "block_text":
            return self._normalize_tokens(token.get("children") or [], ctx)

        if raw_type == "text":
            return [{"type": "text", "value": token.get("raw", "")}]

        if raw_type == "softbreak":
            return [{"type": "text", "value": "\n"}]

        if raw_type == "linebreak":
            return [{"type": "break"}]

        if raw_type in _CONTAINER_TYPE_MAP:
            return [{
                "type": _CONTAINER_TYPE_MAP[raw_type],
                "children": self._normalize_tokens(token.get("children") or [], ctx),
            }]

        if raw_type in _VALUE_TYPE_MAP:
            return [{"type": _VALUE_TYPE_MAP[raw_type], "value": token.get("raw", "")}]

        if raw_type == "heading":
            return [{
                "type": "heading",
                "depth": attrs.get("level", 1),
                "children": self._normalize_tokens(token.get("children") or [], ctx),
            }]

        if raw_type == "thematic_break":
            return [{"type": "thematicBreak"}]

        if raw_type == "block_code":
            return [self._normalize_code(token)]

        if raw_type == "block_html":
            return self._normalize_block_html(token)

        if raw_type == "list":
            return [self._normalize_list(token, ctx)]

        if raw_type in ("list_item", "task_list_item"):
            checked = attrs.get("checked") if raw_type == "task_list_item" else None
            return [{
                "type": "listItem",
                "checked": checked,
                "children": self._normalize_tokens(token.get("children") or [], ctx),
            }]

        if raw_type == "table":
            return [self._normalize_table(token, ctx)]

        if raw_type in ("link", "image"):
            return [self._normalize_link(token, ctx)]

        if raw_type == "footnote_ref":
            return [{
                "type": "footnoteReference",
                "identifier": ctx.footnote_identifier(token.get("raw", "")),
            }]

        if raw_type == "footnotes":
            return [
                self._normalize_footnote_item(item, ctx)
                for item in token.get("children") or []
            ]

        return [self._normalize_unknown(token, ctx)]

    # ── Block helpers ──────────────────────────────────────────────────

    def _normalize_code(self, token: dict) -> dict:
        raw_code = token.get("raw", "")
        # Strip trailing newline added by mistune
        if raw_code.endswith("\n"):
            raw_code = raw_code[:-1]
        info = (token.get("attrs") or {}).get("info") or ""
        lang = info.split()[0] if info.strip() else None
        return {"type": "code", "lang": lang, "value": raw_code}

    def _normalize_block_html(self, token: dict) -> list[dict]:
        """Split a raw HTML block into one ``html`` node per tag.

        Text between the tags stays literal; it is not parsed as markdown.
        """
        return split_markup(token.get("raw", "").strip())

    def _normalize_list(self, token: dict, ctx: _ParseContext) -> dict:
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered"))
        return {
            "type": "list",
            "ordered": ordered,
            "start": attrs.get("start", 1) if ordered else None,
            "spread": not token.get("tight", True),
            "children": self._normalize_tokens(token.get("children") or [], ctx),
        }

    def _normalize_table(self, token: dict, ctx: _ParseContext) -> dict:
        """Flatten mistune's head/body split into one list of rows."""
        align: list[str | None] = []
        rows: list[dict] = []

        for part in token.get("children") or []:
            part_type = part.get("type")
            if part_type == "table_head":
                cells = part.get("children") or []
                align = [(c.get("attrs") or {}).get("align") for c in cells]
                rows.insert(0, self._normalize_row(cells, ctx))
            elif part_type == "table_body":
                rows.extend(
                    self._normalize_row(row.get("children") or [], ctx)
                    for row in part.get("children") or []
                )

        return {"type": "table", "align": align, "children": rows}

    def _normalize_row(self, cells: list[dict], ctx: _ParseContext) -> dict:
        return {
            "type": "tableRow",
            "children": [
                {
                    "type": "tableCell",
                    "children": self._normalize_tokens(cell.get("children") or [], ctx),
                }
                for cell in cells
            ],
        }

    def _normalize_footnote_item(self, item: dict, ctx: _ParseContext) -> dict:
        key = (item.get("attrs") or {}).get("key", "")
        ctx.emitted_footnotes.add(key)
        return {
            "type": "footnoteDefinition",
            "identifier": ctx.footnote_identifier(key),
            "children": self._normalize_tokens(item.get("children") or [], ctx),
        }

    def _late_footnotes(self, ctx: _ParseContext) -> list[dict]:
        """Definitions for footnotes first cited inside another footnote.

        mistune collects footnote bodies before rendering them, so a note
        cited only from another note's text gets no item of its own.  Its
        text is parsed as a standalone document; references inside it are
        left as text.
        """
        bodies = ctx.env.get("ref_footnotes") or {}
        result: list[dict] = []
        for key in ctx.env.get("footnotes") or ():
            if key in ctx.emitted_footnotes or key not in bodies:
                continue
            ctx.emitted_footnotes.add(key)
            tokens, _ = self._md.parse(bodies[key].strip())
            result.append({
                "type": "footnoteDefinition",
                "identifier": ctx.footnote_identifier(key),
                "children": self._normalize_tokens(
                    tokens if isinstance(tokens, list) else [], ctx
                ),
            })
        return result

    # ── Inline helpers ─────────────────────────────────────────────────

    def _normalize_link(self, token: dict, ctx: _ParseContext) -> dict:
        """Normalize a link or image, keeping reference-style ones indirect."""
        attrs = token.get("attrs") or {}
        is_image = token["type"] == "image"
        ref = token.get("ref")
        children = self._normalize_tokens(token.get("children") or [], ctx)

        node: dict[str, Any]
        if ref is not None:
            node = {
                "type": "imageReference" if is_image else "linkReference",
                "identifier": ref.lower(),
                "label": token.get("label"),
            }
        else:
            node = {
                "type": "image" if is_image else "link",
                "url": attrs.get("url"),
                "title": attrs.get("title"),
            }

        if is_image:
            node["alt"] = _plain_text(children) or None
        else:
            node["children"] = children
        return node

    def _normalize_unknown(self, token: dict, ctx: _ParseContext) -> dict:
        """Pass an unrecognised token through under its own type name."""
        node: dict[str, Any] = {"type": token.get("type", "")}
        if "raw" in token:
            node["value"] = token["raw"]
        children = token.get("children")
        if children:
            node["children"] = self._normalize_tokens(children, ctx)
        return node


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------

def _scan_footnote_labels(markdown: str) -> dict[str, str]:
    """Map each footnote key to the label as first written in *markdown*."""
    labels: dict[str, str] = {}
    for m in _FOOTNOTE_LABEL_RE.finditer(markdown):
        labels.setdefault(unikey(m.group(1)), m.group(1))
    return labels


def _definitions_from_env(env: dict[str, Any]) -> list[dict]:
    """Rebuild ``definition`` nodes from mistune's reference-link table."""
    return [
        {
            "type": "definition",
            "identifier": key.lower(),
            "label": data.get("label"),
            "url": data.get("url"),
            "title": data.get("title"),
        }
        for key, data in (env.get("ref_links") or {}).items()
    ]


def _plain_text(nodes: list[dict]) -> str:
    """Concatenate the literal text below *nodes*."""
    parts: list[str] = []
    for node in nodes:
        if "value" in node and node["type"] in ("text", "inlineCode"):
            parts.append(node["value"])
        elif node.get("children"):
            parts.append(_plain_text(node["children"]))
    return "".join(parts)
