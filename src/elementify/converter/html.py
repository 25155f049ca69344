"""Recover tag names and attributes from raw embedded markup.

The markdown parser does not build elements for embedded HTML.  Inline
markup arrives as one ``html`` node per tag, and a block of markup is split
into the same shape by :func:`split_markup`, so an element such as
``<dd class="x">Hi</dd>`` is a run of siblings::

    html '<dd class="x">'   text 'Hi'   html '</dd>'

This module reads a single tag (:func:`parse_tag`), scans its attributes
(:func:`extract_attributes`) and locates the sibling that closes it
(:func:`find_closing`).  The assembler transforms everything in between as
the element's children.

Attribute values may mix quoting styles inside one tag, so attributes are
read with a small explicit state machine instead of a regular expression.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

HTML_KIND = "html"
"""AST kind of raw markup passthrough nodes."""

VOID_ELEMENTS: frozenset[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
})
"""Elements that never have a closing tag."""

RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"pre", "script", "style", "textarea"})
"""Elements whose body is literal text up to their closing tag."""

_OPEN_TAG_RE = re.compile(r"^\s*<([A-Za-z][A-Za-z0-9-]*)")
_CLOSE_TAG_RE = re.compile(r"^\s*</([A-Za-z][A-Za-z0-9-]*)")
_MARKUP_START_RE = re.compile(r"</?[A-Za-z][A-Za-z0-9-]*(?=[\s/>]|$)|<!--|<!|<\?")


@dataclass
class HtmlTag:
    """A single parsed tag."""

    name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    closing: bool = False
    self_closing: bool = False

    @property
    def is_void(self) -> bool:
        """True when the tag cannot enclose children."""
        return self.self_closing or self.name.lower() in VOID_ELEMENTS


# ---------------------------------------------------------------------------
# Attribute scanner
# ---------------------------------------------------------------------------

class _ScanState(Enum):
    SEEK = "seek"
    NAME = "name"
    VALUE_START = "value_start"
    DOUBLE_QUOTED = "double_quoted"
    SINGLE_QUOTED = "single_quoted"
    BARE = "bare"


def extract_attributes(text: str) -> dict[str, Any]:
    """Scan the interior of an opening tag into ``{name: value}`` pairs.

    * ``name="value"`` reads up to the next double quote.
    * ``name='value'`` reads up to the next single quote.
    * ``name=value`` reads up to the next whitespace or the end.
    * ``name`` alone is a boolean attribute and maps to ``True``.

    An unterminated quoted value runs to the end of *text*.  Later
    duplicates of a name overwrite earlier ones.
    """
    pairs: dict[str, Any] = {}
    state = _ScanState.SEEK
    name_start = 0
    value_start = 0
    name = ""

    def store(key: str, value: Any) -> None:
        if key:
            pairs[key] = value

    for i, ch in enumerate(text):
        if state is _ScanState.SEEK:
            if ch.isspace():
                continue
            if ch == "=":
                # stray '=' with no name in front of it
                name = ""
                state = _ScanState.VALUE_START
            else:
                name_start = i
                state = _ScanState.NAME

        elif state is _ScanState.NAME:
            if ch == "=":
                name = text[name_start:i]
                state = _ScanState.VALUE_START
            elif ch.isspace():
                store(text[name_start:i], True)
                state = _ScanState.SEEK

        elif state is _ScanState.VALUE_START:
            if ch == '"':
                value_start = i + 1
                state = _ScanState.DOUBLE_QUOTED
            elif ch == "'":
                value_start = i + 1
                state = _ScanState.SINGLE_QUOTED
            elif ch.isspace():
                store(name, "")
                state = _ScanState.SEEK
            else:
                value_start = i
                state = _ScanState.BARE

        elif state is _ScanState.DOUBLE_QUOTED:
            if ch == '"':
                store(name, text[value_start:i])
                state = _ScanState.SEEK

        elif state is _ScanState.SINGLE_QUOTED:
            if ch == "'":
                store(name, text[value_start:i])
                state = _ScanState.SEEK

        elif state is _ScanState.BARE:
            if ch.isspace():
                store(name, text[value_start:i])
                state = _ScanState.SEEK

    # End of input closes whatever token is open.
    if state is _ScanState.NAME:
        store(text[name_start:], True)
    elif state is _ScanState.VALUE_START:
        store(name, "")
    elif state in (_ScanState.DOUBLE_QUOTED, _ScanState.SINGLE_QUOTED, _ScanState.BARE):
        store(name, text[value_start:])

    return pairs


# ---------------------------------------------------------------------------
# Tag parsing
# ---------------------------------------------------------------------------

def _find_tag_end(raw: str, start: int) -> int:
    """Index of the ``>`` closing the tag, ignoring ``>`` inside quotes."""
    quote: str | None = None
    for i in range(start, len(raw)):
        ch = raw[i]
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ">":
            return i
    return len(raw)


def parse_tag(raw: str) -> HtmlTag | None:
    """Parse the tag at the start of *raw*.

    Returns ``None`` for anything that is not an element tag (comments,
    doctypes, processing instructions, CDATA, stray text).
    """
    m = _CLOSE_TAG_RE.match(raw)
    if m:
        return HtmlTag(name=m.group(1), closing=True)

    m = _OPEN_TAG_RE.match(raw)
    if m is None:
        return None

    end = _find_tag_end(raw, m.end())
    interior = raw[m.end():end].strip()
    self_closing = interior.endswith("/")
    if self_closing:
        interior = interior[:-1].rstrip()

    return HtmlTag(
        name=m.group(1),
        attributes=extract_attributes(interior),
        self_closing=self_closing,
    )


# ---------------------------------------------------------------------------
# Block splitting
# ---------------------------------------------------------------------------

def _markup_end(raw: str, match: re.Match[str]) -> int:
    """Index just past the markup construct opened by *match*."""
    opener = match.group(0)
    if opener == "<!--":
        close = raw.find("-->", match.end())
        return len(raw) if close < 0 else close + 3
    if opener in ("<!", "<?"):
        close = raw.find(">", match.end())
        return len(raw) if close < 0 else close + 1
    return min(_find_tag_end(raw, match.end()) + 1, len(raw))


def split_markup(raw: str) -> list[dict[str, Any]]:
    """Split a block of raw markup into ``html`` tag nodes and ``text`` nodes.

    Only tags, comments and declarations are recognised; everything else is
    kept as literal text.  The body of a ``pre``, ``script``, ``style`` or
    ``textarea`` element is one text node running up to its closing tag.

    >>> split_markup('<dd class="x">a *b*</dd>')
    [{'type': 'html', 'value': '<dd class="x">'}, {'type': 'text', 'value': 'a *b*'}, {'type': 'html', 'value': '</dd>'}]
    """
    nodes: list[dict[str, Any]] = []

    def add_text(value: str) -> None:
        if value:
            nodes.append({"type": "text", "value": value})

    pos = 0
    while True:
        m = _MARKUP_START_RE.search(raw, pos)
        if m is None:
            break
        add_text(raw[pos:m.start()])
        end = _markup_end(raw, m)
        value = raw[m.start():end]
        nodes.append({"type": HTML_KIND, "value": value})
        pos = end

        tag = parse_tag(value)
        if tag is None or tag.closing or tag.name.lower() not in RAW_TEXT_ELEMENTS:
            continue
        close = re.compile(rf"</{re.escape(tag.name)}(?=[\s>]|$)", re.IGNORECASE).search(raw, pos)
        body_end = len(raw) if close is None else close.start()
        add_text(raw[pos:body_end])
        pos = body_end

    add_text(raw[pos:])
    return nodes


# ---------------------------------------------------------------------------
# Sibling pairing
# ---------------------------------------------------------------------------

def find_closing(
    siblings: list[dict],
    index: int,
    opening: HtmlTag,
    pairing: str = "balanced",
) -> int | None:
    """Find the sibling index closing the tag opened at ``siblings[index]``.

    Parameters
    ----------
    siblings:
        The parent's full child list.
    index:
        Position of the opening node.
    opening:
        The parsed opening tag.
    pairing:
        ``"balanced"`` matches the next closing tag of the same name,
        counting nested openings of that name.  ``"last_sibling"`` takes the
        last raw-markup sibling after *index*, whatever it is.

    Returns
    -------
    int | None
        The closing node's index, or ``None`` when the tag encloses nothing.
    """
    if opening.is_void:
        return None

    if pairing == "last_sibling":
        for j in range(len(siblings) - 1, index, -1):
            if siblings[j].get("type") == HTML_KIND:
                return j
        return None

    name = opening.name.lower()
    depth = 0
    for j in range(index + 1, len(siblings)):
        sibling = siblings[j]
        if sibling.get("type") != HTML_KIND:
            continue
        tag = parse_tag(sibling.get("value") or "")
        if tag is None or tag.name.lower() != name:
            continue
        if tag.closing:
            if depth == 0:
                return j
            depth -= 1
        elif not tag.is_void:
            depth += 1
    return None
