"""Convert an mdast-shaped tree into an element tree.

This is the recursive, depth-first assembler.  For each node it:

- returns text nodes as plain strings
- maps the node kind to a tag (``tag_mapper``) and stops on kinds that
  render nothing (definitions, front matter)
- builds ``{"key": <sibling index>}`` props, merges caller overrides beneath
  them and applies the kind's derived props (``props``) on top
- transforms children, pairing raw markup nodes with their closing tag so
  ``<dd>Hello</dd>`` becomes one ``dd`` element
- hands ``(type, props, children)`` to the element factory

Code blocks become ``pre > code``; GFM task items get a disabled checkbox;
tables are regrouped (``tables``); footnote definitions are rendered up
front and appended to the root inside a trailing container.

The input tree is never modified.
"""

from __future__ import annotations

from typing import Any

from elementify.config import ElementifyConfig
from elementify.converter.attributes import attributes_to_props
from elementify.converter.definitions import collect_definitions, prefix_footnote_label
from elementify.converter.html import HTML_KIND, find_closing, parse_tag
from elementify.converter.overrides import apply_override
from elementify.converter.props import derive_props
from elementify.converter.tables import restructure_table
from elementify.converter.tag_mapper import tag_for
from elementify.errors import ElementifyReferenceError
from elementify.models import Children, OverrideEntry, create_element
from elementify.observability import get_logger

log = get_logger("elementify.converter")


class ElementBuilder:
    """Assemble one element tree.

    A builder holds the definition table and footnote record of the
    document it is building, so use a fresh instance per tree.

    Parameters
    ----------
    config:
        Output tags, markup pairing mode and element factory.
    overrides:
        Normalized overrides keyed by built-in tag name.
    """

    def __init__(
        self,
        config: ElementifyConfig,
        overrides: dict[str, OverrideEntry] | None = None,
    ) -> None:
        self._config = config
        self._overrides = overrides or {}
        self._factory = config.element_factory or create_element
        self._definitions: dict[str, dict[str, Any]] = {}
        self.footnotes: list[Any] = []
        self.element_count = 0

    # ── Entry point ────────────────────────────────────────────────────

    def build_tree(self, root: dict[str, Any]) -> Any:
        """Build the element tree for a whole document.

        All definitions are collected before anything is built, so a
        reference may point at a definition further down the document.
        """
        self._definitions, footnote_defs = collect_definitions(root)
        self.footnotes = [self._build_footnote(node) for node in footnote_defs]
        return self.build(root, 0)

    def build(self, node: dict[str, Any], index: int) -> Any:
        """Transform one node at position *index* among its siblings.

        Returns a string for text, ``None`` for nodes that render nothing,
        and whatever the element factory returns otherwise.
        """
        kind = node.get("type")

        if kind == "text":
            return node.get("value", "")
        if kind == "code":
            return self._build_code(node, index)
        if kind == HTML_KIND:
            built, _ = self._build_html([node], 0, key=str(index))
            return built

        if kind == "table":
            node = restructure_table(node)
        elif kind == "footnoteReference":
            node = {
                **node,
                "children": [{"type": "sup", "value": node.get("identifier")}],
            }

        tag = tag_for(node, root_tag=self._config.root_tag)
        if tag is None:
            return None

        children = self._children_of(node)

        if kind == "listItem" and self._wants_checkbox(node):
            checkbox = self._emit(
                "input",
                "checkbox",
                {"type": "checkbox", "checked": node["checked"], "disabled": True},
                None,
            )
            children = [checkbox, *_as_list(children)]

        if kind == "root" and self.footnotes:
            footer = self._emit(
                self._config.footnotes_tag, "footnotes", {}, list(self.footnotes)
            )
            children = [*_as_list(children), footer]

        return self._emit(tag, str(index), self._derive(node), children)

    # ── Children ───────────────────────────────────────────────────────

    def _children_of(self, node: dict[str, Any]) -> Children:
        value = node.get("value")
        if value:
            return value
        return self._build_slice(node.get("children"))

    def _build_slice(self, nodes: list[dict[str, Any]] | None) -> Children:
        """Build a run of sibling nodes as an element's children."""
        if not isinstance(nodes, list):
            return None
        if len(nodes) == 1 and nodes[0].get("type") == "text":
            return nodes[0].get("value") or None
        return self._build_children(nodes)

    def _build_children(self, siblings: list[dict[str, Any]]) -> list[Any]:
        """Transform *siblings* in order, consuming paired raw markup."""
        result: list[Any] = []
        i = 0
        while i < len(siblings):
            child = siblings[i]
            if child.get("type") == HTML_KIND:
                built, i = self._build_html(siblings, i)
            else:
                built = self.build(child, i)
                i += 1
            if built is None or (isinstance(built, str) and not built):
                continue
            result.append(built)
        return result

    # ── Raw markup ─────────────────────────────────────────────────────

    def _build_html(
        self,
        siblings: list[dict[str, Any]],
        index: int,
        key: str | None = None,
    ) -> tuple[Any, int]:
        """Build the element opened by ``siblings[index]``.

        Returns the element (or ``None``) and the index of the first sibling
        not consumed by it.
        """
        tag = parse_tag(siblings[index].get("value") or "")
        if tag is None or tag.closing:
            return None, index + 1

        close = find_closing(siblings, index, tag, self._config.html_pairing)
        if close is None:
            children: Children = None
            next_index = index + 1
        else:
            children = self._build_slice(siblings[index + 1:close])
            next_index = close + 1

        element = self._emit(
            tag.name.lower(),
            key if key is not None else str(index),
            attributes_to_props(tag.attributes),
            children,
        )
        return element, next_index

    # ── Special kinds ──────────────────────────────────────────────────

    def _build_code(self, node: dict[str, Any], index: int) -> Any:
        lang = node.get("lang")
        inner_props = {"className": f"{self._config.code_class_prefix}{lang}"} if lang else {}
        code = self._emit("code", "0", inner_props, node.get("value", ""))
        return self._emit("pre", str(index), {}, [code])

    def _build_footnote(self, node: dict[str, Any]) -> Any:
        identifier = node.get("identifier")
        labelled = prefix_footnote_label(node)
        return self._emit(
            "div",
            str(identifier),
            {"id": identifier},
            self._children_of(labelled),
        )

    def _wants_checkbox(self, node: dict[str, Any]) -> bool:
        return self._config.task_list_checkboxes and isinstance(node.get("checked"), bool)

    # ── Emission ───────────────────────────────────────────────────────

    def _derive(self, node: dict[str, Any]) -> dict[str, Any]:
        try:
            return derive_props(node, self._definitions)
        except ElementifyReferenceError as exc:
            log.warning(
                "unresolved reference",
                extra={"extra_fields": {
                    "op": "build",
                    "kind": exc.context.get("kind"),
                    "identifier": exc.context.get("identifier"),
                }},
            )
            raise

    def _emit(
        self,
        tag: str,
        key: str,
        derived: dict[str, Any],
        children: Children,
    ) -> Any:
        """Resolve overrides, layer the props and call the element factory."""
        element_type, props = apply_override(tag, {"key": key}, self._overrides)
        props = {**props, **derived, "key": key}
        self.element_count += 1
        return self._factory(element_type, props, children)


def _as_list(children: Children) -> list[Any]:
    if children is None:
        return []
    if isinstance(children, str):
        return [children] if children else []
    return list(children)
