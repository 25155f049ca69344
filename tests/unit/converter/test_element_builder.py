"""Tests for converter/element_builder.py on hand-built mdast trees."""

from __future__ import annotations

import copy

import pytest

from elementify.config import ElementifyConfig
from elementify.converter.element_builder import ElementBuilder
from elementify.errors import ElementifyReferenceError
from elementify.models import Element, OverrideEntry


def text(value):
    return {"type": "text", "value": value}


def html(value):
    return {"type": "html", "value": value}


def para(*children):
    return {"type": "paragraph", "children": list(children)}


def root(*children):
    return {"type": "root", "children": list(children)}


def build(tree, config=None, overrides=None):
    return ElementBuilder(config or ElementifyConfig(), overrides).build_tree(tree)


# =========================================================================
# Basic assembly
# =========================================================================

class TestBasics:

    def test_paragraph_collapses_single_text(self):
        tree = build(root(para(text("Hi"))))
        assert tree == Element("div", {"key": "0"}, [Element("p", {"key": "0"}, "Hi")])

    def test_keys_are_sibling_indexes(self):
        tree = build(root(para(text("a")), para(text("b")), para(text("c"))))
        assert [c.key for c in tree.children] == ["0", "1", "2"]

    def test_mixed_children_stay_a_list(self):
        tree = build(root(para(text("a "), {"type": "emphasis", "children": [text("b")]})))
        assert tree.children[0].children == ["a ", Element("em", {"key": "1"}, "b")]

    def test_empty_text_children_dropped(self):
        node = para(text(""), {"type": "strong", "children": [text("x")]})
        tree = build(root(node))
        assert tree.children[0].children == [Element("strong", {"key": "1"}, "x")]

    def test_lone_empty_text_gives_no_children(self):
        tree = build(root(para(text(""))))
        assert tree.children[0].children is None

    def test_definitions_render_nothing(self):
        tree = build(root(para(text("x")), {"type": "definition", "identifier": "a", "url": "/"}))
        assert len(tree.children) == 1

    def test_value_replaces_children(self):
        tree = build(root({"type": "inlineMath", "value": "x^2"}))
        assert tree.children == [Element("inlineMath", {"key": "0"}, "x^2")]

    def test_root_tag_configurable(self):
        tree = build(root(), config=ElementifyConfig(root_tag="article"))
        assert tree.type == "article"
        assert tree.children == []

    def test_input_tree_not_mutated(self):
        tree = root(
            {
                "type": "table",
                "align": ["left"],
                "children": [
                    {"type": "tableRow", "children": [{"type": "tableCell", "children": [text("h")]}]},
                ],
            },
            para(text("x"), {"type": "footnoteReference", "identifier": "n"}),
            {"type": "footnoteDefinition", "identifier": "n", "children": [para(text("note"))]},
        )
        snapshot = copy.deepcopy(tree)
        build(tree)
        assert tree == snapshot


# =========================================================================
# Special kinds
# =========================================================================

class TestCode:

    def test_pre_wraps_code_with_language_class(self):
        tree = build(root({"type": "code", "lang": "python", "value": "print(1)"}))
        assert tree.children == [
            Element("pre", {"key": "0"}, [
                Element("code", {"key": "0", "className": "lang-python"}, "print(1)"),
            ]),
        ]

    def test_no_language_no_class(self):
        pre = build(root({"type": "code", "lang": None, "value": "x"})).children[0]
        assert pre.children[0].props == {"key": "0"}

    def test_class_prefix_configurable(self):
        config = ElementifyConfig(code_class_prefix="language-")
        pre = build(root({"type": "code", "lang": "rust", "value": ""}), config=config).children[0]
        assert pre.children[0].props["className"] == "language-rust"


class TestTaskItems:

    def _list(self, checked):
        return {
            "type": "list",
            "ordered": False,
            "children": [{"type": "listItem", "checked": checked, "children": [text("do it")]}],
        }

    def test_checkbox_prepended(self):
        li = build(root(self._list(True))).children[0].children[0]
        checkbox, label = li.children
        assert checkbox == Element(
            "input",
            {"key": "checkbox", "type": "checkbox", "checked": True, "disabled": True},
            None,
        )
        assert label == "do it"

    def test_plain_item_has_no_checkbox(self):
        li = build(root(self._list(None))).children[0].children[0]
        assert li.children == "do it"

    def test_checkboxes_can_be_disabled(self):
        config = ElementifyConfig(task_list_checkboxes=False)
        li = build(root(self._list(False)), config=config).children[0].children[0]
        assert li.children == "do it"


class TestFootnotes:

    def test_anchor_and_trailing_container(self):
        tree = build(root(
            para(text("Hello"), {"type": "footnoteReference", "identifier": "1"}),
            {"type": "footnoteDefinition", "identifier": "1", "children": [para(text("World"))]},
        ))
        anchor = tree.children[0].children[1]
        assert anchor == Element("a", {"key": "1", "href": "#1"}, [Element("sup", {"key": "0"}, "1")])

        footer = tree.children[-1]
        assert footer.type == "footer"
        assert footer.key == "footnotes"
        (entry,) = footer.children
        assert entry.type == "div"
        assert entry.props == {"key": "1", "id": "1"}
        assert entry.text_content() == "[1]: World"

    def test_no_footnotes_no_container(self):
        tree = build(root(para(text("x"))))
        assert tree.find("footer") is None

    def test_footnote_may_reference_later_definition(self):
        tree = build(root(
            para(text("a"), {"type": "footnoteReference", "identifier": "n"}),
            {
                "type": "footnoteDefinition",
                "identifier": "n",
                "children": [para({"type": "linkReference", "identifier": "site", "children": [text("site")]})],
            },
            {"type": "definition", "identifier": "site", "url": "https://example.com"},
        ))
        link = tree.find("footer").find("a")
        assert link.props["href"] == "https://example.com"

    def test_footnote_value_used_when_present(self):
        tree = build(root(
            para({"type": "footnoteReference", "identifier": "v"}),
            {"type": "footnoteDefinition", "identifier": "v", "value": "raw note"},
        ))
        assert tree.find("footer").children[0].children == "raw note"

    def test_footnotes_tag_configurable(self):
        tree = build(
            root(
                para({"type": "footnoteReference", "identifier": "1"}),
                {"type": "footnoteDefinition", "identifier": "1", "children": [para(text("x"))]},
            ),
            config=ElementifyConfig(footnotes_tag="section"),
        )
        assert tree.children[-1].type == "section"


class TestReferences:

    def test_unresolved_link_reference_raises(self):
        tree = root(para({"type": "linkReference", "identifier": "nope", "children": [text("x")]}))
        with pytest.raises(ElementifyReferenceError):
            build(tree)

    def test_unresolved_footnote_reference_raises(self):
        with pytest.raises(ElementifyReferenceError):
            build(root(para({"type": "footnoteReference", "identifier": "ghost"})))


# =========================================================================
# Raw markup
# =========================================================================

class TestRawMarkup:

    def test_paired_tag_becomes_element(self):
        tree = build(root(html('<dd class="foo">'), text("Hello"), html("</dd>")))
        assert tree.children == [Element("dd", {"key": "0", "className": "foo"}, "Hello")]

    def test_nested_markup(self):
        tree = build(root(
            html("<div>"), html('<span style="color: red">'), text("Hi"), html("</span>"),
            text(" there"), html("</div>"),
        ))
        (div,) = tree.children
        assert div.type == "div"
        span, tail = div.children
        assert span == Element("span", {"key": "0", "style": {"color": "red"}}, "Hi")
        assert tail == " there"

    def test_independent_runs_balanced(self):
        tree = build(root(para(
            html("<b>"), text("a"), html("</b>"), text(" and "), html("<i>"), text("b"), html("</i>"),
        )))
        assert [getattr(c, "type", c) for c in tree.children[0].children] == ["b", " and ", "i"]

    def test_independent_runs_last_sibling(self):
        config = ElementifyConfig(html_pairing="last_sibling")
        tree = build(
            root(para(
                html("<b>"), text("a"), html("</b>"), text(" and "), html("<i>"), text("b"), html("</i>"),
            )),
            config=config,
        )
        (only,) = tree.children[0].children
        assert only.type == "b"

    def test_void_tag_without_children(self):
        tree = build(root(para(text("a"), html("<br>"), text("b"))))
        assert tree.children[0].children == ["a", Element("br", {"key": "1"}, None), "b"]

    def test_unmatched_opening_tag(self):
        tree = build(root(para(html("<span>"), text("left open"))))
        assert tree.children[0].children == [Element("span", {"key": "0"}, None), "left open"]

    def test_stray_closing_tag_and_comments_emit_nothing(self):
        tree = build(root(para(text("x"), html("</em>"), html("<!-- c -->"))))
        assert tree.children[0].children == ["x"]

    def test_key_attribute_cannot_replace_key(self):
        tree = build(root(html('<span key="mine">'), text("x"), html("</span>")))
        assert tree.children[0].key == "0"

    def test_lone_html_node(self):
        builder = ElementBuilder(ElementifyConfig())
        assert builder.build(html('<hr class="x">'), 4) == Element("hr", {"key": "4", "className": "x"}, None)


# =========================================================================
# Overrides and factories
# =========================================================================

class Custom:
    pass


class TestOverridesAndFactory:

    def test_every_emission_goes_through_overrides(self):
        overrides = {
            tag: OverrideEntry(component=f"my-{tag}")
            for tag in ("pre", "code", "input", "div", "footer", "li", "ul")
        }
        tree = build(
            root(
                {"type": "code", "lang": None, "value": "x"},
                {"type": "list", "children": [{"type": "listItem", "checked": True, "children": [text("t")]}]},
                para({"type": "footnoteReference", "identifier": "n"}),
                {"type": "footnoteDefinition", "identifier": "n", "children": [para(text("x"))]},
            ),
            overrides=overrides,
        )
        types = {el.type for el in tree.iter()}
        assert {"my-pre", "my-code", "my-input", "my-div", "my-footer", "my-li", "my-ul"} <= types
        assert "pre" not in types

    def test_override_props_beneath_derived(self):
        overrides = {"a": OverrideEntry(props={"href": "nope", "target": "_blank"})}
        tree = build(
            root(para({"type": "link", "url": "/real", "title": None, "children": [text("x")]})),
            overrides=overrides,
        )
        link = tree.find("a")
        assert link.props == {"key": "0", "href": "/real", "target": "_blank"}

    def test_override_props_not_shadowed_by_absent_title(self):
        overrides = {"img": OverrideEntry(props={"alt": "fallback"})}
        tree = build(root(para({"type": "image", "url": "p.png"})), overrides=overrides)
        assert tree.find("img").props == {"key": "0", "src": "p.png", "alt": "fallback"}

    def test_custom_factory_receives_every_element(self):
        calls = []

        def factory(type_, props, children):
            calls.append(type_)
            return (type_, props, children)

        builder = ElementBuilder(ElementifyConfig(element_factory=factory))
        result = builder.build_tree(root(para(text("a"), {"type": "strong", "children": [text("b")]})))
        assert result[0] == "div"
        assert calls == ["strong", "p", "div"]
        assert builder.element_count == 3
