"""Dedicated unit tests for ASTNormalizer.

Tests the Markdown → mdast-shaped tree normalization layer, ensuring that
mistune's raw token stream is correctly mapped to the node kinds used by
the element builder.
"""

from elementify.converter.ast_normalizer import DEFAULT_PARSER_OPTIONS, ASTNormalizer


def _walk(node):
    yield node
    for child in node.get("children") or []:
        yield from _walk(child)


def _kinds(root):
    return [n["type"] for n in _walk(root)]


# =========================================================================
# Block-level normalization
# =========================================================================

class TestBlockNormalization:
    """Verify each block type is normalized correctly."""

    def test_root(self, normalizer):
        root = normalizer.parse("")
        assert root == {"type": "root", "children": []}

    def test_heading_levels(self, normalizer):
        for level in range(1, 7):
            root = normalizer.parse(f"{'#' * level} Heading")
            heading = root["children"][0]
            assert heading["type"] == "heading"
            assert heading["depth"] == level
            assert heading["children"] == [{"type": "text", "value": "Heading"}]

    def test_paragraph(self, normalizer):
        root = normalizer.parse("Hello world")
        assert root["children"] == [
            {"type": "paragraph", "children": [{"type": "text", "value": "Hello world"}]}
        ]

    def test_blank_lines_skipped(self, normalizer):
        root = normalizer.parse("one\n\n\n\ntwo")
        assert [c["type"] for c in root["children"]] == ["paragraph", "paragraph"]

    def test_blockquote(self, normalizer):
        root = normalizer.parse("> Quote text")
        quote = root["children"][0]
        assert quote["type"] == "blockquote"
        assert quote["children"][0]["type"] == "paragraph"

    def test_thematic_break(self, normalizer):
        root = normalizer.parse("***")
        assert root["children"] == [{"type": "thematicBreak"}]

    def test_code_with_language(self, normalizer):
        root = normalizer.parse("```python\nprint('hello')\n```")
        assert root["children"] == [
            {"type": "code", "lang": "python", "value": "print('hello')"}
        ]

    def test_code_language_is_first_info_word(self, normalizer):
        root = normalizer.parse("```js title=x\nlet a\n```")
        assert root["children"][0]["lang"] == "js"

    def test_code_without_language(self, normalizer):
        root = normalizer.parse("```\nplain\n```")
        assert root["children"][0]["lang"] is None


class TestLists:

    def test_unordered_tight_list(self, normalizer):
        root = normalizer.parse("- item 1\n- item 2")
        lst = root["children"][0]
        assert lst["type"] == "list"
        assert lst["ordered"] is False
        assert lst["start"] is None
        assert lst["spread"] is False
        first = lst["children"][0]
        assert first["type"] == "listItem"
        assert first["checked"] is None
        assert first["children"] == [{"type": "text", "value": "item 1"}]

    def test_ordered_list_start(self, normalizer):
        lst = normalizer.parse("3. first\n4. second")["children"][0]
        assert lst["ordered"] is True
        assert lst["start"] == 3

    def test_ordered_list_default_start(self, normalizer):
        assert normalizer.parse("1. first")["children"][0]["start"] == 1

    def test_loose_list_keeps_paragraphs(self, normalizer):
        lst = normalizer.parse("- a\n\n- b")["children"][0]
        assert lst["spread"] is True
        assert lst["children"][0]["children"][0]["type"] == "paragraph"

    def test_task_list(self, normalizer):
        lst = normalizer.parse("- [x] done\n- [ ] todo")["children"][0]
        assert [i["checked"] for i in lst["children"]] == [True, False]
        assert lst["children"][0]["children"] == [{"type": "text", "value": "done"}]


class TestTables:

    def test_table_flattened_with_alignment(self, normalizer):
        md = "| a | b | c |\n|:--|:-:|---|\n| 1 | 2 | 3 |\n| 4 | 5 | 6 |"
        table = normalizer.parse(md)["children"][0]
        assert table["type"] == "table"
        assert table["align"] == ["left", "center", None]
        assert [r["type"] for r in table["children"]] == ["tableRow"] * 3
        header = table["children"][0]
        assert [c["type"] for c in header["children"]] == ["tableCell"] * 3
        assert header["children"][0]["children"] == [{"type": "text", "value": "a"}]

    def test_tables_disabled_without_gfm(self):
        root = ASTNormalizer({"gfm": False}).parse("| a |\n|---|\n| 1 |")
        assert "table" not in _kinds(root)


# =========================================================================
# Inline normalization
# =========================================================================

class TestInlineNormalization:

    def test_emphasis_and_strong(self, normalizer):
        para = normalizer.parse("_x_ and __y__")["children"][0]
        kinds = [c["type"] for c in para["children"]]
        assert kinds == ["emphasis", "text", "strong"]

    def test_escapes_merge_into_one_text(self, normalizer):
        para = normalizer.parse("Hello.\\_\\_")["children"][0]
        assert para["children"] == [{"type": "text", "value": "Hello.__"}]

    def test_softbreak_becomes_newline_text(self, normalizer):
        para = normalizer.parse("one\ntwo")["children"][0]
        assert para["children"] == [{"type": "text", "value": "one\ntwo"}]

    def test_hard_break(self, normalizer):
        para = normalizer.parse("one  \ntwo")["children"][0]
        assert [c["type"] for c in para["children"]] == ["text", "break", "text"]

    def test_hard_wrap_option(self):
        para = ASTNormalizer({"hard_wrap": True}).parse("one\ntwo")["children"][0]
        assert "break" in [c["type"] for c in para["children"]]

    def test_inline_code(self, normalizer):
        para = normalizer.parse("use `x = 1`")["children"][0]
        assert para["children"][1] == {"type": "inlineCode", "value": "x = 1"}

    def test_strikethrough(self, normalizer):
        para = normalizer.parse("~~gone~~")["children"][0]
        assert para["children"][0]["type"] == "delete"

    def test_inline_link(self, normalizer):
        para = normalizer.parse('[x](https://example.com/a "T")')["children"][0]
        assert para["children"] == [{
            "type": "link",
            "url": "https://example.com/a",
            "title": "T",
            "children": [{"type": "text", "value": "x"}],
        }]

    def test_bare_url_becomes_link(self, normalizer):
        para = normalizer.parse("see https://example.com")["children"][0]
        assert para["children"][-1]["type"] == "link"
        assert para["children"][-1]["url"] == "https://example.com"

    def test_image_alt_from_text(self, normalizer):
        para = normalizer.parse('![a *b*](pic.png "T")')["children"][0]
        assert para["children"] == [
            {"type": "image", "url": "pic.png", "title": "T", "alt": "a b"}
        ]

    def test_image_without_alt(self, normalizer):
        image = normalizer.parse("![](pic.png)")["children"][0]["children"][0]
        assert image["alt"] is None
        assert image["title"] is None

    def test_inline_html_one_node_per_tag(self, normalizer):
        para = normalizer.parse("a <b>x</b>")["children"][0]
        assert para["children"] == [
            {"type": "text", "value": "a "},
            {"type": "html", "value": "<b>"},
            {"type": "text", "value": "x"},
            {"type": "html", "value": "</b>"},
        ]

    def test_block_html_text_stays_literal(self, normalizer):
        root = normalizer.parse("<style>\na { b: c_d_e }\n</style>")
        assert root["children"] == [
            {"type": "html", "value": "<style>"},
            {"type": "text", "value": "\na { b: c_d_e }\n"},
            {"type": "html", "value": "</style>"},
        ]

    def test_block_html_split_per_tag(self, normalizer):
        root = normalizer.parse('<dd class="foo">Hello</dd>')
        assert root["children"] == [
            {"type": "html", "value": '<dd class="foo">'},
            {"type": "text", "value": "Hello"},
            {"type": "html", "value": "</dd>"},
        ]

    def test_math_plugin(self):
        para = ASTNormalizer({"plugins": ["math"]}).parse("$x^2$")["children"][0]
        assert para["children"] == [{"type": "inlineMath", "value": "x^2"}]


# =========================================================================
# References and footnotes
# =========================================================================

class TestReferences:

    def test_reference_link_and_definition(self, normalizer):
        root = normalizer.parse('[text][Home]\n\n[home]: https://example.com "Title"')
        link = root["children"][0]["children"][0]
        assert link["type"] == "linkReference"
        assert link["identifier"] == "home"
        assert link["children"] == [{"type": "text", "value": "text"}]
        definition = root["children"][-1]
        assert definition == {
            "type": "definition",
            "identifier": "home",
            "label": "home",
            "url": "https://example.com",
            "title": "Title",
        }

    def test_reference_image(self, normalizer):
        root = normalizer.parse("![logo][img]\n\n[img]: logo.png")
        image = root["children"][0]["children"][0]
        assert image["type"] == "imageReference"
        assert image["identifier"] == "img"
        assert image["alt"] == "logo"

    def test_footnote_reference_and_definition(self, normalizer):
        root = normalizer.parse("Hi[^note]\n\n[^note]: Text")
        para = root["children"][0]
        assert para["children"] == [
            {"type": "text", "value": "Hi"},
            {"type": "footnoteReference", "identifier": "note"},
        ]
        footnote = root["children"][-1]
        assert footnote["type"] == "footnoteDefinition"
        assert footnote["identifier"] == "note"
        assert footnote["children"] == [
            {"type": "paragraph", "children": [{"type": "text", "value": "Text"}]}
        ]

    def test_footnote_label_case_preserved(self, normalizer):
        root = normalizer.parse("A[^MyNote]\n\n[^MyNote]: x")
        assert root["children"][0]["children"][1]["identifier"] == "MyNote"

    def test_footnote_cited_from_footnote_gets_definition(self, normalizer):
        root = normalizer.parse("a[^1]\n\n[^1]: b[^2]\n\n[^2]: c")
        definitions = [n for n in _walk(root) if n["type"] == "footnoteDefinition"]
        assert [d["identifier"] for d in definitions] == ["1", "2"]
        assert definitions[1]["children"] == [
            {"type": "paragraph", "children": [{"type": "text", "value": "c"}]}
        ]

    def test_unreferenced_footnote_dropped(self, normalizer):
        root = normalizer.parse("plain\n\n[^unused]: never cited")
        assert "footnoteDefinition" not in _kinds(root)

    def test_footnotes_disabled(self):
        root = ASTNormalizer({"footnotes": False}).parse("Hi[^note]\n\n[^note]: Text")
        assert "footnoteReference" not in _kinds(root)


class TestOptions:

    def test_defaults(self):
        normalizer = ASTNormalizer()
        for key, value in DEFAULT_PARSER_OPTIONS.items():
            assert normalizer.options[key] == value
        assert "footnotes" in normalizer.plugins
        assert "table" in normalizer.plugins

    def test_caller_options_not_mutated(self):
        options = {"gfm": True}
        ASTNormalizer(options)
        assert options == {"gfm": True}

    def test_unknown_keys_ignored(self):
        root = ASTNormalizer({"commonmark": True, "position": True}).parse("x")
        assert root["children"][0]["type"] == "paragraph"
