#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the flavored markdown parser: base grammar, front-matter and slugs."""
import pytest

from flavormark.ast import (
    BlockQuote,
    Callout,
    Code,
    CodeBlock,
    CodeTabs,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from flavormark.constants import MAX_NESTING_DEPTH
from flavormark.exceptions import InvalidOptionsError, MalformedConstructError
from flavormark.options import CompileOptions
from flavormark.parsers.markdown import MarkdownParser, _ParseContext, assign_slugs, split_frontmatter


@pytest.fixture
def parser() -> MarkdownParser:
    return MarkdownParser()


@pytest.mark.unit
class TestBlockConstructs:
    """Test the base block grammar."""

    def test_heading_and_paragraph(self, parser: MarkdownParser) -> None:
        """Test headings get slugs and paragraphs keep inline structure."""
        document = parser.parse("# Title\n\nSome *text*.")

        assert document == Document(
            children=[
                Heading(depth=1, children=[Text("Title")], slug="title"),
                Paragraph(children=[Text("Some "), Emphasis(children=[Text("text")]), Text(".")]),
            ]
        )

    def test_fenced_code(self, parser: MarkdownParser) -> None:
        """Test that the info string is split into language and meta."""
        document = parser.parse("```python title=example.py\nprint(1)\n```")
        assert document.children == [CodeBlock(value="print(1)", language="python", meta="title=example.py")]

    def test_fenced_code_without_info(self, parser: MarkdownParser) -> None:
        """Test a fence without an info string."""
        assert parser.parse("```\nplain\n```").children == [CodeBlock(value="plain")]

    def test_blockquote(self, parser: MarkdownParser) -> None:
        """Test a plain block quote."""
        assert parser.parse("> quoted").children == [BlockQuote(children=[Paragraph(children=[Text("quoted")])])]

    def test_tight_bullet_list(self, parser: MarkdownParser) -> None:
        """Test a tight unordered list."""
        document = parser.parse("* one\n* two")

        assert document.children == [
            List(
                ordered=False,
                tight=True,
                children=[
                    ListItem(children=[Paragraph(children=[Text("one")])]),
                    ListItem(children=[Paragraph(children=[Text("two")])]),
                ],
            )
        ]

    def test_ordered_list_start(self, parser: MarkdownParser) -> None:
        """Test that ordered lists keep their start number."""
        (lst,) = parser.parse("3. three\n4. four").children
        assert lst.ordered is True
        assert lst.start == 3
        assert len(lst.children) == 2

    def test_loose_list(self, parser: MarkdownParser) -> None:
        """Test that blank lines between items make a loose list."""
        (lst,) = parser.parse("- one\n\n- two").children
        assert lst.tight is False

    def test_task_list(self, parser: MarkdownParser) -> None:
        """Test that task items carry their checked state."""
        (lst,) = parser.parse("- [x] done\n- [ ] todo\n- plain").children
        assert [item.checked for item in lst.children] == [True, False, None]
        assert lst.children[0].children == [Paragraph(children=[Text("done")])]

    def test_table(self, parser: MarkdownParser) -> None:
        """Test a pipe table with alignments."""
        (table,) = parser.parse("| A | B |\n|:--|--:|\n| 1 | 2 |").children

        assert table == Table(
            alignments=["left", "right"],
            children=[
                TableRow(
                    header=True,
                    children=[
                        TableCell(children=[Text("A")], alignment="left"),
                        TableCell(children=[Text("B")], alignment="right"),
                    ],
                ),
                TableRow(
                    children=[
                        TableCell(children=[Text("1")], alignment="left"),
                        TableCell(children=[Text("2")], alignment="right"),
                    ]
                ),
            ],
        )

    def test_thematic_break(self, parser: MarkdownParser) -> None:
        """Test a thematic break between paragraphs."""
        document = parser.parse("above\n\n---\n\nbelow")
        assert document.children[1] == ThematicBreak()

    def test_html_block(self, parser: MarkdownParser) -> None:
        """Test that block HTML is kept as raw text."""
        (block,) = parser.parse("<div>\nhello\n</div>").children
        assert isinstance(block, HTMLBlock)
        assert "<div>" in block.value


@pytest.mark.unit
class TestConstructsAfterLists:
    """Test that custom block constructs are recognized where a list ends."""

    @pytest.mark.parametrize("list_source", ["- a\n\n", "1. a\n\n", "- a\n"])
    def test_callout(self, parser: MarkdownParser, list_source: str) -> None:
        """Test an emoji callout following a list."""
        document = parser.parse(f"{list_source}> 📘 Title\n> body\n")

        assert isinstance(document.children[0], List)
        assert document.children[1] == Callout(
            theme="info", icon="📘", title=[Text("Title")], children=[Paragraph(children=[Text("body")])]
        )

    @pytest.mark.parametrize("list_source", ["- a\n\n", "1. a\n\n", "- a\n"])
    def test_code_tabs(self, parser: MarkdownParser, list_source: str) -> None:
        """Test adjacent fences following a list."""
        document = parser.parse(f"{list_source}```py A\n1\n```\n```js B\n2\n```\n")

        assert isinstance(document.children[0], List)
        assert document.children[1] == CodeTabs(
            children=[CodeBlock(value="1", language="py", meta="A"), CodeBlock(value="2", language="js", meta="B")]
        )

    def test_plain_blockquote_after_list(self, parser: MarkdownParser) -> None:
        """Test that quotes without an icon stay block quotes."""
        document = parser.parse("- a\n\n> quoted\n")
        assert document.children[1] == BlockQuote(children=[Paragraph(children=[Text("quoted")])])

    def test_callout_inside_list_item(self, parser: MarkdownParser) -> None:
        """Test an indented callout belongs to the list item."""
        (lst,) = parser.parse("- a\n\n  > 👍 Done\n").children
        assert isinstance(lst.children[0].children[1], Callout)


@pytest.mark.unit
class TestInlineConstructs:
    """Test the base inline grammar."""

    def test_strong_and_strikethrough(self, parser: MarkdownParser) -> None:
        """Test strong emphasis and strikethrough."""
        (paragraph,) = parser.parse("**bold** and ~~gone~~").children

        assert paragraph.children == [
            Strong(children=[Text("bold")]),
            Text(" and "),
            Strikethrough(children=[Text("gone")]),
        ]

    def test_inline_code(self, parser: MarkdownParser) -> None:
        """Test code spans."""
        (paragraph,) = parser.parse("run `make`").children
        assert paragraph.children == [Text("run "), Code("make")]

    def test_link_with_title(self, parser: MarkdownParser) -> None:
        """Test links keep their title."""
        (paragraph,) = parser.parse('[docs](https://example.com "Docs")').children
        assert paragraph.children == [Link(url="https://example.com", children=[Text("docs")], title="Docs")]

    def test_image_alt_text(self, parser: MarkdownParser) -> None:
        """Test that image alt text is flattened to a string."""
        (paragraph,) = parser.parse("![a *diagram*](d.png)").children
        assert paragraph.children == [Image(url="d.png", alt="a diagram")]

    def test_hard_line_breaks_by_default(self, parser: MarkdownParser) -> None:
        """Test that single newlines are hard breaks in the default mode."""
        (paragraph,) = parser.parse("one\ntwo").children
        assert paragraph.children == [Text("one"), LineBreak(soft=False), Text("two")]

    def test_soft_line_breaks(self) -> None:
        """Test that single newlines are soft breaks in soft mode."""
        parser = MarkdownParser(CompileOptions(line_break_mode="soft"))
        (paragraph,) = parser.parse("one\ntwo").children
        assert paragraph.children == [Text("one"), LineBreak(soft=True), Text("two")]

    @pytest.mark.parametrize("source", ["one\\\ntwo", "one  \ntwo"])
    def test_explicit_breaks_in_hard_mode(self, parser: MarkdownParser, source: str) -> None:
        """Test that backslash and trailing-space breaks leave no marker behind."""
        (paragraph,) = parser.parse(source).children
        assert paragraph.children == [Text("one"), LineBreak(soft=False), Text("two")]

    def test_backslash_break_in_soft_mode(self) -> None:
        """Test that a backslash break is a hard break in soft mode."""
        parser = MarkdownParser(CompileOptions(line_break_mode="soft"))
        (paragraph,) = parser.parse("one\\\ntwo").children
        assert paragraph.children == [Text("one"), LineBreak(soft=False), Text("two")]

    def test_escaped_characters(self, parser: MarkdownParser) -> None:
        """Test that backslash escapes produce literal text."""
        (paragraph,) = parser.parse(r"\*not emphasis\*").children
        assert paragraph.children == [Text("*not emphasis*")]


@pytest.mark.unit
class TestDisabledConstructs:
    """Test switching off base constructs and extensions."""

    def test_disable_emphasis(self) -> None:
        """Test that disabled emphasis stays literal."""
        parser = MarkdownParser({"disabledConstructs": ["emphasis"]})
        (paragraph,) = parser.parse("*a*").children
        assert paragraph.children == [Text("*a*")]

    def test_disable_heading(self) -> None:
        """Test that disabled ATX headings become paragraphs."""
        parser = MarkdownParser(CompileOptions(disabled_constructs=frozenset({"heading"})))
        assert parser.parse("# Title").children == [Paragraph(children=[Text("# Title")])]

    def test_disable_extension(self) -> None:
        """Test that a disabled extension falls back to the base grammar."""
        parser = MarkdownParser({"disabledConstructs": ["callout"]})

        assert "callout" not in parser.registry
        assert isinstance(parser.parse("> 📘 Note").children[0], BlockQuote)

    def test_unknown_name_rejected(self) -> None:
        """Test that unknown construct names fail when the parser is built."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            MarkdownParser({"disabledConstructs": ["emphasis", "sparkles"]})
        assert exc_info.value.invalid_options == ("sparkles",)


@pytest.mark.unit
class TestFrontmatter:
    """Test front-matter extraction."""

    def test_yaml(self) -> None:
        """Test YAML front-matter between --- fences."""
        body, data = split_frontmatter("---\ntitle: Intro\ntags: [a, b]\n---\n# Body\n")
        assert data == {"title": "Intro", "tags": ["a", "b"]}
        assert body == "# Body\n"

    def test_toml(self) -> None:
        """Test TOML front-matter between +++ fences."""
        body, data = split_frontmatter('+++\ntitle = "Intro"\n+++\nBody')
        assert data == {"title": "Intro"}
        assert body == "Body"

    def test_no_frontmatter(self) -> None:
        """Test text without front-matter is returned unchanged."""
        assert split_frontmatter("# Title") == ("# Title", {})

    def test_unterminated(self) -> None:
        """Test that an unclosed fence is not front-matter."""
        text = "---\ntitle: Intro\n"
        assert split_frontmatter(text) == (text, {})

    def test_malformed_yaml_dropped(self, caplog) -> None:
        """Test that unparseable metadata is dropped but the block removed."""
        body, data = split_frontmatter("---\ntitle: [unclosed\n---\nBody")
        assert data == {}
        assert body == "Body"
        assert "front-matter" in caplog.text

    def test_non_mapping_yaml(self) -> None:
        """Test that YAML lists are not accepted as metadata."""
        assert split_frontmatter("---\n- a\n- b\n---\nBody") == ("Body", {})

    def test_parser_stores_frontmatter(self, parser: MarkdownParser) -> None:
        """Test that parsed front-matter lands on the document."""
        document = parser.parse("---\ntitle: Intro\n---\n\nHello")
        assert document.frontmatter == {"title": "Intro"}
        assert document.children == [Paragraph(children=[Text("Hello")])]

    def test_frontmatter_parsing_disabled(self) -> None:
        """Test that front-matter can be left in the text."""
        parser = MarkdownParser({"parseFrontmatter": False})
        document = parser.parse("---\ntitle: Intro\n---\n\nHello")
        assert document.frontmatter == {}


@pytest.mark.unit
class TestSlugs:
    """Test heading slug assignment."""

    def test_unique_slugs_in_document_order(self, parser: MarkdownParser) -> None:
        """Test that repeated headings get numbered slugs."""
        document = parser.parse("# Setup\n\n## Setup\n\n### Setup")
        assert [heading.slug for heading in document.children] == ["setup", "setup-1", "setup-2"]

    def test_slug_from_inline_content(self, parser: MarkdownParser) -> None:
        """Test that slugs use the plain text of the heading."""
        (heading,) = parser.parse("## Using `make` **fast**").children
        assert heading.slug == "using-make-fast"

    def test_assign_slugs_replaces_existing(self) -> None:
        """Test that assign_slugs recomputes slugs without touching the input."""
        document = Document(children=[Heading(depth=1, children=[Text("A")], slug="stale")])
        result = assign_slugs(document)

        assert result.children[0].slug == "a"
        assert document.children[0].slug == "stale"


@pytest.mark.unit
class TestParseContext:
    """Test nested parsing limits."""

    def test_nesting_limit(self, parser: MarkdownParser) -> None:
        """Test that nesting beyond the limit raises MalformedConstructError."""
        context = _ParseContext(parser, {"ref_links": {}}, depth=MAX_NESTING_DEPTH)
        with pytest.raises(MalformedConstructError):
            context.parse_blocks("text")

    def test_nested_parse_below_limit(self, parser: MarkdownParser) -> None:
        """Test nested block and inline parsing."""
        context = _ParseContext(parser, {"ref_links": {}})

        assert context.parse_blocks("*a*") == [Paragraph(children=[Emphasis(children=[Text("a")])])]
        assert context.parse_inline("**b**") == [Strong(children=[Text("b")])]

    def test_parser_reusable(self, parser: MarkdownParser) -> None:
        """Test that one parser produces identical results for repeated input."""
        assert parser.parse("# A\n\n# A") == parser.parse("# A\n\n# A")
