#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the exported API functions and the compile pipeline."""
import pytest

from flavormark import (
    CompileOptions,
    Pipeline,
    ast_to_plain_text,
    hast,
    html,
    md,
    mdast,
    parse,
    plain_text,
    render,
    serialize,
    setup,
    toc,
    toc_html,
)
from flavormark.ast import Document, Heading
from flavormark.exceptions import InvalidOptionsError
from flavormark.hast import Element, Root, Text
from flavormark.renderers import Component

TOC_SOURCE = "### A\n\n#### B\n\n### C\n\n##### D"


def anchors(component: Component) -> list[str]:
    found = []
    if component.type == "Anchor":
        found.append(component.props["href"])
    for child in component.children:
        if isinstance(child, Component):
            found.extend(anchors(child))
    return found


@pytest.mark.unit
class TestEmptyInput:
    """Test that every entry point returns None for empty input."""

    @pytest.mark.parametrize("function", [parse, mdast, hast, html, plain_text, render, toc, toc_html, setup])
    @pytest.mark.parametrize("value", ["", None])
    def test_text_entry_points(self, function, value) -> None:
        """Test text based entry points."""
        assert function(value) is None

    @pytest.mark.parametrize("function", [serialize, md, ast_to_plain_text])
    def test_tree_entry_points(self, function) -> None:
        """Test tree based entry points."""
        assert function(None) is None

    def test_options_validated_before_empty_check(self) -> None:
        """Test that invalid options raise even for empty input."""
        with pytest.raises(InvalidOptionsError):
            html("", {"maxTOCDepth": 0})

    def test_unknown_option_raises(self) -> None:
        """Test that unknown option names raise."""
        with pytest.raises(InvalidOptionsError):
            parse("", {"colour": "red"})


@pytest.mark.unit
class TestCompile:
    """Test end-to-end compilation."""

    def test_parse_returns_document(self, sample_markdown: str) -> None:
        """Test the document tree of the sample document."""
        document = parse(sample_markdown)

        assert isinstance(document, Document)
        assert document.frontmatter == {"title": "Getting Started"}
        headings = [node for node in document.children if isinstance(node, Heading)]
        assert [heading.slug for heading in headings] == ["getting-started", "setup", "setup-1"]

    def test_aliases(self) -> None:
        """Test the alternate entry point names."""
        assert mdast is parse
        assert md is serialize

    def test_hast_is_sanitized_tree(self) -> None:
        """Test the hypertext tree output."""
        tree = hast("Hi <span onclick=\"x()\">there</span>")

        assert isinstance(tree, Root)
        (paragraph,) = tree.children
        assert paragraph.children[1] == Element("span", {}, [Text("there")])

    def test_script_removed(self) -> None:
        """Test that script blocks are removed from the output."""
        assert html("<script>alert(1)</script>\n\nHi").strip() == "<p>Hi</p>"

    def test_malformed_magic_block_kept_literal(self) -> None:
        """Test that malformed input never raises."""
        result = html("[block:unknown-type]\ngarbage\n[/block]")
        assert result == "<p>[block:unknown-type]<br>\ngarbage<br>\n[/block]</p>"

    def test_sample_document_compiles(self, sample_markdown: str) -> None:
        """Test that every built-in construct reaches the HTML output."""
        result = html(sample_markdown, {"variables": {"user": "Ada"}, "glossary": {"API": "Interface"}})

        assert '<span class="variable">Ada</span>' in result
        assert "GlossaryItem-tooltip" in result
        assert "callout_info" in result
        assert "callout_warn" in result
        assert 'class="CodeTabs"' in result
        assert 'class="task-list-item"' in result
        assert 'id="setup-1"' in result

    def test_render_accepts_document(self) -> None:
        """Test rendering an already parsed document."""
        result = render(parse("Hello"))
        assert result == Component("Fragment", {}, (Component("p", {}, ("Hello",)),))

    def test_ast_to_plain_text(self) -> None:
        """Test plain text of a parsed tree."""
        assert ast_to_plain_text(parse("# T\n\nx")) == "T x"

    def test_soft_breaks(self, soft_options: CompileOptions) -> None:
        """Test the soft line break mode."""
        assert html("a\nb", soft_options) == "<p>a\nb</p>"

    def test_hard_breaks(self) -> None:
        """Test the default hard line break mode."""
        assert html("a\nb") == "<p>a<br>\nb</p>"

    @pytest.mark.parametrize("source", ["a\\\nb", "a  \nb"])
    def test_explicit_hard_breaks(self, source: str) -> None:
        """Test backslash and trailing-space breaks leave no marker in the default mode."""
        assert html(source) == "<p>a<br>\nb</p>"


@pytest.mark.unit
class TestTableOfContents:
    """Test table of contents output."""

    def test_toc_component(self) -> None:
        """Test the component tree and its anchors."""
        result = toc(TOC_SOURCE, {"maxTOCDepth": 3})

        assert result.type == "TableOfContents"
        assert anchors(result) == ["#a", "#b", "#c", "#d"]

    def test_toc_html_default_depth(self) -> None:
        """Test that the default depth keeps two normalized levels."""
        assert toc_html(TOC_SOURCE) == (
            '<ul><li><a href="#a">A</a><ul><li><a href="#b">B</a></li></ul></li><li><a href="#c">C</a></li></ul>'
        )

    def test_toc_from_document(self) -> None:
        """Test building the table of contents from a parsed tree."""
        assert toc_html(parse("# Only")) == '<ul><li><a href="#only">Only</a></li></ul>'

    def test_no_headings(self) -> None:
        """Test documents without headings."""
        assert toc("Just text") is None
        assert toc_html("Just text") is None


@pytest.mark.unit
class TestSetup:
    """Test option resolution and normalization."""

    def test_normalizes_magic_blocks(self) -> None:
        """Test the normalized text."""
        text, options = setup("a[block:x]b[/block]c")

        assert text == "a\n\n[block:x]b[/block]\nc\n\n "
        assert options == CompileOptions()

    def test_normalization_disabled(self) -> None:
        """Test that normalization can be turned off."""
        text, options = setup("a[block:x]b[/block]c", {"normalize": False})

        assert text == "a[block:x]b[/block]c"
        assert options.normalize is False


@pytest.mark.unit
class TestPipeline:
    """Test reusable pipelines."""

    def test_unknown_disabled_construct(self) -> None:
        """Test that configuration errors surface when the pipeline is built."""
        with pytest.raises(InvalidOptionsError):
            Pipeline({"disabledConstructs": ["nope"]})

    def test_sanitize_disabled(self) -> None:
        """Test that sanitization can be turned off."""
        assert Pipeline({"sanitize": False}).html("<script>x</script>").strip() == "<script>x</script>"

    def test_reusable(self) -> None:
        """Test that one pipeline compiles many documents independently."""
        pipeline = Pipeline()
        assert pipeline.html("# A") == pipeline.html("# A")
        assert pipeline.plain_text("# A\n\nB") == "A B"

    def test_components_with_custom_component(self) -> None:
        """Test custom components passed to the pipeline."""
        pipeline = Pipeline(custom_components={"Note": lambda element, children, context: Component("Note")})
        result = pipeline.components("<x-note></x-note>")

        assert Component("Note") in result.children or any(
            Component("Note") in child.children for child in result.children if isinstance(child, Component)
        )
