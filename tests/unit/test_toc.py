#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for table of contents extraction."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from flavormark.ast import (
    Document,
    Heading,
    Link,
    List,
    ListItem,
    Paragraph,
    TableOfContents,
    Text,
    extract_toc,
    normalize_heading_depths,
    select_type,
    toc_to_document,
)


def _heading(depth: int, text: str) -> Heading:
    return Heading(depth=depth, children=[Text(text)], slug=text.lower())


@pytest.fixture
def deep_document() -> Document:
    """Headings at depths 3, 4, 3 and 5."""
    return Document(
        children=[
            _heading(3, "Install"),
            _heading(4, "Linux"),
            Paragraph(children=[Text("Body")]),
            _heading(3, "Usage"),
            _heading(5, "Flags"),
        ]
    )


@pytest.mark.unit
class TestNormalizeHeadingDepths:
    """Test heading depth normalization."""

    def test_shallowest_becomes_one(self, deep_document: Document) -> None:
        """Test that depths are shifted so the shallowest heading is level 1."""
        normalized = normalize_heading_depths(deep_document)
        assert [h.depth for h in select_type(normalized, Heading)] == [1, 2, 1, 3]

    def test_input_not_modified(self, deep_document: Document) -> None:
        """Test that the original document keeps its depths."""
        normalize_heading_depths(deep_document)
        assert [h.depth for h in select_type(deep_document, Heading)] == [3, 4, 3, 5]

    def test_already_normalized(self) -> None:
        """Test that a document starting at level 1 is returned unchanged."""
        doc = Document(children=[_heading(1, "A"), _heading(2, "B")])
        assert normalize_heading_depths(doc) is doc


@pytest.mark.unit
class TestExtractToc:
    """Test building the heading hierarchy."""

    def test_no_headings(self) -> None:
        """Test that a document without headings has no table of contents."""
        assert extract_toc(Document(children=[Paragraph(children=[Text("x")])]), max_depth=2) is None

    def test_nesting_with_max_depth_three(self, deep_document: Document) -> None:
        """Test that normalized depths 1, 2, 1, 3 nest under their parents."""
        toc = extract_toc(deep_document, max_depth=3)

        assert [entry.slug for entry in toc.entries] == ["install", "usage"]
        assert [child.slug for child in toc.entries[0].children] == ["linux"]
        assert [child.slug for child in toc.entries[1].children] == ["flags"]
        assert [entry.depth for entry in toc.iter_entries()] == [1, 2, 1, 3]

    def test_deeper_headings_excluded(self, deep_document: Document) -> None:
        """Test that headings below max_depth are left out."""
        toc = extract_toc(deep_document, max_depth=2)

        assert [entry.slug for entry in toc.iter_entries()] == ["install", "linux", "usage"]
        assert toc.entries[1].children == []

    def test_max_depth_one(self, deep_document: Document) -> None:
        """Test keeping only the top level."""
        toc = extract_toc(deep_document, max_depth=1)
        assert [entry.text for entry in toc.iter_entries()] == ["Install", "Usage"]

    def test_links_removed_from_entries(self) -> None:
        """Test that links in headings are replaced by their text."""
        heading = Heading(depth=1, children=[Link(url="https://example.com", children=[Text("Docs")])], slug="docs")
        toc = extract_toc(Document(children=[heading]), max_depth=2)

        assert toc.entries[0].content == [Text("Docs")]

    def test_missing_slug_falls_back_to_text(self) -> None:
        """Test that unslugged headings get a slug from their text."""
        toc = extract_toc(Document(children=[Heading(depth=1, children=[Text("Hello World")])]), max_depth=2)
        assert toc.entries[0].slug == "hello-world"


@pytest.mark.unit
class TestTocToDocument:
    """Test turning a table of contents into a document."""

    def test_nested_link_list(self, deep_document: Document) -> None:
        """Test the nested list of links."""
        document = toc_to_document(extract_toc(deep_document, max_depth=2))

        assert document == Document(
            children=[
                List(
                    tight=True,
                    children=[
                        ListItem(
                            children=[
                                Paragraph(children=[Link(url="#install", children=[Text("Install")])]),
                                List(
                                    tight=True,
                                    children=[
                                        ListItem(
                                            children=[Paragraph(children=[Link(url="#linux", children=[Text("Linux")])])]
                                        )
                                    ],
                                ),
                            ]
                        ),
                        ListItem(children=[Paragraph(children=[Link(url="#usage", children=[Text("Usage")])])]),
                    ],
                )
            ]
        )

    def test_empty(self) -> None:
        """Test that an empty table of contents becomes an empty document."""
        assert toc_to_document(TableOfContents()) == Document()


_DEPTHS = st.lists(st.integers(min_value=1, max_value=6), min_size=1, max_size=12)


def _document_with_depths(depths: list[int]) -> Document:
    return Document(children=[_heading(depth, f"h{index}") for index, depth in enumerate(depths)])


@pytest.mark.unit
@pytest.mark.property
class TestTocProperties:
    """Property-based tests for depth normalization and nesting."""

    @given(_DEPTHS)
    def test_shallowest_heading_is_level_one(self, depths: list[int]) -> None:
        """Test that normalization keeps relative offsets and starts at 1."""
        normalized = normalize_heading_depths(_document_with_depths(depths))
        result = [heading.depth for heading in select_type(normalized, Heading)]

        assert min(result) == 1
        assert result == [depth - min(depths) + 1 for depth in depths]

    @given(_DEPTHS, st.integers(min_value=1, max_value=6))
    def test_entries_follow_max_depth(self, depths: list[int], max_depth: int) -> None:
        """Test that exactly the headings within max_depth are listed, in order."""
        toc = extract_toc(_document_with_depths(depths), max_depth=max_depth)
        expected = [
            (f"h{index}", depth - min(depths) + 1)
            for index, depth in enumerate(depths)
            if depth - min(depths) + 1 <= max_depth
        ]

        assert [(entry.slug, entry.depth) for entry in toc.iter_entries()] == expected

    @given(_DEPTHS)
    def test_children_are_deeper(self, depths: list[int]) -> None:
        """Test that every nested entry is deeper than its parent."""
        toc = extract_toc(_document_with_depths(depths), max_depth=6)

        for entry in toc.iter_entries():
            assert all(child.depth > entry.depth for child in entry.children)
