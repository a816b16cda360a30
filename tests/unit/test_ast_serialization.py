#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for JSON serialization of document trees."""
import json
import logging

import pytest

from flavormark import parse
from flavormark.ast import (
    Document,
    Heading,
    Paragraph,
    Position,
    Text,
    UnknownNode,
    ast_to_dict,
    ast_to_json,
    dict_to_ast,
    json_to_ast,
)


@pytest.mark.unit
class TestAstToDict:
    """Test conversion of trees to plain data."""

    def test_heading(self) -> None:
        """Test that attributes and child fields become keys."""
        data = ast_to_dict(Heading(depth=2, children=[Text("Title")], slug="title"))

        assert data == {
            "type": "heading",
            "depth": 2,
            "children": [{"type": "text", "value": "Title"}],
            "slug": "title",
        }

    def test_position_only_when_present(self) -> None:
        """Test that positions are written only when set."""
        assert "position" not in ast_to_dict(Text("a"))
        assert ast_to_dict(Text("a", position=Position(1, 2)))["position"] == {
            "start_line": 1,
            "start_column": 2,
            "end_line": None,
            "end_column": None,
        }

    def test_unknown_node_uses_foreign_type(self) -> None:
        """Test that unknown nodes keep their foreign type tag."""
        data = ast_to_dict(UnknownNode(raw_type="mdx-jsx", value="<Foo />"))
        assert data == {"type": "mdx-jsx", "value": "<Foo />", "children": []}

    def test_json_is_valid(self, sample_markdown: str) -> None:
        """Test that a parsed document serializes to valid JSON."""
        data = json.loads(ast_to_json(parse(sample_markdown)))
        assert data["type"] == "root"
        assert data["frontmatter"] == {"title": "Getting Started"}


@pytest.mark.unit
class TestDictToAst:
    """Test reconstruction of trees from plain data."""

    def test_round_trip_parsed_document(self, sample_markdown: str) -> None:
        """Test that a parsed document survives conversion unchanged."""
        document = parse(sample_markdown)
        assert dict_to_ast(ast_to_dict(document)) == document
        assert json_to_ast(ast_to_json(document)) == document

    def test_unknown_type_becomes_unknown_node(self, caplog) -> None:
        """Test that foreign node types are preserved as UnknownNode."""
        with caplog.at_level(logging.WARNING):
            node = dict_to_ast({"type": "mdx-jsx", "value": "<Foo />", "children": [{"type": "text", "value": "x"}]})

        assert isinstance(node, UnknownNode)
        assert node.raw_type == "mdx-jsx"
        assert node.children == [Text("x")]
        assert "mdx-jsx" in caplog.text

    def test_unknown_attribute_ignored(self, caplog) -> None:
        """Test that unknown attributes are dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            node = dict_to_ast({"type": "text", "value": "a", "color": "red"})

        assert node == Text("a")
        assert "color" in caplog.text

    def test_missing_type(self) -> None:
        """Test that data without a type is rejected."""
        with pytest.raises(ValueError, match="type"):
            dict_to_ast({"value": "a"})

    def test_missing_required_attribute(self) -> None:
        """Test that required attributes must be present."""
        with pytest.raises(ValueError, match="depth"):
            dict_to_ast({"type": "heading", "children": []})

    def test_invalid_value(self) -> None:
        """Test that values rejected by the node type raise ValueError."""
        with pytest.raises(ValueError):
            dict_to_ast({"type": "heading", "depth": 9})

    def test_malformed_position_ignored(self) -> None:
        """Test that unusable position data is dropped."""
        node = dict_to_ast({"type": "text", "value": "a", "position": {"start_line": "x"}})
        assert node.position is None

    def test_nested_document(self) -> None:
        """Test rebuilding nested children."""
        data = {
            "type": "root",
            "children": [{"type": "paragraph", "children": [{"type": "text", "value": "Body"}]}],
        }
        assert dict_to_ast(data) == Document(children=[Paragraph(children=[Text("Body")])])

    def test_invalid_json(self) -> None:
        """Test that malformed JSON is reported as ValueError."""
        with pytest.raises(ValueError, match="Invalid JSON"):
            json_to_ast("{not json")

    def test_json_must_be_object(self) -> None:
        """Test that top-level JSON arrays are rejected."""
        with pytest.raises(ValueError):
            json_to_ast("[]")
