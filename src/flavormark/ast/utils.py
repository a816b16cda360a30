#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/ast/utils.py
"""Utility functions for working with document trees."""

from __future__ import annotations

from flavormark.ast.nodes import (
    BLOCK_NODE_TYPES,
    Code,
    CodeBlock,
    GlossaryReference,
    Image,
    LineBreak,
    Node,
    Text,
    UnknownNode,
    Variable,
)
from flavormark.ast.transforms import iter_nodes


def _leaf_text(node: Node) -> str | None:
    if isinstance(node, (Text, Code, CodeBlock)):
        return node.value
    if isinstance(node, LineBreak):
        return " " if node.soft else "\n"
    if isinstance(node, Image):
        return node.alt
    if isinstance(node, GlossaryReference):
        return node.term
    if isinstance(node, Variable):
        return node.name
    if isinstance(node, UnknownNode):
        return node.value
    return None


def extract_text(node: Node | list[Node], joiner: str = "") -> str:
    """Extract the plain text of a subtree.

    Text-bearing leaves are concatenated in document order. When ``joiner``
    is given it is placed between the text of consecutive block nodes, so
    paragraphs do not run together.

    Parameters
    ----------
    node : Node or list of Node
        Subtree root, or a list of sibling nodes
    joiner : str, default ""
        Separator inserted between block-level nodes

    Returns
    -------
    str
        Plain text content

    Examples
    --------
        >>> extract_text(Paragraph(children=[Text("Hello "), Strong(children=[Text("world")])]))
        'Hello world'

    """
    roots = node if isinstance(node, list) else [node]
    parts: list[str] = []
    for root in roots:
        for current in iter_nodes(root):
            if joiner and isinstance(current, BLOCK_NODE_TYPES) and parts and parts[-1] != joiner:
                parts.append(joiner)
            text = _leaf_text(current)
            if text:
                parts.append(text)

    result = "".join(parts)
    return result.strip(joiner) if joiner else result
