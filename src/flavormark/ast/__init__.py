#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/ast/__init__.py
"""Document tree model for flavored markdown.

This package holds the node classes of the document tree together with the
utilities that walk it: a visitor base class, generic select and transform
primitives, JSON-compatible serialization and table of contents extraction.

Examples
--------
    >>> from flavormark.ast import Document, Heading, Paragraph, Text, select_type
    >>> doc = Document(children=[
    ...     Heading(depth=1, children=[Text("Title")]),
    ...     Paragraph(children=[Text("Body")]),
    ... ])
    >>> [h.depth for h in select_type(doc, Heading)]
    [1]

"""

from flavormark.ast.nodes import (
    BLOCK_NODE_TYPES,
    INLINE_NODE_TYPES,
    NODE_CLASSES,
    BlockQuote,
    Callout,
    Code,
    CodeBlock,
    CodeTabs,
    CustomHTMLBlock,
    Document,
    Embed,
    Emphasis,
    Figure,
    GlossaryReference,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Pin,
    Position,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    UnknownNode,
    Variable,
    get_node_children,
    replace_node_children,
)
from flavormark.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from flavormark.ast.toc import TableOfContents, TocEntry, extract_toc, normalize_heading_depths, toc_to_document
from flavormark.ast.transforms import iter_nodes, select_all, select_type, transform
from flavormark.ast.utils import extract_text
from flavormark.ast.visitors import NodeVisitor

__all__ = [
    # Nodes
    "Node",
    "Position",
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "HTMLBlock",
    "Text",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    "HTMLInline",
    "Callout",
    "CodeTabs",
    "Embed",
    "CustomHTMLBlock",
    "Figure",
    "Pin",
    "Variable",
    "GlossaryReference",
    "UnknownNode",
    "BLOCK_NODE_TYPES",
    "INLINE_NODE_TYPES",
    "NODE_CLASSES",
    "get_node_children",
    "replace_node_children",
    # Traversal
    "NodeVisitor",
    "iter_nodes",
    "select_all",
    "select_type",
    "transform",
    "extract_text",
    # Serialization
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
    # Table of contents
    "TableOfContents",
    "TocEntry",
    "extract_toc",
    "normalize_heading_depths",
    "toc_to_document",
]
