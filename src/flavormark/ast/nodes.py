#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/ast/nodes.py
"""Document tree node classes.

This module defines the node hierarchy that the parser produces and every
later stage consumes. Each node class is a tagged variant: the class attribute
``node_type`` is the node's ``type`` tag, the dataclass fields are the only
attributes that type may carry, and ``child_fields`` names the fields that
hold child nodes.

Node Hierarchy
--------------
Block-level nodes represent structural document elements:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell
    - ThematicBreak, HTMLBlock

Inline nodes represent text formatting:
    - Text, Emphasis, Strong, Strikethrough, Code
    - Link, Image, LineBreak, HTMLInline

Custom construct nodes:
    - Callout, CodeTabs, Embed, CustomHTMLBlock, Figure, Pin
    - Variable, GlossaryReference

Trees are value objects. Equality is structural and ignores ``position``;
transformations build new nodes instead of mutating shared ones.

"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Literal, Optional

Alignment = Literal["left", "center", "right"]


@dataclass(frozen=True)
class Position:
    """Source location of a node.

    Parameters
    ----------
    start_line : int
        1-based line where the node starts
    start_column : int
        1-based column where the node starts
    end_line : int or None, default = None
        1-based line where the node ends
    end_column : int or None, default = None
        1-based column where the node ends

    """

    start_line: int
    start_column: int
    end_line: Optional[int] = None
    end_column: Optional[int] = None


class Node(ABC):
    """Base class for all document tree nodes.

    Subclasses are dataclasses that set ``node_type`` and, when they hold
    children, ``child_fields``.

    """

    node_type: ClassVar[str] = ""
    child_fields: ClassVar[tuple[str, ...]] = ()
    position: Optional[Position]

    @property
    def type(self) -> str:
        """The node's type tag."""
        return self.node_type

    @property
    def is_leaf(self) -> bool:
        """Whether this node type never holds children."""
        return not self.child_fields

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Dispatches to ``visitor.visit_<type>`` (dashes in the type tag become
        underscores), falling back to ``visitor.generic_visit``.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's visit method

        """
        method = getattr(visitor, f"visit_{self.type.replace('-', '_')}", None)
        if method is None:
            return visitor.generic_visit(self)
        return method(self)


def get_node_children(node: Node) -> list[Node]:
    """Return every child of ``node`` in document order."""
    children: list[Node] = []
    for name in node.child_fields:
        children.extend(getattr(node, name))
    return children


def replace_node_children(node: Node, new_children: dict[str, list[Node]]) -> Node:
    """Return a copy of ``node`` with the given child fields replaced.

    Parameters
    ----------
    node : Node
        Node to copy
    new_children : dict[str, list[Node]]
        Mapping of child field name to the new child list

    Returns
    -------
    Node
        New node; ``node`` itself is left untouched

    """
    for name in new_children:
        if name not in node.child_fields:
            raise ValueError(f"{type(node).__name__} has no child field '{name}'")
    return replace(node, **new_children)  # type: ignore[type-var]


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------


@dataclass
class Document(Node):
    """Root node of a document tree.

    Parameters
    ----------
    children : list of Node, default = empty list
        Top-level block nodes
    frontmatter : dict, default = empty dict
        Metadata split off from a leading YAML or TOML block

    """

    node_type: ClassVar[str] = "root"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    frontmatter: dict[str, Any] = field(default_factory=dict)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Heading(Node):
    """Section heading.

    Parameters
    ----------
    depth : int
        Heading level, 1 through 6
    children : list of Node, default = empty list
        Inline content
    slug : str or None, default = None
        Unique anchor identifier, assigned after parsing

    """

    node_type: ClassVar[str] = "heading"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    depth: int
    children: list[Node] = field(default_factory=list)
    slug: Optional[str] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not 1 <= self.depth <= 6:
            raise ValueError(f"Heading depth must be between 1 and 6, got {self.depth}")


@dataclass
class Paragraph(Node):
    """Paragraph of inline content."""

    node_type: ClassVar[str] = "paragraph"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    value : str
        Code content, without the trailing newline
    language : str or None, default = None
        Language taken from the first word of the info string
    meta : str or None, default = None
        Remainder of the info string; code tabs use it as the tab name

    """

    node_type: ClassVar[str] = "code"

    value: str
    language: Optional[str] = None
    meta: Optional[str] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class BlockQuote(Node):
    """Block quotation."""

    node_type: ClassVar[str] = "blockquote"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class List(Node):
    """Ordered or unordered list.

    Parameters
    ----------
    ordered : bool, default = False
        Whether the list is numbered
    start : int, default = 1
        First number of an ordered list
    tight : bool, default = True
        Whether items are separated without blank lines
    children : list of ListItem, default = empty list
        List items

    """

    node_type: ClassVar[str] = "list"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    ordered: bool = False
    start: int = 1
    tight: bool = True
    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class ListItem(Node):
    """Single list item.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block content of the item
    checked : bool or None, default = None
        Task state; None for items that are not tasks

    """

    node_type: ClassVar[str] = "list-item"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    checked: Optional[bool] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Table(Node):
    """Table made of rows; header rows come first.

    Parameters
    ----------
    alignments : list of {"left", "center", "right", None}, default = empty list
        Per-column alignment
    children : list of TableRow, default = empty list
        Header and body rows

    """

    node_type: ClassVar[str] = "table"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    alignments: list[Optional[Alignment]] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class TableRow(Node):
    """Table row; ``header`` marks rows from the table head."""

    node_type: ClassVar[str] = "table-row"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    header: bool = False
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class TableCell(Node):
    """Table cell holding inline content."""

    node_type: ClassVar[str] = "table-cell"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    alignment: Optional[Alignment] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class ThematicBreak(Node):
    """Horizontal rule."""

    node_type: ClassVar[str] = "thematic-break"

    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block, kept verbatim until lowering."""

    node_type: ClassVar[str] = "html"

    value: str
    position: Optional[Position] = field(default=None, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------


@dataclass
class Text(Node):
    """Plain text."""

    node_type: ClassVar[str] = "text"

    value: str
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Emphasis(Node):
    """Emphasized (italic) text."""

    node_type: ClassVar[str] = "emphasis"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Strong(Node):
    """Strongly emphasized (bold) text."""

    node_type: ClassVar[str] = "strong"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Strikethrough(Node):
    """Struck-through text."""

    node_type: ClassVar[str] = "strikethrough"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Code(Node):
    """Inline code span."""

    node_type: ClassVar[str] = "inline-code"

    value: str
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Link(Node):
    """Hyperlink.

    Parameters
    ----------
    url : str
        Link target
    children : list of Node, default = empty list
        Link text
    title : str or None, default = None
        Link title

    """

    node_type: ClassVar[str] = "link"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    url: str
    children: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Image(Node):
    """Image.

    Parameters
    ----------
    url : str
        Image source
    alt : str, default = ""
        Alternative text
    title : str or None, default = None
        Image title
    width : str or None, default = None
        Display width, from magic image blocks
    align : str or None, default = None
        Display alignment, from magic image blocks

    """

    node_type: ClassVar[str] = "image"

    url: str
    alt: str = ""
    title: Optional[str] = None
    width: Optional[str] = None
    align: Optional[str] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class LineBreak(Node):
    """Line break; ``soft`` breaks render as whitespace."""

    node_type: ClassVar[str] = "break"

    soft: bool = False
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class HTMLInline(Node):
    """Inline raw HTML fragment."""

    node_type: ClassVar[str] = "html-inline"

    value: str
    position: Optional[Position] = field(default=None, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Custom construct nodes
# ---------------------------------------------------------------------------


@dataclass
class Callout(Node):
    """Callout box.

    Parameters
    ----------
    theme : str
        One of "info", "warn", "okay", "error"
    icon : str
        Emoji that introduced the callout
    title : list of Node, default = empty list
        Inline title content; empty when the callout has no title
    children : list of Node, default = empty list
        Block content of the callout body

    """

    node_type: ClassVar[str] = "callout"
    child_fields: ClassVar[tuple[str, ...]] = ("title", "children")

    theme: str
    icon: str
    title: list[Node] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class CodeTabs(Node):
    """Group of code blocks shown as tabs; each child is a CodeBlock."""

    node_type: ClassVar[str] = "code-tab-group"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Embed(Node):
    """Embedded external resource.

    Parameters
    ----------
    url : str
        Resource address
    title : str or None, default = None
        Display title
    provider : str or None, default = None
        Provider host name
    html : str or None, default = None
        Provider supplied embed markup
    iframe : bool, default = False
        Whether the resource is shown in an iframe
    width : str or None, default = None
        Frame width
    height : str or None, default = None
        Frame height

    """

    node_type: ClassVar[str] = "embed"

    url: str
    title: Optional[str] = None
    provider: Optional[str] = None
    html: Optional[str] = None
    iframe: bool = False
    width: Optional[str] = None
    height: Optional[str] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class CustomHTMLBlock(Node):
    """Author-supplied HTML block from a magic block."""

    node_type: ClassVar[str] = "html-block"

    value: str
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Figure(Node):
    """Image with an optional caption; the single child is an Image."""

    node_type: ClassVar[str] = "figure"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    caption: Optional[str] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Pin(Node):
    """Content pinned to the page sidebar."""

    node_type: ClassVar[str] = "pin"
    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class Variable(Node):
    """Reference to a variable substituted at render time."""

    node_type: ClassVar[str] = "variable-reference"

    name: str
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class GlossaryReference(Node):
    """Reference to a glossary term."""

    node_type: ClassVar[str] = "glossary-reference"

    term: str
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass
class UnknownNode(Node):
    """Node of a type this library does not define.

    Produced when deserializing trees that contain foreign node types, so
    renderers and the reverse compiler can apply their fallbacks.

    Parameters
    ----------
    raw_type : str
        The foreign type tag
    value : str or None, default = None
        Raw text payload, if any
    children : list of Node, default = empty list
        Child nodes, if any

    """

    child_fields: ClassVar[tuple[str, ...]] = ("children",)

    raw_type: str
    value: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    position: Optional[Position] = field(default=None, compare=False, repr=False)

    @property
    def type(self) -> str:
        """The foreign type tag."""
        return self.raw_type


BLOCK_NODE_TYPES: tuple[type[Node], ...] = (
    Document,
    Heading,
    Paragraph,
    CodeBlock,
    BlockQuote,
    List,
    ListItem,
    Table,
    TableRow,
    TableCell,
    ThematicBreak,
    HTMLBlock,
    Callout,
    CodeTabs,
    Embed,
    CustomHTMLBlock,
    Figure,
    Pin,
)

INLINE_NODE_TYPES: tuple[type[Node], ...] = (
    Text,
    Emphasis,
    Strong,
    Strikethrough,
    Code,
    Link,
    Image,
    LineBreak,
    HTMLInline,
    Variable,
    GlossaryReference,
)

# type tag -> node class
NODE_CLASSES: dict[str, type[Node]] = {cls.node_type: cls for cls in BLOCK_NODE_TYPES + INLINE_NODE_TYPES}

__all__ = [
    "Alignment",
    "Position",
    "Node",
    "get_node_children",
    "replace_node_children",
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
]
