#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/ast/toc.py
"""Table of contents extraction.

Heading depths are normalized before the hierarchy is built: the shallowest
heading present in a document becomes level 1, whatever its absolute depth.
A document whose sections start at ``###`` therefore gets the same table of
contents as one that starts at ``#``.

Examples
--------
    >>> doc = Document(children=[
    ...     Heading(depth=3, children=[Text("Install")], slug="install"),
    ...     Heading(depth=4, children=[Text("Linux")], slug="linux"),
    ...     Heading(depth=3, children=[Text("Usage")], slug="usage"),
    ... ])
    >>> toc = extract_toc(doc, max_depth=2)
    >>> [(entry.depth, entry.slug, len(entry.children)) for entry in toc.entries]
    [(1, 'install', 1), (1, 'usage', 0)]

"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from flavormark.ast.nodes import Document, Heading, Link, List, ListItem, Node, Paragraph
from flavormark.ast.transforms import iter_nodes, select_type, transform
from flavormark.ast.utils import extract_text
from flavormark.utils.text import slugify


@dataclass
class TocEntry:
    """One heading in a table of contents.

    Parameters
    ----------
    depth : int
        Normalized heading depth; 1 is the shallowest heading in the document
    slug : str
        Anchor identifier of the heading
    content : list of Node
        Inline content of the heading, with links replaced by their text
    children : list of TocEntry
        Entries for the headings nested under this one

    """

    depth: int
    slug: str
    content: list[Node] = field(default_factory=list)
    children: list["TocEntry"] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Plain text of the heading."""
        return extract_text(self.content)


@dataclass
class TableOfContents:
    """Heading hierarchy of a document."""

    entries: list[TocEntry] = field(default_factory=list)

    def iter_entries(self):
        """Yield every entry in document order."""
        stack = list(reversed(self.entries))
        while stack:
            entry = stack.pop()
            yield entry
            stack.extend(reversed(entry.children))


def _unlink(node: Node) -> Node:
    """Replace links in a heading's content with their children."""
    children: list[Node] = []
    for child in node.children:  # type: ignore[attr-defined]
        children.extend(child.children if isinstance(child, Link) else [child])
    return replace(node, children=children)  # type: ignore[type-var]


def normalize_heading_depths(document: Node) -> Node:
    """Shift heading depths so that the shallowest heading has depth 1.

    Parameters
    ----------
    document : Node
        Tree to normalize; it is not modified

    Returns
    -------
    Node
        Tree with renumbered headings, or ``document`` itself when it has none

    """
    headings = select_type(document, Heading)
    if not headings:
        return document
    offset = min(heading.depth for heading in headings) - 1
    if offset == 0:
        return document
    return transform(
        document,
        lambda node: replace(node, depth=node.depth - offset),  # type: ignore[attr-defined]
        predicate=lambda node: isinstance(node, Heading),
    )


def extract_toc(document: Node, max_depth: int) -> Optional[TableOfContents]:
    """Build the table of contents of a document tree.

    Parameters
    ----------
    document : Node
        Parsed document
    max_depth : int
        Deepest normalized level to include. Deeper headings are left out
        without affecting how the remaining ones nest.

    Returns
    -------
    TableOfContents or None
        The heading hierarchy, or None when the document has no headings

    """
    normalized = normalize_heading_depths(document)
    headings = [node for node in iter_nodes(normalized) if isinstance(node, Heading)]
    if not headings:
        return None

    toc = TableOfContents()
    stack: list[TocEntry] = []
    for heading in headings:
        if heading.depth > max_depth:
            continue
        unlinked = transform(heading, _unlink, predicate=lambda node: isinstance(node, Heading))
        entry = TocEntry(
            depth=heading.depth,
            slug=heading.slug or slugify(extract_text(heading)),
            content=list(unlinked.children),  # type: ignore[attr-defined]
        )
        while stack and stack[-1].depth >= entry.depth:
            stack.pop()
        (stack[-1].children if stack else toc.entries).append(entry)
        stack.append(entry)
    return toc


def _entries_to_list(entries: list[TocEntry]) -> List:
    items: list[Node] = []
    for entry in entries:
        children: list[Node] = [Paragraph(children=[Link(url=f"#{entry.slug}", children=list(entry.content))])]
        if entry.children:
            children.append(_entries_to_list(entry.children))
        items.append(ListItem(children=children))
    return List(ordered=False, tight=True, children=items)


def toc_to_document(toc: TableOfContents) -> Document:
    """Turn a table of contents into a document holding a nested list of links."""
    if not toc.entries:
        return Document()
    return Document(children=[_entries_to_list(toc.entries)])


__all__ = [
    "TableOfContents",
    "TocEntry",
    "extract_toc",
    "normalize_heading_depths",
    "toc_to_document",
]
