#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/hast/raw.py
"""Materialize raw HTML fragments into hypertext nodes.

A raw fragment is often incomplete on its own: ``<div>`` and ``</div>`` can
arrive as separate inline tokens with markdown content between them. The
fragments of one parent are therefore parsed together: the parent's children
are serialized (raw fragments verbatim, everything else as markup) and the
result is parsed once with BeautifulSoup, so that open and close tags from
different fragments pair up.

"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Union

from bs4 import BeautifulSoup
from bs4.element import Comment as SoupComment
from bs4.element import NavigableString, PreformattedString, Tag

from flavormark.hast.html import to_html
from flavormark.hast.nodes import Comment, Element, HypertextNode, Raw, Root, Text

logger = logging.getLogger(__name__)


def parse_fragment(markup: str) -> list[HypertextNode]:
    """Parse an HTML fragment into hypertext nodes.

    Declarations, processing instructions and CDATA sections are dropped.

    """
    soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
    return _convert_children(soup)


def _convert_children(tag: Tag) -> list[HypertextNode]:
    nodes: list[HypertextNode] = []
    for child in tag.children:
        if isinstance(child, SoupComment):
            nodes.append(Comment(value=str(child)))
        elif isinstance(child, PreformattedString):
            logger.debug(f"Dropping {type(child).__name__} from raw HTML")
        elif isinstance(child, NavigableString):
            nodes.append(Text(value=str(child)))
        elif isinstance(child, Tag):
            properties = {
                name: value if isinstance(value, str) else " ".join(value) for name, value in child.attrs.items()
            }
            nodes.append(Element(tag_name=child.name, properties=properties, children=_convert_children(child)))
    return nodes


def materialize_raw(node: Union[Root, HypertextNode]) -> Union[Root, HypertextNode]:
    """Replace every ``Raw`` node in a tree with parsed markup.

    Parameters
    ----------
    node : Root or HypertextNode
        Tree to process; it is not modified

    Returns
    -------
    Root or HypertextNode
        Tree without ``Raw`` nodes

    """
    if isinstance(node, Raw):
        return Root(children=parse_fragment(node.value))
    if not isinstance(node, (Root, Element)):
        return node

    children = [
        child if isinstance(child, Raw) else materialize_raw(child)  # type: ignore[misc]
        for child in node.children
    ]
    if any(isinstance(child, Raw) for child in children):
        children = parse_fragment("".join(to_html(child) for child in children))
    return replace(node, children=children)
