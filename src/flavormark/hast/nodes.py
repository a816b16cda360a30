#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/hast/nodes.py
"""Hypertext tree nodes.

The hypertext tree is the markup-ready form of a document: generic elements
with string properties. Custom constructs appear as custom elements
(``rdme-callout``, ``code-tabs`` and so on) that renderers map to their
output.

``Raw`` holds unparsed HTML. It only exists between lowering and
materialization; a materialized tree contains no ``Raw`` nodes.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class Text:
    """Text content."""

    value: str


@dataclass
class Raw:
    """Unparsed HTML fragment."""

    value: str


@dataclass
class Comment:
    """HTML comment."""

    value: str


@dataclass
class Element:
    """Markup element.

    Parameters
    ----------
    tag_name : str
        Lowercase tag name
    properties : dict[str, str], default = empty dict
        Attribute name to value; boolean attributes hold ``""``
    children : list of HypertextNode, default = empty list
        Child nodes

    """

    tag_name: str
    properties: dict[str, str] = field(default_factory=dict)
    children: list["HypertextNode"] = field(default_factory=list)


@dataclass
class Root:
    """Root of a hypertext tree."""

    children: list["HypertextNode"] = field(default_factory=list)


HypertextNode = Union[Element, Text, Raw, Comment]
ParentNode = Union[Root, Element]


def element(tag_name: str, properties: dict[str, str] | None = None, children: list | None = None) -> Element:
    """Build an Element, dropping properties whose value is None."""
    props = {name: value for name, value in (properties or {}).items() if value is not None}
    return Element(tag_name=tag_name, properties=props, children=list(children or []))


def text_content(node: Union[Root, HypertextNode]) -> str:
    """Return the concatenated text of a subtree."""
    if isinstance(node, Text):
        return node.value
    if isinstance(node, (Raw, Comment)):
        return ""
    return "".join(text_content(child) for child in node.children)


__all__ = [
    "Text",
    "Raw",
    "Comment",
    "Element",
    "Root",
    "HypertextNode",
    "ParentNode",
    "element",
    "text_content",
]
