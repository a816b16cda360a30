#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/hast/html.py
"""Serialize hypertext trees to HTML strings."""

from __future__ import annotations

import html
from typing import Mapping, Union

from flavormark.constants import VOID_ELEMENTS
from flavormark.hast.nodes import Comment, Element, HypertextNode, Raw, Root, Text


def format_attributes(properties: Mapping[str, str]) -> str:
    """Format properties as an attribute string with a leading space."""
    parts = []
    for name, value in properties.items():
        parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


def start_tag(tag_name: str, properties: Mapping[str, str]) -> str:
    return f"<{tag_name}{format_attributes(properties)}>"


def wrap(tag_name: str, properties: Mapping[str, str], inner: str) -> str:
    """Return ``inner`` wrapped in a start and end tag."""
    if tag_name in VOID_ELEMENTS:
        return start_tag(tag_name, properties)
    return f"{start_tag(tag_name, properties)}{inner}</{tag_name}>"


def to_html(node: Union[Root, HypertextNode]) -> str:
    """Serialize a hypertext node.

    Text is escaped, ``Raw`` is written verbatim and comments keep their
    delimiters.

    """
    if isinstance(node, Text):
        return html.escape(node.value, quote=False)
    if isinstance(node, Raw):
        return node.value
    if isinstance(node, Comment):
        return f"<!--{node.value}-->"
    inner = "".join(to_html(child) for child in node.children)
    if isinstance(node, Root):
        return inner
    assert isinstance(node, Element)
    return wrap(node.tag_name, node.properties, inner)
