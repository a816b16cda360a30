#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/hast/__init__.py
"""Hypertext trees: lowering, raw HTML materialization and serialization."""

from flavormark.hast.html import to_html
from flavormark.hast.lowering import HastLowerer, lower_document
from flavormark.hast.nodes import Comment, Element, HypertextNode, Raw, Root, Text, element, text_content
from flavormark.hast.raw import materialize_raw, parse_fragment

__all__ = [
    "Comment",
    "Element",
    "HypertextNode",
    "Raw",
    "Root",
    "Text",
    "element",
    "text_content",
    "HastLowerer",
    "lower_document",
    "materialize_raw",
    "parse_fragment",
    "to_html",
]
