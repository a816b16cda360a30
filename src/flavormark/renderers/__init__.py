#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/renderers/__init__.py
"""Render targets for sanitized hypertext trees, and the reverse compiler.

Available renderers:
- HtmlRenderer: render to an HTML string
- PlainTextRenderer: render to a single line of plain text
- ComponentRenderer: render to a tree of ``Component`` values
- MarkdownSerializer: serialize a document tree back to flavored markdown

Examples
--------
Render a hypertext tree with a custom render function:

    >>> from flavormark.hast import Element, Root, Text
    >>> from flavormark.renderers import HtmlRenderer
    >>> def shout(element, children, context):
    ...     return "".join(children).upper()
    >>> HtmlRenderer(renderers={"em": shout}).render(Root(children=[Element("em", {}, [Text("hi")])]))
    'HI'

"""

from flavormark.renderers.base import BaseRenderer, RenderContext, RenderFn
from flavormark.renderers.components import Component, ComponentRenderer, custom_component_tag
from flavormark.renderers.html import HtmlRenderer, lookup_glossary
from flavormark.renderers.markdown import MarkdownSerializer, serialize_document
from flavormark.renderers.plaintext import PlainTextRenderer

__all__ = [
    "BaseRenderer",
    "RenderContext",
    "RenderFn",
    "Component",
    "ComponentRenderer",
    "custom_component_tag",
    "HtmlRenderer",
    "lookup_glossary",
    "MarkdownSerializer",
    "serialize_document",
    "PlainTextRenderer",
]
