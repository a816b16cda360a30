#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/renderers/plaintext.py
"""Plain text rendering from a hypertext tree.

The text leaves of the tree are concatenated. Block elements are separated
by a single space, so a rendered document is one line of text suitable for
search indexing or summaries. Custom constructs render to their readable
content: variables to their value, glossary items to their term and embeds
to their title.

"""

from __future__ import annotations

import re
from typing import Mapping

from flavormark.constants import EMBED_TAG, VARIABLE_TAG
from flavormark.hast.nodes import Element
from flavormark.renderers.base import BaseRenderer, RenderContext, RenderFn

BLOCK_TAGS = frozenset(
    {
        "address",
        "blockquote",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "figcaption",
        "figure",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "li",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
        "rdme-callout",
        "code-tabs",
        "html-block",
        "rdme-pin",
    }
)

_LINE_SEPARATOR = re.compile(r"\s*\n\s*")


def render_variable(element: Element, children: list, context: RenderContext) -> str:
    name = element.properties.get("name", "")
    value = context.options.variables.get(name)
    return name if value is None else str(value)


def render_embed(element: Element, children: list, context: RenderContext) -> str:
    title = element.properties.get("title") or element.properties.get("url", "")
    return f"\n{title}\n"


def render_nothing(element: Element, children: list, context: RenderContext) -> str:
    return ""


_DEFAULT_RENDERERS: dict[str, RenderFn] = {
    VARIABLE_TAG: render_variable,
    EMBED_TAG: render_embed,
    "img": render_nothing,
    "input": render_nothing,
    "button": render_nothing,
}


class PlainTextRenderer(BaseRenderer):
    """Render a hypertext tree to plain text.

    Examples
    --------
        >>> from flavormark.hast import Element, Root, Text
        >>> tree = Root(children=[
        ...     Element("h1", {}, [Text("Title")]),
        ...     Element("p", {}, [Text("Some "), Element("em", {}, [Text("text")])]),
        ... ])
        >>> PlainTextRenderer().render(tree)
        'Title Some text'

    """

    @classmethod
    def default_renderers(cls) -> Mapping[str, RenderFn]:
        return _DEFAULT_RENDERERS

    def render_text(self, value: str, context: RenderContext) -> str:
        return value

    def render_root(self, children: list, context: RenderContext) -> str:
        return _LINE_SEPARATOR.sub(" ", "".join(children)).strip()

    def passthrough(self, element: Element, children: list, context: RenderContext) -> str:
        inner = "".join(children)
        if element.tag_name in BLOCK_TAGS:
            return f"\n{inner}\n"
        return inner


__all__ = [
    "BLOCK_TAGS",
    "PlainTextRenderer",
]
