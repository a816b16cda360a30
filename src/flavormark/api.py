#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/api.py
"""The exported API functions for compiling flavored markdown.

Every entry point returns None for empty or falsy input, accepts options as
a ``CompileOptions`` instance or a mapping, and only raises for invalid
configuration (``InvalidOptionsError`` or ``ExtensionRegistryError``).
Malformed markdown never raises: constructs that fail to parse are kept as
literal text.

Examples
--------
    >>> html("> 📘 Note\\n> Read this first.")  # doctest: +SKIP
    '<blockquote class="callout callout_info" ...'
    >>> plain_text("# Title\\n\\nHello <<user>>", {"variables": {"user": "Ada"}})
    'Title Hello Ada'
    >>> parse("") is None
    True

"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from flavormark.ast.nodes import Document, Node
from flavormark.ast.toc import extract_toc, toc_to_document
from flavormark.extensions.magic_blocks import normalize_magic_blocks
from flavormark.hast.nodes import Root
from flavormark.options.compile import CompileOptions, resolve_options
from flavormark.pipeline import Pipeline
from flavormark.renderers.base import RenderFn
from flavormark.renderers.components import Component, ComponentRenderer
from flavormark.renderers.html import HtmlRenderer
from flavormark.renderers.markdown import MarkdownSerializer
from flavormark.renderers.plaintext import PlainTextRenderer

logger = logging.getLogger(__name__)

Options = Union[CompileOptions, Mapping[str, Any], None]

TOC_COMPONENT = "TableOfContents"


def setup(text: Optional[str], options: Options = None) -> Optional[tuple[str, CompileOptions]]:
    """Resolve options and normalize ``text`` the way the parser will see it.

    Parameters
    ----------
    text : str
        Source text
    options : CompileOptions, mapping or None
        Compile options

    Returns
    -------
    tuple[str, CompileOptions] or None
        Normalized text and resolved options, or None for empty input

    """
    resolved = resolve_options(options)
    if not text:
        return None
    if resolved.normalize:
        text = normalize_magic_blocks(text)
    return text, resolved


def parse(text: Optional[str], options: Options = None) -> Optional[Document]:
    """Parse flavored markdown into a document tree.

    Front-matter is split off into ``Document.frontmatter`` and every heading
    gets a unique slug.

    """
    return Pipeline(options).parse(text or "")


mdast = parse


def hast(text: Optional[str], options: Options = None) -> Optional[Root]:
    """Compile flavored markdown into a sanitized hypertext tree."""
    return Pipeline(options).run(text)


def html(text: Optional[str], options: Options = None) -> Optional[str]:
    """Compile flavored markdown into an HTML string."""
    return Pipeline(options).html(text)


def plain_text(text: Optional[str], options: Options = None) -> Optional[str]:
    """Compile flavored markdown into plain text."""
    return Pipeline(options).plain_text(text)


def render(
    content: Union[str, Document, None],
    options: Options = None,
    components: Optional[Mapping[str, RenderFn]] = None,
) -> Optional[Component]:
    """Compile flavored markdown (or a parsed document) into a component tree.

    Parameters
    ----------
    content : str or Document
        Source text or a document tree
    options : CompileOptions, mapping or None
        Compile options
    components : Mapping[str, RenderFn] or None
        Custom components by name, rendered for ``<prefix>-<name>`` elements

    Returns
    -------
    Component or None
        A ``Fragment`` component holding the rendered document

    """
    pipeline = Pipeline(options, custom_components=components)
    if not content:
        return None
    return pipeline.components(content)


def _toc_document(tree_or_text: Union[str, Node, None], pipeline: Pipeline) -> Optional[Document]:
    document = pipeline.parse(tree_or_text) if isinstance(tree_or_text, str) else tree_or_text
    if not document:
        return None
    toc = extract_toc(document, pipeline.options.max_toc_depth)
    if toc is None:
        return None
    return toc_to_document(toc)


def toc(tree_or_text: Union[str, Node, None], options: Options = None) -> Optional[Component]:
    """Build the table of contents of a document as a component tree.

    Returns
    -------
    Component or None
        A ``TableOfContents`` component wrapping a nested list of links, or
        None when the input is empty or has no headings

    """
    pipeline = Pipeline(options)
    document = _toc_document(tree_or_text, pipeline)
    if document is None:
        return None
    fragment = ComponentRenderer(pipeline.options).render(pipeline.lower(document))
    return Component(TOC_COMPONENT, {}, fragment.children)


def toc_html(tree_or_text: Union[str, Node, None], options: Options = None) -> Optional[str]:
    """Build the table of contents of a document as an HTML list."""
    pipeline = Pipeline(options)
    document = _toc_document(tree_or_text, pipeline)
    if document is None:
        return None
    return HtmlRenderer(pipeline.options).render(pipeline.lower(document))


def serialize(tree: Optional[Node], options: Options = None) -> Optional[str]:
    """Serialize a document tree back to flavored markdown."""
    serializer = MarkdownSerializer(options)
    if not tree:
        return None
    return serializer.serialize(tree)


md = serialize


def ast_to_plain_text(node: Optional[Node], options: Options = None) -> Optional[str]:
    """Render the plain text of a document tree node."""
    pipeline = Pipeline(options)
    if not node:
        return None
    return PlainTextRenderer(pipeline.options).render(pipeline.lower(node))  # type: ignore[arg-type]


__all__ = [
    "Options",
    "TOC_COMPONENT",
    "setup",
    "parse",
    "mdast",
    "hast",
    "html",
    "plain_text",
    "render",
    "toc",
    "toc_html",
    "serialize",
    "md",
    "ast_to_plain_text",
]
