#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/pipeline.py
"""The compile pipeline.

A ``Pipeline`` is assembled once from options, an extension registry, a
sanitization policy and the caller's custom components, and can then
compile any number of documents:

1. front-matter extraction, magic block normalization, parsing with the
   base grammar plus extensions and slug assignment (``parse``);
2. lowering to a hypertext tree, raw HTML materialization and sanitization
   (``lower``);
3. rendering with a render target (``compile``).

Everything configurable is validated when the pipeline is built, so a
pipeline that was constructed successfully never raises on input text.
Pipelines hold no per-document state and can be shared between threads.

Examples
--------
    >>> pipeline = Pipeline({"lineBreakMode": "soft", "copyButtons": False})
    >>> pipeline.plain_text("# Hello\n\nWorld")
    'Hello World'

"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from flavormark.ast.nodes import Document
from flavormark.extensions.registry import ExtensionRegistry, default_registry
from flavormark.hast.lowering import HastLowerer
from flavormark.hast.nodes import Root
from flavormark.hast.raw import materialize_raw
from flavormark.options.compile import CompileOptions, resolve_options
from flavormark.parsers.markdown import MarkdownParser
from flavormark.renderers.base import BaseRenderer, RenderFn
from flavormark.renderers.components import ComponentRenderer, custom_component_tag
from flavormark.renderers.html import HtmlRenderer
from flavormark.renderers.plaintext import PlainTextRenderer
from flavormark.utils.html_sanitizer import SanitizationPolicy, default_policy, sanitize_tree
from flavormark.utils.timing import debug_timer

logger = logging.getLogger(__name__)


class Pipeline:
    """Reusable, validated compile pipeline.

    Parameters
    ----------
    options : CompileOptions, mapping or None
        Compile options
    registry : ExtensionRegistry or None
        Syntax extensions; the built-in constructs when omitted
    policy : SanitizationPolicy or None
        Sanitization policy; the bundled default when omitted
    custom_components : Mapping[str, RenderFn] or None
        Components by name. Their ``<prefix>-<name>`` elements are allowed
        through sanitization and rendered by ``ComponentRenderer``.

    Raises
    ------
    InvalidOptionsError
        If the options are invalid
    ExtensionRegistryError
        If the extensions cannot be combined with the base grammar

    """

    def __init__(
        self,
        options: CompileOptions | Mapping[str, Any] | None = None,
        registry: Optional[ExtensionRegistry] = None,
        policy: Optional[SanitizationPolicy] = None,
        custom_components: Optional[Mapping[str, RenderFn]] = None,
    ):
        self.options = resolve_options(options)
        self.registry = registry if registry is not None else default_registry()
        self.custom_components = dict(custom_components or {})

        prefix = self.options.custom_component_prefix
        component_tags = [custom_component_tag(name, prefix) for name in self.custom_components]
        self.policy = (policy or default_policy()).extended(permissive_tags=component_tags)

        self.parser = MarkdownParser(self.options, self.registry)
        self.lowerer = HastLowerer(self.options)
        logger.debug(f"Pipeline assembled with extensions {sorted(self.parser.registry.names)}")

    def parse(self, text: str) -> Optional[Document]:
        """Parse text into a document tree; None for empty input."""
        if not text:
            return None
        with debug_timer(logger, "Parsing"):
            return self.parser.parse(text)

    def lower(self, document: Document) -> Root:
        """Lower a document tree to a materialized, sanitized hypertext tree."""
        with debug_timer(logger, "Lowering"):
            tree = self.lowerer.lower(document)
        with debug_timer(logger, "Raw HTML materialization"):
            tree = materialize_raw(tree)  # type: ignore[assignment]
        if self.options.sanitize:
            with debug_timer(logger, "Sanitization"):
                tree = sanitize_tree(tree, self.policy)  # type: ignore[assignment]
        return tree

    def run(self, content: Union[str, Document, None]) -> Optional[Root]:
        """Run every stage up to sanitization; None for empty input."""
        document = content if isinstance(content, Document) else self.parse(content or "")
        if document is None:
            return None
        return self.lower(document)

    def compile(self, content: Union[str, Document, None], renderer: Optional[BaseRenderer] = None) -> Any:
        """Compile and render ``content``; None for empty input.

        Parameters
        ----------
        content : str or Document
            Source text or an already parsed document
        renderer : BaseRenderer or None
            Render target; an ``HtmlRenderer`` with the pipeline's options
            when omitted

        """
        tree = self.run(content)
        if tree is None:
            return None
        return (renderer or HtmlRenderer(self.options)).render(tree)

    def html(self, content: Union[str, Document, None]) -> Optional[str]:
        """Compile to an HTML string."""
        return self.compile(content, HtmlRenderer(self.options))

    def plain_text(self, content: Union[str, Document, None]) -> Optional[str]:
        """Compile to plain text."""
        return self.compile(content, PlainTextRenderer(self.options))

    def components(self, content: Union[str, Document, None]) -> Any:
        """Compile to a component tree."""
        return self.compile(content, ComponentRenderer(self.options, components=self.custom_components))


__all__ = ["Pipeline"]
