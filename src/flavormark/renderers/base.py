#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/renderers/base.py
"""Base class for hypertext tree renderers.

A renderer walks a sanitized hypertext tree bottom-up. For every element it
looks up a render function by tag name and calls it with the element, the
already rendered children and the render context. Elements without a render
function go through the renderer's ``passthrough``.

Render functions have the signature::

    def render_fn(element: Element, children: list, context: RenderContext) -> Any

Each ``render`` call creates a new ``RenderContext``, so per-render state such
as heading anchor counters never leaks between calls or threads.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Union

from flavormark.hast.nodes import Comment, Element, HypertextNode, Raw, Root, Text
from flavormark.options.compile import CompileOptions, resolve_options
from flavormark.utils.text import make_unique_id, slugify


@dataclass
class RenderContext:
    """State of a single render pass.

    Parameters
    ----------
    options : CompileOptions
        Options the renderer was created with
    anchor_ids : dict[str, int]
        Occurrence counts of heading anchors handed out in this pass

    """

    options: CompileOptions
    anchor_ids: dict[str, int] = field(default_factory=dict)

    def unique_anchor(self, identifier: str) -> str:
        """Return ``identifier`` or a numbered variant unused in this pass."""
        return make_unique_id(identifier or slugify(""), self.anchor_ids)


RenderFn = Callable[[Element, list, RenderContext], Any]


class BaseRenderer(ABC):
    """Abstract base class for hypertext tree renderers.

    Parameters
    ----------
    options : CompileOptions, mapping or None
        Compile options made available to render functions
    renderers : Mapping[str, RenderFn] or None
        Render functions by tag name; they take precedence over the defaults
    use_defaults : bool, default = True
        Start from ``default_renderers()``

    """

    def __init__(
        self,
        options: CompileOptions | Mapping[str, Any] | None = None,
        renderers: Mapping[str, RenderFn] | None = None,
        use_defaults: bool = True,
    ):
        self.options = resolve_options(options)
        self.renderers: dict[str, RenderFn] = dict(self.default_renderers()) if use_defaults else {}
        self.renderers.update(renderers or {})

    @classmethod
    def default_renderers(cls) -> Mapping[str, RenderFn]:
        """Render functions installed unless ``use_defaults`` is False."""
        return {}

    def render(self, tree: Union[Root, HypertextNode]) -> Any:
        """Render a hypertext tree with a fresh render context."""
        context = RenderContext(options=self.options)
        return self._render_node(tree, context)

    def _render_node(self, node: Union[Root, HypertextNode], context: RenderContext) -> Any:
        if isinstance(node, Text):
            return self.render_text(node.value, context)
        if isinstance(node, Raw):
            return self.render_raw(node.value, context)
        if isinstance(node, Comment):
            return self.render_comment(node.value, context)

        children = [self._render_node(child, context) for child in node.children]
        if isinstance(node, Root):
            return self.render_root(children, context)

        render_fn = self.renderers.get(node.tag_name)
        if render_fn is None:
            return self.passthrough(node, children, context)
        return render_fn(node, children, context)

    @abstractmethod
    def render_text(self, value: str, context: RenderContext) -> Any:
        """Render a text node."""

    @abstractmethod
    def render_root(self, children: list, context: RenderContext) -> Any:
        """Combine the rendered top-level nodes into the result."""

    @abstractmethod
    def passthrough(self, element: Element, children: list, context: RenderContext) -> Any:
        """Render an element that has no render function."""

    def render_raw(self, value: str, context: RenderContext) -> Any:
        """Render unmaterialized HTML; as text unless overridden."""
        return self.render_text(value, context)

    def render_comment(self, value: str, context: RenderContext) -> Any:
        """Render an HTML comment; dropped unless overridden."""
        return self.render_text("", context)
