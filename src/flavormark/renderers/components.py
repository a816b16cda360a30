#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/renderers/components.py
"""Component tree rendering.

``ComponentRenderer`` turns a sanitized hypertext tree into a tree of
``Component`` values, the shape a host UI framework consumes: every element
becomes a component whose type is either a named default component (for the
custom constructs and a handful of standard elements) or the tag name itself.

Callers can add their own components. A component registered as ``Chart``
handles the ``<prefix>-chart`` element, for example ``<x-chart>`` written as
raw HTML in a document.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from flavormark.constants import (
    CALLOUT_TAG,
    CODE_TABS_TAG,
    EMBED_TAG,
    GLOSSARY_TAG,
    HTML_BLOCK_TAG,
    PIN_TAG,
    VARIABLE_TAG,
)
from flavormark.hast.nodes import Element, text_content
from flavormark.options.compile import CompileOptions
from flavormark.renderers.base import BaseRenderer, RenderContext, RenderFn
from flavormark.renderers.html import lookup_glossary
from flavormark.utils.text import slugify

FRAGMENT = "Fragment"


@dataclass(frozen=True)
class Component:
    """One node of a rendered component tree.

    Parameters
    ----------
    type : str
        Component name, or the element tag name for plain elements
    props : dict[str, Any]
        Component properties
    children : tuple
        Child components and text strings

    """

    type: str
    props: dict[str, Any] = field(default_factory=dict, hash=False)
    children: tuple = ()


def custom_component_tag(name: str, prefix: str) -> str:
    """Return the element tag that a custom component named ``name`` handles."""
    return f"{prefix}-{name.lower()}"


def _content(children: list) -> tuple:
    return tuple(child for child in children if child != "")


def render_callout(element: Element, children: list, context: RenderContext) -> Component:
    props = {
        "theme": element.properties.get("theme", "info"),
        "icon": element.properties.get("icon", ""),
        "title": element.properties.get("title"),
    }
    return Component("Callout", props, _content(children))


def render_code_tabs(element: Element, children: list, context: RenderContext) -> Component:
    return Component("CodeTabs", {}, _content(children))


def render_embed(element: Element, children: list, context: RenderContext) -> Component:
    props = dict(element.properties)
    props["iframe"] = "iframe" in element.properties
    return Component("Embed", props, _content(children))


def render_html_block(element: Element, children: list, context: RenderContext) -> Component:
    safe_mode = context.options.safe_mode or "safe-mode" in element.properties
    return Component("HTMLBlock", {"safe_mode": safe_mode}, _content(children))


def render_variable(element: Element, children: list, context: RenderContext) -> Component:
    name = element.properties.get("name", "")
    value = context.options.variables.get(name)
    return Component("Variable", {"name": name, "value": name if value is None else str(value)})


def render_glossary_item(element: Element, children: list, context: RenderContext) -> Component:
    term = element.properties.get("term", "")
    found = lookup_glossary(term, context.options.glossary)
    props = {"term": term, "definition": found[1] if found else None}
    return Component("GlossaryItem", props, _content(children))


def render_heading(element: Element, children: list, context: RenderContext) -> Component:
    anchor = context.unique_anchor(element.properties.get("id") or slugify(text_content(element)))
    props = {**element.properties, "id": anchor, "level": int(element.tag_name[1])}
    return Component("Heading", props, _content(children))


def render_code(element: Element, children: list, context: RenderContext) -> Component:
    code = next((child for child in element.children if isinstance(child, Element) and child.tag_name == "code"), None)
    if code is None:
        return Component("pre", dict(element.properties), _content(children))
    props = {
        "lang": code.properties.get("lang"),
        "meta": code.properties.get("meta"),
        "value": text_content(code),
        "copy_buttons": context.options.copy_buttons,
    }
    return Component("Code", props)


def render_image(element: Element, children: list, context: RenderContext) -> Component:
    return Component("Image", dict(element.properties))


def render_table(element: Element, children: list, context: RenderContext) -> Component:
    return Component("Table", dict(element.properties), _content(children))


def render_anchor(element: Element, children: list, context: RenderContext) -> Component:
    return Component("Anchor", dict(element.properties), _content(children))


def render_pin(element: Element, children: list, context: RenderContext) -> Component:
    return Component("Pin", {}, _content(children))


_DEFAULT_RENDERERS: dict[str, RenderFn] = {
    CALLOUT_TAG: render_callout,
    CODE_TABS_TAG: render_code_tabs,
    EMBED_TAG: render_embed,
    HTML_BLOCK_TAG: render_html_block,
    VARIABLE_TAG: render_variable,
    GLOSSARY_TAG: render_glossary_item,
    PIN_TAG: render_pin,
    "pre": render_code,
    "img": render_image,
    "table": render_table,
    "a": render_anchor,
    **{f"h{level}": render_heading for level in range(1, 7)},
}


class ComponentRenderer(BaseRenderer):
    """Render a hypertext tree to a ``Component`` tree.

    Parameters
    ----------
    options : CompileOptions, mapping or None
        Compile options; ``custom_component_prefix`` names the custom tags
    renderers : Mapping[str, RenderFn] or None
        Render functions by tag name
    components : Mapping[str, RenderFn] or None
        Custom components by name, installed under ``<prefix>-<name>``
    use_defaults : bool, default = True
        Start from the default components

    Examples
    --------
        >>> from flavormark.hast import Element, Root, Text
        >>> ComponentRenderer().render(Root(children=[Element("p", {}, [Text("hi")])]))
        Component(type='Fragment', props={}, children=(Component(type='p', props={}, children=('hi',)),))

    """

    def __init__(
        self,
        options: CompileOptions | Mapping[str, Any] | None = None,
        renderers: Mapping[str, RenderFn] | None = None,
        components: Mapping[str, RenderFn] | None = None,
        use_defaults: bool = True,
    ):
        super().__init__(options, renderers, use_defaults)
        prefix = self.options.custom_component_prefix
        for name, render_fn in (components or {}).items():
            self.renderers[custom_component_tag(name, prefix)] = render_fn

    @classmethod
    def default_renderers(cls) -> Mapping[str, RenderFn]:
        return _DEFAULT_RENDERERS

    def render_text(self, value: str, context: RenderContext) -> str:
        return value

    def render_root(self, children: list, context: RenderContext) -> Component:
        return Component(FRAGMENT, {}, _content(children))

    def passthrough(self, element: Element, children: list, context: RenderContext) -> Component:
        return Component(element.tag_name, dict(element.properties), _content(children))


__all__ = [
    "Component",
    "ComponentRenderer",
    "FRAGMENT",
    "custom_component_tag",
]
