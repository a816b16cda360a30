#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/renderers/html.py
"""HTML string renderer.

Standard elements are written as they are. The custom elements produced by
lowering get default render functions:

- callouts become themed block quotes;
- code tabs get a tab strip;
- embeds become a link card, or the provider's frame when one was supplied;
- custom HTML blocks are wrapped in a div, or shown as escaped source in
  safe mode;
- variables are substituted from ``CompileOptions.variables``;
- glossary items get a tooltip with their definition;
- headings get a unique id and an anchor link;
- code blocks get a copy button.

"""

from __future__ import annotations

import html
from typing import Mapping

from flavormark.constants import (
    CALLOUT_TAG,
    CODE_TABS_TAG,
    EMBED_TAG,
    GLOSSARY_TAG,
    HTML_BLOCK_TAG,
    PIN_TAG,
    VARIABLE_TAG,
)
from flavormark.hast.html import wrap
from flavormark.hast.nodes import Element, text_content
from flavormark.renderers.base import BaseRenderer, RenderContext, RenderFn
from flavormark.utils.text import slugify


def lookup_glossary(term: str, glossary: Mapping[str, str]) -> tuple[str, str] | None:
    """Find ``term`` in ``glossary`` ignoring case; return ``(term, definition)``."""
    if term in glossary:
        return term, glossary[term]
    folded = term.casefold()
    for candidate, definition in glossary.items():
        if candidate.casefold() == folded:
            return candidate, definition
    return None


def _escape(value: str) -> str:
    return html.escape(value, quote=True)


def render_callout(element: Element, children: list, context: RenderContext) -> str:
    theme = element.properties.get("theme", "info")
    icon = element.properties.get("icon", "")
    inner = "".join(children)
    return (
        f'<blockquote class="callout callout_{_escape(theme)}" theme="{_escape(icon)}">'
        f'<span class="callout-icon">{_escape(icon)}</span>{inner}</blockquote>'
    )


def render_code_tabs(element: Element, children: list, context: RenderContext) -> str:
    buttons = []
    for index, child in enumerate(element.children):
        code = child.children[0] if isinstance(child, Element) and child.children else None
        properties = code.properties if isinstance(code, Element) else {}
        label = properties.get("meta") or properties.get("lang") or f"Tab {index + 1}"
        active = ' class="CodeTabs_active"' if index == 0 else ""
        buttons.append(f'<button type="button"{active}>{_escape(label)}</button>')
    return (
        '<div class="CodeTabs">'
        f'<div class="CodeTabs-toolbar">{"".join(buttons)}</div>'
        f'<div class="CodeTabs-inner">{"".join(children)}</div>'
        "</div>"
    )


def render_embed(element: Element, children: list, context: RenderContext) -> str:
    url = element.properties.get("url", "")
    title = element.properties.get("title") or url
    inner = "".join(children)
    if inner:
        return f'<div class="embed embed_hasFrame">{inner}</div>'
    provider = element.properties.get("provider")
    provider_html = f'<span class="embed-provider">{_escape(provider)}</span>' if provider else ""
    return (
        f'<a class="embed embed_hasTitle" href="{_escape(url)}" target="_blank" rel="noopener noreferrer">'
        f'<b class="embed-title">{_escape(title)}</b>{provider_html}</a>'
    )


def render_html_block(element: Element, children: list, context: RenderContext) -> str:
    inner = "".join(children)
    if context.options.safe_mode or "safe-mode" in element.properties:
        return f'<pre class="html-unsafe"><code>{inner}</code></pre>'
    return f'<div class="rdmd-html">{inner}</div>'


def render_variable(element: Element, children: list, context: RenderContext) -> str:
    name = element.properties.get("name", "")
    value = context.options.variables.get(name)
    if value is None:
        return f'<span class="variable variable_missing">{_escape(name)}</span>'
    return f'<span class="variable">{_escape(str(value))}</span>'


def render_glossary_item(element: Element, children: list, context: RenderContext) -> str:
    term = element.properties.get("term", "")
    found = lookup_glossary(term, context.options.glossary)
    if found is None:
        return f"<span>{_escape(term)}</span>"
    matched, definition = found
    return (
        f'<span class="GlossaryItem-trigger" tabindex="0">{_escape(term)}'
        f'<span class="GlossaryItem-tooltip" role="tooltip">'
        f"<strong class=\"GlossaryItem-term\">{_escape(matched)}</strong> - {_escape(definition)}"
        "</span></span>"
    )


def render_heading(element: Element, children: list, context: RenderContext) -> str:
    anchor = context.unique_anchor(element.properties.get("id") or slugify(text_content(element)))
    properties = {**element.properties, "id": anchor}
    link = f'<a class="heading-anchor" href="#{_escape(anchor)}" aria-label="Permalink"></a>'
    return wrap(element.tag_name, properties, f"{link}{''.join(children)}")


def render_pre(element: Element, children: list, context: RenderContext) -> str:
    inner = "".join(children)
    has_code = any(isinstance(child, Element) and child.tag_name == "code" for child in element.children)
    if context.options.copy_buttons and has_code:
        inner += '<button class="rdmd-code-copy" aria-label="Copy Code" type="button"></button>'
    return wrap("pre", element.properties, inner)


def render_table(element: Element, children: list, context: RenderContext) -> str:
    table = wrap("table", element.properties, "".join(children))
    return f'<div class="rdmd-table"><div class="rdmd-table-inner">{table}</div></div>'


def render_pin(element: Element, children: list, context: RenderContext) -> str:
    return f'<div class="pin">{"".join(children)}</div>'


_DEFAULT_RENDERERS: dict[str, RenderFn] = {
    CALLOUT_TAG: render_callout,
    CODE_TABS_TAG: render_code_tabs,
    EMBED_TAG: render_embed,
    HTML_BLOCK_TAG: render_html_block,
    VARIABLE_TAG: render_variable,
    GLOSSARY_TAG: render_glossary_item,
    PIN_TAG: render_pin,
    "pre": render_pre,
    "table": render_table,
    **{f"h{level}": render_heading for level in range(1, 7)},
}


class HtmlRenderer(BaseRenderer):
    """Render a hypertext tree to an HTML string.

    Examples
    --------
        >>> from flavormark.hast import Element, Root, Text
        >>> HtmlRenderer().render(Root(children=[Element("p", {}, [Text("a < b")])]))
        '<p>a &lt; b</p>'

    """

    @classmethod
    def default_renderers(cls) -> Mapping[str, RenderFn]:
        return _DEFAULT_RENDERERS

    def render_text(self, value: str, context: RenderContext) -> str:
        return html.escape(value, quote=False)

    def render_raw(self, value: str, context: RenderContext) -> str:
        return value

    def render_comment(self, value: str, context: RenderContext) -> str:
        return f"<!--{value}-->"

    def render_root(self, children: list, context: RenderContext) -> str:
        return "".join(children)

    def passthrough(self, element: Element, children: list, context: RenderContext) -> str:
        return wrap(element.tag_name, element.properties, "".join(children))


__all__ = [
    "HtmlRenderer",
    "lookup_glossary",
]
