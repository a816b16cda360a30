#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/hast/lowering.py
"""Lower document trees to hypertext trees.

Standard constructs become their usual HTML elements. Custom constructs
become custom elements that carry their attributes as properties, so
renderers can map them to any output:

==================  =========================
document node       hypertext element
==================  =========================
callout             ``rdme-callout``
code-tab-group      ``code-tabs``
embed               ``rdme-embed``
html-block          ``html-block``
pin                 ``rdme-pin``
variable-reference  ``readme-variable``
glossary-reference  ``readme-glossary-item``
figure              ``figure`` > ``img``, ``figcaption``
==================  =========================

Raw HTML becomes ``Raw`` nodes when dangerous HTML is allowed and escaped
text otherwise. Node types without a lowering rule are passed through: their
children are lowered in place, or their text value is kept.

"""

from __future__ import annotations

import logging
from typing import Any

from flavormark.ast.nodes import (
    BlockQuote,
    Callout,
    Code,
    CodeBlock,
    CodeTabs,
    CustomHTMLBlock,
    Document,
    Embed,
    Emphasis,
    Figure,
    GlossaryReference,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Pin,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    ThematicBreak,
    UnknownNode,
    Variable,
    get_node_children,
)
from flavormark.ast.nodes import Text as TextNode
from flavormark.ast.utils import extract_text
from flavormark.ast.visitors import NodeVisitor
from flavormark.constants import (
    CALLOUT_TAG,
    CODE_TABS_TAG,
    EMBED_TAG,
    GLOSSARY_TAG,
    HTML_BLOCK_TAG,
    PIN_TAG,
    VARIABLE_TAG,
)
from flavormark.hast.nodes import Element, HypertextNode, Raw, Root, Text, element
from flavormark.options.compile import CompileOptions, resolve_options

logger = logging.getLogger(__name__)


class HastLowerer(NodeVisitor):
    """Convert a document tree into a hypertext tree.

    Every ``visit_*`` method returns a list of hypertext nodes, so a single
    document node may lower to zero, one or several siblings.

    Parameters
    ----------
    options : CompileOptions or None
        ``allow_dangerous_html`` and ``safe_mode`` are consulted

    """

    def __init__(self, options: CompileOptions | None = None):
        self.options = resolve_options(options)

    def lower(self, document: Node) -> Root:
        """Lower ``document`` and return the hypertext root."""
        if isinstance(document, Document):
            return Root(children=self._lower_all(document.children))
        return Root(children=self.visit(document))

    def _lower_all(self, nodes: list[Node]) -> list[HypertextNode]:
        result: list[HypertextNode] = []
        for node in nodes:
            result.extend(self.visit(node))
        return result

    def _raw_or_text(self, value: str) -> HypertextNode:
        if self.options.allow_dangerous_html:
            return Raw(value=value)
        return Text(value=value)

    def generic_visit(self, node: Node) -> list[HypertextNode]:
        logger.warning(f"No lowering rule for node type '{node.type}'; passing its content through")
        if isinstance(node, UnknownNode) and node.value is not None and not node.children:
            return [Text(value=node.value)]
        value = getattr(node, "value", None)
        if isinstance(value, str) and not node.child_fields:
            return [Text(value=value)]
        return self._lower_all(get_node_children(node))

    # Block nodes

    def visit_root(self, node: Document) -> list[HypertextNode]:
        return self._lower_all(node.children)

    def visit_heading(self, node: Heading) -> list[HypertextNode]:
        return [element(f"h{node.depth}", {"id": node.slug}, self._lower_all(node.children))]

    def visit_paragraph(self, node: Paragraph) -> list[HypertextNode]:
        return [element("p", children=self._lower_all(node.children))]

    def visit_code(self, node: CodeBlock) -> list[HypertextNode]:
        properties = {
            "class": f"language-{node.language}" if node.language else None,
            "lang": node.language,
            "meta": node.meta,
        }
        return [element("pre", children=[element("code", properties, [Text(value=node.value)])])]

    def visit_blockquote(self, node: BlockQuote) -> list[HypertextNode]:
        return [element("blockquote", children=self._lower_all(node.children))]

    def visit_list(self, node: List) -> list[HypertextNode]:
        tag = "ol" if node.ordered else "ul"
        start = str(node.start) if node.ordered and node.start != 1 else None
        items = [self._lower_list_item(item, node.tight) for item in node.children]
        return [element(tag, {"start": start}, items)]

    def _lower_list_item(self, item: Node, tight: bool) -> HypertextNode:
        if not isinstance(item, ListItem):
            return element("li", children=self.visit(item))

        children: list[HypertextNode] = []
        for child in item.children:
            # Paragraphs of tight lists are not wrapped in <p>
            if tight and isinstance(child, Paragraph):
                children.extend(self._lower_all(child.children))
            else:
                children.extend(self.visit(child))

        if item.checked is None:
            return element("li", children=children)

        checkbox = element("input", {"type": "checkbox", "disabled": "", "checked": "" if item.checked else None})
        return element("li", {"class": "task-list-item"}, [checkbox, Text(value=" "), *children])

    def visit_list_item(self, node: ListItem) -> list[HypertextNode]:
        return [self._lower_list_item(node, tight=False)]

    def visit_table(self, node: Table) -> list[HypertextNode]:
        head = [row for row in node.children if isinstance(row, TableRow) and row.header]
        body = [row for row in node.children if not (isinstance(row, TableRow) and row.header)]
        sections: list[HypertextNode] = []
        if head:
            sections.append(element("thead", children=self._lower_all(head)))
        if body:
            sections.append(element("tbody", children=self._lower_all(body)))
        return [element("table", children=sections)]

    def visit_table_row(self, node: TableRow) -> list[HypertextNode]:
        cells = [self._lower_cell(cell, node.header) for cell in node.children]
        return [element("tr", children=cells)]

    def _lower_cell(self, cell: Node, header: bool) -> HypertextNode:
        tag = "th" if header else "td"
        if not isinstance(cell, TableCell):
            return element(tag, children=self.visit(cell))
        return element(tag, {"align": cell.alignment}, self._lower_all(cell.children))

    def visit_table_cell(self, node: TableCell) -> list[HypertextNode]:
        return [self._lower_cell(node, header=False)]

    def visit_thematic_break(self, node: ThematicBreak) -> list[HypertextNode]:
        return [element("hr")]

    def visit_html(self, node: HTMLBlock) -> list[HypertextNode]:
        return [self._raw_or_text(node.value)]

    # Inline nodes

    def visit_text(self, node: TextNode) -> list[HypertextNode]:
        return [Text(value=node.value)]

    def visit_emphasis(self, node: Emphasis) -> list[HypertextNode]:
        return [element("em", children=self._lower_all(node.children))]

    def visit_strong(self, node: Strong) -> list[HypertextNode]:
        return [element("strong", children=self._lower_all(node.children))]

    def visit_strikethrough(self, node: Strikethrough) -> list[HypertextNode]:
        return [element("del", children=self._lower_all(node.children))]

    def visit_inline_code(self, node: Code) -> list[HypertextNode]:
        return [element("code", children=[Text(value=node.value)])]

    def visit_link(self, node: Link) -> list[HypertextNode]:
        return [element("a", {"href": node.url, "title": node.title}, self._lower_all(node.children))]

    def visit_image(self, node: Image) -> list[HypertextNode]:
        return [self._image(node)]

    def _image(self, node: Image) -> Element:
        properties = {"src": node.url, "alt": node.alt, "title": node.title, "width": node.width, "align": node.align}
        return element("img", properties)

    def visit_break(self, node: LineBreak) -> list[HypertextNode]:
        if node.soft:
            return [Text(value="\n")]
        return [element("br"), Text(value="\n")]

    def visit_html_inline(self, node: HTMLInline) -> list[HypertextNode]:
        return [self._raw_or_text(node.value)]

    # Custom constructs

    def visit_callout(self, node: Callout) -> list[HypertextNode]:
        children: list[HypertextNode] = []
        if node.title:
            children.append(element("p", {"class": "callout-heading"}, self._lower_all(node.title)))
        children.extend(self._lower_all(node.children))
        properties = {"theme": node.theme, "icon": node.icon, "title": extract_text(node.title) or None}
        return [element(CALLOUT_TAG, properties, children)]

    def visit_code_tab_group(self, node: CodeTabs) -> list[HypertextNode]:
        return [element(CODE_TABS_TAG, children=self._lower_all(node.children))]

    def visit_embed(self, node: Embed) -> list[HypertextNode]:
        properties: dict[str, Any] = {
            "url": node.url,
            "title": node.title,
            "provider": node.provider,
            "iframe": "" if node.iframe else None,
            "width": node.width,
            "height": node.height,
        }
        children: list[HypertextNode] = []
        if node.html and self.options.allow_dangerous_html:
            children.append(Raw(value=node.html))
        return [element(EMBED_TAG, properties, children)]

    def visit_html_block(self, node: CustomHTMLBlock) -> list[HypertextNode]:
        if self.options.safe_mode:
            return [element(HTML_BLOCK_TAG, {"safe-mode": ""}, [Text(value=node.value)])]
        return [element(HTML_BLOCK_TAG, children=[self._raw_or_text(node.value)])]

    def visit_figure(self, node: Figure) -> list[HypertextNode]:
        children: list[HypertextNode] = []
        for child in node.children:
            children.extend([self._image(child)] if isinstance(child, Image) else self.visit(child))
        if node.caption:
            children.append(element("figcaption", children=[Text(value=node.caption)]))
        return [element("figure", children=children)]

    def visit_pin(self, node: Pin) -> list[HypertextNode]:
        return [element(PIN_TAG, children=self._lower_all(node.children))]

    def visit_variable_reference(self, node: Variable) -> list[HypertextNode]:
        return [element(VARIABLE_TAG, {"name": node.name})]

    def visit_glossary_reference(self, node: GlossaryReference) -> list[HypertextNode]:
        return [element(GLOSSARY_TAG, {"term": node.term}, [Text(value=node.term)])]


def lower_document(document: Node, options: CompileOptions | None = None) -> Root:
    """Lower a document tree to a hypertext tree."""
    return HastLowerer(options).lower(document)
