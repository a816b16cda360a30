#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/renderers/markdown.py
"""Flavored markdown serialization from a document tree.

This module provides the MarkdownSerializer class, the reverse compiler. It
walks a document tree depth-first; for each node it first asks the extension
registry for a serializer registered for the node's type and otherwise falls
back to the base markdown rules implemented here.

Node types nothing knows how to serialize are written as their raw text
value when they have one and omitted (with a warning) otherwise.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

import yaml

from flavormark.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
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
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from flavormark.ast.visitors import NodeVisitor
from flavormark.extensions.code_tabs import format_code_block
from flavormark.extensions.magic_blocks import format_magic_block, magic_payload
from flavormark.extensions.registry import ExtensionRegistry, default_registry
from flavormark.options.compile import CompileOptions, resolve_options

logger = logging.getLogger(__name__)

_ALWAYS_ESCAPE = "\\`*{}[]<>~|&"

# Line starts that would be read as block syntax in a paragraph
_BLOCK_START = re.compile(r"^( {0,3})([#>+=-]|\d{1,9}(?=[.)]))", re.MULTILINE)


class MarkdownSerializer(NodeVisitor):
    """Serialize document trees to flavored markdown text.

    Every ``visit_*`` method returns the markdown for its node. The
    serializer also implements the ``SerializeContext`` protocol, so
    extension serializers can write nested content through it.

    Parameters
    ----------
    options : CompileOptions, mapping or None
        ``options.markdown`` holds the formatting choices
    registry : ExtensionRegistry or None
        Extensions consulted for custom node types; the built-ins by default

    Examples
    --------
        >>> from flavormark.ast.nodes import Document, Heading, Text
        >>> MarkdownSerializer().serialize(Document(children=[Heading(depth=2, children=[Text("Title")])]))
        '## Title'

    """

    def __init__(
        self,
        options: CompileOptions | Mapping[str, Any] | None = None,
        registry: Optional[ExtensionRegistry] = None,
    ):
        self.options = resolve_options(options)
        self.registry = registry if registry is not None else default_registry()
        self._format = self.options.markdown

    def serialize(self, node: Node) -> str:
        """Serialize a document (or any node) to markdown text.

        Parameters
        ----------
        node : Node
            Tree to serialize

        Returns
        -------
        str
            Markdown text without trailing whitespace

        """
        return self._cleanup_output(self.visit(node))

    def visit(self, node: Node) -> str:
        serializer = self.registry.serializer_for(node.type)
        if serializer is not None:
            return serializer(node, self)
        return node.accept(self)

    # SerializeContext

    def serialize_blocks(self, nodes: list[Node]) -> str:
        """Serialize block nodes separated by blank lines."""
        return self._join_blocks(nodes, "\n\n")

    def serialize_inline(self, nodes: list[Node]) -> str:
        """Serialize inline nodes."""
        return "".join(self.visit(node) for node in nodes)

    def _join_blocks(self, nodes: list[Node], separator: str) -> str:
        parts: list[str] = []
        previous: Optional[Node] = None
        alternate = False
        for node in nodes:
            # Adjacent lists of the same kind need a different marker to stay apart
            if isinstance(node, List) and isinstance(previous, List) and node.ordered == previous.ordered:
                alternate = not alternate
                text = self._format_list(node, alternate)
            else:
                alternate = False
                text = self.visit(node)
            if text:
                parts.append(text)
            previous = node
        return separator.join(parts)

    def _cleanup_output(self, text: str) -> str:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return text.rstrip()

    def _escape_markdown(self, text: str) -> str:
        """Escape special markdown characters with context awareness.

        Backslash, backticks, asterisks, braces, brackets, angle brackets,
        tildes, pipes and ampersands are always escaped. Underscores are only
        escaped at word boundaries, so ``snake_case`` stays readable.

        """
        escaped_chars = []
        for i, char in enumerate(text):
            if char in _ALWAYS_ESCAPE:
                escaped_chars.append("\\")
                escaped_chars.append(char)
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                if not (prev_alnum and next_alnum):
                    escaped_chars.append("\\")
                escaped_chars.append(char)
            else:
                escaped_chars.append(char)
        # Keep escaped magic block tags away from block normalization
        return "".join(escaped_chars).replace("\\[block:", "&#91;block:").replace("\\[/block]", "&#91;/block]")

    @staticmethod
    def _escape_block_starts(text: str) -> str:
        def escape(match: "re.Match[str]") -> str:
            indent, marker = match.group(1), match.group(2)
            if marker[0].isdigit():
                return f"{indent}{marker}\\"
            return f"{indent}\\{marker}"

        return _BLOCK_START.sub(escape, text)

    def generic_visit(self, node: Node) -> str:
        value = getattr(node, "value", None)
        if isinstance(value, str):
            logger.warning(f"No serializer for node type '{node.type}'; writing its text value")
            return value
        logger.warning(f"No serializer for node type '{node.type}'; node omitted")
        return ""

    # Block nodes

    def visit_root(self, node: Document) -> str:
        body = self.serialize_blocks(node.children)
        if self._format.emit_frontmatter and node.frontmatter:
            frontmatter = yaml.safe_dump(node.frontmatter, sort_keys=False, allow_unicode=True)
            return f"---\n{frontmatter}---\n\n{body}"
        return body

    def visit_heading(self, node: Heading) -> str:
        content = self.serialize_inline(node.children).replace("\n", " ").strip()
        if content.endswith("#"):
            content = f"{content[:-1]}\\#"
        return f"{'#' * node.depth} {content}".rstrip()

    def visit_paragraph(self, node: Paragraph) -> str:
        return self._escape_block_starts(self.serialize_inline(node.children))

    def visit_code(self, node: CodeBlock) -> str:
        return format_code_block(node, self._format.code_fence_char)

    def visit_blockquote(self, node: BlockQuote) -> str:
        quoted = self.serialize_blocks(node.children)
        return "\n".join(f"> {line}".rstrip() for line in quoted.split("\n")) or ">"

    def visit_list(self, node: List) -> str:
        return self._format_list(node, alternate=False)

    def _format_list(self, node: List, alternate: bool) -> str:
        delimiter = ")" if alternate else "."
        bullet = self._format.bullet_symbol
        if alternate:
            bullet = "-" if bullet != "-" else "*"

        items: list[str] = []
        for index, item in enumerate(node.children):
            marker = f"{node.start + index}{delimiter} " if node.ordered else f"{bullet} "
            items.append(self._format_list_item(item, marker, node.tight))
        return ("\n" if node.tight else "\n\n").join(items)

    def _format_list_item(self, item: Node, marker: str, tight: bool) -> str:
        if not isinstance(item, ListItem):
            return f"{marker}{self.visit(item)}"

        content = self._join_blocks(item.children, "\n" if tight else "\n\n")
        if item.checked is not None:
            content = f"[{'x' if item.checked else ' '}] {content}"

        indent = " " * len(marker)
        lines = content.split("\n")
        indented = "\n".join([lines[0]] + [f"{indent}{line}" if line else "" for line in lines[1:]])
        return f"{marker}{indented}".rstrip()

    def visit_list_item(self, node: ListItem) -> str:
        return self._format_list_item(node, f"{self._format.bullet_symbol} ", tight=True)

    def visit_table(self, node: Table) -> str:
        rows = [row for row in node.children if isinstance(row, TableRow)]
        if not rows or not rows[0].header:
            # Pipe tables need a header row; the parameters block does not
            converted = magic_payload(node, self)
            if converted is None:
                return ""
            return format_magic_block(*converted)

        num_cols = max(len(node.alignments), *(len(row.children) for row in rows))
        rendered_rows = [self._render_cells(row, num_cols) for row in rows]
        lines = ["| " + " | ".join(rendered_rows[0]) + " |", self._alignment_row(node, num_cols)]
        lines.extend("| " + " | ".join(cells) + " |" for cells in rendered_rows[1:])
        return "\n".join(lines)

    def _render_cells(self, row: TableRow, num_cols: int) -> list[str]:
        cells = []
        for cell in row.children:
            content = self.serialize_inline(cell.children if isinstance(cell, TableCell) else [cell])
            cells.append(content.replace("\n", " "))
        cells.extend("" for _ in range(num_cols - len(cells)))
        return cells

    @staticmethod
    def _alignment_row(node: Table, num_cols: int) -> str:
        markers = {"left": ":---", "center": ":---:", "right": "---:"}
        alignments = [markers.get(alignment or "", "---") for alignment in node.alignments[:num_cols]]
        alignments.extend("---" for _ in range(num_cols - len(alignments)))
        return "|" + "|".join(alignments) + "|"

    def visit_thematic_break(self, node: ThematicBreak) -> str:
        return self._format.thematic_break

    def visit_html(self, node: HTMLBlock) -> str:
        return node.value.rstrip("\n")

    # Inline nodes

    def visit_text(self, node: Text) -> str:
        return self._escape_markdown(node.value)

    def visit_emphasis(self, node: Emphasis) -> str:
        symbol = self._format.emphasis_symbol
        return f"{symbol}{self.serialize_inline(node.children)}{symbol}"

    def visit_strong(self, node: Strong) -> str:
        symbol = self._format.emphasis_symbol * 2
        return f"{symbol}{self.serialize_inline(node.children)}{symbol}"

    def visit_strikethrough(self, node: Strikethrough) -> str:
        return f"~~{self.serialize_inline(node.children)}~~"

    def visit_inline_code(self, node: Code) -> str:
        longest = max((len(run) for run in re.findall(r"`+", node.value)), default=0)
        backticks = "`" * (longest + 1)
        value = node.value
        padded = value.startswith(" ") and value.endswith(" ") and value.strip()
        if value.startswith("`") or value.endswith("`") or padded:
            value = f" {value} "
        return f"{backticks}{value}{backticks}"

    def visit_link(self, node: Link) -> str:
        return f"[{self.serialize_inline(node.children)}]({self._destination(node.url, node.title)})"

    def visit_image(self, node: Image) -> str:
        alt = self._escape_markdown(node.alt)
        return f"![{alt}]({self._destination(node.url, node.title)})"

    @staticmethod
    def _destination(url: str, title: Optional[str]) -> str:
        if not url or re.search(r"[\s()<>]", url):
            url = "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
        if title:
            escaped = title.replace("\\", "\\\\").replace('"', '\\"')
            return f'{url} "{escaped}"'
        return url

    def visit_break(self, node: LineBreak) -> str:
        # In hard mode every newline is already a break
        if node.soft or self.options.hard_breaks:
            return "\n"
        return "\\\n"

    def visit_html_inline(self, node: HTMLInline) -> str:
        return node.value


def serialize_document(
    node: Node,
    options: CompileOptions | Mapping[str, Any] | None = None,
    registry: Optional[ExtensionRegistry] = None,
) -> str:
    """Serialize a document tree to flavored markdown."""
    return MarkdownSerializer(options, registry).serialize(node)


__all__ = [
    "MarkdownSerializer",
    "serialize_document",
]
