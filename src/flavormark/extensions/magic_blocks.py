#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/magic_blocks.py
"""Magic blocks: ``[block:TYPE]`` JSON payloads.

A magic block is a typed JSON object between ``[block:TYPE]`` and
``[/block]`` lines::

    [block:callout]
    {
      "type": "info",
      "title": "Heads up",
      "body": "Read *this* first."
    }
    [/block]

Each supported type has a builder that turns the decoded payload into
document nodes. Payloads that are not valid JSON, use an unknown type or
miss a required key raise ``MalformedConstructError``; the parser then keeps
the block as literal text.

Supported types
---------------
code        One code block, or code tabs when ``codes`` has several entries
api-header  Heading (``title``, optional ``level``)
image       Figure with an image and optional caption
callout     Callout with inline title and block body
parameters  Table whose cells are parsed as inline markdown
embed       Embedded resource
html        Custom HTML block

Any payload with ``"sidebar": true`` is wrapped in a ``Pin``.

"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Optional

from flavormark.ast.nodes import (
    Callout,
    CodeBlock,
    CodeTabs,
    CustomHTMLBlock,
    Embed,
    Figure,
    Heading,
    Image,
    Node,
    Pin,
    Table,
    TableCell,
    TableRow,
)
from flavormark.constants import MAGIC_CALLOUT_TYPES
from flavormark.exceptions import MalformedConstructError
from flavormark.extensions.registry import ParseContext, SerializeContext, SyntaxExtension

logger = logging.getLogger(__name__)

MAGIC_BLOCK_PATTERN = (
    r"^\[block:(?P<magic_block_type>[^\]\n]+)\][ \t]*\n"
    r"(?P<magic_block_body>(?:(?!^\[block:)[\s\S])*?)"
    r"^\[/block\][ \t]*(?:\n|$)"
)

_OPEN_TAG = re.compile(r"\[block:")
_CLOSE_TAG = re.compile(r"\[/block\]")
_ALIGNMENTS = ("left", "center", "right")


def normalize_magic_blocks(text: str) -> str:
    """Put every magic block on lines of its own.

    Each opening tag is preceded by a blank line, each closing tag is
    followed by a newline, and ``"\\n\\n "`` is appended so a block at the
    very end of the input is always terminated.

    Parameters
    ----------
    text : str
        Source text

    Returns
    -------
    str
        Normalized text

    """
    text = _OPEN_TAG.sub("\n\n[block:", text)
    text = _CLOSE_TAG.sub("[/block]\n", text)
    return text + "\n\n "


def _malformed(message: str, block_type: str, raw: Optional[str] = None) -> MalformedConstructError:
    return MalformedConstructError(message, construct=f"block:{block_type}", raw=raw)


def _require(data: dict[str, Any], key: str, expected: type | tuple[type, ...], block_type: str) -> Any:
    value = data.get(key)
    if not isinstance(value, expected):
        raise _malformed(f"Magic block '{block_type}' needs a valid '{key}' value", block_type)
    return value


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value if isinstance(value, str) else None


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _code_from_entry(entry: Any) -> CodeBlock:
    if not isinstance(entry, dict):
        raise _malformed("Code entries must be objects", "code")
    code = entry.get("code", "")
    if not isinstance(code, str):
        raise _malformed("Code entry 'code' must be a string", "code")
    return CodeBlock(value=code, language=_optional_str(entry.get("language")), meta=_optional_str(entry.get("name")))


def _build_code(data: dict[str, Any], context: ParseContext) -> Node:
    codes = _require(data, "codes", list, "code")
    if not codes:
        raise _malformed("Magic code block has no code entries", "code")
    blocks = [_code_from_entry(entry) for entry in codes]
    if len(blocks) == 1:
        return blocks[0]
    return CodeTabs(children=list(blocks))


def _build_api_header(data: dict[str, Any], context: ParseContext) -> Node:
    title = _require(data, "title", str, "api-header")
    level = data.get("level", 2)
    if isinstance(level, bool) or not isinstance(level, int):
        level = 2
    return Heading(depth=min(max(level, 1), 6), children=context.parse_inline(title))


def _build_image(data: dict[str, Any], context: ParseContext) -> Node:
    images = _require(data, "images", list, "image")
    if not images or not isinstance(images[0], dict):
        raise _malformed("Magic image block has no images", "image")
    first = images[0]
    source = first.get("image")
    if not isinstance(source, list) or not source or not isinstance(source[0], str):
        raise _malformed("Magic image entry needs an 'image' list starting with the URL", "image")

    alt = source[1] if len(source) > 1 and isinstance(source[1], str) else ""
    image = Image(
        url=source[0],
        alt=alt,
        width=_optional_str(first.get("sizing")),
        align=_optional_str(first.get("align")),
    )
    return Figure(children=[image], caption=_optional_str(first.get("caption")))


def _build_callout(data: dict[str, Any], context: ParseContext) -> Node:
    callout_type = data.get("type")
    if callout_type not in MAGIC_CALLOUT_TYPES:
        raise _malformed(f"Unknown callout type {callout_type!r}", "callout")
    theme, icon = MAGIC_CALLOUT_TYPES[callout_type]
    title = data.get("title") or ""
    body = data.get("body") or ""
    if not isinstance(title, str) or not isinstance(body, str):
        raise _malformed("Callout title and body must be strings", "callout")
    return Callout(
        theme=theme,
        icon=icon,
        title=context.parse_inline(title) if title.strip() else [],
        children=context.parse_blocks(body) if body.strip() else [],
    )


def _build_parameters(data: dict[str, Any], context: ParseContext) -> Node:
    cells = _require(data, "data", dict, "parameters")
    cols = data.get("cols")
    rows = data.get("rows")
    if isinstance(cols, bool) or not isinstance(cols, int) or cols < 1:
        raise _malformed("Parameters block needs a positive 'cols' count", "parameters")
    if isinstance(rows, bool) or not isinstance(rows, int) or rows < 0:
        raise _malformed("Parameters block needs a non-negative 'rows' count", "parameters")

    align_values = data.get("align")
    if not isinstance(align_values, list):
        align_values = []
    alignments = [value if value in _ALIGNMENTS else None for value in align_values[:cols]]
    alignments.extend([None] * (cols - len(alignments)))

    def cell(key: str, column: int) -> TableCell:
        value = cells.get(key, "")
        text = value if isinstance(value, str) else str(value)
        return TableCell(children=context.parse_inline(text) if text else [], alignment=alignments[column])

    table_rows: list[Node] = []
    if any(key.startswith("h-") for key in cells):
        table_rows.append(TableRow(children=[cell(f"h-{col}", col) for col in range(cols)], header=True))
    for row in range(rows):
        table_rows.append(TableRow(children=[cell(f"{row}-{col}", col) for col in range(cols)]))

    return Table(alignments=alignments, children=table_rows)


def _build_embed(data: dict[str, Any], context: ParseContext) -> Node:
    url = _require(data, "url", str, "embed")
    return Embed(
        url=url,
        title=_optional_str(data.get("title")),
        provider=_optional_str(data.get("provider")),
        html=_optional_str(data.get("html")),
        iframe=bool(data.get("iframe", False)),
        width=_optional_str(data.get("width")),
        height=_optional_str(data.get("height")),
    )


def _build_html(data: dict[str, Any], context: ParseContext) -> Node:
    return CustomHTMLBlock(value=_require(data, "html", str, "html"))


_BUILDERS: dict[str, Callable[[dict[str, Any], ParseContext], Node]] = {
    "code": _build_code,
    "api-header": _build_api_header,
    "image": _build_image,
    "callout": _build_callout,
    "parameters": _build_parameters,
    "embed": _build_embed,
    "html": _build_html,
}


def produce_magic_block(match: "re.Match[str]", context: ParseContext) -> Node:
    """Build the node for a matched ``[block:TYPE]`` span."""
    block_type = match.group("magic_block_type").strip()
    body = match.group("magic_block_body")

    builder = _BUILDERS.get(block_type)
    if builder is None:
        raise _malformed(f"Unknown magic block type '{block_type}'", block_type, raw=match.group(0))

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedConstructError(
            f"Magic block '{block_type}' does not contain valid JSON: {e}",
            construct=f"block:{block_type}",
            raw=match.group(0),
            original_error=e,
        ) from e
    if not isinstance(data, dict):
        raise _malformed(f"Magic block '{block_type}' must contain a JSON object", block_type, raw=match.group(0))

    node = builder(data, context)
    if data.get("sidebar") is True:
        return Pin(children=[node])
    return node


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def format_magic_block(block_type: str, data: dict[str, Any]) -> str:
    """Write ``data`` as a ``[block:TYPE]`` magic block.

    Opening and closing tags inside JSON strings have their bracket written
    as a ``\\u005b`` escape, so they can neither end the block early nor be
    split by normalization. JSON decoding restores them.

    """
    payload = json.dumps(data, indent=2, ensure_ascii=False)
    payload = payload.replace("[block:", "\\u005bblock:").replace("[/block]", "\\u005b/block]")
    return f"[block:{block_type}]\n{payload}\n[/block]"


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _code_entry(node: CodeBlock) -> dict[str, Any]:
    return _drop_none({"code": node.value, "language": node.language, "name": node.meta})


def magic_payload(node: Node, context: SerializeContext) -> Optional[tuple[str, dict[str, Any]]]:
    """Return the ``(type, payload)`` magic block form of ``node``.

    Returns None for node types that have no magic block form.

    """
    if isinstance(node, CodeBlock):
        return "code", {"codes": [_code_entry(node)]}
    if isinstance(node, CodeTabs):
        return "code", {"codes": [_code_entry(child) for child in node.children if isinstance(child, CodeBlock)]}
    if isinstance(node, Heading):
        return "api-header", {"title": context.serialize_inline(node.children), "level": node.depth}
    if isinstance(node, Figure):
        image = next((child for child in node.children if isinstance(child, Image)), None)
        if image is None:
            return None
        entry = _drop_none(
            {"image": [image.url, image.alt], "caption": node.caption, "sizing": image.width, "align": image.align}
        )
        return "image", {"images": [entry]}
    if isinstance(node, Callout):
        callout_type = next((name for name, (theme, _icon) in MAGIC_CALLOUT_TYPES.items() if theme == node.theme), None)
        if callout_type is None:
            return None
        return "callout", {
            "type": callout_type,
            "title": context.serialize_inline(node.title),
            "body": context.serialize_blocks(node.children),
        }
    if isinstance(node, Table):
        return "parameters", _table_payload(node, context)
    if isinstance(node, Embed):
        payload = _drop_none(
            {
                "url": node.url,
                "title": node.title,
                "provider": node.provider,
                "html": node.html,
                "width": node.width,
                "height": node.height,
            }
        )
        if node.iframe:
            payload["iframe"] = True
        return "embed", payload
    if isinstance(node, CustomHTMLBlock):
        return "html", {"html": node.value}
    return None


def _table_payload(node: Table, context: SerializeContext) -> dict[str, Any]:
    cells: dict[str, str] = {}
    body_rows = 0
    cols = len(node.alignments)
    for row in node.children:
        if not isinstance(row, TableRow):
            continue
        prefix = "h" if row.header else str(body_rows)
        for col, cell in enumerate(row.children):
            cells[f"{prefix}-{col}"] = context.serialize_inline(cell.children if isinstance(cell, TableCell) else [])
        cols = max(cols, len(row.children))
        if not row.header:
            body_rows += 1

    alignments = list(node.alignments) + [None] * (cols - len(node.alignments))
    return {
        "data": cells,
        "cols": cols,
        "rows": body_rows,
        "align": alignments,
    }


def serialize_magic_block(node: Node, context: SerializeContext) -> str:
    """Serialize a node that only has a magic block form."""
    if isinstance(node, Pin):
        if len(node.children) == 1:
            converted = magic_payload(node.children[0], context)
            if converted is not None:
                block_type, payload = converted
                return format_magic_block(block_type, {**payload, "sidebar": True})
        logger.warning("Pinned content has no magic block form; writing it without the pin")
        return context.serialize_blocks(node.children)

    converted = magic_payload(node, context)
    if converted is None:
        logger.warning(f"Node type '{node.type}' has no magic block form and was omitted")
        return ""
    return format_magic_block(*converted)


MAGIC_BLOCK_EXTENSION = SyntaxExtension(
    name="magic_block",
    level="block",
    pattern=MAGIC_BLOCK_PATTERN,
    parse_order=10,
    produce=produce_magic_block,
    serialize=serialize_magic_block,
    node_types=("figure", "pin", "html-block"),
)
