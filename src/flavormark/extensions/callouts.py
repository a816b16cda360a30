#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/callouts.py
"""Emoji callouts.

A block quote whose first line starts with one of the callout icons becomes
a ``Callout``::

    > 🚧 Careful
    > This endpoint is rate limited.

The rest of the first line is the inline title, the remaining quoted lines
are parsed as the callout body. The icon selects the theme (see
``CALLOUT_ICONS``).

"""

from __future__ import annotations

import re

from flavormark.ast.nodes import Callout, Node
from flavormark.constants import CALLOUT_ICONS
from flavormark.extensions.registry import ParseContext, SerializeContext, SyntaxExtension

_ICON_ALTERNATION = "|".join(re.escape(icon) for icon in sorted(CALLOUT_ICONS, key=len, reverse=True))

CALLOUT_PATTERN = (
    rf"^ {{0,3}}> ?(?P<callout_icon>{_ICON_ALTERNATION})(?P<callout_title>[^\n]*)(?:\n|$)"
    r"(?P<callout_body>(?: {0,3}>[^\n]*(?:\n|$))*)"
)

_QUOTE_PREFIX = re.compile(r"^ {0,3}> ?", re.MULTILINE)


def produce_callout(match: "re.Match[str]", context: ParseContext) -> Node:
    """Build a Callout from a quoted icon line and its continuation lines."""
    icon = match.group("callout_icon")
    title = match.group("callout_title").strip()
    body = _QUOTE_PREFIX.sub("", match.group("callout_body"))

    return Callout(
        theme=CALLOUT_ICONS[icon],
        icon=icon,
        title=context.parse_inline(title) if title else [],
        children=context.parse_blocks(body) if body.strip() else [],
    )


def serialize_callout(node: Node, context: SerializeContext) -> str:
    """Write a Callout as an emoji block quote."""
    assert isinstance(node, Callout)
    title = context.serialize_inline(node.title)
    lines = [f"> {node.icon} {title}".rstrip()]

    body = context.serialize_blocks(node.children)
    for line in body.split("\n") if body else ():
        lines.append(f"> {line}".rstrip())
    return "\n".join(lines)


CALLOUT_EXTENSION = SyntaxExtension(
    name="callout",
    level="block",
    pattern=CALLOUT_PATTERN,
    parse_order=30,
    produce=produce_callout,
    serialize=serialize_callout,
    node_types=("callout",),
)
