#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/embeds.py
"""Link-syntax embeds.

A link alone on its line whose title is ``@embed`` becomes an ``Embed``::

    [Intro video](https://www.youtube.com/watch?v=abc "@embed")

Embeds that carry more than a URL and title (provider markup, frame size)
can only be written as ``[block:embed]`` magic blocks.

"""

from __future__ import annotations

import re

from flavormark.ast.nodes import Embed, Node
from flavormark.constants import EMBED_TITLE_MARKER
from flavormark.extensions.magic_blocks import format_magic_block, magic_payload
from flavormark.extensions.registry import ParseContext, SerializeContext, SyntaxExtension

EMBED_PATTERN = (
    r"^ {0,3}\[(?P<embed_title>[^\]\n]*)\]\((?P<embed_url>[^\s)]+)[ \t]+"
    rf'"{re.escape(EMBED_TITLE_MARKER)}"\)[ \t]*(?:\n|$)'
)


def produce_embed(match: "re.Match[str]", context: ParseContext) -> Node:
    """Build an Embed from a link-syntax embed line."""
    title = match.group("embed_title").strip()
    return Embed(url=match.group("embed_url"), title=title or None)


def serialize_embed(node: Node, context: SerializeContext) -> str:
    """Write an Embed in link syntax when possible, else as a magic block."""
    assert isinstance(node, Embed)
    if node.provider or node.html or node.iframe or node.width or node.height or not _fits_link_syntax(node):
        converted = magic_payload(node, context)
        assert converted is not None
        return format_magic_block(*converted)
    return f'[{node.title or ""}]({node.url} "{EMBED_TITLE_MARKER}")'


def _fits_link_syntax(node: Embed) -> bool:
    title_ok = node.title is None or (node.title == node.title.strip() and not re.search(r"[\]\n]", node.title))
    return bool(node.url) and not re.search(r"[\s)]", node.url) and title_ok


EMBED_EXTENSION = SyntaxExtension(
    name="embed",
    level="block",
    pattern=EMBED_PATTERN,
    parse_order=40,
    produce=produce_embed,
    serialize=serialize_embed,
    node_types=("embed",),
)
