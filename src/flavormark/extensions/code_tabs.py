#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/code_tabs.py
"""Code tabs: consecutive fenced code blocks shown as one tabbed group.

Two or more fenced code blocks with nothing between them form a
``CodeTabs`` group. The first word of each info string is the language and
the rest is the tab name::

    ```python Python
    print("hi")
    ```
    ```js Node
    console.log("hi")
    ```

"""

from __future__ import annotations

import re

from flavormark.ast.nodes import CodeBlock, CodeTabs, Node
from flavormark.extensions.registry import ParseContext, SerializeContext, SyntaxExtension

CODE_TABS_PATTERN = (
    r"^(?:[ ]{0,3}(?P<code_tabs_fence>`{3,}|~{3,})[^\n]*\n"
    r"(?:[\s\S]*?\n)?[ ]{0,3}(?P=code_tabs_fence)[ \t]*(?:\n|$)){2,}"
)

_FENCED_BLOCK = re.compile(
    r"^(?P<indent>[ ]{0,3})(?P<fence>`{3,}|~{3,})(?P<info>[^\n]*)\n"
    r"(?P<code>[\s\S]*?\n)?[ ]{0,3}(?P=fence)[ \t]*(?:\n|$)",
    re.MULTILINE,
)


def split_info_string(info: str) -> tuple[str | None, str | None]:
    """Split a fence info string into ``(language, meta)``."""
    parts = info.strip().split(None, 1)
    if not parts:
        return None, None
    return parts[0], parts[1].strip() if len(parts) > 1 else None


def _dedent(code: str, indent: int) -> str:
    if not indent:
        return code
    lines = code.split("\n")
    prefix = re.compile(rf"^ {{0,{indent}}}")
    return "\n".join(prefix.sub("", line, count=1) for line in lines)


def produce_code_tabs(match: "re.Match[str]", context: ParseContext) -> Node:
    """Split a run of fenced blocks into the CodeBlock children of a group."""
    children: list[Node] = []
    for block in _FENCED_BLOCK.finditer(match.group(0)):
        code = block.group("code") or ""
        if code.endswith("\n"):
            code = code[:-1]
        language, meta = split_info_string(block.group("info"))
        children.append(CodeBlock(value=_dedent(code, len(block.group("indent"))), language=language, meta=meta))
    return CodeTabs(children=children)


def code_fence(code: str, char: str = "`") -> str:
    """Return a fence longer than any run of ``char`` inside ``code``."""
    longest = max((len(run) for run in re.findall(rf"{re.escape(char)}+", code)), default=0)
    return char * max(3, longest + 1)


def format_code_block(node: CodeBlock, char: str = "`") -> str:
    """Write a CodeBlock as a fenced block."""
    fence = code_fence(node.value, char)
    info = " ".join(part for part in (node.language, node.meta) if part)
    body = f"{node.value}\n" if node.value else ""
    return f"{fence}{info}\n{body}{fence}"


def serialize_code_tabs(node: Node, context: SerializeContext) -> str:
    """Write a CodeTabs group as adjacent fenced blocks."""
    assert isinstance(node, CodeTabs)
    return "\n".join(format_code_block(child) for child in node.children if isinstance(child, CodeBlock))


CODE_TABS_EXTENSION = SyntaxExtension(
    name="code_tabs",
    level="block",
    pattern=CODE_TABS_PATTERN,
    parse_order=20,
    produce=produce_code_tabs,
    serialize=serialize_code_tabs,
    node_types=("code-tab-group",),
)
