#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Options for the reverse compiler (document tree to flavored markdown)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import get_args

from flavormark.constants import (
    DEFAULT_BULLET_SYMBOL,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_THEMATIC_BREAK,
    BulletSymbol,
    CodeFenceChar,
    EmphasisSymbol,
    ThematicBreakStyle,
)
from flavormark.options.base import CloneFrozenMixin, validate_choice


@dataclass(frozen=True)
class MarkdownSerializerOptions(CloneFrozenMixin):
    r"""Formatting choices used when serializing a document tree to markdown.

    Parameters
    ----------
    emphasis_symbol : {"\*", "\_"}, default "\*"
        Delimiter for emphasis. Strong emphasis doubles it.
    bullet_symbol : {"\*", "-", "+"}, default "\*"
        Marker for unordered list items.
    code_fence_char : {"`", "~"}, default "`"
        Character used to build code fences.
    thematic_break : str, default "---"
        Text emitted for a thematic break.
    emit_frontmatter : bool, default True
        Whether document front-matter is written back as a YAML block.

    """

    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL, metadata={"help": "Emphasis delimiter", "choices": ["*", "_"]}
    )
    bullet_symbol: BulletSymbol = field(
        default=DEFAULT_BULLET_SYMBOL, metadata={"help": "Unordered list marker", "choices": ["*", "-", "+"]}
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR, metadata={"help": "Code fence character", "choices": ["`", "~"]}
    )
    thematic_break: ThematicBreakStyle = field(
        default=DEFAULT_THEMATIC_BREAK, metadata={"help": "Thematic break text"}
    )
    emit_frontmatter: bool = field(default=True, metadata={"help": "Write front-matter back as YAML"})

    def __post_init__(self) -> None:
        """Validate the symbol choices."""
        validate_choice("emphasis_symbol", self.emphasis_symbol, get_args(EmphasisSymbol))
        validate_choice("bullet_symbol", self.bullet_symbol, get_args(BulletSymbol))
        validate_choice("code_fence_char", self.code_fence_char, get_args(CodeFenceChar))
        validate_choice("thematic_break", self.thematic_break, get_args(ThematicBreakStyle))
