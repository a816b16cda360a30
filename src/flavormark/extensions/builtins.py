#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/builtins.py
"""The built-in flavored constructs, in parse order."""

from __future__ import annotations

from flavormark.extensions.callouts import CALLOUT_EXTENSION
from flavormark.extensions.code_tabs import CODE_TABS_EXTENSION
from flavormark.extensions.embeds import EMBED_EXTENSION
from flavormark.extensions.magic_blocks import MAGIC_BLOCK_EXTENSION
from flavormark.extensions.references import GLOSSARY_EXTENSION, VARIABLE_EXTENSION
from flavormark.extensions.registry import SyntaxExtension

BUILTIN_EXTENSIONS: tuple[SyntaxExtension, ...] = (
    MAGIC_BLOCK_EXTENSION,
    CODE_TABS_EXTENSION,
    CALLOUT_EXTENSION,
    EMBED_EXTENSION,
    GLOSSARY_EXTENSION,
    VARIABLE_EXTENSION,
)
