#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/__init__.py
"""Syntax extensions: custom constructs layered on the base markdown grammar."""

from flavormark.extensions.builtins import BUILTIN_EXTENSIONS
from flavormark.extensions.registry import (
    ExtensionRegistry,
    ParseContext,
    SerializeContext,
    SyntaxExtension,
    default_registry,
)

__all__ = [
    "BUILTIN_EXTENSIONS",
    "ExtensionRegistry",
    "ParseContext",
    "SerializeContext",
    "SyntaxExtension",
    "default_registry",
]
