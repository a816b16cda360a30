"""Option dataclasses for compiling and serializing flavored markdown."""

from flavormark.options.base import CloneFrozenMixin
from flavormark.options.compile import CompileOptions, resolve_options
from flavormark.options.markdown import MarkdownSerializerOptions

__all__ = [
    "CloneFrozenMixin",
    "CompileOptions",
    "MarkdownSerializerOptions",
    "resolve_options",
]
