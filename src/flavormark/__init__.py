"""flavormark - A compiler for documentation-flavored markdown.

flavormark compiles markdown extended with documentation constructs
(callouts, tabbed code blocks, embeds, custom HTML blocks, variables and
glossary references) into a document tree, a sanitized hypertext tree, HTML,
plain text, a component tree or a table of contents, and serializes document
trees back into flavored markdown.

Key Features
------------
- mistune-based parsing with custom constructs registered as ordered syntax
  extensions
- Legacy ``[block:TYPE]`` magic blocks with JSON payloads
- Raw HTML materialized with BeautifulSoup and filtered through an
  allow-list sanitization policy shipped as YAML data
- Pluggable render targets keyed by element tag name
- Heading slugs and depth-normalized tables of contents
- Reverse compilation back to flavored markdown

Requirements
------------
- Python 3.10+
- mistune, beautifulsoup4, PyYAML (and tomli on Python 3.10)

Examples
--------
Compile to HTML:

    >>> from flavormark import html
    >>> html("## Setup\\n\\n> 🚧 Careful\\n> This step is slow.")  # doctest: +SKIP

Work with the document tree:

    >>> from flavormark import parse, serialize
    >>> doc = parse("# Title\\n\\nSome *text*.")
    >>> doc.children[0].slug
    'title'
    >>> serialize(doc)
    '# Title\\n\\nSome *text*.'

See Also
--------
flavormark.ast : document tree nodes and utilities
flavormark.extensions : syntax extension registry and the built-in constructs

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "flavormark requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from flavormark.api import (
    ast_to_plain_text,
    hast,
    html,
    md,
    mdast,
    parse,
    plain_text,
    render,
    serialize,
    setup,
    toc,
    toc_html,
)
from flavormark.exceptions import (
    ExtensionRegistryError,
    FlavormarkError,
    InvalidOptionsError,
    MalformedConstructError,
    ValidationError,
)
from flavormark.extensions.registry import ExtensionRegistry, SyntaxExtension, default_registry
from flavormark.options import CompileOptions, MarkdownSerializerOptions
from flavormark.pipeline import Pipeline
from flavormark.renderers.components import Component
from flavormark.utils.html_sanitizer import SanitizationPolicy, default_policy

__all__ = [
    "__version__",
    # Entry points
    "setup",
    "parse",
    "mdast",
    "hast",
    "html",
    "plain_text",
    "render",
    "toc",
    "toc_html",
    "serialize",
    "md",
    "ast_to_plain_text",
    # Configuration
    "CompileOptions",
    "MarkdownSerializerOptions",
    "Pipeline",
    "ExtensionRegistry",
    "SyntaxExtension",
    "default_registry",
    "SanitizationPolicy",
    "default_policy",
    "Component",
    # Exceptions
    "FlavormarkError",
    "ValidationError",
    "InvalidOptionsError",
    "ExtensionRegistryError",
    "MalformedConstructError",
]
