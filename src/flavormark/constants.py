#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the flavormark library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Compile Defaults - default values for CompileOptions
3. Base Grammar Constructs - names accepted for tokenizer suppression
4. Custom Constructs - callout icons, magic block types, custom element tags
5. Security Constants - URL schemes and style checks used by the sanitizer
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

LineBreakMode = Literal["hard", "soft"]
ExtensionLevel = Literal["block", "inline"]
EmphasisSymbol = Literal["*", "_"]
BulletSymbol = Literal["*", "-", "+"]
CodeFenceChar = Literal["`", "~"]
ThematicBreakStyle = Literal["---", "***", "___", "* * *"]
Alignment = Literal["left", "center", "right"]
CalloutTheme = Literal["info", "warn", "okay", "error"]

# =============================================================================
# Compile Defaults
# =============================================================================

DEFAULT_LINE_BREAK_MODE: LineBreakMode = "hard"
DEFAULT_ALLOW_DANGEROUS_HTML = True
DEFAULT_SANITIZE = True
DEFAULT_MAX_TOC_DEPTH = 2
MIN_TOC_DEPTH = 1
MAX_TOC_DEPTH = 6
DEFAULT_CUSTOM_COMPONENT_PREFIX = "x"
DEFAULT_NORMALIZE = True
DEFAULT_PARSE_FRONTMATTER = True
DEFAULT_SAFE_MODE = False
DEFAULT_COPY_BUTTONS = True

DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_BULLET_SYMBOL: BulletSymbol = "*"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_THEMATIC_BREAK: ThematicBreakStyle = "---"

# Nested parsing performed by custom constructs (callout bodies, table cells)
MAX_NESTING_DEPTH = 16

# Slugs longer than this are truncated before collision suffixes are added
MAX_SLUG_LENGTH = 100

# Appended by magic block normalization so a trailing block always closes
NORMALIZE_SUFFIX = "\n\n "

# =============================================================================
# Base Grammar Constructs
# =============================================================================

# Construct name -> (mistune block rules, mistune inline rules)
BASE_CONSTRUCT_RULES: MappingProxyType[str, tuple[tuple[str, ...], tuple[str, ...]]] = MappingProxyType(
    {
        "blockquote": (("block_quote",), ()),
        "fenced_code": (("fenced_code",), ()),
        "indented_code": (("indent_code",), ()),
        "heading": (("atx_heading",), ()),
        "setext_heading": (("setex_heading",), ()),
        "thematic_break": (("thematic_break",), ()),
        "list": (("list",), ()),
        "definition": (("ref_link",), ()),
        "html": (("raw_html",), ("inline_html",)),
        "table": (("table", "nptable"), ()),
        "escape": ((), ("escape",)),
        "inline_code": ((), ("codespan",)),
        "emphasis": ((), ("emphasis",)),
        "link": ((), ("link",)),
        "autolink": ((), ("auto_link", "auto_email")),
        "url": ((), ("url_link",)),
        "strikethrough": ((), ("strikethrough",)),
        "break": ((), ("linebreak", "softbreak")),
    }
)

# Alternate spellings accepted in option mappings
CONSTRUCT_ALIASES: MappingProxyType[str, str] = MappingProxyType(
    {
        "fencedCode": "fenced_code",
        "indentedCode": "indented_code",
        "atxHeading": "heading",
        "setextHeading": "setext_heading",
        "thematicBreak": "thematic_break",
        "inlineCode": "inline_code",
        "strong": "emphasis",
        "deletion": "strikethrough",
        "autoLink": "autolink",
    }
)

# mistune plugins enabled on every parser
MISTUNE_PLUGINS = ("strikethrough", "table", "task_lists", "url")

# =============================================================================
# Custom Constructs
# =============================================================================

# Callout icon -> theme
CALLOUT_ICONS: MappingProxyType[str, CalloutTheme] = MappingProxyType(
    {
        "\U0001f4d8": "info",  # blue book
        "\u2139\ufe0f": "info",  # information source
        "\u2139": "info",
        "\U0001f6a7": "warn",  # construction
        "\u26a0\ufe0f": "warn",  # warning sign
        "\u26a0": "warn",
        "\U0001f44d": "okay",  # thumbs up
        "\u2705": "okay",  # check mark
        "\u2757\ufe0f": "error",  # exclamation mark
        "\u2757": "error",
        "\U0001f6d1": "error",  # stop sign
        "\u2049\ufe0f": "error",  # exclamation question mark
        "\u203c\ufe0f": "error",  # double exclamation mark
    }
)

# Magic block callout type -> (theme, icon)
MAGIC_CALLOUT_TYPES: MappingProxyType[str, tuple[CalloutTheme, str]] = MappingProxyType(
    {
        "info": ("info", "\U0001f4d8"),
        "warning": ("warn", "\U0001f6a7"),
        "danger": ("error", "\u2757\ufe0f"),
        "success": ("okay", "\U0001f44d"),
    }
)

MAGIC_BLOCK_TYPES = frozenset({"code", "api-header", "image", "callout", "parameters", "embed", "html"})

# Custom element tag names produced by lowering
CALLOUT_TAG = "rdme-callout"
CODE_TABS_TAG = "code-tabs"
EMBED_TAG = "rdme-embed"
HTML_BLOCK_TAG = "html-block"
VARIABLE_TAG = "readme-variable"
GLOSSARY_TAG = "readme-glossary-item"
PIN_TAG = "rdme-pin"

EMBED_TITLE_MARKER = "@embed"

# =============================================================================
# Security Constants
# =============================================================================

DANGEROUS_SCHEMES = frozenset(
    {
        "javascript:",
        "vbscript:",
        "data:text/html",
        "data:text/javascript",
        "data:application/javascript",
        "data:application/x-javascript",
    }
)

# Attributes whose values are URLs and therefore subject to scheme checks
URL_ATTRIBUTES = frozenset({"href", "src", "cite", "longdesc", "action", "formaction", "poster", "background"})

# HTML void elements, serialized without a closing tag
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)
