#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/parsers/markdown.py
"""Flavored markdown to document tree parser.

This module builds the document tree with the mistune parser. mistune runs
without a renderer so that it yields its token stream, which is converted
into flavormark nodes. Custom constructs from the extension registry are
registered as additional mistune rules, ahead of the base grammar, and
deliver finished nodes through a private token type.

Parsing stages
--------------
1. Front-matter is split off (YAML ``---`` or TOML ``+++``).
2. Magic blocks are normalized onto lines of their own.
3. mistune tokenizes the text; extension rules produce nodes as they match.
4. Tokens are converted to nodes.
5. Heading slugs are assigned.

A parser instance holds only the configured mistune grammar. Everything a
single parse needs travels in that parse's mistune state, so one parser can
be shared between threads.

"""

from __future__ import annotations

import logging
import re
import sys

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from dataclasses import replace
from typing import Any, Optional

import mistune
import yaml

from flavormark.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from flavormark.ast.transforms import transform
from flavormark.ast.utils import extract_text
from flavormark.constants import BASE_CONSTRUCT_RULES, MAX_NESTING_DEPTH, MISTUNE_PLUGINS
from flavormark.exceptions import ExtensionRegistryError, InvalidOptionsError, MalformedConstructError
from flavormark.extensions.code_tabs import split_info_string
from flavormark.extensions.magic_blocks import normalize_magic_blocks
from flavormark.extensions.registry import ExtensionRegistry, SyntaxExtension, default_registry
from flavormark.options.compile import CompileOptions, resolve_options
from flavormark.utils.text import Slugger

logger = logging.getLogger(__name__)

# Key under which the per-parse context travels in mistune's state.env
_CONTEXT_KEY = "flavormark_context"

# Private token types emitted by extension rules
_NODES_TOKEN = "flavormark_nodes"
_LITERAL_TOKEN = "flavormark_literal"

# Base rules that mistune's list and block quote parsers dispatch to directly
_HANDOFF_RULES = ("fenced_code", "block_quote", "atx_heading", "thematic_break", "list")

# Every newline is a break in hard mode, with or without a backslash or trailing spaces
_HARD_WRAP_LINEBREAK = r"(?:\\| *)\n\s*"

_YAML_FENCE = "---"
_TOML_FENCE = "+++"


class _ParseContext:
    """Nested parsing services handed to extension ``produce`` functions."""

    def __init__(self, parser: "MarkdownParser", env: dict[str, Any], depth: int = 0):
        self._parser = parser
        self._env = env
        self.depth = depth

    def _nested_env(self) -> dict[str, Any]:
        if self.depth >= MAX_NESTING_DEPTH:
            raise MalformedConstructError(f"Constructs nested more than {MAX_NESTING_DEPTH} levels deep")
        env = {"ref_links": self._env.get("ref_links", {})}
        env[_CONTEXT_KEY] = _ParseContext(self._parser, env, self.depth + 1)
        return env

    def parse_blocks(self, text: str) -> list[Node]:
        return self._parser._parse_fragment(text, self._nested_env())

    def parse_inline(self, text: str) -> list[Node]:
        return self._parser._parse_inline_fragment(text, self._nested_env())


def split_frontmatter(content: str) -> tuple[str, dict[str, Any]]:
    """Split a leading YAML or TOML front-matter block off ``content``.

    Parameters
    ----------
    content : str
        Source text

    Returns
    -------
    tuple[str, dict]
        Remaining text and the parsed metadata. Metadata that cannot be
        parsed is logged and replaced by an empty dict; the block is still
        removed from the text.

    """
    for fence, loader in ((_YAML_FENCE, _load_yaml), (_TOML_FENCE, _load_toml)):
        if not (content.startswith(fence + "\n") or content.startswith(fence + "\r\n")):
            continue

        lines = content.splitlines(keepends=True)
        end_index = -1
        for i in range(1, len(lines)):
            if lines[i].strip() == fence:
                end_index = i
                break

        if end_index <= 0:
            return content, {}

        data = loader("".join(lines[1:end_index]))
        return "".join(lines[end_index + 1 :]), data

    return content, {}


def _load_yaml(text: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring malformed YAML front-matter: {e}")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring YAML front-matter that is not a mapping")
        return {}
    return data


def _load_toml(text: str) -> dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Ignoring malformed TOML front-matter: {e}")
        return {}


class MarkdownParser:
    """Parse flavored markdown into a document tree.

    Parameters
    ----------
    options : CompileOptions, mapping or None
        Compile options; the line break mode and disabled constructs are
        applied when the grammar is built
    registry : ExtensionRegistry or None
        Syntax extensions; the built-in constructs when omitted

    Raises
    ------
    InvalidOptionsError
        If a disabled construct name is neither a base construct nor a
        registered extension
    ExtensionRegistryError
        If the extension patterns cannot be combined with the base grammar

    """

    def __init__(
        self,
        options: CompileOptions | dict[str, Any] | None = None,
        registry: Optional[ExtensionRegistry] = None,
    ):
        self.options = resolve_options(options)
        registry = registry if registry is not None else default_registry()

        disabled = self.options.disabled_constructs
        unknown = sorted(disabled - set(BASE_CONSTRUCT_RULES) - registry.names)
        if unknown:
            raise InvalidOptionsError(
                f"Unknown construct name(s) in disabled_constructs: {', '.join(unknown)}",
                invalid_options=unknown,
                parameter_value=sorted(disabled),
            )

        self.registry = registry.without(disabled)
        self._markdown = self._build_markdown()

    # ------------------------------------------------------------------
    # Grammar assembly
    # ------------------------------------------------------------------

    def _build_markdown(self) -> mistune.Markdown:
        markdown = mistune.create_markdown(
            escape=False,
            hard_wrap=self.options.hard_breaks,
            renderer=None,
            plugins=list(MISTUNE_PLUGINS),
        )
        block = markdown.block
        inline = markdown.inline

        # Suppress disabled base constructs before any extension is added
        for name in self.options.disabled_constructs & set(BASE_CONSTRUCT_RULES):
            block_rules, inline_rules = BASE_CONSTRUCT_RULES[name]
            for rules in (block.rules, block.block_quote_rules, block.list_rules):
                rules[:] = [rule for rule in rules if rule not in block_rules]
            inline.rules[:] = [rule for rule in inline.rules if rule not in inline_rules]

        block_extensions = self.registry.for_level("block")
        for extension in block_extensions:
            block.register(extension.rule_name, extension.pattern, self._block_rule(extension))
        inline_extensions = self.registry.for_level("inline")
        for extension in inline_extensions:
            inline.register(extension.rule_name, extension.pattern, self._inline_rule(extension))

        # Extensions go first, in parse order; the first alternative that matches wins
        block_names = [extension.rule_name for extension in block_extensions]
        for rules in (block.rules, block.block_quote_rules, block.list_rules):
            rules[:] = block_names + [rule for rule in rules if rule not in block_names]
        inline_names = [extension.rule_name for extension in inline_extensions]
        inline.rules[:] = inline_names + [rule for rule in inline.rules if rule not in inline_names]

        # Lists and lazy block quotes end by calling base rules directly; route those through the extensions too
        if block_names:
            for name in _HANDOFF_RULES:
                if name in block.rules:
                    block.register(name, None, self._handoff_rule(getattr(block, f"parse_{name}"), block_names))

        if self.options.hard_breaks:
            # Hard wrap replaces the linebreak rule; keep backslash breaks working
            inline.specification["linebreak"] = _HARD_WRAP_LINEBREAK

        try:
            block.compile_sc()
            block.compile_sc(block.block_quote_rules)
            block.compile_sc(block.list_rules)
            if block_names:
                block.compile_sc(block_names)
            inline.compile_sc()
        except re.error as e:
            raise ExtensionRegistryError(
                f"Extension patterns could not be combined with the base grammar: {e}", original_error=e
            ) from e

        logger.debug(
            f"Built markdown grammar with {len(block_extensions)} block and {len(inline_extensions)} inline extensions"
        )
        return markdown

    def _produce_token(self, extension: SyntaxExtension, match: "re.Match[str]", env: dict[str, Any]) -> dict:
        context = env.get(_CONTEXT_KEY)
        if context is None:
            context = env[_CONTEXT_KEY] = _ParseContext(self, env)

        assert extension.produce is not None
        try:
            produced = extension.produce(match, context)
        except MalformedConstructError as e:
            logger.warning(f"Malformed {extension.name} construct kept as literal text: {e.message}")
            return {"type": _LITERAL_TOKEN, "raw": match.group(0)}
        except (ValueError, TypeError, KeyError, IndexError) as e:
            logger.warning(f"Extension {extension.name} failed to produce a node, keeping literal text: {e}")
            return {"type": _LITERAL_TOKEN, "raw": match.group(0)}

        nodes = produced if isinstance(produced, list) else [produced]
        return {"type": _NODES_TOKEN, "nodes": nodes}

    @staticmethod
    def _handoff_rule(base_parse: Any, block_names: list[str]):
        def parse_rule(block: Any, m: "re.Match[str]", state: Any) -> Optional[int]:
            flavored = block.compile_sc(block_names).match(state.src, m.start())
            if flavored is not None and flavored.end() > flavored.start():
                return block.parse_method(flavored, state)
            return base_parse(m, state)

        return parse_rule

    def _block_rule(self, extension: SyntaxExtension):
        def parse_rule(block: Any, m: "re.Match[str]", state: Any) -> Optional[int]:
            if m.end() <= m.start():
                return None
            state.append_token(self._produce_token(extension, m, state.env))
            return m.end()

        return parse_rule

    def _inline_rule(self, extension: SyntaxExtension):
        def parse_rule(inline: Any, m: "re.Match[str]", state: Any) -> Optional[int]:
            if m.end() <= m.start():
                return None
            token = self._produce_token(extension, m, state.env)
            if token["type"] == _LITERAL_TOKEN:
                token = {"type": "text", "raw": token["raw"]}
            state.append_token(token)
            return m.end()

        return parse_rule

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self, content: str) -> Document:
        """Parse flavored markdown into a Document.

        Parameters
        ----------
        content : str
            Markdown source

        Returns
        -------
        Document
            Document tree with front-matter and heading slugs

        """
        frontmatter: dict[str, Any] = {}
        if self.options.parse_frontmatter:
            content, frontmatter = split_frontmatter(content)
        if self.options.normalize:
            content = normalize_magic_blocks(content)

        env: dict[str, Any] = {"ref_links": {}}
        env[_CONTEXT_KEY] = _ParseContext(self, env)
        children = self._parse_fragment(content, env)

        document = Document(children=children, frontmatter=frontmatter)
        return assign_slugs(document)

    def _parse_fragment(self, text: str, env: dict[str, Any]) -> list[Node]:
        state = self._markdown.block.state_cls()
        state.env = env
        tokens, _ = self._markdown.parse(text, state)
        assert isinstance(tokens, list)
        return self._process_tokens(tokens)

    def _parse_inline_fragment(self, text: str, env: dict[str, Any]) -> list[Node]:
        tokens = self._markdown.inline(text, env)
        return self._process_inline_tokens(tokens)

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is None:
                continue
            if isinstance(node, list):
                nodes.extend(node)
            else:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | list[Node] | None:
        token_type = token.get("type", "")
        attrs = token.get("attrs") or {}

        if token_type == _NODES_TOKEN:
            return list(token["nodes"])
        elif token_type == _LITERAL_TOKEN:
            return self._literal_paragraph(token["raw"])
        elif token_type == "heading":
            return Heading(depth=attrs.get("level", 1), children=self._inline_children(token))
        elif token_type in ("paragraph", "block_text"):
            # block_text is used for tight list items
            return Paragraph(children=self._inline_children(token))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return self._process_table(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(value=token.get("raw", ""))
        elif token_type == "blank_line":
            return None

        logger.debug(f"Skipping unsupported token type: {token_type}")
        return None

    def _literal_paragraph(self, raw: str) -> Paragraph:
        # Text is kept verbatim; only the line breaks follow the configured mode
        children: list[Node] = []
        for line in raw.strip("\n").split("\n"):
            if children:
                children.append(LineBreak(soft=not self.options.hard_breaks))
            if line:
                children.append(Text(value=line))
        return Paragraph(children=children)

    def _inline_children(self, token: dict[str, Any]) -> list[Node]:
        return self._process_inline_tokens(token.get("children", []))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        code = token.get("raw", "")
        if code.endswith("\n"):
            code = code[:-1]
        attrs = token.get("attrs") or {}
        language, meta = split_info_string(attrs.get("info") or "")
        return CodeBlock(value=code, language=language, meta=meta)

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs") or {}
        items: list[Node] = []
        for child in token.get("children", []):
            checked = (child.get("attrs") or {}).get("checked")
            items.append(ListItem(children=self._process_tokens(child.get("children", [])), checked=checked))
        return List(
            ordered=bool(attrs.get("ordered", False)),
            start=attrs.get("start", 1),
            tight=bool(token.get("tight", True)),
            children=items,
        )

    def _process_table(self, token: dict[str, Any]) -> Table:
        rows: list[Node] = []
        alignments: list = []

        for section in token.get("children", []):
            if section.get("type") == "table_head":
                cells = self._process_cells(section.get("children", []))
                alignments = [cell.alignment for cell in cells]
                rows.append(TableRow(children=list(cells), header=True))
            elif section.get("type") == "table_body":
                for row in section.get("children", []):
                    rows.append(TableRow(children=list(self._process_cells(row.get("children", [])))))

        return Table(alignments=alignments, children=rows)

    def _process_cells(self, tokens: list[dict[str, Any]]) -> list[TableCell]:
        return [
            TableCell(children=self._inline_children(cell), alignment=(cell.get("attrs") or {}).get("align"))
            for cell in tokens
        ]

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            for item in node if isinstance(node, list) else [node]:
                # Adjacent text runs are merged into a single Text node
                if isinstance(item, Text) and nodes and isinstance(nodes[-1], Text):
                    nodes[-1] = Text(value=nodes[-1].value + item.value)
                else:
                    nodes.append(item)
        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Node | list[Node] | None:
        token_type = token.get("type", "")
        attrs = token.get("attrs") or {}

        if token_type == _NODES_TOKEN:
            return list(token["nodes"])
        elif token_type == "text":
            return Text(value=token.get("raw", ""))
        elif token_type == "emphasis":
            return Emphasis(children=self._inline_children(token))
        elif token_type == "strong":
            return Strong(children=self._inline_children(token))
        elif token_type == "strikethrough":
            return Strikethrough(children=self._inline_children(token))
        elif token_type == "codespan":
            return Code(value=token.get("raw", ""))
        elif token_type == "link":
            return Link(url=attrs.get("url", ""), children=self._inline_children(token), title=attrs.get("title"))
        elif token_type == "image":
            alt = extract_text(self._inline_children(token))
            return Image(url=attrs.get("url", ""), alt=alt, title=attrs.get("title"))
        elif token_type == "linebreak":
            return LineBreak(soft=False)
        elif token_type == "softbreak":
            return LineBreak(soft=True)
        elif token_type == "inline_html":
            return HTMLInline(value=token.get("raw", ""))

        logger.debug(f"Skipping unsupported inline token type: {token_type}")
        return None


def assign_slugs(document: Document) -> Document:
    """Give every heading in ``document`` a unique slug, in document order."""
    slugger = Slugger()

    def with_slug(node: Node) -> Node:
        assert isinstance(node, Heading)
        return replace(node, slug=slugger.slug(extract_text(node.children)))

    result = transform(document, with_slug, predicate=lambda node: isinstance(node, Heading))
    assert isinstance(result, Document)
    return result
