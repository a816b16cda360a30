#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Compile options for the flavormark pipeline.

``CompileOptions`` carries every switch the pipeline and the default
renderers understand. Instances are frozen and validated on construction, so
a rejected configuration surfaces before any text is processed.

Examples
--------
    >>> opts = CompileOptions(line_break_mode="soft", max_toc_depth=3)
    >>> opts.create_updated(disabled_constructs={"emphasis"}).disabled_constructs
    frozenset({'emphasis'})

    >>> CompileOptions.from_dict({"correctnewlines": True}).line_break_mode
    'soft'

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Iterable, Mapping, get_args

from flavormark.constants import (
    CONSTRUCT_ALIASES,
    DEFAULT_ALLOW_DANGEROUS_HTML,
    DEFAULT_COPY_BUTTONS,
    DEFAULT_CUSTOM_COMPONENT_PREFIX,
    DEFAULT_LINE_BREAK_MODE,
    DEFAULT_MAX_TOC_DEPTH,
    DEFAULT_NORMALIZE,
    DEFAULT_PARSE_FRONTMATTER,
    DEFAULT_SAFE_MODE,
    DEFAULT_SANITIZE,
    MAX_TOC_DEPTH,
    MIN_TOC_DEPTH,
    LineBreakMode,
)
from flavormark.exceptions import InvalidOptionsError
from flavormark.options.base import CloneFrozenMixin, validate_choice
from flavormark.options.markdown import MarkdownSerializerOptions

_PREFIX_PATTERN = re.compile(r"^[a-z][a-z0-9]*$")

# External (camelCase) option names -> field names
_KEY_ALIASES = {
    "lineBreakMode": "line_break_mode",
    "disabledConstructs": "disabled_constructs",
    "disableTokenizers": "disabled_constructs",
    "allowDangerousHTML": "allow_dangerous_html",
    "allowDangerousHtml": "allow_dangerous_html",
    "maxTOCDepth": "max_toc_depth",
    "maxTocDepth": "max_toc_depth",
    "customComponentPrefix": "custom_component_prefix",
    "parseFrontmatter": "parse_frontmatter",
    "safeMode": "safe_mode",
    "copyButtons": "copy_buttons",
}


def normalize_construct_names(names: Iterable[str]) -> frozenset[str]:
    """Map alternate construct spellings onto their canonical names."""
    if isinstance(names, str):
        names = [names]
    return frozenset(CONSTRUCT_ALIASES.get(name, name) for name in names)


@dataclass(frozen=True)
class CompileOptions(CloneFrozenMixin):
    """Configuration for parsing, lowering, sanitizing and rendering.

    Parameters
    ----------
    line_break_mode : {"hard", "soft"}, default "hard"
        Whether single newlines inside a paragraph become hard line breaks.
        Applied as a grammar switch when the parser is built.
    disabled_constructs : frozenset[str], default empty
        Base-grammar constructs or extension names to switch off.
        Unknown names are rejected when a pipeline is assembled.
    allow_dangerous_html : bool, default True
        Keep raw HTML as markup for materialization; when False it is
        escaped as text during lowering.
    sanitize : bool, default True
        Apply the sanitization policy to the materialized hypertext tree.
    max_toc_depth : int, default 2
        Deepest normalized heading level included in a table of contents.
    custom_component_prefix : str, default "x"
        Prefix for caller-supplied component tags (``x-name``).
    normalize : bool, default True
        Put magic blocks on their own lines before parsing.
    parse_frontmatter : bool, default True
        Split a leading YAML or TOML block off as document metadata.
    safe_mode : bool, default False
        Render custom HTML blocks as escaped source instead of markup.
    copy_buttons : bool, default True
        Add a copy button to code blocks rendered as markup.
    variables : Mapping[str, str], default empty
        Values substituted for variable references at render time.
    glossary : Mapping[str, str], default empty
        Glossary term definitions used when rendering glossary references.
    markdown : MarkdownSerializerOptions
        Formatting choices for the reverse compiler.

    """

    line_break_mode: LineBreakMode = field(
        default=DEFAULT_LINE_BREAK_MODE,
        metadata={"help": "Treat single newlines as hard breaks", "choices": ["hard", "soft"]},
    )
    disabled_constructs: frozenset[str] = field(
        default_factory=frozenset, metadata={"help": "Base constructs or extensions to disable"}
    )
    allow_dangerous_html: bool = field(
        default=DEFAULT_ALLOW_DANGEROUS_HTML, metadata={"help": "Preserve raw HTML for materialization"}
    )
    sanitize: bool = field(default=DEFAULT_SANITIZE, metadata={"help": "Apply the sanitization policy"})
    max_toc_depth: int = field(default=DEFAULT_MAX_TOC_DEPTH, metadata={"help": "Deepest table of contents level"})
    custom_component_prefix: str = field(
        default=DEFAULT_CUSTOM_COMPONENT_PREFIX, metadata={"help": "Tag prefix for custom components"}
    )
    normalize: bool = field(default=DEFAULT_NORMALIZE, metadata={"help": "Normalize magic block whitespace"})
    parse_frontmatter: bool = field(
        default=DEFAULT_PARSE_FRONTMATTER, metadata={"help": "Parse YAML/TOML front-matter"}
    )
    safe_mode: bool = field(default=DEFAULT_SAFE_MODE, metadata={"help": "Escape custom HTML blocks"})
    copy_buttons: bool = field(default=DEFAULT_COPY_BUTTONS, metadata={"help": "Add copy buttons to code"})
    variables: Mapping[str, str] = field(default_factory=dict, hash=False, metadata={"help": "Variable values"})
    glossary: Mapping[str, str] = field(default_factory=dict, hash=False, metadata={"help": "Glossary terms"})
    markdown: MarkdownSerializerOptions = field(
        default_factory=MarkdownSerializerOptions, metadata={"help": "Reverse compiler formatting"}
    )

    def __post_init__(self) -> None:
        """Validate and normalize option values."""
        validate_choice("line_break_mode", self.line_break_mode, get_args(LineBreakMode))

        object.__setattr__(self, "disabled_constructs", normalize_construct_names(self.disabled_constructs))
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))
        object.__setattr__(self, "glossary", MappingProxyType(dict(self.glossary)))

        depth = self.max_toc_depth
        if isinstance(depth, bool) or not isinstance(depth, int) or not MIN_TOC_DEPTH <= depth <= MAX_TOC_DEPTH:
            raise InvalidOptionsError(
                f"max_toc_depth must be an integer between {MIN_TOC_DEPTH} and {MAX_TOC_DEPTH}, got {depth!r}",
                invalid_options=["max_toc_depth"],
                parameter_value=depth,
            )

        if not isinstance(self.custom_component_prefix, str) or not _PREFIX_PATTERN.match(
            self.custom_component_prefix
        ):
            raise InvalidOptionsError(
                "custom_component_prefix must start with a lowercase letter and contain only "
                f"lowercase letters and digits, got {self.custom_component_prefix!r}",
                invalid_options=["custom_component_prefix"],
                parameter_value=self.custom_component_prefix,
            )

        if not isinstance(self.markdown, MarkdownSerializerOptions):
            raise InvalidOptionsError(
                "markdown must be a MarkdownSerializerOptions instance",
                invalid_options=["markdown"],
                parameter_value=self.markdown,
            )

    @property
    def hard_breaks(self) -> bool:
        """Whether single newlines become hard line breaks."""
        return self.line_break_mode == "hard"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompileOptions":
        """Build options from a plain mapping.

        Keys may be field names or the camelCase names of the external
        option interface. ``correctnewlines`` is accepted as the inverse of
        hard line breaks, and ``markdown`` may be a nested mapping.

        Parameters
        ----------
        data : Mapping[str, Any]
            Option values

        Returns
        -------
        CompileOptions
            Validated options

        Raises
        ------
        InvalidOptionsError
            If a key is unknown, two keys contradict each other, or a value
            fails validation

        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        unknown: list[str] = []

        for key, value in data.items():
            if key == "correctnewlines":
                continue
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            if name in kwargs and kwargs[name] != value:
                raise InvalidOptionsError(
                    f"Option '{name}' was given more than once with different values",
                    invalid_options=[name],
                    parameter_value=value,
                )
            kwargs[name] = value

        if unknown:
            raise InvalidOptionsError(f"Unknown option(s): {', '.join(sorted(unknown))}", invalid_options=unknown)

        if "correctnewlines" in data:
            implied: LineBreakMode = "soft" if data["correctnewlines"] else "hard"
            if kwargs.setdefault("line_break_mode", implied) != implied:
                raise InvalidOptionsError(
                    "correctnewlines contradicts line_break_mode",
                    invalid_options=["correctnewlines", "line_break_mode"],
                )

        markdown = kwargs.get("markdown")
        if isinstance(markdown, Mapping):
            try:
                kwargs["markdown"] = MarkdownSerializerOptions(**markdown)
            except TypeError as exc:
                raise InvalidOptionsError(
                    f"Invalid markdown serializer options: {exc}", invalid_options=["markdown"], original_error=exc
                ) from exc

        return cls(**kwargs)


def resolve_options(options: "CompileOptions | Mapping[str, Any] | None") -> CompileOptions:
    """Coerce ``None``, a mapping, or an options instance into CompileOptions."""
    if options is None:
        return CompileOptions()
    if isinstance(options, CompileOptions):
        return options
    if isinstance(options, Mapping):
        return CompileOptions.from_dict(options)
    raise InvalidOptionsError(
        f"Options must be a CompileOptions instance or a mapping, got {type(options).__name__}",
        parameter_value=options,
    )
