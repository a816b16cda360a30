#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/registry.py
"""Syntax extension descriptors and the immutable extension registry.

A custom construct is described by a ``SyntaxExtension``: a name, the level
of the grammar it plugs into, a recognizer pattern, a parse order and the
``produce`` / ``serialize`` pair that converts between the matched markup and
document tree nodes. Constructs are data, not parser subclasses, and any
number of them can be combined in an ``ExtensionRegistry``.

Ordering
--------
The registry keeps extensions sorted by ``(parse_order, name)``. When the
parser is built the extensions of each level are placed, in that order,
ahead of every base-grammar rule. At a given position the first pattern in
that order that matches wins, so of two extensions whose patterns match the
same span the one with the lower ``parse_order`` always produces the node.

Recognizer patterns
-------------------
Patterns are combined into a single alternation by the parser, so they must
follow three rules:

- block patterns are compiled with ``re.MULTILINE`` and should start with ``^``;
- every capturing group must be named;
- group names must be unique across extensions, so prefix them with the
  extension name.

Examples
--------
    >>> def produce(match, context):
    ...     return Text(match.group("shout_text").upper())
    >>> shout = SyntaxExtension(
    ...     name="shout",
    ...     level="inline",
    ...     pattern=r"!!(?P<shout_text>[^!\\n]+)!!",
    ...     parse_order=50,
    ...     produce=produce,
    ... )
    >>> registry = default_registry().with_extensions(shout)

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, Union

from flavormark.ast.nodes import Node
from flavormark.constants import ExtensionLevel
from flavormark.exceptions import ExtensionRegistryError

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


class ParseContext(Protocol):
    """Services available to ``produce`` functions."""

    def parse_blocks(self, text: str) -> list[Node]:
        """Parse ``text`` as block content."""
        ...

    def parse_inline(self, text: str) -> list[Node]:
        """Parse ``text`` as inline content."""
        ...


class SerializeContext(Protocol):
    """Services available to ``serialize`` functions."""

    def serialize_blocks(self, nodes: list[Node]) -> str:
        """Serialize block nodes to markdown."""
        ...

    def serialize_inline(self, nodes: list[Node]) -> str:
        """Serialize inline nodes to markdown."""
        ...


ProduceFn = Callable[["re.Match[str]", ParseContext], Union[Node, "list[Node]"]]
SerializeFn = Callable[[Node, SerializeContext], str]


@dataclass(frozen=True)
class SyntaxExtension:
    """Descriptor for one custom construct.

    Parameters
    ----------
    name : str
        Unique construct name; also the name used to disable it
    level : {"block", "inline"}
        Grammar level the recognizer plugs into
    pattern : str or None, default = None
        Recognizer regular expression. Extensions without a pattern only
        take part in serialization.
    parse_order : int, default = 100
        Lower values are tried first
    produce : callable, optional
        ``produce(match, context)`` builds the node (or nodes) for a matched
        span, raising ``MalformedConstructError`` when the span cannot be
        converted
    serialize : callable, optional
        ``serialize(node, context)`` writes a node back as markup
    node_types : tuple of str, default = ()
        Node types handled by ``serialize``

    """

    name: str
    level: ExtensionLevel
    pattern: Optional[str] = None
    parse_order: int = 100
    produce: Optional[ProduceFn] = None
    serialize: Optional[SerializeFn] = None
    node_types: tuple[str, ...] = ()

    @property
    def rule_name(self) -> str:
        """Name under which the recognizer is registered with mistune."""
        return f"flavormark_{self.name}"

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.parse_order, self.name)

    def validate(self) -> None:
        """Check the descriptor for configuration errors.

        Raises
        ------
        ExtensionRegistryError
            If the name, level or pattern is unusable

        """
        if not _NAME_PATTERN.match(self.name):
            raise ExtensionRegistryError(
                f"Extension name {self.name!r} must be lowercase letters, digits and underscores",
                extension_name=self.name,
            )
        if self.level not in ("block", "inline"):
            raise ExtensionRegistryError(
                f"Extension {self.name!r} has unknown level {self.level!r}", extension_name=self.name
            )
        if self.pattern is None:
            if self.produce is not None:
                raise ExtensionRegistryError(
                    f"Extension {self.name!r} defines produce() without a recognizer pattern",
                    extension_name=self.name,
                )
            return
        if self.produce is None:
            raise ExtensionRegistryError(
                f"Extension {self.name!r} has a recognizer pattern but no produce()", extension_name=self.name
            )
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            raise ExtensionRegistryError(
                f"Extension {self.name!r} has an invalid pattern: {exc}", extension_name=self.name, original_error=exc
            ) from exc
        if compiled.groups != len(compiled.groupindex):
            raise ExtensionRegistryError(
                f"Extension {self.name!r} pattern uses unnamed capturing groups", extension_name=self.name
            )


class ExtensionRegistry:
    """Immutable, ordered collection of syntax extensions.

    Parameters
    ----------
    extensions : Iterable[SyntaxExtension], default = ()
        Extensions to include

    Raises
    ------
    ExtensionRegistryError
        If two extensions share a name, two patterns share a group name, or
        a descriptor is invalid

    """

    def __init__(self, extensions: Iterable[SyntaxExtension] = ()):
        items = list(extensions)
        seen_names: set[str] = set()
        seen_groups: dict[str, str] = {}

        for extension in items:
            extension.validate()
            if extension.name in seen_names:
                raise ExtensionRegistryError(
                    f"Duplicate extension name {extension.name!r}", extension_name=extension.name
                )
            seen_names.add(extension.name)

            if extension.pattern is not None:
                for group in re.compile(extension.pattern).groupindex:
                    if group in seen_groups:
                        raise ExtensionRegistryError(
                            f"Extensions {seen_groups[group]!r} and {extension.name!r} both define group {group!r}",
                            extension_name=extension.name,
                        )
                    seen_groups[group] = extension.name

        self._extensions: tuple[SyntaxExtension, ...] = tuple(sorted(items, key=lambda e: e.sort_key))

    def __iter__(self):
        return iter(self._extensions)

    def __len__(self) -> int:
        return len(self._extensions)

    def __contains__(self, name: object) -> bool:
        return any(extension.name == name for extension in self._extensions)

    def __repr__(self) -> str:
        return f"ExtensionRegistry({[e.name for e in self._extensions]!r})"

    @property
    def names(self) -> frozenset[str]:
        """Names of every registered extension."""
        return frozenset(extension.name for extension in self._extensions)

    def get(self, name: str) -> Optional[SyntaxExtension]:
        """Return the extension called ``name``, if registered."""
        for extension in self._extensions:
            if extension.name == name:
                return extension
        return None

    def for_level(self, level: ExtensionLevel) -> tuple[SyntaxExtension, ...]:
        """Extensions with a recognizer at ``level``, in parse order."""
        return tuple(e for e in self._extensions if e.level == level and e.pattern is not None)

    def serializer_for(self, node_type: str) -> Optional[SerializeFn]:
        """Return the first serializer (in parse order) handling ``node_type``."""
        for extension in self._extensions:
            if extension.serialize is not None and node_type in extension.node_types:
                return extension.serialize
        return None

    def without(self, names: Iterable[str]) -> "ExtensionRegistry":
        """Return a registry without the named extensions."""
        excluded = set(names)
        return ExtensionRegistry(e for e in self._extensions if e.name not in excluded)

    def with_extensions(self, *extensions: SyntaxExtension) -> "ExtensionRegistry":
        """Return a registry that also contains ``extensions``."""
        return ExtensionRegistry((*self._extensions, *extensions))


def default_registry() -> ExtensionRegistry:
    """Return a registry holding the built-in flavored constructs."""
    from flavormark.extensions.builtins import BUILTIN_EXTENSIONS

    return ExtensionRegistry(BUILTIN_EXTENSIONS)
