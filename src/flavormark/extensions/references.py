#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/extensions/references.py
"""Inline references resolved at render time.

``<<name>>`` refers to a variable and ``<<glossary:term>>`` to a glossary
term. Both stay symbolic in the document tree; renderers look the values up
in the compile options.

"""

from __future__ import annotations

import re

from flavormark.ast.nodes import GlossaryReference, Node, Variable
from flavormark.extensions.registry import ParseContext, SerializeContext, SyntaxExtension

GLOSSARY_PATTERN = r"<<glossary:(?P<glossary_term>[^<>\n]+?)>>"
VARIABLE_PATTERN = r"<<(?P<variable_name>[\w.:-][\w.: -]*)>>"


def produce_glossary(match: "re.Match[str]", context: ParseContext) -> Node:
    return GlossaryReference(term=match.group("glossary_term"))


def serialize_glossary(node: Node, context: SerializeContext) -> str:
    assert isinstance(node, GlossaryReference)
    return f"<<glossary:{node.term}>>"


def produce_variable(match: "re.Match[str]", context: ParseContext) -> Node:
    return Variable(name=match.group("variable_name"))


def serialize_variable(node: Node, context: SerializeContext) -> str:
    assert isinstance(node, Variable)
    return f"<<{node.name}>>"


GLOSSARY_EXTENSION = SyntaxExtension(
    name="glossary",
    level="inline",
    pattern=GLOSSARY_PATTERN,
    parse_order=10,
    produce=produce_glossary,
    serialize=serialize_glossary,
    node_types=("glossary-reference",),
)

VARIABLE_EXTENSION = SyntaxExtension(
    name="variable",
    level="inline",
    pattern=VARIABLE_PATTERN,
    parse_order=20,
    produce=produce_variable,
    serialize=serialize_variable,
    node_types=("variable-reference",),
)
