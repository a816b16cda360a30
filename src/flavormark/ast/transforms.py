#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/ast/transforms.py
"""Generic depth-first selection and transformation of document trees.

Two primitives cover every tree walk the pipeline needs:

- ``select_all`` collects the nodes matching a predicate in document order.
- ``transform`` rebuilds a tree, replacing each node that matches a
  predicate with the result of a mapping function.

Slug assignment, table of contents normalization and plain-text extraction
are all written in terms of these two functions.

Examples
--------
Shift every heading one level deeper:

    >>> from dataclasses import replace
    >>> from flavormark.ast import Heading
    >>> deeper = transform(
    ...     doc,
    ...     lambda n: replace(n, depth=min(n.depth + 1, 6)),
    ...     predicate=lambda n: isinstance(n, Heading),
    ... )

"""

from __future__ import annotations

from typing import Callable, Iterator, Optional, TypeVar

from flavormark.ast.nodes import Node, get_node_children, replace_node_children

NodeT = TypeVar("NodeT", bound=Node)
Predicate = Callable[[Node], bool]
Mapper = Callable[[Node], Node]


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in depth-first pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(get_node_children(current)))


def select_all(node: Node, predicate: Predicate) -> list[Node]:
    """Return every node in the tree matching ``predicate``, in document order."""
    return [candidate for candidate in iter_nodes(node) if predicate(candidate)]


def select_type(node: Node, node_type: type[NodeT]) -> list[NodeT]:
    """Return every node in the tree that is an instance of ``node_type``."""
    return [candidate for candidate in iter_nodes(node) if isinstance(candidate, node_type)]


def transform(node: Node, mapper: Mapper, predicate: Optional[Predicate] = None) -> Node:
    """Rebuild a tree, mapping the nodes that match ``predicate``.

    Nodes are visited depth-first in document order. A matching node is
    passed to ``mapper`` before its children are processed, so the mapper
    sees nodes in the same order ``select_all`` returns them and its result's
    children are transformed in turn. The input tree is never modified;
    unchanged subtrees are shared with the result.

    Parameters
    ----------
    node : Node
        Root of the tree to transform
    mapper : Callable[[Node], Node]
        Function producing the replacement for a matching node
    predicate : Callable[[Node], bool], optional
        Selects the nodes to map; every node when omitted

    Returns
    -------
    Node
        Root of the transformed tree

    """
    if predicate is None or predicate(node):
        node = mapper(node)

    if not node.child_fields:
        return node

    changed = False
    new_children: dict[str, list[Node]] = {}
    for name in node.child_fields:
        old = getattr(node, name)
        new = [transform(child, mapper, predicate) for child in old]
        changed = changed or any(a is not b for a, b in zip(old, new))
        new_children[name] = new

    if not changed:
        return node
    return replace_node_children(node, new_children)
