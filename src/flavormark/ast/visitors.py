#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/ast/visitors.py
"""Visitor base class for document tree traversal.

Nodes dispatch on their type tag: a node of type ``code-tab-group`` calls
``visit_code_tab_group``. Node types a visitor does not know about reach
``generic_visit``, which is where visitors put their fallback behavior.

"""

from __future__ import annotations

from typing import Any

from flavormark.ast.nodes import Node, get_node_children


class NodeVisitor:
    """Base class for document tree visitors.

    Subclasses implement ``visit_<type>`` methods for the node types they
    handle. The default ``generic_visit`` walks into children and returns
    None.

    Examples
    --------
    Count the headings in a tree:

        >>> class HeadingCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_heading(self, node):
        ...         self.count += 1
        ...         self.generic_visit(node)

    """

    def visit(self, node: Node) -> Any:
        """Visit ``node`` by dispatching on its type tag."""
        return node.accept(self)

    def generic_visit(self, node: Node) -> Any:
        """Visit every child of ``node``."""
        for child in get_node_children(node):
            child.accept(self)
        return None
