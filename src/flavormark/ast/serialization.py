#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/ast/serialization.py
"""JSON serialization and deserialization for document trees.

Every node becomes a mapping with a ``type`` key, one key per attribute and
one key per child field. Deserialization is driven by the same field
declarations, so the two directions cannot drift apart:

- keys that are not attributes of the node's type are ignored with a warning;
- types this library does not define become ``UnknownNode``.

Examples
--------
    >>> from flavormark.ast import Document, Heading, Text
    >>> doc = Document(children=[Heading(depth=1, children=[Text("Title")])])
    >>> data = ast_to_dict(doc)
    >>> data["children"][0]["depth"]
    1
    >>> dict_to_ast(data) == doc
    True

"""

from __future__ import annotations

import json
import logging
from dataclasses import MISSING, fields
from typing import Any, Mapping, Optional

from flavormark.ast.nodes import NODE_CLASSES, Node, Position, UnknownNode

logger = logging.getLogger(__name__)

_POSITION_KEY = "position"


def _serialize_position(position: Position) -> dict[str, Any]:
    return {
        "start_line": position.start_line,
        "start_column": position.start_column,
        "end_line": position.end_line,
        "end_column": position.end_column,
    }


def _deserialize_position(data: Any) -> Optional[Position]:
    if not isinstance(data, Mapping):
        return None
    try:
        return Position(
            start_line=int(data["start_line"]),
            start_column=int(data["start_column"]),
            end_line=data.get("end_line"),
            end_column=data.get("end_column"),
        )
    except (KeyError, TypeError, ValueError):
        logger.warning(f"Ignoring malformed position data: {data!r}")
        return None


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert a document tree to a JSON-compatible dictionary.

    Parameters
    ----------
    node : Node
        Root of the tree to convert

    Returns
    -------
    dict[str, Any]
        Nested mapping describing the tree

    """
    result: dict[str, Any] = {"type": node.type}
    for f in fields(node):  # type: ignore[arg-type]
        value = getattr(node, f.name)
        if f.name == _POSITION_KEY:
            if value is not None:
                result[_POSITION_KEY] = _serialize_position(value)
        elif f.name == "raw_type":
            continue
        elif f.name in node.child_fields:
            result[f.name] = [ast_to_dict(child) for child in value]
        elif isinstance(value, dict):
            result[f.name] = dict(value)
        elif isinstance(value, list):
            result[f.name] = list(value)
        else:
            result[f.name] = value
    return result


def dict_to_ast(data: Mapping[str, Any]) -> Node:
    """Convert a dictionary produced by ``ast_to_dict`` back into nodes.

    Parameters
    ----------
    data : Mapping[str, Any]
        Mapping with a ``type`` key

    Returns
    -------
    Node
        Reconstructed tree

    Raises
    ------
    ValueError
        If ``data`` has no type, lacks a required attribute, or holds a
        value its node type rejects

    """
    node_type = data.get("type")
    if not isinstance(node_type, str) or not node_type:
        raise ValueError(f"Node data is missing a 'type' key: {data!r}")

    cls = NODE_CLASSES.get(node_type)
    if cls is None:
        logger.warning(f"Unknown node type '{node_type}' deserialized as UnknownNode")
        value = data.get("value")
        return UnknownNode(
            raw_type=node_type,
            value=value if isinstance(value, str) else None,
            children=[dict_to_ast(child) for child in data.get("children", ()) if isinstance(child, Mapping)],
            position=_deserialize_position(data.get(_POSITION_KEY)),
        )

    known = {f.name: f for f in fields(cls)}  # type: ignore[arg-type]
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "type":
            continue
        if key not in known:
            logger.warning(f"Ignoring unknown attribute '{key}' on node type '{node_type}'")
            continue
        if key == _POSITION_KEY:
            kwargs[key] = _deserialize_position(value)
        elif key in cls.child_fields:
            kwargs[key] = [dict_to_ast(child) for child in value]
        else:
            kwargs[key] = value

    missing = [
        name
        for name, f in known.items()
        if name not in kwargs and f.default is MISSING and f.default_factory is MISSING
    ]
    if missing:
        raise ValueError(f"Node type '{node_type}' is missing required attribute(s): {', '.join(missing)}")

    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid data for node type '{node_type}': {exc}") from exc


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a document tree to a JSON string."""
    return json.dumps(ast_to_dict(node), indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a document tree from a JSON string.

    Raises
    ------
    ValueError
        If the string is not valid JSON or does not describe a node

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ValueError("JSON document must be an object")
    return dict_to_ast(data)
