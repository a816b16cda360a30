#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/utils/html_sanitizer.py
"""Allow-list sanitization of hypertext trees.

A ``SanitizationPolicy`` is plain data: the allowed tag names, the allowed
attributes per tag, the URL schemes allowed per attribute and the tags that
are removed together with their content. The default policy is loaded from
``schemas/sanitize.yaml``; callers can build their own with
``SanitizationPolicy.from_mapping`` or extend the default.

Independently of the policy, these are always removed:

- event handler attributes (``on*``);
- URL attributes using a dangerous scheme (``javascript:``, ``vbscript:``,
  HTML or script ``data:`` URLs);
- ``style`` values containing ``expression()`` or dangerous ``url()``
  references.

``sanitize_tree`` is pure and idempotent: it never modifies its input, and
sanitizing an already sanitized tree returns an equal tree.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union
from urllib.parse import urlparse

import yaml

from flavormark.constants import DANGEROUS_SCHEMES, URL_ATTRIBUTES
from flavormark.exceptions import InvalidOptionsError
from flavormark.hast.nodes import Comment, Element, HypertextNode, Raw, Root, Text

logger = logging.getLogger(__name__)

_GLOBAL = "*"
_SCHEMA_RESOURCE = "sanitize.yaml"
_RELATIVE_URL = re.compile(r"^(?:[#/?.]|[^:/?#]*(?:[/?#]|$))")
_CSS_URL = re.compile(r"url\s*\(\s*[\"']?\s*([^)\"']+)")


def is_relative_url(url: str) -> bool:
    """Return True when ``url`` has no scheme.

    Examples
    --------
        >>> is_relative_url("#section")
        True
        >>> is_relative_url("../file.html")
        True
        >>> is_relative_url("https://example.com")
        False

    """
    return bool(_RELATIVE_URL.match(url.strip()))


def is_url_scheme_dangerous(url: str) -> bool:
    """Check if a URL uses a dangerous scheme.

    Parameters
    ----------
    url : str
        URL to check

    Returns
    -------
    bool
        True if URL uses a dangerous scheme, False otherwise

    Examples
    --------
    >>> is_url_scheme_dangerous("https://example.com")
    False
    >>> is_url_scheme_dangerous("javascript:alert('xss')")
    True
    >>> is_url_scheme_dangerous("/relative/path")
    False

    """
    if not url or not url.strip():
        return False

    # Browsers ignore embedded control characters and whitespace in schemes
    url_lower = re.sub(r"[\x00-\x20]+", "", url).lower()

    if is_relative_url(url_lower):
        return False

    for dangerous_scheme in DANGEROUS_SCHEMES:
        if url_lower.startswith(dangerous_scheme):
            return True

    return urlparse(url_lower).scheme in ("javascript", "vbscript", "about")


def _is_style_safe(style_value: str) -> bool:
    """Check if a CSS style attribute value is safe.

    Examples
    --------
        >>> _is_style_safe("color: red; font-size: 12px;")
        True
        >>> _is_style_safe("background: url(javascript:alert(1))")
        False
        >>> _is_style_safe("width: expression(alert(1))")
        False

    """
    if not style_value:
        return True

    style_lower = style_value.lower()

    # IE-specific expression() function
    if re.search(r"expression\s*\(", style_lower):
        return False

    for match in _CSS_URL.finditer(style_lower):
        if is_url_scheme_dangerous(match.group(1).strip()):
            return False

    return True


def _frozen_sets(data: Any, what: str) -> Mapping[str, frozenset[str]]:
    if data is None:
        return MappingProxyType({})
    if not isinstance(data, Mapping):
        raise InvalidOptionsError(f"Sanitization policy '{what}' must be a mapping", invalid_options=[what])
    return MappingProxyType(
        {str(key).lower(): frozenset(str(v).lower() for v in values or ()) for key, values in data.items()}
    )


@dataclass(frozen=True)
class SanitizationPolicy:
    """Allow-list describing what survives sanitization.

    Parameters
    ----------
    tag_names : frozenset[str]
        Elements that are kept
    attributes : Mapping[str, frozenset[str]]
        Allowed attributes per tag name; ``"*"`` applies to every tag.
        A name ending in ``*`` (``data-*``) allows every attribute with that prefix.
    protocols : Mapping[str, frozenset[str]]
        Allowed URL schemes per attribute. Relative URLs are always allowed.
    strip : frozenset[str]
        Elements removed together with their content
    allow_comments : bool, default = False
        Keep HTML comments
    permissive_tags : frozenset[str], default = empty
        Elements that keep every attribute (custom components); event
        handlers and dangerous URLs are still removed

    """

    tag_names: frozenset[str]
    attributes: Mapping[str, frozenset[str]] = field(default_factory=dict, hash=False)
    protocols: Mapping[str, frozenset[str]] = field(default_factory=dict, hash=False)
    strip: frozenset[str] = frozenset({"script", "style"})
    allow_comments: bool = False
    permissive_tags: frozenset[str] = frozenset()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SanitizationPolicy":
        """Build a policy from plain data, as found in ``sanitize.yaml``.

        Raises
        ------
        InvalidOptionsError
            If the mapping has unknown keys or values of the wrong shape

        """
        known = {"tag_names", "attributes", "protocols", "strip", "allow_comments", "permissive_tags"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidOptionsError(
                f"Unknown sanitization policy key(s): {', '.join(unknown)}", invalid_options=unknown
            )
        for key in ("tag_names", "strip", "permissive_tags"):
            value = data.get(key)
            if value is not None and (isinstance(value, str) or not isinstance(value, Iterable)):
                raise InvalidOptionsError(f"Sanitization policy '{key}' must be a list", invalid_options=[key])

        return cls(
            tag_names=frozenset(str(tag).lower() for tag in data.get("tag_names") or ()),
            attributes=_frozen_sets(data.get("attributes"), "attributes"),
            protocols=_frozen_sets(data.get("protocols"), "protocols"),
            strip=frozenset(str(tag).lower() for tag in data.get("strip") or ()),
            allow_comments=bool(data.get("allow_comments", False)),
            permissive_tags=frozenset(str(tag).lower() for tag in data.get("permissive_tags") or ()),
        )

    def extended(
        self,
        tag_names: Iterable[str] = (),
        attributes: Optional[Mapping[str, Iterable[str]]] = None,
        permissive_tags: Iterable[str] = (),
    ) -> "SanitizationPolicy":
        """Return a copy of the policy that also allows the given tags and attributes."""
        merged = {tag: set(values) for tag, values in self.attributes.items()}
        for tag, values in (attributes or {}).items():
            merged.setdefault(tag.lower(), set()).update(value.lower() for value in values)
        permissive = frozenset(tag.lower() for tag in permissive_tags)
        return SanitizationPolicy(
            tag_names=self.tag_names | frozenset(tag.lower() for tag in tag_names) | permissive,
            attributes=MappingProxyType({tag: frozenset(values) for tag, values in merged.items()}),
            protocols=self.protocols,
            strip=self.strip,
            allow_comments=self.allow_comments,
            permissive_tags=self.permissive_tags | permissive,
        )

    def allows_attribute(self, tag_name: str, attribute: str) -> bool:
        """Whether ``attribute`` is allowed on ``tag_name`` by the allow-list."""
        if tag_name in self.permissive_tags:
            return True
        for allowed in (self.attributes.get(tag_name, frozenset()), self.attributes.get(_GLOBAL, frozenset())):
            if attribute in allowed:
                return True
            if any(name.endswith("*") and attribute.startswith(name[:-1]) for name in allowed):
                return True
        return False

    def allows_url(self, attribute: str, url: str) -> bool:
        """Whether ``url`` may be used as the value of ``attribute``."""
        if is_url_scheme_dangerous(url):
            return False
        schemes = self.protocols.get(attribute)
        if schemes is None or is_relative_url(url):
            return True
        return urlparse(url.strip()).scheme.lower() in schemes


@lru_cache(maxsize=1)
def default_policy() -> SanitizationPolicy:
    """Return the default policy loaded from the bundled schema."""
    schema_text = resources.files("flavormark.schemas").joinpath(_SCHEMA_RESOURCE).read_text(encoding="utf-8")
    return SanitizationPolicy.from_mapping(yaml.safe_load(schema_text))


def _sanitize_properties(tag_name: str, properties: Mapping[str, str], policy: SanitizationPolicy) -> dict[str, str]:
    clean: dict[str, str] = {}
    for name, value in properties.items():
        attribute = name.lower()
        value = str(value)
        if attribute.startswith("on"):
            continue
        if not policy.allows_attribute(tag_name, attribute):
            continue
        if (attribute in URL_ATTRIBUTES or attribute in policy.protocols) and not policy.allows_url(attribute, value):
            logger.debug(f"Removing unsafe URL from <{tag_name} {attribute}>")
            continue
        if attribute == "style" and not _is_style_safe(value):
            logger.debug(f"Removing unsafe style from <{tag_name}>")
            continue
        clean[attribute] = value
    return clean


def _sanitize_node(node: HypertextNode, policy: SanitizationPolicy) -> list[HypertextNode]:
    if isinstance(node, Text):
        return [node]
    if isinstance(node, Raw):
        # Raw HTML that was never materialized is kept as text
        return [Text(value=node.value)]
    if isinstance(node, Comment):
        return [node] if policy.allow_comments else []

    tag_name = node.tag_name.lower()
    if tag_name in policy.strip:
        return []
    children = _sanitize_children(node.children, policy)
    if tag_name not in policy.tag_names:
        return children
    properties = _sanitize_properties(tag_name, node.properties, policy)
    return [Element(tag_name=tag_name, properties=properties, children=children)]


def _sanitize_children(children: list[HypertextNode], policy: SanitizationPolicy) -> list[HypertextNode]:
    result: list[HypertextNode] = []
    for child in children:
        for clean in _sanitize_node(child, policy):
            if isinstance(clean, Text) and result and isinstance(result[-1], Text):
                result[-1] = Text(value=result[-1].value + clean.value)
            else:
                result.append(clean)
    return result


def sanitize_tree(
    tree: Union[Root, HypertextNode], policy: Optional[SanitizationPolicy] = None
) -> Union[Root, HypertextNode]:
    """Filter a hypertext tree through an allow-list policy.

    Parameters
    ----------
    tree : Root or HypertextNode
        Tree to sanitize; it is not modified
    policy : SanitizationPolicy, optional
        Policy to apply; the default policy when omitted

    Returns
    -------
    Root or HypertextNode
        Sanitized tree. A disallowed top-level element is unwrapped into a
        ``Root``.

    """
    policy = policy or default_policy()
    if isinstance(tree, Root):
        return Root(children=_sanitize_children(tree.children, policy))

    result = _sanitize_node(tree, policy)
    if len(result) == 1:
        return result[0]
    return Root(children=result)
