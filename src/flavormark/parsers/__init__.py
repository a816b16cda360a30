#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/parsers/__init__.py
"""Parsers producing document trees."""

from flavormark.parsers.markdown import MarkdownParser, assign_slugs, split_frontmatter

__all__ = ["MarkdownParser", "assign_slugs", "split_frontmatter"]
