#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/schemas/__init__.py
"""Data files shipped with flavormark (the default sanitization policy)."""
