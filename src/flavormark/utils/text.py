#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flavormark/utils/text.py
"""Text processing utilities for heading slugs.

Functions
---------
slugify : Convert heading text to a URL-safe slug
Slugger : Produce unique slugs for one document

Examples
--------
    >>> slugify("My Heading Title")
    'my-heading-title'

    >>> slugger = Slugger()
    >>> [slugger.slug("Setup") for _ in range(3)]
    ['setup', 'setup-1', 'setup-2']

"""

from __future__ import annotations

import re
import unicodedata

from flavormark.constants import MAX_SLUG_LENGTH

# Anything that is not a word character, a hyphen or a space is dropped.
_SLUG_STRIP = re.compile(r"[^\w\- ]+", re.UNICODE)
_DEFAULT_SLUG = "section"


def slugify(text: str, *, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Create a URL-safe slug from heading text.

    Slugs follow the convention used by GitHub heading anchors:

    - Unicode is normalized (NFKC) and lowercased
    - punctuation and symbols are removed
    - each space becomes a hyphen
    - word characters in any script are kept

    Parameters
    ----------
    text : str
        Text to slugify
    max_length : int, default 100
        Maximum slug length

    Returns
    -------
    str
        Slug, or ``"section"`` when nothing usable remains

    Examples
    --------
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("API Reference (v2.0)")
        'api-reference-v20'
        >>> slugify("Café")
        'café'

    """
    normalized = unicodedata.normalize("NFKC", text).strip().lower()
    slug = _SLUG_STRIP.sub("", normalized).replace(" ", "-")

    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")

    return slug or _DEFAULT_SLUG


class Slugger:
    """Generate unique slugs within one document.

    The first occurrence of a slug is returned unchanged; later occurrences
    get ``-1``, ``-2`` and so on. A suffixed slug that collides with a slug
    already handed out moves on to the next number. A Slugger holds state,
    so a new one is created for every document.

    """

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, text: str) -> str:
        """Return a unique slug for ``text``."""
        return make_unique_id(slugify(text), self._occurrences)

    def reset(self) -> None:
        """Forget every slug handed out so far."""
        self._occurrences.clear()


def make_unique_id(identifier: str, seen: dict[str, int]) -> str:
    """Return ``identifier`` or a numbered variant not yet in ``seen``.

    Parameters
    ----------
    identifier : str
        Preferred identifier
    seen : dict[str, int]
        Occurrence counts, updated in place

    Returns
    -------
    str
        Identifier unique among those recorded in ``seen``

    """
    candidate = identifier
    while candidate in seen:
        seen[identifier] += 1
        candidate = f"{identifier}-{seen[identifier]}"
    seen[candidate] = 0
    return candidate


__all__ = [
    "slugify",
    "Slugger",
    "make_unique_id",
]
