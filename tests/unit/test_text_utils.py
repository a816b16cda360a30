#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for slug generation and timing helpers."""
import logging
import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from flavormark.constants import MAX_SLUG_LENGTH
from flavormark.utils.text import Slugger, make_unique_id, slugify
from flavormark.utils.timing import debug_timer


@pytest.mark.unit
class TestSlugify:
    """Test slug creation."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Hello World!", "hello-world"),
            ("API Reference (v2.0)", "api-reference-v20"),
            ("Café", "café"),
            ("  padded  ", "padded"),
            ("snake_case name", "snake_case-name"),
            ("a - b", "a---b"),
            ("!!!", "section"),
            ("", "section"),
        ],
    )
    def test_examples(self, text: str, expected: str) -> None:
        """Test slugs for typical headings."""
        assert slugify(text) == expected

    def test_truncation(self) -> None:
        """Test that long slugs are cut without a trailing hyphen."""
        assert slugify("a" * 99 + " b", max_length=100) == "a" * 99

    def test_compatibility_normalization(self) -> None:
        """Test that compatibility characters are normalized."""
        assert slugify("ﬁle") == "file"


@pytest.mark.unit
class TestUniqueIds:
    """Test unique identifier generation."""

    def test_make_unique_id(self) -> None:
        """Test numbered variants."""
        seen: dict[str, int] = {}
        assert [make_unique_id("a", seen) for _ in range(3)] == ["a", "a-1", "a-2"]

    def test_suffix_collision(self) -> None:
        """Test that an existing suffixed id is skipped."""
        seen: dict[str, int] = {}
        ids = [make_unique_id(identifier, seen) for identifier in ["a-1", "a", "a"]]
        assert ids == ["a-1", "a", "a-2"]

    def test_slugger(self) -> None:
        """Test slugs within one document."""
        slugger = Slugger()
        assert [slugger.slug("Setup") for _ in range(3)] == ["setup", "setup-1", "setup-2"]

    def test_slugger_reset(self) -> None:
        """Test forgetting handed out slugs."""
        slugger = Slugger()
        slugger.slug("Setup")
        slugger.reset()
        assert slugger.slug("Setup") == "setup"


@pytest.mark.unit
@pytest.mark.property
class TestSlugProperties:
    """Property-based tests for slugs."""

    @given(st.text())
    def test_slug_characters(self, text: str) -> None:
        """Test that slugs only contain word characters and hyphens."""
        assert re.fullmatch(r"[\w-]+", slugify(text))

    @given(st.text())
    def test_slug_length(self, text: str) -> None:
        """Test that slugs never exceed the maximum length."""
        assert len(slugify(text)) <= MAX_SLUG_LENGTH

    @given(st.lists(st.text(max_size=10), max_size=20))
    def test_slugger_unique(self, headings: list[str]) -> None:
        """Test that a slugger never hands out the same slug twice."""
        slugger = Slugger()
        slugs = [slugger.slug(heading) for heading in headings]
        assert len(slugs) == len(set(slugs))


@pytest.mark.unit
class TestDebugTimer:
    """Test the debug timing context manager."""

    def test_logs_at_debug(self, caplog) -> None:
        """Test the timing message when DEBUG is enabled."""
        logger = logging.getLogger("flavormark.tests.timing")
        with caplog.at_level(logging.DEBUG, logger="flavormark.tests.timing"):
            with debug_timer(logger, "Parsing"):
                pass

        assert "Parsing completed in" in caplog.text

    def test_silent_above_debug(self, caplog) -> None:
        """Test that nothing is logged when DEBUG is disabled."""
        logger = logging.getLogger("flavormark.tests.timing_quiet")
        logger.setLevel(logging.INFO)
        with debug_timer(logger, "Parsing"):
            pass

        assert "Parsing" not in caplog.text
