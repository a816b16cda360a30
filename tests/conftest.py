"""Pytest configuration and shared fixtures for the flavormark test suite.

This module provides shared fixtures and test configuration used across the
entire test suite.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from flavormark.options import CompileOptions

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "property: Property-based tests driven by hypothesis")


SAMPLE_MARKDOWN = """\
---
title: Getting Started
---

# Getting Started

Welcome, <<user>>. Read about the <<glossary:API>> first.

> 📘 Before you begin
> You need an account.

```python Python
print("hi")
```
```js Node
console.log("hi")
```

## Setup

- [x] Install
- [ ] Configure

[block:callout]
{
  "type": "warning",
  "title": "Careful",
  "body": "This step is **slow**."
}
[/block]

## Setup
"""


@pytest.fixture
def sample_markdown() -> str:
    """Provide a document exercising every built-in construct.

    Returns
    -------
    str
        Flavored markdown with front-matter, a callout, code tabs, a task
        list, a magic block, a variable and a glossary reference.

    """
    return SAMPLE_MARKDOWN


@pytest.fixture
def soft_options() -> CompileOptions:
    """Provide options that keep single newlines as soft breaks and skip copy buttons."""
    return CompileOptions(line_break_mode="soft", copy_buttons=False)
