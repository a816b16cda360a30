"""Base classes shared by flavormark option dataclasses.

Options are frozen dataclasses: they are validated once, in ``__post_init__``,
and then shared read-only by every compile that uses them.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any, Collection

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from flavormark.exceptions import InvalidOptionsError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        Raises
        ------
        InvalidOptionsError
            If a keyword is not a field of this options class, or if the
            updated values fail validation

        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise InvalidOptionsError(
                f"Unknown option(s) for {type(self).__name__}: {', '.join(unknown)}",
                invalid_options=unknown,
            )
        return replace(self, **kwargs)


def validate_choice(name: str, value: Any, choices: Collection[Any]) -> None:
    """Raise InvalidOptionsError unless ``value`` is one of ``choices``."""
    if value not in choices:
        allowed = ", ".join(repr(c) for c in sorted(choices, key=str))
        raise InvalidOptionsError(
            f"Invalid value {value!r} for option '{name}'; expected one of {allowed}",
            invalid_options=[name],
            parameter_value=value,
        )
