#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the flavormark library.

This module defines the exception classes raised while configuring a
compilation pipeline and while recovering from malformed markup. Only
configuration problems ever reach callers of the public API; problems found
inside a document are recovered locally and logged.

Exception Hierarchy
-------------------
- FlavormarkError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (rejected compile or serializer options)
    - ExtensionRegistryError (inconsistent syntax extension registry)

  - MalformedConstructError (a matched span could not become a node)

"""

from typing import Any, Iterable


class FlavormarkError(Exception):
    """Base exception class for all flavormark-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(FlavormarkError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic parameter
    parameter_value : any
        The value that caused the error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when compile options are contradictory or out of range.

    Raised while options are constructed or while a pipeline is assembled,
    always before any text is processed.

    Parameters
    ----------
    message : str
        Description of the problem
    invalid_options : Iterable[str], optional
        Names of the offending options
    parameter_value : any, optional
        The rejected value, when a single option is at fault
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    invalid_options : tuple[str, ...]
        Names of the offending options

    """

    def __init__(
        self,
        message: str,
        invalid_options: Iterable[str] = (),
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        names = tuple(invalid_options)
        super().__init__(
            message,
            parameter_name=names[0] if len(names) == 1 else None,
            parameter_value=parameter_value,
            original_error=original_error,
        )
        self.invalid_options = names


class ExtensionRegistryError(ValidationError):
    """Exception raised when a syntax extension registry cannot be assembled.

    Duplicate extension names, recognizer patterns that fail to compile and
    unknown extension levels are reported with this error.

    Parameters
    ----------
    message : str
        Description of the problem
    extension_name : str, optional
        Name of the offending extension
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, extension_name: str | None = None, original_error: Exception | None = None):
        """Initialize the registry error."""
        super().__init__(
            message, parameter_name="extensions", parameter_value=extension_name, original_error=original_error
        )
        self.extension_name = extension_name


class MalformedConstructError(FlavormarkError):
    """Exception raised when a recognized span cannot be turned into a node.

    Extensions raise this from their ``produce`` function. The parser catches
    it and keeps the span as literal text, so it never escapes a compile.

    Parameters
    ----------
    message : str
        Description of the problem
    construct : str, optional
        Name of the construct that failed
    raw : str, optional
        The raw source span
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        construct: str | None = None,
        raw: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the malformed construct error."""
        super().__init__(message, original_error=original_error)
        self.construct = construct
        self.raw = raw


__all__ = [
    "FlavormarkError",
    "ValidationError",
    "InvalidOptionsError",
    "ExtensionRegistryError",
    "MalformedConstructError",
]
