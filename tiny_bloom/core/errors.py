"""
Exception types for TinyBloom.

Configuration problems are reported at construction time and name the
offending parameter. Malformed elements are reported when they reach a
filter operation.
"""

from typing import Any, Optional


class TinyBloomError(Exception):
    """Base class for all errors raised by TinyBloom."""


class InvalidParameterError(TinyBloomError, ValueError):
    """
    A configuration option has an out-of-range or unknown value.

    Attributes:
        parameter: Name of the offending option (e.g. "error_chance").
        value: The rejected value.
    """

    def __init__(self, parameter: str, message: str, value: Any = None):
        super().__init__(f"{parameter}: {message}")
        self.parameter = parameter
        self.value = value


class InvalidParameterTypeError(InvalidParameterError, TypeError):
    """A configuration option has a value of the wrong type."""

    def __init__(self, parameter: str, expected: str, value: Any):
        super().__init__(
            parameter,
            f"expected {expected}, got {type(value).__name__}",
            value,
        )
        self.expected = expected


class InvalidInputError(TinyBloomError, TypeError):
    """
    An element is neither a scalar nor an ordered collection of elements.

    Attributes:
        received: Name of the type that was passed in.
    """

    def __init__(self, value: Any, path: Optional[str] = None):
        self.received = type(value).__name__
        location = f" at {path}" if path else ""
        super().__init__(
            f"Unsupported element of type {self.received}{location}; expected "
            f"str, bytes, int, float, bool, None, list, tuple or dict"
        )
