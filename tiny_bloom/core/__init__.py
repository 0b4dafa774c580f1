"""
Core functionality for TinyBloom.
"""

from tiny_bloom.core.base import ProbabilisticSet
from tiny_bloom.core.config import FilterConfig
from tiny_bloom.core.elements import Collection, Scalar, to_element
from tiny_bloom.core.errors import (
    InvalidInputError,
    InvalidParameterError,
    InvalidParameterTypeError,
    TinyBloomError,
)
from tiny_bloom.core.hash import DeterministicHash, fnv1a_32, murmurhash3_32

__all__ = [
    # Base classes
    "ProbabilisticSet",
    "FilterConfig",
    # Element model
    "Scalar",
    "Collection",
    "to_element",
    # Errors
    "TinyBloomError",
    "InvalidParameterError",
    "InvalidParameterTypeError",
    "InvalidInputError",
    # Hashing
    "DeterministicHash",
    "murmurhash3_32",
    "fnv1a_32",
]
