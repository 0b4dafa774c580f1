"""
tiny-bloom - Lightweight Bloom Filters

tiny-bloom is a Python library for probabilistic set membership: fixed-size
Bloom filters with an optional counting mode that supports deletion.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_bloom.algorithms.bloom import BloomFilter, CountingBloomFilter
from tiny_bloom.core.base import ProbabilisticSet
from tiny_bloom.core.config import FilterConfig
from tiny_bloom.core.errors import (
    InvalidInputError,
    InvalidParameterError,
    InvalidParameterTypeError,
    TinyBloomError,
)

__all__ = [
    # Core
    "ProbabilisticSet",
    "FilterConfig",
    # Errors
    "TinyBloomError",
    "InvalidParameterError",
    "InvalidParameterTypeError",
    "InvalidInputError",
    # Algorithm implementations
    "BloomFilter",
    "CountingBloomFilter",
]
