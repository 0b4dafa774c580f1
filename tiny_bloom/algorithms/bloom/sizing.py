"""
Parameter sizing for Bloom filters.

Standard optimal-parameter formulas: for n expected entries and target false
positive probability p,

    m = ceil(-n * ln(p) / ln(2)^2)      bits
    k = round(m * ln(2) / n)            hash functions

Either value may be pinned explicitly, e.g. to match an existing layout.
"""

import math
from typing import NamedTuple, Optional

from tiny_bloom.core.config import MIN_SET_SIZE

_LN2 = math.log(2)


class FilterSizing(NamedTuple):
    """Array length and hash function count for a filter."""

    bit_size: int
    hash_count: int


def calculate_bit_size(entries_max: int, error_chance: float) -> int:
    """
    Calculate the optimal array length.

    Args:
        entries_max: Expected number of entries (n).
        error_chance: Target false positive rate (p).

    Returns:
        Optimal array length, never below the minimum of 100.
    """
    m = -(entries_max * math.log(error_chance)) / (_LN2**2)
    return max(MIN_SET_SIZE, math.ceil(m))


def calculate_hash_count(bit_size: int, entries_max: int) -> int:
    """
    Calculate the optimal number of hash functions.

    Args:
        bit_size: Array length (m).
        entries_max: Expected number of entries (n).

    Returns:
        Optimal number of hash functions, at least 1.
    """
    k = bit_size * _LN2 / entries_max
    # Round half up; the builtin round() would send 2.5 to 2
    return max(1, math.floor(k + 0.5))


def resolve_sizing(
    entries_max: int,
    error_chance: float,
    bit_size: Optional[int] = None,
    hash_count: Optional[int] = None,
) -> FilterSizing:
    """
    Resolve the final sizing, honouring explicit overrides.

    The hash count is derived from the final array length, so an explicit
    bit_size still gets a matching number of hash functions.
    """
    if bit_size is None:
        bit_size = calculate_bit_size(entries_max, error_chance)
    if hash_count is None:
        hash_count = calculate_hash_count(bit_size, entries_max)
    return FilterSizing(bit_size, hash_count)


def expected_false_positive_rate(bit_size: int, hash_count: int, entries: int) -> float:
    """
    Theoretical false positive rate after inserting `entries` distinct elements.

    Formula: (1 - e^(-k*n/m))^k
    """
    if entries <= 0:
        return 0.0
    return (1.0 - math.exp(-(hash_count * entries) / bit_size)) ** hash_count
