"""
Bloom Filter implementations for TinyBloom.

This module provides Bloom Filter implementations for efficient set membership testing
with bounded memory usage.

This includes:
- BloomFilter: Bloom filter with plain bits or, with counter=True, saturating counters
- CountingBloomFilter: Bloom filter variant that always supports item deletion
"""

from tiny_bloom.algorithms.bloom.base import BloomFilter
from tiny_bloom.algorithms.bloom.counting import CountingBloomFilter
from tiny_bloom.algorithms.bloom.indexer import HashFunction, HashIndexer
from tiny_bloom.algorithms.bloom.sizing import FilterSizing, resolve_sizing
from tiny_bloom.algorithms.bloom.store import (
    ALPHABET,
    COUNTER_MAX,
    BitStore,
    CounterStore,
    PlainBitStore,
)

__all__ = [
    "BloomFilter",
    "CountingBloomFilter",
    "HashFunction",
    "HashIndexer",
    "FilterSizing",
    "resolve_sizing",
    "BitStore",
    "PlainBitStore",
    "CounterStore",
    "ALPHABET",
    "COUNTER_MAX",
]
