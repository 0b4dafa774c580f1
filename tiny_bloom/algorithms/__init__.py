"""
Algorithm implementations for TinyBloom.
"""

from tiny_bloom.algorithms.bloom import BloomFilter, CountingBloomFilter

__all__ = [
    "BloomFilter",
    "CountingBloomFilter",
]
