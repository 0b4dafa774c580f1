"""
Counting Bloom Filter Demo for TinyBloom.

This example demonstrates set membership testing with deletion support,
counter saturation and merging of counting filters.
"""

import logging

from tiny_bloom import BloomFilter, CountingBloomFilter


def demonstrate_counting_bloom_filter():
    """Demonstrate insertion and deletion."""
    print("\n=== Counting Bloom Filter Demo ===")

    cbf = CountingBloomFilter(entries_max=1000, error_chance=0.01)
    print("Counting filter parameters:")
    print(f"  Counters: {cbf.bit_size:,} (max value {cbf.counter_max})")
    print(f"  Hashes: {cbf.hash_count}")
    print(f"  Memory usage: {cbf.estimate_size():,} bytes")

    words = ["apple", "banana", "cherry", "date", "elderberry", "fig"]
    cbf.insert(words)
    cbf.insert("apple")

    print("\nChecking membership:")
    for word in words + ["kiwi"]:
        print(f"  {word!r} in filter: {word in cbf}")

    print("\nRemoving items:")
    print(f"  delete(['banana', 'kiwi']) -> {cbf.delete(['banana', 'kiwi'])}")
    print(f"  'banana' still present? {cbf.query('banana')}")
    print(f"  delete('apple') -> {cbf.delete('apple')}")
    print(f"  'apple' still present (inserted twice)? {cbf.query('apple')}")

    plain = BloomFilter(entries_max=1000)
    plain.insert("apple")
    print(f"\nA plain filter refuses deletion: delete('apple') -> {plain.delete('apple')}")


def demonstrate_saturation():
    """Show counters stopping at their maximum value."""
    print("\n=== Counter Saturation Demo ===")

    cbf = CountingBloomFilter(entries_max=100, set_size=500, hash_count=3)
    for _ in range(80):
        cbf.insert("hot")

    print(f"  Counters for 'hot' after 80 inserts: {cbf.counters('hot')}")
    print(f"  Saturated counters: {cbf.saturated_counters()}")
    print(f"  Overflow risk: {cbf.error_bounds()['overflow_risk']}")
    print(f"  Counter distribution: {cbf.counter_distribution()}")


def demonstrate_merge():
    """Combine two counting filters built with the same parameters."""
    print("\n=== Merge Demo ===")

    left = CountingBloomFilter(entries_max=1000, error_chance=0.01)
    right = CountingBloomFilter(entries_max=1000, error_chance=0.01)
    left.insert([f"left-{i}" for i in range(300)])
    right.insert([f"right-{i}" for i in range(200)])

    merged = left.merge(right)
    print(f"  Merged: {merged!r}")
    print(f"  Items processed: {merged.items_processed}")
    print(f"  'left-1' and 'right-1' present? {merged.contains(['left-1', 'right-1'])}")

    stats = merged.get_stats()
    print(f"  Fill ratio: {stats['fill_ratio']:.3f}, mean counter: {stats['mean_nonzero_counter']:.2f}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    demonstrate_counting_bloom_filter()
    demonstrate_saturation()
    demonstrate_merge()
