"""
Basic Bloom Filter Demo for TinyBloom.

This example shows the standard Bloom filter: sizing from a capacity and a
false positive target, inserting scalars and nested collections, exact and
inexact queries, and persisting a filter as JSON.
"""

import logging
import random
import string

from tiny_bloom import BloomFilter


def demonstrate_basic_usage():
    """Demonstrate initialization, inserting and querying."""
    print("\n=== Basic Bloom Filter Demo ===")

    # Expecting ~10,000 items with a 1% false positive rate
    bf = BloomFilter(entries_max=10000, error_chance=0.01)

    print("Bloom Filter parameters:")
    print(f"  Expected items: {bf.entries_max:,}")
    print(f"  Target false positive rate: {bf.error_chance:.1%}")
    print(f"  Array length (bits): {bf.bit_size:,}")
    print(f"  Number of hashes: {bf.hash_count}")
    print(f"  Estimated memory usage: {bf.estimate_size():,} bytes")

    fruits = ["apple", "banana", "cherry", "date", "fig", "grape"]
    print("\nAdding items to the filter...")
    bf.insert(fruits)
    bf.insert({"citrus": ["Lemon", "Lime"], "count": 42})

    print(f"  items_processed={bf.items_processed}, entries_count={bf.entries_count}")

    print("\nChecking membership:")
    print("  (False means DEFINITELY NOT present, True means POSSIBLY present)")
    for item in fruits + ["LEMON", 42, "orange", "pear"]:
        print(f"  {item!r} in filter? {bf.query(item)}")

    print("\nCollections keep their shape:")
    print(f"  {bf.query(['apple', ['kiwi', 'fig'], {'x': 'date'}])}")

    print("\nInexact queries give the fraction of positions set:")
    for item in ["apple", "orange"]:
        print(f"  {item!r}: {bf.query(item, exact=False):.2f}")


def demonstrate_fpp_and_fill_ratio():
    """Show how the fill ratio drives the observed false positive rate."""
    print("\n=== FPP vs. Fill Ratio Demo ===")

    rng = random.Random(123)
    n = 1000
    bf = BloomFilter(entries_max=n, error_chance=0.05)
    print(f"Filter sized for {n} items, target FPP: {bf.error_chance:.1%}")

    def random_word():
        return "".join(rng.choice(string.ascii_lowercase) for _ in range(10))

    probes = [f"probe-{i}" for i in range(5000)]
    for batch in range(1, 5):
        bf.insert([random_word() for _ in range(n // 2)])
        observed = sum(1 for p in probes if bf.query(p)) / len(probes)
        print(
            f"  After {batch * n // 2:>5} items: fill={bf.fill_ratio():.3f}, "
            f"estimated FPP={bf.false_positive_probability():.4f}, "
            f"observed FPP={observed:.4f}, "
            f"cardinality~{bf.estimate_cardinality()}"
        )

    print(f"  Error margin: {bf.error_bounds()['error_margin']}")


def demonstrate_persistence():
    """Save a filter as JSON and load it back."""
    print("\n=== Persistence Demo ===")

    bf = BloomFilter({"entries_max": 500, "hash": {"algorithm": "blake2b", "seed": 7}})
    print(f"  Empty snapshot keys: {sorted(bf.to_dict())}")

    bf.insert(["alpha", "beta", "gamma"])
    payload = bf.serialize()
    print(f"  Serialized size: {len(payload):,} characters")

    restored = BloomFilter.deserialize(payload)
    print(f"  Restored: {restored!r}")
    print(f"  'beta' still present? {restored.query('beta')}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    demonstrate_basic_usage()
    demonstrate_fpp_and_fill_ratio()
    demonstrate_persistence()
