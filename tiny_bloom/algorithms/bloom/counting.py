"""
Counting Bloom Filter implementation for TinyBloom.

This module provides the Counting Bloom Filter, an extension of the Bloom
Filter that supports deletion by replacing single bits with small counters.
Each counter holds 0..61 and saturates rather than wrapping.

References:
    - Fan, L., Cao, P., Almeida, J., & Broder, A. Z. (2000).
      Summary cache: a scalable wide-area web cache sharing protocol.
      IEEE/ACM Transactions on Networking, 8(3), 281-293.
"""

from collections import Counter
from typing import Any, Dict

from tiny_bloom.algorithms.bloom.base import BloomFilter, ConfigLike
from tiny_bloom.algorithms.bloom.store import COUNTER_MAX, CounterStore


class CountingBloomFilter(BloomFilter):
    """
    Counting Bloom Filter for set membership testing with deletion support.

    This is a BloomFilter whose `counter` option is always on. When an item is
    inserted the counters at its positions are incremented; when it is
    deleted they are decremented. A query is true only if all its counters
    are greater than zero.

    Counters saturate at 61. Once a counter has saturated, later deletions can
    bring it to zero before every element that touched it has been removed,
    which can produce false negatives for those elements. Keep the load well
    below saturation when deletions matter.

    Example:
        cbf = CountingBloomFilter(entries_max=1000, error_chance=0.01)
        cbf.insert("apple")
        cbf.insert("apple")
        cbf.delete("apple")   # True, "apple" still present
        cbf.delete("apple")   # True, "apple" now absent
    """

    counter_max = COUNTER_MAX

    def __init__(self, config: ConfigLike = None, **options: Any):
        options["counter"] = True
        super().__init__(config, **options)

    @property
    def store(self) -> CounterStore:
        return self._store  # type: ignore[return-value]

    def get_counter(self, position: int) -> int:
        """
        Counter value at a position.

        Raises:
            IndexError: If position is outside [0, bit_size).
        """
        return self._store.read(position)

    def counters(self, item: Any) -> list:
        """Counter values at a scalar element's positions, in function order."""
        return [self._store.read(p) for p in self.positions(item)]

    def counter_distribution(self) -> Dict[int, int]:
        """Map of counter value to number of positions holding it (non-zero only)."""
        distribution = Counter(c for c in self.store.values() if c)
        return dict(sorted(distribution.items()))

    def saturated_counters(self) -> int:
        """Number of counters stuck at the maximum value."""
        return self.store.count_saturated()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics including counter-specific information.

        Returns:
            Base Bloom statistics plus counter maximum, distribution and
            saturation figures.
        """
        stats = super().get_stats()

        distribution = self.counter_distribution()
        nonzero = sum(distribution.values())
        saturated = distribution.get(COUNTER_MAX, 0)

        stats.update(
            {
                "counter_max": COUNTER_MAX,
                "max_counter_value": max(distribution) if distribution else 0,
                "mean_nonzero_counter": (
                    sum(v * n for v, n in distribution.items()) / nonzero
                    if nonzero
                    else 0.0
                ),
                "saturated_counters": saturated,
                "saturation_ratio": saturated / self._bit_size,
                "counter_distribution": {str(v): n for v, n in distribution.items()},
            }
        )
        return stats

    def error_bounds(self) -> Dict[str, Any]:
        """
        Error bounds including the risk of counter overflow.

        A counter overflows when more than 61 insertions land on it. The
        expected load per counter is k*n/m; the risk label is derived from
        how close the busiest counter is to the maximum.
        """
        bounds = super().error_bounds()

        values = self.store.values()
        busiest = max(values) if len(values) else 0
        bounds["expected_counter_load"] = (
            self._hash_count * self._items_processed / self._bit_size
        )

        if busiest >= COUNTER_MAX:
            bounds["overflow_risk"] = "high"
        elif busiest >= COUNTER_MAX // 2:
            bounds["overflow_risk"] = "moderate"
        else:
            bounds["overflow_risk"] = "low"

        return bounds
