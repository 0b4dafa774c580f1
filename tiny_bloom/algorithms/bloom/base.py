"""
Bloom Filter implementation for TinyBloom.

This module provides the Bloom filter, a space-efficient probabilistic data
structure for set membership testing with a tunable false positive rate and
no false negatives. The same class covers the counting variant: with the
`counter` option each position holds a small saturating counter instead of a
bit, which makes deletion possible.

Every operation accepts a single scalar element or an arbitrarily nested list,
tuple or dict of scalars. Collections are processed leaf by leaf in pre-order
and the result mirrors the input's shape.

A filter instance is not thread-safe. Callers mutating one filter from
several threads must serialize access themselves.

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
"""

import logging
import math
import sys
from typing import Any, Dict, List, Mapping, Optional, Union

from tiny_bloom.algorithms.bloom.indexer import HashFunction, HashIndexer
from tiny_bloom.algorithms.bloom.sizing import (
    expected_false_positive_rate,
    resolve_sizing,
)
from tiny_bloom.algorithms.bloom.store import BitStore, create_store
from tiny_bloom.core.base import ProbabilisticSet
from tiny_bloom.core.config import FilterConfig
from tiny_bloom.core.elements import iter_scalars, map_scalars, to_element
from tiny_bloom.core.hash import Scalar

logger = logging.getLogger(__name__)

ConfigLike = Union[FilterConfig, Mapping[str, Any], None]


class BloomFilter(ProbabilisticSet[Any, Any]):
    """
    Bloom Filter for set membership testing.

    A query returns either "possibly in set" or "definitely not in set".
    Sizing follows the standard optimal formulas for the configured capacity
    (`entries_max`) and false positive target (`error_chance`), unless the
    array length (`set_size`) or hash count (`hash_count`) is pinned.

    Accounting: `entries_count` grows by one for every hash function applied
    during insert, i.e. by `hash_count` per scalar element, and shrinks the
    same way on delete. It counts slot writes, not elements;
    `items_processed` counts inserted scalar elements.

    Example:
        bloom = BloomFilter(entries_max=1000, error_chance=0.01)

        bloom.insert("apple")
        bloom.insert(["banana", ["cherry"]])

        bloom.query("apple")                      # True
        bloom.query(["apple", "orange"])          # [True, False]
        bloom.query("banana", exact=False)        # 1.0

        counting = BloomFilter(entries_max=1000, counter=True)
        counting.insert("apple")
        counting.delete("apple")                  # True
    """

    def __init__(self, config: ConfigLike = None, **options: Any):
        """
        Initialize a new Bloom filter.

        Args:
            config: A FilterConfig, or a mapping of options using the public
                    names (entries_max, error_chance, set_size, hash_count,
                    counter, hash.strtolower, hash.algorithm, hash.seed).
            **options: FilterConfig field names, overriding `config`.

        Raises:
            InvalidParameterError: If an option is unknown or out of range.
            InvalidParameterTypeError: If an option has the wrong type.
        """
        super().__init__()

        if isinstance(config, FilterConfig):
            config = FilterConfig.from_mapping(config.to_dict(), **options) if options else config
        else:
            config = FilterConfig.from_mapping(config, **options)

        sizing = resolve_sizing(
            config.entries_max, config.error_chance, config.set_size, config.hash_count
        )

        self._config = config
        self._entries_max = config.entries_max
        self._error_chance = config.error_chance
        self._bit_size = sizing.bit_size
        self._hash_count = sizing.hash_count
        self._counting = config.counter
        self._entries_count = 0

        self._indexer = HashIndexer(
            hash_count=self._hash_count,
            bit_size=self._bit_size,
            algorithm=config.hash_algorithm,
            seed=config.hash_seed,
            case_fold=config.strtolower,
        )
        self._store: BitStore = create_store(self._bit_size, self._counting)

        logger.debug(
            "%s created: bit_size=%d, hash_count=%d, entries_max=%d, "
            "error_chance=%g, counter=%s, hash=%s",
            self.__class__.__name__,
            self._bit_size,
            self._hash_count,
            self._entries_max,
            self._error_chance,
            self._counting,
            config.hash_algorithm,
        )

    # --- Parameters ---

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def bit_size(self) -> int:
        """Length of the array (number of bits or counters)."""
        return self._bit_size

    @property
    def hash_count(self) -> int:
        return self._hash_count

    @property
    def entries_max(self) -> int:
        return self._entries_max

    @property
    def error_chance(self) -> float:
        return self._error_chance

    @property
    def entries_count(self) -> int:
        """Slot writes performed by insert, net of deletes."""
        return self._entries_count

    @property
    def counting_mode(self) -> bool:
        return self._counting

    @property
    def store(self) -> BitStore:
        return self._store

    @property
    def hash_functions(self) -> List[HashFunction]:
        return list(self._indexer.functions)

    def positions(self, item: Scalar) -> List[int]:
        """Array positions of a scalar element, one per hash function."""
        return self._indexer.positions(item)

    # --- Scalar operations ---

    def _insert_scalar(self, item: Scalar) -> bool:
        self._items_processed += 1
        for position in self._indexer.positions(item):
            self._store.increment(position)
            self._entries_count += 1
        return True

    def _query_scalar(self, item: Scalar, exact: bool) -> Union[bool, float]:
        positions = self._indexer.positions(item)

        if exact:
            for position in positions:
                if not self._store.read_bool(position):
                    return False
            return True

        hits = sum(1 for position in positions if self._store.read_bool(position))
        return hits / self._hash_count

    def _delete_scalar(self, item: Scalar) -> bool:
        # Collisions can make an absent item look present; deleting it then
        # decrements counters that belong to other elements.
        if not self._query_scalar(item, exact=True):
            return False

        for position in self._indexer.positions(item):
            self._store.decrement(position)
            self._entries_count = max(0, self._entries_count - 1)
        return True

    # --- Public operations ---

    def insert(self, element: Any) -> Any:
        """
        Add an element (or every leaf of a nested collection) to the filter.

        Args:
            element: A scalar, or a nested list/tuple/dict of scalars.

        Returns:
            True for a scalar; for a collection, the same shape filled with True.

        Raises:
            InvalidInputError: If the element or one of its leaves has an
                               unsupported type. Nothing is inserted then.
        """
        return map_scalars(to_element(element), self._insert_scalar)

    def update(self, item: Any) -> None:
        """
        Add an item to the filter.

        Equivalent to insert() without a return value.
        """
        self.insert(item)

    def delete(self, element: Any) -> Any:
        """
        Remove an element (or every leaf of a nested collection).

        Only counting filters support deletion; a plain filter returns False
        and is left untouched. A leaf that does not test as present is not
        deleted and reports False.

        Args:
            element: A scalar, or a nested list/tuple/dict of scalars.

        Returns:
            For a scalar, True if it was present and has been removed. For a
            collection, the same shape filled with per-leaf results. False on
            a plain filter regardless of shape.

        Raises:
            InvalidInputError: If the element has an unsupported type.
        """
        parsed = to_element(element)
        if not self._counting:
            logger.debug("delete() ignored: %s is not in counting mode", self)
            return False
        return map_scalars(parsed, self._delete_scalar)

    remove = delete

    def query(self, element: Any, exact: bool = True) -> Any:
        """
        Test an element (or every leaf of a nested collection).

        Args:
            element: A scalar, or a nested list/tuple/dict of scalars.
            exact: True returns a membership decision; False returns the
                   fraction of the element's positions that are set, a
                   float in [0, 1], useful as a tuning signal.

        Returns:
            For a scalar, a bool (exact) or float (inexact): False means
            definitely absent, True means possibly present. For a
            collection, the same shape filled with per-leaf results.

        Raises:
            InvalidInputError: If the element has an unsupported type.
        """
        return map_scalars(
            to_element(element), lambda item: self._query_scalar(item, exact)
        )

    def contains(self, element: Any) -> bool:
        """
        True if the element (every leaf, for a collection) might be present.
        """
        return all(
            self._query_scalar(item, exact=True)
            for item in iter_scalars(to_element(element))
        )

    def __contains__(self, element: Any) -> bool:
        return self.contains(element)

    # --- Whole-filter operations ---

    def merge(self, other: "BloomFilter") -> "BloomFilter":
        """
        Merge this Bloom filter with another one.

        Both filters must have the same class, array length, hash count,
        counting mode and hash settings. Plain filters are combined with a
        bitwise OR; counting filters add their counters, saturating at the
        counter maximum.

        Args:
            other: Another filter with the same parameters.

        Returns:
            A new merged filter.

        Raises:
            TypeError: If other is not the same filter class.
            ValueError: If filters have incompatible parameters.
        """
        self._check_same_type(other)

        if (
            self._counting != other._counting
            or not self._indexer.is_compatible(other._indexer)
        ):
            raise ValueError(
                f"Cannot merge Bloom filters with different parameters: "
                f"(bit_size={self._bit_size}, hash_count={self._hash_count}, "
                f"counter={self._counting}) and "
                f"(bit_size={other._bit_size}, hash_count={other._hash_count}, "
                f"counter={other._counting})"
            )

        result = self.__class__(self._config)
        result._store = self._store.union(other._store)
        result._entries_count = self._entries_count + other._entries_count
        result._items_processed = self._combine_items_processed(other)

        logger.debug(
            "Merged two %s instances (bit_size=%d)",
            self.__class__.__name__,
            self._bit_size,
        )
        return result

    def clear(self) -> None:
        """
        Reset the filter to its initial empty state.

        The array is zeroed but parameters and hash functions are kept.
        """
        super().clear()
        self._store.clear()
        self._entries_count = 0

    def is_empty(self) -> bool:
        """True if no slot of the array is set."""
        return self._store.is_empty()

    def fill_ratio(self) -> float:
        """Fraction of array positions that are non-zero."""
        return self._store.count_nonzero() / self._bit_size

    def false_positive_probability(self) -> float:
        """
        Current false positive probability estimated from the fill ratio.

        FPP ≈ fill_ratio ^ hash_count. This reflects the actual array state,
        not the configured target.
        """
        return max(0.0, min(self.fill_ratio() ** self._hash_count, 1.0))

    def estimate_cardinality(self) -> int:
        """
        Approximate number of distinct elements in the filter.

        Uses n ≈ -m * ln(1 - X/m) / k where X is the number of set slots.
        The estimate degrades as the filter saturates and is capped at the
        number of processed items.
        """
        set_slots = self._store.count_nonzero()
        if set_slots == 0:
            return 0
        if set_slots >= self._bit_size:
            return self._items_processed

        estimate = -self._bit_size * math.log(1.0 - set_slots / self._bit_size)
        estimate /= self._hash_count
        return min(max(0, int(round(estimate))), self._items_processed)

    # --- Serialization ---

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the Bloom filter to a dictionary for serialization.

        The array ("set") is omitted while entries_count is 0, since it is
        then known to be all zeros.

        Returns:
            A dictionary representation of the filter.
        """
        data = self._base_dict()
        data.update(
            {
                "entries_max": self._entries_max,
                "error_chance": self._error_chance,
                "bit_size": self._bit_size,
                "hash_count": self._hash_count,
                "entries_count": self._entries_count,
                "counter": self._counting,
                "hash": {
                    "strtolower": self._indexer.case_fold,
                    "algorithm": self._indexer.algorithm,
                    "seed": self._indexer.seed,
                },
            }
        )
        if self._entries_count != 0:
            data["set"] = self._store.encode()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BloomFilter":
        """
        Create a Bloom filter from a dictionary representation.

        The array is decoded before the filter is built, so a malformed
        snapshot raises without leaving a partially restored object.

        Args:
            data: The dictionary containing the filter state.

        Returns:
            A new BloomFilter initialized with the given state.

        Raises:
            ValueError: If a field is missing or malformed.
        """
        hash_options = data.get("hash", {})
        if not isinstance(hash_options, Mapping):
            raise ValueError(f"Invalid hash section in snapshot: {hash_options!r}")

        try:
            config = FilterConfig(
                entries_max=data["entries_max"],
                error_chance=data["error_chance"],
                set_size=data["bit_size"],
                hash_count=data["hash_count"],
                counter=data.get("counter", False),
                strtolower=hash_options.get("strtolower", True),
                hash_algorithm=hash_options.get("algorithm", "murmur3"),
                hash_seed=hash_options.get("seed", 0),
            )
            entries_count = data["entries_count"]
            items_processed = data.get("items_processed", 0)
        except KeyError as exc:
            raise ValueError(f"Snapshot is missing field {exc.args[0]!r}") from exc

        counts = (("entries_count", entries_count), ("items_processed", items_processed))
        for name, count in counts:
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"Invalid {name} in snapshot: {count!r}")

        instance = cls(config)

        if entries_count == 0:
            logger.debug("Snapshot has no entries; using a zero-filled array")
            store = instance._store
        elif "set" not in data:
            raise ValueError("Snapshot with entries_count > 0 is missing 'set'")
        else:
            store = type(instance._store).decode(data["set"], instance._bit_size)

        instance._store = store
        instance._entries_count = entries_count
        instance._items_processed = items_processed
        return instance

    # --- Diagnostics ---

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        size = super().estimate_size()
        size += sys.getsizeof(self._store)
        size += len(self._store.tobytes())
        size += sum(sys.getsizeof(f) for f in self._indexer.functions)
        return size

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the Bloom filter.

        Returns:
            A dictionary containing parameters, fill level and error estimates.
        """
        stats = super().get_stats()

        set_slots = self._store.count_nonzero()
        stats.update(
            {
                "entries_max": self._entries_max,
                "error_chance": self._error_chance,
                "bit_size": self._bit_size,
                "hash_count": self._hash_count,
                "counter": self._counting,
                "hash_algorithm": self._indexer.algorithm,
                "entries_count": self._entries_count,
                "set_slots": set_slots,
                "fill_ratio": set_slots / self._bit_size,
                "estimated_unique_items": self.estimate_cardinality(),
                "current_fpp": self.false_positive_probability(),
            }
        )

        if self._items_processed > 0:
            stats["bits_per_item"] = self._bit_size / self._items_processed

        return stats

    def error_bounds(self) -> Dict[str, Any]:
        """
        Calculate the theoretical error bounds for this Bloom filter.

        Returns:
            Target rate, the rate expected at capacity and the rate expected
            after the items processed so far, plus a coarse error margin.
        """
        bounds = super().error_bounds()

        bounds["target_fpp"] = self._error_chance
        bounds["capacity_fpp"] = expected_false_positive_rate(
            self._bit_size, self._hash_count, self._entries_max
        )

        items = self._items_processed
        if items > 0:
            bounds["current_theoretical_fpp"] = expected_false_positive_rate(
                self._bit_size, self._hash_count, items
            )
            fill = 1 - math.exp(-(self._hash_count * items) / self._bit_size)
            if fill < 0.5:
                bounds["error_margin"] = "low"
            elif fill < 0.8:
                bounds["error_margin"] = "moderate"
            else:
                bounds["error_margin"] = "high"

        return bounds

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(bit_size={self._bit_size}, "
            f"hash_count={self._hash_count}, counter={self._counting}, "
            f"entries_count={self._entries_count})"
        )
