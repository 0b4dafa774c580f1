"""
Hash indexing for Bloom filters.

A HashIndexer owns the filter's hash functions. Each function is an instance
of one hash variant with its own seed; the seeds are derived from a base seed
and the function index, so the same configuration always produces the same
positions in every process.
"""

from typing import List, Tuple

from tiny_bloom.core.hash import DeterministicHash, Scalar, create_hash

# 32-bit golden ratio; successive multiples give well separated seeds
_SEED_STEP = 0x9E3779B9


def derive_seed(base_seed: int, index: int) -> int:
    """Seed for the index-th hash function of a family."""
    return (base_seed + (index + 1) * _SEED_STEP) & 0xFFFFFFFF


class HashFunction:
    """
    One named, seeded hash function of a filter.

    Args:
        name: Identifier such as "murmur3#2".
        hasher: The seeded hash variant.
        case_fold: Whether elements are lowercased before hashing.
    """

    __slots__ = ("name", "hasher", "case_fold")

    def __init__(self, name: str, hasher: DeterministicHash, case_fold: bool):
        self.name = name
        self.hasher = hasher
        self.case_fold = case_fold

    @property
    def seed(self) -> int:
        return self.hasher.seed

    def position(self, value: Scalar, modulus: int) -> int:
        """Map a scalar element to a position in [0, modulus)."""
        return self.hasher.hash(value, modulus, self.case_fold)

    def __repr__(self) -> str:
        return f"HashFunction({self.name!r}, seed={self.seed}, case_fold={self.case_fold})"


class HashIndexer:
    """
    Maps an element to one array position per hash function.

    Args:
        hash_count: Number of hash functions to create.
        bit_size: Array length; every position lies in [0, bit_size).
        algorithm: Name of the hash variant.
        seed: Base seed.
        case_fold: Lowercase text elements before hashing.
    """

    def __init__(
        self,
        hash_count: int,
        bit_size: int,
        algorithm: str = "murmur3",
        seed: int = 0,
        case_fold: bool = True,
    ):
        self._bit_size = bit_size
        self._algorithm = algorithm
        self._seed = seed
        self._case_fold = case_fold
        self._functions: Tuple[HashFunction, ...] = tuple(
            HashFunction(
                f"{algorithm}#{i}",
                create_hash(algorithm, derive_seed(seed, i)),
                case_fold,
            )
            for i in range(hash_count)
        )

    @property
    def functions(self) -> Tuple[HashFunction, ...]:
        return self._functions

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def case_fold(self) -> bool:
        return self._case_fold

    def __len__(self) -> int:
        return len(self._functions)

    def positions(self, value: Scalar) -> List[int]:
        """
        Compute the positions of a scalar element, in function order.

        Positions may repeat when two functions collide for this element.
        """
        return [f.position(value, self._bit_size) for f in self._functions]

    def is_compatible(self, other: "HashIndexer") -> bool:
        """True if other maps every element to the same positions."""
        return (
            len(self) == len(other)
            and self._bit_size == other._bit_size
            and self._algorithm == other._algorithm
            and self._seed == other._seed
            and self._case_fold == other._case_fold
        )
