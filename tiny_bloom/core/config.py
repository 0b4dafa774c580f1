"""
Configuration record for TinyBloom filters.

FilterConfig is validated eagerly when it is built, so a filter never starts
life with a bad parameter. Options can be supplied as keyword arguments, as a
flat mapping, as a mapping with a nested "hash" section, or with dotted keys
such as "hash.strtolower".
"""

import numbers
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from tiny_bloom.core.errors import InvalidParameterError, InvalidParameterTypeError
from tiny_bloom.core.hash import HASH_ALGORITHMS

# Smallest array a filter may allocate, whether derived or explicit.
MIN_SET_SIZE = 100

# Sub-keys accepted inside the "hash" section, mapped to FilterConfig fields.
_HASH_OPTIONS = {
    "strtolower": "strtolower",
    "algorithm": "hash_algorithm",
    "seed": "hash_seed",
}


def _require_int(name: str, value: Any) -> int:
    # bool is an int subclass but never a valid size or count
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterTypeError(name, "integer", value)
    return int(value)


def _require_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterTypeError(name, "float", value)
    return float(value)


def _require_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidParameterTypeError(name, "boolean", value)
    return value


@dataclass(frozen=True)
class FilterConfig:
    """
    Validated construction parameters for a Bloom filter.

    Attributes:
        entries_max: Target number of distinct elements (> 0).
        error_chance: Target false positive probability, strictly between 0 and 1.
        set_size: Explicit array length (>= 100). None derives it from
                  entries_max and error_chance.
        hash_count: Explicit number of hash functions (>= 1). None derives it.
        counter: Use saturating counters instead of bits, enabling deletion.
        strtolower: Lowercase text and byte elements before hashing.
        hash_algorithm: Name of the hash family ("murmur3", "fnv1a", "blake2b").
        hash_seed: Base seed from which every hash function's seed is derived.
    """

    entries_max: int = 100
    error_chance: float = 0.001
    set_size: Optional[int] = None
    hash_count: Optional[int] = None
    counter: bool = False
    strtolower: bool = True
    hash_algorithm: str = "murmur3"
    hash_seed: int = 0

    def __post_init__(self) -> None:
        entries_max = _require_int("entries_max", self.entries_max)
        if entries_max <= 0:
            raise InvalidParameterError(
                "entries_max", "must be greater than 0", self.entries_max
            )

        error_chance = _require_float("error_chance", self.error_chance)
        if not (0 < error_chance < 1):
            raise InvalidParameterError(
                "error_chance", "must be between 0 and 1 (exclusive)", self.error_chance
            )

        set_size = self.set_size
        if set_size is not None:
            set_size = _require_int("set_size", set_size)
            if set_size < MIN_SET_SIZE:
                raise InvalidParameterError(
                    "set_size", f"must be at least {MIN_SET_SIZE}", self.set_size
                )

        hash_count = self.hash_count
        if hash_count is not None:
            hash_count = _require_int("hash_count", hash_count)
            if hash_count < 1:
                raise InvalidParameterError(
                    "hash_count", "must be at least 1", self.hash_count
                )

        _require_bool("counter", self.counter)
        _require_bool("hash.strtolower", self.strtolower)

        if not isinstance(self.hash_algorithm, str):
            raise InvalidParameterTypeError(
                "hash.algorithm", "string", self.hash_algorithm
            )
        if self.hash_algorithm not in HASH_ALGORITHMS:
            raise InvalidParameterError(
                "hash.algorithm",
                f"must be one of {sorted(HASH_ALGORITHMS)}",
                self.hash_algorithm,
            )

        hash_seed = _require_int("hash.seed", self.hash_seed)
        if hash_seed < 0:
            raise InvalidParameterError(
                "hash.seed", "must not be negative", self.hash_seed
            )

        # Normalize numeric subclasses (e.g. numpy ints) to builtins
        object.__setattr__(self, "entries_max", entries_max)
        object.__setattr__(self, "error_chance", error_chance)
        object.__setattr__(self, "set_size", set_size)
        object.__setattr__(self, "hash_count", hash_count)
        object.__setattr__(self, "hash_seed", hash_seed)

    @classmethod
    def from_mapping(
        cls, options: Optional[Mapping[str, Any]] = None, **overrides: Any
    ) -> "FilterConfig":
        """
        Build a config from an option mapping plus keyword overrides.

        Args:
            options: Mapping using the public option names. The hash options
                     may be given as a nested "hash" mapping or as dotted keys.
            **overrides: FilterConfig field names; these win over `options`.

        Returns:
            A validated FilterConfig.

        Raises:
            InvalidParameterError: For unknown options or out-of-range values.
            InvalidParameterTypeError: For values of the wrong type.
        """
        fields: Dict[str, Any] = {}
        field_names = set(cls.__dataclass_fields__)

        for key, value in (options or {}).items():
            if key == "hash":
                if not isinstance(value, Mapping):
                    raise InvalidParameterTypeError("hash", "mapping", value)
                for sub_key, sub_value in value.items():
                    fields[cls._hash_field(f"hash.{sub_key}")] = sub_value
            elif isinstance(key, str) and key.startswith("hash."):
                fields[cls._hash_field(key)] = value
            elif key in field_names:
                fields[key] = value
            else:
                raise InvalidParameterError(str(key), "unknown option", value)

        for key, value in overrides.items():
            if key not in field_names:
                raise InvalidParameterError(key, "unknown option", value)
            fields[key] = value

        return cls(**fields)

    @staticmethod
    def _hash_field(dotted: str) -> str:
        sub_key = dotted[len("hash."):]
        if sub_key not in _HASH_OPTIONS:
            raise InvalidParameterError(dotted, "unknown option")
        return _HASH_OPTIONS[sub_key]

    def to_dict(self) -> Dict[str, Any]:
        """Return the options in the nested public format."""
        data = asdict(self)
        return {
            "entries_max": data["entries_max"],
            "error_chance": data["error_chance"],
            "set_size": data["set_size"],
            "hash_count": data["hash_count"],
            "counter": data["counter"],
            "hash": {
                "strtolower": data["strtolower"],
                "algorithm": data["hash_algorithm"],
                "seed": data["hash_seed"],
            },
        }
