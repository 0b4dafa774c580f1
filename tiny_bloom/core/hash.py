"""
Hashing functions for TinyBloom.

This module provides the deterministic hash family used to map elements to
filter positions. Every variant implements the DeterministicHash protocol:
given a scalar value, a modulus and a case-fold flag it returns an integer in
[0, modulus) that depends only on its inputs and its seed.

These functions are chosen for speed and distribution quality, not
cryptographic security.
"""

import hashlib
from typing import Any, Dict, Protocol, Type, Union

import mmh3

from tiny_bloom.core.errors import InvalidInputError

Scalar = Union[str, bytes, bytearray, int, float, bool, None]

_MASK_32 = 0xFFFFFFFF


def canonicalize(value: Scalar, case_fold: bool = True) -> bytes:
    """
    Convert a scalar element to the byte string that gets hashed.

    Text and byte strings are lowercased when case_fold is set. Booleans map
    to "1" and "", None maps to "", integers use str() and floats use repr().

    Args:
        value: The scalar element.
        case_fold: Whether to lowercase text and bytes first.

    Returns:
        Canonical UTF-8 bytes for the element.

    Raises:
        InvalidInputError: If value is not a supported scalar.
    """
    if isinstance(value, str):
        text = value.lower() if case_fold else value
        return text.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
        return data.lower() if case_fold else data
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return b"1" if value else b""
    if value is None:
        return b""
    if isinstance(value, int):
        return str(value).encode("utf-8")
    if isinstance(value, float):
        return repr(value).encode("utf-8")
    raise InvalidInputError(value)


def fmix32(h: int) -> int:
    """MurmurHash3 32-bit finalizer; spreads every input bit over the output."""
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK_32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK_32
    h ^= h >> 16
    return h


def murmurhash3_32(key: Any, seed: int = 0) -> int:
    """
    MurmurHash3 (x86, 32-bit) of a key, computed by the mmh3 extension.

    Args:
        key: The key to hash. Strings and bytes are hashed directly, other
             values through their repr().
        seed: Seed for the hash (reduced to 32 bits).

    Returns:
        Unsigned 32-bit hash value.
    """
    if not isinstance(key, (str, bytes)):
        key = repr(key)
    return mmh3.hash(key, seed & _MASK_32, signed=False)


def fnv1a_32(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a hash (32-bit variant).

    FNV-1a is a simple but effective non-cryptographic hash function.
    It's slightly faster than MurmurHash3 but with slightly less uniform distribution.

    Args:
        key: The key to hash (will be converted to bytes if not already)
        seed: Optional seed value (modifies the initial hash value)

    Returns:
        32-bit hash value
    """
    if isinstance(key, str):
        key_bytes = key.encode("utf-8")
    elif isinstance(key, bytes):
        key_bytes = key
    else:
        key_bytes = repr(key).encode("utf-8")

    FNV_PRIME = 16777619
    FNV_OFFSET_BASIS = 2166136261

    h = (FNV_OFFSET_BASIS ^ seed) & _MASK_32

    for byte in key_bytes:
        h ^= byte
        h = (h * FNV_PRIME) & _MASK_32

    return h


class DeterministicHash(Protocol):
    """Capability every hash variant provides to the indexer."""

    name: str
    seed: int

    def hash(self, value: Scalar, modulus: int, case_fold: bool) -> int:
        """Return a deterministic position in [0, modulus) for value."""
        ...


class Murmur3Hash:
    """Seeded MurmurHash3 variant (the default)."""

    name = "murmur3"

    def __init__(self, seed: int = 0):
        self.seed = seed & _MASK_32

    def hash(self, value: Scalar, modulus: int, case_fold: bool) -> int:
        return murmurhash3_32(canonicalize(value, case_fold), self.seed) % modulus

    def __repr__(self) -> str:
        return f"Murmur3Hash(seed={self.seed})"


class Fnv1aHash:
    """
    Seeded FNV-1a variant.

    The seed is prepended to the key as four bytes and the FNV-1a output is
    passed through fmix32, so functions with different seeds are not simple
    offsets of each other. The offset basis stays unseeded: XORing
    the seed into it would cancel the first salt byte.
    """

    name = "fnv1a"

    def __init__(self, seed: int = 0):
        self.seed = seed & _MASK_32
        self._salt = self.seed.to_bytes(4, "little")

    def hash(self, value: Scalar, modulus: int, case_fold: bool) -> int:
        raw = fnv1a_32(self._salt + canonicalize(value, case_fold))
        return fmix32(raw) % modulus

    def __repr__(self) -> str:
        return f"Fnv1aHash(seed={self.seed})"


class Blake2bHash:
    """Keyed BLAKE2b variant; slower, but with the strongest mixing."""

    name = "blake2b"

    def __init__(self, seed: int = 0):
        self.seed = seed & _MASK_32
        self._key = self.seed.to_bytes(4, "little")

    def hash(self, value: Scalar, modulus: int, case_fold: bool) -> int:
        digest = hashlib.blake2b(
            canonicalize(value, case_fold), digest_size=8, key=self._key
        ).digest()
        return int.from_bytes(digest, "little") % modulus

    def __repr__(self) -> str:
        return f"Blake2bHash(seed={self.seed})"


HASH_ALGORITHMS: Dict[str, Type[DeterministicHash]] = {
    Murmur3Hash.name: Murmur3Hash,
    Fnv1aHash.name: Fnv1aHash,
    Blake2bHash.name: Blake2bHash,
}


def create_hash(algorithm: str, seed: int) -> DeterministicHash:
    """
    Instantiate a hash variant by name.

    Raises:
        KeyError: If the algorithm is not registered.
    """
    return HASH_ALGORITHMS[algorithm](seed)
