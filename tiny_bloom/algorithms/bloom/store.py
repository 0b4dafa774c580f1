"""
Backing arrays for Bloom filters.

Two interchangeable encodings are provided:

- PlainBitStore: one bit per position, packed eight to a byte.
- CounterStore: one small saturating counter per position, holding 0..61.

Counters persist as one symbol each of the 62-symbol alphabet 0-9a-zA-Z,
where the symbol's index is the count. Encoding and decoding go through a
tuple and a dict, so both directions are O(1) per symbol.

Saturation at 61 and clamping at 0 are deliberate: a fixed-width counter can
not represent more, and a decrement of an untouched position must not
corrupt the array. Neither condition is an error.
"""

import abc
import array
import base64
import binascii
import logging
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

ALPHABET: Tuple[str, ...] = tuple(
    "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
SYMBOL_VALUES: Dict[str, int] = {symbol: i for i, symbol in enumerate(ALPHABET)}
COUNTER_MAX = len(ALPHABET) - 1


class BitStore(abc.ABC):
    """
    Fixed-length array of slots addressed by position.

    The length is fixed at construction and never changes.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError("Store size must be positive")
        self._size = size

    def __len__(self) -> int:
        return self._size

    def _check_position(self, position: int) -> None:
        if not (0 <= position < self._size):
            raise IndexError(
                f"Position {position} out of range (0 to {self._size - 1})"
            )

    @abc.abstractmethod
    def read(self, position: int):
        """Raw slot value: a bool for bits, an int for counters."""

    def read_bool(self, position: int) -> bool:
        """True if the slot at position is non-zero."""
        return bool(self.read(position))

    @abc.abstractmethod
    def increment(self, position: int) -> None:
        """Record one insertion at position."""

    @abc.abstractmethod
    def count_nonzero(self) -> int:
        """Number of non-zero slots."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Reset every slot to zero."""

    @abc.abstractmethod
    def union(self, other: "BitStore") -> "BitStore":
        """New store combining both; the arguments are left untouched."""

    @abc.abstractmethod
    def tobytes(self) -> bytes:
        """Raw backing bytes."""

    @abc.abstractmethod
    def encode(self) -> str:
        """Text form used in serialized snapshots."""

    @classmethod
    @abc.abstractmethod
    def decode(cls, text: str, size: int) -> "BitStore":
        """
        Rebuild a store from its text form.

        Raises:
            ValueError: If the text is malformed or does not match size.
        """

    def is_empty(self) -> bool:
        return self.count_nonzero() == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitStore) or type(self) is not type(other):
            return NotImplemented
        return len(self) == len(other) and self.tobytes() == other.tobytes()

    def _check_same_shape(self, other: "BitStore") -> None:
        if type(self) is not type(other) or len(self) != len(other):
            raise ValueError(
                f"Cannot combine {type(self).__name__}({len(self)}) with "
                f"{type(other).__name__}({len(other)})"
            )


class PlainBitStore(BitStore):
    """
    One bit per position.

    Bits can be set but never cleared individually; deletion is not possible
    in this encoding.
    """

    def __init__(self, size: int):
        super().__init__(size)
        # 'B' typecode: unsigned char, 8 bits per element
        self._bytes = array.array("B", bytes((size + 7) // 8))

    def mark(self, position: int) -> None:
        """Set the bit at position to 1."""
        self._check_position(position)
        self._bytes[position // 8] |= 1 << (position % 8)

    increment = mark

    def read(self, position: int) -> bool:
        self._check_position(position)
        return bool(self._bytes[position // 8] & (1 << (position % 8)))

    read_bool = read

    def count_nonzero(self) -> int:
        return sum(bin(byte).count("1") for byte in self._bytes)

    def clear(self) -> None:
        self._bytes = array.array("B", bytes(len(self._bytes)))

    def union(self, other: "BitStore") -> "PlainBitStore":
        self._check_same_shape(other)
        result = PlainBitStore(self._size)
        for i, (a, b) in enumerate(zip(self._bytes, other._bytes)):
            result._bytes[i] = a | b
        return result

    def tobytes(self) -> bytes:
        return self._bytes.tobytes()

    def encode(self) -> str:
        return base64.b64encode(self._bytes.tobytes()).decode("ascii")

    @classmethod
    def decode(cls, text: str, size: int) -> "PlainBitStore":
        try:
            raw = base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError, AttributeError) as exc:
            raise ValueError(f"Malformed bit array: {exc}") from exc

        store = cls(size)
        if len(raw) != len(store._bytes):
            raise ValueError(
                f"Bit array holds {len(raw)} bytes, expected {len(store._bytes)} "
                f"for size {size}"
            )
        if size % 8 and raw[-1] >> (size % 8):
            raise ValueError(f"Bit array sets padding bits beyond size {size}")
        store._bytes = array.array("B", raw)
        return store


class CounterStore(BitStore):
    """
    One saturating counter per position, each holding 0..61.

    Counters are kept one per byte; the 62-symbol alphabet is only used for
    the persisted form.
    """

    def __init__(self, size: int):
        super().__init__(size)
        self._counts = array.array("B", bytes(size))

    def adjust(self, position: int, delta: int) -> int:
        """
        Move the counter at position by delta, clamped to [0, 61].

        Returns:
            The new counter value.
        """
        self._check_position(position)
        current = self._counts[position]
        target = current + delta
        if target > COUNTER_MAX:
            logger.debug("Counter at %d saturated at %d", position, COUNTER_MAX)
            target = COUNTER_MAX
        elif target < 0:
            logger.debug("Counter at %d clamped at 0", position)
            target = 0
        self._counts[position] = target
        return target

    def increment(self, position: int) -> None:
        self.adjust(position, 1)

    def decrement(self, position: int) -> None:
        self.adjust(position, -1)

    def read(self, position: int) -> int:
        self._check_position(position)
        return self._counts[position]

    def count_nonzero(self) -> int:
        return sum(1 for c in self._counts if c)

    def count_saturated(self) -> int:
        return sum(1 for c in self._counts if c == COUNTER_MAX)

    def values(self) -> array.array:
        """Copy of all counter values."""
        return array.array("B", self._counts)

    def clear(self) -> None:
        self._counts = array.array("B", bytes(self._size))

    def union(self, other: "BitStore") -> "CounterStore":
        self._check_same_shape(other)
        result = CounterStore(self._size)
        for i, (a, b) in enumerate(zip(self._counts, other._counts)):
            result._counts[i] = min(a + b, COUNTER_MAX)
        return result

    def tobytes(self) -> bytes:
        return self._counts.tobytes()

    def encode(self) -> str:
        return "".join(ALPHABET[c] for c in self._counts)

    @classmethod
    def decode(cls, text: str, size: int) -> "CounterStore":
        if not isinstance(text, str):
            raise ValueError(f"Malformed counter array: expected str, got {type(text).__name__}")
        if len(text) != size:
            raise ValueError(
                f"Counter array holds {len(text)} symbols, expected {size}"
            )
        try:
            counts = array.array("B", [SYMBOL_VALUES[symbol] for symbol in text])
        except KeyError as exc:
            raise ValueError(f"Unknown counter symbol {exc.args[0]!r}") from exc

        store = cls(size)
        store._counts = counts
        return store


def create_store(size: int, counting: bool) -> BitStore:
    """Allocate a zero-filled store of the requested encoding."""
    return CounterStore(size) if counting else PlainBitStore(size)
