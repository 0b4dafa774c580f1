"""
Base classes and interfaces for TinyBloom structures.

This module defines the abstract base class every membership structure
implements, giving a consistent interface for updating, querying, merging,
serialization and statistics across the library.
"""

import abc
import json
import sys
from typing import Any, Dict, Generic, TypeVar, Union

T = TypeVar("T")  # Type for the items being processed
R = TypeVar("R")  # Type for the result of queries


class ProbabilisticSet(Generic[T, R], abc.ABC):
    """
    Abstract base class for probabilistic membership structures.

    Subclasses answer "possibly present" / "definitely absent" queries
    without storing the elements themselves. The base class tracks how many
    items were processed and provides JSON serialization on top of the
    subclass's to_dict/from_dict.
    """

    def __init__(self) -> None:
        self._items_processed = 0

    @abc.abstractmethod
    def update(self, item: T) -> None:
        """
        Add a single item to the structure.

        Args:
            item: The new item to process.
        """
        self._items_processed += 1

    @abc.abstractmethod
    def query(self, *args: Any, **kwargs: Any) -> R:
        """
        Query the current state of the structure.

        Returns:
            The result of the query, which depends on the specific structure.
        """
        pass

    @abc.abstractmethod
    def merge(self, other: "ProbabilisticSet[T, R]") -> "ProbabilisticSet[T, R]":
        """
        Merge this structure with another of the same type.

        Args:
            other: Another structure of the same type.

        Returns:
            A new merged structure.

        Raises:
            TypeError: If other is not of the same type.
        """
        pass

    def _check_same_type(self, other: "ProbabilisticSet[T, R]") -> None:
        """
        Helper method to check if another structure is of the same type.

        Raises:
            TypeError: If other is not of the same type.
        """
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot merge {self.__class__.__name__} with {other.__class__.__name__}"
            )

    def _combine_items_processed(self, other: "ProbabilisticSet[T, R]") -> int:
        return self._items_processed + other._items_processed

    @abc.abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the structure to a dictionary for serialization.

        Returns:
            A dictionary representation of the structure.
        """
        pass

    def _base_dict(self) -> Dict[str, Any]:
        """
        Create a dictionary with base attributes common to all structures.

        Returns:
            A dictionary with base attributes.
        """
        return {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
        }

    @classmethod
    @abc.abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProbabilisticSet[T, R]":
        """
        Create a structure from a dictionary representation.

        Args:
            data: The dictionary containing the structure state.

        Returns:
            A new structure initialized with the given state.
        """
        pass

    def serialize(self, format: str = "json") -> Union[str, bytes]:
        """
        Serialize the structure to a string or bytes.

        Args:
            format: The serialization format ('json' or 'binary').

        Returns:
            The serialized representation of the structure.

        Raises:
            ValueError: If the format is not supported.
        """
        if format == "json":
            return json.dumps(self.to_dict())
        elif format == "binary":
            return json.dumps(self.to_dict()).encode("utf-8")
        else:
            raise ValueError(f"Unsupported serialization format: {format}")

    @classmethod
    def deserialize(
        cls, data: Union[str, bytes], format: str = "json"
    ) -> "ProbabilisticSet[T, R]":
        """
        Deserialize a structure from a string or bytes.

        Args:
            data: The serialized structure.
            format: The serialization format ('json' or 'binary').

        Returns:
            A new structure.

        Raises:
            ValueError: If the format is not supported or the payload is not
                        valid JSON.
        """
        if format not in ("json", "binary"):
            raise ValueError(f"Unsupported serialization format: {format}")
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return cls.from_dict(json.loads(data))

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this structure in bytes.

        Derived classes should override this method to add their specific
        data structures.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        return size

    def clear(self) -> None:
        """
        Reset the structure to its initial empty state.

        Derived classes must override this method to clear their own data
        while calling super().clear() to reset the base counters.
        """
        self._items_processed = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the structure.

        Derived classes should override this method to include their specific
        statistics while calling super().get_stats() to include base metrics.

        Returns:
            A dictionary containing various statistics about the state.
        """
        stats = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        error_bounds = self.error_bounds()
        if error_bounds:
            stats.update(error_bounds)

        return stats

    def error_bounds(self) -> Dict[str, Any]:
        """
        Get the theoretical error bounds for this structure.

        The base implementation returns an empty dictionary.
        """
        return {}

    @property
    def items_processed(self) -> int:
        """Get the total number of items processed by this structure."""
        return self._items_processed
