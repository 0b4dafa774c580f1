"""
Element model for filter operations.

Filter operations accept either a single scalar or an arbitrarily nested
collection of scalars. Raw Python values are converted to the tagged union
Scalar | Collection, which is then walked in pre-order with an explicit stack
so that deep nesting cannot exhaust the interpreter's recursion limit.

Inputs must be acyclic. A list that contains itself is a caller error and is
not detected.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Mapping, Tuple, TypeVar, Union

from tiny_bloom.core.errors import InvalidInputError

R = TypeVar("R")  # Result of the per-scalar operation

SCALAR_TYPES = (str, bytes, bytearray, int, float, bool, type(None))


@dataclass(frozen=True)
class Scalar:
    """A single hashable element."""

    value: Any


@dataclass
class Collection:
    """
    An ordered group of elements.

    Attributes:
        entries: (key, element) pairs in input order. Keys are positions for
                 sequences and the original keys for mappings.
        keyed: True when the collection came from a mapping; results are then
               returned as a dict instead of a list.
    """

    entries: List[Tuple[Any, "Element"]] = field(default_factory=list)
    keyed: bool = False

    def __len__(self) -> int:
        return len(self.entries)


Element = Union[Scalar, Collection]


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple, Mapping))


def _empty_collection(value: Any) -> Collection:
    return Collection(keyed=isinstance(value, Mapping))


def _raw_entries(value: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return iter(value.items())
    return enumerate(value)


def to_element(value: Any) -> Element:
    """
    Convert a raw value (or an existing Element) into the tagged union.

    Lists and tuples become unkeyed collections, mappings become keyed ones,
    and the supported scalar types become Scalar. Anything else, including
    sets (which have no order), raises InvalidInputError.

    Args:
        value: The value to convert.

    Returns:
        The equivalent Element.

    Raises:
        InvalidInputError: If any leaf has an unsupported type.
    """
    if isinstance(value, (Scalar, Collection)):
        return value
    if isinstance(value, SCALAR_TYPES):
        return Scalar(value)
    if not _is_collection(value):
        raise InvalidInputError(value)

    root = _empty_collection(value)
    stack = [(_raw_entries(value), root)]
    while stack:
        entries, out = stack[-1]
        for key, child in entries:
            if isinstance(child, (Scalar, Collection)):
                out.entries.append((key, child))
            elif isinstance(child, SCALAR_TYPES):
                out.entries.append((key, Scalar(child)))
            elif _is_collection(child):
                nested = _empty_collection(child)
                out.entries.append((key, nested))
                stack.append((_raw_entries(child), nested))
                break
            else:
                raise InvalidInputError(child, path=f"key {key!r}")
        else:
            stack.pop()
    return root


def iter_scalars(element: Element) -> Iterator[Any]:
    """Yield every leaf value of an element in pre-order."""
    if isinstance(element, Scalar):
        yield element.value
        return

    stack = [iter(element.entries)]
    while stack:
        for _, child in stack[-1]:
            if isinstance(child, Scalar):
                yield child.value
            else:
                stack.append(iter(child.entries))
                break
        else:
            stack.pop()


def map_scalars(element: Element, func: Callable[[Any], R]) -> Any:
    """
    Apply func to every leaf in pre-order and return results in the same shape.

    A Scalar returns func(value) directly. A Collection returns a list (or a
    dict for keyed collections) holding one result per leaf, nested exactly
    like the input.
    """
    if isinstance(element, Scalar):
        return func(element.value)

    def container(node: Collection) -> Any:
        return {} if node.keyed else []

    def place(out: Any, key: Any, result: Any) -> None:
        if isinstance(out, dict):
            out[key] = result
        else:
            out.append(result)

    root = container(element)
    stack = [(iter(element.entries), root)]
    while stack:
        entries, out = stack[-1]
        for key, child in entries:
            if isinstance(child, Scalar):
                place(out, key, func(child.value))
            else:
                nested = container(child)
                place(out, key, nested)
                stack.append((iter(child.entries), nested))
                break
        else:
            stack.pop()
    return root
