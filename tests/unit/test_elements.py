"""
Unit tests for the element model and its traversal.
"""

import unittest

from tiny_bloom.core.elements import (
    Collection,
    Scalar,
    iter_scalars,
    map_scalars,
    to_element,
)
from tiny_bloom.core.errors import InvalidInputError


class TestToElement(unittest.TestCase):
    """Test cases for converting raw values."""

    def test_scalars(self):
        """Supported scalar types become Scalar."""
        for value in ["a", b"b", bytearray(b"c"), 1, 2.5, True, None]:
            self.assertEqual(to_element(value), Scalar(value))

    def test_existing_elements_pass_through(self):
        """Elements are returned unchanged."""
        scalar = Scalar("x")
        collection = Collection([(0, scalar)])
        self.assertIs(to_element(scalar), scalar)
        self.assertIs(to_element(collection), collection)

    def test_nested_structure(self):
        """Lists, tuples and dicts become collections, keeping keys and order."""
        element = to_element(["a", ("b", ["c"]), {"k": "d"}])

        self.assertIsInstance(element, Collection)
        self.assertFalse(element.keyed)
        self.assertEqual(len(element), 3)

        key, first = element.entries[0]
        self.assertEqual((key, first), (0, Scalar("a")))

        _, second = element.entries[1]
        self.assertIsInstance(second, Collection)
        self.assertEqual(second.entries[0], (0, Scalar("b")))
        self.assertIsInstance(second.entries[1][1], Collection)

        _, third = element.entries[2]
        self.assertTrue(third.keyed)
        self.assertEqual(third.entries, [("k", Scalar("d"))])

    def test_invalid_inputs(self):
        """Unordered or unknown types are rejected, even when nested."""
        for value in [{1, 2}, frozenset(), object(), 1j]:
            with self.assertRaises(InvalidInputError) as ctx:
                to_element(value)
            self.assertEqual(ctx.exception.received, type(value).__name__)

        with self.assertRaises(InvalidInputError) as ctx:
            to_element(["ok", ["fine", {1, 2}]])
        self.assertEqual(ctx.exception.received, "set")
        self.assertIn("set", str(ctx.exception))

    def test_deep_nesting(self):
        """Nesting far beyond the recursion limit is handled."""
        value = "leaf"
        for _ in range(5000):
            value = [value]

        element = to_element(value)
        self.assertEqual(list(iter_scalars(element)), ["leaf"])


class TestTraversal(unittest.TestCase):
    """Test cases for pre-order traversal."""

    def test_iter_scalars_preorder(self):
        """Leaves come out in pre-order, insertion order preserved."""
        element = to_element(["a", ["b", ["c", "d"]], "e", {"x": "f", "y": ["g"]}])
        self.assertEqual(list(iter_scalars(element)), list("abcdefg"))

    def test_iter_scalars_single(self):
        self.assertEqual(list(iter_scalars(Scalar(5))), [5])

    def test_map_scalars_shape(self):
        """Results mirror the input's nesting; tuples come back as lists."""
        element = to_element(["a", ("b", ["c"]), {"k": "d", "m": []}])
        result = map_scalars(element, str.upper)
        self.assertEqual(result, ["A", ["B", ["C"]], {"k": "D", "m": []}])

    def test_map_scalars_call_order(self):
        """The function is applied in pre-order."""
        seen = []
        element = to_element([["a", "b"], "c", [["d"]], "e"])
        map_scalars(element, seen.append)
        self.assertEqual(seen, ["a", "b", "c", "d", "e"])

    def test_map_scalars_scalar(self):
        """A scalar returns the bare result."""
        self.assertEqual(map_scalars(Scalar("z"), str.upper), "Z")

    def test_map_scalars_deep(self):
        """Deep results are rebuilt without recursion."""
        value = "leaf"
        for _ in range(3000):
            value = [value]

        result = map_scalars(to_element(value), len)
        depth = 0
        while isinstance(result, list):
            self.assertEqual(len(result), 1)
            result = result[0]
            depth += 1
        self.assertEqual(depth, 3000)
        self.assertEqual(result, 4)


if __name__ == "__main__":
    unittest.main()
