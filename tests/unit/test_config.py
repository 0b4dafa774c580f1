"""
Unit tests for filter configuration.
"""

import unittest

from tiny_bloom.core.config import FilterConfig
from tiny_bloom.core.errors import (
    InvalidParameterError,
    InvalidParameterTypeError,
    TinyBloomError,
)


class TestFilterConfig(unittest.TestCase):
    """Test cases for FilterConfig validation and parsing."""

    def test_defaults(self):
        """Defaults match the documented option table."""
        config = FilterConfig()
        self.assertEqual(config.entries_max, 100)
        self.assertEqual(config.error_chance, 0.001)
        self.assertIsNone(config.set_size)
        self.assertIsNone(config.hash_count)
        self.assertFalse(config.counter)
        self.assertTrue(config.strtolower)
        self.assertEqual(config.hash_algorithm, "murmur3")
        self.assertEqual(config.hash_seed, 0)

    def assertRejects(self, parameter, error=InvalidParameterError, **fields):
        with self.assertRaises(error) as ctx:
            FilterConfig(**fields)
        self.assertEqual(ctx.exception.parameter, parameter)
        self.assertIn(parameter, str(ctx.exception))
        return ctx.exception

    def test_range_errors(self):
        """Out-of-range values are rejected and named."""
        self.assertRejects("entries_max", entries_max=0)
        self.assertRejects("entries_max", entries_max=-5)
        self.assertRejects("error_chance", error_chance=0)
        self.assertRejects("error_chance", error_chance=1)
        self.assertRejects("error_chance", error_chance=1.5)
        self.assertRejects("set_size", set_size=99)
        self.assertRejects("hash_count", hash_count=0)
        self.assertRejects("hash.algorithm", hash_algorithm="sha1")
        self.assertRejects("hash.seed", hash_seed=-1)

    def test_type_errors(self):
        """Wrong types raise a TypeError that also names the parameter."""
        cases = [
            ("entries_max", {"entries_max": "100"}),
            ("entries_max", {"entries_max": 100.0}),
            ("entries_max", {"entries_max": True}),
            ("error_chance", {"error_chance": "0.1"}),
            ("error_chance", {"error_chance": False}),
            ("set_size", {"set_size": 1000.5}),
            ("hash_count", {"hash_count": "3"}),
            ("counter", {"counter": 1}),
            ("hash.strtolower", {"strtolower": "yes"}),
            ("hash.algorithm", {"hash_algorithm": 3}),
            ("hash.seed", {"hash_seed": 1.0}),
        ]
        for parameter, fields in cases:
            err = self.assertRejects(parameter, InvalidParameterTypeError, **fields)
            self.assertIsInstance(err, TypeError)
            self.assertIsInstance(err, ValueError)
            self.assertIsInstance(err, TinyBloomError)

    def test_integer_error_chance_accepted_when_in_range(self):
        """Numeric types are normalized to builtin floats and ints."""
        config = FilterConfig(entries_max=10, error_chance=0.5, set_size=100, hash_count=2)
        self.assertIsInstance(config.error_chance, float)
        self.assertEqual(config.set_size, 100)
        self.assertEqual(config.hash_count, 2)

    def test_from_mapping_nested_hash(self):
        """The hash options may be given as a nested section."""
        config = FilterConfig.from_mapping(
            {
                "entries_max": 500,
                "counter": True,
                "hash": {"strtolower": False, "algorithm": "fnv1a", "seed": 9},
            }
        )
        self.assertEqual(config.entries_max, 500)
        self.assertTrue(config.counter)
        self.assertFalse(config.strtolower)
        self.assertEqual(config.hash_algorithm, "fnv1a")
        self.assertEqual(config.hash_seed, 9)

    def test_from_mapping_dotted_keys(self):
        """Dotted keys address the hash section too."""
        config = FilterConfig.from_mapping({"hash.strtolower": False, "hash.seed": 4})
        self.assertFalse(config.strtolower)
        self.assertEqual(config.hash_seed, 4)

    def test_overrides_win(self):
        """Keyword overrides replace mapping entries."""
        config = FilterConfig.from_mapping({"entries_max": 10}, entries_max=20)
        self.assertEqual(config.entries_max, 20)

    def test_unknown_options(self):
        """Unknown fields are rejected instead of being ignored."""
        with self.assertRaises(InvalidParameterError) as ctx:
            FilterConfig.from_mapping({"entries": 10})
        self.assertEqual(ctx.exception.parameter, "entries")

        with self.assertRaises(InvalidParameterError) as ctx:
            FilterConfig.from_mapping({"hash": {"lowercase": True}})
        self.assertEqual(ctx.exception.parameter, "hash.lowercase")

        with self.assertRaises(InvalidParameterError) as ctx:
            FilterConfig.from_mapping({"hash.salt": 1})
        self.assertEqual(ctx.exception.parameter, "hash.salt")

        with self.assertRaises(InvalidParameterError) as ctx:
            FilterConfig.from_mapping(None, bogus=1)
        self.assertEqual(ctx.exception.parameter, "bogus")

        with self.assertRaises(InvalidParameterTypeError) as ctx:
            FilterConfig.from_mapping({"hash": True})
        self.assertEqual(ctx.exception.parameter, "hash")

    def test_to_dict_round_trip(self):
        """to_dict output feeds back into from_mapping unchanged."""
        config = FilterConfig(
            entries_max=42, set_size=640, counter=True, hash_algorithm="blake2b"
        )
        data = config.to_dict()
        self.assertEqual(data["hash"]["algorithm"], "blake2b")
        self.assertEqual(FilterConfig.from_mapping(data), config)

    def test_frozen(self):
        """A validated config cannot be altered afterwards."""
        config = FilterConfig()
        with self.assertRaises(AttributeError):
            config.entries_max = 5


if __name__ == "__main__":
    unittest.main()
