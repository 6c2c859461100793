# python
"""
Utility behavioral tests (Unset, coalesce, rename, mirror, setting).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from slimarg.utils import *


class TestUnset(TestCase):

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", Unset | str))
        self.assertFalse(isinstance(1, str | Unset))

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class TestCoalesce(TestCase):

    def testReplacesOnlyUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):

    def testDirectForm(self):
        function = rename(lambda: None, "named")
        self.assertEqual((function.__name__, function.__qualname__), ("named", "named"))

    def testDecoratorForm(self):
        @rename("decorated")
        def function():
            pass
        self.assertEqual(function.__name__, "decorated")

    def testWrongArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testBuiltinsRefused(self):
        with self.assertRaises(TypeError):
            rename(len, "length")


class TestProperties(TestCase):

    def testMirrorCopiesContainers(self):
        class Record:
            items = mirror("items")

            def __init__(self):
                self._items = ("a", "b")

        record = Record()
        self.assertEqual(record.items, ["a", "b"])
        record.items.append("c")
        self.assertEqual(record.items, ["a", "b"])
        with self.assertRaises(AttributeError):
            record.items = []

    def testSettingSanitizesWrites(self):
        def positive(name, value):
            if value < 0:
                raise ValueError(f"{name} must be positive")
            return value * 2

        class Config:
            size = setting("size", positive)

        config = Config()
        config.size = 3
        self.assertEqual(config.size, 6)
        with self.assertRaises(ValueError):
            config.size = -1
        self.assertEqual(config.size, 6)

    def testSettingArguments(self):
        with self.assertRaises(TypeError):
            setting(1, str)
        with self.assertRaises(TypeError):
            setting("name", "not callable")


if __name__ == "__main__":
    unittest.main()
