# python
"""
Utils module behavioral tests (sentinel, helpers, storage guard).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from argshape.utils import Unset, UnsetType, nullify, rename, freeze, StorageGuard, view, ordinal


class Sample(StorageGuard):
    items = view("items")

    def __new__(cls, items):
        with super().__new__(cls) as self:
            setattr(self, "-items", items)
        return self


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingletonAndFalsy(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testSubclassingForbidden(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)

    def testNullify(self):
        self.assertIsNone(nullify(Unset))
        self.assertEqual(nullify(Unset, 3), 3)
        self.assertEqual(nullify(0, 3), 0)


class TestHelpers(TestCase):
    """Behavioral tests for rename(), freeze() and ordinal()."""

    def testRename(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

    def testRenameRequiresString(self):
        with self.assertRaises(TypeError):
            rename(lambda: None, 3)

    def testFreeze(self):
        self.assertEqual(freeze([1, 2]), (1, 2))
        self.assertIsInstance(freeze({"a": 1}), MappingProxyType)
        self.assertEqual(freeze({1, 2}), frozenset({1, 2}))
        self.assertEqual(freeze("abc"), "abc")
        self.assertEqual(freeze(range(3)), range(3))

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


class TestStorageGuard(TestCase):
    """Behavioral tests for StorageGuard and view()."""

    def testViewIsFrozen(self):
        sample = Sample([1, 2])
        self.assertEqual(sample.items, (1, 2))

    def testBackingStorageIsHidden(self):
        sample = Sample([1])
        with self.assertRaises(AttributeError):
            getattr(sample, "-items")

    def testBackingStorageIsLocked(self):
        sample = Sample([1])
        with self.assertRaises(AttributeError):
            setattr(sample, "-items", [])


if __name__ == "__main__":
    unittest.main()
