"""
Tests for argdispatch.utils helpers.
"""
import unittest
from unittest import TestCase

from argdispatch.utils import *


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass

    def testDoesNotCombineWithTypes(self):
        with self.assertRaises(TypeError):
            str | Unset  # NOQA: B-018

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(None, "fallback"))


class TestRename(TestCase):

    def testFunctionForm(self):
        def f():
            pass

        self.assertIs(rename(f, "work"), f)
        self.assertEqual((f.__name__, f.__qualname__), ("work", "work"))

    def testDecoratorForm(self):
        @rename("work")
        def f():
            pass

        self.assertEqual(f.__name__, "work")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename("a", "b")
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(len, "length")


class TestMirror(TestCase):

    def testReturnsDetachedCopy(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = {"a": [1, 2]}

        holder = Holder()
        holder.items["a"].append(3)
        self.assertEqual(holder.items, {"a": [1, 2]})

    def testSetsAreCopied(self):
        class Holder:
            tags = mirror("tags")

            def __init__(self):
                self._tags = frozenset({"a", "b"})

        holder = Holder()
        tags = holder.tags
        self.assertIsInstance(tags, set)
        tags.add("c")
        self.assertEqual(holder.tags, {"a", "b"})

    def testReadOnly(self):
        class Holder:
            name = mirror("name")
            _name = "x"

        with self.assertRaises(AttributeError):
            Holder().name = "y"


class TestOrdinal(TestCase):

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(112), "112th")
        self.assertEqual(ordinal(100), "100th")

    def testRejectsNonPositive(self):
        with self.assertRaises(ValueError):
            ordinal(0)
        with self.assertRaises(TypeError):
            ordinal(True)


if __name__ == '__main__':
    unittest.main()
