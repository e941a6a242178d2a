"""
Utils module behavioral tests (sentinel, renaming, freezing, names, ordinals).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from foxcli.utils import Unset, UnsetType, coalesce, rename, freeze, mirror, validate_name, normalize_name, ordinal


class TestUnset(TestCase):

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testUnsetSupportsUnions(self):
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testCoalescePreservesFalseyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(None, "fallback"))


class TestHelpers(TestCase):

    def testRenameDirectForm(self):
        def function():
            pass
        self.assertIs(rename(function, "other"), function)
        self.assertEqual(function.__name__, "other")
        self.assertEqual(function.__qualname__, "other")

    def testRenameDecoratorForm(self):
        @rename("renamed")
        def function():
            pass
        self.assertEqual(function.__name__, "renamed")

    def testRenameRejectsBadArity(self):
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1, "name")

    def testFreeze(self):
        self.assertEqual(freeze([1, 2]), (1, 2))
        self.assertIsInstance(freeze({"a": 1}), MappingProxyType)
        self.assertEqual(freeze({1, 2}), frozenset({1, 2}))
        self.assertEqual(freeze("text"), "text")

    def testMirrorIsReadOnly(self):
        class Holder:
            value = mirror("value")

            def __init__(self):
                self._value = 42

        holder = Holder()
        self.assertEqual(holder.value, 42)
        with self.assertRaises(AttributeError):
            holder.value = 1


class TestNames(TestCase):

    def testValidNamesPass(self):
        for name in ("deploy", "dry-run", "a", "v2", "config.file", "Deploy", "some_name"):
            with self.subTest(name=name):
                self.assertEqual(validate_name(name), name)

    def testInvalidNamesFail(self):
        for name in ("", "-v", "1abc", "name-", "with space", "tail.", "_x"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    validate_name(name)

    def testCustomPattern(self):
        self.assertEqual(validate_name("ABC", r"[A-Z]+", 0), "ABC")
        with self.assertRaises(ValueError):
            validate_name("abc", r"[A-Z]+", 0)

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            validate_name(1)
        with self.assertRaises(TypeError):
            normalize_name(None)

    def testNormalizeName(self):
        self.assertEqual(normalize_name(" Deploy "), "deploy")
        with self.assertRaises(ValueError):
            normalize_name("  ")


class TestOrdinal(TestCase):

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
