"""
Converters module behavioral tests (default converters, container types, constraints).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import enum
import unittest
from unittest import TestCase

from foxcli.converters import (
    is_container,
    element_type,
    typename,
    collect,
    boolean,
    default_converter,
    identity,
    choices,
    between,
    matches,
)
from foxcli.faults import ConversionError, ConstraintViolationError


class Color(enum.Enum):
    RED = "r"
    GREEN = "g"


class TestTypes(TestCase):

    def testContainers(self):
        for type in (list, tuple, set, frozenset, list[int], tuple[str, ...]):
            with self.subTest(type=type):
                self.assertTrue(is_container(type))
        for type in (str, int, bool, dict):
            with self.subTest(type=type):
                self.assertFalse(is_container(type))

    def testElementType(self):
        self.assertIs(element_type(list), str)
        self.assertIs(element_type(list[int]), int)
        self.assertIs(element_type(tuple[float, ...]), float)
        self.assertIs(element_type(int), int)

    def testTypename(self):
        self.assertEqual(typename(str), "str")
        self.assertEqual(typename(list[int]), "list[int]")

    def testCollect(self):
        self.assertEqual(collect(list[int], [1, 2]), [1, 2])
        self.assertEqual(collect(tuple, ["a"]), ("a",))
        self.assertEqual(collect(set, ["a", "a"]), {"a"})


class TestConverters(TestCase):

    def testBoolean(self):
        for input in ("true", "YES", "on", "1"):
            self.assertIs(boolean(input), True)
        for input in ("false", "No", "off", "0"):
            self.assertIs(boolean(input), False)

    def testBooleanRejectsOtherText(self):
        with self.assertRaises(ConversionError) as context:
            boolean("maybe")
        self.assertIs(context.exception.type, bool)

    def testDefaultConverters(self):
        self.assertIs(default_converter(str), str)
        self.assertIs(default_converter(bool), boolean)
        self.assertIs(default_converter(int), int)
        self.assertIs(default_converter(list[int]), int)
        self.assertIs(default_converter(list), str)

    def testEnumerationByNameOrValue(self):
        converter = default_converter(Color)
        self.assertIs(converter("red"), Color.RED)
        self.assertIs(converter("GREEN"), Color.GREEN)
        self.assertIs(converter("g"), Color.GREEN)
        with self.assertRaises(ConversionError):
            converter("blue")

    def testNoDefaultConverter(self):
        with self.assertRaises(TypeError):
            default_converter(list["not callable"])


class TestConstraints(TestCase):

    def testIdentity(self):
        self.assertEqual(identity(5), 5)

    def testChoices(self):
        constraint = choices("prod", "staging")
        self.assertEqual(constraint("prod"), "prod")
        with self.assertRaises(ConstraintViolationError) as context:
            constraint("dev")
        self.assertEqual(context.exception.value, "dev")
        with self.assertRaises(TypeError):
            choices()

    def testBetween(self):
        constraint = between(1, 10)
        self.assertEqual(constraint(1), 1)
        self.assertEqual(constraint(10), 10)
        with self.assertRaises(ConstraintViolationError):
            constraint(0)
        with self.assertRaises(ConstraintViolationError):
            constraint(11)
        self.assertEqual(between(maximum=3)(-100), -100)
        with self.assertRaises(TypeError):
            between()

    def testMatches(self):
        constraint = matches(r"v\d+")
        self.assertEqual(constraint("v12"), "v12")
        with self.assertRaises(ConstraintViolationError):
            constraint("v12b")


if __name__ == "__main__":
    unittest.main()
