"""
Tests for the internal helpers.

This module verifies:
- The `Unset` sentinel (singleton identity, falsy, repr, copy/pickle identity, finality).
- coalesce() only replacing Unset.
- rename() as a decorator.
- ordinal() labels used by fault messages.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from gopts.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)

    def testFalsyButDistinct(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)
        self.assertEqual(repr(Unset), "Unset")

    def testCopiesPreserveIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce(), rename() and ordinal().
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, "x"), 0)
        self.assertIsNone(coalesce(None, "x"))

    def testRenameDecorator(self) -> None:
        @rename("on_uid")
        def function():
            pass

        self.assertEqual(function.__name__, "on_uid")
        self.assertEqual(function.__qualname__, "on_uid")

    def testRenameGuards(self) -> None:
        with self.assertRaises(TypeError):
            rename("")
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("name")(42)

    def testOrdinal(self) -> None:
        # Words first, then numeric suffixes.
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(102), "102nd")
        self.assertEqual(ordinal(113), "113th")
        self.assertEqual(ordinal(0), "0th")
        with self.assertRaises(TypeError):
            ordinal(True)


if __name__ == "__main__":
    unittest.main()
