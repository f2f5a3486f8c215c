# python
"""
Utilities module behavioral tests (sentinel, helpers, metaclass).

Scope
- Validate the Unset sentinel: singleton identity, falsiness, finality.
- Validate coalesce(), rename() and mirror() copying semantics.
- Validate IntrospectableType (typename, properties, repr).
- Validate progname() resolution.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import sys
import types
import unittest
from unittest import TestCase, mock

from optonaut.utils import (
    IntrospectableType,
    Unset,
    UnsetType,
    coalesce,
    mirror,
    progname,
    rename,
)


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(1, str | Unset)


class TestCoalesce(TestCase):

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalsyValues(self):
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):

    def testDirectForm(self):
        def function():
            pass

        self.assertIs(rename(function, "other"), function)
        self.assertEqual(function.__name__, "other")
        self.assertEqual(function.__qualname__, "other")

    def testDecoratorForm(self):
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(len, "name")
        with self.assertRaises(TypeError):
            rename(5)


class Sample(metaclass=IntrospectableType):
    __introspectable__ = ("items", "mapping", "label")
    __displayable__ = ("label",)

    def __init__(self):
        self._items = [1, [2, 3]]
        self._mapping = {"key": {"inner"}}
        self._label = "sample"


class TestIntrospectableType(TestCase):

    def testTypename(self):
        self.assertEqual(Sample.__typename__, "sample")

        class HelpFormatterLike(metaclass=IntrospectableType):
            pass

        self.assertEqual(HelpFormatterLike.__typename__, "help-formatter-like")

    def testMirroredContainersAreCopies(self):
        sample = Sample()
        sample.items[1].append(4)
        sample.mapping["key"].add("other")
        self.assertEqual(sample.items, [1, [2, 3]])
        self.assertEqual(sample.mapping, {"key": {"inner"}})

    def testMirroredPropertiesAreReadOnly(self):
        with self.assertRaises(AttributeError):
            Sample().label = "changed"

    def testReprUsesDisplayable(self):
        self.assertEqual(repr(Sample()), "sample(label='sample')")
        self.assertEqual(list(Sample().__rich_repr__()), [("label", "sample")])

    def testMirrorRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestProgname(TestCase):

    def testMainHookWins(self):
        with mock.patch.object(sys.modules["__main__"], "__prog__", "hooked", create=True):
            self.assertEqual(progname(), "hooked")

    def testFallsBackToArgv(self):
        with mock.patch.dict(sys.modules, {"__main__": types.ModuleType("__main__")}):
            with mock.patch.object(sys, "argv", ["/usr/local/bin/frob", "-x"]):
                self.assertEqual(progname(), "frob")
            with mock.patch.object(sys, "argv", []):
                self.assertEqual(progname(), "")


if __name__ == "__main__":
    unittest.main()
