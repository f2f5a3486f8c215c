# python
"""
Registry module behavioral tests (lookup, conflicts, removal, defaults).

Scope
- Validate alias lookup and registration order.
- Validate the "error" and "resolve" conflict policies.
- Validate that removal restores option strings shadowed by resolution.
- Validate default seeding.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from optonaut import (
    Option,
    OptionRegistry,
    OptionConflictError,
    OutOfBoundsError,
    InvalidConfigurationError,
)


class TestRegistryLookup(TestCase):

    def testFindAndHas(self):
        registry = OptionRegistry()
        opt = registry.add(Option("-o", "--output"))
        self.assertIs(registry.find("-o"), opt)
        self.assertIs(registry.find("--output"), opt)
        self.assertIsNone(registry.find("--nope"))
        self.assertTrue(registry.has("--output"))
        self.assertFalse(registry.has("-x"))
        self.assertIn("-o", registry)

    def testIterationFollowsRegistrationOrder(self):
        registry = OptionRegistry()
        first = registry.add(Option("-a"))
        second = registry.add(Option("-b"))
        self.assertEqual(list(registry), [first, second])
        self.assertEqual(len(registry), 2)

    def testSameOptionTwiceRejected(self):
        registry = OptionRegistry()
        opt = registry.add(Option("-a"))
        with self.assertRaises(InvalidConfigurationError):
            registry.add(opt)

    def testUnknownPolicyRejected(self):
        with self.assertRaises(InvalidConfigurationError):
            OptionRegistry("ignore")
        registry = OptionRegistry()
        with self.assertRaises(InvalidConfigurationError):
            registry.set_conflict_handler("ignore")
        registry.set_conflict_handler("resolve")
        self.assertEqual(registry.conflict, "resolve")


class TestRegistryConflicts(TestCase):

    def testErrorPolicyNamesAlias(self):
        registry = OptionRegistry()
        registry.add(Option("-o", "--output"))
        with self.assertRaises(OptionConflictError) as context:
            registry.add(Option("-x", "--output"))
        self.assertEqual(context.exception.alias, "--output")

    def testErrorPolicyLeavesRegistryUntouched(self):
        registry = OptionRegistry()
        owner = registry.add(Option("-o", "--output"))
        with self.assertRaises(OptionConflictError):
            registry.add(Option("-x", "--output"))
        self.assertEqual(list(registry), [owner])
        self.assertIsNone(registry.find("-x"))
        self.assertEqual(owner.strings, ("-o", "--output"))

    def testResolveRemovesSingleStringOwner(self):
        registry = OptionRegistry("resolve")
        old = registry.add(Option("-q"))
        new = registry.add(Option("-q", "--quiet", action="store_true"))
        self.assertEqual(list(registry), [new])
        self.assertIs(registry.find("-q"), new)
        self.assertNotIn(old, list(registry))

    def testResolveDisablesOneStringOfMultiStringOwner(self):
        registry = OptionRegistry("resolve")
        old = registry.add(Option("-f", "--file"))
        new = registry.add(Option("-f", "--force", action="store_true"))
        self.assertEqual(list(registry), [old, new])
        self.assertEqual(old.strings, ("--file",))
        self.assertEqual(old.disabled, ("-f",))
        self.assertIs(registry.find("-f"), new)
        self.assertIs(registry.find("--file"), old)

    def testResolveDisablesThenRemovesWhenAllStringsTaken(self):
        registry = OptionRegistry("resolve")
        old = registry.add(Option("-b", "--bee"))
        new = registry.add(Option("-b", "--bee", dest="other"))
        self.assertEqual(list(registry), [new])
        self.assertNotIn(old, list(registry))


class TestRegistryRemoval(TestCase):

    def testRemoveUnknownRaises(self):
        registry = OptionRegistry()
        with self.assertRaises(OutOfBoundsError):
            registry.remove("--nope")

    def testRemoveDropsAllStrings(self):
        registry = OptionRegistry()
        registry.add(Option("-o", "--output"))
        registry.remove("-o")
        self.assertFalse(registry.has("-o"))
        self.assertFalse(registry.has("--output"))
        self.assertEqual(len(registry), 0)

    def testRemoveRestoresShadowedString(self):
        registry = OptionRegistry("resolve")
        old = registry.add(Option("-f", "--file"))
        registry.add(Option("-f", "--force", action="store_true"))
        registry.remove("--force")
        self.assertIs(registry.find("-f"), old)
        self.assertEqual(old.strings, ("--file", "-f"))
        self.assertEqual(old.disabled, ())

    def testRemoveRestoresMostRecentShadow(self):
        registry = OptionRegistry("resolve")
        first = registry.add(Option("-f", "--first"))
        second = registry.add(Option("-f", "--second"))
        registry.add(Option("-f", "--third"))
        registry.remove("--third")
        self.assertIs(registry.find("-f"), second)
        self.assertEqual(first.disabled, ("-f",))
        registry.remove("--second")
        self.assertIs(registry.find("-f"), first)

    def testRemoveSkipsUnregisteredShadow(self):
        registry = OptionRegistry("resolve")
        first = registry.add(Option("-f", "--first"))
        second = registry.add(Option("-f", "--second"))
        registry.add(Option("-f", "--third"))
        registry.remove("--second")
        registry.remove("--third")
        self.assertIs(registry.find("-f"), first)


class TestRegistryDefaults(TestCase):

    def testSeedsDefinedDefault(self):
        registry = OptionRegistry()
        registry.add(Option("-n", type="int", default=3))
        self.assertEqual(registry.defaults, {"n": 3})

    def testSeedsNoneWhenMissing(self):
        registry = OptionRegistry()
        registry.add(Option("-o", "--output"))
        self.assertEqual(registry.defaults, {"output": None})

    def testMissingDefaultKeepsEarlierOne(self):
        registry = OptionRegistry()
        registry.add(Option("-a", dest="shared", default="x"))
        registry.add(Option("-b", dest="shared"))
        self.assertEqual(registry.defaults["shared"], "x")

    def testLaterDefaultWins(self):
        registry = OptionRegistry()
        registry.add(Option("-a", dest="shared", default="x"))
        registry.add(Option("-b", dest="shared", default="y"))
        self.assertEqual(registry.defaults["shared"], "y")

    def testNoDestNoDefault(self):
        registry = OptionRegistry()
        registry.add(Option("-h", action="help"))
        self.assertEqual(registry.defaults, {})

    def testDefaultSurvivesRemoval(self):
        registry = OptionRegistry()
        registry.add(Option("-n", default="x"))
        registry.remove("-n")
        self.assertEqual(registry.defaults, {"n": "x"})

    def testSetDefaults(self):
        registry = OptionRegistry()
        registry.set_default("a", 1)
        registry.set_defaults({"b": 2}, c=3)
        self.assertEqual(registry.defaults, {"a": 1, "b": 2, "c": 3})

    def testDefaultsViewIsReadOnly(self):
        registry = OptionRegistry()
        with self.assertRaises(TypeError):
            registry.defaults["x"] = 1  # type: ignore[index]


if __name__ == "__main__":
    unittest.main()
