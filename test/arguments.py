# python
"""
Arguments module behavioral tests (field specs).

Scope
- Validate public specs (Option, Flag, Subcommand, PlainArgs, Ignore):
  construction, normalization, read-only storage.
- Validate metadata constraints (descr defaults to None but explicit None
  rejected, names validation, choices rules, metavar/choices exclusivity).

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argshape import FieldKind, Option, Flag, Subcommand, PlainArgs, Ignore


class TestOption(TestCase):
    """Behavioral tests for Option (named, value-bearing) specifications."""

    def testOptionWithoutNamesIsAllowed(self):
        o = Option()
        self.assertEqual(o.names, ())

    def testOptionNamesKeepAuthorOrder(self):
        o = Option("--size", "-s")
        self.assertEqual(o.names, ("--size", "-s"))

    def testOptionDescrDefaultsToNone(self):
        o = Option("--opt")
        self.assertIsNone(o.descr)

    def testOptionDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Option("--opt", descr=None)

    def testOptionDescrEmptyRejected(self):
        with self.assertRaises(ValueError):
            Option("--opt", descr="   ")

    def testOptionNamesRejectUnderscore(self):
        with self.assertRaises(ValueError):
            Option("--bad_name")

    def testOptionShortNameIsOneLetter(self):
        with self.assertRaises(ValueError):
            Option("-ab")
        with self.assertRaises(ValueError):
            Option("-1")

    def testOptionNamesMustBeStrings(self):
        with self.assertRaises(TypeError):
            Option(1)

    def testOptionDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Option("--dup", "--dup")

    def testOptionNamesAllowI18N(self):
        o = Option("--名-前")
        self.assertIn("--名-前", o.names)

    def testOptionTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("--opt", type=5)

    def testOptionMetavarMustBeNonEmpty(self):
        with self.assertRaises(ValueError):
            Option("--opt", metavar=" ")

    def testOptionMetavarAndChoicesExclusive(self):
        with self.assertRaises(TypeError):
            Option("--mode", metavar="MODE", choices=("a", "b"))

    def testOptionChoicesDuplicatesRejectedForGenericIterable(self):
        # duplicates in a generic iterable (e.g., list) are rejected
        with self.assertRaises(ValueError):
            Option("--mode", choices=["fast", "safe", "fast"])

    def testOptionChoicesStringRejected(self):
        with self.assertRaises(TypeError):
            Option("--mode", choices="abc")

    def testOptionChoicesFrozenForSetAndKeptForRange(self):
        o2 = Option("--level", choices={1, 2, 3})
        self.assertIsInstance(o2.choices, frozenset)
        self.assertEqual(o2.choices, frozenset({1, 2, 3}))

        o3 = Option("--range", choices=range(3))
        self.assertEqual(o3.choices, range(3))

        o4 = Option("--mode", choices=["fast", "safe"])
        self.assertEqual(o4.choices, ("fast", "safe"))

    def testOptionFlagsAreCoerced(self):
        o = Option("--opt", mandatory=1, append=0)
        self.assertIs(o.mandatory, True)
        self.assertIs(o.append, False)

    def testOptionIsReadOnly(self):
        o = Option("--opt")
        with self.assertRaises(AttributeError):
            o.names = ("--other",)
        with self.assertRaises(AttributeError):
            setattr(o, "-names", ("--other",))
        with self.assertRaises(AttributeError):
            getattr(o, "-names")

    def testOptionIsGeneric(self):
        self.assertIsNotNone(Option[int])

    def testOptionRepr(self):
        o = Option("-s", type=int)
        self.assertTrue(repr(o).startswith("option(names=('-s',)"))

    def testOptionKind(self):
        self.assertIs(Option().__kind__, FieldKind.OPTION)


class TestFlag(TestCase):
    """Behavioral tests for Flag (presence-only) specifications."""

    def testFlagNamesValidation(self):
        with self.assertRaises(ValueError):
            Flag("--bad_name")

    def testFlagDescrDefaultsToNone(self):
        f = Flag("--verbose")
        self.assertIsNone(f.descr)

    def testFlagDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Flag("--verbose", descr=None)

    def testFlagMandatory(self):
        self.assertTrue(Flag(mandatory=True).mandatory)
        self.assertFalse(Flag().mandatory)

    def testFlagHasNoValueMetadata(self):
        f = Flag("-v")
        self.assertFalse(hasattr(f, "metavar"))
        self.assertFalse(hasattr(f, "choices"))

    def testFlagKind(self):
        self.assertIs(Flag().__kind__, FieldKind.OPTION)


class TestSubcommand(TestCase):
    """Behavioral tests for Subcommand specifications."""

    def testSubcommandRecordDefaultsToNone(self):
        self.assertIsNone(Subcommand().record)

    def testSubcommandRecordMustBeClass(self):
        with self.assertRaises(TypeError):
            Subcommand("build")

    def testSubcommandExplicitRecord(self):
        class Build:
            pass

        s = Subcommand(Build, descr="compile")
        self.assertIs(s.record, Build)
        self.assertEqual(s.descr, "compile")
        self.assertIs(s.__kind__, FieldKind.SUBCOMMAND)


class TestPlainArgs(TestCase):
    """Behavioral tests for PlainArgs specifications."""

    def testPlainArgsDescr(self):
        self.assertEqual(PlainArgs(descr=" files ").descr, "files")
        self.assertIsNone(PlainArgs().descr)

    def testPlainArgsDescrEmptyRejected(self):
        with self.assertRaises(ValueError):
            PlainArgs(descr="")

    def testPlainArgsKind(self):
        self.assertIs(PlainArgs().__kind__, FieldKind.PLAIN_ARGS)


class TestIgnore(TestCase):
    """Behavioral tests for Ignore specifications."""

    def testIgnoreDefault(self):
        self.assertEqual(Ignore(3).initial(), 3)
        self.assertIsNone(Ignore().initial())

    def testIgnoreFactoryBuildsFreshValues(self):
        i = Ignore(factory=list)
        first, second = i.initial(), i.initial()
        self.assertEqual(first, [])
        self.assertIsNot(first, second)

    def testIgnoreFactoryMustBeCallable(self):
        with self.assertRaises(TypeError):
            Ignore(factory=3)

    def testIgnoreDefaultAndFactoryExclusive(self):
        with self.assertRaises(TypeError):
            Ignore(1, factory=list)

    def testIgnoreKind(self):
        self.assertIs(Ignore().__kind__, FieldKind.IGNORED)


if __name__ == "__main__":
    unittest.main()
