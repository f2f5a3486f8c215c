# python
"""
Faults module behavioral tests (exit codes, trigger, rendering).

Scope
- Validate the exit code of every fault family.
- Validate trigger(): contract checks, raise vs. render-and-exit.
- Validate that __replace__ copies a fault without touching the original.
- Validate warnings in library and shell mode.

Conventions
- Test method names follow CamelCase per project convention.
- Shell-mode output is captured by redirecting the standard streams.
"""

from __future__ import annotations

import io
import unittest
import warnings
from contextlib import redirect_stderr, redirect_stdout
from unittest import TestCase

from optonaut import (
    EmptyInlineValueWarning,
    ExitCode,
    InvalidOptionValueError,
    OptionConflictError,
    OptionException,
    OptionWarning,
    OutOfBoundsError,
    ParserExit,
    UnknownOptionError,
    WrongValueCountError,
    trigger,
)


class TestExitCodes(TestCase):

    def testValues(self):
        self.assertEqual(ExitCode.SUCCESS, 0)
        self.assertEqual(ExitCode.NO_SUCH_OPTION, 1)
        self.assertEqual(ExitCode.WRONG_VALUE_COUNT, 2)
        self.assertEqual(ExitCode.OPTION_VALUE, 3)

    def testFaultFamilies(self):
        self.assertEqual(UnknownOptionError("x").code, 1)
        self.assertEqual(WrongValueCountError("x").code, 2)
        self.assertEqual(InvalidOptionValueError("x").code, 3)
        self.assertEqual(ParserExit().code, 0)

    def testCodeOverride(self):
        self.assertEqual(OptionException("x", code=7).code, 7)


class TestSetupErrors(TestCase):

    def testConflictNamesAlias(self):
        error = OptionConflictError("--output")
        self.assertEqual(error.alias, "--output")
        self.assertEqual(str(error), "duplicate definition of option '--output'")
        self.assertIsInstance(error, ValueError)

    def testOutOfBoundsIsLookupError(self):
        error = OutOfBoundsError("-x")
        self.assertEqual(error.alias, "-x")
        self.assertIsInstance(error, LookupError)


class TestTrigger(TestCase):

    def testRejectsObjectsWithoutContract(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testRaisesCopyInLibraryMode(self):
        fault = UnknownOptionError("no such option: -x", alias="-x")
        with self.assertRaises(UnknownOptionError) as context:
            trigger(fault, prog="tool")
        self.assertIsNot(context.exception, fault)
        self.assertEqual(context.exception.options["prog"], "tool")
        self.assertEqual(context.exception.options["alias"], "-x")
        self.assertNotIn("prog", fault.options)

    def testShellModePrintsUsageAndError(self):
        stderr = io.StringIO()
        fault = WrongValueCountError("-p option takes 2 arguments")
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(fault, prog="tool", usage="Usage: tool [options]\n", shell=True)
        self.assertEqual(context.exception.code, 2)
        self.assertEqual(
            stderr.getvalue(),
            "Usage: tool [options]\ntool: error: -p option takes 2 arguments\n",
        )

    def testShellModeWithoutUsage(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit):
            trigger(InvalidOptionValueError("bad"), prog="tool", shell=True)
        self.assertEqual(stderr.getvalue(), "tool: error: bad\n")

    def testParserExitPrintsToStdout(self):
        stdout = io.StringIO()
        with redirect_stdout(stdout), self.assertRaises(SystemExit) as context:
            trigger(ParserExit(ExitCode.SUCCESS, "tool 1.0\n"), shell=True)
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(stdout.getvalue(), "tool 1.0\n")

    def testParserExitRaisesInLibraryMode(self):
        with self.assertRaises(ParserExit) as context:
            trigger(ParserExit(ExitCode.SUCCESS, "help text"))
        self.assertEqual(context.exception.message, "help text")


class TestWarnings(TestCase):

    def testLibraryModeUsesWarnings(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(EmptyInlineValueWarning("empty inline value for option --name"), prog="tool")
        self.assertEqual(len(caught), 1)
        self.assertIs(caught[0].category, EmptyInlineValueWarning)
        self.assertTrue(issubclass(caught[0].category, OptionWarning))

    def testShellModePrintsWarning(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            trigger(OptionWarning("careful"), prog="tool", shell=True)
        self.assertEqual(stderr.getvalue(), "tool: warning: careful\n")


if __name__ == "__main__":
    unittest.main()
