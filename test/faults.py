# python
"""
Fault behavioral tests.

Scope
- Validate FaultCode identifiers and host normalization.
- Validate message/options handling, replace and trigger (raise vs. shell exit).
- Validate rich rendering (header, message, hint; plain and fancy).
- Validate that parse() surfaces each fault kind with position-first messages.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured through a colorless rich Console writing to a buffer.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from gopts import (
    AllocationError,
    CallbackError,
    FaultCode,
    GoptException,
    InvalidConversionError,
    MissingArgumentError,
    Spec,
    getdoc,
    keyed,
    parse,
    trigger,
)


def render(renderable):
    buffer = io.StringIO()
    Console(file=buffer, color_system=None, force_terminal=False, width=120).print(renderable)
    return buffer.getvalue()


class TestFaultCode(TestCase):
    """Stable identifiers."""

    def testValues(self):
        self.assertEqual(FaultCode.ALLOCATION_FAILURE, 21101)
        self.assertEqual(FaultCode.MISSING_ARGUMENT, 21111)
        self.assertEqual(FaultCode.INVALID_CONVERSION, 21112)
        self.assertEqual(FaultCode.CALLBACK_ABORT, 21121)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MISSING_ARGUMENT.normalize(), "21111")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.CALLBACK_ABORT))
        with self.assertRaises(TypeError):
            getdoc(21121)


class TestGoptException(TestCase):
    """Message, options and surfacing."""

    def testHierarchy(self):
        for kind in (AllocationError, MissingArgumentError, InvalidConversionError, CallbackError):
            self.assertTrue(issubclass(kind, GoptException))

    def testOptionsAreMergedWithDefaults(self):
        fault = MissingArgumentError("missing", code=FaultCode.MISSING_ARGUMENT, token="-x")
        self.assertEqual(str(fault), "missing")
        self.assertEqual(fault.options["title"], "parse error")
        self.assertIs(fault.code, FaultCode.MISSING_ARGUMENT)
        self.assertEqual(fault.token, "-x")
        with self.assertRaises(TypeError):
            fault.options["token"] = "-y"

    def testCallbackAbortHasNoMessage(self):
        self.assertEqual(str(CallbackError(code=FaultCode.CALLBACK_ABORT)), "")

    def testReplaceKeepsTypeAndMessage(self):
        fault = InvalidConversionError("bad", hint="old")
        other = copy.replace(fault, hint="new")
        self.assertIsInstance(other, InvalidConversionError)
        self.assertEqual(other.message, "bad")
        self.assertEqual(other.options["hint"], "new")
        self.assertEqual(fault.options["hint"], "old")

    def testTriggerRaises(self):
        fault = InvalidConversionError("bad", code=FaultCode.INVALID_CONVERSION)
        with self.assertRaises(InvalidConversionError) as context:
            trigger(fault, hint="try again")
        self.assertEqual(context.exception.options["hint"], "try again")

    def testTriggerShellExits(self):
        buffer = io.StringIO()
        with patch("gopts.faults.console", Console(file=buffer, color_system=None, width=120)):
            with self.assertRaises(SystemExit) as context:
                trigger(MissingArgumentError("missing argument", code=FaultCode.MISSING_ARGUMENT), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("missing argument", buffer.getvalue())

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testRendering(self):
        fault = InvalidConversionError(
            "invalid parameter in option 'uid=x' at second position",
            title="invalid parameter",
            code=FaultCode.INVALID_CONVERSION,
            hint="use a number",
            colorful=False,
        )
        output = render(fault)
        self.assertIn("21112", output)
        self.assertIn("Invalid Parameter", output)
        self.assertIn("at second position", output)
        self.assertIn("→ use a number", output)

    def testTokenShownWithoutMessage(self):
        output = render(CallbackError(code=FaultCode.CALLBACK_ABORT, token="file", colorful=False))
        self.assertIn("while handling 'file'", output)

    def testFancyRendering(self):
        output = render(CallbackError(title="callback abort", code=FaultCode.CALLBACK_ABORT, fancy=True))
        self.assertIn("Callback Abort", output)
        self.assertIn("21121", output)


class TestParseFaults(TestCase):
    """Faults raised by parse()."""

    def testMissingValueForSpacedTemplate(self):
        with self.assertRaises(MissingArgumentError) as context:
            parse(["prog", "-x"], {}, [keyed("-x %s", 1)], lambda *_: 1)
        self.assertIs(context.exception.code, FaultCode.MISSING_ARGUMENT)
        self.assertEqual(context.exception.token, "-x")
        self.assertIn("first position", str(context.exception))

    def testMissingValueForTrailingGroupFlag(self):
        with self.assertRaises(MissingArgumentError):
            parse(["prog", "a", "-o"])

    def testInvalidConversion(self):
        table = [Spec("uid=%u", "uid")]

        class Options:
            uid = None

        with self.assertRaises(InvalidConversionError) as context:
            parse(["prog", "-o", "uid=abc"], Options(), table)
        self.assertIs(context.exception.code, FaultCode.INVALID_CONVERSION)
        self.assertEqual(context.exception.token, "uid=abc")
        self.assertIsNone(Options.uid)

    def testCallbackAbort(self):
        with self.assertRaises(CallbackError) as context:
            parse(["prog", "file"], None, [], lambda data, arg, key, outargs: -1)
        self.assertEqual(context.exception.token, "file")
        self.assertEqual(str(context.exception), "")

    def testCallbackExceptionsPropagate(self):
        def explode(data, arg, key, outargs):
            raise RuntimeError(arg)

        with self.assertRaises(RuntimeError):
            parse(["prog", "-v"], None, [], explode)


if __name__ == "__main__":
    unittest.main()
