# python
"""
Demo front end (main.py) behavioral tests.

Scope
- Validate the mount-style option group end to end.
- Validate that usage, version and help all go through rich consoles on stderr.

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured by swapping the rich consoles for buffered ones.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

import main
from gopts import CallbackError, __version__


class TestDemo(TestCase):
    """The gopts-mount demo."""

    def setUp(self):
        self.buffer = io.StringIO()
        console = Console(file=self.buffer, color_system=None, width=120)
        self.patches = [
            patch.object(main, "console", console),
            patch("gopts.builder.console", console),
        ]
        for patcher in self.patches:
            patcher.start()
            self.addCleanup(patcher.stop)

    def testMountCommandLine(self):
        options = main.Options()
        outargs = main.group.parse(["gopts-mount", "-f", "-o", "noatime,uid=42,fsname=disk", "/mnt"], options)
        self.assertTrue(options.foreground)
        self.assertFalse(options.atime)
        self.assertEqual(options.uid, 42)
        self.assertEqual(options.fsname, "disk")
        self.assertEqual(options.mountpoint, "/mnt")
        self.assertEqual(outargs.argv, ["gopts-mount", "-o", "noatime,fsname=disk", "-f"])

    def testVersionGoesThroughConsole(self):
        with self.assertRaises(SystemExit) as context:
            main.group.parse(["gopts-mount", "--version"], main.Options())
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(self.buffer.getvalue(), "gopts-mount version %s\n" % __version__)

    def testHelpGoesThroughConsole(self):
        with self.assertRaises(SystemExit) as context:
            main.group.parse(["gopts-mount", "-h"], main.Options())
        self.assertEqual(context.exception.code, 0)
        lines = self.buffer.getvalue().splitlines()
        self.assertEqual(lines[0], "usage: gopts-mount [options] <mountpoint>")
        self.assertTrue(any("-o uid=N" in line for line in lines[1:]))

    def testExtraPositionalAborts(self):
        with self.assertRaises(CallbackError):
            main.group.parse(["gopts-mount", "/mnt", "/other"], main.Options())
        self.assertIn("unexpected extra argument '/other'", self.buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
