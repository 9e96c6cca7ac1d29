import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.pretty import pprint
from rich.text import Text

from gopts import *

__prog__ = "gopts-mount"

console = Console(stderr=True, highlight=False)


class Options:
    def __init__(self):
        self.foreground = False
        self.atime = True
        self.uid = None
        self.fsname = None
        self.mountpoint = None


def on_help(data, arg, outargs):
    console.print(Text.assemble("usage: ", (__prog__, "bold"), " [options] <mountpoint>"))
    group.help()
    sys.exit(0)


def on_version(data, arg, outargs):
    console.print(Text.assemble((__prog__, "bold"), " version ", __import__("gopts").__version__))
    sys.exit(0)


def on_mountpoint(data, arg, outargs):
    if data.mountpoint is not None:
        console.print("%s: unexpected extra argument %r" % (__prog__, arg), markup=False)
        return Outcome.ERROR
    data.mountpoint = arg


group = Gopts(
    Help("print help", on_help),
    Version("print version", on_version),
    Flag("-f", "foreground operation", Outcome.KEEP, lambda data, arg, outargs: setattr(data, "foreground", True)),
    OptBool("no", "atime", "update inode access times", Outcome.KEEP, "atime"),
    OptParam("uid", "%u", "N", "owner of the mounted files", Outcome.DISCARD, "uid"),
    OptParam("fsname", "%s", "NAME", "filesystem name shown in the mount table", Outcome.KEEP, "fsname"),
    Positional(Outcome.DISCARD, on_mountpoint),
)


if __name__ == '__main__':
    if os.environ.get("GOPTS_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler()])

    options = Options()
    try:
        outargs = group.parse(sys.argv, options)
    except GoptException as fault:
        trigger(fault, shell=True)
    else:
        pprint(vars(options))
        pprint(outargs.argv)
