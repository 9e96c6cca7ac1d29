"""
gopts faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fatal parse issue.
- GoptException: base type that carries message + options and knows how to
  render itself through rich in a short, lowercased, actionable way.
- trigger(): central entry point to surface a fault (raise it, or print it and
  exit when running as a shell front end).
- getdoc(): optional description lookup for a code from the host application.

Fault kinds
- AllocationError: a vector or option string could not grow; nothing partial
  is returned.
- MissingArgumentError: a spaced option (or "-o") is the last token and has no
  value after it. Carries the flag name.
- InvalidConversionError: a value did not survive its declared conversion.
  Carries the offending token.
- CallbackError: the host callback asked to abort. The engine does not
  synthesize a message for it.

Every fault is fatal to the parse call that raised it.

Integration
- parse() raises faults directly (library mode).
- Front ends call trigger(fault, shell=True) to render via rich on stderr and
  exit with status 1.
- The host may set __prog__, __styles__, __codes__ and __docs__ on __main__ to
  customize the program name, colors, code labels and documentation.
"""
import copy
import sys
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping
    - resources (2110x)
      • ALLOCATION_FAILURE
    - tokens (2111x)
      • MISSING_ARGUMENT, INVALID_CONVERSION
    - delegated (2112x)
      • CALLBACK_ABORT
    """
    # --- resource errors ---
    ALLOCATION_FAILURE          = 21101

    # --- token errors ---
    MISSING_ARGUMENT            = 21111
    INVALID_CONVERSION          = 21112

    # --- delegated errors ---
    CALLBACK_ABORT              = 21121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class GoptException(Exception):
    """
    base class of every fatal parse fault.

    the message is positional-only; everything else (title, code, hint, token,
    index, and rendering switches such as shell/fancy/colorful) travels as
    read-only options.
    """
    __defaults__ = MappingProxyType({
        "title": "parse error",
        "hint": "",
        "shell": False,
        "fancy": False,
        "colorful": True,
    })

    __styles__ = MappingProxyType({
        "prog": "bold",
        "code": "bold cyan",
        "title": "bold red",
        "message": "",
        "token": "bold yellow",
        "hint": "italic green",
    })

    def __init__(self, message=Unset, /, **options):
        if message is not Unset and not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(dict(self.__defaults__) | options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    @property
    def code(self):
        return self.options.get("code")

    @property
    def token(self):
        return self.options.get("token")

    def _style(self, name):
        if not self.options["colorful"]:
            return ""
        return getattr(__import__("__main__"), "__styles__", {}).get(name, self.__styles__[name])

    def _header(self):
        prog = getattr(__import__("__main__"), "__prog__", self.options.get("prog", "gopts"))
        code = "?" if self.code is None else self.code.normalize()
        return Text.assemble(
            "[ ",
            (str(prog), self._style("prog")),
            " — ",
            (code, self._style("code")),
            " | ",
            (self.options["title"].title(), self._style("title")),
            " ]",
        )

    def __rich__(self):
        header = self._header()
        body = []
        if self.message is not Unset:
            body.append(Text(self.message, self._style("message")))
        elif self.token is not None:
            body.append(Text.assemble("while handling ", (repr(self.token), self._style("token"))))
        if self.options["hint"]:
            body.append(Text.assemble(" → ", (self.options["hint"], self._style("hint"))))

        if self.options["fancy"]:
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __trigger__(self):
        if self.options["shell"]:
            console.print(self)
            sys.exit(1)
        raise self

    def __replace__(self, /, **changes):
        return type(self)(self.message, **(dict(self.options) | changes))


class AllocationError(GoptException): ...
class MissingArgumentError(GoptException): ...
class InvalidConversionError(GoptException): ...
class CallbackError(GoptException): ...


def trigger(fault, /, **options):
    """
    surface `fault` after merging `options` into it (copy.replace).

    - shell=False (default): the merged fault is raised.
    - shell=True: the merged fault is printed to stderr and the process exits
      with status 1.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must be a gopts fault")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "GoptException",
    "AllocationError",
    "MissingArgumentError",
    "InvalidConversionError",
    "CallbackError",
    "trigger",
    "getdoc",
)
