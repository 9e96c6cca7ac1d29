r"""
scanf-style value conversions for field-writing specs.

A spec template such as "uid=%u" or "-n %d" ends in exactly one conversion.
This module validates those conversions when a table is built and applies
them to option values during a parse.

supported conversions
- %d         decimal integer (optional sign)
- %u         unsigned decimal integer (optional "+"; "-" is rejected)
- %i         integer with C base prefixes (0x.. hex, 0.. octal, else decimal)
- %o         octal integer
- %x %X      hexadecimal integer (optional 0x prefix)
- %f %e %g %a (and upper-case forms)  floating point, including hex floats
- %c         exactly `width` characters (default 1), whitespace is not skipped
- %s         the whole remaining value, verbatim

an optional width (e.g. %3d) caps how many characters the conversion may
read, and C length modifiers (hh, h, l, ll, j, z, t, L, q) are accepted and
ignored: values are not range checked.

strictness
- leading whitespace is skipped for every conversion except %c and %s.
- the conversion must account for the whole value; "1,5" is not a %d.
"""
import functools
import re
from typing import NamedTuple

_FORMAT = re.compile(
    r"%(?P<width>[1-9][0-9]*)?(?P<length>hh|h|ll|l|j|z|t|L|q)?(?P<conversion>[diouxXaAeEfFgGcs])"
)

_INTEGERS = {
    "d": (re.compile(r"[+-]?[0-9]+"), 10),
    "u": (re.compile(r"\+?[0-9]+"), 10),
    "i": (re.compile(r"[+-]?(?:0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)"), 0),
    "o": (re.compile(r"[+-]?[0-7]+"), 8),
    "x": (re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+"), 16),
    "X": (re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+"), 16),
}

_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf(?:inity)?|nan)", re.IGNORECASE)
_HEXADECIMAL = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?")


class Conversion(NamedTuple):
    width: int | None
    length: str | None
    conversion: str

    @property
    def greedy(self):
        return self.conversion == "s"


@functools.cache
def parse_format(format, /):
    """
    validate a conversion string and return its parts.

    raises ValueError when `format` is not exactly one supported conversion.
    """
    if not isinstance(format, str):
        raise TypeError("parse_format() argument must be a string")
    match = _FORMAT.fullmatch(format)
    if not match:
        raise ValueError("unsupported conversion %r" % format)
    width = match["width"]
    return Conversion(int(width) if width else None, match["length"], match["conversion"])


def convert(format, text, /):
    """
    apply the conversion `format` to `text` and return the converted value.

    raises ValueError when the text does not convert as a whole.
    """
    if not isinstance(text, str):
        raise TypeError("convert() second argument must be a string")
    width, _, conversion = parse_format(format)

    if conversion == "s":
        return text

    if conversion == "c":
        count = width or 1
        if len(text) != count:
            raise ValueError("expected %d character(s), got %r" % (count, text))
        return text

    body = text.lstrip()
    if width is not None and len(body) > width:
        raise ValueError("value %r is wider than %d character(s)" % (body, width))

    if conversion in _INTEGERS:
        pattern, base = _INTEGERS[conversion]
        if not pattern.fullmatch(body):
            raise ValueError("invalid integer %r for %s" % (text, format))
        if base == 0 and re.fullmatch(r"[+-]?0[0-7]+", body):
            # C treats a leading zero as octal; int(..., 0) rejects it.
            return int(body, 8)
        return int(body, base)

    if _HEXADECIMAL.fullmatch(body):
        return float.fromhex(body)
    if _DECIMAL.fullmatch(body):
        return float(body)
    raise ValueError("invalid number %r for %s" % (text, format))


__all__ = (
    "Conversion",
    "parse_format",
    "convert",
)
