r"""
Escape handling for "-o" option groups.

Splitting and decoding
- an unescaped "," ends a field; "a,,b," yields "a", "", "b", "".
- "\" followed by three octal digits (first 0-3, others 0-7) is that byte:
  "\054" is ",", "\134" is "\". runs of escaped bytes decode as UTF-8, so
  "\303\251" is "é"; bytes that are not UTF-8 survive as surrogate escapes
  (os.fsdecode style).
- "\" followed by anything else is that character: "\," is ",".
- a lone trailing "\" stays a backslash.

Encoding
- only "," and "\" are escaped, each with a leading backslash. octal
  escapes are never produced, so decode(encode(x)) == x for any x.

Option strings
- add_opt / add_opt_escaped join one more option onto a comma-separated
  option string, the way the parser accumulates the output "-o" value.
"""
_OCTAL_LEAD = frozenset("0123")
_OCTAL = frozenset("01234567")


def _fields(text):
    field = []
    octets = bytearray()
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\" and index + 1 < length:
            index += 1
            digits = text[index:index + 3]
            if len(digits) == 3 and digits[0] in _OCTAL_LEAD and digits[1] in _OCTAL and digits[2] in _OCTAL:
                octets.append(int(digits, 8))
                index += 3
                continue
            char = text[index]
        elif char == ",":
            field.append(octets.decode("utf-8", "surrogateescape"))
            octets.clear()
            yield "".join(field)
            field = []
            index += 1
            continue
        if octets:
            # a run of escaped bytes ends here
            field.append(octets.decode("utf-8", "surrogateescape"))
            octets.clear()
        field.append(char)
        index += 1
    field.append(octets.decode("utf-8", "surrogateescape"))
    yield "".join(field)


def split(text, /):
    """
    split an "-o" argument into decoded fields.

    the input string is only read; every field is a new string.
    """
    if not isinstance(text, str):
        raise TypeError("split() argument must be a string")
    return list(_fields(text))


def decode(text, /):
    """decode escapes in a single field (commas are kept, escaped or not)."""
    if not isinstance(text, str):
        raise TypeError("decode() argument must be a string")
    return ",".join(_fields(text))


def encode(text, /):
    """escape "," and "\\" so the text survives split() as one field."""
    if not isinstance(text, str):
        raise TypeError("encode() argument must be a string")
    return text.replace("\\", "\\\\").replace(",", "\\,")


def add_opt(opts, opt, /):
    """
    append `opt` to the comma-separated option string `opts`, verbatim.

    `opts` may be None or "" to start a new string; the result is returned.
    """
    if opts is not None and not isinstance(opts, str):
        raise TypeError("add_opt() first argument must be a string or None")
    if not isinstance(opt, str):
        raise TypeError("add_opt() second argument must be a string")
    return opts + "," + opt if opts else opt


def add_opt_escaped(opts, opt, /):
    """like add_opt(), escaping "," and "\\" inside `opt` first."""
    if not isinstance(opt, str):
        raise TypeError("add_opt_escaped() second argument must be a string")
    return add_opt(opts, encode(opt))


__all__ = (
    "split",
    "decode",
    "encode",
    "add_opt",
    "add_opt_escaped",
)
