"""
Template matching and option-table lookup.

A template names the tokens a row accepts and where the value part begins:

    "-v"          exact token "-v"
    "ro"          exact token "ro" (inside -o)
    "name="       any token starting with "name="
    "uid=%u"      any token starting with "uid=", value after the "="
    "-x %s"       any token starting with "-x", value right after "-x"
                  (or, for a bare "-x", the following token)

The separator is the first "=" of the template, or its first space when
there is no "=". It only counts when what follows it is empty or a
conversion ("%..."); "foo bar" therefore has no separator and matches
"foo bar" exactly.
"""
import functools


@functools.cache
def separator(template, /):
    """
    return the index of the template's valid separator, or 0 when there is none.

    index 0 cannot be a real separator position: a template never starts with
    its separator, so 0 doubles as "no value part".
    """
    index = template.find("=")
    if index < 0:
        index = template.find(" ")
    if index <= 0:
        return 0
    rest = template[index + 1:]
    if rest and not rest.startswith("%"):
        return 0
    return index


def match_template(template, token, /):
    """
    match one token against one template.

    returns
    - None when they do not match.
    - the separator index when the template has a valid separator and the
      token starts with the stem (the template through "=", or up to the space).
    - 0 when the token equals the template exactly.
    """
    index = separator(template)
    if index:
        stem = template[:index + 1] if template[index] == "=" else template[:index]
        if token.startswith(stem):
            return index
    if template == token:
        return 0
    return None


def lookup(table, token, /, start=0):
    """
    yield (position, spec, separator) for every row matching `token`.

    rows are scanned in table order from `start`; the scan stops at the END
    sentinel (a row whose template is None) or at the end of the table. the
    generator is lazy, so each next() resumes after the previous match.
    """
    for position in range(start, len(table)):
        spec = table[position]
        if spec.template is None:
            return
        index = match_template(spec.template, token)
        if index is not None:
            yield position, spec, index


def find(table, token, /, start=0):
    """return the first (position, spec, separator) matching `token`, or None."""
    return next(lookup(table, token, start), None)


def match(table, token, /):
    """True when any row of `table` matches `token`."""
    return find(table, token) is not None


__all__ = (
    "separator",
    "match_template",
    "lookup",
    "find",
    "match",
)
