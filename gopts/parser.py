"""
gopts parse driver: turn a token vector into field writes, callbacks and a
rebuilt token vector.

Token classes (decided from the token's shape and what came before it)
- positional: does not start with "-" (the empty token included), or comes
  after "--". Reported to the callback as Key.NONOPT; kept by default.
- "-o" group: "-o<text>" or "-o" followed by <text>. The text is split and
  unescaped (see escapes.split) and every field is matched on its own. Kept
  fields are re-escaped into one accumulated "-o" string.
- "--": copied to the output; everything after it is positional.
- flag: any other "-..." token. Kept flags are copied verbatim.

Matching rows are applied in table order. A row without a field hands the
token to the callback (or applies Key.KEEP/Key.DISCARD itself). A row with a
field writes the converted value (or the row's fixed value) and emits
nothing; pair it with a Key.KEEP row when the token should survive.

Spaced templates ("-x %s", "user %s") take their value from the next token
when the current one stops at the separator: "-x" "foo" is handled as "-xfoo"
with the value starting right after "-x".

Result
- the program name (first token) is copied untouched.
- a non-empty accumulated "-o" string is inserted as "-o", <string> right after
  the program name.
- a "--" left dangling at the end of the output is dropped.

Ownership
- parse() owns its input for the duration of the call and releases it exactly
  once, whatever happens. An Arguments input is rebound to the output on
  success and left empty on failure; partial output is released before a
  fault propagates.
"""
import itertools
import logging
from collections.abc import Sequence
from contextlib import contextmanager
from enum import Enum

from .conversions import convert
from .escapes import add_opt_escaped, split
from .faults import (
    AllocationError,
    CallbackError,
    FaultCode,
    InvalidConversionError,
    MissingArgumentError,
)
from .specs import Key, Outcome
from .templates import lookup
from .utils import Unset, ordinal
from .vectors import Arguments

logger = logging.getLogger("gopts.parser")


class Kind(Enum):
    """the class of a generalized option; decides where kept tokens go."""
    FLAG = "flag"
    OPTION = "option"


class Context:
    """
    per-call parse state.

    attributes
    - table, callback, data: what the caller handed to parse().
    - inargs: the consumed input vector; cursor indexes into it.
    - outargs: the output vector being rebuilt.
    - opts: accumulated "-o" string (None until something is kept).
    - nonopt: output length right after "--" (0 until "--" is seen).
    """
    __slots__ = ("table", "callback", "data", "inargs", "outargs", "cursor", "opts", "nonopt")

    def __init__(self, inargs, data, table, callback):
        self.table = table
        self.callback = callback
        self.data = data
        self.inargs = inargs
        self.outargs = Arguments()
        self.cursor = 0
        self.opts = None
        self.nonopt = 0

    def missing(self, token):
        return MissingArgumentError(
            "missing argument after %r at %s position" % (token, ordinal(self.cursor)),
            title="missing argument",
            code=FaultCode.MISSING_ARGUMENT,
            hint="pass a value after %r" % token,
            token=token,
            index=self.cursor,
        )

    def call(self, token, key, kind):
        """
        consult the callback for `token` and apply the keep policy.
        """
        if key == Key.DISCARD:
            return
        if key != Key.KEEP and self.callback is not None:
            result = Outcome.coerce(self.callback(self.data, token, key, self.outargs))
            if result is Outcome.ERROR:
                logger.debug("callback aborted on %r (key %d)", token, key)
                raise CallbackError(
                    title="callback abort",
                    code=FaultCode.CALLBACK_ABORT,
                    token=token,
                    index=self.cursor,
                )
            if result is Outcome.DISCARD:
                return
        if kind is Kind.OPTION:
            try:
                self.opts = add_opt_escaped(self.opts, token)
            except MemoryError:
                raise AllocationError(
                    "memory allocation failed",
                    title="allocation failure",
                    code=FaultCode.ALLOCATION_FAILURE,
                    token=token,
                ) from None
        else:
            self.outargs.add(token)

    def write(self, spec, index, token, kind):
        """
        apply one matched row to `token` (separator at `index`).
        """
        if spec.field is Unset:
            return self.call(token, spec.value, kind)

        format = spec.template[index + 1:] if index else ""
        if not format:
            spec.field.assign(self.data, spec.value)
            return

        param = token[index + 1:] if spec.template[index] == "=" else token[index:]
        try:
            value = convert(format, param)
        except ValueError:
            raise InvalidConversionError(
                "invalid parameter in option %r at %s position" % (token, ordinal(self.cursor)),
                title="invalid parameter",
                code=FaultCode.INVALID_CONVERSION,
                hint="%r does not read as %s" % (param, format),
                token=token,
                index=self.cursor,
            ) from None
        logger.debug("%s <- %r (%s)", spec.field.name, value, token)
        spec.field.assign(self.data, value)

    def gopt(self, token, kind):
        """
        match a flag or an "-o" field against the table and apply every hit.
        """
        matches = lookup(self.table, token)
        first = next(matches, None)
        if first is None:
            logger.debug("unmatched %s %r", kind.value, token)
            return self.call(token, Key.OPT, kind)

        value = None
        for _, spec, index in itertools.chain((first,), matches):
            if index and spec.template[index] == " " and len(token) == index:
                # name and value are two separate tokens; the value is consumed once
                if value is None:
                    if self.cursor + 1 >= len(self.inargs):
                        raise self.missing(token)
                    self.cursor += 1
                    value = self.inargs[self.cursor]
                merged = token[:index] + value
                logger.debug("merged %r with the next token into %r", token, merged)
                self.write(spec, index, merged, kind)
            else:
                self.write(spec, index, token, kind)

    def one(self):
        """
        classify and process the token under the cursor.
        """
        token = self.inargs[self.cursor]

        if self.nonopt or not token.startswith("-"):
            return self.call(token, Key.NONOPT, Kind.FLAG)

        if token[1:2] == "o":
            if len(token) > 2:
                text = token[2:]
            elif self.cursor + 1 < len(self.inargs):
                self.cursor += 1
                text = self.inargs[self.cursor]
            else:
                raise self.missing(token)
            for field in split(text):
                self.gopt(field, Kind.OPTION)
            return

        if token == "--":
            self.outargs.add(token)
            self.nonopt = len(self.outargs)
            return

        self.gopt(token, Kind.FLAG)

    def finish(self):
        """
        flush the accumulated "-o" string and drop a dangling "--".
        """
        if self.opts:
            self.outargs.insert(1, "-o")
            self.outargs.insert(2, self.opts)
            if self.nonopt:
                self.nonopt += 2
        if self.nonopt and self.nonopt == len(self.outargs) and self.outargs[-1] == "--":
            self.outargs.pop()
        return self.outargs


@contextmanager
def _scope(context):
    """
    release everything the parse owns, on success and on failure alike.
    """
    try:
        yield context
    except BaseException:
        context.outargs.free()
        raise
    finally:
        context.opts = None
        context.inargs.free()


def parse(args, data=None, table=(), callback=None):
    """
    parse `args` against `table`, writing fields into `data` and calling `callback`.

    parameters
    - args: Arguments | Iterable[str]
      the token vector, program name first. Ownership passes to parse():
      an Arguments instance is rebound to the output on success and emptied
      on failure; a plain iterable is only read.
    - data: any
      the caller's data; Field setters and the callback receive it.
    - table: Sequence[Spec]
      option rows, optionally terminated by END.
    - callback: Callable[[data, str, int, Arguments], Outcome] | None
      receives unmatched tokens (Key.OPT), positionals (Key.NONOPT) and
      rows without a field (their own key). None keeps everything.

    returns
    - Arguments: the rebuilt vector (the same object as `args` when `args`
      is an Arguments instance).

    raises
    - MissingArgumentError, InvalidConversionError, CallbackError,
      AllocationError: all fatal; nothing partial is returned.
    """
    if table is None:
        table = ()
    if not isinstance(table, Sequence):
        raise TypeError("parse() table must be a sequence of Spec rows")
    if callback is not None and not callable(callback):
        raise TypeError("parse() callback must be callable or None")
    inargs = args if isinstance(args, Arguments) else Arguments(args, borrow=True)

    with _scope(Context(inargs, data, table, callback)) as context:
        if inargs:
            context.outargs.add(inargs[0])
            context.cursor = 1
            while context.cursor < len(inargs):
                context.one()
                context.cursor += 1
        outargs = context.finish()

    logger.debug("parsed into %d argument(s)", len(outargs))
    if isinstance(args, Arguments):
        args.adopt(outargs)
        return args
    return outargs


__all__ = (
    "Kind",
    "parse",
)
