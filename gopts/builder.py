"""
Declarative option groups: build a table, a dispatcher and help text from
one list of option descriptions.

Overview
- Gopts(*gopts): collects generalized-option descriptions and exposes
  • table  : tuple[Spec, ...] ending with END, ready for parse().
  • proc   : the callback that runs each option's action and answers with
             its preserve policy.
  • help() : prints the documented options to stderr.
  • parse(args, data): parse() with this group's table and proc.

- Descriptions (one class per kind)
  • Help(help, action)                      "-h" / "--help"
  • Version(help, action)                   "-V" / "--version"
  • Debug(help, action)                     "-d" / "-o debug"
  • Flag(dashname, help, preserve, action)  "-n" or "--name"
  • Opt(name, help, preserve, action)       "-o name"
  • OptBool(no, name, help, preserve, member, action)
                                            "-o name" / "-o noname"
  • OptParam(name, conv, metavar, help, preserve, member, action)
                                            "-o name=VALUE"
  • Positional(preserve, action)            positional tokens (at most one)

Conventions
- help: a short description, or omitted to leave the option undocumented.
- preserve: Outcome.KEEP (re-emit the token) or Outcome.DISCARD.
- member: a Field (or attribute name) written before the action runs;
  omitted when there is nothing to store.
- action: callable(data, arg, outargs). Returning Outcome.ERROR (or raising)
  aborts the parse; any other return value is ignored.

Keys
- every description receives its symbolic key(s) from one process-wide,
  monotonically increasing counter when it is built into a Gopts, so keys
  never collide between groups.

Example
    >>> group = Gopts(
    ...     Help("print help", lambda data, arg, outargs: group.help()),
    ...     OptBool("no", "atime", "update access times", Outcome.KEEP, "atime"),
    ...     OptParam("uid", "%u", "N", "owner of the files", Outcome.DISCARD, "uid"),
    ... )
    >>> outargs = group.parse(["mount", "-o", "noatime,uid=1000", "/mnt"], options)
"""
import itertools
import logging

from rich.console import Console
from rich.text import Text

from .parser import parse
from .specs import END, Field, Key, Outcome, Spec, keyed
from .utils import Unset, coalesce, rename

logger = logging.getLogger("gopts.builder")

console = Console(stderr=True, highlight=False)

_counter = itertools.count()


def _sanitize_help(help, /):
    if help is Unset:
        return help
    if not isinstance(help, str | Text):
        raise TypeError("help must be a string or a rich Text")
    if not str(help).strip():
        raise ValueError("help must be a non-empty string")
    return help


def _sanitize_preserve(preserve, /):
    if isinstance(preserve, bool):
        return Outcome.KEEP if preserve else Outcome.DISCARD
    if preserve not in (Outcome.KEEP, Outcome.DISCARD):
        raise ValueError("preserve must be Outcome.KEEP or Outcome.DISCARD")
    return Outcome(preserve)


def _sanitize_member(member, /):
    if member is Unset or isinstance(member, Field):
        return member
    if isinstance(member, str):
        return Field.attribute(member)
    raise TypeError("member must be a Field or an attribute name")


def _sanitize_action(action, /):
    if action is not Unset and not callable(action):
        raise TypeError("action must be callable")
    return action


def _sanitize_name(name, what, /):
    if not isinstance(name, str):
        raise TypeError("%s must be a string" % what)
    if not name or any(char in name for char in ", =\\"):
        raise ValueError("%s %r must be non-empty and free of ',', '=', ' ' and '\\'" % (what, name))
    return name


class Gopt:
    """
    base class of the option descriptions.

    subclasses define
    - rows(): the Spec rows of this option, in table order.
    - cases(): {key: handler} where handler(data, arg, outargs) -> Outcome.
    - columns(): help columns, or None when undocumented.
    """
    __slots__ = ("_help", "_preserve", "_action", "_keys")

    def __init__(self, help=Unset, preserve=Outcome.KEEP, action=Unset, /):
        self._help = _sanitize_help(help)
        self._preserve = _sanitize_preserve(preserve)
        self._action = _sanitize_action(action)
        self._keys = ()

    @property
    def help(self):
        return coalesce(self._help)

    @property
    def preserve(self):
        return self._preserve

    @property
    def keys(self):
        return self._keys

    def _allocate(self, count, /):
        if self._keys:
            raise TypeError("%s is already part of an option group" % type(self).__name__)
        self._keys = tuple(next(_counter) for _ in range(count))
        return self._keys

    def _run(self, data, arg, outargs, /):
        if self._action is not Unset and self._action(data, arg, outargs) == Outcome.ERROR:
            return Outcome.ERROR
        return self._preserve

    def rows(self):
        raise NotImplementedError

    def cases(self):
        return {key: self._run for key in self._keys}

    def columns(self):
        raise NotImplementedError

    def __repr__(self):
        return "%s(keys=%r)" % (type(self).__name__, self._keys)


class _Switch(Gopt):
    """fixed spelling pair (short, long) that is always kept."""
    __slots__ = ()
    __names__ = ()

    def __init__(self, help=Unset, action=Unset, /):
        super().__init__(help, Outcome.KEEP, action)

    def rows(self):
        key, = self._allocate(1)
        return [keyed(name, key) for name in self.__names__]

    def columns(self):
        if self._help is Unset:
            return None
        return (*self.__labels__, self._help)


class Help(_Switch):
    __slots__ = ()
    __names__ = ("-h", "--help")
    __labels__ = ("-h", "--help")


class Version(_Switch):
    __slots__ = ()
    __names__ = ("-V", "--version")
    __labels__ = ("-V", "--version")


class Debug(_Switch):
    __slots__ = ()
    __names__ = ("-d", "debug")
    __labels__ = ("-d", "-o debug")


class Flag(Gopt):
    """a dashed flag such as "-f" or "--foreground" (never takes a value)."""
    __slots__ = ("_dashname",)

    def __init__(self, dashname, help=Unset, preserve=Outcome.KEEP, action=Unset, /):
        if not isinstance(dashname, str):
            raise TypeError("Flag() dashname must be a string")
        if not dashname.startswith("-") or dashname in ("-", "--") or dashname.startswith("-o"):
            raise ValueError("Flag() dashname %r must be a dashed name other than '-o'" % dashname)
        super().__init__(help, preserve, action)
        self._dashname = _sanitize_name(dashname, "Flag() dashname")

    def rows(self):
        key, = self._allocate(1)
        return [keyed(self._dashname, key)]

    def columns(self):
        if self._help is Unset:
            return None
        return (self._dashname, self._help)


class Opt(Gopt):
    """a valueless "-o name" option."""
    __slots__ = ("_name",)

    def __init__(self, name, help=Unset, preserve=Outcome.KEEP, action=Unset, /):
        super().__init__(help, preserve, action)
        self._name = _sanitize_name(name, "Opt() name")

    def rows(self):
        key, = self._allocate(1)
        return [keyed(self._name, key)]

    def columns(self):
        if self._help is Unset:
            return None
        return ("-o " + self._name, self._help)


class OptBool(Gopt):
    """
    a "-o [no]name" boolean pair.

    "name" stores True and "<no>name" stores False into `member` (when given)
    before the action runs.
    """
    __slots__ = ("_no", "_name", "_member")

    def __init__(self, no, name, help=Unset, preserve=Outcome.KEEP, member=Unset, action=Unset, /):
        super().__init__(help, preserve, action)
        self._no = _sanitize_name(no, "OptBool() negation prefix")
        self._name = _sanitize_name(name, "OptBool() name")
        self._member = _sanitize_member(member)

    @property
    def member(self):
        return coalesce(self._member)

    def rows(self):
        yes, no = self._allocate(2)
        return [keyed(self._name, yes), keyed(self._no + self._name, no)]

    def cases(self):
        yes, no = self._keys

        @rename("on_" + self._name)
        def positive(data, arg, outargs, /):
            if self._member is not Unset:
                self._member.assign(data, True)
            return self._run(data, arg, outargs)

        @rename("on_" + self._no + self._name)
        def negative(data, arg, outargs, /):
            if self._member is not Unset:
                self._member.assign(data, False)
            return self._run(data, arg, outargs)

        return {yes: positive, no: negative}

    def columns(self):
        if self._help is Unset:
            return None
        return ("-o [%s]%s" % (self._no, self._name), self._help)


class OptParam(Gopt):
    """
    a "-o name=VALUE" option.

    with a `member`, the value is converted with `conv` (e.g. "%u", "%s") and
    stored before the action runs; the action always sees "name=VALUE".
    """
    __slots__ = ("_name", "_conv", "_metavar", "_member")

    def __init__(self, name, conv, metavar, help=Unset, preserve=Outcome.KEEP, member=Unset, action=Unset, /):
        super().__init__(help, preserve, action)
        self._name = _sanitize_name(name, "OptParam() name")
        if not isinstance(conv, str) or not conv.startswith("%"):
            raise ValueError("OptParam() conv must be a conversion such as '%s' or '%u'")
        if not isinstance(metavar, str) or not metavar.strip():
            raise ValueError("OptParam() metavar must be a non-empty string")
        self._conv = conv
        self._metavar = metavar
        self._member = _sanitize_member(member)

    @property
    def member(self):
        return coalesce(self._member)

    def rows(self):
        key, = self._allocate(1)
        rows = []
        if self._member is not Unset:
            rows.append(Spec(self._name + "=" + self._conv, self._member, 0))
        rows.append(keyed(self._name + "=", key))
        return rows

    def columns(self):
        if self._help is Unset:
            return None
        return ("-o %s=%s" % (self._name, self._metavar), self._help)


class Positional(Gopt):
    """the handler for positional tokens; contributes no table rows."""
    __slots__ = ()

    def __init__(self, preserve=Outcome.KEEP, action=Unset, /):
        super().__init__(Unset, preserve, action)

    def rows(self):
        if self._keys:
            raise TypeError("Positional is already part of an option group")
        self._keys = (Key.NONOPT,)
        return []

    def columns(self):
        return None


class Gopts:
    """
    an option group: table + dispatcher + help built from descriptions.

    parameters
    - *gopts: Gopt descriptions, in the order their rows are matched and
      their help lines are printed.
    """
    __slots__ = ("_gopts", "_table", "_cases")

    def __init__(self, *gopts):
        if not all(isinstance(gopt, Gopt) for gopt in gopts):
            raise TypeError("Gopts() arguments must be option descriptions")
        if sum(isinstance(gopt, Positional) for gopt in gopts) > 1:
            raise ValueError("Gopts() accepts at most one Positional")

        table = []
        cases = {}
        for gopt in gopts:
            table.extend(gopt.rows())
            cases.update(gopt.cases())
        table.append(END)

        self._gopts = gopts
        self._table = tuple(table)
        self._cases = cases
        logger.debug("built option group with %d row(s) and %d key(s)", len(table) - 1, len(cases))

    @property
    def gopts(self):
        return self._gopts

    @property
    def table(self):
        return self._table

    def proc(self, data, arg, key, outargs, /):
        """
        dispatch callback for parse(): run the handler registered for `key`.

        unknown keys (unmatched options, or positionals without a Positional)
        are kept.
        """
        try:
            handler = self._cases[key]
        except KeyError:
            return Outcome.KEEP
        return handler(data, arg, outargs)

    def lines(self):
        """yield the formatted help lines of the documented options."""
        for gopt in self._gopts:
            columns = gopt.columns()
            if columns is None:
                continue
            if len(columns) == 3:
                short, long, help = columns
                yield Text.assemble("    ", ("%-3s" % short, "bold"), "  ", ("%-12s" % long, "bold"), "  ", help)
            else:
                name, help = columns
                yield Text.assemble("    ", ("%-21s" % name, "bold"), "  ", help)

    def help(self, *, file=Unset):
        """
        print the documented options, one per line.

        output goes to stderr unless `file` is given.
        """
        target = console if file is Unset else Console(file=file, highlight=False)
        for line in self.lines():
            target.print(line, soft_wrap=True)

    def parse(self, args, data=None):
        """parse `args` with this group's table and dispatcher."""
        return parse(args, data, self._table, self.proc)

    def __repr__(self):
        return "Gopts(%s)" % ", ".join(map(repr, self._gopts))


__all__ = (
    "Gopt",
    "Help",
    "Version",
    "Debug",
    "Flag",
    "Opt",
    "OptBool",
    "OptParam",
    "Positional",
    "Gopts",
)
