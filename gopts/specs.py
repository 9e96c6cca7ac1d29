"""
gopts option specifications.

Overview
- Key: reserved symbolic keys handed to (or interpreted instead of) the callback.
  • OPT      an unmatched "-o" field or flag
  • NONOPT   a positional token
  • KEEP     skip the callback, keep the token
  • DISCARD  skip the callback, drop the token
- Outcome: what a callback answers (ERROR aborts the parse).
- Field: typed destination inside the caller's data (a setter/getter pair).
- Spec: one immutable table row (template, field, value).
- END: the sentinel row; table scans stop there.
- keyed(template, key): shorthand for a row without a field destination.

Rows
- keyed("-v", 1)                    → callback receives key 1 for "-v"
- Spec("uid=%u", Field.attribute("uid"))
                                    → data.uid = int(value)
- Spec("--debug", Field.item("debug"), 1)
                                    → data["debug"] = 1
- keyed("-f", Key.KEEP)             → keep "-f" without consulting the callback

Table rows are built once and read-only afterwards; one table can serve any
number of parses.
"""
import operator
from enum import IntEnum

from .conversions import parse_format
from .templates import separator
from .utils import Unset, rename


class Key(IntEnum):
    """
    reserved symbolic keys (negative; builder keys count up from zero).
    """
    OPT     = -1
    NONOPT  = -2
    KEEP    = -3
    DISCARD = -4


class Outcome(IntEnum):
    """
    callback results.

    - ERROR: abort the parse (CallbackError, no extra message).
    - DISCARD: the token is handled; emit nothing.
    - KEEP: apply the keep policy (re-emit the token).
    """
    ERROR   = -1
    DISCARD = 0
    KEEP    = 1

    @classmethod
    def coerce(cls, result, /):
        """
        normalize a callback answer.

        booleans map to KEEP/DISCARD, -1 to ERROR, other positive integers to KEEP.
        """
        if isinstance(result, cls):
            return result
        if isinstance(result, bool):
            return cls.KEEP if result else cls.DISCARD
        if isinstance(result, int):
            if result == -1:
                return cls.ERROR
            if result == 0:
                return cls.DISCARD
            if result > 0:
                return cls.KEEP
        raise TypeError("callback must return an Outcome, not %r" % (result,))


class Field:
    """
    typed destination inside the caller's data.

    a Field captures a setter (data, value) -> None and, optionally, a getter
    data -> value. the engine only ever calls the setter; the getter serves
    help rendering and introspection.
    """
    __slots__ = ("_setter", "_getter", "_name")

    def __init__(self, setter, getter=Unset, /, *, name=Unset):
        if not callable(setter):
            raise TypeError("Field() first argument must be callable")
        if getter is not Unset and not callable(getter):
            raise TypeError("Field() second argument must be callable")
        if name is not Unset and not isinstance(name, str):
            raise TypeError("Field() name must be a string")
        self._setter = setter
        self._getter = getter
        self._name = name if name is not Unset else getattr(setter, "__name__", "field")

    @classmethod
    def attribute(cls, name, /):
        """destination is `data.<name>`."""
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError("Field.attribute() argument must be an identifier")

        @rename("set_" + name)
        def setter(data, value):
            setattr(data, name, value)

        return cls(setter, operator.attrgetter(name), name=name)

    @classmethod
    def item(cls, key, /):
        """destination is `data[<key>]`."""
        @rename("set_" + str(key))
        def setter(data, value):
            data[key] = value

        return cls(setter, operator.itemgetter(key), name=str(key))

    @property
    def name(self):
        return self._name

    def assign(self, data, value, /):
        self._setter(data, value)

    def fetch(self, data, /):
        if self._getter is Unset:
            raise AttributeError("field %r has no getter" % self._name)
        return self._getter(data)

    def __repr__(self):
        return "Field(%r)" % self._name


class Spec:
    """
    one option-table row.

    parameters
    - template: str
      "name", "name=", "name=%conv", "name %conv" (see templates.match_template).
    - field: Unset | Field | str
      Unset → no destination, `value` is the symbolic key for the callback.
      Field → destination written with the conversion or the fixed `value`.
      str   → shorthand for Field.attribute(str).
    - value: int
      symbolic key (no field) or fixed value (field, no conversion).
    """
    __slots__ = ("_template", "_field", "_value")

    def __init__(self, template, field=Unset, value=0, /):
        if template is not None:
            if not isinstance(template, str):
                raise TypeError("Spec() template must be a string")
            if not template:
                raise ValueError("Spec() template must be a non-empty string")
        if isinstance(field, str):
            field = Field.attribute(field)
        if field is not Unset and not isinstance(field, Field):
            raise TypeError("Spec() field must be a Field or a string")
        if not isinstance(value, int):
            raise TypeError("Spec() value must be an integer")

        if template is not None and field is not Unset:
            index = separator(template)
            if index and template[index + 1:]:
                parse_format(template[index + 1:])

        self._template = template
        self._field = field
        self._value = value

    @property
    def template(self):
        return self._template

    @property
    def field(self):
        return self._field

    @property
    def value(self):
        return self._value

    @property
    def dispatches(self):
        """True when matches go to the callback instead of a field."""
        return self._field is Unset

    def __setattr__(self, name, value, /):
        if hasattr(self, "_value"):
            raise AttributeError("Spec rows are read-only")
        object.__setattr__(self, name, value)

    def __eq__(self, other, /):
        if not isinstance(other, Spec):
            return NotImplemented
        return (self._template, self._field, self._value) == (other._template, other._field, other._value)

    def __hash__(self):
        return hash((self._template, id(self._field), self._value))

    def __repr__(self):
        if self._template is None:
            return "END"
        if self._field is Unset:
            return "Spec(%r, key=%r)" % (self._template, self._value)
        return "Spec(%r, %r, %r)" % (self._template, self._field, self._value)


def keyed(template, key, /):
    """row without a field destination: matches reach the callback as `key`."""
    return Spec(template, Unset, key)


END = Spec(None)
"""sentinel row terminating a table."""


__all__ = (
    "Key",
    "Outcome",
    "Field",
    "Spec",
    "keyed",
    "END",
)
