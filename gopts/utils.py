"""
gopts utilities: the sentinel and the naming helpers the other modules share.

- Unset: "no value given". A spec row whose field is Unset hands matches to
  the callback; builder descriptions use it for omitted help/member/action.
- coalesce(value, default): turn Unset into a usable default.
- @rename(name): readable names for generated handlers and field setters.
- ordinal(position): "first", "second", ... "11th", "21st"; fault messages
  lead with it.
"""
import functools
from typing import final


@final
class UnsetType:
    """
    type of the Unset sentinel (one instance per process).

    Unset is falsy but distinct from None, 0 and "", so "not given" never
    collides with a legitimate value such as a zero key or an empty help.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return object.__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        # pickled by reference to the module-level name
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


def coalesce(object, default=None, /):
    """
    `default` when `object` is Unset, else `object` itself.

    falsy values other than Unset pass through: coalesce(0, 5) is 0.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    decorator giving generated handlers and accessors a readable name.

    usage
        @rename("on_" + option)
        def handler(data, arg, outargs): ...

    both __name__ and __qualname__ are replaced, so tracebacks and reprs show
    the option the function was generated for.
    """
    if not isinstance(name, str) or not name:
        raise TypeError("rename() argument must be a non-empty string")

    def decorate(function):
        if not callable(function):
            raise TypeError("rename(%r) must decorate a callable" % name)
        function.__name__ = function.__qualname__ = name
        return function

    return decorate


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with English suffixes (11th, 21st, 102nd).
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    try:
        return (
            "first", "second", "third", "fourth", "fifth",
            "sixth", "seventh", "eighth", "ninth", "tenth",
        )[number - 1] if number > 0 else f"{number}th"
    except IndexError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for "not provided".

In specs it marks a row without a field destination; the engine then hands
the token to the callback using the row's value as the symbolic key.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
