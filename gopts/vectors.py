"""
gopts argument vectors.

Overview
- Arguments: an ordered sequence of string tokens plus an ownership flag.
  • owned (allocated=True): the vector holds its own list; add/insert mutate it.
  • unowned (allocated=False): the vector borrows the caller's sequence and
    never writes to it. The first mutation copies the tokens into a freshly
    owned list.
- add_arg / insert_arg / free_args: functional spellings of the same
  operations, mirroring the historical C-style interface.

Invariants
- argv always reads as a list[str]; for unowned vectors it is a copy, so
  callers cannot reach the borrowed storage through it.
- A failed growth (MemoryError) leaves the vector exactly as it was and raises
  AllocationError.
"""
import logging
from collections.abc import Iterable, Sequence

from .faults import AllocationError, FaultCode
from .utils import Unset

logger = logging.getLogger("gopts.vectors")


class Arguments:
    """
    ordered, mutable token vector with explicit ownership.

    construction
    - Arguments()                 → empty, owned
    - Arguments(tokens)           → owned copy of tokens
    - Arguments(tokens, borrow=True) → unowned view over the caller's sequence
    """
    __slots__ = ("_tokens", "_allocated")

    def __init__(self, tokens=Unset, /, *, borrow=False):
        if tokens is Unset:
            self._tokens = []
            self._allocated = True
            return
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("Arguments() argument must be an iterable of strings")
        if borrow and isinstance(tokens, Sequence):
            self._tokens = tokens
            self._allocated = False
        else:
            self._tokens = list(tokens)
            self._allocated = True
        for token in self._tokens:
            if not isinstance(token, str):
                raise TypeError("Arguments() items must be strings, not %s" % type(token).__name__)

    @property
    def allocated(self):
        return self._allocated

    @property
    def argv(self):
        return list(self._tokens)

    @property
    def argc(self):
        return len(self._tokens)

    def __len__(self):
        return len(self._tokens)

    def __iter__(self):
        return iter(tuple(self._tokens))

    def __getitem__(self, index, /):
        return self._tokens[index]

    def __bool__(self):
        return bool(self._tokens)

    def __eq__(self, other, /):
        if isinstance(other, Arguments):
            return list(self._tokens) == list(other._tokens)
        if isinstance(other, Sequence) and not isinstance(other, str):
            return list(self._tokens) == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "%s(%r%s)" % (type(self).__name__, list(self._tokens), "" if self._allocated else ", borrow=True")

    def _own(self):
        """
        make sure the backing list belongs to this vector.

        a borrowed sequence is copied; the original is left untouched.
        """
        if not self._allocated:
            try:
                self._tokens = list(self._tokens)
            except MemoryError:
                raise AllocationError(
                    "memory allocation failed",
                    title="allocation failure",
                    code=FaultCode.ALLOCATION_FAILURE,
                ) from None
            self._allocated = True

    def add(self, token, /):
        """
        append a copy of `token` at the end.

        on allocation failure the vector is unchanged and AllocationError is raised.
        """
        if not isinstance(token, str):
            raise TypeError("add() argument must be a string")
        self._own()
        try:
            self._tokens.append(token)
        except MemoryError:
            raise AllocationError(
                "memory allocation failed",
                title="allocation failure",
                code=FaultCode.ALLOCATION_FAILURE,
                token=token,
            ) from None

    def insert(self, position, token, /):
        """
        insert a copy of `token` at `position` (0 <= position <= len).

        relative order of the existing tokens is preserved.
        """
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError("insert() first argument must be an integer")
        if not isinstance(token, str):
            raise TypeError("insert() second argument must be a string")
        if not 0 <= position <= len(self._tokens):
            raise IndexError("insert() position %d out of range [0, %d]" % (position, len(self._tokens)))
        self._own()
        try:
            self._tokens.insert(position, token)
        except MemoryError:
            raise AllocationError(
                "memory allocation failed",
                title="allocation failure",
                code=FaultCode.ALLOCATION_FAILURE,
                token=token,
            ) from None

    def pop(self):
        """remove and return the last token (owning the list first)."""
        self._own()
        return self._tokens.pop()

    def free(self):
        """
        release every token and the list; the vector ends empty and owned.

        idempotent; a borrowed sequence is dropped, never cleared.
        """
        if self._allocated:
            self._tokens.clear()
        self._tokens = []
        self._allocated = True

    def adopt(self, other, /):
        """
        take over the contents of `other`, releasing what this vector held.

        `other` is left empty; this is how a parse hands its output back.
        """
        if not isinstance(other, Arguments):
            raise TypeError("adopt() argument must be an Arguments instance")
        if other is self:
            return
        self.free()
        self._tokens, self._allocated = other._tokens, other._allocated
        other._tokens, other._allocated = [], True


def add_arg(args, token, /):
    """append `token` to `args` (see Arguments.add)."""
    if not isinstance(args, Arguments):
        raise TypeError("add_arg() first argument must be an Arguments instance")
    args.add(token)


def insert_arg(args, position, token, /):
    """insert `token` into `args` at `position` (see Arguments.insert)."""
    if not isinstance(args, Arguments):
        raise TypeError("insert_arg() first argument must be an Arguments instance")
    args.insert(position, token)


def free_args(args, /):
    """release `args`; accepts None for symmetry with an absent vector."""
    if args is None:
        return
    if not isinstance(args, Arguments):
        raise TypeError("free_args() argument must be an Arguments instance")
    logger.debug("releasing %d argument(s)", len(args))
    args.free()


__all__ = (
    "Arguments",
    "add_arg",
    "insert_arg",
    "free_args",
)
