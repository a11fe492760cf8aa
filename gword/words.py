"""
Group words - elements of a free group as syllable sequences.

A Word holds its syllables in one of two explicit forms:

    Raw         - a mutable buffer that may contain adjacent syllables on
                  the same generator and zero-power syllables
    Normalized  - the freely reduced syllables (a tuple) together with the
                  memoized structural hash

Every mutating builder (push, append, rmul, ...) leaves the word Raw.
Comparing or hashing a word converts it to Normalized first, through the
single normalize() function; that is the only place reduction happens
implicitly. Arithmetic always returns fresh, Normalized words.

Example:
    from gword import FreeGroup

    G = FreeGroup(["s", "t"])
    s, t = G.gens()
    (t * s) ** 3 == t * s * t * s * t * s   # => True
    str(s * t ** -1)                        # => "s*t^-1"

Words are not safe for concurrent mutation: normalization rewrites the
form in place, so each word must be owned by one thread during any call
that may reduce it. Distinct words can be used from different threads.
"""

import logging
import weakref
from typing import Any, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import MismatchedParentError
from .symbols import S

logger = logging.getLogger(__name__)


# ============================================================
# Two-state form: Raw / Normalized
# ============================================================

class Raw:
    """Unreduced syllable buffer. Owned exclusively by one Word."""

    __slots__ = ('syllables',)

    def __init__(self, syllables: Iterable = ()):
        self.syllables: List = list(syllables)

    def __repr__(self) -> str:
        return f"Raw({self.syllables!r})"


class Normalized:
    """Freely reduced syllables plus their memoized hash."""

    __slots__ = ('syllables', 'hash')

    def __init__(self, syllables: Tuple, hash_value: int):
        self.syllables: Tuple = syllables
        self.hash = hash_value

    def __repr__(self) -> str:
        return f"Normalized({self.syllables!r})"


FormType = Union[Raw, Normalized]


# ============================================================
# Free reduction
# ============================================================

def _reduce_pass(syllables: List) -> bool:
    """
    One left-to-right pass over adjacent pairs.

    Same-generator neighbours are combined into the second position and
    the first is zeroed; zero-power syllables are then dropped.
    Returns True if anything changed.
    """
    changed = False
    for i in range(len(syllables) - 1):
        s, ns = syllables[i], syllables[i + 1]
        if s.pow == 0:
            continue
        if s.id == ns.id:
            syllables[i + 1] = s.change_pow(s.pow + ns.pow)
            syllables[i] = s.change_pow(0)
            changed = True
    n = len(syllables)
    syllables[:] = [s for s in syllables if s.pow != 0]
    return changed or len(syllables) != n


def free_reduce(syllables: List) -> List:
    """
    Freely reduce a syllable list in place and return it.

    Repeats full passes until a pass performs no collapse. The result has
    no two adjacent syllables on the same generator and no zero powers.

    Examples:
        [a, a^-1, b]    -> [b]
        [a^0, b^0]      -> []
        [a, b^0, a]     -> [a^2]
    """
    if len(syllables) < 2:
        syllables[:] = [s for s in syllables if s.pow != 0]
        return syllables

    passes = 0
    while _reduce_pass(syllables):
        passes += 1
    if passes > 1:
        logger.debug("free reduction took %d passes (%d syllables left)",
                     passes + 1, len(syllables))
    return syllables


def is_reduced(syllables: Sequence) -> bool:
    """True if the syllables are freely reduced."""
    for i, s in enumerate(syllables):
        if s.pow == 0:
            return False
        if i > 0 and syllables[i - 1].id == s.id:
            return False
    return True


def word_hash(kind: str, syllables: Tuple) -> int:
    """Structural hash of reduced syllables, tagged with the word kind."""
    return hash((kind, syllables))


def normalize(raw: Raw, kind: str = "Word") -> Normalized:
    """Reduce a Raw form into its Normalized form."""
    syllables = tuple(free_reduce(list(raw.syllables)))
    return Normalized(syllables, word_hash(kind, syllables))


def _normalized(kind: str, syllables: Iterable) -> Normalized:
    """Wrap syllables already known to be reduced."""
    syllables = tuple(syllables)
    return Normalized(syllables, word_hash(kind, syllables))


# ============================================================
# Word
# ============================================================

class Word(Generic[S]):
    """
    A group element written as a sequence of syllables.

    Words carry an opaque parent token (the integer handle of the group
    that created them) and a weak reference to that group. Arithmetic and
    comparison require equal tokens and raise MismatchedParentError
    otherwise.

    Examples:
        w = Word([FreeSymbol("a"), FreeSymbol("a", -1), FreeSymbol("b")])
        str(w)            # => "a*a^-1*b"   (printing does not reduce)
        w == Word([FreeSymbol("b")])   # => True (comparison reduces w)
        str(w)            # => "b"
    """

    __slots__ = ('_form', '_token', '_group_ref')

    def __init__(self, syllables: Iterable[S] = (), parent: Any = None):
        self._form: FormType = Raw(syllables)
        if parent is None:
            self._token: Optional[int] = None
            self._group_ref = None
        else:
            self._token = parent.token
            self._group_ref = weakref.ref(parent)

    @classmethod
    def _kind(cls) -> str:
        return cls.__qualname__

    def _derive(self, form: FormType) -> "Word[S]":
        """New word of the same class and parent with the given form."""
        out = type(self).__new__(type(self))
        out._form = form
        out._token = self._token
        out._group_ref = self._group_ref
        return out

    # ------------------------------------------------------------
    # Access
    # ------------------------------------------------------------

    @property
    def symbols(self) -> Tuple[S, ...]:
        """The syllables as currently stored (no reduction)."""
        return tuple(self._form.syllables)

    @property
    def token(self) -> Optional[int]:
        """Opaque parent-group handle."""
        return self._token

    @property
    def parent(self) -> Any:
        """The group that created this word, or None."""
        if self._group_ref is None:
            return None
        return self._group_ref()

    @property
    def stale(self) -> bool:
        """True if the word was mutated since it was last reduced."""
        return isinstance(self._form, Raw)

    def syllable_length(self) -> int:
        return len(self._form.syllables)

    def length(self) -> int:
        """Sum of |pow| over the stored syllables (word length once reduced)."""
        return sum(abs(s.pow) for s in self._form.syllables)

    def __len__(self) -> int:
        """Letter count of the stored syllables, as length()."""
        return self.length()

    def __iter__(self) -> Iterator[S]:
        return iter(self.symbols)

    def __getitem__(self, index):
        return self.symbols[index]

    # ------------------------------------------------------------
    # Reduction
    # ------------------------------------------------------------

    def _normal(self) -> Normalized:
        if isinstance(self._form, Raw):
            self._form = normalize(self._form, self._kind())
        return self._form

    def reduce(self) -> "Word[S]":
        """Freely reduce in place (no-op if already reduced). Returns self."""
        self._normal()
        return self

    def reduced(self) -> "Word[S]":
        """Reduced copy; self is left untouched."""
        if isinstance(self._form, Normalized):
            return self._derive(self._form)
        return self._derive(normalize(self._form, self._kind()))

    def is_one(self) -> bool:
        return not self._normal().syllables

    # ------------------------------------------------------------
    # Equality and hashing
    # ------------------------------------------------------------

    def _check_parent(self, other: "Word", operation: str) -> None:
        if self._token != other._token:
            raise MismatchedParentError(self, other, operation)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Word):
            return NotImplemented
        if self._kind() != other._kind():
            return False
        self._check_parent(other, "compare")
        a, b = self._normal(), other._normal()
        if a.hash != b.hash:
            return False
        return a.syllables == b.syllables

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return self._normal().hash

    # ------------------------------------------------------------
    # Mutating builders
    # ------------------------------------------------------------

    def _raw(self) -> List:
        """Syllable buffer for mutation; marks the word stale."""
        if isinstance(self._form, Normalized):
            self._form = Raw(self._form.syllables)
        return self._form.syllables

    def _finish(self, reduce: bool) -> "Word[S]":
        if reduce:
            self._normal()
        return self

    def push(self, *symbols: S, reduce: bool = False) -> "Word[S]":
        """Append symbols at the right end."""
        self._raw().extend(symbols)
        return self._finish(reduce)

    def pushfirst(self, *symbols: S, reduce: bool = False) -> "Word[S]":
        """Insert symbols at the left end, keeping their order."""
        buf = self._raw()
        buf[:0] = symbols
        return self._finish(reduce)

    def append(self, *words: "Word[S]", reduce: bool = False) -> "Word[S]":
        """Append the syllables of each word, in order, at the right end."""
        buf = self._raw()
        for w in words:
            self._check_parent(w, "append")
            buf.extend(w._form.syllables)
        return self._finish(reduce)

    def prepend(self, *words: "Word[S]", reduce: bool = False) -> "Word[S]":
        """Prepend words so that the result reads words[0]*words[1]*...*self."""
        buf = self._raw()
        head: List = []
        for w in words:
            self._check_parent(w, "prepend")
            head.extend(w._form.syllables)
        buf[:0] = head
        return self._finish(reduce)

    def splice(self, start: int, stop: int, syllables: Iterable[S] = (),
               reduce: bool = False) -> "Word[S]":
        """Replace the stored syllables [start:stop] with the given ones."""
        self._raw()[start:stop] = list(syllables)
        return self._finish(reduce)

    def rmul(self, other: Union["Word[S]", S], reduce: bool = True) -> "Word[S]":
        """In-place right multiplication: self <- self * other."""
        other = self._as_word(other)
        self._check_parent(other, "multiply")
        self._raw().extend(list(other._form.syllables))
        return self._finish(reduce)

    def lmul(self, other: Union["Word[S]", S], reduce: bool = True) -> "Word[S]":
        """In-place left multiplication: self <- other * self."""
        other = self._as_word(other)
        self._check_parent(other, "multiply")
        buf = self._raw()
        for s in reversed(list(other._form.syllables)):
            buf.insert(0, s)
        return self._finish(reduce)

    # ------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------

    def _as_word(self, other) -> "Word[S]":
        if isinstance(other, Word):
            return other
        if hasattr(other, 'id') and hasattr(other, 'pow'):
            return self._derive(Raw([other]))
        raise TypeError(f"Cannot multiply a word by {type(other).__name__}")

    def __mul__(self, other):
        if not isinstance(other, Word) and not hasattr(other, 'pow'):
            return NotImplemented
        other = self._as_word(other)
        self._check_parent(other, "multiply")
        out = self._derive(Raw(self._form.syllables))
        out._form.syllables.extend(other._form.syllables)
        return out.reduce()

    def __rmul__(self, other):
        if not hasattr(other, 'id') or not hasattr(other, 'pow'):
            return NotImplemented
        return self._as_word(other) * self

    def inv(self) -> "Word[S]":
        """
        Inverse word: reversed syllables, each inverted.

        The inverse of a reduced word is reduced, so the result keeps the
        form of self.
        """
        syllables = [s.inv() for s in reversed(self._form.syllables)]
        if isinstance(self._form, Normalized):
            return self._derive(_normalized(self._kind(), syllables))
        return self._derive(Raw(syllables))

    def __invert__(self) -> "Word[S]":
        return self.inv()

    def one(self) -> "Word[S]":
        """Identity of the same group."""
        group = self.parent
        if group is not None:
            return group.identity_word()
        return self._derive(_normalized(self._kind(), ()))

    def __pow__(self, n: int) -> "Word[S]":
        """
        Integer power by repeated squaring.

        n == 0 gives the identity; negative n raises the inverse.
        """
        if not isinstance(n, int) or isinstance(n, bool):
            return NotImplemented
        if n == 0:
            return self.one()
        if n < 0:
            return self.inv() ** -n

        result = None
        base = self.reduced()
        while n:
            if n & 1:
                result = base if result is None else result * base
            n >>= 1
            if n:
                base = base * base
        return result

    # ------------------------------------------------------------
    # Copying and printing
    # ------------------------------------------------------------

    def copy(self) -> "Word[S]":
        """Independent copy; the parent group is shared, not copied."""
        if isinstance(self._form, Normalized):
            return self._derive(self._form)
        return self._derive(Raw(self._form.syllables))

    def __copy__(self) -> "Word[S]":
        return self.copy()

    def __deepcopy__(self, memo) -> "Word[S]":
        return self.copy()

    def __str__(self) -> str:
        """Canonical text form: "(id)" or syllables joined by "*"."""
        syllables = self._form.syllables
        if not syllables:
            return "(id)"
        return "*".join(str(s) for s in syllables)

    def __repr__(self) -> str:
        return str(self)


# ============================================================
# Constructors
# ============================================================

def word_from_symbol(s: S, parent: Any = None) -> Word[S]:
    """Unreduced word holding a single symbol."""
    return Word([s], parent=parent)


def word_from_symbols(symbols: Iterable[S], parent: Any = None) -> Word[S]:
    """Unreduced word holding the given symbols in order."""
    return Word(symbols, parent=parent)
