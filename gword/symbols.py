"""
Symbols (syllables) - the alphabet units of group words.

A symbol is a generator reference with a signed integer exponent:

    FreeSymbol("s")       # s
    FreeSymbol("t", -2)   # t^-2

Any type providing ``id``, ``pow``, ``change_pow`` and ``inv`` can be used
as the syllable type of a Word; see SymbolLike.
"""

from typing import Any, Hashable, Protocol, TypeVar


class SymbolLike(Protocol):
    """Capabilities a syllable type must provide to be used inside a Word."""

    id: Hashable
    pow: int

    def change_pow(self, n: int) -> "SymbolLike":
        ...

    def inv(self) -> "SymbolLike":
        ...


S = TypeVar("S", bound=SymbolLike)


class FreeSymbol:
    """
    A free generator raised to an integer power.

    Symbols are immutable values. All zero-power symbols denote the
    identity, so they compare (and hash) equal regardless of generator:

        FreeSymbol("s", 0) == FreeSymbol("t", 0)   # => True
        len(FreeSymbol("s", -3))                   # => 3
    """

    __slots__ = ('id', 'pow')

    def __init__(self, id: Hashable, pow: int = 1):
        if not isinstance(pow, int) or isinstance(pow, bool):
            raise TypeError(f"Symbol exponent must be an int, got {pow!r}")
        object.__setattr__(self, 'id', id)
        object.__setattr__(self, 'pow', pow)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError(f"FreeSymbol is immutable (cannot set {name!r})")

    def change_pow(self, n: int) -> "FreeSymbol":
        """Same generator with exponent n."""
        return FreeSymbol(self.id, n)

    def inv(self) -> "FreeSymbol":
        """Inverse symbol: same generator, negated exponent."""
        return FreeSymbol(self.id, -self.pow)

    def __invert__(self) -> "FreeSymbol":
        return self.inv()

    def is_one(self) -> bool:
        return self.pow == 0

    def __len__(self) -> int:
        return abs(self.pow)

    def __eq__(self, other):
        if not isinstance(other, FreeSymbol):
            return NotImplemented
        if self.pow == 0 and other.pow == 0:
            return True
        return self.id == other.id and self.pow == other.pow

    def __hash__(self) -> int:
        if self.pow == 0:
            return hash((FreeSymbol, 0))
        return hash((FreeSymbol, self.id, self.pow))

    def __str__(self) -> str:
        if self.pow == 1:
            return str(self.id)
        return f"{self.id}^{self.pow}"

    def __repr__(self) -> str:
        return f"FreeSymbol({self.id!r}, {self.pow})"

    def __reduce__(self):
        return (FreeSymbol, (self.id, self.pow))


def change_pow(s: S, n: int) -> S:
    """Return s with its exponent replaced by n."""
    return s.change_pow(n)


def same_generator(a: SymbolLike, b: SymbolLike) -> bool:
    """True if a and b refer to the same generator (exponents may differ)."""
    return a.id == b.id


def issubsymbol(a: SymbolLike, b: SymbolLike) -> bool:
    """
    Check whether a is contained in b.

    a is a sub-symbol of b when both use the same generator and a's
    exponent lies between 0 and b's exponent (inclusive), so that
    b = a * remainder with the remainder pointing the same way.

    Examples:
        issubsymbol(FreeSymbol("a"), FreeSymbol("a", 2))        # => True
        issubsymbol(FreeSymbol("a"), FreeSymbol("a", -2))       # => False
        issubsymbol(FreeSymbol("b", -1), FreeSymbol("b", -2))   # => True
    """
    if a.id != b.id:
        return False
    return 0 <= a.pow <= b.pow or 0 >= a.pow >= b.pow
