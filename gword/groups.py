"""
Free groups - the parent objects that create words.

A FreeGroup hands out an opaque integer token that every word it creates
carries; words compare and multiply only with words holding the same
token. The group also supplies identity_word(), used for zeroth powers.

Example:
    G = FreeGroup(["s", "t"])
    s, t = G.gens()
    G.identity_word()          # => (id)
    G("s", "t", "s")           # => s*t*s (unreduced element)
    ball, sizes = wlmetric_ball([s, t, ~s, ~t], radius=2)
    sizes                      # => [5, 17]
"""

import itertools
import logging
import operator
import random
import re
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .errors import CoercionError
from .symbols import FreeSymbol
from .words import Word

logger = logging.getLogger(__name__)

_GENERATOR_NAME = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
_tokens = itertools.count(1)


class FreeGroup:
    """
    The free group on a list of named generators.

    Generator names must be identifiers (letters, digits, underscores,
    not starting with a digit) and must be distinct.
    """

    def __init__(self, gens: Iterable[str]):
        names = list(gens)
        for name in names:
            if not isinstance(name, str) or not _GENERATOR_NAME.match(name):
                raise ValueError(f"Invalid generator name: {name!r}")
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate generator names in {names}")
        self._names: Tuple[str, ...] = tuple(names)
        self.token = next(_tokens)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def ngens(self) -> int:
        return len(self._names)

    def symbols(self) -> List[FreeSymbol]:
        return [FreeSymbol(name) for name in self._names]

    def gen(self, i: int) -> Word:
        """The i-th generator (0-based) as a word."""
        return Word([FreeSymbol(self._names[i])], parent=self).reduce()

    def gens(self) -> List[Word]:
        return [self.gen(i) for i in range(self.ngens)]

    def identity_word(self) -> Word:
        return Word((), parent=self).reduce()

    one = identity_word

    def __contains__(self, item) -> bool:
        return isinstance(item, Word) and item.token == self.token

    # ------------------------------------------------------------
    # Element construction
    # ------------------------------------------------------------

    def _symbol(self, item: Any) -> Optional[FreeSymbol]:
        if isinstance(item, FreeSymbol) and item.id in self._names:
            return item
        if isinstance(item, str) and item in self._names:
            return FreeSymbol(item)
        return None

    def __call__(self, *items: Any) -> Word:
        """
        Build an unreduced element from symbols, generator names or words
        of this group, concatenated in order.
        """
        out = Word((), parent=self)
        for item in items:
            if isinstance(item, Word):
                out.append(item)
                continue
            s = self._symbol(item)
            if s is None:
                raise CoercionError(f"Cannot build an element of {self} from {item!r}", [item])
            out.push(s)
        return out

    def coerce(self, items: Iterable[Any]) -> List[Word]:
        """
        Coerce a batch of items to words of this group.

        Each item may be a word of this group, a symbol on one of its
        generators, or a generator name. Raises CoercionError naming every
        item that does not fit.
        """
        items = list(items)
        result: List[Word] = []
        bad: List[Any] = []
        for item in items:
            if isinstance(item, Word):
                if item.token == self.token:
                    result.append(item)
                else:
                    bad.append(item)
                continue
            s = self._symbol(item)
            if s is None:
                bad.append(item)
            else:
                result.append(Word([s], parent=self))
        if bad:
            kinds = sorted({type(b).__name__ for b in bad})
            raise CoercionError(
                f"Cannot coerce {len(bad)} of {len(items)} items to elements of {self} "
                f"(offending kinds: {', '.join(kinds)})", bad)
        return result

    def random_element(self, rng: Optional[random.Random] = None,
                       min_length: int = 10, max_length: int = 100) -> Word:
        """Unreduced random word of min_length..max_length letters."""
        rng = rng or random.Random()
        letters = [FreeSymbol(name, p) for name in self._names for p in (1, -1)]
        n = rng.randint(min_length, max_length)
        return Word((rng.choice(letters) for _ in range(n)), parent=self)

    def parse(self, text: str) -> Word:
        """Parse the printed form of a word (see gword.parser)."""
        from .parser import parse_word
        return parse_word(text, self)

    def __repr__(self) -> str:
        return f"free group on {self.ngens} generators"


# ============================================================
# Word-length metric balls
# ============================================================

def wlmetric_ball(
    generators: Sequence[Word],
    center: Optional[Word] = None,
    radius: int = 2,
    op: Callable[[Word, Word], Word] = operator.mul,
) -> Tuple[List[Word], List[int]]:
    """
    Elements of word length <= radius with respect to generators.

    Computed by breadth-first expansion; each layer multiplies the
    previous layer by every generator and drops elements already seen.

    Args:
        generators: Generating set (include inverses for a symmetric ball).
        center: If given, the ball is translated to center * ball.
        radius: Ball radius, at least 1.
        op: Multiplication used for expansion.

    Returns:
        (elements, sizes) where sizes[i] is the size of the ball of
        radius i+1. Elements are listed in non-decreasing length.
    """
    if radius < 1:
        raise ValueError(f"Radius must be positive, got {radius}")
    generators = list(generators)
    if not generators:
        raise ValueError("Cannot grow a ball from an empty generating set")

    elements = list(dict.fromkeys([generators[0].one()] + [g.reduced() for g in generators]))
    sizes = [1, len(elements)]
    for r in range(2, radius + 1):
        layer = [op(e, g) for e in elements[sizes[-2]:] for g in generators]
        elements = list(dict.fromkeys(elements + layer))
        sizes.append(len(elements))
        logger.debug("ball radius %d: %d elements", r, len(elements))

    if center is not None and not center.is_one():
        elements = [center * e for e in elements]
    return elements, sizes[1:]
