"""
Sub-word search and replacement.

A needle matches a haystack at syllable index idx when:

    - its first syllable is a sub-symbol of haystack[idx]
    - its interior syllables equal haystack[idx+1 .. idx+n-2] exactly
    - its last syllable is a sub-symbol of haystack[idx+n-1]

so s*t matches inside s^3*t^2 at index 0. Replacement is split into two
steps: a pure planning function computes a ReplacePlan (start, length,
syllables to insert) from the boundary arithmetic, and splice() applies a
plan to a word and optionally re-normalizes it.

Example:
    G = FreeGroup(["s", "t"])
    s, t = G.gens()
    c = s * t * s**-1 * t**-1
    find_first(s**-1 * t**-1, c)                 # => 2
    replace(c, s * t, G.one())                   # => s^-1*t^-1
    replace_all(s * c * s * c * s, {s * t * s**-1: s, s * t**-1: t**4})
                                                 # => s*t^4*s*t^4*s
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidPatternError, MismatchedParentError
from .symbols import issubsymbol
from .words import Word

logger = logging.getLogger(__name__)


# ============================================================
# Search
# ============================================================

def _matches_at(needle: Sequence, haystack: Sequence, idx: int) -> bool:
    """Boundary sub-symbol test plus exact interior equality at idx."""
    n = len(needle)
    if idx < 0 or idx + n > len(haystack):
        return False
    if not issubsymbol(needle[0], haystack[idx]):
        return False
    if not issubsymbol(needle[-1], haystack[idx + n - 1]):
        return False
    return all(needle[i] == haystack[idx + i] for i in range(1, n - 1))


def _check_parents(*words: Word) -> None:
    first = words[0]
    for w in words[1:]:
        if w.token != first.token:
            raise MismatchedParentError(first, w, "match")


def find_next(needle: Word, haystack: Word, start: int) -> Optional[int]:
    """
    First match of needle in haystack at a syllable index >= start.

    The needle must have at least two syllables; use find_symbol for
    single syllables.

    Returns:
        The 0-based syllable index of the match, or None.

    Raises:
        InvalidPatternError: needle has fewer than two syllables.
        IndexError: start is negative.
    """
    _check_parents(needle, haystack)
    n_syl = needle.symbols
    if len(n_syl) < 2:
        raise InvalidPatternError(
            f"Search needle must have at least 2 syllables, got {needle}",
            pattern=needle)
    if start < 0:
        raise IndexError(f"Search start {start} out of range for {haystack}")
    h_syl = haystack.symbols
    for idx in range(start, len(h_syl) - len(n_syl) + 1):
        if _matches_at(n_syl, h_syl, idx):
            return idx
    return None


def find_first(needle: Word, haystack: Word) -> Optional[int]:
    """First match of needle in haystack (see find_next)."""
    return find_next(needle, haystack, 0)


def find_symbol(needle: Union[Word, Any], haystack: Word, start: int = 0) -> Optional[int]:
    """
    First syllable index >= start whose syllable contains needle.

    needle is a symbol or a one-syllable word.
    """
    if isinstance(needle, Word):
        _check_parents(needle, haystack)
        if needle.syllable_length() != 1:
            raise InvalidPatternError(
                f"Expected a single syllable, got {needle}", pattern=needle)
        needle = needle.symbols[0]
    if start < 0:
        raise IndexError(f"Search start {start} out of range for {haystack}")
    h_syl = haystack.symbols
    for idx in range(start, len(h_syl)):
        if issubsymbol(needle, h_syl[idx]):
            return idx
    return None


def find_all(needle: Word, haystack: Word) -> List[int]:
    """
    Start indices of all non-overlapping matches, left to right.

    A match that uses only part of its last syllable leaves the rest of
    that syllable available to the next match, the same way replace_all
    resumes after a planned edit:

        find_all(s*t*s, s*t*s^2*t*s)    # => [0, 2]
    """
    n_syl, h_syl = needle.symbols, haystack.symbols
    found = []
    idx = find_first(needle, haystack)
    while idx is not None:
        found.append(idx)
        last = idx + len(n_syl) - 1
        leftover = h_syl[last].pow - n_syl[-1].pow
        if leftover == 0:
            idx = find_next(needle, haystack, last + 1)
            continue
        idx = find_next(needle, haystack, last)
        if idx == last and not issubsymbol(n_syl[0], h_syl[last].change_pow(leftover)):
            idx = find_next(needle, haystack, last + 1)
    return found


# ============================================================
# Planned edits
# ============================================================

class ReplacePlan:
    """
    A planned splice: replace haystack[start:start+length] by syllables.

    resume is the first index after the inserted replacement, where a
    left-to-right scan for further, non-overlapping matches continues.
    """

    __slots__ = ('start', 'length', 'syllables', 'resume')

    def __init__(self, start: int, length: int, syllables: Sequence, resume: int):
        self.start = start
        self.length = length
        self.syllables = tuple(syllables)
        self.resume = resume

    @property
    def stop(self) -> int:
        return self.start + self.length

    def __eq__(self, other):
        if not isinstance(other, ReplacePlan):
            return NotImplemented
        return (self.start, self.length, self.syllables, self.resume) == \
               (other.start, other.length, other.syllables, other.resume)

    def __repr__(self) -> str:
        block = "*".join(str(s) for s in self.syllables) or "(id)"
        return f"ReplacePlan([{self.start}:{self.stop}] -> {block}, resume={self.resume})"


def plan_replace(haystack: Sequence, index: int, pattern: Sequence,
                 replacement: Sequence, check: bool = True) -> ReplacePlan:
    """
    Plan the replacement of one occurrence of pattern at index.

    With n = len(pattern), the matched syllables are haystack[index] and
    haystack[index+n-1] at the boundaries. Whatever of them the pattern
    does not consume stays in place:

        first_excess = haystack[index]     * pattern[0]^-1
        last_excess  = pattern[-1]^-1      * haystack[index+n-1]

    and the inserted block is first_excess, replacement, last_excess
    (zero powers dropped, not reduced). A one-syllable pattern has no
    last excess.

    Raises:
        InvalidPatternError: pattern is empty, or check is set and the
            pattern does not match at index.
    """
    n = len(pattern)
    if n == 0:
        raise InvalidPatternError("Cannot replace the empty word", pattern=pattern)
    if check:
        ok = (0 <= index < len(haystack) and issubsymbol(pattern[0], haystack[index])) \
            if n == 1 else _matches_at(pattern, haystack, index)
        if not ok:
            raise InvalidPatternError(
                f"Pattern {'*'.join(map(str, pattern))} does not match at index {index}",
                pattern=pattern, haystack=haystack, index=index)

    first = haystack[index]
    first_excess = first.change_pow(first.pow - pattern[0].pow)
    block: List = []
    if first_excess.pow != 0:
        block.append(first_excess)
    block.extend(replacement)
    resume = index + len(block)
    if n > 1:
        last = haystack[index + n - 1]
        last_excess = last.change_pow(last.pow - pattern[-1].pow)
        if last_excess.pow != 0:
            block.append(last_excess)
    return ReplacePlan(index, n, block, resume)


def plan_symbol_replace(haystack: Sequence, index: int, pattern,
                        replacement: Sequence) -> ReplacePlan:
    """
    Plan the replacement of every whole copy of a one-syllable pattern
    that fits in haystack[index].

    haystack[index] = x^k and pattern = x^m (same sign) give
    x^(k mod m) followed by replacement repeated k // m times.
    """
    target = haystack[index]
    if pattern.pow == 0 or not issubsymbol(pattern, target):
        raise InvalidPatternError(
            f"Pattern {pattern} does not match at index {index}",
            pattern=pattern, haystack=haystack, index=index)
    copies, rest = divmod(abs(target.pow), abs(pattern.pow))
    block: List = []
    if rest:
        block.append(target.change_pow(rest if target.pow > 0 else -rest))
    block.extend(list(replacement) * copies)
    return ReplacePlan(index, 1, block, index + len(block))


def splice(word: Word, plan: ReplacePlan, reduce: bool = True) -> Word:
    """Apply a plan to word in place; re-normalize unless reduce is False."""
    logger.debug("splice %r into %s", plan, word)
    return word.splice(plan.start, plan.stop, plan.syllables, reduce=reduce)


def replace_at(haystack: Word, index: int, toreplace: Word, replacement: Word,
               check: bool = True) -> Word:
    """
    Replace the occurrence of toreplace starting at syllable index.

    Returns a new, reduced word; haystack is not modified. With check set
    (the default) the match is verified before anything is changed.
    """
    _check_parents(haystack, toreplace, replacement)
    out = haystack.copy()
    plan = plan_replace(out.symbols, index, toreplace.symbols,
                        replacement.symbols, check=check)
    return splice(out, plan, reduce=True)


# ============================================================
# Substitutions and traces
# ============================================================

class Substitution:
    """A pattern => replacement pair with optional name and description."""

    __slots__ = ('pattern', 'replacement', 'name', 'description')

    def __init__(self, pattern: Word, replacement: Word,
                 name: Optional[str] = None, description: Optional[str] = None):
        self.pattern = pattern
        self.replacement = replacement
        self.name = name
        self.description = description

    def __iter__(self):
        return iter((self.pattern, self.replacement))

    def __repr__(self) -> str:
        base = f"{self.pattern} => {self.replacement}"
        if self.name:
            if self.description:
                return f"@{self.name} \"{self.description}\": {base}"
            return f"@{self.name}: {base}"
        return base


SubstitutionsType = Union[Mapping[Word, Word], Iterable[Union[Substitution, Tuple[Word, Word]]]]


def _as_substitutions(substitutions: SubstitutionsType) -> List[Substitution]:
    if isinstance(substitutions, Mapping):
        return [Substitution(k, v) for k, v in substitutions.items()]
    result = []
    for item in substitutions:
        if isinstance(item, Substitution):
            result.append(item)
        elif isinstance(item, tuple) and len(item) == 2:
            result.append(Substitution(item[0], item[1]))
        else:
            raise TypeError(f"Expected a Substitution or (pattern, replacement) pair, got {item!r}")
    return result


class ReplaceStep:
    """A single planned edit performed by replace_all."""

    def __init__(self, sub_index: int, substitution: Substitution,
                 index: int, before: Word, after: Word):
        self.sub_index = sub_index
        self.substitution = substitution
        self.index = index
        self.before = before
        self.after = after

    @property
    def label(self) -> str:
        return self.substitution.name or f"subst[{self.sub_index}]"

    def __repr__(self) -> str:
        return f"{self.label}@{self.index}: {self.before} -> {self.after}"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "sub_index": self.sub_index,
            "name": self.substitution.name,
            "pattern": str(self.substitution.pattern),
            "replacement": str(self.substitution.replacement),
            "index": self.index,
            "before": str(self.before),
            "after": str(self.after),
        }


class ReplaceTrace:
    """
    All edits made by one replace_all call.

    Formatting styles:
        - format("verbose"): every step with before/after (default)
        - format("compact"): single line showing the substitution chain
        - format("rules"): just the substitution names applied
        - format("chain"): the word after each step
    """

    def __init__(self):
        self.steps: List[ReplaceStep] = []
        self.initial: Optional[Word] = None
        self.final: Optional[Word] = None

    def add_step(self, step: ReplaceStep):
        self.steps.append(step)

    def format(self, style: str = "verbose") -> str:
        if style == "compact":
            return f"{self.initial} --[{', '.join(self.rules_applied())}]--> {self.final}"
        elif style == "rules":
            rules = self.rules_applied()
            return " -> ".join(rules) if rules else "(no substitutions applied)"
        elif style == "chain":
            parts = [str(self.initial)]
            for step in self.steps:
                parts.append(f"  --({step.label})-->")
                parts.append(str(step.after))
            if self.steps:
                parts.append("  --(reduce)-->")
                parts.append(str(self.final))
            return "\n".join(parts)
        else:
            return repr(self)

    def __repr__(self) -> str:
        lines = [f"Initial: {self.initial}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. {step}")
        lines.append(f"Final: {self.final}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any replacement was made."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        return {
            "initial": str(self.initial),
            "final": str(self.final),
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }

    def rule_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for step in self.steps:
            counts[step.label] = counts.get(step.label, 0) + 1
        return counts

    def rules_applied(self) -> List[str]:
        return [step.label for step in self.steps]

    def summary(self) -> str:
        if not self.steps:
            return "No replacements performed"
        counts = self.rule_counts()
        most_used = max(counts.items(), key=lambda x: x[1])
        return (f"{len(self.steps)} replacements using {len(counts)} substitutions. "
                f"Most used: {most_used[0]} ({most_used[1]}x)")


# ============================================================
# Replace
# ============================================================

def _find_from(pattern: Sequence, haystack: Sequence, start: int) -> Optional[int]:
    if len(pattern) == 1:
        for idx in range(start, len(haystack)):
            if issubsymbol(pattern[0], haystack[idx]):
                return idx
        return None
    for idx in range(start, len(haystack) - len(pattern) + 1):
        if _matches_at(pattern, haystack, idx):
            return idx
    return None


def replace_all(haystack: Word, substitutions: SubstitutionsType, trace: bool = False):
    """
    Apply every substitution to haystack; return a new reduced word.

    Patterns are processed longest first (by syllable count); patterns of
    equal length keep the order in which they were given. For each
    pattern, all non-overlapping occurrences are replaced left to right:
    scanning resumes right after each inserted replacement, so a
    replacement is never rescanned for the same pattern. The word is
    reduced once after each pattern's pass.

    A one-syllable pattern replaces every whole copy of itself inside the
    matched syllable at once, e.g. y^2 => y turns x*y^9 into x*y^5.

    Args:
        haystack: Word to rewrite (not modified).
        substitutions: {pattern: replacement} mapping, or an iterable of
            Substitution objects / (pattern, replacement) pairs.
        trace: If True, return (word, ReplaceTrace).

    Raises:
        InvalidPatternError: a pattern reduces to the empty word.
        MismatchedParentError: words from different groups are mixed.
    """
    subs = _as_substitutions(substitutions)
    for sub in subs:
        _check_parents(haystack, sub.pattern, sub.replacement)

    ordered = sorted(enumerate(subs), key=lambda item: -item[1].pattern.reduced().syllable_length())

    out = haystack.reduced()
    history = ReplaceTrace() if trace else None
    if history is not None:
        history.initial = out.copy()

    for sub_index, sub in ordered:
        pattern = sub.pattern.reduced().symbols
        replacement = sub.replacement.reduced().symbols
        if not pattern:
            raise InvalidPatternError(f"Cannot substitute the empty word: {sub}",
                                      pattern=sub.pattern)
        idx = _find_from(pattern, out.symbols, 0)
        while idx is not None:
            before = out.copy() if history is not None else None
            if len(pattern) == 1:
                plan = plan_symbol_replace(out.symbols, idx, pattern[0], replacement)
            else:
                plan = plan_replace(out.symbols, idx, pattern, replacement, check=False)
            splice(out, plan, reduce=False)
            if history is not None:
                history.add_step(ReplaceStep(sub_index, sub, idx, before, out.copy()))
            idx = _find_from(pattern, out.symbols, plan.resume)
        out.reduce()

    if history is not None:
        history.final = out.copy()
        return out, history
    return out


def replace(haystack: Word, pattern: Word, replacement: Word, trace: bool = False):
    """Replace all occurrences of one pattern (see replace_all)."""
    return replace_all(haystack, [(pattern, replacement)], trace=trace)
