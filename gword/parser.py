"""
Text format for words and substitution rules.

Words are written the way they print:

    (id)            identity
    s               a generator
    s^-2            a generator power
    t*s^-1          products, joined by *

and, for convenience when typing, parenthesised sub-expressions with an
optional power: (t*s)^3. Generator powers are kept as written, so parsing
the printed form of a word gives back the same syllables; parenthesised
powers are evaluated (and reduced).

Substitution files hold one rule per line:

    # Comment
    @name: pattern => replacement
    @name "Description": pattern => replacement
    pattern => replacement
"""

import re
from pathlib import Path
from typing import Any, List, Optional, Union

from .errors import ParseError
from .findreplace import Substitution
from .symbols import FreeSymbol
from .words import Word

_TOKEN = re.compile(r'\s*(?:(?P<id>\(\s*id\s*\))|(?P<name>[A-Za-z_][A-Za-z0-9_]*)'
                    r'|(?P<int>[-+]?\d+)|(?P<op>[()*^]))')


class _WordParser:
    """Recursive-descent parser over the token stream of one word."""

    def __init__(self, text: str, group: Any):
        self.text = text
        self.group = group
        self.tokens = self._tokenize(text)
        self.pos = 0

    def _tokenize(self, text: str) -> List:
        tokens = []
        i = 0
        while i < len(text):
            if text[i:].strip() == "":
                break
            m = _TOKEN.match(text, i)
            if not m:
                start = i + (len(text[i:]) - len(text[i:].lstrip()))
                raise ParseError(f"Unexpected character {text[start]!r}", text, start)
            kind = m.lastgroup
            tokens.append((kind, m.group(kind), m.start(kind)))
            i = m.end()
        return tokens

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return (None, None, len(self.text))

    def take(self, kind: str, value: Optional[str] = None):
        tok = self.peek()
        if tok[0] != kind or (value is not None and tok[1] != value):
            expected = value or kind
            found = tok[1] if tok[1] is not None else "end of input"
            raise ParseError(f"Expected {expected}, found {found!r}", self.text, tok[2])
        self.pos += 1
        return tok

    def parse(self) -> Word:
        if not self.tokens:
            raise ParseError("Empty word", self.text, 0)
        out = self.product()
        tok = self.peek()
        if tok[0] is not None:
            raise ParseError(f"Unexpected {tok[1]!r}", self.text, tok[2])
        return out

    def product(self) -> Word:
        out = self.factor()
        while self.peek()[:2] == ("op", "*"):
            self.pos += 1
            out.append(self.factor())
        return out

    def exponent(self) -> Optional[int]:
        if self.peek()[:2] != ("op", "^"):
            return None
        self.pos += 1
        return int(self.take("int")[1])

    def factor(self) -> Word:
        kind, value, where = self.peek()
        if kind == "id":
            self.pos += 1
            out = self.group.identity_word()
            n = self.exponent()
            return out if n is None else out ** n
        if kind == "name":
            self.pos += 1
            if value not in self.group.names:
                raise ParseError(f"Unknown generator {value!r}", self.text, where)
            n = self.exponent()
            return Word([FreeSymbol(value, 1 if n is None else n)], parent=self.group)
        if (kind, value) == ("op", "("):
            self.pos += 1
            inner = self.product()
            self.take("op", ")")
            n = self.exponent()
            return inner if n is None else inner ** n
        found = value if value is not None else "end of input"
        raise ParseError(f"Expected a generator or '(', found {found!r}", self.text, where)


def parse_word(text: str, group: Any) -> Word:
    """
    Parse a word over group's generators.

    The result is not reduced beyond what parenthesised powers require:

        str(parse_word("t*t^-1", G))      # => "t*t^-1"
        parse_word("(t*s)^-1", G)         # => s^-1*t^-1

    Raises:
        ParseError: malformed text or unknown generator.
    """
    return _WordParser(text, group).parse()


def parse_substitution_line(line: str, group: Any) -> Optional[Substitution]:
    """
    Parse a single substitution line.

    Formats:
        @name: pattern => replacement
        @name "description": pattern => replacement
        pattern => replacement

    Returns: Substitution, or None for blank lines, comments and lines
    without "=>".
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None

    name = None
    description = None
    if line.startswith('@'):
        match_obj = re.match(r'@([\w-]+)\s+"([^"]+)":\s*(.+)', line)
        if match_obj:
            name, description, line = match_obj.groups()
        else:
            match_obj = re.match(r'@([\w-]+):\s*(.+)', line)
            if not match_obj:
                raise ParseError("Malformed substitution header", line, 0)
            name, line = match_obj.groups()

    if '=>' not in line:
        return None

    lhs, rhs = line.split('=>', 1)
    pattern = parse_word(lhs.strip(), group)
    replacement = parse_word(rhs.strip(), group)
    return Substitution(pattern, replacement, name=name, description=description)


def load_substitutions_from_dsl(text: str, group: Any) -> List[Substitution]:
    """Load substitutions from rule text, one per line, in order."""
    subs = []
    for lineno, line in enumerate(text.split('\n'), 1):
        try:
            sub = parse_substitution_line(line, group)
        except ParseError as e:
            raise ParseError(f"line {lineno}: {e}") from e
        if sub is not None:
            subs.append(sub)
    return subs


def load_substitutions_from_file(path: Union[str, Path], group: Any) -> List[Substitution]:
    """Load substitutions from a rules file."""
    path = Path(path)
    return load_substitutions_from_dsl(path.read_text(), group)


def format_substitutions(subs: List[Substitution]) -> str:
    """Render substitutions back to rule text."""
    return "\n".join(repr(sub) for sub in subs)
