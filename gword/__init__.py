"""
gword - words, free reduction and sub-word substitution in free groups

Elements of a free group are words: sequences of syllables (a generator
raised to an integer power). gword reduces words freely, multiplies,
inverts and powers them, and finds and replaces sub-words.

Quick Start:
    from gword import FreeGroup, replace

    G = FreeGroup(["s", "t"])
    s, t = G.gens()

    o = (t * s) ** 3
    o == t * s * t * s * t * s        # => True
    o * (t * s) ** -3 == G.one()      # => True

    c = s * t * s**-1 * t**-1
    replace(c, s * t, G.one())        # => s^-1*t^-1

Text Format:
    (id)                 identity
    s, s^-2              generator powers
    t*s^-1               products
    (t*s)^3              parenthesised powers (input only)

Substitution Files:
    # Comment
    @kill-st: s*t => (id)
    @name "Description": s*t*s^-1 => s
"""

__version__ = "0.1.0"

from .errors import (
    GWordError,
    MismatchedParentError,
    InvalidPatternError,
    CoercionError,
    ParseError,
)

from .symbols import (
    SymbolLike,
    FreeSymbol,
    change_pow,
    same_generator,
    issubsymbol,
)

from .words import (
    Word,
    Raw,
    Normalized,
    free_reduce,
    is_reduced,
    normalize,
    word_from_symbol,
    word_from_symbols,
)

from .findreplace import (
    find_first,
    find_next,
    find_symbol,
    find_all,
    ReplacePlan,
    plan_replace,
    plan_symbol_replace,
    splice,
    replace_at,
    replace,
    replace_all,
    Substitution,
    ReplaceStep,
    ReplaceTrace,
)

from .groups import FreeGroup, wlmetric_ball

from .parser import (
    parse_word,
    parse_substitution_line,
    load_substitutions_from_dsl,
    load_substitutions_from_file,
    format_substitutions,
)

# Public API
__all__ = [
    # Version
    "__version__",
    # Errors
    "GWordError",
    "MismatchedParentError",
    "InvalidPatternError",
    "CoercionError",
    "ParseError",
    # Symbols
    "SymbolLike",
    "FreeSymbol",
    "change_pow",
    "same_generator",
    "issubsymbol",
    # Words
    "Word",
    "Raw",
    "Normalized",
    "free_reduce",
    "is_reduced",
    "normalize",
    "word_from_symbol",
    "word_from_symbols",
    # Search and replace
    "find_first",
    "find_next",
    "find_symbol",
    "find_all",
    "ReplacePlan",
    "plan_replace",
    "plan_symbol_replace",
    "splice",
    "replace_at",
    "replace",
    "replace_all",
    "Substitution",
    "ReplaceStep",
    "ReplaceTrace",
    # Groups
    "FreeGroup",
    "wlmetric_ball",
    # Text format
    "parse_word",
    "parse_substitution_line",
    "load_substitutions_from_dsl",
    "load_substitutions_from_file",
    "format_substitutions",
]
