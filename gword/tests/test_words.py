"""Tests for words: construction, builders, reduction, equality and hashing."""

import copy

import pytest
from gword import (
    FreeGroup, FreeSymbol, Word, Raw, Normalized, MismatchedParentError,
    free_reduce, is_reduced, normalize, word_from_symbol, word_from_symbols,
)


def sym(name, pow=1):
    return FreeSymbol(name, pow)


class TestConstruction:
    """Tests for building words."""

    def setup_method(self):
        self.G = FreeGroup(["s", "t"])
        self.s, self.t = self.G.gens()

    def test_word_from_symbol(self):
        """Single-symbol words keep their symbol."""
        w = word_from_symbol(sym("s", 2))
        assert w.symbols == (sym("s", 2),)
        assert w.length() == 2

    def test_word_from_symbols_is_unreduced(self):
        """Construction does not reduce."""
        w = word_from_symbols([sym("t"), sym("t", -1)])
        assert w.stale
        assert str(w) == "t*t^-1"
        assert w.syllable_length() == 2

    def test_length_of_generator_words(self):
        """Length counts exponent magnitudes."""
        assert Word([sym("s")]).length() == 1
        assert Word([sym("t", -2)]).length() == 2
        assert (self.s ** 3 * self.t ** -2).length() == 5
        assert (self.s ** 3 * self.t ** -2).syllable_length() == 2

    def test_len_is_word_length(self):
        """len() agrees with length(), as for symbols."""
        assert len(self.s ** 3 * self.t ** -2) == 5
        assert len(Word([sym("t"), sym("t", -1)])) == 2
        assert len(self.G.one()) == 0
        assert not self.G.one()

    def test_parent(self):
        """Words remember the group that created them."""
        assert self.s.parent is self.G
        assert self.s.token == self.G.token
        assert Word([sym("s")]).parent is None

    def test_indexing_and_iteration(self):
        w = self.s * self.t ** 2
        assert w[0] == sym("s")
        assert list(w) == [sym("s"), sym("t", 2)]


class TestBuilders:
    """Tests for the mutating builders."""

    def setup_method(self):
        self.G = FreeGroup(["s", "t"])
        self.s, self.t = self.G.gens()

    def test_push(self):
        tt = copy.deepcopy(self.t)
        tt.push(sym("t", -1))
        assert str(tt) == "t*t^-1"
        assert tt.stale

    def test_pushfirst(self):
        tt = copy.deepcopy(self.t)
        tt.pushfirst(sym("t", -1))
        assert str(tt) == "t^-1*t"

    def test_append(self):
        tt = copy.deepcopy(self.t)
        tt.append(self.t.inv())
        assert str(tt) == "t*t^-1"

    def test_prepend(self):
        tt = copy.deepcopy(self.t)
        tt.prepend(self.t.inv())
        assert str(tt) == "t^-1*t"

    def test_append_several(self):
        tt = copy.deepcopy(self.t)
        tt.append(self.s, self.t.inv())
        assert str(tt) == "t*s*t^-1"

    def test_prepend_several(self):
        """prepend(a, b) gives a*b*self."""
        w = self.s.copy()
        w.prepend(self.s, self.t)
        assert str(w) == "s*t*s"

    def test_builder_with_reduce(self):
        tt = self.t.copy()
        tt.push(sym("t", -1), reduce=True)
        assert str(tt) == "(id)"
        assert not tt.stale

    def test_rmul_in_place(self):
        tt = copy.deepcopy(self.t)
        assert str(tt.rmul(tt.inv())) == "(id)"

    def test_lmul_in_place(self):
        tt = copy.deepcopy(self.t)
        assert str(tt.lmul(tt.inv())) == "(id)"

    def test_lmul_keeps_order(self):
        """Left multiplication prepends the whole word in order."""
        w = self.t.copy()
        w.lmul(self.s * self.t)
        assert str(w) == "s*t^2"

    def test_rmul_unreduced(self):
        w = self.s.copy()
        w.rmul(self.s.inv(), reduce=False)
        assert str(w) == "s*s^-1"
        assert w.is_one()

    def test_splice(self):
        w = self.s * self.t * self.s
        w.splice(1, 2, [sym("t", 3)])
        assert str(w) == "s*t^3*s"
        assert w.stale

    def test_append_other_group_rejected(self):
        H = FreeGroup(["s", "t"])
        with pytest.raises(MismatchedParentError):
            self.s.copy().append(H.gen(0))

    def test_copy_is_independent(self):
        w = self.s * self.t
        c = w.copy()
        c.push(sym("s"))
        assert str(w) == "s*t"
        assert str(c) == "s*t*s"

    def test_deepcopy_shares_parent(self):
        assert copy.deepcopy(self.s).parent is self.G


class TestFreeReduction:
    """Tests for the reduction algorithm."""

    def test_adjacent_inverses_cancel(self):
        assert free_reduce([sym("a"), sym("a", -1), sym("b")]) == [sym("b")]

    def test_zero_powers_removed(self):
        assert free_reduce([sym("a", 0), sym("b", 0)]) == []
        assert free_reduce([sym("a", 0)]) == []

    def test_zero_power_between_equal_generators(self):
        """Removing a zero power can expose a new collapse."""
        assert free_reduce([sym("a"), sym("b", 0), sym("a")]) == [sym("a", 2)]

    def test_alternating_word(self):
        syllables = [sym("a"), sym("a", -1)] * 10
        assert free_reduce(syllables) == []

    def test_nested_cancellation(self):
        syllables = [sym("a"), sym("b"), sym("c"), sym("c", -1), sym("b", -1), sym("a", -1)]
        assert free_reduce(syllables) == []

    def test_powers_combine(self):
        assert free_reduce([sym("a", 2), sym("a", 3), sym("b")]) == [sym("a", 5), sym("b")]

    def test_empty(self):
        assert free_reduce([]) == []

    def test_reduces_in_place(self):
        syllables = [sym("a"), sym("a")]
        result = free_reduce(syllables)
        assert result is syllables
        assert syllables == [sym("a", 2)]

    def test_is_reduced(self):
        assert is_reduced([sym("a"), sym("b"), sym("a")])
        assert not is_reduced([sym("a"), sym("a")])
        assert not is_reduced([sym("a", 0)])
        assert is_reduced([])

    def test_idempotence(self):
        w = Word([sym("a"), sym("b", 2), sym("b", -2), sym("a", 3), sym("c")])
        once = w.reduced()
        twice = once.reduced()
        assert once.symbols == twice.symbols == (sym("a", 4), sym("c"))
        assert once.length() == twice.length() == 5

    def test_reduce_returns_self(self):
        w = Word([sym("a"), sym("a", -1)])
        assert w.reduce() is w
        assert str(w) == "(id)"

    def test_reduced_returns_copy(self):
        w = Word([sym("a"), sym("a", -1)])
        r = w.reduced()
        assert str(w) == "a*a^-1"
        assert str(r) == "(id)"


class TestNormalForm:
    """Tests for the Raw / Normalized forms."""

    def test_normalize(self):
        form = normalize(Raw([sym("a"), sym("a")]))
        assert isinstance(form, Normalized)
        assert form.syllables == (sym("a", 2),)

    def test_hash_normalizes(self):
        """Hashing a stale word reduces it."""
        w = Word([sym("t"), sym("t", -1), sym("s")])
        assert w.stale
        hash(w)
        assert not w.stale
        assert str(w) == "s"

    def test_equality_normalizes(self):
        w = Word([sym("t"), sym("t", -1), sym("s")])
        assert w == Word([sym("s")])
        assert not w.stale

    def test_mutation_marks_stale(self):
        w = Word([sym("s")]).reduce()
        assert not w.stale
        w.push(sym("t"))
        assert w.stale

    def test_printing_does_not_reduce(self):
        w = Word([sym("t"), sym("t", -1)])
        assert str(w) == "t*t^-1"
        assert w.stale


class TestEqualityAndHash:
    """Tests for the equality/hash contract."""

    def setup_method(self):
        self.G = FreeGroup(["s", "t"])
        self.s, self.t = self.G.gens()

    def test_equal_words_hash_alike(self):
        s, t = self.s, self.t
        assert hash((t ** 1, s ** 1)) == hash((t ** 2 * t.inv(), s * s.inv() * s))

    def test_identity(self):
        one = self.G.one()
        assert one == one * one
        assert len((one * one).symbols) == 0
        assert str(one) == "(id)"

    def test_words_as_dict_keys(self):
        table = {self.s * self.t: "st"}
        key = Word([sym("s"), sym("t", 2), sym("t", -1)], parent=self.G)
        assert table[key] == "st"

    def test_different_words(self):
        assert self.s * self.t != self.t * self.s
        assert self.s != self.s ** 2

    def test_same_hash_different_words_not_equal(self):
        """Equality compares syllables even when hashes agree."""
        a = self.s * self.t
        b = self.t * self.s
        assert (a == b) == (a.symbols == b.symbols)

    def test_mismatched_parent(self):
        H = FreeGroup(["s", "t"])
        with pytest.raises(MismatchedParentError):
            self.s == H.gen(0)
        with pytest.raises(MismatchedParentError):
            self.s * H.gen(0)

    def test_parentless_words_differ_from_group_words(self):
        with pytest.raises(MismatchedParentError):
            self.s == Word([sym("s")])

    def test_non_word_comparison(self):
        assert (self.s == "s") == False
        assert self.s != 1

    def test_word_kind_discriminates(self):
        """Words of a different kind are never equal."""

        class OtherWord(Word):
            pass

        a = Word([sym("s")]).reduce()
        b = OtherWord([sym("s")]).reduce()
        assert a != b
        assert hash(a) != hash(b)

    def test_repr_is_text_form(self):
        assert repr(self.s * self.t ** -1) == "s*t^-1"
