"""Tests for multiplication, inversion and powers."""

import random

import pytest
from gword import FreeGroup, FreeSymbol, Word


NS = [-10, -3, -1, 0, 1, 3, 10]


class TestBasicArithmetic:
    """Tests on the generators of a two-generator free group."""

    def setup_method(self):
        self.G = FreeGroup(["s", "t"])
        self.s, self.t = self.G.gens()

    def test_square(self):
        s = self.s
        assert (s * s).symbols == (s ** 2).symbols
        assert s * s == s ** 2

    def test_inverse_of_square(self):
        s = self.s
        assert (s * s).inv() == (s ** 2).inv()
        assert s.inv() ** 2 == (s ** 2).inv()
        assert s.inv() * s.inv() == (s ** 2).inv()

    def test_inverse_reverses(self):
        s, t = self.s, self.t
        assert (s * t).inv() == t.inv() * s.inv()
        w = s * t * s.inv()
        assert w.inv() == s * t.inv() * s.inv()

    def test_conjugate_power(self):
        s, t = self.s, self.t
        w = t * s * t.inv()
        assert w ** 10 == t * s ** 10 * t.inv()
        assert w ** -10 == t * s ** -10 * t.inv()

    def test_inverse_operator(self):
        assert ~(self.s * self.t) == (self.s * self.t).inv()

    def test_multiply_by_symbol(self):
        s, t = self.s, self.t
        assert s * FreeSymbol("t") == s * t
        assert FreeSymbol("t") * s == t * s

    def test_multiply_by_int_rejected(self):
        with pytest.raises(TypeError):
            self.s * 3

    def test_product_is_fresh_and_reduced(self):
        s, t = self.s, self.t
        w = s * t
        u = w * t.inv()
        assert str(w) == "s*t"
        assert str(u) == "s"
        assert not u.stale

    def test_product_keeps_parent(self):
        assert (self.s * self.t).parent is self.G

    def test_zeroth_power(self):
        assert self.s ** 0 == self.G.one()
        assert (self.s ** 0).is_one()
        assert str(Word([FreeSymbol("a")]) ** 0) == "(id)"

    def test_power_of_identity(self):
        assert self.G.one() ** 5 == self.G.one()

    def test_inverse_keeps_form(self):
        """The inverse of a reduced word is reduced; a raw word stays raw."""
        s, t = self.s, self.t
        assert not (s * t).inv().stale
        raw = Word([FreeSymbol("s"), FreeSymbol("s", -1)], parent=self.G)
        assert raw.inv().stale
        assert str(raw.inv()) == "s*s^-1"


class TestEndToEnd:
    """The (t*s)^3 scenario."""

    def test_cube_and_inverse_cube(self):
        G = FreeGroup(["s", "t"])
        s, t = G.gens()

        o = (t * s) ** 3
        assert o == t * s * t * s * t * s
        p = (t * s) ** -3
        assert p == s.inv() * t.inv() * s.inv() * t.inv() * s.inv() * t.inv()
        assert o * p == G.one()

        w = Word(o.symbols + p.symbols, parent=G)
        assert w.syllable_length() == 12
        assert w.reduce().symbols == ()


class TestGroupLaws:
    """Group axioms and power laws on random words."""

    def setup_method(self):
        self.G = FreeGroup(["a", "b", "c"])
        self.rng = random.Random(0)

    def random_word(self):
        return self.G.random_element(self.rng, min_length=10, max_length=30).reduce()

    def test_associativity(self):
        for _ in range(20):
            a, b, c = self.random_word(), self.random_word(), self.random_word()
            assert (a * b) * c == a * (b * c)

    def test_identity(self):
        one = self.G.one()
        for _ in range(20):
            a = self.random_word()
            assert a * one == a
            assert one * a == a

    def test_inverses(self):
        one = self.G.one()
        for _ in range(20):
            a = self.random_word()
            assert a * a.inv() == one
            assert a.inv() * a == one
            assert a.inv().inv() == a

    def test_inverse_of_product(self):
        for _ in range(20):
            a, b = self.random_word(), self.random_word()
            assert (a * b).inv() == b.inv() * a.inv()

    def test_power_laws(self):
        for _ in range(3):
            a = self.random_word()
            for m in NS:
                for n in NS:
                    assert (a ** m) * (a ** n) == a ** (m + n)
            for n in NS:
                assert a ** -n == (a ** n).inv()

    def test_reduced_products_have_no_cancellation(self):
        for _ in range(20):
            w = self.random_word() * self.random_word()
            symbols = w.symbols
            assert all(sym.pow != 0 for sym in symbols)
            assert all(x.id != y.id for x, y in zip(symbols, symbols[1:]))

    def test_equal_words_hash_equal(self):
        for _ in range(20):
            a = self.random_word()
            scrambled = Word(a.symbols, parent=self.G)
            scrambled.push(FreeSymbol("b"), FreeSymbol("b", -1))
            assert scrambled == a
            assert hash(scrambled) == hash(a)
