"""Tests for symbols (syllables)."""

import pytest
from gword import FreeSymbol, change_pow, issubsymbol, same_generator


class TestFreeSymbolConstruction:
    """Tests for building symbols."""

    def test_default_power(self):
        """Exponent defaults to 1."""
        assert FreeSymbol("abc").pow == 1
        assert FreeSymbol("aaaaaaaaaaaaaaaa").id == "aaaaaaaaaaaaaaaa"

    def test_explicit_power(self):
        """Explicit exponent is kept."""
        assert FreeSymbol("t", -2).pow == -2

    def test_non_int_power_rejected(self):
        """Exponents must be integers."""
        with pytest.raises(TypeError):
            FreeSymbol("s", 1.5)
        with pytest.raises(TypeError):
            FreeSymbol("s", True)

    def test_immutable(self):
        """Symbols cannot be modified."""
        s = FreeSymbol("s")
        with pytest.raises(AttributeError):
            s.pow = 3


class TestSymbolOperations:
    """Tests for length, inversion and power changes."""

    def setup_method(self):
        self.s = FreeSymbol("s")
        self.t = FreeSymbol("t")

    def test_length(self):
        """Length is the absolute exponent."""
        assert len(self.s) == 1
        assert len(FreeSymbol("s", -3)) == 3
        assert len(change_pow(self.s, 0)) == 0

    def test_zero_powers_are_equal(self):
        """All zero-power symbols denote the identity."""
        assert change_pow(self.s, 0) == change_pow(self.t, 0)
        assert hash(change_pow(self.s, 0)) == hash(change_pow(self.t, 0))
        assert change_pow(self.s, 0).is_one()

    def test_inverse(self):
        """Inversion negates the exponent."""
        assert self.s.inv().pow == -1
        assert (~self.s).pow == -1
        assert self.s.inv().id == "s"

    def test_change_pow(self):
        """change_pow keeps the generator."""
        assert FreeSymbol("s", 3) == change_pow(self.s, 3)
        assert FreeSymbol("s", 3) != FreeSymbol("t", 3)
        assert change_pow(self.s.inv(), -3) == change_pow(self.s, 3).inv()
        assert change_pow(self.s, 4).pow == 4

    def test_same_generator(self):
        """Same generator ignores exponents."""
        assert same_generator(self.s, FreeSymbol("s", -5))
        assert not same_generator(self.s, self.t)

    def test_string_form(self):
        """Exponent 1 is omitted when printing."""
        assert str(self.s) == "s"
        assert str(FreeSymbol("t", -2)) == "t^-2"
        assert str(FreeSymbol("s", 0)) == "s^0"
        assert repr(FreeSymbol("s", 2)) == "FreeSymbol('s', 2)"

    def test_hash_consistent_with_equality(self):
        """Equal symbols hash alike and can be used in sets."""
        assert len({FreeSymbol("s", 2), FreeSymbol("s", 2), FreeSymbol("s", -2)}) == 2


class TestIsSubsymbol:
    """Tests for sub-symbol containment."""

    def test_positive_containment(self):
        a = FreeSymbol("a")
        assert issubsymbol(a, change_pow(a, 2)) == True

    def test_opposite_sign(self):
        a = FreeSymbol("a")
        assert issubsymbol(a, change_pow(a, -2)) == False

    def test_different_generator(self):
        assert issubsymbol(FreeSymbol("b"), FreeSymbol("a", -2)) == False

    def test_negative_containment(self):
        b = FreeSymbol("b")
        assert issubsymbol(b.inv(), change_pow(b, -2)) == True

    def test_equal_symbols(self):
        """A symbol is a sub-symbol of itself."""
        assert issubsymbol(FreeSymbol("a", -3), FreeSymbol("a", -3))

    def test_larger_exponent(self):
        """A larger exponent does not fit."""
        assert not issubsymbol(FreeSymbol("a", 3), FreeSymbol("a", 2))

    def test_zero_power(self):
        """The zero power fits in any symbol on the same generator."""
        assert issubsymbol(FreeSymbol("a", 0), FreeSymbol("a", 5))
        assert issubsymbol(FreeSymbol("a", 0), FreeSymbol("a", -5))
        assert not issubsymbol(FreeSymbol("a", 1), FreeSymbol("a", 0))
