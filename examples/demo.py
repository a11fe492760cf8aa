#!/usr/bin/env python3
"""
gword Feature Demonstration

This script walks through words, reduction, search and substitution in
a free group.
"""

import random
from pathlib import Path
from gword import (
    FreeGroup, Substitution,
    find_first, find_symbol, replace, replace_all,
    load_substitutions_from_file, wlmetric_ball,
)


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_arithmetic():
    """Demonstrate multiplication, inverses and powers."""
    section("Arithmetic")

    G = FreeGroup(["s", "t"])
    s, t = G.gens()

    o = (t * s) ** 3
    p = (t * s) ** -3
    print(f"  (t*s)^3          = {o}")
    print(f"  (t*s)^-3         = {p}")
    print(f"  (t*s)^3*(t*s)^-3 = {o * p}")
    print(f"  inverse of s*t^2 = {(s * t ** 2).inv()}")


def demo_lazy_reduction():
    """Demonstrate that builders defer reduction."""
    section("Deferred Reduction")

    G = FreeGroup(["s", "t"])
    s, t = G.gens()

    w = t.copy()
    w.push(t.inv().symbols[0])
    print(f"  after push:      {w}   (stale: {w.stale})")
    print(f"  w == identity:   {w == G.one()}")
    print(f"  after compare:   {w}   (stale: {w.stale})")


def demo_search():
    """Demonstrate sub-word search."""
    section("Search")

    G = FreeGroup(["s", "t"])
    s, t = G.gens()
    c = s * t * s.inv() * t.inv()

    print(f"  commutator c = {c}")
    print(f"  s^-1*t^-1 in c at syllable {find_first(s.inv() * t.inv(), c)}")
    print(f"  s*t in s^3*t^2 at syllable {find_first(s * t, s ** 3 * t ** 2)}")
    print(f"  t^2 in s*t^3 at syllable {find_symbol(t ** 2, s * t ** 3)}")


def demo_replace():
    """Demonstrate replacement with boundary excess."""
    section("Replacement")

    G = FreeGroup(["s", "t"])
    s, t = G.gens()
    c = s * t * s.inv() * t.inv()
    w = s * t * s.inv()

    examples = [
        (c, s * t, G.one()),
        (c, w, s),
        (s * c * t.inv(), w, s),
    ]
    for haystack, pattern, replacement in examples:
        print(f"  {haystack} [{pattern} => {replacement}] = "
              f"{replace(haystack, pattern, replacement)}")

    H = FreeGroup(["x", "y"])
    x, y = H.gens()
    print(f"  {x * y ** 9} [y^2 => y] = {replace(x * y ** 9, y ** 2, y)}")


def demo_tracing():
    """Demonstrate traced substitution."""
    section("Tracing")

    G = FreeGroup(["s", "t"])
    s, t = G.gens()
    c = s * t * s.inv() * t.inv()

    subs = [
        Substitution(s * t * s.inv(), s, name="conj"),
        Substitution(s * t.inv(), t ** 4, name="grow"),
    ]
    result, trace = replace_all(s * c * s * c * s, subs, trace=True)
    print(f"  Result: {result}")
    print(f"  Rules:  {trace.format('rules')}")
    print("\n  Chain:")
    for line in trace.format("chain").splitlines():
        print(f"    {line}")
    print(f"\n  {trace.summary()}")


def demo_file_loading():
    """Demonstrate loading substitutions from a file."""
    section("Substitution Files")

    G = FreeGroup(["s", "t"])
    subs = load_substitutions_from_file(Path(__file__).parent / "commutators.subst", G)
    print(f"  Loaded {len(subs)} substitutions from commutators.subst")
    for sub in subs:
        print(f"    {sub!r}")

    word = G.parse("t*s^2*t*s*t*s^-1*t^-1")
    print(f"\n  {word} => {replace_all(word, subs)}")


def demo_ball():
    """Demonstrate word-length balls."""
    section("Word-Length Balls")

    G = FreeGroup(["s", "t"])
    s, t = G.gens()
    _, sizes = wlmetric_ball([s, t, s.inv(), t.inv()], radius=4)
    print(f"  Ball sizes for radius 1..4: {sizes}")

    rng = random.Random(1)
    w = G.random_element(rng).reduce()
    print(f"  Random element of length {w.length()}: {w}")


def main():
    """Run all demonstrations."""
    print("gword - Words in Free Groups")
    print("Feature Demonstration")

    demo_arithmetic()
    demo_lazy_reduction()
    demo_search()
    demo_replace()
    demo_tracing()
    demo_file_loading()
    demo_ball()

    print("\n" + "="*60)
    print(" Demo complete!")
    print("="*60)


if __name__ == "__main__":
    main()
