# tests/test_select.py
from __future__ import annotations

import random

import pytest

from soroban.beads import MoveKind
from soroban.generate import Operation
from soroban.select import any_of, away_from_boundary, biased_choice, narrow, of_kind

D, F5, F10 = MoveKind.DIRECT, MoveKind.FRIENDS_OF_5, MoveKind.FRIENDS_OF_10

OPS = [Operation(2, D), Operation(3, F5), Operation(-1, D), Operation(-4, F5)]


def test_narrow_applies_filters_in_order():
    assert narrow(OPS, [of_kind(F5), lambda op: op.magnitude < 0]) == [Operation(-4, F5)]


def test_narrow_skips_filter_that_would_empty():
    assert narrow(OPS, [of_kind(F10)]) == OPS
    assert narrow(OPS, [of_kind(F10), of_kind(D)]) == [Operation(2, D), Operation(-1, D)]


def test_biased_choice_picks_from_survivors():
    rng = random.Random(0)
    for _ in range(50):
        assert biased_choice(OPS, [of_kind(F5)], rng).kind is F5


def test_biased_choice_needs_candidates():
    with pytest.raises(ValueError):
        biased_choice([], [], random.Random(0))


def test_away_from_boundary():
    up = away_from_boundary(0, 9)
    down = away_from_boundary(9, 9)
    middle = away_from_boundary(4, 9)
    assert [op.magnitude for op in OPS if up(op)] == [2, 3]
    assert [op.magnitude for op in OPS if down(op)] == [-1, -4]
    assert not any(middle(op) for op in OPS)


def test_any_of():
    keep = any_of(of_kind(F10), lambda op: op.magnitude == 2)
    assert [op for op in OPS if keep(op)] == [Operation(2, D)]
