# tests/test_generate.py
"""
Drill generation: every mode, many seeds, replayed through the checker.

Run: pytest -v
"""

from __future__ import annotations

import random

import pytest

from soroban.beads import MoveKind
from soroban.check import check_sequence
from soroban.context import StepCtx
from soroban.generate import (
    Drill,
    Operation,
    Ungeneratable,
    candidate_moves,
    choose_step,
    generate,
    generate_batch,
)
from soroban.registry import get_mode

MODE_NAMES = [
    "lowerBeads",
    "unitRod",
    "friendsOf5",
    "friendsOf10",
    "tensRodLowerBeads",
    "fullTensRod",
    "friendsOf50",
    "friendsOf100",
]


def test_all_modes_discovered(index):
    assert [m.name for m in index] == MODE_NAMES


@pytest.mark.parametrize("alias", ["friendsOf10", "friends-of-10", "FRIENDS_OF_10", "friends_of_10"])
def test_mode_aliases(index, alias):
    assert index.get(alias).name == "friendsOf10"


@pytest.mark.parametrize("name", MODE_NAMES)
@pytest.mark.parametrize("seed", range(12))
def test_generated_drills_hold_the_rules(name, seed):
    mode = get_mode(name)
    for result in generate_batch(mode, 5, 7, seed=seed):
        assert isinstance(result, Drill)
        assert 1 <= result.achieved_length <= 7
        sums = result.partial_sums()
        assert sums[0] == 0
        assert sums[-1] == result.final_value
        assert all(0 <= s <= mode.max_value for s in sums)
        for op in result.operations:
            assert op.display_magnitude in mode.magnitudes
            assert op.kind in mode.kinds
        steps = check_sequence(mode, [op.magnitude for op in result.operations])
        assert all(st.ok for st in steps)
        assert [st.kind for st in steps] == [op.kind for op in result.operations]


def test_same_seed_same_worksheet():
    a = generate_batch("friendsOf100", 6, 6, seed=7)
    b = generate_batch("friendsOf100", 6, 6, seed=7)
    assert a == b


def test_lower_beads_stay_on_lower_beads():
    drill = generate("lowerBeads", 3, random.Random(1))
    assert set(drill.partial_sums()) <= {0, 1, 2, 3, 4}
    assert all(op.kind is MoveKind.DIRECT for op in drill.operations)


def test_unit_rod_from_four():
    moves = candidate_moves(get_mode("unitRod"), 4)
    assert sorted(op.magnitude for op in moves) == [-4, -3, -2, -1, 5]
    assert all(op.kind is MoveKind.DIRECT for op in moves)


def test_first_move_always_goes_up():
    for name in MODE_NAMES:
        assert all(op.magnitude > 0 for op in candidate_moves(get_mode(name), 0))


def test_friends_of_10_offers_the_carry():
    assert Operation(5, MoveKind.FRIENDS_OF_10) in candidate_moves(get_mode("friendsOf10"), 8)


def test_friends_of_100_offers_the_carry():
    assert Operation(10, MoveKind.FRIENDS_OF_100) in candidate_moves(get_mode("friendsOf100"), 95)
    assert all(op.magnitude != 7 for op in candidate_moves(get_mode("friendsOf100"), 95))


@pytest.mark.parametrize(
    "name, value, expected",
    [
        ("friendsOf5", 4, MoveKind.FRIENDS_OF_5),
        ("friendsOf10", 8, MoveKind.FRIENDS_OF_10),
        ("friendsOf100", 95, MoveKind.FRIENDS_OF_100),
    ],
)
def test_bias_prefers_the_technique(name, value, expected):
    mode = get_mode(name)
    ctx = StepCtx(value=value, index=0, target_length=5, max_value=mode.max_value)
    rng = random.Random(3)
    for _ in range(30):
        assert choose_step(mode, ctx, rng).kind is expected


@pytest.mark.parametrize("name, value", [("friendsOf5", 4), ("friendsOf100", 95)])
def test_last_step_prefers_direct(name, value):
    mode = get_mode(name)
    ctx = StepCtx(value=value, index=4, target_length=5, max_value=mode.max_value)
    rng = random.Random(3)
    for _ in range(30):
        assert choose_step(mode, ctx, rng).kind is MoveKind.DIRECT


@pytest.mark.parametrize("name", ["lowerBeads", "unitRod", "fullTensRod"])
def test_bias_leaves_the_top(name):
    mode = get_mode(name)
    ctx = StepCtx(value=mode.max_value, index=0, target_length=5, max_value=mode.max_value)
    assert choose_step(mode, ctx, random.Random(0)).magnitude < 0


def test_zero_length_is_ungeneratable():
    res = generate("unitRod", 0, random.Random(0))
    assert isinstance(res, Ungeneratable)
    assert res.achieved_length == 0
    assert res.is_partial


def test_partial_drill_reports_lengths():
    ops = (Operation(3, MoveKind.DIRECT), Operation(-1, MoveKind.DIRECT))
    drill = Drill(mode=get_mode("lowerBeads"), operations=ops, final_value=2, target_length=5)
    assert drill.is_partial
    assert drill.achieved_length == 2
    assert drill.partial_sums() == [0, 3, 2]


@pytest.mark.parametrize(
    "name, place, carry",
    [("unitRod", 1, ()), ("friendsOf50", 10, ()), ("friendsOf10", 1, (1,)), ("friendsOf100", 1, (1, 10))],
)
def test_mode_configuration(name, place, carry):
    mode = get_mode(name)
    assert mode.place == place
    assert mode.carry_places == carry
