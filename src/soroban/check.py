# src/soroban/check.py
"""Replay a sequence from 0 and report, per step, whether the mode admits it."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from soroban.beads import MoveKind, classify_move
from soroban.registry import Mode, get_mode

OK = "ok"
OUT_OF_RANGE = "out of range"
BAD_MAGNITUDE = "magnitude not used in this mode"
INFEASIBLE = "not possible with the beads"
KIND_NOT_ALLOWED = "technique not part of this mode"


@dataclass(frozen=True)
class StepCheck:
    index: int
    before: int
    magnitude: int
    after: int
    kind: MoveKind | None
    reason: str = OK

    @property
    def ok(self) -> bool:
        return self.reason == OK


def check_step(mode: Mode, index: int, value: int, delta: int) -> StepCheck:
    after = value + delta
    if delta == 0 or abs(delta) not in mode.magnitudes:
        return StepCheck(index, value, delta, after, None, BAD_MAGNITUDE)
    if not 0 <= after <= mode.max_value:
        return StepCheck(index, value, delta, after, None, OUT_OF_RANGE)
    kind = classify_move(value, delta, carry_places=mode.carry_places)
    if kind is None:
        return StepCheck(index, value, delta, after, None, INFEASIBLE)
    if kind not in mode.kinds:
        return StepCheck(index, value, delta, after, kind, KIND_NOT_ALLOWED)
    return StepCheck(index, value, delta, after, kind)


def check_sequence(mode: Mode | str, magnitudes: Iterable[int]) -> list[StepCheck]:
    """
    Check every step of a signed sequence against `mode`.

    Replay continues past a failing step (using the arithmetic result), so the
    report lists every problem, not just the first one.
    """
    m = get_mode(mode)
    value = 0
    out: list[StepCheck] = []
    for i, delta in enumerate(magnitudes):
        res = check_step(m, i, value, int(delta))
        out.append(res)
        value = res.after
    return out


def is_valid_sequence(mode: Mode | str, magnitudes: Iterable[int]) -> bool:
    return all(step.ok for step in check_sequence(mode, magnitudes))
