# src/soroban/generate.py
"""
Constrained random walk that builds a drill.

At every step the engine lists each signed magnitude of the mode that keeps
the running total in [0, Rmax] and that the rods can physically perform
(see soroban.beads), asks the mode's bias for its preference filters, and
commits one operation. Running out of candidates ends the drill early; that
is reported on the result, never raised.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from itertools import accumulate

from soroban.beads import MoveKind, classify_move
from soroban.context import StepCtx
from soroban.registry import Mode, get_mode
from soroban.select import biased_choice

# ---------- Data models -------------------------------------------------------


@dataclass(frozen=True)
class Operation:
    magnitude: int        # signed
    kind: MoveKind

    @property
    def display_magnitude(self) -> int:
        return abs(self.magnitude)

    @property
    def is_addition(self) -> bool:
        return self.magnitude > 0


@dataclass(frozen=True)
class Drill:
    mode: Mode
    operations: tuple[Operation, ...]
    final_value: int
    target_length: int

    @property
    def achieved_length(self) -> int:
        return len(self.operations)

    @property
    def is_partial(self) -> bool:
        return self.achieved_length < self.target_length

    def partial_sums(self) -> list[int]:
        """Running totals, starting with the initial 0."""
        return [0, *accumulate(op.magnitude for op in self.operations)]


@dataclass(frozen=True)
class Ungeneratable:
    """Not even one operation was possible for this mode and length."""
    mode: Mode
    target_length: int
    operations: tuple[Operation, ...] = ()
    final_value: int = 0

    @property
    def achieved_length(self) -> int:
        return 0

    @property
    def is_partial(self) -> bool:
        return True


DrillResult = Drill | Ungeneratable


# ---------- Candidates --------------------------------------------------------

def candidate_moves(mode: Mode, value: int) -> list[Operation]:
    """Every operation the mode admits from `value`, additions first."""
    out: list[Operation] = []
    for sign in (1, -1):
        for mag in mode.magnitudes:
            delta = sign * mag
            if not 0 <= value + delta <= mode.max_value:
                continue
            kind = classify_move(value, delta, carry_places=mode.carry_places)
            if kind is not None and kind in mode.kinds:
                out.append(Operation(magnitude=delta, kind=kind))
    return out


def choose_step(mode: Mode, ctx: StepCtx, rng: random.Random) -> Operation | None:
    moves = candidate_moves(mode, ctx.value)
    if not moves:
        return None
    return biased_choice(moves, mode.bias(ctx), rng)


# ---------- Public API --------------------------------------------------------

def generate(mode: Mode | str, target_length: int, rng: random.Random | None = None) -> DrillResult:
    """
    Build one drill of up to `target_length` operations, starting from 0.

    The caller validates `target_length >= 1`. Returns Ungeneratable when no
    operation at all could be produced.
    """
    m = get_mode(mode)
    rng = rng or random.Random()
    value = 0
    ops: list[Operation] = []

    for i in range(target_length):
        ctx = StepCtx(value=value, index=i, target_length=target_length, max_value=m.max_value)
        op = choose_step(m, ctx, rng)
        if op is None:
            break
        ops.append(op)
        value += op.magnitude

    if not ops:
        return Ungeneratable(mode=m, target_length=target_length)
    return Drill(mode=m, operations=tuple(ops), final_value=value, target_length=target_length)


def generate_batch(mode: Mode | str, count: int, target_length: int, *,
                   seed: int | None = None) -> list[DrillResult]:
    """Generate `count` independent drills one after another from a single RNG."""
    m = get_mode(mode)
    rng = random.Random(seed)
    return [generate(m, target_length, rng) for _ in range(count)]
