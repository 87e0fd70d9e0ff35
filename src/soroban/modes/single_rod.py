# src/soroban/modes/single_rod.py
"""
Drills on one rod: the units rod (0-9) or the tens rod (0-90).

No carrying between rods happens here. The Friends-of-5 and Friends-of-50
drills push the pupil towards the complement moves; the plain drills only
steer away from the ends of the range so the walk keeps moving.
"""

from __future__ import annotations

from soroban.beads import MoveKind
from soroban.context import StepCtx
from soroban.registry import drill_mode
from soroban.select import away_from_boundary, of_kind

DIRECT = MoveKind.DIRECT


def _boundary_bias(ctx: StepCtx) -> list:
    if ctx.is_last:
        return []
    return [away_from_boundary(ctx.value, ctx.max_value)]


def _complement_bias(ctx: StepCtx, complement: MoveKind) -> list:
    # last step: settle with a plain move when there is one
    if ctx.is_last:
        return [of_kind(DIRECT)]
    return [away_from_boundary(ctx.value, ctx.max_value), of_kind(complement)]


# ---- units rod ---------------------------------------------------------------

@drill_mode(name="lowerBeads", label="Lower beads only", order=1,
            max_value=4, magnitudes=range(1, 5), kinds=[DIRECT],
            description="Units rod, the four lower beads: 0-4, ±1..±4")
def lower_beads(ctx: StepCtx) -> list:
    return _boundary_bias(ctx)


@drill_mode(name="unitRod", label="Full unit rod", order=2,
            max_value=9, magnitudes=range(1, 6), kinds=[DIRECT],
            description="Units rod with the 5-bead: 0-9, ±1..±5, direct moves")
def unit_rod(ctx: StepCtx) -> list:
    return _boundary_bias(ctx)


@drill_mode(name="friendsOf5", label="Friends of 5", order=3,
            max_value=9, magnitudes=range(1, 10), kinds=[DIRECT, MoveKind.FRIENDS_OF_5],
            description="Units rod: 0-9, ±1..±9, prefers 5-complement moves")
def friends_of_5(ctx: StepCtx) -> list:
    return _complement_bias(ctx, MoveKind.FRIENDS_OF_5)


# ---- tens rod ----------------------------------------------------------------

@drill_mode(name="tensRodLowerBeads", label="Tens rod, lower beads only", order=5,
            max_value=40, magnitudes=range(10, 50, 10), kinds=[DIRECT],
            description="Tens rod, the four lower beads: 0-40, ±10..±40")
def tens_rod_lower_beads(ctx: StepCtx) -> list:
    return _boundary_bias(ctx)


@drill_mode(name="fullTensRod", label="Full tens rod", order=6,
            max_value=90, magnitudes=range(10, 60, 10), kinds=[DIRECT],
            description="Tens rod with the 50-bead: 0-90, ±10..±50, direct moves")
def full_tens_rod(ctx: StepCtx) -> list:
    return _boundary_bias(ctx)


@drill_mode(name="friendsOf50", label="Friends of 50", order=7,
            max_value=90, magnitudes=range(10, 100, 10), kinds=[DIRECT, MoveKind.FRIENDS_OF_50],
            description="Tens rod: 0-90, ±10..±90, prefers 50-complement moves")
def friends_of_50(ctx: StepCtx) -> list:
    return _complement_bias(ctx, MoveKind.FRIENDS_OF_50)
