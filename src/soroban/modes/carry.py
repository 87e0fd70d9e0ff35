# src/soroban/modes/carry.py
"""
Drills over two or three rods, where a move may carry into (or borrow from)
the next rod using the ten-complement ("Friends of 10" on the units rod,
"Friends of 100" on the tens rod).
"""

from __future__ import annotations

from itertools import chain

from soroban.beads import MoveKind
from soroban.context import StepCtx
from soroban.registry import drill_mode
from soroban.select import any_of, away_from_boundary, of_kind

_UNITS = range(1, 10)
_TENS = range(10, 100, 10)
_HUNDREDS = range(100, 1000, 100)

# most specific first
_FO100_PREFERENCE = (
    MoveKind.FRIENDS_OF_100,
    MoveKind.FRIENDS_OF_10,
    MoveKind.FRIENDS_OF_50,
    MoveKind.FRIENDS_OF_5,
    MoveKind.FRIENDS_OF_500,
    MoveKind.DIRECT,
)


@drill_mode(name="friendsOf10", label="Friends of 10", order=4,
            max_value=99, magnitudes=_UNITS, carry_places=(1,),
            kinds=[MoveKind.DIRECT, MoveKind.FRIENDS_OF_5, MoveKind.FRIENDS_OF_10],
            description="Units and tens rods: 0-99, ±1..±9, prefers carries/borrows")
def friends_of_10(ctx: StepCtx) -> list:
    if ctx.is_last:
        return []
    return [any_of(of_kind(MoveKind.FRIENDS_OF_10), away_from_boundary(ctx.value, ctx.max_value))]


@drill_mode(name="friendsOf100", label="Friends of 100", order=8,
            max_value=999, magnitudes=chain(_UNITS, _TENS, _HUNDREDS), carry_places=(1, 10),
            kinds=list(MoveKind),
            description="Three rods: 0-999, ±1..±900, prefers carries into the hundreds")
def friends_of_100(ctx: StepCtx) -> list:
    if ctx.is_last:
        return [of_kind(MoveKind.DIRECT)]
    return [of_kind(kind) for kind in _FO100_PREFERENCE]
