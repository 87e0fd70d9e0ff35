# src/soroban/select.py
from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from soroban.beads import MoveKind

T = TypeVar("T")
Filter = Callable[[T], bool]


def narrow(candidates: Sequence[T], filters: Iterable[Filter]) -> list[T]:
    """
    Apply the filters in priority order. A filter that would leave nothing
    is skipped, so the result is never empty when `candidates` is not.
    """
    pool = list(candidates)
    for keep in filters:
        subset = [c for c in pool if keep(c)]
        if subset:
            pool = subset
    return pool


def biased_choice(candidates: Sequence[T], filters: Iterable[Filter], rng: random.Random) -> T:
    """Uniform choice among the candidates that survive `narrow()`."""
    if not candidates:
        raise ValueError("biased_choice() needs at least one candidate")
    return rng.choice(narrow(candidates, filters))


# ---- predicate builders --------------------------------------------------

def of_kind(*kinds: MoveKind) -> Filter:
    wanted = frozenset(kinds)
    return lambda op: op.kind in wanted


def away_from_boundary(value: int, max_value: int) -> Filter:
    """Keep moves leaving 0 upwards or Rmax downwards. Off the boundary nothing matches."""
    if value == 0:
        return lambda op: op.magnitude > 0
    if value == max_value:
        return lambda op: op.magnitude < 0
    return lambda op: False


def any_of(*filters: Filter) -> Filter:
    return lambda op: any(f(op) for f in filters)
