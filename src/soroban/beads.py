# src/soroban/beads.py
"""
Bead-state model of a soroban rod.

A rod shows one decimal digit: an upper bead worth 5 and four lower beads
worth 1 each, all scaled by the rod's place value (1, 10 or 100). Every
function here works on the place-normalized digit, so the same rules apply
to the units, tens and hundreds rods.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

LOWER_BEADS = 4
UPPER_WORTH = 5
PLACES = (1, 10, 100)


class MoveKind(Enum):
    DIRECT = "direct"
    FRIENDS_OF_5 = "fo5"
    FRIENDS_OF_10 = "fo10"
    FRIENDS_OF_50 = "fo50"
    FRIENDS_OF_100 = "fo100"
    FRIENDS_OF_500 = "fo500"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def is_complement(self) -> bool:
        return self is not MoveKind.DIRECT

    @property
    def label(self) -> str:
        if self is MoveKind.DIRECT:
            return "Direct"
        return "Friends of " + self.value[2:]

    @staticmethod
    def five_complement(place: int) -> MoveKind:
        """Complement kind that swaps the upper bead of the rod at `place`."""
        return _FIVE_COMPLEMENT[place]

    @staticmethod
    def ten_complement(place: int) -> MoveKind:
        """Complement kind that carries from the rod at `place` into the next one."""
        return _TEN_COMPLEMENT[place]


_FIVE_COMPLEMENT = {1: MoveKind.FRIENDS_OF_5, 10: MoveKind.FRIENDS_OF_50, 100: MoveKind.FRIENDS_OF_500}
_TEN_COMPLEMENT = {1: MoveKind.FRIENDS_OF_10, 10: MoveKind.FRIENDS_OF_100}


@dataclass(frozen=True)
class BeadState:
    upper_active: bool
    lower_active: int  # 0..4

    @property
    def digit(self) -> int:
        return (UPPER_WORTH if self.upper_active else 0) + self.lower_active


def digit_at(value: int, place: int = 1) -> int:
    return (value // place) % 10


def bead_state(value: int, place: int = 1) -> BeadState:
    """Bead configuration of the rod at `place` for the number `value`."""
    d = digit_at(value, place)
    return BeadState(upper_active=d >= UPPER_WORTH, lower_active=d % UPPER_WORTH)


def place_of(magnitude: int) -> int | None:
    """
    Return the place unit of a single-rod magnitude, e.g. 7 -> 1, 30 -> 10,
    400 -> 100. Magnitudes that span more than one rod (12, 150) or exceed
    the hundreds rod give None.
    """
    m = abs(magnitude)
    for place in PLACES:
        if m % place == 0 and 1 <= m // place <= 9:  # noqa: PLR2004
            return place
    return None


def classify_single_rod_move(digit: int, magnitude: int, is_addition: bool, place: int = 1) -> list[MoveKind]:
    """
    Classify adding/subtracting `magnitude` (1..9, already divided by the
    place unit) on a single rod currently showing `digit`.

    Returns [] when the rod alone cannot do it, [DIRECT] for a direct move or
    the five-complement kind for the place (fo5 / fo50 / fo500). The
    complement is only tried for 1..4 and only after the direct move failed.
    """
    st = bead_state(digit)
    mag = abs(magnitude)
    lower = st.lower_active
    LOW_MAX = LOWER_BEADS

    if is_addition:
        if 1 <= mag <= LOW_MAX:
            if lower + mag <= LOW_MAX:
                return [MoveKind.DIRECT]
            # add the 5, take the complement off the lower beads
            if not st.upper_active and lower - (UPPER_WORTH - mag) >= 0:
                return [MoveKind.five_complement(place)]
            return []
        if mag == UPPER_WORTH:
            return [MoveKind.DIRECT] if not st.upper_active else []
        if UPPER_WORTH < mag <= 9 and not st.upper_active and lower + (mag % UPPER_WORTH) <= LOW_MAX:  # noqa: PLR2004
            return [MoveKind.DIRECT]
        return []

    if 1 <= mag <= LOW_MAX:
        if lower - mag >= 0:
            return [MoveKind.DIRECT]
        # drop the 5, give the complement back to the lower beads
        if st.upper_active and lower + (UPPER_WORTH - mag) <= LOW_MAX:
            return [MoveKind.five_complement(place)]
        return []
    if mag == UPPER_WORTH:
        return [MoveKind.DIRECT] if st.upper_active else []
    if UPPER_WORTH < mag <= 9 and st.upper_active and lower - (mag % UPPER_WORTH) >= 0:  # noqa: PLR2004
        return [MoveKind.DIRECT]
    return []


def classify_move(value: int, delta: int, *, carry_places: tuple[int, ...] = ()) -> MoveKind | None:
    """
    Classify applying the signed single-rod operation `delta` to `value`.

    Moves that stay inside the rod are classified on that rod's digit. Moves
    that cross into the next rod are only admitted at places listed in
    `carry_places`, as a ten-complement: the next rod takes +1 (or gives -1)
    and this rod gives back (or takes) the complement 10 - k. A carry that
    would ripple into a third rod is not admitted.

    Range checks are the caller's job; a result below 0 is rejected here only
    because it has no rod to borrow from.
    """
    place = place_of(delta)
    if place is None or delta == 0:
        return None
    target = value + delta
    if target < 0:
        return None

    k = abs(delta) // place
    adding = delta > 0
    block = place * 10
    if target // block == value // block:
        kinds = classify_single_rod_move(digit_at(value, place), k, adding, place)
        return kinds[0] if kinds else None

    if place not in carry_places:
        return None
    next_ok = classify_single_rod_move(digit_at(value, block), 1, adding, block)
    this_ok = classify_single_rod_move(digit_at(value, place), 10 - k, not adding, place)
    if next_ok and this_ok:
        return MoveKind.ten_complement(place)
    return None
