# src/soroban/fmt.py
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from colorama import Fore, Style

from soroban.beads import MoveKind, place_of

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_KIND_COLOR = {
    MoveKind.DIRECT: "",
    MoveKind.FRIENDS_OF_5: Fore.CYAN,
    MoveKind.FRIENDS_OF_50: Fore.CYAN,
    MoveKind.FRIENDS_OF_500: Fore.CYAN,
    MoveKind.FRIENDS_OF_10: Fore.MAGENTA,
    MoveKind.FRIENDS_OF_100: Fore.MAGENTA,
}


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def _signed_token(magnitude: int, first: bool) -> str:
    if first and magnitude > 0:
        return str(magnitude)
    return f"+ {magnitude}" if magnitude > 0 else f"- {abs(magnitude)}"


def format_magnitudes(magnitudes: Iterable[int]) -> str:
    """[2, 1, -3] -> '2 + 1 - 3'. A negative first term keeps its sign: '- 3'."""
    return " ".join(_signed_token(m, i == 0) for i, m in enumerate(magnitudes))


def format_sequence(operations: Sequence, show_kinds: bool = False, color: bool = False) -> str:
    """
    Render operations as the pupil reads them. With `show_kinds`, complement
    moves get their technique appended, e.g. '8 + 5 [fo10]'.
    """
    parts: list[str] = []
    for i, op in enumerate(operations):
        tok = _signed_token(op.magnitude, i == 0)
        if show_kinds and op.kind.is_complement:
            tag = f"[{op.kind.tag}]"
            if color:
                tag = f"{_KIND_COLOR[op.kind]}{tag}{Style.RESET_ALL}"
            tok = f"{tok} {tag}"
        parts.append(tok)
    return " ".join(parts)


def format_partial_sums(sums: Iterable[int]) -> str:
    return " → ".join(str(s) for s in sums)


def format_kind_counts(operations: Sequence) -> str:
    """'direct 3, fo5 2' in MoveKind order; kinds that did not occur are left out."""
    counts = {k: 0 for k in MoveKind}
    for op in operations:
        counts[op.kind] += 1
    return ", ".join(f"{k.tag} {n}" for k, n in counts.items() if n)


def format_magnitude_set(mags: Sequence[int]) -> str:
    """(1, 2, 3, 4) -> '1-4'; (1..9, 10..90, ...) -> '1-9, 10-90, 100-900'."""
    groups: dict[int, list[int]] = {}
    for m in sorted(mags):
        groups.setdefault(place_of(m) or 0, []).append(m)
    return ", ".join(f"{g[0]}-{g[-1]}" if len(g) > 1 else str(g[0]) for g in groups.values())
