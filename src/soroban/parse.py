# src/soroban/parse.py
from __future__ import annotations

import re

from soroban.utility import UserInputError

_THIN_SPACES = ("\u2009", "\u202F", "\u00A0")  # thin, narrow no-break, no-break
_MINUS_SIGNS = ("\u2212", "\u2013")  # minus sign, en dash
_TERM_RE = re.compile(r"\s*([+-]?)\s*(\d+)\s*")
_MAX_TERMS = 1000


def _normalize(text: str) -> str:
    for ch in _THIN_SPACES:
        text = text.replace(ch, " ")
    for ch in _MINUS_SIGNS:
        text = text.replace(ch, "-")
    # a trailing '= 12' is the answer, not part of the sequence
    return text.split("=", 1)[0].strip()


def parse_sequence(text: str) -> list[int]:
    """
    Parse '2 + 1 - 3' (or '+2+1-3', '- 3 + 7') into signed magnitudes.

    Each term must carry an explicit sign except the first one. Raises
    UserInputError on anything else.
    """
    s = _normalize(text or "")
    if not s:
        raise UserInputError("Invalid input: empty sequence.")

    out: list[int] = []
    pos = 0
    while pos < len(s):
        m = _TERM_RE.match(s, pos)
        if not m or m.end() == pos:
            raise UserInputError(f"Invalid input: cannot read the sequence at {s[pos:]!r}.")
        sign, digits = m.group(1), m.group(2)
        if out and not sign:
            raise UserInputError(f"Invalid input: missing '+' or '-' before {digits}.")
        out.append(-int(digits) if sign == "-" else int(digits))
        if len(out) > _MAX_TERMS:
            raise UserInputError(f"Invalid input: more than {_MAX_TERMS} terms.")
        pos = m.end()
    return out
