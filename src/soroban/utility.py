# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import re
import sys
from pathlib import PurePath

_CAMEL_RE = re.compile(r"(?<=[a-z])(?=[A-Z])|(?<=[A-Za-z])(?=[0-9])|(?<=[0-9])(?=[A-Za-z])")

# files the workspace needs for itself, and Windows device names
_RESERVED_OUTPUT_NAMES = frozenset(
    {".gitignore", ".current", "license", "pyproject", "con", "prn", "aux", "nul"}
    | {f"com{i}" for i in range(1, 10)}
    | {f"lpt{i}" for i in range(1, 10)}
)
_RESERVED_OUTPUT_SUFFIXES = frozenset({".py", ".md", ".toml"})


class UserInputError(Exception):
    pass


def _token(name: str) -> str:
    """'friendsOf10', 'friends-of-10' and 'FRIENDS_OF_10' all give FRIENDS_OF_10."""
    name = _CAMEL_RE.sub("_", str(name))
    return re.sub(r"[^A-Za-z0-9]+", "_", name).upper().strip("_")


def parse_positive_int(text: object, what: str = "value") -> int:
    """Parse a count/length given on the command line or in a profile (must be >= 1)."""
    if isinstance(text, bool):
        raise UserInputError(f"{what} must be a whole number, got {text!r}.")
    try:
        n = int(str(text).strip().replace("_", ""))
    except ValueError:
        raise UserInputError(f"{what} must be a whole number, got {text!r}.") from None
    if n < 1:
        raise UserInputError(f"{what} must be 1 or more, got {n}.")
    return n


def parse_seed(text: object) -> int | None:
    """None / '' / 'off' / 'none' mean no seed; anything else must be an integer."""
    if text is None or isinstance(text, bool):
        return None
    s = str(text).strip().lower()
    if s in {"", "off", "none", "random"}:
        return None
    try:
        return int(s)
    except ValueError:
        raise UserInputError(f"seed must be an integer or 'off', got {text!r}.") from None


def clear_screen() -> None:
    """Clear the terminal before the interactive prompt starts."""
    if os.name == "nt":
        os.system("cls")
    else:
        sys.stdout.write("\033[3J\033[H\033[2J")
        sys.stdout.flush()


def validate_output_setting(output_file: str | None) -> str | None:
    """
    Check an OUTPUT_FILE / --output value and return it unchanged.

    Empty means screen only and a trailing '/' (or '.') names a folder; both
    are always fine. A file may not be a profile, source file or reserved
    name. Raises ValueError otherwise.
    """
    if not output_file or output_file in (".", "./") or output_file.endswith("/"):
        return output_file

    p = PurePath(output_file)
    if p.name.lower() in _RESERVED_OUTPUT_NAMES or p.stem.lower() in _RESERVED_OUTPUT_NAMES:
        raise ValueError(f"Forbidden output filename: {p.name}")
    if p.suffix.lower() in _RESERVED_OUTPUT_SUFFIXES:
        raise ValueError(f"Forbidden output file extension: {p.suffix.lower()}")
    return output_file


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    """{'DRILL': {'MODE': 'x'}} -> {'DRILL.MODE': 'x'}, for the --debug settings dump."""
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out
