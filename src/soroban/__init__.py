from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("soroban-drills")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .beads import BeadState, MoveKind, bead_state, classify_move, classify_single_rod_move
from .check import StepCheck, check_sequence, is_valid_sequence
from .config import has_profile, load_settings, read_current_profile
from .fmt import format_magnitudes, format_sequence
from .generate import Drill, Operation, Ungeneratable, generate, generate_batch
from .parse import parse_sequence
from .registry import Mode, discover, get_mode
from .runtime import APPLY, CFG
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "BeadState",
    "Drill",
    "Mode",
    "MoveKind",
    "Operation",
    "StepCheck",
    "Ungeneratable",
    "__version__",
    "bead_state",
    "check_sequence",
    "classify_move",
    "classify_single_rod_move",
    "discover",
    "format_magnitudes",
    "format_sequence",
    "generate",
    "generate_batch",
    "get_mode",
    "has_profile",
    "is_valid_sequence",
    "load_settings",
    "parse_sequence",
    "read_current_profile",
    "workspace_dir",
]
