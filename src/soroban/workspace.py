from __future__ import annotations

import os
import shutil
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

SUBDIRS = ("profiles", "worksheets")
ENV_VAR = "SOROBAN_HOME"


def workspace_dir() -> Path:
    """$SOROBAN_HOME, or ~/Documents/Soroban."""
    env = os.environ.get(ENV_VAR)
    root = Path(env).expanduser() if env else Path.home() / "Documents" / "Soroban"
    return root.resolve()


def _sample_profiles(folder: Path) -> list[Path]:
    # editor backups and dotfiles are not profiles
    return sorted(p for p in folder.glob("*.toml")
                  if p.is_file() and not p.name.startswith(".") and not p.name.endswith("~"))


def seed_workspace(*, overwrite: bool = False) -> tuple[Path, dict[str, int]]:
    """
    Create the workspace folders and copy the packaged sample profiles.

    Existing profiles are left alone unless `overwrite` (developer use,
    guarded by SOROBAN_DEV=1 in the CLI).

    Returns: (workspace_path, {"profiles": files_copied, "worksheets": 0})
    """
    root = workspace_dir()
    for sub in SUBDIRS:
        (root / sub).mkdir(parents=True, exist_ok=True)

    copied = dict.fromkeys(SUBDIRS, 0)
    with as_file(pkg_files("soroban") / "profiles") as samples:
        for src in _sample_profiles(Path(samples)):
            dst = root / "profiles" / src.name
            if overwrite or not dst.exists():
                shutil.copy2(src, dst)
                copied["profiles"] += 1
    return root, copied


def ensure_workspace_seeded() -> tuple[Path, bool, dict[str, int]]:
    """First-run setup; cheap when the workspace is already there."""
    root, copied = seed_workspace(overwrite=False)
    return root, any(copied.values()), copied
