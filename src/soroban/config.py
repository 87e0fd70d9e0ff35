from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:
    import tomli as toml  # type: ignore

from soroban.utility import UserInputError
from soroban.workspace import ensure_workspace_seeded, workspace_dir

# Values used when a profile leaves a key out.
DEFAULTS: dict[str, dict[str, Any]] = {
    "DRILL": {"MODE": "lowerBeads", "COUNT": 10, "LENGTH": 5},
    "DISPLAY": {"SHOW_MOVE_KINDS": False, "SHOW_HINTS": True, "SHOW_PARTIAL_SUMS": False},
    "OUTPUT": {"OUTPUT_FILE": ""},
    "BEHAVIOUR": {"DEBUG": False},
}

META_SECTION = "_PROFILE_"
NO_DESCRIPTION = "(no description)"


@dataclass
class Settings:
    """
    One profile, ready for runtime.APPLY().

    `data` holds the TOML sections (minus [_PROFILE_]) with DEFAULTS filled
    in; `name` and `description` come from [_PROFILE_], falling back to the
    file name and "(no description)".
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{name}.toml"


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        # tomllib puts the position in the message: "... (at line 3, column 7)"
        raise UserInputError(f"reading profile {path.name}: {e}.") from None


def _meta(raw: dict[str, Any], fallback_name: str) -> tuple[str, str]:
    meta = raw.get(META_SECTION) or {}
    name = str(meta.get("name") or fallback_name)
    description = " ".join(str(meta.get("description") or "").split()) or NO_DESCRIPTION
    return name, description


def _with_defaults(raw: dict[str, Any]) -> dict[str, Any]:
    data = {k: v for k, v in raw.items() if k != META_SECTION}
    for section, values in DEFAULTS.items():
        given = data.get(section, {})
        if not isinstance(given, dict):
            raise UserInputError(f"[{section}] must be a table, got {type(given).__name__}.")
        data[section] = {**values, **given}
    # DISPLAY switches are TOML booleans; anything else falls back to the default
    data["DISPLAY"] = {k: v for k, v in data["DISPLAY"].items() if isinstance(v, bool)}
    return data


# --- Public API ------------------------------------------------------------


def list_all_profiles() -> list[str]:
    """Profile names (file stems) in the workspace, seeding it first if needed."""
    try:
        ensure_workspace_seeded()
    except OSError:
        pass
    return sorted(p.stem for p in _profiles_dir().glob("*.toml"))


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """[(name, description), ...]; an unreadable profile is listed by file name."""
    items: list[tuple[str, str]] = []
    for p in _profiles_dir().glob("*.toml"):
        try:
            items.append(_meta(_load_toml(p), p.stem))
        except UserInputError:
            items.append((p.stem, NO_DESCRIPTION))
    return sorted(items, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return bool(name) and _profile_path(name).is_file()


def default_settings() -> Settings:
    """Built-in settings for when no profile file is available."""
    return Settings(data=_with_defaults({}), name="default", description="Built-in defaults")


def load_settings(name: str | None) -> Settings:
    """Read <workspace>/profiles/<name>.toml; FileNotFoundError when it does not exist."""
    path = _profile_path(name or "default")
    if not path.exists():
        raise FileNotFoundError(f"Profile '{name}' not found at {path}")

    raw = _load_toml(path)
    resolved_name, description = _meta(raw, path.stem)
    return Settings(data=_with_defaults(raw), name=resolved_name, description=description, _source=path)


# --- Last used profile -----------------------------------------------------


def _current_profile_path() -> Path:
    return _profiles_dir() / ".current"


def read_current_profile() -> str | None:
    try:
        text = _current_profile_path().read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return text.removesuffix(".toml") or None


def write_current_profile(name: str) -> None:
    path = _current_profile_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text((name or "").strip().removesuffix(".toml"), encoding="utf-8")
