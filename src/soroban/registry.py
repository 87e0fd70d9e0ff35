# src/soroban/registry.py
from __future__ import annotations

import inspect
from collections import OrderedDict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from importlib import import_module
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

from soroban.beads import MoveKind, place_of
from soroban.context import StepCtx
from soroban.utility import UserInputError, _token

BiasFn = Callable[[StepCtx], list[Callable]]


@dataclass(frozen=True)
class Mode:
    name: str                              # camelCase key, e.g. "friendsOf10"
    label: str                             # human readable
    place: int                             # smallest rod the mode works on
    max_value: int                         # Rmax; the range is [0, Rmax]
    magnitudes: tuple[int, ...]            # unsigned; both signs are tried
    kinds: frozenset[MoveKind]             # admissible move kinds
    bias: BiasFn
    carry_places: tuple[int, ...] = ()     # rods allowed to carry into the next one
    description: str = ""
    order: int = 0                         # listing order


# --------------------- Discovery → Index (immutable) ----------------------


@dataclass
class Index:
    modes: dict[str, Mode]                     # name -> Mode
    name_to_token: dict[str, str]              # name -> TOKEN

    # helper for tokenization identical to profiles/tokens rule
    @staticmethod
    def to_token(name: str) -> str:
        return _token(name)

    def get(self, name: str | Mode) -> Mode:
        """Look up a mode by name; 'friendsOf10', 'friends-of-10' and 'FRIENDS_OF_10' all match."""
        if isinstance(name, Mode):
            return name
        if name in self.modes:
            return self.modes[name]
        tok = self.to_token(str(name))
        for nm, t in self.name_to_token.items():
            if t == tok:
                return self.modes[nm]
        raise UserInputError(f"Unknown mode '{name}'. Available: {', '.join(self.modes)}")

    def __contains__(self, name: object) -> bool:
        try:
            self.get(name)  # type: ignore[arg-type]
        except UserInputError:
            return False
        return True

    def __iter__(self):
        return iter(sorted(self.modes.values(), key=lambda m: m.order))

    def __len__(self) -> int:
        return len(self.modes)


# --- rich report of the discovery step ---
@dataclass
class DiscoveryReport:
    pkg_loaded: list[tuple[str, int]] = field(default_factory=list)        # (module.name, count)
    pkg_failed: list[tuple[str, str]] = field(default_factory=list)        # (module.name, error)
    added: list[tuple[str, str]] = field(default_factory=list)             # (mode, source)
    skipped_duplicates: list[tuple[str, str, str]] = field(default_factory=list)  # (mode, skipped_source, kept_source)


def _is_drill_mode(obj) -> bool:
    return callable(obj) and isinstance(getattr(obj, "__drill_mode__", None), Mode)


def _collect_from_module(mod) -> list[Mode]:
    return [o.__drill_mode__ for _, o in inspect.getmembers(mod) if _is_drill_mode(o)]


# ---------- Decorator (only tags the function; no side effects) ----------

def drill_mode(*, name: str, label: str, max_value: int, magnitudes: Iterable[int],
               kinds: Iterable[MoveKind], carry_places: Iterable[int] = (),
               description: str = "", order: int = 0):
    """Tag a bias function as the selection policy of a drill mode."""
    mags = tuple(sorted(set(magnitudes)))
    places = [place_of(m) for m in mags]
    if not mags or None in places:
        raise ValueError(f"mode {name!r}: every magnitude must fit on one rod, got {mags}")

    def deco(fn: BiasFn) -> BiasFn:
        fn.__drill_mode__ = Mode(
            name=name,
            label=label,
            place=min(places),
            max_value=int(max_value),
            magnitudes=mags,
            kinds=frozenset(kinds),
            bias=fn,
            carry_places=tuple(carry_places),
            description=description,
            order=order,
        )
        return fn
    return deco


def _package_module_names() -> list[str]:
    pkg_dir = pkg_files("soroban") / "modes"
    with as_file(pkg_dir) as real:
        return [f"soroban.modes.{file.stem}" for file in sorted(Path(real).glob("*.py"))
                if file.name != "__init__.py"]


def discover_with_report() -> tuple[Index, DiscoveryReport]:
    """Collect every @drill_mode in soroban.modes.*, with a report of what loaded."""
    report = DiscoveryReport()
    modes: OrderedDict[str, Mode] = OrderedDict()
    source: dict[str, str] = {}

    try:
        names = _package_module_names()
    except Exception as e:
        report.pkg_failed.append(("soroban.modes", f"{type(e).__name__}: {e}"))
        names = []

    for modname in names:
        try:
            mod = import_module(modname)
        except Exception as e:
            report.pkg_failed.append((modname, f"{type(e).__name__}: {e}"))
            continue
        found = 0
        for m in _collect_from_module(mod):
            if m.name in modes:
                report.skipped_duplicates.append((m.name, modname, source[m.name]))
                continue
            modes[m.name] = m
            source[m.name] = modname
            report.added.append((m.name, modname))
            found += 1
        report.pkg_loaded.append((modname, found))

    idx = Index(modes=dict(modes), name_to_token={nm: _token(nm) for nm in modes})
    return idx, report


_INDEX: Index | None = None


def discover() -> Index:
    """Discover the packaged modes once per process."""
    global _INDEX  # noqa: PLW0603
    if _INDEX is None:
        _INDEX, _ = discover_with_report()
    return _INDEX


def get_mode(name: str | Mode) -> Mode:
    return discover().get(name)
