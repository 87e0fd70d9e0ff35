# runtime.py
from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import Any

from colorama import Fore, Style

_MISSING = object()


@dataclass
class Runtime:
    """The applied profile for this invocation, plus the session debug flag."""
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False

    def apply(self, settings: Any) -> None:
        """Install a config.Settings (or a plain nested dict)."""
        self.profile_name = getattr(settings, "name", None) or "default"
        data = settings.as_dict() if hasattr(settings, "as_dict") else settings
        self.settings = dict(data or {})

        dbg = self.get("BEHAVIOUR.DEBUG")
        if isinstance(dbg, bool):
            self.debug = dbg

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup: get('DRILL.LENGTH', 5)."""
        node: Any = self.settings
        for part in (key or "").split("."):
            node = node.get(part, _MISSING) if isinstance(node, dict) else _MISSING
            if node is _MISSING:
                return default
        return node


_current_runtime: ContextVar[Runtime | None] = ContextVar("soroban_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = reset()
    return rt


def reset() -> Runtime:
    """Start over with an empty runtime (fresh CLI invocation, tests)."""
    rt = Runtime()
    _current_runtime.set(rt)
    return rt


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


def ensure_runtime_deps(strict: bool = True) -> bool:
    """
    Profiles need a TOML reader: tomllib (3.11+) or tomli. When neither is
    importable, print how to install it; with strict=True return False.
    """
    if find_spec("tomllib") or find_spec("tomli"):
        return True
    print(f"{Fore.RED}{Style.BRIGHT}\nMissing dependency:{Style.RESET_ALL} tomli\n"
          f"Install with: {Fore.YELLOW}pip install tomli{Style.RESET_ALL}")
    return not strict
