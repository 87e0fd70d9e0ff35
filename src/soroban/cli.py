# src/soroban/cli.py

"""
Soroban drills - abacus practice sequences

Description:
    Generates chains of additions and subtractions for soroban (abacus)
    practice. Every running total can be set on the rods using the bead
    techniques of the chosen mode: direct moves, Friends of 5/50 and the
    Friends of 10/100 carries.

usage: see soroban -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import time
import traceback
from dataclasses import dataclass
from importlib.resources import files as pkg_files
from typing import NamedTuple

from colorama import Fore, Style
from colorama import init as colorama_init

from soroban import __version__ as _ver
from soroban import config as CONFIG
from soroban.check import check_sequence
from soroban.display import (
    print_check_report,
    print_debug_summary,
    print_discovery_report,
    print_profiles_with_descriptions,
    print_worksheet,
    show_intro_help,
    show_mode_list,
)
from soroban.generate import DrillResult, generate_batch
from soroban.output_manager import OutputManager
from soroban.parse import parse_sequence
from soroban.registry import Index, Mode, discover, discover_with_report
from soroban.runtime import APPLY, CFG, ensure_runtime_deps
from soroban.runtime import current as _rt_current
from soroban.utility import (
    UserInputError,
    clear_screen,
    flatten_dotted,
    parse_positive_int,
    parse_seed,
    typename,
    validate_output_setting,
)
from soroban.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = {"init", "list", "where", "active", "check"}


# worksheets generated in this process, for the REPL "hist" command
class HistoryItem(NamedTuple):
    mode: str
    count: int
    length: int
    seed: int | None
    timestamp: float


_HISTORY: list[HistoryItem] = []


def add_to_history(mode: str, count: int, length: int, seed: int | None) -> None:
    _HISTORY.append(HistoryItem(mode=mode, count=count, length=length, seed=seed, timestamp=time.time()))


def get_history() -> list[HistoryItem]:
    return list(_HISTORY)


@dataclass
class Session:
    """What the next worksheet will look like. The REPL edits this; nothing else keeps a current mode."""
    mode: Mode
    count: int
    length: int
    seed: int | None
    profile: str


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """One red line on stderr."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if msg.startswith("Invalid input:"):
        msg = msg.replace("Invalid input:", f"{Fore.RED}Invalid input:{Style.RESET_ALL}", 1)
    elif not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _resolve_inputs(items: list[str], index: Index) -> tuple[str | None, Mode | None]:
    """Return (profile, mode) from up to two positionals, in either order.

    An item naming a mode wins over a profile of the same name.
    """
    profile: str | None = None
    mode: Mode | None = None
    for item in items[:2]:
        if mode is None and item in index:
            mode = index.get(item)
        elif profile is None and CONFIG.has_profile(item):
            profile = item
        else:
            raise UserInputError(f"Invalid input: '{item}' is not a mode or profile. Try 'soroban list'.")
    if len(items) > 2:  # noqa: PLR2004
        raise UserInputError(f"Invalid input: unexpected arguments {' '.join(items[2:])!r}.")
    return profile, mode


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit profile argument
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str, debug: bool) -> str:
    """Load & install a profile; falls back to the built-in defaults when it is missing."""
    if CONFIG.has_profile(name):
        selected = CONFIG.load_settings(name)
    else:
        selected = CONFIG.default_settings()
    APPLY(selected)
    if debug:
        _rt_current().debug = True
        print(f"[debug] active profile: {selected.name}", file=sys.stderr)
        src_path = getattr(selected, "_source", None)
        if src_path:
            print(f"[debug] profile file: {src_path}", file=sys.stderr)
        print("[debug] runtime settings (flattened):", file=sys.stderr)
        flat = flatten_dotted(_rt_current().settings)
        for k in sorted(flat.keys(), key=str.lower):
            v = flat[k]
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
        print(file=sys.stderr)
    return selected.name


def _session_from_settings(index: Index, args, profile: str, mode: Mode | None) -> Session:
    """CLI flags override the profile; the profile overrides the built-in defaults."""
    return Session(
        mode=mode or index.get(str(CFG("DRILL.MODE", "lowerBeads"))),
        count=parse_positive_int(args.count if args.count is not None else CFG("DRILL.COUNT", 10), "count"),
        length=parse_positive_int(args.length if args.length is not None else CFG("DRILL.LENGTH", 5), "length"),
        seed=parse_seed(args.seed if args.seed is not None else CFG("DRILL.SEED", None)),
        profile=profile,
    )


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create the workspace folders and copy the sample profiles if missing.

      init overwrite
          Meant for developers. Requires environment variable SOROBAN_DEV=1.
          Replaces the sample profiles; your edits to them will be lost!

      list
          List all modes.

      where
          Show the workspace and package paths.

      active
          Show the last used profile.

      check MODE "SEQUENCE"
          Check a sequence such as "3 + 4 - 2" against a mode, step by step.
    """)

    p = argparse.ArgumentParser(
        description="Soroban drills — abacus practice sequences",
        usage=(
            "soroban [[profile] [mode]] [--count N] [--length N] [--seed S] [--output OUTPUT]\n"
            "               [--quiet] [--show-kinds] [--sums] [--no-hints] [--debug]\n"
            "       soroban check MODE SEQUENCE\n"
            "       soroban -h | --help\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[[profile] mode]",
                   help="optional profile name and/or mode; without a mode the interactive prompt starts")
    p.add_argument("-n", "--count", default=None, help="Number of drills on the worksheet")
    p.add_argument("-l", "--length", default=None, help="Operations per drill")
    p.add_argument("--seed", default=None, help="Seed for a reproducible worksheet ('off' for random)")
    p.add_argument("--output", default=None, help="Write results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output")
    p.add_argument("--show-kinds", action="store_true", default=None, help="Tag complement moves, e.g. '+ 5 [fo10]'")
    p.add_argument("--sums", action="store_true", default=None, help="Show the running total after every operation")
    p.add_argument("--no-hints", action="store_true", help="Do not explain drills that came out shorter than asked")
    p.add_argument("--debug", action="store_true", help="Show settings, discovery and timing on stderr")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    return p


def main(argv=None) -> int:
    """Console entry point. Returns the exit status: 0 ok, 1 unexpected error, 2 bad input, 3 failed check."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = ("--debug" in (argv if argv is not None else sys.argv))
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _configure_text_streams() -> None:
    if os.environ.get("PYTHONIOENCODING"):
        return
    try:
        # Only touch redirected output (pipes/files), leave TTY as-is
        if not sys.stdout.isatty():
            enc = (sys.stdout.encoding or "").lower()
            if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
                sys.stdout.reconfigure(encoding="utf-8", errors="replace")
                sys.stderr.reconfigure(encoding="utf-8", errors="replace")
    except (AttributeError, ValueError, OSError):
        # captured/replaced streams may not support reconfigure
        pass


def _make_output_manager(args, cli_output: str | None, session: Session) -> OutputManager:
    # OUTPUT_FILE is read per worksheet; a REPL profile switch may change it
    target = cli_output if cli_output is not None else CFG("OUTPUT.OUTPUT_FILE", None)
    try:
        validate_output_setting(target)
    except ValueError as e:
        raise UserInputError(f"OUTPUT.OUTPUT_FILE in profile: {e}") from None
    stem = session.mode.name + (f"_seed={session.seed}" if session.seed is not None else "")
    return OutputManager(output_file=target, quiet=args.quiet, stem=stem)


def run_worksheet(session: Session, args, cli_output: str | None = None) -> list[DrillResult]:
    """Generate and print one worksheet for the session settings."""
    t0 = time.perf_counter()
    results = generate_batch(session.mode, session.count, session.length, seed=session.seed)
    elapsed_ms = (time.perf_counter() - t0) * 1000.0

    om = _make_output_manager(args, cli_output, session)
    try:
        print_worksheet(
            session.mode, results, om,
            seed=session.seed,
            show_kinds=args.show_kinds,
            show_hints=False if args.no_hints else None,
            show_sums=args.sums,
        )
    finally:
        om.close()
    if om.path and not args.quiet:
        print(f"{Style.DIM}(written to {om.path}){Style.RESET_ALL}")
    if om.last_error:
        _print_user_error(f"Could not write {om.path}: {om.last_error}")

    if _rt_current().debug:
        print_debug_summary(results, elapsed_ms, session.seed)
    add_to_history(session.mode.name, session.count, session.length, session.seed)
    return results


def _run_check(index: Index, mode_name: str, text: str) -> int:
    mode = index.get(mode_name)
    steps = check_sequence(mode, parse_sequence(text))
    om = OutputManager(output_file=None)
    try:
        ok = print_check_report(mode, steps, om)
    finally:
        om.close()
    return 0 if ok else 3


def _run_command(cmd: str, rest: list[str], index: Index) -> int:
    if cmd == "init":
        if rest[:1] == ["overwrite"]:
            if os.environ.get("SOROBAN_DEV") != "1":
                print("Refusing to overwrite: set SOROBAN_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0
    if cmd == "list":
        show_mode_list(index)
        return 0
    if cmd == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('soroban')}")
        return 0
    if cmd == "active":
        print(f"Active profile: {CONFIG.read_current_profile() or 'default'}")
        return 0
    # check
    if len(rest) < 2:  # noqa: PLR2004
        raise UserInputError('Invalid input: usage is  soroban check MODE "3 + 4 - 2"')
    return _run_check(index, rest[0], " ".join(rest[1:]))


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return 1

    # first run: create the workspace and copy the sample profiles
    ensure_workspace_seeded()

    if args.debug:
        index, rep = discover_with_report()
        print_discovery_report(index, rep)
    else:
        index = discover()

    if args.items and args.items[0].lower() in COMMANDS:
        return _run_command(args.items[0].lower(), args.items[1:], index)

    try:
        cli_output = validate_output_setting(args.output)  # None => use profile OUTPUT_FILE
    except ValueError as e:
        print(f"Fatal error in --output: {e}", file=sys.stderr)
        return 1

    profile, mode = _resolve_inputs(args.items, index)
    profile_name = _apply_profile(_select_profile_name(profile), args.debug)
    if profile:
        CONFIG.write_current_profile(profile)
    session = _session_from_settings(index, args, profile_name, mode)

    # --- one-shot worksheet ---
    if mode is not None or not sys.stdin.isatty():
        run_worksheet(session, args, cli_output)
        return 0

    return _repl(session, args, index, cli_output)


def _repl(session: Session, args, index: Index, cli_output: str | None) -> int:
    if not _rt_current().debug:
        clear_screen()
    print(f"{Fore.YELLOW}{Style.BRIGHT}Soroban drills v{_ver} — abacus practice sequences{Style.RESET_ALL}")

    while True:
        try:
            seed_txt = f", seed {session.seed}" if session.seed is not None else ""
            prompt = (f"\n[{session.profile}] {session.mode.name}, {session.count} x {session.length}{seed_txt}"
                      " — Enter to generate, command or profile (h=Help, q=Quit): ")
            user_input = input(prompt).strip()
            low = user_input.lower()
            parts = user_input.split(maxsplit=1)
            head = parts[0].lower() if parts else ""
            arg = parts[1] if len(parts) > 1 else ""

            if low in {"q", "quit", "exit"}:
                break
            if low in {"", "g", "go", "generate"}:
                run_worksheet(session, args, cli_output)
                continue
            if low in {"h", "help", "?"}:
                show_intro_help()
                continue
            if low in {"list", "modes"}:
                show_mode_list(index)
                continue
            if low in {"p", "profiles", "list profiles"}:
                print_profiles_with_descriptions()
                continue
            if low in {"hist", "history"}:
                hist = get_history()
                if not hist:
                    print("History is empty.")
                for item in hist:
                    ts = time.strftime("%H:%M:%S", time.localtime(item.timestamp))
                    seed = item.seed if item.seed is not None else "-"
                    print(f"{ts}  {item.mode:<18} {item.count} x {item.length}  seed={seed}")
                continue
            if head == "debug":
                rt = _rt_current()
                if arg.lower() in {"", "status"}:
                    print(f"Debug is currently {'ON' if rt.debug else 'OFF'}.")
                elif arg.lower() in {"on", "off"}:
                    rt.debug = arg.lower() == "on"
                    print(f"Debug mode {'enabled' if rt.debug else 'disabled'} for this session.")
                else:
                    print("Usage: DEBUG [on|off|status]")
                continue
            if head == "mode" and arg:
                session.mode = index.get(arg)
                continue
            if head == "count" and arg:
                session.count = parse_positive_int(arg, "count")
                continue
            if head == "length" and arg:
                session.length = parse_positive_int(arg, "length")
                continue
            if head == "seed" and arg:
                session.seed = parse_seed(arg)
                continue
            if head == "check" and arg:
                om = OutputManager(output_file=None)
                try:
                    print_check_report(session.mode, check_sequence(session.mode, parse_sequence(arg)), om)
                finally:
                    om.close()
                continue

            # a bare mode name switches mode
            if user_input in index:
                session.mode = index.get(user_input)
                continue

            # treat as profile switch
            if CONFIG.has_profile(user_input):
                session.profile = _apply_profile(user_input, _rt_current().debug)
                CONFIG.write_current_profile(user_input)
                fresh = _session_from_settings(index, args, session.profile, None)
                session.mode, session.count, session.length, session.seed = (
                    fresh.mode, fresh.count, fresh.length, fresh.seed)
                print(f"Applied profile: {session.profile}")
                continue

            print(f"{Fore.RED}Invalid input: {Style.RESET_ALL}'{user_input}'. Type H for help.")
        except UserInputError as e:
            _print_user_error(str(e))
            continue
        except (EOFError, KeyboardInterrupt):
            print()
            break
        except Exception as e:
            if _rt_current().debug:
                traceback.print_exc()
            else:
                _print_user_error(f"{e.__class__.__name__}: {e}")
            continue
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
