# src/soroban/display.py
from __future__ import annotations

import sys
import textwrap

from colorama import Fore, Style

from soroban.beads import MoveKind
from soroban.check import StepCheck
from soroban.config import list_profiles_with_descriptions, read_current_profile
from soroban.fmt import format_kind_counts, format_magnitude_set, format_partial_sums, format_sequence
from soroban.generate import DrillResult, Ungeneratable
from soroban.registry import DiscoveryReport, Index, Mode
from soroban.runtime import CFG

_ROD_NAMES = {1: "units", 10: "tens", 100: "hundreds"}

UNGENERATABLE_TEXT = "Could not generate sequence with requested length/rules."


def _as_bool(v, default=False):
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in {"1", "true", "yes", "on"}:
            return True
        if s in {"0", "false", "no", "off"}:
            return False
    return default


def _screen_header() -> str:
    return f"{Fore.YELLOW}{Style.BRIGHT}Soroban drills{Style.RESET_ALL}"


def print_drill(n: int, result: DrillResult, om, *, show_kinds: bool | None = None,
                show_hints: bool | None = None, show_sums: bool | None = None) -> None:
    """One worksheet line: '3. 2 + 1 - 3 = 0', plus hints and the running totals if asked."""
    if show_kinds is None:
        show_kinds = _as_bool(CFG("DISPLAY.SHOW_MOVE_KINDS", False))
    if show_hints is None:
        show_hints = _as_bool(CFG("DISPLAY.SHOW_HINTS", True), True)
    if show_sums is None:
        show_sums = _as_bool(CFG("DISPLAY.SHOW_PARTIAL_SUMS", False))

    num = f"{n:>3}."
    if isinstance(result, Ungeneratable):
        om.write(f"{num} {Fore.RED}{UNGENERATABLE_TEXT}{Style.RESET_ALL}")
        if show_hints:
            om.write(f"     {Style.DIM}(Try different parameters or fewer operations.){Style.RESET_ALL}")
        return

    seq = format_sequence(result.operations, show_kinds=show_kinds, color=True)
    om.write(f"{num} {seq} = {Fore.GREEN}{Style.BRIGHT}{result.final_value}{Style.RESET_ALL}")
    if show_sums:
        om.write(f"     {Style.DIM}{format_partial_sums(result.partial_sums())}{Style.RESET_ALL}")
    if show_hints and result.is_partial:
        om.write(
            f"     {Fore.YELLOW}(Note: Generated {result.achieved_length} operations, requested "
            f"{result.target_length}. This can happen due to abacus constraints.){Style.RESET_ALL}"
        )


def print_worksheet(mode: Mode, results: list[DrillResult], om, *, seed: int | None = None, **opts) -> None:
    title = f"{mode.label} ({mode.name}): range 0-{mode.max_value}, operations ±{format_magnitude_set(mode.magnitudes)}"
    if seed is not None:
        title += f", seed {seed}"
    om.write(f"{Fore.CYAN}{title}{Style.RESET_ALL}")
    for i, res in enumerate(results, start=1):
        print_drill(i, res, om, **opts)


def print_debug_summary(results: list[DrillResult], elapsed_ms: float, seed: int | None = None) -> None:
    """Per-run statistics for --debug, on stderr."""
    ops = [op for r in results for op in r.operations]
    partial = sum(1 for r in results if r.is_partial)
    print(f"[debug] {len(results)} drill(s), {len(ops)} operation(s) in {elapsed_ms:.2f} ms", file=sys.stderr)
    print(f"[debug] seed: {seed if seed is not None else 'random'}", file=sys.stderr)
    print(f"[debug] techniques: {format_kind_counts(ops) or '-'}", file=sys.stderr)
    if partial:
        print(f"[debug] {Fore.YELLOW}{partial} drill(s) shorter than requested{Style.RESET_ALL}", file=sys.stderr)


def print_discovery_report(index: Index, rep: DiscoveryReport) -> None:
    print(f"[debug] discovered modes: {len(index)}", file=sys.stderr)
    for name, cnt in rep.pkg_loaded:
        print(f"[discovery] {Fore.GREEN}OK{Style.RESET_ALL} {name}: {cnt} mode(s)", file=sys.stderr)
    for name, err in rep.pkg_failed:
        print(f"[discovery] {Fore.RED}FAIL{Style.RESET_ALL} {name}: {err}", file=sys.stderr)
    for name, skipped, kept in rep.skipped_duplicates:
        print(f"[discovery] {Fore.YELLOW}SKIP{Style.RESET_ALL} {name} from {skipped} (kept {kept})", file=sys.stderr)


def print_check_report(mode: Mode, steps: list[StepCheck], om) -> bool:
    """Print a step-by-step verdict; returns True when every step is admissible."""
    om.write(f"{Fore.CYAN}Checking against {mode.label} ({mode.name}), range 0-{mode.max_value}{Style.RESET_ALL}")
    for st in steps:
        sign = "+" if st.magnitude >= 0 else "-"
        move = f"{st.before:>4} {sign} {abs(st.magnitude):<4} → {st.after:<4}"
        if st.ok:
            om.write(f"  {move} {Fore.GREEN}OK{Style.RESET_ALL}  {st.kind.label}")
        else:
            extra = f" ({st.kind.label})" if st.kind else ""
            om.write(f"  {move} {Fore.RED}NO{Style.RESET_ALL}  {st.reason}{extra}")
    ok = all(st.ok for st in steps)
    verdict = f"{Fore.GREEN}valid{Style.RESET_ALL}" if ok else f"{Fore.RED}not valid{Style.RESET_ALL}"
    final = steps[-1].after if steps else 0
    om.write(f"Result {final}: sequence is {verdict} for this mode.")
    return ok


def show_mode_list(index: Index, om=None) -> None:
    out = om.write if om else print
    out(_screen_header())
    out("")
    out(f"{Fore.YELLOW}Available modes: {len(index)}{Style.RESET_ALL}")
    for m in index:
        kinds = ", ".join(k.tag for k in MoveKind if k in m.kinds)
        out(f"  {Fore.GREEN}{m.name:<18}{Style.RESET_ALL} {m.label}")
        out(f"  {'':<18} 0-{m.max_value}, ±{format_magnitude_set(m.magnitudes)} from the {_ROD_NAMES[m.place]} rod; {kinds}")
        if m.description:
            out(f"  {'':<18} {Style.DIM}{m.description}{Style.RESET_ALL}")


def print_profiles_with_descriptions() -> None:
    try:
        pairs = list_profiles_with_descriptions()
    except OSError:
        pairs = []

    if not pairs:
        print("\nAvailable profiles: (none)")
        return

    current = read_current_profile()

    lines = []
    for name, desc in pairs:
        mark = "*" if current and name == current else " "
        lines.append(f"{mark} {name:13} — {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))


def show_intro_help() -> None:
    print(_screen_header())
    print(textwrap.dedent(f"""
    {Fore.CYAN}Commands{Style.RESET_ALL}
      Enter / g         generate a worksheet with the current settings
      mode NAME         switch mode (see 'list')
      count N           drills per worksheet
      length N          operations per drill
      seed N | off      reproducible worksheets, or random again
      check SEQUENCE    check a sequence such as '3 + 4 - 2' against the mode
      list              list the modes
      p                 list profiles; type a profile name to switch to it
      hist              worksheets generated in this session
      debug on|off      timing and settings on stderr
      h                 this help
      q                 quit
    """))
