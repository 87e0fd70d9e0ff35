# tests/test_cli.py
"""
End-to-end runs of the command line entry point.

Run: pytest -v
"""

from __future__ import annotations

import argparse
import io
import re

import pytest

from soroban import cli
from soroban import config as CONFIG
from soroban.check import is_valid_sequence
from soroban.fmt import strip_ansi
from soroban.parse import parse_sequence
from soroban.registry import get_mode
from soroban.workspace import workspace_dir

LINE_RE = re.compile(r"^\s*\d+\.\s+(?P<seq>.+?) = (?P<result>\d+)\s*$")


@pytest.fixture
def no_tty(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))


def _drill_lines(text: str) -> list[re.Match]:
    return [m for m in map(LINE_RE.match, strip_ansi(text).splitlines()) if m]


@pytest.mark.parametrize("mode", ["lowerBeads", "friendsOf10", "friendsOf100"])
def test_one_shot_worksheet(capsys, mode):
    rc = cli.main([mode, "--count", "4", "--length", "5", "--seed", "1"])
    out = strip_ansi(capsys.readouterr().out)
    assert rc == 0
    assert get_mode(mode).label in out
    lines = _drill_lines(out)
    assert len(lines) == 4
    for m in lines:
        seq = parse_sequence(m["seq"])
        assert 1 <= len(seq) <= 5
        assert sum(seq) == int(m["result"])
        assert is_valid_sequence(mode, seq)


def test_seeded_runs_repeat(capsys):
    cli.main(["friendsOf5", "-n", "3", "--seed", "9"])
    first = capsys.readouterr().out
    cli.main(["friendsOf5", "-n", "3", "--seed", "9"])
    assert capsys.readouterr().out == first


def test_show_kinds_and_sums(capsys):
    rc = cli.main(["friendsOf10", "-n", "5", "-l", "6", "--seed", "2", "--show-kinds", "--sums"])
    out = strip_ansi(capsys.readouterr().out)
    assert rc == 0
    assert "[fo10]" in out
    assert "0 → " in out


def test_profile_drives_the_worksheet(capsys, no_tty):
    rc = cli.main(["carries", "--quiet"])
    assert rc == 0
    assert capsys.readouterr().out == ""
    assert CONFIG.read_current_profile() == "carries"


def test_profile_writes_worksheet_file(capsys, no_tty):
    rc = cli.main(["worksheet", "--quiet"])
    assert rc == 0
    path = workspace_dir() / "worksheets" / "friendsOf100_seed=2024.txt"
    text = path.read_text(encoding="utf-8")
    assert "\x1b[" not in text
    assert len(_drill_lines(text)) == 20


def test_output_file_appends(capsys):
    for _ in range(2):
        assert cli.main(["unitRod", "-n", "2", "--seed", "4", "--output", "runs.txt", "--quiet"]) == 0
    text = (workspace_dir() / "runs.txt").read_text(encoding="utf-8")
    assert len(_drill_lines(text)) == 4


def test_forbidden_output(capsys):
    assert cli.main(["unitRod", "--output", "drills.py"]) == 1
    assert "Forbidden" in capsys.readouterr().err


def test_list_command(capsys):
    assert cli.main(["list"]) == 0
    out = capsys.readouterr().out
    for name in ("lowerBeads", "friendsOf50", "friendsOf100"):
        assert name in out


@pytest.mark.parametrize(
    "seq, rc",
    [("8 + 5", 0), ("7 + 3 - 5", 0), ("3 - 5", 3), ("90 + 5", 3)],
)
def test_check_command(capsys, seq, rc):
    assert cli.main(["check", "friendsOf10", seq]) == rc
    out = strip_ansi(capsys.readouterr().out)
    assert ("sequence is valid" in out) == (rc == 0)


def test_check_command_needs_a_sequence(capsys):
    assert cli.main(["check", "unitRod"]) == 2
    assert "usage" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["nonsense"],
        ["unitRod", "--count", "0"],
        ["unitRod", "--length", "x"],
        ["unitRod", "--seed", "abc"],
        ["check", "nonsense", "1 + 2"],
        ["check", "unitRod", "1 2"],
    ],
)
def test_bad_input_exits_2(capsys, argv):
    assert cli.main(argv) == 2
    assert capsys.readouterr().err.strip()


def test_repl_session(capsys, monkeypatch):
    answers = iter(["count 2", "length 3", "seed 5", "mode friends-of-5", "g", "bogus", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    args = argparse.Namespace(quiet=False, show_kinds=None, sums=None, no_hints=False)
    session = cli.Session(mode=get_mode("unitRod"), count=1, length=1, seed=None, profile="default")
    before = len(cli.get_history())

    assert cli._repl(session, args, cli.discover(), None) == 0

    out = strip_ansi(capsys.readouterr().out)
    assert session.mode.name == "friendsOf5"
    assert (session.count, session.length, session.seed) == (2, 3, 5)
    assert len(_drill_lines(out)) == 2
    assert "Invalid input" in out
    hist = cli.get_history()
    assert len(hist) == before + 1
    assert hist[-1].mode == "friendsOf5"


def test_workspace_commands(capsys, monkeypatch):
    assert cli.main(["init"]) == 0
    assert "Workspace ready" in capsys.readouterr().out

    assert cli.main(["active"]) == 0
    assert "Active profile: default" in capsys.readouterr().out

    assert cli.main(["where"]) == 0
    assert str(workspace_dir()) in capsys.readouterr().out

    monkeypatch.delenv("SOROBAN_DEV", raising=False)
    assert cli.main(["init", "overwrite"]) == 2
    monkeypatch.setenv("SOROBAN_DEV", "1")
    assert cli.main(["init", "overwrite"]) == 0
    assert "overwrote" in capsys.readouterr().out
