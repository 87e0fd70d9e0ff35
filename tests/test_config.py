# tests/test_config.py
from __future__ import annotations

import pytest

from soroban import config as CONFIG
from soroban.runtime import APPLY, CFG, current
from soroban.utility import UserInputError, _token, parse_positive_int, parse_seed, validate_output_setting
from soroban.workspace import ensure_workspace_seeded, workspace_dir

SAMPLE_PROFILES = ["carries", "default", "friends", "worksheet"]


def test_workspace_follows_env(workspace):
    assert workspace_dir() == workspace.resolve()


def test_seeding_copies_profiles_once(workspace):
    root, seeded, copied = ensure_workspace_seeded()
    assert seeded
    assert copied["profiles"] == len(SAMPLE_PROFILES)
    assert (root / "worksheets").is_dir()
    _, seeded_again, _ = ensure_workspace_seeded()
    assert not seeded_again


def test_list_profiles():
    assert CONFIG.list_all_profiles() == SAMPLE_PROFILES
    names = [nm for nm, _ in CONFIG.list_profiles_with_descriptions()]
    assert names == SAMPLE_PROFILES


def test_load_settings_fills_defaults():
    ensure_workspace_seeded()
    s = CONFIG.load_settings("carries")
    assert s.name == "carries"
    assert s.data["DRILL"]["MODE"] == "friendsOf10"
    assert s.data["DRILL"]["COUNT"] == 8
    assert s.data["OUTPUT"]["OUTPUT_FILE"] == ""
    assert s.data["DISPLAY"]["SHOW_PARTIAL_SUMS"] is True
    assert "_PROFILE_" not in s.data


def test_missing_profile():
    ensure_workspace_seeded()
    assert not CONFIG.has_profile("nope")
    with pytest.raises(FileNotFoundError):
        CONFIG.load_settings("nope")


def test_broken_profile_is_a_user_error(workspace):
    ensure_workspace_seeded()
    (workspace / "profiles" / "broken.toml").write_text("[DRILL\nMODE = 1\n", encoding="utf-8")
    with pytest.raises(UserInputError):
        CONFIG.load_settings("broken")


def test_non_bool_display_values_are_dropped(workspace):
    ensure_workspace_seeded()
    (workspace / "profiles" / "odd.toml").write_text('[DISPLAY]\nSHOW_HINTS = "yes"\n', encoding="utf-8")
    s = CONFIG.load_settings("odd")
    assert s.name == "odd"
    assert s.description == "(no description)"
    assert "SHOW_HINTS" not in s.data["DISPLAY"]


def test_current_profile_roundtrip():
    assert CONFIG.read_current_profile() is None
    CONFIG.write_current_profile("friends.toml")
    assert CONFIG.read_current_profile() == "friends"


def test_runtime_dotted_lookup():
    ensure_workspace_seeded()
    APPLY(CONFIG.load_settings("worksheet"))
    assert current().profile_name == "worksheet"
    assert CFG("DRILL.SEED") == 2024
    assert CFG("OUTPUT.OUTPUT_FILE") == "worksheets/"
    assert CFG("DRILL.NOPE", 5) == 5
    assert current().debug is False


# ---------- utility -----------------------------------------------------------


@pytest.mark.parametrize("name", ["friendsOf10", "friends-of-10", "FRIENDS_OF_10", "friends of 10"])
def test_token(name):
    assert _token(name) == "FRIENDS_OF_10"


@pytest.mark.parametrize("text, expected", [("5", 5), (3, 3), (" 12 ", 12), ("1_000", 1000)])
def test_parse_positive_int(text, expected):
    assert parse_positive_int(text, "count") == expected


@pytest.mark.parametrize("text", ["0", "-2", "abc", "", True, 2.5])
def test_parse_positive_int_rejects(text):
    with pytest.raises(UserInputError):
        parse_positive_int(text, "count")


@pytest.mark.parametrize("text, expected", [(None, None), ("", None), ("off", None), ("42", 42), (7, 7)])
def test_parse_seed(text, expected):
    assert parse_seed(text) == expected


def test_parse_seed_rejects():
    with pytest.raises(UserInputError):
        parse_seed("seven")


@pytest.mark.parametrize("value", [None, "", "./", "worksheets/", "drills.txt", "out/run.log"])
def test_output_setting_ok(value):
    assert validate_output_setting(value) == value


@pytest.mark.parametrize("value", ["x.py", "notes.md", "profiles/.current", "nul", "a.toml"])
def test_output_setting_rejects(value):
    with pytest.raises(ValueError):
        validate_output_setting(value)
