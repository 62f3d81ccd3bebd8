"""Tests for runner module - cargo command construction, cached runs and export."""

from pathlib import Path
from unittest.mock import patch

import pytest

from cargo_play.errors import PathExistsError
from cargo_play.options import CargoAction, CargoProfile
from cargo_play.runner import (
    SIGNALED_EXIT_CODE,
    cargo_command,
    copy_project,
    exit_code_for,
    run_cached_binary,
    run_cargo_action,
    run_cargo_build,
    run_cargo_test,
)

PROJECT = Path("/tmp/cargo-play.key")
MANIFEST = str(PROJECT / "Cargo.toml")


# --- cargo_command tests ---


def test_cargo_command_default_run():
    cmd = cargo_command(None, PROJECT, CargoAction.default(), None, [])
    assert cmd == ["cargo", "run", "--manifest-path", MANIFEST, "--"]


def test_cargo_command_release_with_toolchain_and_args():
    cmd = cargo_command("nightly", PROJECT, CargoAction.run(CargoProfile.RELEASE), None, ["a", "--flag"])
    assert cmd == ["cargo", "+nightly", "run", "--release", "--manifest-path", MANIFEST, "--", "a", "--flag"]


def test_cargo_command_test_with_custom_options():
    cmd = cargo_command(None, PROJECT, CargoAction.test(), "--quiet  --features 'a b'", ["filter"])
    assert cmd == ["cargo", "test", "--manifest-path", MANIFEST, "--quiet", "--features", "a b", "--", "filter"]


def test_cargo_command_respects_cargo_override(monkeypatch):
    monkeypatch.setenv("CARGO_PLAY_CARGO", "/opt/rust/bin/cargo")
    cmd = cargo_command(None, PROJECT, CargoAction.default(), None, [])
    assert cmd[0] == "/opt/rust/bin/cargo"


# --- run_* tests ---


@patch("cargo_play.runner.run_inherited", return_value=7)
def test_run_cargo_action_propagates_returncode(mock_run):
    assert run_cargo_action(None, PROJECT, CargoAction.test(), None, []) == 7
    mock_run.assert_called_once_with(["cargo", "test", "--manifest-path", MANIFEST, "--"])


@patch("cargo_play.runner.run_cargo_action", return_value=0)
def test_run_cargo_build_selects_profile(mock_action):
    run_cargo_build(None, PROJECT, True, None, [])
    assert mock_action.call_args[0][2] == CargoAction.run(CargoProfile.RELEASE)

    run_cargo_build(None, PROJECT, False, None, [])
    assert mock_action.call_args[0][2] == CargoAction.run(CargoProfile.DEBUG)


@patch("cargo_play.runner.run_cargo_action", return_value=0)
def test_run_cargo_test(mock_action):
    run_cargo_test("stable", PROJECT, "-q", ["x"])
    mock_action.assert_called_once_with("stable", PROJECT, CargoAction.test(), "-q", ["x"])


@patch("cargo_play.runner.run_inherited", return_value=0)
def test_run_cached_binary(mock_run):
    binary = PROJECT / "target" / "debug" / "key"
    run_cached_binary(binary, ["--help"])
    mock_run.assert_called_once_with([str(binary), "--help"])


# --- copy_project tests ---


@pytest.fixture
def staged(tmp_path):
    staging = tmp_path / "cargo-play.key"
    (staging / "src").mkdir(parents=True)
    (staging / "Cargo.toml").write_text("[package]\n")
    (staging / "src" / "main.rs").write_text("fn main() {}\n")
    return staging


def test_copy_project(staged, tmp_path, capsys):
    destination = tmp_path / "exported"

    assert copy_project(staged, destination) == 0

    assert (destination / "Cargo.toml").read_text() == "[package]\n"
    assert (destination / "src" / "main.rs").read_text() == "fn main() {}\n"
    assert f"Generated project at {destination.resolve()}" in capsys.readouterr().err


def test_copy_project_existing_directory_untouched(staged, tmp_path):
    destination = tmp_path / "exported"
    destination.mkdir()
    (destination / "keep.txt").write_text("keep")

    with pytest.raises(PathExistsError) as exc_info:
        copy_project(staged, destination)

    assert exc_info.value.path == destination
    assert [p.name for p in destination.iterdir()] == ["keep.txt"]


# --- exit_code_for tests ---


@pytest.mark.parametrize("returncode", [0, 1, 101])
def test_exit_code_passthrough(returncode):
    assert exit_code_for(returncode) == returncode


@pytest.mark.parametrize("returncode", [None, -9, -15])
def test_exit_code_for_abnormal_termination(returncode):
    assert exit_code_for(returncode) == SIGNALED_EXIT_CODE
