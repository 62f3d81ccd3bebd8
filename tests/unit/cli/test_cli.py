"""Tests for the cargo-play command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest

from cargo_play.cli import main, parse_args
from cargo_play.errors import ToolchainLaunchError
from cargo_play.options import CargoAction, CargoProfile, RustEdition


@pytest.fixture
def main_rs(write_source):
    return write_source("main.rs")


class TestParseArgs:
    """Tests for parse_args()."""

    def test_defaults(self, main_rs):
        options = parse_args([str(main_rs)])

        assert options.src == [main_rs]
        assert options.edition is RustEdition.E2018
        assert options.cargo_action is None
        assert options.toolchain is None
        assert options.args == []
        assert not (options.clean or options.cached or options.infer or options.debug)

    def test_relative_paths_are_resolved(self, main_rs, monkeypatch):
        monkeypatch.chdir(main_rs.parent)
        assert parse_args(["main.rs"]).src == [main_rs]

    def test_source_order_preserved(self, write_source):
        first = write_source("z.rs")
        second = write_source("a.rs")
        assert parse_args([str(first), str(second)]).src == [first, second]

    def test_cargo_subcommand_form(self, main_rs):
        assert parse_args(["play", str(main_rs)]).src == [main_rs]

    def test_toolchain_selector(self, main_rs):
        options = parse_args(["+nightly", str(main_rs)])
        assert options.toolchain == "nightly"
        assert options.src == [main_rs]

    def test_hidden_toolchain_flag(self, main_rs):
        assert parse_args(["-t", "beta", str(main_rs)]).toolchain == "beta"

    def test_program_args_after_separator(self, main_rs):
        options = parse_args([str(main_rs), "--", "--verbose", "+x", "file.txt"])
        assert options.args == ["--verbose", "+x", "file.txt"]
        assert options.toolchain is None

    def test_all_options(self, main_rs, tmp_path):
        options = parse_args(
            [
                "-c",
                "-i",
                "-d",
                "--cached",
                "-e",
                "2015",
                "--cargo-action",
                "run-release",
                "--cargo-option=--quiet",
                "--save",
                str(tmp_path / "out"),
                str(main_rs),
            ]
        )

        assert options.clean and options.infer and options.debug and options.cached
        assert options.edition is RustEdition.E2015
        assert options.cargo_action == CargoAction.run(CargoProfile.RELEASE)
        assert options.cargo_option == "--quiet"
        assert options.save == tmp_path / "out"

    def test_missing_file_is_usage_error(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            parse_args([str(tmp_path / "missing.rs")])
        assert exc_info.value.code == 2

    def test_invalid_edition_is_usage_error(self, main_rs):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["-e", "1999", str(main_rs)])
        assert exc_info.value.code == 2

    def test_invalid_action_is_usage_error(self, main_rs):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--cargo-action", "bench", str(main_rs)])
        assert exc_info.value.code == 2

    def test_no_arguments_prints_help(self, capsys):
        assert parse_args([]) is None
        assert "cargo-play" in capsys.readouterr().out


class TestMain:
    """Tests for main() exit codes."""

    def test_no_arguments_exits_zero(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0

    @patch("cargo_play.cli.play", return_value=3)
    def test_exit_code_propagated(self, mock_play, main_rs):
        with pytest.raises(SystemExit) as exc_info:
            main([str(main_rs)])

        assert exc_info.value.code == 3
        options = mock_play.call_args[0][0]
        assert options.src == [main_rs]

    @patch("cargo_play.cli.play", return_value=-9)
    def test_signal_termination_maps_to_sentinel(self, mock_play, main_rs):
        with pytest.raises(SystemExit) as exc_info:
            main([str(main_rs)])
        assert exc_info.value.code == 255

    @patch("cargo_play.cli.play", side_effect=ToolchainLaunchError(["cargo"], FileNotFoundError("not found")))
    def test_play_error_reported(self, mock_play, main_rs, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(main_rs)])

        assert exc_info.value.code == 1
        assert "ERROR: Failed to launch 'cargo'" in capsys.readouterr().err

    def test_undecodable_source_reported_as_error(self, tmp_path, capsys):
        bad = tmp_path / "bad.rs"
        bad.write_bytes(b"fn main() { \xff }")

        with pytest.raises(SystemExit) as exc_info:
            main([str(bad)])

        assert exc_info.value.code == 1
        assert "ERROR: I/O error on" in capsys.readouterr().err

    @patch("cargo_play.cli.play", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, mock_play, main_rs):
        with pytest.raises(SystemExit) as exc_info:
            main([str(main_rs)])
        assert exc_info.value.code == 130

    @patch("cargo_play.cli.play", return_value=0)
    def test_debug_enables_verbose_output(self, mock_play, main_rs):
        from cargo_play import output

        with patch("cargo_play.cli.logging.basicConfig") as mock_basic_config:
            with pytest.raises(SystemExit):
                main(["-d", str(main_rs)])

        mock_basic_config.assert_called_once()
        assert output.is_verbose()

    @patch("cargo_play.cli.play", return_value=0)
    def test_reads_sys_argv_by_default(self, mock_play, main_rs, monkeypatch):
        monkeypatch.setattr("sys.argv", ["cargo-play", str(main_rs)])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert mock_play.call_args[0][0].src == [Path(main_rs)]
