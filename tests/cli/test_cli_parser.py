"""
Tests for CLI argument parser.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from mingwkit.cli.parser import CLI


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_no_command_shows_help(self, capsys):
        """Running without a command prints usage and fails."""
        result = CLI().run([])

        assert result == 1
        captured = capsys.readouterr()
        assert "usage:" in captured.out.lower()

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "MingwKit" in capsys.readouterr().out

    def test_unknown_command_rejected(self):
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["build"])
        assert exc_info.value.code == 2


class TestGlobalOptions:
    def test_defaults(self):
        args = CLI().parse_args(["probe"])

        assert args.verbose is False
        assert args.quiet is False
        assert args.config is None
        assert args.msys2_root is None
        assert args.native_lib_root is None
        assert isinstance(args.project_root, Path)

    def test_roots(self):
        args = CLI().parse_args(
            ["--msys2-root", "D:/msys64", "--native-lib-root", "D:/duckdb", "probe"]
        )

        assert args.msys2_root == Path("D:/msys64")
        assert args.native_lib_root == Path("D:/duckdb")


class TestSetupCommand:
    def test_defaults(self):
        args = CLI().parse_args(["setup"])

        assert args.command == "setup"
        assert args.update is False
        assert args.env_file is None
        assert args.shell is None

    def test_options(self):
        args = CLI().parse_args(
            ["setup", "--update", "--env-file", "build-env.ps1", "--shell", "cmd"]
        )

        assert args.update is True
        assert args.env_file == Path("build-env.ps1")
        assert args.shell == "cmd"

    def test_invalid_shell(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["setup", "--shell", "fish"])


class TestEnvCommand:
    def test_default_shell(self):
        assert CLI().parse_args(["env"]).shell == "powershell"

    def test_bash(self):
        assert CLI().parse_args(["env", "--shell", "bash"]).shell == "bash"


class TestDispatch:
    """Test command dispatch and top-level error handling."""

    @pytest.mark.parametrize("command", ["setup", "probe", "env"])
    def test_dispatches_to_command_module(self, command):
        with patch(f"mingwkit.cli.commands.{command}.run", return_value=0) as mock_run:
            assert CLI().run([command]) == 0

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0].command == command

    def test_exit_code_passed_through(self):
        with patch("mingwkit.cli.commands.probe.run", return_value=1):
            assert CLI().run(["probe"]) == 1

    def test_keyboard_interrupt(self):
        with patch("mingwkit.cli.commands.setup.run", side_effect=KeyboardInterrupt):
            assert CLI().run(["setup"]) == 130

    def test_unexpected_error(self, capsys):
        with patch("mingwkit.cli.commands.probe.run", side_effect=RuntimeError("boom")):
            assert CLI().run(["probe"]) == 1

        assert "Error: boom" in capsys.readouterr().err


class TestLogging:
    @pytest.mark.parametrize(
        "flags,level",
        [
            ([], logging.INFO),
            (["-v"], logging.DEBUG),
            (["-q"], logging.ERROR),
        ],
    )
    def test_levels(self, flags, level):
        with patch("mingwkit.cli.commands.probe.run", return_value=0):
            CLI().run(flags + ["probe"])

        assert logging.getLogger().level == level
