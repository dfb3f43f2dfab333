"""
Tests for the read-only probe and env commands.
"""

import os
from unittest.mock import patch

import pytest

from conftest import GCC_VERSION, make_native_library, make_toolchain
from mingwkit.cli.commands import env as env_command
from mingwkit.cli.commands import probe as probe_command
from mingwkit.cli.parser import CLI
from mingwkit.core.exceptions import PlatformMismatchError
from mingwkit.toolchain.prober import EnvironmentProber


def parse(config, *argv):
    return CLI().parse_args(
        [
            "--msys2-root",
            str(config.toolchain.root),
            "--native-lib-root",
            str(config.native_library.root),
            *argv,
        ]
    )


@pytest.fixture
def use_runner(runner, windows_platform):
    """Route both commands' probes through the fake runner on a Windows host."""

    def prober(toolchain, native_library):
        return EnvironmentProber(toolchain, native_library, runner=runner)

    with patch.object(probe_command, "EnvironmentProber", side_effect=prober), patch.object(
        env_command, "EnvironmentProber", side_effect=prober
    ), patch.object(
        probe_command, "require_windows", return_value=windows_platform
    ), patch.object(
        env_command, "require_windows", return_value=windows_platform
    ):
        yield runner


@pytest.fixture
def ready(config, use_runner):
    make_toolchain(config.toolchain)
    make_native_library(config.native_library, static=True)
    use_runner.add("gcc.exe", stdout=GCC_VERSION)


class TestProbeCommand:
    def test_ready_environment(self, config, ready, capsys):
        assert probe_command.run(parse(config, "probe")) == 0

        out = capsys.readouterr().out
        assert "MSYS2:" in out
        assert "pacman:" in out
        assert "14.2.0" in out
        assert "static linking" in out
        assert "mingwkit setup" not in out

    def test_nothing_installed(self, config, use_runner, capsys):
        assert probe_command.run(parse(config, "probe")) == 1

        out = capsys.readouterr().out
        assert "not installed at" in out
        assert "pacman not found" in out
        assert "missing:" in out
        assert "Run: mingwkit setup" in out
        assert use_runner.calls == []

    def test_broken_compiler(self, config, use_runner, capsys):
        make_toolchain(config.toolchain)
        make_native_library(config.native_library, dynamic=True)
        use_runner.add("gcc.exe", returncode=1)

        assert probe_command.run(parse(config, "probe")) == 1
        assert "does not run" in capsys.readouterr().out

    def test_probe_changes_nothing(self, config, use_runner):
        probe_command.run(parse(config, "probe"))

        assert not config.toolchain.root.exists()
        assert all(c[-1] == "--version" for c in use_runner.calls)

    def test_non_windows_host(self, config, capsys):
        with patch.object(
            probe_command, "require_windows", side_effect=PlatformMismatchError("macos")
        ):
            assert probe_command.run(parse(config, "probe")) == 1

        assert "only provisions Windows" in capsys.readouterr().err


class TestEnvCommand:
    def test_prints_powershell_script(self, config, ready, capsys):
        assert env_command.run(parse(config, "env")) == 0

        out = capsys.readouterr().out
        assert '$env:CGO_ENABLED = "1"' in out
        assert "$env:CGO_CPPFLAGS" in out
        assert "-DDUCKDB_STATIC_BUILD" in out

    def test_prints_bash_script(self, config, ready, capsys):
        assert env_command.run(parse(config, "env", "--shell", "bash")) == 0

        out = capsys.readouterr().out
        assert "export CC=x86_64-w64-mingw32-gcc" in out
        assert "export PATH=" in out

    def test_missing_library_still_prints_toolchain(self, config, use_runner, capsys):
        make_toolchain(config.toolchain)
        use_runner.add("gcc.exe", stdout=GCC_VERSION)

        assert env_command.run(parse(config, "env")) == 1

        out = capsys.readouterr().out
        assert "$env:CC" in out
        assert "$env:CGO_LDFLAGS =" not in out
        assert "Remove-Item Env:CGO_LDFLAGS" in out

    def test_env_does_not_modify_process_environment(self, config, ready, monkeypatch):
        monkeypatch.delenv("CGO_ENABLED", raising=False)

        env_command.run(parse(config, "env"))

        assert "CGO_ENABLED" not in os.environ
