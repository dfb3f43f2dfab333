"""
Unit tests for compiler verification.
"""

import logging

import pytest

from conftest import GCC_VERSION, make_toolchain
from mingwkit.toolchain.verifier import Verifier


@pytest.fixture
def verifier(toolchain_settings, runner):
    return Verifier(toolchain_settings, runner=runner)


class TestVerifier:
    """Test Verifier.verify()."""

    def test_missing_compiler(self, verifier, runner, caplog):
        """A missing binary fails without running anything."""
        assert verifier.verify() is False
        assert verifier.version is None
        assert runner.calls == []
        assert "Compiler not found" in caplog.text

    def test_verified(self, verifier, toolchain_settings, runner, caplog):
        """A running compiler reports its version line."""
        make_toolchain(toolchain_settings)
        runner.add("gcc.exe", stdout=GCC_VERSION)

        with caplog.at_level(logging.INFO):
            assert verifier.verify() is True

        assert verifier.version == "gcc.exe (Rev2, Built by MSYS2 project) 14.2.0"
        assert runner.calls == [[str(toolchain_settings.compiler_path), "--version"]]
        assert "Compiler verified: gcc.exe (Rev2" in caplog.text

    def test_non_zero_exit(self, verifier, toolchain_settings, runner):
        """A compiler that exits non-zero is not verified."""
        make_toolchain(toolchain_settings)
        runner.add("gcc.exe", returncode=1, stderr="missing DLL")

        assert verifier.verify() is False
        assert verifier.version is None

    def test_silent_compiler_uses_binary_name(self, verifier, toolchain_settings, runner):
        """Exit 0 with no output still counts as verified."""
        make_toolchain(toolchain_settings)

        assert verifier.verify() is True
        assert verifier.version == "gcc.exe"

    def test_version_reset_between_runs(self, verifier, toolchain_settings, runner):
        make_toolchain(toolchain_settings)
        runner.add("gcc.exe", stdout=GCC_VERSION)
        assert verifier.verify() is True

        toolchain_settings.compiler_path.unlink()

        assert verifier.verify() is False
        assert verifier.version is None
