"""
mingw-w64 GCC installation through pacman.

Three pacman invocations run in order (system update, compiler package,
base development packages) and stop at the first one that fails.

Success is judged by the post-condition, not by pacman's exit codes: if
the compiler binary exists once the invocations are done, the step has
succeeded. A first-run `pacman -Syu` routinely exits non-zero after
updating the core system even though everything needed is in place.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from mingwkit.config.parser import ToolchainSettings
from mingwkit.core.exceptions import MingwKitError, PackageManagerNotFoundError
from mingwkit.core.process import CommandResult, echo_output, run_command

logger = logging.getLogger(__name__)

# MSYS shell location first, generic bin/ as fallback
PACMAN_CANDIDATES = ("usr/bin/pacman.exe", "bin/pacman.exe")


@dataclass
class PackageCommand:
    """One pacman invocation."""

    description: str
    args: List[str]


def find_package_manager(root: Path) -> Path:
    """
    Locate pacman inside an MSYS2 installation.

    Raises:
        PackageManagerNotFoundError: If no candidate exists
    """
    for candidate in PACMAN_CANDIDATES:
        path = root / candidate
        if path.is_file():
            return path

    raise PackageManagerNotFoundError(
        f"pacman not found under {root} (looked for {', '.join(PACMAN_CANDIDATES)})"
    )


class CompilerInstaller:
    """Ensure the cross-compiler package is installed inside MSYS2."""

    def __init__(
        self,
        settings: ToolchainSettings,
        runner: Callable[..., CommandResult] = run_command,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.settings = settings
        self.runner = runner
        self.environ = environ

    def package_commands(self) -> List[PackageCommand]:
        """pacman invocations, in execution order."""
        s = self.settings
        return [
            PackageCommand("Updating MSYS2 packages", ["-Syu", "--noconfirm"]),
            PackageCommand(
                f"Installing {s.compiler_package}",
                ["-S", "--needed", "--noconfirm", s.compiler_package],
            ),
            PackageCommand(
                f"Installing {', '.join(s.base_packages)}",
                ["-S", "--needed", "--noconfirm", *s.base_packages],
            ),
        ]

    def package_env(self) -> Dict[str, str]:
        """Child environment targeting the configured MSYS2 sub-environment."""
        env = dict(os.environ if self.environ is None else self.environ)
        env["MSYSTEM"] = self.settings.msystem
        env["CHERE_INVOKING"] = "1"
        usr_bin = str(self.settings.root / "usr" / "bin")
        env["PATH"] = os.pathsep.join(p for p in (usr_bin, env.get("PATH", "")) if p)
        return env

    def install_compiler(self) -> bool:
        """
        Install (or update) the compiler package.

        Returns:
            True if the compiler binary exists afterwards
        """
        try:
            pacman = find_package_manager(self.settings.root)
        except PackageManagerNotFoundError as e:
            logger.error(str(e))
            return False

        logger.info(f"Using package manager: {pacman}")
        exit_code = self._run_commands(pacman)

        compiler = self.settings.compiler_path
        if compiler.is_file():
            if exit_code != 0:
                logger.warning(
                    f"pacman exited with code {exit_code}, "
                    f"but {compiler.name} is installed; continuing"
                )
            logger.info(f"Compiler installed: {compiler}")
            return True

        if exit_code != 0:
            logger.error(f"Compiler installation failed (pacman exit code {exit_code})")
        else:
            logger.error(f"pacman succeeded but {compiler} is still missing")
        return False

    def _run_commands(self, pacman: Path) -> int:
        """Run each pacman command until one fails; return the last exit code."""
        env = self.package_env()

        for command in self.package_commands():
            logger.info(f"{command.description}...")
            try:
                result = self.runner([pacman, *command.args], env=env)
            except MingwKitError as e:
                logger.error(f"{command.description} failed: {e}")
                return 1

            echo_output(result, logger)

            if not result.ok:
                logger.warning(
                    f"{command.description} exited with code {result.returncode}"
                )
                return result.returncode

        return 0
