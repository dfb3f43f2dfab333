"""
Environment probing.

Reads the filesystem and asks the compiler for its version to describe
the current toolchain and native-library state. Probing never installs
or changes anything, so running it twice in a row yields equal results.
"""

import logging
from pathlib import Path
from typing import Callable, Tuple

from mingwkit.config.parser import NativeLibrarySettings, ToolchainSettings
from mingwkit.core.process import CommandResult, run_command
from mingwkit.toolchain.state import LinkMode, NativeLibraryState, ToolchainState

logger = logging.getLogger(__name__)

Runner = Callable[..., CommandResult]


def query_compiler_version(compiler_path: Path, runner: Runner = run_command):
    """
    Run `<compiler> --version`.

    Returns:
        First line of the version output, or None if the compiler could not
        be run or exited non-zero. Errors are logged, never raised.
    """
    try:
        result = runner([compiler_path, "--version"])
    except Exception as e:
        logger.debug(f"Version query for {compiler_path} failed: {e}")
        return None

    if not result.ok:
        logger.debug(f"{compiler_path} --version exited with code {result.returncode}")
        return None

    return result.first_line() or compiler_path.name


class EnvironmentProber:
    """Describe the toolchain and native library as they are on disk."""

    def __init__(
        self,
        toolchain: ToolchainSettings,
        native_library: NativeLibrarySettings,
        runner: Runner = run_command,
    ):
        self.toolchain = toolchain
        self.native_library = native_library
        self.runner = runner

    def probe(self) -> Tuple[ToolchainState, NativeLibraryState]:
        """Probe both the toolchain and the native library."""
        return self.probe_toolchain(), self.probe_native_library()

    def probe_toolchain(self) -> ToolchainState:
        compiler_path = self.toolchain.compiler_path
        installed = self.toolchain.root.is_dir() and compiler_path.is_file()

        if not installed:
            logger.debug(f"Toolchain not installed (looked for {compiler_path})")
            return ToolchainState(installed=False, compiler_path=compiler_path)

        version = query_compiler_version(compiler_path, self.runner)
        return ToolchainState(
            installed=True,
            compiler_path=compiler_path,
            verified=version is not None,
            version=version,
        )

    def probe_native_library(self) -> NativeLibraryState:
        settings = self.native_library
        root = settings.root

        if root is None:
            logger.debug("Native library root is not configured")
            return NativeLibraryState.missing()

        if not root.is_dir():
            logger.debug(f"Native library root does not exist: {root}")
            return NativeLibraryState.missing(root)

        def present(name: str) -> bool:
            return (root / name).is_file()

        has_header = present(settings.header)
        static_set = has_header and present(settings.static_archive)
        dynamic_set = (
            has_header
            and present(settings.import_library)
            and present(settings.shared_library)
        )

        if static_set:
            link_mode = LinkMode.STATIC
        elif dynamic_set:
            link_mode = LinkMode.DYNAMIC
        else:
            link_mode = LinkMode.NONE

        return NativeLibraryState(
            found=link_mode is not LinkMode.NONE, link_mode=link_mode, root=root
        )
