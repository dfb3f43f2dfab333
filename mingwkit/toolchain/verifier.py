"""
Post-install compiler verification.
"""

import logging
from typing import Callable, Optional

from mingwkit.config.parser import ToolchainSettings
from mingwkit.core.process import CommandResult, run_command
from mingwkit.toolchain.prober import query_compiler_version

logger = logging.getLogger(__name__)


class Verifier:
    """Confirm the compiler exists and runs."""

    def __init__(
        self,
        settings: ToolchainSettings,
        runner: Callable[..., CommandResult] = run_command,
    ):
        self.settings = settings
        self.runner = runner
        self.version: Optional[str] = None

    def verify(self) -> bool:
        """
        Check that the compiler binary exists and `--version` exits 0.

        On success the first line of the version output is logged and kept
        in `self.version`.
        """
        compiler = self.settings.compiler_path
        self.version = None

        if not compiler.is_file():
            logger.error(f"Compiler not found: {compiler}")
            return False

        version = query_compiler_version(compiler, self.runner)
        if version is None:
            logger.error(f"Compiler at {compiler} did not report a version")
            return False

        self.version = version
        logger.info(f"Compiler verified: {version}")
        return True
