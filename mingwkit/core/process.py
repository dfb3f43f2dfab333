"""
Structured child-process invocation.

Every external program MingwKit runs (the MSYS2 installer, pacman, the
compiler version query) goes through run_command(): an argument list in,
a CommandResult with captured stdout/stderr and the exit code out.

Calls block until the child exits. There is no timeout; a hung installer
or package manager hangs the run.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from mingwkit.core.exceptions import ProcessLaunchError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a finished child process."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def first_line(self) -> str:
        """First non-empty line of stdout (e.g. a compiler's version banner)."""
        for line in self.stdout.splitlines():
            if line.strip():
                return line.strip()
        return ""


def run_command(
    args: Sequence[Union[str, Path]],
    env: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """
    Run a command and wait for it to finish.

    Args:
        args: Program and arguments
        env: Full environment for the child (inherits ours if None)

    Returns:
        CommandResult; a non-zero exit code is not an error here

    Raises:
        ProcessLaunchError: If the program could not be started
    """
    argv = [str(a) for a in args]
    logger.debug(f"Running: {' '.join(argv)}")

    try:
        completed = subprocess.run(
            argv,
            env=env,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        raise ProcessLaunchError(argv, str(e)) from e

    result = CommandResult(
        args=argv,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    logger.debug(f"{Path(argv[0]).name} exited with code {result.returncode}")
    return result


def echo_output(result: CommandResult, log: logging.Logger = logger) -> None:
    """Log captured output of a finished command, stdout at INFO, stderr at WARNING."""
    for line in result.stdout.splitlines():
        if line.strip():
            log.info(f"  {line}")
    for line in result.stderr.splitlines():
        if line.strip():
            log.warning(f"  {line}")
