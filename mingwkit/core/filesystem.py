"""
Temporary file handling for provisioning steps.

Two deletion flavours exist: clearing a stale file left by an earlier
run, which must succeed before a step may continue, and best-effort
cleanup after a step, which never fails the step.
"""

import logging
import tempfile
from pathlib import Path
from typing import Union

from mingwkit.core.exceptions import TempResourceLockedError

logger = logging.getLogger(__name__)


def temp_path(name: str) -> Path:
    """Path for a named file in the system temp directory."""
    return Path(tempfile.gettempdir()) / name


def remove_stale_file(path: Union[str, Path]) -> None:
    """
    Delete a leftover file from an earlier run.

    Raises:
        TempResourceLockedError: If the file exists and cannot be removed
            (typically still held open by a running installer)
    """
    path = Path(path)
    if not path.exists():
        return

    logger.debug(f"Removing stale file: {path}")
    try:
        path.unlink()
    except OSError as e:
        raise TempResourceLockedError(path) from e


def safe_unlink(path: Union[str, Path]) -> None:
    """Delete a file, ignoring missing files and deletion errors."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove temporary file {path}: {e}")
