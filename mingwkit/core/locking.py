"""
Run guard for MingwKit.

Provisioning mutates the MSYS2 installation and the user's temp directory,
so only one `mingwkit setup` may run at a time. The guard is a file lock
from the `filelock` library, released automatically if the process dies.

Usage:
    from mingwkit.core.locking import LockManager

    with LockManager().provision_lock(timeout=5):
        ...
"""

import logging
import platform
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from mingwkit.core.exceptions import ProvisionLockTimeout

logger = logging.getLogger(__name__)


def get_global_cache_dir() -> Path:
    """
    Get the per-user MingwKit directory holding lock files.

    Returns:
        %LOCALAPPDATA%-style path on Windows, ~/.mingwkit elsewhere
    """
    if platform.system() == "Windows":
        return Path.home() / "AppData" / "Local" / "mingwkit"
    return Path.home() / ".mingwkit"


class LockManager:
    """
    Manages the provisioning lock.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory for lock files (default: global cache/lock/)
        """
        if lock_dir is None:
            lock_dir = get_global_cache_dir() / "lock"

        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def provision_lock(self, timeout: int = 5):
        """
        Hold the provisioning lock for the duration of the block.

        Args:
            timeout: Maximum wait time in seconds

        Raises:
            ProvisionLockTimeout: If another run holds the lock
        """
        lock_path = self.lock_dir / "provision.lock"
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired provision lock: {lock_path}")
                yield
                logger.debug(f"Released provision lock: {lock_path}")
        except LockTimeout as e:
            raise ProvisionLockTimeout(
                f"Could not acquire provision lock after {timeout}s. "
                "Another MingwKit setup may be running; wait for it to finish."
            ) from e
