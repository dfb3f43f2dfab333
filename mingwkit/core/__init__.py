"""
Core functionality for MingwKit.

This package contains the foundational modules that provisioning steps depend on.
"""

from .exceptions import (
    MingwKitError,
    PlatformMismatchError,
    ToolchainError,
    TempResourceLockedError,
    ProcessLaunchError,
    DownloadError,
    PackageManagerError,
    PackageManagerNotFoundError,
    ProvisionLockTimeout,
)

from .locking import LockManager

from .platform import (
    PlatformInfo,
    detect_platform,
    require_windows,
    clear_platform_cache,
)

from .process import CommandResult, run_command

__all__ = [
    "MingwKitError",
    "PlatformMismatchError",
    "ToolchainError",
    "TempResourceLockedError",
    "ProcessLaunchError",
    "DownloadError",
    "PackageManagerError",
    "PackageManagerNotFoundError",
    "ProvisionLockTimeout",
    "LockManager",
    "PlatformInfo",
    "detect_platform",
    "require_windows",
    "clear_platform_cache",
    "CommandResult",
    "run_command",
]
