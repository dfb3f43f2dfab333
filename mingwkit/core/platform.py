"""
Platform detection for MingwKit.

MingwKit only provisions Windows hosts, so detection is reduced to the
operating system name needed to reject other hosts early.

Usage:
    from mingwkit.core.platform import detect_platform, require_windows

    info = detect_platform()
    require_windows(info)
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional

from mingwkit.core.exceptions import PlatformMismatchError


@dataclass
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', or raw name)
    """

    os: str

    def is_windows(self) -> bool:
        return self.os == "windows"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(os=_detect_os())


def _detect_os() -> str:
    """Normalize the OS name; unknown systems are returned lower-cased."""
    system = platform.system().lower()

    if system == "darwin":
        return "macos"
    return system


def require_windows(info: Optional[PlatformInfo] = None) -> PlatformInfo:
    """
    Ensure the host is Windows.

    Args:
        info: PlatformInfo to check. If None, detects current platform.

    Returns:
        The checked PlatformInfo

    Raises:
        PlatformMismatchError: If the host is not Windows
    """
    if info is None:
        info = detect_platform()

    if not info.is_windows():
        raise PlatformMismatchError(info.os)

    return info


def clear_platform_cache():
    """Clear the platform detection cache (used by tests)."""
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "require_windows",
    "clear_platform_cache",
]
